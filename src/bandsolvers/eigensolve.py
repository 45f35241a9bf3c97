"""Iterative (ARPACK) eigensolver wrapper with convergence reporting."""
from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np
import scipy.linalg
import scipy.sparse as sp
from scipy.sparse.linalg import ArpackNoConvergence, eigsh

LARGEST = 'LA'
SMALLEST = 'SA'


@dataclass(slots=True)
class ConvergenceReport:
    """Outcome of one diagonalisation.

    residual_norms has one entry per requested eigenvalue: ``||A v - lambda v||``
    for the delivered pairs and NaN for pairs the solver did not return.
    """
    requested: int
    converged: int
    residual_norms: np.ndarray

    @property
    def complete(self) -> bool:
        return self.converged >= self.requested

    @property
    def unconverged_norms(self) -> np.ndarray:
        return self.residual_norms[self.converged:]


@dataclass(slots=True)
class EigenResult:
    values: np.ndarray
    vectors: np.ndarray
    report: ConvergenceReport


def _order(values: np.ndarray, which: str) -> np.ndarray:
    idx = np.argsort(values, kind='stable')
    return idx[::-1] if which == LARGEST else idx


def _residuals(A, values: np.ndarray, vectors: np.ndarray, requested: int) -> np.ndarray:
    norms = np.full(requested, np.nan)
    if values.size:
        norms[:values.size] = np.linalg.norm(A @ vectors - vectors * values, axis=0)
    return norms


def _dense_eigenpairs(A, k: int, which: str) -> tuple[np.ndarray, np.ndarray]:
    dense = A.toarray() if sp.issparse(A) else np.asarray(A)
    vals, vecs = scipy.linalg.eigh(dense)
    idx = _order(vals, which)[:k]
    return vals[idx], vecs[:, idx]


def solve_eigenpairs(matrix, k: int, which: str = LARGEST, *, ncv: int | None = None,
                     tol: float = 0.0, maxiter: int | None = None, seed: int = 0,
                     label: str = "matrix") -> EigenResult:
    """Return ``k`` eigenpairs of a Hermitian matrix from one end of the spectrum.

    Parameters
    ----------
    matrix : sparse matrix or ndarray
        Hermitian matrix.
    k : int
        Number of eigenvalues requested.
    which : {'LA', 'SA'}
        Algebraically largest (returned in descending order) or smallest
        (ascending order).
    ncv : int, optional
        Krylov subspace dimension; clipped to the matrix dimension. Problems
        where ARPACK cannot be used (``k >= n - 1`` or ``ncv <= k + 1``) are
        diagonalised densely.
    tol, maxiter : passed to ARPACK.
    seed : int
        Seed of the random start vector, so that repeated calls agree.
    label : str
        Name used in the convergence diagnostic.

    A convergence shortfall is not an error: a warning is logged with the
    number of converged eigenvalues and the residual norms, and only the
    converged pairs are returned.
    """
    if which not in (LARGEST, SMALLEST):
        raise ValueError(f"which must be '{LARGEST}' or '{SMALLEST}', got {which!r}")
    A = matrix.tocsr() if sp.issparse(matrix) else np.asarray(matrix)
    n = A.shape[0]
    if A.ndim != 2 or A.shape[1] != n:
        raise ValueError(f"Matrix must be square, got shape {A.shape}")
    if not 1 <= k <= n:
        raise ValueError(f"Cannot request {k} eigenvalues of a {n}x{n} matrix")
    ncv = n if ncv is None else min(int(ncv), n)

    if k >= n - 1 or ncv <= k + 1:
        logging.debug("Dense diagonalisation of %s (n=%d, k=%d, ncv=%d)", label, n, k, ncv)
        vals, vecs = _dense_eigenpairs(A, k, which)
        return EigenResult(vals, vecs, ConvergenceReport(k, k, _residuals(A, vals, vecs, k)))

    rng = np.random.default_rng(seed)
    v0 = rng.standard_normal(n)
    if np.issubdtype(A.dtype, np.complexfloating):
        v0 = v0 + 1j * rng.standard_normal(n)
    try:
        vals, vecs = eigsh(A, k=k, which=which, ncv=ncv, tol=tol, maxiter=maxiter, v0=v0)
    except ArpackNoConvergence as exc:
        vals = np.asarray(exc.eigenvalues)
        vecs = np.asarray(exc.eigenvectors).reshape(n, vals.size)
    vals = np.real(vals)
    idx = _order(vals, which)[:k]
    vals, vecs = vals[idx], vecs[:, idx]

    report = ConvergenceReport(k, vals.size, _residuals(A, vals, vecs, k))
    if not report.complete:
        logging.warning(
            "Only %d eigenvalues out of %d converged when diagonalising %s. "
            "Results may be inaccurate. unconverged_norms=%s",
            report.converged, k, label, report.unconverged_norms)
    return EigenResult(vals, vecs, report)
