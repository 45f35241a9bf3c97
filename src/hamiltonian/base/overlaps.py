"""Lattice coupling operators in the truncated plane-wave basis.

In the basis ``exp(i(2j + k)x)``, ``j = -n_j..n_j``, a lattice coupling mixes
mode ``j`` with ``j +- 2`` (weight ``sign/4``) and with itself (weight 1/2).
The matrix element between two eigenvectors of the unperturbed Hamiltonian is

    <a|W|b> = sum_j conj((W a)[j]) * b[j]

The long lattice carries ``sign = +1``, the short lattice ``sign = -1``.
Interior rows use both neighbours. The first and last modes keep only their
inner neighbour, and the second and second-to-last rows are not part of the
sum.
"""
from __future__ import annotations

import numpy as np
import scipy.sparse as sp

from .triplets import TripletList

LONG_LATTICE_SIGN = 1.0
SHORT_LATTICE_SIGN = -1.0

MIN_MODES = 5


def lattice_operator(n_modes: int, sign: float) -> sp.csr_matrix:
    """Return the sparse operator ``W`` acting on mode-coefficient vectors."""
    if n_modes < MIN_MODES:
        raise ValueError(f"Lattice overlaps need at least {MIN_MODES} modes, got {n_modes}")
    W = TripletList(n_modes)
    last = n_modes - 1
    W.add(0, 0, 0.5); W.add(0, 2, sign / 4)
    for j in range(2, last - 1):
        W.add(j, j, 0.5)
        W.add(j, j + 2, sign / 4)
        W.add(j, j - 2, sign / 4)
    W.add(last, last, 0.5); W.add(last, last - 2, sign / 4)
    return W.to_csr()


def long_lattice_operator(n_modes: int) -> sp.csr_matrix:
    return lattice_operator(n_modes, LONG_LATTICE_SIGN)


def short_lattice_operator(n_modes: int) -> sp.csr_matrix:
    return lattice_operator(n_modes, SHORT_LATTICE_SIGN)


def overlap_matrix(vectors: np.ndarray, operator: sp.spmatrix) -> np.ndarray:
    """All pairwise elements ``G[a, b] = <v_a|W|v_b>`` for column vectors ``v``.

    Parameters
    ----------
    vectors : np.ndarray (n_modes x n_vectors)
        Mode coefficients, one eigenvector per column.
    operator : sparse (n_modes x n_modes)
        Coupling operator from :func:`lattice_operator`.
    """
    vectors = np.asarray(vectors, dtype=complex)
    if vectors.ndim != 2 or vectors.shape[0] != operator.shape[0]:
        raise ValueError(f"Vectors of shape {vectors.shape} do not match operator {operator.shape}")
    return (operator @ vectors).conj().T @ vectors


def lattice_overlap(bra: np.ndarray, ket: np.ndarray, sign: float) -> complex:
    """Single matrix element, written out term by term."""
    bra = np.asarray(bra, dtype=complex)
    ket = np.asarray(ket, dtype=complex)
    last = bra.size - 1
    if bra.size < MIN_MODES or ket.size != bra.size:
        raise ValueError("bra and ket must have equal length of at least %d" % MIN_MODES)
    j = np.arange(2, last - 1)
    weighted = sign * bra[j + 2] / 4 + sign * bra[j - 2] / 4 + bra[j] / 2
    total = np.sum(weighted.conj() * ket[j])
    total += np.conj(sign * bra[2] / 4 + bra[0] / 2) * ket[0]
    total += np.conj(sign * bra[last - 2] / 4 + bra[last] / 2) * ket[last]
    return complex(total)
