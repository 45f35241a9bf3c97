"""Secular band solver.

The secular Hamiltonian lives in the basis of action eigenstates ``exp(i(2j + k)x)``
and couples every mode to its first (long lattice) and second (short lattice)
neighbours. For each Brillouin-zone sector ``k in (0, s // 2)`` the diagonal is
set once and the phase-dependent +-1 bands are refreshed for every phase of the
sweep. The largest eigenvalues fill the sector's row block; the whole table is
halved at the end to undo the factor of two absorbed into the construction.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from hamiltonian import models
from .eigensolve import LARGEST, solve_eigenpairs
from .sweep import as_phase_array, run_tasks, sector_rows

KRYLOV_MARGIN = 10


@dataclass(slots=True)
class SecularProblem:
    band_count: int
    resonance_order: int
    inertia: float
    coupling_long: complex
    coupling_short: complex
    mode_cutoff: int
    tol: float = 0.0
    maxiter: int | None = None

    @property
    def sectors(self) -> tuple[int, int]:
        return (0, self.resonance_order // 2)

    @property
    def ncv(self) -> int:
        return self.band_count + KRYLOV_MARGIN


def _solve_sector(task) -> np.ndarray:
    """Band block (band_count x len(phases)) of one sector over a run of phases."""
    problem, sector, phases = task
    k = problem.sectors[sector]
    H = models.secular_hamiltonian(problem.mode_cutoff, problem.coupling_short)
    models.set_secular_sector(H, k, problem.inertia)
    block = np.full((problem.band_count, len(phases)), np.nan)
    for i, phase in enumerate(phases):
        models.set_secular_phase(H, phase, problem.coupling_long)
        res = solve_eigenpairs(H.to_sparse(), problem.band_count, LARGEST, ncv=problem.ncv,
                               tol=problem.tol, maxiter=problem.maxiter,
                               label=f"H (k={k}, phase={phase:.6g})")
        block[:res.values.size, i] = res.values
    return block


def compute_secular_bands(band_count: int, phases, resonance_order: int, inertia: float,
                          coupling_long: complex, coupling_short: complex, *,
                          tol: float = 0.0, maxiter: int | None = None,
                          processes: int | None = None,
                          mode_cutoff: int | None = None) -> np.ndarray:
    """Return secular bands of shape ``(2 * band_count, len(phases))``.

    Rows ``0..band_count-1`` hold the zone-centre sector (``k = 0``), the rest
    the zone-boundary sector (``k = resonance_order // 2``); each block is in
    descending order. Entries that the eigensolver did not deliver are NaN.

    Parameters
    ----------
    band_count : int
        Number of bands per sector.
    phases : sequence of float
        Adiabatic phase sweep.
    resonance_order : int
        Resonance order ``s``.
    inertia : float
        Effective mass ``M`` of the action variable.
    coupling_long, coupling_short : complex
        Products ``lambda_L * A_L`` and ``lambda_S * A_S``.
    tol, maxiter : passed to the eigensolver.
    processes : int, optional
        Number of worker processes for the phase sweep.
    mode_cutoff : int, optional
        Number ``n_j`` of retained modes on each side of zero; ``2 * band_count``
        by default.
    """
    if band_count < 1:
        raise ValueError(f"band_count must be >= 1, got {band_count}")
    if resonance_order < 1:
        raise ValueError(f"resonance_order must be >= 1, got {resonance_order}")
    if inertia == 0:
        raise ValueError("inertia must be non-zero")
    phases = as_phase_array(phases)
    n_j = 2 * band_count if mode_cutoff is None else int(mode_cutoff)
    if n_j < 1 or 2 * n_j + 1 < band_count:
        raise ValueError(f"{2 * n_j + 1} modes cannot hold {band_count} bands")

    problem = SecularProblem(band_count, resonance_order, inertia, coupling_long, coupling_short,
                             n_j, tol=tol, maxiter=maxiter)
    logging.info("Secular sweep: %d bands, %d phases, %d modes, sectors k=%s",
                 band_count, phases.size, 2 * n_j + 1, problem.sectors)

    bands = np.full((2 * band_count, phases.size), np.nan)
    if processes is not None and processes > 1:
        slots = [(sector, i) for sector in (0, 1) for i in range(phases.size)]
        tasks = [(problem, sector, phases[i:i + 1]) for sector, i in slots]
        for (sector, i), block in zip(slots, run_tasks(_solve_sector, tasks, processes)):
            bands[sector_rows(sector, band_count), i] = block[:, 0]
    else:
        for sector in (0, 1):
            bands[sector_rows(sector, band_count)] = _solve_sector((problem, sector, phases))
    return bands / 2
