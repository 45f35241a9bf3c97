"""Floquet band solver.

Two diagonalisations per (sector, phase):

1. The unperturbed single-well Hamiltonian ``h_k`` (banded, binomial bands of
   ``g cos^(2l)(2x)`` plus the ``V_L cos^2(x + phase)`` well) is diagonalised
   for its lowest ``2 * max_level`` levels. The window of levels
   ``2 * min_level - 1 .. 2 * max_level`` (1-based) is kept together with the
   eigenvectors.
2. The Floquet Hamiltonian over the ``2 * dN`` retained levels is assembled
   from the shifted level energies and the lattice overlaps of the kept
   eigenvectors, and diagonalised for its largest ``dN`` quasi-energies.

What may be reused between phases is decided by :class:`PumpingMode` at two
points: whether ``h_k`` has to be re-diagonalised, and whether the coupling
blocks can be advanced by a phase factor instead of being rebuilt.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from hamiltonian import models
from hamiltonian.base.floquet_pattern import floquet_triplets
from hamiltonian.base.overlaps import MIN_MODES, long_lattice_operator, overlap_matrix, short_lattice_operator
from .eigensolve import LARGEST, SMALLEST, solve_eigenpairs
from .pumping import PumpingMode, uniform_step
from .sweep import as_phase_array, run_tasks, sector_rows

SECTORS = (0, 1)


@dataclass(slots=True)
class FloquetProblem:
    min_level: int
    max_level: int
    resonance_order: int
    harmonic_order: int
    harmonic_strength: float
    well_depth: float
    coupling_long: float
    coupling_short: float
    drive_frequency: float
    pumping: PumpingMode
    mode_cutoff: int
    tol: float = 0.0
    maxiter: int | None = None

    @property
    def level_count(self) -> int:
        """dN, the number of retained level pairs."""
        return self.max_level - self.min_level + 1

    @property
    def window(self) -> slice:
        return slice(2 * self.min_level - 2, 2 * self.max_level)

    @property
    def n_modes(self) -> int:
        return 2 * self.mode_cutoff + 1


@dataclass(slots=True)
class FloquetCache:
    """State carried from one phase step to the next within a sector.

    ``energies``/``vectors`` are the retained eigenpairs of ``h_k``;
    ``long_block``/``short_block`` the coupling-scaled overlaps
    ``lambda/2 * <v_p|W|v_m>`` built from them, and ``long_phase`` the factor
    applied to the long-lattice block at the current phase.

    Eigenpairs and blocks are valid for the phase they were computed at. They
    stay valid for later phases only when ``PumpingMode.reuses_couplings`` holds
    (temporal pumping past the first phase), and then only for a uniform phase
    step, since ``long_phase`` is advanced by a constant factor per step.
    """
    energies: np.ndarray | None = None
    vectors: np.ndarray | None = None
    long_block: np.ndarray | None = None
    short_block: np.ndarray | None = None
    long_phase: complex = 1.0 + 0.0j
    complete: bool = False


def _diagonalise_unperturbed(problem: FloquetProblem, h, k: int, phase: float, cache: FloquetCache) -> None:
    models.set_unperturbed_phase(h, phase, problem.well_depth)
    res = solve_eigenpairs(h.to_sparse(), 2 * problem.max_level, SMALLEST, ncv=problem.n_modes,
                           tol=problem.tol, maxiter=problem.maxiter,
                           label=f"h_k (k={k}, phase={phase:.6g})")
    cache.energies = res.values[problem.window]
    cache.vectors = res.vectors[:, problem.window]
    cache.complete = cache.energies.size == 2 * problem.level_count
    if not cache.complete:
        logging.warning("Level window %d..%d of h_k (k=%d, phase=%.6g) is incomplete: "
                        "%d of %d levels available; the Floquet quasi-energies are left unfilled",
                        2 * problem.min_level - 1, 2 * problem.max_level, k, phase,
                        cache.energies.size, 2 * problem.level_count)


def _build_couplings(problem: FloquetProblem, cache: FloquetCache) -> None:
    n = problem.n_modes
    cache.long_block = problem.coupling_long / 2 * overlap_matrix(cache.vectors, long_lattice_operator(n))
    cache.short_block = problem.coupling_short / 2 * overlap_matrix(cache.vectors, short_lattice_operator(n))


def _phase_step(problem: FloquetProblem, h, k: int, index: int, phase: float, step: float,
                cache: FloquetCache) -> np.ndarray | None:
    """Advance ``cache`` to phase number ``index`` and return the Floquet quasi-energies.

    Returns None when the retained level window is incomplete.
    """
    policy = problem.pumping
    if policy.recomputes_unperturbed(index):
        _diagonalise_unperturbed(problem, h, k, phase, cache)
    if not cache.complete:
        return None
    if policy.reuses_couplings(index):
        cache.long_phase *= np.exp(-2j * step)
    else:
        _build_couplings(problem, cache)
        cache.long_phase = policy.long_lattice_phase(phase)

    H = floquet_triplets(cache.energies, cache.long_block * cache.long_phase, cache.short_block,
                         problem.resonance_order, problem.drive_frequency).to_csr()
    res = solve_eigenpairs(H, problem.level_count, LARGEST, ncv=2 * problem.level_count,
                           tol=problem.tol, maxiter=problem.maxiter,
                           label=f"H_F (k={k}, phase={phase:.6g})")
    return res.values


def _solve_sector(task) -> tuple[np.ndarray, np.ndarray]:
    """Unperturbed (2dN x n) and Floquet (dN x n) blocks of one sector over a run of phases."""
    problem, sector, phases, step = task
    dN = problem.level_count
    h = models.unperturbed_hamiltonian(problem.mode_cutoff, problem.harmonic_order, problem.harmonic_strength)
    models.set_unperturbed_sector(h, SECTORS[sector], problem.harmonic_order,
                                  problem.harmonic_strength, problem.well_depth)
    levels = np.full((2 * dN, len(phases)), np.nan)
    quasi = np.full((dN, len(phases)), np.nan)
    cache = FloquetCache()
    for i, phase in enumerate(phases):
        values = _phase_step(problem, h, SECTORS[sector], i, phase, step, cache)
        levels[:cache.energies.size, i] = cache.energies
        if values is not None:
            quasi[:values.size, i] = values
    return levels, quasi


def compute_floquet_bands(min_level: int, max_level: int, phases, resonance_order: int,
                          harmonic_order: int, harmonic_strength: float, well_depth: float,
                          coupling_long: float, coupling_short: float, drive_frequency: float,
                          pumping_mode, *, tol: float = 0.0, maxiter: int | None = None,
                          processes: int | None = None,
                          mode_cutoff: int | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(unperturbed, floquet)`` band tables.

    With ``dN = max_level - min_level + 1``, ``unperturbed`` has ``4 * dN`` rows
    (the ``2 * dN`` retained levels of the zone centre ``k = 0``, then those of
    the zone boundary ``k = 1``, ascending) and ``floquet`` has ``2 * dN`` rows
    (``dN`` quasi-energies per sector, descending). Columns follow ``phases``.

    Parameters
    ----------
    min_level, max_level : int
        1-based range of retained level pairs of the unperturbed Hamiltonian.
    phases : sequence of float
        Adiabatic phase sweep.
    resonance_order : int
        Resonance order ``s``.
    harmonic_order, harmonic_strength : int, float
        ``l`` and ``g_l`` of the ``g_l cos^(2l)(2x)`` potential.
    well_depth : float
        ``V_L`` of the ``V_L cos^2(x + phase)`` potential.
    coupling_long, coupling_short : float
        Long- and short-lattice drive amplitudes ``lambda_L`` and ``lambda_S``.
    drive_frequency : float
        ``omega``.
    pumping_mode : PumpingMode or str
        ``'time'``, ``'space'`` or ``'spacetime'``. Temporal pumping keeps the
        spatial phase at ``phases[0]``, so the unperturbed table repeats its
        first column; it needs a uniform phase step and always runs sequentially.
    tol, maxiter : passed to the eigensolver.
    processes : int, optional
        Worker processes for spatial and spacetime sweeps.
    mode_cutoff : int, optional
        Number ``n_j`` of retained modes on each side of zero; ``2 * max_level``
        by default.
    """
    if min_level < 1:
        raise ValueError(f"min_level must be >= 1, got {min_level}")
    if min_level > max_level:
        raise ValueError(f"min_level {min_level} exceeds max_level {max_level}")
    if resonance_order < 1:
        raise ValueError(f"resonance_order must be >= 1, got {resonance_order}")
    if harmonic_order < 1:
        raise ValueError(f"harmonic_order must be >= 1, got {harmonic_order}")
    pumping = PumpingMode.parse(pumping_mode)
    phases = as_phase_array(phases)
    step = uniform_step(phases) if not pumping.independent_phases else 0.0
    n_j = 2 * max_level if mode_cutoff is None else int(mode_cutoff)
    n_modes = 2 * n_j + 1
    if n_modes < MIN_MODES or 2 * max_level > n_modes:
        raise ValueError(f"{n_modes} modes cannot hold the level window up to {2 * max_level}")
    if 2 * harmonic_order >= n_modes:
        raise ValueError(f"Harmonic order {harmonic_order} needs more than {n_modes} modes")

    problem = FloquetProblem(min_level, max_level, resonance_order, harmonic_order, harmonic_strength,
                             well_depth, coupling_long, coupling_short, drive_frequency, pumping, n_j,
                             tol=tol, maxiter=maxiter)
    dN = problem.level_count
    logging.info("Floquet sweep: levels %d..%d, %d phases, %d modes, pumping=%s",
                 min_level, max_level, phases.size, n_modes, pumping.value)

    unperturbed = np.full((4 * dN, phases.size), np.nan)
    floquet = np.full((2 * dN, phases.size), np.nan)
    parallel = processes is not None and processes > 1
    if parallel and not pumping.independent_phases:
        logging.info("Temporal pumping reuses couplings between phases; running sequentially")
        parallel = False

    if parallel:
        slots = [(sector, i) for sector in range(len(SECTORS)) for i in range(phases.size)]
        tasks = [(problem, sector, phases[i:i + 1], step) for sector, i in slots]
        for (sector, i), (levels, quasi) in zip(slots, run_tasks(_solve_sector, tasks, processes)):
            unperturbed[sector_rows(sector, 2 * dN), i] = levels[:, 0]
            floquet[sector_rows(sector, dN), i] = quasi[:, 0]
    else:
        for sector, k in enumerate(SECTORS):
            logging.info("Floquet sweep: sector k=%d", k)
            levels, quasi = _solve_sector((problem, sector, phases, step))
            unperturbed[sector_rows(sector, 2 * dN)] = levels
            floquet[sector_rows(sector, dN)] = quasi
    return unperturbed, floquet
