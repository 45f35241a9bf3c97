"""Closed-form Hamiltonians of a driven particle in a lattice, in the basis of
Fourier modes ``exp(i(2j + k)x)`` with ``j = -n_j..n_j`` (``2*n_j + 1`` modes)."""
from __future__ import annotations

from math import comb

import numpy as np

from .base.banded import BandedHamiltonian


def mode_indices(n_j: int) -> np.ndarray:
    return np.arange(-n_j, n_j + 1)


def secular_hamiltonian(n_j: int, coupling_short: complex) -> BandedHamiltonian:
    """Secular Hamiltonian skeleton with the phase-independent +-2 bands set.

    The diagonal is sector dependent (:func:`set_secular_sector`) and the +-1
    bands are phase dependent (:func:`set_secular_phase`).
    """
    if n_j < 1:
        raise ValueError(f"n_j must be positive, got {n_j}")
    H = BandedHamiltonian(dim=2 * n_j + 1, bandwidth=2)
    H.set_coupling(2, coupling_short)
    return H


def set_secular_sector(H: BandedHamiltonian, k: int, inertia: float) -> None:
    n_j = (H.dim - 1) // 2
    H.set_diagonal((2 * mode_indices(n_j) + k) ** 2 / inertia)


def set_secular_phase(H: BandedHamiltonian, phase: float, coupling_long: complex) -> None:
    H.set_coupling(1, coupling_long * np.exp(1j * phase))


def unperturbed_hamiltonian(n_j: int, harmonic_order: int, harmonic_strength: float) -> BandedHamiltonian:
    """Single-well Hamiltonian with the binomial bands of ``g cos^(2l)(2x)``.

    Band ``+-2n`` (``n = 1..l``) holds ``g / 4**l * C(2l, l - n)``; the
    constant term ``g / 4**l * C(2l, l)`` enters the diagonal.
    """
    if n_j < 1:
        raise ValueError(f"n_j must be positive, got {n_j}")
    if harmonic_order < 1:
        raise ValueError(f"harmonic_order must be >= 1, got {harmonic_order}")
    dim = 2 * n_j + 1
    bandwidth = 2 * harmonic_order
    if bandwidth >= dim:
        raise ValueError(f"Harmonic order {harmonic_order} needs more than {dim} modes")
    h = BandedHamiltonian(dim=dim, bandwidth=bandwidth)
    for n in range(1, harmonic_order + 1):
        h.set_coupling(2 * n, harmonic_strength / 4 ** harmonic_order * comb(2 * harmonic_order, harmonic_order - n))
    return h


def set_unperturbed_sector(h: BandedHamiltonian, k: int, harmonic_order: int,
                           harmonic_strength: float, well_depth: float) -> None:
    n_j = (h.dim - 1) // 2
    constant = well_depth / 2 + harmonic_strength / 4 ** harmonic_order * comb(2 * harmonic_order, harmonic_order)
    h.set_diagonal((2 * mode_indices(n_j) + k) ** 2 + constant)


def set_unperturbed_phase(h: BandedHamiltonian, phase: float, well_depth: float) -> None:
    # superdiagonal carries exp(-2i phase), subdiagonal exp(+2i phase)
    h.set_coupling(1, well_depth / 4 * np.exp(-2j * phase))
