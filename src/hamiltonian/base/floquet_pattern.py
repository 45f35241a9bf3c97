"""Structured sparsity pattern of the Floquet Hamiltonian.

Rows and columns enumerate ``2*dN`` unperturbed levels taken in near-degenerate
pairs; level ``m`` (0-based) belongs to pair ``m // 2``. Besides the diagonal,
level ``m`` couples to the two levels of the pair ``s`` pairs above it through
the long lattice and to the two levels ``2s`` pairs above it through the short
lattice. Each coupling is stored together with its explicit conjugate partner.
"""
from __future__ import annotations

import numpy as np

from .triplets import TripletList

LONG_STRIDE = 2   # in units of the resonance order s
SHORT_STRIDE = 4


def coupling_partners(m: int, s: int, dim: int, stride: int) -> list[int]:
    """Levels coupled to level ``m`` at ``stride * s`` levels up, clipped to ``dim``."""
    first = stride * s + 2 * (m // 2)
    return [p for p in (first, first + 1) if p < dim]


def level_shifts(dim: int, omega: float, s: int) -> np.ndarray:
    """Diagonal shift ``-ceil(m/2) * omega / s`` for 1-based level numbers ``m``."""
    pair = np.arange(dim) // 2 + 1
    return -pair * omega / s


def expected_nonzeros(dim: int, s: int) -> int:
    """Number of stored triplets, including diagonal entries and conjugate partners."""
    count = dim
    for m in range(dim):
        count += 2 * len(coupling_partners(m, s, dim, LONG_STRIDE))
        count += 2 * len(coupling_partners(m, s, dim, SHORT_STRIDE))
    return count


def floquet_triplets(energies, long_block, short_block, s: int, omega: float) -> TripletList:
    """Assemble the Floquet Hamiltonian as an explicit triplet list.

    Parameters
    ----------
    energies : array_like (dim,)
        Unperturbed level energies on the diagonal before the Floquet shift.
    long_block, short_block : np.ndarray (dim x dim)
        Coupling-scaled overlap matrices; entry ``[p, m]`` is placed at
        row ``p``, column ``m`` and its conjugate at ``[m, p]``.
    s : int
        Resonance order.
    omega : float
        Drive frequency.
    """
    energies = np.asarray(energies, dtype=float)
    dim = energies.size
    if long_block.shape != (dim, dim) or short_block.shape != (dim, dim):
        raise ValueError(f"Coupling blocks must be {dim}x{dim}")
    shifted = energies + level_shifts(dim, omega, s)
    H = TripletList(dim)
    for m in range(dim):
        H.add_diagonal(m, shifted[m])
        for p in coupling_partners(m, s, dim, LONG_STRIDE):
            H.add_hermitian(p, m, long_block[p, m])
        for p in coupling_partners(m, s, dim, SHORT_STRIDE):
            H.add_hermitian(p, m, short_block[p, m])
    return H
