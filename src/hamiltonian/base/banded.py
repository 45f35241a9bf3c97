"""Banded Hermitian matrices stored band-by-band.

A band is addressed by its offset from the main diagonal: ``0`` is the
diagonal, ``+d`` the d-th superdiagonal (entries ``H[i, i + d]``) and ``-d``
the d-th subdiagonal (entries ``H[i + d, i]``).
"""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import scipy.sparse as sp


@dataclass(slots=True)
class BandedHamiltonian:
    """Square complex matrix with non-zeros confined to ``|i - j| <= bandwidth``.

    dim: matrix dimension
    bandwidth: largest admissible band offset
    bands: offset -> vector of length ``dim - |offset|``
    """
    dim: int
    bandwidth: int
    bands: dict[int, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.dim < 1:
            raise ValueError(f"dim must be positive, got {self.dim}")
        if not 0 <= self.bandwidth < self.dim:
            raise ValueError(f"bandwidth {self.bandwidth} incompatible with dim {self.dim}")
        for offset in range(-self.bandwidth, self.bandwidth + 1):
            self.bands.setdefault(offset, np.zeros(self.dim - abs(offset), dtype=complex))

    def _check_offset(self, offset: int) -> None:
        if abs(offset) > self.bandwidth:
            raise ValueError(f"Band offset {offset} outside bandwidth {self.bandwidth}")

    def band(self, offset: int) -> np.ndarray:
        self._check_offset(offset)
        return self.bands[offset]

    def set_band(self, offset: int, values) -> None:
        """Fill one band with a scalar or with a vector of the band's length."""
        self._check_offset(offset)
        length = self.dim - abs(offset)
        vals = np.asarray(values, dtype=complex)
        if vals.ndim == 0:
            self.bands[offset][:] = vals
            return
        if vals.shape != (length,):
            raise ValueError(f"Band {offset} needs {length} values, got shape {vals.shape}")
        self.bands[offset][:] = vals

    def set_diagonal(self, values) -> None:
        vals = np.asarray(values)
        if np.iscomplexobj(vals) and np.any(np.abs(vals.imag) > 0):
            raise ValueError("Diagonal of a Hermitian matrix must be real")
        self.set_band(0, np.real(vals))

    def set_coupling(self, offset: int, values) -> None:
        """Write band ``+offset`` and its Hermitian mirror ``-offset`` together."""
        if offset == 0:
            raise ValueError("Use set_diagonal for the main diagonal")
        vals = np.asarray(values, dtype=complex)
        self.set_band(offset, vals)
        self.set_band(-offset, np.conj(vals))

    def to_sparse(self) -> sp.csr_matrix:
        offsets = sorted(self.bands)
        return sp.diags([self.bands[o] for o in offsets], offsets,
                        shape=(self.dim, self.dim), format='csr', dtype=complex)

    def toarray(self) -> np.ndarray:
        return self.to_sparse().toarray()

    def is_hermitian(self, atol: float = 1e-12) -> bool:
        if np.any(np.abs(self.bands[0].imag) > atol):
            return False
        return all(np.allclose(self.bands[o], np.conj(self.bands[-o]), atol=atol, rtol=0.0)
                   for o in range(1, self.bandwidth + 1))

    def copy(self) -> "BandedHamiltonian":
        return BandedHamiltonian(dim=self.dim, bandwidth=self.bandwidth,
                                 bands={o: v.copy() for o, v in self.bands.items()})
