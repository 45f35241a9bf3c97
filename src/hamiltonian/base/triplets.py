"""Coordinate-list (row, col, value) assembly of sparse matrices."""
from __future__ import annotations

import numpy as np
import scipy.sparse as sp


class TripletList:
    """Accumulates explicit ``(row, col, value)`` entries.

    Hermitian partners are stored as separate triplets (``add_hermitian``),
    so the resulting matrix does not depend on any symmetric-storage
    convention of the consumer. Duplicate coordinates are summed on
    conversion, as ``scipy.sparse.coo_matrix`` does.
    """

    def __init__(self, dim: int):
        if dim < 1:
            raise ValueError(f"dim must be positive, got {dim}")
        self.dim = dim
        self.rows: list[int] = []
        self.cols: list[int] = []
        self.vals: list[complex] = []

    def __len__(self) -> int:
        return len(self.vals)

    def _check(self, index: int) -> None:
        if not 0 <= index < self.dim:
            raise IndexError(f"Index {index} outside matrix of dimension {self.dim}")

    def add(self, row: int, col: int, value: complex) -> None:
        self._check(row); self._check(col)
        self.rows.append(row); self.cols.append(col); self.vals.append(complex(value))

    def add_diagonal(self, index: int, value: float) -> None:
        self.add(index, index, value)

    def add_hermitian(self, row: int, col: int, value: complex) -> None:
        """Place ``value`` at (row, col) and its conjugate at (col, row)."""
        if row == col:
            raise ValueError("add_hermitian needs an off-diagonal position; use add_diagonal")
        self.add(row, col, value)
        self.add(col, row, np.conj(value))

    def to_coo(self) -> sp.coo_matrix:
        return sp.coo_matrix((self.vals, (self.rows, self.cols)), shape=(self.dim, self.dim), dtype=complex)

    def to_csr(self) -> sp.csr_matrix:
        return self.to_coo().tocsr()
