from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_allclose

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from hamiltonian.base.overlaps import (
    LONG_LATTICE_SIGN,
    SHORT_LATTICE_SIGN,
    lattice_operator,
    lattice_overlap,
    long_lattice_operator,
    overlap_matrix,
    short_lattice_operator,
)


def test_boundary_weights_on_smallest_truncation():
    # five modes: rows 0 and 4 keep their inner neighbour only, rows 1 and 3 are empty
    a = np.array([1, 0, 1, 0, 0], dtype=complex)
    b = np.array([1, 0, 0, 0, 1], dtype=complex)
    # long: (1/2 + 1/4) * 1 + (1/4) * 1
    assert lattice_overlap(a, b, LONG_LATTICE_SIGN) == pytest.approx(1.0)
    # short: (1/2 - 1/4) * 1 + (-1/4) * 1
    assert lattice_overlap(a, b, SHORT_LATTICE_SIGN) == pytest.approx(0.0)

    V = np.column_stack([a, b])
    G = overlap_matrix(V, long_lattice_operator(5))
    assert G[0, 1] == pytest.approx(1.0)
    assert overlap_matrix(V, short_lattice_operator(5))[0, 1] == pytest.approx(0.0)


def test_bra_is_conjugated():
    a = np.array([1j, 0, 0, 0, 0])
    b = np.array([1, 0, 1, 0, 0])
    # conj(i/2) * 1 + conj(i/4) * 1
    assert lattice_overlap(a, b, LONG_LATTICE_SIGN) == pytest.approx(-0.75j)


def test_operator_pattern():
    W = lattice_operator(7, SHORT_LATTICE_SIGN).toarray()
    assert not np.any(W[1]) and not np.any(W[5])
    assert W[0, 0] == 0.5 and W[0, 2] == -0.25
    assert W[3, 1] == -0.25 and W[3, 3] == 0.5 and W[3, 5] == -0.25
    assert W[6, 6] == 0.5 and W[6, 4] == -0.25


def test_matrix_agrees_with_elementwise_sum():
    rng = np.random.default_rng(7)
    V = rng.normal(size=(9, 4)) + 1j * rng.normal(size=(9, 4))
    for sign in (LONG_LATTICE_SIGN, SHORT_LATTICE_SIGN):
        G = overlap_matrix(V, lattice_operator(9, sign))
        expected = np.array([[lattice_overlap(V[:, p], V[:, m], sign) for m in range(4)] for p in range(4)])
        assert_allclose(G, expected, atol=1e-12)


def test_too_few_modes_rejected():
    with pytest.raises(ValueError):
        lattice_operator(4, LONG_LATTICE_SIGN)
    with pytest.raises(ValueError):
        overlap_matrix(np.ones((6, 2)), long_lattice_operator(5))
