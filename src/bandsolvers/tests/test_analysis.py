from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_allclose

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from bandsolvers.analysis import make_silhouettes, sum_bands, tight_binding_fit, tight_binding_parameters


def test_tight_binding_parameters():
    J0, delta = tight_binding_parameters(5.0, 4.0)
    assert J0 == pytest.approx(2.0)
    assert delta == pytest.approx(3.0)
    with pytest.raises(ValueError):
        tight_binding_parameters(5.0, 12.0)


def test_fit_recovers_model_bands():
    phases = np.linspace(0, np.pi, 5)
    E0 = np.sqrt(9.0 * np.cos(phases) ** 2 + 16.0)
    bands = np.vstack([E0 + 10.0, -E0 + 10.0, E0, -E0])
    fit = tight_binding_fit(bands, phases)
    assert fit.hopping == pytest.approx(2.0)
    assert fit.gap == pytest.approx(3.0)
    assert fit.centre == pytest.approx(10.0)
    assert_allclose(fit.upper, bands[0])
    assert_allclose(fit.lower, bands[1])


def test_fit_checks_shapes():
    with pytest.raises(ValueError):
        tight_binding_fit(np.zeros((2, 3)), np.zeros(3))
    with pytest.raises(ValueError):
        tight_binding_fit(np.zeros((4, 3)), np.zeros(2))


def test_silhouettes():
    energies = np.arange(12, dtype=float).reshape(6, 2)
    energies[4] = [-5.0, 100.0]
    sil = make_silhouettes(energies, [0, 2, 1, 2])
    assert sil.shape == (4, 2)
    assert_allclose(sil[0], np.maximum(energies[0], energies[3]))
    assert_allclose(sil[1], np.maximum(energies[2], energies[5]))
    assert_allclose(sil[2], [-5.0, 3.0])
    assert_allclose(sil[3], np.minimum(energies[2], energies[5]))
    with pytest.raises(ValueError):
        make_silhouettes(energies, [0, 1, 2])
    with pytest.raises(ValueError):
        make_silhouettes(energies, [0, 3])
    with pytest.raises(ValueError):
        make_silhouettes(energies[:5], [0, 1])


def test_sum_bands_pairs():
    bands = np.array([[4.0, 5.0], [2.0, 3.0], [1.0, 1.5], [0.0, 0.5]])
    summed = sum_bands(bands)
    assert summed.shape == (6, 2)
    assert_allclose(summed[:3], [[8.0, 10.0], [6.0, 8.0], [4.0, 6.0]])
    assert_allclose(summed[3:], [[2.0, 3.0], [1.0, 2.0], [0.0, 1.0]])
    assert sum_bands(summed).shape == (12, 2)
