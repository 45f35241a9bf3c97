from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_allclose

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from bandsolvers.config import FloquetScan, SecularScan, load_scan, parse_angle, parse_phases
from bandsolvers.pumping import PumpingMode
from bandsolvers.secular import compute_secular_bands

SCAN = """
solver:
  tol: 1.0e-12
secular:
  n_bands: 2
  phases: [0, pi/4, pi/2]
  s: 2
  M: 100
  lambda_L_A_L: 50
  lambda_S_A_S: 20
floquet:
  n_min: 1
  n_max: 2
  phases: {start: 0, stop: pi/2, num: 3}
  s: 1
  l: 1
  g_l: 50
  V_L: 20
  lambda_L: 5
  lambda_S: 3
  omega: 30
  pumping: time
"""


@pytest.mark.parametrize("text, value", [
    (1, 1.0),
    (0.5, 0.5),
    ("pi", np.pi),
    ("2pi", 2 * np.pi),
    ("-pi/2", -np.pi / 2),
    ("0.5*pi", np.pi / 2),
    ("1e-3", 1e-3),
])
def test_parse_angle(text, value):
    assert parse_angle(text) == pytest.approx(value)


@pytest.mark.parametrize("bad", ["tau", True, None, "pi/"])
def test_parse_angle_rejects(bad):
    with pytest.raises(ValueError):
        parse_angle(bad)


def test_parse_phases():
    assert_allclose(parse_phases({"start": 0, "stop": "pi", "num": 3}), [0, np.pi / 2, np.pi])
    assert_allclose(parse_phases({"stop": 1, "num": 2}), [0, 1])
    assert_allclose(parse_phases(["pi", 0]), [np.pi, 0])
    with pytest.raises(ValueError):
        parse_phases({"stop": 1})
    with pytest.raises(ValueError):
        parse_phases({"stop": 1, "num": 0})
    with pytest.raises(ValueError):
        parse_phases([])


def test_load_scan_string():
    cfg = load_scan(SCAN)
    assert cfg.settings.tol == pytest.approx(1e-12)
    assert cfg.settings.processes is None
    secular, floquet = cfg.scans
    assert isinstance(secular, SecularScan) and isinstance(floquet, FloquetScan)
    assert_allclose(secular.phases, [0, np.pi / 4, np.pi / 2])
    assert floquet.pumping is PumpingMode.TEMPORAL
    assert_allclose(floquet.phases, [0, np.pi / 4, np.pi / 2])


def test_load_scan_file_and_run(tmp_path):
    path = tmp_path / "scan.yaml"
    path.write_text(SCAN)
    cfg = load_scan(str(path))
    tables = cfg.scans[0].run(cfg.settings)
    expected = compute_secular_bands(2, [0, np.pi / 4, np.pi / 2], 2, 100, 50, 20)
    assert_allclose(tables["bands"], expected, rtol=1e-8, atol=1e-8)
    floquet = cfg.scans[1].run(cfg.settings)
    assert floquet["unperturbed"].shape == (8, 3)
    assert floquet["floquet"].shape == (4, 3)
    assert load_scan(path).scans[0].n_bands == 2


@pytest.mark.parametrize("text", [
    "secular: [1, 2",
    "- just\n- a list\n",
    "solver: {tol: 0}\n",
    "plots: {}\nsecular: {}\n",
    "secular: {n_bands: 2, phases: [0], s: 2, M: 1, lambda_L_A_L: 1}\n",
    "secular: {n_bands: 2, phases: [0], s: 2, M: 1, lambda_L_A_L: 1, lambda_S_A_S: 1, colour: red}\n",
    "secular: {n_bands: 0, phases: [0], s: 2, M: 1, lambda_L_A_L: 1, lambda_S_A_S: 1}\n",
    "floquet: {n_min: 3, n_max: 2, phases: [0], s: 1, l: 1, g_l: 1, V_L: 1, lambda_L: 1, lambda_S: 1, omega: 1}\n",
    "floquet: {n_min: 1, n_max: 2, phases: [0], s: 1, l: 1, g_l: 1, V_L: 1, lambda_L: 1, lambda_S: 1, omega: 1, pumping: up}\n",
    "solver: {tol: -1}\nsecular: {n_bands: 2, phases: [0], s: 2, M: 1, lambda_L_A_L: 1, lambda_S_A_S: 1}\n",
])
def test_invalid_descriptions(text):
    with pytest.raises(ValueError):
        load_scan(text)
