from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from bandsolvers.pumping import PumpingMode, uniform_step


@pytest.mark.parametrize("tag, mode", [
    ("time", PumpingMode.TEMPORAL),
    ("Temporal", PumpingMode.TEMPORAL),
    ("space", PumpingMode.SPATIAL),
    ("spatial", PumpingMode.SPATIAL),
    ("spacetime", PumpingMode.SPACETIME),
    ("both", PumpingMode.SPACETIME),
    (PumpingMode.SPATIAL, PumpingMode.SPATIAL),
])
def test_parse(tag, mode):
    assert PumpingMode.parse(tag) is mode


def test_unknown_tag_rejected():
    with pytest.raises(ValueError):
        PumpingMode.parse("sideways")


def test_recompute_and_reuse_rules():
    t, x, xt = PumpingMode.TEMPORAL, PumpingMode.SPATIAL, PumpingMode.SPACETIME
    assert t.recomputes_unperturbed(0) and not t.recomputes_unperturbed(3)
    assert not t.reuses_couplings(0) and t.reuses_couplings(1)
    for mode in (x, xt):
        assert mode.independent_phases
        assert mode.recomputes_unperturbed(5)
        assert not mode.reuses_couplings(5)
    assert not t.independent_phases


def test_long_lattice_phase():
    assert PumpingMode.SPATIAL.long_lattice_phase(0.7) == 1
    assert PumpingMode.SPACETIME.long_lattice_phase(0.7) == pytest.approx(np.exp(-1.4j))
    assert PumpingMode.TEMPORAL.long_lattice_phase(0.7) == pytest.approx(np.exp(-1.4j))


def test_uniform_step():
    assert uniform_step(np.linspace(0, np.pi, 7)) == pytest.approx(np.pi / 6)
    assert uniform_step(np.array([0.3])) == 0.0
    with pytest.raises(ValueError):
        uniform_step(np.array([0.0, 0.1, 0.3]))
