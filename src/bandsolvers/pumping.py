"""Pumping modes and the recomputation rules they imply for the Floquet sweep."""
from __future__ import annotations

from enum import Enum

import numpy as np

_ALIASES = {
    'time': 'time', 'temporal': 'time',
    'space': 'space', 'spatial': 'space',
    'spacetime': 'spacetime', 'space-time': 'spacetime', 'both': 'spacetime',
}


class PumpingMode(str, Enum):
    """Which adiabatic phase is swept.

    TEMPORAL: only the temporal phase varies; the spatial phase stays at the
        first sweep value, so the unperturbed Hamiltonian is diagonalised once
        and the long-lattice couplings are advanced by a constant phase factor.
    SPATIAL: only the spatial phase varies; everything is recomputed per phase.
    SPACETIME: both vary with the spatial phase fixed at twice the temporal one;
        everything is recomputed and the long-lattice couplings carry
        ``exp(-2i phase)``.
    """
    TEMPORAL = 'time'
    SPATIAL = 'space'
    SPACETIME = 'spacetime'

    @classmethod
    def parse(cls, value) -> "PumpingMode":
        if isinstance(value, cls):
            return value
        key = _ALIASES.get(str(value).strip().lower())
        if key is None:
            raise ValueError(f"Unknown pumping mode {value!r}; expected one of {sorted(_ALIASES)}")
        return cls(key)

    @property
    def independent_phases(self) -> bool:
        """True when every phase of the sweep can be treated in isolation."""
        return self is not PumpingMode.TEMPORAL

    def recomputes_unperturbed(self, index: int) -> bool:
        return self is not PumpingMode.TEMPORAL or index == 0

    def reuses_couplings(self, index: int) -> bool:
        """Cached couplings are valid only for temporal pumping past the first phase."""
        return self is PumpingMode.TEMPORAL and index > 0

    def long_lattice_phase(self, phase: float) -> complex:
        if self is PumpingMode.SPATIAL:
            return 1.0 + 0.0j
        return complex(np.exp(-2j * phase))


def uniform_step(phases: np.ndarray) -> float:
    """Phase increment of a uniform sweep; ``ValueError`` if the sweep is not uniform."""
    if phases.size < 2:
        return 0.0
    steps = np.diff(phases)
    step = float(steps[0])
    if not np.allclose(steps, step, rtol=1e-9, atol=1e-12):
        raise ValueError("Temporal pumping reuses couplings across phases and needs a uniform phase step")
    return step
