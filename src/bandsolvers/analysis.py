"""Post-processing of band tables: tight-binding fits, silhouettes and band sums.

All functions take tables in the two-block layout returned by the solvers
(first half of the rows zone centre, second half zone boundary).
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _two_blocks(table, name: str = "bands") -> tuple[np.ndarray, int]:
    table = np.asarray(table, dtype=float)
    if table.ndim != 2 or table.shape[0] == 0 or table.shape[0] % 2:
        raise ValueError(f"{name} must have an even, non-zero number of rows, got shape {table.shape}")
    return table, table.shape[0] // 2


def tight_binding_parameters(e_gap_half: float, e_boundary: float) -> tuple[float, float]:
    """Return ``(J0, Delta)`` of the model ``E(phi) = +-sqrt(Delta^2 cos^2 phi + 4 J0^2)``.

    ``e_gap_half`` is ``E`` where ``cos phi = 1``, ``e_boundary`` where ``cos phi = 0``.
    """
    J0 = e_boundary / 2
    arg = e_gap_half ** 2 - 4 * J0 ** 2
    if arg < 0:
        raise ValueError(f"No real Delta for e_gap_half={e_gap_half}, e_boundary={e_boundary}")
    return J0, float(np.sqrt(arg))


@dataclass(slots=True)
class TightBindingFit:
    hopping: float
    gap: float
    centre: float
    upper: np.ndarray
    lower: np.ndarray


def tight_binding_fit(bands, phases) -> TightBindingFit:
    """Fit the two-level tight-binding model to the top two centre-sector bands.

    The gap is read at the first phase and the hopping at the phase closest
    to pi/2; the returned curves are ``+-sqrt(Delta^2 cos^2 phi + 4 J0^2) + w``.
    """
    bands, n = _two_blocks(bands)
    phases = np.asarray(phases, dtype=float)
    if n < 2:
        raise ValueError("A tight-binding fit needs at least two bands per sector")
    if phases.shape != (bands.shape[1],):
        raise ValueError(f"{phases.size} phases for {bands.shape[1]} band columns")
    gap = bands[0, 0] - bands[1, 0]
    w = bands[0, 0] - gap / 2
    quarter = int(np.argmin(np.abs(phases - np.pi / 2)))
    J0, delta = tight_binding_parameters(gap / 2, bands[0, quarter] - w)
    E0 = np.sqrt(delta ** 2 * np.cos(phases) ** 2 + 4 * J0 ** 2)
    return TightBindingFit(hopping=J0, gap=delta, centre=w, upper=E0 + w, lower=-E0 + w)


def make_silhouettes(energies, band_numbers) -> np.ndarray:
    """Outer edges of selected bands across both sectors.

    ``band_numbers`` (0-based rows of the centre block) has even length
    ``2 * n``. Row ``i < n`` of the result is the upper edge
    ``max(centre, boundary)`` of band ``band_numbers[i]``; row ``n + i`` the
    lower edge ``min(centre, boundary)`` of band ``band_numbers[n + i]``.
    """
    energies, n = _two_blocks(energies, "energies")
    numbers = [int(b) for b in band_numbers]
    if not numbers or len(numbers) % 2:
        raise ValueError("band_numbers must have an even, non-zero length")
    if any(not 0 <= b < n for b in numbers):
        raise ValueError(f"band numbers must lie in 0..{n - 1}")
    n_sils = len(numbers) // 2
    out = np.empty((2 * n_sils, energies.shape[1]))
    for i in range(n_sils):
        top, bottom = numbers[i], numbers[n_sils + i]
        out[i] = np.maximum(energies[top], energies[n + top])
        out[n_sils + i] = np.minimum(energies[bottom], energies[n + bottom])
    return out


def sum_bands(bands) -> np.ndarray:
    """Pairwise sums of bands, e.g. to build two-particle or higher-dimensional spectra.

    For ``n`` bands per block the result holds ``N = n (n + 1) / 2`` rows per
    block, one for every unordered pair ``b1 <= b2``; upper-block rows are summed
    with upper-block rows and lower with lower.
    """
    bands, n = _two_blocks(bands)
    pairs = [(b1, b2) for b1 in range(n) for b2 in range(b1, n)]
    N = len(pairs)
    summed = np.empty((2 * N, bands.shape[1]))
    for i, (b1, b2) in enumerate(pairs):
        summed[i] = bands[b1] + bands[b2]
        summed[N + i] = bands[n + b1] + bands[n + b2]
    return summed
