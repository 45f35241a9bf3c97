from .banded import BandedHamiltonian
from .triplets import TripletList
from .overlaps import (
    lattice_operator,
    long_lattice_operator,
    short_lattice_operator,
    overlap_matrix,
    lattice_overlap,
)
from .floquet_pattern import coupling_partners, expected_nonzeros, floquet_triplets, level_shifts

__all__ = [
    "BandedHamiltonian",
    "TripletList",
    "lattice_operator",
    "long_lattice_operator",
    "short_lattice_operator",
    "overlap_matrix",
    "lattice_overlap",
    "coupling_partners",
    "expected_nonzeros",
    "floquet_triplets",
    "level_shifts",
]
