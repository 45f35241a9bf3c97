"""Hamiltonian assembly for a driven particle in a lattice (banded and structured-sparse)."""
from .base import BandedHamiltonian, TripletList, floquet_triplets, overlap_matrix
from . import models

__all__ = ["BandedHamiltonian", "TripletList", "floquet_triplets", "overlap_matrix", "models"]
