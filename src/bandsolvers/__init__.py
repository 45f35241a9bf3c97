"""Quasi-energy band solvers for a periodically driven particle in a lattice."""
from .eigensolve import ConvergenceReport, EigenResult, solve_eigenpairs
from .pumping import PumpingMode
from .secular import compute_secular_bands
from .floquet import FloquetCache, compute_floquet_bands
from .analysis import make_silhouettes, sum_bands, tight_binding_fit, tight_binding_parameters
from .config import ScanConfig, load_scan

__all__ = [
    "ConvergenceReport",
    "EigenResult",
    "solve_eigenpairs",
    "PumpingMode",
    "compute_secular_bands",
    "compute_floquet_bands",
    "FloquetCache",
    "make_silhouettes",
    "sum_bands",
    "tight_binding_fit",
    "tight_binding_parameters",
    "ScanConfig",
    "load_scan",
]
