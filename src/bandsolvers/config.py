"""YAML description of band-structure scans.

Example::

    solver:
      tol: 1.0e-10
      processes: 4
    secular:
      n_bands: 2
      phases: {start: 0, stop: pi, num: 51}
      s: 2
      M: 100
      lambda_L_A_L: 50
      lambda_S_A_S: 20
    floquet:
      n_min: 15
      n_max: 30
      phases: [0, pi/4, pi/2]
      s: 2
      l: 1
      g_l: 4513.9
      V_L: 20
      lambda_L: 200
      lambda_S: 75
      omega: 391
      pumping: spacetime

Phase values may be numbers or strings such as ``pi``, ``2pi``, ``-pi/2``.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, MISSING
import os
import re

import numpy as np
import yaml

from .floquet import compute_floquet_bands
from .pumping import PumpingMode
from .secular import compute_secular_bands

_ANGLE = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+)?)\s*\*?\s*pi\s*(?:/\s*(\d+(?:\.\d*)?))?$")


def parse_angle(value) -> float:
    """Number or ``[coeff]pi[/denom]`` string -> float radians."""
    if isinstance(value, bool):
        raise ValueError(f"Not an angle: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip().lower()
        m = _ANGLE.match(text)
        if m:
            coeff, denom = m.groups()
            factor = {"": 1.0, "+": 1.0, "-": -1.0}.get(coeff)
            if factor is None:
                factor = float(coeff)
            return factor * np.pi / (float(denom) if denom else 1.0)
        try:
            return float(text)
        except ValueError:
            pass
    raise ValueError(f"Not an angle: {value!r}")


def parse_phases(value) -> np.ndarray:
    """Explicit list of angles, or ``{start, stop, num}`` for ``numpy.linspace``."""
    if isinstance(value, dict):
        unknown = set(value) - {"start", "stop", "num"}
        if unknown or "stop" not in value or "num" not in value:
            raise ValueError(f"Phase range needs keys start, stop, num; got {sorted(value)}")
        num = value["num"]
        if not isinstance(num, int) or isinstance(num, bool) or num < 1:
            raise ValueError(f"Phase count must be a positive integer, got {num!r}")
        return np.linspace(parse_angle(value.get("start", 0.0)), parse_angle(value["stop"]), num)
    if isinstance(value, (list, tuple)):
        if not value:
            raise ValueError("Phase list must not be empty")
        return np.array([parse_angle(v) for v in value])
    return np.array([parse_angle(value)])


def _build(cls, data, section: str):
    if not isinstance(data, dict):
        raise ValueError(f"Section '{section}' must be a mapping")
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {sorted(unknown)}")
    missing = [f.name for f in fields(cls)
               if f.name not in data and f.default is MISSING and f.default_factory is MISSING]
    if missing:
        raise ValueError(f"Missing keys in '{section}': {missing}")
    obj = cls(**data)
    obj.validate()
    return obj


@dataclass(slots=True)
class SolverSettings:
    tol: float = 0.0
    maxiter: int | None = None
    processes: int | None = None

    def validate(self) -> None:
        self.tol = float(self.tol)
        if self.tol < 0:
            raise ValueError(f"tol must be >= 0, got {self.tol}")
        if self.maxiter is not None and int(self.maxiter) < 1:
            raise ValueError(f"maxiter must be positive, got {self.maxiter}")
        if self.processes is not None and int(self.processes) < 1:
            raise ValueError(f"processes must be positive, got {self.processes}")

    def as_kwargs(self) -> dict:
        return {"tol": self.tol, "maxiter": self.maxiter, "processes": self.processes}


@dataclass(slots=True)
class SecularScan:
    n_bands: int
    phases: np.ndarray
    s: int
    M: float
    lambda_L_A_L: float
    lambda_S_A_S: float
    n_j: int | None = None

    kind = "secular"

    def validate(self) -> None:
        self.phases = parse_phases(self.phases)
        if int(self.n_bands) < 1:
            raise ValueError(f"n_bands must be >= 1, got {self.n_bands}")
        if int(self.s) < 1:
            raise ValueError(f"s must be >= 1, got {self.s}")

    def run(self, settings: SolverSettings | None = None) -> dict:
        settings = settings or SolverSettings()
        bands = compute_secular_bands(int(self.n_bands), self.phases, int(self.s), self.M,
                                      self.lambda_L_A_L, self.lambda_S_A_S,
                                      mode_cutoff=self.n_j, **settings.as_kwargs())
        return {"bands": bands}


@dataclass(slots=True)
class FloquetScan:
    n_min: int
    n_max: int
    phases: np.ndarray
    s: int
    l: int
    g_l: float
    V_L: float
    lambda_L: float
    lambda_S: float
    omega: float
    pumping: PumpingMode = PumpingMode.SPACETIME
    n_j: int | None = None

    kind = "floquet"

    def validate(self) -> None:
        self.phases = parse_phases(self.phases)
        self.pumping = PumpingMode.parse(self.pumping)
        if not 1 <= int(self.n_min) <= int(self.n_max):
            raise ValueError(f"Need 1 <= n_min <= n_max, got n_min={self.n_min}, n_max={self.n_max}")
        if int(self.s) < 1 or int(self.l) < 1:
            raise ValueError(f"s and l must be >= 1, got s={self.s}, l={self.l}")

    def run(self, settings: SolverSettings | None = None) -> dict:
        settings = settings or SolverSettings()
        unperturbed, floquet = compute_floquet_bands(
            int(self.n_min), int(self.n_max), self.phases, int(self.s), int(self.l), self.g_l,
            self.V_L, self.lambda_L, self.lambda_S, self.omega, self.pumping,
            mode_cutoff=self.n_j, **settings.as_kwargs())
        return {"unperturbed": unperturbed, "floquet": floquet}


_SECTIONS = {"secular": SecularScan, "floquet": FloquetScan}


@dataclass(slots=True)
class ScanConfig:
    settings: SolverSettings = field(default_factory=SolverSettings)
    scans: list = field(default_factory=list)


def yaml_parser(source):
    """Load YAML from a ``.yml``/``.yaml`` path or from a YAML string."""
    if isinstance(source, os.PathLike):
        source = os.fspath(source)
    try:
        if isinstance(source, str) and source.lower().endswith(('.yml', '.yaml')):
            with open(source, 'r') as stream:
                return yaml.safe_load(stream)
        return yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML scan description: {exc}") from exc


def load_scan(source) -> ScanConfig:
    """Parse a scan description into solver settings and one scan per solver section."""
    data = yaml_parser(source)
    if not isinstance(data, dict):
        raise ValueError("Scan description must be a mapping")
    unknown = set(data) - set(_SECTIONS) - {"solver"}
    if unknown:
        raise ValueError(f"Unknown sections: {sorted(unknown)}")
    if not set(data) & set(_SECTIONS):
        raise ValueError(f"Scan description needs at least one of {sorted(_SECTIONS)}")
    settings = _build(SolverSettings, data.get("solver") or {}, "solver")
    scans = [_build(cls, data[name], name) for name, cls in _SECTIONS.items() if name in data]
    return ScanConfig(settings=settings, scans=scans)
