"""Effect of prestress on the fundamental frequency of an L-shaped frame.

The loaded frame contributes the geometric stiffness ``Kg``; the eigenproblem
``(K + P Kg) x = omega^2 M x`` is swept over the load factor ``P``. Once the
lowest eigenvalue is no longer positive the frame has buckled and the
fundamental frequency is reported as zero.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

import numpy as np
from scipy.sparse import issparse

from .modal import SolverConfig, solve_modal


@dataclass
class FrameProperties:
    """Input data of the L-shaped frame, in SI units."""

    youngs_modulus: float = 71240.0e6
    poisson_ratio: float = 0.31
    density: float = 5000.0
    width: float = 0.6e-3
    height: float = 30.0e-3
    leg_length: float = 240.0e-3
    force: float = 1.0e-5
    elements_per_leg: int = 8

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def second_moments(self) -> Tuple[float, float]:
        """Second moments of area about the two cross-section axes."""
        return (self.width * self.height ** 3 / 12.0,
                self.height * self.width ** 3 / 12.0)

    @property
    def shear_modulus(self) -> float:
        return self.youngs_modulus / (2.0 * (1.0 + self.poisson_ratio))

    def member_endpoints(self) -> Tuple[np.ndarray, np.ndarray]:
        L = self.leg_length
        return (np.array([[0.0, 0.0, L], [L, 0.0, L]]),
                np.array([[L, 0.0, L], [L, 0.0, 0.0]]))


@dataclass
class PrestressSweepConfig:
    """Load-factor ranges as ``(start, stop, count)``."""

    positive: Tuple[float, float, int] = (0.0, 68000.0, 400)
    negative: Tuple[float, float, int] = (-109000.0, 0.0, 400)
    num_eigenvalues: int = 4
    solver: SolverConfig = field(default_factory=SolverConfig)

    def load_factors(self) -> Tuple[np.ndarray, np.ndarray]:
        pos = np.linspace(self.positive[0], self.positive[1],
                          int(self.positive[2]))
        neg = np.linspace(self.negative[0], self.negative[1],
                          int(self.negative[2]))
        return pos, neg


@dataclass
class PrestressSweep:
    load_factors: np.ndarray
    frequencies: np.ndarray

    def buckling_bracket(self) -> Optional[float]:
        """First load factor, walking away from zero load, with no positive frequency."""
        order = np.argsort(np.abs(self.load_factors), kind="stable")
        for idx in order:
            if self.frequencies[idx] <= 0.0:
                return float(self.load_factors[idx])
        return None


def _combine(K, Kg, load_factor: float):
    if issparse(K) or issparse(Kg):
        return K + load_factor * Kg
    return np.asarray(K, dtype=float) + load_factor * np.asarray(Kg, dtype=float)


def fundamental_frequency(K, Kg, M, load_factor: float, *, config: Optional[SolverConfig] = None) -> float:
    """Fundamental frequency in Hz of the prestressed structure, 0 once buckled."""
    if config is None:
        config = SolverConfig(num_eigenvalues=4)
    if Kg.shape != K.shape:
        raise ValueError("K and Kg must have equal dimensions.")
    eigvals, _ = solve_modal(_combine(K, Kg, load_factor), M, config=config)
    lowest = float(eigvals[0])
    return math.sqrt(lowest) / (2.0 * math.pi) if lowest > 0.0 else 0.0


def sweep_fundamental_frequency(K, Kg, M, load_factors: Iterable[float], *, config: Optional[PrestressSweepConfig] = None) -> PrestressSweep:
    if config is None:
        config = PrestressSweepConfig()
    solver_config = replace(config.solver, num_eigenvalues=config.num_eigenvalues)
    factors = np.asarray(tuple(load_factors), dtype=float)
    frequencies = np.empty_like(factors)
    for i, load_factor in enumerate(factors):
        frequencies[i] = fundamental_frequency(
            K, Kg, M, float(load_factor), config=solver_config)
    return PrestressSweep(load_factors=factors, frequencies=frequencies)
