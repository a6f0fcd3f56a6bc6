"""Modal eigenproblem solvers."""

from .modal import SolverConfig, frequencies_from_eigenvalues, round_significant, solve_modal
from .prestress import (
    FrameProperties,
    PrestressSweep,
    PrestressSweepConfig,
    fundamental_frequency,
    sweep_fundamental_frequency,
)

__all__ = [
    "SolverConfig",
    "frequencies_from_eigenvalues",
    "round_significant",
    "solve_modal",
    "FrameProperties",
    "PrestressSweep",
    "PrestressSweepConfig",
    "fundamental_frequency",
    "sweep_fundamental_frequency",
]
