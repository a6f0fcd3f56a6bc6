"""收敛外推与基准比对工具。"""

from .convergence import (
    ExtrapolationError,
    InvalidInputError,
    NonConvergentError,
    RichardsonResult,
    ZeroLimitError,
    convergence_ratio,
    normalized_error,
    richardson_extrapolate,
)
from .benchmarks import NAFEMS_RING_TARGETS, BenchmarkValidator
from .study import (
    RingStudyConfig,
    ModeConvergence,
    analyze_modes,
    format_report,
    level_frequencies,
    select_mode_frequencies,
)

__all__ = [
    "ExtrapolationError",
    "InvalidInputError",
    "NonConvergentError",
    "RichardsonResult",
    "ZeroLimitError",
    "convergence_ratio",
    "normalized_error",
    "richardson_extrapolate",
    "NAFEMS_RING_TARGETS",
    "BenchmarkValidator",
    "RingStudyConfig",
    "ModeConvergence",
    "analyze_modes",
    "format_report",
    "level_frequencies",
    "select_mode_frequencies",
]
