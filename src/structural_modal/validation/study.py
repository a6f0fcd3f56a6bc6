"""自由圆环三维实体模型的网格收敛研究。

三个网格层级的刚度与质量矩阵由外部有限元程序提供；此处求解带质量平移的
自由振动问题（或直接读取已缓存的频谱）、挑选模态对、执行 Richardson 外推
并整理报告行。
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from structural_modal.io import ModalResultCache
from structural_modal.solver import SolverConfig, frequencies_from_eigenvalues, solve_modal

from .convergence import (
    ExtrapolationError,
    RichardsonResult,
    normalized_error,
    richardson_extrapolate,
)


@dataclass
class RingStudyConfig:
    """圆环几何、材料与网格层级参数（SI 单位）。"""

    radius: float = 1.0
    diameter: float = 0.1
    youngs_modulus: float = 200.0e9
    poisson_ratio: float = 0.3
    density: float = 8000.0
    # (每半径单元数, 周向单元数)
    levels: Tuple[Tuple[int, int], ...] = ((2, 40), (4, 80), (8, 160))
    refinement_factors: Tuple[float, ...] = (4.0, 2.0, 1.0)
    rigid_body_modes: int = 6
    mode_offsets: Tuple[int, ...] = (1, 3, 5)
    num_eigenvalues: int = 18
    mass_shift: float = (2.0 * math.pi * 15.0) ** 2

    def __post_init__(self) -> None:
        if len(self.levels) != len(self.refinement_factors):
            raise ValueError("levels 与 refinement_factors 数量必须一致。")

    def element_sizes(self) -> np.ndarray:
        """周长除以周向单元数。"""
        counts = np.asarray([n_circ for _, n_circ in self.levels], dtype=float)
        return 2.0 * math.pi * self.radius / counts

    def mode_pairs(self) -> List[Tuple[int, int]]:
        pairs = []
        for offset in self.mode_offsets:
            first = self.rigid_body_modes + offset
            pairs.append((first, first + 1))
        return pairs

    def cache_key(self, level: Tuple[int, int]) -> str:
        return f"ring_n{level[0]}"


@dataclass
class ModeConvergence:
    """单个模态对的外推结果或失败原因。"""

    modes: Tuple[int, int]
    samples: np.ndarray
    element_sizes: np.ndarray
    result: Optional[RichardsonResult] = None
    error: Optional[ExtrapolationError] = None
    normalized_errors: Optional[np.ndarray] = None

    @property
    def label(self) -> str:
        return f"{self.modes[0]} and {self.modes[1]}"

    @property
    def ok(self) -> bool:
        return self.result is not None


def select_mode_frequencies(frequencies: Sequence[float], config: RingStudyConfig) -> Tuple[float, ...]:
    """跳过刚体模态后，按 ``mode_offsets`` 取每个模态对的第一个频率。"""
    freqs = np.asarray(frequencies, dtype=float)
    indices = [config.rigid_body_modes + offset -
               1 for offset in config.mode_offsets]
    if max(indices) >= freqs.size:
        raise ValueError(
            f"需要至少 {max(indices) + 1} 个频率，实际为 {freqs.size}。")
    return tuple(float(freqs[i]) for i in indices)


def analyze_modes(results: Sequence[Sequence[float]], config: RingStudyConfig) -> List[ModeConvergence]:
    """对每个模态对执行外推。

    ``results`` 的每一行对应一个网格层级，列对应 ``config.mode_pairs()``。
    外推失败不会中断其它模态对，失败原因保存在 ``error`` 中。
    """
    table = np.asarray(results, dtype=float)
    pairs = config.mode_pairs()
    if table.ndim != 2 or table.shape != (len(config.levels), len(pairs)):
        raise ValueError(
            f"results 形状应为 {(len(config.levels), len(pairs))}，实际为 {table.shape}。")

    sizes = config.element_sizes()
    rows: List[ModeConvergence] = []
    for column, modes in enumerate(pairs):
        samples = table[:, column].copy()
        row = ModeConvergence(modes=modes, samples=samples,
                              element_sizes=sizes)
        try:
            row.result = richardson_extrapolate(
                samples, config.refinement_factors)
            row.normalized_errors = normalized_error(
                samples, row.result.value)
        except ExtrapolationError as exc:
            row.result = None
            row.error = exc
        rows.append(row)
    return rows


def format_report(rows: Sequence[ModeConvergence]) -> List[str]:
    lines = []
    for row in rows:
        if row.result is not None:
            lines.append(
                f"Predicted frequency {row.label}: {row.result.value:.6f} Hz (order {row.result.order:.3f})")
        else:
            lines.append(
                f"Predicted frequency {row.label}: not available ({row.error})")
    return lines


def level_frequencies(cache: ModalResultCache, level: Tuple[int, int], config: RingStudyConfig) -> Tuple[np.ndarray, bool]:
    """读取某一网格层级的频谱，返回 ``(频率, 是否由矩阵求解)``。

    缓存中只有 ``stiffness``/``mass`` 时，按 ``config`` 的质量平移求解
    自由振动问题，并把频谱写回缓存。
    """
    key = config.cache_key(level)
    if cache.has_spectra(key):
        return np.asarray(cache.load(key).frequencies, dtype=float), False

    matrices = cache.load_matrices(key)
    missing = [name for name in ("stiffness", "mass") if name not in matrices]
    if missing:
        raise FileNotFoundError(
            f"缓存 '{key}' 既无频谱也缺少矩阵：{', '.join(missing)}。")

    solver_config = SolverConfig(
        num_eigenvalues=config.num_eigenvalues, mass_shift=config.mass_shift)
    eigenvalues, eigenvectors = solve_modal(
        matrices["stiffness"], matrices["mass"], config=solver_config)
    frequencies = frequencies_from_eigenvalues(eigenvalues)

    metadata = cache.metadata(key)
    metadata.update({
        "nperradius": level[0],
        "nL": level[1],
        "num_eigenvalues": config.num_eigenvalues,
        "mass_shift": config.mass_shift,
    })
    cache.save(key, eigenvalues=eigenvalues, frequencies=frequencies,
               eigenvectors=eigenvectors, metadata=metadata)
    return frequencies, True
