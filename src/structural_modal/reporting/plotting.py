"""收敛曲线与预应力频率扫描的绘图。"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import matplotlib.pyplot as plt
import numpy as np

from structural_modal.solver.prestress import PrestressSweep
from structural_modal.validation.study import ModeConvergence


_COLORS = ("red", "green", "blue", "orange", "purple", "brown")


@dataclass
class ConvergencePlotter:
    """双对数坐标下归一化误差随单元尺寸的变化。"""

    def plot(self, rows: Sequence[ModeConvergence], *, title: str, output_path: str | None = None) -> int:
        """绘制外推成功的模态对，返回绘制的曲线数。"""
        fig, ax = plt.subplots(figsize=(7, 5))
        drawn = 0
        for i, row in enumerate(rows):
            if not row.ok or row.normalized_errors is None:
                continue
            ax.loglog(row.element_sizes, row.normalized_errors, marker="o", lw=2,
                      color=_COLORS[i % len(_COLORS)], label=f"Mode {row.modes[0]}, {row.modes[1]}")
            drawn += 1
        ax.set_xlabel("Element size")
        ax.set_ylabel("Normalized error [ND]")
        ax.set_title(title)
        if drawn:
            ax.legend()
        ax.grid(True, which="both", linestyle="--", alpha=0.4)

        if output_path:
            fig.savefig(output_path, dpi=300, bbox_inches="tight")
        plt.close(fig)
        return drawn


def plot_convergence(rows: Sequence[ModeConvergence], *, title: str, output_path: str | None = None) -> int:
    """便捷函数，内部调用 :class:`ConvergencePlotter`。"""
    return ConvergencePlotter().plot(rows, title=title, output_path=output_path)


def plot_prestress_sweep(sweeps: Iterable[PrestressSweep], *, title: str, output_path: str | None = None) -> None:
    """基频随载荷因子的变化，多段扫描合并为一条散点曲线。"""
    sweep_list = list(sweeps)
    factors = np.concatenate([s.load_factors for s in sweep_list]) if sweep_list else np.empty(0)
    freqs = np.concatenate([s.frequencies for s in sweep_list]) if sweep_list else np.empty(0)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(factors, freqs, "o", ms=3, color="0.1", label="Fundamental frequency")
    ax.axhline(0.0, color="0.5", lw=0.8)
    ax.axvline(0.0, color="0.5", lw=0.8)
    ax.set_xlabel("Loading factor P")
    ax.set_ylabel("Frequency(P) [Hz]")
    ax.set_title(title)
    ax.legend()

    if output_path:
        fig.savefig(output_path, dpi=300, bbox_inches="tight")
    plt.close(fig)
