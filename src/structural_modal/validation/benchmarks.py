"""
自由圆环振动基准值与比对工具。

参考：NAFEMS Selected Benchmarks for Natural Frequency Analysis（Test VM09，
Circular Ring -- In-plane and Out-of-plane Vibration）。参考值由 Blevins
解析公式给出（忽略剪切柔度），目标值为 NAFEMS 发布的数值结果。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ModeBenchmark:
    modes: Tuple[int, int]
    plane: str
    reference: float
    target: float


NAFEMS_RING_TARGETS: Dict[Tuple[int, int], ModeBenchmark] = {
    (7, 8): ModeBenchmark((7, 8), "out of plane", 51.85, 52.29),
    (9, 10): ModeBenchmark((9, 10), "in plane", 53.38, 53.97),
    (11, 12): ModeBenchmark((11, 12), "out of plane", 148.8, 149.7),
    (13, 14): ModeBenchmark((13, 14), "in plane", 151.0, 152.4),
    (15, 16): ModeBenchmark((15, 16), "out of plane", 287.0, 288.3),
    (17, 18): ModeBenchmark((17, 18), "in plane", 289.5, 288.3),
}


@dataclass(frozen=True)
class BenchmarkComparison:
    benchmark: ModeBenchmark
    predicted: float
    target_deviation: float
    reference_deviation: float
    status: str


class BenchmarkValidator:
    """将预测频率与基准值比对并打印状态行。"""

    def __init__(self, benchmarks: Optional[Dict[Tuple[int, int], ModeBenchmark]] = None) -> None:
        self.benchmarks = dict(
            NAFEMS_RING_TARGETS if benchmarks is None else benchmarks)

    def compare(self, modes: Tuple[int, int], predicted: float, tol: float = 1e-2) -> Optional[BenchmarkComparison]:
        key = (int(modes[0]), int(modes[1]))
        if key not in self.benchmarks:
            print(f"[Info] No benchmark for modes {key[0]}, {key[1]}")
            return None

        bench = self.benchmarks[key]
        target_dev = abs(predicted - bench.target) / abs(bench.target)
        reference_dev = abs(predicted - bench.reference) / \
            abs(bench.reference)
        status = "PASS" if target_dev < tol else "WARN"
        print(
            f"[{status}] Modes {key[0]}, {key[1]} ({bench.plane}): Pred={predicted:.4f} Hz, "
            f"Target={bench.target:.2f} Hz ({target_dev:.2e}), Ref={bench.reference:.2f} Hz ({reference_dev:.2e})")
        return BenchmarkComparison(
            benchmark=bench,
            predicted=float(predicted),
            target_deviation=float(target_dev),
            reference_deviation=float(reference_dev),
            status=status,
        )
