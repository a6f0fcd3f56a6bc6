"""网格收敛与 Richardson 外推工具。

误差模型为 ``v(h) ≈ v_true + C·h^p``，其中 ``h`` 与单元尺寸成正比。
三个不同加密层级的样本恰好确定 ``v_true``、``C`` 与 ``p`` 三个未知量。
等比加密时使用闭式解；比值不等时对阶数方程求根（一般 Richardson 外推）。
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np
from scipy.optimize import brentq


_RATIO_RTOL = 1e-6
_ORDER_BRACKET = (1e-8, 64.0)


class ExtrapolationError(Exception):
    """外推失败的基类。"""


class InvalidInputError(ExtrapolationError, ValueError):
    """样本数量或加密参数不合法。"""


class NonConvergentError(ExtrapolationError, ArithmeticError):
    """样本不呈单调收敛，无法求解收敛阶。"""

    def __init__(self, message: str, *, values: Sequence[float], refinements: Sequence[float]) -> None:
        super().__init__(message)
        self.values = tuple(float(v) for v in values)
        self.refinements = tuple(float(h) for h in refinements)
        self.differences = (self.values[0] - self.values[1],
                            self.values[1] - self.values[2])
        if self.differences[1] == 0.0:
            self.ratio = math.inf if self.differences[0] != 0.0 else math.nan
        else:
            self.ratio = self.differences[0] / self.differences[1]


class ZeroLimitError(ExtrapolationError, ZeroDivisionError):
    """极限值为零，相对误差无定义。"""


@dataclass(frozen=True)
class RichardsonResult:
    """外推结果：极限值、收敛阶与误差模型常数。"""

    value: float
    order: float
    constant: float

    def __iter__(self) -> Iterator[float]:
        # 允许 ``v_true, p = result``
        yield self.value
        yield self.order

    def as_tuple(self) -> Tuple[float, float]:
        return self.value, self.order


def convergence_ratio(values: Sequence[float]) -> np.ndarray:
    """相邻差分之比 ``(v[i-1] - v[i-2]) / (v[i] - v[i-1])``。"""
    values = np.asarray(values, dtype=float)
    if values.size < 3:
        raise InvalidInputError("至少需要 3 个数据点才能计算收敛率。")
    ratios = []
    for idx in range(2, values.size):
        numerator = values[idx - 1] - values[idx - 2]
        denominator = values[idx] - values[idx - 1]
        if denominator == 0.0:
            ratios.append(np.inf)
        else:
            ratios.append(numerator / denominator)
    return np.asarray(ratios)


def _validate(values: Sequence[float], refinements: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    v = np.asarray(values, dtype=float).ravel()
    h = np.asarray(refinements, dtype=float).ravel()
    if v.size != h.size:
        raise InvalidInputError(
            f"values 与 refinements 长度必须一致（{v.size} != {h.size}）。")
    if v.size != 3:
        raise InvalidInputError(f"Richardson 外推需要恰好 3 个样本，实际为 {v.size}。")
    if not (np.all(np.isfinite(v)) and np.all(np.isfinite(h))):
        raise InvalidInputError("样本值与加密参数必须是有限实数。")
    if np.any(h <= 0.0):
        raise InvalidInputError(f"加密参数必须为正：{h.tolist()}。")

    steps = np.diff(h)
    if np.all(steps > 0.0):
        # 统一为由粗到细（h 递减）
        return v[::-1].copy(), h[::-1].copy()
    if not np.all(steps < 0.0):
        raise InvalidInputError(f"加密参数必须严格单调：{h.tolist()}。")
    return v, h


def _solve_order(q: float, h: np.ndarray) -> float:
    """求解 ``(h1^p - h2^p)/(h2^p - h3^p) = q``，p > 0。"""
    h1, h2, h3 = h / h[-1]

    def residual(p: float) -> float:
        return (h1 ** p - h2 ** p) / (h2 ** p - h3 ** p) - q

    # h1^p 不得超出浮点上限
    p_max = min(0.5 * math.log(np.finfo(float).max) / math.log(h1), 1e3)
    lower, upper = _ORDER_BRACKET
    upper = min(upper, p_max)
    with np.errstate(over="ignore"):
        # p -> 0 时左端趋于 ln(h1/h2)/ln(h2/h3)，随 p 单调增
        if residual(lower) >= 0.0:
            return math.nan
        while residual(upper) <= 0.0:
            if upper >= p_max:
                return math.nan
            upper = min(2.0 * upper, p_max)
        return float(brentq(residual, lower, upper, xtol=1e-14, rtol=1e-14))


def richardson_extrapolate(values: Sequence[float], refinements: Sequence[float]) -> RichardsonResult:
    """由三个加密层级的样本估计网格收敛极限与收敛阶。

    Parameters
    ----------
    values : Sequence[float]
        各层级的观测值（如固有频率）。
    refinements : Sequence[float]
        与单元尺寸成正比的加密参数，严格单调且为正，例如 ``[4.0, 2.0, 1.0]``。

    Returns
    -------
    RichardsonResult
        ``value`` 为外推极限，``order`` 为经验收敛阶，``constant`` 为
        误差模型中的 ``C``。

    Raises
    ------
    InvalidInputError
        样本数不为 3、长度不一致或加密参数非正/非单调。
    NonConvergentError
        相邻差分为零、差分比非正，或得到的收敛阶不是正有限数。
    """
    v, h = _validate(values, refinements)

    d1 = v[0] - v[1]
    d2 = v[1] - v[2]
    if d1 == 0.0 or d2 == 0.0:
        raise NonConvergentError(
            "相邻样本相等，无法确定收敛阶。", values=v, refinements=h)
    q = d1 / d2
    if q <= 0.0:
        raise NonConvergentError(
            f"差分比 {q:.6g} 非正，样本振荡或不单调。", values=v, refinements=h)

    r = h[0] / h[1]
    uniform = math.isclose(r, h[1] / h[2], rel_tol=_RATIO_RTOL)
    if uniform:
        order = math.log(q) / math.log(r)
    else:
        order = _solve_order(q, h)

    if not math.isfinite(order) or order <= 0.0:
        raise NonConvergentError(
            f"收敛阶 {order:.6g} 不是正数，样本随加密发散。", values=v, refinements=h)

    constant = d2 / (h[1] ** order - h[2] ** order)
    if uniform:
        value = v[2] + (v[2] - v[1]) / (r ** order - 1.0)
    else:
        value = v[2] - constant * h[2] ** order
    return RichardsonResult(value=float(value), order=float(order), constant=float(constant))


def normalized_error(values: Sequence[float], v_true: float) -> np.ndarray:
    """各样本相对于极限值的归一化误差 ``|v_i - v_true| / |v_true|``。"""
    if v_true == 0.0:
        raise ZeroLimitError("极限值为 0，无法归一化误差，请改用绝对误差。")
    values = np.asarray(values, dtype=float)
    return np.abs(values - v_true) / abs(v_true)
