"""
Tests for Richardson extrapolation of mesh-convergence samples.

The error model is v(h) = v_true + C * h^p; samples generated from it exactly
must be recovered to floating-point accuracy.
"""

import math
import warnings

import numpy as np
import pytest

from structural_modal.validation.convergence import (
    ExtrapolationError,
    InvalidInputError,
    NonConvergentError,
    RichardsonResult,
    ZeroLimitError,
    convergence_ratio,
    normalized_error,
    richardson_extrapolate,
)


def _power_law(true_value, constant, order, refinements):
    h = np.asarray(refinements, dtype=float)
    return true_value + constant * h ** order


class TestRichardsonExtrapolate:
    """Closed-form and general-ratio extrapolation."""

    @pytest.mark.parametrize("true_value, constant, order, ratio", [
        (10.0, 3.0, 2.0, 2.0),
        (52.29, -4.5, 1.0, 2.0),
        (-7.25, 0.8, 3.5, 1.5),
        (149.7, 12.0, 0.75, 3.0),
    ])
    def test_exact_on_power_law(self, true_value, constant, order, ratio):
        """Uniform ratio: limit, order and constant are recovered."""
        h = [ratio ** -i for i in range(3)]
        values = _power_law(true_value, constant, order, h)

        result = richardson_extrapolate(values, h)

        assert result.value == pytest.approx(true_value, rel=1e-9)
        assert result.order == pytest.approx(order, rel=1e-9)
        assert result.constant == pytest.approx(constant, rel=1e-7)

    def test_exact_on_power_law_nonuniform_ratio(self):
        """Unequal ratios are handled through the general order equation."""
        h = [3.0, 2.0, 1.0]
        values = _power_law(88.0, 2.5, 1.7, h)

        result = richardson_extrapolate(values, h)

        assert result.value == pytest.approx(88.0, rel=1e-9)
        assert result.order == pytest.approx(1.7, rel=1e-8)
        assert result.constant == pytest.approx(2.5, rel=1e-7)

    def test_widely_spaced_refinements_do_not_overflow(self):
        """A coarse level far from the others keeps the order search finite."""
        h = [1e7, 10.0, 1.0]
        values = _power_law(5.0, 1.0, 1.0, h)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = richardson_extrapolate(values, h)

        assert result.order == pytest.approx(1.0, rel=1e-8)
        assert result.value == pytest.approx(5.0, rel=1e-8)

    @pytest.mark.parametrize("scale", [0.01, 0.5, 7.3, 1e4])
    def test_scaling_refinements_leaves_result_unchanged(self, scale):
        values = [52.9, 52.4, 52.3]
        base = richardson_extrapolate(values, [4.0, 2.0, 1.0])
        scaled = richardson_extrapolate(values, [4.0 * scale, 2.0 * scale, 1.0 * scale])

        assert scaled.order == pytest.approx(base.order, rel=1e-12)
        assert scaled.value == pytest.approx(base.value, rel=1e-12)

    def test_scaling_nonuniform_refinements(self):
        h = np.array([5.0, 2.0, 1.0])
        values = _power_law(1.0, -0.3, 2.2, h)
        base = richardson_extrapolate(values, h)
        scaled = richardson_extrapolate(values, 0.125 * h)

        assert scaled.order == pytest.approx(base.order, rel=1e-9)
        assert scaled.value == pytest.approx(base.value, rel=1e-9)

    def test_increasing_refinements_give_same_result(self):
        forward = richardson_extrapolate([52.9, 52.4, 52.3], [4.0, 2.0, 1.0])
        backward = richardson_extrapolate([52.3, 52.4, 52.9], [1.0, 2.0, 4.0])

        assert backward.value == pytest.approx(forward.value, rel=1e-12)
        assert backward.order == pytest.approx(forward.order, rel=1e-12)

    def test_ring_benchmark_regression(self):
        """Mode 7/8 style data at refinement factors 4, 2, 1."""
        result = richardson_extrapolate([52.9, 52.4, 52.3], [4.0, 2.0, 1.0])

        # q = 0.5 / 0.1 = 5, p = log2(5), v = 52.3 - 0.1 / (5 - 1)
        assert result.order == pytest.approx(2.321928094887362, rel=1e-9)
        assert result.value == pytest.approx(52.275, rel=1e-9)
        assert result.order > 0.0
        assert result.value < 52.3

    def test_result_unpacks_as_pair(self):
        result = richardson_extrapolate([52.9, 52.4, 52.3], [4.0, 2.0, 1.0])
        v_true, p = result

        assert isinstance(result, RichardsonResult)
        assert (v_true, p) == result.as_tuple()
        with pytest.raises(AttributeError):
            result.value = 0.0


class TestNonConvergent:

    @pytest.mark.parametrize("values", [
        [52.4, 52.4, 52.3],
        [52.9, 52.3, 52.3],
        [1.0, 1.0, 1.0],
    ])
    def test_equal_neighbours_raise(self, values):
        with pytest.raises(NonConvergentError):
            richardson_extrapolate(values, [4.0, 2.0, 1.0])

    def test_oscillating_series_carries_diagnostics(self):
        with pytest.raises(NonConvergentError) as info:
            richardson_extrapolate([1.0, 2.0, 1.5], [4.0, 2.0, 1.0])

        err = info.value
        assert err.values == (1.0, 2.0, 1.5)
        assert err.refinements == (4.0, 2.0, 1.0)
        assert err.differences == (-1.0, 0.5)
        assert err.ratio == pytest.approx(-2.0)

    def test_diverging_series_raises(self):
        """Differences growing under refinement give a negative order."""
        with pytest.raises(NonConvergentError):
            richardson_extrapolate([1.0, 1.1, 1.6], [4.0, 2.0, 1.0])

    def test_zero_order_raises(self):
        with pytest.raises(NonConvergentError):
            richardson_extrapolate([3.0, 2.0, 1.0], [4.0, 2.0, 1.0])

    def test_nonuniform_ratio_without_positive_order(self):
        # p -> 0 limit of the ratio is ln(1.5)/ln(2) ~ 0.585
        with pytest.raises(NonConvergentError):
            richardson_extrapolate([1.5, 1.0, 0.0], [3.0, 2.0, 1.0])

    def test_is_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            richardson_extrapolate([1.0, 1.0, 0.5], [4.0, 2.0, 1.0])


class TestInvalidInput:

    @pytest.mark.parametrize("values, refinements", [
        ([1.0, 2.0], [2.0, 1.0]),
        ([1.0, 2.0, 3.0, 4.0], [8.0, 4.0, 2.0, 1.0]),
        ([1.0, 2.0, 3.0], [2.0, 1.0]),
        ([1.0, 2.0, 3.0], [4.0, 0.0, -1.0]),
        ([1.0, 2.0, 3.0], [4.0, 1.0, 2.0]),
        ([1.0, 2.0, 3.0], [2.0, 2.0, 1.0]),
        ([1.0, math.nan, 3.0], [4.0, 2.0, 1.0]),
        ([1.0, 2.0, 3.0], [math.inf, 2.0, 1.0]),
    ])
    def test_malformed_series_raise(self, values, refinements):
        with pytest.raises(InvalidInputError):
            richardson_extrapolate(values, refinements)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            richardson_extrapolate([1.0, 2.0], [2.0, 1.0])

    def test_errors_share_base_class(self):
        assert issubclass(InvalidInputError, ExtrapolationError)
        assert issubclass(NonConvergentError, ExtrapolationError)
        assert issubclass(ZeroLimitError, ExtrapolationError)


class TestNormalizedError:

    def test_relative_errors(self):
        errors = normalized_error([90.0, 95.0, 99.0], 100.0)
        np.testing.assert_allclose(errors, [0.1, 0.05, 0.01], rtol=1e-12)

    def test_negative_limit_uses_magnitude(self):
        errors = normalized_error([-90.0, -110.0], -100.0)
        np.testing.assert_allclose(errors, [0.1, 0.1], rtol=1e-12)

    def test_zero_limit_raises(self):
        with pytest.raises(ZeroLimitError):
            normalized_error([0.5, 0.25, 0.125], 0.0)
        with pytest.raises(ZeroDivisionError):
            normalized_error([1.0], 0.0)


def test_convergence_ratio():
    ratios = convergence_ratio([52.9, 52.4, 52.3, 52.28])
    np.testing.assert_allclose(ratios, [5.0, 5.0], rtol=1e-9)


def test_convergence_ratio_flat_tail_is_infinite():
    ratios = convergence_ratio([2.0, 1.0, 1.0])
    assert np.isinf(ratios[-1])


def test_convergence_ratio_needs_three_points():
    with pytest.raises(InvalidInputError):
        convergence_ratio([1.0, 2.0])
