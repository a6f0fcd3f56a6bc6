"""Tests for the prestress sweep of the fundamental frequency."""

import math

import numpy as np
import pytest
from scipy.sparse import diags, identity

from structural_modal.solver import (
    FrameProperties,
    PrestressSweepConfig,
    fundamental_frequency,
    sweep_fundamental_frequency,
)


K = np.diag([4.0, 9.0])
KG = -np.eye(2)
M = np.eye(2)


class TestFundamentalFrequency:

    @pytest.mark.parametrize("load_factor, expected", [
        (0.0, 2.0),
        (3.0, 1.0),
        (-7.0, math.sqrt(11.0)),
    ])
    def test_shifted_frequency(self, load_factor, expected):
        freq = fundamental_frequency(K, KG, M, load_factor)
        assert freq == pytest.approx(expected / (2 * math.pi), rel=1e-12)

    def test_buckled_structure_reports_zero(self):
        assert fundamental_frequency(K, KG, M, 5.0) == 0.0

    def test_sparse_system(self):
        n = 40
        K_sparse = diags(np.linspace(4.0, 100.0, n), format="csr")
        Kg_sparse = -identity(n, format="csr")
        M_sparse = identity(n, format="csr")

        assert fundamental_frequency(K_sparse, Kg_sparse, M_sparse, 3.0) == pytest.approx(
            1.0 / (2 * math.pi), rel=1e-8)
        assert fundamental_frequency(K_sparse, Kg_sparse, M_sparse, 5.0) == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            fundamental_frequency(K, np.eye(3), M, 1.0)


class TestSweep:

    def test_default_load_ranges(self):
        positive, negative = PrestressSweepConfig().load_factors()

        assert positive.size == 400 and negative.size == 400
        assert positive[0] == 0.0 and positive[-1] == 68000.0
        assert negative[0] == -109000.0 and negative[-1] == 0.0

    def test_sweep_and_buckling_bracket(self):
        sweep = sweep_fundamental_frequency(K, KG, M, [0.0, 3.0, 5.0, 6.0])

        np.testing.assert_allclose(
            sweep.frequencies, [2.0 / (2 * math.pi), 1.0 / (2 * math.pi), 0.0, 0.0])
        assert sweep.buckling_bracket() == 5.0

    def test_no_buckling_in_tension(self):
        sweep = sweep_fundamental_frequency(K, KG, M, np.linspace(-2.0, 0.0, 5))

        assert sweep.buckling_bracket() is None
        assert np.all(np.diff(sweep.frequencies) < 0.0)


def test_frame_properties():
    frame = FrameProperties()

    assert frame.area == pytest.approx(1.8e-5)
    assert frame.second_moments[0] == pytest.approx(1.35e-9)
    assert frame.second_moments[1] == pytest.approx(5.4e-13)
    assert frame.shear_modulus == pytest.approx(71240.0e6 / 2.62)
    first, second = frame.member_endpoints()
    np.testing.assert_allclose(first[1], second[0])
