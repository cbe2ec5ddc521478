"""Tests for the velocity-weighted blend of biased reconstructions."""

import numpy as np
import pytest

from oceanfv.advection.blend import biased_blend, check_blend_width, upwind_biased_product
from oceanfv.errors import ConfigurationError


class TestBiasedBlend:
    """Limits, symmetry and bounds of the blend."""

    @pytest.mark.parametrize("left,right", [(2.0, -3.0), (0.5, 0.5), (-1e3, 7.0)])
    def test_large_positive_velocity_selects_left(self, left, right):
        value = biased_blend(1e6, left, right, 1.0)
        assert value == pytest.approx(left, rel=1e-12, abs=1e-9)

    @pytest.mark.parametrize("left,right", [(2.0, -3.0), (0.5, 0.5), (-1e3, 7.0)])
    def test_large_negative_velocity_selects_right(self, left, right):
        value = biased_blend(-1e6, left, right, 1.0)
        assert value == pytest.approx(right, rel=1e-12, abs=1e-9)

    def test_zero_velocity_averages(self):
        assert biased_blend(0.0, 2.0, -3.0, 1.0) == pytest.approx(-0.5)

    def test_width_sets_transition_scale(self):
        # v = width gives w = (1 + 1/sqrt(2)) / 2
        w = 0.5 * (1.0 + 1.0 / np.sqrt(2.0))
        assert biased_blend(0.3, 1.0, 0.0, 0.3) == pytest.approx(w)
        assert biased_blend(3e-7, 1.0, 0.0, 3e-7) == pytest.approx(w)

    def test_mirror_symmetry(self, rng):
        v = rng.standard_normal(50)
        left, right = rng.standard_normal((2, 50))
        assert np.allclose(biased_blend(v, left, right, 0.2), biased_blend(-v, right, left, 0.2))

    def test_bounded_by_inputs(self, rng):
        v, left, right = rng.standard_normal((3, 200))
        value = biased_blend(v, left, right, 0.1)
        tol = 1e-14
        assert np.all(value >= np.minimum(left, right) - tol)
        assert np.all(value <= np.maximum(left, right) + tol)

    def test_weight_increases_with_velocity(self):
        v = np.linspace(-2.0, 2.0, 41)
        weights = biased_blend(v, 1.0, 0.0, 0.5)
        assert np.all(np.diff(weights) > 0)

    def test_broadcasts_over_arrays(self):
        v = np.array([[-1.0], [0.0], [1.0]])
        left = np.full((1, 4), 1.0)
        value = biased_blend(v, left, 0.0, 1e-6)
        assert value.shape == (3, 4)
        assert np.allclose(value[0], 0.0)
        assert np.allclose(value[1], 0.5)
        assert np.allclose(value[2], 1.0)

    def test_integer_inputs_cast(self):
        assert biased_blend(1, 4, 2, 1) == pytest.approx(3.0 + 1.0 / np.sqrt(2.0))


class TestUpwindBiasedProduct:
    def test_sign_follows_velocity(self):
        assert upwind_biased_product(2.0, 3.0, -5.0, 1e-6) == pytest.approx(6.0)
        assert upwind_biased_product(-2.0, 3.0, -5.0, 1e-6) == pytest.approx(10.0)

    def test_vanishes_with_velocity(self):
        assert upwind_biased_product(0.0, 3.0, -5.0, 1e-6) == 0.0

    def test_continuous_through_zero(self):
        v = np.array([-1e-9, 0.0, 1e-9])
        products = upwind_biased_product(v, 1.0, -1.0, 1e-6)
        assert np.all(np.abs(products) < 1e-11)


class TestBlendWidth:
    @pytest.mark.parametrize("width", [1e-6, 1, "0.5"])
    def test_valid(self, width):
        assert check_blend_width(width) == float(width)

    @pytest.mark.parametrize("width", [0.0, -1e-6, float("nan"), float("inf"), "-inf"])
    def test_invalid(self, width):
        with pytest.raises(ConfigurationError, match="Blend width"):
            check_blend_width(width)
