# tests/test_utils.py
"""
Tests for hydrofreq utility functions.

Covers sample product moments and L-moments, percentiles, plotting
positions, the guarded log transform, interpolation in transformed
probability space and numerical differentiation.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from hypothesis import given, settings, strategies as st
from hypothesis.extra.numpy import arrays
from scipy import stats

from hydrofreq.core.config import reset_config, set_config
from hydrofreq.core.exceptions import DataError, DimensionError, ParameterError
from hydrofreq.core.types import PlottingPosition, Transform
from hydrofreq.utils.differentiation import central_difference, default_step, gradient_2sided
from hydrofreq.utils.interpolation import (
    from_axis, linear_interpolate, monotone_interpolator, strictly_increasing, to_axis
)
from hydrofreq.utils.statistics import (
    as_sample, linear_moments, log_transform, percentile, plotting_positions, product_moments
)


# ---- Sample Statistics Tests ----

class TestSampleStatistics:
    """Tests for sample moments and percentiles."""

    def test_as_sample(self):
        """Samples are flattened to finite float arrays."""
        assert_array_equal(as_sample([[1, 2], [3, 4]]), [1.0, 2.0, 3.0, 4.0])
        with pytest.raises(DataError):
            as_sample([1.0, np.nan])
        with pytest.raises(DataError):
            as_sample([], min_size=1)
        with pytest.raises(DataError):
            as_sample([1.0], min_size=2)

    def test_product_moments_match_scipy(self, normal_sample):
        """Unbiased moments agree with the scipy bias-corrected estimators."""
        mean, sd, skew, kurt = product_moments(normal_sample)
        assert_allclose(mean, np.mean(normal_sample))
        assert_allclose(sd, np.std(normal_sample, ddof=1))
        assert_allclose(skew, stats.skew(normal_sample, bias=False))
        assert_allclose(kurt, stats.kurtosis(normal_sample, bias=False) + 3.0)

    def test_product_moments_small_samples(self):
        """Higher moments are NaN when the sample is too short."""
        moments = product_moments([1.0])
        assert moments[0] == 1.0
        assert np.all(np.isnan(moments[1:]))
        moments = product_moments([1.0, 2.0, 4.0])
        assert np.isfinite(moments[2])
        assert np.isnan(moments[3])

    def test_product_moments_constant_sample(self):
        """A sample with zero spread has skewness 0 and kurtosis 3."""
        assert_array_equal(product_moments([5.0] * 10), [5.0, 0.0, 0.0, 3.0])

    def test_linear_moments_known_values(self):
        """L-moments of a small sample computed by hand."""
        # b0 = 2.5, b1 = 5/3, b2 = 5/4, b3 = 1
        l1, l2, t3, t4 = linear_moments([4.0, 1.0, 3.0, 2.0])
        assert_allclose(l1, 2.5)
        assert_allclose(l2, 2.0 * 5.0 / 3.0 - 2.5)
        assert_allclose(t3, 0.0, atol=1e-12)
        assert_allclose(t4, 0.0, atol=1e-12)

    def test_linear_moments_normal(self, normal_sample):
        """L2 of a normal sample is close to sigma / sqrt(pi)."""
        l1, l2, t3, t4 = linear_moments(normal_sample)
        assert_allclose(l1, np.mean(normal_sample))
        assert_allclose(l2, 15.0 / np.sqrt(np.pi), rtol=0.05)
        assert abs(t3) < 0.05
        assert_allclose(t4, 0.1226, atol=0.03)

    def test_linear_moments_constant_sample(self):
        assert_array_equal(linear_moments([2.0] * 5), [2.0, 0.0, 0.0, 0.0])

    def test_percentile(self):
        """Linear interpolation between order statistics."""
        sample = [5.0, 1.0, 4.0, 2.0, 3.0]
        assert percentile(sample, 0.0) == 1.0
        assert percentile(sample, 1.0) == 5.0
        assert percentile(sample, 0.5) == 3.0
        assert_allclose(percentile(sample, [0.125, 0.875]), [1.5, 4.5])
        assert_allclose(percentile(np.sort(sample), 0.25, is_sorted=True), 2.0)
        with pytest.raises(ParameterError):
            percentile(sample, 1.5)

    @given(arrays(np.float64, st.integers(2, 50),
                  elements=st.floats(-1e6, 1e6, allow_nan=False, allow_infinity=False)),
           st.floats(0.0, 1.0))
    @settings(max_examples=50, deadline=None)
    def test_percentile_matches_numpy(self, sample, k):
        """The percentile agrees with numpy's linear method."""
        assert_allclose(percentile(sample, k), np.quantile(sample, k), rtol=1e-10, atol=1e-6)

    @pytest.mark.parametrize("method, first", [
        (PlottingPosition.WEIBULL, 1.0 / 11.0),
        (PlottingPosition.HAZEN, 0.5 / 10.0),
        ("gringorten", 0.56 / 10.12),
    ])
    def test_plotting_positions(self, method, first):
        positions = plotting_positions(10, method)
        assert positions.shape == (10,)
        assert_allclose(positions[0], first)
        assert_allclose(positions + positions[::-1], 1.0)

    def test_plotting_positions_invalid(self):
        with pytest.raises(ParameterError):
            plotting_positions(0)

    def test_log_transform_floor(self):
        """Non-positive values take the log of the floor instead of failing."""
        result = log_transform([100.0, 0.0, -5.0], base=10.0, floor=0.01)
        assert_allclose(result, [2.0, -2.0, -2.0])
        assert_allclose(log_transform([np.e], base=np.e), [1.0])


# ---- Interpolation Tests ----

class TestInterpolation:
    """Tests for interpolation in transformed space."""

    def test_axis_round_trip(self):
        p = np.array([0.01, 0.5, 0.99])
        assert_allclose(from_axis(to_axis(p, Transform.NORMAL_Z), Transform.NORMAL_Z), p)
        assert_allclose(to_axis([10.0, 100.0], Transform.LOGARITHMIC), [1.0, 2.0])

    def test_linear_interpolate_clamps(self):
        """Points beyond the table take the end values."""
        x_table = np.array([0.0, 10.0])
        y_table = np.array([1.0, 3.0])
        assert_allclose(linear_interpolate([-5.0, 5.0, 15.0], x_table, y_table), [1.0, 2.0, 3.0])

    def test_linear_interpolate_in_z_space(self):
        """Interpolating probabilities in normal z space is exact for a normal CDF."""
        x_table = np.array([-2.0, 2.0])
        p_table = stats.norm.cdf(x_table)
        result = linear_interpolate(0.5, x_table, p_table, y_transform=Transform.NORMAL_Z)
        assert_allclose(result, stats.norm.cdf(0.5))

    def test_strictly_increasing(self):
        x, y = strictly_increasing([0.0, 1.0, 1.0, 2.0, 3.0], [0.0, 0.5, 0.6, 0.5, 0.9])
        assert_array_equal(x, [0.0, 1.0, 3.0])
        assert_array_equal(y, [0.0, 0.5, 0.9])

    def test_monotone_interpolator(self):
        interpolator = monotone_interpolator([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        assert_allclose(interpolator([0.0, 2.0]), [0.0, 4.0])
        values = interpolator(np.linspace(0.0, 2.0, 50))
        assert np.all(np.diff(values) >= 0.0)

    def test_monotone_interpolator_too_few_points(self):
        with pytest.raises(DataError):
            monotone_interpolator([0.0, 0.0], [1.0, 1.0])


# ---- Differentiation Tests ----

class TestDifferentiation:
    """Tests for numerical differentiation."""

    def test_gradient_2sided(self):
        def f(x):
            return x[0] ** 2 + 3.0 * x[0] * x[1]

        assert_allclose(gradient_2sided(f, np.array([1.0, 2.0])), [8.0, 3.0], rtol=1e-6)

    def test_gradient_requires_vector(self):
        with pytest.raises(DimensionError):
            gradient_2sided(lambda x: 0.0, np.ones((2, 2)))

    def test_central_difference(self):
        """Element-wise slopes of a vectorized function."""
        x = np.array([0.5, 1.0, 4.0])
        assert_allclose(central_difference(np.sqrt, x), 0.5 / np.sqrt(x), rtol=1e-6)

    def test_steps_scale_with_magnitude(self):
        steps = default_step(np.array([0.0, 1.0, 1e6]))
        assert steps[0] == steps[1]
        assert_allclose(steps[2], 1e6 * np.sqrt(np.finfo(float).eps))

    def test_fixed_step_from_config(self):
        set_config("numerical", "finite_difference_step", 1e-4)
        try:
            assert_allclose(default_step(np.array([5.0, 500.0])), [1e-4, 1e-4])
        finally:
            reset_config()
