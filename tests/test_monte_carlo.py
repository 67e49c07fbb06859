# tests/test_monte_carlo.py
"""
Tests for Monte Carlo confidence intervals.

Covers parameter realizations, exclusion of invalid realizations, percentile
bands indexed by exceedance probability and the expected-probability curve.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from hydrofreq.core.exceptions import EstimationMethodError, ParameterError, ProbabilityError
from hydrofreq.models.distributions import (
    GeneralizedExtremeValue, Gumbel, LogNormal, Normal, PearsonTypeIII, Triangular
)
from hydrofreq.models.uncertainty import (
    distributions_from_parameter_sets, expected_probabilities, expected_probability_curve,
    monte_carlo_analysis, monte_carlo_confidence_intervals, normal_parameter_realizations
)

QUANTILES = np.array([0.5, 0.1, 0.01])
PERCENTILES = np.array([0.05, 0.5, 0.95])


# ---- Parameter Realization Tests ----

class TestParameterRealizations:
    """Tests for drawing parameter sets."""

    def test_normal_realizations(self):
        sets = normal_parameter_realizations(100.0, 15.0, 30, 5000, rng=1)
        assert sets.shape == (5000, 2)
        assert np.all(sets[:, 1] > 0.0)
        assert_allclose(np.mean(sets[:, 0]), 100.0, atol=0.5)
        assert_allclose(np.std(sets[:, 0]), 15.0 / np.sqrt(30.0), rtol=0.05)

    def test_normal_realizations_reproducible(self):
        assert_array_equal(normal_parameter_realizations(0.0, 1.0, 20, 10, rng=3),
                           normal_parameter_realizations(0.0, 1.0, 20, 10, rng=3))

    def test_normal_realizations_need_two_observations(self):
        with pytest.raises(ParameterError):
            normal_parameter_realizations(0.0, 1.0, 1, 10)

    def test_multivariate_realizations(self):
        dist = Gumbel(100.0, 10.0)
        sets = dist.sample_parameter_realizations(50, 4000, rng=np.random.default_rng(2))
        assert sets.shape == (4000, 2)
        assert_allclose(np.var(sets, axis=0, ddof=1), dist.parameter_variance(50, "MLE"), rtol=0.1)

    def test_log_normal_uses_normal_theory(self):
        dist = LogNormal(3.0, 0.25)
        sets = dist.sample_parameter_realizations(30, 10, rng=3)
        assert_array_equal(sets, normal_parameter_realizations(3.0, 0.25, 30, 10, rng=3))

    def test_invalid_rows_excluded(self):
        """Rows with NaN or invalid parameters give None."""
        realized = distributions_from_parameter_sets(
            Normal(), np.array([[0.0, 1.0], [0.0, -1.0], [np.nan, 1.0]])
        )
        assert isinstance(realized[0], Normal)
        assert realized[1] is None
        assert realized[2] is None

    def test_realizations_are_independent_clones(self):
        dist = Normal(0.0, 1.0)
        realized = distributions_from_parameter_sets(dist, np.array([[1.0, 2.0], [3.0, 4.0]]))
        assert realized[0] is not dist
        assert dist.parameters == (0.0, 1.0)
        assert realized[1].parameters == (3.0, 4.0)


# ---- Confidence Interval Tests ----

class TestConfidenceIntervals:
    """Tests for Monte Carlo confidence bands."""

    @pytest.mark.parametrize("dist", [Normal(100.0, 15.0), Gumbel(100.0, 10.0),
                                      PearsonTypeIII(100.0, 20.0, 0.5)],
                             ids=["normal", "gumbel", "pearson_iii"])
    def test_single_realization_is_point_estimate(self, dist):
        """With one realization every percentile equals the parent quantile."""
        intervals = monte_carlo_confidence_intervals(dist, 30, 1, QUANTILES, PERCENTILES)
        expected = dist.inverse_cdf(1.0 - QUANTILES)
        for column in intervals.T:
            assert_allclose(column, expected)

    def test_shape_and_ordering(self):
        dist = Normal(100.0, 15.0)
        intervals = dist.monte_carlo_confidence_intervals(30, 2000, QUANTILES, PERCENTILES, seed=5)
        assert intervals.shape == (3, 3)
        assert np.all(np.diff(intervals, axis=1) > 0.0)
        # Rarer exceedances give larger quantiles
        assert np.all(np.diff(intervals[:, 1]) > 0.0)

    def test_median_near_parent(self):
        dist = Gumbel(100.0, 10.0)
        intervals = monte_carlo_confidence_intervals(dist, 50, 4000, QUANTILES, [0.5], seed=8)
        assert_allclose(intervals[:, 0], dist.inverse_cdf(1.0 - QUANTILES), rtol=0.02)

    def test_reproducible(self):
        dist = GeneralizedExtremeValue(100.0, 20.0, -0.1)
        first = monte_carlo_confidence_intervals(dist, 40, 500, QUANTILES, PERCENTILES, seed=9)
        second = monte_carlo_confidence_intervals(dist, 40, 500, QUANTILES, PERCENTILES, seed=9)
        assert_array_equal(first, second)

    def test_bands_narrow_with_record_length(self):
        dist = Normal(100.0, 15.0)
        short = monte_carlo_confidence_intervals(dist, 20, 2000, [0.01], [0.05, 0.95], seed=4)
        long = monte_carlo_confidence_intervals(dist, 200, 2000, [0.01], [0.05, 0.95], seed=4)
        assert np.diff(long[0]) < np.diff(short[0])

    def test_not_capable(self):
        with pytest.raises(EstimationMethodError):
            monte_carlo_confidence_intervals(Triangular(), 30, 100, QUANTILES, PERCENTILES)

    def test_invalid_arguments(self):
        dist = Normal(100.0, 15.0)
        with pytest.raises(ParameterError):
            monte_carlo_confidence_intervals(dist, 30, 0, QUANTILES, PERCENTILES)
        with pytest.raises(ProbabilityError):
            monte_carlo_confidence_intervals(dist, 30, 100, [1.5], PERCENTILES)


# ---- Expected Probability Tests ----

class TestExpectedProbability:
    """Tests for the expected-probability curve."""

    def test_identical_distributions(self):
        """Averaging identical CDFs returns the CDF."""
        dist = Normal(100.0, 15.0)
        x = np.array([80.0, 100.0, 130.0])
        assert_allclose(expected_probabilities([dist, dist.clone(), None], x), dist.cdf(x))

    def test_curve_of_single_distribution(self):
        dist = Gumbel(100.0, 10.0)
        curve = expected_probability_curve([dist], QUANTILES)
        assert_allclose(curve, dist.inverse_cdf(1.0 - QUANTILES), rtol=1e-3)

    def test_curve_exceeds_point_estimate_in_tail(self):
        """Parameter uncertainty fattens the upper tail of the expected curve."""
        dist = Normal(100.0, 15.0)
        result = monte_carlo_analysis(dist, 15, 1000, [0.01, 0.001], PERCENTILES, seed=12)
        assert np.all(result.expected_curve > dist.inverse_cdf([0.99, 0.999]))

    def test_all_invalid(self):
        assert np.all(np.isnan(expected_probabilities([None, None], [1.0, 2.0])))
        assert np.all(np.isnan(expected_probability_curve([None], QUANTILES)))


# ---- Analysis Result Tests ----

class TestMonteCarloAnalysis:
    """Tests for the combined analysis result."""

    def test_result(self):
        dist = Normal(100.0, 15.0)
        result = dist.monte_carlo_analysis(30, 500, QUANTILES, PERCENTILES, seed=6)
        assert result.parameter_sets.shape == (500, 2)
        assert result.sample_size == 30
        assert result.metadata["realizations"] == 500
        assert result.metadata["failed"] == 0
        assert result.expected_curve.shape == (3,)
        frame = result.to_dataframe()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["0.05", "0.5", "0.95", "Expected"]
        assert "Realizations: 500" in result.summary()

    def test_matches_confidence_intervals(self):
        dist = Gumbel(100.0, 10.0)
        result = monte_carlo_analysis(dist, 30, 300, QUANTILES, PERCENTILES, seed=2)
        intervals = monte_carlo_confidence_intervals(dist, 30, 300, QUANTILES, PERCENTILES, seed=2)
        assert_array_equal(result.confidence_intervals, intervals)
