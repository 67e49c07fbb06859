# tests/test_uncertainty.py
"""
Tests for closed-form standard errors and their propagation to quantiles.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import special

from hydrofreq.core.exceptions import (
    DimensionError, EstimationMethodError, NumericWarning, ParameterError
)
from hydrofreq.models.distributions import (
    GammaDistribution, GeneralizedExtremeValue, Gumbel, Normal, Triangular
)
from hydrofreq.models.uncertainty import (
    normal_confidence_interval, numerical_partial_derivatives, parameter_covariance,
    parameter_variance, partial_derivatives, quantile_jacobian, quantile_variance
)


# ---- Parameter Covariance Tests ----

class TestParameterCovariance:
    """Tests for the asymptotic parameter covariances."""

    def test_normal(self):
        """Var(mean) = σ²/n and Var(sd) = σ²/2n, uncorrelated."""
        dist = Normal(100.0, 15.0)
        covariance = parameter_covariance(dist, 50, "MOM")
        assert_allclose(covariance, np.diag([225.0 / 50.0, 225.0 / 100.0]))
        assert_allclose(parameter_variance(dist, 50, "MLE"), [4.5, 2.25])

    def test_gumbel_mle(self):
        dist = Gumbel(100.0, 10.0)
        covariance = dist.parameter_covariance(100, "MLE")
        assert covariance.shape == (2, 2)
        assert_allclose(covariance, covariance.T)
        assert_allclose(covariance[0, 0], 1.1087 * 100.0 / 100.0, rtol=1e-3)

    def test_covariance_positive_definite(self, continuous_distribution):
        """Every maximum likelihood covariance is symmetric positive definite."""
        if not hasattr(continuous_distribution, "parameter_covariance"):
            pytest.skip(f"{continuous_distribution.display_name} has no closed-form covariance")
        covariance = continuous_distribution.parameter_covariance(100, "MLE")
        assert_allclose(covariance, covariance.T, rtol=1e-10, atol=1e-14)
        assert np.all(np.linalg.eigvalsh(covariance) > 0.0)

    def test_scales_with_sample_size(self):
        dist = GeneralizedExtremeValue(100.0, 20.0, -0.1)
        assert_allclose(dist.parameter_covariance(200, "MLE"),
                        dist.parameter_covariance(100, "MLE") / 2.0)

    def test_unsupported_method(self):
        """Gumbel has a covariance for maximum likelihood only."""
        with pytest.raises(EstimationMethodError):
            Gumbel().parameter_covariance(50, "MOM")

    def test_not_capable(self):
        with pytest.raises(EstimationMethodError):
            parameter_covariance(Triangular(), 50, "MOM")

    def test_invalid_parameters(self):
        dist = Normal(0.0, 1.0)
        dist.sigma = -1.0
        with pytest.raises(ParameterError):
            dist.parameter_covariance(50, "MLE")


# ---- Quantile Derivative Tests ----

class TestPartialDerivatives:
    """Tests for quantile partial derivatives."""

    def test_normal(self):
        assert_allclose(partial_derivatives(Normal(100.0, 15.0), 0.9), [1.0, special.ndtri(0.9)])

    @pytest.mark.parametrize("p", [0.1, 0.5, 0.99])
    def test_closed_form_matches_differences(self, continuous_distribution, p):
        """Closed-form gradients agree with differencing inverse_cdf."""
        if not hasattr(continuous_distribution, "partial_derivatives"):
            pytest.skip(f"{continuous_distribution.display_name} has no quantile derivatives")
        closed = continuous_distribution.partial_derivatives(p)
        numerical = numerical_partial_derivatives(continuous_distribution, p)
        assert_allclose(closed, numerical, rtol=1e-4, atol=1e-6)

    def test_differencing_leaves_distribution_unchanged(self):
        dist = GammaDistribution(10.0, 3.0)
        numerical_partial_derivatives(dist, 0.9)
        assert dist.parameters == (10.0, 3.0)

    def test_gamma_uses_differences(self):
        """Without a closed form the derivatives come from differencing."""
        dist = GammaDistribution(10.0, 3.0)
        assert_allclose(partial_derivatives(dist, 0.9), numerical_partial_derivatives(dist, 0.9))
        # Q is proportional to the scale
        assert_allclose(partial_derivatives(dist, 0.9)[0], dist.inverse_cdf(0.9) / 10.0, rtol=1e-6)


# ---- Quantile Variance Tests ----

class TestQuantileVariance:
    """Tests for the delta-method quantile variance."""

    def test_normal(self):
        """Var Q(p) = σ²/n (1 + z²/2)."""
        dist = Normal(100.0, 15.0)
        z = special.ndtri(0.99)
        expected = 225.0 / 40.0 * (1.0 + z * z / 2.0)
        assert_allclose(quantile_variance(dist, 0.99, 40, "MOM"), expected)
        assert_allclose(dist.quantile_variance(0.99, 40, "MLE"), expected)

    def test_grows_into_the_tail(self):
        dist = Gumbel(100.0, 10.0)
        variances = [dist.quantile_variance(p, 50, "MLE") for p in (0.5, 0.9, 0.99)]
        assert np.all(np.diff(variances) > 0.0)

    def test_normal_confidence_interval(self):
        dist = Normal(100.0, 15.0)
        limits = normal_confidence_interval(dist, [0.5, 0.99], 50, "MLE", alpha=0.1)
        assert limits.shape == (2, 2)
        quantiles = dist.inverse_cdf([0.5, 0.99])
        assert np.all(limits[:, 0] < quantiles)
        assert np.all(limits[:, 1] > quantiles)
        half_width = special.ndtri(0.95) * np.sqrt(225.0 / 50.0)
        assert_allclose(limits[0], [100.0 - half_width, 100.0 + half_width])


# ---- Jacobian Tests ----

class TestQuantileJacobian:
    """Tests for the quantile Jacobian."""

    def test_normal_determinant(self):
        """The determinant is z(p2) - z(p1)."""
        result = quantile_jacobian(Normal(100.0, 15.0), [0.1, 0.9])
        assert result.matrix.shape == (2, 2)
        assert_allclose(result.determinant, special.ndtri(0.9) - special.ndtri(0.1))
        assert not result.is_singular

    def test_singular(self):
        """Repeated probabilities give a singular Jacobian, reported rather than raised."""
        with pytest.warns(NumericWarning):
            result = Normal(100.0, 15.0).quantile_jacobian([0.5, 0.5])
        assert result.is_singular
        assert result.determinant == 0.0

    def test_wrong_count(self):
        with pytest.raises(DimensionError):
            quantile_jacobian(GeneralizedExtremeValue(), [0.1, 0.9])
