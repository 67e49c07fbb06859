# tests/test_distributions.py
"""
Tests for the univariate distribution variants.

Covers the shared parameter lifecycle (lazy validation, arity checks,
independent clones), the CDF and quantile contracts checked as properties over
every continuous variant, degenerate point supports, closed-form moments
against numerical integration, the tabular and kernel variants and the
factory.
"""

import numpy as np
import pytest
from hypothesis import HealthCheck, given, settings, strategies as st
from numpy.testing import assert_allclose, assert_array_equal
from scipy import integrate, stats

from hydrofreq.core.exceptions import DimensionError, ParameterError, ProbabilityError
from hydrofreq.core.types import DistributionType, KernelType, ParameterEstimationMethod, Transform
from hydrofreq.models.distributions import (
    DISTRIBUTION_CLASSES, Deterministic, EmpiricalDistribution, GammaDistribution,
    GeneralizedExtremeValue, Gumbel, KernelDensity, Logistic, LogNormal, LogPearsonTypeIII,
    Normal, PearsonTypeIII, Pert, Triangular, Uniform, Weibull,
    available_distributions, create_distribution, silverman_bandwidth
)

fixture_settings = settings(
    max_examples=40,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture]
)

interior_probability = st.floats(1e-6, 1.0 - 1e-6)


# ---- Distribution Contract Tests ----

class TestDistributionContract:
    """Properties every continuous distribution must satisfy."""

    @given(st.lists(interior_probability, min_size=2, max_size=10))
    @fixture_settings
    def test_cdf_monotone_and_bounded(self, continuous_distribution, probabilities):
        """The CDF is non-decreasing and stays within [0, 1]."""
        x = np.sort(continuous_distribution.inverse_cdf(np.array(probabilities)))
        x = np.concatenate([[x[0] - 1.0], x, [x[-1] + 1.0]])
        values = continuous_distribution.cdf(x)
        assert np.all(values >= 0.0)
        assert np.all(values <= 1.0)
        assert np.all(np.diff(values) >= -1e-12)

    @given(interior_probability)
    @fixture_settings
    def test_quantile_round_trip(self, continuous_distribution, p):
        """CDF(InverseCDF(p)) recovers p."""
        x = continuous_distribution.inverse_cdf(p)
        assert abs(continuous_distribution.cdf(x) - p) < 1e-9

    def test_boundary_quantiles(self, continuous_distribution):
        """The 0 and 1 quantiles are the support bounds."""
        assert continuous_distribution.inverse_cdf(0.0) == continuous_distribution.minimum
        assert continuous_distribution.inverse_cdf(1.0) == continuous_distribution.maximum

    def test_probability_out_of_range(self, continuous_distribution):
        with pytest.raises(ProbabilityError):
            continuous_distribution.inverse_cdf(1.5)
        with pytest.raises(ProbabilityError):
            continuous_distribution.inverse_cdf([0.5, -0.01])

    def test_array_shape_preserved(self, continuous_distribution):
        p = np.array([[0.1, 0.5], [0.9, 0.99]])
        x = continuous_distribution.inverse_cdf(p)
        assert x.shape == (2, 2)
        assert continuous_distribution.cdf(x).shape == (2, 2)
        assert isinstance(continuous_distribution.cdf(float(x[0, 0])), float)

    def test_pdf_nonnegative(self, continuous_distribution):
        x = continuous_distribution.inverse_cdf(np.linspace(0.01, 0.99, 25))
        assert np.all(continuous_distribution.pdf(x) >= 0.0)

    def test_clone_is_independent(self, continuous_distribution):
        """Changing a clone's parameters leaves the original untouched."""
        original = continuous_distribution.parameters
        copy = continuous_distribution.clone()
        assert copy == continuous_distribution
        assert copy is not continuous_distribution
        copy.set_parameters(np.asarray(original) * 1.1 + 0.1)
        assert continuous_distribution.parameters == original

    def test_wrong_arity_raises(self, continuous_distribution):
        n = continuous_distribution.number_of_parameters
        with pytest.raises(DimensionError):
            continuous_distribution.set_parameters(np.ones(n + 1))

    def test_random_values_reproducible(self, continuous_distribution):
        first = continuous_distribution.generate_random_values(50, seed=7)
        second = continuous_distribution.generate_random_values(50, seed=7)
        assert first.shape == (50,)
        assert_array_equal(first, second)

    def test_random_values_invalid_size(self, continuous_distribution):
        with pytest.raises(ParameterError):
            continuous_distribution.generate_random_values(0)


# ---- Parameter Lifecycle Tests ----

class TestParameterLifecycle:
    """Tests for recorded validation and raising at the point of use."""

    def test_invalid_parameter_recorded_not_raised(self):
        """Setting a bad value records the failure; evaluation raises it."""
        dist = Normal(0.0, 1.0)
        dist.sigma = -1.0
        assert not dist.parameters_valid
        assert "standard_deviation" in dist.parameter_state.reason
        with pytest.raises(ParameterError) as info:
            dist.cdf(0.0)
        assert info.value.param_name == "standard_deviation"

    def test_repair_restores_validity(self):
        dist = Normal(0.0, 1.0)
        dist.sigma = 0.0
        assert not dist.parameters_valid
        dist.sigma = 2.0
        assert dist.parameters_valid
        assert_allclose(dist.cdf(2.0), stats.norm.cdf(1.0))

    def test_ordering_error_names_mode(self):
        """Moving the minimum above the mode flags the mode."""
        dist = Triangular(0.0, 5.0, 10.0)
        dist.min = 7.0
        assert not dist.parameters_valid
        with pytest.raises(ParameterError) as info:
            dist.inverse_cdf(0.5)
        assert info.value.param_name == "mode"

    def test_inverted_uniform(self):
        dist = Uniform(0.0, 10.0)
        dist.set_parameters([5.0, 1.0])
        with pytest.raises(ParameterError):
            dist.pdf(3.0)

    def test_probability_checked_before_parameters(self):
        dist = Normal(0.0, 1.0)
        dist.sigma = -1.0
        with pytest.raises(ProbabilityError):
            dist.inverse_cdf(2.0)

    def test_log_likelihood_floor(self):
        """Invalid or impossible evaluations give the most negative float."""
        dist = Uniform(0.0, 1.0)
        assert dist.log_likelihood([0.5, 2.0]) == -np.finfo(float).max

    def test_log_likelihood_matches_scipy(self, normal_sample):
        dist = Normal(100.0, 15.0)
        expected = np.sum(stats.norm.logpdf(normal_sample, 100.0, 15.0))
        assert_allclose(dist.log_likelihood(normal_sample), expected)

    def test_censored_likelihoods(self):
        dist = Normal(0.0, 1.0)
        assert_allclose(dist.left_censored_log_likelihood(1.0, 3), 3.0 * stats.norm.logcdf(1.0))
        assert_allclose(dist.right_censored_log_likelihood(1.0, 2), 2.0 * stats.norm.logsf(1.0))

    def test_interval_likelihood(self):
        dist = Normal(0.0, 1.0)
        expected = (np.log(stats.norm.cdf(1.0) - stats.norm.cdf(-1.0))
                    + np.log(stats.norm.cdf(2.0) - stats.norm.cdf(0.0)))
        assert_allclose(dist.interval_log_likelihood([-1.0, 0.0], [1.0, 2.0]), expected)
        # A zero-width interval has no mass
        assert dist.interval_log_likelihood(1.0, 1.0) == -np.finfo(float).max

    def test_derived_functions(self):
        dist = Gumbel(100.0, 10.0)
        x = np.array([95.0, 110.0, 140.0])
        assert_allclose(dist.ccdf(x), 1.0 - dist.cdf(x))
        assert_allclose(dist.log_pdf(x), np.log(dist.pdf(x)))
        assert_allclose(dist.log_cdf(x), np.log(dist.cdf(x)))
        assert_allclose(dist.log_ccdf(x), np.log1p(-dist.cdf(x)))
        assert_allclose(dist.hazard(x), dist.pdf(x) / (1.0 - dist.cdf(x)))
        assert_allclose(Normal(100.0, 15.0).coefficient_of_variation, 0.15)


# ---- Degenerate Support Tests ----

class TestDegenerateSupport:
    """Point supports where the minimum equals the maximum."""

    @pytest.mark.parametrize("dist", [
        Triangular(5.0, 5.0, 5.0),
        Pert(5.0, 5.0, 5.0),
        Uniform(5.0, 5.0),
    ], ids=["triangular", "pert", "uniform"])
    def test_point_support(self, dist):
        """The density is zero, the CDF one everywhere and every quantile the point."""
        assert dist.parameters_valid
        assert_array_equal(dist.pdf([4.0, 5.0, 6.0]), [0.0, 0.0, 0.0])
        assert_array_equal(dist.cdf([4.0, 5.0, 6.0]), [1.0, 1.0, 1.0])
        assert dist.cdf(-1e6) == 1.0
        assert_array_equal(dist.inverse_cdf([0.0, 0.3, 1.0]), [5.0, 5.0, 5.0])

    @pytest.mark.parametrize("dist, edge", [
        (Pert(0.0, 0.0, 1.0), 0.0),
        (Pert(0.0, 1.0, 1.0), 1.0),
    ], ids=["mode_at_min", "mode_at_max"])
    def test_pert_mode_on_edge(self, dist, edge):
        """A mode on the support edge gives a finite density there."""
        assert_allclose(dist.pdf(edge), 5.0)
        assert np.isfinite(dist.log_pdf(edge))
        assert np.all(np.isfinite(dist.pdf([0.0, 0.5, 1.0])))

    def test_kernel_density_all_equal(self):
        """An all-equal sample is a near point mass at the common value."""
        dist = KernelDensity([3.0, 3.0, 3.0, 3.0])
        assert dist.parameters_valid
        assert 0.0 < dist.bandwidth < 1e-6
        assert_allclose(dist.cdf([2.0, 3.0, 4.0]), [0.0, 0.5, 1.0])
        assert_allclose(dist.inverse_cdf(0.5), 3.0)
        assert_allclose(dist.mean, 3.0)

    def test_kernel_density_resampled_all_equal(self, kernel_density):
        kernel_density.set_sample([7.0, 7.0, 7.0])
        assert kernel_density.parameters_valid
        assert_allclose(kernel_density.cdf(7.0), 0.5)

    def test_deterministic(self):
        dist = Deterministic(3.5)
        assert dist.pdf(3.5) == 1.0
        assert dist.pdf(3.0) == 0.0
        assert_array_equal(dist.cdf([3.0, 3.5, 4.0]), [0.0, 1.0, 1.0])
        assert dist.inverse_cdf(0.25) == 3.5
        assert dist.mean == 3.5
        assert dist.standard_deviation == 0.0
        assert np.isnan(dist.skewness)
        assert np.isnan(dist.kurtosis)

    def test_deterministic_invalid(self):
        dist = Deterministic(np.nan)
        assert not dist.parameters_valid
        with pytest.raises(ParameterError):
            dist.cdf(0.0)


# ---- Closed-Form Value Tests ----

class TestClosedFormValues:
    """Known values of individual distributions."""

    def test_uniform(self):
        dist = Uniform(0.0, 10.0)
        assert_allclose(dist.cdf(5.0), 0.5)
        assert_allclose(dist.inverse_cdf(0.5), 5.0)
        assert_allclose(dist.pdf(5.0), 0.1)
        assert dist.pdf(11.0) == 0.0
        assert_allclose(dist.standard_deviation, 10.0 / np.sqrt(12.0))

    def test_gumbel_moments(self):
        """Gumbel mean is ξ + γα and median ξ - α ln ln 2."""
        dist = Gumbel(100.0, 10.0)
        assert_allclose(dist.mean, 105.7722, atol=1e-4)
        assert_allclose(dist.median, 103.6651, atol=1e-4)
        assert_allclose(dist.skewness, 1.1395, atol=1e-4)
        assert_allclose(dist.kurtosis, 5.4, atol=1e-10)

    def test_normal_matches_scipy(self):
        dist = Normal(100.0, 15.0)
        x = np.array([70.0, 100.0, 130.0])
        assert_allclose(dist.pdf(x), stats.norm.pdf(x, 100.0, 15.0))
        assert_allclose(dist.cdf(x), stats.norm.cdf(x, 100.0, 15.0))

    def test_gev_near_zero_shape_matches_gumbel(self):
        """The GEV with κ close to zero is continuous with the Gumbel."""
        gev = GeneralizedExtremeValue(100.0, 10.0, 1e-9)
        gumbel = Gumbel(100.0, 10.0)
        x = np.array([80.0, 100.0, 150.0])
        assert_allclose(gev.cdf(x), gumbel.cdf(x), rtol=1e-7)
        assert_allclose(gev.inverse_cdf(0.99), gumbel.inverse_cdf(0.99), rtol=1e-7)

    def test_gev_bounded_upper_tail(self):
        """Positive κ bounds the support above at ξ + α/κ."""
        gev = GeneralizedExtremeValue(100.0, 20.0, 0.2)
        assert_allclose(gev.maximum, 200.0)
        assert gev.cdf(250.0) == 1.0

    def test_pearson_zero_skew_is_normal(self):
        p3 = PearsonTypeIII(100.0, 20.0, 0.0)
        normal = Normal(100.0, 20.0)
        x = np.array([60.0, 100.0, 140.0])
        assert_allclose(p3.cdf(x), normal.cdf(x), rtol=1e-10)

    def test_pearson_matches_scipy(self):
        dist = PearsonTypeIII(100.0, 20.0, 0.6)
        x = np.array([80.0, 100.0, 150.0])
        assert_allclose(dist.cdf(x), stats.pearson3.cdf(x, 0.6, loc=100.0, scale=20.0), rtol=1e-8)

    def test_log_pearson_zero_skew_median(self):
        """With zero skew the median is the base raised to the mean of the logs."""
        dist = LogPearsonTypeIII(3.0, 0.2, 0.0)
        assert_allclose(dist.cdf(1000.0), 0.5)
        assert_allclose(dist.inverse_cdf(0.5), 1000.0)

    def test_gamma_matches_scipy(self):
        dist = GammaDistribution(10.0, 3.0)
        x = np.array([5.0, 30.0, 80.0])
        assert_allclose(dist.cdf(x), stats.gamma.cdf(x, 3.0, scale=10.0), rtol=1e-10)

    def test_weibull_matches_scipy(self):
        dist = Weibull(10.0, 2.0)
        x = np.array([1.0, 10.0, 25.0])
        assert_allclose(dist.cdf(x), stats.weibull_min.cdf(x, 2.0, scale=10.0), rtol=1e-10)

    def test_conditional_expected_value(self):
        """The upper-tail mean of the standard normal above zero is sqrt(2/pi)."""
        dist = Normal(0.0, 1.0)
        assert_allclose(dist.conditional_expected_value(0.5), np.sqrt(2.0 / np.pi), rtol=1e-5)


# ---- Moment Tests ----

class TestMoments:
    """Closed-form moments against integration of the density."""

    @pytest.mark.parametrize("dist", [
        Normal(100.0, 15.0),
        GammaDistribution(10.0, 3.0),
        Weibull(10.0, 2.0),
        Logistic(50.0, 5.0),
        Triangular(2.0, 5.0, 11.0),
        Pert(2.0, 5.0, 11.0),
        Uniform(0.0, 10.0),
    ], ids=["normal", "gamma", "weibull", "logistic", "triangular", "pert", "uniform"])
    def test_central_moments(self, dist):
        expected = [dist.mean, dist.standard_deviation, dist.skewness, dist.kurtosis]
        assert_allclose(dist.central_moments(), expected, rtol=1e-5, atol=1e-6)

    def test_moment_conversions_are_pure(self):
        """Conversions never modify the instance."""
        dist = GeneralizedExtremeValue(100.0, 20.0, -0.1)
        moments = dist.moments_from_parameters([50.0, 5.0, 0.1])
        parameters = dist.parameters_from_moments(moments)
        assert dist.parameters == (100.0, 20.0, -0.1)
        assert_allclose(parameters, [50.0, 5.0, 0.1], rtol=1e-6)

    def test_gumbel_linear_moments(self):
        """Gumbel L-moments: λ2 = α ln 2, τ3 ≈ 0.1699, τ4 ≈ 0.1504."""
        l1, l2, t3, t4 = Gumbel().linear_moments_from_parameters([100.0, 10.0])
        assert_allclose(l1, 105.7722, atol=1e-4)
        assert_allclose(l2, 10.0 * np.log(2.0))
        assert_allclose(t3, 0.1699, atol=1e-4)
        assert_allclose(t4, 0.1504, atol=1e-4)

    def test_pearson_linear_moments_inverse(self):
        dist = PearsonTypeIII()
        moments = dist.linear_moments_from_parameters([100.0, 20.0, 0.8])
        assert_allclose(dist.parameters_from_linear_moments(moments), [100.0, 20.0, 0.8], rtol=1e-5)


# ---- Empirical Distribution Tests ----

class TestEmpiricalDistribution:
    """Tests for the tabular distribution."""

    def test_table_points(self, empirical_distribution):
        """The CDF passes through the table."""
        assert_allclose(empirical_distribution.cdf([100.0, 210.0, 480.0]), [0.01, 0.5, 0.99])
        assert_allclose(empirical_distribution.inverse_cdf([0.2, 0.8]), [150.0, 300.0])

    def test_outside_table(self, empirical_distribution):
        assert empirical_distribution.cdf(50.0) == 0.0
        assert empirical_distribution.cdf(500.0) == 1.0
        assert empirical_distribution.inverse_cdf(0.001) == 100.0
        assert empirical_distribution.inverse_cdf(1.0) == 480.0

    def test_round_trip_inside_table(self, empirical_distribution):
        p = np.linspace(0.02, 0.98, 15)
        assert_allclose(empirical_distribution.cdf(empirical_distribution.inverse_cdf(p)), p, atol=1e-9)

    def test_moments(self, empirical_distribution):
        assert 100.0 < empirical_distribution.mean < 480.0
        assert empirical_distribution.standard_deviation > 0.0
        assert np.isnan(empirical_distribution.mode)

    def test_from_sample(self):
        dist = EmpiricalDistribution.from_sample([3.0, 1.0, 2.0, 4.0])
        assert_array_equal(dist.x_values, [1.0, 2.0, 3.0, 4.0])
        assert_allclose(dist.probabilities, [0.2, 0.4, 0.6, 0.8])
        assert dist.number_of_parameters == 8

    def test_descending_table_invalid(self):
        dist = EmpiricalDistribution([3.0, 2.0, 1.0], [0.1, 0.5, 0.9])
        assert not dist.parameters_valid
        with pytest.raises(ParameterError):
            dist.cdf(2.0)

    def test_logarithmic_transform_requires_positive_values(self):
        dist = EmpiricalDistribution([0.0, 10.0, 100.0], [0.1, 0.5, 0.9])
        assert dist.parameters_valid
        dist.x_transform = Transform.LOGARITHMIC
        assert not dist.parameters_valid

    def test_logarithmic_interpolation(self):
        """With log x and z p transforms, a log-normal table interpolates exactly."""
        dist = EmpiricalDistribution([10.0, 1000.0], stats.norm.cdf([-1.0, 1.0]),
                                     x_transform=Transform.LOGARITHMIC)
        assert_allclose(dist.cdf(100.0), 0.5)

    def test_table_shape_errors(self):
        with pytest.raises(DimensionError):
            EmpiricalDistribution([1.0, 2.0, 3.0], [0.1, 0.9])
        dist = EmpiricalDistribution()
        with pytest.raises(DimensionError):
            dist.set_parameters([1.0, 2.0, 3.0])


# ---- Kernel Density Tests ----

class TestKernelDensity:
    """Tests for the kernel density distribution."""

    def test_silverman_bandwidth(self):
        sample = np.array([1.0, 2.0, 4.0, 7.0, 11.0])
        expected = np.std(sample, ddof=1) * (4.0 / 15.0) ** 0.2
        assert_allclose(silverman_bandwidth(sample), expected)
        assert_allclose(KernelDensity(sample).bandwidth, expected)

    def test_compact_support(self, kernel_density):
        """Compact kernels bound the support one bandwidth past the extremes."""
        sample = kernel_density.sample
        assert_allclose(kernel_density.minimum, sample.min() - kernel_density.bandwidth)
        assert kernel_density.cdf(kernel_density.minimum) == 0.0
        assert_allclose(kernel_density.cdf(kernel_density.maximum), 1.0)

    def test_gaussian_density(self):
        sample = np.array([1.0, 2.0, 4.0])
        dist = KernelDensity(sample, kernel=KernelType.GAUSSIAN, bandwidth=0.5)
        x = np.array([0.0, 2.5, 5.0])
        expected = np.mean(stats.norm.pdf((x[:, None] - sample) / 0.5), axis=1) / 0.5
        assert_allclose(dist.pdf(x), expected)
        assert dist.minimum == -np.inf

    @pytest.mark.parametrize("kernel", list(KernelType))
    def test_quantile_round_trip(self, kernel):
        dist = KernelDensity([1.0, 2.0, 4.0, 7.0, 11.0], kernel=kernel)
        p = np.array([0.05, 0.3, 0.5, 0.9])
        assert_allclose(dist.cdf(dist.inverse_cdf(p)), p, atol=1e-9)

    def test_moments_match_integration(self):
        """Mixture moments agree with integrating the density."""
        dist = KernelDensity([1.0, 2.0, 4.0, 7.0, 11.0], bandwidth=1.5)
        expected = [dist.mean, dist.standard_deviation, dist.skewness, dist.kurtosis]
        assert_allclose(dist.central_moments(), expected, rtol=1e-5, atol=1e-6)

    def test_density_integrates_to_one(self):
        dist = KernelDensity([1.0, 2.0, 4.0, 7.0, 11.0], bandwidth=1.5)
        total, _ = integrate.quad(dist.pdf, dist.minimum, dist.maximum,
                                  points=[1.0, 2.0, 4.0, 7.0, 11.0], limit=200)
        assert_allclose(total, 1.0, rtol=1e-6)

    def test_invalid_bandwidth(self, kernel_density):
        kernel_density.bandwidth = -1.0
        assert not kernel_density.parameters_valid
        with pytest.raises(ParameterError):
            kernel_density.pdf(50.0)

    def test_set_sample(self, kernel_density):
        kernel_density.set_sample([1.0, 2.0, 3.0], bandwidth=0.25)
        assert kernel_density.sample_size == 3
        assert kernel_density.bandwidth == 0.25
        assert_allclose(kernel_density.mean, 2.0)

    def test_equality_includes_sample(self):
        first = KernelDensity([1.0, 2.0, 3.0], bandwidth=0.5)
        second = KernelDensity([1.0, 2.0, 4.0], bandwidth=0.5)
        assert first != second
        assert first == first.clone()


# ---- Capability Tests ----

class TestCapabilities:
    """Tests for the capability declarations."""

    def test_gumbel_capabilities(self):
        dist = Gumbel()
        assert dist.supports("MOM")
        assert dist.supports("LMOM")
        assert dist.supports(ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        assert not dist.supports("METHOD_OF_PERCENTILES")

    def test_pert_capabilities(self):
        assert Pert().capabilities == [ParameterEstimationMethod.METHOD_OF_PERCENTILES]

    def test_tabular_variants_have_no_estimators(self, empirical_distribution, kernel_density):
        assert empirical_distribution.capabilities == []
        assert kernel_density.capabilities == []


# ---- Factory Tests ----

class TestFactory:
    """Tests for distribution creation by name."""

    def test_available(self):
        names = available_distributions()
        assert len(names) == 17
        assert "Gumbel" in names
        assert set(DISTRIBUTION_CLASSES) == set(DistributionType)

    @pytest.mark.parametrize("name, cls", [
        ("Gumbel", Gumbel),
        ("GEV", GeneralizedExtremeValue),
        ("lp3", LogPearsonTypeIII),
        ("PEARSON_TYPE_III", PearsonTypeIII),
        ("log-normal", LogNormal),
        (DistributionType.PERT, Pert),
    ])
    def test_create(self, name, cls):
        assert isinstance(create_distribution(name), cls)

    def test_create_with_parameters(self):
        dist = create_distribution("LP3", 3.0, 0.2, 0.1)
        assert dist.parameters == (3.0, 0.2, 0.1)
        assert dist.distribution_type is DistributionType.LOG_PEARSON_TYPE_III

    def test_kernel_density_needs_sample(self):
        dist = create_distribution("KDE", [1.0, 2.0, 3.0])
        assert isinstance(dist, KernelDensity)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_distribution("Cauchy")

    def test_class_metadata(self):
        for distribution_type, cls in DISTRIBUTION_CLASSES.items():
            assert cls.distribution_type is distribution_type
