# tests/test_bootstrap.py
"""
Tests for the parametric bootstrap.

Covers single replicates, the validated bootstrap settings and the
BootstrapAnalysis confidence intervals, moments and combined result.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from hydrofreq.core.config import reset_config, set_config
from hydrofreq.core.exceptions import BootstrapError, EstimationMethodError, ParameterError
from hydrofreq.core.results import UncertaintyAnalysisResult
from hydrofreq.models.bootstrap import BootstrapAnalysis, BootstrapParameters, bootstrap_replicate
from hydrofreq.models.distributions import (
    EmpiricalDistribution, Gumbel, KernelDensity, Normal, Triangular
)

PROBABILITIES = np.array([0.5, 0.9, 0.99])


@pytest.fixture
def normal_analysis():
    """A small bootstrap of Normal(100, 15) re-fitted by moments."""
    return BootstrapAnalysis(Normal(100.0, 15.0), "MOM", sample_size=30, replications=100, seed=7)


# ---- Bootstrap Parameters Tests ----

class TestBootstrapParameters:
    """Tests for bootstrap settings validation."""

    def test_defaults(self):
        params = BootstrapParameters(sample_size=20)
        assert params.replications == 10000
        assert params.retries == 20
        assert params.seed == 12345

    def test_defaults_follow_config(self):
        set_config("bootstrap", "replications", 500)
        try:
            assert BootstrapParameters(sample_size=20).replications == 500
        finally:
            reset_config()

    def test_sample_size_too_small(self):
        with pytest.raises(ParameterError) as info:
            BootstrapParameters(sample_size=5)
        assert info.value.param_name == "sample_size"

    def test_replications_too_few(self):
        with pytest.raises(ParameterError) as info:
            BootstrapParameters(sample_size=20, replications=10)
        assert info.value.param_name == "replications"

    @pytest.mark.parametrize("kwargs", [
        {"sample_size": 20.5},
        {"sample_size": True},
        {"sample_size": 20, "replications": 150.0},
        {"sample_size": 20, "seed": "abc"},
        {"sample_size": 20, "retries": 0},
    ])
    def test_invalid_types(self, kwargs):
        with pytest.raises(ParameterError):
            BootstrapParameters(**kwargs)


# ---- Replicate Tests ----

class TestReplicate:
    """Tests for single bootstrap replicates."""

    def test_reproducible(self):
        """The same seed reproduces the same replicate."""
        parent = Gumbel(100.0, 10.0)
        first = parent.bootstrap("LMOM", 50, seed=3)
        second = parent.bootstrap("LMOM", 50, seed=3)
        assert first == second
        assert first != parent

    def test_parent_unchanged(self):
        parent = Normal(100.0, 15.0)
        replicate = bootstrap_replicate(parent, "MOM", 40, seed=1)
        assert replicate is not parent
        assert parent.parameters == (100.0, 15.0)

    def test_invalid_refit(self):
        """A single observation has no spread, so the re-fitted deviation is invalid."""
        with pytest.raises(BootstrapError):
            bootstrap_replicate(Normal(100.0, 15.0), "MOM", 1, seed=1)

    def test_empirical_rebuilds_table(self, empirical_distribution):
        replicate = empirical_distribution.bootstrap("MOM", 25, seed=4)
        assert isinstance(replicate, EmpiricalDistribution)
        assert replicate.x_values.size == 25
        assert np.all(np.diff(replicate.x_values) >= 0.0)
        assert empirical_distribution.x_values.size == 5

    def test_kernel_density_rebuilds_sample(self, kernel_density):
        replicate = kernel_density.bootstrap("MLE", 40, seed=4)
        assert replicate.sample_size == 40
        assert kernel_density.sample_size == 200


# ---- Bootstrap Analysis Tests ----

class TestBootstrapAnalysis:
    """Tests for the bootstrap uncertainty analysis."""

    def test_unsupported_method(self):
        with pytest.raises(EstimationMethodError):
            BootstrapAnalysis(Triangular(), "LMOM", sample_size=30, replications=100)

    def test_settings_validated(self):
        with pytest.raises(ParameterError):
            BootstrapAnalysis(Normal(), "MOM", sample_size=5, replications=100)

    def test_defaults_follow_config(self):
        set_config("bootstrap", "replications", 200)
        try:
            analysis = BootstrapAnalysis(Normal(100.0, 15.0), "MOM", sample_size=30)
            assert analysis.replications == 200
            assert analysis.seed == 12345
        finally:
            reset_config()

    def test_distributions(self, normal_analysis):
        distributions = normal_analysis.distributions()
        assert len(distributions) == 100
        assert all(isinstance(d, Normal) for d in distributions)
        assert normal_analysis.distribution.parameters == (100.0, 15.0)

    def test_reproducible(self, normal_analysis):
        """Analyses with the same seed give identical replicate parameters."""
        other = BootstrapAnalysis(Normal(100.0, 15.0), "MOM", sample_size=30, replications=100, seed=7)
        assert_array_equal(normal_analysis.parameters(), other.parameters())

    def test_different_seeds_differ(self, normal_analysis):
        other = BootstrapAnalysis(Normal(100.0, 15.0), "MOM", sample_size=30, replications=100, seed=8)
        assert not np.array_equal(normal_analysis.parameters(), other.parameters())

    def test_parameters_spread(self, normal_analysis):
        parameters = normal_analysis.parameters()
        assert parameters.shape == (100, 2)
        assert_allclose(np.mean(parameters, axis=0), [100.0, 15.0], rtol=0.05)
        assert_allclose(np.std(parameters[:, 0]), 15.0 / np.sqrt(30.0), rtol=0.25)

    def test_sample_moments(self, normal_analysis):
        moments = normal_analysis.product_moments()
        assert moments.shape == (100, 4)
        assert_allclose(moments[:, :2], normal_analysis.parameters())
        assert normal_analysis.linear_moments().shape == (100, 4)

    def test_percentile_ci(self, normal_analysis):
        limits = normal_analysis.percentile_quantile_ci(PROBABILITIES, alpha=0.1)
        parent = normal_analysis.distribution.inverse_cdf(PROBABILITIES)
        assert limits.shape == (3, 2)
        assert np.all(limits[:, 0] < parent)
        assert np.all(limits[:, 1] > parent)

    def test_bias_corrected_ci(self, normal_analysis):
        distributions = normal_analysis.distributions()
        limits = normal_analysis.bias_corrected_quantile_ci(PROBABILITIES, 0.1, distributions)
        assert limits.shape == (3, 2)
        assert np.all(limits[:, 0] < limits[:, 1])

    def test_normal_ci_centered_on_cube_root(self, normal_analysis):
        """The cube roots of the limits are symmetric about the parent's."""
        limits = normal_analysis.normal_quantile_ci(PROBABILITIES)
        parent = np.cbrt(normal_analysis.distribution.inverse_cdf(PROBABILITIES))
        assert_allclose(np.cbrt(limits).mean(axis=1), parent)

    def test_intervals_share_replicates(self, normal_analysis):
        """Passing replicates explicitly matches drawing them internally."""
        distributions = normal_analysis.distributions()
        assert_array_equal(normal_analysis.quantiles(PROBABILITIES, distributions),
                           normal_analysis.quantiles(PROBABILITIES))

    def test_bca_ci(self, annual_maxima):
        analysis = BootstrapAnalysis(Gumbel(), "LMOM", sample_size=10, replications=100, seed=3)
        limits = analysis.bca_quantile_ci(annual_maxima, [0.5, 0.99], alpha=0.1)
        fitted = Gumbel()
        fitted.estimate(annual_maxima, "LMOM")
        assert limits.shape == (2, 2)
        assert np.all(limits[:, 0] < fitted.inverse_cdf([0.5, 0.99]))
        assert np.all(limits[:, 1] > fitted.inverse_cdf([0.5, 0.99]))

    def test_bca_leaves_analysis_unchanged(self, annual_maxima):
        """The fit behind the intervals does not replace the analysis parent."""
        parent = Gumbel()
        analysis = BootstrapAnalysis(parent, "LMOM", sample_size=10, replications=100, seed=3)
        before = analysis.quantiles([0.5, 0.99])
        analysis.bca_quantile_ci(annual_maxima, [0.5, 0.99])
        assert analysis.distribution is parent
        assert parent == Gumbel()
        assert analysis.sample_size == 10
        assert_array_equal(analysis.quantiles([0.5, 0.99]), before)

    def test_expected_probabilities(self, normal_analysis):
        probabilities = normal_analysis.expected_probabilities([100.0, 150.0])
        assert_allclose(probabilities[0], 0.5, atol=0.05)
        assert 0.99 < probabilities[1] < 1.0

    def test_estimate(self, normal_analysis):
        result = normal_analysis.estimate(PROBABILITIES, alpha=0.1)
        assert isinstance(result, UncertaintyAnalysisResult)
        assert_allclose(result.mode_curve, normal_analysis.distribution.inverse_cdf(PROBABILITIES))
        assert result.confidence_intervals.shape == (3, 2)
        assert result.parameter_sets.shape == (100, 2)
        assert result.metadata["failed"] == 0
        assert np.all(np.isfinite(result.mean_curve))
        frame = result.to_dataframe()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["Mode", "Mean", "Lower 0.05", "Upper 0.95"]

    def test_estimate_without_parameter_sets(self, normal_analysis):
        result = normal_analysis.estimate([0.9], record_parameter_sets=False)
        assert result.parameter_sets is None

    def test_kernel_density_analysis(self):
        """Tabular and kernel variants bootstrap without an estimation method check."""
        parent = KernelDensity(np.linspace(10.0, 20.0, 30))
        analysis = BootstrapAnalysis(parent, "MOM", sample_size=20, replications=100, seed=1)
        limits = analysis.percentile_quantile_ci([0.5])
        assert np.all(np.isfinite(limits))
