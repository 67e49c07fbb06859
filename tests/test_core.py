# tests/test_core.py
"""
Tests for the hydrofreq core module.

Covers the exception hierarchy, parameter validators and the validation
state record, estimation-method resolution, configuration management and the
result containers.
"""

import json

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from hydrofreq.core.config import (
    ConfigManager, get_bootstrap_config, get_config, get_core_config, get_estimation_config,
    get_logging_config, get_numerical_config, reset_config, set_config, to_dict
)
from hydrofreq.core.exceptions import (
    BootstrapError, ConfigurationError, DimensionError, EstimationMethodError,
    HydroFreqError, ParameterError, ProbabilityError
)
from hydrofreq.core.parameters import (
    ParameterConstraints, ParameterState, check_finite, check_ordering,
    check_positive, check_range, first_error, validate_probability
)
from hydrofreq.core.results import JacobianResult, MonteCarloResult, UncertaintyAnalysisResult
from hydrofreq.core.types import ParameterEstimationMethod, ValidationState


@pytest.fixture
def restore_config():
    """Reset the configuration after a test that modifies it."""
    yield
    reset_config()


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """All package errors derive from HydroFreqError."""
        for cls in (ParameterError, DimensionError, EstimationMethodError,
                    BootstrapError, ConfigurationError):
            assert issubclass(cls, HydroFreqError)
        assert issubclass(ProbabilityError, ParameterError)

    def test_parameter_error_context(self):
        """ParameterError records the parameter name, value and constraint."""
        error = ParameterError("bad scale", param_name="scale", param_value=-1.0,
                               constraint="scale > 0")
        assert error.param_name == "scale"
        assert error.context["Parameter"] == "scale"
        assert error.context["Constraint"] == "scale > 0"
        assert "bad scale" in str(error)

    def test_probability_error_defaults(self):
        """ProbabilityError names the probability argument."""
        error = ProbabilityError(param_value=1.5)
        assert error.param_name == "probability"
        assert error.param_value == 1.5


class TestValidators:
    """Tests for parameter validators."""

    def test_check_finite(self):
        """NaN and infinite values are reported, finite values pass."""
        assert check_finite(1.0, "mean") is None
        assert check_finite(np.nan, "mean").param_name == "mean"
        assert check_finite(np.inf, "mean").constraint == "finite"
        with pytest.raises(ParameterError):
            check_finite(np.nan, "mean", throw=True)

    def test_check_positive(self):
        """Strict and non-strict positivity."""
        assert check_positive(0.5, "scale") is None
        assert check_positive(0.0, "scale") is not None
        assert check_positive(0.0, "scale", strict=False) is None
        assert check_positive(-np.inf, "scale").constraint == "finite"

    def test_check_range(self):
        """Closed range checks."""
        assert check_range(0.5, "p", 0.0, 1.0) is None
        assert check_range(1.0, "p", 0.0, 1.0) is None
        assert check_range(1.5, "p", 0.0, 1.0).constraint == "p <= 1.0"
        assert check_range(-0.5, "p", 0.0, 1.0).constraint == "p >= 0.0"

    def test_check_ordering_names_upper(self):
        """An ordering violation names the upper parameter."""
        error = check_ordering(5.0, 1.0, "min", "max")
        assert error.param_name == "max"
        assert check_ordering(1.0, 1.0, "min", "max") is None

    def test_first_error(self):
        """The first failing check wins."""
        error = first_error(None, check_positive(-1.0, "scale"), check_finite(np.nan, "shape"))
        assert error.param_name == "scale"
        assert first_error(None, None) is None
        with pytest.raises(ParameterError):
            first_error(check_positive(-1.0, "scale"), throw=True)

    def test_validate_probability(self):
        """Probabilities outside [0, 1] or NaN raise ProbabilityError."""
        validate_probability(0.0)
        validate_probability([0.0, 0.5, 1.0])
        with pytest.raises(ProbabilityError):
            validate_probability(1.0001)
        with pytest.raises(ProbabilityError):
            validate_probability([0.2, -0.1])
        with pytest.raises(ProbabilityError):
            validate_probability(np.nan)


class TestParameterState:
    """Tests for the validation state record."""

    def test_default_is_unvalidated(self):
        state = ParameterState()
        assert state.state is ValidationState.UNVALIDATED
        assert state.is_stale
        assert not state.is_valid

    def test_from_error(self):
        """States built from validation outcomes."""
        assert ParameterState.from_error(None).is_valid
        error = check_positive(-1.0, "scale")
        invalid = ParameterState.from_error(error)
        assert invalid.state is ValidationState.INVALID
        assert invalid.reason == error.message

    def test_invalidate(self):
        state = ParameterState.from_error(None)
        state.invalidate()
        assert state.state is ValidationState.UNVALIDATED
        assert state.reason is None


class TestParameterConstraints:
    """Tests for the likelihood search constraints."""

    def test_bounds(self):
        constraints = ParameterConstraints([1.0, 2.0], [0.0, 1.0], [5.0, 3.0])
        assert constraints.bounds == [(0.0, 5.0), (1.0, 3.0)]
        assert constraints.contains_initial()

    def test_inverted_bounds_raise(self):
        with pytest.raises(ParameterError):
            ParameterConstraints([1.0], [2.0], [0.0], names=("scale",))

    def test_length_mismatch_raises(self):
        with pytest.raises(ParameterError):
            ParameterConstraints([1.0, 2.0], [0.0], [5.0])

    def test_clip_initial(self):
        """Initial values on a bound are pulled strictly inside."""
        constraints = ParameterConstraints([0.0, 3.0], [0.0, 1.0], [5.0, 3.0])
        assert not constraints.contains_initial()
        constraints.clip_initial()
        assert constraints.contains_initial()


class TestEstimationMethod:
    """Tests for estimation method resolution."""

    @pytest.mark.parametrize("value, expected", [
        ("MLE", ParameterEstimationMethod.MAXIMUM_LIKELIHOOD),
        ("maximum likelihood", ParameterEstimationMethod.MAXIMUM_LIKELIHOOD),
        ("MOM", ParameterEstimationMethod.METHOD_OF_MOMENTS),
        ("moments", ParameterEstimationMethod.METHOD_OF_MOMENTS),
        ("l-moments", ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS),
        ("LMOM", ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS),
        ("METHOD_OF_PERCENTILES", ParameterEstimationMethod.METHOD_OF_PERCENTILES),
    ])
    def test_from_value(self, value, expected):
        assert ParameterEstimationMethod.from_value(value) is expected

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            ParameterEstimationMethod.from_value("least squares")


class TestConfiguration:
    """Tests for configuration management."""

    def test_defaults(self):
        assert get_config("bootstrap", "min_sample_size") == 10
        assert get_config("bootstrap", "min_replications") == 100
        assert get_config("core", "default_seed") == 12345
        assert get_config("missing", "option", "fallback") == "fallback"

    def test_set_and_reset(self, restore_config):
        set_config("bootstrap", "retries", 5)
        assert get_config("bootstrap", "retries") == 5
        reset_config("bootstrap", "retries")
        assert get_config("bootstrap", "retries") == 20

    def test_string_values_are_converted(self, restore_config):
        set_config("numerical", "log_floor", "0.5")
        assert get_config("numerical", "log_floor") == 0.5

    def test_invalid_value_replaced_by_default(self, restore_config):
        set_config("bootstrap", "replications", 0)
        assert get_config("bootstrap", "replications") == 10000

    def test_unknown_option_raises(self):
        with pytest.raises(ConfigurationError):
            set_config("bootstrap", "unknown_option", 1)
        with pytest.raises(ConfigurationError):
            set_config("unknown_section", "retries", 1)

    def test_to_dict(self):
        config = to_dict()
        assert set(config) == {"core", "numerical", "estimation", "bootstrap", "logging"}
        assert config["estimation"]["default_method"] == "MLE"

    def test_section_getters(self):
        assert get_core_config().default_seed == 12345
        assert get_numerical_config().max_iterations == 10000
        assert get_estimation_config().raise_on_failure is False
        assert get_bootstrap_config().retries == 20
        assert get_logging_config().log_level == "WARNING"

    def test_file_and_environment_layers(self, tmp_path, monkeypatch):
        """The JSON file is applied first and environment variables override it."""
        path = tmp_path / "hydrofreq.json"
        path.write_text(json.dumps({
            "bootstrap": {"retries": 7, "replications": 2000},
            "unknown_section": {"value": 1},
        }))
        monkeypatch.setenv("HYDROFREQ_CONFIG_FILE", str(path))
        monkeypatch.setenv("HYDROFREQ_BOOTSTRAP_REPLICATIONS", "500")
        monkeypatch.setenv("HYDROFREQ_NUMERICAL_LOG_FLOOR", "0.1")
        manager = ConfigManager()
        manager.initialize()
        assert manager.get("bootstrap", "retries") == 7
        assert manager.get("bootstrap", "replications") == 500
        assert manager.get("numerical", "log_floor") == 0.1
        assert manager.get("core", "default_seed") == 12345


class TestResults:
    """Tests for result containers."""

    def test_jacobian_summary(self):
        result = JacobianResult(model_name="Normal", probabilities=np.array([0.1, 0.9]),
                                matrix=np.eye(2), determinant=1.0)
        assert "Determinant: 1" in result.summary()
        assert result.to_dict()["matrix"] == [[1.0, 0.0], [0.0, 1.0]]

    def test_uncertainty_dataframe(self):
        probabilities = np.array([0.5, 0.9, 0.99])
        result = UncertaintyAnalysisResult(
            model_name="Gumbel",
            probabilities=probabilities,
            alpha=0.1,
            mode_curve=np.array([1.0, 2.0, 3.0]),
            mean_curve=np.array([1.1, 2.1, 3.3]),
            confidence_intervals=np.array([[0.5, 1.5], [1.5, 2.5], [2.0, 4.5]]),
            parameter_sets=np.array([[1.0, 2.0], [np.nan, np.nan]])
        )
        frame = result.to_dataframe()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["Mode", "Mean", "Lower 0.05", "Upper 0.95"]
        assert_array_equal(frame.index.values, probabilities)
        assert "(1 failed)" in result.summary()

    def test_uncertainty_dataframe_requires_curves(self):
        with pytest.raises(ValueError):
            UncertaintyAnalysisResult(model_name="Gumbel").to_dataframe()

    def test_monte_carlo_dataframe(self):
        result = MonteCarloResult(
            model_name="Normal",
            quantiles=np.array([0.1, 0.01]),
            percentiles=np.array([0.05, 0.95]),
            confidence_intervals=np.array([[1.0, 2.0], [3.0, 4.0]]),
            expected_curve=np.array([1.5, 3.6]),
            sample_size=50
        )
        frame = result.to_dataframe()
        assert list(frame.columns) == ["0.05", "0.95", "Expected"]
        assert_allclose(frame["Expected"].values, [1.5, 3.6])
