'''
Base classes for univariate probability distributions in hydrofreq.

This module defines the contract every distribution variant satisfies and the
optional capabilities a variant can advertise. The contract covers parameter
lifecycle management, the PDF/CDF/inverse-CDF relationship, moment queries,
likelihoods, random generation and cloning.

Parameter lifecycle
-------------------
Each instance owns its parameter vector and a ParameterState recording
whether the vector is UNVALIDATED, VALID or INVALID (with the reason). Every
mutation, through ``set_parameters`` or a property setter, re-validates the
resulting vector and records the outcome without raising. ``pdf``, ``cdf``
and ``inverse_cdf`` consult the state before computing and, when it is not
VALID, re-run validation with ``throw=True`` so the typed ParameterError
reaches the caller at the point of use.

Capabilities
------------
Estimation and uncertainty support differ between families, so they are
expressed as mixin classes that can be queried with ``isinstance`` or through
``supports``/``capabilities``:

* MomentEstimable, LinearMomentEstimable, MaximumLikelihoodEstimable and
  PercentileEstimable for the four estimation methods,
* StandardErrorCapable for closed-form covariance and quantile derivatives,
* Bootstrappable for parametric bootstrap replicates,
* MonteCarloCapable for parameter realizations and confidence bands.
'''

import abc
import copy
import logging
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import integrate

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import (
    ConvergenceError, DimensionError, EstimationMethodError, ParameterError,
    raise_parameter_error
)
from hydrofreq.core.parameters import (
    ParameterConstraints, ParameterState, validate_probability
)
from hydrofreq.core.results import JacobianResult, MonteCarloResult, OptimizationResult
from hydrofreq.core.types import (
    ArrayLike, DistributionType, Matrix, MethodLike, MomentVector,
    ParameterEstimationMethod, ParameterVector, RandomState, Sample, Vector
)

logger = logging.getLogger("hydrofreq.models.distributions.base")

# Log-likelihood substituted for NaN or infinite values
MIN_LOG_LIKELIHOOD = -np.finfo(float).max

# Probability limits used when the support is infinite
TAIL_PROBABILITY = 1e-16


def as_generator(seed: RandomState = None) -> np.random.Generator:
    """
    Resolve a seed into a numpy Generator.

    Args:
        seed: An existing Generator (used as is), an integer seed, or None for
            the configured default seed

    Returns:
        np.random.Generator

    Raises:
        TypeError: If seed is neither None, an integer nor a Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        seed = get_config("core", "default_seed", 12345)
    if isinstance(seed, (int, np.integer)) and not isinstance(seed, bool):
        return np.random.default_rng(int(seed))
    raise TypeError("seed must be an integer, a numpy Generator, or None")


def _evaluate(func, values: ArrayLike):
    """Apply an array function to scalar or array input, preserving shape."""
    arr = np.asarray(values, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        out = np.asarray(func(np.atleast_1d(arr).ravel()), dtype=float)
    if arr.ndim == 0:
        return float(out.reshape(-1)[0])
    return out.reshape(arr.shape)


class UnivariateDistribution(abc.ABC):
    """Base class for all univariate distributions.

    Subclasses declare their metadata as class attributes, implement the
    ``_pdf``, ``_cdf`` and ``_inverse_cdf`` array kernels together with
    ``validate_parameters`` and the moment properties, and call
    ``super().__init__`` with their initial parameter values.

    Attributes:
        distribution_type: Family of the distribution
        display_name: Long name of the distribution
        short_display_name: Abbreviated name
        parameter_names: Names of the parameters, in vector order
        parameter_symbols: Short symbols of the parameters
        minimum_of_parameters: Lowest admissible value of each parameter
        maximum_of_parameters: Highest admissible value of each parameter
    """

    distribution_type: ClassVar[DistributionType]
    display_name: ClassVar[str] = "Distribution"
    short_display_name: ClassVar[str] = "Dist"
    parameter_names: ClassVar[Tuple[str, ...]] = ()
    parameter_symbols: ClassVar[Tuple[str, ...]] = ()
    minimum_of_parameters: ClassVar[Tuple[float, ...]] = ()
    maximum_of_parameters: ClassVar[Tuple[float, ...]] = ()

    def __init__(self, *parameters: float) -> None:
        self._parameters = np.asarray(parameters, dtype=float)
        self._state = ParameterState()
        self._revalidate()

    # ------------------------------------------------------------------
    # Parameter store
    # ------------------------------------------------------------------

    @property
    def number_of_parameters(self) -> int:
        return len(self.parameter_names)

    @property
    def parameters(self) -> Tuple[float, ...]:
        """Current parameter values as a tuple."""
        return tuple(float(v) for v in self._parameters)

    @property
    def parameter_state(self) -> ParameterState:
        return self._state

    @property
    def parameters_valid(self) -> bool:
        """Whether the last-set parameters satisfy the domain constraints."""
        return self._state.is_valid

    def _check_arity(self, values: np.ndarray) -> None:
        if values.ndim != 1 or values.shape[0] != self.number_of_parameters:
            raise DimensionError(
                f"{self.display_name} requires {self.number_of_parameters} parameter(s)",
                array_name="parameters",
                expected_shape=(self.number_of_parameters,),
                actual_shape=values.shape
            )

    def set_parameters(self, values: Sequence[float]) -> None:
        """
        Assign the full parameter vector and re-validate it.

        The validation outcome is recorded, never raised; numerical methods
        raise the recorded error when they are called.

        Args:
            values: New parameter values, in ``parameter_names`` order

        Raises:
            DimensionError: If the vector has the wrong length
        """
        values = np.array(values, dtype=float)
        self._check_arity(values)
        self._parameters = values
        self._revalidate()
        logger.debug(f"{self.short_display_name} parameters set to {self.parameters}")

    def _set_parameter(self, index: int, value: float) -> None:
        """Property-setter helper: validate the candidate with its siblings."""
        candidate = self._parameters.copy()
        candidate[index] = float(value)
        self._parameters = candidate
        self._revalidate()

    def _revalidate(self) -> Optional[ParameterError]:
        error = self.validate_parameters(self._parameters, throw=False)
        self._state = ParameterState.from_error(error)
        self._on_parameters_changed()
        return error

    def _on_parameters_changed(self) -> None:
        """Hook for subclasses caching values derived from the parameters."""

    @abc.abstractmethod
    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        """
        Check a candidate parameter vector against the domain constraints.

        Args:
            values: Candidate parameter values
            throw: Raise the error instead of returning it

        Returns:
            None if the values are valid, otherwise the ParameterError naming
            the offending parameter

        Raises:
            ParameterError: If throw is True and the values are invalid
        """

    def _ensure_valid(self) -> None:
        if self._state.is_stale:
            error = self.validate_parameters(self._parameters, throw=True)
            self._state = ParameterState.from_error(error)

    # ------------------------------------------------------------------
    # Density, distribution and quantile functions
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def _pdf(self, x: np.ndarray) -> np.ndarray:
        """PDF kernel on a 1D array."""

    @abc.abstractmethod
    def _cdf(self, x: np.ndarray) -> np.ndarray:
        """CDF kernel on a 1D array."""

    @abc.abstractmethod
    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        """Inverse CDF kernel on a 1D array of probabilities strictly inside (0, 1)."""

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        return np.log(self._pdf(x))

    def pdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """
        Probability density function.

        Args:
            x: Point(s) at which to evaluate the density

        Returns:
            Density value(s), same shape as x

        Raises:
            ParameterError: If the parameters are invalid
        """
        self._ensure_valid()
        return _evaluate(self._pdf, x)

    def log_pdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Natural logarithm of the PDF."""
        self._ensure_valid()
        return _evaluate(self._log_pdf, x)

    def cdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """
        Cumulative distribution function.

        Args:
            x: Point(s) at which to evaluate the CDF

        Returns:
            Non-exceedance probability, same shape as x

        Raises:
            ParameterError: If the parameters are invalid
        """
        self._ensure_valid()
        return _evaluate(lambda v: np.clip(self._cdf(v), 0.0, 1.0), x)

    def log_cdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Natural logarithm of the CDF."""
        self._ensure_valid()
        return _evaluate(lambda v: np.log(np.clip(self._cdf(v), 0.0, 1.0)), x)

    def ccdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Complementary CDF (exceedance probability)."""
        self._ensure_valid()
        return _evaluate(lambda v: 1.0 - np.clip(self._cdf(v), 0.0, 1.0), x)

    def log_ccdf(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Natural logarithm of the complementary CDF."""
        self._ensure_valid()
        return _evaluate(lambda v: np.log1p(-np.clip(self._cdf(v), 0.0, 1.0)), x)

    def hazard(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Hazard function, pdf / ccdf."""
        self._ensure_valid()
        return _evaluate(lambda v: self._pdf(v) / (1.0 - np.clip(self._cdf(v), 0.0, 1.0)), x)

    def inverse_cdf(self, probability: ArrayLike) -> Union[float, np.ndarray]:
        """
        Inverse cumulative distribution function (quantile function).

        ``inverse_cdf(0)`` is the distribution minimum and ``inverse_cdf(1)``
        the maximum.

        Args:
            probability: Non-exceedance probability or probabilities in [0, 1]

        Returns:
            Quantile(s), same shape as probability

        Raises:
            ProbabilityError: If a probability lies outside [0, 1]
            ParameterError: If the parameters are invalid
        """
        validate_probability(probability)
        self._ensure_valid()

        def kernel(p):
            out = np.empty_like(p)
            interior = (p > 0.0) & (p < 1.0)
            out[p <= 0.0] = self.minimum
            out[p >= 1.0] = self.maximum
            if np.any(interior):
                out[interior] = self._inverse_cdf(p[interior])
            return out

        return _evaluate(kernel, probability)

    # ------------------------------------------------------------------
    # Moments and support
    # ------------------------------------------------------------------

    @property
    @abc.abstractmethod
    def mean(self) -> float:
        """Mean of the distribution."""

    @property
    def median(self) -> float:
        return self.inverse_cdf(0.5)

    @property
    @abc.abstractmethod
    def mode(self) -> float:
        """Mode of the distribution."""

    @property
    @abc.abstractmethod
    def standard_deviation(self) -> float:
        """Standard deviation of the distribution."""

    @property
    def variance(self) -> float:
        return self.standard_deviation ** 2

    @property
    def coefficient_of_variation(self) -> float:
        return self.standard_deviation / self.mean

    @property
    @abc.abstractmethod
    def skewness(self) -> float:
        """Skewness of the distribution."""

    @property
    @abc.abstractmethod
    def kurtosis(self) -> float:
        """Kurtosis (non-excess) of the distribution."""

    @property
    @abc.abstractmethod
    def minimum(self) -> float:
        """Lower bound of the support."""

    @property
    @abc.abstractmethod
    def maximum(self) -> float:
        """Upper bound of the support."""

    def central_moments(self, tolerance: Optional[float] = None) -> MomentVector:
        """
        Product moments by numerical integration of the PDF.

        The integration runs between inverse_cdf(1e-16) and
        inverse_cdf(1 - 1e-16), so infinite supports are truncated.

        Args:
            tolerance: Relative integration tolerance (defaults to the
                configured numerical integration_tol)

        Returns:
            Array [mean, standard deviation, skewness, kurtosis]
        """
        self._ensure_valid()
        if tolerance is None:
            tolerance = get_config("numerical", "integration_tol", 1e-8)
        lower = self.inverse_cdf(TAIL_PROBABILITY)
        upper = self.inverse_cdf(1.0 - TAIL_PROBABILITY)
        if not upper > lower:
            return np.array([lower, 0.0, 0.0, 3.0])

        def raw(order, center):
            value, _ = integrate.quad(
                lambda x: (x - center) ** order * self._pdf(np.array([x]))[0],
                lower, upper, epsrel=tolerance, limit=200
            )
            return value

        mean = raw(1, 0.0)
        variance = raw(2, mean)
        sd = np.sqrt(variance)
        skew = raw(3, mean) / sd ** 3
        kurt = raw(4, mean) / sd ** 4
        return np.array([mean, sd, skew, kurt])

    def conditional_expected_value(self, alpha: float) -> float:
        """
        Mean of the upper tail above the alpha quantile, E[X | X > x_alpha].

        Args:
            alpha: Non-exceedance probability in [0, 1)

        Returns:
            Conditional expected value
        """
        validate_probability(alpha)
        if alpha >= 1.0:
            return self.maximum
        self._ensure_valid()
        tolerance = get_config("numerical", "integration_tol", 1e-8)
        value, _ = integrate.quad(
            lambda p: self.inverse_cdf(p), alpha, 1.0 - TAIL_PROBABILITY,
            epsrel=tolerance, limit=200
        )
        return value / (1.0 - alpha)

    # ------------------------------------------------------------------
    # Likelihoods
    # ------------------------------------------------------------------

    @staticmethod
    def _finite_or_min(value: float) -> float:
        value = float(value)
        if np.isnan(value) or np.isinf(value):
            return MIN_LOG_LIKELIHOOD
        return value

    def log_likelihood(self, sample: Sample) -> float:
        """
        Sum of the log-PDF over a sample.

        NaN or infinite totals are replaced by the most negative float so
        optimizers always see a comparable value.
        """
        x = np.asarray(sample, dtype=float)
        return self._finite_or_min(np.sum(self.log_pdf(x)))

    def left_censored_log_likelihood(self, threshold: float, count: int) -> float:
        """Log-likelihood of ``count`` observations known only to lie below ``threshold``."""
        return self._finite_or_min(count * self.log_cdf(threshold))

    def right_censored_log_likelihood(self, threshold: float, count: int) -> float:
        """Log-likelihood of ``count`` observations known only to exceed ``threshold``."""
        return self._finite_or_min(count * self.log_ccdf(threshold))

    def interval_log_likelihood(self, lower: ArrayLike, upper: ArrayLike) -> float:
        """Log-likelihood of observations known to lie in [lower, upper]."""
        with np.errstate(divide="ignore", invalid="ignore"):
            mass = np.asarray(self.cdf(upper)) - np.asarray(self.cdf(lower))
            return self._finite_or_min(np.sum(np.log(mass)))

    # ------------------------------------------------------------------
    # Random generation, copying, comparison
    # ------------------------------------------------------------------

    def generate_random_values(self, sample_size: int, seed: RandomState = None) -> np.ndarray:
        """
        Draw values by applying inverse_cdf to seeded uniform probabilities.

        Args:
            sample_size: Number of values
            seed: Integer seed or numpy Generator; None uses the configured
                default seed

        Returns:
            Array of sample_size values
        """
        if sample_size < 1:
            raise_parameter_error("Sample size must be positive",
                                  param_name="sample_size", param_value=sample_size,
                                  constraint="sample_size >= 1")
        rng = as_generator(seed)
        return self.inverse_cdf(rng.random(int(sample_size)))

    def clone(self) -> "UnivariateDistribution":
        """Fully independent copy; mutating the clone never touches the original."""
        return copy.deepcopy(self)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return np.array_equal(self._parameters, other._parameters)

    __hash__ = None

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value:.6g}" for name, value in zip(self.parameter_names, self.parameters))
        return f"{type(self).__name__}({values})"

    # ------------------------------------------------------------------
    # Capabilities and estimation dispatch
    # ------------------------------------------------------------------

    @property
    def capabilities(self) -> List[ParameterEstimationMethod]:
        """Estimation methods this variant supports."""
        methods = []
        if isinstance(self, MomentEstimable):
            methods.append(ParameterEstimationMethod.METHOD_OF_MOMENTS)
        if isinstance(self, LinearMomentEstimable):
            methods.append(ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        if isinstance(self, MaximumLikelihoodEstimable):
            methods.append(ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        if isinstance(self, PercentileEstimable):
            methods.append(ParameterEstimationMethod.METHOD_OF_PERCENTILES)
        return methods

    def supports(self, method: MethodLike) -> bool:
        return ParameterEstimationMethod.from_value(method) in self.capabilities

    def _unsupported(self, method: ParameterEstimationMethod, operation: str) -> EstimationMethodError:
        return EstimationMethodError(
            f"{operation} is not implemented for {method.value} on {self.display_name}",
            distribution_type=self.display_name,
            estimation_method=method.value,
            operation=operation
        )

    def estimate(self, sample: Sample, method: Optional[MethodLike] = None) -> None:
        """
        Estimate parameters from a sample and set them.

        Args:
            sample: Observed values
            method: Estimation method; defaults to the configured default_method

        Raises:
            EstimationMethodError: If the method is not supported by this variant
            ConvergenceError: If the likelihood search does not converge
        """
        if method is None:
            method = get_config("estimation", "default_method", "MLE")
        method = ParameterEstimationMethod.from_value(method)
        if not self.supports(method):
            raise self._unsupported(method, "Parameter estimation")

        if method is ParameterEstimationMethod.METHOD_OF_MOMENTS:
            self.method_of_moments(sample)
        elif method is ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS:
            self.method_of_linear_moments(sample)
        elif method is ParameterEstimationMethod.METHOD_OF_PERCENTILES:
            self.method_of_percentiles(sample)
        else:
            result = self.maximum_likelihood(sample)
            if not result.success:
                raise ConvergenceError(
                    f"Maximum likelihood estimation of {self.display_name} did not converge",
                    iterations=result.iterations,
                    final_value=result.log_likelihood,
                    details=result.message
                )
        logger.debug(f"Estimated {self.short_display_name} by {method.value}: {self.parameters}")

    def _estimation_sample(self, sample: Sample) -> np.ndarray:
        """Sample used by moment-based estimators; log-space variants override."""
        from hydrofreq.utils.statistics import as_sample
        return as_sample(sample)


class MomentEstimable(abc.ABC):
    """Capability: product-moment conversions and method-of-moments estimation."""

    @abc.abstractmethod
    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        """Parameters from [mean, sd, skew, kurtosis]; pure, no side effects."""

    @abc.abstractmethod
    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        """[mean, sd, skew, kurtosis] from a parameter vector; pure, no side effects."""

    def method_of_moments(self, sample: Sample) -> None:
        from hydrofreq.utils.statistics import product_moments
        self.set_parameters(self.parameters_from_moments(product_moments(self._estimation_sample(sample))))


class LinearMomentEstimable(abc.ABC):
    """Capability: L-moment conversions and method-of-L-moments estimation."""

    @abc.abstractmethod
    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        """Parameters from [L1, L2, tau3, tau4]; pure, no side effects."""

    @abc.abstractmethod
    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        """[L1, L2, tau3, tau4] from a parameter vector; pure, no side effects."""

    def method_of_linear_moments(self, sample: Sample) -> None:
        from hydrofreq.utils.statistics import linear_moments
        self.set_parameters(self.parameters_from_linear_moments(linear_moments(self._estimation_sample(sample))))


class PercentileEstimable(abc.ABC):
    """Capability: estimation by matching sample percentiles."""

    @abc.abstractmethod
    def method_of_percentiles(self, sample: Sample) -> None:
        """Estimate and set parameters by matching percentiles of the sample."""


class MaximumLikelihoodEstimable(abc.ABC):
    """Capability: maximum likelihood estimation."""

    @abc.abstractmethod
    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        """Initial values and box bounds for the likelihood search."""

    def maximum_likelihood(self, sample: Sample) -> OptimizationResult:
        """
        Maximize the log-likelihood and set the parameters on success.

        Returns:
            OptimizationResult; on failure the parameters are left unchanged
        """
        from hydrofreq.models.estimation.mle import maximize_log_likelihood
        result = maximize_log_likelihood(self, sample)
        if result.success:
            self.set_parameters(result.parameters)
        return result


class StandardErrorCapable(abc.ABC):
    """Capability: closed-form parameter covariance and quantile derivatives."""

    @abc.abstractmethod
    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        """
        Asymptotic covariance of the parameter estimates.

        Raises:
            EstimationMethodError: If no formula exists for the method
        """

    def _quantile_gradient(self, probability: float) -> Optional[Vector]:
        """Closed-form quantile partial derivatives, or None to use differencing."""
        return None

    def _covariance_method(self, method: MethodLike,
                           *supported: ParameterEstimationMethod) -> ParameterEstimationMethod:
        method = ParameterEstimationMethod.from_value(method)
        if method not in supported:
            raise self._unsupported(method, "Parameter covariance")
        self._ensure_valid()
        return method

    def parameter_variance(self, sample_size: int, method: MethodLike) -> Vector:
        return np.diag(self.parameter_covariance(sample_size, method)).copy()

    def partial_derivatives(self, probability: float) -> Vector:
        """Partial derivatives of the quantile at ``probability`` with respect to each parameter."""
        from hydrofreq.models.uncertainty.standard_error import partial_derivatives
        return partial_derivatives(self, probability)

    def quantile_variance(self, probability: float, sample_size: int, method: MethodLike) -> float:
        """Delta-method variance of the quantile at ``probability``."""
        from hydrofreq.models.uncertainty.standard_error import quantile_variance
        return quantile_variance(self, probability, sample_size, method)

    def quantile_jacobian(self, probabilities: Sequence[float]) -> JacobianResult:
        """Jacobian of quantiles with respect to the parameters, with its determinant."""
        from hydrofreq.models.uncertainty.standard_error import quantile_jacobian
        return quantile_jacobian(self, probabilities)


class Bootstrappable(abc.ABC):
    """Capability: parametric bootstrap replicates."""

    def _refit(self, sample: np.ndarray, method: ParameterEstimationMethod) -> None:
        self.estimate(sample, method)

    def bootstrap(self, method: MethodLike, sample_size: int, seed: RandomState = None) -> "UnivariateDistribution":
        """
        Re-fitted clone estimated from a synthetic sample of this distribution.

        Raises:
            BootstrapError: If the re-fitted parameters are invalid
        """
        from hydrofreq.models.bootstrap.base import bootstrap_replicate
        return bootstrap_replicate(self, method, sample_size, seed)


class MonteCarloCapable(abc.ABC):
    """Capability: parameter realizations for Monte Carlo confidence intervals."""

    def sample_parameter_realizations(self, sample_size: int, realizations: int,
                                      rng: RandomState = None) -> Matrix:
        """
        Draw parameter sets from their asymptotic sampling distribution.

        The default draws from a multivariate normal centered on the current
        parameters with the maximum likelihood covariance for ``sample_size``.

        Returns:
            Array of shape (realizations, number_of_parameters)
        """
        from hydrofreq.models.uncertainty.monte_carlo import multivariate_normal_realizations
        return multivariate_normal_realizations(self, sample_size, realizations, rng)

    def monte_carlo_confidence_intervals(self, sample_size: int, realizations: int,
                                         quantiles: Sequence[float], percentiles: Sequence[float],
                                         seed: RandomState = None) -> Matrix:
        """Percentile bands of quantiles over parameter realizations, shape [quantiles, percentiles]."""
        from hydrofreq.models.uncertainty.monte_carlo import monte_carlo_confidence_intervals
        return monte_carlo_confidence_intervals(self, sample_size, realizations, quantiles, percentiles, seed)

    def monte_carlo_analysis(self, sample_size: int, realizations: int,
                             quantiles: Sequence[float], percentiles: Sequence[float],
                             seed: RandomState = None) -> MonteCarloResult:
        from hydrofreq.models.uncertainty.monte_carlo import monte_carlo_analysis
        return monte_carlo_analysis(self, sample_size, realizations, quantiles, percentiles, seed)
