"""
Log-Normal distribution parameterized in log space.

The parameters are the mean and standard deviation of log_b(X), base 10 by
default. Moment-based estimators work on the log-transformed sample, where
non-positive values are replaced by the configured log floor.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import special

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import (
    ParameterConstraints, check_finite, check_positive, first_error
)
from hydrofreq.core.types import (
    DistributionType, Matrix, MethodLike, MomentVector, ParameterEstimationMethod,
    ParameterVector, RandomState, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    MonteCarloCapable, StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.estimation.moments import (
    MACHINE_EPSILON, build_constraints, log_transform, order_of_magnitude, product_moments
)
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.log_normal")

_LOG_SQRT_2PI = 0.5 * np.log(2.0 * np.pi)


class LogNormal(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                MonteCarloCapable):
    """Log-Normal distribution.

    Args:
        mean: Mean µ of log_b(X)
        standard_deviation: Standard deviation σ > 0 of log_b(X)
        base: Logarithm base (> 0, != 1)
    """

    distribution_type = DistributionType.LOG_NORMAL
    display_name = "Log-Normal"
    short_display_name = "LogN"
    parameter_names = ("mean_of_log", "standard_deviation_of_log")
    parameter_symbols = ("µ", "σ")
    minimum_of_parameters = (-np.inf, 0.0)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, mean: float = 3.0, standard_deviation: float = 0.5, base: float = 10.0) -> None:
        self._base = float(base)
        super().__init__(mean, standard_deviation)

    @property
    def base(self) -> float:
        return self._base

    @base.setter
    def base(self, value: float) -> None:
        self._base = float(value)
        self._revalidate()

    @property
    def _k(self) -> float:
        # Converts natural logs to log_b
        return 1.0 / np.log(self._base)

    @property
    def mu(self) -> float:
        return float(self._parameters[0])

    @mu.setter
    def mu(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def sigma(self) -> float:
        return float(self._parameters[1])

    @sigma.setter
    def sigma(self, value: float) -> None:
        self._set_parameter(1, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        mu, sigma = values
        base_error = None
        if not (np.isfinite(self._base) and self._base > 0.0 and self._base != 1.0):
            base_error = ParameterError(
                f"Logarithm base must be positive and not equal to 1, got {self._base}",
                param_name="base", param_value=self._base, constraint="base > 0, base != 1")
        return first_error(
            base_error,
            check_finite(mu, "mean_of_log"),
            check_positive(sigma, "standard_deviation_of_log"),
            throw=throw
        )

    def _estimation_sample(self, sample: Sample) -> np.ndarray:
        return log_transform(sample, base=self._base)

    # Kernels

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        out = np.full(x.shape, -np.inf)
        positive = x > 0.0
        xp = x[positive]
        z = (np.log(xp) * self._k - self.mu) / self.sigma
        out[positive] = np.log(self._k) - np.log(xp) - np.log(self.sigma) - _LOG_SQRT_2PI - 0.5 * z * z
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        out = np.zeros(x.shape)
        positive = x > 0.0
        out[positive] = special.ndtr((np.log(x[positive]) * self._k - self.mu) / self.sigma)
        return out

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return np.power(self._base, self.mu + self.sigma * special.ndtri(p))

    # Moments, from the natural-log parameters

    def _natural(self):
        scale = np.log(self._base)
        return self.mu * scale, self.sigma * scale

    @property
    def mean(self) -> float:
        m, s = self._natural()
        return float(np.exp(m + 0.5 * s * s))

    @property
    def median(self) -> float:
        return float(np.power(self._base, self.mu))

    @property
    def mode(self) -> float:
        m, s = self._natural()
        return float(np.exp(m - s * s))

    @property
    def standard_deviation(self) -> float:
        m, s = self._natural()
        return float(np.sqrt((np.exp(s * s) - 1.0) * np.exp(2.0 * m + s * s)))

    @property
    def skewness(self) -> float:
        _, s = self._natural()
        w = np.exp(s * s)
        return float((w + 2.0) * np.sqrt(w - 1.0))

    @property
    def kurtosis(self) -> float:
        _, s = self._natural()
        s2 = s * s
        return float(np.exp(4.0 * s2) + 2.0 * np.exp(3.0 * s2) + 3.0 * np.exp(2.0 * s2) - 3.0)

    @property
    def minimum(self) -> float:
        return 0.0

    @property
    def maximum(self) -> float:
        return np.inf

    # Estimation, in log space

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1]], dtype=float)

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return np.array([parameters[0], parameters[1], 0.0, 3.0])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1] * np.sqrt(np.pi)])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return np.array([parameters[0], parameters[1] / np.sqrt(np.pi), 0.0, 0.1226017])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        x = as_sample(sample)
        mean, sd = product_moments(self._estimation_sample(x))[:2]
        with np.errstate(divide="ignore", invalid="ignore"):
            upper = np.ceil(np.log(order_of_magnitude(np.mean(x), offset=2.0)) * self._k)
        if not np.isfinite(upper) or upper <= 0.0:
            upper = 5.0
        return build_constraints([mean, sd], [-upper, MACHINE_EPSILON], [upper, upper],
                                 names=self.parameter_names)

    # Uncertainty, in log space

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method,
                                ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
                                ParameterEstimationMethod.METHOD_OF_MOMENTS)
        s2 = self.sigma ** 2
        return np.diag([s2 / sample_size, s2 / (2.0 * sample_size)])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        z = special.ndtri(probability)
        q = self.inverse_cdf(probability)
        log_base = np.log(self._base)
        return np.array([q * log_base, q * log_base * z])

    def sample_parameter_realizations(self, sample_size: int, realizations: int,
                                      rng: RandomState = None) -> Matrix:
        """Log-space mean from Normal(µ, σ/√n); log-space deviation from the chi-squared sampling distribution."""
        from hydrofreq.models.uncertainty.monte_carlo import normal_parameter_realizations
        return normal_parameter_realizations(self.mu, self.sigma, sample_size, realizations, rng)
