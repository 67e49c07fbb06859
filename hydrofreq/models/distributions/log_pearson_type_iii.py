'''
Log-Pearson Type III distribution.

log_b(X) follows a Pearson Type III distribution whose mean, standard
deviation and skewness are the parameters, base 10 by default. This is the
standard distribution for annual peak flows in U.S. flood frequency
analysis. Moment estimators work on the log-transformed sample; values that
are not positive are replaced by the configured log floor.

Real-space moments come from the raw moments of the shifted gamma in
natural-log units, E[X^r] = exp(rξ)(1 - rβ)^(-α), which exist only for
rβ < 1; missing moments are NaN.
'''

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
    ParameterVector, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    MonteCarloCapable, StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.distributions.pearson_type_iii import (
    SKEW_BOUNDS, _near_zero, frequency_factor, frequency_factor_derivative,
    gamma_parameters, pearson_from_linear_moments, pearson_mle_covariance,
    pearson_to_linear_moments
)
from hydrofreq.models.estimation.moments import (
    MACHINE_EPSILON, build_constraints, log_transform, order_of_magnitude, product_moments
)
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.log_pearson_type_iii")


class LogPearsonTypeIII(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                        MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                        MonteCarloCapable):
    """Log-Pearson Type III distribution.

    Args:
        mean: Mean µ of log_b(X)
        standard_deviation: Standard deviation σ > 0 of log_b(X)
        skew: Skewness γ of log_b(X)
        base: Logarithm base (> 0, != 1)
    """

    distribution_type = DistributionType.LOG_PEARSON_TYPE_III
    display_name = "Log-Pearson Type III"
    short_display_name = "LP3"
    parameter_names = ("mean_of_log", "standard_deviation_of_log", "skew_of_log")
    parameter_symbols = ("µ", "σ", "γ")
    minimum_of_parameters = (-np.inf, 0.0, -np.inf)
    maximum_of_parameters = (np.inf, np.inf, np.inf)

    def __init__(self, mean: float = 3.0, standard_deviation: float = 0.5, skew: float = 0.0,
                 base: float = 10.0) -> None:
        self._base = float(base)
        super().__init__(mean, standard_deviation, skew)

    @property
    def base(self) -> float:
        return self._base

    @base.setter
    def base(self, value: float) -> None:
        self._base = float(value)
        self._revalidate()

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

    @property
    def gamma(self) -> float:
        return float(self._parameters[2])

    @gamma.setter
    def gamma(self, value: float) -> None:
        self._set_parameter(2, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        mu, sigma, gamma = values
        base_error = None
        if not (np.isfinite(self._base) and self._base > 0.0 and self._base != 1.0):
            base_error = ParameterError(
                f"Logarithm base must be positive and not equal to 1, got {self._base}",
                param_name="base", param_value=self._base, constraint="base > 0, base != 1")
        return first_error(
            base_error,
            check_finite(mu, "mean_of_log"),
            check_positive(sigma, "standard_deviation_of_log"),
            check_finite(gamma, "skew_of_log"),
            throw=throw
        )

    def _estimation_sample(self, sample: Sample) -> np.ndarray:
        return log_transform(sample, base=self._base)

    def _is_log_normal(self) -> bool:
        return abs(self.gamma) <= _near_zero()

    # Kernels

    def _log_space_log_pdf(self, y: np.ndarray) -> np.ndarray:
        if self._is_log_normal():
            z = (y - self.mu) / self.sigma
            return -0.5 * z * z - np.log(self.sigma) - 0.5 * np.log(2.0 * np.pi)
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        t = (y - xi) / beta
        out = np.full(y.shape, -np.inf)
        inside = t > 0.0
        ti = t[inside]
        out[inside] = (alpha - 1.0) * np.log(ti) - ti - special.gammaln(alpha) - np.log(abs(beta))
        return out

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        out = np.full(x.shape, -np.inf)
        positive = x > 0.0
        xp = x[positive]
        log_base = np.log(self._base)
        out[positive] = self._log_space_log_pdf(np.log(xp) / log_base) - np.log(xp * log_base)
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        out = np.zeros(x.shape)
        positive = x > 0.0
        y = np.log(x[positive]) / np.log(self._base)
        if self._is_log_normal():
            out[positive] = special.ndtr((y - self.mu) / self.sigma)
            return out
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        t = np.maximum((y - xi) / beta, 0.0)
        if self.gamma > 0.0:
            out[positive] = special.gammainc(alpha, t)
        else:
            out[positive] = special.gammaincc(alpha, t)
        return out

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return np.power(self._base, self.mu + self.sigma * frequency_factor(self.gamma, p))

    # Moments

    def _raw_moment(self, r: int) -> float:
        log_base = np.log(self._base)
        if self._is_log_normal():
            m = self.mu * log_base
            s = self.sigma * log_base
            return float(np.exp(r * m + 0.5 * (r * s) ** 2))
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        xi *= log_base
        beta *= log_base
        if r * beta >= 1.0:
            return np.nan
        return float(np.exp(r * xi - alpha * np.log1p(-r * beta)))

    def _central_moments(self) -> MomentVector:
        m1, m2, m3, m4 = (self._raw_moment(r) for r in (1, 2, 3, 4))
        variance = m2 - m1 ** 2
        sd = np.sqrt(variance)
        skew = (m3 - 3.0 * m1 * m2 + 2.0 * m1 ** 3) / sd ** 3
        kurt = (m4 - 4.0 * m1 * m3 + 6.0 * m1 ** 2 * m2 - 3.0 * m1 ** 4) / variance ** 2
        return np.array([m1, sd, skew, kurt])

    @property
    def mean(self) -> float:
        return self._raw_moment(1)

    @property
    def median(self) -> float:
        return self.inverse_cdf(0.5)

    @property
    def mode(self) -> float:
        log_base = np.log(self._base)
        if self._is_log_normal():
            m = self.mu * log_base
            s = self.sigma * log_base
            return float(np.exp(m - s * s))
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        xi *= log_base
        beta *= log_base
        if alpha > 1.0 and 1.0 + beta > 0.0:
            return float(np.exp(xi + (alpha - 1.0) * beta / (1.0 + beta)))
        if self.gamma < 0.0 and alpha <= 1.0 and beta > -1.0:
            return self.maximum
        return self.minimum

    @property
    def standard_deviation(self) -> float:
        return float(self._central_moments()[1])

    @property
    def skewness(self) -> float:
        return float(self._central_moments()[2])

    @property
    def kurtosis(self) -> float:
        return float(self._central_moments()[3])

    @property
    def minimum(self) -> float:
        if self.gamma > 0.0 and not self._is_log_normal():
            return float(np.power(self._base, gamma_parameters(self.mu, self.sigma, self.gamma)[0]))
        return 0.0

    @property
    def maximum(self) -> float:
        if self.gamma < 0.0 and not self._is_log_normal():
            return float(np.power(self._base, gamma_parameters(self.mu, self.sigma, self.gamma)[0]))
        return np.inf

    # Estimation, in log space

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1], moments[2]], dtype=float)

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        mu, sigma, gamma = parameters
        return np.array([mu, sigma, gamma, 3.0 + 1.5 * gamma ** 2])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return pearson_from_linear_moments(moments)

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return pearson_to_linear_moments(parameters)

    def _log_envelope(self, value: float, fallback: float) -> float:
        with np.errstate(divide="ignore", invalid="ignore"):
            bound = np.ceil(np.log(order_of_magnitude(value)) / np.log(self._base))
        if not np.isfinite(bound) or bound <= 0.0:
            return fallback
        return float(bound)

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        x = as_sample(sample, min_size=2)
        mu, sigma, gamma = product_moments(self._estimation_sample(x))[:3]
        mean_bound = self._log_envelope(np.mean(x), 5.0)
        sd_bound = self._log_envelope(np.std(x, ddof=1), 4.0)
        return build_constraints(
            [mu, sigma, gamma],
            [-mean_bound, MACHINE_EPSILON, SKEW_BOUNDS[0]],
            [mean_bound, sd_bound, SKEW_BOUNDS[1]],
            names=self.parameter_names,
            neutral=[None, None, 0.0]
        )

    # Uncertainty

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        return pearson_mle_covariance(self.sigma, self.gamma, sample_size)

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        q = self.inverse_cdf(probability)
        scale = q * np.log(self._base)
        return scale * np.array([
            1.0,
            float(frequency_factor(self.gamma, probability)),
            self.sigma * frequency_factor_derivative(self.gamma, probability),
        ])
