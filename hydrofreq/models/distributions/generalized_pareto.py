'''
Generalized Pareto distribution in Hosking's parameterization.

    F(x) = 1 - (1 - κ(x - ξ)/α)^(1/κ),  x >= ξ

κ > 0 bounds the upper tail at ξ + α/κ; κ = 0 is the shifted exponential.
'''

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import optimize

from hydrofreq.core.config import get_config
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
from hydrofreq.models.estimation.moments import (
    MACHINE_EPSILON, build_constraints, linear_moments, order_of_magnitude, scale_bounds
)
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.generalized_pareto")

SHAPE_BOUNDS = (-10.0, 10.0)


def _near_zero() -> float:
    return get_config("core", "near_zero", 1e-4)


def _skewness(kappa: float) -> float:
    if kappa <= -1.0 / 3.0:
        return np.nan
    return 2.0 * (1.0 - kappa) * np.sqrt(1.0 + 2.0 * kappa) / (1.0 + 3.0 * kappa)


def gpa_moments(xi: float, alpha: float, kappa: float) -> MomentVector:
    """Product moments [mean, sd, skewness, kurtosis]; NaN where a moment does not exist."""
    mean = xi + alpha / (1.0 + kappa) if kappa > -1.0 else np.nan
    sd = alpha / ((1.0 + kappa) * np.sqrt(1.0 + 2.0 * kappa)) if kappa > -0.5 else np.nan
    kurt = np.nan
    if kappa > -0.25:
        kurt = (3.0 * (1.0 + 2.0 * kappa) * (3.0 - kappa + 2.0 * kappa ** 2)
                / ((1.0 + 3.0 * kappa) * (1.0 + 4.0 * kappa)))
    return np.array([mean, sd, _skewness(kappa), kurt])


class GeneralizedPareto(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                        MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                        MonteCarloCapable):
    """Generalized Pareto distribution.

    Args:
        location: Location ξ (lower bound of the support)
        scale: Scale α > 0
        shape: Shape κ
    """

    distribution_type = DistributionType.GENERALIZED_PARETO
    display_name = "Generalized Pareto"
    short_display_name = "GPA"
    parameter_names = ("location", "scale", "shape")
    parameter_symbols = ("ξ", "α", "κ")
    minimum_of_parameters = (-np.inf, 0.0, -np.inf)
    maximum_of_parameters = (np.inf, np.inf, np.inf)

    def __init__(self, location: float = 100.0, scale: float = 10.0, shape: float = 0.0) -> None:
        super().__init__(location, scale, shape)

    @property
    def xi(self) -> float:
        return float(self._parameters[0])

    @xi.setter
    def xi(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def alpha(self) -> float:
        return float(self._parameters[1])

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._set_parameter(1, value)

    @property
    def kappa(self) -> float:
        return float(self._parameters[2])

    @kappa.setter
    def kappa(self, value: float) -> None:
        self._set_parameter(2, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        xi, alpha, kappa = values
        return first_error(
            check_finite(xi, "location"),
            check_positive(alpha, "scale"),
            check_finite(kappa, "shape"),
            throw=throw
        )

    def _is_exponential(self) -> bool:
        return abs(self.kappa) <= _near_zero()

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        y = (x - self.xi) / self.alpha
        out = np.full(x.shape, -np.inf)
        if self._is_exponential():
            inside = y >= 0.0
            out[inside] = -np.log(self.alpha) - y[inside]
            return out
        arg = 1.0 - self.kappa * y
        inside = (y >= 0.0) & (arg > 0.0)
        out[inside] = -np.log(self.alpha) + (1.0 / self.kappa - 1.0) * np.log(arg[inside])
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        y = np.maximum((x - self.xi) / self.alpha, 0.0)
        if self._is_exponential():
            return -np.expm1(-y)
        arg = np.maximum(1.0 - self.kappa * y, 0.0)
        return 1.0 - np.power(arg, 1.0 / self.kappa)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        if self._is_exponential():
            return self.xi - self.alpha * np.log1p(-p)
        return self.xi + self.alpha / self.kappa * (1.0 - np.power(1.0 - p, self.kappa))

    @property
    def mean(self) -> float:
        return float(gpa_moments(*self.parameters)[0])

    @property
    def median(self) -> float:
        return self.inverse_cdf(0.5)

    @property
    def mode(self) -> float:
        if self.kappa > 1.0:
            return self.maximum
        return self.xi

    @property
    def standard_deviation(self) -> float:
        return float(gpa_moments(*self.parameters)[1])

    @property
    def skewness(self) -> float:
        return float(gpa_moments(*self.parameters)[2])

    @property
    def kurtosis(self) -> float:
        return float(gpa_moments(*self.parameters)[3])

    @property
    def minimum(self) -> float:
        return self.xi

    @property
    def maximum(self) -> float:
        if self.kappa > 0.0:
            return self.xi + self.alpha / self.kappa
        return np.inf

    # Estimation

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        mean, sd, skew = moments[0], moments[1], moments[2]
        lower, upper = -0.33, SHAPE_BOUNDS[1]
        if skew >= _skewness(lower):
            kappa = lower
        elif skew <= _skewness(upper):
            kappa = upper
        else:
            kappa = optimize.brentq(lambda k: _skewness(k) - skew, lower, upper, xtol=1e-12)
        alpha = sd * (1.0 + kappa) * np.sqrt(1.0 + 2.0 * kappa)
        return np.array([mean - alpha / (1.0 + kappa), alpha, kappa])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return gpa_moments(*parameters)

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        l1, l2, tau3 = moments[0], moments[1], moments[2]
        kappa = (1.0 - 3.0 * tau3) / (1.0 + tau3)
        alpha = (1.0 + kappa) * (2.0 + kappa) * l2
        return np.array([l1 - (2.0 + kappa) * l2, alpha, kappa])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha, kappa = parameters
        return np.array([
            xi + alpha / (1.0 + kappa),
            alpha / ((1.0 + kappa) * (2.0 + kappa)),
            (1.0 - kappa) / (3.0 + kappa),
            (1.0 - kappa) * (2.0 - kappa) / ((3.0 + kappa) * (4.0 + kappa)),
        ])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        x = as_sample(sample)
        xi, alpha, kappa = self.parameters_from_linear_moments(linear_moments(x))
        xi_lower = xi - order_of_magnitude(xi, offset=0.0)
        xi_upper = float(np.min(x)) + MACHINE_EPSILON
        alpha_lower, alpha_upper = scale_bounds(alpha)
        return build_constraints(
            [xi, alpha, kappa],
            [xi_lower, alpha_lower, SHAPE_BOUNDS[0]],
            [xi_upper, alpha_upper, SHAPE_BOUNDS[1]],
            names=self.parameter_names,
            neutral=[None, None, 0.0]
        )

    # Uncertainty

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        method = self._covariance_method(method,
                                         ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
                                         ParameterEstimationMethod.METHOD_OF_MOMENTS)
        a = self.alpha
        k = self.kappa
        n = float(sample_size)
        var_xi = n * a ** 2 / ((n + 2.0 * k) * (n + k) ** 2)
        if method is ParameterEstimationMethod.METHOD_OF_MOMENTS:
            den = (1.0 + 2.0 * k) * (1.0 + 3.0 * k) * (1.0 + 4.0 * k)
            var_a = 2.0 * a ** 2 / n * (1.0 + k) ** 2 * (1.0 + 6.0 * k + 12.0 * k ** 2) / den
            var_k = (1.0 / n) * (1.0 + k) ** 2 * (1.0 + 2.0 * k) ** 2 * (1.0 + k + 6.0 * k ** 2) / den
            cov_ak = a / n * (1.0 + k) ** 2 * (1.0 + 2.0 * k) * (1.0 + 4.0 * k + 12.0 * k ** 2) / den
        else:
            var_a = 2.0 * a ** 2 * (1.0 - k) / n
            var_k = (1.0 - k) ** 2 / n
            cov_ak = a * (1.0 - k) / n
        return np.array([[var_xi, 0.0, 0.0],
                         [0.0, var_a, cov_ak],
                         [0.0, cov_ak, var_k]])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        a = self.alpha
        k = self.kappa
        log_q = np.log1p(-probability)
        if self._is_exponential():
            return np.array([1.0, -log_q, -0.5 * a * log_q ** 2])
        q_k = np.power(1.0 - probability, k)
        return np.array([
            1.0,
            (1.0 - q_k) / k,
            -a / (k * k) * (1.0 - q_k) - a / k * log_q * q_k,
        ])
