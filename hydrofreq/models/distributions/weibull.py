"""
Two-parameter Weibull distribution with scale λ and shape k.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import optimize, special

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import ParameterConstraints, check_positive, first_error
from hydrofreq.core.types import (
    DistributionType, Matrix, MethodLike, MomentVector, ParameterEstimationMethod,
    ParameterVector, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, MaximumLikelihoodEstimable, MomentEstimable, MonteCarloCapable,
    StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.estimation.moments import build_constraints, scale_bounds
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.weibull")

SHAPE_SEARCH = (0.05, 100.0)


def _coefficient_of_variation(k: float) -> float:
    g1 = special.gamma(1.0 + 1.0 / k)
    g2 = special.gamma(1.0 + 2.0 / k)
    return np.sqrt(g2 / g1 ** 2 - 1.0)


def weibull_moments(scale: float, shape: float) -> MomentVector:
    """Product moments [mean, sd, skewness, kurtosis] from the raw moments λ^r Γ(1 + r/k)."""
    m1, m2, m3, m4 = (scale ** r * special.gamma(1.0 + r / shape) for r in (1, 2, 3, 4))
    variance = m2 - m1 ** 2
    sd = np.sqrt(variance)
    skew = (m3 - 3.0 * m1 * variance - m1 ** 3) / sd ** 3
    kurt = (m4 - 4.0 * m1 * m3 + 6.0 * m1 ** 2 * m2 - 3.0 * m1 ** 4) / variance ** 2
    return np.array([m1, sd, skew, kurt])


class Weibull(UnivariateDistribution, MomentEstimable, MaximumLikelihoodEstimable,
              StandardErrorCapable, Bootstrappable, MonteCarloCapable):
    """Weibull distribution F(x) = 1 - exp(-(x/λ)^k), x >= 0.

    Args:
        scale: Scale λ > 0
        shape: Shape k > 0
    """

    distribution_type = DistributionType.WEIBULL
    display_name = "Weibull"
    short_display_name = "W"
    parameter_names = ("scale", "shape")
    parameter_symbols = ("λ", "k")
    minimum_of_parameters = (0.0, 0.0)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, scale: float = 10.0, shape: float = 2.0) -> None:
        super().__init__(scale, shape)

    @property
    def lambda_(self) -> float:
        return float(self._parameters[0])

    @lambda_.setter
    def lambda_(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def kappa(self) -> float:
        return float(self._parameters[1])

    @kappa.setter
    def kappa(self, value: float) -> None:
        self._set_parameter(1, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        scale, shape = values
        return first_error(check_positive(scale, "scale"), check_positive(shape, "shape"), throw=throw)

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        out = np.full(x.shape, -np.inf)
        inside = x >= 0.0
        z = x[inside] / self.lambda_
        out[inside] = (np.log(self.kappa / self.lambda_) + (self.kappa - 1.0) * np.log(z)
                       - np.power(z, self.kappa))
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        z = np.maximum(x, 0.0) / self.lambda_
        return -np.expm1(-np.power(z, self.kappa))

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.lambda_ * np.power(-np.log1p(-p), 1.0 / self.kappa)

    @property
    def mean(self) -> float:
        return self.lambda_ * special.gamma(1.0 + 1.0 / self.kappa)

    @property
    def median(self) -> float:
        return self.lambda_ * np.log(2.0) ** (1.0 / self.kappa)

    @property
    def mode(self) -> float:
        if self.kappa <= 1.0:
            return 0.0
        return self.lambda_ * ((self.kappa - 1.0) / self.kappa) ** (1.0 / self.kappa)

    @property
    def standard_deviation(self) -> float:
        return float(weibull_moments(self.lambda_, self.kappa)[1])

    @property
    def skewness(self) -> float:
        return float(weibull_moments(self.lambda_, self.kappa)[2])

    @property
    def kurtosis(self) -> float:
        return float(weibull_moments(self.lambda_, self.kappa)[3])

    @property
    def minimum(self) -> float:
        return 0.0

    @property
    def maximum(self) -> float:
        return np.inf

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        """Shape from the coefficient of variation, then scale from the mean."""
        mean, sd = moments[0], moments[1]
        cv = sd / mean
        lower, upper = SHAPE_SEARCH
        if cv >= _coefficient_of_variation(lower):
            shape = lower
        elif cv <= _coefficient_of_variation(upper):
            shape = upper
        else:
            shape = optimize.brentq(lambda k: _coefficient_of_variation(k) - cv, lower, upper, xtol=1e-12)
        return np.array([mean / special.gamma(1.0 + 1.0 / shape), shape])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return weibull_moments(*parameters)

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        """
        Initial values by fixed-point iteration on the likelihood equation for the shape.

        Starting at k = 10, k is replaced by the average of itself and
        n S2 / (n S3 - S1 S2) until the change is below 1e-4, where over the
        positive observations S1 = sum(ln x), S2 = sum(x^k) and
        S3 = sum(x^k ln x).
        """
        x = as_sample(sample)
        x = x[x > 0.0]
        n = x.size
        shape = 10.0
        scale = float(np.mean(x)) if n else 1.0
        if n > 1:
            log_x = np.log(x)
            s1 = np.sum(log_x)
            for _ in range(100):
                x_k = np.power(x, shape)
                s2 = np.sum(x_k)
                s3 = np.sum(x_k * log_x)
                q = n * s2 / (n * s3 - s1 * s2)
                previous = shape
                shape = 0.5 * (shape + q)
                if not np.isfinite(shape) or abs(shape - previous) < 1e-4:
                    break
            scale = (np.sum(np.power(x, shape)) / n) ** (1.0 / shape)
        scale_lower, scale_upper = scale_bounds(scale)
        shape_lower, shape_upper = scale_bounds(shape)
        return build_constraints([scale, shape], [scale_lower, shape_lower], [scale_upper, shape_upper],
                                 names=self.parameter_names)

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        lam = self.lambda_
        k = self.kappa
        n = float(sample_size)
        var_lambda = 1.108665 * lam ** 2 / (n * k ** 2)
        var_k = 0.607927 * k ** 2 / n
        cov = 0.257022 * lam / n
        return np.array([[var_lambda, cov], [cov, var_k]])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        w = -np.log1p(-probability)
        q = self.inverse_cdf(probability)
        return np.array([np.power(w, 1.0 / self.kappa), -q * np.log(w) / self.kappa ** 2])
