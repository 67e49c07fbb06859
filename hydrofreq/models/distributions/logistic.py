"""
Logistic distribution.
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
    ParameterVector, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    MonteCarloCapable, StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.estimation.moments import (
    build_constraints, order_of_magnitude_bounds, product_moments, scale_bounds
)

logger = logging.getLogger("hydrofreq.models.distributions.logistic")


class Logistic(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
               MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
               MonteCarloCapable):
    """Logistic distribution F(x) = 1 / (1 + exp(-(x - ξ)/α))."""

    distribution_type = DistributionType.LOGISTIC
    display_name = "Logistic"
    short_display_name = "LO"
    parameter_names = ("location", "scale")
    parameter_symbols = ("ξ", "α")
    minimum_of_parameters = (-np.inf, 0.0)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, location: float = 0.0, scale: float = 0.1) -> None:
        super().__init__(location, scale)

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

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        xi, alpha = values
        return first_error(check_finite(xi, "location"), check_positive(alpha, "scale"), throw=throw)

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        z = (x - self.xi) / self.alpha
        # Symmetric in z, so |z| keeps exp from overflowing
        az = np.abs(z)
        return -az - 2.0 * np.log1p(np.exp(-az)) - np.log(self.alpha)

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        return special.expit((x - self.xi) / self.alpha)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.xi + self.alpha * special.logit(p)

    @property
    def mean(self) -> float:
        return self.xi

    @property
    def median(self) -> float:
        return self.xi

    @property
    def mode(self) -> float:
        return self.xi

    @property
    def standard_deviation(self) -> float:
        return np.pi * self.alpha / np.sqrt(3.0)

    @property
    def skewness(self) -> float:
        return 0.0

    @property
    def kurtosis(self) -> float:
        return 4.2

    @property
    def minimum(self) -> float:
        return -np.inf

    @property
    def maximum(self) -> float:
        return np.inf

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1] * np.sqrt(3.0) / np.pi])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi, np.pi * alpha / np.sqrt(3.0), 0.0, 4.2])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1]], dtype=float)

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi, alpha, 0.0, 1.0 / 6.0])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        xi, alpha = self.parameters_from_moments(product_moments(sample))
        xi_lower, xi_upper = order_of_magnitude_bounds(xi)
        alpha_lower, alpha_upper = scale_bounds(alpha)
        return build_constraints([xi, alpha], [xi_lower, alpha_lower], [xi_upper, alpha_upper],
                                 names=self.parameter_names)

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        method = self._covariance_method(method,
                                         ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
                                         ParameterEstimationMethod.METHOD_OF_MOMENTS)
        a2n = self.alpha ** 2 / sample_size
        if method is ParameterEstimationMethod.METHOD_OF_MOMENTS:
            return np.diag([np.pi ** 2 / 3.0 * a2n, 0.8 * a2n])
        return np.diag([3.0 * a2n, 9.0 / (3.0 + np.pi ** 2) * a2n])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        return np.array([1.0, np.log(probability / (1.0 - probability))])
