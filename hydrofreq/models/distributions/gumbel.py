"""
Gumbel (Extreme Value Type I) distribution for maxima.
"""

import logging
from typing import Optional, Sequence

import numpy as np

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
    build_constraints, linear_moments, order_of_magnitude_bounds, scale_bounds
)

logger = logging.getLogger("hydrofreq.models.distributions.gumbel")

EULER_GAMMA = 0.5772156649015329
GUMBEL_SKEWNESS = 1.1395470994046486
GUMBEL_TAU3 = 0.1699250014423124
GUMBEL_TAU4 = 0.1503718287

# Inverse expected information of (ξ, α) per unit α²/n
_MLE_COVARIANCE = np.array([[1.1087, 0.2570],
                            [0.2570, 0.6079]])


class Gumbel(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
             MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
             MonteCarloCapable):
    """Gumbel distribution F(x) = exp(-exp(-(x - ξ)/α)).

    Args:
        location: Location ξ
        scale: Scale α > 0
    """

    distribution_type = DistributionType.GUMBEL
    display_name = "Gumbel (EVI)"
    short_display_name = "GUM"
    parameter_names = ("location", "scale")
    parameter_symbols = ("ξ", "α")
    minimum_of_parameters = (-np.inf, 0.0)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, location: float = 100.0, scale: float = 10.0) -> None:
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
        return -np.log(self.alpha) - (z + np.exp(-z))

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(-np.exp(-(x - self.xi) / self.alpha))

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.xi - self.alpha * np.log(-np.log(p))

    @property
    def mean(self) -> float:
        return self.xi + self.alpha * EULER_GAMMA

    @property
    def median(self) -> float:
        return self.xi - self.alpha * np.log(np.log(2.0))

    @property
    def mode(self) -> float:
        return self.xi

    @property
    def standard_deviation(self) -> float:
        return np.pi / np.sqrt(6.0) * self.alpha

    @property
    def skewness(self) -> float:
        return GUMBEL_SKEWNESS

    @property
    def kurtosis(self) -> float:
        return 5.4

    @property
    def minimum(self) -> float:
        return -np.inf

    @property
    def maximum(self) -> float:
        return np.inf

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        alpha = np.sqrt(6.0) / np.pi * moments[1]
        return np.array([moments[0] - alpha * EULER_GAMMA, alpha])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi + alpha * EULER_GAMMA, np.pi / np.sqrt(6.0) * alpha, GUMBEL_SKEWNESS, 5.4])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        alpha = moments[1] / np.log(2.0)
        return np.array([moments[0] - alpha * EULER_GAMMA, alpha])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi + alpha * EULER_GAMMA, alpha * np.log(2.0), GUMBEL_TAU3, GUMBEL_TAU4])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        xi, alpha = self.parameters_from_linear_moments(linear_moments(sample))
        xi_lower, xi_upper = order_of_magnitude_bounds(xi)
        alpha_lower, alpha_upper = scale_bounds(alpha)
        return build_constraints([xi, alpha], [xi_lower, alpha_lower], [xi_upper, alpha_upper],
                                 names=self.parameter_names)

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        return _MLE_COVARIANCE * self.alpha ** 2 / sample_size

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        return np.array([1.0, -np.log(-np.log(probability))])
