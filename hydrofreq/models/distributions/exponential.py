"""
Shifted exponential distribution with location ξ and scale α.
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
    build_constraints, order_of_magnitude, scale_bounds
)
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.exponential")


class Exponential(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                  MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                  MonteCarloCapable):
    """Exponential distribution F(x) = 1 - exp(-(x - ξ)/α) for x >= ξ."""

    distribution_type = DistributionType.EXPONENTIAL
    display_name = "Exponential"
    short_display_name = "EXP"
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
        y = (x - self.xi) / self.alpha
        return np.where(y >= 0.0, -y - np.log(self.alpha), -np.inf)

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        y = np.maximum((x - self.xi) / self.alpha, 0.0)
        return -np.expm1(-y)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.xi - self.alpha * np.log1p(-p)

    @property
    def mean(self) -> float:
        return self.xi + self.alpha

    @property
    def median(self) -> float:
        return self.xi + self.alpha * np.log(2.0)

    @property
    def mode(self) -> float:
        return self.xi

    @property
    def standard_deviation(self) -> float:
        return self.alpha

    @property
    def skewness(self) -> float:
        return 2.0

    @property
    def kurtosis(self) -> float:
        return 9.0

    @property
    def minimum(self) -> float:
        return self.xi

    @property
    def maximum(self) -> float:
        return np.inf

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0] - moments[1], moments[1]], dtype=float)

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi + alpha, alpha, 2.0, 9.0])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        alpha = 2.0 * moments[1]
        return np.array([moments[0] - alpha, alpha])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha = parameters
        return np.array([xi + alpha, alpha / 2.0, 1.0 / 3.0, 1.0 / 6.0])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        x = as_sample(sample, min_size=2)
        n = x.size
        x_min = float(np.min(x))
        x_mean = float(np.mean(x))
        location = (n * x_min - x_mean) / (n - 1)
        scale = n * (x_mean - x_min) / (n - 1)
        location_lower = location - order_of_magnitude(location, offset=0.0)
        scale_lower, scale_upper = scale_bounds(scale)
        return build_constraints([location, scale], [location_lower, scale_lower], [x_min, scale_upper],
                                 names=self.parameter_names)

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        method = self._covariance_method(method,
                                         ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
                                         ParameterEstimationMethod.METHOD_OF_MOMENTS)
        a2 = self.alpha ** 2
        n = float(sample_size)
        if method is ParameterEstimationMethod.METHOD_OF_MOMENTS:
            return np.array([[a2 / n, -a2 / n],
                             [-a2 / n, 2.0 * a2 / n]])
        return np.array([[a2 / (n * (n - 1.0)), -a2 / (n * (n - 1.0))],
                         [-a2 / (n * (n - 1.0)), a2 / (n - 1.0)]])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        return np.array([1.0, -np.log1p(-probability)])
