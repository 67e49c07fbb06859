"""
Continuous uniform distribution on [min, max].
"""

import logging
from typing import Optional, Sequence

import numpy as np

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import (
    ParameterConstraints, check_finite, check_ordering, first_error
)
from hydrofreq.core.results import OptimizationResult
from hydrofreq.core.types import DistributionType, MomentVector, ParameterVector, Sample
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    UnivariateDistribution
)
from hydrofreq.models.estimation.moments import build_constraints, order_of_magnitude
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.uniform")


class Uniform(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
              MaximumLikelihoodEstimable, Bootstrappable):
    """Uniform distribution.

    A zero-width range (min == max) is a point: PDF 0, CDF 1 for every x,
    and every quantile equal to it.

    Args:
        min: Lower bound
        max: Upper bound, >= min
    """

    distribution_type = DistributionType.UNIFORM
    display_name = "Uniform"
    short_display_name = "U"
    parameter_names = ("min", "max")
    parameter_symbols = ("a", "b")
    minimum_of_parameters = (-np.inf, -np.inf)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, min: float = 0.0, max: float = 1.0) -> None:
        super().__init__(min, max)

    @property
    def min(self) -> float:
        return float(self._parameters[0])

    @min.setter
    def min(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def max(self) -> float:
        return float(self._parameters[1])

    @max.setter
    def max(self, value: float) -> None:
        self._set_parameter(1, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        a, b = values
        return first_error(
            check_finite(a, "min"),
            check_finite(b, "max"),
            check_ordering(a, b, "min", "max"),
            throw=throw
        )

    @property
    def _width(self) -> float:
        return self.max - self.min

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        if self._width == 0.0:
            return np.zeros(x.shape)
        return np.where((x >= self.min) & (x <= self.max), 1.0 / self._width, 0.0)

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        if self._width == 0.0:
            return np.ones(x.shape)
        return np.clip((x - self.min) / self._width, 0.0, 1.0)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.min + p * self._width

    @property
    def mean(self) -> float:
        return 0.5 * (self.min + self.max)

    @property
    def median(self) -> float:
        return self.mean

    @property
    def mode(self) -> float:
        return self.mean

    @property
    def standard_deviation(self) -> float:
        return self._width / np.sqrt(12.0)

    @property
    def skewness(self) -> float:
        return 0.0

    @property
    def kurtosis(self) -> float:
        return 1.8

    @property
    def minimum(self) -> float:
        return self.min

    @property
    def maximum(self) -> float:
        return self.max

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        half_width = np.sqrt(3.0) * moments[1]
        return np.array([moments[0] - half_width, moments[0] + half_width])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        a, b = parameters
        return np.array([0.5 * (a + b), (b - a) / np.sqrt(12.0), 0.0, 1.8])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0] - 3.0 * moments[1], moments[0] + 3.0 * moments[1]])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        a, b = parameters
        return np.array([0.5 * (a + b), (b - a) / 6.0, 0.0, 0.0])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        x = as_sample(sample)
        x_min = float(np.min(x))
        x_max = float(np.max(x))
        lower = x_min - order_of_magnitude(x_min)
        upper = x_max + order_of_magnitude(x_max)
        return build_constraints([x_min, x_max], [lower, x_max], [x_min, upper],
                                 names=self.parameter_names)

    def maximum_likelihood(self, sample: Sample) -> OptimizationResult:
        """The likelihood is maximized in closed form by the sample extremes."""
        x = as_sample(sample)
        parameters = np.array([np.min(x), np.max(x)])
        self.set_parameters(parameters)
        return OptimizationResult(
            model_name=self.display_name,
            success=True,
            parameters=parameters,
            log_likelihood=self.log_likelihood(x),
            message="Closed-form estimate",
            metadata={"sample_size": x.size}
        )
