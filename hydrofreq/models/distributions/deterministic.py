"""
Deterministic (point mass) distribution.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import check_finite
from hydrofreq.core.types import DistributionType, MomentVector, ParameterVector
from hydrofreq.models.distributions.base import Bootstrappable, MomentEstimable, UnivariateDistribution

logger = logging.getLogger("hydrofreq.models.distributions.deterministic")


class Deterministic(UnivariateDistribution, MomentEstimable, Bootstrappable):
    """All probability mass at a single value.

    The PDF is 1 at the value and 0 elsewhere, the CDF steps from 0 to 1 at
    the value and every quantile equals it. Skewness and kurtosis are
    undefined (NaN).

    Args:
        value: Location of the point mass
    """

    distribution_type = DistributionType.DETERMINISTIC
    display_name = "Deterministic"
    short_display_name = "Point"
    parameter_names = ("value",)
    parameter_symbols = ("x",)
    minimum_of_parameters = (-np.inf,)
    maximum_of_parameters = (np.inf,)

    def __init__(self, value: float = 0.0) -> None:
        super().__init__(value)

    @property
    def value(self) -> float:
        return float(self._parameters[0])

    @value.setter
    def value(self, value: float) -> None:
        self._set_parameter(0, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        return check_finite(values[0], "value", throw=throw)

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.where(x == self.value, 1.0, 0.0)

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        return np.where(x >= self.value, 1.0, 0.0)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return np.full(p.shape, self.value)

    @property
    def mean(self) -> float:
        return self.value

    @property
    def median(self) -> float:
        return self.value

    @property
    def mode(self) -> float:
        return self.value

    @property
    def standard_deviation(self) -> float:
        return 0.0

    @property
    def skewness(self) -> float:
        return np.nan

    @property
    def kurtosis(self) -> float:
        return np.nan

    @property
    def minimum(self) -> float:
        return self.value

    @property
    def maximum(self) -> float:
        return self.value

    def central_moments(self, tolerance: Optional[float] = None) -> MomentVector:
        self._ensure_valid()
        return np.array([self.value, 0.0, np.nan, np.nan])

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0]])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return np.array([parameters[0], 0.0, np.nan, np.nan])
