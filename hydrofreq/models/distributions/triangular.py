"""
Triangular distribution on [min, max] with the given mode.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import optimize

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import check_finite, check_ordering, check_range, first_error
from hydrofreq.core.types import DistributionType, MomentVector, ParameterVector, Sample
from hydrofreq.models.distributions.base import Bootstrappable, MomentEstimable, UnivariateDistribution
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.triangular")


def triangular_moments(a: float, c: float, b: float) -> MomentVector:
    """Product moments [mean, sd, skewness, kurtosis] of Triangular(min=a, mode=c, max=b)."""
    f = a * a + b * b + c * c - a * b - a * c - b * c
    mean = (a + b + c) / 3.0
    if f <= 0.0:
        return np.array([mean, 0.0, 0.0, 2.4])
    skew = np.sqrt(2.0) * (a + b - 2.0 * c) * (2.0 * a - b - c) * (a - 2.0 * b + c) / (5.0 * f ** 1.5)
    return np.array([mean, np.sqrt(f / 18.0), skew, 2.4])


class Triangular(UnivariateDistribution, MomentEstimable, Bootstrappable):
    """Triangular distribution.

    When min == mode == max the distribution is a point: PDF 0, CDF 1 for
    every x, and every quantile equal to it.

    Args:
        min: Lower bound
        mode: Most likely value, min <= mode <= max
        max: Upper bound
    """

    distribution_type = DistributionType.TRIANGULAR
    display_name = "Triangular"
    short_display_name = "TRI"
    parameter_names = ("min", "mode", "max")
    parameter_symbols = ("a", "c", "b")
    minimum_of_parameters = (-np.inf, -np.inf, -np.inf)
    maximum_of_parameters = (np.inf, np.inf, np.inf)

    def __init__(self, min: float = 0.0, mode: float = 0.5, max: float = 1.0) -> None:
        super().__init__(min, mode, max)

    @property
    def min(self) -> float:
        return float(self._parameters[0])

    @min.setter
    def min(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def most_likely(self) -> float:
        return float(self._parameters[1])

    @most_likely.setter
    def most_likely(self, value: float) -> None:
        self._set_parameter(1, value)

    @property
    def max(self) -> float:
        return float(self._parameters[2])

    @max.setter
    def max(self, value: float) -> None:
        self._set_parameter(2, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        a, c, b = values
        return first_error(
            check_finite(a, "min"),
            check_finite(b, "max"),
            check_ordering(a, b, "min", "max"),
            check_range(c, "mode", a, b),
            throw=throw
        )

    def _is_point(self) -> bool:
        return self.max == self.min

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        if self._is_point():
            return np.zeros(x.shape)
        a, c, b = self.parameters
        out = np.zeros(x.shape)
        rising = (x >= a) & (x < c)
        falling = (x >= c) & (x <= b)
        out[rising] = 2.0 * (x[rising] - a) / ((b - a) * (c - a))
        out[falling] = 2.0 * (b - x[falling]) / ((b - a) * (b - c)) if b > c else 2.0 / (b - a)
        return out

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        if self._is_point():
            return np.ones(x.shape)
        a, c, b = self.parameters
        out = np.where(x >= b, 1.0, 0.0)
        rising = (x > a) & (x <= c)
        falling = (x > c) & (x < b)
        out[rising] = (x[rising] - a) ** 2 / ((b - a) * (c - a))
        out[falling] = 1.0 - (b - x[falling]) ** 2 / ((b - a) * (b - c))
        return out

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        if self._is_point():
            return np.full(p.shape, self.min)
        a, c, b = self.parameters
        split = (c - a) / (b - a)
        return np.where(
            p < split,
            a + np.sqrt(p * (b - a) * (c - a)),
            b - np.sqrt((1.0 - p) * (b - a) * (b - c)),
        )

    @property
    def mean(self) -> float:
        return float(triangular_moments(*self.parameters)[0])

    @property
    def mode(self) -> float:
        return self.most_likely

    @property
    def standard_deviation(self) -> float:
        return float(triangular_moments(*self.parameters)[1])

    @property
    def skewness(self) -> float:
        return float(triangular_moments(*self.parameters)[2])

    @property
    def kurtosis(self) -> float:
        return 2.4

    @property
    def minimum(self) -> float:
        return self.min

    @property
    def maximum(self) -> float:
        return self.max

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        """
        Parameters matching a mean, standard deviation and skewness.

        Solved by least squares over (min, log(mode - min), log(max - mode)),
        starting from the symmetric triangle with the given mean and spread.
        """
        mean, sd, skew = moments[0], moments[1], moments[2]
        if not sd > 0.0:
            return np.array([mean, mean, mean])
        half_width = np.sqrt(6.0) * sd

        def unpack(theta):
            a = theta[0]
            c = a + np.exp(theta[1])
            return a, c, c + np.exp(theta[2])

        def residuals(theta):
            m = triangular_moments(*unpack(theta))
            return np.array([(m[0] - mean) / sd, (m[1] - sd) / sd, m[2] - skew])

        start = np.array([mean - half_width, np.log(half_width), np.log(half_width)])
        solution = optimize.least_squares(residuals, start, method="lm")
        return np.array(unpack(solution.x))

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return triangular_moments(*parameters)

    def method_of_moments(self, sample: Sample) -> None:
        """Sample extremes as the bounds and mode = 3 * mean - min - max, clipped to the bounds."""
        x = as_sample(sample)
        a = float(np.min(x))
        b = float(np.max(x))
        c = float(np.clip(3.0 * np.mean(x) - a - b, a, b))
        self.set_parameters([a, c, b])
