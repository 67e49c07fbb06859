"""
PERT distribution: a beta distribution rescaled to [min, max] whose shape
is set by the most likely value,

    α = 1 + 4 (mode - min) / (max - min),  β = 1 + 4 (max - mode) / (max - min)
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import optimize, special

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import check_finite, check_ordering, check_range, first_error
from hydrofreq.core.types import DistributionType, Sample
from hydrofreq.models.distributions.base import Bootstrappable, PercentileEstimable, UnivariateDistribution
from hydrofreq.utils.statistics import percentile

logger = logging.getLogger("hydrofreq.models.distributions.pert")

PERCENTILE_POINTS = (0.05, 0.5, 0.95)


class Pert(UnivariateDistribution, PercentileEstimable, Bootstrappable):
    """PERT distribution.

    When min == mode == max the distribution is a point: PDF 0, CDF 1 for
    every x, and every quantile equal to it.

    Args:
        min: Lower bound
        mode: Most likely value, min <= mode <= max
        max: Upper bound
    """

    distribution_type = DistributionType.PERT
    display_name = "PERT"
    short_display_name = "PERT"
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

    @property
    def shape_parameters(self) -> Tuple[float, float]:
        """Beta shape parameters (α, β)."""
        a, c, b = self.parameters
        if b == a:
            return 1.0, 1.0
        return 1.0 + 4.0 * (c - a) / (b - a), 1.0 + 4.0 * (b - c) / (b - a)

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        out = np.full(x.shape, -np.inf)
        if self._is_point():
            return out
        a, _, b = self.parameters
        alpha, beta = self.shape_parameters
        inside = (x >= a) & (x <= b)
        z = (x[inside] - a) / (b - a)
        out[inside] = (special.xlogy(alpha - 1.0, z) + special.xlog1py(beta - 1.0, -z)
                       - special.betaln(alpha, beta) - np.log(b - a))
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        if self._is_point():
            return np.ones(x.shape)
        a, _, b = self.parameters
        alpha, beta = self.shape_parameters
        return special.betainc(alpha, beta, np.clip((x - a) / (b - a), 0.0, 1.0))

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        if self._is_point():
            return np.full(p.shape, self.min)
        a, _, b = self.parameters
        alpha, beta = self.shape_parameters
        return a + (b - a) * special.betaincinv(alpha, beta, p)

    @property
    def mean(self) -> float:
        a, c, b = self.parameters
        return (a + 4.0 * c + b) / 6.0

    @property
    def mode(self) -> float:
        return self.most_likely

    @property
    def standard_deviation(self) -> float:
        a, _, b = self.parameters
        mu = self.mean
        return float(np.sqrt((mu - a) * (b - mu) / 7.0))

    @property
    def skewness(self) -> float:
        if self._is_point():
            return 0.0
        alpha, beta = self.shape_parameters
        return float(2.0 * (beta - alpha) * np.sqrt(alpha + beta + 1.0)
                     / ((alpha + beta + 2.0) * np.sqrt(alpha * beta)))

    @property
    def kurtosis(self) -> float:
        if self._is_point():
            return 3.0
        alpha, beta = self.shape_parameters
        s = alpha + beta
        excess = (6.0 * ((alpha - beta) ** 2 * (s + 1.0) - alpha * beta * (s + 2.0))
                  / (alpha * beta * (s + 2.0) * (s + 3.0)))
        return 3.0 + excess

    @property
    def minimum(self) -> float:
        return self.min

    @property
    def maximum(self) -> float:
        return self.max

    def method_of_percentiles(self, sample: Sample) -> None:
        """
        Match the 5th, 50th and 95th sample percentiles.

        Solved by least squares over (min, log(mode - min), log(max - mode)).
        A sample whose 5th and 95th percentiles coincide gives a point.
        """
        targets = np.asarray(percentile(sample, PERCENTILE_POINTS), dtype=float)
        low, middle, high = targets
        spread = high - low
        if not spread > 0.0:
            self.set_parameters([middle, middle, middle])
            return

        def unpack(theta):
            a = theta[0]
            c = a + np.exp(theta[1])
            return a, c, c + np.exp(theta[2])

        working = Pert()

        def residuals(theta):
            working.set_parameters(unpack(theta))
            return (np.asarray(working.inverse_cdf(PERCENTILE_POINTS)) - targets) / spread

        start = np.array([
            low - 0.5 * (middle - low),
            np.log(max(1.5 * (middle - low), 1e-6 * spread)),
            np.log(max(1.5 * (high - middle), 1e-6 * spread)),
        ])
        solution = optimize.least_squares(residuals, start, method="lm")
        self.set_parameters(unpack(solution.x))
