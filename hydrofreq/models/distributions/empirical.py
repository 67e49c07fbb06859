"""
Empirical distribution defined by a table of (value, non-exceedance probability) pairs.

The CDF and its inverse interpolate linearly between table points after
mapping each axis through its transform. The default probability transform
is the standard normal z, so interpolation is linear on normal probability
paper; the value axis can also be taken in log10.

The parameter vector is the flattened table ``[x_1..x_n, p_1..p_n]``, so the
generic parameter machinery (cloning, equality, bootstrap) works unchanged.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from hydrofreq.core.exceptions import DimensionError, ParameterError
from hydrofreq.core.parameters import first_error
from hydrofreq.core.types import (
    DistributionType, MomentVector, ParameterEstimationMethod, PlottingPosition, Sample, Transform
)
from hydrofreq.models.distributions.base import TAIL_PROBABILITY, Bootstrappable, UnivariateDistribution
from hydrofreq.utils.differentiation import central_difference
from hydrofreq.utils.interpolation import linear_interpolate
from hydrofreq.utils.statistics import as_sample, plotting_positions

logger = logging.getLogger("hydrofreq.models.distributions.empirical")

# Probability grid used to integrate moments through the quantile function
MOMENT_GRID_SIZE = 2000


def _check_table(x: np.ndarray, p: np.ndarray, x_transform: Transform) -> Optional[ParameterError]:
    if not np.all(np.isfinite(x)):
        return ParameterError("X values must be finite", param_name="x_values", constraint="finite")
    if np.any(np.diff(x) < 0.0):
        return ParameterError("X values must be in ascending order", param_name="x_values",
                              constraint="non-decreasing")
    if x_transform is Transform.LOGARITHMIC and x[0] <= 0.0:
        return ParameterError("X values must be positive for a logarithmic transform",
                              param_name="x_values", param_value=x[0], constraint="x > 0")
    if np.any(np.isnan(p)) or np.any(p < 0.0) or np.any(p > 1.0):
        return ParameterError("Probabilities must lie in [0, 1]", param_name="probabilities",
                              constraint="0 <= p <= 1")
    if np.any(np.diff(p) < 0.0):
        return ParameterError("Probabilities must be in ascending order", param_name="probabilities",
                              constraint="non-decreasing")
    return None


class EmpiricalDistribution(UnivariateDistribution, Bootstrappable):
    """Distribution interpolated from an ascending probability table.

    Values below the table have CDF 0 and values above it CDF 1. Quantiles
    are clamped to the table ends.

    Args:
        x_values: Ascending values
        probabilities: Ascending non-exceedance probabilities, same length
        x_transform: Transform applied to the values before interpolation
        p_transform: Transform applied to the probabilities before interpolation
    """

    distribution_type = DistributionType.EMPIRICAL
    display_name = "Empirical"
    short_display_name = "EMP"

    def __init__(self,
                 x_values: Sequence[float] = (0.0, 1.0),
                 probabilities: Sequence[float] = (0.0, 1.0),
                 x_transform: Transform = Transform.NONE,
                 p_transform: Transform = Transform.NORMAL_Z) -> None:
        self._x_transform = Transform(x_transform)
        self._p_transform = Transform(p_transform)
        x_values = np.asarray(x_values, dtype=float)
        probabilities = np.asarray(probabilities, dtype=float)
        self._check_lengths(x_values, probabilities)
        super().__init__(*np.concatenate([x_values, probabilities]))

    @classmethod
    def from_sample(cls, sample: Sample,
                    plotting_position: Union[PlottingPosition, str] = PlottingPosition.WEIBULL,
                    **kwargs) -> "EmpiricalDistribution":
        """Build the table from a sample: sorted values against their plotting positions."""
        x = np.sort(as_sample(sample, min_size=2))
        return cls(x, plotting_positions(x.size, plotting_position), **kwargs)

    @staticmethod
    def _check_lengths(x_values: np.ndarray, probabilities: np.ndarray) -> None:
        if x_values.ndim != 1 or x_values.shape != probabilities.shape or x_values.size < 2:
            raise DimensionError(
                "X values and probabilities must be 1D arrays of equal length, at least 2",
                array_name="probabilities",
                expected_shape=x_values.shape,
                actual_shape=probabilities.shape
            )

    @property
    def number_of_parameters(self) -> int:
        return int(self._parameters.size)

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        n = self._parameters.size // 2
        return (tuple(f"x{i + 1}" for i in range(n))
                + tuple(f"p{i + 1}" for i in range(n)))

    def _check_arity(self, values: np.ndarray) -> None:
        if values.ndim != 1 or values.size % 2 != 0 or values.size < 4:
            raise DimensionError(
                "Empirical parameters must be a flattened table of at least two (x, p) pairs",
                array_name="parameters",
                expected_shape=(2 * max(values.size // 2, 2),),
                actual_shape=values.shape
            )

    def _split(self, values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        values = np.asarray(values, dtype=float)
        n = values.size // 2
        return values[:n], values[n:]

    @property
    def x_values(self) -> np.ndarray:
        return self._split(self._parameters)[0].copy()

    @property
    def probabilities(self) -> np.ndarray:
        return self._split(self._parameters)[1].copy()

    @property
    def x_transform(self) -> Transform:
        return self._x_transform

    @x_transform.setter
    def x_transform(self, value: Transform) -> None:
        self._x_transform = Transform(value)
        self._revalidate()

    @property
    def p_transform(self) -> Transform:
        return self._p_transform

    @p_transform.setter
    def p_transform(self, value: Transform) -> None:
        self._p_transform = Transform(value)
        self._revalidate()

    def set_table(self, x_values: Sequence[float], probabilities: Sequence[float]) -> None:
        """Replace the probability table."""
        x_values = np.asarray(x_values, dtype=float)
        probabilities = np.asarray(probabilities, dtype=float)
        self._check_lengths(x_values, probabilities)
        self.set_parameters(np.concatenate([x_values, probabilities]))

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        x, p = self._split(values)
        return first_error(_check_table(x, p, self._x_transform), throw=throw)

    def _on_parameters_changed(self) -> None:
        self._moments = None

    def _table(self) -> Tuple[np.ndarray, np.ndarray]:
        """Table with probabilities pulled inside (0, 1) so the z transform stays finite."""
        x, p = self._split(self._parameters)
        return x, np.clip(p, TAIL_PROBABILITY, 1.0 - TAIL_PROBABILITY)

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        x_table, p_table = self._table()
        out = linear_interpolate(x, x_table, p_table, self._x_transform, self._p_transform)
        out = np.where(x < x_table[0], 0.0, out)
        return np.where(x > x_table[-1], 1.0, out)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        x_table, p_table = self._table()
        return linear_interpolate(p, p_table, x_table, self._p_transform, self._x_transform)

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        density = central_difference(self._cdf, x)
        inside = (x >= self.minimum) & (x <= self.maximum)
        return np.where(inside, np.maximum(density, 0.0), 0.0)

    def _compute_moments(self) -> MomentVector:
        if self._moments is None:
            self._ensure_valid()
            grid = (np.arange(MOMENT_GRID_SIZE) + 0.5) / MOMENT_GRID_SIZE
            q = np.asarray(self.inverse_cdf(grid))
            mean = float(np.mean(q))
            deviations = q - mean
            sd = float(np.sqrt(np.mean(deviations ** 2)))
            if sd == 0.0:
                self._moments = np.array([mean, 0.0, 0.0, 3.0])
            else:
                self._moments = np.array([
                    mean, sd,
                    float(np.mean(deviations ** 3)) / sd ** 3,
                    float(np.mean(deviations ** 4)) / sd ** 4,
                ])
        return self._moments

    @property
    def mean(self) -> float:
        return float(self._compute_moments()[0])

    @property
    def mode(self) -> float:
        return np.nan

    @property
    def standard_deviation(self) -> float:
        return float(self._compute_moments()[1])

    @property
    def skewness(self) -> float:
        return float(self._compute_moments()[2])

    @property
    def kurtosis(self) -> float:
        return float(self._compute_moments()[3])

    @property
    def minimum(self) -> float:
        return float(self._parameters[0])

    @property
    def maximum(self) -> float:
        return float(self._parameters[self._parameters.size // 2 - 1])

    def _refit(self, sample: np.ndarray, method: ParameterEstimationMethod) -> None:
        """Rebuild the table from the sample with Weibull plotting positions; the method is ignored."""
        x = np.sort(as_sample(sample, min_size=2))
        self.set_table(x, plotting_positions(x.size, PlottingPosition.WEIBULL))

    def __repr__(self) -> str:
        n = self._parameters.size // 2
        return (f"{type(self).__name__}(points={n}, range=[{self.minimum:.6g}, {self.maximum:.6g}], "
                f"x_transform={self._x_transform.value}, p_transform={self._p_transform.value})")
