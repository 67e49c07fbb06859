"""
Interpolation helpers for probability tables.

Empirical distributions and expected-probability curves interpolate between
tabulated (value, probability) pairs, optionally after mapping either axis
to a transformed space: log10 for values, standard normal z for
probabilities.
"""

import logging
from typing import Union

import numpy as np
from scipy import special
from scipy.interpolate import PchipInterpolator

from hydrofreq.core.exceptions import raise_data_error
from hydrofreq.core.types import Transform, Vector

logger = logging.getLogger("hydrofreq.utils.interpolation")


def to_axis(values: Union[float, Vector], transform: Transform) -> np.ndarray:
    """Map values onto a transformed axis.

    Probabilities of exactly 0 or 1 map to -inf/+inf under the normal-z
    transform; callers keep those out of tables.
    """
    values = np.asarray(values, dtype=float)
    if transform is Transform.LOGARITHMIC:
        return np.log10(values)
    if transform is Transform.NORMAL_Z:
        return special.ndtri(values)
    return values


def from_axis(values: Union[float, Vector], transform: Transform) -> np.ndarray:
    """Inverse of to_axis."""
    values = np.asarray(values, dtype=float)
    if transform is Transform.LOGARITHMIC:
        return np.power(10.0, values)
    if transform is Transform.NORMAL_Z:
        return special.ndtr(values)
    return values


def linear_interpolate(x: Union[float, Vector],
                       x_table: Vector,
                       y_table: Vector,
                       x_transform: Transform = Transform.NONE,
                       y_transform: Transform = Transform.NONE) -> np.ndarray:
    """
    Linear interpolation in transformed space, clamped at the table ends.

    Args:
        x: Points to evaluate
        x_table: Ascending table abscissae
        y_table: Table ordinates
        x_transform: Transform applied to the abscissae before interpolation
        y_transform: Transform applied to the ordinates before interpolation

    Returns:
        Interpolated ordinates mapped back from the transformed space
    """
    x = np.asarray(x, dtype=float)
    tx = to_axis(x_table, x_transform)
    ty = to_axis(y_table, y_transform)
    xs = to_axis(np.clip(x, x_table[0], x_table[-1]), x_transform)
    return from_axis(np.interp(xs, tx, ty), y_transform)


def strictly_increasing(x: Vector, y: Vector):
    """Keep only the points where both x and y strictly increase.

    Returns:
        Tuple of the filtered (x, y) arrays
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    keep_x = [x[0]]
    keep_y = [y[0]]
    for xi, yi in zip(x[1:], y[1:]):
        if xi > keep_x[-1] and yi > keep_y[-1]:
            keep_x.append(xi)
            keep_y.append(yi)
    return np.array(keep_x), np.array(keep_y)


def monotone_interpolator(x: Vector, y: Vector) -> PchipInterpolator:
    """
    Shape-preserving monotone cubic interpolator through (x, y).

    Raises:
        DataError: If fewer than two strictly increasing points remain
    """
    xs, ys = strictly_increasing(x, y)
    if xs.size < 2:
        raise_data_error(
            "Monotone interpolation requires at least two strictly increasing points",
            data_name="interpolation table",
            issue=f"{xs.size} usable point(s)"
        )
    return PchipInterpolator(xs, ys, extrapolate=True)
