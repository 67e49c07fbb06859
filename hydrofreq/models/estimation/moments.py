'''
Moment-based estimation support.

Bridges sample statistics and distribution parameters: re-exports the sample
moment functions, builds the order-of-magnitude search envelopes used to seed
and bound maximum likelihood, and dispatches an estimation method to a
distribution.
'''

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from hydrofreq.core.parameters import ParameterConstraints
from hydrofreq.core.types import MethodLike, ParameterEstimationMethod, Sample
from hydrofreq.utils.statistics import (
    linear_moments, log_transform, percentile, product_moments
)

logger = logging.getLogger("hydrofreq.models.estimation.moments")

MACHINE_EPSILON = np.finfo(float).eps

__all__ = [
    'product_moments', 'linear_moments', 'percentile', 'log_transform',
    'order_of_magnitude', 'order_of_magnitude_bounds', 'scale_bounds',
    'build_constraints', 'estimate',
]


def order_of_magnitude(value: float, offset: float = 1.0) -> float:
    """
    Power of ten one order above a value: 10**ceil(log10|value| + offset).

    A zero value is replaced by machine epsilon, and a non-finite result
    falls back to 10**offset.
    """
    value = abs(float(value))
    if value == 0.0:
        value = MACHINE_EPSILON
    with np.errstate(divide="ignore", invalid="ignore"):
        magnitude = 10.0 ** np.ceil(np.log10(value) + offset)
    if not np.isfinite(magnitude):
        return 10.0 ** offset
    return float(magnitude)


def order_of_magnitude_bounds(value: float) -> Tuple[float, float]:
    """
    Symmetric envelope for a location-like parameter.

    Returns:
        (-10**ceil(log10|v| + 1), 10**ceil(log10|v| + 1))
    """
    magnitude = order_of_magnitude(value)
    return -magnitude, magnitude


def scale_bounds(value: float) -> Tuple[float, float]:
    """
    Envelope for a positive scale-like parameter.

    Returns:
        (machine epsilon, 10**ceil(log10 v + 1))
    """
    return MACHINE_EPSILON, order_of_magnitude(value)


def build_constraints(initial: Sequence[float],
                      lower: Sequence[float],
                      upper: Sequence[float],
                      names: Sequence[str] = (),
                      neutral: Optional[Sequence[Optional[float]]] = None) -> ParameterConstraints:
    """
    Assemble ParameterConstraints, repairing initial values outside their bounds.

    Args:
        initial: Initial parameter values
        lower: Lower bounds
        upper: Upper bounds
        names: Parameter names for error messages
        neutral: Per-parameter replacement for an initial value that does not
            lie strictly inside its bounds (e.g. 0 for a shape or skew). None
            entries use the midpoint of the bounds.

    Returns:
        ParameterConstraints with every initial value strictly inside its bounds
    """
    initial = np.array(initial, dtype=float)
    lower = np.array(lower, dtype=float)
    upper = np.array(upper, dtype=float)
    if neutral is None:
        neutral = [None] * len(initial)

    for i in range(len(initial)):
        if not (lower[i] < initial[i] < upper[i]) or not np.isfinite(initial[i]):
            replacement = neutral[i]
            if replacement is None or not (lower[i] < replacement < upper[i]):
                replacement = 0.5 * (lower[i] + upper[i])
            logger.debug(f"Initial value {initial[i]} of parameter {i} outside bounds; using {replacement}")
            initial[i] = replacement

    constraints = ParameterConstraints(initial, lower, upper, names=tuple(names))
    if not constraints.contains_initial():
        constraints.clip_initial()
    return constraints


def estimate(distribution, sample: Sample, method: MethodLike) -> None:
    """
    Estimate a distribution's parameters from a sample by the given method.

    Args:
        distribution: Distribution instance to update in place
        sample: Observed values
        method: Estimation method (enum member or value such as "LMOM")

    Raises:
        EstimationMethodError: If the distribution does not support the method
        ConvergenceError: If a maximum likelihood search does not converge
    """
    distribution.estimate(sample, ParameterEstimationMethod.from_value(method))
