"""
Finite differences.

Quantile partial derivatives fall back to differencing the inverse CDF with
respect to the parameter vector when a distribution has no closed form, and
tabular distributions take their density as the slope of the CDF.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import (
    HydroFreqError, NumericError, raise_dimension_error, warn_numeric
)
from hydrofreq.core.types import Vector, ObjectiveFunction

# Set up module-level logger
logger = logging.getLogger("hydrofreq.utils.differentiation")

_SQRT_EPS = np.sqrt(np.finfo(float).eps)


def default_step(x: Vector) -> Vector:
    """
    Per-element finite-difference steps.

    A fixed step from the numerical configuration is used when one is set;
    otherwise each step is max(|x_i|, 1e-8) * sqrt(eps), floored at sqrt(eps).

    Args:
        x: Point at which derivatives will be taken

    Returns:
        Array of step sizes with the shape of x
    """
    x = np.asarray(x, dtype=float)
    fixed = get_config("numerical", "finite_difference_step")
    if fixed is not None:
        return np.full(x.shape, float(fixed))
    steps = np.maximum(np.abs(x), 1e-8) * _SQRT_EPS
    return np.maximum(steps, _SQRT_EPS)


def _evaluate(func: Callable, x: np.ndarray, args: Tuple, operation: str):
    try:
        return func(x, *args)
    except HydroFreqError:
        raise
    except (ArithmeticError, ValueError, TypeError) as e:
        raise NumericError(
            f"Function evaluation failed in {operation}: {str(e)}",
            operation=operation,
            values=x.copy(),
            error_type="function_evaluation_error"
        ) from e


def gradient_2sided(func: ObjectiveFunction,
                    x: Vector,
                    epsilon: Optional[float] = None,
                    args: Tuple = ()) -> Vector:
    """
    Central-difference gradient of a scalar function of a parameter vector.

    Each component is [f(x + h_i e_i) - f(x - h_i e_i)] / (2 h_i), with h_i
    from default_step unless epsilon is given.

    Args:
        func: Scalar function of a 1D vector
        x: Point at which to compute the gradient
        epsilon: Fixed step for every component
        args: Additional arguments passed to func

    Returns:
        Gradient with the shape of x

    Raises:
        DimensionError: If x is not a 1D array
        NumericError: If func fails with an arithmetic error

    Examples:
        >>> import numpy as np
        >>> from hydrofreq.utils.differentiation import gradient_2sided
        >>> def f(x): return x[0]**2 + x[1]**2
        >>> np.round(gradient_2sided(f, np.array([1.0, 2.0])), 6)
        array([2., 4.])
    """
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise_dimension_error(
            "Gradient point must be a 1D vector",
            array_name="x",
            expected_shape="(n,)",
            actual_shape=x.shape
        )

    steps = default_step(x) if epsilon is None else np.full(x.shape, float(epsilon))
    gradient = np.zeros(x.shape[0], dtype=float)
    shifted = x.copy()

    for i, step in enumerate(steps):
        shifted[i] = x[i] + step
        upper = shifted[i]
        f_upper = _evaluate(func, shifted, args, "gradient_2sided")
        shifted[i] = x[i] - step
        lower = shifted[i]
        f_lower = _evaluate(func, shifted, args, "gradient_2sided")
        shifted[i] = x[i]

        # Divide by the realized step, not 2h
        gradient[i] = (f_upper - f_lower) / (upper - lower)
        if not np.isfinite(gradient[i]):
            warn_numeric(
                f"Non-finite gradient component {i}",
                operation="gradient_2sided",
                issue="non_finite_gradient",
                value=gradient[i]
            )

    return gradient


def central_difference(func: Callable[[np.ndarray], np.ndarray], x) -> np.ndarray:
    """
    Element-wise derivative of a vectorized function.

    func must map an array to an array of the same shape, as a CDF does.
    """
    x = np.asarray(x, dtype=float)
    h = default_step(x)
    upper = _evaluate(func, x + h, (), "central_difference")
    lower = _evaluate(func, x - h, (), "central_difference")
    return (np.asarray(upper, dtype=float) - np.asarray(lower, dtype=float)) / (2.0 * h)
