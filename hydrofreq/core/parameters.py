# hydrofreq/core/parameters.py

"""
Parameter validation infrastructure for hydrofreq.

This module holds the pieces every distribution uses to manage its parameter
vector: the validation state record, the validators that produce typed
ParameterError instances, and the ParameterConstraints container that seeds
and bounds a maximum likelihood search.

Validators share one convention. Called with ``throw=False`` they return the
error (or None) so the caller can record it; called with ``throw=True`` they
raise it.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .exceptions import ParameterError, ProbabilityError
from .types import ValidationState


@dataclass
class ParameterState:
    """Validation state of a parameter vector.

    Attributes:
        state: One of UNVALIDATED, VALID or INVALID
        error: The error recorded by the last failed validation
    """
    state: ValidationState = ValidationState.UNVALIDATED
    error: Optional[ParameterError] = None

    @classmethod
    def from_error(cls, error: Optional[ParameterError]) -> "ParameterState":
        """Build the state that results from a validation outcome."""
        if error is None:
            return cls(ValidationState.VALID, None)
        return cls(ValidationState.INVALID, error)

    @property
    def is_valid(self) -> bool:
        return self.state is ValidationState.VALID

    @property
    def is_stale(self) -> bool:
        """True when numerical methods must re-validate before computing."""
        return self.state is not ValidationState.VALID

    @property
    def reason(self) -> Optional[str]:
        return None if self.error is None else self.error.message

    def invalidate(self) -> None:
        """Mark the state as needing validation."""
        self.state = ValidationState.UNVALIDATED
        self.error = None


def _resolve(error: Optional[ParameterError], throw: bool) -> Optional[ParameterError]:
    if error is not None and throw:
        raise error
    return error


def check_finite(value: float, param_name: str, throw: bool = False) -> Optional[ParameterError]:
    """Check that a parameter is a real, finite number.

    Args:
        value: Parameter value to check
        param_name: Name of the parameter for error messages
        throw: Raise the error instead of returning it

    Returns:
        None when the value is finite, otherwise the ParameterError

    Raises:
        ParameterError: If throw is True and the value is NaN or infinite
    """
    if math.isnan(value):
        return _resolve(ParameterError(
            f"Parameter {param_name} must be a number, got NaN",
            param_name=param_name, param_value=value, constraint="not NaN"), throw)
    if math.isinf(value):
        return _resolve(ParameterError(
            f"Parameter {param_name} must be finite, got {value}",
            param_name=param_name, param_value=value, constraint="finite"), throw)
    return None


def check_positive(value: float, param_name: str, throw: bool = False,
                   strict: bool = True) -> Optional[ParameterError]:
    """Check that a parameter is finite and positive.

    Args:
        value: Parameter value to check
        param_name: Name of the parameter for error messages
        throw: Raise the error instead of returning it
        strict: Require value > 0 (True) or value >= 0 (False)

    Returns:
        None when the value is valid, otherwise the ParameterError

    Raises:
        ParameterError: If throw is True and the check fails
    """
    error = check_finite(value, param_name)
    if error is None and (value <= 0 if strict else value < 0):
        constraint = f"{param_name} > 0" if strict else f"{param_name} >= 0"
        error = ParameterError(
            f"Parameter {param_name} must be {'positive' if strict else 'non-negative'}, got {value}",
            param_name=param_name, param_value=value, constraint=constraint)
    return _resolve(error, throw)


def check_range(value: float, param_name: str,
                min_value: Optional[float] = None,
                max_value: Optional[float] = None,
                throw: bool = False) -> Optional[ParameterError]:
    """Check that a parameter is finite and within a closed range.

    Args:
        value: Parameter value to check
        param_name: Name of the parameter for error messages
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive)
        throw: Raise the error instead of returning it

    Returns:
        None when the value is valid, otherwise the ParameterError

    Raises:
        ParameterError: If throw is True and the check fails
    """
    error = check_finite(value, param_name)
    if error is None and min_value is not None and value < min_value:
        error = ParameterError(
            f"Parameter {param_name} must be at least {min_value}, got {value}",
            param_name=param_name, param_value=value,
            constraint=f"{param_name} >= {min_value}")
    if error is None and max_value is not None and value > max_value:
        error = ParameterError(
            f"Parameter {param_name} must be at most {max_value}, got {value}",
            param_name=param_name, param_value=value,
            constraint=f"{param_name} <= {max_value}")
    return _resolve(error, throw)


def check_ordering(lower: float, upper: float,
                   lower_name: str, upper_name: str,
                   throw: bool = False) -> Optional[ParameterError]:
    """Check that two co-dependent parameters satisfy lower <= upper.

    The error names the upper parameter, which is the one whose candidate
    value is compared against its sibling.

    Raises:
        ParameterError: If throw is True and the ordering is violated
    """
    error = None
    if lower > upper:
        error = ParameterError(
            f"Parameter {upper_name} must be greater than or equal to {lower_name}",
            param_name=upper_name, param_value=upper,
            constraint=f"{lower_name} <= {upper_name}",
            context={lower_name: lower})
    return _resolve(error, throw)


def first_error(*errors: Optional[ParameterError], throw: bool = False) -> Optional[ParameterError]:
    """Return (or raise) the first error among validator results, in order.

    Example:
        >>> first_error(check_finite(mu, "mean"), check_positive(sigma, "sigma"), throw=True)
    """
    for error in errors:
        if error is not None:
            return _resolve(error, throw)
    return None


def validate_probability(probability) -> None:
    """Validate that a probability argument (scalar or array) lies in [0, 1].

    Raises:
        ProbabilityError: If any value is NaN or outside [0, 1]
    """
    p = np.asarray(probability, dtype=float)
    if np.any(np.isnan(p)) or np.any(p < 0.0) or np.any(p > 1.0):
        bad = p if p.ndim == 0 else p[np.isnan(p) | (p < 0.0) | (p > 1.0)][0]
        raise ProbabilityError(param_value=float(bad))


@dataclass
class ParameterConstraints:
    """Initial values and box bounds for a maximum likelihood search.

    Attributes:
        initial: Initial parameter values
        lower: Lower bounds
        upper: Upper bounds
    """
    initial: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    names: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.initial = np.asarray(self.initial, dtype=float).copy()
        self.lower = np.asarray(self.lower, dtype=float).copy()
        self.upper = np.asarray(self.upper, dtype=float).copy()

        if not (len(self.initial) == len(self.lower) == len(self.upper)):
            raise ParameterError(
                "Initial values and bounds must have the same length",
                param_name="constraints",
                param_value=(len(self.initial), len(self.lower), len(self.upper)))
        if np.any(self.lower > self.upper):
            index = int(np.argmax(self.lower > self.upper))
            raise ParameterError(
                "Lower bound must not exceed upper bound",
                param_name=self._name(index),
                param_value=(self.lower[index], self.upper[index]),
                constraint="lower <= upper")

    def _name(self, index: int) -> str:
        if index < len(self.names):
            return self.names[index]
        return f"parameter[{index}]"

    @property
    def bounds(self):
        """Bounds as a list of (lower, upper) pairs."""
        return list(zip(self.lower, self.upper))

    def contains_initial(self) -> bool:
        """True when every initial value lies strictly inside its bounds."""
        return bool(np.all(self.lower < self.initial) and np.all(self.initial < self.upper))

    def clip_initial(self, fraction: float = 1e-6) -> np.ndarray:
        """Pull initial values strictly inside the bounds and return them."""
        width = self.upper - self.lower
        margin = np.where(width > 0, width * fraction, 0.0)
        self.initial = np.clip(self.initial, self.lower + margin, self.upper - margin)
        return self.initial
