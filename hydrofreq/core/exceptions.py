'''
Exception and warning classes for hydrofreq.

Errors fall into a small number of categories that callers are expected to
handle differently:

* domain errors (ParameterError, ProbabilityError) when a parameter or a
  probability argument violates its declared range,
* EstimationMethodError when a distribution has no formula for the requested
  estimation method,
* ConvergenceError when the optimizer or a root finder fails and the caller
  asked for an exception rather than a result flag,
* BootstrapError when a bootstrap replicate cannot be used downstream.

Every error carries a primary message plus optional details and a context
dictionary, all folded into the string representation together with the
location that raised it.
'''

from typing import Any, Dict, Optional, Tuple, Union
import inspect
import warnings
import numpy as np
from pathlib import Path


def _format_message(message: str,
                    details: Optional[str],
                    context: Optional[Dict[str, Any]],
                    frame_depth: int = 2) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"

    frame = inspect.currentframe()
    if frame:
        try:
            for _ in range(frame_depth):
                if frame is None:
                    break
                frame = frame.f_back
            if frame:
                caller_info = inspect.getframeinfo(frame)
                full_message += f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"
        finally:
            del frame  # Avoid reference cycles

    return full_message


class HydroFreqError(Exception):
    """Base exception class for all hydrofreq errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the HydroFreqError.

        Args:
            message: The primary error message
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(_format_message(message, details, context, frame_depth=3))


class ParameterError(HydroFreqError):
    """Exception raised when a distribution parameter violates its constraints.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the ParameterError.

        Args:
            message: The primary error message
            param_name: The name of the parameter that caused the error
            param_value: The invalid parameter value
            constraint: Description of the constraint that was violated
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = dict(context or {})
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class ProbabilityError(ParameterError):
    """Exception raised when a probability argument lies outside [0, 1]."""

    def __init__(self,
                 message: str = "Probability must be between 0 and 1.",
                 param_value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message,
                         param_name="probability",
                         param_value=param_value,
                         constraint="0 <= probability <= 1",
                         details=details,
                         context=context)


class DimensionError(HydroFreqError):
    """Exception raised when a vector has the wrong length or shape.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = dict(context or {})
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details, context_dict)


class ConvergenceError(HydroFreqError):
    """Exception raised when an optimizer or root finder fails to converge.

    Attributes:
        iterations: The number of iterations performed before failure
        tolerance: The convergence tolerance that was used
        final_value: The final objective function value
    """

    def __init__(self,
                 message: str,
                 iterations: Optional[int] = None,
                 tolerance: Optional[float] = None,
                 final_value: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.iterations = iterations
        self.tolerance = tolerance
        self.final_value = final_value

        context_dict = dict(context or {})
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if tolerance is not None:
            context_dict["Tolerance"] = tolerance
        if final_value is not None:
            context_dict["Final Value"] = final_value

        super().__init__(message, details, context_dict)


class NumericError(HydroFreqError):
    """Exception raised for numerical computation errors.

    Attributes:
        operation: The operation that caused the error
        values: The values that caused the error
        error_type: The type of numerical error (e.g., "overflow", "nan")
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 values: Optional[Any] = None,
                 error_type: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.values = values
        self.error_type = error_type

        context_dict = dict(context or {})
        if operation:
            context_dict["Operation"] = operation
        if values is not None:
            if isinstance(values, np.ndarray) and values.size > 10:
                # Truncate large arrays for readability
                context_dict["Values"] = f"Array with shape {values.shape}"
            else:
                context_dict["Values"] = values
        if error_type:
            context_dict["Error Type"] = error_type

        super().__init__(message, details, context_dict)


class DataError(HydroFreqError):
    """Exception raised for errors related to sample data.

    Attributes:
        data_name: The name of the data that caused the error
        issue: Description of the issue with the data
    """

    def __init__(self,
                 message: str,
                 data_name: Optional[str] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.data_name = data_name
        self.issue = issue

        context_dict = dict(context or {})
        if data_name:
            context_dict["Data"] = data_name
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class DistributionError(HydroFreqError):
    """Exception raised when an operation is undefined for a distribution.

    Attributes:
        distribution_type: The type of distribution
        parameter: The parameter that caused the error
        value: The offending value
        issue: Description of the issue with the distribution
    """

    def __init__(self,
                 message: str,
                 distribution_type: Optional[str] = None,
                 parameter: Optional[str] = None,
                 value: Optional[Any] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.distribution_type = distribution_type
        self.parameter = parameter
        self.value = value
        self.issue = issue

        context_dict = dict(context or {})
        if distribution_type:
            context_dict["Distribution"] = distribution_type
        if parameter:
            context_dict["Parameter"] = parameter
        if value is not None:
            context_dict["Value"] = value
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class EstimationMethodError(HydroFreqError):
    """Exception raised when a distribution has no formula for an estimation method.

    This is a capability gap, not a domain error: the parameters may be
    perfectly valid but the requested method/distribution pairing is not
    defined.

    Attributes:
        distribution_type: The type of distribution
        estimation_method: The unsupported estimation method
        operation: The operation that was requested
    """

    def __init__(self,
                 message: str,
                 distribution_type: Optional[str] = None,
                 estimation_method: Optional[Any] = None,
                 operation: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.distribution_type = distribution_type
        self.estimation_method = estimation_method
        self.operation = operation

        context_dict = dict(context or {})
        if distribution_type:
            context_dict["Distribution"] = distribution_type
        if estimation_method is not None:
            context_dict["Estimation Method"] = estimation_method
        if operation:
            context_dict["Operation"] = operation

        super().__init__(message, details, context_dict)


class BootstrapError(HydroFreqError):
    """Exception raised for errors during bootstrap procedures.

    Attributes:
        bootstrap_type: The type of bootstrap being used
        n_bootstraps: The number of bootstrap replications
        issue: Description of the issue that occurred during bootstrap
    """

    def __init__(self,
                 message: str,
                 bootstrap_type: Optional[str] = None,
                 n_bootstraps: Optional[int] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.bootstrap_type = bootstrap_type
        self.n_bootstraps = n_bootstraps
        self.issue = issue

        context_dict = dict(context or {})
        if bootstrap_type:
            context_dict["Bootstrap Type"] = bootstrap_type
        if n_bootstraps is not None:
            context_dict["Replications"] = n_bootstraps
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class ConfigurationError(HydroFreqError):
    """Exception raised for invalid configuration values.

    Attributes:
        section: The configuration section
        option: The configuration option
        value: The invalid value
    """

    def __init__(self,
                 message: str,
                 section: Optional[str] = None,
                 option: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.section = section
        self.option = option
        self.value = value

        context_dict = dict(context or {})
        if section:
            context_dict["Section"] = section
        if option:
            context_dict["Option"] = option
        if value is not None:
            context_dict["Value"] = value

        super().__init__(message, details, context_dict)


class HydroFreqWarning(Warning):
    """Base warning class for all hydrofreq warnings.

    Attributes:
        message: The warning message
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(_format_message(message, details, context, frame_depth=3))


class ConvergenceWarning(HydroFreqWarning):
    """Warning issued when an optimizer stops without reporting success.

    Attributes:
        iterations: The number of iterations performed
        tolerance: The convergence tolerance that was used
    """

    def __init__(self,
                 message: str,
                 iterations: Optional[int] = None,
                 tolerance: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.iterations = iterations
        self.tolerance = tolerance

        context_dict = dict(context or {})
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if tolerance is not None:
            context_dict["Tolerance"] = tolerance

        super().__init__(message, details, context_dict)


class NumericWarning(HydroFreqWarning):
    """Warning for numerical issues that do not prevent computation.

    Attributes:
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue
        self.value = value

        context_dict = dict(context or {})
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue
        if value is not None:
            context_dict["Value"] = value

        super().__init__(message, details, context_dict)


# Helper functions for raising exceptions with consistent formatting

def raise_parameter_error(message: str,
                          param_name: Optional[str] = None,
                          param_value: Optional[Any] = None,
                          constraint: Optional[str] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a ParameterError with consistent formatting.

    Raises:
        ParameterError: The formatted parameter error
    """
    raise ParameterError(message, param_name, param_value, constraint, details, context)


def raise_dimension_error(message: str,
                          array_name: Optional[str] = None,
                          expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                          actual_shape: Optional[Tuple[int, ...]] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionError with consistent formatting.

    Raises:
        DimensionError: The formatted dimension error
    """
    raise DimensionError(message, array_name, expected_shape, actual_shape, details, context)


def raise_data_error(message: str,
                     data_name: Optional[str] = None,
                     issue: Optional[str] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DataError with consistent formatting.

    Raises:
        DataError: The formatted data error
    """
    raise DataError(message, data_name, issue, details, context)


def warn_convergence(message: str,
                     iterations: Optional[int] = None,
                     tolerance: Optional[float] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a ConvergenceWarning with consistent formatting."""
    warnings.warn(
        ConvergenceWarning(message, iterations, tolerance, details, context),
        stacklevel=2
    )


def warn_numeric(message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a NumericWarning with consistent formatting."""
    warnings.warn(
        NumericWarning(message, operation, issue, value, details, context),
        stacklevel=2
    )
