# hydrofreq/core/types.py

"""
Core type annotations and enumerations for hydrofreq.

This module defines the type aliases shared across the package together with
the enumerations that name distribution families, estimation methods and the
validation state of a parameter vector.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence, Union

import numpy as np

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array
ParameterVector = np.ndarray  # Vector of distribution parameters
CovarianceMatrix = np.ndarray  # Covariance matrix (symmetric)
MomentVector = np.ndarray  # [mean, sd, skew, kurtosis] or [L1, L2, tau3, tau4]

# Inputs
Sample = Union[np.ndarray, Sequence[float]]
ArrayLike = Union[float, np.ndarray, Sequence[float]]
RandomState = Optional[Union[int, np.random.Generator]]

# Parameter types
ParameterDict = Dict[str, Any]

# Optimization types
ObjectiveFunction = Callable[[np.ndarray], float]
GradientFunction = Callable[[np.ndarray], np.ndarray]

# Logging level names accepted by the configuration system
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Configuration types
ConfigDict = Dict[str, Any]

# Confidence interval method types
ConfidenceIntervalType = Literal["percentile", "bias-corrected", "normal"]


class ParameterEstimationMethod(Enum):
    """Enumeration of parameter estimation methods."""
    MAXIMUM_LIKELIHOOD = "MLE"
    METHOD_OF_MOMENTS = "MOM"
    METHOD_OF_LINEAR_MOMENTS = "LMOM"
    METHOD_OF_PERCENTILES = "PERCENTILES"

    @classmethod
    def from_value(cls, value: Union[str, "ParameterEstimationMethod"]) -> "ParameterEstimationMethod":
        """Resolve an estimation method from an enum member, value or alias.

        Args:
            value: Enum member, value ("MLE"), member name or a common alias
                such as "moments" or "lmoments"

        Returns:
            The matching estimation method

        Raises:
            ValueError: If the value does not name a known method
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        if key in _METHOD_ALIASES:
            return _METHOD_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            pass
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown parameter estimation method: {value}")


_METHOD_ALIASES = {
    "MAXIMUM_LIKELIHOOD": ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
    "ML": ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
    "MOMENTS": ParameterEstimationMethod.METHOD_OF_MOMENTS,
    "PRODUCT_MOMENTS": ParameterEstimationMethod.METHOD_OF_MOMENTS,
    "L_MOMENTS": ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS,
    "LMOMENTS": ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS,
    "LINEAR_MOMENTS": ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS,
    "PERCENTILE": ParameterEstimationMethod.METHOD_OF_PERCENTILES,
}


class DistributionType(Enum):
    """Enumeration of univariate distribution families."""
    DETERMINISTIC = "Deterministic"
    UNIFORM = "Uniform"
    TRIANGULAR = "Triangular"
    PERT = "PERT"
    NORMAL = "Normal"
    LOG_NORMAL = "LogNormal"
    EXPONENTIAL = "Exponential"
    GUMBEL = "Gumbel"
    LOGISTIC = "Logistic"
    GENERALIZED_EXTREME_VALUE = "GeneralizedExtremeValue"
    GENERALIZED_PARETO = "GeneralizedPareto"
    GAMMA = "Gamma"
    PEARSON_TYPE_III = "PearsonTypeIII"
    LOG_PEARSON_TYPE_III = "LogPearsonTypeIII"
    WEIBULL = "Weibull"
    EMPIRICAL = "Empirical"
    KERNEL_DENSITY = "KernelDensity"


class ValidationState(Enum):
    """State of a distribution's parameter vector."""
    UNVALIDATED = "unvalidated"
    VALID = "valid"
    INVALID = "invalid"


class KernelType(Enum):
    """Kernel functions available to kernel density estimation."""
    EPANECHNIKOV = "Epanechnikov"
    GAUSSIAN = "Gaussian"
    TRIANGULAR = "Triangular"
    UNIFORM = "Uniform"


class Transform(Enum):
    """Axis transforms used for interpolation in probability tables."""
    NONE = "none"
    LOGARITHMIC = "log"
    NORMAL_Z = "z"


class PlottingPosition(Enum):
    """Plotting position formulas, parameterized by alpha in (i - a) / (n + 1 - 2a)."""
    WEIBULL = 0.0
    BLOM = 0.375
    CUNNANE = 0.4
    GRINGORTEN = 0.44
    HAZEN = 0.5


MethodLike = Union[str, ParameterEstimationMethod]
MethodList = List[ParameterEstimationMethod]
