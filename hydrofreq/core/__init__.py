"""
hydrofreq core module.

Foundation shared by every distribution: the exception hierarchy, type
aliases and enumerations, configuration management, parameter validation
and result containers.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("hydrofreq.core")

from .exceptions import (
    HydroFreqError,
    ParameterError,
    ProbabilityError,
    DimensionError,
    ConvergenceError,
    NumericError,
    DataError,
    DistributionError,
    EstimationMethodError,
    BootstrapError,
    ConfigurationError,
    HydroFreqWarning,
    ConvergenceWarning,
    NumericWarning,
)

from .types import (
    ParameterEstimationMethod,
    DistributionType,
    ValidationState,
    KernelType,
    Transform,
    PlottingPosition,
)

from .parameters import (
    ParameterState,
    ParameterConstraints,
    check_finite,
    check_positive,
    check_range,
    check_ordering,
    first_error,
    validate_probability,
)

from .results import (
    ModelResult,
    OptimizationResult,
    JacobianResult,
    UncertaintyAnalysisResult,
    MonteCarloResult,
)

from .config import (
    get_config,
    set_config,
    reset_config,
    get_config_manager,
)

__all__ = [
    # Exceptions
    'HydroFreqError', 'ParameterError', 'ProbabilityError', 'DimensionError',
    'ConvergenceError', 'NumericError', 'DataError', 'DistributionError',
    'EstimationMethodError', 'BootstrapError', 'ConfigurationError',
    'HydroFreqWarning', 'ConvergenceWarning', 'NumericWarning',

    # Types
    'ParameterEstimationMethod', 'DistributionType', 'ValidationState',
    'KernelType', 'Transform', 'PlottingPosition',

    # Parameters
    'ParameterState', 'ParameterConstraints', 'check_finite', 'check_positive',
    'check_range', 'check_ordering', 'first_error', 'validate_probability',

    # Results
    'ModelResult', 'OptimizationResult', 'JacobianResult',
    'UncertaintyAnalysisResult', 'MonteCarloResult',

    # Configuration
    'get_config', 'set_config', 'reset_config', 'get_config_manager',
]

logger.debug("hydrofreq core module initialized")
