# hydrofreq/models/__init__.py
"""
hydrofreq Models Module

Univariate distributions for hydrologic frequency analysis together with
their parameter estimation and uncertainty machinery:

- distributions: the distribution variants and the factory functions
- estimation: sample moments, moment-method dispatch and maximum likelihood
- uncertainty: delta-method standard errors and Monte Carlo confidence intervals
- bootstrap: parametric bootstrap replicates and confidence intervals
"""

import logging

# Set up module-level logger
logger = logging.getLogger("hydrofreq.models")

# Import submodules to make them available at the package level
from . import distributions
from . import estimation
from . import uncertainty
from . import bootstrap

from .distributions import (
    UnivariateDistribution,
    Deterministic,
    Uniform,
    Triangular,
    Pert,
    Normal,
    LogNormal,
    Exponential,
    Gumbel,
    Logistic,
    GeneralizedExtremeValue,
    GeneralizedPareto,
    GammaDistribution,
    PearsonTypeIII,
    LogPearsonTypeIII,
    Weibull,
    EmpiricalDistribution,
    KernelDensity,
    create_distribution,
    available_distributions,
)
from .bootstrap import BootstrapAnalysis, BootstrapParameters
from .uncertainty import monte_carlo_analysis, monte_carlo_confidence_intervals

__all__ = [
    # Submodules
    'distributions',
    'estimation',
    'uncertainty',
    'bootstrap',

    # Distributions
    'UnivariateDistribution',
    'Deterministic',
    'Uniform',
    'Triangular',
    'Pert',
    'Normal',
    'LogNormal',
    'Exponential',
    'Gumbel',
    'Logistic',
    'GeneralizedExtremeValue',
    'GeneralizedPareto',
    'GammaDistribution',
    'PearsonTypeIII',
    'LogPearsonTypeIII',
    'Weibull',
    'EmpiricalDistribution',
    'KernelDensity',
    'create_distribution',
    'available_distributions',

    # Uncertainty
    'BootstrapAnalysis',
    'BootstrapParameters',
    'monte_carlo_analysis',
    'monte_carlo_confidence_intervals',
]

logger.debug("hydrofreq models module import complete")
