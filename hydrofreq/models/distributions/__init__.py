# hydrofreq/models/distributions/__init__.py
"""
hydrofreq Univariate Distributions Module

Parametric and non-parametric distributions for flood and hydrologic
frequency analysis. Every variant shares the UnivariateDistribution
contract (validated parameters, PDF/CDF/inverse CDF, moments, likelihoods,
random generation, cloning) and advertises the estimation and uncertainty
capabilities it supports through mixin classes.

Key components:
- Bounded distributions: Deterministic, Uniform, Triangular, PERT
- Location-scale families: Normal, LogNormal, Exponential, Gumbel, Logistic
- Three-parameter families: GEV, Generalized Pareto, Pearson Type III,
  Log-Pearson Type III
- Gamma and Weibull
- Non-parametric: Empirical table and Kernel Density
- Factory functions that build distributions by name
"""

import logging

# Set up module-level logger
logger = logging.getLogger("hydrofreq.models.distributions")

from .base import (
    UnivariateDistribution,
    MomentEstimable,
    LinearMomentEstimable,
    PercentileEstimable,
    MaximumLikelihoodEstimable,
    StandardErrorCapable,
    Bootstrappable,
    MonteCarloCapable,
    as_generator,
)
from .deterministic import Deterministic
from .uniform import Uniform
from .triangular import Triangular
from .pert import Pert
from .normal import Normal
from .log_normal import LogNormal
from .exponential import Exponential
from .gumbel import Gumbel
from .logistic import Logistic
from .generalized_extreme_value import GeneralizedExtremeValue
from .generalized_pareto import GeneralizedPareto
from .gamma import GammaDistribution
from .pearson_type_iii import PearsonTypeIII
from .log_pearson_type_iii import LogPearsonTypeIII
from .weibull import Weibull
from .empirical import EmpiricalDistribution
from .kernel_density import KernelDensity, silverman_bandwidth
from .utils import (
    DISTRIBUTION_CLASSES,
    available_distributions,
    create_distribution,
    distribution_class,
)

__all__ = [
    # Base class and capabilities
    'UnivariateDistribution',
    'MomentEstimable',
    'LinearMomentEstimable',
    'PercentileEstimable',
    'MaximumLikelihoodEstimable',
    'StandardErrorCapable',
    'Bootstrappable',
    'MonteCarloCapable',
    'as_generator',

    # Distribution classes
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
    'silverman_bandwidth',

    # Factory functions
    'DISTRIBUTION_CLASSES',
    'available_distributions',
    'create_distribution',
    'distribution_class',
]

logger.debug("hydrofreq distributions module import complete")
