"""
Uncertainty analysis for fitted distributions.

Closed-form standard errors propagated to quantiles by the delta method,
and Monte Carlo confidence intervals built from parameter realizations.
"""

import logging

logger = logging.getLogger("hydrofreq.models.uncertainty")

from .standard_error import (
    parameter_covariance,
    parameter_variance,
    partial_derivatives,
    numerical_partial_derivatives,
    quantile_variance,
    quantile_jacobian,
    normal_confidence_interval,
)

from .monte_carlo import (
    normal_parameter_realizations,
    multivariate_normal_realizations,
    distributions_from_parameter_sets,
    sample_parameter_sets,
    monte_carlo_confidence_intervals,
    expected_probabilities,
    expected_probability_curve,
    monte_carlo_analysis,
)

__all__ = [
    'parameter_covariance', 'parameter_variance', 'partial_derivatives',
    'numerical_partial_derivatives', 'quantile_variance', 'quantile_jacobian',
    'normal_confidence_interval',
    'normal_parameter_realizations', 'multivariate_normal_realizations',
    'distributions_from_parameter_sets', 'sample_parameter_sets',
    'monte_carlo_confidence_intervals', 'expected_probabilities',
    'expected_probability_curve', 'monte_carlo_analysis',
]
