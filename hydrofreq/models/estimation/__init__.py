"""
Parameter estimation for hydrofreq distributions.

Moment-based estimation support (sample moments, search envelopes, method
dispatch) and the maximum likelihood engine.
"""

import logging

logger = logging.getLogger("hydrofreq.models.estimation")

from .moments import (
    product_moments,
    linear_moments,
    percentile,
    log_transform,
    order_of_magnitude,
    order_of_magnitude_bounds,
    scale_bounds,
    build_constraints,
    estimate,
)

from .mle import (
    log_likelihood_objective,
    maximize_log_likelihood,
)

__all__ = [
    'product_moments', 'linear_moments', 'percentile', 'log_transform',
    'order_of_magnitude', 'order_of_magnitude_bounds', 'scale_bounds',
    'build_constraints', 'estimate',
    'log_likelihood_objective', 'maximize_log_likelihood',
]
