"""
hydrofreq utilities module.

Numerical building blocks shared by the distributions and the estimation
and uncertainty engines.

Key components:
- Finite differences (parameter gradients, element-wise derivatives)
- Sample statistics (product moments, L-moments, percentiles, plotting positions)
- Interpolation in transformed probability space
"""

import logging

# Set up module-level logger
logger = logging.getLogger("hydrofreq.utils")

from .differentiation import (
    default_step,
    gradient_2sided,
    central_difference,
)

from .statistics import (
    as_sample,
    product_moments,
    linear_moments,
    percentile,
    plotting_positions,
    log_transform,
)

from .interpolation import (
    to_axis,
    from_axis,
    linear_interpolate,
    strictly_increasing,
    monotone_interpolator,
)

__all__ = [
    # Differentiation
    'default_step', 'gradient_2sided', 'central_difference',

    # Statistics
    'as_sample', 'product_moments', 'linear_moments', 'percentile',
    'plotting_positions', 'log_transform',

    # Interpolation
    'to_axis', 'from_axis', 'linear_interpolate', 'strictly_increasing',
    'monotone_interpolator',
]
