"""
hydrofreq Bootstrap Module

Parametric bootstrap of fitted frequency distributions: single replicates
re-estimated from synthetic records, and BootstrapAnalysis for quantile
confidence intervals and expected-probability curves over many replicates.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("hydrofreq.models.bootstrap")

from .base import BootstrapParameters, bootstrap_replicate
from .analysis import BootstrapAnalysis

__all__ = [
    'BootstrapParameters',
    'bootstrap_replicate',
    'BootstrapAnalysis',
]
