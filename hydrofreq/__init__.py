# hydrofreq/__init__.py
"""
hydrofreq - Univariate distributions for hydrologic frequency analysis

A library of probability distributions used to fit annual-maximum and
peaks-over-threshold records and to quantify the uncertainty of the fitted
frequency curves. The package provides:

- Seventeen distribution variants sharing one validated-parameter contract
- Method of moments, linear moments, percentile and maximum likelihood estimation
- Delta-method standard errors of quantiles
- Parametric bootstrap and Monte Carlo confidence intervals
- Expected-probability curves
"""

import logging
from typing import Union

# Set up package-wide logger; handlers are configured by hydrofreq.core.config
logger = logging.getLogger("hydrofreq")

from .version import __version__, __title__, __description__, __license__

# Import subpackages to make them available in the hydrofreq namespace
from . import core
from . import utils
from . import models

from .models import (
    create_distribution,
    available_distributions,
    BootstrapAnalysis,
)


def get_version() -> str:
    """
    Return the version of hydrofreq.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    return __version__


def set_log_level(level: Union[str, int]) -> None:
    """
    Set the logging level for hydrofreq.

    Args:
        level: Logging level, either as string ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
              or as an integer constant from the logging module
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logger.setLevel(level)
    logger.info(f"Log level set to {logging.getLevelName(level)}")


__all__ = [
    # Subpackages
    'core',
    'models',
    'utils',

    # Public functions
    'create_distribution',
    'available_distributions',
    'BootstrapAnalysis',
    'get_version',
    'set_log_level',

    # Version info
    '__version__',
    '__title__',
    '__description__',
    '__license__',
]

logger.debug(f"hydrofreq v{__version__} initialized successfully")
