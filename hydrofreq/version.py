# hydrofreq/version.py
"""
hydrofreq version information.

The package follows semantic versioning (MAJOR.MINOR.PATCH).
"""

__version__ = "1.0.0"

# Package metadata
__title__ = "hydrofreq"
__description__ = "Univariate distributions for hydrologic frequency analysis"
__license__ = "MIT"
