"""
hydrofreq Test Suite

Tests for the distribution contract, the moment and likelihood estimators,
closed-form standard errors, the parametric bootstrap and Monte Carlo
confidence intervals. Shared fixtures live in ``tests/conftest.py``.
"""

# Version information for the test package
__version__ = "1.0.0"
