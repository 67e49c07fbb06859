'''
Pytest configuration and fixtures for the hydrofreq test suite.

Provides seeded generators, synthetic annual-maximum records and a
parameterized set of fitted distributions shared by the property tests.
'''

import numpy as np
import pytest

from hydrofreq.models.distributions import (
    EmpiricalDistribution, Exponential, GammaDistribution, GeneralizedExtremeValue,
    GeneralizedPareto, Gumbel, KernelDensity, Logistic, LogNormal, LogPearsonTypeIII,
    Normal, PearsonTypeIII, Pert, Triangular, Uniform, Weibull
)


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def record_length() -> int:
    """Default length of a synthetic annual-maximum record."""
    return 80


@pytest.fixture
def annual_maxima(rng: np.random.Generator, record_length: int) -> np.ndarray:
    """Synthetic annual peak flows drawn from Gumbel(1000, 250)."""
    u = rng.random(record_length)
    return 1000.0 - 250.0 * np.log(-np.log(u))


@pytest.fixture
def normal_sample(rng: np.random.Generator) -> np.ndarray:
    """A large normal sample with mean 100 and standard deviation 15."""
    return rng.normal(100.0, 15.0, size=2000)


# ---- Distribution Fixtures ----

# Continuous distributions whose CDF is strictly increasing on their support
CONTINUOUS_DISTRIBUTIONS = {
    "uniform": lambda: Uniform(0.0, 10.0),
    "triangular": lambda: Triangular(2.0, 5.0, 11.0),
    "pert": lambda: Pert(2.0, 5.0, 11.0),
    "normal": lambda: Normal(100.0, 15.0),
    "log_normal": lambda: LogNormal(3.0, 0.25),
    "exponential": lambda: Exponential(50.0, 20.0),
    "gumbel": lambda: Gumbel(100.0, 10.0),
    "logistic": lambda: Logistic(50.0, 5.0),
    "gev": lambda: GeneralizedExtremeValue(100.0, 20.0, -0.1),
    "gev_bounded": lambda: GeneralizedExtremeValue(100.0, 20.0, 0.2),
    "gpa": lambda: GeneralizedPareto(10.0, 5.0, 0.1),
    "gamma": lambda: GammaDistribution(10.0, 3.0),
    "pearson_iii": lambda: PearsonTypeIII(100.0, 20.0, 0.6),
    "pearson_iii_negative": lambda: PearsonTypeIII(100.0, 20.0, -0.4),
    "log_pearson_iii": lambda: LogPearsonTypeIII(3.0, 0.2, 0.3),
    "weibull": lambda: Weibull(10.0, 2.0),
}


@pytest.fixture(params=sorted(CONTINUOUS_DISTRIBUTIONS))
def continuous_distribution(request):
    """Each continuous distribution with representative valid parameters."""
    return CONTINUOUS_DISTRIBUTIONS[request.param]()


@pytest.fixture
def empirical_distribution() -> EmpiricalDistribution:
    """An empirical table spanning non-exceedance probabilities 0.01 to 0.99."""
    return EmpiricalDistribution(
        [100.0, 150.0, 210.0, 300.0, 480.0],
        [0.01, 0.2, 0.5, 0.8, 0.99]
    )


@pytest.fixture
def kernel_density(rng: np.random.Generator) -> KernelDensity:
    """Epanechnikov kernel density built from a normal sample."""
    return KernelDensity(rng.normal(50.0, 5.0, size=200))
