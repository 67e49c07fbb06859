"""
Normal (Gaussian) distribution.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import special

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import ParameterConstraints, check_finite, check_positive, first_error
from hydrofreq.core.types import (
    DistributionType, Matrix, MethodLike, MomentVector, ParameterEstimationMethod,
    ParameterVector, RandomState, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    MonteCarloCapable, StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.estimation.moments import (
    build_constraints, order_of_magnitude_bounds, product_moments, scale_bounds
)

logger = logging.getLogger("hydrofreq.models.distributions.normal")

_LOG_SQRT_2PI = 0.5 * np.log(2.0 * np.pi)


class Normal(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
             MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
             MonteCarloCapable):
    """Normal distribution with mean µ and standard deviation σ.

    Args:
        mean: Mean µ
        standard_deviation: Standard deviation σ > 0
    """

    distribution_type = DistributionType.NORMAL
    display_name = "Normal"
    short_display_name = "N"
    parameter_names = ("mean", "standard_deviation")
    parameter_symbols = ("µ", "σ")
    minimum_of_parameters = (-np.inf, 0.0)
    maximum_of_parameters = (np.inf, np.inf)

    def __init__(self, mean: float = 0.0, standard_deviation: float = 1.0) -> None:
        super().__init__(mean, standard_deviation)

    @property
    def mu(self) -> float:
        return float(self._parameters[0])

    @mu.setter
    def mu(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def sigma(self) -> float:
        return float(self._parameters[1])

    @sigma.setter
    def sigma(self, value: float) -> None:
        self._set_parameter(1, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        mu, sigma = values
        return first_error(
            check_finite(mu, "mean"),
            check_positive(sigma, "standard_deviation"),
            throw=throw
        )

    # Kernels

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        z = (x - self.mu) / self.sigma
        return -0.5 * z * z - np.log(self.sigma) - _LOG_SQRT_2PI

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        return special.ndtr((x - self.mu) / self.sigma)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.mu + self.sigma * special.ndtri(p)

    # Moments

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def median(self) -> float:
        return self.mu

    @property
    def mode(self) -> float:
        return self.mu

    @property
    def standard_deviation(self) -> float:
        return self.sigma

    @property
    def skewness(self) -> float:
        return 0.0

    @property
    def kurtosis(self) -> float:
        return 3.0

    @property
    def minimum(self) -> float:
        return -np.inf

    @property
    def maximum(self) -> float:
        return np.inf

    # Estimation

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1]], dtype=float)

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return np.array([parameters[0], parameters[1], 0.0, 3.0])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1] * np.sqrt(np.pi)])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return np.array([parameters[0], parameters[1] / np.sqrt(np.pi), 0.0, 0.1226017])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        mean, sd = product_moments(self._estimation_sample(sample))[:2]
        mean_lower, mean_upper = order_of_magnitude_bounds(mean)
        sd_lower, sd_upper = scale_bounds(sd)
        return build_constraints([mean, sd], [mean_lower, sd_lower], [mean_upper, sd_upper],
                                 names=self.parameter_names)

    # Uncertainty

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method,
                                ParameterEstimationMethod.MAXIMUM_LIKELIHOOD,
                                ParameterEstimationMethod.METHOD_OF_MOMENTS)
        s2 = self.sigma ** 2
        return np.diag([s2 / sample_size, s2 / (2.0 * sample_size)])

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        return np.array([1.0, special.ndtri(probability)])

    def sample_parameter_realizations(self, sample_size: int, realizations: int,
                                      rng: RandomState = None) -> Matrix:
        """Mean from Normal(µ, σ/√n); standard deviation from the chi-squared sampling distribution."""
        from hydrofreq.models.uncertainty.monte_carlo import normal_parameter_realizations
        return normal_parameter_realizations(self.mu, self.sigma, sample_size, realizations, rng)
