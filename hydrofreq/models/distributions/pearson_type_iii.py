'''
Pearson Type III distribution parameterized by its product moments.

The parameters are the mean µ, standard deviation σ and skewness γ. They
map to a shifted gamma distribution with

    location ξ = µ - 2σ/γ,  shape α = 4/γ²,  scale β = σγ/2

where a negative γ reflects the gamma distribution, so the support is
[ξ, ∞) for γ > 0 and (-∞, ξ] for γ < 0. When |γ| is within the configured
near-zero threshold the normal limit is used.

The module-level helpers (frequency factor, L-moment ratios, maximum
likelihood covariance) are shared with the Log-Pearson Type III variant,
which applies them in log space.
'''

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import special

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import DistributionError, ParameterError
from hydrofreq.core.parameters import (
    ParameterConstraints, check_finite, check_positive, first_error
)
from hydrofreq.core.types import (
    DistributionType, Matrix, MethodLike, MomentVector, ParameterEstimationMethod,
    ParameterVector, Sample
)
from hydrofreq.models.distributions.base import (
    Bootstrappable, LinearMomentEstimable, MaximumLikelihoodEstimable, MomentEstimable,
    MonteCarloCapable, StandardErrorCapable, UnivariateDistribution
)
from hydrofreq.models.estimation.moments import (
    build_constraints, order_of_magnitude_bounds, product_moments, scale_bounds
)

logger = logging.getLogger("hydrofreq.models.distributions.pearson_type_iii")

SKEW_BOUNDS = (-2.0, 2.0)

# Frequency-factor derivative is taken from its series near zero skew
_SERIES_SKEW = 2e-3


def _near_zero() -> float:
    return get_config("core", "near_zero", 1e-4)


def gamma_parameters(mu: float, sigma: float, gamma: float) -> Tuple[float, float, float]:
    """Shifted gamma (ξ, α, β) equivalent to product moments (µ, σ, γ); β is negative for γ < 0."""
    xi = mu - 2.0 * sigma / gamma
    alpha = 4.0 / gamma ** 2
    beta = 0.5 * sigma * gamma
    return xi, alpha, beta


def frequency_factor(skew: float, probability):
    """
    Pearson Type III frequency factor K, with quantile = µ + Kσ.

    Args:
        skew: Skewness γ
        probability: Non-exceedance probability or probabilities in (0, 1)

    Returns:
        K for each probability
    """
    p = np.asarray(probability, dtype=float)
    if abs(skew) <= _near_zero():
        return special.ndtri(p)
    alpha = 4.0 / skew ** 2
    g = special.gammaincinv(alpha, p if skew > 0.0 else 1.0 - p)
    return 0.5 * skew * g - 2.0 / skew


def frequency_factor_derivative(skew: float, probability: float) -> float:
    """dK/dγ at ``probability``; the series value (z² - 1)/6 is used near zero skew."""
    if abs(skew) <= _SERIES_SKEW:
        z = special.ndtri(probability)
        return float((z * z - 1.0) / 6.0)
    h = 1e-5 * max(1.0, abs(skew))
    return float((frequency_factor(skew + h, probability) - frequency_factor(skew - h, probability)) / (2.0 * h))


def pearson_linear_moment_ratios(skew: float) -> Tuple[float, float]:
    """
    L-moment ratios (τ3, τ4) of a Pearson Type III distribution.

    Uses Hosking's rational approximations in terms of the gamma shape.
    """
    if abs(skew) <= 1e-6:
        return 0.0, 0.1226017
    alpha = 4.0 / skew ** 2
    if alpha >= 1.0:
        z = 1.0 / alpha
        tau3 = np.sqrt(z) * (0.32573501 + z * (0.16869150 + z * (0.078327243 - z * 0.0029120539))) \
            / (1.0 + z * (0.46697102 + z * 0.24255406))
        tau4 = 0.12260172 + z * (0.053730130 + z * (0.043384378 + z * 0.011101277)) \
            / (1.0 + z * (0.18324466 + z * 0.20166036))
    else:
        z = alpha
        tau3 = (1.0 + z * (2.3807576 + z * (1.5931792 + z * 0.11618371))) \
            / (1.0 + z * (5.1533299 + z * (7.1425260 + z * 1.9745056)))
        tau4 = (1.0 + z * (2.1235833 + z * (4.1670213 + z * 3.1925299))) \
            / (1.0 + z * (9.0551443 + z * (26.649995 + z * 26.193668)))
    return float(np.sign(skew) * tau3), float(tau4)


def pearson_from_linear_moments(moments: Sequence[float]) -> ParameterVector:
    """(µ, σ, γ) from [L1, L2, τ3] using Hosking's inverse approximations."""
    l1, l2, tau3 = moments[0], moments[1], moments[2]
    t3 = abs(tau3)
    if t3 <= 1e-6:
        return np.array([l1, l2 * np.sqrt(np.pi), 0.0])
    if t3 < 1.0 / 3.0:
        z = 3.0 * np.pi * t3 ** 2
        alpha = (1.0 + 0.2906 * z) / (z + 0.1882 * z ** 2 + 0.0442 * z ** 3)
    else:
        z = 1.0 - t3
        alpha = (0.36067 * z - 0.59567 * z ** 2 + 0.25361 * z ** 3) \
            / (1.0 - 2.78861 * z + 2.56096 * z ** 2 - 0.77045 * z ** 3)
    sigma = l2 * np.sqrt(np.pi) * np.sqrt(alpha) * np.exp(special.gammaln(alpha) - special.gammaln(alpha + 0.5))
    return np.array([l1, sigma, np.sign(tau3) * 2.0 / np.sqrt(alpha)])


def pearson_to_linear_moments(parameters: Sequence[float]) -> MomentVector:
    """[L1, L2, τ3, τ4] of a Pearson Type III with product moments (µ, σ, γ)."""
    mu, sigma, skew = parameters
    tau3, tau4 = pearson_linear_moment_ratios(skew)
    if abs(skew) <= 1e-6:
        return np.array([mu, sigma / np.sqrt(np.pi), tau3, tau4])
    alpha = 4.0 / skew ** 2
    beta = 0.5 * sigma * abs(skew)
    l2 = beta / np.sqrt(np.pi) * np.exp(special.gammaln(alpha + 0.5) - special.gammaln(alpha))
    return np.array([mu, l2, tau3, tau4])


def pearson_mle_covariance(sigma: float, skew: float, sample_size: int) -> Matrix:
    """
    Asymptotic covariance of maximum likelihood (µ, σ, γ).

    The expected information of the shifted gamma (ξ, β, α) is inverted and
    transformed to product moments by the delta method. Negative skew is
    handled by reflection.

    Raises:
        DistributionError: If |γ| >= √2, where the gamma location has no
            regular information
    """
    n = float(sample_size)
    if abs(skew) <= _near_zero():
        return np.diag([sigma ** 2 / n, sigma ** 2 / (2.0 * n), 6.0 / n])
    if abs(skew) >= np.sqrt(2.0):
        raise DistributionError(
            "Maximum likelihood covariance requires |skew| < sqrt(2)",
            distribution_type="Pearson Type III", parameter="skew", value=skew,
            issue="information matrix undefined")
    g = abs(skew)
    alpha = 4.0 / g ** 2
    beta = 0.5 * sigma * g
    # Order (ξ, β, α)
    information = np.array([
        [1.0 / (beta ** 2 * (alpha - 2.0)), 1.0 / beta ** 2, 1.0 / (beta * (alpha - 1.0))],
        [1.0 / beta ** 2, alpha / beta ** 2, 1.0 / beta],
        [1.0 / (beta * (alpha - 1.0)), 1.0 / beta, special.polygamma(1, alpha)],
    ]) * n
    gamma_covariance = np.linalg.inv(information)
    jacobian = np.array([
        [1.0, alpha, beta],
        [0.0, np.sqrt(alpha), beta / (2.0 * np.sqrt(alpha))],
        [0.0, 0.0, -alpha ** -1.5],
    ])
    covariance = jacobian @ gamma_covariance @ jacobian.T
    if skew < 0.0:
        reflect = np.diag([-1.0, 1.0, -1.0])
        covariance = reflect @ covariance @ reflect
    return covariance


class PearsonTypeIII(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                     MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                     MonteCarloCapable):
    """Pearson Type III distribution.

    Args:
        mean: Mean µ
        standard_deviation: Standard deviation σ > 0
        skew: Skewness γ
    """

    distribution_type = DistributionType.PEARSON_TYPE_III
    display_name = "Pearson Type III"
    short_display_name = "P3"
    parameter_names = ("mean", "standard_deviation", "skew")
    parameter_symbols = ("µ", "σ", "γ")
    minimum_of_parameters = (-np.inf, 0.0, -np.inf)
    maximum_of_parameters = (np.inf, np.inf, np.inf)

    def __init__(self, mean: float = 100.0, standard_deviation: float = 10.0, skew: float = 0.0) -> None:
        super().__init__(mean, standard_deviation, skew)

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

    @property
    def gamma(self) -> float:
        return float(self._parameters[2])

    @gamma.setter
    def gamma(self, value: float) -> None:
        self._set_parameter(2, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        mu, sigma, gamma = values
        return first_error(
            check_finite(mu, "mean"),
            check_positive(sigma, "standard_deviation"),
            check_finite(gamma, "skew"),
            throw=throw
        )

    def _is_normal(self) -> bool:
        return abs(self.gamma) <= _near_zero()

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        if self._is_normal():
            z = (x - self.mu) / self.sigma
            return -0.5 * z * z - np.log(self.sigma) - 0.5 * np.log(2.0 * np.pi)
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        y = (x - xi) / beta
        out = np.full(x.shape, -np.inf)
        inside = y > 0.0
        yi = y[inside]
        out[inside] = (alpha - 1.0) * np.log(yi) - yi - special.gammaln(alpha) - np.log(abs(beta))
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        if self._is_normal():
            return special.ndtr((x - self.mu) / self.sigma)
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        y = np.maximum((x - xi) / beta, 0.0)
        if self.gamma > 0.0:
            return special.gammainc(alpha, y)
        return special.gammaincc(alpha, y)

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        return self.mu + self.sigma * frequency_factor(self.gamma, p)

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def median(self) -> float:
        return self.inverse_cdf(0.5)

    @property
    def mode(self) -> float:
        if self._is_normal():
            return self.mu
        xi, alpha, beta = gamma_parameters(self.mu, self.sigma, self.gamma)
        if alpha < 1.0:
            return xi
        return xi + (alpha - 1.0) * beta

    @property
    def standard_deviation(self) -> float:
        return self.sigma

    @property
    def skewness(self) -> float:
        return self.gamma

    @property
    def kurtosis(self) -> float:
        return 3.0 + 1.5 * self.gamma ** 2

    @property
    def minimum(self) -> float:
        if self._is_normal() or self.gamma < 0.0:
            return -np.inf
        return gamma_parameters(self.mu, self.sigma, self.gamma)[0]

    @property
    def maximum(self) -> float:
        if self._is_normal() or self.gamma > 0.0:
            return np.inf
        return gamma_parameters(self.mu, self.sigma, self.gamma)[0]

    # Estimation

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        return np.array([moments[0], moments[1], moments[2]], dtype=float)

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        mu, sigma, gamma = parameters
        return np.array([mu, sigma, gamma, 3.0 + 1.5 * gamma ** 2])

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        return pearson_from_linear_moments(moments)

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return pearson_to_linear_moments(parameters)

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        mu, sigma, gamma = product_moments(self._estimation_sample(sample))[:3]
        mu_lower, mu_upper = order_of_magnitude_bounds(mu)
        sigma_lower, sigma_upper = scale_bounds(sigma)
        return build_constraints(
            [mu, sigma, gamma],
            [mu_lower, sigma_lower, SKEW_BOUNDS[0]],
            [mu_upper, sigma_upper, SKEW_BOUNDS[1]],
            names=self.parameter_names,
            neutral=[None, None, 0.0]
        )

    # Uncertainty

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        return pearson_mle_covariance(self.sigma, self.gamma, sample_size)

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        return np.array([
            1.0,
            float(frequency_factor(self.gamma, probability)),
            self.sigma * frequency_factor_derivative(self.gamma, probability),
        ])
