'''
Generalized Extreme Value distribution in Hosking's parameterization.

    F(x) = exp(-(1 - κ(x - ξ)/α)^(1/κ))

κ > 0 gives a bounded upper tail (EV III), κ < 0 a heavy upper tail (EV II)
and κ = 0 the Gumbel distribution. Whenever |κ| is within the configured
near-zero threshold the Gumbel limit is used directly.

The expected information for maximum likelihood estimates is singular at
κ = 0, so it is evaluated at κ = 1e-3 when |κ| is smaller than that.
'''

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import optimize, special

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
from hydrofreq.models.distributions.gumbel import (
    EULER_GAMMA, GUMBEL_SKEWNESS, GUMBEL_TAU3, GUMBEL_TAU4
)
from hydrofreq.models.estimation.moments import (
    build_constraints, linear_moments, order_of_magnitude_bounds, scale_bounds
)

logger = logging.getLogger("hydrofreq.models.distributions.generalized_extreme_value")

SHAPE_BOUNDS = (-10.0, 10.0)
INFORMATION_MIN_SHAPE = 1e-3


def _near_zero() -> float:
    return get_config("core", "near_zero", 1e-4)


def _tau3(kappa: float) -> float:
    if abs(kappa) <= 1e-8:
        return GUMBEL_TAU3
    return 2.0 * (1.0 - 3.0 ** -kappa) / (1.0 - 2.0 ** -kappa) - 3.0


def _skewness(kappa: float) -> float:
    if abs(kappa) <= _near_zero():
        return GUMBEL_SKEWNESS
    if kappa <= -1.0 / 3.0:
        return np.nan
    g1, g2, g3 = (special.gamma(1.0 + r * kappa) for r in (1, 2, 3))
    return float(np.sign(kappa) * (-g3 + 3.0 * g1 * g2 - 2.0 * g1 ** 3) / (g2 - g1 ** 2) ** 1.5)


def gev_moments(xi: float, alpha: float, kappa: float) -> MomentVector:
    """
    Product moments of a GEV distribution.

    Returns:
        Array [mean, sd, skewness, kurtosis]; each entry is NaN where the
        moment does not exist (κ <= -1/r for the r-th moment)
    """
    if abs(kappa) <= _near_zero():
        return np.array([xi + alpha * EULER_GAMMA, np.pi / np.sqrt(6.0) * alpha, GUMBEL_SKEWNESS, 5.4])
    g = [special.gamma(1.0 + r * kappa) if kappa > -1.0 / r else np.nan for r in (1, 2, 3, 4)]
    g1, g2, g3, g4 = g
    variance = g2 - g1 ** 2
    mean = xi + alpha * (1.0 - g1) / kappa
    sd = alpha * np.sqrt(variance) / abs(kappa)
    skew = _skewness(kappa)
    kurt = (g4 - 4.0 * g1 * g3 + 6.0 * g2 * g1 ** 2 - 3.0 * g1 ** 4) / variance ** 2
    return np.array([mean, sd, skew, kurt])


def kappa_from_skewness(skew: float) -> float:
    """
    Shape κ whose GEV skewness equals ``skew``.

    Skewness decreases monotonically in κ over (-1/3, ∞), so the root is
    bracketed on [-0.33, 10]. Values outside the attainable range are mapped
    to the nearest end of the bracket.
    """
    if abs(skew - GUMBEL_SKEWNESS) <= 1e-8:
        return 0.0
    lower, upper = -0.33, 10.0
    if skew >= _skewness(lower):
        return lower
    if skew <= _skewness(upper):
        return upper
    return float(optimize.brentq(lambda k: _skewness(k) - skew, lower, upper, xtol=1e-12))


def kappa_from_tau3(tau3: float) -> float:
    """
    Shape κ from the L-skewness τ3.

    Hosking's rational approximation is used for |τ3| <= 0.5; outside that
    range τ3(κ) is inverted with Brent's method on [-1, 10].
    """
    c = 2.0 / (3.0 + tau3) - np.log(2.0) / np.log(3.0)
    kappa = 7.859 * c + 2.9554 * c ** 2
    if abs(tau3) <= 0.5:
        return float(kappa)
    lower, upper = -0.999, SHAPE_BOUNDS[1]
    f_lower = _tau3(lower) - tau3
    f_upper = _tau3(upper) - tau3
    if f_lower * f_upper > 0.0:
        return float(kappa)
    return float(optimize.brentq(lambda k: _tau3(k) - tau3, lower, upper, xtol=1e-12))


class GeneralizedExtremeValue(UnivariateDistribution, MomentEstimable, LinearMomentEstimable,
                              MaximumLikelihoodEstimable, StandardErrorCapable, Bootstrappable,
                              MonteCarloCapable):
    """Generalized Extreme Value distribution.

    Args:
        location: Location ξ
        scale: Scale α > 0
        shape: Shape κ (Hosking sign convention)
    """

    distribution_type = DistributionType.GENERALIZED_EXTREME_VALUE
    display_name = "Generalized Extreme Value"
    short_display_name = "GEV"
    parameter_names = ("location", "scale", "shape")
    parameter_symbols = ("ξ", "α", "κ")
    minimum_of_parameters = (-np.inf, 0.0, -np.inf)
    maximum_of_parameters = (np.inf, np.inf, np.inf)

    def __init__(self, location: float = 100.0, scale: float = 10.0, shape: float = 0.0) -> None:
        super().__init__(location, scale, shape)

    @property
    def xi(self) -> float:
        return float(self._parameters[0])

    @xi.setter
    def xi(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def alpha(self) -> float:
        return float(self._parameters[1])

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._set_parameter(1, value)

    @property
    def kappa(self) -> float:
        return float(self._parameters[2])

    @kappa.setter
    def kappa(self, value: float) -> None:
        self._set_parameter(2, value)

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        xi, alpha, kappa = values
        return first_error(
            check_finite(xi, "location"),
            check_positive(alpha, "scale"),
            check_finite(kappa, "shape"),
            throw=throw
        )

    def _is_gumbel(self) -> bool:
        return abs(self.kappa) <= _near_zero()

    def _reduced(self, x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Reduced variate y with F = exp(-exp(-y)), and the support mask."""
        z = (x - self.xi) / self.alpha
        if self._is_gumbel():
            return z, np.ones(x.shape, dtype=bool)
        arg = 1.0 - self.kappa * z
        inside = arg > 0.0
        y = np.full(x.shape, np.nan)
        y[inside] = -np.log(arg[inside]) / self.kappa
        return y, inside

    def _log_pdf(self, x: np.ndarray) -> np.ndarray:
        y, inside = self._reduced(x)
        kappa = 0.0 if self._is_gumbel() else self.kappa
        out = np.full(x.shape, -np.inf)
        out[inside] = -np.log(self.alpha) - (1.0 - kappa) * y[inside] - np.exp(-y[inside])
        return out

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return np.exp(self._log_pdf(x))

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        y, inside = self._reduced(x)
        outside_value = 1.0 if self.kappa > 0.0 else 0.0
        out = np.full(x.shape, outside_value)
        out[inside] = np.exp(-np.exp(-y[inside]))
        return out

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        if self._is_gumbel():
            return self.xi - self.alpha * np.log(-np.log(p))
        return self.xi + self.alpha / self.kappa * (1.0 - np.power(-np.log(p), self.kappa))

    @property
    def mean(self) -> float:
        return float(gev_moments(*self.parameters)[0])

    @property
    def median(self) -> float:
        return self.inverse_cdf(0.5)

    @property
    def mode(self) -> float:
        if self._is_gumbel():
            return self.xi
        if self.kappa >= 1.0:
            return self.maximum
        return self.xi + self.alpha * (1.0 - (1.0 - self.kappa) ** self.kappa) / self.kappa

    @property
    def standard_deviation(self) -> float:
        return float(gev_moments(*self.parameters)[1])

    @property
    def skewness(self) -> float:
        return float(gev_moments(*self.parameters)[2])

    @property
    def kurtosis(self) -> float:
        return float(gev_moments(*self.parameters)[3])

    @property
    def minimum(self) -> float:
        if self.kappa < 0.0:
            return self.xi + self.alpha / self.kappa
        return -np.inf

    @property
    def maximum(self) -> float:
        if self.kappa > 0.0:
            return self.xi + self.alpha / self.kappa
        return np.inf

    # Estimation

    def parameters_from_moments(self, moments: Sequence[float]) -> ParameterVector:
        mean, sd, skew = moments[0], moments[1], moments[2]
        kappa = kappa_from_skewness(skew)
        if abs(kappa) <= _near_zero():
            alpha = np.sqrt(6.0) / np.pi * sd
            return np.array([mean - alpha * EULER_GAMMA, alpha, 0.0])
        g1 = special.gamma(1.0 + kappa)
        g2 = special.gamma(1.0 + 2.0 * kappa)
        alpha = np.sqrt(sd ** 2 * kappa ** 2 / (g2 - g1 ** 2))
        return np.array([mean - alpha / kappa * (1.0 - g1), alpha, kappa])

    def moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        return gev_moments(*parameters)

    def parameters_from_linear_moments(self, moments: Sequence[float]) -> ParameterVector:
        l1, l2, tau3 = moments[0], moments[1], moments[2]
        kappa = kappa_from_tau3(tau3)
        if abs(kappa) <= _near_zero():
            alpha = l2 / np.log(2.0)
            return np.array([l1 - alpha * EULER_GAMMA, alpha, 0.0])
        g = special.gamma(1.0 + kappa)
        alpha = l2 * kappa / ((1.0 - 2.0 ** -kappa) * g)
        return np.array([l1 - alpha * (1.0 - g) / kappa, alpha, kappa])

    def linear_moments_from_parameters(self, parameters: Sequence[float]) -> MomentVector:
        xi, alpha, kappa = parameters
        if abs(kappa) <= _near_zero():
            return np.array([xi + alpha * EULER_GAMMA, alpha * np.log(2.0), GUMBEL_TAU3, GUMBEL_TAU4])
        if kappa <= -1.0:
            raise DistributionError(
                "L-moments are only defined for kappa > -1",
                distribution_type=self.display_name, parameter="shape", value=kappa,
                issue="undefined L-moments")
        g = special.gamma(1.0 + kappa)
        d2 = 1.0 - 2.0 ** -kappa
        l1 = xi + alpha * (1.0 - g) / kappa
        l2 = alpha * d2 * g / kappa
        tau3 = 2.0 * (1.0 - 3.0 ** -kappa) / d2 - 3.0
        tau4 = (5.0 * (1.0 - 4.0 ** -kappa) - 10.0 * (1.0 - 3.0 ** -kappa) + 6.0 * d2) / d2
        return np.array([l1, l2, tau3, tau4])

    def get_parameter_constraints(self, sample: Sample) -> ParameterConstraints:
        xi, alpha, kappa = self.parameters_from_linear_moments(linear_moments(sample))
        xi_lower, xi_upper = order_of_magnitude_bounds(xi)
        alpha_lower, alpha_upper = scale_bounds(alpha)
        return build_constraints(
            [xi, alpha, kappa],
            [xi_lower, alpha_lower, SHAPE_BOUNDS[0]],
            [xi_upper, alpha_upper, SHAPE_BOUNDS[1]],
            names=self.parameter_names,
            neutral=[None, None, 0.0]
        )

    # Uncertainty

    def expected_information(self, sample_size: int) -> Matrix:
        """
        Expected Fisher information of (ξ, α, κ) for ``sample_size`` observations.

        Raises:
            DistributionError: If κ >= 0.5, where the information does not exist
        """
        a = self.alpha
        k = self.kappa
        if abs(k) < INFORMATION_MIN_SHAPE:
            k = INFORMATION_MIN_SHAPE
        if k >= 0.5:
            raise DistributionError(
                "Expected information is only defined for kappa < 0.5",
                distribution_type=self.display_name, parameter="shape", value=k,
                issue="information matrix undefined")
        n = float(sample_size)
        p = (1.0 - k) ** 2 * special.gamma(1.0 - 2.0 * k)
        g2k = special.gamma(2.0 - k)
        q = g2k * (special.digamma(1.0 - k) - (1.0 - k) / k)
        d_uu = n / (a * a) * p
        d_aa = n / (a * a * k * k) * (1.0 - 2.0 * g2k + p)
        d_kk = n / (k * k) * (np.pi ** 2 / 6.0 + (1.0 - EULER_GAMMA - 1.0 / k) ** 2 + 2.0 * q / k + p / (k * k))
        d_ua = n / (a * a * k) * (p - g2k)
        d_uk = -n / (a * k) * (p / k + q)
        d_ak = n / (a * k * k) * (1.0 - EULER_GAMMA - (1.0 - g2k) / k - p / k - q)
        return np.array([[d_uu, d_ua, d_uk],
                         [d_ua, d_aa, d_ak],
                         [d_uk, d_ak, d_kk]])

    def parameter_covariance(self, sample_size: int, method: MethodLike) -> Matrix:
        self._covariance_method(method, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        return np.linalg.inv(self.expected_information(sample_size))

    def _quantile_gradient(self, probability: float) -> np.ndarray:
        a = self.alpha
        k = self.kappa
        log_y = np.log(-np.log(probability))
        if self._is_gumbel():
            return np.array([1.0, -log_y, -0.5 * a * log_y ** 2])
        y_k = np.power(-np.log(probability), k)
        return np.array([
            1.0,
            (1.0 - y_k) / k,
            -a / (k * k) * (1.0 - y_k) - a / k * y_k * log_y,
        ])
