'''
Propagation of parameter sampling uncertainty into quantiles.

Each StandardErrorCapable distribution supplies closed-form asymptotic
parameter covariances for the estimation methods where one exists, and
optionally closed-form partial derivatives of its quantile function. This
module combines them:

* partial derivatives of the quantile with respect to each parameter, from
  the closed form when available and two-sided differences of
  ``inverse_cdf`` otherwise,
* the delta-method quantile variance g' Cov g,
* the square quantile Jacobian and its determinant, whose near-singularity
  is reported rather than divided through,
* normal-theory confidence limits for quantiles.
'''

import logging
from typing import Sequence, Union

import numpy as np
from scipy import special

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import (
    EstimationMethodError, raise_dimension_error, warn_numeric
)
from hydrofreq.core.parameters import validate_probability
from hydrofreq.core.results import JacobianResult
from hydrofreq.core.types import Matrix, MethodLike, Vector
from hydrofreq.utils.differentiation import gradient_2sided

logger = logging.getLogger("hydrofreq.models.uncertainty.standard_error")


def _require_standard_errors(distribution, operation: str) -> None:
    if not hasattr(distribution, "parameter_covariance"):
        raise EstimationMethodError(
            f"{operation} is not implemented for {distribution.display_name}",
            distribution_type=distribution.display_name,
            operation=operation
        )


def parameter_covariance(distribution, sample_size: int, method: MethodLike) -> Matrix:
    """
    Asymptotic covariance of a distribution's parameter estimates.

    Raises:
        EstimationMethodError: If no closed form exists for the method
    """
    _require_standard_errors(distribution, "Parameter covariance")
    return distribution.parameter_covariance(sample_size, method)


def parameter_variance(distribution, sample_size: int, method: MethodLike) -> Vector:
    """Diagonal of the parameter covariance."""
    return np.diag(parameter_covariance(distribution, sample_size, method)).copy()


def numerical_partial_derivatives(distribution, probability: float) -> Vector:
    """
    Partial derivatives of the quantile by two-sided differences of inverse_cdf.

    Each parameter is perturbed on a working clone so the distribution itself
    is never modified.

    Args:
        distribution: Distribution with valid parameters
        probability: Non-exceedance probability in (0, 1)

    Returns:
        Vector of dQ/dtheta_i
    """
    working = distribution.clone()

    def quantile(theta: np.ndarray) -> float:
        working.set_parameters(theta)
        return working.inverse_cdf(probability)

    return gradient_2sided(quantile, np.asarray(distribution.parameters, dtype=float))


def partial_derivatives(distribution, probability: float) -> Vector:
    """
    Partial derivatives of the quantile at ``probability`` with respect to each parameter.

    Args:
        distribution: Distribution with valid parameters
        probability: Non-exceedance probability

    Returns:
        Vector of dQ/dtheta_i

    Raises:
        ProbabilityError: If probability is outside [0, 1]
        ParameterError: If the parameters are invalid
    """
    validate_probability(probability)
    distribution._ensure_valid()
    gradient = None
    if hasattr(distribution, "_quantile_gradient"):
        gradient = distribution._quantile_gradient(float(probability))
    if gradient is None:
        return numerical_partial_derivatives(distribution, float(probability))
    return np.asarray(gradient, dtype=float)


def quantile_variance(distribution, probability: float, sample_size: int, method: MethodLike) -> float:
    """
    Delta-method variance of a quantile estimate.

    Computes sum_i sum_j dQ/dtheta_i * dQ/dtheta_j * Cov(theta_i, theta_j).

    Raises:
        EstimationMethodError: If no covariance formula exists for the method
    """
    covariance = parameter_covariance(distribution, sample_size, method)
    gradient = partial_derivatives(distribution, probability)
    return float(gradient @ covariance @ gradient)


def quantile_jacobian(distribution, probabilities: Sequence[float]) -> JacobianResult:
    """
    Jacobian of quantiles with respect to the parameters.

    Row i holds the partial derivatives at probabilities[i]. A determinant
    whose magnitude is at or below the configured singular tolerance flags
    poor local identifiability; it is logged, warned about and returned in
    ``is_singular``.

    Args:
        distribution: Distribution with valid parameters
        probabilities: One probability per parameter

    Returns:
        JacobianResult holding the matrix and its determinant

    Raises:
        DimensionError: If the number of probabilities differs from the
            number of parameters
    """
    probabilities = np.asarray(probabilities, dtype=float)
    n = distribution.number_of_parameters
    if probabilities.ndim != 1 or probabilities.shape[0] != n:
        raise_dimension_error(
            "Number of probabilities must equal the number of parameters",
            array_name="probabilities",
            expected_shape=(n,),
            actual_shape=probabilities.shape
        )

    matrix = np.vstack([partial_derivatives(distribution, p) for p in probabilities])
    determinant = float(np.linalg.det(matrix))
    tolerance = get_config("numerical", "singular_tolerance", 1e-10)
    is_singular = not np.isfinite(determinant) or abs(determinant) <= tolerance

    if is_singular:
        logger.warning(
            f"Quantile Jacobian of {distribution.display_name} is near singular "
            f"(determinant {determinant:.3g}) at probabilities {probabilities}"
        )
        warn_numeric(
            "Quantile Jacobian is near singular",
            operation="quantile_jacobian",
            issue="poor local identifiability",
            value=determinant
        )

    return JacobianResult(
        model_name=distribution.display_name,
        probabilities=probabilities,
        matrix=matrix,
        determinant=determinant,
        is_singular=is_singular
    )


def normal_confidence_interval(distribution,
                               probabilities: Union[float, Sequence[float]],
                               sample_size: int,
                               method: MethodLike,
                               alpha: float = 0.1) -> np.ndarray:
    """
    Normal-theory confidence limits for quantiles: Q(p) -/+ z * sqrt(Var Q(p)).

    Args:
        distribution: StandardErrorCapable distribution
        probabilities: Non-exceedance probabilities
        sample_size: Record length behind the estimates
        method: Estimation method whose covariance applies
        alpha: Significance level; limits at alpha/2 and 1 - alpha/2

    Returns:
        Array of shape (n_probabilities, 2) with lower and upper limits
    """
    validate_probability(alpha)
    probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
    z = special.ndtri(1.0 - alpha / 2.0)
    limits = np.empty((probabilities.size, 2))
    for i, p in enumerate(probabilities):
        q = distribution.inverse_cdf(p)
        se = np.sqrt(max(quantile_variance(distribution, p, sample_size, method), 0.0))
        limits[i] = (q - z * se, q + z * se)
    return limits
