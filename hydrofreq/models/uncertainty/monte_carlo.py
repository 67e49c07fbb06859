'''
Monte Carlo confidence intervals for frequency curves.

Parameter uncertainty is represented by a set of parameter realizations drawn
from the sampling distribution of the estimates for a record of length n:

* Normal and LogNormal draw the location from Normal(mu, sigma / sqrt(n)) and
  the scale from its chi-squared sampling distribution with n - 1 degrees of
  freedom,
* any other variant with a closed-form covariance draws from a multivariate
  normal centred on its parameters with the maximum likelihood covariance.

Each realization is evaluated on its own clone of the parent distribution,
and realizations whose parameters are invalid are excluded from the
percentiles. Confidence intervals are indexed by exceedance probability, so
a row for ``q`` holds percentiles of ``inverse_cdf(1 - q)``.
'''

import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy import special, stats

from hydrofreq.core.exceptions import EstimationMethodError, raise_parameter_error
from hydrofreq.core.parameters import validate_probability
from hydrofreq.core.results import MonteCarloResult
from hydrofreq.core.types import Matrix, ParameterEstimationMethod, RandomState, Vector
from hydrofreq.models.distributions.base import TAIL_PROBABILITY, as_generator
from hydrofreq.models.uncertainty.standard_error import parameter_covariance
from hydrofreq.utils.interpolation import monotone_interpolator
from hydrofreq.utils.statistics import percentile

logger = logging.getLogger("hydrofreq.models.uncertainty.monte_carlo")

# Probability range spanned by the expected-probability value grid
GRID_PROBABILITIES = (0.001, 1.0 - 1e-9)


def _check_counts(sample_size: int, realizations: int, min_sample_size: int = 1) -> None:
    if sample_size < min_sample_size:
        raise_parameter_error(f"Sample size must be at least {min_sample_size}",
                              param_name="sample_size", param_value=sample_size,
                              constraint=f"sample_size >= {min_sample_size}")
    if realizations < 1:
        raise_parameter_error("Number of realizations must be positive",
                              param_name="realizations", param_value=realizations,
                              constraint="realizations >= 1")


def normal_parameter_realizations(mean: float, standard_deviation: float,
                                  sample_size: int, realizations: int,
                                  rng: RandomState = None) -> Matrix:
    """
    Draw (mean, standard deviation) pairs from their normal-theory sampling distributions.

    The mean is drawn from Normal(mean, sd / sqrt(n)) and the standard
    deviation as sqrt((n - 1) sd^2 / c), where c is a chi-squared quantile
    with n - 1 degrees of freedom at a uniform probability.

    Args:
        mean: Estimated mean
        standard_deviation: Estimated standard deviation
        sample_size: Record length n, at least 2
        realizations: Number of pairs to draw
        rng: Seed or numpy Generator

    Returns:
        Array of shape (realizations, 2)
    """
    _check_counts(sample_size, realizations, min_sample_size=2)
    rng = as_generator(rng)
    u_mean = rng.random(realizations)
    u_sd = rng.random(realizations)
    means = mean + standard_deviation / np.sqrt(sample_size) * special.ndtri(u_mean)
    dof = sample_size - 1
    sds = np.sqrt(dof * standard_deviation ** 2 / stats.chi2.ppf(u_sd, dof))
    return np.column_stack([means, sds])


def multivariate_normal_realizations(distribution, sample_size: int, realizations: int,
                                     rng: RandomState = None) -> Matrix:
    """
    Draw parameter sets from a multivariate normal on the maximum likelihood covariance.

    Raises:
        EstimationMethodError: If the distribution has no maximum likelihood
            covariance
    """
    _check_counts(sample_size, realizations)
    covariance = parameter_covariance(distribution, sample_size, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
    rng = as_generator(rng)
    mean = np.asarray(distribution.parameters, dtype=float)
    return rng.multivariate_normal(mean, covariance, size=realizations, method="eigh")


def distributions_from_parameter_sets(distribution, parameter_sets: Matrix) -> List[Optional[object]]:
    """
    Clones of ``distribution`` carrying each row of ``parameter_sets``.

    Rows containing NaN or failing validation give None.
    """
    realized = []
    for row in np.atleast_2d(parameter_sets):
        if np.any(np.isnan(row)):
            realized.append(None)
            continue
        clone = distribution.clone()
        clone.set_parameters(row)
        realized.append(clone if clone.parameters_valid else None)
    return realized


def _quantile_matrix(distributions, probabilities: Vector) -> Matrix:
    """Quantiles of each distribution (rows) at each probability (columns); NaN for None."""
    values = np.full((len(distributions), probabilities.size), np.nan)
    for i, dist in enumerate(distributions):
        if dist is not None:
            values[i] = dist.inverse_cdf(probabilities)
    return values


def _column_percentiles(values: Matrix, percentiles: Vector) -> Matrix:
    out = np.full((values.shape[1], percentiles.size), np.nan)
    for i in range(values.shape[1]):
        column = values[:, i]
        column = np.sort(column[np.isfinite(column)])
        if column.size == 0:
            logger.warning(f"No valid realizations for column {i}; confidence limits are NaN")
            continue
        out[i] = percentile(column, percentiles, is_sorted=True)
    return out


def sample_parameter_sets(distribution, sample_size: int, realizations: int,
                          seed: RandomState = None) -> Matrix:
    """Parameter realizations from a MonteCarloCapable distribution."""
    if not hasattr(distribution, "sample_parameter_realizations"):
        raise EstimationMethodError(
            f"Monte Carlo confidence intervals are not implemented for {distribution.display_name}",
            distribution_type=distribution.display_name,
            operation="Monte Carlo confidence intervals"
        )
    distribution._ensure_valid()
    return np.asarray(distribution.sample_parameter_realizations(sample_size, realizations, as_generator(seed)))


def monte_carlo_confidence_intervals(distribution, sample_size: int, realizations: int,
                                     quantiles: Sequence[float], percentiles: Sequence[float],
                                     seed: RandomState = None) -> Matrix:
    """
    Percentile bands of quantiles over parameter realizations.

    With a single realization the point estimate is used, so every
    percentile equals the parent quantile.

    Args:
        distribution: MonteCarloCapable distribution with valid parameters
        sample_size: Record length behind the estimates
        realizations: Number of parameter realizations
        quantiles: Exceedance probabilities (rows)
        percentiles: Confidence percentiles in [0, 1] (columns)
        seed: Seed or numpy Generator

    Returns:
        Array of shape (len(quantiles), len(percentiles))
    """
    return monte_carlo_analysis(distribution, sample_size, realizations, quantiles, percentiles,
                                seed, expected_curve=False).confidence_intervals


def _value_grid(distributions) -> Vector:
    """Log-spaced values spanning the realizations' quantiles between GRID_PROBABILITIES."""
    low = np.inf
    high = -np.inf
    for dist in distributions:
        if dist is not None:
            low = min(low, dist.inverse_cdf(GRID_PROBABILITIES[0]))
            high = max(high, dist.inverse_cdf(GRID_PROBABILITIES[1]))
    shift = abs(low) + 1.0 if low <= 0.0 else 0.0
    log_low = np.log10(low + shift)
    log_high = np.log10(high + shift)
    order = int(np.floor(log_high - log_low))
    bins = max(200, min(1000, 100 * order))
    return np.logspace(log_low, log_high, bins) - shift


def expected_probabilities(distributions, x_values: Sequence[float]) -> Vector:
    """Average non-exceedance probability at each value over the valid distributions."""
    x_values = np.asarray(x_values, dtype=float)
    valid = [d for d in distributions if d is not None]
    if not valid:
        return np.full(x_values.shape, np.nan)
    return np.mean([np.asarray(d.cdf(x_values)) for d in valid], axis=0)


def expected_probability_curve(distributions, quantiles: Sequence[float],
                               x_values: Optional[Sequence[float]] = None) -> Vector:
    """
    Expected-probability quantile curve.

    The CDF is averaged over the distributions on a value grid (log-spaced
    across their range unless ``x_values`` is given); the strictly increasing
    points are then inverted by monotone cubic interpolation of value against
    the normal z of the averaged probability, and evaluated at 1 - quantile.

    Args:
        distributions: Realized distributions; None entries are skipped
        quantiles: Exceedance probabilities
        x_values: Optional value grid

    Returns:
        Expected-probability quantiles, one per entry of quantiles
    """
    validate_probability(quantiles)
    quantiles = np.atleast_1d(np.asarray(quantiles, dtype=float))
    if all(d is None for d in distributions):
        return np.full(quantiles.shape, np.nan)
    if x_values is None:
        x_values = _value_grid(distributions)
    x_values = np.sort(np.asarray(x_values, dtype=float))
    expected = expected_probabilities(distributions, x_values)
    inside = (expected > 0.0) & (expected < 1.0)
    interpolator = monotone_interpolator(special.ndtri(expected[inside]), x_values[inside])
    target = np.clip(1.0 - quantiles, TAIL_PROBABILITY, 1.0 - TAIL_PROBABILITY)
    return interpolator(special.ndtri(target))


def monte_carlo_analysis(distribution, sample_size: int, realizations: int,
                         quantiles: Sequence[float], percentiles: Sequence[float],
                         seed: RandomState = None, expected_curve: bool = True) -> MonteCarloResult:
    """
    Monte Carlo confidence intervals together with the realizations and expected curve.

    Args:
        distribution: MonteCarloCapable distribution with valid parameters
        sample_size: Record length behind the estimates
        realizations: Number of parameter realizations
        quantiles: Exceedance probabilities
        percentiles: Confidence percentiles in [0, 1]
        seed: Seed or numpy Generator
        expected_curve: Whether to compute the expected-probability curve

    Returns:
        MonteCarloResult
    """
    _check_counts(sample_size, realizations)
    validate_probability(quantiles)
    validate_probability(percentiles)
    quantiles = np.atleast_1d(np.asarray(quantiles, dtype=float))
    percentiles = np.atleast_1d(np.asarray(percentiles, dtype=float))

    if realizations == 1:
        distribution._ensure_valid()
        parameter_sets = np.atleast_2d(np.asarray(distribution.parameters, dtype=float))
        realized = [distribution]
    else:
        parameter_sets = sample_parameter_sets(distribution, sample_size, realizations, seed)
        realized = distributions_from_parameter_sets(distribution, parameter_sets)

    failed = sum(d is None for d in realized)
    if failed:
        logger.info(f"{failed} of {realizations} Monte Carlo realizations of "
                    f"{distribution.display_name} have invalid parameters and were excluded")

    values = _quantile_matrix(realized, 1.0 - quantiles)
    intervals = _column_percentiles(values, percentiles)

    curve = None
    if expected_curve:
        curve = expected_probability_curve(realized, quantiles)

    return MonteCarloResult(
        model_name=distribution.display_name,
        quantiles=quantiles,
        percentiles=percentiles,
        confidence_intervals=intervals,
        expected_curve=curve,
        parameter_sets=parameter_sets,
        sample_size=sample_size,
        metadata={"realizations": realizations, "failed": failed}
    )
