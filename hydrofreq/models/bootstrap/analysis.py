# hydrofreq/models/bootstrap/analysis.py

"""
Bootstrap uncertainty analysis of a fitted frequency distribution.

BootstrapAnalysis draws a population of parametric bootstrap replicates of a
parent distribution and summarizes them as quantile confidence intervals
(percentile, bias-corrected, normal and BCa methods), bootstrapped moments,
and an expected-probability curve.

Replicate i is drawn with the i-th seed taken from a generator seeded by the
parent seed. A replicate that fails (invalid re-fitted parameters or a
non-converged likelihood search) is retried with seed + 10 m for attempt m,
and recorded as None once the retries are exhausted. Failed replicates are
NaN rows in every tabulated output and are excluded from the intervals.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy import special

from hydrofreq.core.exceptions import (
    BootstrapError, EstimationMethodError, HydroFreqError
)
from hydrofreq.core.parameters import validate_probability
from hydrofreq.core.results import UncertaintyAnalysisResult
from hydrofreq.core.types import MethodLike, ParameterEstimationMethod, Sample
from hydrofreq.models.bootstrap.base import BootstrapParameters, bootstrap_replicate
from hydrofreq.models.distributions.base import Bootstrappable, as_generator
from hydrofreq.models.uncertainty.monte_carlo import expected_probabilities, expected_probability_curve
from hydrofreq.utils.statistics import as_sample, linear_moments, percentile, product_moments

logger = logging.getLogger("hydrofreq.models.bootstrap.analysis")

# Failures that mark a replicate for retry
_REPLICATE_FAILURES = (HydroFreqError, ArithmeticError, ValueError)


class BootstrapAnalysis:
    """Parametric bootstrap of a distribution's frequency curve.

    Args:
        distribution: Bootstrappable parent distribution
        method: Estimation method used to re-fit each replicate
        sample_size: Length of each synthetic record, at least 10
        replications: Number of replicates, at least 100; defaults to the
            configured bootstrap replications
        seed: Parent seed; defaults to the configured default seed

    Raises:
        BootstrapError: If the distribution is not bootstrappable
        EstimationMethodError: If an estimable distribution does not support
            the method
        ParameterError: If sample_size or replications are too small
    """

    def __init__(self, distribution, method: MethodLike, sample_size: int,
                 replications: Optional[int] = None, seed: Optional[int] = None) -> None:
        if not isinstance(distribution, Bootstrappable):
            raise BootstrapError(
                f"{distribution.display_name} does not support bootstrapping",
                bootstrap_type="parametric"
            )
        self.method = ParameterEstimationMethod.from_value(method)
        if distribution.capabilities and not distribution.supports(self.method):
            raise distribution._unsupported(self.method, "Bootstrap analysis")
        settings = {"replications": replications, "seed": seed}
        self.params = BootstrapParameters(
            sample_size=sample_size, **{k: v for k, v in settings.items() if v is not None}
        )
        self.distribution = distribution

    @property
    def sample_size(self) -> int:
        return self.params.sample_size

    @property
    def replications(self) -> int:
        return self.params.replications

    @property
    def seed(self) -> Optional[int]:
        return self.params.seed

    def _seeds(self) -> np.ndarray:
        rng = as_generator(self.seed)
        return rng.integers(0, 2 ** 31 - 1, size=self.replications)

    def _replicate(self, seed: int):
        for attempt in range(self.params.retries):
            try:
                return bootstrap_replicate(self.distribution, self.method, self.sample_size,
                                           int(seed) + 10 * attempt)
            except EstimationMethodError:
                raise
            except _REPLICATE_FAILURES as e:
                logger.debug(f"Bootstrap replicate with seed {seed} failed on attempt {attempt + 1}: {e}")
        return None

    def distributions(self) -> List[Optional[object]]:
        """
        Bootstrapped distributions, one per replication.

        Returns:
            List of re-fitted clones, with None for replicates that failed
            every retry
        """
        self.distribution._ensure_valid()
        replicates = [self._replicate(s) for s in self._seeds()]
        failed = sum(r is None for r in replicates)
        if failed:
            logger.warning(f"{failed} of {self.replications} bootstrap replicates of "
                           f"{self.distribution.display_name} failed and were recorded as None")
        return replicates

    def _resolve(self, distributions):
        return self.distributions() if distributions is None else distributions

    def parameters(self, distributions=None) -> np.ndarray:
        """Parameters of each replicate, shape (replications, n_parameters); NaN rows for failures."""
        distributions = self._resolve(distributions)
        out = np.full((len(distributions), self.distribution.number_of_parameters), np.nan)
        for i, dist in enumerate(distributions):
            if dist is not None:
                out[i] = dist.parameters
        return out

    def _sample_statistics(self, statistic) -> np.ndarray:
        out = np.empty((self.replications, 4))
        for i, s in enumerate(self._seeds()):
            out[i] = statistic(self.distribution.generate_random_values(self.sample_size, int(s)))
        return out

    def product_moments(self) -> np.ndarray:
        """Product moments of each synthetic sample, shape (replications, 4)."""
        return self._sample_statistics(product_moments)

    def linear_moments(self) -> np.ndarray:
        """L-moments of each synthetic sample, shape (replications, 4)."""
        return self._sample_statistics(linear_moments)

    def quantiles(self, probabilities: Sequence[float], distributions=None) -> np.ndarray:
        """Quantiles of each replicate, shape (replications, n_probabilities)."""
        validate_probability(probabilities)
        probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
        distributions = self._resolve(distributions)
        out = np.full((len(distributions), probabilities.size), np.nan)
        for i, dist in enumerate(distributions):
            if dist is not None:
                out[i] = dist.inverse_cdf(probabilities)
        return out

    def probabilities(self, quantiles: Sequence[float], distributions=None) -> np.ndarray:
        """Non-exceedance probabilities of values under each replicate, shape (replications, n_values)."""
        quantiles = np.atleast_1d(np.asarray(quantiles, dtype=float))
        distributions = self._resolve(distributions)
        out = np.full((len(distributions), quantiles.size), np.nan)
        for i, dist in enumerate(distributions):
            if dist is not None:
                out[i] = dist.cdf(quantiles)
        return out

    @staticmethod
    def _valid_sorted(column: np.ndarray) -> np.ndarray:
        return np.sort(column[np.isfinite(column)])

    def percentile_quantile_ci(self, probabilities: Sequence[float], alpha: float = 0.1,
                               distributions=None) -> np.ndarray:
        """
        Percentile-method confidence intervals for quantiles.

        Returns:
            Array of shape (n_probabilities, 2) of lower and upper limits
        """
        validate_probability(alpha)
        values = self.quantiles(probabilities, distributions)
        levels = np.array([alpha / 2.0, 1.0 - alpha / 2.0])
        out = np.full((values.shape[1], 2), np.nan)
        for i in range(values.shape[1]):
            valid = self._valid_sorted(values[:, i])
            if valid.size:
                out[i] = percentile(valid, levels, is_sorted=True)
        return out

    def _bias_corrected(self, values: np.ndarray, population: np.ndarray,
                        alpha: float, acceleration: np.ndarray) -> np.ndarray:
        z_levels = special.ndtri(np.array([alpha / 2.0, 1.0 - alpha / 2.0]))
        out = np.full((values.shape[1], 2), np.nan)
        for i in range(values.shape[1]):
            column = values[:, i]
            p0 = np.sum(column <= population[i]) / (column.size + 1.0)
            valid = self._valid_sorted(column)
            if not valid.size:
                continue
            z0 = special.ndtri(p0)
            adjusted = special.ndtr(z0 + (z0 + z_levels) / (1.0 - acceleration[i] * (z0 + z_levels)))
            out[i] = percentile(valid, np.clip(adjusted, 0.0, 1.0), is_sorted=True)
        return out

    def bias_corrected_quantile_ci(self, probabilities: Sequence[float], alpha: float = 0.1,
                                   distributions=None) -> np.ndarray:
        """
        Bias-corrected percentile confidence intervals for quantiles.

        The percentile levels are shifted by z0 = Φ⁻¹(P0), where P0 is the
        proportion of replicate quantiles at or below the parent quantile.

        Returns:
            Array of shape (n_probabilities, 2)
        """
        validate_probability(alpha)
        probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
        population = np.asarray(self.distribution.inverse_cdf(probabilities), dtype=float)
        values = self.quantiles(probabilities, distributions)
        return self._bias_corrected(values, population, alpha, np.zeros(probabilities.size))

    def normal_quantile_ci(self, probabilities: Sequence[float], alpha: float = 0.1,
                           distributions=None) -> np.ndarray:
        """
        Normal-theory confidence intervals computed on cube-root quantiles.

        The limits are (Q^(1/3) -/+ z SE)^3, where SE is the standard
        deviation of the replicates' cube-root quantiles.

        Returns:
            Array of shape (n_probabilities, 2)
        """
        validate_probability(alpha)
        probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
        population = np.cbrt(np.asarray(self.distribution.inverse_cdf(probabilities), dtype=float))
        values = np.cbrt(self.quantiles(probabilities, distributions))
        z_levels = special.ndtri(np.array([alpha / 2.0, 1.0 - alpha / 2.0]))
        out = np.full((probabilities.size, 2), np.nan)
        for i in range(probabilities.size):
            valid = values[:, i][np.isfinite(values[:, i])]
            if valid.size > 1:
                se = float(np.std(valid, ddof=1))
                out[i] = (population[i] + se * z_levels) ** 3
        return out

    def bca_quantile_ci(self, sample: Sample, probabilities: Sequence[float],
                        alpha: float = 0.1) -> np.ndarray:
        """
        Bias-corrected and accelerated confidence intervals for quantiles.

        A clone of the parent is re-estimated from ``sample`` with the
        analysis method and bootstrapped with records of the sample length;
        the acceleration constants come from a jackknife over the sample.
        The analysis itself is left unchanged.

        Returns:
            Array of shape (n_probabilities, 2)
        """
        validate_probability(alpha)
        x = as_sample(sample)
        probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
        parent = self.distribution.clone()
        parent.estimate(x, self.method)
        fitted = BootstrapAnalysis(parent, self.method, x.size, self.replications, self.seed)
        fitted.params.retries = self.params.retries
        population = np.asarray(parent.inverse_cdf(probabilities), dtype=float)
        acceleration = fitted._acceleration(x, probabilities, population)
        values = fitted.quantiles(probabilities)
        return fitted._bias_corrected(values, population, alpha, acceleration)

    def _acceleration(self, sample: np.ndarray, probabilities: np.ndarray,
                      population: np.ndarray) -> np.ndarray:
        n = sample.size
        i2 = np.zeros(probabilities.size)
        i3 = np.zeros(probabilities.size)
        for i in range(n):
            jack = self.distribution.clone()
            try:
                jack.estimate(np.delete(sample, i), self.method)
            except _REPLICATE_FAILURES as e:
                logger.debug(f"Jackknife estimate without observation {i} failed: {e}")
                continue
            d = (n - 1) * (population - np.asarray(jack.inverse_cdf(probabilities), dtype=float))
            i2 += d ** 2
            i3 += d ** 3
        with np.errstate(divide="ignore", invalid="ignore"):
            acceleration = i3 / (6.0 * i2 ** 1.5)
        return np.nan_to_num(acceleration, nan=0.0, posinf=0.0, neginf=0.0)

    def expected_probabilities(self, quantiles: Sequence[float], distributions=None) -> np.ndarray:
        """Average non-exceedance probability of each value over the replicates."""
        return expected_probabilities(self._resolve(distributions), quantiles)

    def estimate(self, probabilities: Sequence[float], alpha: float = 0.1,
                 distributions=None, record_parameter_sets: bool = True) -> UncertaintyAnalysisResult:
        """
        Full uncertainty analysis by the percentile method.

        Args:
            probabilities: Non-exceedance probabilities of the curves
            alpha: Significance level; 0.1 gives 90% intervals
            distributions: Previously bootstrapped replicates to reuse
            record_parameter_sets: Whether to keep each replicate's parameters

        Returns:
            UncertaintyAnalysisResult with the parent (mode) curve, the
            confidence intervals, the expected-probability (mean) curve and
            the replicate parameters
        """
        validate_probability(probabilities)
        validate_probability(alpha)
        probabilities = np.atleast_1d(np.asarray(probabilities, dtype=float))
        distributions = self._resolve(distributions)

        mode_curve = np.asarray(self.distribution.inverse_cdf(probabilities), dtype=float)
        intervals = self.percentile_quantile_ci(probabilities, alpha, distributions)
        mean_curve = expected_probability_curve(distributions, 1.0 - probabilities)
        parameter_sets = self.parameters(distributions) if record_parameter_sets else None

        failed = sum(d is None for d in distributions)
        logger.info(f"Bootstrap analysis of {self.distribution.display_name}: "
                    f"{len(distributions) - failed} of {len(distributions)} replicates succeeded")

        return UncertaintyAnalysisResult(
            model_name=self.distribution.display_name,
            probabilities=probabilities,
            alpha=alpha,
            mode_curve=mode_curve,
            mean_curve=mean_curve,
            confidence_intervals=intervals,
            parameter_sets=parameter_sets,
            method="percentile",
            metadata={
                "estimation_method": self.method.value,
                "sample_size": self.sample_size,
                "replications": self.replications,
                "seed": self.seed,
                "failed": failed,
            }
        )
