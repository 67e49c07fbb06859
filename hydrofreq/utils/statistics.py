"""
Sample statistics for frequency analysis.

Product moments, L-moments, percentiles, plotting positions and the guarded
log transform used by log-space distributions. Moment vectors share one
layout throughout the package:

* product moments: [mean, standard deviation, skewness, kurtosis]
* L-moments: [L1, L2, tau3, tau4]

Kurtosis is reported as the non-excess value (3 for a normal sample).
"""

import logging
from typing import Optional, Union

import numpy as np
from numba import jit

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import raise_data_error, raise_parameter_error
from hydrofreq.core.types import MomentVector, PlottingPosition, Sample, Vector

# Set up module-level logger
logger = logging.getLogger("hydrofreq.utils.statistics")


def as_sample(sample: Sample, name: str = "sample", min_size: int = 1) -> np.ndarray:
    """Flatten a sample to a finite 1D float array.

    Raises:
        DataError: If the sample contains NaN or infinite
            values, or has fewer than ``min_size`` values
    """
    data = np.asarray(sample, dtype=float)
    if data.ndim != 1:
        data = data.ravel()
    if data.size < min_size:
        raise_data_error(
            f"Sample must contain at least {min_size} value(s)",
            data_name=name,
            issue=f"size {data.size}"
        )
    if not np.all(np.isfinite(data)):
        raise_data_error(
            "Sample contains NaN or infinite values",
            data_name=name,
            issue="non-finite values"
        )
    return data


def product_moments(sample: Sample) -> MomentVector:
    """
    Unbiased sample product moments.

    Args:
        sample: Sample values

    Returns:
        Array [mean, standard deviation, skewness, kurtosis]. Skewness needs at
        least 3 values and kurtosis at least 4; otherwise they are NaN. A
        sample with zero spread has skewness 0 and kurtosis 3.

    Raises:
        DataError: If the sample is empty or not finite
    """
    x = as_sample(sample)
    n = x.size
    mean = float(np.mean(x))
    if n < 2:
        return np.array([mean, np.nan, np.nan, np.nan])

    deviations = x - mean
    sd = float(np.sqrt(np.sum(deviations ** 2) / (n - 1)))
    if sd == 0.0:
        return np.array([mean, 0.0, 0.0, 3.0])

    z = deviations / sd
    skew = np.nan
    kurt = np.nan
    if n > 2:
        skew = n / ((n - 1) * (n - 2)) * np.sum(z ** 3)
    if n > 3:
        excess = (n * (n + 1) / ((n - 1) * (n - 2) * (n - 3)) * np.sum(z ** 4)
                  - 3.0 * (n - 1) ** 2 / ((n - 2) * (n - 3)))
        kurt = excess + 3.0
    return np.array([mean, sd, skew, kurt])


@jit(nopython=True, cache=True)
def _probability_weighted_moments(x_sorted: np.ndarray) -> np.ndarray:
    """
    Unbiased probability-weighted moments b0..b3 of an ascending sample.

    Args:
        x_sorted: Sample sorted in ascending order

    Returns:
        np.ndarray: [b0, b1, b2, b3]; entries needing more values than are
        available are NaN
    """
    n = x_sorted.shape[0]
    b = np.zeros(4, dtype=np.float64)
    for i in range(n):
        j = float(i)
        x = x_sorted[i]
        b[0] += x
        if n > 1:
            b[1] += j / (n - 1) * x
        if n > 2:
            b[2] += j * (j - 1.0) / ((n - 1) * (n - 2)) * x
        if n > 3:
            b[3] += j * (j - 1.0) * (j - 2.0) / ((n - 1) * (n - 2) * (n - 3)) * x
    for r in range(4):
        if n > r:
            b[r] = b[r] / n
        else:
            b[r] = np.nan
    return b


def linear_moments(sample: Sample) -> MomentVector:
    """
    Sample L-moments from unbiased probability-weighted moments.

    Args:
        sample: Sample values

    Returns:
        Array [L1, L2, tau3, tau4]. A sample with zero spread has L2 = 0 and
        both ratios 0.

    Raises:
        DataError: If the sample is empty or not finite
    """
    x = np.sort(as_sample(sample))
    b0, b1, b2, b3 = _probability_weighted_moments(x)
    l1 = b0
    l2 = 2.0 * b1 - b0
    l3 = 6.0 * b2 - 6.0 * b1 + b0
    l4 = 20.0 * b3 - 30.0 * b2 + 12.0 * b1 - b0
    if l2 == 0.0:
        return np.array([l1, 0.0, 0.0, 0.0])
    return np.array([l1, l2, l3 / l2, l4 / l2])


def percentile(sample: Sample, k: Union[float, Vector], is_sorted: bool = False) -> Union[float, np.ndarray]:
    """
    Percentile of a sample by linear interpolation between order statistics.

    The k-th percentile sits at rank (n - 1) * k + 1 of the ascending sample.

    Args:
        sample: Sample values
        k: Fraction(s) in [0, 1]
        is_sorted: Skip sorting when the sample is already ascending

    Returns:
        The percentile value(s)

    Raises:
        DataError: If the sample is empty or not finite
        ParameterError: If k is outside [0, 1]
    """
    x = as_sample(sample)
    k_arr = np.asarray(k, dtype=float)
    if np.any(k_arr < 0.0) or np.any(k_arr > 1.0) or np.any(np.isnan(k_arr)):
        raise_parameter_error(
            "Percentile fraction must be between 0 and 1",
            param_name="k",
            param_value=k,
            constraint="0 <= k <= 1"
        )
    if not is_sorted:
        x = np.sort(x)
    n = x.size
    rank = (n - 1) * k_arr
    lower = np.floor(rank).astype(int)
    upper = np.minimum(lower + 1, n - 1)
    weight = rank - lower
    result = x[lower] + weight * (x[upper] - x[lower])
    return float(result) if result.ndim == 0 else result


def plotting_positions(n: int,
                       method: Union[PlottingPosition, str] = PlottingPosition.WEIBULL) -> Vector:
    """
    Non-exceedance plotting positions (i - a) / (n + 1 - 2a) for i = 1..n.

    Args:
        n: Number of positions
        method: Plotting position formula (Weibull, Blom, Cunnane, Gringorten, Hazen)

    Returns:
        Ascending array of n probabilities
    """
    if isinstance(method, str):
        method = PlottingPosition[method.upper()]
    if n < 1:
        raise_parameter_error("Number of plotting positions must be positive",
                              param_name="n", param_value=n, constraint="n >= 1")
    a = method.value
    i = np.arange(1, n + 1, dtype=float)
    return (i - a) / (n + 1.0 - 2.0 * a)


def log_transform(sample: Sample, base: float = 10.0, floor: Optional[float] = None) -> np.ndarray:
    """
    Log transform that substitutes a floor for non-positive values.

    Args:
        sample: Sample values
        base: Logarithm base
        floor: Value whose logarithm replaces non-positive entries; defaults to
            the configured numerical log_floor

    Returns:
        Array of log values
    """
    x = as_sample(sample)
    if floor is None:
        floor = get_config("numerical", "log_floor", 0.01)
    non_positive = x <= 0.0
    if np.any(non_positive):
        logger.debug(f"Replacing {int(np.sum(non_positive))} non-positive value(s) with log floor {floor}")
    safe = np.where(non_positive, floor, x)
    return np.log(safe) / np.log(base)
