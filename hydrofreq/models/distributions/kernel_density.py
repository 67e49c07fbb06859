"""
Kernel density estimate over a stored sample.

The density is the average of kernels of width ``bandwidth`` centred on each
observation, and the CDF the average of the integrated kernels, both
evaluated by the numba kernels in ``_numba_core``. The only parameter is the
bandwidth; the sample itself is carried alongside and replaced through
``set_sample``.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy import optimize

from hydrofreq.core.exceptions import ParameterError
from hydrofreq.core.parameters import check_positive
from hydrofreq.core.types import DistributionType, KernelType, ParameterEstimationMethod, Sample
from hydrofreq.models.distributions import _numba_core
from hydrofreq.models.distributions.base import Bootstrappable, UnivariateDistribution
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.distributions.kernel_density")

_KERNEL_CODES = {
    KernelType.EPANECHNIKOV: _numba_core.EPANECHNIKOV,
    KernelType.GAUSSIAN: _numba_core.GAUSSIAN,
    KernelType.TRIANGULAR: _numba_core.TRIANGULAR,
    KernelType.UNIFORM: _numba_core.UNIFORM,
}

# Second and fourth moments of each unit kernel
_KERNEL_VARIANCE = {
    KernelType.EPANECHNIKOV: 1.0 / 5.0,
    KernelType.GAUSSIAN: 1.0,
    KernelType.TRIANGULAR: 1.0 / 6.0,
    KernelType.UNIFORM: 1.0 / 3.0,
}
_KERNEL_FOURTH_MOMENT = {
    KernelType.EPANECHNIKOV: 3.0 / 35.0,
    KernelType.GAUSSIAN: 3.0,
    KernelType.TRIANGULAR: 1.0 / 15.0,
    KernelType.UNIFORM: 1.0 / 5.0,
}


# Smallest bandwidth, relative to the sample magnitude, used when the sample has no spread
MIN_RELATIVE_BANDWIDTH = 1e-8


def silverman_bandwidth(sample: Sample) -> float:
    """Rule-of-thumb bandwidth σ (4 / 3n)^(1/5) using the sample standard deviation.

    An all-equal sample gives a near point mass with bandwidth
    ``MIN_RELATIVE_BANDWIDTH * max(|x|, 1)``.
    """
    x = as_sample(sample, min_size=2)
    sigma = float(np.std(x, ddof=1))
    floor = MIN_RELATIVE_BANDWIDTH * max(float(np.max(np.abs(x))), 1.0)
    return max(sigma * (4.0 / (3.0 * x.size)) ** 0.2, floor)


class KernelDensity(UnivariateDistribution, Bootstrappable):
    """Kernel density distribution.

    Args:
        sample: Observations the density is built from (at least 2)
        kernel: Kernel function
        bandwidth: Kernel width; None uses Silverman's rule
    """

    distribution_type = DistributionType.KERNEL_DENSITY
    display_name = "Kernel Density"
    short_display_name = "KDE"
    parameter_names = ("bandwidth",)
    parameter_symbols = ("h",)
    minimum_of_parameters = (0.0,)
    maximum_of_parameters = (np.inf,)

    def __init__(self, sample: Sample,
                 kernel: KernelType = KernelType.EPANECHNIKOV,
                 bandwidth: Optional[float] = None) -> None:
        self._kernel = KernelType(kernel)
        self._sample = np.sort(as_sample(sample, min_size=2))
        if bandwidth is None:
            bandwidth = silverman_bandwidth(self._sample)
        super().__init__(bandwidth)

    @property
    def bandwidth(self) -> float:
        return float(self._parameters[0])

    @bandwidth.setter
    def bandwidth(self, value: float) -> None:
        self._set_parameter(0, value)

    @property
    def kernel(self) -> KernelType:
        return self._kernel

    @kernel.setter
    def kernel(self, value: KernelType) -> None:
        self._kernel = KernelType(value)

    @property
    def sample(self) -> np.ndarray:
        return self._sample.copy()

    @property
    def sample_size(self) -> int:
        return int(self._sample.size)

    def set_sample(self, sample: Sample, bandwidth: Optional[float] = None) -> None:
        """Replace the sample; the bandwidth is recomputed by Silverman's rule unless given."""
        self._sample = np.sort(as_sample(sample, min_size=2))
        if bandwidth is None:
            bandwidth = silverman_bandwidth(self._sample)
        self.set_parameters([bandwidth])

    def validate_parameters(self, values: Sequence[float], throw: bool = False) -> Optional[ParameterError]:
        return check_positive(values[0], "bandwidth", throw=throw)

    @property
    def _compact(self) -> bool:
        return self._kernel is not KernelType.GAUSSIAN

    def _pdf(self, x: np.ndarray) -> np.ndarray:
        return _numba_core.kde_pdf(np.ascontiguousarray(x), self._sample, self.bandwidth,
                                   _KERNEL_CODES[self._kernel])

    def _cdf(self, x: np.ndarray) -> np.ndarray:
        return _numba_core.kde_cdf(np.ascontiguousarray(x), self._sample, self.bandwidth,
                                   _KERNEL_CODES[self._kernel])

    def _inverse_cdf(self, p: np.ndarray) -> np.ndarray:
        reach = (1.0 if self._compact else 10.0) * self.bandwidth
        lower = self._sample[0] - reach
        upper = self._sample[-1] + reach

        def solve(probability):
            return optimize.brentq(lambda v: self._cdf(np.array([v]))[0] - probability,
                                   lower, upper, xtol=1e-12)

        return np.array([solve(pi) for pi in p])

    def _sample_central_moments(self):
        mean = float(np.mean(self._sample))
        d = self._sample - mean
        return mean, float(np.mean(d ** 2)), float(np.mean(d ** 3)), float(np.mean(d ** 4))

    @property
    def mean(self) -> float:
        return float(np.mean(self._sample))

    @property
    def mode(self) -> float:
        return np.nan

    @property
    def variance(self) -> float:
        _, m2, _, _ = self._sample_central_moments()
        return m2 + self.bandwidth ** 2 * _KERNEL_VARIANCE[self._kernel]

    @property
    def standard_deviation(self) -> float:
        return float(np.sqrt(self.variance))

    @property
    def skewness(self) -> float:
        _, _, m3, _ = self._sample_central_moments()
        return m3 / self.variance ** 1.5

    @property
    def kurtosis(self) -> float:
        _, m2, _, m4 = self._sample_central_moments()
        h2 = self.bandwidth ** 2
        fourth = (m4 + 6.0 * h2 * _KERNEL_VARIANCE[self._kernel] * m2
                  + h2 ** 2 * _KERNEL_FOURTH_MOMENT[self._kernel])
        return fourth / self.variance ** 2

    @property
    def minimum(self) -> float:
        if self._compact:
            return float(self._sample[0] - self.bandwidth)
        return -np.inf

    @property
    def maximum(self) -> float:
        if self._compact:
            return float(self._sample[-1] + self.bandwidth)
        return np.inf

    def _refit(self, sample: np.ndarray, method: ParameterEstimationMethod) -> None:
        """Rebuild from the sample with Silverman's bandwidth; the method is ignored."""
        self.set_sample(sample)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self._kernel is other._kernel
                and np.array_equal(self._sample, other._sample)
                and np.array_equal(self._parameters, other._parameters))

    __hash__ = None

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(n={self.sample_size}, kernel={self._kernel.value}, "
                f"bandwidth={self.bandwidth:.6g})")
