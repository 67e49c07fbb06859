# hydrofreq/models/bootstrap/base.py

"""
Parametric bootstrap replicates of a fitted distribution.

A replicate is produced by drawing a synthetic record of the requested
length from the parent distribution, re-estimating a clone of the parent
from it, and rejecting the result when the re-estimated parameters are
invalid. The same seed always reproduces the same replicate.

This module also holds the validated settings shared by bootstrap analyses.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

import numpy as np

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import BootstrapError, ParameterError
from hydrofreq.core.types import MethodLike, ParameterEstimationMethod, RandomState

logger = logging.getLogger("hydrofreq.models.bootstrap.base")


@dataclass
class BootstrapParameters:
    """Settings for a parametric bootstrap analysis.

    Attributes:
        sample_size: Length of each synthetic record
        replications: Number of bootstrap replicates
        seed: Parent seed from which per-replicate seeds are drawn
        retries: Attempts per replicate before it is recorded as failed
    """

    sample_size: int
    replications: int = field(default_factory=lambda: get_config("bootstrap", "replications", 10000))
    seed: Optional[int] = field(default_factory=lambda: get_config("core", "default_seed", 12345))
    retries: int = field(default_factory=lambda: get_config("bootstrap", "retries", 20))

    def __post_init__(self) -> None:
        """Validate parameters after initialization.

        Raises:
            ParameterError: If parameters violate constraints
        """
        min_sample_size = get_config("bootstrap", "min_sample_size", 10)
        min_replications = get_config("bootstrap", "min_replications", 100)

        if not isinstance(self.sample_size, (int, np.integer)) or isinstance(self.sample_size, bool):
            raise ParameterError(
                "sample_size must be an integer",
                param_name="sample_size",
                param_value=self.sample_size
            )
        if self.sample_size < min_sample_size:
            raise ParameterError(
                f"The sample size must be at least {min_sample_size}",
                param_name="sample_size",
                param_value=self.sample_size,
                constraint=f"sample_size >= {min_sample_size}"
            )

        if not isinstance(self.replications, (int, np.integer)) or isinstance(self.replications, bool):
            raise ParameterError(
                "replications must be an integer",
                param_name="replications",
                param_value=self.replications
            )
        if self.replications < min_replications:
            raise ParameterError(
                f"The number of bootstrap replications must be at least {min_replications}",
                param_name="replications",
                param_value=self.replications,
                constraint=f"replications >= {min_replications}"
            )

        if self.retries < 1:
            raise ParameterError(
                "retries must be positive",
                param_name="retries",
                param_value=self.retries
            )

        if self.seed is not None and not isinstance(self.seed, (int, np.integer)):
            raise ParameterError(
                "seed must be an integer",
                param_name="seed",
                param_value=type(self.seed)
            )


def bootstrap_replicate(distribution, method: MethodLike, sample_size: int,
                        seed: RandomState = None):
    """
    Re-fitted clone estimated from a synthetic sample of ``distribution``.

    Args:
        distribution: Bootstrappable distribution with valid parameters
        method: Estimation method used for the re-fit
        sample_size: Length of the synthetic sample
        seed: Seed or numpy Generator for the synthetic sample

    Returns:
        The re-fitted clone; the parent is never modified

    Raises:
        BootstrapError: If the re-fitted parameters are invalid
        ConvergenceError: If a likelihood re-fit does not converge
    """
    method = ParameterEstimationMethod.from_value(method)
    sample = distribution.generate_random_values(sample_size, seed)
    replicate = distribution.clone()
    replicate._refit(sample, method)
    if not replicate.parameters_valid:
        reason = replicate.parameter_state.reason
        raise BootstrapError(
            f"Bootstrapped {distribution.display_name} parameters are invalid",
            bootstrap_type="parametric",
            issue=reason,
            context={"Method": method.value, "Sample Size": sample_size}
        )
    return replicate
