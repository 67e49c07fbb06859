'''
Maximum likelihood estimation engine.

The objective is the distribution's own log-likelihood evaluated on a working
clone that receives each candidate parameter vector. Candidates that fail the
distribution's domain checks score the most negative float. The negative
log-likelihood is minimized with bounded Nelder-Mead from scipy.optimize,
seeded and boxed by the distribution's ParameterConstraints.

Convergence is part of the return value: a failed search is logged, warned
about and returned with ``success=False``; it is raised as ConvergenceError
only when the caller (or the estimation configuration) asks for it.
'''

import logging
from typing import Optional

import numpy as np
from scipy import optimize

from hydrofreq.core.config import get_config
from hydrofreq.core.exceptions import (
    ConvergenceError, EstimationMethodError, warn_convergence
)
from hydrofreq.core.parameters import ParameterConstraints
from hydrofreq.core.results import OptimizationResult
from hydrofreq.core.types import ParameterEstimationMethod, Sample
from hydrofreq.utils.statistics import as_sample

logger = logging.getLogger("hydrofreq.models.estimation.mle")

MIN_LOG_LIKELIHOOD = -np.finfo(float).max


def log_likelihood_objective(distribution, sample: np.ndarray):
    """
    Build the negative log-likelihood of a sample as a function of the parameters.

    Args:
        distribution: Distribution whose clone evaluates each candidate
        sample: Observed values

    Returns:
        Callable mapping a parameter vector to the negative log-likelihood
    """
    working = distribution.clone()

    def negative_log_likelihood(theta: np.ndarray) -> float:
        working.set_parameters(theta)
        if not working.parameters_valid:
            return -MIN_LOG_LIKELIHOOD
        return -working.log_likelihood(sample)

    return negative_log_likelihood


def maximize_log_likelihood(distribution,
                            sample: Sample,
                            constraints: Optional[ParameterConstraints] = None,
                            raise_on_failure: Optional[bool] = None) -> OptimizationResult:
    """
    Maximize a distribution's log-likelihood over a bounded parameter box.

    The distribution itself is not modified.

    Args:
        distribution: A MaximumLikelihoodEstimable distribution
        sample: Observed values
        constraints: Initial values and bounds; derived from the sample with
            ``distribution.get_parameter_constraints`` when omitted
        raise_on_failure: Raise ConvergenceError when the search fails;
            defaults to the estimation configuration

    Returns:
        OptimizationResult with the best parameter vector found. The vector
        is not guaranteed to be valid for the distribution.

    Raises:
        EstimationMethodError: If the distribution is not MLE-estimable
        ConvergenceError: If the search fails and raise_on_failure is set
    """
    if not hasattr(distribution, "get_parameter_constraints"):
        raise EstimationMethodError(
            f"Maximum likelihood is not implemented for {distribution.display_name}",
            distribution_type=distribution.display_name,
            estimation_method=ParameterEstimationMethod.MAXIMUM_LIKELIHOOD.value,
            operation="maximize_log_likelihood"
        )

    if raise_on_failure is None:
        raise_on_failure = get_config("estimation", "raise_on_failure", False)

    x = as_sample(sample)
    if constraints is None:
        constraints = distribution.get_parameter_constraints(x)

    tol = get_config("numerical", "optimization_tol", 1e-8)
    max_iterations = get_config("numerical", "max_iterations", 10000)

    objective = log_likelihood_objective(distribution, x)

    logger.debug(
        f"Starting likelihood search for {distribution.short_display_name} "
        f"from {constraints.initial} within [{constraints.lower}, {constraints.upper}]"
    )

    result = optimize.minimize(
        objective,
        constraints.initial,
        method="Nelder-Mead",
        bounds=constraints.bounds,
        options={
            "maxiter": max_iterations,
            "maxfev": max_iterations * 2,
            "xatol": tol,
            "fatol": tol,
            "adaptive": len(constraints.initial) > 2,
        }
    )

    log_likelihood = -float(result.fun)
    success = bool(result.success)
    message = str(result.message)
    if success and log_likelihood <= MIN_LOG_LIKELIHOOD:
        success = False
        message = "No parameter vector with a finite log-likelihood was found"

    optimization_result = OptimizationResult(
        model_name=distribution.display_name,
        success=success,
        parameters=np.asarray(result.x, dtype=float),
        log_likelihood=log_likelihood,
        iterations=int(getattr(result, "nit", 0)),
        function_evaluations=int(getattr(result, "nfev", 0)),
        message=message,
        metadata={"sample_size": x.size}
    )

    if success:
        logger.debug(
            f"Likelihood search for {distribution.short_display_name} converged in "
            f"{optimization_result.iterations} iterations: {optimization_result.parameters}"
        )
        return optimization_result

    logger.warning(f"Likelihood search for {distribution.display_name} did not converge: {message}")
    if raise_on_failure:
        raise ConvergenceError(
            f"Maximum likelihood estimation of {distribution.display_name} did not converge",
            iterations=optimization_result.iterations,
            tolerance=tol,
            final_value=log_likelihood,
            details=message
        )
    warn_convergence(
        f"Maximum likelihood estimation of {distribution.display_name} did not converge",
        iterations=optimization_result.iterations,
        tolerance=tol,
        details=message
    )
    return optimization_result
