# hydrofreq/models/distributions/utils.py
"""
Lookup and construction of distributions by family.
"""

import logging
from typing import Dict, List, Type, Union

from hydrofreq.core.types import DistributionType
from hydrofreq.models.distributions.base import UnivariateDistribution
from hydrofreq.models.distributions.deterministic import Deterministic
from hydrofreq.models.distributions.empirical import EmpiricalDistribution
from hydrofreq.models.distributions.exponential import Exponential
from hydrofreq.models.distributions.gamma import GammaDistribution
from hydrofreq.models.distributions.generalized_extreme_value import GeneralizedExtremeValue
from hydrofreq.models.distributions.generalized_pareto import GeneralizedPareto
from hydrofreq.models.distributions.gumbel import Gumbel
from hydrofreq.models.distributions.kernel_density import KernelDensity
from hydrofreq.models.distributions.log_normal import LogNormal
from hydrofreq.models.distributions.log_pearson_type_iii import LogPearsonTypeIII
from hydrofreq.models.distributions.logistic import Logistic
from hydrofreq.models.distributions.normal import Normal
from hydrofreq.models.distributions.pearson_type_iii import PearsonTypeIII
from hydrofreq.models.distributions.pert import Pert
from hydrofreq.models.distributions.triangular import Triangular
from hydrofreq.models.distributions.uniform import Uniform
from hydrofreq.models.distributions.weibull import Weibull

logger = logging.getLogger("hydrofreq.models.distributions.utils")

DISTRIBUTION_CLASSES: Dict[DistributionType, Type[UnivariateDistribution]] = {
    DistributionType.DETERMINISTIC: Deterministic,
    DistributionType.UNIFORM: Uniform,
    DistributionType.TRIANGULAR: Triangular,
    DistributionType.PERT: Pert,
    DistributionType.NORMAL: Normal,
    DistributionType.LOG_NORMAL: LogNormal,
    DistributionType.EXPONENTIAL: Exponential,
    DistributionType.GUMBEL: Gumbel,
    DistributionType.LOGISTIC: Logistic,
    DistributionType.GENERALIZED_EXTREME_VALUE: GeneralizedExtremeValue,
    DistributionType.GENERALIZED_PARETO: GeneralizedPareto,
    DistributionType.GAMMA: GammaDistribution,
    DistributionType.PEARSON_TYPE_III: PearsonTypeIII,
    DistributionType.LOG_PEARSON_TYPE_III: LogPearsonTypeIII,
    DistributionType.WEIBULL: Weibull,
    DistributionType.EMPIRICAL: EmpiricalDistribution,
    DistributionType.KERNEL_DENSITY: KernelDensity,
}

# Short names and abbreviations accepted in addition to enum names and values
_ALIASES = {
    "POINT": DistributionType.DETERMINISTIC,
    "TRI": DistributionType.TRIANGULAR,
    "N": DistributionType.NORMAL,
    "LN": DistributionType.LOG_NORMAL,
    "LOGNORMAL": DistributionType.LOG_NORMAL,
    "EXP": DistributionType.EXPONENTIAL,
    "EV1": DistributionType.GUMBEL,
    "GEV": DistributionType.GENERALIZED_EXTREME_VALUE,
    "GPA": DistributionType.GENERALIZED_PARETO,
    "GP": DistributionType.GENERALIZED_PARETO,
    "GAM": DistributionType.GAMMA,
    "P3": DistributionType.PEARSON_TYPE_III,
    "PIII": DistributionType.PEARSON_TYPE_III,
    "LP3": DistributionType.LOG_PEARSON_TYPE_III,
    "LPIII": DistributionType.LOG_PEARSON_TYPE_III,
    "EMP": DistributionType.EMPIRICAL,
    "KDE": DistributionType.KERNEL_DENSITY,
}


def _resolve_type(distribution_type: Union[str, DistributionType]) -> DistributionType:
    if isinstance(distribution_type, DistributionType):
        return distribution_type
    key = str(distribution_type).strip()
    for member in DistributionType:
        if key == member.value or key.upper() == member.name:
            return member
    normalized = key.upper().replace("-", "").replace("_", "").replace(" ", "")
    if normalized in _ALIASES:
        return _ALIASES[normalized]
    for member in DistributionType:
        if normalized == member.name.replace("_", ""):
            return member
    raise ValueError(f"Unknown distribution type: {distribution_type}. "
                     f"Available types: {', '.join(available_distributions())}")


def distribution_class(distribution_type: Union[str, DistributionType]) -> Type[UnivariateDistribution]:
    """Class implementing a distribution family given by enum, value, name or abbreviation."""
    return DISTRIBUTION_CLASSES[_resolve_type(distribution_type)]


def create_distribution(distribution_type: Union[str, DistributionType], *parameters) -> UnivariateDistribution:
    """
    Create a distribution instance.

    Args:
        distribution_type: Family as a DistributionType, its value ("Gumbel"),
            its name ("LOG_PEARSON_TYPE_III") or a common abbreviation ("LP3")
        *parameters: Constructor arguments; none gives the family defaults.
            KernelDensity needs at least its sample.

    Returns:
        UnivariateDistribution: The new instance

    Raises:
        ValueError: If the family is unknown

    Example:
        >>> gev = create_distribution("GEV", 100.0, 10.0, -0.1)
    """
    cls = distribution_class(distribution_type)
    logger.debug(f"Creating {cls.__name__} with parameters {parameters}")
    return cls(*parameters)


def available_distributions() -> List[str]:
    """Values of every distribution family that can be created."""
    return [member.value for member in DISTRIBUTION_CLASSES]
