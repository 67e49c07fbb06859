'''
Result containers for hydrofreq.

Dataclass-based result objects returned by the likelihood optimizer, the
quantile Jacobian, bootstrap analyses and Monte Carlo confidence intervals.
Each carries the name of the distribution that produced it, a creation time
and free-form metadata, and renders a text summary.
'''

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd


@dataclass
class ModelResult:
    """Base class for all results.

    Attributes:
        model_name: Name of the distribution that generated the result
        creation_time: Timestamp when the result was created
        metadata: Additional metadata about the result
    """

    model_name: str
    creation_time: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate result object after initialization."""
        if not isinstance(self.metadata, dict):
            self.metadata = dict(self.metadata)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result object to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of the result object
        """
        result_dict = asdict(self)

        # Convert numpy arrays to lists
        for key, value in result_dict.items():
            if isinstance(value, np.ndarray):
                result_dict[key] = value.tolist()
            elif isinstance(value, datetime):
                result_dict[key] = value.isoformat()

        return result_dict

    def summary(self) -> str:
        """Generate a text summary of the result.

        Returns:
            str: A formatted string containing the result summary
        """
        header = f"Model: {self.model_name}\n"
        header += "=" * (len(header) - 1) + "\n\n"

        timestamp = f"Created: {self.creation_time.strftime('%Y-%m-%d %H:%M:%S')}\n\n"

        metadata_str = ""
        if self.metadata:
            metadata_str = "Metadata:\n"
            for key, value in self.metadata.items():
                metadata_str += f"  {key}: {value}\n"
            metadata_str += "\n"

        return header + timestamp + metadata_str

    def __str__(self) -> str:
        return self.summary()


@dataclass
class OptimizationResult(ModelResult):
    """Outcome of a maximum likelihood search.

    The parameter vector is the best one the optimizer found; it is not
    guaranteed to be valid and must be validated before use. A failed search
    is reported through ``success`` rather than by returning the last iterate
    unmarked.

    Attributes:
        success: Whether the optimizer reported convergence
        parameters: Best parameter vector found
        log_likelihood: Log-likelihood at ``parameters``
        iterations: Number of optimizer iterations
        function_evaluations: Number of objective evaluations
        message: Message from the optimizer
    """

    success: bool = False
    parameters: Optional[np.ndarray] = None
    log_likelihood: float = float("nan")
    iterations: int = 0
    function_evaluations: int = 0
    message: str = ""

    def summary(self) -> str:
        base_summary = super().summary()

        info = f"Convergence: {'Yes' if self.success else 'No'}\n"
        info += f"Iterations: {self.iterations}\n"
        info += f"Function evaluations: {self.function_evaluations}\n"
        if self.message:
            info += f"Optimizer message: {self.message}\n"
        info += f"Log-Likelihood: {self.log_likelihood:.6f}\n"
        if self.parameters is not None:
            values = ", ".join(f"{v:.6g}" for v in self.parameters)
            info += f"Parameters: [{values}]\n"
        return base_summary + info


@dataclass
class JacobianResult(ModelResult):
    """Quantile Jacobian with respect to the distribution parameters.

    Row i holds the partial derivatives of the quantile at probability i.

    Attributes:
        probabilities: Non-exceedance probabilities of the rows
        matrix: Square Jacobian matrix
        determinant: Determinant of ``matrix``
        is_singular: True when |determinant| is at or below the singular
            tolerance, signalling poor local identifiability
    """

    probabilities: Optional[np.ndarray] = None
    matrix: Optional[np.ndarray] = None
    determinant: float = float("nan")
    is_singular: bool = False

    def summary(self) -> str:
        base_summary = super().summary()
        info = f"Determinant: {self.determinant:.6g}\n"
        info += f"Singular: {'Yes' if self.is_singular else 'No'}\n"
        return base_summary + info


@dataclass
class UncertaintyAnalysisResult(ModelResult):
    """Bootstrap uncertainty analysis of a frequency curve.

    Attributes:
        probabilities: Non-exceedance probabilities of the curves
        alpha: Significance level of the confidence intervals
        mode_curve: Quantiles of the parent distribution
        mean_curve: Expected-probability quantile curve
        confidence_intervals: Array of shape (n_probabilities, 2) holding the
            lower and upper confidence limits
        parameter_sets: Parameters of each bootstrap replicate, one row per
            replicate (NaN rows for failed replicates)
        method: Name of the confidence interval method
    """

    probabilities: Optional[np.ndarray] = None
    alpha: float = 0.1
    mode_curve: Optional[np.ndarray] = None
    mean_curve: Optional[np.ndarray] = None
    confidence_intervals: Optional[np.ndarray] = None
    parameter_sets: Optional[np.ndarray] = None
    method: str = "percentile"

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the curves to a pandas DataFrame indexed by probability.

        Raises:
            ValueError: If the curves are not available
        """
        if self.probabilities is None or self.mode_curve is None:
            raise ValueError("Frequency curves are not available")

        lower_label = f"Lower {self.alpha / 2:g}"
        upper_label = f"Upper {1 - self.alpha / 2:g}"
        data = {"Mode": self.mode_curve}
        if self.mean_curve is not None:
            data["Mean"] = self.mean_curve
        if self.confidence_intervals is not None:
            data[lower_label] = self.confidence_intervals[:, 0]
            data[upper_label] = self.confidence_intervals[:, 1]
        return pd.DataFrame(data, index=pd.Index(self.probabilities, name="Probability"))

    def summary(self) -> str:
        base_summary = super().summary()
        replicates = 0 if self.parameter_sets is None else len(self.parameter_sets)
        failed = 0
        if self.parameter_sets is not None and replicates > 0:
            failed = int(np.sum(np.any(np.isnan(self.parameter_sets), axis=1)))
        info = f"Confidence interval method: {self.method}\n"
        info += f"Alpha: {self.alpha}\n"
        info += f"Replicates: {replicates} ({failed} failed)\n\n"
        if self.probabilities is not None and self.mode_curve is not None:
            info += self.to_dataframe().to_string() + "\n"
        return base_summary + info


@dataclass
class MonteCarloResult(ModelResult):
    """Monte Carlo confidence intervals of a frequency curve.

    Attributes:
        quantiles: Exceedance probabilities of the rows
        percentiles: Confidence percentiles of the columns
        confidence_intervals: Array of shape (n_quantiles, n_percentiles)
        expected_curve: Expected-probability quantiles at ``quantiles``
        parameter_sets: Parameters of each realization, one row each
        sample_size: Record length used to scale the sampling distributions
    """

    quantiles: Optional[np.ndarray] = None
    percentiles: Optional[np.ndarray] = None
    confidence_intervals: Optional[np.ndarray] = None
    expected_curve: Optional[np.ndarray] = None
    parameter_sets: Optional[np.ndarray] = None
    sample_size: int = 0

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the confidence array to a DataFrame indexed by exceedance probability.

        Raises:
            ValueError: If the confidence intervals are not available
        """
        if self.confidence_intervals is None or self.quantiles is None:
            raise ValueError("Confidence intervals are not available")

        columns: List[str] = [f"{p:g}" for p in self.percentiles]
        frame = pd.DataFrame(self.confidence_intervals,
                             index=pd.Index(self.quantiles, name="Exceedance"),
                             columns=columns)
        if self.expected_curve is not None:
            frame["Expected"] = self.expected_curve
        return frame

    def summary(self) -> str:
        base_summary = super().summary()
        realizations = 0 if self.parameter_sets is None else len(self.parameter_sets)
        info = f"Sample size: {self.sample_size}\n"
        info += f"Realizations: {realizations}\n\n"
        if self.confidence_intervals is not None:
            info += self.to_dataframe().to_string() + "\n"
        return base_summary + info
