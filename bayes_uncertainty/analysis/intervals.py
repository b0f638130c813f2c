"""Quantile intervals and the interval-arithmetic comparison.

Probabilistic route: propagate every posterior draw, then take quantiles of
the resulting predictive sample.

Interval-arithmetic route: take quantile intervals of each parameter
separately and combine the bounds term by term:

    lower = Σ_k min(θ_k,lo × z^k, θ_k,hi × z^k) + min_σ Φ⁻¹(p_lo; 0, σ)
    upper = Σ_k max(θ_k,lo × z^k, θ_k,hi × z^k) + max_σ Φ⁻¹(p_hi; 0, σ)

with σ ranging over the two bounds of its interval. This is only a valid
bound when the link is monotonic in each parameter over the range (true for
polynomial links, whose terms are linear in θ) and it ignores the
dependence between parameters. No check is made: the caller is responsible
for the monotonicity precondition. It is kept as an approximation for
side-by-side comparison, not as a replacement for propagation.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import stats

from bayes_uncertainty.analysis.propagation import RandomSource, propagate
from bayes_uncertainty.errors import InvalidInputError
from bayes_uncertainty.models.common.extraction import validate_sample
from bayes_uncertainty.models.spec import NOISE_PARAM, RegressionSpec

DEFAULT_LOWER = 0.025
DEFAULT_UPPER = 0.975


@dataclass(frozen=True)
class Interval:
    """A (lower, upper) pair for a named quantity."""

    name: str
    lower: float
    upper: float
    lower_prob: float = DEFAULT_LOWER
    upper_prob: float = DEFAULT_UPPER

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def as_dict(self) -> dict[str, float]:
        return {"lower": self.lower, "upper": self.upper, "width": self.width}


def _check_probs(lower_prob: float, upper_prob: float, component: str) -> None:
    if not 0 <= lower_prob < upper_prob <= 1:
        raise InvalidInputError(
            f"need 0 <= lower_prob < upper_prob <= 1, got ({lower_prob}, {upper_prob})",
            component,
        )


def interval(
    sample: Sequence[float] | np.ndarray | pd.Series,
    lower_prob: float = DEFAULT_LOWER,
    upper_prob: float = DEFAULT_UPPER,
    name: str = "",
) -> Interval:
    """Quantile interval of a sample.

    Bounds are order statistics of the sample (inverted empirical CDF), so
    the closed interval always holds at least (upper_prob - lower_prob) of
    the draws.
    """
    _check_probs(lower_prob, upper_prob, "interval")
    values = np.asarray(sample, dtype=float)
    if values.size == 0:
        raise InvalidInputError("sample is empty", "interval")
    if not np.isfinite(values).all():
        raise InvalidInputError("sample contains non-finite values", "interval")
    if not name and isinstance(sample, pd.Series) and sample.name is not None:
        name = str(sample.name)

    lower, upper = np.quantile(values, [lower_prob, upper_prob], method="inverted_cdf")
    return Interval(
        name=name,
        lower=float(lower),
        upper=float(upper),
        lower_prob=lower_prob,
        upper_prob=upper_prob,
    )


def parameter_intervals(
    sample: pd.DataFrame,
    lower_prob: float = DEFAULT_LOWER,
    upper_prob: float = DEFAULT_UPPER,
) -> pd.DataFrame:
    """Quantile interval and median for every parameter column.

    Returns:
        DataFrame with rows=parameters, columns lower, median, upper
    """
    validate_sample(sample, list(sample.columns), "parameter_intervals")
    rows = {}
    for name in sample.columns:
        bounds = interval(sample[name], lower_prob, upper_prob, name=name)
        rows[name] = {
            "lower": bounds.lower,
            "median": float(sample[name].median()),
            "upper": bounds.upper,
        }
    return pd.DataFrame(rows).T[["lower", "median", "upper"]]


def interval_arithmetic_prediction(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    x: float,
    lower_prob: float = DEFAULT_LOWER,
    upper_prob: float = DEFAULT_UPPER,
    include_noise: bool = True,
) -> Interval:
    """Bound the prediction at x by combining per-parameter intervals.

    See the module docstring for the combination rule and its precondition.
    """
    _check_probs(lower_prob, upper_prob, "interval_arithmetic_prediction")
    required = spec.parameter_names if include_noise else list(spec.coefficients)
    validate_sample(sample, required, "interval_arithmetic_prediction")

    bounds = parameter_intervals(sample[required], lower_prob, upper_prob)
    basis = spec.design([x])[0]

    lower = upper = 0.0
    for name, g in zip(spec.coefficients, basis):
        products = (bounds.at[name, "lower"] * g, bounds.at[name, "upper"] * g)
        lower += min(products)
        upper += max(products)

    if include_noise:
        sigmas = (bounds.at[NOISE_PARAM, "lower"], bounds.at[NOISE_PARAM, "upper"])
        lower += min(stats.norm.ppf(lower_prob, loc=0.0, scale=s) for s in sigmas)
        upper += max(stats.norm.ppf(upper_prob, loc=0.0, scale=s) for s in sigmas)

    kind = "prediction" if include_noise else "mean"
    return Interval(
        name=f"{kind} at x={x:g} (interval arithmetic)",
        lower=float(lower),
        upper=float(upper),
        lower_prob=lower_prob,
        upper_prob=upper_prob,
    )


def compare_intervals(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    x: float,
    lower_prob: float = DEFAULT_LOWER,
    upper_prob: float = DEFAULT_UPPER,
    rng: RandomSource = None,
    predictive_sample: pd.Series | None = None,
) -> pd.DataFrame:
    """Probabilistic intervals next to the interval-arithmetic bounds at x.

    Args:
        sample: Posterior sample with coefficients and sigma
        spec: Model specification
        x: Covariate value
        lower_prob: Lower quantile level
        upper_prob: Upper quantile level
        rng: Random generator or seed for the residual noise
        predictive_sample: Already-drawn predictive sample at x (with noise),
            reused instead of drawing new noise

    Returns:
        DataFrame with rows per method, columns lower, upper, width
    """
    mean_sample = propagate(sample, spec, x, include_noise=False)
    if predictive_sample is None:
        predictive_sample = propagate(sample, spec, x, include_noise=True, rng=rng)

    rows = {
        "mean (probabilistic)": interval(mean_sample, lower_prob, upper_prob),
        "mean (interval arithmetic)": interval_arithmetic_prediction(
            sample, spec, x, lower_prob, upper_prob, include_noise=False
        ),
        "prediction (probabilistic)": interval(predictive_sample, lower_prob, upper_prob),
        "prediction (interval arithmetic)": interval_arithmetic_prediction(
            sample, spec, x, lower_prob, upper_prob, include_noise=True
        ),
    }
    return pd.DataFrame({label: bounds.as_dict() for label, bounds in rows.items()}).T
