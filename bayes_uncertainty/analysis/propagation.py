"""Propagate posterior draws to predictions at new covariate values.

Two kinds of predictive sample are built from the same posterior draws:

    uncertainty about the model:   y_i = μ(θ_i, x)
    uncertainty about future data: y_i = μ(θ_i, x) + ε_i,   ε_i ~ Normal(0, σ_i)

The only difference is the residual draw, and each draw uses its own σ_i,
never a fixed or averaged noise scale.
"""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy import stats

from bayes_uncertainty.errors import InvalidInputError, NumericalDegeneracyError
from bayes_uncertainty.models.common.extraction import validate_sample
from bayes_uncertainty.models.spec import NOISE_PARAM, RegressionSpec

RandomSource = np.random.Generator | int | None

# Probability grid for conditional density curves
DEFAULT_DENSITY_PROBS = np.linspace(0.005, 0.995, 199)


def resolve_rng(rng: RandomSource) -> np.random.Generator:
    """Accept a Generator, a seed, or None (fresh entropy)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _noise_scale(sample: pd.DataFrame, component: str) -> np.ndarray:
    """Per-draw sigma, checked before any noise is drawn."""
    if NOISE_PARAM not in sample.columns:
        raise InvalidInputError(
            f"'{NOISE_PARAM}' column required to add residual noise", component
        )
    sigma = sample[NOISE_PARAM].to_numpy(dtype=float)
    bad = ~np.isfinite(sigma) | (sigma <= 0)
    if bad.any():
        raise NumericalDegeneracyError(
            f"{int(bad.sum())} non-positive or non-finite sigma draw(s)", component
        )
    return sigma


def propagate(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    x: float,
    include_noise: bool = False,
    rng: RandomSource = None,
) -> pd.Series:
    """Predictive sample at a single covariate value.

    Args:
        sample: Posterior sample, rows=draws, columns=parameters
        spec: Model specification supplying the link function
        x: Covariate value
        include_noise: Add one Normal(0, σ_i) residual per draw
        rng: Random generator or seed (only used when include_noise)

    Returns:
        Series with one value per draw, indexed like the sample

    """
    validate_sample(sample, spec.coefficients, "propagate")
    sigma = _noise_scale(sample, "propagate") if include_noise else None

    values = spec.link(sample, x)
    if sigma is not None:
        values = values + resolve_rng(rng).normal(0.0, sigma)

    return pd.Series(values, index=sample.index, name="y")


def propagate_grid(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    x_grid: Sequence[float] | np.ndarray,
    include_noise: bool = False,
    rng: RandomSource = None,
) -> pd.DataFrame:
    """Predictive samples over a covariate grid.

    Returns:
        DataFrame with rows=x values, columns=draws. Column i is computed
        from row i of the sample throughout.
    """
    validate_sample(sample, spec.coefficients, "propagate_grid")
    sigma = _noise_scale(sample, "propagate_grid") if include_noise else None
    x_grid = np.asarray(x_grid, dtype=float)
    if x_grid.ndim != 1 or x_grid.size == 0:
        raise InvalidInputError("x_grid must be a non-empty 1-D sequence", "propagate_grid")

    values = spec.link_grid(sample, x_grid)
    if sigma is not None:
        values = values + resolve_rng(rng).normal(0.0, sigma, size=values.shape)

    frame = pd.DataFrame(values, index=pd.Index(x_grid, name="x"), columns=sample.index)
    frame.columns.name = "sample"
    return frame


def credible_band(samples: pd.DataFrame, prob: float = 0.95) -> pd.DataFrame:
    """Central credible band across draws (rows=x, columns=draws).

    Bounds are order statistics per row, the same quantile definition the
    interval summaries use.
    """
    if not 0 < prob < 1:
        raise InvalidInputError(f"prob must be in (0, 1), got {prob}", "credible_band")
    tail = (1 - prob) / 2
    lower, upper = np.quantile(
        samples.to_numpy(dtype=float), [tail, 1 - tail], axis=1, method="inverted_cdf"
    )
    return pd.DataFrame(
        {
            "lower": lower,
            "median": samples.median(axis=1),
            "upper": upper,
        },
        index=samples.index,
    )


def select_draws(
    sample: pd.DataFrame,
    n: int,
    rng: RandomSource = None,
) -> pd.DataFrame:
    """Random subset of n draws (without replacement), keeping row labels."""
    if n < 1:
        raise InvalidInputError(f"n must be positive, got {n}", "select_draws")
    if n > len(sample):
        print(
            f"*** NOTE: {n} draws requested but the sample has {len(sample)}; "
            f"using all {len(sample)} ***"
        )
        n = len(sample)
    idx = resolve_rng(rng).choice(len(sample), size=n, replace=False)
    return sample.iloc[np.sort(idx)]


def conditional_density_curves(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    x: float,
    probs: Sequence[float] | np.ndarray | None = None,
) -> pd.DataFrame:
    """Conditional Normal(μ_i, σ_i) density of y at x for each draw.

    Each draw gives a whole curve rather than one simulated value: the
    spread of a single curve is the variability of the data, the spread
    between curves is the uncertainty about that variability.

    Args:
        sample: Posterior draws to turn into curves (see select_draws)
        spec: Model specification
        x: Covariate value
        probs: Quantile points at which each curve is evaluated

    Returns:
        Long DataFrame with columns sample, prob, y, density

    """
    validate_sample(sample, spec.coefficients, "conditional_density_curves")
    sigma = _noise_scale(sample, "conditional_density_curves")
    probs = DEFAULT_DENSITY_PROBS if probs is None else np.asarray(probs, dtype=float)
    if probs.size == 0 or ((probs <= 0) | (probs >= 1)).any():
        raise InvalidInputError(
            "probs must be non-empty and strictly inside (0, 1)", "conditional_density_curves"
        )

    mu = spec.link(sample, x)
    y = stats.norm.ppf(probs[np.newaxis, :], loc=mu[:, np.newaxis], scale=sigma[:, np.newaxis])
    density = stats.norm.pdf(y, loc=mu[:, np.newaxis], scale=sigma[:, np.newaxis])

    n_draws, n_probs = y.shape
    return pd.DataFrame(
        {
            "sample": np.repeat(sample.index.to_numpy(), n_probs),
            "prob": np.tile(probs, n_draws),
            "y": y.ravel(),
            "density": density.ravel(),
        }
    )
