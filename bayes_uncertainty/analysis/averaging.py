"""Bayesian model averaging by per-draw model selection.

For draw i a model index m_i is drawn from Categorical(weights) and the
prediction uses row i of model m_i's posterior sample. The same m_i is
reused for every covariate value, so a whole curve over x always comes
from one consistently selected model.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from bayes_uncertainty.analysis.propagation import (
    RandomSource,
    credible_band,
    propagate_grid,
    resolve_rng,
)
from bayes_uncertainty.errors import InvalidInputError
from bayes_uncertainty.models.candidate import CandidateModel


@dataclass
class ModelAverage:
    """Model-averaged predictive samples.

    Attributes:
        samples: rows=x values, columns=draws
        selection: Name of the model used for each draw
        weights: Model weights used for the selection
    """

    samples: pd.DataFrame
    selection: pd.Series
    weights: pd.Series

    def credible_band(self, prob: float = 0.95) -> pd.DataFrame:
        return credible_band(self.samples, prob)

    def selection_share(self) -> pd.Series:
        """Fraction of draws taken from each model."""
        return (
            self.selection.value_counts(normalize=True)
            .reindex(self.weights.index, fill_value=0.0)
            .rename("share")
        )

    def long_form(self) -> pd.DataFrame:
        """Columns sample, model, x, y; one row per (draw, x)."""
        frame = self.samples.T.stack().rename("y").reset_index()
        frame["model"] = frame["sample"].map(self.selection)
        return frame[["sample", "model", "x", "y"]]


def _check_weights(weights: Sequence[float], n_models: int) -> np.ndarray:
    p = np.asarray(weights, dtype=float)
    if p.ndim != 1 or len(p) != n_models:
        raise InvalidInputError(
            f"{len(np.atleast_1d(p))} weights for {n_models} models", "mix"
        )
    if not np.isfinite(p).all() or (p < 0).any() or p.sum() <= 0:
        raise InvalidInputError("weights must be finite, non-negative, not all zero", "mix")
    return p / p.sum()


def select_models(
    weights: Sequence[float],
    n: int,
    rng: RandomSource = None,
) -> np.ndarray:
    """One categorical model index per draw, sampled with replacement."""
    p = _check_weights(weights, len(weights))
    return resolve_rng(rng).choice(len(p), size=n, replace=True, p=p)


def common_length(models: Sequence[CandidateModel]) -> int:
    """Number of paired draws available across all models.

    Prints a notice when samples differ in length and are truncated.
    """
    lengths = [model.n_draws for model in models]
    n = min(lengths)
    if len(set(lengths)) > 1:
        print(
            f"*** NOTE: posterior samples differ in length {lengths}; "
            f"model averaging uses the first {n} draws of each. ***"
        )
    return n


def mix_grid(
    models: Sequence[CandidateModel],
    weights: Sequence[float] | pd.Series,
    x_grid: Sequence[float] | np.ndarray,
    rng: RandomSource = None,
    include_noise: bool = False,
) -> ModelAverage:
    """Model-averaged predictive samples over a covariate grid.

    Args:
        models: Candidate models with posterior samples
        weights: One non-negative weight per model
        x_grid: Covariate values
        rng: Random generator or seed
        include_noise: Add per-draw residual noise from the selected model

    Returns:
        ModelAverage with samples (rows=x, columns=draws) and the selection

    """
    if not models:
        raise InvalidInputError("at least one model required", "mix")
    names = [model.name for model in models]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise InvalidInputError(
            f"model names must be unique to label each draw, repeated: {duplicates}", "mix"
        )
    p = _check_weights(weights, len(models))
    rng = resolve_rng(rng)

    n = common_length(models)
    selected = select_models(p, n, rng)

    # each model predicts for all its first n draws, then the selection picks per column
    x_grid = np.asarray(x_grid, dtype=float)
    stacked = np.stack(
        [
            propagate_grid(
                model.sample.iloc[:n],
                model.spec,
                x_grid,
                include_noise=include_noise,
                rng=rng,
            ).to_numpy()
            for model in models
        ]
    )  # (n_models, n_x, n)
    values = stacked[selected, :, np.arange(n)].T  # (n_x, n)

    draw_index = pd.RangeIndex(n, name="sample")
    samples = pd.DataFrame(values, index=pd.Index(x_grid, name="x"), columns=draw_index)
    selection = pd.Series(np.asarray(names)[selected], index=draw_index, name="model")
    return ModelAverage(
        samples=samples,
        selection=selection,
        weights=pd.Series(p, index=names, name="weight"),
    )


def mix(
    models: Sequence[CandidateModel],
    weights: Sequence[float] | pd.Series,
    x: float,
    rng: RandomSource = None,
    include_noise: bool = False,
) -> pd.DataFrame:
    """Model-averaged predictive sample at a single covariate value.

    Returns:
        DataFrame indexed by draw ("sample") with columns model and y
    """
    average = mix_grid(models, weights, [x], rng=rng, include_noise=include_noise)
    return pd.DataFrame(
        {
            "model": average.selection,
            "y": average.samples.iloc[0],
        }
    )
