"""Charts for posterior predictive uncertainty.

Each function draws with matplotlib and hands the Axes to mg.finalise_plot,
which titles, footnotes and saves the chart to the mgplot chart directory.
"""

from typing import Any

import matplotlib.pyplot as plt
import mgplot as mg
import numpy as np
import pandas as pd
from scipy import stats

from bayes_uncertainty.analysis.averaging import ModelAverage
from bayes_uncertainty.analysis.propagation import credible_band

MODEL_COLOURS = {"linear": "steelblue", "squared": "darkorange"}


def _place_model_name(model_name: str, kwargs: dict) -> dict:
    """Place model_name in first available footer/header slot."""
    for slot in ["rfooter", "rheader", "lheader"]:
        if slot not in kwargs:
            return {slot: model_name}
    return {}


def _finalise(ax, defaults: dict[str, Any], kwargs: dict[str, Any]) -> None:
    """Let caller kwargs override chart defaults, then finalise."""
    for key in list(defaults.keys()):
        if key in kwargs:
            defaults.pop(key)
    mg.finalise_plot(ax, **defaults, **kwargs)


def plot_fitted_band(
    data: pd.DataFrame,
    mean_samples: pd.DataFrame,
    predictive_samples: pd.DataFrame | None = None,
    prob: float = 0.95,
    model_name: str = "Model",
    **kwargs: Any,
) -> None:
    """Observed data with credible bands for the mean and for new data.

    Args:
        data: Dataset with columns x and y
        mean_samples: Mean response draws (rows=x, columns=draws)
        predictive_samples: Predictive draws including residual noise
        prob: Credible mass of the bands
        model_name: Model name for the chart footer
        **kwargs: Passed to mg.finalise_plot

    """
    colour = MODEL_COLOURS.get(model_name, "steelblue")
    _, ax = plt.subplots()

    if predictive_samples is not None:
        band = credible_band(predictive_samples, prob)
        ax.fill_between(band.index, band["lower"], band["upper"], color=colour,
                        alpha=0.15, label=f"{prob:.0%} predictive interval")

    band = credible_band(mean_samples, prob)
    ax.fill_between(band.index, band["lower"], band["upper"], color=colour,
                    alpha=0.35, label=f"{prob:.0%} credible interval (mean)")
    ax.plot(band.index, band["median"], color=colour, linewidth=2, label="Posterior median")
    ax.scatter(data["x"], data["y"], color="black", s=12, zorder=5, label="Observed")

    defaults = {
        "title": f"Fitted relationship - {model_name}",
        "xlabel": "x",
        "ylabel": "y",
        "legend": {"loc": "best", "fontsize": "x-small"},
        "lfooter": "Dark band: uncertainty about the model. Light band: about future data.",
        **_place_model_name(model_name, kwargs),
    }
    _finalise(ax, defaults, kwargs)


def plot_predictive_distributions(
    samples: dict[str, pd.Series],
    x: float,
    model_name: str = "Model",
    **kwargs: Any,
) -> None:
    """Overlay kernel density estimates of several predictive samples at x."""
    _, ax = plt.subplots()
    palette = plt.get_cmap("tab10")

    for i, (label, values) in enumerate(samples.items()):
        values = np.asarray(values, dtype=float)
        grid = np.linspace(values.min(), values.max(), 200)
        if np.ptp(values) == 0:
            ax.axvline(values[0], color=palette(i), linewidth=2, label=label)
            continue
        density = stats.gaussian_kde(values)(grid)
        ax.plot(grid, density, color=palette(i), linewidth=2, label=label)
        ax.fill_between(grid, density, color=palette(i), alpha=0.2)

    defaults = {
        "title": f"Predictive distributions at x = {x:g}",
        "xlabel": "y",
        "ylabel": "Density",
        "legend": {"loc": "best", "fontsize": "x-small"},
        **_place_model_name(model_name, kwargs),
    }
    _finalise(ax, defaults, kwargs)


def plot_density_curves(
    curves: pd.DataFrame,
    x: float,
    model_name: str = "Model",
    **kwargs: Any,
) -> None:
    """Family of conditional density curves, one per posterior draw."""
    colour = MODEL_COLOURS.get(model_name, "steelblue")
    _, ax = plt.subplots()

    for _, curve in curves.groupby("sample"):
        ax.plot(curve["y"], curve["density"], color=colour, alpha=0.3, linewidth=0.8)

    defaults = {
        "title": f"Uncertainty about variability at x = {x:g}",
        "xlabel": "y",
        "ylabel": "Conditional density",
        "lfooter": f"One Normal density per posterior draw ({curves['sample'].nunique()} draws).",
        **_place_model_name(model_name, kwargs),
    }
    _finalise(ax, defaults, kwargs)


def plot_model_average(
    average: ModelAverage,
    data: pd.DataFrame | None = None,
    prob: float = 0.95,
    n_curves: int = 20,
    seed: int = 42,
    **kwargs: Any,
) -> None:
    """Model-averaged credible band with sample curves coloured by model."""
    _, ax = plt.subplots()

    band = average.credible_band(prob)
    ax.fill_between(band.index, band["lower"], band["upper"], color="grey",
                    alpha=0.3, label=f"{prob:.0%} credible interval (averaged)")
    ax.plot(band.index, band["median"], color="black", linewidth=2, label="Averaged median")

    rng = np.random.default_rng(seed)
    n_curves = min(n_curves, average.samples.shape[1])
    draws = rng.choice(average.samples.columns, size=n_curves, replace=False)
    labelled = set()
    for draw in draws:
        name = average.selection[draw]
        label = name if name not in labelled else "_"
        labelled.add(name)
        ax.plot(average.samples.index, average.samples[draw], linewidth=0.8, alpha=0.6,
                color=MODEL_COLOURS.get(name, "purple"), label=label)

    if data is not None:
        ax.scatter(data["x"], data["y"], color="black", s=12, zorder=5, label="Observed")

    shares = ", ".join(f"{name} {w:.0%}" for name, w in average.weights.items())
    defaults = {
        "title": "Model-averaged prediction",
        "xlabel": "x",
        "ylabel": "y",
        "legend": {"loc": "best", "fontsize": "x-small"},
        "lfooter": f"Model weights: {shares}. Curves: single draws from the selected model.",
        "rfooter": "Model average",
    }
    _finalise(ax, defaults, kwargs)


def plot_interval_comparison(
    table: pd.DataFrame,
    x: float,
    model_name: str = "Model",
    **kwargs: Any,
) -> None:
    """Horizontal bars comparing probabilistic and interval-arithmetic bounds."""
    cmap = plt.get_cmap("Blues")
    _, ax = plt.subplots(figsize=(9.0, len(table) * 0.5 + 1.0))

    for i, (label, row) in enumerate(table.iterrows()):
        colour = cmap(0.7) if "probabilistic" in label else cmap(0.4)
        ax.barh(i, width=row["upper"] - row["lower"], left=row["lower"], height=0.6,
                color=colour, alpha=0.8)
        ax.text(row["upper"], i, f" {row['width']:.2f}", va="center", fontsize=8)

    ax.set_yticks(range(len(table)))
    ax.set_yticklabels(table.index)
    ax.invert_yaxis()

    defaults = {
        "title": f"Interval comparison at x = {x:g}",
        "xlabel": "y",
        "lfooter": "Interval arithmetic assumes a link monotonic in each parameter.",
        **_place_model_name(model_name, kwargs),
    }
    _finalise(ax, defaults, kwargs)
