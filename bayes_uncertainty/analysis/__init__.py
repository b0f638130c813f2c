"""Uncertainty propagation, model averaging and interval analysis.

Includes:
- Propagation: predictive samples from posterior draws
- Weights: model weights from fit-quality criteria
- Averaging: per-draw model selection across candidates
- Intervals: quantile intervals and the interval-arithmetic comparison
- Plotting: charts of the above
"""

from bayes_uncertainty.analysis.averaging import (
    ModelAverage,
    common_length,
    mix,
    mix_grid,
    select_models,
)
from bayes_uncertainty.analysis.intervals import (
    Interval,
    compare_intervals,
    interval,
    interval_arithmetic_prediction,
    parameter_intervals,
)
from bayes_uncertainty.analysis.plotting import (
    plot_density_curves,
    plot_fitted_band,
    plot_interval_comparison,
    plot_model_average,
    plot_predictive_distributions,
)
from bayes_uncertainty.analysis.propagation import (
    conditional_density_curves,
    credible_band,
    propagate,
    propagate_grid,
    resolve_rng,
    select_draws,
)
from bayes_uncertainty.analysis.weights import model_weights, weights_table

__all__ = [
    "Interval",
    "ModelAverage",
    "common_length",
    "compare_intervals",
    "conditional_density_curves",
    "credible_band",
    "interval",
    "interval_arithmetic_prediction",
    "mix",
    "mix_grid",
    "model_weights",
    "parameter_intervals",
    "plot_density_curves",
    "plot_fitted_band",
    "plot_interval_comparison",
    "plot_model_average",
    "plot_predictive_distributions",
    "propagate",
    "propagate_grid",
    "resolve_rng",
    "select_draws",
    "select_models",
    "weights_table",
]
