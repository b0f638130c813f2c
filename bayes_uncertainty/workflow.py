"""End-to-end uncertainty analysis.

Steps:
1. Simulate (or load) the (x, y) dataset
2. Fit the linear and squared models by MCMC
3. Weight the models by their fit-quality criterion
4. Propagate posterior draws to predictions at x_new, with and without noise
5. Compare quantile intervals against interval arithmetic
6. Average the models' predictions over the covariate grid

Run as:  python -m bayes_uncertainty.workflow --help
"""

from dataclasses import dataclass, field
from pathlib import Path

import mgplot as mg
import numpy as np
import pandas as pd

from bayes_uncertainty.analysis.averaging import ModelAverage, mix_grid
from bayes_uncertainty.analysis.intervals import (
    compare_intervals,
    interval,
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
    DEFAULT_DENSITY_PROBS,
    conditional_density_curves,
    propagate,
    propagate_grid,
    select_draws,
)
from bayes_uncertainty.analysis.weights import weights_table
from bayes_uncertainty.data.dataset import load_dataset, validate_dataset
from bayes_uncertainty.data.simulate import SimulationConfig, simulate_data
from bayes_uncertainty.models.base import SamplerConfig, save_trace
from bayes_uncertainty.models.candidate import CandidateModel
from bayes_uncertainty.models.regression import fit_models
from bayes_uncertainty.models.spec import get_spec

# --- Configuration ---

DEFAULT_OUTPUT_DIR = Path.cwd() / "model_outputs"
DEFAULT_CHART_DIR = Path.cwd() / "charts"


@dataclass
class AnalysisConfig:
    """Settings for one analysis run.

    Attributes:
        x_new: Covariate value at which predictions are summarised
        x_grid: Covariate grid for credible bands and model averaging
        lower_prob: Lower quantile level of reported intervals
        upper_prob: Upper quantile level of reported intervals
        criterion: Fit-quality criterion for model weights ("dic", "waic", "loo")
        n_curves: Number of posterior draws shown as density curves
        density_probs: Quantile points at which density curves are evaluated
        seed: Seed for residual noise, draw selection and model selection
        models: Model tags to fit
        sampler: MCMC settings
        simulation: Settings for simulated data (used when no data is given)
    """

    x_new: float = 60.0
    x_grid: np.ndarray = field(default_factory=lambda: np.linspace(0.0, 100.0, 51))
    lower_prob: float = 0.025
    upper_prob: float = 0.975
    criterion: str = "dic"
    n_curves: int = 50
    density_probs: np.ndarray = field(default_factory=lambda: DEFAULT_DENSITY_PROBS.copy())
    seed: int = 42
    models: tuple[str, ...] = ("linear", "squared")
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)

    @property
    def interval_prob(self) -> float:
        return self.upper_prob - self.lower_prob


# --- Results Container ---


@dataclass
class AnalysisResults:
    """Everything derived in one run; all values are derived, never mutated."""

    config: AnalysisConfig
    data: pd.DataFrame
    models: dict[str, CandidateModel]
    weights: pd.DataFrame
    predictions: dict[str, pd.DataFrame]
    parameter_intervals: dict[str, pd.DataFrame]
    interval_comparison: dict[str, pd.DataFrame]
    average: ModelAverage

    def prediction_summary(self) -> pd.DataFrame:
        """Mean, sd and quantile interval of every predictive sample at x_new."""
        rows = {}
        lo, hi = self.config.lower_prob, self.config.upper_prob
        for name, frame in self.predictions.items():
            for column in frame.columns:
                values = frame[column]
                bounds = interval(values, lo, hi)
                rows[(name, column)] = {
                    "mean": values.mean(),
                    "sd": values.std(),
                    "lower": bounds.lower,
                    "upper": bounds.upper,
                }
        return pd.DataFrame(rows).T

    def save(self, output_dir: Path | str | None = None) -> Path:
        """Save traces (NetCDF) and summary tables (CSV) to disk."""
        output_dir = Path(output_dir or DEFAULT_OUTPUT_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)

        self.data.to_csv(output_dir / "data.csv", index=False)
        for name, model in self.models.items():
            if model.trace is not None:
                save_trace(model.trace, output_dir / f"{name}_trace.nc")
            model.sample.to_csv(output_dir / f"{name}_posterior_sample.csv")
            self.parameter_intervals[name].to_csv(output_dir / f"{name}_parameter_intervals.csv")
            self.interval_comparison[name].to_csv(output_dir / f"{name}_interval_comparison.csv")

        self.weights.to_csv(output_dir / "model_weights.csv")
        self.prediction_summary().to_csv(output_dir / "prediction_summary.csv")
        self.average.credible_band(self.config.interval_prob).to_csv(
            output_dir / "model_average_band.csv"
        )
        print(f"Saved results to: {output_dir}")
        return output_dir


# --- Analysis ---


def summarise_models(
    models: dict[str, CandidateModel],
    config: AnalysisConfig,
    data: pd.DataFrame,
) -> AnalysisResults:
    """Derive weights, predictions, intervals and the model average.

    Separate from sampling so already-fitted models can be re-summarised
    under a different configuration.
    """
    rng = np.random.default_rng(config.seed)
    lo, hi = config.lower_prob, config.upper_prob

    criteria = pd.Series({name: model.criterion for name, model in models.items()})
    weights = weights_table(criteria)

    predictions = {}
    intervals = {}
    comparisons = {}
    for name, model in models.items():
        predictions[name] = pd.DataFrame(
            {
                "mean": propagate(model.sample, model.spec, config.x_new),
                "predictive": propagate(
                    model.sample, model.spec, config.x_new, include_noise=True, rng=rng
                ),
            }
        )
        intervals[name] = parameter_intervals(model.sample, lo, hi)
        comparisons[name] = compare_intervals(
            model.sample,
            model.spec,
            config.x_new,
            lo,
            hi,
            predictive_sample=predictions[name]["predictive"],
        )

    candidates = list(models.values())
    average = mix_grid(
        candidates,
        weights["weight"].reindex(list(models)),
        config.x_grid,
        rng=rng,
    )

    return AnalysisResults(
        config=config,
        data=data,
        models=models,
        weights=weights,
        predictions=predictions,
        parameter_intervals=intervals,
        interval_comparison=comparisons,
        average=average,
    )


def run_analysis(
    config: AnalysisConfig | None = None,
    data: pd.DataFrame | None = None,
    verbose: bool = True,
) -> AnalysisResults:
    """Fit the candidate models and derive every uncertainty summary.

    Args:
        config: Analysis configuration (uses defaults if None)
        data: Dataset with columns x and y (simulated if None)
        verbose: Print progress

    Returns:
        AnalysisResults container

    """
    if config is None:
        config = AnalysisConfig()

    if data is None:
        if verbose:
            print("Simulating data...")
        data = simulate_data(config.simulation)
    data = validate_dataset(data)
    if verbose:
        print(f"Dataset: {len(data)} observations, x in [{data.x.min():.1f}, {data.x.max():.1f}]")

    specs = [get_spec(name) for name in config.models]
    models = fit_models(data, specs, config.sampler, config.criterion, verbose=verbose)

    results = summarise_models(models, config, data)
    if verbose:
        print("\nModel weights:")
        print(results.weights)
    return results


# --- Plotting ---


def generate_plots(
    results: AnalysisResults,
    chart_dir: Path | str | None = None,
    show: bool = False,
) -> None:
    """Render every chart for a completed analysis."""
    config = results.config
    chart_dir = Path(chart_dir or DEFAULT_CHART_DIR)
    chart_dir.mkdir(parents=True, exist_ok=True)
    mg.set_chart_dir(str(chart_dir))
    mg.clear_chart_dir()

    rng = np.random.default_rng(config.seed)
    prob = config.interval_prob

    for name, model in results.models.items():
        mean_grid = propagate_grid(model.sample, model.spec, config.x_grid)
        predictive_grid = propagate_grid(
            model.sample, model.spec, config.x_grid, include_noise=True, rng=rng
        )
        plot_fitted_band(results.data, mean_grid, predictive_grid, prob=prob,
                         model_name=name, show=show)

        plot_predictive_distributions(
            {
                "Mean (model uncertainty)": results.predictions[name]["mean"],
                "New observation (data uncertainty)": results.predictions[name]["predictive"],
            },
            config.x_new,
            model_name=name,
            show=show,
        )

        draws = select_draws(model.sample, config.n_curves, rng=rng)
        curves = conditional_density_curves(draws, model.spec, config.x_new, config.density_probs)
        plot_density_curves(curves, config.x_new, model_name=name, show=show)

        plot_interval_comparison(results.interval_comparison[name], config.x_new,
                                 model_name=name, show=show)

    plot_model_average(results.average, results.data, prob=prob, seed=config.seed, show=show)


# --- CLI ---


def main(argv: list[str] | None = None) -> AnalysisResults:
    import argparse

    parser = argparse.ArgumentParser(description="Bayesian regression uncertainty analysis")
    parser.add_argument("--data", type=Path, default=None, help="CSV with columns x and y")
    parser.add_argument("--x-new", type=float, default=60.0, help="Covariate value to predict at")
    parser.add_argument("--draws", type=int, default=5_000)
    parser.add_argument("--tune", type=int, default=1_000)
    parser.add_argument("--chains", type=int, default=4)
    parser.add_argument("--thin", type=int, default=1)
    parser.add_argument("--criterion", choices=["dic", "waic", "loo"], default="dic")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    parser.add_argument("--chart-dir", type=Path, default=DEFAULT_CHART_DIR)
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")

    args = parser.parse_args(argv)
    verbose = not args.quiet

    config = AnalysisConfig(
        x_new=args.x_new,
        criterion=args.criterion,
        seed=args.seed,
        sampler=SamplerConfig(
            draws=args.draws,
            tune=args.tune,
            chains=args.chains,
            cores=args.chains,
            thin=args.thin,
            random_seed=args.seed,
            progressbar=verbose,
        ),
        simulation=SimulationConfig(seed=args.seed),
    )
    data = load_dataset(args.data) if args.data is not None else None

    print("=" * 60)
    print("BAYESIAN REGRESSION UNCERTAINTY ANALYSIS")
    print(f"  Models: {', '.join(config.models)}")
    print(f"  Prediction at x = {config.x_new:g}")
    print("=" * 60)

    results = run_analysis(config, data=data, verbose=verbose)

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)
    print(results.prediction_summary())
    for name, table in results.interval_comparison.items():
        print(f"\nInterval comparison ({name}):")
        print(table)

    results.save(args.output_dir)
    if not args.no_plots:
        generate_plots(results, args.chart_dir)

    return results


if __name__ == "__main__":
    main()
