"""
test_workflow.py
----------------

Tests for the end-to-end analysis and its charts.
"""

import numpy as np
import pandas as pd
import pytest

from bayes_uncertainty.workflow import (
    AnalysisConfig,
    generate_plots,
    main,
    run_analysis,
    summarise_models,
)
from bayes_uncertainty.analysis.plotting import (
    plot_density_curves,
    plot_fitted_band,
    plot_interval_comparison,
    plot_model_average,
    plot_predictive_distributions,
)
from bayes_uncertainty.analysis.averaging import mix_grid
from bayes_uncertainty.analysis.intervals import compare_intervals
from bayes_uncertainty.analysis.propagation import (
    conditional_density_curves,
    propagate,
    propagate_grid,
    select_draws,
)
from bayes_uncertainty.data import SimulationConfig, simulate_data
from bayes_uncertainty.models import LINEAR


@pytest.fixture
def config():
    return AnalysisConfig(x_grid=np.linspace(0, 100, 11), n_curves=5)


class TestSummariseModels:
    def test_results(self, candidate_models, simulated_data, config):
        results = summarise_models(candidate_models, config, simulated_data)

        assert results.weights["weight"].sum() == pytest.approx(1.0)
        # criterion 80 vs 82: linear is preferred
        assert results.weights.index[0] == "linear"
        assert set(results.predictions) == {"linear", "squared"}

        linear = results.predictions["linear"]
        assert len(linear) == len(candidate_models["linear"].sample)
        assert linear["predictive"].var() > linear["mean"].var()
        assert results.average.samples.shape == (11, 1_500)

    def test_seeded(self, candidate_models, simulated_data, config):
        first = summarise_models(candidate_models, config, simulated_data)
        second = summarise_models(candidate_models, config, simulated_data)
        pd.testing.assert_frame_equal(first.average.samples, second.average.samples)

    def test_prediction_summary(self, candidate_models, simulated_data, config):
        summary = summarise_models(candidate_models, config, simulated_data).prediction_summary()
        assert len(summary) == 4
        assert (summary["lower"] < summary["upper"]).all()

    def test_summary_bounds_match_interval_comparison(
        self, candidate_models, simulated_data, config
    ):
        results = summarise_models(candidate_models, config, simulated_data)
        summary = results.prediction_summary()
        for name, table in results.interval_comparison.items():
            for column, row in [("mean", "mean (probabilistic)"),
                                ("predictive", "prediction (probabilistic)")]:
                assert summary.loc[(name, column), "lower"] == table.loc[row, "lower"]
                assert summary.loc[(name, column), "upper"] == table.loc[row, "upper"]

    def test_save(self, candidate_models, simulated_data, config, tmp_path):
        results = summarise_models(candidate_models, config, simulated_data)
        results.save(tmp_path)
        for name in ["data.csv", "model_weights.csv", "prediction_summary.csv",
                     "model_average_band.csv", "linear_posterior_sample.csv",
                     "squared_interval_comparison.csv"]:
            assert (tmp_path / name).exists()


class TestCharts:
    def test_each_chart(self, linear_sample, candidate_models, simulated_data, chart_dir):
        grid = np.linspace(0, 100, 11)
        mean_grid = propagate_grid(linear_sample, LINEAR, grid)
        predictive_grid = propagate_grid(linear_sample, LINEAR, grid, include_noise=True, rng=0)
        plot_fitted_band(simulated_data, mean_grid, predictive_grid, model_name="linear")

        plot_predictive_distributions(
            {
                "mean": propagate(linear_sample, LINEAR, 60.0),
                "predictive": propagate(linear_sample, LINEAR, 60.0, include_noise=True, rng=0),
            },
            60.0,
        )

        draws = select_draws(linear_sample, 5, rng=0)
        plot_density_curves(conditional_density_curves(draws, LINEAR, 60.0), 60.0)

        plot_interval_comparison(compare_intervals(linear_sample, LINEAR, 60.0, rng=0), 60.0)

        average = mix_grid(list(candidate_models.values()), [0.6, 0.4], grid, rng=0)
        plot_model_average(average, simulated_data, n_curves=5)

        assert any(chart_dir.iterdir())

    def test_generate_plots(self, candidate_models, simulated_data, config, tmp_path):
        results = summarise_models(candidate_models, config, simulated_data)
        generate_plots(results, tmp_path / "charts")
        assert any((tmp_path / "charts").iterdir())


@pytest.mark.slow
class TestRunAnalysis:
    def test_end_to_end(self, simulated_data, tiny_sampler):
        config = AnalysisConfig(x_grid=np.linspace(0, 100, 5), sampler=tiny_sampler)
        results = run_analysis(config, data=simulated_data, verbose=False)

        assert set(results.models) == {"linear", "squared"}
        assert results.weights["weight"].sum() == pytest.approx(1.0)
        assert results.average.samples.shape == (5, 200)
        mean_at_x_new = results.predictions["linear"]["mean"].mean()
        assert mean_at_x_new == pytest.approx(20.8, abs=1.0)

    def test_command_line(self, tmp_path):
        data_path = tmp_path / "data.csv"
        simulate_data(SimulationConfig(n=20, seed=11)).to_csv(data_path, index=False)
        results = main([
            "--data", str(data_path),
            "--draws", "100", "--tune", "100", "--chains", "2",
            "--output-dir", str(tmp_path / "out"),
            "--no-plots", "--quiet",
        ])
        assert (tmp_path / "out" / "model_weights.csv").exists()
        assert len(results.data) == 20
