"""
test_diagnostics.py
-------------------

Tests for the MCMC convergence checks.
"""

import arviz as az
import numpy as np

from bayes_uncertainty.models.common import DiagnosticThresholds, check_model_diagnostics


def _trace(chain_offsets=(0.0, 0.0, 0.0, 0.0), diverging=0, with_stats=True):
    rng = np.random.default_rng(5)
    chains, draws = len(chain_offsets), 1_000
    offsets = np.asarray(chain_offsets)[:, None]
    flags = np.zeros((chains, draws), dtype=bool)
    flags.flat[:diverging] = True
    return az.from_dict(
        posterior={
            "a": rng.normal(20.0, 0.5, (chains, draws)) + offsets,
            "b": rng.normal(4.0, 0.8, (chains, draws)),
            "sigma": rng.uniform(0.8, 1.2, (chains, draws)),
            "mu": np.zeros((chains, draws, 3)),
        },
        sample_stats=(
            {"diverging": flags, "energy": rng.normal(0.0, 1.0, (chains, draws))}
            if with_stats
            else None
        ),
    )


class TestCheckModelDiagnostics:
    def test_well_mixed_chains_pass(self, capsys):
        assert check_model_diagnostics(_trace(), "linear") == []
        out = capsys.readouterr().out
        assert "DRAGONS" not in out
        assert "[linear]" in out

    def test_separated_chains_flag_r_hat(self):
        failed = check_model_diagnostics(_trace(chain_offsets=(0.0, 0.0, 0.0, 5.0)))
        assert "r_hat" in failed

    def test_divergences_flagged(self, capsys):
        failed = check_model_diagnostics(_trace(diverging=3))
        assert failed == ["divergences"]
        assert "3/4000" in capsys.readouterr().out

    def test_thresholds_are_adjustable(self):
        strict = DiagnosticThresholds(min_ess=1_000_000)
        assert check_model_diagnostics(_trace(), thresholds=strict) == ["ess"]

    def test_stored_draws_skip_sampler_checks(self, capsys):
        assert check_model_diagnostics(_trace(with_stats=False)) == []
        out = capsys.readouterr().out
        assert "Divergence check skipped" in out
        assert "BFMI check skipped" in out

