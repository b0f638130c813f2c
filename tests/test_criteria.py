"""
test_criteria.py
----------------

Tests for DIC and the criterion dispatcher.
"""

import arviz as az
import numpy as np
import pandas as pd
import pytest
from scipy import stats

from bayes_uncertainty.errors import InvalidInputError, NumericalDegeneracyError
from bayes_uncertainty.models import LINEAR, compute_criterion, deviance, dic


@pytest.fixture
def small_data():
    return pd.DataFrame({"x": [0.0, 50.0, 100.0], "y": [15.0, 20.5, 24.0]})


class TestDeviance:
    def test_matches_normal_log_likelihood(self, small_data, scenario_sample):
        result = deviance(scenario_sample, LINEAR, small_data)
        mu = 20.0 + 4.0 * (small_data["x"] - 50.0) / 50.0
        expected = -2.0 * stats.norm.logpdf(small_data["y"], mu, 1.0).sum()
        np.testing.assert_allclose(result, [expected, expected])

    def test_one_value_per_draw(self, small_data, linear_sample):
        assert deviance(linear_sample, LINEAR, small_data).shape == (len(linear_sample),)

    def test_non_positive_sigma(self, small_data):
        sample = pd.DataFrame({"a": [20.0], "b": [4.0], "sigma": [0.0]})
        with pytest.raises(NumericalDegeneracyError):
            deviance(sample, LINEAR, small_data)


class TestDIC:
    @pytest.mark.parametrize("penalty", ["spiegelhalter", "variance"])
    def test_no_posterior_spread_means_no_penalty(self, small_data, scenario_sample, penalty):
        result = dic(scenario_sample, LINEAR, small_data, penalty=penalty)
        assert result.penalty == pytest.approx(0.0, abs=1e-9)
        assert result.dic == pytest.approx(result.mean_deviance)

    def test_penalty_positive_with_spread(self, simulated_data, linear_sample):
        result = dic(linear_sample, LINEAR, simulated_data)
        assert result.penalty > 0
        assert result.dic > result.mean_deviance

    def test_unknown_penalty(self, small_data, scenario_sample):
        with pytest.raises(InvalidInputError):
            dic(scenario_sample, LINEAR, small_data, penalty="plummer")


class TestComputeCriterion:
    def test_dic_dispatch(self, small_data, scenario_sample):
        value = compute_criterion("dic", scenario_sample, LINEAR, small_data)
        assert value == pytest.approx(dic(scenario_sample, LINEAR, small_data).dic)

    def test_unknown_kind(self, small_data, scenario_sample):
        with pytest.raises(InvalidInputError):
            compute_criterion("bic", scenario_sample, LINEAR, small_data)

    def test_waic_needs_trace(self, small_data, scenario_sample):
        with pytest.raises(InvalidInputError):
            compute_criterion("waic", scenario_sample, LINEAR, small_data)

    def test_waic_needs_log_likelihood(self, small_data, scenario_sample):
        trace = az.from_dict(posterior={"a": np.ones((2, 5))})
        with pytest.raises(InvalidInputError):
            compute_criterion("waic", scenario_sample, LINEAR, small_data, trace=trace)
