"""
test_extraction.py
------------------

Tests for turning traces into posterior sample tables.
"""

import arviz as az
import numpy as np
import pandas as pd
import pytest

from bayes_uncertainty.errors import InvalidInputError
from bayes_uncertainty.models import LINEAR, CandidateModel, thin_trace
from bayes_uncertainty.models.common import (
    get_scalar_var_names,
    posterior_sample,
    summarise_parameters,
    validate_sample,
)


@pytest.fixture
def trace():
    """Two chains of three draws, plus a vector variable."""
    return az.from_dict(
        posterior={
            "a": np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]),
            "b": np.array([[10.0, 20.0, 30.0], [40.0, 50.0, 60.0]]),
            "sigma": np.full((2, 3), 0.5),
            "mu": np.zeros((2, 3, 4)),
        }
    )


class TestPosteriorSample:
    def test_chains_concatenated_in_order(self, trace):
        sample = posterior_sample(trace, ["a", "b", "sigma"])
        assert sample["a"].tolist() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        assert list(sample.columns) == ["a", "b", "sigma"]
        assert sample.index.name == "sample"

    def test_rows_are_paired_draws(self, trace):
        sample = posterior_sample(trace, ["a", "b"])
        np.testing.assert_allclose(sample["b"], sample["a"] * 10.0)

    def test_defaults_to_scalar_variables(self, trace):
        assert set(posterior_sample(trace).columns) == {"a", "b", "sigma"}

    def test_missing_variable(self, trace):
        with pytest.raises(InvalidInputError):
            posterior_sample(trace, ["a", "c"])

    def test_vector_variable_rejected(self, trace):
        with pytest.raises(InvalidInputError):
            posterior_sample(trace, ["mu"])

    def test_scalar_var_names(self, trace):
        assert sorted(get_scalar_var_names(trace)) == ["a", "b", "sigma"]

    def test_thinned_trace(self, trace):
        sample = posterior_sample(thin_trace(trace, 2), ["a"])
        assert sample["a"].tolist() == [1.0, 3.0, 4.0, 6.0]


def test_summarise_parameters(trace):
    table = summarise_parameters(trace)
    assert list(table.index) == ["a", "b", "sigma"]
    assert table.loc["a", "mean"] == pytest.approx(3.5)


class TestValidateSample:
    def test_requires_dataframe(self):
        with pytest.raises(InvalidInputError):
            validate_sample({"a": [1.0]}, ["a"], "test")

    def test_component_in_message(self):
        with pytest.raises(InvalidInputError, match="^test:"):
            validate_sample(pd.DataFrame({"a": [1.0]}), ["b"], "test")

    def test_candidate_model_validates(self):
        with pytest.raises(InvalidInputError):
            CandidateModel(spec=LINEAR, sample=pd.DataFrame({"a": [1.0]}))
