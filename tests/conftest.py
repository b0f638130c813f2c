"""
Shared pytest fixtures.

Posterior samples here are small hand-built DataFrames so the core
operations can be tested without running the sampler. Tests that do run
PyMC are marked `slow`.
"""

import matplotlib

matplotlib.use("Agg")

import mgplot as mg
import numpy as np
import pandas as pd
import pytest

from bayes_uncertainty.data import SimulationConfig, simulate_data
from bayes_uncertainty.models import (
    LINEAR,
    QUADRATIC,
    CandidateModel,
    RegressionSpec,
    SamplerConfig,
)


@pytest.fixture
def scenario_sample():
    """Two identical linear draws: a=20, b=4, sigma=1."""
    return pd.DataFrame({"a": [20.0, 20.0], "b": [4.0, 4.0], "sigma": [1.0, 1.0]})


@pytest.fixture
def linear_sample():
    """A posterior-like sample of 2,000 draws for the linear model."""
    rng = np.random.default_rng(0)
    n = 2_000
    return pd.DataFrame(
        {
            "a": rng.normal(20.0, 0.5, n),
            "b": rng.normal(4.0, 0.8, n),
            "sigma": rng.uniform(0.8, 1.2, n),
        }
    )


@pytest.fixture
def quadratic_sample():
    """A posterior-like sample of 1,500 draws for the squared model."""
    rng = np.random.default_rng(1)
    n = 1_500
    return pd.DataFrame(
        {
            "a": rng.normal(20.0, 0.5, n),
            "b": rng.normal(4.0, 0.8, n),
            "c": rng.normal(0.0, 0.5, n),
            "sigma": rng.uniform(0.8, 1.2, n),
        }
    )


@pytest.fixture
def constant_models():
    """Single-draw models whose link is constant: A gives 10, B gives 100."""
    model_a = CandidateModel(
        spec=LINEAR,
        sample=pd.DataFrame({"a": [10.0], "b": [0.0], "sigma": [1.0]}),
        criterion=0.0,
    )
    model_b = CandidateModel(
        spec=RegressionSpec(name="level", coefficients=("a", "b")),
        sample=pd.DataFrame({"a": [100.0], "b": [0.0], "sigma": [1.0]}),
        criterion=0.0,
    )
    return model_a, model_b


@pytest.fixture
def candidate_models(linear_sample, quadratic_sample):
    return {
        "linear": CandidateModel(spec=LINEAR, sample=linear_sample, criterion=80.0),
        "squared": CandidateModel(spec=QUADRATIC, sample=quadratic_sample, criterion=82.0),
    }


@pytest.fixture
def simulated_data():
    return simulate_data(SimulationConfig(n=30, seed=7))


@pytest.fixture
def tiny_sampler():
    """Smallest sampler settings that still give a usable posterior."""
    return SamplerConfig(
        draws=200,
        tune=200,
        chains=2,
        cores=1,
        thin=2,
        random_seed=3,
        progressbar=False,
    )


@pytest.fixture
def chart_dir(tmp_path):
    """Point mgplot at a temporary chart directory."""
    mg.set_chart_dir(str(tmp_path))
    return tmp_path
