"""Bayesian polynomial regression: model building and fitting.

Observation equation:
    y_i ~ Normal(μ_i, σ),    μ_i = Σ_k θ_k × z_i^k,    z_i = (x_i - 50) / 50

Priors come from the RegressionSpec (vague Normal on coefficients,
Uniform(0, 100) on σ by default) and can be overridden per parameter or
fixed to constants.
"""

from typing import Any

import pandas as pd
import pymc as pm

from bayes_uncertainty.data.dataset import validate_dataset
from bayes_uncertainty.errors import InvalidInputError
from bayes_uncertainty.models.base import (
    SamplerConfig,
    make_initvals,
    sample_model,
    set_model_coefficients,
)
from bayes_uncertainty.models.candidate import CandidateModel
from bayes_uncertainty.models.common.diagnostics import check_model_diagnostics
from bayes_uncertainty.models.common.extraction import posterior_sample
from bayes_uncertainty.models.criteria import compute_criterion
from bayes_uncertainty.models.spec import NOISE_PARAM, RegressionSpec

OBSERVED_NAME = "y_obs"


# --- Model Building ---


def prior_settings(
    spec: RegressionSpec,
    priors: dict[str, dict[str, float]] | None = None,
    constant: dict[str, Any] | None = None,
) -> dict[str, dict[str, float]]:
    """Merge prior overrides into spec.priors, rejecting unknown parameters."""
    known = set(spec.parameter_names)
    unknown = sorted((set(priors or {}) | set(constant or {})) - known)
    if unknown:
        raise InvalidInputError(
            f"unknown parameter(s) {unknown} for model '{spec.name}'", "prior_settings"
        )
    return {**spec.priors, **(priors or {})}


def build_model(
    data: pd.DataFrame,
    spec: RegressionSpec,
    priors: dict[str, dict[str, float]] | None = None,
    constant: dict[str, Any] | None = None,
) -> pm.Model:
    """Build the PyMC regression model for one candidate specification.

    Args:
        data: Dataset with columns "x" and "y"
        spec: Model specification
        priors: Prior settings overriding spec.priors for the named parameters
        constant: Fixed values for parameters (not sampled)

    Returns:
        PyMC Model ready for sampling

    """
    data = validate_dataset(data)
    settings = prior_settings(spec, priors, constant)

    model = pm.Model(coords={"obs": data.index.to_numpy()})
    with model:
        mc = set_model_coefficients(model, settings, constant)

        basis = spec.design(data["x"].to_numpy())
        mu = sum(mc[name] * basis[:, k] for k, name in enumerate(spec.coefficients))

        pm.Normal(
            OBSERVED_NAME,
            mu=mu,
            sigma=mc[NOISE_PARAM],
            observed=data["y"].to_numpy(),
            dims="obs",
        )

    return model


# --- Estimation ---


def fit_model(
    data: pd.DataFrame,
    spec: RegressionSpec,
    config: SamplerConfig | None = None,
    criterion: str = "dic",
    priors: dict[str, dict[str, float]] | None = None,
    constant: dict[str, float] | None = None,
    verbose: bool = True,
) -> CandidateModel:
    """Sample one candidate model and summarise it for comparison.

    Args:
        data: Dataset with columns "x" and "y"
        spec: Model specification
        config: Sampler configuration
        criterion: Fit-quality criterion ("dic", "waic" or "loo")
        priors: Prior overrides for the named parameters
        constant: Parameters fixed to constants; they appear in the
            posterior sample as constant columns
        verbose: Print progress and MCMC diagnostics

    Returns:
        CandidateModel with posterior sample, criterion and trace

    """
    if config is None:
        config = SamplerConfig()
    constant = constant or {}
    settings = prior_settings(spec, priors, constant)

    if verbose:
        print(f"Building {spec.name} model ({len(spec.coefficients)} coefficients)...")
        if constant:
            print(f"  Fixed: {constant}")
    model = build_model(data, spec, priors=priors, constant=constant)

    if verbose:
        print(f"Sampling {spec.name} model...")
    initvals = make_initvals(settings, config.chains, seed=config.random_seed, constant=constant)
    trace = sample_model(model, config, initvals=initvals)

    if verbose:
        print(f"\nMCMC Diagnostics ({spec.name}):")
        check_model_diagnostics(trace, spec.name)

    sampled = [name for name in spec.parameter_names if name not in constant]
    sample = posterior_sample(trace, sampled)
    for name, value in constant.items():
        sample[name] = float(value)
    sample = sample[spec.parameter_names]

    value = compute_criterion(criterion, sample, spec, data, trace=trace)
    if verbose:
        print(f"{criterion.upper()} ({spec.name}): {value:0.2f}")

    return CandidateModel(spec=spec, sample=sample, criterion=value, trace=trace)


def fit_models(
    data: pd.DataFrame,
    specs: list[RegressionSpec],
    config: SamplerConfig | None = None,
    criterion: str = "dic",
    verbose: bool = True,
) -> dict[str, CandidateModel]:
    """Fit each specification in turn, keyed by model name."""
    models = {}
    for spec in specs:
        if verbose:
            print("\n" + "=" * 60)
            print(f"Fitting {spec.name.upper()} model")
            print("=" * 60)
        models[spec.name] = fit_model(
            data, spec, config=config, criterion=criterion, verbose=verbose
        )
    return models
