"""Base utilities for PyMC model building and sampling."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import arviz as az
import numpy as np
import pymc as pm

from bayes_uncertainty.errors import InvalidInputError


@dataclass
class SamplerConfig:
    """Configuration for the PyMC NUTS sampler.

    Attributes:
        draws: Number of samples to keep per chain after tuning
        tune: Number of tuning (burn-in) samples discarded per chain
        chains: Number of independent chains
        cores: Number of CPU cores to use
        thin: Keep every thin-th draw of each chain
        sampler: NUTS implementation ("pymc", "numpyro", or "blackjax")
        target_accept: Target acceptance probability (higher = more conservative)
        random_seed: Random seed for reproducibility
        progressbar: Show the PyMC progress bar
    """

    draws: int = 5_000
    tune: int = 1_000
    chains: int = 4
    cores: int = 4
    thin: int = 1
    sampler: str = "pymc"
    target_accept: float = 0.9
    random_seed: int = 42
    progressbar: bool = True

    def __post_init__(self) -> None:
        if self.draws < 1 or self.chains < 1 or self.tune < 0:
            raise InvalidInputError(
                "draws and chains must be positive, tune non-negative", "SamplerConfig"
            )
        if self.thin < 1:
            raise InvalidInputError(f"thin must be >= 1, got {self.thin}", "SamplerConfig")


def make_initvals(
    settings: dict[str, dict[str, float]],
    chains: int,
    seed: int = 42,
    constant: dict[str, float] | None = None,
) -> list[dict[str, float]]:
    """Generate one dictionary of initial values per chain.

    Each start value lies inside the support of the prior that
    set_model_coefficients builds from the same settings, so every chain
    begins at a finite log-density. Fixed constants get no initial value.

    Args:
        settings: Prior settings per parameter (after any overrides)
        chains: Number of chains
        seed: Seed for the start-value generator
        constant: Parameters fixed to constants (skipped)

    Returns:
        List of {parameter: start value}, one per chain

    """
    rng = np.random.default_rng(seed)
    constant = constant or {}

    def start(params: dict[str, float]) -> float:
        if "lower" in params and "upper" in params and "mu" not in params:
            low, high = float(params["lower"]), float(params["upper"])
            span = min(high - low, 10.0)
            return low + rng.uniform(0.1, 0.9) * span
        if "sigma" in params and "mu" not in params:
            return float(params["sigma"]) * rng.uniform(0.1, 0.9)
        return float(params.get("mu", 0.0)) + rng.normal(0.0, 1.0)

    initvals = []
    for _ in range(chains):
        initvals.append(
            {name: float(start(params)) for name, params in settings.items() if name not in constant}
        )
    return initvals


def thin_trace(trace: az.InferenceData, thin: int) -> az.InferenceData:
    """Keep every thin-th draw of each chain (all groups with a draw dimension)."""
    if thin < 1:
        raise InvalidInputError(f"thin must be >= 1, got {thin}", "thin_trace")
    if thin == 1:
        return trace
    return trace.sel(draw=slice(None, None, thin))


def sample_model(
    model: pm.Model,
    config: SamplerConfig | None = None,
    initvals: list[dict[str, float]] | None = None,
) -> az.InferenceData:
    """Sample from a PyMC model using NUTS.

    The pointwise log-likelihood is stored so WAIC/LOO can be computed,
    and the trace is thinned according to config.thin.

    Args:
        model: PyMC model to sample from
        config: Sampler configuration (uses defaults if None)
        initvals: Optional initial values, one dict per chain

    Returns:
        ArviZ InferenceData with posterior samples

    """
    if config is None:
        config = SamplerConfig()
    if initvals is not None and len(initvals) != config.chains:
        raise InvalidInputError(
            f"{len(initvals)} initial value sets for {config.chains} chains", "sample_model"
        )

    with model:
        trace = pm.sample(
            draws=config.draws,
            tune=config.tune,
            chains=config.chains,
            cores=config.cores,
            nuts_sampler=config.sampler,
            target_accept=config.target_accept,
            random_seed=config.random_seed,
            initvals=initvals,
            progressbar=config.progressbar,
            idata_kwargs={"log_likelihood": True},
        )

    return thin_trace(trace, config.thin)


def set_model_coefficients(
    model: pm.Model,
    settings: dict[str, dict[str, float]],
    constant: dict[str, float] | None = None,
) -> dict[str, Any]:
    """Create model coefficients from settings, allowing fixed constants.

    For each coefficient in settings:
    - If the coefficient name is in `constant`, use that fixed value
    - If "lower" and "upper" are given (and no "mu"), a Uniform prior
    - If only "sigma" is given, a HalfNormal prior (scale parameters)
    - Otherwise, a Normal prior with the specified mu and sigma

    Args:
        model: PyMC model context
        settings: Dict of {coef_name: {"mu": float, "sigma": float}}
        constant: Dict of {coef_name: fixed_value} for parameters to fix

    Returns:
        Dict of {coef_name: pm.Distribution or fixed value}

    Example:
        settings = {
            "a": {"mu": 0, "sigma": 100},
            "sigma": {"lower": 0, "upper": 100},
        }
        constant = {"a": 20.0}  # Fix the intercept

        mc = set_model_coefficients(model, settings, constant)
        # mc["a"] = 20.0 (fixed)
        # mc["sigma"] = pm.Uniform("sigma", lower=0, upper=100)
    """
    if constant is None:
        constant = {}

    coefficients = {}

    with model:
        for name, params in settings.items():
            if name in constant:
                coefficients[name] = constant[name]
            elif "lower" in params and "upper" in params and "mu" not in params:
                coefficients[name] = pm.Uniform(
                    name, lower=params["lower"], upper=params["upper"]
                )
            elif "sigma" in params and "mu" not in params:
                # HalfNormal for scale parameters (sigma only, no mu)
                coefficients[name] = pm.HalfNormal(name, sigma=params["sigma"])
            else:
                coefficients[name] = pm.Normal(
                    name,
                    mu=params.get("mu", 0),
                    sigma=params.get("sigma", 1),
                )

    return coefficients


def save_trace(trace: az.InferenceData, path: str | Path) -> None:
    """Save trace to NetCDF file.

    Args:
        trace: ArviZ InferenceData to save
        path: Output file path (.nc extension recommended)
    """
    trace.to_netcdf(str(path))


def load_trace(path: str | Path) -> az.InferenceData:
    """Load trace from NetCDF file.

    Args:
        path: Path to NetCDF file

    Returns:
        ArviZ InferenceData
    """
    return az.from_netcdf(str(path))
