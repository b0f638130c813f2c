"""Fit-quality criteria on the deviance scale (lower is better).

DIC (Spiegelhalter et al. 2002):
    D(θ) = -2 log p(y | θ)
    DIC  = D̄ + pD

with two choices of effective-parameter penalty:
    - "spiegelhalter": pD = D̄ - D(θ̄)   (deviance at the posterior mean)
    - "variance":      pD = var(D) / 2   (Gelman et al.)

WAIC and LOO come from ArviZ and are reported as -2 × elpd so that all
three criteria share the deviance scale used by the model weights.
"""

from dataclasses import dataclass

import arviz as az
import numpy as np
import pandas as pd
from scipy import stats

from bayes_uncertainty.data.dataset import validate_dataset
from bayes_uncertainty.errors import InvalidInputError, NumericalDegeneracyError
from bayes_uncertainty.models.common.extraction import validate_sample
from bayes_uncertainty.models.spec import NOISE_PARAM, RegressionSpec

CRITERIA = ("dic", "waic", "loo")
DIC_PENALTIES = ("spiegelhalter", "variance")


@dataclass
class DICResult:
    """Deviance information criterion and its components."""

    mean_deviance: float
    penalty: float
    dic: float


def deviance(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    data: pd.DataFrame,
) -> np.ndarray:
    """Deviance -2 log L for every posterior draw.

    Returns:
        Array with one deviance per row of the sample
    """
    validate_sample(sample, spec.parameter_names, "deviance")
    data = validate_dataset(data)

    sigma = sample[NOISE_PARAM].to_numpy(dtype=float)
    if (sigma <= 0).any():
        raise NumericalDegeneracyError("sigma draws must be positive", "deviance")

    mu = spec.link_grid(sample, data["x"].to_numpy())  # (n_obs, n_draws)
    y = data["y"].to_numpy()[:, np.newaxis]
    log_lik = stats.norm.logpdf(y, loc=mu, scale=sigma[np.newaxis, :])
    return -2.0 * log_lik.sum(axis=0)


def dic(
    sample: pd.DataFrame,
    spec: RegressionSpec,
    data: pd.DataFrame,
    penalty: str = "spiegelhalter",
) -> DICResult:
    """Deviance information criterion for a posterior sample.

    Args:
        sample: Posterior sample with the model's parameters
        spec: Model specification
        data: Dataset the model was fitted to
        penalty: "spiegelhalter" or "variance"

    Returns:
        DICResult with mean deviance, penalty and DIC

    """
    if penalty not in DIC_PENALTIES:
        raise InvalidInputError(
            f"unknown DIC penalty '{penalty}', expected one of {DIC_PENALTIES}", "dic"
        )

    deviances = deviance(sample, spec, data)
    mean_deviance = float(deviances.mean())

    if penalty == "spiegelhalter":
        posterior_mean = sample[spec.parameter_names].mean().to_frame().T
        p_d = mean_deviance - float(deviance(posterior_mean, spec, data)[0])
    else:
        p_d = float(deviances.var()) / 2.0

    return DICResult(mean_deviance=mean_deviance, penalty=p_d, dic=mean_deviance + p_d)


def information_criterion(trace: az.InferenceData, kind: str = "waic") -> float:
    """WAIC or LOO from a trace with a log_likelihood group, as -2 × elpd."""
    if "log_likelihood" not in trace.groups():
        raise InvalidInputError(
            "trace has no log_likelihood group", "information_criterion"
        )
    if kind == "waic":
        return -2.0 * float(az.waic(trace).elpd_waic)
    if kind == "loo":
        return -2.0 * float(az.loo(trace).elpd_loo)
    raise InvalidInputError(
        f"unknown criterion '{kind}', expected 'waic' or 'loo'", "information_criterion"
    )


def compute_criterion(
    kind: str,
    sample: pd.DataFrame,
    spec: RegressionSpec,
    data: pd.DataFrame,
    trace: az.InferenceData | None = None,
) -> float:
    """Compute the named criterion ("dic", "waic" or "loo") for one model."""
    if kind not in CRITERIA:
        raise InvalidInputError(
            f"unknown criterion '{kind}', expected one of {CRITERIA}", "compute_criterion"
        )
    if kind == "dic":
        return dic(sample, spec, data).dic
    if trace is None:
        raise InvalidInputError(f"'{kind}' needs the full trace", "compute_criterion")
    return information_criterion(trace, kind)
