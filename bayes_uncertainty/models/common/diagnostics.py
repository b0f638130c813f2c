"""MCMC convergence checks for the fitted regression models."""

from dataclasses import dataclass

import arviz as az
import numpy as np
import pandas as pd

from bayes_uncertainty.models.common.extraction import get_scalar_var, get_scalar_var_names


@dataclass(frozen=True)
class DiagnosticThresholds:
    """Limits beyond which a convergence check is flagged.

    Attributes:
        max_r_hat: Largest acceptable R-hat over all parameters
        min_ess: Smallest acceptable bulk or tail effective sample size
        max_mcse_ratio: Largest acceptable MCSE of the mean relative to the sd
        max_divergence_rate: Largest acceptable share of divergent transitions
        min_bfmi: Smallest acceptable per-chain BFMI
    """

    max_r_hat: float = 1.01
    min_ess: float = 400
    max_mcse_ratio: float = 0.05
    max_divergence_rate: float = 1 / 10_000
    min_bfmi: float = 0.3


def check_model_diagnostics(
    trace: az.InferenceData,
    model_name: str = "",
    thresholds: DiagnosticThresholds | None = None,
) -> list[str]:
    """Print convergence diagnostics for the scalar parameters of a trace.

    R-hat, ESS and MCSE/sd are computed over the regression coefficients
    and sigma only. Divergences and BFMI come from the sampler statistics
    and are skipped when the trace has none (e.g. a trace built from
    stored draws).

    Args:
        trace: InferenceData from sample_model
        model_name: Label printed with each line
        thresholds: Limits for flagging (defaults if None)

    Returns:
        Names of the checks that failed, from "r_hat", "ess", "mcse",
        "divergences" and "bfmi"

    """
    if thresholds is None:
        thresholds = DiagnosticThresholds()
    label = f" [{model_name}]" if model_name else ""
    failed = []

    def report(name: str, bad: bool, message: str) -> None:
        if bad:
            failed.append(name)
        flag = "--- THERE BE DRAGONS ---> " if bad else ""
        print(f"{flag}{message}{label}")

    summary = az.summary(trace, var_names=get_scalar_var_names(trace))

    statistic = summary["r_hat"].max()
    report("r_hat", statistic > thresholds.max_r_hat, f"Maximum R-hat: {statistic:0.3f}")

    statistic = summary[["ess_bulk", "ess_tail"]].min().min()
    report(
        "ess",
        statistic < thresholds.min_ess,
        f"Minimum effective sample size: {int(statistic)}",
    )

    statistic = (summary["mcse_mean"] / summary["sd"]).max()
    report(
        "mcse",
        statistic > thresholds.max_mcse_ratio,
        f"Maximum MCSE/sd ratio: {statistic:0.3f}",
    )

    stats = trace.sample_stats if "sample_stats" in trace.groups() else None
    total = trace.posterior.sizes["draw"] * trace.posterior.sizes["chain"]
    if stats is not None and "diverging" in stats:
        count = int(np.sum(stats["diverging"]))
        rate = count / total
        report(
            "divergences",
            rate > thresholds.max_divergence_rate,
            f"Divergent transitions: {count}/{total} ({rate:.4%})",
        )
    else:
        print(f"Divergence check skipped (no sampler statistics){label}")

    if stats is not None and "energy" in stats:
        statistic = az.bfmi(trace).min()
        report(
            "bfmi",
            statistic < thresholds.min_bfmi,
            f"Minimum BFMI: {statistic:0.2f}",
        )
    else:
        print(f"BFMI check skipped (no energy statistics){label}")

    return failed


def summarise_parameters(
    trace: az.InferenceData,
    q: tuple[float, ...] = (0.025, 0.25, 0.5, 0.75, 0.975),
) -> pd.DataFrame:
    """Quantile table for every scalar parameter in the trace.

    Returns:
        DataFrame with rows=parameters, columns=quantiles, plus mean and sd.
    """
    scalar_vars = get_scalar_var_names(trace)
    if not scalar_vars:
        return pd.DataFrame()

    rows = {}
    for var_name in scalar_vars:
        samples = get_scalar_var(var_name, trace)
        row = samples.quantile(list(q))
        row["mean"] = samples.mean()
        row["sd"] = samples.std()
        rows[var_name] = row

    return pd.DataFrame(rows).T.sort_index()
