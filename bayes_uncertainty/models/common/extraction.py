"""Extract posterior samples from PyMC traces."""

from collections.abc import Sequence

import arviz as az
import numpy as np
import pandas as pd

from bayes_uncertainty.errors import InvalidInputError


def get_scalar_var(var_name: str, trace: az.InferenceData) -> pd.Series:
    """Extract chains/draws for a scalar variable.

    Returns Series of posterior samples.
    """
    return az.extract(trace, var_names=var_name).to_dataframe()[var_name]


def is_scalar_var(var_name: str, trace: az.InferenceData) -> bool:
    """Check if a variable in the trace is scalar.

    Returns True if the variable has only (chain, draw) dimensions.
    """
    var_data = trace.posterior[var_name]
    return set(var_data.dims) == {"chain", "draw"}


def get_scalar_var_names(trace: az.InferenceData) -> list[str]:
    """Get list of all scalar variable names in the trace."""
    return [
        var_name
        for var_name in trace.posterior.data_vars
        if is_scalar_var(var_name, trace)
    ]


def posterior_sample(
    trace: az.InferenceData,
    var_names: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Extract a posterior sample table from a trace.

    Rows are draws with chains concatenated in chain order, so row i holds
    one joint draw of every parameter. Columns are parameter names.

    Args:
        trace: InferenceData with a posterior group
        var_names: Scalar variables to extract (all scalars if None)

    Returns:
        DataFrame with a RangeIndex named "sample"

    """
    if var_names is None:
        var_names = get_scalar_var_names(trace)
    var_names = list(var_names)

    missing = [name for name in var_names if name not in trace.posterior.data_vars]
    if missing:
        raise InvalidInputError(f"variable(s) {missing} not in trace", "posterior_sample")
    non_scalar = [name for name in var_names if not is_scalar_var(name, trace)]
    if non_scalar:
        raise InvalidInputError(
            f"variable(s) {non_scalar} are not scalar", "posterior_sample"
        )

    sample = (
        az.extract(trace, var_names=var_names, keep_dataset=True)
        .to_dataframe()[var_names]
        .reset_index(drop=True)
    )
    sample.index.name = "sample"
    return sample


def validate_sample(
    sample: pd.DataFrame,
    required: Sequence[str],
    component: str,
) -> None:
    """Check a posterior sample has rows and finite values for required columns."""
    if not isinstance(sample, pd.DataFrame):
        raise InvalidInputError(
            f"posterior sample must be a DataFrame, got {type(sample).__name__}", component
        )
    missing = [name for name in required if name not in sample.columns]
    if missing:
        raise InvalidInputError(f"posterior sample missing column(s) {missing}", component)
    if sample.empty:
        raise InvalidInputError("posterior sample has no draws", component)
    values = sample[list(required)].to_numpy(dtype=float)
    if not np.isfinite(values).all():
        raise InvalidInputError("posterior sample contains non-finite values", component)
