"""Model weights from fit-quality criteria.

Akaike/DIC-style weights:

    w_i = exp(-c_i / 2) / Σ_j exp(-c_j / 2)

Lower criterion ⇒ higher weight. Criteria are shifted by their minimum
before exponentiating (Δ_i = c_i - min c), which leaves the normalised
weights unchanged and avoids underflow for large deviances.
"""

from collections.abc import Sequence

import numpy as np
import pandas as pd

from bayes_uncertainty.errors import InvalidInputError


def model_weights(criteria: Sequence[float] | pd.Series) -> np.ndarray | pd.Series:
    """Normalised model weights from criteria on the deviance scale.

    Args:
        criteria: One criterion per candidate model (lower is better)

    Returns:
        Weights summing to 1; a Series keeps the input labels

    """
    values = np.asarray(criteria, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise InvalidInputError("criteria must be a non-empty 1-D sequence", "model_weights")
    if not np.isfinite(values).all():
        raise InvalidInputError("criteria must all be finite", "model_weights")

    delta = values - values.min()
    raw = np.exp(-delta / 2.0)
    weights = raw / raw.sum()

    if isinstance(criteria, pd.Series):
        return pd.Series(weights, index=criteria.index, name="weight")
    return weights


def weights_table(criteria: pd.Series) -> pd.DataFrame:
    """Criterion, difference from best and weight per model, best first."""
    weights = model_weights(criteria)
    return pd.DataFrame(
        {
            "criterion": criteria,
            "delta": criteria - criteria.min(),
            "weight": weights,
        }
    ).sort_values("criterion")
