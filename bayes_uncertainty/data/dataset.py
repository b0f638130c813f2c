"""Load and save the (x, y) input dataset."""

from pathlib import Path

import pandas as pd

from bayes_uncertainty.errors import InvalidInputError

REQUIRED_COLUMNS = ("x", "y")


def validate_dataset(data: pd.DataFrame) -> pd.DataFrame:
    """Check the dataset contract and return just the x and y columns.

    Contract: columns "x" and "y" exist, are numeric, and have no
    missing values. Extra columns are dropped.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in data.columns]
    if missing:
        raise InvalidInputError(f"missing column(s): {missing}", "dataset")

    frame = data.loc[:, list(REQUIRED_COLUMNS)]
    for col in REQUIRED_COLUMNS:
        if not pd.api.types.is_numeric_dtype(frame[col]):
            raise InvalidInputError(f"column '{col}' is not numeric", "dataset")
    if frame.isna().any().any():
        n_missing = int(frame.isna().any(axis=1).sum())
        raise InvalidInputError(f"{n_missing} row(s) with missing values", "dataset")
    if frame.empty:
        raise InvalidInputError("dataset has no rows", "dataset")

    return frame.astype(float).reset_index(drop=True)


def load_dataset(path: str | Path, **read_kwargs) -> pd.DataFrame:
    """Load a delimited file with numeric columns x and y.

    Args:
        path: Path to the file (CSV by default)
        **read_kwargs: Passed to pd.read_csv (e.g. sep="\\t")

    Returns:
        Validated DataFrame with columns "x" and "y"

    """
    path = Path(path)
    if not path.exists():
        raise InvalidInputError(f"no such file: {path}", "load_dataset")
    return validate_dataset(pd.read_csv(path, **read_kwargs))


def save_dataset(data: pd.DataFrame, path: str | Path) -> Path:
    """Save the x and y columns to CSV, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    validate_dataset(data).to_csv(path, index=False)
    return path
