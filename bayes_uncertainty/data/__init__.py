"""Input data: simulation and loading of the (x, y) regression dataset."""

from bayes_uncertainty.data.dataset import (
    REQUIRED_COLUMNS,
    load_dataset,
    save_dataset,
    validate_dataset,
)
from bayes_uncertainty.data.simulate import SimulationConfig, simulate_data

__all__ = [
    "REQUIRED_COLUMNS",
    "SimulationConfig",
    "load_dataset",
    "save_dataset",
    "simulate_data",
    "validate_dataset",
]
