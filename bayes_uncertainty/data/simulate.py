"""Simulated regression data.

True data generating process (same centred design as the fitted models):

    z = (x - 50) / 50
    y = a + b × z + c × z² + ε,    ε ~ Normal(0, σ)

With the default c = 0 the linear model is the true model and the
quadratic model should receive the smaller model weight.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from bayes_uncertainty.errors import InvalidInputError

# Covariate centring used throughout (matches RegressionSpec defaults)
X_CENTRE = 50.0
X_SCALE = 50.0


@dataclass
class SimulationConfig:
    """Settings for simulating a regression dataset.

    Attributes:
        n: Number of observations
        x_low: Lower bound of the uniform covariate range
        x_high: Upper bound of the uniform covariate range
        a: True intercept (mean response at x = 50)
        b: True slope on the centred covariate
        c: True curvature on the centred covariate
        sigma: True residual standard deviation
        seed: Random seed for reproducibility
    """

    n: int = 30
    x_low: float = 0.0
    x_high: float = 100.0
    a: float = 20.0
    b: float = 4.0
    c: float = 0.0
    sigma: float = 1.0
    seed: int = 42


def simulate_data(config: SimulationConfig | None = None) -> pd.DataFrame:
    """Simulate a dataset with columns x and y, sorted by x.

    Args:
        config: Simulation settings (uses defaults if None)

    Returns:
        DataFrame with numeric columns "x" and "y"

    """
    if config is None:
        config = SimulationConfig()
    if config.n < 1:
        raise InvalidInputError(f"n must be positive, got {config.n}", "simulate_data")
    if not config.sigma > 0:
        raise InvalidInputError(
            f"sigma must be positive, got {config.sigma}", "simulate_data"
        )

    rng = np.random.default_rng(config.seed)
    x = rng.uniform(config.x_low, config.x_high, size=config.n)
    z = (x - X_CENTRE) / X_SCALE
    mu = config.a + config.b * z + config.c * z**2
    y = rng.normal(mu, config.sigma)

    return (
        pd.DataFrame({"x": x, "y": y})
        .sort_values("x")
        .reset_index(drop=True)
    )
