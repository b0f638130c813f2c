"""Declarative regression model specifications.

Each candidate model is a polynomial in the centred covariate:

    z = (x - centre) / scale
    μ = Σ_k θ_k × z^k        (k = 0 .. K-1)
    y ~ Normal(μ, σ)

The linear model has θ = (a, b); the quadratic ("squared") model has
θ = (a, b, c). The same specification drives both the PyMC model
(build_model) and the numpy link used when propagating posterior draws.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from bayes_uncertainty.errors import InvalidInputError

NOISE_PARAM = "sigma"

# Vague priors on the regression coefficients, uniform prior on sigma
DEFAULT_COEF_PRIOR: dict[str, float] = {"mu": 0.0, "sigma": 100.0}
DEFAULT_SIGMA_PRIOR: dict[str, float] = {"lower": 0.0, "upper": 100.0}


def _default_priors(coefficients: tuple[str, ...]) -> dict[str, dict[str, float]]:
    priors = {name: dict(DEFAULT_COEF_PRIOR) for name in coefficients}
    priors[NOISE_PARAM] = dict(DEFAULT_SIGMA_PRIOR)
    return priors


@dataclass(frozen=True)
class RegressionSpec:
    """A candidate regression model as plain data.

    Attributes:
        name: Model tag (e.g. "linear", "squared")
        coefficients: Coefficient names in order of the power of z they multiply
        priors: Prior settings per parameter (see set_model_coefficients)
        centre: Covariate value mapped to z = 0
        scale: Covariate distance mapped to z = 1
    """

    name: str
    coefficients: tuple[str, ...]
    priors: dict[str, dict[str, float]] = field(default_factory=dict)
    centre: float = 50.0
    scale: float = 50.0

    def __post_init__(self) -> None:
        if not self.coefficients:
            raise InvalidInputError("at least one coefficient required", "RegressionSpec")
        if NOISE_PARAM in self.coefficients:
            raise InvalidInputError(
                f"'{NOISE_PARAM}' is reserved for the residual scale", "RegressionSpec"
            )
        if not self.priors:
            object.__setattr__(self, "priors", _default_priors(self.coefficients))

    @property
    def parameter_names(self) -> list[str]:
        """Coefficient names followed by the noise parameter."""
        return [*self.coefficients, NOISE_PARAM]

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def centred(self, x: Any) -> np.ndarray:
        """Map covariate values to z = (x - centre) / scale."""
        return (np.asarray(x, dtype=float) - self.centre) / self.scale

    def design(self, x: Any) -> np.ndarray:
        """Basis matrix with columns z^0 .. z^(K-1), shape (len(x), K)."""
        z = np.atleast_1d(self.centred(x))
        return np.vander(z, N=len(self.coefficients), increasing=True)

    def coefficient_matrix(self, params: pd.DataFrame | Mapping[str, Any]) -> np.ndarray:
        """Stack coefficient draws into shape (K, n_draws)."""
        missing = [name for name in self.coefficients if name not in params]
        if missing:
            raise InvalidInputError(
                f"missing parameter(s) {missing} for model '{self.name}'", "link"
            )
        return np.vstack(
            [np.atleast_1d(np.asarray(params[name], dtype=float)) for name in self.coefficients]
        )

    def link(self, params: pd.DataFrame | Mapping[str, Any], x: float) -> np.ndarray:
        """Deterministic mean at a single covariate value, one value per draw."""
        return (self.design([x]) @ self.coefficient_matrix(params))[0]

    def link_grid(self, params: pd.DataFrame | Mapping[str, Any], x_grid: Any) -> np.ndarray:
        """Deterministic mean over a covariate grid, shape (len(x_grid), n_draws)."""
        return self.design(x_grid) @ self.coefficient_matrix(params)


LINEAR = RegressionSpec(name="linear", coefficients=("a", "b"))
QUADRATIC = RegressionSpec(name="squared", coefficients=("a", "b", "c"))

MODEL_SPECS: dict[str, RegressionSpec] = {
    LINEAR.name: LINEAR,
    QUADRATIC.name: QUADRATIC,
}


def get_spec(name: str) -> RegressionSpec:
    """Look up a predefined model specification by tag."""
    try:
        return MODEL_SPECS[name]
    except KeyError:
        raise InvalidInputError(
            f"unknown model '{name}', expected one of {sorted(MODEL_SPECS)}", "get_spec"
        ) from None
