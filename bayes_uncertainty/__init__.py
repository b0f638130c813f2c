"""Bayesian uncertainty propagation for simple regression models.

Fits linear and quadratic regressions by MCMC (PyMC), propagates posterior
draws to predictions, averages models by their fit-quality weights and
compares quantile intervals with interval arithmetic.
"""

from bayes_uncertainty.errors import (
    InvalidInputError,
    NumericalDegeneracyError,
    UncertaintyError,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidInputError",
    "NumericalDegeneracyError",
    "UncertaintyError",
    "__version__",
]
