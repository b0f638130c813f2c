"""Common utilities for PyMC models.

Provides shared functionality for:
- Trace extraction (extraction.py)
- MCMC diagnostics (diagnostics.py)
"""

from bayes_uncertainty.models.common.diagnostics import (
    DiagnosticThresholds,
    check_model_diagnostics,
    summarise_parameters,
)
from bayes_uncertainty.models.common.extraction import (
    get_scalar_var,
    get_scalar_var_names,
    is_scalar_var,
    posterior_sample,
    validate_sample,
)

__all__ = [
    "DiagnosticThresholds",
    "check_model_diagnostics",
    "get_scalar_var",
    "get_scalar_var_names",
    "is_scalar_var",
    "posterior_sample",
    "summarise_parameters",
    "validate_sample",
]
