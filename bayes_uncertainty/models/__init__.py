"""PyMC model assembly, sampling and model comparison criteria.

Models:
- linear: y = a + b×z
- squared: y = a + b×z + c×z²
"""

from bayes_uncertainty.models.base import (
    SamplerConfig,
    load_trace,
    make_initvals,
    sample_model,
    save_trace,
    set_model_coefficients,
    thin_trace,
)
from bayes_uncertainty.models.candidate import CandidateModel
from bayes_uncertainty.models.criteria import (
    DICResult,
    compute_criterion,
    deviance,
    dic,
    information_criterion,
)
from bayes_uncertainty.models.regression import (
    build_model,
    fit_model,
    fit_models,
    prior_settings,
)
from bayes_uncertainty.models.spec import (
    LINEAR,
    MODEL_SPECS,
    QUADRATIC,
    RegressionSpec,
    get_spec,
)

__all__ = [
    "CandidateModel",
    "DICResult",
    "LINEAR",
    "MODEL_SPECS",
    "QUADRATIC",
    "RegressionSpec",
    "SamplerConfig",
    "build_model",
    "compute_criterion",
    "deviance",
    "dic",
    "fit_model",
    "fit_models",
    "get_spec",
    "information_criterion",
    "load_trace",
    "make_initvals",
    "prior_settings",
    "sample_model",
    "save_trace",
    "set_model_coefficients",
    "thin_trace",
]
