"""Candidate model container: a specification plus its posterior sample."""

from dataclasses import dataclass

import arviz as az
import numpy as np
import pandas as pd

from bayes_uncertainty.models.common.extraction import validate_sample
from bayes_uncertainty.models.spec import RegressionSpec


@dataclass
class CandidateModel:
    """One fitted candidate in a model comparison set.

    Attributes:
        spec: Model specification (parameters, link, priors)
        sample: Posterior sample, rows=draws, columns=parameters
        criterion: Fit-quality criterion on the deviance scale (lower is better)
        trace: Full InferenceData the sample was extracted from, if any
    """

    spec: RegressionSpec
    sample: pd.DataFrame
    criterion: float = float("nan")
    trace: az.InferenceData | None = None

    def __post_init__(self) -> None:
        validate_sample(self.sample, self.spec.coefficients, "CandidateModel")

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def n_draws(self) -> int:
        return len(self.sample)

    def link(self, x: float) -> np.ndarray:
        """Posterior draws of the mean response at x."""
        return self.spec.link(self.sample, x)

    def __repr__(self) -> str:
        return (
            f"CandidateModel({self.name!r}, n_draws={self.n_draws}, "
            f"criterion={self.criterion:.2f})"
        )
