"""Price regression specifications fitted with statsmodels."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

import pandas as pd
import statsmodels.formula.api as smf
from pydantic import BaseModel, Field, field_validator

from .exceptions import InsufficientRows

logger = logging.getLogger(__name__)

SIZE_COVARIATES = ["bedrooms", "beds", "bathrooms", "square_feet", "square_feet_missing"]
FIXED_EFFECTS = ["property_type", "room_type"]


class ModelSpec(BaseModel):
    """One OLS specification: a response, covariates and fixed effects."""

    name: str
    response: str = "price"
    covariates: List[str] = Field(default_factory=list)
    fixed_effects: List[str] = Field(default_factory=list)

    @field_validator("response", "covariates", "fixed_effects")
    @classmethod
    def _quotable(cls, value):
        names = [value] if isinstance(value, str) else value
        for name in names:
            if '"' in name:
                raise ValueError(f"Column name cannot contain '\"': {name!r}")
        return value

    @property
    def columns(self) -> List[str]:
        return [self.response, *self.covariates, *self.fixed_effects]


def _term(name: str) -> str:
    return f'Q("{name}")'


def build_formula(spec: ModelSpec) -> str:
    """Render ``spec`` as a patsy formula.

    Every column is wrapped in ``Q()`` so amenity tokens with ``:``, ``.``
    or leading digits stay valid terms.
    """
    terms = [_term(c) for c in spec.covariates]
    terms += [f"C({_term(c)})" for c in spec.fixed_effects]
    return f"{_term(spec.response)} ~ {' + '.join(terms) if terms else '1'}"


def default_specs(vocabulary: Iterable[str]) -> List[ModelSpec]:
    """Base, fixed-effect and amenity specifications, each nesting the last."""
    amenities = list(vocabulary)
    return [
        ModelSpec(name="base", covariates=SIZE_COVARIATES),
        ModelSpec(name="fixed_effects", covariates=SIZE_COVARIATES, fixed_effects=FIXED_EFFECTS),
        ModelSpec(
            name="amenities",
            covariates=SIZE_COVARIATES + amenities,
            fixed_effects=FIXED_EFFECTS,
        ),
    ]


def model_frame(frame: pd.DataFrame, response: str = "price") -> pd.DataFrame:
    """Drop rows without a positive response and cast booleans to ints."""
    frame = frame[frame[response].notna() & (frame[response] > 0)]
    bools = frame.select_dtypes(include="bool").columns
    return frame.astype({c: int for c in bools})


def fit_specs(frame: pd.DataFrame, specs: Sequence[ModelSpec]) -> Dict[str, object]:
    """Fit each spec by OLS and return results keyed by spec name.

    Rows with a missing value in any column the spec uses are dropped;
    :class:`InsufficientRows` is raised when fewer than one row per
    covariate plus two remain.
    """
    results: Dict[str, object] = {}
    for spec in specs:
        missing = [c for c in spec.columns if c not in frame.columns]
        if missing:
            raise KeyError(f"{spec.name}: missing columns {missing}")
        data = model_frame(frame[spec.columns], spec.response).dropna()
        required = len(spec.covariates) + 2
        if len(data) < required:
            raise InsufficientRows(spec.name, len(data), required)
        formula = build_formula(spec)
        logger.debug("Fitting %s on %s rows: %s", spec.name, len(data), formula)
        results[spec.name] = smf.ols(formula, data=data).fit()
    return results


def summarize_results(results: Mapping[str, object]) -> pd.DataFrame:
    """One row of fit statistics per specification."""
    rows = [
        {
            "spec": name,
            "nobs": int(res.nobs),
            "r_squared": res.rsquared,
            "adj_r_squared": res.rsquared_adj,
            "aic": res.aic,
        }
        for name, res in results.items()
    ]
    return pd.DataFrame(rows, columns=["spec", "nobs", "r_squared", "adj_r_squared", "aic"])


__all__ = [
    "SIZE_COVARIATES",
    "FIXED_EFFECTS",
    "ModelSpec",
    "build_formula",
    "default_specs",
    "model_frame",
    "fit_specs",
    "summarize_results",
]
