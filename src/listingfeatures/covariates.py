"""Cleaning of the non-amenity regression covariates."""

from __future__ import annotations

import logging
import numbers
import re
from typing import Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def parse_float(val: object) -> Optional[float]:
    """Safely parse a float from heterogeneous representations.

    Strings may carry currency symbols, thousands separators or trailing
    words (``"$1,250.00"``, ``"2 beds"``). Returns ``None`` when parsing
    fails.
    """

    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, numbers.Real):
        return None if pd.isna(val) else float(val)
    if isinstance(val, str):
        match = _NUMBER.search(val.replace(",", ""))
        return float(match.group()) if match else None
    return None


def parse_int(val: object) -> Optional[int]:
    """Parse an integer, delegating to :func:`parse_float`."""

    num = parse_float(val)
    return int(num) if num is not None else None


def parse_bathrooms(val: object) -> Optional[float]:
    """Parse a bathroom count such as ``1.5``, ``"2 shared baths"`` or ``"Half-bath"``."""

    num = parse_float(val)
    if num is None and isinstance(val, str) and "half" in val.lower():
        return 0.5
    return num


COVARIATE_COLUMNS = [
    "price",
    "property_type",
    "room_type",
    "bedrooms",
    "beds",
    "bathrooms",
    "square_feet",
    "square_feet_missing",
]


def _column(listings: pd.DataFrame, name: str) -> pd.Series:
    if name in listings.columns:
        return listings[name]
    return pd.Series([None] * len(listings), index=listings.index, dtype=object)


def _label(val: object) -> str:
    if val is None or (not isinstance(val, str) and pd.isna(val)):
        return "unknown"
    return str(val).strip() or "unknown"


def _category(series: pd.Series) -> np.ndarray:
    return np.array([_label(v) for v in series], dtype=object)


def prepare_covariates(listings: pd.DataFrame) -> pd.DataFrame:
    """Return the cleaned covariate frame aligned row by row with ``listings``.

    Square footage is mostly absent in public exports, so missing values are
    filled with ``0`` and flagged in ``square_feet_missing``. Bathrooms come
    from a numeric ``bathrooms`` column when it has a value and from
    ``bathrooms_text`` otherwise.
    """

    def numeric(series: pd.Series, parser=parse_float) -> np.ndarray:
        return np.array(
            [np.nan if (num := parser(v)) is None else num for v in series], dtype=float
        )

    bathrooms = numeric(_column(listings, "bathrooms"), parse_bathrooms)
    from_text = numeric(_column(listings, "bathrooms_text"), parse_bathrooms)
    square_feet = numeric(_column(listings, "square_feet"))

    frame = pd.DataFrame(
        {
            "price": numeric(_column(listings, "price")),
            "property_type": _category(_column(listings, "property_type")),
            "room_type": _category(_column(listings, "room_type")),
            "bedrooms": numeric(_column(listings, "bedrooms")),
            "beds": numeric(_column(listings, "beds")),
            "bathrooms": np.where(np.isnan(bathrooms), from_text, bathrooms),
            "square_feet": np.nan_to_num(square_feet, nan=0.0),
            "square_feet_missing": np.isnan(square_feet),
        },
        index=listings.index,
        columns=COVARIATE_COLUMNS,
    )
    logger.debug(
        "Prepared covariates for %s listings (%s without square footage)",
        len(frame),
        int(frame["square_feet_missing"].sum()),
    )
    return frame


__all__ = [
    "parse_float",
    "parse_int",
    "parse_bathrooms",
    "COVARIATE_COLUMNS",
    "prepare_covariates",
]
