"""Amenity text normalization."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

import pandas as pd

from .exceptions import MalformedAmenityField

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-/ ]")
_DROPPED = re.compile(r"[()’]")
_DELIMITERS = re.compile(r'[{}"]')
_H24 = re.compile("24_hour", re.IGNORECASE)


def _is_missing(raw: object) -> bool:
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def _validate(raw: str) -> None:
    """Raise :class:`MalformedAmenityField` unless ``raw`` looks like ``{a,"b c"}``."""
    text = raw.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise MalformedAmenityField(raw, "missing outer braces")
    inner = text[1:-1]
    if "{" in inner or "}" in inner:
        raise MalformedAmenityField(raw, "unbalanced braces")
    if inner.count('"') % 2:
        raise MalformedAmenityField(raw, "unbalanced quotes")


def normalize_text(text: str) -> str:
    """Canonicalize separators, punctuation and case of ``text``.

    Hyphens, slashes and spaces become underscores, parentheses and the
    right single quotation mark are dropped, ``24_hour`` (in any case) is rewritten
    to ``h24`` and everything is lowercased. The rewrite runs after separator
    unification so ``24-hour`` and ``24 hour`` collapse to the same token.
    Applying the function to its own output is a no-op.
    """
    text = _SEPARATORS.sub("_", text)
    text = _DROPPED.sub("", text)
    text = _H24.sub("H24", text)
    return text.lower()


def normalize_amenities(raw: object) -> List[str]:
    """Split one listing's amenities field into normalized tokens.

    Parameters
    ----------
    raw:
        The raw field, e.g. ``{TV,"Cable TV",Wifi}``. ``None``, ``NaN`` and
        blank strings yield an empty list.

    Empty tokens (from ``{}`` or a trailing comma) are kept so the result
    always has one entry per comma-separated segment.
    """
    if _is_missing(raw):
        return []
    if not isinstance(raw, str):
        raise MalformedAmenityField(raw, f"expected str, got {type(raw).__name__}")
    _validate(raw)
    cleaned = _DELIMITERS.sub("", normalize_text(raw.strip()))
    return cleaned.split(",")


def normalize_column(values: Iterable[object]) -> List[List[str]]:
    """Normalize every value of an amenities column, preserving order."""
    sequences: List[List[str]] = []
    for position, raw in enumerate(values):
        try:
            sequences.append(normalize_amenities(raw))
        except MalformedAmenityField as exc:
            raise exc.at(position) from None
    logger.debug("Normalized amenities for %s listings", len(sequences))
    return sequences


__all__ = ["normalize_text", "normalize_amenities", "normalize_column"]
