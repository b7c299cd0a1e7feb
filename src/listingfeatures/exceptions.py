"""Errors raised by the amenity feature pipeline."""

from __future__ import annotations

from typing import Optional


class AmenityFeatureError(Exception):
    """Base class for pipeline failures."""


class MalformedAmenityField(AmenityFeatureError, ValueError):
    """An amenities value is not a brace-delimited, quoted list."""

    def __init__(self, value: object, reason: str, position: Optional[int] = None):
        self.value = value
        self.reason = reason
        self.position = position
        where = f" at row {position}" if position is not None else ""
        super().__init__(f"Malformed amenities field{where}: {reason}: {value!r}")

    def at(self, position: int) -> "MalformedAmenityField":
        """Return a copy of this error bound to a row ``position``."""
        return MalformedAmenityField(self.value, self.reason, position)


class EmptyVocabulary(AmenityFeatureError):
    """Frequency thresholding retained no tokens."""

    def __init__(self, min_count: int, candidates: int):
        self.min_count = min_count
        self.candidates = candidates
        super().__init__(
            f"No amenity occurs more than {min_count} times "
            f"({candidates} distinct candidates)"
        )


class RowCountMismatch(AmenityFeatureError):
    """The dummy matrix does not have one row per listing."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} dummy rows, got {actual}")


class InsufficientRows(AmenityFeatureError, ValueError):
    """Too few complete rows remain to fit a price specification."""

    def __init__(self, spec: str, rows: int, required: int):
        self.spec = spec
        self.rows = rows
        self.required = required
        super().__init__(
            f"Specification {spec!r} has {rows} complete rows, needs at least {required}"
        )


class ColumnCollision(AmenityFeatureError, ValueError):
    """Amenity column names clash with existing listing columns."""

    def __init__(self, columns):
        self.columns = sorted(columns)
        super().__init__(f"Amenity columns already present in listings: {self.columns}")


__all__ = [
    "AmenityFeatureError",
    "MalformedAmenityField",
    "EmptyVocabulary",
    "RowCountMismatch",
    "ColumnCollision",
    "InsufficientRows",
]
