"""Boolean amenity feature matrix."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .amenities import normalize_column
from .exceptions import ColumnCollision, RowCountMismatch
from .vocabulary import DEFAULT_EXCLUDED, CountMode, Vocabulary, build_vocabulary

logger = logging.getLogger(__name__)


def build_dummy_matrix(
    vocabulary: Iterable[str],
    sequences: Sequence[Sequence[str]],
    index: Optional[pd.Index] = None,
) -> pd.DataFrame:
    """Return one boolean column per vocabulary token, one row per listing.

    Row ``i`` describes ``sequences[i]``. When ``index`` is given it becomes
    the frame's index so the result lines up with the listing table.
    """
    tokens = list(vocabulary)
    if index is not None and len(index) != len(sequences):
        raise RowCountMismatch(len(index), len(sequences))

    if index is None:
        index = pd.RangeIndex(len(sequences))

    present = [set(seq) for seq in sequences]
    columns: Dict[str, List[bool]] = {
        token: [token in listing for listing in present] for token in tokens
    }
    frame = pd.DataFrame(columns, columns=tokens, index=index, dtype=bool)
    if len(frame) != len(sequences):
        raise RowCountMismatch(len(sequences), len(frame))
    logger.debug("Built dummy matrix %s x %s", *frame.shape)
    return frame


def add_amenity_dummies(
    listings: pd.DataFrame,
    column: str = "amenities",
    vocabulary: Optional[Vocabulary] = None,
    min_count: int = 200,
    exclude: Iterable[str] = DEFAULT_EXCLUDED,
    count_mode: CountMode = "occurrence",
) -> Tuple[pd.DataFrame, Vocabulary]:
    """Append amenity dummy columns to ``listings``.

    A ``vocabulary`` fitted elsewhere is reused as is; otherwise one is
    built from ``listings`` itself. Returns the augmented table and the
    vocabulary used.
    """
    if column not in listings.columns:
        raise KeyError(column)
    sequences = normalize_column(listings[column])
    if vocabulary is None:
        vocabulary = build_vocabulary(
            sequences, min_count=min_count, exclude=exclude, count_mode=count_mode
        )
    clashes = set(vocabulary.tokens) & set(listings.columns)
    if clashes:
        raise ColumnCollision(clashes)

    dummies = build_dummy_matrix(vocabulary, sequences, index=listings.index)
    # join by position; index labels need not be unique
    joined = pd.concat(
        [listings.reset_index(drop=True), dummies.reset_index(drop=True)], axis=1
    )
    joined.index = listings.index
    return joined, vocabulary


__all__ = ["build_dummy_matrix", "add_amenity_dummies"]
