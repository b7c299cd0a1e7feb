"""Selection of the amenity tokens used as model features."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Literal, Sequence

from pydantic import BaseModel, Field, model_validator

from .exceptions import EmptyVocabulary

logger = logging.getLogger(__name__)

CountMode = Literal["occurrence", "listing"]

# Placeholder labels that leak out of the listings export.
DEFAULT_EXCLUDED = frozenset(
    {
        "",
        "_toilet",
        "translation_missing:_en.hosting_amenity_49",
        "translation_missing:_en.hosting_amenity_50",
    }
)


class Vocabulary(BaseModel):
    """Ordered set of retained amenity tokens."""

    tokens: List[str] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)
    min_count: int = 200
    count_mode: CountMode = "occurrence"
    candidates: int = 0

    @model_validator(mode="after")
    def _consistent(self) -> "Vocabulary":
        if len(set(self.tokens)) != len(self.tokens):
            dupes = sorted(t for t, n in Counter(self.tokens).items() if n > 1)
            raise ValueError(f"duplicate tokens: {dupes}")
        if set(self.tokens) != set(self.counts):
            raise ValueError("tokens and counts name different amenities")
        return self

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.tokens)

    def __contains__(self, token: object) -> bool:
        return token in self.counts

    @property
    def is_empty(self) -> bool:
        return not self.tokens


def count_tokens(
    sequences: Iterable[Sequence[str]], count_mode: CountMode = "occurrence"
) -> Counter:
    """Count tokens across listings.

    ``occurrence`` counts every token in the flattened multiset, so a token
    listed twice by one listing counts twice. ``listing`` counts the number
    of listings that mention the token at least once.
    """
    counter: Counter = Counter()
    for tokens in sequences:
        if count_mode == "listing":
            # dict.fromkeys keeps first-seen order for tie breaking
            counter.update(dict.fromkeys(tokens, 1))
        else:
            counter.update(tokens)
    return counter


def build_vocabulary(
    sequences: Iterable[Sequence[str]],
    min_count: int = 200,
    exclude: Iterable[str] = DEFAULT_EXCLUDED,
    count_mode: CountMode = "occurrence",
    allow_empty: bool = True,
) -> Vocabulary:
    """Select tokens seen more than ``min_count`` times.

    Parameters
    ----------
    sequences:
        One normalized token sequence per listing.
    min_count:
        Tokens need a count strictly greater than this to be kept.
    exclude:
        Tokens dropped regardless of frequency.
    count_mode:
        ``"occurrence"`` or ``"listing"``, see :func:`count_tokens`.
    allow_empty:
        When ``False``, raise :class:`EmptyVocabulary` if nothing survives
        thresholding.

    Tokens are ordered by descending count, ties by first appearance.
    """
    if count_mode not in ("occurrence", "listing"):
        raise ValueError(f"Unknown count mode: {count_mode!r}")
    excluded = set(exclude)
    counter = count_tokens(sequences, count_mode)
    kept = [
        (token, count)
        for token, count in counter.most_common()
        if count > min_count and token not in excluded
    ]
    vocab = Vocabulary(
        tokens=[token for token, _ in kept],
        counts=dict(kept),
        min_count=min_count,
        count_mode=count_mode,
        candidates=len(counter),
    )
    logger.debug(
        "Vocabulary: kept %s of %s tokens (min_count=%s, mode=%s)",
        len(vocab),
        vocab.candidates,
        min_count,
        count_mode,
    )
    if vocab.is_empty and vocab.candidates:
        if not allow_empty:
            raise EmptyVocabulary(min_count, vocab.candidates)
        logger.warning(
            "No amenity occurs more than %s times; vocabulary is empty", min_count
        )
    return vocab


def save_vocabulary(vocab: Vocabulary, path: str | Path) -> None:
    """Write ``vocab`` as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(vocab.model_dump(), f, indent=2, ensure_ascii=False)


def load_vocabulary(path: str | Path) -> Vocabulary:
    """Load a vocabulary previously written by :func:`save_vocabulary`."""
    with open(path, "r", encoding="utf-8") as f:
        return Vocabulary.model_validate(json.load(f))


__all__ = [
    "DEFAULT_EXCLUDED",
    "Vocabulary",
    "count_tokens",
    "build_vocabulary",
    "save_vocabulary",
    "load_vocabulary",
]
