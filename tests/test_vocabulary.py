import json

import pytest
from pydantic import ValidationError

from listingfeatures.exceptions import EmptyVocabulary
from listingfeatures.vocabulary import (
    DEFAULT_EXCLUDED,
    build_vocabulary,
    count_tokens,
    load_vocabulary,
    save_vocabulary,
)


def _listings(token: str, n: int) -> list[list[str]]:
    return [[token] for _ in range(n)]


def test_threshold_is_strict() -> None:
    sequences = _listings("wifi", 201) + _listings("pool", 199) + _listings("kitchen", 200)
    vocab = build_vocabulary(sequences, min_count=200)
    assert "wifi" in vocab
    assert "pool" not in vocab
    assert "kitchen" not in vocab
    assert vocab.tokens == ["wifi"]
    assert vocab.counts == {"wifi": 201}


def test_excluded_tokens_never_kept() -> None:
    sequences = [sorted(DEFAULT_EXCLUDED) + ["wifi"] for _ in range(300)]
    vocab = build_vocabulary(sequences, min_count=200)
    assert vocab.tokens == ["wifi"]
    for token in ["", "_toilet", "translation_missing:_en.hosting_amenity_49", "translation_missing:_en.hosting_amenity_50"]:
        assert token not in vocab


def test_extra_exclusions() -> None:
    sequences = [["wifi", "kitchen"]] * 5
    vocab = build_vocabulary(sequences, min_count=1, exclude=DEFAULT_EXCLUDED | {"kitchen"})
    assert vocab.tokens == ["wifi"]


def test_order_is_count_then_first_seen() -> None:
    sequences = [["tv", "wifi"], ["wifi", "kitchen"], ["kitchen", "tv"], ["wifi"]]
    vocab = build_vocabulary(sequences, min_count=0)
    assert vocab.tokens == ["wifi", "tv", "kitchen"]
    assert build_vocabulary(sequences, min_count=0).tokens == vocab.tokens


def test_count_modes_diverge_on_repeated_tokens() -> None:
    sequences = [["wifi", "wifi"], ["wifi"], ["tv"]]
    assert count_tokens(sequences, "occurrence")["wifi"] == 3
    assert count_tokens(sequences, "listing")["wifi"] == 2

    assert "wifi" in build_vocabulary(sequences, min_count=2, count_mode="occurrence")
    assert "wifi" not in build_vocabulary(sequences, min_count=2, count_mode="listing")


def test_unknown_count_mode() -> None:
    with pytest.raises(ValueError):
        build_vocabulary([["wifi"]], count_mode="documents")


def test_empty_input_is_empty_vocabulary() -> None:
    vocab = build_vocabulary([], min_count=200, allow_empty=False)
    assert vocab.is_empty
    assert vocab.candidates == 0
    assert len(vocab) == 0


def test_thresholding_to_nothing(caplog) -> None:
    sequences = _listings("wifi", 3)
    with caplog.at_level("WARNING"):
        vocab = build_vocabulary(sequences, min_count=200)
    assert vocab.is_empty
    assert vocab.candidates == 1
    assert "vocabulary is empty" in caplog.text

    with pytest.raises(EmptyVocabulary) as info:
        build_vocabulary(sequences, min_count=200, allow_empty=False)
    assert info.value.candidates == 1
    assert info.value.min_count == 200


def test_save_and_load(tmp_path) -> None:
    sequences = [["wifi", "tv"], ["wifi"]]
    vocab = build_vocabulary(sequences, min_count=0, count_mode="listing")
    path = tmp_path / "nested" / "vocab.json"
    save_vocabulary(vocab, path)
    loaded = load_vocabulary(path)
    assert loaded == vocab
    assert list(loaded) == ["wifi", "tv"]


@pytest.mark.parametrize(
    "payload",
    [
        {"tokens": ["wifi", "wifi"], "counts": {"wifi": 3}},
        {"tokens": ["wifi", "tv"], "counts": {"wifi": 3}},
        {"tokens": ["wifi"], "counts": {"wifi": 3, "tv": 2}},
    ],
)
def test_load_rejects_inconsistent_file(tmp_path, payload) -> None:
    path = tmp_path / "vocab.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_vocabulary(path)
