import math

import pytest

from listingfeatures.amenities import normalize_amenities, normalize_column, normalize_text
from listingfeatures.exceptions import MalformedAmenityField


def test_normalize_simple_field() -> None:
    raw = '{TV,"Cable TV",Wifi,"Air conditioning"}'
    assert normalize_amenities(raw) == ["tv", "cable_tv", "wifi", "air_conditioning"]


def test_24_hour_variants_collapse() -> None:
    hyphen = normalize_amenities('{"24-hour check-in"}')
    spaced = normalize_amenities('{"24 hour check-in"}')
    capitalised = normalize_amenities('{"24 Hour check-in"}')
    assert hyphen == spaced == capitalised == ["h24_check_in"]


def test_punctuation_is_unified() -> None:
    raw = '{"Washer / Dryer","Children’s books and toys","Pack ’n Play/travel crib","Wide clearance (toilet)"}'
    assert normalize_amenities(raw) == [
        "washer___dryer",
        "childrens_books_and_toys",
        "pack_n_play_travel_crib",
        "wide_clearance_toilet",
    ]


def test_translation_placeholder_shape() -> None:
    raw = '{"translation missing: en.hosting_amenity_49"}'
    assert normalize_amenities(raw) == ["translation_missing:_en.hosting_amenity_49"]


@pytest.mark.parametrize("raw", [None, math.nan, "", "   "])
def test_missing_field_is_empty(raw) -> None:
    assert normalize_amenities(raw) == []


def test_empty_tokens_are_kept() -> None:
    assert normalize_amenities("{}") == [""]
    assert normalize_amenities("{Wifi,}") == ["wifi", ""]


def test_token_count_matches_segments() -> None:
    raw = '{Wifi,"Hair dryer",Iron,,Heating}'
    assert len(normalize_amenities(raw)) == raw.count(",") + 1


@pytest.mark.parametrize(
    "raw",
    [
        "Wifi,Kitchen",
        "{Wifi,Kitchen",
        "Wifi,Kitchen}",
        '{Wifi,"Cable TV}',
        "{Wifi,{Kitchen}}",
        "[Wifi]",
    ],
)
def test_malformed_field_raises(raw) -> None:
    with pytest.raises(MalformedAmenityField):
        normalize_amenities(raw)


def test_non_string_field_raises() -> None:
    with pytest.raises(MalformedAmenityField):
        normalize_amenities(42)


def test_normalize_text_is_idempotent() -> None:
    tokens = normalize_amenities('{"24-hour check-in","24 Hour check-in","Self check-in","Lock on bedroom door",Wifi}')
    assert [normalize_text(t) for t in tokens] == tokens
    once = normalize_text("24 HOUR Check-In")
    assert once == "h24_check_in"
    assert normalize_text(once) == once


def test_normalize_column_keeps_one_sequence_per_row() -> None:
    values = ["{Wifi}", None, "{}", '{Kitchen,"Cable TV"}']
    assert normalize_column(values) == [["wifi"], [], [""], ["kitchen", "cable_tv"]]


def test_normalize_column_reports_position() -> None:
    with pytest.raises(MalformedAmenityField) as info:
        normalize_column(["{Wifi}", "{Kitchen}", '{"Cable TV}'])
    assert info.value.position == 2
    assert "row 2" in str(info.value)
