import dataclasses
import math

import pytest

from app.models.search import DEFAULT_LIMIT, DEFAULT_OFFSET, SearchParams, parse_decimal, parse_int64


def test_empty_query_gives_defaults_and_no_filters():
    params = SearchParams.from_query({})
    assert params == SearchParams()
    assert params.limit == DEFAULT_LIMIT == 10
    assert params.offset == DEFAULT_OFFSET == 0
    assert params.min_price is None
    assert params.available is None
    assert params.labels is None


def test_text_fields_copied_verbatim():
    params = SearchParams.from_query({
        "query": "  Oak Table ",
        "category_id": "furniture",
        "sort_by": "price",
        "sort_dir": "DESC",
    })
    assert params.query == "  Oak Table "
    assert params.category_id == "furniture"
    assert params.sort_by == "price"
    assert params.sort_dir == "DESC"


def test_empty_text_value_is_treated_as_absent():
    params = SearchParams.from_query({"query": "", "category_id": ""})
    assert params.query is None
    assert params.category_id is None


@pytest.mark.parametrize("raw,expected", [
    ("25", 25),
    ("+3", 3),
    ("0", DEFAULT_LIMIT),
    ("-5", DEFAULT_LIMIT),
    ("abc", DEFAULT_LIMIT),
    ("2.5", DEFAULT_LIMIT),
    (" 4", DEFAULT_LIMIT),
    ("99999999999999999999", DEFAULT_LIMIT),
])
def test_limit_only_overridden_by_positive_integer(raw, expected):
    assert SearchParams.from_query({"limit": raw}).limit == expected


@pytest.mark.parametrize("raw,expected", [
    ("0", 0),
    ("40", 40),
    ("-1", DEFAULT_OFFSET),
    ("ten", DEFAULT_OFFSET),
])
def test_offset_only_overridden_by_non_negative_integer(raw, expected):
    assert SearchParams.from_query({"offset": raw}).offset == expected


@pytest.mark.parametrize("raw,expected", [
    ("0", 0.0),
    ("12.75", 12.75),
    (".5", 0.5),
    ("1e2", 100.0),
    ("-5", None),
    ("cheap", None),
    ("nan", None),
    ("NaN", None),
    ("-inf", None),
    ("1_000", None),
    ("1e400", None),
    ("0x15", None),
    ("0x1p-2", 0.25),
])
def test_price_bounds_ignore_negative_and_malformed(raw, expected):
    params = SearchParams.from_query({"min_price": raw, "max_price": raw})
    assert params.min_price == expected
    assert params.max_price == expected


def test_infinite_price_bound_is_kept():
    params = SearchParams.from_query({"min_price": "+Inf", "max_price": "infinity"})
    assert params.min_price == math.inf
    assert params.max_price == math.inf


def test_price_bounds_are_independent():
    params = SearchParams.from_query({"min_price": "10", "max_price": "-1"})
    assert params.min_price == 10.0
    assert params.max_price is None


@pytest.mark.parametrize("raw,expected", [
    ("42", 42),
    ("0", None),
    ("-3", None),
    ("x1", None),
])
def test_seller_id_only_kept_when_positive(raw, expected):
    assert SearchParams.from_query({"seller_id": raw}).seller_id == expected


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("1", True),
    ("false", False),
    ("0", False),
    ("xyz", False),
    ("TRUE", False),
])
def test_available_truth_table(raw, expected):
    assert SearchParams.from_query({"available": raw}).available is expected


def test_available_absent_is_unset():
    assert SearchParams.from_query({"query": "lamp"}).available is None


def test_labels_split_on_commas_without_trimming():
    params = SearchParams.from_query({"labels": "oak, handmade,,oak"})
    assert params.labels == ("oak", " handmade", "", "oak")


def test_params_are_immutable():
    params = SearchParams.from_query({"limit": "5"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.limit = 50


def test_parsers():
    assert parse_int64("9223372036854775807") == 2 ** 63 - 1
    assert parse_int64("-9223372036854775808") == -(2 ** 63)
    assert parse_int64("9223372036854775808") is None
    assert parse_int64("") is None
    assert parse_int64("12\n") is None
    assert parse_decimal("3.") == 3.0
    assert parse_decimal("") is None
    assert math.isnan(parse_decimal("nan"))
    assert parse_decimal("+nan") is None
    assert parse_decimal("-Infinity") == -math.inf
    assert parse_decimal(" 1") is None
