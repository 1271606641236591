"""Sanitizer - text trimming, alias fallback and price normalization."""

import math

import pytest

from whispr.core.domain_types import MAX_PRICE
from whispr.core.sanitize import (
    ANONYMOUS_ALIAS, MAX_CALLER_ID_LENGTH, clamp_non_negative_int,
    normalize_caller_id, sanitize_alias, sanitize_text, validate_price,
)


def test_sanitize_text_strips_and_truncates():
    assert sanitize_text("   hello world   ", 5) == "hello"


def test_sanitize_text_non_string_is_empty():
    assert sanitize_text(None, 10) == ""
    assert sanitize_text(42, 10) == ""


def test_sanitize_text_whitespace_only_is_empty():
    assert sanitize_text(" \n\t ", 10) == ""


def test_sanitize_alias_falls_back_to_anonymous():
    assert sanitize_alias("   ") == ANONYMOUS_ALIAS
    assert sanitize_alias(None) == ANONYMOUS_ALIAS


def test_sanitize_alias_caps_at_40_chars():
    assert len(sanitize_alias("x" * 100)) == 40


@pytest.mark.parametrize("raw, expected", [
    (-5, 0),
    (100.456, 100.46),
    (999999, MAX_PRICE),
    (19.999, 20.0),
    (100.455, 100.46),
    (12, 12.0),
])
def test_validate_price(raw, expected):
    assert validate_price(raw) == expected


def test_validate_price_rejects_non_numbers():
    assert validate_price("12") == 0
    assert validate_price(None) == 0
    assert validate_price(True) == 0


def test_validate_price_rejects_non_finite():
    assert validate_price(math.nan) == 0
    assert validate_price(math.inf) == 0


def test_clamp_non_negative_int():
    assert clamp_non_negative_int(3.9) == 3
    assert clamp_non_negative_int(-2) == 0
    assert clamp_non_negative_int(math.inf) == 0
    assert clamp_non_negative_int("7") == 0


def test_normalize_caller_id():
    assert normalize_caller_id("  u1 ") == "u1"
    assert normalize_caller_id(None) == ""
    assert len(normalize_caller_id("x" * 500)) == MAX_CALLER_ID_LENGTH
