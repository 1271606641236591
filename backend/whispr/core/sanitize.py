"""Sanitizer - pure normalization of free text and numeric input.

Invariants:
    - No function raises; every input produces a best-effort normalized value
    - sanitize_text output is stripped and never longer than max_len
    - validate_price output is within [MIN_PRICE, MAX_PRICE] with at most 2 decimals

Design Decisions:
    - Callers decide what "too short" means: the sanitizer only normalizes
    - Decimal half-up rounding for prices: 19.999 -> 20.00, 100.455 -> 100.46
      (ADR: binary float rounding would turn 100.455 into 100.45)
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from whispr.core.domain_types import MAX_PRICE, MIN_PRICE

ANONYMOUS_ALIAS = "Anonymous"
_CENTS = Decimal("0.01")
MAX_CALLER_ID_LENGTH = 128


def sanitize_text(text: object, max_len: int) -> str:
    """Strip surrounding whitespace and truncate to max_len characters."""
    if not isinstance(text, str):
        return ""
    return text.strip()[:max(0, max_len)]


def sanitize_alias(text: object, max_len: int = 40) -> str:
    """Sanitize a display alias, falling back to 'Anonymous' when empty."""
    return sanitize_text(text, max_len) or ANONYMOUS_ALIAS


def validate_price(value: object) -> float:
    """Clamp a price to [MIN_PRICE, MAX_PRICE], rounded half-up to cents.

    Non-numeric, non-finite and negative values collapse to 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value) or value < MIN_PRICE:
        return 0.0
    if value > MAX_PRICE:
        return MAX_PRICE
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def clamp_non_negative_int(value: object) -> int:
    """Floor a number to an int >= 0. Anything unusable becomes 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def normalize_caller_id(value: object) -> str:
    """Anonymous ids compare after stripping; non-strings and blanks become ''."""
    return sanitize_text(value, MAX_CALLER_ID_LENGTH)
