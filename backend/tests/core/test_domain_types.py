"""Domain Types - enum values, limits and the tolerant enum parser."""

import pytest

from whispr.core.domain_types import (
    ALIAS_POOL, ConfessionCategory, DEFAULT_LIMITS, KARMA_DELTAS, KarmaAction,
    MarketCondition, REACTION_KINDS, REACTION_WEIGHTS, parse_enum,
)


def test_reaction_kinds_are_the_five():
    assert REACTION_KINDS == ("fire", "heart", "laugh", "shock", "sad")
    assert set(REACTION_WEIGHTS) == set(REACTION_KINDS)


def test_confession_categories_serialize_to_str():
    assert ConfessionCategory.HOT_TAKE.value == "hot-take"
    assert ConfessionCategory("after-dark") is ConfessionCategory.AFTER_DARK


def test_every_karma_action_has_a_delta():
    assert set(KARMA_DELTAS) == set(KarmaAction)


def test_alias_pool_has_twenty_distinct_names():
    assert len(set(ALIAS_POOL)) == 20


def test_default_limits():
    assert DEFAULT_LIMITS.max_confessions == 200
    assert DEFAULT_LIMITS.max_crushes == 100
    assert DEFAULT_LIMITS.max_market_items == 150
    assert DEFAULT_LIMITS.max_comments == 500


def test_limits_are_frozen():
    with pytest.raises(AttributeError):
        DEFAULT_LIMITS.max_confessions = 1


@pytest.mark.parametrize("raw, expected", [
    ("like-new", MarketCondition.LIKE_NEW),
    (MarketCondition.FAIR, MarketCondition.FAIR),
    ("mint", None),
    (None, None),
])
def test_parse_enum(raw, expected):
    assert parse_enum(MarketCondition, raw) is expected
