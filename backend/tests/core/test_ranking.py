"""Ranking Engine - weighted reaction score with age decay."""

from dataclasses import replace
from datetime import timedelta

import pytest

from whispr.core.entities import empty_reactions
from whispr.core.ranking import (
    decay_factor, rank_trending, raw_reaction_score, trending_score,
)


def _with_reactions(store, content, author, **counts):
    c = store.create_confession(content, author, "A", 0, "confession")
    reactions = empty_reactions()
    for kind, n in counts.items():
        reactions[kind] = tuple(f"{kind}-{i}" for i in range(n))
    return replace(c, reactions=reactions)


def test_raw_score_uses_kind_weights(store, clock):
    c = _with_reactions(store, "weights", "u1", fire=1, heart=1, laugh=1, shock=2, sad=1)
    assert raw_reaction_score(c) == pytest.approx(3 + 2 + 2 + 3 + 1)


def test_decay_is_one_at_creation(clock):
    assert decay_factor(clock(), clock()) == 1.0


def test_decay_after_one_half_life(clock):
    created = clock() - timedelta(hours=12)
    assert decay_factor(created, clock()) == pytest.approx(1 / 2 ** 1.3)


def test_future_timestamps_are_clamped_to_zero_age(clock):
    created = clock() + timedelta(hours=5)
    assert decay_factor(created, clock()) == 1.0


def test_trending_score_no_reactions_is_zero(store, clock):
    c = store.create_confession("nothing yet", "u1", "A", 0, "rant")
    assert trending_score(c, clock()) == 0


def test_rank_trending_scores_are_non_increasing(store, clock):
    items = [
        _with_reactions(store, "low", "u1", sad=1),
        _with_reactions(store, "high", "u2", fire=5),
        _with_reactions(store, "mid", "u3", heart=2),
    ]
    clock.advance(hours=3)
    ranked = rank_trending(items, clock())
    scores = [trending_score(c, clock()) for c in ranked]
    assert scores == sorted(scores, reverse=True)
    assert ranked[0].content == "high"


def test_rank_trending_is_stable_for_ties(store, clock):
    a = store.create_confession("first tie", "u1", "A", 0, "rant")
    b = store.create_confession("second tie", "u2", "B", 0, "rant")
    assert rank_trending([a, b], clock()) == [a, b]
    assert rank_trending([b, a], clock()) == [b, a]


def test_older_confession_loses_to_fresh_one_with_equal_reactions(store, clock):
    old = _with_reactions(store, "old news", "u1", fire=3)
    clock.advance(hours=24)
    fresh = _with_reactions(store, "fresh news", "u2", fire=3)
    assert rank_trending([old, fresh], clock())[0] is fresh
