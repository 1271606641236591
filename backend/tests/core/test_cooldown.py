"""Reaction Cooldown Guard - 500 ms spacing window."""

from datetime import timedelta

from whispr.core.cooldown import ReactionCooldown


def test_never_reacted_is_not_cooling_down(clock):
    assert not ReactionCooldown().is_cooling_down(None, clock())


def test_inside_window_is_cooling_down(clock):
    last = clock()
    assert ReactionCooldown().is_cooling_down(last, last + timedelta(milliseconds=499))


def test_window_boundary_is_free(clock):
    last = clock()
    assert not ReactionCooldown().is_cooling_down(last, last + timedelta(milliseconds=500))


def test_custom_window(clock):
    last = clock()
    guard = ReactionCooldown(cooldown_ms=2000)
    assert guard.is_cooling_down(last, last + timedelta(seconds=1))
    assert not guard.is_cooling_down(last, last + timedelta(seconds=3))


def test_zero_window_never_cools_down(clock):
    assert not ReactionCooldown(cooldown_ms=0).is_cooling_down(clock(), clock())
