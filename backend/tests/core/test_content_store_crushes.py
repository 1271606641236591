"""Content Store: crushes - duplicates, mutuality coin flip, reveal and delete."""

import random

from whispr.core.content_store import ContentStore
from whispr.core.domain_types import StoreLimits


def test_send_crush_defaults(store, clock):
    crush = store.send_crush("me", "Shadow Fox", "you're cool")
    assert crush.to_alias == "Shadow Fox"
    assert crush.is_revealed is False
    assert crush.created_at == clock()


def test_duplicate_alias_case_insensitive_rejected(store):
    store.send_crush("me", "Shadow Fox", "hello there")
    assert store.send_crush("me", "shadow fox", "again") is None
    assert store.send_crush("me", "  SHADOW FOX ", "again") is None
    assert len(store.crushes) == 1


def test_same_alias_from_other_sender_allowed(store):
    store.send_crush("me", "Shadow Fox", "hello there")
    assert store.send_crush("you", "Shadow Fox", "me too") is not None


def test_too_short_alias_or_message_rejected(store):
    assert store.send_crush("me", "x", "hello") is None
    assert store.send_crush("me", "Shadow Fox", "h") is None
    assert store.send_crush("", "Shadow Fox", "hello") is None


def test_message_capped_at_200(store):
    crush = store.send_crush("me", "Shadow Fox", "m" * 500)
    assert len(crush.message) == 200


def test_mutuality_follows_probability(clock):
    always = ContentStore(clock, random.Random(1), mutual_probability=1.0)
    never = ContentStore(clock, random.Random(1), mutual_probability=0.0)
    assert always.send_crush("me", "Nova Dust", "hey you").is_mutual is True
    assert never.send_crush("me", "Nova Dust", "hey you").is_mutual is False


def test_mutuality_decided_once(store):
    crush = store.send_crush("me", "Nova Dust", "hey you")
    revealed = store.reveal_crush(crush.id, "me")
    assert revealed.is_mutual == crush.is_mutual


def test_reveal_is_idempotent(store):
    crush = store.send_crush("me", "Nova Dust", "hey you")
    first = store.reveal_crush(crush.id, "me")
    second = store.reveal_crush(crush.id, "me")
    assert first.is_revealed and second.is_revealed
    assert first == second
    assert len(store.crushes) == 1


def test_reveal_by_non_sender_fails(store):
    crush = store.send_crush("me", "Nova Dust", "hey you")
    assert store.reveal_crush(crush.id, "intruder") is None
    assert store.get_crush(crush.id).is_revealed is False


def test_delete_sender_only(store):
    crush = store.send_crush("me", "Nova Dust", "hey you")
    assert store.delete_crush(crush.id, "intruder") is False
    assert store.delete_crush(crush.id, "me") is True
    assert store.crushes == []


def test_list_crushes_scoped_to_sender(store, clock):
    store.send_crush("me", "Nova Dust", "hey you")
    clock.advance(seconds=1)
    store.send_crush("you", "Iron Mist", "hi there")
    clock.advance(seconds=1)
    latest = store.send_crush("me", "Onyx Glow", "hello")
    mine = store.list_crushes("me")
    assert [c.from_user_id for c in mine] == ["me", "me"]
    assert mine[0] == latest


def test_crush_cap(clock, rng):
    store = ContentStore(clock, rng, limits=StoreLimits(max_crushes=2))
    for alias in ("Alpha", "Bravo", "Charlie"):
        store.send_crush("me", alias, "hello")
    assert [c.to_alias for c in store.crushes] == ["Charlie", "Bravo"]
