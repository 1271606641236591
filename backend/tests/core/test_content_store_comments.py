"""Content Store: comments - parent rules and the confession comment counter."""

from dataclasses import replace

from whispr.core.content_store import ContentStore
from whispr.core.domain_types import ParentType, StoreLimits


def _confession(store, author="author-1"):
    return store.create_confession("Had a great day!", author, "A", 0, "wholesome")


def test_comment_increments_count(store):
    c = _confession(store)
    comment = store.create_comment("same here", "u2", "B", 1, confession_id=c.id)
    assert comment.parent_type is ParentType.CONFESSION
    assert comment.parent_id == c.id
    assert store.get_confession(c.id).comment_count == 1


def test_comment_requires_exactly_one_parent(store):
    c = _confession(store)
    item = store.create_market_item(
        "Mini Fridge", "", 60, "dorm", "good", "s1", "S", 0,
    )
    assert store.create_comment("hi", "u2", "B", 1) is None
    assert store.create_comment(
        "hi", "u2", "B", 1, confession_id=c.id, market_item_id=item.id,
    ) is None


def test_comment_on_missing_parent_rejected(store):
    assert store.create_comment("hi", "u2", "B", 1, confession_id="ghost") is None
    assert store.create_comment("hi", "u2", "B", 1, market_item_id="ghost") is None


def test_empty_comment_rejected(store):
    c = _confession(store)
    assert store.create_comment("   ", "u2", "B", 1, confession_id=c.id) is None
    assert store.get_confession(c.id).comment_count == 0


def test_comment_capped_at_280(store):
    c = _confession(store)
    comment = store.create_comment("z" * 400, "u2", "B", 1, confession_id=c.id)
    assert len(comment.content) == 280


def test_delete_comment_author_only_and_decrements(store):
    c = _confession(store)
    comment = store.create_comment("same here", "u2", "B", 1, confession_id=c.id)
    assert store.delete_comment(comment.id, "u3") is False
    assert store.get_confession(c.id).comment_count == 1
    assert store.delete_comment(comment.id, "u2") is True
    assert store.get_confession(c.id).comment_count == 0


def test_market_comment_does_not_touch_confessions(store):
    c = _confession(store)
    item = store.create_market_item(
        "Mini Fridge", "", 60, "dorm", "good", "s1", "S", 0,
    )
    store.create_comment("available?", "u2", "B", 1, market_item_id=item.id)
    assert store.get_confession(c.id).comment_count == 0
    assert len(store.list_comments("market", item.id)) == 1


def test_evicted_comment_decrements_parent(clock, rng):
    store = ContentStore(clock, rng, limits=StoreLimits(max_comments=2))
    c = _confession(store)
    for text in ("one", "two", "three"):
        store.create_comment(text, "u2", "B", 1, confession_id=c.id)
    assert len(store.comments) == 2
    assert store.get_confession(c.id).comment_count == 2


def test_list_comments_newest_first(store, clock):
    c = _confession(store)
    for text in ("one", "two", "three"):
        store.create_comment(text, "u2", "B", 1, confession_id=c.id)
        clock.advance(seconds=1)
    assert [x.content for x in store.list_comments("confession", c.id)] == [
        "three", "two", "one",
    ]


def test_load_recomputes_counts_and_drops_orphans(store, clock, rng):
    c = _confession(store)
    kept = store.create_comment("kept", "u2", "B", 1, confession_id=c.id)
    orphan = replace(kept, id="orphan", parent_id="gone")
    stale = replace(store.get_confession(c.id), comment_count=7)

    fresh = ContentStore(clock, rng)
    fresh.load([stale], [], [], [kept, orphan])
    assert [x.id for x in fresh.comments] == [kept.id]
    assert fresh.get_confession(c.id).comment_count == 1
