"""Content Store: confessions - creation rules, deletion, reactions, listing, retention.

Tests cover:
    - Short content rejected unless media is attached
    - Every confession carries all five reaction kinds without duplicates
    - Toggle semantics and the author self-reaction rule
    - Recent/trending ordering and category filtering
    - Retention cap evicts the oldest first
"""

from whispr.core.domain_types import (
    ConfessionCategory, MediaType, REACTION_KINDS, StoreLimits,
)
from whispr.core.content_store import ContentStore
from whispr.core.ranking import trending_score


def _post(store, content="Had a great day!", author="author-1", category="wholesome", **kw):
    return store.create_confession(content, author, "Neon Ghost", 3, category, **kw)


# --- Creation ----------------------------------------------------------------

def test_single_char_confession_rejected(store):
    assert _post(store, content="a") is None
    assert store.confessions == []


def test_valid_confession_starts_empty(store, clock):
    c = _post(store)
    assert c is not None
    assert c.category is ConfessionCategory.WHOLESOME
    assert c.comment_count == 0
    assert c.created_at == clock()
    assert set(c.reactions) == set(REACTION_KINDS)
    assert all(users == () for users in c.reactions.values())


def test_unknown_category_rejected(store):
    assert _post(store, category="gossip") is None


def test_missing_author_rejected(store):
    assert _post(store, author="   ") is None


def test_content_is_trimmed_and_capped(store):
    c = _post(store, content="  " + "x" * 600 + "  ")
    assert len(c.content) == 500


def test_short_content_allowed_with_media(store):
    c = _post(store, content="", media_url="https://cdn.example/pic.jpg")
    assert c is not None
    assert c.media_type is MediaType.IMAGE


def test_video_media_type_kept(store):
    c = _post(store, content="", media_url="https://cdn.example/v.mp4", media_type="video")
    assert c.media_type is MediaType.VIDEO


def test_after_dark_category_sets_flag(store):
    c = _post(store, content="late night thoughts", category="after-dark")
    assert c.is_after_dark


def test_new_confession_goes_to_head(store):
    first = _post(store, content="first one")
    second = _post(store, content="second one")
    assert store.confessions == [second, first]


# --- Deletion ----------------------------------------------------------------

def test_author_can_delete(store):
    c = _post(store)
    assert store.delete_confession(c.id, "author-1") is True
    assert store.confessions == []


def test_non_author_delete_changes_nothing(store):
    c = _post(store)
    assert store.delete_confession(c.id, "someone-else") is False
    assert store.confessions == [c]


def test_delete_cascades_to_comments(store):
    c = _post(store)
    store.create_comment("nice", "u2", "B", 1, confession_id=c.id)
    store.delete_confession(c.id, "author-1")
    assert store.comments == []


# --- Reactions ---------------------------------------------------------------

def test_toggle_adds_then_removes(store):
    c = _post(store)
    added = store.toggle_reaction(c.id, "reader", "fire")
    assert added.added is True
    assert added.confession.reactions["fire"] == ("reader",)

    removed = store.toggle_reaction(c.id, "reader", "fire")
    assert removed.added is False
    assert removed.confession.reactions == c.reactions


def test_reaction_kinds_are_independent(store):
    c = _post(store)
    store.toggle_reaction(c.id, "reader", "fire")
    result = store.toggle_reaction(c.id, "reader", "heart")
    assert result.confession.reactions["fire"] == ("reader",)
    assert result.confession.reactions["heart"] == ("reader",)


def test_author_self_reaction_is_rejected(store):
    c = _post(store)
    result = store.toggle_reaction(c.id, "author-1", "heart")
    assert result.added is False
    assert result.confession.reactions == c.reactions
    assert store.get_confession(c.id).reactions == c.reactions


def test_unknown_kind_or_id_returns_none(store):
    c = _post(store)
    assert store.toggle_reaction(c.id, "reader", "angry").confession is None
    assert store.toggle_reaction("missing", "reader", "fire").confession is None


def test_user_id_appears_once_per_kind(store):
    c = _post(store)
    for reader in ("r1", "r2", "r1", "r3", "r1"):
        store.toggle_reaction(c.id, reader, "laugh")
    users = store.get_confession(c.id).reactions["laugh"]
    assert len(users) == len(set(users))
    assert set(users) == {"r1", "r2", "r3"}


# --- Listing -----------------------------------------------------------------

def test_recent_is_newest_first(store, clock):
    for i in range(4):
        _post(store, content=f"post number {i}")
        clock.advance(minutes=5)
    listed = store.list_confessions(sort="recent")
    stamps = [c.created_at for c in listed]
    assert stamps == sorted(stamps, reverse=True)


def test_trending_scores_non_increasing(store, clock):
    posts = [_post(store, content=f"post number {i}", author=f"a{i}") for i in range(3)]
    clock.advance(hours=1)
    store.toggle_reaction(posts[0].id, "r1", "fire")
    clock.advance(hours=1)
    store.toggle_reaction(posts[2].id, "r1", "sad")
    listed = store.list_confessions(sort="trending")
    scores = [trending_score(c, clock()) for c in listed]
    assert scores == sorted(scores, reverse=True)
    assert listed[0].id == posts[0].id


def test_category_filter_and_unknown_category(store):
    _post(store, content="rant rant rant", category="rant")
    _post(store, content="so wholesome", category="wholesome")
    assert [c.category.value for c in store.list_confessions(category="rant")] == ["rant"]
    assert len(store.list_confessions(category="nope")) == 2


def test_limit_is_clamped(store):
    for i in range(5):
        _post(store, content=f"post number {i}")
    assert len(store.list_confessions(limit=0)) == 1
    assert len(store.list_confessions(limit=2)) == 2
    assert len(store.list_confessions(limit=10_000)) == 5


# --- Retention ---------------------------------------------------------------

def test_cap_evicts_oldest_first(clock, rng):
    store = ContentStore(clock, rng, limits=StoreLimits(max_confessions=3))
    posts = []
    for i in range(5):
        posts.append(_post(store, content=f"post number {i}"))
        clock.advance(seconds=1)
        assert len(store.confessions) <= 3
    assert [c.id for c in store.confessions] == [p.id for p in reversed(posts[2:])]


def test_eviction_drops_comments_of_evicted(clock, rng):
    store = ContentStore(clock, rng, limits=StoreLimits(max_confessions=1))
    old = _post(store, content="old confession")
    store.create_comment("hello", "u2", "B", 1, confession_id=old.id)
    _post(store, content="new confession")
    assert store.comments == []
