"""Content Store - the four bounded collections and every mutation on them.

Invariants:
    - Collections are newest-first; inserts go to the head, eviction trims the tail
    - len(collection) never exceeds its retention cap
    - Every mutation builds the full next entity, then assigns it in one step:
      an invalid input never leaves partial state behind
    - Failures are reported as None/False, never raised (validation, ownership
      and not-found are indistinguishable to callers)
    - A confession's comment_count equals the number of stored comments under it

Design Decisions:
    - Synchronous, no IO: the service layer owns locking, persistence and events
      (ADR: functional core, imperative shell)
    - Deleting or evicting a parent drops its comments (mirrors ON DELETE CASCADE)
    - Crush mutuality is a one-time weighted coin flip at send time; there is no
      cross-user verification behind it
"""

import logging
import random
import uuid
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Callable, TypeVar

from whispr.core.domain_types import (
    ConfessionCategory, DEFAULT_LIMITS, MarketCategory, MarketCondition,
    MediaType, MIN_COMMENT_LENGTH, MIN_CONFESSION_LENGTH, MIN_CRUSH_ALIAS_LENGTH,
    MIN_CRUSH_MESSAGE_LENGTH, MIN_TITLE_LENGTH, ParentType, ReactionKind,
    SortMode, StoreLimits, parse_enum,
)
from whispr.core.entities import (
    Comment, Confession, Crush, MarketItem, ReactionResult, empty_reactions,
)
from whispr.core.ranking import rank_trending
from whispr.core.sanitize import (
    clamp_non_negative_int, normalize_caller_id, sanitize_alias, sanitize_text,
    validate_price,
)

logger = logging.getLogger(__name__)

DEFAULT_MUTUAL_PROBABILITY = 0.4
_MAX_URL_LENGTH = 2048

T = TypeVar("T", Confession, Crush, MarketItem, Comment)


def new_id() -> str:
    return str(uuid.uuid4())


def _find_index(items: list[T], entity_id: str) -> int:
    for i, item in enumerate(items):
        if item.id == entity_id:
            return i
    return -1


def _clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None:
        limit = default
    return max(1, min(limit, maximum))


def _newest_first(items: list[T]) -> list[T]:
    return sorted(items, key=lambda i: i.created_at, reverse=True)


class ContentStore:
    """Owns confessions, crushes, market items and comments."""

    def __init__(
        self,
        clock: Callable[[], datetime],
        rng: random.Random,
        limits: StoreLimits = DEFAULT_LIMITS,
        mutual_probability: float = DEFAULT_MUTUAL_PROBABILITY,
    ):
        self._now = clock
        self._rng = rng
        self.limits = limits
        self.mutual_probability = mutual_probability
        self.confessions: list[Confession] = []
        self.crushes: list[Crush] = []
        self.market_items: list[MarketItem] = []
        self.comments: list[Comment] = []

    def load(
        self,
        confessions: list[Confession],
        crushes: list[Crush],
        market_items: list[MarketItem],
        comments: list[Comment],
    ) -> None:
        """Replace all collections, newest first and trimmed to their caps.

        Comments whose parent did not survive are dropped, and every
        confession's comment_count is recomputed from what remains.
        """
        self.confessions = _newest_first(confessions)[:self.limits.max_confessions]
        self.crushes = _newest_first(crushes)[:self.limits.max_crushes]
        self.market_items = _newest_first(market_items)[:self.limits.max_market_items]
        parents = {c.id for c in self.confessions} | {i.id for i in self.market_items}
        self.comments = _newest_first(
            [c for c in comments if c.parent_id in parents],
        )[:self.limits.max_comments]
        counts = Counter(
            c.parent_id for c in self.comments
            if c.parent_type is ParentType.CONFESSION
        )
        self.confessions = [
            replace(c, comment_count=counts[c.id]) for c in self.confessions
        ]

    # ─── Retention ──────────────────────────────────────────────

    def _insert_capped(self, items: list[T], entity: T, cap: int) -> list[T]:
        """Insert at the head and trim the tail. Returns the evicted entities."""
        items.insert(0, entity)
        evicted = items[cap:]
        del items[cap:]
        return evicted

    def _drop_comments_of(self, parent_ids: set[str]) -> None:
        if parent_ids:
            self.comments = [
                c for c in self.comments if c.parent_id not in parent_ids
            ]

    # ─── Confessions ────────────────────────────────────────────

    def get_confession(self, confession_id: str) -> Confession | None:
        idx = _find_index(self.confessions, confession_id)
        return self.confessions[idx] if idx != -1 else None

    def list_confessions(
        self,
        sort: SortMode | str = SortMode.RECENT,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Confession]:
        """List confessions. Unknown categories mean no filter; unknown sorts mean recent."""
        limit = _clamp_limit(
            limit, self.limits.default_page, self.limits.max_confession_page,
        )
        items = list(self.confessions)
        cat = parse_enum(ConfessionCategory, category) if category else None
        if cat:
            items = [c for c in items if c.category is cat]
        if parse_enum(SortMode, sort) is SortMode.TRENDING:
            items = rank_trending(items, self._now())
        else:
            items = _newest_first(items)
        return items[:limit]

    def create_confession(
        self,
        content: str,
        author_id: str,
        author_alias: str,
        author_avatar_index: int,
        category: str,
        author_karma: int = 0,
        is_after_dark: bool = False,
        media_url: str | None = None,
        media_type: str | None = None,
        media_thumbnail: str | None = None,
    ) -> Confession | None:
        cat = parse_enum(ConfessionCategory, category)
        author = normalize_caller_id(author_id)
        if cat is None or not author:
            return None
        text = sanitize_text(content, self.limits.max_confession_length)
        url = sanitize_text(media_url, _MAX_URL_LENGTH) or None
        if len(text) < MIN_CONFESSION_LENGTH and not url:
            return None

        confession = Confession(
            id=new_id(),
            content=text,
            author_id=author,
            author_alias=sanitize_alias(author_alias, self.limits.max_alias_length),
            author_avatar_index=clamp_non_negative_int(author_avatar_index),
            author_karma=clamp_non_negative_int(author_karma),
            category=cat,
            created_at=self._now(),
            reactions=empty_reactions(),
            is_after_dark=bool(is_after_dark) or cat is ConfessionCategory.AFTER_DARK,
            media_url=url,
            media_type=(
                (parse_enum(MediaType, media_type) or MediaType.IMAGE) if url else None
            ),
            media_thumbnail=(
                sanitize_text(media_thumbnail, _MAX_URL_LENGTH) or None if url else None
            ),
        )
        evicted = self._insert_capped(
            self.confessions, confession, self.limits.max_confessions,
        )
        self._drop_comments_of({c.id for c in evicted})
        return confession

    def delete_confession(self, confession_id: str, author_id: str) -> bool:
        idx = _find_index(self.confessions, confession_id)
        if idx == -1 or self.confessions[idx].author_id != author_id:
            return False
        del self.confessions[idx]
        self._drop_comments_of({confession_id})
        return True

    def toggle_reaction(
        self, confession_id: str, user_id: str, kind: str,
    ) -> ReactionResult:
        """Add the user's reaction of this kind if absent, remove it if present.

        The author reacting to their own confession is rejected without change.
        """
        reaction = parse_enum(ReactionKind, kind)
        user = normalize_caller_id(user_id)
        idx = _find_index(self.confessions, confession_id)
        if reaction is None or not user or idx == -1:
            return ReactionResult(confession=None, added=False)

        current = self.confessions[idx]
        if current.author_id == user:
            return ReactionResult(confession=current, added=False)

        users = current.reactions.get(reaction.value, ())
        added = user not in users
        next_users = users + (user,) if added else tuple(u for u in users if u != user)
        updated = replace(
            current, reactions={**current.reactions, reaction.value: next_users},
        )
        self.confessions[idx] = updated
        return ReactionResult(confession=updated, added=added)

    def _adjust_comment_count(self, confession_id: str, delta: int) -> None:
        idx = _find_index(self.confessions, confession_id)
        if idx == -1:
            return
        current = self.confessions[idx]
        self.confessions[idx] = replace(
            current, comment_count=max(0, current.comment_count + delta),
        )

    # ─── Crushes ────────────────────────────────────────────────

    def get_crush(self, crush_id: str) -> Crush | None:
        idx = _find_index(self.crushes, crush_id)
        return self.crushes[idx] if idx != -1 else None

    def list_crushes(self, user_id: str) -> list[Crush]:
        return _newest_first([c for c in self.crushes if c.from_user_id == user_id])

    def send_crush(
        self, from_user_id: str, to_alias: str, message: str,
    ) -> Crush | None:
        sender = normalize_caller_id(from_user_id)
        alias = sanitize_text(to_alias, self.limits.max_alias_length)
        text = sanitize_text(message, self.limits.max_crush_message_length)
        if (
            not sender
            or len(alias) < MIN_CRUSH_ALIAS_LENGTH
            or len(text) < MIN_CRUSH_MESSAGE_LENGTH
        ):
            return None

        target = alias.casefold()
        if any(
            c.from_user_id == sender and c.to_alias.casefold() == target
            for c in self.crushes
        ):
            logger.info(
                "Duplicate crush rejected", extra={"entity": "crush"},
            )
            return None

        crush = Crush(
            id=new_id(),
            from_user_id=sender,
            to_alias=alias,
            message=text,
            created_at=self._now(),
            is_mutual=self._rng.random() < self.mutual_probability,
        )
        self._insert_capped(self.crushes, crush, self.limits.max_crushes)
        return crush

    def reveal_crush(self, crush_id: str, owner_id: str) -> Crush | None:
        """Mark the crush revealed. Idempotent; sender only."""
        idx = _find_index(self.crushes, crush_id)
        if idx == -1 or self.crushes[idx].from_user_id != owner_id:
            return None
        current = self.crushes[idx]
        if current.is_revealed:
            return current
        updated = replace(current, is_revealed=True)
        self.crushes[idx] = updated
        return updated

    def delete_crush(self, crush_id: str, owner_id: str) -> bool:
        idx = _find_index(self.crushes, crush_id)
        if idx == -1 or self.crushes[idx].from_user_id != owner_id:
            return False
        del self.crushes[idx]
        return True

    # ─── Market Items ───────────────────────────────────────────

    def get_market_item(self, item_id: str) -> MarketItem | None:
        idx = _find_index(self.market_items, item_id)
        return self.market_items[idx] if idx != -1 else None

    def list_market_items(
        self, category: str | None = None, limit: int | None = None,
    ) -> list[MarketItem]:
        limit = _clamp_limit(
            limit, self.limits.default_page, self.limits.max_market_page,
        )
        items = list(self.market_items)
        cat = parse_enum(MarketCategory, category) if category else None
        if cat:
            items = [i for i in items if i.category is cat]
        return _newest_first(items)[:limit]

    def create_market_item(
        self,
        title: str,
        description: str,
        price: float,
        category: str,
        condition: str,
        seller_id: str,
        seller_alias: str,
        seller_avatar_index: int,
        seller_karma: int = 0,
        image_urls: list[str] | None = None,
    ) -> MarketItem | None:
        seller = normalize_caller_id(seller_id)
        clean_title = sanitize_text(title, self.limits.max_title_length)
        clean_price = validate_price(price)
        cat = parse_enum(MarketCategory, category)
        cond = parse_enum(MarketCondition, condition)
        if (
            not seller
            or len(clean_title) < MIN_TITLE_LENGTH
            or clean_price <= 0
            or cat is None
            or cond is None
        ):
            return None

        urls = [sanitize_text(u, _MAX_URL_LENGTH) for u in (image_urls or [])]
        item = MarketItem(
            id=new_id(),
            title=clean_title,
            description=sanitize_text(description, self.limits.max_description_length),
            price=clean_price,
            category=cat,
            condition=cond,
            seller_id=seller,
            seller_alias=sanitize_alias(seller_alias, self.limits.max_alias_length),
            seller_karma=clamp_non_negative_int(seller_karma),
            seller_avatar_index=clamp_non_negative_int(seller_avatar_index),
            created_at=self._now(),
            image_urls=tuple(u for u in urls if u)[:self.limits.max_market_images],
        )
        evicted = self._insert_capped(
            self.market_items, item, self.limits.max_market_items,
        )
        self._drop_comments_of({i.id for i in evicted})
        return item

    def toggle_sold(self, item_id: str, seller_id: str) -> MarketItem | None:
        idx = _find_index(self.market_items, item_id)
        if idx == -1 or self.market_items[idx].seller_id != seller_id:
            return None
        current = self.market_items[idx]
        updated = replace(current, is_sold=not current.is_sold)
        self.market_items[idx] = updated
        return updated

    def delete_market_item(self, item_id: str, seller_id: str) -> bool:
        idx = _find_index(self.market_items, item_id)
        if idx == -1 or self.market_items[idx].seller_id != seller_id:
            return False
        del self.market_items[idx]
        self._drop_comments_of({item_id})
        return True

    # ─── Comments ───────────────────────────────────────────────

    def get_comment(self, comment_id: str) -> Comment | None:
        idx = _find_index(self.comments, comment_id)
        return self.comments[idx] if idx != -1 else None

    def list_comments(
        self,
        parent_type: ParentType | str,
        parent_id: str,
        limit: int | None = None,
    ) -> list[Comment]:
        limit = _clamp_limit(
            limit, self.limits.default_page, self.limits.max_comment_page,
        )
        kind = parse_enum(ParentType, parent_type)
        items = [
            c for c in self.comments
            if c.parent_type is kind and c.parent_id == parent_id
        ]
        return _newest_first(items)[:limit]

    def create_comment(
        self,
        content: str,
        author_id: str,
        author_alias: str,
        author_avatar_index: int,
        author_karma: int = 0,
        confession_id: str | None = None,
        market_item_id: str | None = None,
    ) -> Comment | None:
        """Attach a comment to exactly one existing confession or market item."""
        author = normalize_caller_id(author_id)
        text = sanitize_text(content, self.limits.max_comment_length)
        if not author or len(text) < MIN_COMMENT_LENGTH:
            return None
        if bool(confession_id) == bool(market_item_id):
            return None
        if confession_id:
            parent_type, parent_id = ParentType.CONFESSION, confession_id
            exists = self.get_confession(confession_id) is not None
        else:
            parent_type, parent_id = ParentType.MARKET, market_item_id
            exists = self.get_market_item(market_item_id) is not None
        if not exists:
            return None

        comment = Comment(
            id=new_id(),
            parent_id=parent_id,
            parent_type=parent_type,
            content=text,
            author_id=author,
            author_alias=sanitize_alias(author_alias, self.limits.max_alias_length),
            author_avatar_index=clamp_non_negative_int(author_avatar_index),
            author_karma=clamp_non_negative_int(author_karma),
            created_at=self._now(),
        )
        evicted = self._insert_capped(
            self.comments, comment, self.limits.max_comments,
        )
        if parent_type is ParentType.CONFESSION:
            self._adjust_comment_count(parent_id, 1)
        for old in evicted:
            if old.parent_type is ParentType.CONFESSION:
                self._adjust_comment_count(old.parent_id, -1)
        return comment

    def delete_comment(self, comment_id: str, author_id: str) -> bool:
        idx = _find_index(self.comments, comment_id)
        if idx == -1 or self.comments[idx].author_id != author_id:
            return False
        comment = self.comments.pop(idx)
        if comment.parent_type is ParentType.CONFESSION:
            self._adjust_comment_count(comment.parent_id, -1)
        return True
