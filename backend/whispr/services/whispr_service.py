"""Whispr Service - orchestrates store, ledger, cooldown, persistence and realtime.

Invariants:
    - Every mutation runs under one asyncio.Lock: read entity, compute next
      state, single write back, with no interleaving between mutations
    - Ledger side effects happen only after the store mutation succeeded, once
    - Reads never take the lock and never mark the store dirty
    - Persistence is deferred to the DebouncedFlusher; a failed write never
      fails the operation that caused it
    - Realtime events are published after the lock is released
    - Caller ids are normalized once on entry, so the store, the ledger and the
      cooldown all see the same id

Design Decisions:
    - One explicitly constructed service per process, built by the app lifespan
      and injected into routes (no module-level store)
    - Karma snapshots on content come from the ledger when the author has a
      profile, so a client cannot inflate its displayed karma
    - Crush events omit from_user_id: the sender stays anonymous to observers
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Any, Callable

from whispr.core.clock import utc_now
from whispr.core.content_store import ContentStore
from whispr.core.cooldown import ReactionCooldown
from whispr.core.domain_types import AVATAR_COUNT, KarmaAction, SortMode
from whispr.core.entities import (
    Comment, Confession, Crush, MarketItem, Profile, ReactionResult,
)
from whispr.core.profile_ledger import ProfileLedger
from whispr.core.repository_protocols import EventPublisher, SnapshotBackend
from whispr.core.sanitize import normalize_caller_id, sanitize_alias
from whispr.core.store_snapshot import (
    StoreSnapshot, comment_to_dict, confession_to_dict, crush_to_dict,
    market_item_to_dict,
)
from whispr.infrastructure.flush_scheduler import DebouncedFlusher

logger = logging.getLogger(__name__)


class WhisprService:
    """Single entry point for every content and profile operation."""

    def __init__(
        self,
        store: ContentStore,
        ledger: ProfileLedger,
        backend: SnapshotBackend,
        publisher: EventPublisher | None = None,
        cooldown: ReactionCooldown | None = None,
        clock: Callable[[], datetime] = utc_now,
        debounce_ms: int = 250,
    ):
        self.store = store
        self.ledger = ledger
        self.backend = backend
        self.publisher = publisher
        self.cooldown = cooldown or ReactionCooldown()
        self._now = clock
        self._lock = asyncio.Lock()
        self.flusher = DebouncedFlusher(backend, self.snapshot, debounce_ms)

    @classmethod
    def build(
        cls,
        backend: SnapshotBackend,
        publisher: EventPublisher | None = None,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
        cooldown_ms: int = 500,
        mutual_probability: float = 0.4,
        debounce_ms: int = 250,
    ) -> "WhisprService":
        rng = rng or random.Random()
        return cls(
            store=ContentStore(clock, rng, mutual_probability=mutual_probability),
            ledger=ProfileLedger(clock, rng),
            backend=backend,
            publisher=publisher,
            cooldown=ReactionCooldown(cooldown_ms),
            clock=clock,
            debounce_ms=debounce_ms,
        )

    # ─── Lifecycle ──────────────────────────────────────────────

    async def initialize(self) -> None:
        """Load the persisted snapshot into the store and ledger."""
        snapshot = await self.backend.load()
        async with self._lock:
            self.store.load(
                snapshot.confessions, snapshot.crushes,
                snapshot.market_items, snapshot.comments,
            )
            self.ledger.load(snapshot.profiles)
        logger.info(
            f"Store initialized: {len(self.store.confessions)} confessions, "
            f"{len(self.store.crushes)} crushes, "
            f"{len(self.store.market_items)} market items, "
            f"{len(self.store.comments)} comments, "
            f"{len(snapshot.profiles)} profiles",
        )

    async def seed_if_empty(
        self, confessions: list[Confession], market_items: list[MarketItem],
    ) -> bool:
        """Load demo content into a store whose confession feed is empty."""
        async with self._lock:
            if self.store.confessions:
                return False
            self.store.load(
                confessions,
                self.store.crushes,
                self.store.market_items + market_items,
                self.store.comments,
            )
            self.flusher.mark_dirty()
        logger.info(
            f"Seeded {len(confessions)} sample confessions and "
            f"{len(market_items)} sample market items",
        )
        return True

    async def shutdown(self) -> None:
        await self.flusher.close()

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            confessions=list(self.store.confessions),
            crushes=list(self.store.crushes),
            market_items=list(self.store.market_items),
            comments=list(self.store.comments),
            profiles=self.ledger.all(),
        )

    async def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        if self.publisher is None:
            return
        await self.publisher.broadcast(event_type, payload)

    # ─── Profiles ───────────────────────────────────────────────

    def get_profile(self, profile_id: str) -> Profile | None:
        return self.ledger.get(profile_id)

    async def create_profile(self, profile_id: str | None = None) -> Profile:
        """Create a profile, or return the existing one for a known id."""
        async with self._lock:
            if profile_id and self.ledger.get(profile_id):
                return self.ledger.get(profile_id)
            profile = self.ledger.create_profile(profile_id)
            self.flusher.mark_dirty()
        return profile

    async def update_profile(
        self,
        profile_id: str,
        alias: str | None = None,
        avatar_index: int | None = None,
    ) -> Profile:
        changes: dict[str, object] = {}
        if alias is not None:
            changes["alias"] = sanitize_alias(alias, self.store.limits.max_alias_length)
        if avatar_index is not None:
            changes["avatar_index"] = max(0, min(avatar_index, AVATAR_COUNT - 1))
        async with self._lock:
            profile = self.ledger.update_profile(profile_id, **changes)
            self.flusher.mark_dirty()
        return profile

    async def regenerate_alias(self, profile_id: str) -> Profile:
        async with self._lock:
            profile = self.ledger.regenerate_alias(profile_id)
            self.flusher.mark_dirty()
        return profile

    # ─── Confessions ────────────────────────────────────────────

    def list_confessions(
        self,
        sort: SortMode | str = SortMode.RECENT,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Confession]:
        return self.store.list_confessions(sort=sort, category=category, limit=limit)

    async def create_confession(
        self,
        author_id: str,
        content: str,
        category: str,
        author_alias: str | None = None,
        author_avatar_index: int | None = None,
        is_after_dark: bool = False,
        media_url: str | None = None,
        media_type: str | None = None,
        media_thumbnail: str | None = None,
    ) -> Confession | None:
        author_id = normalize_caller_id(author_id)
        async with self._lock:
            profile = self.ledger.get(author_id)
            confession = self.store.create_confession(
                content=content,
                author_id=author_id,
                author_alias=author_alias or (profile.alias if profile else ""),
                author_avatar_index=_pick(
                    author_avatar_index, profile.avatar_index if profile else 0,
                ),
                author_karma=profile.karma if profile else 0,
                category=category,
                is_after_dark=is_after_dark,
                media_url=media_url,
                media_type=media_type,
                media_thumbnail=media_thumbnail,
            )
            if confession is None:
                return None
            self.ledger.get_or_create(confession.author_id)
            self.ledger.grant(confession.author_id, KarmaAction.CONFESSION)
            self.flusher.mark_dirty()
        await self._publish("confession:new", confession_to_dict(confession))
        return confession

    async def delete_confession(self, confession_id: str, user_id: str) -> bool:
        user_id = normalize_caller_id(user_id)
        async with self._lock:
            deleted = self.store.delete_confession(confession_id, user_id)
            if deleted:
                self.flusher.mark_dirty()
        if deleted:
            await self._publish("confession:deleted", {"id": confession_id})
        return deleted

    async def toggle_reaction(
        self, confession_id: str, user_id: str, kind: str,
    ) -> ReactionResult:
        """Toggle a reaction, subject to the cooldown and the no-self-reaction rule.

        Cooling down: silent no-op returning the current confession, added=False.
        """
        user_id = normalize_caller_id(user_id)
        async with self._lock:
            profile = self.ledger.get(user_id)
            if profile and self.cooldown.is_cooling_down(
                profile.last_reaction_at, self._now(),
            ):
                logger.debug(
                    "Reaction ignored during cooldown",
                    extra={"entity": "confession", "entity_id": confession_id},
                )
                return ReactionResult(
                    confession=self.store.get_confession(confession_id), added=False,
                )
            result = self.store.toggle_reaction(confession_id, user_id, kind)
            if result.confession is None or result.confession.author_id == user_id:
                return result
            self.ledger.get_or_create(user_id)
            self.ledger.record_reaction(user_id, result.added)
            self.flusher.mark_dirty()
        await self._publish("confession:reaction", {
            "confession_id": result.confession.id,
            "reaction_type": kind,
            "added": result.added,
            "counts": result.confession.reaction_counts(),
        })
        return result

    # ─── Crushes ────────────────────────────────────────────────

    def list_crushes(self, user_id: str) -> list[Crush]:
        return self.store.list_crushes(normalize_caller_id(user_id))

    async def send_crush(
        self, from_user_id: str, to_alias: str, message: str,
    ) -> Crush | None:
        from_user_id = normalize_caller_id(from_user_id)
        async with self._lock:
            crush = self.store.send_crush(from_user_id, to_alias, message)
            if crush is None:
                return None
            self.ledger.get_or_create(crush.from_user_id)
            self.ledger.grant(crush.from_user_id, KarmaAction.CRUSH)
            self.flusher.mark_dirty()
        await self._publish("crush:new", _public_crush(crush))
        return crush

    async def reveal_crush(self, crush_id: str, owner_id: str) -> Crush | None:
        owner_id = normalize_caller_id(owner_id)
        async with self._lock:
            before = self.store.get_crush(crush_id)
            crush = self.store.reveal_crush(crush_id, owner_id)
            first_reveal = (
                crush is not None and before is not None and not before.is_revealed
            )
            if first_reveal:
                self.ledger.get_or_create(owner_id)
                self.ledger.grant(owner_id, KarmaAction.CRUSH_REVEALED)
                self.flusher.mark_dirty()
        if first_reveal:
            await self._publish("crush:revealed", _public_crush(crush))
        return crush

    async def delete_crush(self, crush_id: str, owner_id: str) -> bool:
        owner_id = normalize_caller_id(owner_id)
        async with self._lock:
            deleted = self.store.delete_crush(crush_id, owner_id)
            if deleted:
                self.flusher.mark_dirty()
        if deleted:
            await self._publish("crush:deleted", {"id": crush_id})
        return deleted

    # ─── Market ─────────────────────────────────────────────────

    def list_market_items(
        self, category: str | None = None, limit: int | None = None,
    ) -> list[MarketItem]:
        return self.store.list_market_items(category=category, limit=limit)

    async def create_market_item(
        self,
        seller_id: str,
        title: str,
        description: str,
        price: float,
        category: str,
        condition: str,
        seller_alias: str | None = None,
        seller_avatar_index: int | None = None,
        image_urls: list[str] | None = None,
    ) -> MarketItem | None:
        seller_id = normalize_caller_id(seller_id)
        async with self._lock:
            profile = self.ledger.get(seller_id)
            item = self.store.create_market_item(
                title=title,
                description=description,
                price=price,
                category=category,
                condition=condition,
                seller_id=seller_id,
                seller_alias=seller_alias or (profile.alias if profile else ""),
                seller_avatar_index=_pick(
                    seller_avatar_index, profile.avatar_index if profile else 0,
                ),
                seller_karma=profile.karma if profile else 0,
                image_urls=image_urls,
            )
            if item is None:
                return None
            self.ledger.get_or_create(item.seller_id)
            self.ledger.grant(item.seller_id, KarmaAction.MARKET_LISTING)
            self.flusher.mark_dirty()
        await self._publish("market:new", market_item_to_dict(item))
        return item

    async def toggle_sold(self, item_id: str, seller_id: str) -> MarketItem | None:
        seller_id = normalize_caller_id(seller_id)
        async with self._lock:
            item = self.store.toggle_sold(item_id, seller_id)
            if item is not None:
                self.flusher.mark_dirty()
        if item is not None:
            await self._publish("market:sold", {"id": item.id, "is_sold": item.is_sold})
        return item

    async def delete_market_item(self, item_id: str, seller_id: str) -> bool:
        seller_id = normalize_caller_id(seller_id)
        async with self._lock:
            deleted = self.store.delete_market_item(item_id, seller_id)
            if deleted:
                self.flusher.mark_dirty()
        if deleted:
            await self._publish("market:deleted", {"id": item_id})
        return deleted

    # ─── Comments ───────────────────────────────────────────────

    def list_comments(
        self, parent_type: str, parent_id: str, limit: int | None = None,
    ) -> list[Comment]:
        return self.store.list_comments(parent_type, parent_id, limit)

    async def create_comment(
        self,
        author_id: str,
        content: str,
        confession_id: str | None = None,
        market_item_id: str | None = None,
        author_alias: str | None = None,
        author_avatar_index: int | None = None,
    ) -> Comment | None:
        author_id = normalize_caller_id(author_id)
        async with self._lock:
            profile = self.ledger.get(author_id)
            comment = self.store.create_comment(
                content=content,
                author_id=author_id,
                author_alias=author_alias or (profile.alias if profile else ""),
                author_avatar_index=_pick(
                    author_avatar_index, profile.avatar_index if profile else 0,
                ),
                author_karma=profile.karma if profile else 0,
                confession_id=confession_id,
                market_item_id=market_item_id,
            )
            if comment is None:
                return None
            self.ledger.get_or_create(comment.author_id)
            self.ledger.grant(comment.author_id, KarmaAction.COMMENT)
            self.flusher.mark_dirty()
        await self._publish("comment:new", comment_to_dict(comment))
        return comment

    async def delete_comment(self, comment_id: str, author_id: str) -> bool:
        author_id = normalize_caller_id(author_id)
        async with self._lock:
            comment = self.store.get_comment(comment_id)
            deleted = self.store.delete_comment(comment_id, author_id)
            if deleted:
                self.flusher.mark_dirty()
        if deleted:
            await self._publish("comment:deleted", {
                "id": comment_id,
                "parent_id": comment.parent_id,
                "parent_type": comment.parent_type.value,
            })
        return deleted


def _pick(value: int | None, fallback: int) -> int:
    return fallback if value is None else value


def _public_crush(crush: Crush) -> dict[str, Any]:
    payload = crush_to_dict(crush)
    payload.pop("from_user_id")
    return payload
