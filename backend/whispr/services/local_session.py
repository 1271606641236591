"""Local Session - single-device facade over WhisprService.

Binds one device profile to the service so callers operate without passing ids.

Invariants:
    - start() must run before any operation; it loads or creates the device profile
    - Every operation acts as the device profile; ids are never taken from callers
    - profile always reflects the ledger after the last operation

Design Decisions:
    - After Dark is a clock-derived flag (22:00-05:00), recomputed on every read
    - Sample data seeding is opt-in and only touches an empty feed
"""

import logging
from datetime import datetime
from typing import Callable

from whispr.core.clock import is_after_dark_hours, utc_now
from whispr.core.domain_types import ParentType, SortMode, parse_enum
from whispr.core.entities import (
    Comment, Confession, Crush, MarketItem, Profile, ReactionResult,
)
from whispr.services.sample_data import sample_confessions, sample_market_items
from whispr.services.whispr_service import WhisprService

logger = logging.getLogger(__name__)


class LocalWhisprSession:
    """Operations on behalf of the one profile that owns this device."""

    def __init__(
        self,
        service: WhisprService,
        device_id: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.service = service
        self._device_id = device_id
        self._now = clock
        self._profile: Profile | None = None

    async def start(self, seed_sample_data: bool = False) -> Profile:
        self._profile = await self.service.create_profile(self._device_id)
        self._device_id = self._profile.id
        if seed_sample_data:
            now = self._now()
            await self.service.seed_if_empty(
                sample_confessions(now), sample_market_items(now),
            )
        return self._profile

    @property
    def profile(self) -> Profile:
        if self._profile is None:
            raise RuntimeError("LocalWhisprSession.start() has not been called")
        return self._profile

    @property
    def is_after_dark(self) -> bool:
        return is_after_dark_hours(self._now())

    def _refresh(self) -> None:
        self._profile = self.service.get_profile(self.profile.id) or self._profile

    # ─── Profile ────────────────────────────────────────────────

    async def regenerate_profile(self) -> Profile:
        self._profile = await self.service.regenerate_alias(self.profile.id)
        return self._profile

    async def update_profile(
        self, alias: str | None = None, avatar_index: int | None = None,
    ) -> Profile:
        self._profile = await self.service.update_profile(
            self.profile.id, alias=alias, avatar_index=avatar_index,
        )
        return self._profile

    # ─── Confessions ────────────────────────────────────────────

    def confessions(
        self, sort: SortMode | str = SortMode.RECENT, category: str | None = None,
    ) -> list[Confession]:
        return self.service.list_confessions(sort=sort, category=category)

    async def add_confession(
        self,
        content: str,
        category: str,
        media_url: str | None = None,
        media_type: str | None = None,
        media_thumbnail: str | None = None,
    ) -> Confession | None:
        confession = await self.service.create_confession(
            author_id=self.profile.id,
            content=content,
            category=category,
            is_after_dark=self.is_after_dark,
            media_url=media_url,
            media_type=media_type,
            media_thumbnail=media_thumbnail,
        )
        self._refresh()
        return confession

    async def delete_confession(self, confession_id: str) -> bool:
        return await self.service.delete_confession(confession_id, self.profile.id)

    async def toggle_reaction(self, confession_id: str, kind: str) -> ReactionResult:
        result = await self.service.toggle_reaction(confession_id, self.profile.id, kind)
        self._refresh()
        return result

    # ─── Crushes ────────────────────────────────────────────────

    def crushes(self) -> list[Crush]:
        return self.service.list_crushes(self.profile.id)

    async def send_crush(self, to_alias: str, message: str) -> Crush | None:
        crush = await self.service.send_crush(self.profile.id, to_alias, message)
        self._refresh()
        return crush

    async def reveal_crush(self, crush_id: str) -> Crush | None:
        crush = await self.service.reveal_crush(crush_id, self.profile.id)
        self._refresh()
        return crush

    async def delete_crush(self, crush_id: str) -> bool:
        return await self.service.delete_crush(crush_id, self.profile.id)

    # ─── Market ─────────────────────────────────────────────────

    def market_items(self, category: str | None = None) -> list[MarketItem]:
        return self.service.list_market_items(category=category)

    async def add_market_item(
        self,
        title: str,
        description: str,
        price: float,
        category: str,
        condition: str,
        image_urls: list[str] | None = None,
    ) -> MarketItem | None:
        item = await self.service.create_market_item(
            seller_id=self.profile.id,
            title=title,
            description=description,
            price=price,
            category=category,
            condition=condition,
            image_urls=image_urls,
        )
        self._refresh()
        return item

    async def toggle_sold(self, item_id: str) -> MarketItem | None:
        return await self.service.toggle_sold(item_id, self.profile.id)

    async def delete_market_item(self, item_id: str) -> bool:
        return await self.service.delete_market_item(item_id, self.profile.id)

    # ─── Comments ───────────────────────────────────────────────

    def comments(self, parent_type: ParentType | str, parent_id: str) -> list[Comment]:
        return self.service.list_comments(parent_type, parent_id)

    async def add_comment(
        self, parent_type: ParentType | str, parent_id: str, content: str,
    ) -> Comment | None:
        kind = parse_enum(ParentType, parent_type)
        if kind is None:
            return None
        is_confession = kind is ParentType.CONFESSION
        comment = await self.service.create_comment(
            author_id=self.profile.id,
            content=content,
            confession_id=parent_id if is_confession else None,
            market_item_id=None if is_confession else parent_id,
        )
        self._refresh()
        return comment

    async def delete_comment(self, comment_id: str) -> bool:
        return await self.service.delete_comment(comment_id, self.profile.id)
