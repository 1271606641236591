"""SQL Snapshot Backend - row-store persistence, one table per entity.

Invariants:
    - save() replaces every table's contents inside one transaction
    - load() maps each row through an explicit typed function; rows that fail
      validation are skipped with a warning, never loaded half-parsed
    - Market prices round-trip through integer cents

Design Decisions:
    - Whole-table replace over per-row upserts: the store is bounded (a few
      hundred rows per table) and writes are already debounced
    - Row mappers reuse store_snapshot's *_from_dict validators so the JSON and
      SQL backends enforce the same parse rules
"""

import logging
from typing import Callable, TypeVar

from sqlalchemy import delete, select

from whispr.core.entities import Comment, Confession, Crush, MarketItem, Profile
from whispr.core.store_snapshot import (
    StoreSnapshot, comment_from_dict, confession_from_dict, crush_from_dict,
    market_item_from_dict, profile_from_dict,
)
from whispr.infrastructure.database import DatabaseSessionManager
from whispr.models.comment import CommentRow
from whispr.models.confession import ConfessionRow
from whispr.models.crush import CrushRow
from whispr.models.market_item import MarketItemRow
from whispr.models.profile import ProfileRow

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


# ─── Row -> entity ──────────────────────────────────────────────

def confession_from_row(row: ConfessionRow) -> Confession:
    return confession_from_dict({
        "id": row.id,
        "content": row.content,
        "author_id": row.author_id,
        "author_alias": row.author_alias,
        "author_avatar_index": row.author_avatar_index,
        "author_karma": row.author_karma,
        "category": row.category,
        "reactions": row.reactions,
        "comment_count": row.comment_count,
        "is_after_dark": row.is_after_dark,
        "created_at": row.created_at,
        "media_url": row.media_url,
        "media_type": row.media_type,
        "media_thumbnail": row.media_thumbnail,
    })


def crush_from_row(row: CrushRow) -> Crush:
    return crush_from_dict({
        "id": row.id,
        "from_user_id": row.from_user_id,
        "to_alias": row.to_alias,
        "message": row.message,
        "is_revealed": row.is_revealed,
        "is_mutual": row.is_mutual,
        "created_at": row.created_at,
    })


def market_item_from_row(row: MarketItemRow) -> MarketItem:
    return market_item_from_dict({
        "id": row.id,
        "title": row.title,
        "description": row.description,
        "price": row.price_cents / 100,
        "category": row.category,
        "condition": row.condition,
        "seller_id": row.seller_id,
        "seller_alias": row.seller_alias,
        "seller_karma": row.seller_karma,
        "seller_avatar_index": row.seller_avatar_index,
        "is_sold": row.is_sold,
        "created_at": row.created_at,
        "image_urls": row.image_urls,
    })


def comment_from_row(row: CommentRow) -> Comment:
    return comment_from_dict({
        "id": row.id,
        "parent_id": row.parent_id,
        "parent_type": row.parent_type,
        "content": row.content,
        "author_id": row.author_id,
        "author_alias": row.author_alias,
        "author_avatar_index": row.author_avatar_index,
        "author_karma": row.author_karma,
        "created_at": row.created_at,
        "likes": row.likes,
    })


def profile_from_row(row: ProfileRow) -> Profile:
    return profile_from_dict({
        "id": row.id,
        "alias": row.alias,
        "avatar_index": row.avatar_index,
        "karma": row.karma,
        "confessions_count": row.confessions_count,
        "reactions_given": row.reactions_given,
        "crushes_sent": row.crushes_sent,
        "matches_revealed": row.matches_revealed,
        "created_at": row.created_at,
        "last_reaction_at": row.last_reaction_at,
    })


# ─── Entity -> row ──────────────────────────────────────────────

def confession_to_row(c: Confession) -> ConfessionRow:
    return ConfessionRow(
        id=c.id, content=c.content, author_id=c.author_id,
        author_alias=c.author_alias, author_avatar_index=c.author_avatar_index,
        author_karma=c.author_karma, category=c.category.value,
        reactions={kind: list(users) for kind, users in c.reactions.items()},
        comment_count=c.comment_count, is_after_dark=c.is_after_dark,
        media_url=c.media_url,
        media_type=c.media_type.value if c.media_type else None,
        media_thumbnail=c.media_thumbnail, created_at=c.created_at,
    )


def crush_to_row(c: Crush) -> CrushRow:
    return CrushRow(
        id=c.id, from_user_id=c.from_user_id, to_alias=c.to_alias,
        message=c.message, is_revealed=c.is_revealed, is_mutual=c.is_mutual,
        created_at=c.created_at,
    )


def market_item_to_row(i: MarketItem) -> MarketItemRow:
    return MarketItemRow(
        id=i.id, title=i.title, description=i.description,
        price_cents=round(i.price * 100), category=i.category.value,
        condition=i.condition.value, seller_id=i.seller_id,
        seller_alias=i.seller_alias, seller_karma=i.seller_karma,
        seller_avatar_index=i.seller_avatar_index, is_sold=i.is_sold,
        image_urls=list(i.image_urls), created_at=i.created_at,
    )


def comment_to_row(c: Comment) -> CommentRow:
    return CommentRow(
        id=c.id, parent_id=c.parent_id, parent_type=c.parent_type.value,
        content=c.content, author_id=c.author_id, author_alias=c.author_alias,
        author_avatar_index=c.author_avatar_index, author_karma=c.author_karma,
        likes=c.likes, created_at=c.created_at,
    )


def profile_to_row(p: Profile) -> ProfileRow:
    return ProfileRow(
        id=p.id, alias=p.alias, avatar_index=p.avatar_index, karma=p.karma,
        confessions_count=p.confessions_count, reactions_given=p.reactions_given,
        crushes_sent=p.crushes_sent, matches_revealed=p.matches_revealed,
        created_at=p.created_at, last_reaction_at=p.last_reaction_at,
    )


def _map_rows(rows: list[R], mapper: Callable[[R], T], entity: str) -> list[T]:
    mapped: list[T] = []
    for row in rows:
        try:
            mapped.append(mapper(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Skipping invalid {entity} row: {e}", extra={"entity": entity},
            )
    return mapped


_TABLES = (ConfessionRow, CrushRow, MarketItemRow, CommentRow, ProfileRow)


class SqlSnapshotBackend:
    """SnapshotBackend over SQLAlchemy async sessions."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self.db_manager = db_manager

    async def load(self) -> StoreSnapshot:
        async with self.db_manager.session() as db:
            confessions = (await db.execute(select(ConfessionRow))).scalars().all()
            crushes = (await db.execute(select(CrushRow))).scalars().all()
            items = (await db.execute(select(MarketItemRow))).scalars().all()
            comments = (await db.execute(select(CommentRow))).scalars().all()
            profiles = (await db.execute(select(ProfileRow))).scalars().all()
        return StoreSnapshot(
            confessions=_map_rows(list(confessions), confession_from_row, "confession"),
            crushes=_map_rows(list(crushes), crush_from_row, "crush"),
            market_items=_map_rows(list(items), market_item_from_row, "market_item"),
            comments=_map_rows(list(comments), comment_from_row, "comment"),
            profiles=_map_rows(list(profiles), profile_from_row, "profile"),
        )

    async def save(self, snapshot: StoreSnapshot) -> None:
        async with self.db_manager.session() as db:
            for table in _TABLES:
                await db.execute(delete(table))
            db.add_all([confession_to_row(c) for c in snapshot.confessions])
            db.add_all([crush_to_row(c) for c in snapshot.crushes])
            db.add_all([market_item_to_row(i) for i in snapshot.market_items])
            db.add_all([comment_to_row(c) for c in snapshot.comments])
            db.add_all([profile_to_row(p) for p in snapshot.profiles])
            await db.commit()

    async def health_check(self) -> bool:
        return await self.db_manager.health_check()
