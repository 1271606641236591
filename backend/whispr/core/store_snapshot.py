"""Store Snapshot - explicit, typed mapping between entities and JSON-safe dicts.

Invariants:
    - *_to_dict produces JSON-safe dicts (ISO timestamps, enum .value strings, lists)
    - *_from_dict parses untrusted rows: bad rows raise, parse_rows skips them
    - Parsed confessions always carry all five reaction kinds with distinct user ids
    - Missing optional keys fall back to entity defaults (forward-compatible)

Design Decisions:
    - One mapping function per entity instead of generic reflection
      (ADR: parse, don't trust, at the persistence boundary)
    - Same dict shape is used for the JSON file, API payloads and realtime events
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from whispr.core.domain_types import (
    ConfessionCategory, MarketCategory, MarketCondition, MediaType, ParentType,
    REACTION_KINDS,
)
from whispr.core.entities import Comment, Confession, Crush, MarketItem, Profile
from whispr.core.sanitize import clamp_non_negative_int

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StoreSnapshot:
    """Everything that is persisted: four content collections plus profiles."""
    confessions: list[Confession] = field(default_factory=list)
    crushes: list[Crush] = field(default_factory=list)
    market_items: list[MarketItem] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)


# ─── Primitive parsing ──────────────────────────────────────────

def format_datetime(value: datetime) -> str:
    return value.isoformat()


def parse_datetime(value: object) -> datetime:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Expected datetime string, got {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_datetime(value: object) -> datetime | None:
    return parse_datetime(value) if value else None


def _required_str(row: dict, key: str) -> str:
    value = row[key]
    if not isinstance(value, str) or not value:
        raise ValueError(f"Field '{key}' must be a non-empty string")
    return value


def _optional_str(row: dict, key: str) -> str | None:
    value = row.get(key)
    return value if isinstance(value, str) and value else None


def parse_reactions(value: object) -> dict[str, tuple[str, ...]]:
    """Normalize a reactions mapping: all five kinds, distinct ids, order kept."""
    source = value if isinstance(value, dict) else {}
    reactions: dict[str, tuple[str, ...]] = {}
    for kind in REACTION_KINDS:
        users = source.get(kind) or []
        if not isinstance(users, (list, tuple)):
            raise ValueError(f"Reaction '{kind}' must be a list")
        reactions[kind] = tuple(
            dict.fromkeys(u for u in users if isinstance(u, str) and u)
        )
    return reactions


# ─── Profile ────────────────────────────────────────────────────

def profile_to_dict(p: Profile) -> dict[str, Any]:
    return {
        "id": p.id,
        "alias": p.alias,
        "avatar_index": p.avatar_index,
        "karma": p.karma,
        "confessions_count": p.confessions_count,
        "reactions_given": p.reactions_given,
        "crushes_sent": p.crushes_sent,
        "matches_revealed": p.matches_revealed,
        "created_at": format_datetime(p.created_at),
        "last_reaction_at": (
            format_datetime(p.last_reaction_at) if p.last_reaction_at else None
        ),
    }


def profile_from_dict(row: dict) -> Profile:
    return Profile(
        id=_required_str(row, "id"),
        alias=_required_str(row, "alias"),
        avatar_index=clamp_non_negative_int(row.get("avatar_index", 0)),
        karma=clamp_non_negative_int(row.get("karma", 0)),
        created_at=parse_datetime(row["created_at"]),
        confessions_count=clamp_non_negative_int(row.get("confessions_count", 0)),
        reactions_given=clamp_non_negative_int(row.get("reactions_given", 0)),
        crushes_sent=clamp_non_negative_int(row.get("crushes_sent", 0)),
        matches_revealed=clamp_non_negative_int(row.get("matches_revealed", 0)),
        last_reaction_at=_optional_datetime(row.get("last_reaction_at")),
    )


# ─── Confession ─────────────────────────────────────────────────

def confession_to_dict(c: Confession) -> dict[str, Any]:
    return {
        "id": c.id,
        "content": c.content,
        "author_id": c.author_id,
        "author_alias": c.author_alias,
        "author_avatar_index": c.author_avatar_index,
        "author_karma": c.author_karma,
        "category": c.category.value,
        "reactions": {kind: list(users) for kind, users in c.reactions.items()},
        "comment_count": c.comment_count,
        "is_after_dark": c.is_after_dark,
        "created_at": format_datetime(c.created_at),
        "media_url": c.media_url,
        "media_type": c.media_type.value if c.media_type else None,
        "media_thumbnail": c.media_thumbnail,
    }


def confession_from_dict(row: dict) -> Confession:
    media_type = row.get("media_type")
    return Confession(
        id=_required_str(row, "id"),
        content=str(row["content"]),
        author_id=_required_str(row, "author_id"),
        author_alias=_required_str(row, "author_alias"),
        author_avatar_index=clamp_non_negative_int(row.get("author_avatar_index", 0)),
        author_karma=clamp_non_negative_int(row.get("author_karma", 0)),
        category=ConfessionCategory(row["category"]),
        created_at=parse_datetime(row["created_at"]),
        reactions=parse_reactions(row.get("reactions")),
        comment_count=clamp_non_negative_int(row.get("comment_count", 0)),
        is_after_dark=bool(row.get("is_after_dark", False)),
        media_url=_optional_str(row, "media_url"),
        media_type=MediaType(media_type) if media_type else None,
        media_thumbnail=_optional_str(row, "media_thumbnail"),
    )


# ─── Crush ──────────────────────────────────────────────────────

def crush_to_dict(c: Crush) -> dict[str, Any]:
    return {
        "id": c.id,
        "from_user_id": c.from_user_id,
        "to_alias": c.to_alias,
        "message": c.message,
        "is_revealed": c.is_revealed,
        "is_mutual": c.is_mutual,
        "created_at": format_datetime(c.created_at),
    }


def crush_from_dict(row: dict) -> Crush:
    return Crush(
        id=_required_str(row, "id"),
        from_user_id=_required_str(row, "from_user_id"),
        to_alias=_required_str(row, "to_alias"),
        message=str(row["message"]),
        created_at=parse_datetime(row["created_at"]),
        is_revealed=bool(row.get("is_revealed", False)),
        is_mutual=bool(row.get("is_mutual", False)),
    )


# ─── Market item ────────────────────────────────────────────────

def market_item_to_dict(i: MarketItem) -> dict[str, Any]:
    return {
        "id": i.id,
        "title": i.title,
        "description": i.description,
        "price": i.price,
        "category": i.category.value,
        "condition": i.condition.value,
        "seller_id": i.seller_id,
        "seller_alias": i.seller_alias,
        "seller_karma": i.seller_karma,
        "seller_avatar_index": i.seller_avatar_index,
        "is_sold": i.is_sold,
        "created_at": format_datetime(i.created_at),
        "image_urls": list(i.image_urls),
    }


def market_item_from_dict(row: dict) -> MarketItem:
    price = row["price"]
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price <= 0:
        raise ValueError("Field 'price' must be a positive number")
    urls = row.get("image_urls") or []
    return MarketItem(
        id=_required_str(row, "id"),
        title=_required_str(row, "title"),
        description=str(row.get("description", "")),
        price=float(price),
        category=MarketCategory(row["category"]),
        condition=MarketCondition(row["condition"]),
        seller_id=_required_str(row, "seller_id"),
        seller_alias=_required_str(row, "seller_alias"),
        seller_karma=clamp_non_negative_int(row.get("seller_karma", 0)),
        seller_avatar_index=clamp_non_negative_int(row.get("seller_avatar_index", 0)),
        created_at=parse_datetime(row["created_at"]),
        is_sold=bool(row.get("is_sold", False)),
        image_urls=tuple(u for u in urls if isinstance(u, str) and u)[:3],
    )


# ─── Comment ────────────────────────────────────────────────────

def comment_to_dict(c: Comment) -> dict[str, Any]:
    return {
        "id": c.id,
        "parent_id": c.parent_id,
        "parent_type": c.parent_type.value,
        "content": c.content,
        "author_id": c.author_id,
        "author_alias": c.author_alias,
        "author_avatar_index": c.author_avatar_index,
        "author_karma": c.author_karma,
        "created_at": format_datetime(c.created_at),
        "likes": c.likes,
    }


def comment_from_dict(row: dict) -> Comment:
    return Comment(
        id=_required_str(row, "id"),
        parent_id=_required_str(row, "parent_id"),
        parent_type=ParentType(row["parent_type"]),
        content=_required_str(row, "content"),
        author_id=_required_str(row, "author_id"),
        author_alias=_required_str(row, "author_alias"),
        author_avatar_index=clamp_non_negative_int(row.get("author_avatar_index", 0)),
        author_karma=clamp_non_negative_int(row.get("author_karma", 0)),
        created_at=parse_datetime(row["created_at"]),
        likes=clamp_non_negative_int(row.get("likes", 0)),
    )


# ─── Whole snapshot ─────────────────────────────────────────────

def parse_rows(
    rows: object, parser: Callable[[dict], T], entity: str,
) -> list[T]:
    """Parse each row, skipping (and logging) rows that fail validation."""
    if not isinstance(rows, list):
        return []
    parsed: list[T] = []
    for row in rows:
        try:
            if not isinstance(row, dict):
                raise TypeError("row is not an object")
            parsed.append(parser(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Skipping invalid {entity} row: {e}", extra={"entity": entity},
            )
    return parsed


def snapshot_to_dict(snapshot: StoreSnapshot) -> dict[str, list[dict]]:
    return {
        "confessions": [confession_to_dict(c) for c in snapshot.confessions],
        "crushes": [crush_to_dict(c) for c in snapshot.crushes],
        "market_items": [market_item_to_dict(i) for i in snapshot.market_items],
        "comments": [comment_to_dict(c) for c in snapshot.comments],
        "profiles": [profile_to_dict(p) for p in snapshot.profiles],
    }


def snapshot_from_dict(data: object) -> StoreSnapshot:
    """Rebuild a snapshot from untrusted data. Anything unusable is dropped."""
    if not isinstance(data, dict):
        return StoreSnapshot()
    return StoreSnapshot(
        confessions=parse_rows(data.get("confessions"), confession_from_dict, "confession"),
        crushes=parse_rows(data.get("crushes"), crush_from_dict, "crush"),
        market_items=parse_rows(data.get("market_items"), market_item_from_dict, "market_item"),
        comments=parse_rows(data.get("comments"), comment_from_dict, "comment"),
        profiles=parse_rows(data.get("profiles"), profile_from_dict, "profile"),
    )
