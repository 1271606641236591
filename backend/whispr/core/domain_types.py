"""Domain Types - enums, limits and constants shared across the content store.

Invariants:
    - All valid categories, reaction kinds and conditions encoded as str Enums
    - Collections are keyed by enum .value strings, never by Enum members
    - Limits are immutable (frozen dataclass); the store receives them by injection

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost (ADR: ids are opaque strings)
    - str Enums: serialize to JSON without custom encoders
    - parse_enum returns None instead of raising: the store reports invalid input
      as a rejected creation, not as an exception
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType, TypeVar


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
EntityId = NewType("EntityId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ConfessionCategory(str, Enum):
    """Confession feed categories."""
    CONFESSION = "confession"
    HOT_TAKE = "hot-take"
    RANT = "rant"
    WHOLESOME = "wholesome"
    AFTER_DARK = "after-dark"


class ReactionKind(str, Enum):
    """The five reactions every confession tracks."""
    FIRE = "fire"
    HEART = "heart"
    LAUGH = "laugh"
    SHOCK = "shock"
    SAD = "sad"


class MarketCategory(str, Enum):
    TEXTBOOKS = "textbooks"
    ELECTRONICS = "electronics"
    DORM = "dorm"
    CLOTHING = "clothing"
    SERVICES = "services"
    TICKETS = "tickets"
    OTHER = "other"


class MarketCondition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like-new"
    GOOD = "good"
    FAIR = "fair"


class ParentType(str, Enum):
    """Entities a comment can hang off."""
    CONFESSION = "confession"
    MARKET = "market"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class SortMode(str, Enum):
    RECENT = "recent"
    TRENDING = "trending"


class KarmaAction(str, Enum):
    """Actions that touch the profile ledger after a successful store mutation."""
    CONFESSION = "confession"
    REACTION = "reaction"
    CRUSH = "crush"
    MARKET_LISTING = "market_listing"
    COMMENT = "comment"
    CRUSH_REVEALED = "crush_revealed"


REACTION_KINDS: tuple[str, ...] = tuple(k.value for k in ReactionKind)

# Trending weights per reaction kind
REACTION_WEIGHTS: dict[str, float] = {
    ReactionKind.FIRE.value: 3.0,
    ReactionKind.HEART.value: 2.0,
    ReactionKind.LAUGH.value: 2.0,
    ReactionKind.SHOCK.value: 1.5,
    ReactionKind.SAD.value: 1.0,
}

KARMA_DELTAS: dict[KarmaAction, int] = {
    KarmaAction.CONFESSION: 5,
    KarmaAction.REACTION: 1,
    KarmaAction.CRUSH: 3,
    KarmaAction.MARKET_LISTING: 3,
    KarmaAction.COMMENT: 1,
    KarmaAction.CRUSH_REVEALED: 0,
}

STARTING_KARMA = 10
AVATAR_COUNT = 12

ALIAS_POOL: tuple[str, ...] = (
    "Shadow Fox", "Neon Ghost", "Midnight Owl", "Pixel Phantom",
    "Cosmic Drift", "Velvet Storm", "Arctic Flame", "Lucid Haze",
    "Echo Pulse", "Silent Spark", "Crimson Tide", "Cipher Wave",
    "Nova Dust", "Thunder Ink", "Prism Shade", "Astral Blur",
    "Iron Mist", "Onyx Glow", "Twilight Ash", "Crystal Veil",
)


# ─── Limits ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class StoreLimits:
    """Retention caps and field length limits for the content store."""
    max_confessions: int = 200
    max_crushes: int = 100
    max_market_items: int = 150
    max_comments: int = 500
    max_confession_length: int = 500
    max_crush_message_length: int = 200
    max_comment_length: int = 280
    max_title_length: int = 100
    max_description_length: int = 300
    max_alias_length: int = 40
    max_market_images: int = 3
    max_confession_page: int = 200
    max_market_page: int = 150
    max_comment_page: int = 200
    default_page: int = 100


DEFAULT_LIMITS = StoreLimits()

MIN_CONFESSION_LENGTH = 3
MIN_CRUSH_ALIAS_LENGTH = 2
MIN_CRUSH_MESSAGE_LENGTH = 2
MIN_TITLE_LENGTH = 3
MIN_COMMENT_LENGTH = 1

MIN_PRICE = 0.0
MAX_PRICE = 99999.0


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: object) -> E | None:
    """Parse a raw value into enum_cls, or None when it is not a member value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None
