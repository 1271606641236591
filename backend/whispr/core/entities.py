"""Entities - immutable records owned by the content store and profile ledger.

Invariants:
    - Every entity is a frozen dataclass: mutation means building a new value
      with dataclasses.replace and assigning it back in one step
    - Confession.reactions always has exactly the five ReactionKind values as keys,
      each mapping to a tuple of distinct user ids in insertion order
    - Comment references exactly one parent through (parent_type, parent_id)

Design Decisions:
    - Tuples for reaction user ids: ordered for stable JSON, immutable like the record
    - created_at is a timezone-aware datetime (UTC); serialization lives in store_snapshot
"""

from dataclasses import dataclass, field
from datetime import datetime

from whispr.core.domain_types import (
    ConfessionCategory, MarketCategory, MarketCondition, MediaType, ParentType,
    REACTION_KINDS,
)


def empty_reactions() -> dict[str, tuple[str, ...]]:
    return {kind: () for kind in REACTION_KINDS}


@dataclass(frozen=True)
class Profile:
    """Anonymous per-device identity. Only the profile ledger writes it."""
    id: str
    alias: str
    avatar_index: int
    karma: int
    created_at: datetime
    confessions_count: int = 0
    reactions_given: int = 0
    crushes_sent: int = 0
    matches_revealed: int = 0
    last_reaction_at: datetime | None = None


@dataclass(frozen=True)
class Confession:
    id: str
    content: str
    author_id: str
    author_alias: str
    author_avatar_index: int
    author_karma: int
    category: ConfessionCategory
    created_at: datetime
    reactions: dict[str, tuple[str, ...]] = field(default_factory=empty_reactions)
    comment_count: int = 0
    is_after_dark: bool = False
    media_url: str | None = None
    media_type: MediaType | None = None
    media_thumbnail: str | None = None

    def reaction_counts(self) -> dict[str, int]:
        return {kind: len(users) for kind, users in self.reactions.items()}


@dataclass(frozen=True)
class Crush:
    id: str
    from_user_id: str
    to_alias: str
    message: str
    created_at: datetime
    is_revealed: bool = False
    is_mutual: bool = False


@dataclass(frozen=True)
class MarketItem:
    id: str
    title: str
    description: str
    price: float
    category: MarketCategory
    condition: MarketCondition
    seller_id: str
    seller_alias: str
    seller_karma: int
    seller_avatar_index: int
    created_at: datetime
    is_sold: bool = False
    image_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class Comment:
    id: str
    parent_id: str
    parent_type: ParentType
    content: str
    author_id: str
    author_alias: str
    author_avatar_index: int
    author_karma: int
    created_at: datetime
    likes: int = 0


@dataclass(frozen=True)
class ReactionResult:
    """Outcome of a reaction toggle. confession is None when the target is unknown."""
    confession: Confession | None
    added: bool
