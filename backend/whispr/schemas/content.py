"""Content Schemas - Pydantic request models for confessions, crushes, market and comments.

Invariants:
    - Schemas check shape and types only; length minimums, creation enums and
      price rules stay in the store so every caller gets the same verdict
    - reaction_type is the one enum checked here: the store cannot tell an
      unknown kind apart from an unknown confession
    - Upper bounds here are abuse guards, far above the store's truncation limits
    - user_id in a body is optional: the X-Whispr-Id header takes precedence

Design Decisions:
    - category/condition as plain str: the store rejects unknown values as a
      rejected creation (400 CONTENT_REJECTED), not a schema error
    - field_validator strips ids: "  " and "" are both treated as missing
"""

from pydantic import BaseModel, Field, field_validator

from whispr.core.domain_types import ReactionKind

_MAX_RAW_TEXT = 10_000
_MAX_RAW_URL = 2048


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return None
    return v.strip() or None


class CallerBody(BaseModel):
    """Base for bodies that may carry the caller's anonymous id."""
    user_id: str | None = Field(None, max_length=128)

    @field_validator("user_id")
    @classmethod
    def strip_user_id(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class ConfessionCreate(CallerBody):
    content: str = Field("", max_length=_MAX_RAW_TEXT)
    category: str = Field(max_length=32)
    author_alias: str | None = Field(None, max_length=200)
    author_avatar_index: int | None = Field(None, ge=0)
    is_after_dark: bool = False
    media_url: str | None = Field(None, max_length=_MAX_RAW_URL)
    media_type: str | None = Field(None, max_length=16)
    media_thumbnail: str | None = Field(None, max_length=_MAX_RAW_URL)


class ReactionToggle(CallerBody):
    """Reaction toggle. An unknown kind is a 400 VALIDATION_ERROR, not a missing confession."""
    reaction_type: ReactionKind


class CrushCreate(CallerBody):
    to_alias: str = Field(max_length=200)
    message: str = Field(max_length=_MAX_RAW_TEXT)


class MarketItemCreate(CallerBody):
    title: str = Field(max_length=1000)
    description: str = Field("", max_length=_MAX_RAW_TEXT)
    price: float
    category: str = Field(max_length=32)
    condition: str = Field(max_length=32)
    seller_alias: str | None = Field(None, max_length=200)
    seller_avatar_index: int | None = Field(None, ge=0)
    image_urls: list[str] = Field(default_factory=list, max_length=10)


class CommentCreate(CallerBody):
    content: str = Field(max_length=_MAX_RAW_TEXT)
    author_alias: str | None = Field(None, max_length=200)
    author_avatar_index: int | None = Field(None, ge=0)
