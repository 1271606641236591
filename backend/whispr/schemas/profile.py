"""Profile Schemas - anonymous profile requests and the public profile view."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from whispr.core.domain_types import AVATAR_COUNT
from whispr.core.entities import Profile
from whispr.core.profile_ledger import karma_level, karma_title


class ProfileCreate(BaseModel):
    """Optional client-chosen id (a device token); omitted means server-issued."""
    id: str | None = Field(None, max_length=128)

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProfileUpdate(BaseModel):
    alias: str | None = Field(None, max_length=200)
    avatar_index: int | None = Field(None, ge=0, lt=AVATAR_COUNT)


class ProfileResponse(BaseModel):
    id: str
    alias: str
    avatar_index: int
    karma: int
    karma_level: str
    karma_title: str
    confessions_count: int
    reactions_given: int
    crushes_sent: int
    matches_revealed: int
    created_at: datetime
    last_reaction_at: datetime | None = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            alias=profile.alias,
            avatar_index=profile.avatar_index,
            karma=profile.karma,
            karma_level=karma_level(profile.karma),
            karma_title=karma_title(profile.karma),
            confessions_count=profile.confessions_count,
            reactions_given=profile.reactions_given,
            crushes_sent=profile.crushes_sent,
            matches_revealed=profile.matches_revealed,
            created_at=profile.created_at,
            last_reaction_at=profile.last_reaction_at,
        )
