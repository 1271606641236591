"""Profile Ledger - owns anonymous profiles and is the only writer of karma.

Invariants:
    - Karma never drops below 0
    - Each successful content action is followed by exactly one grant() call;
      deletions never grant or revoke karma
    - regenerate_alias always yields an alias different from the current one
    - Profiles are never deleted by the system

Design Decisions:
    - Ids are self-issued anonymous tokens: get_or_create accepts whatever id the
      caller asserts (ADR: anonymity over authentication)
    - Clock and Random injected: deterministic tests, no ambient global state
"""

import logging
import random
import uuid
from dataclasses import fields, replace
from datetime import datetime
from typing import Callable

from whispr.core.domain_types import (
    ALIAS_POOL, AVATAR_COUNT, KARMA_DELTAS, KarmaAction, STARTING_KARMA,
)
from whispr.core.entities import Profile
from whispr.core.errors import ContentValidationError, ResourceNotFoundError

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
_UPDATABLE_FIELDS = frozenset(
    f.name for f in fields(Profile)
) - _IMMUTABLE_FIELDS

_COUNTER_FOR_ACTION: dict[KarmaAction, str] = {
    KarmaAction.CONFESSION: "confessions_count",
    KarmaAction.REACTION: "reactions_given",
    KarmaAction.CRUSH: "crushes_sent",
    KarmaAction.CRUSH_REVEALED: "matches_revealed",
}


def karma_level(karma: int) -> str:
    if karma >= 500:
        return "legendary"
    if karma >= 200:
        return "high"
    if karma >= 50:
        return "medium"
    return "low"


def karma_title(karma: int) -> str:
    if karma >= 500:
        return "Campus Legend"
    if karma >= 200:
        return "Whispr Elite"
    if karma >= 50:
        return "Regular"
    return "Newcomer"


class ProfileLedger:
    """In-memory profile registry keyed by anonymous id."""

    def __init__(
        self,
        clock: Callable[[], datetime],
        rng: random.Random,
        profiles: list[Profile] | None = None,
    ):
        self._now = clock
        self._rng = rng
        self._profiles: dict[str, Profile] = {
            p.id: p for p in (profiles or [])
        }

    # ─── Reads ──────────────────────────────────────────────────

    def get(self, profile_id: str) -> Profile | None:
        return self._profiles.get(profile_id)

    def all(self) -> list[Profile]:
        return list(self._profiles.values())

    def _require(self, profile_id: str) -> Profile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ResourceNotFoundError("Profile", profile_id)
        return profile

    # ─── Lifecycle ──────────────────────────────────────────────

    def load(self, profiles: list[Profile]) -> None:
        """Replace the registry with persisted profiles."""
        self._profiles = {p.id: p for p in profiles}

    def create_profile(self, profile_id: str | None = None) -> Profile:
        """Issue a fresh profile: random alias and avatar, starting karma."""
        profile = Profile(
            id=profile_id or str(uuid.uuid4()),
            alias=self._rng.choice(ALIAS_POOL),
            avatar_index=self._rng.randrange(AVATAR_COUNT),
            karma=STARTING_KARMA,
            created_at=self._now(),
        )
        self._profiles[profile.id] = profile
        logger.info(
            "Profile created", extra={"entity": "profile", "entity_id": profile.id},
        )
        return profile

    def get_or_create(self, profile_id: str) -> Profile:
        return self._profiles.get(profile_id) or self.create_profile(profile_id)

    def update_profile(self, profile_id: str, **changes: object) -> Profile:
        """Merge changes into the profile. Karma is floored at 0."""
        current = self._require(profile_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            name = sorted(unknown)[0]
            raise ContentValidationError(f"Unknown profile field '{name}'", name)
        if "karma" in changes:
            changes["karma"] = max(0, int(changes["karma"]))
        updated = replace(current, **changes)
        self._profiles[profile_id] = updated
        return updated

    def regenerate_alias(self, profile_id: str) -> Profile:
        """Draw a new alias (never the current one) and a new avatar index."""
        current = self._require(profile_id)
        choices = [a for a in ALIAS_POOL if a != current.alias]
        return self.update_profile(
            profile_id,
            alias=self._rng.choice(choices),
            avatar_index=self._rng.randrange(AVATAR_COUNT),
        )

    # ─── Side effects of store actions ──────────────────────────

    def grant(self, profile_id: str, action: KarmaAction) -> Profile:
        """Apply the fixed karma delta and counter bump for one successful action."""
        current = self._require(profile_id)
        return self.update_profile(profile_id, **_grant_changes(current, action))

    def record_reaction(self, profile_id: str, added: bool) -> Profile:
        """Stamp last_reaction_at; grant reaction karma only when the reaction was added."""
        current = self._require(profile_id)
        changes: dict[str, object] = {"last_reaction_at": self._now()}
        if added:
            changes.update(_grant_changes(current, KarmaAction.REACTION))
        return self.update_profile(profile_id, **changes)


def _grant_changes(current: Profile, action: KarmaAction) -> dict[str, object]:
    changes: dict[str, object] = {
        "karma": current.karma + KARMA_DELTAS[action],
    }
    counter = _COUNTER_FOR_ACTION.get(action)
    if counter:
        changes[counter] = getattr(current, counter) + 1
    return changes
