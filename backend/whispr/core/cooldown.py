"""Reaction Cooldown Guard - minimum spacing between one profile's reactions.

Invariants:
    - A cooling-down attempt is a silent no-op, never an error
    - Only attempts that reach the store stamp last_reaction_at
    - Independent of the author-cannot-react rule (that one lives in the store)
"""

from datetime import datetime, timedelta

DEFAULT_COOLDOWN_MS = 500


class ReactionCooldown:
    """Rate limit for reaction toggles, keyed off Profile.last_reaction_at."""

    def __init__(self, cooldown_ms: int = DEFAULT_COOLDOWN_MS):
        self.window = timedelta(milliseconds=cooldown_ms)

    def is_cooling_down(
        self, last_reaction_at: datetime | None, now: datetime,
    ) -> bool:
        if last_reaction_at is None:
            return False
        return now - last_reaction_at < self.window
