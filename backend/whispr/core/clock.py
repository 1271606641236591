"""Clock - wall-clock source and time-window helpers.

Invariants:
    - utc_now() is always timezone-aware (UTC)
    - The After Dark window is 22:00 inclusive to 05:00 exclusive, local to the
      datetime passed in (display styling only, never a gate)
"""

from datetime import datetime, timezone

AFTER_DARK_START_HOUR = 22
AFTER_DARK_END_HOUR = 5


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_after_dark_hours(now: datetime) -> bool:
    return now.hour >= AFTER_DARK_START_HOUR or now.hour < AFTER_DARK_END_HOUR
