"""Ranking Engine - decaying, weighted trending score for confessions.

Invariants:
    - Score is recomputed on every read (age changes continuously, nothing cached)
    - age_hours is never negative: clock skew cannot inflate a score
    - rank_trending is a stable sort: equal scores keep their input order
"""

from datetime import datetime

from whispr.core.domain_types import REACTION_WEIGHTS
from whispr.core.entities import Confession

HALF_LIFE_HOURS = 12.0
DECAY_EXPONENT = 1.3


def raw_reaction_score(confession: Confession) -> float:
    """Weighted sum of reaction counts, without decay."""
    return sum(
        len(confession.reactions.get(kind, ())) * weight
        for kind, weight in REACTION_WEIGHTS.items()
    )


def decay_factor(created_at: datetime, now: datetime) -> float:
    age_hours = max(0.0, (now - created_at).total_seconds() / 3600)
    return 1 / (1 + age_hours / HALF_LIFE_HOURS) ** DECAY_EXPONENT


def trending_score(confession: Confession, now: datetime) -> float:
    return raw_reaction_score(confession) * decay_factor(confession.created_at, now)


def rank_trending(
    confessions: list[Confession], now: datetime,
) -> list[Confession]:
    """Return confessions ordered by descending trending score."""
    return sorted(
        confessions, key=lambda c: trending_score(c, now), reverse=True,
    )
