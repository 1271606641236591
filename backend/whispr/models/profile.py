"""Profile ORM - anonymous per-device identity and karma counters.

Invariants:
    - id is the self-issued anonymous token (string primary key)
    - karma and counters are non-negative (enforced by the ledger, not the DB)
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from whispr.db.base import Base


class ProfileRow(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    alias: Mapped[str] = mapped_column(String(40), nullable=False)
    avatar_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    karma: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    confessions_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reactions_given: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    crushes_sent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matches_revealed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    last_reaction_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
