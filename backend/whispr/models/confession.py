"""Confession ORM - anonymous feed post with per-kind reaction lists.

Invariants:
    - reactions is a JSON object {kind: [user_id, ...]} for the five kinds
    - comment_count mirrors the number of comment rows pointing at this confession

Design Decisions:
    - JSON column for reactions: stored exactly as the snapshot shape, no join table
      (ADR: reactions are always read and written with their confession)
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from whispr.db.base import Base


class ConfessionRow(Base):
    __tablename__ = "confessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    author_alias: Mapped[str] = mapped_column(String(40), nullable=False)
    author_avatar_index: Mapped[int] = mapped_column(Integer, nullable=False)
    author_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    reactions: Mapped[dict] = mapped_column(JSON, nullable=False)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_after_dark: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    media_thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
