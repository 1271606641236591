"""Comment ORM - comment under a confession or a market item.

Invariants:
    - (parent_type, parent_id) points at exactly one confession or market item

Design Decisions:
    - Polymorphic parent columns instead of two nullable FKs: the store cascades
      deletes itself, the table only mirrors its state
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from whispr.db.base import Base


class CommentRow(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    parent_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    parent_type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(String(128), nullable=False)
    author_alias: Mapped[str] = mapped_column(String(40), nullable=False)
    author_avatar_index: Mapped[int] = mapped_column(Integer, nullable=False)
    author_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
