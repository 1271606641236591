"""Crush ORM - one-way anonymous crush from a sender to an alias."""

from datetime import datetime

from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from whispr.db.base import Base


class CrushRow(Base):
    __tablename__ = "crushes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    from_user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    to_alias: Mapped[str] = mapped_column(String(40), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_revealed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_mutual: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
