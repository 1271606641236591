"""MarketItem ORM - peer marketplace listing.

Invariants:
    - price stored as integer cents (price_cents > 0)
    - image_urls holds at most 3 URLs

Design Decisions:
    - Integer cents over Float/Numeric: exact round-trip of the 2-decimal price
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from whispr.db.base import Base


class MarketItemRow(Base):
    __tablename__ = "market_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    condition: Mapped[str] = mapped_column(String(20), nullable=False)
    seller_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    seller_alias: Mapped[str] = mapped_column(String(40), nullable=False)
    seller_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    seller_avatar_index: Mapped[int] = mapped_column(Integer, nullable=False)
    is_sold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_urls: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
