"""Initial schema: profiles, confessions, crushes, market_items, comments.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("alias", sa.String(40), nullable=False),
        sa.Column("avatar_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column("karma", sa.Integer, nullable=False, server_default="10"),
        sa.Column("confessions_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("reactions_given", sa.Integer, nullable=False, server_default="0"),
        sa.Column("crushes_sent", sa.Integer, nullable=False, server_default="0"),
        sa.Column("matches_revealed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_reaction_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "confessions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("author_id", sa.String(128), nullable=False),
        sa.Column("author_alias", sa.String(40), nullable=False),
        sa.Column("author_avatar_index", sa.Integer, nullable=False),
        sa.Column("author_karma", sa.Integer, nullable=False, server_default="0"),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("reactions", sa.JSON, nullable=False),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_after_dark", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("media_url", sa.Text, nullable=True),
        sa.Column("media_type", sa.String(10), nullable=True),
        sa.Column("media_thumbnail", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_confessions_author_id", "confessions", ["author_id"])

    op.create_table(
        "crushes",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("from_user_id", sa.String(128), nullable=False),
        sa.Column("to_alias", sa.String(40), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_revealed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_mutual", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_crushes_from_user_id", "crushes", ["from_user_id"])

    op.create_table(
        "market_items",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("price_cents", sa.Integer, nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("condition", sa.String(20), nullable=False),
        sa.Column("seller_id", sa.String(128), nullable=False),
        sa.Column("seller_alias", sa.String(40), nullable=False),
        sa.Column("seller_karma", sa.Integer, nullable=False, server_default="0"),
        sa.Column("seller_avatar_index", sa.Integer, nullable=False),
        sa.Column("is_sold", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("image_urls", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price_cents > 0", name="ck_market_items_price_positive"),
    )
    op.create_index("ix_market_items_seller_id", "market_items", ["seller_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("parent_id", sa.String(64), nullable=False),
        sa.Column("parent_type", sa.String(20), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("author_id", sa.String(128), nullable=False),
        sa.Column("author_alias", sa.String(40), nullable=False),
        sa.Column("author_avatar_index", sa.Integer, nullable=False),
        sa.Column("author_karma", sa.Integer, nullable=False, server_default="0"),
        sa.Column("likes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])


def downgrade() -> None:
    op.drop_index("ix_comments_parent_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_market_items_seller_id", table_name="market_items")
    op.drop_table("market_items")
    op.drop_index("ix_crushes_from_user_id", table_name="crushes")
    op.drop_table("crushes")
    op.drop_index("ix_confessions_author_id", table_name="confessions")
    op.drop_table("confessions")
    op.drop_table("profiles")
