"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the LocalLens tables:
- profiles, guides
- itineraries
- bookings, messages
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("role", sa.Text(), nullable=False, server_default="traveler"),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("first_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("last_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("phone", sa.Text(), nullable=False, server_default=""),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "guides",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("specialty", JSONType, nullable=False),
        sa.Column("languages", JSONType, nullable=False),
        sa.Column("price_per_day", sa.Float(), nullable=False, server_default="0"),
        sa.Column("experience_years", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default="4.5"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("verification_document_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_guides_verified_location", "guides", ["verified", "location"])

    op.create_table(
        "itineraries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("data", JSONType, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_itineraries_user_created", "itineraries", ["user_id", "created_at"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("guide_id", sa.Uuid(), sa.ForeignKey("guides.id"), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_bookings_status"
        ),
    )
    op.create_index("idx_bookings_user", "bookings", ["user_id", "created_at"])
    op.create_index("idx_bookings_guide", "bookings", ["guide_id", "created_at"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("message_type", sa.Text(), nullable=False, server_default="text"),
        sa.Column("metadata", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_messages_booking_created", "messages", ["booking_id", "created_at"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_messages_booking_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_bookings_guide", table_name="bookings")
    op.drop_index("idx_bookings_user", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("idx_itineraries_user_created", table_name="itineraries")
    op.drop_table("itineraries")
    op.drop_index("idx_guides_verified_location", table_name="guides")
    op.drop_table("guides")
    op.drop_table("profiles")
