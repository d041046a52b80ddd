"""Initial schema: profiles, rides, trip bookings, messaging and blocks.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Profile ids come from the identity provider, never generated here
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("bio", sa.String(1000), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "rides",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("driver_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("title", sa.String(100), nullable=True),
        sa.Column("start_location", sa.String(100), nullable=False),
        sa.Column("end_location", sa.String(100), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.Time(), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False, server_default=sa.text("1")),
        # NULL means the driver does not track seats
        sa.Column("available_seats", sa.Integer(), nullable=True),
        sa.Column("price_per_seat", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'active'")),
        *_timestamps(),
        sa.CheckConstraint("available_seats IS NULL OR available_seats >= 0", name="check_ride_seats_non_negative"),
        sa.CheckConstraint("available_seats IS NULL OR available_seats <= total_seats", name="check_ride_seats_lte_total"),
        sa.CheckConstraint("total_seats > 0", name="check_ride_total_seats_positive"),
        sa.CheckConstraint("status IN ('active', 'cancelled', 'completed')", name="check_ride_status"),
    )
    op.create_index("ix_rides_driver_id", "rides", ["driver_id"])
    # Covers the public listing: WHERE status = 'active' AND departure_date >= today
    op.create_index("ix_rides_status_departure", "rides", ["status", "departure_date"])

    op.create_table(
        "trip_bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("ride_id", sa.Uuid(), sa.ForeignKey("rides.id", ondelete="CASCADE"), nullable=False),
        sa.Column("driver_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("passenger_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("pickup_location", sa.String(100), nullable=True),
        sa.Column("pickup_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("driver_notes", sa.String(500), nullable=True),
        sa.Column("passenger_notes", sa.String(500), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("ride_id", "passenger_id", name="uq_ride_passenger_booking"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'invited')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_trip_bookings_ride_id", "trip_bookings", ["ride_id"])
    op.create_index("ix_trip_bookings_driver_id", "trip_bookings", ["driver_id"])
    op.create_index("ix_trip_bookings_passenger_id", "trip_bookings", ["passenger_id"])

    op.create_table(
        "conversations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("participant1_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("participant2_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("ride_id", sa.Uuid(), sa.ForeignKey("rides.id", ondelete="SET NULL"), nullable=True),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_conversations_participants", "conversations", ["participant1_id", "participant2_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "conversation_id", sa.Uuid(), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("sender_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("ride_id", sa.Uuid(), sa.ForeignKey("rides.id", ondelete="SET NULL"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_recipient_id", "messages", ["recipient_id"])

    op.create_table(
        "user_blocks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("blocker_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("blocked_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_user_block_pair"),
        sa.CheckConstraint("blocker_id != blocked_id", name="check_block_not_self"),
    )
    op.create_index("ix_user_blocks_blocker_id", "user_blocks", ["blocker_id"])
    op.create_index("ix_user_blocks_blocked_id", "user_blocks", ["blocked_id"])


def downgrade() -> None:
    op.drop_table("user_blocks")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("trip_bookings")
    op.drop_table("rides")
    op.drop_table("profiles")
