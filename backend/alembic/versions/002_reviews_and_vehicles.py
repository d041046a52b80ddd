"""Reviews of completed trips and member vehicles.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "booking_id", sa.Uuid(), sa.ForeignKey("trip_bookings.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("reviewer_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("reviewee_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("reviewer_role", sa.String(20), nullable=False),
        sa.Column("reviewed_role", sa.String(20), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
        # One review per trip per reviewer
        sa.UniqueConstraint("booking_id", "reviewer_id", name="uq_review_booking_reviewer"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating"),
        sa.CheckConstraint("reviewer_role IN ('driver', 'passenger')", name="check_review_reviewer_role"),
        sa.CheckConstraint("reviewed_role IN ('driver', 'passenger')", name="check_review_reviewed_role"),
    )
    op.create_index("ix_reviews_booking_id", "reviews", ["booking_id"])
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("make", sa.String(50), nullable=False),
        sa.Column("model", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(50), nullable=False),
        sa.Column("license_plate", sa.String(20), nullable=True),
        sa.Column("drivetrain", sa.String(3), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("drivetrain IN ('FWD', 'RWD', 'AWD', '4WD')", name="check_vehicle_drivetrain"),
    )
    op.create_index("ix_vehicles_owner_id", "vehicles", ["owner_id"])


def downgrade() -> None:
    op.drop_table("vehicles")
    op.drop_table("reviews")
