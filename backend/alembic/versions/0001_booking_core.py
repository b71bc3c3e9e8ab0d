"""booking core tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text("CURRENT_TIMESTAMP")


def _timestamps():
    return [
        sa.Column("created_at", sa.Text(), nullable=False, server_default=NOW),
        sa.Column("updated_at", sa.Text(), nullable=False, server_default=NOW),
    ]


def upgrade():
    op.create_table(
        "booking_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("branch_id", sa.Integer(), nullable=False, unique=True),
        sa.Column("open_time", sa.Text(), nullable=False),
        sa.Column("close_time", sa.Text(), nullable=False),
        sa.Column("interval_minutes", sa.Integer(), nullable=False, server_default=sa.text("90")),
        sa.Column("max_seats_per_slot", sa.Integer(), nullable=False, server_default=sa.text("25")),
        sa.Column("max_tables_per_slot", sa.Integer(), nullable=False, server_default=sa.text("10")),
        *_timestamps(),
        sa.CheckConstraint("interval_minutes > 0"),
        sa.CheckConstraint("max_seats_per_slot > 0"),
        sa.CheckConstraint("max_tables_per_slot > 0"),
    )

    op.create_table(
        "booking_overrides",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("branch_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("override_type", sa.Text(), nullable=False),
        sa.Column("start_time", sa.Text()),
        sa.Column("end_time", sa.Text()),
        sa.Column("new_max_seats", sa.Integer()),
        sa.Column("new_max_tables", sa.Integer()),
        sa.Column("note", sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint("branch_id", "date"),
        sa.CheckConstraint("override_type IN ('closed', 'modified')"),
    )

    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("branch_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("time", sa.Text(), nullable=False),
        sa.Column("max_seats", sa.Integer(), nullable=False),
        sa.Column("max_tables", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("branch_id", "date", "time"),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("branch_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("time", sa.Text(), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("user_id", sa.Integer()),
        sa.Column("guest_name", sa.Text()),
        sa.Column("guest_phone", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("cancel_reason", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint("party_size > 0"),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'cancelled', 'completed')"),
    )
    op.create_index("ix_bookings_slot", "bookings", ["branch_id", "date", "time", "status"])


def downgrade():
    op.drop_index("ix_bookings_slot", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("time_slots")
    op.drop_table("booking_overrides")
    op.drop_table("booking_settings")
