"""tracking_sessions, location_updates, tracking_share_links

Revision ID: d4b6f8c0e234
Revises: c3a5e7b9d123
Create Date: 2026-09-08

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "d4b6f8c0e234"
down_revision: Union[str, None] = "c3a5e7b9d123"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tracking_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("master_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="ACTIVE"),
        sa.Column("settings", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("current_latitude", sa.Float(), nullable=True),
        sa.Column("current_longitude", sa.Float(), nullable=True),
        sa.Column("stats", postgresql.JSONB(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_update_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["master_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["client_id"], ["users.id"], ondelete="SET NULL"),
    )
    for column in ("master_id", "client_id", "booking_id", "project_id", "status"):
        op.create_index(op.f(f"ix_tracking_sessions_{column}"), "tracking_sessions", [column], unique=False)

    op.create_table(
        "location_updates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tracking_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("accuracy", sa.Float(), nullable=True),
        sa.Column("altitude", sa.Float(), nullable=True),
        sa.Column("heading", sa.Float(), nullable=True),
        sa.Column("speed", sa.Float(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tracking_id"], ["tracking_sessions.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_location_updates_tracking_id"), "location_updates", ["tracking_id"], unique=False)
    op.create_index(op.f("ix_location_updates_timestamp"), "location_updates", ["timestamp"], unique=False)

    op.create_table(
        "tracking_share_links",
        sa.Column("share_code", sa.String(length=8), nullable=False),
        sa.Column("tracking_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("master_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("share_with", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("allow_anonymous", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ttl", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("share_code"),
        sa.ForeignKeyConstraint(["tracking_id"], ["tracking_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["master_id"], ["users.id"], ondelete="CASCADE"),
    )
    for column in ("tracking_id", "master_id", "ttl"):
        op.create_index(op.f(f"ix_tracking_share_links_{column}"), "tracking_share_links", [column], unique=False)


def downgrade() -> None:
    for column in ("ttl", "master_id", "tracking_id"):
        op.drop_index(op.f(f"ix_tracking_share_links_{column}"), table_name="tracking_share_links")
    op.drop_table("tracking_share_links")
    op.drop_index(op.f("ix_location_updates_timestamp"), table_name="location_updates")
    op.drop_index(op.f("ix_location_updates_tracking_id"), table_name="location_updates")
    op.drop_table("location_updates")
    for column in ("status", "project_id", "booking_id", "client_id", "master_id"):
        op.drop_index(op.f(f"ix_tracking_sessions_{column}"), table_name="tracking_sessions")
    op.drop_table("tracking_sessions")
