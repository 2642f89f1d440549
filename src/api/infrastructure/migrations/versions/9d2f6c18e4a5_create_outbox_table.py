"""create_outbox_table

Create the outbox table for the transactional outbox pattern. Rows are
written in the same transaction as the aggregate change and published to
the message broker by the outbox relay.

Entries that keep failing are moved to the dead letter queue (failed_at
set) after the configured number of attempts.

Revision ID: 9d2f6c18e4a5
Revises: 4b7e2a91c0d3
Create Date: 2026-10-12 09:31:47.503921

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "9d2f6c18e4a5"
down_revision: Union[str, Sequence[str], None] = "4b7e2a91c0d3"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "outbox",
        sa.Column(
            "id",
            sa.UUID(),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("aggregate_type", sa.String(length=255), nullable=False),
        sa.Column("aggregate_id", sa.String(length=26), nullable=False),
        sa.Column("event_type", sa.String(length=255), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("correlation_id", sa.String(length=64), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("clock_timestamp()"),
        ),
        sa.Column(
            "retry_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_outbox"),
    )
    # Relay polling: pending entries in creation order
    op.create_index(
        "idx_outbox_pending",
        "outbox",
        ["created_at"],
        unique=False,
        postgresql_where=sa.text("processed_at IS NULL AND failed_at IS NULL"),
    )
    # Per-aggregate ordering checks
    op.create_index(
        "idx_outbox_aggregate",
        "outbox",
        ["aggregate_type", "aggregate_id", "created_at"],
        unique=False,
    )
    # Dead letter queue listing
    op.create_index(
        "idx_outbox_failed",
        "outbox",
        ["failed_at"],
        unique=False,
        postgresql_where=sa.text("failed_at IS NOT NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_outbox_failed", table_name="outbox")
    op.drop_index("idx_outbox_aggregate", table_name="outbox")
    op.drop_index("idx_outbox_pending", table_name="outbox")
    op.drop_table("outbox")
