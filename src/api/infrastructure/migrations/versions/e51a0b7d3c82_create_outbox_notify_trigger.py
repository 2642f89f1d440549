"""create_outbox_notify_trigger

Send a NOTIFY on the outbox_events channel for every outbox insert, with
the entry id as payload. PostgreSQL delivers notifications on commit, so
the relay is woken up exactly when a new entry becomes visible. Polling
remains the fallback.

Revision ID: e51a0b7d3c82
Revises: 9d2f6c18e4a5
Create Date: 2026-10-12 10:02:13.877410

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "e51a0b7d3c82"
down_revision: Union[str, Sequence[str], None] = "9d2f6c18e4a5"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE OR REPLACE FUNCTION outbox_notify_insert()
        RETURNS TRIGGER AS $$
        BEGIN
            PERFORM pg_notify('outbox_events', NEW.id::text);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TRIGGER outbox_notify_after_insert
            AFTER INSERT ON outbox
            FOR EACH ROW
            EXECUTE FUNCTION outbox_notify_insert();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS outbox_notify_after_insert ON outbox;")
    op.execute("DROP FUNCTION IF EXISTS outbox_notify_insert();")
