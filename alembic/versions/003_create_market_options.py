"""003: create market_options table

Revision ID: 003
Revises: 002
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_options (
            id              VARCHAR(64)     PRIMARY KEY,
            event_id        VARCHAR(64)     NOT NULL REFERENCES events (id) ON DELETE CASCADE,
            title           VARCHAR(200)    NOT NULL,
            price           NUMERIC(7, 4)   NOT NULL,
            total_volume    NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_market_options_price CHECK (price >= 0 AND price <= 100),
            CONSTRAINT ck_market_options_volume_gte_0 CHECK (total_volume >= 0)
        );
    """)
    op.execute(
        "CREATE UNIQUE INDEX uq_market_options_title ON market_options (event_id, LOWER(title));"
    )
    op.execute("""
        ALTER TABLE events
            ADD CONSTRAINT fk_events_winning_option
            FOREIGN KEY (winning_option_id) REFERENCES market_options (id);
    """)


def downgrade() -> None:
    op.execute("ALTER TABLE events DROP CONSTRAINT IF EXISTS fk_events_winning_option;")
    op.execute("DROP TABLE IF EXISTS market_options CASCADE;")
