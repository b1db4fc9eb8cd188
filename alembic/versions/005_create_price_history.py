"""005: create price_points and option_price_points tables

Revision ID: 005
Revises: 004
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Append-only: no updated_at, no trigger
    op.execute("""
        CREATE TABLE price_points (
            id          BIGSERIAL       PRIMARY KEY,
            event_id    VARCHAR(64)     NOT NULL REFERENCES events (id) ON DELETE CASCADE,
            yes_price   NUMERIC(7, 4)   NOT NULL,
            no_price    NUMERIC(7, 4)   NOT NULL,
            volume      NUMERIC(14, 2)  NOT NULL,
            timestamp   TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_price_points_sum CHECK (yes_price + no_price = 100)
        );
    """)
    op.execute("CREATE INDEX idx_price_points_event_ts ON price_points (event_id, timestamp);")
    op.execute("""
        CREATE TABLE option_price_points (
            id          BIGSERIAL       PRIMARY KEY,
            option_id   VARCHAR(64)     NOT NULL REFERENCES market_options (id) ON DELETE CASCADE,
            price       NUMERIC(7, 4)   NOT NULL,
            volume      NUMERIC(14, 2)  NOT NULL,
            timestamp   TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_option_price_points_option_ts "
        "ON option_price_points (option_id, timestamp);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS option_price_points CASCADE;")
    op.execute("DROP TABLE IF EXISTS price_points CASCADE;")
