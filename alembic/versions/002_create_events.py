"""002: create events (markets) table

Revision ID: 002
Revises: 001
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE events (
            id                  VARCHAR(64)     PRIMARY KEY,
            title               VARCHAR(500)    NOT NULL,
            description         TEXT,
            category            VARCHAR(64),
            market_type         VARCHAR(16)     NOT NULL DEFAULT 'BINARY',
            status              VARCHAR(16)     NOT NULL DEFAULT 'ACTIVE',
            end_date            TIMESTAMPTZ,
            resolved            BOOLEAN         NOT NULL DEFAULT FALSE,
            outcome             BOOLEAN,
            winning_option_id   VARCHAR(64),
            yes_price           NUMERIC(7, 4),
            total_volume        NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            resolution_date     TIMESTAMPTZ,
            created_by          VARCHAR(64)     REFERENCES users (id),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_events_type CHECK (market_type IN ('BINARY', 'MULTIPLE')),
            CONSTRAINT ck_events_status CHECK (
                status IN ('ACTIVE', 'CLOSED', 'RESOLVED', 'CANCELLED')
            ),
            CONSTRAINT ck_events_volume_gte_0 CHECK (total_volume >= 0),
            CONSTRAINT ck_events_pricing_model CHECK (
                (market_type = 'BINARY' AND yes_price BETWEEN 0 AND 100)
                OR (market_type = 'MULTIPLE' AND yes_price IS NULL)
            ),
            CONSTRAINT ck_events_terminal_resolved CHECK (
                status NOT IN ('RESOLVED', 'CANCELLED') OR resolved
            )
        );
    """)
    op.execute("CREATE INDEX idx_events_status_created ON events (status, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_events_category ON events (category);")
    op.execute("""
        CREATE TRIGGER trg_events_updated_at
            BEFORE UPDATE ON events
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE events IS "
        "'Markets; yes_price is authoritative for BINARY, options carry MULTIPLE prices';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS events CASCADE;")
