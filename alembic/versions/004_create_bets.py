"""004: create bets table

Revision ID: 004
Revises: 003
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            event_id        VARCHAR(64)     NOT NULL REFERENCES events (id) ON DELETE CASCADE,
            option_id       VARCHAR(64)     REFERENCES market_options (id) ON DELETE CASCADE,
            side            VARCHAR(3)      NOT NULL,
            trade_type      VARCHAR(4)      NOT NULL DEFAULT 'BUY',
            amount          NUMERIC(14, 2)  NOT NULL,
            price           NUMERIC(7, 4)   NOT NULL,
            position_value  NUMERIC(14, 2)  NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'ACTIVE',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bets_side CHECK (side IN ('YES', 'NO')),
            CONSTRAINT ck_bets_trade_type CHECK (trade_type IN ('BUY', 'SELL')),
            CONSTRAINT ck_bets_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_bets_price CHECK (price >= 0 AND price <= 100),
            CONSTRAINT ck_bets_position_sign CHECK (
                (trade_type = 'BUY' AND position_value = amount)
                OR (trade_type = 'SELL' AND position_value = -amount)
            ),
            CONSTRAINT ck_bets_status CHECK (
                status IN ('ACTIVE', 'WON', 'LOST', 'REFUNDED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_bets_event_status ON bets (event_id, status);")
    op.execute("CREATE INDEX idx_bets_user_event ON bets (user_id, event_id);")
    op.execute("CREATE INDEX idx_bets_user_created ON bets (user_id, created_at DESC);")
    op.execute(
        "COMMENT ON COLUMN bets.position_value IS "
        "'Signed position delta (+amount BUY, -amount SELL); exposed as shares';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
