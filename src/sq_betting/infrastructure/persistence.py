"""BetRepository: raw SQL over the bets table.

Writes never commit; the calling service owns the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_betting.domain.models import Bet

_BET_COLUMNS = """
    id, user_id, event_id, option_id, side, trade_type, amount, price,
    position_value, status, created_at
"""

_INSERT_BET_SQL = text("""
    INSERT INTO bets (
        id, user_id, event_id, option_id, side, trade_type, amount, price,
        position_value, status, created_at
    ) VALUES (
        :id, :user_id, :event_id, :option_id, :side, :trade_type, :amount, :price,
        :position_value, :status, :created_at
    )
""")

_LIST_ACTIVE_BETS_SQL = text(f"""
    SELECT {_BET_COLUMNS}
    FROM bets
    WHERE event_id = :event_id AND status = 'ACTIVE'
    ORDER BY created_at ASC, id ASC
""")

_LIST_USER_MARKET_BETS_SQL = text(f"""
    SELECT {_BET_COLUMNS}
    FROM bets
    WHERE event_id = :event_id AND user_id = :user_id AND status = 'ACTIVE'
    ORDER BY created_at ASC, id ASC
""")

_LIST_USER_BETS_SQL = text(f"""
    SELECT {_BET_COLUMNS}
    FROM bets
    WHERE user_id = :user_id
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

# Guarded on ACTIVE: terminal statuses are immutable
_SET_STATUS_SQL = text(
    "UPDATE bets SET status = :status WHERE id = :bet_id AND status = 'ACTIVE'"
)


def _row_to_bet(row: object) -> Bet:
    return Bet(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        event_id=row.event_id,  # type: ignore[attr-defined]
        option_id=row.option_id,  # type: ignore[attr-defined]
        side=row.side,  # type: ignore[attr-defined]
        trade_type=row.trade_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        position_value=row.position_value,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class BetRepository:
    async def insert_bet(self, db: AsyncSession, bet: Bet) -> None:
        await db.execute(
            _INSERT_BET_SQL,
            {
                "id": bet.id,
                "user_id": bet.user_id,
                "event_id": bet.event_id,
                "option_id": bet.option_id,
                "side": bet.side,
                "trade_type": bet.trade_type,
                "amount": bet.amount,
                "price": bet.price,
                "position_value": bet.position_value,
                "status": bet.status,
                "created_at": bet.created_at,
            },
        )

    async def list_active_bets(self, db: AsyncSession, event_id: str) -> list[Bet]:
        result = await db.execute(_LIST_ACTIVE_BETS_SQL, {"event_id": event_id})
        return [_row_to_bet(row) for row in result.fetchall()]

    async def list_user_market_bets(
        self, db: AsyncSession, user_id: str, event_id: str
    ) -> list[Bet]:
        result = await db.execute(
            _LIST_USER_MARKET_BETS_SQL, {"user_id": user_id, "event_id": event_id}
        )
        return [_row_to_bet(row) for row in result.fetchall()]

    async def list_user_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        limit: int,
    ) -> list[Bet]:
        result = await db.execute(
            _LIST_USER_BETS_SQL, {"user_id": user_id, "status": status, "limit": limit}
        )
        return [_row_to_bet(row) for row in result.fetchall()]

    async def set_statuses(self, db: AsyncSession, statuses: dict[str, str]) -> None:
        if not statuses:
            return
        await db.execute(
            _SET_STATUS_SQL,
            [{"bet_id": bet_id, "status": status} for bet_id, status in statuses.items()],
        )
