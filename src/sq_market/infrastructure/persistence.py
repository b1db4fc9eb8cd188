"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Writes never commit; the calling service owns the transaction.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_market.domain.models import Market, MarketOption, OptionPricePoint, PricePoint

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, title, description, category, market_type, status, end_date,
    resolved, outcome, winning_option_id, yes_price, total_volume,
    resolution_date, created_by, created_at, updated_at
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM events WHERE id = :market_id")

_LOCK_MARKET_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM events WHERE id = :market_id FOR UPDATE"
)

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM events
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_INSERT_MARKET_SQL = text("""
    INSERT INTO events (
        id, title, description, category, market_type, status, end_date,
        resolved, yes_price, total_volume, created_by, created_at, updated_at
    ) VALUES (
        :id, :title, :description, :category, :market_type, :status, :end_date,
        FALSE, :yes_price, :total_volume, :created_by, :created_at, :updated_at
    )
""")

_UPDATE_PRICING_SQL = text("""
    UPDATE events
    SET yes_price = :yes_price,
        total_volume = :total_volume,
        updated_at = NOW()
    WHERE id = :market_id
""")

_MARK_RESOLVED_SQL = text("""
    UPDATE events
    SET resolved = TRUE,
        status = 'RESOLVED',
        outcome = :outcome,
        winning_option_id = :winning_option_id,
        resolution_date = :resolved_at,
        updated_at = NOW()
    WHERE id = :market_id
""")

_MARK_CANCELLED_SQL = text("""
    UPDATE events
    SET resolved = TRUE,
        status = 'CANCELLED',
        resolution_date = :cancelled_at,
        updated_at = NOW()
    WHERE id = :market_id
""")

_LIST_OPTIONS_SQL = text("""
    SELECT id, event_id, title, price, total_volume, created_at
    FROM market_options
    WHERE event_id = :market_id
    ORDER BY created_at ASC, id ASC
""")

_INSERT_OPTION_SQL = text("""
    INSERT INTO market_options (id, event_id, title, price, total_volume, created_at)
    VALUES (:id, :event_id, :title, :price, :total_volume, :created_at)
""")

_UPDATE_OPTION_PRICE_SQL = text(
    "UPDATE market_options SET price = :price WHERE id = :option_id"
)

_ADD_OPTION_VOLUME_SQL = text(
    "UPDATE market_options SET total_volume = total_volume + :delta WHERE id = :option_id"
)

_INSERT_PRICE_POINT_SQL = text("""
    INSERT INTO price_points (event_id, yes_price, no_price, volume, timestamp)
    VALUES (:event_id, :yes_price, :no_price, :volume, :timestamp)
""")

_INSERT_OPTION_PRICE_POINT_SQL = text("""
    INSERT INTO option_price_points (option_id, price, volume, timestamp)
    VALUES (:option_id, :price, :volume, :timestamp)
""")

_LIST_PRICE_POINTS_SQL = text("""
    SELECT event_id, yes_price, no_price, volume, timestamp
    FROM price_points
    WHERE event_id = :market_id
    ORDER BY timestamp ASC, id ASC
""")

_LIST_OPTION_PRICE_POINTS_SQL = text("""
    SELECT p.option_id, o.title AS option_title, p.price, p.volume, p.timestamp
    FROM option_price_points p
    JOIN market_options o ON o.id = p.option_id
    WHERE o.event_id = :market_id
    ORDER BY p.timestamp ASC, o.created_at ASC, o.id ASC
""")

_COUNT_BETS_SQL = text("SELECT COUNT(*) FROM bets WHERE event_id = :market_id")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        market_type=row.market_type,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        end_date=row.end_date,  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        winning_option_id=row.winning_option_id,  # type: ignore[attr-defined]
        yes_price=row.yes_price,  # type: ignore[attr-defined]
        total_volume=row.total_volume,  # type: ignore[attr-defined]
        resolution_date=row.resolution_date,  # type: ignore[attr-defined]
        created_by=row.created_by,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_option(row: object) -> MarketOption:
    return MarketOption(
        id=row.id,  # type: ignore[attr-defined]
        event_id=row.event_id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        total_volume=row.total_volume,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class MarketRepository:
    async def get_market(self, db: AsyncSession, market_id: str) -> Market | None:
        row = (await db.execute(_GET_MARKET_SQL, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def lock_market(self, db: AsyncSession, market_id: str) -> Market | None:
        row = (await db.execute(_LOCK_MARKET_SQL, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Market]:
        # asyncpg requires a real datetime object for TIMESTAMPTZ parameters,
        # not an ISO string.  Parse the cursor timestamp here.
        cursor_ts_dt: datetime | None = None
        if cursor_ts is not None:
            cursor_ts_dt = datetime.fromisoformat(cursor_ts)

        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "status": status,
                "category": category,
                "cursor_ts": cursor_ts_dt,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": market.id,
                "title": market.title,
                "description": market.description,
                "category": market.category,
                "market_type": market.market_type,
                "status": market.status,
                "end_date": market.end_date,
                "yes_price": market.yes_price,
                "total_volume": market.total_volume,
                "created_by": market.created_by,
                "created_at": market.created_at,
                "updated_at": market.updated_at,
            },
        )

    async def list_options(self, db: AsyncSession, market_id: str) -> list[MarketOption]:
        result = await db.execute(_LIST_OPTIONS_SQL, {"market_id": market_id})
        return [_row_to_option(row) for row in result.fetchall()]

    async def insert_option(self, db: AsyncSession, option: MarketOption) -> None:
        await db.execute(
            _INSERT_OPTION_SQL,
            {
                "id": option.id,
                "event_id": option.event_id,
                "title": option.title,
                "price": option.price,
                "total_volume": option.total_volume,
                "created_at": option.created_at,
            },
        )

    async def update_market_pricing(
        self,
        db: AsyncSession,
        market_id: str,
        yes_price: Decimal | None,
        total_volume: Decimal,
    ) -> None:
        await db.execute(
            _UPDATE_PRICING_SQL,
            {"market_id": market_id, "yes_price": yes_price, "total_volume": total_volume},
        )

    async def update_option_prices(
        self, db: AsyncSession, prices: dict[str, Decimal]
    ) -> None:
        if not prices:
            return
        await db.execute(
            _UPDATE_OPTION_PRICE_SQL,
            [{"option_id": oid, "price": price} for oid, price in prices.items()],
        )

    async def add_option_volume(
        self, db: AsyncSession, option_id: str, delta: Decimal
    ) -> None:
        await db.execute(_ADD_OPTION_VOLUME_SQL, {"option_id": option_id, "delta": delta})

    async def mark_resolved(
        self,
        db: AsyncSession,
        market_id: str,
        outcome: bool | None,
        winning_option_id: str | None,
        resolved_at: datetime,
    ) -> None:
        await db.execute(
            _MARK_RESOLVED_SQL,
            {
                "market_id": market_id,
                "outcome": outcome,
                "winning_option_id": winning_option_id,
                "resolved_at": resolved_at,
            },
        )

    async def mark_cancelled(
        self, db: AsyncSession, market_id: str, cancelled_at: datetime
    ) -> None:
        await db.execute(
            _MARK_CANCELLED_SQL, {"market_id": market_id, "cancelled_at": cancelled_at}
        )

    async def insert_price_point(self, db: AsyncSession, point: PricePoint) -> None:
        await db.execute(
            _INSERT_PRICE_POINT_SQL,
            {
                "event_id": point.event_id,
                "yes_price": point.yes_price,
                "no_price": point.no_price,
                "volume": point.volume,
                "timestamp": point.timestamp,
            },
        )

    async def insert_option_price_points(
        self, db: AsyncSession, points: list[OptionPricePoint]
    ) -> None:
        if not points:
            return
        await db.execute(
            _INSERT_OPTION_PRICE_POINT_SQL,
            [
                {
                    "option_id": p.option_id,
                    "price": p.price,
                    "volume": p.volume,
                    "timestamp": p.timestamp,
                }
                for p in points
            ],
        )

    async def list_price_points(self, db: AsyncSession, market_id: str) -> list[PricePoint]:
        result = await db.execute(_LIST_PRICE_POINTS_SQL, {"market_id": market_id})
        return [
            PricePoint(
                event_id=row.event_id,
                yes_price=row.yes_price,
                no_price=row.no_price,
                volume=row.volume,
                timestamp=row.timestamp,
            )
            for row in result.fetchall()
        ]

    async def list_option_price_points(
        self, db: AsyncSession, market_id: str
    ) -> list[OptionPricePoint]:
        result = await db.execute(_LIST_OPTION_PRICE_POINTS_SQL, {"market_id": market_id})
        return [
            OptionPricePoint(
                option_id=row.option_id,
                option_title=row.option_title,
                price=row.price,
                volume=row.volume,
                timestamp=row.timestamp,
            )
            for row in result.fetchall()
        ]

    async def count_bets(self, db: AsyncSession, market_id: str) -> int:
        result = await db.execute(_COUNT_BETS_SQL, {"market_id": market_id})
        return int(result.scalar_one())
