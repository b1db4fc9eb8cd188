"""Repository Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_market.domain.models import Market, MarketOption, OptionPricePoint, PricePoint


class MarketRepositoryProtocol(Protocol):
    async def get_market(self, db: AsyncSession, market_id: str) -> Market | None: ...

    async def lock_market(self, db: AsyncSession, market_id: str) -> Market | None:
        """Read the market row with a row lock held until the transaction ends."""
        ...

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Market]: ...

    async def insert_market(self, db: AsyncSession, market: Market) -> None: ...

    async def list_options(self, db: AsyncSession, market_id: str) -> list[MarketOption]: ...

    async def insert_option(self, db: AsyncSession, option: MarketOption) -> None: ...

    async def update_market_pricing(
        self,
        db: AsyncSession,
        market_id: str,
        yes_price: Decimal | None,
        total_volume: Decimal,
    ) -> None: ...

    async def update_option_prices(
        self, db: AsyncSession, prices: dict[str, Decimal]
    ) -> None: ...

    async def add_option_volume(
        self, db: AsyncSession, option_id: str, delta: Decimal
    ) -> None: ...

    async def mark_resolved(
        self,
        db: AsyncSession,
        market_id: str,
        outcome: bool | None,
        winning_option_id: str | None,
        resolved_at: datetime,
    ) -> None: ...

    async def mark_cancelled(
        self, db: AsyncSession, market_id: str, cancelled_at: datetime
    ) -> None: ...

    async def insert_price_point(self, db: AsyncSession, point: PricePoint) -> None: ...

    async def insert_option_price_points(
        self, db: AsyncSession, points: list[OptionPricePoint]
    ) -> None: ...

    async def list_price_points(self, db: AsyncSession, market_id: str) -> list[PricePoint]: ...

    async def list_option_price_points(
        self, db: AsyncSession, market_id: str
    ) -> list[OptionPricePoint]: ...

    async def count_bets(self, db: AsyncSession, market_id: str) -> int: ...
