"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_betting.domain.models import Bet


class BetRepositoryProtocol(Protocol):
    async def insert_bet(self, db: AsyncSession, bet: Bet) -> None: ...

    async def list_active_bets(self, db: AsyncSession, event_id: str) -> list[Bet]:
        """Every ACTIVE bet of the market, oldest first."""
        ...

    async def list_user_market_bets(
        self, db: AsyncSession, user_id: str, event_id: str
    ) -> list[Bet]:
        """The user's ACTIVE bets on one market (all options and sides)."""
        ...

    async def list_user_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        limit: int,
    ) -> list[Bet]: ...

    async def set_statuses(self, db: AsyncSession, statuses: dict[str, str]) -> None:
        """Move ACTIVE bets to a terminal status; terminal rows are left untouched."""
        ...
