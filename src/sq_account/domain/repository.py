"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.domain.models import SettlementDelta, UserAccount


class AccountRepositoryProtocol(Protocol):
    async def get_account(self, db: AsyncSession, user_id: str) -> UserAccount | None: ...

    async def apply_settlement(self, db: AsyncSession, delta: SettlementDelta) -> None:
        """Apply one user's payout and stat changes inside the caller's transaction."""
        ...
