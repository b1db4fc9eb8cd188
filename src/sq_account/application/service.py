"""AccountApplicationService: read-only account summary.

Balances only move at settlement (sq_settlement); trading never debits or
credits them, so the summary is independent of open positions.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.application.schemas import AccountSummary
from src.sq_account.domain.repository import AccountRepositoryProtocol
from src.sq_account.infrastructure.persistence import AccountRepository
from src.sq_common.errors import UserNotFoundError


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_summary(self, db: AsyncSession, user_id: str) -> AccountSummary:
        account = await self._repo.get_account(db, user_id)
        if account is None:
            raise UserNotFoundError(user_id)
        return AccountSummary.from_domain(account)
