"""AccountRepository: raw SQL over the users table."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.domain.models import SettlementDelta, UserAccount

_GET_ACCOUNT_SQL = text("""
    SELECT id, username, display_name, virtual_balance,
           total_winnings, total_losses, is_admin, created_at, updated_at
    FROM users
    WHERE id = :user_id
""")

_APPLY_SETTLEMENT_SQL = text("""
    UPDATE users
    SET virtual_balance = virtual_balance + :payout,
        total_winnings  = total_winnings + :winnings_delta,
        total_losses    = total_losses + :losses_delta,
        updated_at = NOW()
    WHERE id = :user_id
""")


class AccountRepository:
    async def get_account(self, db: AsyncSession, user_id: str) -> UserAccount | None:
        row = (await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})).fetchone()
        if row is None:
            return None
        return UserAccount(
            id=row.id,
            username=row.username,
            display_name=row.display_name,
            virtual_balance=row.virtual_balance,
            total_winnings=row.total_winnings,
            total_losses=row.total_losses,
            is_admin=row.is_admin,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def apply_settlement(self, db: AsyncSession, delta: SettlementDelta) -> None:
        await db.execute(
            _APPLY_SETTLEMENT_SQL,
            {
                "user_id": delta.user_id,
                "payout": delta.payout,
                "winnings_delta": delta.winnings_delta,
                "losses_delta": delta.losses_delta,
            },
        )
