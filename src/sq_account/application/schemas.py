"""Pydantic schemas for sq_account API responses."""

from pydantic import BaseModel

from src.sq_account.domain.models import UserAccount
from src.sq_common.money import money_display


class AccountSummary(BaseModel):
    user_id: str
    username: str
    display_name: str | None
    balance: float
    balance_display: str
    total_winnings: float
    total_losses: float

    @classmethod
    def from_domain(cls, a: UserAccount) -> "AccountSummary":
        return cls(
            user_id=a.id,
            username=a.username,
            display_name=a.display_name,
            balance=a.virtual_balance,
            balance_display=money_display(a.virtual_balance),
            total_winnings=a.total_winnings,
            total_losses=a.total_losses,
        )
