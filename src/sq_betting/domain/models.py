"""Domain models for sq_betting — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.sq_common.enums import BetStatus, TradeType


@dataclass
class Bet:
    """One trade leg. Insert-only except for the terminal status update.

    ``amount`` is the stake for a BUY and the payout received for a SELL.
    ``position_value`` is signed (+amount BUY, -amount SELL) so summing it
    per side yields the net position.
    """

    id: str
    user_id: str
    event_id: str
    option_id: str | None   # None => BINARY market
    side: str
    trade_type: str
    amount: Decimal
    price: Decimal          # execution price, 0-100
    position_value: Decimal
    status: str
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == BetStatus.ACTIVE

    @property
    def signed_stake(self) -> Decimal:
        """Money put in: +amount for a BUY, -amount for a SELL (payout taken out)."""
        return self.amount if self.trade_type == TradeType.BUY else -self.amount
