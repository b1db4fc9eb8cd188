"""Domain models for sq_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class UserAccount:
    id: str
    username: str
    display_name: str | None
    virtual_balance: Decimal
    total_winnings: Decimal   # net profit over won bets
    total_losses: Decimal     # stake lost over lost bets
    is_admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class SettlementDelta:
    """Per-user balance/stat change produced by resolving one market."""

    user_id: str
    payout: Decimal = Decimal("0")           # credited to virtual_balance
    winnings_delta: Decimal = Decimal("0")   # added to total_winnings
    losses_delta: Decimal = Decimal("0")     # added to total_losses
