"""Global enums — must match DB CHECK constraints exactly (see alembic/versions)."""

from enum import Enum


class MarketType(str, Enum):
    BINARY = "BINARY"
    MULTIPLE = "MULTIPLE"


class MarketStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"        # time based, set outside this service
    RESOLVED = "RESOLVED"    # terminal
    CANCELLED = "CANCELLED"  # terminal


class BetSide(str, Enum):
    YES = "YES"
    NO = "NO"


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class BetStatus(str, Enum):
    ACTIVE = "ACTIVE"
    WON = "WON"
    LOST = "LOST"
    REFUNDED = "REFUNDED"


class NotificationKind(str, Enum):
    BET_PLACED = "BET_PLACED"
    MARKET_RESOLVED = "MARKET_RESOLVED"
    MARKET_CANCELLED = "MARKET_CANCELLED"
