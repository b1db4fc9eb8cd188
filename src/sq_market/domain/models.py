"""Domain models for sq_market — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.sq_common.enums import MarketStatus, MarketType


@dataclass
class Market:
    id: str
    title: str
    description: str | None
    category: str | None
    market_type: str
    status: str
    end_date: datetime | None
    resolved: bool
    outcome: bool | None             # BINARY only
    winning_option_id: str | None    # MULTIPLE only
    yes_price: Decimal | None        # BINARY only, authoritative
    total_volume: Decimal
    resolution_date: datetime | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_binary(self) -> bool:
        return self.market_type == MarketType.BINARY

    @property
    def is_tradeable(self) -> bool:
        return self.status == MarketStatus.ACTIVE and not self.resolved


@dataclass
class MarketOption:
    id: str
    event_id: str
    title: str
    price: Decimal
    total_volume: Decimal
    created_at: datetime | None = None


@dataclass
class PricePoint:
    event_id: str
    yes_price: Decimal
    no_price: Decimal
    volume: Decimal
    timestamp: datetime


@dataclass
class OptionPricePoint:
    option_id: str
    price: Decimal
    volume: Decimal
    timestamp: datetime
    option_title: str | None = None  # filled on reads only
