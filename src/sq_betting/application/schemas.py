"""Pydantic schemas for sq_betting requests and responses.

``side`` and ``type`` arrive as plain strings and are checked by the risk
rules so that a bad value surfaces as InvalidInputError (4001) rather than
a framework validation error.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.sq_betting.domain.models import Bet
from src.sq_betting.domain.positions import Holding, Position


class PlaceBetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field(min_length=1, max_length=64)
    side: str
    amount: Decimal
    option_id: str | None = None
    trade_type: str = Field("BUY", alias="type")


class BetResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    option_id: str | None
    side: str
    type: str
    amount: float
    price: float
    shares: float
    status: str
    created_at: str
    # Market state right after the trade
    yes_price: float | None = None
    option_prices: dict[str, float] | None = None

    @classmethod
    def from_domain(
        cls,
        bet: Bet,
        yes_price: Decimal | None = None,
        option_prices: dict[str, Decimal] | None = None,
    ) -> "BetResponse":
        return cls(
            id=bet.id,
            user_id=bet.user_id,
            event_id=bet.event_id,
            option_id=bet.option_id,
            side=bet.side,
            type=bet.trade_type,
            amount=bet.amount,
            price=bet.price,
            shares=bet.position_value,
            status=bet.status,
            created_at=bet.created_at.isoformat(),
            yes_price=yes_price,
            option_prices=(
                {k: float(v) for k, v in option_prices.items()} if option_prices else None
            ),
        )


class BetListResponse(BaseModel):
    items: list[BetResponse]


class PositionOut(BaseModel):
    option_id: str | None
    option_title: str | None
    side: str
    shares: float
    average_price: float
    potential_payout: float

    @classmethod
    def from_domain(
        cls, p: Position, option_id: str | None = None, option_title: str | None = None
    ) -> "PositionOut":
        return cls(
            option_id=option_id,
            option_title=option_title,
            side=p.side,
            shares=p.position_value,
            average_price=p.average_price,
            potential_payout=p.potential_payout,
        )


class MyPositionsResponse(BaseModel):
    market_id: str
    positions: list[PositionOut]


class HolderOut(BaseModel):
    rank: int
    user_id: str
    yes_shares: float
    no_shares: float
    yes_amount: float
    no_amount: float
    total_amount: float
    position: str

    @classmethod
    def from_domain(cls, h: Holding) -> "HolderOut":
        return cls(
            rank=h.rank,
            user_id=h.user_id,
            yes_shares=h.yes_value,
            no_shares=h.no_value,
            yes_amount=h.yes_amount,
            no_amount=h.no_amount,
            total_amount=h.total_amount,
            position=h.position,
        )
