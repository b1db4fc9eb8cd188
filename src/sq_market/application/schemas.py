"""Pydantic schemas for sq_market requests and responses.

Cursor format for markets (VARCHAR PK, not sequential):
  {"ts": "<created_at ISO>", "id": "<market_id>"}
  Encoded as Base64 JSON string.

Prices and amounts are Decimal internally and leave the API as JSON numbers.
"""

import base64
import json
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from src.sq_common.datetime_utils import iso_or_none
from src.sq_common.enums import MarketType
from src.sq_common.money import HUNDRED
from src.sq_market.domain.models import Market, MarketOption, OptionPricePoint, PricePoint

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_market: Market) -> str:
    """Encode composite cursor from last market in page."""
    payload = {
        "ts": last_market.created_at.isoformat(),
        "id": last_market.id,
    }
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[str | None, str | None]:
    """Decode composite cursor -> (ts_iso, market_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return data["ts"], data["id"]
    except (ValueError, KeyError, TypeError):
        return None, None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    category: str | None = Field(None, max_length=64)
    market_type: Literal["BINARY", "MULTIPLE"] = "BINARY"
    end_date: datetime | None = None
    options: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("options")
    @classmethod
    def clean_options(cls, v: list[str]) -> list[str]:
        cleaned = [o.strip() for o in v]
        if any(not o for o in cleaned):
            raise ValueError("option titles must not be blank")
        if len({o.lower() for o in cleaned}) != len(cleaned):
            raise ValueError("option titles must be unique")
        return cleaned

    @model_validator(mode="after")
    def options_match_type(self) -> "CreateMarketRequest":
        if self.market_type == MarketType.MULTIPLE and len(self.options) < 2:
            raise ValueError("MULTIPLE markets need at least 2 options")
        if self.market_type == MarketType.BINARY and self.options:
            raise ValueError("BINARY markets take no options")
        return self


class AddOptionRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketOptionOut(BaseModel):
    id: str
    title: str
    price: float
    total_volume: float

    @classmethod
    def from_domain(cls, o: MarketOption) -> "MarketOptionOut":
        return cls(id=o.id, title=o.title, price=o.price, total_volume=o.total_volume)


class MarketListItem(BaseModel):
    id: str
    title: str
    category: str | None
    market_type: str
    status: str
    yes_price: float | None
    no_price: float | None
    total_volume: float
    end_date: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketListItem":
        return cls(
            id=m.id,
            title=m.title,
            category=m.category,
            market_type=m.market_type,
            status=m.status,
            yes_price=m.yes_price,
            no_price=HUNDRED - m.yes_price if m.yes_price is not None else None,
            total_volume=m.total_volume,
            end_date=iso_or_none(m.end_date),
        )


class MarketListResponse(BaseModel):
    items: list[MarketListItem]
    next_cursor: str | None
    has_more: bool


class MarketDetail(BaseModel):
    id: str
    title: str
    description: str | None
    category: str | None
    market_type: str
    status: str
    end_date: str | None
    resolved: bool
    outcome: bool | None
    winning_option_id: str | None
    yes_price: float | None
    no_price: float | None
    total_volume: float
    resolution_date: str | None
    created_by: str | None
    created_at: str
    options: list[MarketOptionOut]

    @classmethod
    def from_domain(cls, m: Market, options: list[MarketOption]) -> "MarketDetail":
        return cls(
            id=m.id,
            title=m.title,
            description=m.description,
            category=m.category,
            market_type=m.market_type,
            status=m.status,
            end_date=iso_or_none(m.end_date),
            resolved=m.resolved,
            outcome=m.outcome,
            winning_option_id=m.winning_option_id,
            yes_price=m.yes_price,
            no_price=HUNDRED - m.yes_price if m.yes_price is not None else None,
            total_volume=m.total_volume,
            resolution_date=iso_or_none(m.resolution_date),
            created_by=m.created_by,
            created_at=m.created_at.isoformat(),
            options=[MarketOptionOut.from_domain(o) for o in options],
        )


class PricePointOut(BaseModel):
    timestamp: str
    yes_price: float
    no_price: float
    volume: float

    @classmethod
    def from_domain(cls, p: PricePoint) -> "PricePointOut":
        return cls(
            timestamp=p.timestamp.isoformat(),
            yes_price=p.yes_price,
            no_price=p.no_price,
            volume=p.volume,
        )


class OptionPricePointOut(BaseModel):
    timestamp: str
    option_id: str
    option_title: str | None
    price: float

    @classmethod
    def from_domain(cls, p: OptionPricePoint) -> "OptionPricePointOut":
        return cls(
            timestamp=p.timestamp.isoformat(),
            option_id=p.option_id,
            option_title=p.option_title,
            price=p.price,
        )


class ImpactPreviewResponse(BaseModel):
    market_id: str
    side: str
    amount: float
    starting_price: float
    estimated_position: float
    estimated_average_price: float
    price_impact: float
    estimated_final_price: float

