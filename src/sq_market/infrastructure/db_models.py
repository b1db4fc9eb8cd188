"""SQLAlchemy ORM models for the market tables.

Used for type reference only; persistence.py uses raw text() SQL.
Alembic migrations (002_create_events.py, 003_create_market_options.py,
005_create_price_history.py) are the authoritative DDL source.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.sq_common.database import Base


class EventORM(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str | None] = mapped_column(String(64))
    market_type: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    outcome: Mapped[bool | None] = mapped_column(Boolean)
    winning_option_id: Mapped[str | None] = mapped_column(String(64))
    yes_price: Mapped[Decimal | None] = mapped_column(Numeric(7, 4))
    total_volume: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    resolution_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_by: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class MarketOptionORM(Base):
    __tablename__ = "market_options"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    total_volume: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PricePointORM(Base):
    __tablename__ = "price_points"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False)
    yes_price: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    no_price: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    volume: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # NOTE: No updated_at — price history is append-only


class OptionPricePointORM(Base):
    __tablename__ = "option_price_points"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    option_id: Mapped[str] = mapped_column(ForeignKey("market_options.id"), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    volume: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
