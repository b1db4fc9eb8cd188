"""SQLAlchemy ORM model for the bets table.

Used for type reference only; persistence.py uses raw text() SQL.
Alembic migration 004_create_bets.py is the authoritative DDL source.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.sq_common.database import Base


class BetORM(Base):
    __tablename__ = "bets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False)
    option_id: Mapped[str | None] = mapped_column(ForeignKey("market_options.id"))
    side: Mapped[str] = mapped_column(String(3), nullable=False)
    trade_type: Mapped[str] = mapped_column(String(4), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    # Signed: +amount for BUY, -amount for SELL. Exposed as "shares".
    position_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # No updated_at: status changes once, at resolution or cancellation
