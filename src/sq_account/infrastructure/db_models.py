"""SQLAlchemy ORM model for the users table.

Accounts are provisioned by the external auth service; this service only
reads them and updates the settlement columns. Alembic migration
001_create_users.py is the authoritative DDL source.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sq_common.database import Base


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(128))
    virtual_balance: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    total_winnings: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    total_losses: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
