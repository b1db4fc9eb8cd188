import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.sq_common.errors import PersistenceError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Shared declarative base for the reference ORM models of every module."""

    pass


# READ COMMITTED is enough: every mutating path locks its events row with
# SELECT ... FOR UPDATE before reading prices or volumes.
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
    isolation_level="READ COMMITTED",
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back on any error.

    Storage-layer errors surface as PersistenceError (retryable, nothing
    committed); AppError and other exceptions propagate unchanged.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Transaction rolled back after storage error")
        raise PersistenceError() from exc
    except BaseException:
        await db.rollback()
        raise
