"""Shared redis.asyncio client for trade rate limiting and notification pub/sub.

Prices, volumes and balances never touch Redis; PostgreSQL is the only
store of record. Short socket timeouts keep a Redis outage from stalling
a bet: the rate limiter fails the request, the notification publisher
just drops the message.
"""

import redis.asyncio as aioredis

from config.settings import settings

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Return the process-wide client, creating its pool on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
    return _client


async def ping_redis() -> bool:
    client = await get_redis()
    return bool(await client.ping())


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
