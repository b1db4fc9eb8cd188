"""Per-user fixed-window rate limit for trade submission.

Redis INCR + EXPIRE on key "ratelimit:trade:{user_id}:{window}" where the
window is the current minute. Raises RateLimitError (9001) when the user
exceeds TRADE_RATE_LIMIT_PER_MINUTE.
"""

import time
from typing import Annotated

from fastapi import Depends

from config.settings import settings
from src.sq_common.errors import RateLimitError
from src.sq_common.redis_client import get_redis
from src.sq_gateway.auth.dependencies import get_current_user_id

_WINDOW_SECONDS = 60


def _window_key(user_id: str, now: float) -> str:
    return f"ratelimit:trade:{user_id}:{int(now // _WINDOW_SECONDS)}"


async def limit_trades(user_id: Annotated[str, Depends(get_current_user_id)]) -> str:
    redis = await get_redis()
    key = _window_key(user_id, time.time())
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, _WINDOW_SECONDS)
    if count > settings.TRADE_RATE_LIMIT_PER_MINUTE:
        raise RateLimitError()
    return user_id
