"""Publishes notifications to Redis pub/sub, one channel per user.

Channel: "{NOTIFICATION_CHANNEL_PREFIX}:{user_id}". The delivery service
subscribes and handles persistence, email and push.
"""

import json

from config.settings import settings
from src.sq_common.redis_client import get_redis
from src.sq_notification.domain.models import Notification, to_payload


class RedisNotificationPublisher:
    def __init__(self, channel_prefix: str | None = None) -> None:
        self._prefix = channel_prefix or settings.NOTIFICATION_CHANNEL_PREFIX

    def channel_for(self, user_id: str) -> str:
        return f"{self._prefix}:{user_id}"

    async def send(self, notification: Notification) -> None:
        redis = await get_redis()
        await redis.publish(
            self.channel_for(notification.user_id),
            json.dumps(to_payload(notification)),
        )
