from typing import Protocol

from src.sq_notification.domain.models import Notification


class NotificationSenderProtocol(Protocol):
    """Delivery is owned by an external service; we only hand messages over."""

    async def send(self, notification: Notification) -> None: ...
