"""Best-effort post-commit notification dispatch.

Called only after the business transaction has committed. A failed send is
logged and dropped: it never rolls anything back and never reaches the
caller of the trade/resolution/cancellation.
"""

import logging
from collections.abc import Iterable

from src.sq_notification.domain.models import Notification
from src.sq_notification.domain.sender import NotificationSenderProtocol

logger = logging.getLogger(__name__)


async def dispatch_best_effort(
    sender: NotificationSenderProtocol, notifications: Iterable[Notification]
) -> int:
    """Send each notification independently; returns how many were delivered."""
    delivered = 0
    for notification in notifications:
        try:
            await sender.send(notification)
        except Exception:
            logger.exception(
                "Notification dropped: kind=%s user=%s event=%s",
                notification.kind.value,
                notification.user_id,
                notification.event_id,
            )
            continue
        delivered += 1
    return delivered
