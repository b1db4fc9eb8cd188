"""Notification kinds, one dataclass per kind with a typed payload.

``Notification`` is the union consumers switch on; ``kind`` is the tag that
goes on the wire.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, ClassVar, Union

from src.sq_common.enums import NotificationKind


@dataclass(frozen=True)
class BetPlaced:
    kind: ClassVar[NotificationKind] = NotificationKind.BET_PLACED
    user_id: str
    event_id: str
    bet_id: str
    side: str
    trade_type: str
    amount: Decimal
    price: Decimal
    option_id: str | None = None


@dataclass(frozen=True)
class MarketResolved:
    kind: ClassVar[NotificationKind] = NotificationKind.MARKET_RESOLVED
    user_id: str
    event_id: str
    event_title: str
    bet_id: str
    won: bool
    amount: Decimal   # payout when won, stake when lost
    winner: str       # "YES" / "NO" or the winning option title


@dataclass(frozen=True)
class MarketCancelled:
    kind: ClassVar[NotificationKind] = NotificationKind.MARKET_CANCELLED
    user_id: str
    event_id: str
    event_title: str
    bet_ids: list[str] = field(default_factory=list)


Notification = Union[BetPlaced, MarketResolved, MarketCancelled]


def to_payload(notification: Notification) -> dict[str, Any]:
    """Wire form: {"kind": ..., **fields}, Decimals as strings."""
    body = {
        k: (str(v) if isinstance(v, Decimal) else v)
        for k, v in asdict(notification).items()
    }
    return {"kind": notification.kind.value, **body}
