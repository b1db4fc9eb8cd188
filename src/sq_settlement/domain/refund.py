"""Market cancellation: void every ACTIVE bet.

Bets are credit based (nothing is debited at placement), so a refund is a
status change only; balances and stats are untouched.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.sq_betting.domain.models import Bet
from src.sq_common.enums import BetStatus


@dataclass
class RefundPlan:
    statuses: dict[str, str] = field(default_factory=dict)
    bets_by_user: dict[str, list[str]] = field(default_factory=dict)


def plan_refund(bets: Iterable[Bet]) -> RefundPlan:
    plan = RefundPlan()
    for bet in bets:
        if not bet.is_active:
            continue
        plan.statuses[bet.id] = BetStatus.REFUNDED.value
        plan.bets_by_user.setdefault(bet.user_id, []).append(bet.id)
    return plan
