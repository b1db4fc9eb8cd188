"""Market resolution: decide every ACTIVE bet and build per-user deltas.

Pure: the admin service loads bets under the market lock, calls
plan_resolution(), then writes statuses and deltas in the same transaction.

Per bet (signed stake = +amount BUY, -amount SELL):
  won  -> payout += position_value, total_winnings += position_value - stake
  lost -> total_losses += stake

SELL legs carry negative position_value, so a user who bought 100 and sold
40 of a winning side is credited 60.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from src.sq_account.domain.models import SettlementDelta
from src.sq_betting.domain.models import Bet
from src.sq_common.enums import BetSide, BetStatus
from src.sq_common.money import ZERO


@dataclass(frozen=True)
class BetOutcome:
    bet: Bet
    won: bool

    @property
    def payout(self) -> Decimal:
        return self.bet.position_value if self.won else ZERO


@dataclass
class SettlementPlan:
    statuses: dict[str, str] = field(default_factory=dict)
    deltas: list[SettlementDelta] = field(default_factory=list)
    outcomes: list[BetOutcome] = field(default_factory=list)

    @property
    def total_payout(self) -> Decimal:
        return sum((d.payout for d in self.deltas), ZERO)


def is_winning_bet(bet: Bet, outcome: bool | None, winning_option_id: str | None) -> bool:
    """BINARY: side matches outcome. MULTIPLE: YES on the winner or NO elsewhere."""
    if bet.option_id is None:
        return (bet.side == BetSide.YES) == bool(outcome)
    return (bet.option_id == winning_option_id) == (bet.side == BetSide.YES)


def plan_resolution(
    bets: Iterable[Bet], outcome: bool | None, winning_option_id: str | None
) -> SettlementPlan:
    plan = SettlementPlan()
    deltas: dict[str, SettlementDelta] = {}
    for bet in bets:
        if not bet.is_active:
            continue
        won = is_winning_bet(bet, outcome, winning_option_id)
        plan.statuses[bet.id] = (BetStatus.WON if won else BetStatus.LOST).value
        plan.outcomes.append(BetOutcome(bet=bet, won=won))

        delta = deltas.setdefault(bet.user_id, SettlementDelta(user_id=bet.user_id))
        if won:
            delta.payout += bet.position_value
            delta.winnings_delta += bet.position_value - bet.signed_stake
        else:
            delta.losses_delta += bet.signed_stake

    plan.deltas = list(deltas.values())
    return plan
