"""Net positions derived from bet rows.

Positions are never stored. They are recomputed from ACTIVE bets so that a
SELL (negative position_value) cancels the BUY legs it closes without any
special casing. Average entry price only looks at BUY legs.

When both sides net positive (only possible with hand-edited data) YES is
reported first; compute_all_positions returns both.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from src.sq_betting.domain.models import Bet
from src.sq_common.enums import BetSide
from src.sq_common.money import HUNDRED, ZERO, quantize_money, quantize_price

TOP_HOLDERS_LIMIT = 20


@dataclass(frozen=True)
class Position:
    side: str
    position_value: Decimal
    average_price: Decimal
    potential_payout: Decimal


def _in_scope(bet: Bet, user_id: str, option_id: str | None) -> bool:
    # option_id None selects the binary legs of the market
    return bet.is_active and bet.user_id == user_id and bet.option_id == option_id


def _side_position(bets: list[Bet], side: BetSide) -> Position | None:
    legs = [b for b in bets if b.side == side]
    net = sum((b.position_value for b in legs), ZERO)
    if net <= ZERO:
        return None
    buys = [b for b in legs if b.position_value > ZERO]
    bought_amount = sum((b.amount for b in buys), ZERO)
    bought_value = sum((b.position_value for b in buys), ZERO)
    average = bought_amount / bought_value * HUNDRED if bought_value > ZERO else ZERO
    payout = net / (average / HUNDRED) if average > ZERO else net
    return Position(
        side=side.value,
        position_value=net,
        average_price=quantize_price(average),
        potential_payout=quantize_money(payout),
    )


def net_position(bets: Iterable[Bet], user_id: str, side: BetSide, option_id: str | None = None) -> Decimal:
    """Signed sum of position_value for one (user, market/option, side)."""
    return sum(
        (b.position_value for b in bets if _in_scope(b, user_id, option_id) and b.side == side),
        ZERO,
    )


def compute_position(
    bets: Iterable[Bet], user_id: str, option_id: str | None = None
) -> Position | None:
    scoped = [b for b in bets if _in_scope(b, user_id, option_id)]
    if not scoped:
        return None
    return _side_position(scoped, BetSide.YES) or _side_position(scoped, BetSide.NO)


def compute_all_positions(
    bets: Iterable[Bet], user_id: str, option_id: str | None = None
) -> list[Position]:
    scoped = [b for b in bets if _in_scope(b, user_id, option_id)]
    positions = [_side_position(scoped, BetSide.YES), _side_position(scoped, BetSide.NO)]
    return [p for p in positions if p is not None]


@dataclass
class Holding:
    user_id: str
    yes_value: Decimal = ZERO
    no_value: Decimal = ZERO
    yes_amount: Decimal = ZERO
    no_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    rank: int = 0

    @property
    def position(self) -> str:
        if self.yes_value > self.no_value:
            return BetSide.YES.value
        if self.no_value > self.yes_value:
            return BetSide.NO.value
        return "NEUTRAL"


def top_holders(bets: Iterable[Bet], limit: int = TOP_HOLDERS_LIMIT) -> list[Holding]:
    """Rank users by net stake across the market's ACTIVE bets."""
    holdings: dict[str, Holding] = {}
    for bet in bets:
        if not bet.is_active:
            continue
        h = holdings.setdefault(bet.user_id, Holding(user_id=bet.user_id))
        if bet.side == BetSide.YES:
            h.yes_value += bet.position_value
            h.yes_amount += bet.signed_stake
        else:
            h.no_value += bet.position_value
            h.no_amount += bet.signed_stake
        h.total_amount += bet.signed_stake

    ranked = sorted(
        (h for h in holdings.values() if h.total_amount > ZERO),
        key=lambda h: (-h.total_amount, h.user_id),
    )[:limit]
    for i, h in enumerate(ranked, start=1):
        h.rank = i
    return ranked
