"""Price normalization for MULTIPLE (multiple-choice) markets.

Each option's price is its share of YES buy-side stake across the whole
market, so a trade on one option moves every option's price. The caller
must hold the market row lock while reading bets and writing the result.

Steps:
  1. demand[i] = sum(amount) of ACTIVE YES BUY bets on option i
     (SELL legs carry negative position_value and are ignored)
  2. no demand at all -> equal split 100/N
  3. raw[i] = demand[i] / total * 100, clamped to [1, 99]
  4. 100 - sum(raw) is added to the largest raw price, re-clamped
  5. whatever step 4 could not place (several options pinned at a bound)
     is spread over options with headroom, largest first
  6. prices are rounded to 4 dp and the rounding remainder is placed the
     same way, so the result sums to exactly 100

When [1, 99] is infeasible (a single option, or more than 100 options) the
bounds widen to include 100/N.
"""

from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_DOWN, ROUND_UP, Decimal
from typing import Protocol

from src.sq_common.enums import BetSide, BetStatus
from src.sq_common.money import HUNDRED, PRICE_QUANT, ZERO, clamp, quantize_price

MIN_OPTION_PRICE = Decimal("1")
MAX_OPTION_PRICE = Decimal("99")


class DemandBet(Protocol):
    option_id: str | None
    side: str
    amount: Decimal
    position_value: Decimal
    status: str


def option_demand(option_ids: Sequence[str], bets: Iterable[DemandBet]) -> dict[str, Decimal]:
    demand = {oid: ZERO for oid in option_ids}
    for bet in bets:
        if bet.status != BetStatus.ACTIVE or bet.side != BetSide.YES:
            continue
        if bet.position_value <= ZERO or bet.option_id not in demand:
            continue
        demand[bet.option_id] += bet.amount
    return demand


def normalize(option_ids: Sequence[str], bets: Iterable[DemandBet]) -> dict[str, Decimal]:
    """New price per option id, summing to exactly 100."""
    return normalize_demand(option_demand(option_ids, bets))


def normalize_demand(demand: Mapping[str, Decimal]) -> dict[str, Decimal]:
    ids = list(demand)
    if not ids:
        return {}
    equal = HUNDRED / len(ids)
    low = min(MIN_OPTION_PRICE, equal)
    high = max(MAX_OPTION_PRICE, equal)

    total = sum((max(ZERO, v) for v in demand.values()), ZERO)
    if total == ZERO:
        prices = {oid: equal for oid in ids}
    else:
        prices = {oid: clamp(max(ZERO, demand[oid]) / total * HUNDRED, low, high) for oid in ids}
        largest = max(ids, key=lambda oid: prices[oid])
        adjustment = HUNDRED - sum(prices.values(), ZERO)
        prices[largest] = clamp(prices[largest] + adjustment, low, high)
        _absorb(prices, HUNDRED - sum(prices.values(), ZERO), low, high)

    rounded = {oid: quantize_price(p) for oid, p in prices.items()}
    _absorb(
        rounded,
        HUNDRED - sum(rounded.values(), ZERO),
        low.quantize(PRICE_QUANT, rounding=ROUND_DOWN),
        high.quantize(PRICE_QUANT, rounding=ROUND_UP),
    )
    return rounded


def _absorb(prices: dict[str, Decimal], residual: Decimal, low: Decimal, high: Decimal) -> None:
    """Place ``residual`` on the options with headroom, largest price first."""
    if residual == ZERO:
        return
    for oid in sorted(prices, key=lambda o: prices[o], reverse=True):
        current = prices[oid]
        if residual > ZERO:
            step = min(high - current, residual)
        else:
            step = max(low - current, residual)
        prices[oid] = current + step
        residual -= step
        if residual == ZERO:
            return


def prices_sum(prices: Mapping[str, Decimal]) -> Decimal:
    return sum(prices.values(), ZERO)


def equal_split(option_ids: Sequence[str]) -> dict[str, Decimal]:
    """Starting prices for a market without bets (creation, option added)."""
    return normalize_demand({oid: ZERO for oid in option_ids})
