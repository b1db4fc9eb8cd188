"""Parimutuel pool pricing for BINARY markets.

Pools are never persisted. They are re-derived from the authoritative
(total_volume, yes_price) pair at the start of every trade transaction:

    yes_pool = yes_price / 100 * total_volume
    no_pool  = total_volume - yes_pool

A BUY adds the stake to its side's pool; a SELL removes the payout from it.
The posted price is the YES share of the combined pool, clamped to
[MIN_PRICE, MAX_PRICE]. The trader executes at the pre-trade price; only the
market's posted price moves.

Because the stored price is the clamped one, re-derived pools can differ
from the stake actually placed. A full buy-then-sell round trip on an empty
market therefore does not return to 50: $20 YES posts 95 (pools 19/1), and
selling the $20 back floors the YES pool at 0 and posts 5 with volume 0.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.sq_common.enums import BetSide, TradeType
from src.sq_common.money import HUNDRED, ZERO, clamp, quantize_price

MIN_PRICE = Decimal("5")
MAX_PRICE = Decimal("95")
EMPTY_POOL_PRICE = Decimal("50")


@dataclass(frozen=True)
class Pools:
    yes: Decimal
    no: Decimal

    @property
    def total(self) -> Decimal:
        return self.yes + self.no


@dataclass(frozen=True)
class PoolUpdate:
    pools: Pools
    yes_price: Decimal  # clamped, quantized to 4 dp


def derive_pools(total_volume: Decimal, yes_price: Decimal) -> Pools:
    yes_pool = yes_price / HUNDRED * total_volume
    return Pools(yes=yes_pool, no=total_volume - yes_pool)


def price_from_pools(pools: Pools) -> Decimal:
    if pools.total <= ZERO:
        raw = EMPTY_POOL_PRICE
    else:
        raw = pools.yes / pools.total * HUNDRED
    return quantize_price(clamp(raw, MIN_PRICE, MAX_PRICE))


def apply_bet(
    pools: Pools,
    amount: Decimal,
    side: BetSide,
    trade_type: TradeType = TradeType.BUY,
) -> PoolUpdate:
    """Apply one trade to the pools and return the new pools and posted price.

    ``amount`` is the stake for a BUY and the payout for a SELL; it is always
    positive. A SELL cannot drain a pool below zero.
    """
    if amount <= ZERO:
        raise ValueError(f"amount must be positive, got {amount}")
    delta = amount if trade_type == TradeType.BUY else -amount
    yes, no = pools.yes, pools.no
    if side == BetSide.YES:
        yes = max(ZERO, yes + delta)
    else:
        no = max(ZERO, no + delta)
    new_pools = Pools(yes=yes, no=no)
    return PoolUpdate(pools=new_pools, yes_price=price_from_pools(new_pools))


def side_price(yes_price: Decimal, side: BetSide) -> Decimal:
    """Price of ``side`` given the posted YES price (NO = 100 - YES)."""
    return yes_price if side == BetSide.YES else HUNDRED - yes_price
