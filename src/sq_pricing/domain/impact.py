"""Advisory market-impact preview shown before a trade is submitted.

Never used for execution: the authoritative price comes from pool.py or
normalizer.py inside the bet transaction. The model is deliberately
conservative and rounded.

    k        = max(30, liquidity * 0.8) * (1 + |start - 50| / 200)
    slippage = sqrt(amount / k * start * 0.4) * 12
    exec     = min(95, start + slippage)
    final    = start + 0.9 * slippage (YES, capped at 95)
             = start - 0.9 * slippage (NO, floored at 5)

``start`` is the price of the side being bought: the posted YES price for
YES, 100 minus it for NO. On a MULTIPLE market the option price plays the
role of the YES price. Large trades (relative to k) are split into up to
five slices executed along the slippage curve.
"""

import math
from dataclasses import dataclass

from src.sq_common.enums import BetSide

MIN_VIRTUAL_LIQUIDITY = 30.0
LIQUIDITY_FACTOR = 0.8
SLIPPAGE_FACTOR = 12.0
MARKET_MOVE_FACTOR = 0.9
PRICE_FLOOR = 5.0
PRICE_CEILING = 95.0

_MICRO_RATIO = 0.0005
_SMALL_RATIO = 0.01
_MAX_SLICES = 5


@dataclass(frozen=True)
class ImpactPreview:
    estimated_position: float
    estimated_average_price: float
    price_impact: float
    estimated_final_price: float


def _liquidity_k(starting_price: float, total_liquidity: float) -> float:
    base = max(MIN_VIRTUAL_LIQUIDITY, total_liquidity * LIQUIDITY_FACTOR)
    return base * (1 + abs(starting_price - 50) / 200)


def _average_price(bet_amount: float, starting_price: float, slippage: float, ratio: float) -> float:
    execution = min(PRICE_CEILING, starting_price + slippage)
    if ratio < _MICRO_RATIO:
        return execution
    if ratio < _SMALL_RATIO:
        return (starting_price + execution) / 2

    slices = min(_MAX_SLICES, max(2, math.ceil(ratio * 50)))
    slice_amount = bet_amount / slices
    weighted = 0.0
    for i in range(slices):
        progress = i / (slices - 1)
        price = min(PRICE_CEILING, starting_price + slippage * progress**1.3)
        weighted += price * slice_amount
    return weighted / bet_amount


def preview_impact(
    bet_amount: float,
    starting_price: float,
    total_liquidity: float,
    side: BetSide,
) -> ImpactPreview:
    if bet_amount <= 0:
        raise ValueError(f"bet_amount must be positive, got {bet_amount}")
    k = _liquidity_k(starting_price, total_liquidity)
    ratio = bet_amount / k
    slippage = math.sqrt(ratio * starting_price * 0.4) * SLIPPAGE_FACTOR

    if side == BetSide.YES:
        final = min(PRICE_CEILING, starting_price + slippage * MARKET_MOVE_FACTOR)
    else:
        final = max(PRICE_FLOOR, starting_price - slippage * MARKET_MOVE_FACTOR)

    average = _average_price(bet_amount, starting_price, slippage, ratio)
    return ImpactPreview(
        estimated_position=round(bet_amount, 2),
        estimated_average_price=round(average, 1),
        price_impact=round(abs(final - starting_price), 1),
        estimated_final_price=round(final, 1),
    )
