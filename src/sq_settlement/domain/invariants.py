"""Per-market consistency checks.

VOL-1: events.total_volume == signed sum of ACTIVE bet amounts
VOL-2: market_options.total_volume == signed sum of that option's ACTIVE bets
PRC-1: MULTIPLE option prices sum to exactly 100
PRC-2: BINARY yes_price within the pool clamp [5, 95]

Each check returns violation strings instead of raising, so one scan can
report every broken market.
"""

import logging
from collections.abc import Iterable

from src.sq_betting.domain.models import Bet
from src.sq_common.money import HUNDRED, ZERO
from src.sq_market.domain.models import Market, MarketOption
from src.sq_pricing.domain.pool import MAX_PRICE, MIN_PRICE

logger = logging.getLogger(__name__)


def check_market_invariants(
    market: Market, options: list[MarketOption], bets: Iterable[Bet]
) -> list[str]:
    active = [b for b in bets if b.is_active and b.event_id == market.id]
    violations: list[str] = []

    expected = sum((b.signed_stake for b in active), ZERO)
    if market.total_volume != expected:
        violations.append(
            f"VOL-1 violated: market={market.id} total_volume={market.total_volume} "
            f"!= signed bet sum={expected}"
        )

    if market.is_binary:
        price = market.yes_price
        if price is not None and not (MIN_PRICE <= price <= MAX_PRICE):
            violations.append(f"PRC-2 violated: market={market.id} yes_price={price}")
    else:
        for o in options:
            option_sum = sum((b.signed_stake for b in active if b.option_id == o.id), ZERO)
            if o.total_volume != option_sum:
                violations.append(
                    f"VOL-2 violated: option={o.id} total_volume={o.total_volume} "
                    f"!= signed bet sum={option_sum}"
                )
        price_sum = sum((o.price for o in options), ZERO)
        if options and price_sum != HUNDRED:
            violations.append(
                f"PRC-1 violated: market={market.id} option prices sum to {price_sum}"
            )

    for v in violations:
        logger.error(v)
    return violations
