"""Unit tests for sq_pricing.domain.pool: parimutuel binary pricing."""

from decimal import Decimal

import pytest

from src.sq_common.enums import BetSide, TradeType
from src.sq_pricing.domain.pool import (
    EMPTY_POOL_PRICE,
    MAX_PRICE,
    MIN_PRICE,
    Pools,
    apply_bet,
    derive_pools,
    price_from_pools,
    side_price,
)

D = Decimal


class TestDerivePools:
    def test_split_by_yes_price(self) -> None:
        pools = derive_pools(D("100"), D("60"))
        assert pools.yes == D("60")
        assert pools.no == D("40")
        assert pools.total == D("100")

    def test_empty_market(self) -> None:
        pools = derive_pools(D("0"), D("50"))
        assert pools.total == D("0")


class TestPriceFromPools:
    def test_empty_pool_prices_at_50(self) -> None:
        assert price_from_pools(Pools(D("0"), D("0"))) == EMPTY_POOL_PRICE

    def test_clamped_high(self) -> None:
        assert price_from_pools(Pools(D("100"), D("0"))) == MAX_PRICE

    def test_clamped_low(self) -> None:
        assert price_from_pools(Pools(D("0"), D("100"))) == MIN_PRICE

    def test_quantized_to_4dp(self) -> None:
        assert price_from_pools(Pools(D("2"), D("1"))) == D("66.6667")


class TestApplyBet:
    def test_first_yes_bet_on_empty_market_hits_ceiling(self) -> None:
        update = apply_bet(Pools(D("0"), D("0")), D("20"), BetSide.YES)
        assert update.pools == Pools(D("20"), D("0"))
        assert update.yes_price == D("95")

    def test_two_traders_sequence(self) -> None:
        # A buys $20 YES on a fresh market -> 95; B then buys $20 NO.
        # Pools are re-derived from (20, 95): yes=19, no=1 -> 19 / 40.
        first = apply_bet(derive_pools(D("0"), D("50")), D("20"), BetSide.YES)
        second = apply_bet(derive_pools(D("20"), first.yes_price), D("20"), BetSide.NO)
        assert second.pools.yes == D("19")
        assert second.pools.no == D("21")
        assert second.yes_price == D("47.5")

    def test_buy_yes_raises_price(self) -> None:
        update = apply_bet(derive_pools(D("100"), D("50")), D("50"), BetSide.YES)
        assert update.yes_price == D("66.6667")

    def test_buy_no_lowers_price(self) -> None:
        update = apply_bet(derive_pools(D("100"), D("50")), D("50"), BetSide.NO)
        assert update.yes_price == D("33.3333")

    def test_sell_yes_removes_payout_from_yes_pool(self) -> None:
        update = apply_bet(
            derive_pools(D("100"), D("50")), D("20"), BetSide.YES, TradeType.SELL
        )
        assert update.pools == Pools(D("30"), D("50"))
        assert update.yes_price == D("37.5")

    def test_sell_never_drains_pool_below_zero(self) -> None:
        update = apply_bet(Pools(D("10"), D("90")), D("30"), BetSide.YES, TradeType.SELL)
        assert update.pools.yes == D("0")
        assert update.yes_price == MIN_PRICE

    def test_full_round_trip_stays_pinned(self) -> None:
        # $20 YES then the same $20 sold back: the clamped 95 hands the seller
        # a pool of 19, so the SELL floors YES at 0 and posts the floor.
        bought = apply_bet(derive_pools(D("0"), D("50")), D("20"), BetSide.YES)
        sold = apply_bet(
            derive_pools(D("20"), bought.yes_price), D("20"), BetSide.YES, TradeType.SELL
        )
        assert sold.pools == Pools(D("0"), D("1"))
        assert sold.yes_price == MIN_PRICE

    @pytest.mark.parametrize("amount", [D("0"), D("-5")])
    def test_non_positive_amount_rejected(self, amount: Decimal) -> None:
        with pytest.raises(ValueError):
            apply_bet(Pools(D("10"), D("10")), amount, BetSide.YES)

    def test_price_always_within_bounds(self) -> None:
        pools = Pools(D("0"), D("0"))
        for amount, side in [(D("300"), BetSide.YES), (D("1"), BetSide.NO), (D("299"), BetSide.NO)]:
            update = apply_bet(pools, amount, side)
            assert MIN_PRICE <= update.yes_price <= MAX_PRICE
            pools = update.pools


class TestSidePrice:
    def test_yes(self) -> None:
        assert side_price(D("62.5"), BetSide.YES) == D("62.5")

    def test_no_is_complement(self) -> None:
        assert side_price(D("62.5"), BetSide.NO) == D("37.5")
