"""Unit tests for sq_betting.domain.positions."""

from decimal import Decimal

from src.sq_betting.domain.positions import (
    compute_all_positions,
    compute_position,
    net_position,
    top_holders,
)
from src.sq_common.enums import BetSide

D = Decimal


class TestComputePosition:
    def test_no_bets(self, make_bet) -> None:
        assert compute_position([], "u_a") is None

    def test_sells_cancel_buys(self, make_bet) -> None:
        bets = [
            make_bet(amount=D("30")),
            make_bet(amount=D("20")),
            make_bet(amount=D("15"), trade_type="SELL"),
        ]
        pos = compute_position(bets, "u_a")
        assert pos is not None
        assert pos.side == "YES"
        assert pos.position_value == D("35")

    def test_average_price_from_buy_legs_only(self, make_bet) -> None:
        # Legacy rows carry position_value != amount
        bets = [
            make_bet(amount=D("10"), position_value=D("20")),
            make_bet(amount=D("30"), position_value=D("40")),
            make_bet(amount=D("5"), trade_type="SELL"),
        ]
        pos = compute_position(bets, "u_a")
        assert pos.average_price == D("66.6667")   # 40 / 60 * 100
        assert pos.position_value == D("55")
        assert pos.potential_payout == D("82.50")  # 55 / 0.666667

    def test_parimutuel_buys_price_at_par(self, make_bet) -> None:
        pos = compute_position([make_bet(amount=D("25"), price=D("40"))], "u_a")
        assert pos.average_price == D("100")
        assert pos.potential_payout == D("25")

    def test_fully_sold_is_none(self, make_bet) -> None:
        bets = [make_bet(amount=D("10")), make_bet(amount=D("10"), trade_type="SELL")]
        assert compute_position(bets, "u_a") is None

    def test_no_side(self, make_bet) -> None:
        pos = compute_position([make_bet(side="NO", amount=D("12"))], "u_a")
        assert pos.side == "NO"

    def test_yes_reported_first_when_both_positive(self, make_bet) -> None:
        bets = [make_bet(side="NO", amount=D("50")), make_bet(side="YES", amount=D("5"))]
        assert compute_position(bets, "u_a").side == "YES"

    def test_scope_filters_user_option_and_status(self, make_bet) -> None:
        bets = [
            make_bet(amount=D("10")),
            make_bet(amount=D("99"), user_id="u_b"),
            make_bet(amount=D("7"), option_id="opt_1"),
            make_bet(amount=D("3"), status="REFUNDED"),
        ]
        assert compute_position(bets, "u_a").position_value == D("10")
        assert compute_position(bets, "u_a", "opt_1").position_value == D("7")


class TestComputeAllPositions:
    def test_both_sides_reported(self, make_bet) -> None:
        bets = [make_bet(side="NO", amount=D("50")), make_bet(side="YES", amount=D("5"))]
        positions = compute_all_positions(bets, "u_a")
        assert [p.side for p in positions] == ["YES", "NO"]

    def test_empty(self, make_bet) -> None:
        assert compute_all_positions([make_bet(user_id="u_b")], "u_a") == []


class TestNetPosition:
    def test_signed_sum(self, make_bet) -> None:
        bets = [make_bet(amount=D("40")), make_bet(amount=D("15"), trade_type="SELL")]
        assert net_position(bets, "u_a", BetSide.YES) == D("25")
        assert net_position(bets, "u_a", BetSide.NO) == D("0")


class TestTopHolders:
    def test_ranked_by_net_stake(self, make_bet) -> None:
        bets = [
            make_bet(user_id="u_a", amount=D("10")),
            make_bet(user_id="u_b", amount=D("50"), side="NO"),
            make_bet(user_id="u_c", amount=D("30")),
            make_bet(user_id="u_c", amount=D("30"), side="NO"),
        ]
        holders = top_holders(bets)
        assert [(h.rank, h.user_id) for h in holders] == [(1, "u_c"), (2, "u_b"), (3, "u_a")]
        assert holders[0].position == "NEUTRAL"
        assert holders[1].position == "NO"
        assert holders[2].position == "YES"

    def test_excludes_closed_out_and_inactive(self, make_bet) -> None:
        bets = [
            make_bet(user_id="u_a", amount=D("10")),
            make_bet(user_id="u_a", amount=D("10"), trade_type="SELL"),
            make_bet(user_id="u_b", amount=D("10"), status="LOST"),
        ]
        assert top_holders(bets) == []

    def test_limit(self, make_bet) -> None:
        bets = [make_bet(user_id=f"u_{i:02d}", amount=D(str(i + 1))) for i in range(25)]
        holders = top_holders(bets)
        assert len(holders) == 20
        assert holders[0].user_id == "u_24"
