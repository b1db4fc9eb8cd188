from decimal import Decimal

import pytest

from src.sq_common.enums import BetSide
from src.sq_common.errors import (
    InvalidInputError,
    MarketAlreadyResolvedError,
    MarketNotFoundError,
    OptionNotFoundError,
    OptionsLockedError,
)
from src.sq_market.application.schemas import CreateMarketRequest
from src.sq_market.application.service import MarketApplicationService

D = Decimal


@pytest.fixture
def service(market_repo) -> MarketApplicationService:
    return MarketApplicationService(repo=market_repo)


class TestCreateMarket:
    @pytest.mark.asyncio
    async def test_binary_starts_at_50(self, service, market_repo, db) -> None:
        detail = await service.create_market(
            db, "u_admin", CreateMarketRequest(title="  Will it snow?  ", category="weather")
        )
        assert detail.title == "Will it snow?"
        assert (detail.yes_price, detail.no_price) == (50.0, 50.0)
        assert detail.options == []
        (point,) = market_repo.price_points
        assert point.event_id == detail.id
        assert point.volume == D("0")
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_multiple_starts_with_equal_split(self, service, market_repo, db) -> None:
        detail = await service.create_market(
            db,
            "u_admin",
            CreateMarketRequest(title="Who wins?", market_type="MULTIPLE", options=["A", "B", "C"]),
        )
        assert detail.yes_price is None
        assert sorted(o.price for o in detail.options) == [33.3333, 33.3333, 33.3334]
        stored = market_repo.options[detail.id]
        assert sum(o.price for o in stored) == D("100")
        assert len(market_repo.option_points) == 3
        assert len({p.timestamp for p in market_repo.option_points}) == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"market_type": "MULTIPLE", "options": ["only"]},
            {"market_type": "BINARY", "options": ["A", "B"]},
            {"market_type": "MULTIPLE", "options": ["Alex", "alex "]},
            {"title": "   "},
        ],
    )
    def test_request_validation(self, kwargs) -> None:
        kwargs.setdefault("title", "t")
        with pytest.raises(ValueError):
            CreateMarketRequest(**kwargs)


class TestAddOption:
    @pytest.fixture
    def two_way(self, market_repo, make_market):
        return market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None), ["Alex", "Blair"]
        )

    @pytest.mark.asyncio
    async def test_resets_to_equal_split(self, service, two_way, market_repo, db) -> None:
        detail = await service.add_option(db, "mkt_m", "Casey")

        assert [o.title for o in detail.options] == ["Alex", "Blair", "Casey"]
        stored = market_repo.options["mkt_m"]
        assert sorted(o.price for o in stored) == [D("33.3333"), D("33.3333"), D("33.3334")]
        assert sum(o.price for o in stored) == D("100")
        assert len(market_repo.option_points) == 3
        assert market_repo.locked == ["mkt_m"]

    @pytest.mark.asyncio
    async def test_locked_once_bets_exist(
        self, service, two_way, bet_repo, make_bet, market_repo, db
    ) -> None:
        bet_repo.seed(make_bet(event_id="mkt_m", option_id="mkt_m_opt0"))
        with pytest.raises(OptionsLockedError):
            await service.add_option(db, "mkt_m", "Casey")
        assert len(market_repo.options["mkt_m"]) == 2
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_title_case_insensitive(self, service, two_way, db) -> None:
        with pytest.raises(InvalidInputError):
            await service.add_option(db, "mkt_m", "ALEX")

    @pytest.mark.asyncio
    async def test_binary_market(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(make_market(id="mkt_1"))
        with pytest.raises(InvalidInputError):
            await service.add_option(db, "mkt_1", "Casey")

    @pytest.mark.asyncio
    async def test_resolved_market(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None,
                        status="CANCELLED", resolved=True),
            ["Alex", "Blair"],
        )
        with pytest.raises(MarketAlreadyResolvedError):
            await service.add_option(db, "mkt_m", "Casey")

    @pytest.mark.asyncio
    async def test_missing_market(self, service, db) -> None:
        with pytest.raises(MarketNotFoundError):
            await service.add_option(db, "nope", "Casey")


class TestReads:
    @pytest.mark.asyncio
    async def test_pagination_and_default_status(self, service, market_repo, make_market, db) -> None:
        for i in range(3):
            market_repo.add_market(make_market(id=f"mkt_{i}"))
        market_repo.add_market(make_market(id="mkt_closed", status="CLOSED"))

        first = await service.list_markets(db, None, None, None, 2)
        assert [m.id for m in first.items] == ["mkt_2", "mkt_1"]
        assert first.has_more is True

        second = await service.list_markets(db, None, None, first.next_cursor, 2)
        assert [m.id for m in second.items] == ["mkt_0"]
        assert second.has_more is False
        assert second.next_cursor is None

        everything = await service.list_markets(db, "ALL", None, None, 10)
        assert len(everything.items) == 4

    @pytest.mark.asyncio
    async def test_get_market_not_found(self, service, db) -> None:
        with pytest.raises(MarketNotFoundError):
            await service.get_market(db, "nope")

    @pytest.mark.asyncio
    async def test_price_history_falls_back_to_current(
        self, service, market_repo, make_market, db
    ) -> None:
        market_repo.add_market(make_market(id="mkt_1", yes_price=D("62.5"), total_volume=D("8")))
        (point,) = await service.get_price_history(db, "mkt_1")
        assert (point.yes_price, point.no_price, point.volume) == (62.5, 37.5, 8.0)

    @pytest.mark.asyncio
    async def test_option_history_falls_back_to_current(
        self, service, market_repo, make_market, db
    ) -> None:
        market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None), ["Alex", "Blair"]
        )
        points = await service.get_option_price_history(db, "mkt_m")
        assert [(p.option_title, p.price) for p in points] == [("Alex", 50.0), ("Blair", 50.0)]
        assert len({p.timestamp for p in points}) == 1

    @pytest.mark.asyncio
    async def test_history_kind_must_match_market_type(
        self, service, market_repo, make_market, db
    ) -> None:
        market_repo.add_market(make_market(id="mkt_1"))
        market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None), ["Alex", "Blair"]
        )
        with pytest.raises(InvalidInputError):
            await service.get_option_price_history(db, "mkt_1")
        with pytest.raises(InvalidInputError):
            await service.get_price_history(db, "mkt_m")


class TestImpactPreview:
    @pytest.mark.asyncio
    async def test_binary(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(make_market(id="mkt_1"))
        preview = await service.preview_impact(db, "mkt_1", D("20"), BetSide.YES, None)
        assert preview.starting_price == 50.0
        assert preview.estimated_final_price > 50.0
        assert preview.estimated_position > 0

    @pytest.mark.asyncio
    async def test_no_side_starts_from_no_price(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(
            make_market(id="mkt_1", yes_price=D("80"), total_volume=D("100"))
        )
        preview = await service.preview_impact(db, "mkt_1", D("10"), BetSide.NO, None)
        assert preview.starting_price == 20.0
        assert preview.estimated_average_price == 25.1
        assert preview.estimated_final_price == 10.1
        assert preview.price_impact == 9.9

    @pytest.mark.asyncio
    async def test_multiple_uses_option_price(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None), ["Alex", "Blair"]
        )
        preview = await service.preview_impact(db, "mkt_m", D("5"), BetSide.YES, "mkt_m_opt1")
        assert preview.starting_price == 50.0

    @pytest.mark.asyncio
    async def test_multiple_needs_known_option(self, service, market_repo, make_market, db) -> None:
        market_repo.add_market(
            make_market(id="mkt_m", market_type="MULTIPLE", yes_price=None), ["Alex", "Blair"]
        )
        with pytest.raises(InvalidInputError):
            await service.preview_impact(db, "mkt_m", D("5"), BetSide.YES, None)
        with pytest.raises(OptionNotFoundError):
            await service.preview_impact(db, "mkt_m", D("5"), BetSide.YES, "opt_zzz")
