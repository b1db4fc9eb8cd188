"""MarketApplicationService: market lifecycle outside of trading.

Reads run without an explicit transaction. Creation and option addition
write prices, so they run inside unit_of_work() and, for MULTIPLE markets,
always write a complete cross-section of option price points.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_common.database import unit_of_work
from src.sq_common.datetime_utils import utc_now
from src.sq_common.enums import BetSide, MarketStatus, MarketType
from src.sq_common.errors import (
    InvalidInputError,
    MarketAlreadyResolvedError,
    MarketNotFoundError,
    OptionNotFoundError,
    OptionsLockedError,
)
from src.sq_common.id_generator import generate_id
from src.sq_common.money import HUNDRED, ZERO
from src.sq_market.application.schemas import (
    CreateMarketRequest,
    ImpactPreviewResponse,
    MarketDetail,
    MarketListItem,
    MarketListResponse,
    OptionPricePointOut,
    PricePointOut,
    cursor_decode,
    cursor_encode,
)
from src.sq_market.domain.models import Market, MarketOption, OptionPricePoint, PricePoint
from src.sq_market.domain.repository import MarketRepositoryProtocol
from src.sq_market.infrastructure.persistence import MarketRepository
from src.sq_pricing.domain.impact import preview_impact
from src.sq_pricing.domain.normalizer import equal_split
from src.sq_pricing.domain.pool import EMPTY_POOL_PRICE, side_price

logger = logging.getLogger(__name__)


def cross_section(
    options: list[MarketOption], prices: dict[str, Decimal], timestamp: datetime
) -> list[OptionPricePoint]:
    """One point per option, all sharing ``timestamp``."""
    return [
        OptionPricePoint(
            option_id=o.id,
            price=prices[o.id],
            volume=o.total_volume,
            timestamp=timestamp,
        )
        for o in options
    ]


class MarketApplicationService:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor: str | None,
        limit: int,
    ) -> MarketListResponse:
        # status=None → default ACTIVE; status='ALL' → no filter
        sql_status = None if status == "ALL" else (status or MarketStatus.ACTIVE.value)
        cursor_ts, cursor_id = cursor_decode(cursor)

        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(
            db, sql_status, category, cursor_ts, cursor_id, limit + 1
        )
        has_more = len(markets) > limit
        page = markets[:limit]

        items = [MarketListItem.from_domain(m) for m in page]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_market(self, db: AsyncSession, market_id: str) -> MarketDetail:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        options = await self._repo.list_options(db, market_id) if not market.is_binary else []
        return MarketDetail.from_domain(market, options)

    async def create_market(
        self, db: AsyncSession, user_id: str, req: CreateMarketRequest
    ) -> MarketDetail:
        now = utc_now()
        binary = req.market_type == MarketType.BINARY
        market = Market(
            id=generate_id("mkt"),
            title=req.title,
            description=req.description,
            category=req.category,
            market_type=req.market_type,
            status=MarketStatus.ACTIVE.value,
            end_date=req.end_date,
            resolved=False,
            outcome=None,
            winning_option_id=None,
            yes_price=EMPTY_POOL_PRICE if binary else None,
            total_volume=ZERO,
            resolution_date=None,
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )
        options = [
            MarketOption(
                id=generate_id("opt"),
                event_id=market.id,
                title=title,
                price=ZERO,
                total_volume=ZERO,
                created_at=now,
            )
            for title in req.options
        ]
        prices = equal_split([o.id for o in options])
        for o in options:
            o.price = prices[o.id]

        async with unit_of_work(db):
            await self._repo.insert_market(db, market)
            if binary:
                await self._repo.insert_price_point(
                    db,
                    PricePoint(
                        event_id=market.id,
                        yes_price=EMPTY_POOL_PRICE,
                        no_price=HUNDRED - EMPTY_POOL_PRICE,
                        volume=ZERO,
                        timestamp=now,
                    ),
                )
            else:
                for o in options:
                    await self._repo.insert_option(db, o)
                await self._repo.insert_option_price_points(db, cross_section(options, prices, now))

        logger.info(
            "Market created: id=%s type=%s options=%d by=%s",
            market.id, market.market_type, len(options), user_id,
        )
        return MarketDetail.from_domain(market, options)

    async def add_option(self, db: AsyncSession, market_id: str, title: str) -> MarketDetail:
        """Admin: add an option to a MULTIPLE market that has no bets yet.

        Every option is reset to an equal share so prices still sum to 100.
        """
        async with unit_of_work(db):
            market = await self._repo.lock_market(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            if market.is_binary:
                raise InvalidInputError("options can only be added to MULTIPLE markets")
            if market.resolved:
                raise MarketAlreadyResolvedError(market_id)
            if await self._repo.count_bets(db, market_id) > 0:
                raise OptionsLockedError("market already has bets")

            options = await self._repo.list_options(db, market_id)
            if any(o.title.lower() == title.lower() for o in options):
                raise InvalidInputError(f"an option titled {title!r} already exists")

            now = utc_now()
            new_option = MarketOption(
                id=generate_id("opt"),
                event_id=market_id,
                title=title,
                price=ZERO,
                total_volume=ZERO,
                created_at=now,
            )
            options.append(new_option)
            prices = equal_split([o.id for o in options])
            new_option.price = prices[new_option.id]
            await self._repo.insert_option(db, new_option)
            await self._repo.update_option_prices(db, prices)
            for o in options:
                o.price = prices[o.id]
            await self._repo.insert_option_price_points(db, cross_section(options, prices, now))

        logger.info("Option added: market=%s option=%s", market_id, new_option.id)
        return MarketDetail.from_domain(market, options)

    async def get_price_history(self, db: AsyncSession, market_id: str) -> list[PricePointOut]:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        if not market.is_binary:
            raise InvalidInputError("use the options price history for MULTIPLE markets")
        points = await self._repo.list_price_points(db, market_id)
        if not points and market.yes_price is not None:
            points = [
                PricePoint(
                    event_id=market.id,
                    yes_price=market.yes_price,
                    no_price=HUNDRED - market.yes_price,
                    volume=market.total_volume,
                    timestamp=utc_now(),
                )
            ]
        return [PricePointOut.from_domain(p) for p in points]

    async def get_option_price_history(
        self, db: AsyncSession, market_id: str
    ) -> list[OptionPricePointOut]:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        if market.is_binary:
            raise InvalidInputError("BINARY markets have no option price history")
        points = await self._repo.list_option_price_points(db, market_id)
        if not points:
            options = await self._repo.list_options(db, market_id)
            now = utc_now()
            points = [
                OptionPricePoint(
                    option_id=o.id,
                    option_title=o.title,
                    price=o.price,
                    volume=o.total_volume,
                    timestamp=now,
                )
                for o in options
            ]
        return [OptionPricePointOut.from_domain(p) for p in points]

    async def preview_impact(
        self,
        db: AsyncSession,
        market_id: str,
        amount: Decimal,
        side: BetSide,
        option_id: str | None,
    ) -> ImpactPreviewResponse:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        if market.is_binary:
            yes_price = market.yes_price if market.yes_price is not None else EMPTY_POOL_PRICE
            starting = side_price(yes_price, side)
        else:
            if option_id is None:
                raise InvalidInputError("option_id is required for MULTIPLE markets")
            options = await self._repo.list_options(db, market_id)
            match = next((o for o in options if o.id == option_id), None)
            if match is None:
                raise OptionNotFoundError(option_id, market_id)
            starting = side_price(match.price, side)

        preview = preview_impact(float(amount), float(starting), float(market.total_volume), side)
        return ImpactPreviewResponse(
            market_id=market_id,
            side=side.value,
            amount=float(amount),
            starting_price=float(starting),
            estimated_position=preview.estimated_position,
            estimated_average_price=preview.estimated_average_price,
            price_impact=preview.price_impact,
            estimated_final_price=preview.estimated_final_price,
        )
