"""BettingService: the bet transaction orchestrator plus position reads.

place_bet runs VALIDATE -> COMPUTE_PRICE -> PERSIST -> NOTIFY:

  1. Input checks (side, type, amount range) with no database access.
  2. Inside one transaction: lock the event row FOR UPDATE, then check
     market state, option membership and (for SELL) the net position
     recomputed from bet rows. Nothing is written until all checks pass.
  3. BINARY: re-derive pools from (total_volume, yes_price) and apply the
     trade. MULTIPLE: renormalize every option from ACTIVE YES demand.
  4. Insert the bet, update prices/volumes, append price history (one
     point for BINARY, a full cross-section for MULTIPLE). Commit.
  5. Publish BET_PLACED after commit; a failed publish is only logged.

No balance moves at trade time; settlement credits winners later.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_betting.application.schemas import (
    BetListResponse,
    BetResponse,
    HolderOut,
    MyPositionsResponse,
    PlaceBetRequest,
    PositionOut,
)
from src.sq_betting.domain.models import Bet
from src.sq_betting.domain.positions import compute_all_positions, net_position, top_holders
from src.sq_betting.domain.repository import BetRepositoryProtocol
from src.sq_betting.infrastructure.persistence import BetRepository
from src.sq_common.database import unit_of_work
from src.sq_common.datetime_utils import utc_now
from src.sq_common.enums import BetSide, BetStatus, TradeType
from src.sq_common.errors import InvalidInputError, MarketNotFoundError, OptionNotFoundError
from src.sq_common.id_generator import generate_id
from src.sq_common.money import HUNDRED
from src.sq_market.application.service import cross_section
from src.sq_market.domain.models import Market, PricePoint
from src.sq_market.domain.repository import MarketRepositoryProtocol
from src.sq_market.infrastructure.persistence import MarketRepository
from src.sq_notification.application.dispatcher import dispatch_best_effort
from src.sq_notification.domain.models import BetPlaced
from src.sq_notification.domain.sender import NotificationSenderProtocol
from src.sq_notification.infrastructure.redis_publisher import RedisNotificationPublisher
from src.sq_pricing.domain.normalizer import normalize
from src.sq_pricing.domain.pool import EMPTY_POOL_PRICE, apply_bet, derive_pools, side_price
from src.sq_risk.rules.bet_limits import check_bet_amount, parse_side, parse_trade_type
from src.sq_risk.rules.market_status import check_market_tradeable
from src.sq_risk.rules.position_check import check_position_available

logger = logging.getLogger(__name__)


class BettingService:
    def __init__(
        self,
        bets: BetRepositoryProtocol | None = None,
        markets: MarketRepositoryProtocol | None = None,
        sender: NotificationSenderProtocol | None = None,
    ) -> None:
        self._bets: BetRepositoryProtocol = bets or BetRepository()
        self._markets: MarketRepositoryProtocol = markets or MarketRepository()
        self._sender: NotificationSenderProtocol = sender or RedisNotificationPublisher()

    # ------------------------------------------------------------------
    # Trade
    # ------------------------------------------------------------------

    async def place_bet(
        self, db: AsyncSession, user_id: str, req: PlaceBetRequest
    ) -> BetResponse:
        side = parse_side(req.side)
        trade_type = parse_trade_type(req.trade_type)
        check_bet_amount(req.amount)
        amount = req.amount

        async with unit_of_work(db):
            market = check_market_tradeable(
                await self._markets.lock_market(db, req.event_id), req.event_id
            )
            if market.is_binary:
                if req.option_id is not None:
                    raise InvalidInputError("option_id is not accepted for BINARY markets")
                bet, response = await self._trade_binary(
                    db, market, user_id, side, trade_type, amount
                )
            else:
                bet, response = await self._trade_multiple(
                    db, market, user_id, req.option_id, side, trade_type, amount
                )

        logger.info(
            "Bet placed: id=%s market=%s option=%s user=%s %s %s amount=%s price=%s",
            bet.id, market.id, bet.option_id, user_id,
            trade_type.value, side.value, amount, bet.price,
        )
        await dispatch_best_effort(
            self._sender,
            [
                BetPlaced(
                    user_id=user_id,
                    event_id=market.id,
                    bet_id=bet.id,
                    side=side.value,
                    trade_type=trade_type.value,
                    amount=amount,
                    price=bet.price,
                    option_id=bet.option_id,
                )
            ],
        )
        return response

    async def _check_sell(
        self,
        db: AsyncSession,
        market_id: str,
        user_id: str,
        option_id: str | None,
        side: BetSide,
        amount: Decimal,
    ) -> None:
        user_bets = await self._bets.list_user_market_bets(db, user_id, market_id)
        check_position_available(amount, net_position(user_bets, user_id, side, option_id))

    def _new_bet(
        self,
        market_id: str,
        user_id: str,
        option_id: str | None,
        side: BetSide,
        trade_type: TradeType,
        amount: Decimal,
        price: Decimal,
    ) -> Bet:
        signed = amount if trade_type == TradeType.BUY else -amount
        return Bet(
            id=generate_id("bet"),
            user_id=user_id,
            event_id=market_id,
            option_id=option_id,
            side=side.value,
            trade_type=trade_type.value,
            amount=amount,
            price=price,
            position_value=signed,
            status=BetStatus.ACTIVE.value,
            created_at=utc_now(),
        )

    async def _trade_binary(
        self,
        db: AsyncSession,
        market: Market,
        user_id: str,
        side: BetSide,
        trade_type: TradeType,
        amount: Decimal,
    ) -> tuple[Bet, BetResponse]:
        if trade_type == TradeType.SELL:
            await self._check_sell(db, market.id, user_id, None, side, amount)

        yes_price = market.yes_price if market.yes_price is not None else EMPTY_POOL_PRICE
        update = apply_bet(derive_pools(market.total_volume, yes_price), amount, side, trade_type)
        bet = self._new_bet(
            market.id, user_id, None, side, trade_type, amount, side_price(yes_price, side)
        )
        new_volume = market.total_volume + bet.signed_stake

        await self._bets.insert_bet(db, bet)
        await self._markets.update_market_pricing(db, market.id, update.yes_price, new_volume)
        await self._markets.insert_price_point(
            db,
            PricePoint(
                event_id=market.id,
                yes_price=update.yes_price,
                no_price=HUNDRED - update.yes_price,
                volume=new_volume,
                timestamp=bet.created_at,
            ),
        )
        return bet, BetResponse.from_domain(bet, yes_price=update.yes_price)

    async def _trade_multiple(
        self,
        db: AsyncSession,
        market: Market,
        user_id: str,
        option_id: str | None,
        side: BetSide,
        trade_type: TradeType,
        amount: Decimal,
    ) -> tuple[Bet, BetResponse]:
        if option_id is None:
            raise InvalidInputError("option_id is required for MULTIPLE markets")
        options = await self._markets.list_options(db, market.id)
        option = next((o for o in options if o.id == option_id), None)
        if option is None:
            raise OptionNotFoundError(option_id, market.id)
        if trade_type == TradeType.SELL:
            await self._check_sell(db, market.id, user_id, option_id, side, amount)

        active = await self._bets.list_active_bets(db, market.id)
        bet = self._new_bet(
            market.id, user_id, option_id, side, trade_type, amount, side_price(option.price, side)
        )
        prices = normalize([o.id for o in options], [*active, bet])
        option.total_volume += bet.signed_stake
        for o in options:
            o.price = prices[o.id]

        await self._bets.insert_bet(db, bet)
        await self._markets.update_option_prices(db, prices)
        await self._markets.add_option_volume(db, option_id, bet.signed_stake)
        await self._markets.update_market_pricing(
            db, market.id, None, market.total_volume + bet.signed_stake
        )
        await self._markets.insert_option_price_points(
            db, cross_section(options, prices, bet.created_at)
        )
        return bet, BetResponse.from_domain(bet, option_prices=prices)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_my_bets(
        self, db: AsyncSession, user_id: str, status: str | None, limit: int
    ) -> BetListResponse:
        if status is not None and status not in BetStatus.__members__:
            raise InvalidInputError(f"unknown bet status {status!r}")
        bets = await self._bets.list_user_bets(db, user_id, status, limit)
        return BetListResponse(items=[BetResponse.from_domain(b) for b in bets])

    async def get_my_positions(
        self, db: AsyncSession, user_id: str, market_id: str
    ) -> MyPositionsResponse:
        market = await self._markets.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        bets = await self._bets.list_user_market_bets(db, user_id, market_id)
        if market.is_binary:
            positions = [PositionOut.from_domain(p) for p in compute_all_positions(bets, user_id)]
        else:
            positions = [
                PositionOut.from_domain(p, option_id=o.id, option_title=o.title)
                for o in await self._markets.list_options(db, market_id)
                for p in compute_all_positions(bets, user_id, o.id)
            ]
        return MyPositionsResponse(market_id=market_id, positions=positions)

    async def get_holders(self, db: AsyncSession, market_id: str) -> list[HolderOut]:
        market = await self._markets.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        bets = await self._bets.list_active_bets(db, market_id)
        return [HolderOut.from_domain(h) for h in top_holders(bets)]
