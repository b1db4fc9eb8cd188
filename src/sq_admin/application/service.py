"""AdminService: resolution, cancellation and the reconciliation scan.

Resolution and cancellation lock the event row FOR UPDATE, so they
serialize with in-flight trades on the same market. Every bet status,
balance and market-row change commits together or not at all;
notifications go out after the commit.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.domain.repository import AccountRepositoryProtocol
from src.sq_account.infrastructure.persistence import AccountRepository
from src.sq_betting.domain.repository import BetRepositoryProtocol
from src.sq_betting.infrastructure.persistence import BetRepository
from src.sq_common.database import unit_of_work
from src.sq_common.datetime_utils import utc_now
from src.sq_common.enums import BetSide, MarketStatus
from src.sq_common.errors import (
    InvalidInputError,
    MarketAlreadyResolvedError,
    MarketNotFoundError,
    OptionNotFoundError,
)
from src.sq_market.domain.models import Market
from src.sq_market.domain.repository import MarketRepositoryProtocol
from src.sq_market.infrastructure.persistence import MarketRepository
from src.sq_notification.application.dispatcher import dispatch_best_effort
from src.sq_notification.domain.models import MarketCancelled, MarketResolved
from src.sq_notification.domain.sender import NotificationSenderProtocol
from src.sq_notification.infrastructure.redis_publisher import RedisNotificationPublisher
from src.sq_settlement.domain.invariants import check_market_invariants
from src.sq_settlement.domain.refund import plan_refund
from src.sq_settlement.domain.settlement import plan_resolution

logger = logging.getLogger(__name__)

_SCAN_PAGE_SIZE = 100


class AdminService:
    def __init__(
        self,
        markets: MarketRepositoryProtocol | None = None,
        bets: BetRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        sender: NotificationSenderProtocol | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = markets or MarketRepository()
        self._bets: BetRepositoryProtocol = bets or BetRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._sender: NotificationSenderProtocol = sender or RedisNotificationPublisher()

    async def _lock_unresolved(self, db: AsyncSession, market_id: str) -> Market:
        market = await self._markets.lock_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        if market.resolved:
            raise MarketAlreadyResolvedError(market_id)
        return market

    async def resolve_market(
        self,
        db: AsyncSession,
        market_id: str,
        outcome: bool | None,
        winning_option_id: str | None,
    ) -> dict[str, Any]:
        async with unit_of_work(db):
            market = await self._lock_unresolved(db, market_id)
            if market.is_binary:
                if outcome is None or winning_option_id is not None:
                    raise InvalidInputError("BINARY markets resolve with {outcome: true|false}")
                winner = BetSide.YES.value if outcome else BetSide.NO.value
            else:
                if winning_option_id is None or outcome is not None:
                    raise InvalidInputError("MULTIPLE markets resolve with {winning_option_id}")
                options = await self._markets.list_options(db, market_id)
                match = next((o for o in options if o.id == winning_option_id), None)
                if match is None:
                    raise OptionNotFoundError(winning_option_id, market_id)
                winner = match.title

            bets = await self._bets.list_active_bets(db, market_id)
            plan = plan_resolution(bets, outcome, winning_option_id)
            await self._markets.mark_resolved(db, market_id, outcome, winning_option_id, utc_now())
            await self._bets.set_statuses(db, plan.statuses)
            for delta in plan.deltas:
                await self._accounts.apply_settlement(db, delta)

        logger.info(
            "Market resolved: id=%s winner=%s bets=%d payout=%s",
            market_id, winner, len(plan.outcomes), plan.total_payout,
        )
        await dispatch_best_effort(
            self._sender,
            [
                MarketResolved(
                    user_id=o.bet.user_id,
                    event_id=market_id,
                    event_title=market.title,
                    bet_id=o.bet.id,
                    won=o.won,
                    amount=o.payout if o.won else o.bet.amount,
                    winner=winner,
                )
                for o in plan.outcomes
            ],
        )
        return {
            "market_id": market_id,
            "status": MarketStatus.RESOLVED.value,
            "outcome": outcome,
            "winning_option_id": winning_option_id,
            "settled_bets": len(plan.outcomes),
            "winners": sum(1 for o in plan.outcomes if o.won),
            "total_payout": float(plan.total_payout),
        }

    async def cancel_market(self, db: AsyncSession, market_id: str) -> dict[str, Any]:
        async with unit_of_work(db):
            market = await self._lock_unresolved(db, market_id)
            bets = await self._bets.list_active_bets(db, market_id)
            plan = plan_refund(bets)
            await self._markets.mark_cancelled(db, market_id, utc_now())
            await self._bets.set_statuses(db, plan.statuses)

        logger.info(
            "Market cancelled: id=%s refunded_bets=%d users=%d",
            market_id, len(plan.statuses), len(plan.bets_by_user),
        )
        await dispatch_best_effort(
            self._sender,
            [
                MarketCancelled(
                    user_id=user_id, event_id=market_id, event_title=market.title, bet_ids=bet_ids
                )
                for user_id, bet_ids in plan.bets_by_user.items()
            ],
        )
        return {
            "market_id": market_id,
            "status": MarketStatus.CANCELLED.value,
            "refunded_bets": len(plan.statuses),
        }

    async def verify_all_invariants(self, db: AsyncSession) -> dict[str, object]:
        """Scan every unresolved market for volume and price drift."""
        violations: list[str] = []
        checked = 0
        for status in (MarketStatus.ACTIVE.value, MarketStatus.CLOSED.value):
            cursor_ts: str | None = None
            cursor_id: str | None = None
            while True:
                page = await self._markets.list_markets(
                    db, status, None, cursor_ts, cursor_id, _SCAN_PAGE_SIZE
                )
                for market in page:
                    options = (
                        [] if market.is_binary else await self._markets.list_options(db, market.id)
                    )
                    bets = await self._bets.list_active_bets(db, market.id)
                    violations.extend(check_market_invariants(market, options, bets))
                    checked += 1
                if len(page) < _SCAN_PAGE_SIZE:
                    break
                cursor_ts, cursor_id = page[-1].created_at.isoformat(), page[-1].id
        return {"ok": not violations, "markets_checked": checked, "violations": violations}
