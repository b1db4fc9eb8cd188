"""In-memory fakes for the repository Protocols and the notification sender.

Fakes hand out copies, the way rows come back from the database, so a
service that mutates what it read does not silently change stored state.
"""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from itertools import count
from unittest.mock import AsyncMock

import pytest

from src.sq_account.domain.models import SettlementDelta, UserAccount
from src.sq_betting.domain.models import Bet
from src.sq_market.domain.models import Market, MarketOption, OptionPricePoint, PricePoint
from src.sq_notification.domain.models import Notification

_clock = count()


def _ts() -> datetime:
    """Strictly increasing timestamps for seeded rows."""
    return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(seconds=next(_clock))


def _make_market(**kwargs) -> Market:
    defaults = dict(
        id="mkt_1", title="Will Sam finish the marathon?", description=None,
        category="sports", market_type="BINARY", status="ACTIVE", end_date=None,
        resolved=False, outcome=None, winning_option_id=None,
        yes_price=Decimal("50"), total_volume=Decimal("0"), resolution_date=None,
        created_by="u_admin", created_at=_ts(), updated_at=_ts(),
    )
    defaults.update(kwargs)
    return Market(**defaults)


def _make_bet(**kwargs) -> Bet:
    defaults = dict(
        id=f"bet_{next(_clock)}", user_id="u_a", event_id="mkt_1", option_id=None,
        side="YES", trade_type="BUY", amount=Decimal("10"), price=Decimal("50"),
        position_value=Decimal("10"), status="ACTIVE", created_at=_ts(),
    )
    defaults.update(kwargs)
    if "position_value" not in kwargs:
        amount = defaults["amount"]
        defaults["position_value"] = amount if defaults["trade_type"] == "BUY" else -amount
    return Bet(**defaults)


class FakeMarketRepo:
    def __init__(self) -> None:
        self.markets: dict[str, Market] = {}
        self.options: dict[str, list[MarketOption]] = {}
        self.price_points: list[PricePoint] = []
        self.option_points: list[OptionPricePoint] = []
        self.bets: "FakeBetRepo | None" = None
        self.locked: list[str] = []

    def add_market(self, market: Market, option_titles: list[str] | None = None) -> Market:
        self.markets[market.id] = market
        if option_titles:
            share = Decimal("100") / len(option_titles)
            self.options[market.id] = [
                MarketOption(
                    id=f"{market.id}_opt{i}", event_id=market.id, title=t,
                    price=share.quantize(Decimal("0.0001")), total_volume=Decimal("0"),
                    created_at=_ts(),
                )
                for i, t in enumerate(option_titles)
            ]
        return market

    async def get_market(self, db, market_id):
        m = self.markets.get(market_id)
        return replace(m) if m else None

    async def lock_market(self, db, market_id):
        self.locked.append(market_id)
        return await self.get_market(db, market_id)

    async def list_markets(self, db, status, category, cursor_ts, cursor_id, limit):
        rows = sorted(self.markets.values(), key=lambda m: (m.created_at, m.id), reverse=True)
        rows = [m for m in rows if status is None or m.status == status]
        rows = [m for m in rows if category is None or m.category == category]
        if cursor_ts is not None:
            key = (datetime.fromisoformat(cursor_ts), cursor_id)
            rows = [m for m in rows if (m.created_at, m.id) < key]
        return [replace(m) for m in rows[:limit]]

    async def insert_market(self, db, market):
        self.markets[market.id] = replace(market)

    async def list_options(self, db, market_id):
        return [replace(o) for o in self.options.get(market_id, [])]

    async def insert_option(self, db, option):
        self.options.setdefault(option.event_id, []).append(replace(option))

    async def update_market_pricing(self, db, market_id, yes_price, total_volume):
        m = self.markets[market_id]
        m.yes_price = yes_price
        m.total_volume = total_volume

    async def update_option_prices(self, db, prices):
        for opts in self.options.values():
            for o in opts:
                if o.id in prices:
                    o.price = prices[o.id]

    async def add_option_volume(self, db, option_id, delta):
        for opts in self.options.values():
            for o in opts:
                if o.id == option_id:
                    o.total_volume += delta

    async def mark_resolved(self, db, market_id, outcome, winning_option_id, resolved_at):
        m = self.markets[market_id]
        m.resolved, m.status = True, "RESOLVED"
        m.outcome, m.winning_option_id = outcome, winning_option_id
        m.resolution_date = resolved_at

    async def mark_cancelled(self, db, market_id, cancelled_at):
        m = self.markets[market_id]
        m.resolved, m.status, m.resolution_date = True, "CANCELLED", cancelled_at

    async def insert_price_point(self, db, point):
        self.price_points.append(point)

    async def insert_option_price_points(self, db, points):
        self.option_points.extend(points)

    async def list_price_points(self, db, market_id):
        return [p for p in self.price_points if p.event_id == market_id]

    async def list_option_price_points(self, db, market_id):
        titles = {o.id: o.title for o in self.options.get(market_id, [])}
        return [
            replace(p, option_title=titles[p.option_id])
            for p in self.option_points
            if p.option_id in titles
        ]

    async def count_bets(self, db, market_id):
        if self.bets is None:
            return 0
        return sum(1 for b in self.bets.bets if b.event_id == market_id)


class FakeBetRepo:
    def __init__(self) -> None:
        self.bets: list[Bet] = []

    def seed(self, *bets: Bet) -> None:
        self.bets.extend(bets)

    async def insert_bet(self, db, bet):
        self.bets.append(replace(bet))

    async def list_active_bets(self, db, event_id):
        return [replace(b) for b in self.bets if b.event_id == event_id and b.is_active]

    async def list_user_market_bets(self, db, user_id, event_id):
        return [
            replace(b)
            for b in self.bets
            if b.event_id == event_id and b.user_id == user_id and b.is_active
        ]

    async def list_user_bets(self, db, user_id, status, limit):
        rows = [b for b in self.bets if b.user_id == user_id]
        rows = [b for b in rows if status is None or b.status == status]
        rows.sort(key=lambda b: (b.created_at, b.id), reverse=True)
        return [replace(b) for b in rows[:limit]]

    async def set_statuses(self, db, statuses):
        for b in self.bets:
            if b.id in statuses and b.is_active:
                b.status = statuses[b.id]


class FakeAccountRepo:
    def __init__(self) -> None:
        self.accounts: dict[str, UserAccount] = {}
        self.applied: list[SettlementDelta] = []

    def add(self, user_id: str, balance: str = "1000", is_admin: bool = False) -> UserAccount:
        account = UserAccount(
            id=user_id, username=user_id, display_name=None,
            virtual_balance=Decimal(balance), total_winnings=Decimal("0"),
            total_losses=Decimal("0"), is_admin=is_admin,
        )
        self.accounts[user_id] = account
        return account

    async def get_account(self, db, user_id):
        a = self.accounts.get(user_id)
        return replace(a) if a else None

    async def apply_settlement(self, db, delta):
        self.applied.append(delta)
        a = self.accounts[delta.user_id]
        a.virtual_balance += delta.payout
        a.total_winnings += delta.winnings_delta
        a.total_losses += delta.losses_delta


class FakeSender:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[Notification] = []
        self.fail = fail

    async def send(self, notification):
        if self.fail:
            raise ConnectionError("redis down")
        self.sent.append(notification)


@pytest.fixture
def db() -> AsyncMock:
    """Session stand-in: commit/rollback are awaitable no-ops we can inspect."""
    return AsyncMock()


@pytest.fixture
def bet_repo() -> FakeBetRepo:
    return FakeBetRepo()


@pytest.fixture
def market_repo(bet_repo: FakeBetRepo) -> FakeMarketRepo:
    repo = FakeMarketRepo()
    repo.bets = bet_repo
    return repo


@pytest.fixture
def account_repo() -> FakeAccountRepo:
    return FakeAccountRepo()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def failing_sender() -> FakeSender:
    return FakeSender(fail=True)


@pytest.fixture
def make_market():
    return _make_market


@pytest.fixture
def make_bet():
    return _make_bet
