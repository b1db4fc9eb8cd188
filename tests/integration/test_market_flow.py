"""End-to-end market flow against PG + Redis.

Pre-condition: PG + Redis running, `alembic upgrade head` applied,
RUN_INTEGRATION=1.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _auth(user: dict[str, str]) -> dict[str, str]:
    return {"Authorization": user["Authorization"]}


class TestBinaryFlow:
    async def test_trade_resolve_and_settle(self, client: AsyncClient, make_user) -> None:
        admin = await make_user(is_admin=True)
        alice = await make_user()
        bob = await make_user()

        created = await client.post(
            "/api/v1/markets", json={"title": "Will the bus be late?"}, headers=_auth(admin)
        )
        assert created.status_code == 201
        market_id = created.json()["data"]["id"]

        first = await client.post(
            "/api/v1/bets",
            json={"event_id": market_id, "side": "YES", "amount": 20},
            headers=_auth(alice),
        )
        assert first.json()["data"]["yes_price"] == 95.0

        second = await client.post(
            "/api/v1/bets",
            json={"event_id": market_id, "side": "NO", "amount": 20},
            headers=_auth(bob),
        )
        assert second.json()["data"]["yes_price"] == 47.5

        history = await client.get(
            f"/api/v1/markets/{market_id}/price-history", headers=_auth(alice)
        )
        assert [p["yes_price"] for p in history.json()["data"]] == [50.0, 95.0, 47.5]

        resolved = await client.post(
            f"/api/v1/admin/markets/{market_id}/resolve",
            json={"outcome": False},
            headers=_auth(admin),
        )
        assert resolved.json()["data"]["winners"] == 1

        bob_account = await client.get("/api/v1/account/me", headers=_auth(bob))
        assert bob_account.json()["data"]["balance"] == 1020.0
        alice_account = await client.get("/api/v1/account/me", headers=_auth(alice))
        assert alice_account.json()["data"]["total_losses"] == 20.0

        late = await client.post(
            "/api/v1/bets",
            json={"event_id": market_id, "side": "YES", "amount": 5},
            headers=_auth(alice),
        )
        assert late.json()["code"] == 3002

    async def test_non_admin_cannot_resolve(self, client: AsyncClient, make_user) -> None:
        user = await make_user()
        created = await client.post(
            "/api/v1/markets", json={"title": "Pizza on Friday?"}, headers=_auth(user)
        )
        market_id = created.json()["data"]["id"]
        resp = await client.post(
            f"/api/v1/admin/markets/{market_id}/resolve",
            json={"outcome": True},
            headers=_auth(user),
        )
        assert resp.status_code == 403


class TestMultipleFlow:
    async def test_prices_stay_normalized_and_cancel_refunds(
        self, client: AsyncClient, make_user
    ) -> None:
        admin = await make_user(is_admin=True)
        alice = await make_user()
        created = await client.post(
            "/api/v1/markets",
            json={"title": "Who wins chess night?", "market_type": "MULTIPLE",
                  "options": ["Alex", "Blair", "Casey"]},
            headers=_auth(admin),
        )
        data = created.json()["data"]
        option_ids = [o["id"] for o in data["options"]]

        for option_id, amount in zip(option_ids, (30, 10, 5)):
            resp = await client.post(
                "/api/v1/bets",
                json={"event_id": data["id"], "side": "YES", "amount": amount,
                      "option_id": option_id},
                headers=_auth(alice),
            )
            assert resp.status_code == 201
            assert round(sum(resp.json()["data"]["option_prices"].values()), 4) == 100.0

        cancelled = await client.post(
            f"/api/v1/admin/markets/{data['id']}/cancel", headers=_auth(admin)
        )
        assert cancelled.json()["data"]["refunded_bets"] == 3

        bets = await client.get("/api/v1/bets", params={"status": "REFUNDED"}, headers=_auth(alice))
        assert len(bets.json()["data"]["items"]) == 3
        account = await client.get("/api/v1/account/me", headers=_auth(alice))
        assert account.json()["data"]["balance"] == 1000.0
