"""Tests for the SQLite trade and strategy store."""

import pytest

from conftest import OTHER_STRATEGY_ID, STRATEGY_ID, USER_ID
from tradelog_app.persistence.trade_store import SQLiteTradeStore, StaticUserProvider


@pytest.fixture
def store(tmp_path):
    return SQLiteTradeStore(str(tmp_path / "trades.db"))


def make_payload(**overrides):
    payload = {
        "user_id": USER_ID,
        "market": "stock",
        "symbol": "AAPL",
        "strategy_id": None,
        "trade_date": "2024-05-02",
        "side": "Buy",
        "quantity": 10.0,
        "entry_price": 100.0,
        "exit_price": 110.0,
        "pnl": 100.0,
        "entry_time": None,
        "exit_time": None,
        "emotional_state": None,
        "notes": None,
    }
    payload.update(overrides)
    return payload


class TestStrategies:
    """Test strategy listing."""

    @pytest.mark.asyncio
    async def test_only_active_for_user(self, store):
        store.save_strategy(USER_ID, "ORB", rules=["Wait for range"], strategy_id=STRATEGY_ID)
        store.save_strategy(USER_ID, "Retired", is_active=False)
        store.save_strategy("someone-else", "Theirs")

        strategies = await store.list_active_strategies(USER_ID)

        assert strategies == [{
            "id": STRATEGY_ID,
            "name": "ORB",
            "is_active": True,
            "rules": ["Wait for range"],
        }]

    @pytest.mark.asyncio
    async def test_limit(self, store):
        for i in range(5):
            store.save_strategy(USER_ID, f"S{i}")

        assert len(await store.list_active_strategies(USER_ID, limit=3)) == 3


class TestCreateTrade:
    """Test trade inserts."""

    @pytest.mark.asyncio
    async def test_create_and_read_back(self, store):
        store.save_strategy(USER_ID, "ORB", strategy_id=STRATEGY_ID)
        payload = make_payload(
            strategy_id=STRATEGY_ID,
            entry_time="09:30",
            exit_time="10:15",
            emotional_state=["FOMO", "DISCIPLINE"],
            notes="clean",
        )

        result = await store.create_trade(payload)

        assert result.ok
        trade = store.get_trade(result.trade_id)
        assert trade["symbol"] == "AAPL"
        assert trade["strategy_id"] == STRATEGY_ID
        assert trade["emotional_state"] == ["FOMO", "DISCIPLINE"]
        assert trade["pnl"] == 100.0
        assert store.count_trades(USER_ID) == 1

    @pytest.mark.asyncio
    async def test_nulls_stored_as_null(self, store):
        result = await store.create_trade(make_payload())

        trade = store.get_trade(result.trade_id)
        assert trade["strategy_id"] is None
        assert trade["emotional_state"] is None
        assert trade["notes"] is None

    @pytest.mark.asyncio
    async def test_check_constraint_error_returned(self, store):
        result = await store.create_trade(make_payload(side="Long"))

        assert not result.ok
        assert "CHECK constraint failed" in result.error
        assert store.count_trades() == 0

    @pytest.mark.asyncio
    async def test_unknown_strategy_rejected(self, store):
        result = await store.create_trade(make_payload(strategy_id=OTHER_STRATEGY_ID))

        assert not result.ok
        assert "FOREIGN KEY" in result.error
        assert store.count_trades() == 0

    def test_missing_trade(self, store):
        assert store.get_trade("nope") is None


class TestStaticUserProvider:
    """Test the fixed-identity provider."""

    @pytest.mark.asyncio
    async def test_returns_configured_id(self):
        assert await StaticUserProvider(USER_ID).get_current_user_id() == USER_ID
        assert await StaticUserProvider(None).get_current_user_id() is None
