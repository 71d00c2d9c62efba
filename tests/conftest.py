"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from tradelog_app.data.models import TradeDraft
from tradelog_app.delivery.event_bus import EventBus
from tradelog_app.delivery.notifier import create_notifier
from tradelog_app.delivery.storage import InMemoryStorage
from tradelog_app.persistence.base import CreateResult

USER_ID = "3f1c2b7a-9d4e-4a5b-8c6d-0e1f2a3b4c5d"
STRATEGY_ID = "a0b1c2d3-e4f5-4a6b-8c7d-9e0f1a2b3c4d"
OTHER_STRATEGY_ID = "b1c2d3e4-f5a6-4b7c-9d8e-0f1a2b3c4d5e"


class FakeUserProvider:
    """User provider returning a fixed id after an optional delay, or raising."""

    def __init__(self, user_id: Optional[str] = USER_ID, delay: float = 0.0, error: Optional[Exception] = None):
        self.user_id = user_id
        self.delay = delay
        self.error = error
        self.calls = 0

    async def get_current_user_id(self) -> Optional[str]:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.user_id


class FakeStrategyStore:
    """Strategy store backed by a list, with an optional gate to hold the fetch."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self.records = records or []
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    async def list_active_strategies(self, user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        self.calls.append((user_id, limit))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return [r for r in self.records if r.get("is_active", True)][:limit]


class FakeTradePersistence:
    """Records create calls; can fail, raise, or wait on a gate."""

    def __init__(self, trade_id: str = "trade-001"):
        self.trade_id = trade_id
        self.payloads: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.exception: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None

    async def create_trade(self, payload: Dict[str, Any]) -> CreateResult:
        self.payloads.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        if self.exception is not None:
            raise self.exception
        if self.error is not None:
            return CreateResult(error=self.error)
        return CreateResult(trade_id=self.trade_id)


@pytest.fixture
def sample_strategies() -> List[Dict[str, Any]]:
    """Two active strategies and one inactive one."""
    return [
        {
            "id": STRATEGY_ID,
            "name": "Opening Range Breakout",
            "is_active": True,
            "rules": ["Wait for the first 15m range", "Enter on close above range high"],
        },
        {
            "id": OTHER_STRATEGY_ID,
            "name": "VWAP Reclaim",
            "is_active": True,
            "rules": [],
        },
        {
            "id": "c2d3e4f5-a6b7-4c8d-8e9f-1a2b3c4d5e6f",
            "name": "Retired Idea",
            "is_active": False,
            "rules": ["Do not use"],
        },
    ]


@pytest.fixture
def user_provider() -> FakeUserProvider:
    return FakeUserProvider()


@pytest.fixture
def strategy_store(sample_strategies) -> FakeStrategyStore:
    return FakeStrategyStore(sample_strategies)


@pytest.fixture
def persistence() -> FakeTradePersistence:
    return FakeTradePersistence()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def notifier(bus, storage):
    return create_notifier(bus=bus, storage=storage)


@pytest.fixture
def valid_draft() -> TradeDraft:
    """Filled form: AAPL long, no strategy, no emotions."""
    return TradeDraft(
        market="stock",
        symbol="AAPL",
        side="Buy",
        quantity="10",
        entry_price="100",
        exit_price="110",
        pnl="100",
        date=date.today().isoformat(),
    )
