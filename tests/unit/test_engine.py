"""Unit tests for the trade entry session."""

import asyncio
from datetime import date

import pytest

from conftest import OTHER_STRATEGY_ID, STRATEGY_ID, USER_ID, FakeStrategyStore, FakeUserProvider
from tradelog_app.engine import TradeEntrySession, create_session
from tradelog_app.state.models import SubmissionStatus


@pytest.fixture
def session(user_provider, strategy_store, persistence, notifier):
    return TradeEntrySession(user_provider, strategy_store, persistence, notifier)


def fill(session, **values):
    for name, value in values.items():
        session.update_field(name, value)


class TestSessionDefaults:
    """Test the initial draft."""

    def test_new_draft(self, session):
        assert session.draft.market == "stock"
        assert session.draft.side == "Buy"
        assert session.draft.date == date.today().isoformat()
        assert session.draft.emotional_state == []
        assert session.duration is None
        assert session.estimated_pnl == 0.0
        assert not session.is_submitting

    def test_configured_defaults(self, user_provider, strategy_store, persistence):
        session = create_session(
            user_provider, strategy_store, persistence,
            overrides={"form": {"default_market": "crypto", "default_side": "Sell"}},
        )
        assert session.draft.market == "crypto"
        assert session.draft.side == "Sell"


class TestDerivedValues:
    """Test recomputation on field change."""

    def test_duration_recomputed(self, session):
        fill(session, entry_time="09:30")
        assert session.duration is None

        fill(session, exit_time="11:45")
        assert session.duration == "2h 15m 0s"

        fill(session, exit_time="09:30")
        assert session.duration == "0s"

    def test_overnight_duration(self, session):
        fill(session, entry_time="23:50", exit_time="00:10")
        assert session.duration == "20m 0s"

    def test_pnl_follows_side(self, session):
        fill(session, entry_price="100", exit_price="110", quantity="10")
        assert session.estimated_pnl == 100.0

        fill(session, side="Sell")
        assert session.estimated_pnl == -100.0

    def test_pnl_falls_back_to_manual(self, session):
        fill(session, entry_price="100", quantity="10", pnl="42.5")
        assert session.estimated_pnl == 42.5

    def test_unrelated_field_keeps_values(self, session):
        fill(session, entry_price="100", exit_price="110", quantity="10", entry_time="09:30", exit_time="09:45")
        fill(session, symbol="MSFT", notes="fine")
        assert session.estimated_pnl == 100.0
        assert session.duration == "15m 0s"

    def test_unknown_field_rejected(self, session):
        with pytest.raises(AttributeError):
            session.update_field("leverage", "10")

    @pytest.mark.parametrize("name,value", [("market", "options"), ("side", "Long")])
    def test_enum_fields_checked(self, session, name, value):
        with pytest.raises(ValueError):
            session.update_field(name, value)


class TestSelections:
    """Test emotion and strategy selection through the session."""

    def test_emotions_from_checkbox_map(self, session):
        session.update_field("emotional_state", {"FOMO": True, "TILT": False, "REGRET": True})
        assert session.draft.emotional_state == ["FOMO", "REGRET"]

    @pytest.mark.asyncio
    async def test_strategy_selection(self, session):
        await session.start()

        selected = session.select_strategy(STRATEGY_ID)

        assert selected.name == "Opening Range Breakout"
        assert session.draft.strategy_id == STRATEGY_ID
        assert session.toggle_strategy_rules() is True
        assert session.selected_strategy is selected

    @pytest.mark.asyncio
    async def test_start_without_user_loads_nothing(self, strategy_store, persistence, notifier):
        session = TradeEntrySession(FakeUserProvider(user_id=None), strategy_store, persistence, notifier)

        await session.start()

        assert strategy_store.calls == []
        assert session.strategies.strategies == []

    @pytest.mark.asyncio
    async def test_start_survives_user_lookup_error(self, strategy_store, persistence, notifier):
        provider = FakeUserProvider(error=RuntimeError("auth backend down"))
        session = TradeEntrySession(provider, strategy_store, persistence, notifier)

        await session.start()

        assert strategy_store.calls == []
        assert session.strategies.loaded is False

    @pytest.mark.asyncio
    async def test_strategy_load_limit_from_config(self, user_provider, strategy_store, persistence):
        session = create_session(
            user_provider, strategy_store, persistence, overrides={"strategy": {"load_limit": 5}}
        )

        await session.start()

        assert strategy_store.calls == [(USER_ID, 5)]


class TestSessionSubmit:
    """Test submission through the session."""

    @pytest.mark.asyncio
    async def test_validation_errors_kept_on_draft(self, session, persistence):
        fill(session, symbol="AAPL", quantity="ten")

        outcome = await session.submit()

        assert outcome.status is SubmissionStatus.VALIDATION_FAILED
        assert session.validation_errors == outcome.errors
        assert session.draft.quantity == "ten"
        assert persistence.payloads == []

    @pytest.mark.asyncio
    async def test_success_resets_draft(self, session, persistence):
        fill(session, symbol="AAPL", quantity="10", entry_price="100", exit_price="110")

        outcome = await session.submit()

        assert outcome.ok
        assert session.last_outcome is outcome
        assert session.draft.symbol == ""
        assert session.estimated_pnl == 0.0
        assert len(persistence.payloads) == 1

    @pytest.mark.asyncio
    async def test_persistence_failure_keeps_draft(self, session, persistence):
        persistence.error = "duplicate key value"
        fill(session, symbol="AAPL")

        outcome = await session.submit()

        assert outcome.alert_message == "duplicate key value"
        assert session.draft.symbol == "AAPL"

    @pytest.mark.asyncio
    async def test_closed_session_does_nothing(self, session, persistence):
        fill(session, symbol="AAPL")
        session.close()

        outcome = await session.submit()
        session.update_field("symbol", "MSFT")

        assert outcome.status is SubmissionStatus.CANCELLED
        assert session.draft.symbol == "AAPL"
        assert persistence.payloads == []

    @pytest.mark.asyncio
    async def test_close_during_strategy_load(self, persistence, notifier, sample_strategies):
        store = FakeStrategyStore(sample_strategies)
        store.gate = asyncio.Event()
        session = TradeEntrySession(FakeUserProvider(), store, persistence, notifier)

        task = asyncio.create_task(session.start())
        await asyncio.sleep(0)
        session.close()
        store.gate.set()
        await task

        assert session.strategies.strategies == []
        assert session.closed


class TestStrategyReference:
    """Test the strategy id sent with a trade."""

    @pytest.mark.asyncio
    async def test_unknown_strategy_submitted_as_none(self, session, persistence):
        await session.start()
        unknown = "d4e5f6a7-b8c9-4d0e-8f1a-2b3c4d5e6f70"

        assert session.select_strategy(unknown) is None
        fill(session, symbol="AAPL")
        outcome = await session.submit()

        assert outcome.ok
        assert persistence.payloads[0]["strategy_id"] is None

    @pytest.mark.asyncio
    async def test_strategy_picked_before_load_resolves_at_submit(self, session, persistence):
        session.select_strategy(OTHER_STRATEGY_ID)
        await session.start()
        fill(session, symbol="AAPL")

        await session.submit()

        assert persistence.payloads[0]["strategy_id"] == OTHER_STRATEGY_ID

    @pytest.mark.asyncio
    async def test_draft_keeps_selection_on_failure(self, session, persistence):
        await session.start()
        session.select_strategy(STRATEGY_ID)
        fill(session, symbol="AAPL", quantity="ten")

        await session.submit()

        assert session.draft.strategy_id == STRATEGY_ID


class TestSessionListener:
    """Test views listening to a session's broadcasts."""

    @pytest.mark.asyncio
    async def test_listener_refreshed_once_per_trade(self, user_provider, strategy_store, persistence):
        session = create_session(user_provider, strategy_store, persistence)
        refreshed = []
        session.listen(refreshed.append)
        fill(session, symbol="AAPL")

        outcome = await session.submit()

        assert [e.trade_id for e in refreshed] == [outcome.trade_id]

    @pytest.mark.asyncio
    async def test_listener_closed_with_session(self, session, bus):
        listener = session.listen(lambda event: None)

        session.close()

        assert bus.handler_count("tradeDataUpdated") == 0
        assert listener.refresh_count == 0


class TestCreateSession:
    """Test session construction from configuration."""

    def test_invalid_configuration_rejected(self, user_provider, strategy_store, persistence):
        with pytest.raises(ValueError, match="default_side"):
            create_session(
                user_provider, strategy_store, persistence, overrides={"form": {"default_side": "Long"}}
            )

    def test_sync_keys_from_config(self, user_provider, strategy_store, persistence, bus, storage):
        session = create_session(
            user_provider, strategy_store, persistence, bus=bus, storage=storage,
            overrides={"sync": {"event_channel": "trades", "storage_key": "last", "simple_storage_key": "last_ts"}},
        )

        session.pipeline.notifier.notify_trade_created("t-1")

        assert len(bus.get_history("trades")) == 1
        assert storage.get_item("last_ts") is not None
