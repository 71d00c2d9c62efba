"""Tests for submission transition logging."""

import logging
from dataclasses import replace
from unittest.mock import Mock, patch

import pytest

from conftest import FakeUserProvider
from tradelog_app.config.defaults import LoggingParams
from tradelog_app.logging.config import (
    configure_logging,
    configure_logging_from_params,
    log_state_transition,
)
from tradelog_app.state.machine import SubmissionPipeline


class TestTransitionLogging:
    """Test that every pipeline transition produces an audit record."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True, cache_loggers=False)

    def test_log_state_transition_binds_fields(self):
        logger = Mock()
        bound = logger.bind.return_value

        log_state_transition(logger, "abc123", "idle", "validating", "submit", {"symbol": "AAPL"})

        logger.bind.assert_called_once_with(
            submission_id="abc123", from_state="idle", to_state="validating", trigger="submit"
        )
        bound.bind.assert_called_once_with(context={"symbol": "AAPL"})
        bound.bind.return_value.info.assert_called_once_with("State transition")

    @pytest.mark.asyncio
    async def test_successful_submission_path(self, persistence, notifier, valid_draft):
        pipeline = SubmissionPipeline(FakeUserProvider(), persistence, notifier)

        with patch("tradelog_app.state.machine.log_state_transition") as log_mock:
            await pipeline.submit(valid_draft)

        path = [(c.kwargs["from_state"], c.kwargs["to_state"]) for c in log_mock.call_args_list]
        assert path == [
            ("idle", "validating"),
            ("validating", "sanitizing"),
            ("sanitizing", "persisting"),
            ("persisting", "notifying"),
            ("notifying", "idle"),
        ]
        assert len({c.kwargs["submission_id"] for c in log_mock.call_args_list}) == 1

    @pytest.mark.asyncio
    async def test_validation_failure_path(self, persistence, notifier, valid_draft):
        pipeline = SubmissionPipeline(FakeUserProvider(), persistence, notifier)

        with patch("tradelog_app.state.machine.log_state_transition") as log_mock:
            await pipeline.submit(replace(valid_draft, entry_price="abc"))

        triggers = [c.kwargs["trigger"] for c in log_mock.call_args_list]
        assert triggers == ["submit", "validation_failed"]


class TestSubmissionContext:
    """Test that channel and store records share the submission id."""

    def setup_method(self):
        self.records = []

        def record(logger, method_name, event_dict):
            self.records.append(dict(event_dict))
            return event_dict

        configure_logging(level="DEBUG", format_json=True, extra_processors=[record], cache_loggers=False)

    def teardown_method(self):
        configure_logging(level="DEBUG", format_json=True, cache_loggers=False)

    @pytest.mark.asyncio
    async def test_broadcast_records_carry_submission_id(self, persistence, notifier, valid_draft):
        pipeline = SubmissionPipeline(FakeUserProvider(), persistence, notifier)

        outcome = await pipeline.submit(valid_draft)

        assert outcome.ok
        transitions = [r for r in self.records if r["event"] == "State transition"]
        broadcasts = [r for r in self.records if r["event"] == "Trade update broadcast"]
        assert len(transitions) == 5
        assert len(broadcasts) == 1
        submission_ids = {r["submission_id"] for r in transitions}
        assert len(submission_ids) == 1
        assert broadcasts[0]["submission_id"] in submission_ids
        assert broadcasts[0]["subsystem"] == "sync"

    @pytest.mark.asyncio
    async def test_context_cleared_after_submission(self, persistence, notifier, valid_draft):
        pipeline = SubmissionPipeline(FakeUserProvider(), persistence, notifier)
        await pipeline.submit(valid_draft)
        self.records.clear()

        notifier.notify_trade_created("trade-2")

        assert self.records
        assert all("submission_id" not in r for r in self.records)

    def test_configure_from_params_sets_level(self):
        configure_logging_from_params(LoggingParams(level="WARNING", format_json=True))

        assert logging.getLogger().level == logging.WARNING
