"""Tests for time helpers."""

from datetime import datetime, timezone

import pytest

from tradelog_app.utils.time import (
    epoch_millis,
    format_iso_timestamp,
    parse_iso_timestamp,
    parse_time_of_day,
)


class TestParseTimeOfDay:
    """Test HH:MM parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("00:00", 0),
        ("09:30", 9 * 3600 + 30 * 60),
        ("9:05", 9 * 3600 + 5 * 60),
        ("23:59", 23 * 3600 + 59 * 60),
        ("12:00:15", 12 * 3600 + 15),
    ])
    def test_valid(self, raw, expected):
        assert parse_time_of_day(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "24:00", "12:60", "1230", "ab:cd"])
    def test_invalid(self, raw):
        assert parse_time_of_day(raw) is None


class TestIsoTimestamps:
    """Test broadcast timestamp helpers."""

    def test_format_is_utc_with_millis(self):
        ts = datetime(2024, 3, 1, 14, 5, 9, 123456, tzinfo=timezone.utc)
        assert format_iso_timestamp(ts) == "2024-03-01T14:05:09.123Z"

    def test_round_trip(self):
        ts = datetime(2024, 3, 1, 14, 5, 9, 123000, tzinfo=timezone.utc)
        assert parse_iso_timestamp(format_iso_timestamp(ts)) == ts

    def test_epoch_millis(self):
        ts = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert epoch_millis(ts) == 1000

