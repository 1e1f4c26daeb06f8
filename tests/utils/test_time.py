"""Tests for wall-clock timestamp helpers and duration formatting."""

import pytest
from datetime import datetime, timedelta, timezone

from pacer_app.utils.time import format_clock, format_timestamp, parse_timestamp, utc_now


class TestUtcNow:
    """Test utc_now function."""

    def test_is_timezone_aware(self):
        assert utc_now().tzinfo is not None
        assert utc_now().utcoffset() == timedelta(0)


class TestTimestampRoundTrip:
    """Test format_timestamp and parse_timestamp."""

    def test_naive_treated_as_utc(self):
        naive = datetime(2024, 3, 1, 8, 30, 0)
        assert format_timestamp(naive) == "2024-03-01T08:30:00+00:00"

    def test_parse_accepts_z_suffix(self):
        parsed = parse_timestamp("2024-03-01T08:30:00Z")
        assert parsed == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_parse_naive_string_becomes_utc(self):
        assert parse_timestamp("2024-03-01T08:30:00").tzinfo == timezone.utc

    def test_parse_keeps_offset(self):
        parsed = parse_timestamp("2024-03-01T10:30:00+02:00")
        assert parsed == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestFormatClock:
    """Test format_clock function."""

    @pytest.mark.parametrize("seconds,expected", [
        (None, "00:00"),
        (-5, "00:00"),
        (0, "00:00"),
        (9.9, "00:09"),
        (65, "01:05"),
        (3599, "59:59"),
        (3661, "1:01:01"),
    ])
    def test_format(self, seconds, expected):
        assert format_clock(seconds) == expected
