"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import (
    assume_utc,
    days_from_now,
    format_day,
    now_utc,
    parse_iso,
    to_utc,
    today_utc,
)


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        """Result must have tzinfo set (not naive)."""
        assert now_utc().tzinfo is not None

    def test_is_utc(self):
        assert now_utc().tzinfo == timezone.utc


class TestToUtc:
    """Tests for to_utc()."""

    def test_raises_on_naive(self):
        """Naive datetime must raise ValueError."""
        with pytest.raises(ValueError, match="naive"):
            to_utc(datetime(2024, 1, 1, 12, 0, 0))

    def test_converts_other_timezone(self):
        """Kolkata 12:00 is UTC 06:30."""
        kolkata = datetime(2024, 1, 1, 12, 0, 0, tzinfo=ZoneInfo("Asia/Kolkata"))
        result = to_utc(kolkata)
        assert result.tzinfo == timezone.utc
        assert (result.hour, result.minute) == (6, 30)


class TestAssumeUtc:
    """Tests for assume_utc()."""

    def test_naive_is_read_as_utc(self):
        result = assume_utc(datetime(2024, 1, 5, 10, 0, 0))
        assert result.tzinfo == timezone.utc
        assert result.hour == 10

    def test_aware_is_converted(self):
        kolkata = datetime(2024, 1, 1, 12, 0, 0, tzinfo=ZoneInfo("Asia/Kolkata"))
        assert assume_utc(kolkata).hour == 6


class TestParseIso:
    """Tests for parse_iso()."""

    def test_parses_explicit_offset(self):
        result = parse_iso("2024-01-01T12:00:00+00:00")
        assert result == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_raises_on_naive_string(self):
        with pytest.raises(ValueError, match="naive"):
            parse_iso("2024-01-01T12:00:00")


class TestHelpers:

    def test_today_utc_matches_now(self):
        assert today_utc() == now_utc().date()

    def test_days_from_now(self):
        delta = days_from_now(30) - now_utc()
        assert timedelta(days=29, hours=23) < delta <= timedelta(days=30)

    def test_format_day(self):
        assert format_day(datetime(2024, 3, 7, tzinfo=timezone.utc)) == "07/03/2024"
