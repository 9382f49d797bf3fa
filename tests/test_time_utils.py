"""Tests for nomads_fetch.utils.time module."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from nomads_fetch.utils.time import (
    ensure_utc,
    format_duration,
    format_elapsed,
    parse_datetime,
    parse_duration,
    pretty_bytes,
    truncate,
)


class TestParseDuration:
    def test_hours(self):
        assert parse_duration("18h") == timedelta(hours=18)

    def test_minutes(self):
        assert parse_duration("85m") == timedelta(minutes=85)

    def test_fractional_hours(self):
        assert parse_duration("3.5h") == timedelta(hours=3, minutes=30)

    def test_compound(self):
        assert parse_duration("1h30m") == timedelta(minutes=90)

    def test_seconds(self):
        assert parse_duration("45s") == timedelta(seconds=45)

    def test_case_and_whitespace(self):
        assert parse_duration(" 96H ") == timedelta(hours=96)

    def test_timedelta_passthrough(self):
        td = timedelta(hours=2)
        assert parse_duration(td) is td

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            parse_duration("")

    @pytest.mark.parametrize("value", ["96", "h", "1d", "abc", "1h x"])
    def test_invalid_raises(self, value):
        with pytest.raises(ValueError, match="Cannot parse duration"):
            parse_duration(value)


class TestFormatDuration:
    def test_whole_hours(self):
        assert format_duration(timedelta(hours=384)) == "384h"

    def test_minutes(self):
        assert format_duration(timedelta(minutes=85)) == "85m"

    def test_seconds(self):
        assert format_duration(timedelta(seconds=90.0 + 1)) == "91s"

    def test_parse_back(self):
        td = timedelta(hours=5, minutes=15)
        assert parse_duration(format_duration(td)) == td


class TestEnsureUtc:
    def test_naive_taken_as_utc(self):
        result = ensure_utc(datetime(2024, 6, 11, 12))
        assert result == datetime(2024, 6, 11, 12, tzinfo=UTC)

    def test_aware_converted(self):
        pdt = timezone(timedelta(hours=-7))
        result = ensure_utc(datetime(2024, 6, 11, 5, tzinfo=pdt))
        assert result == datetime(2024, 6, 11, 12, tzinfo=UTC)
        assert result.utcoffset() == timedelta(0)


class TestTruncate:
    def test_six_hours(self):
        value = datetime(2024, 6, 11, 11, 59, tzinfo=UTC)
        assert truncate(value, timedelta(hours=6)) == datetime(2024, 6, 11, 6, tzinfo=UTC)

    def test_on_boundary(self):
        value = datetime(2024, 6, 11, 18, tzinfo=UTC)
        assert truncate(value, timedelta(hours=6)) == value

    def test_hourly(self):
        value = datetime(2024, 6, 11, 23, 30, 15, tzinfo=UTC)
        assert truncate(value, timedelta(hours=1)) == datetime(2024, 6, 11, 23, tzinfo=UTC)

    def test_naive_input(self):
        result = truncate(datetime(2024, 6, 11, 2, 10), timedelta(hours=6))
        assert result == datetime(2024, 6, 11, 0, tzinfo=UTC)

    def test_before_midnight(self):
        value = datetime(2024, 1, 1, 0, 30, tzinfo=UTC)
        result = truncate(value - timedelta(hours=1), timedelta(hours=6))
        assert result == datetime(2023, 12, 31, 18, tzinfo=UTC)

    def test_non_positive_step_raises(self):
        with pytest.raises(ValueError, match="positive"):
            truncate(datetime(2024, 6, 11, tzinfo=UTC), timedelta(0))


class TestParseDatetime:
    def test_datetime_passthrough(self):
        dt = datetime(2024, 6, 11, 12, tzinfo=UTC)
        assert parse_datetime(dt) == dt

    def test_date(self):
        assert parse_datetime(date(2024, 6, 11)) == datetime(2024, 6, 11, tzinfo=UTC)

    def test_iso(self):
        assert parse_datetime("2024-06-11T13:45:00") == datetime(2024, 6, 11, 13, 45, tzinfo=UTC)

    def test_iso_with_offset(self):
        result = parse_datetime("2024-06-11T06:45:00-07:00")
        assert result == datetime(2024, 6, 11, 13, 45, tzinfo=UTC)

    def test_space_separated(self):
        assert parse_datetime("2024-06-11 13:45") == datetime(2024, 6, 11, 13, 45, tzinfo=UTC)

    def test_compact(self):
        assert parse_datetime("2024061113") == datetime(2024, 6, 11, 13, tzinfo=UTC)

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Cannot parse datetime"):
            parse_datetime("yesterday")


class TestFormatElapsed:
    def test_seconds(self):
        assert format_elapsed(timedelta(seconds=42)) == "0:00:42"

    def test_hours(self):
        assert format_elapsed(timedelta(hours=1, minutes=2, seconds=3)) == "1:02:03"

    def test_negative_clamped(self):
        assert format_elapsed(timedelta(seconds=-5)) == "0:00:00"


class TestPrettyBytes:
    def test_bytes(self):
        assert pretty_bytes(512) == " 512B"

    def test_exact_kib_stays_bytes(self):
        assert pretty_bytes(1024) == "1024B"

    def test_kib(self):
        assert pretty_bytes(1536) == "1.50KiB"

    def test_mib(self):
        assert pretty_bytes(5 * 1024**2 + 1) == "5.00MiB"

    def test_gib(self):
        assert pretty_bytes(3 * 1024**3 + 1) == "3.00GiB"
