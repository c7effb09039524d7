"""Tests for common.datetime module."""

from datetime import datetime, timezone

from common.datetime import parse_datetime, utc_now


class TestParseDatetime:
    def test_none_returns_none(self) -> None:
        assert parse_datetime(None) is None

    def test_aware_datetime_passthrough(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert parse_datetime(dt) is dt

    def test_naive_datetime_assumed_utc(self) -> None:
        result = parse_datetime(datetime(2024, 1, 1, 12, 0, 0))
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_iso_string_parsing(self) -> None:
        result = parse_datetime("2024-01-01T12:00:00+00:00")
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_iso_string_with_z_suffix(self) -> None:
        result = parse_datetime("2024-01-01T12:00:00Z")
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestUtcNow:
    def test_is_timezone_aware(self) -> None:
        assert utc_now().tzinfo is not None
