"""Tests for lzv.dates module."""

from datetime import date, datetime, timedelta, timezone

import pytest

from lzv.dates import parse_date, resolve_now, timestamp_or_zero

UTC = timezone.utc


class TestParseDate:
    """Tests for lenient date parsing."""

    def test_iso_with_z(self):
        assert parse_date('2025-01-10T20:30:00Z') == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)

    def test_postgres_timestamptz(self):
        assert parse_date('2025-01-15 22:00:00+00') == datetime(2025, 1, 15, 22, 0, tzinfo=UTC)

    def test_offset_converted_to_utc(self):
        assert parse_date('2025-01-10T21:30:00+01:00') == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)

    def test_compact_offset(self):
        assert parse_date('2025-01-10T21:30:00+0100') == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)

    def test_fractional_seconds(self):
        assert parse_date('2025-01-10T20:30:00.5Z') == datetime(2025, 1, 10, 20, 30, 0, 500000, tzinfo=UTC)
        assert parse_date('2025-01-10 20:30:00.12345+00') == datetime(2025, 1, 10, 20, 30, 0, 123450, tzinfo=UTC)

    def test_naive_taken_as_utc(self):
        assert parse_date('2025-01-10T20:30:00') == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)

    def test_date_only(self):
        assert parse_date('2025-01-10') == datetime(2025, 1, 10, tzinfo=UTC)

    def test_epoch_millis(self):
        assert parse_date(1736541000000) == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)

    def test_datetime_and_date_objects(self):
        aware = datetime(2025, 1, 10, 21, 30, tzinfo=timezone(timedelta(hours=1)))
        assert parse_date(aware) == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)
        assert parse_date(date(2025, 1, 10)) == datetime(2025, 1, 10, tzinfo=UTC)

    @pytest.mark.parametrize('value', [None, '', '   ', 'nog te bepalen', '2025-13-45'])
    def test_unparseable(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize('value', [True, [2025, 1, 10], object()])
    def test_wrong_type(self, value):
        with pytest.raises(TypeError):
            parse_date(value)


class TestHelpers:
    """Tests for timestamp and evaluation time helpers."""

    def test_timestamp_or_zero(self):
        assert timestamp_or_zero('garbage') == 0.0
        assert timestamp_or_zero('1970-01-01T00:00:10Z') == 10.0

    def test_resolve_now_default_is_aware(self):
        assert resolve_now().tzinfo is not None

    def test_resolve_now_naive(self):
        assert resolve_now(datetime(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=UTC)
