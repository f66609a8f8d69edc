"""Unit tests for start time resolution."""
from datetime import date, datetime

import pytest
import pytz

from processor.errors import AmbiguousOrInvalidLocalTimeError, UnknownTimezoneError
from processor.models import DateOnly, FloatingTime, UtcTime, ZonedTime
from processor.start_time import is_upcoming, resolve_start_time


class TestResolveStartTime:
    """Test cases for resolve_start_time."""

    def test_date_only_is_midnight_utc(self):
        resolved = resolve_start_time(DateOnly(date(2024, 3, 9)))

        assert resolved == datetime(2024, 3, 9, 0, 0, tzinfo=pytz.utc)

    def test_floating_is_utc_wall_clock(self):
        resolved = resolve_start_time(FloatingTime(datetime(2024, 3, 9, 19, 0)))

        assert resolved == datetime(2024, 3, 9, 19, 0, tzinfo=pytz.utc)
        assert resolved.utcoffset().total_seconds() == 0

    def test_zoned_tokyo(self):
        resolved = resolve_start_time(
            ZonedTime(datetime(2024, 3, 9, 19, 0), "Asia/Tokyo")
        )

        assert resolved == datetime(2024, 3, 9, 10, 0, tzinfo=pytz.utc)

    def test_zoned_across_dst_change(self):
        """Test that the offset in effect on the day is used."""
        before = resolve_start_time(
            ZonedTime(datetime(2023, 11, 4, 20, 0), "America/New_York")
        )
        after = resolve_start_time(
            ZonedTime(datetime(2023, 11, 6, 20, 0), "America/New_York")
        )

        assert before == datetime(2023, 11, 5, 0, 0, tzinfo=pytz.utc)
        assert after == datetime(2023, 11, 7, 1, 0, tzinfo=pytz.utc)

    def test_zoned_ambiguous_fails(self):
        """Test that a repeated fall-back hour is rejected."""
        with pytest.raises(AmbiguousOrInvalidLocalTimeError) as exc_info:
            resolve_start_time(
                ZonedTime(datetime(2023, 11, 5, 1, 30), "America/New_York")
            )

        assert exc_info.value.field == "start_time"

    def test_zoned_nonexistent_fails(self):
        """Test that a skipped spring-forward hour is rejected."""
        with pytest.raises(AmbiguousOrInvalidLocalTimeError):
            resolve_start_time(
                ZonedTime(datetime(2023, 3, 12, 2, 30), "America/New_York")
            )

    def test_unknown_timezone_fails(self):
        with pytest.raises(UnknownTimezoneError) as exc_info:
            resolve_start_time(ZonedTime(datetime(2024, 3, 9, 19, 0), "Mars/Olympus"))

        assert exc_info.value.text == "Mars/Olympus"

    def test_utc_unchanged(self):
        value = datetime(2024, 3, 9, 10, 0, tzinfo=pytz.utc)

        assert resolve_start_time(UtcTime(value)) == value


class TestIsUpcoming:
    """Test cases for the upcoming-event check."""

    NOW = datetime(2024, 3, 9, 10, 0, tzinfo=pytz.utc)

    def test_missing_start(self):
        assert is_upcoming(None, now=self.NOW) is False

    def test_date_only_compares_dates(self):
        assert is_upcoming(DateOnly(date(2024, 3, 10)), now=self.NOW) is True
        assert is_upcoming(DateOnly(date(2024, 3, 9)), now=self.NOW) is False

    def test_floating_uses_feed_timezone(self):
        """Test that 18:00 Tokyo time is 09:00 UTC, already past."""
        start = FloatingTime(datetime(2024, 3, 9, 18, 0))

        assert is_upcoming(start, now=self.NOW) is False
        assert is_upcoming(start, now=self.NOW, feed_timezone="UTC") is True

    def test_zoned(self):
        assert is_upcoming(
            ZonedTime(datetime(2024, 3, 9, 20, 0), "Asia/Tokyo"), now=self.NOW
        ) is True

    def test_ambiguous_is_not_upcoming(self):
        start = ZonedTime(datetime(2023, 11, 5, 1, 30), "America/New_York")

        assert is_upcoming(start, now=datetime(2023, 1, 1, tzinfo=pytz.utc)) is False
