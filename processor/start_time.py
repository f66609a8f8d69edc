"""Normalization of calendar start times to a UTC instant."""
import logging
from datetime import datetime, time
from typing import Optional

import pytz

from processor.errors import (
    AmbiguousOrInvalidLocalTimeError,
    UnknownTimezoneError,
)
from processor.models import (
    DateOnly,
    FloatingTime,
    StartTime,
    UtcTime,
    ZonedTime,
)

logger = logging.getLogger(__name__)

DEFAULT_FEED_TIMEZONE = 'Asia/Tokyo'


def resolve_start_time(start: StartTime) -> datetime:
    """
    Convert any start time shape to an aware UTC datetime.

    Args:
        start: Date-only, floating, zoned or UTC start time

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        UnknownTimezoneError: If a zoned time names an unknown timezone
        AmbiguousOrInvalidLocalTimeError: If a zoned wall-clock time is
            skipped or repeated by a DST transition
    """
    if isinstance(start, DateOnly):
        return datetime.combine(start.value, time.min).replace(tzinfo=pytz.utc)

    if isinstance(start, FloatingTime):
        # Floating times are taken as UTC wall-clock time
        return start.value.replace(tzinfo=pytz.utc)

    if isinstance(start, ZonedTime):
        localized = _localize(start.value, start.tzid)
        return localized.astimezone(pytz.utc)

    if isinstance(start, UtcTime):
        if start.value.tzinfo is None:
            return start.value.replace(tzinfo=pytz.utc)
        return start.value.astimezone(pytz.utc)

    raise TypeError(f"Unsupported start time: {start!r}")


def _localize(value: datetime, tzid: str) -> datetime:
    try:
        tz = pytz.timezone(tzid)
    except pytz.UnknownTimeZoneError:
        raise UnknownTimezoneError(tzid)

    naive = value.replace(tzinfo=None)
    try:
        return tz.localize(naive, is_dst=None)
    except pytz.InvalidTimeError:
        raise AmbiguousOrInvalidLocalTimeError(f"{naive.isoformat()} {tzid}")


def is_upcoming(
    start: Optional[StartTime],
    now: Optional[datetime] = None,
    feed_timezone: str = DEFAULT_FEED_TIMEZONE,
) -> bool:
    """
    Check whether an event starts after the given moment.

    Floating times are read in the feed's local timezone here, since the
    feed authors write them in local time. Date-only events stop counting
    as upcoming on their own day.

    Args:
        start: Event start time, or None when the event has none
        now: Reference moment (default: current UTC time)
        feed_timezone: Timezone used for floating times

    Returns:
        True if the event has not started yet

    Raises:
        UnknownTimezoneError: If a zoned time names an unknown timezone
    """
    if start is None:
        return False

    if now is None:
        now = datetime.now(pytz.utc)

    if isinstance(start, DateOnly):
        return start.value > now.astimezone(pytz.utc).date()

    try:
        if isinstance(start, FloatingTime):
            instant = _localize(start.value, feed_timezone)
        else:
            instant = resolve_start_time(start)
    except AmbiguousOrInvalidLocalTimeError as e:
        logger.info(f"Treating event as past: {e}")
        return False

    return instant > now
