"""Calendar feed scraper for the Teamup VTuber concert calendar."""
import logging
import time
from datetime import date, datetime
from typing import Any, List, Optional

import pytz
import requests
from icalendar import Calendar

from processor.models import (
    CalendarEvent,
    DateOnly,
    FloatingTime,
    StartTime,
    UtcTime,
    ZonedTime,
)

logger = logging.getLogger(__name__)


class CalendarFeedError(Exception):
    """Raised when the feed document cannot be parsed."""


class TeamupCalendarScraper:
    """Scraper for the public Teamup ICS feed."""

    FEED_URL = "https://ics.teamup.com/feed/ks58vf85ajmc6pd7vu/0.ics"

    def __init__(self, feed_url: Optional[str] = None, timeout: int = 30):
        """
        Initialize the calendar scraper.

        Args:
            feed_url: ICS feed URL (default: the public concert calendar)
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.feed_url = feed_url or self.FEED_URL
        self.timeout = timeout

    def fetch_events(self) -> List[CalendarEvent]:
        """
        Fetch and parse every event in the feed.

        Returns:
            List of CalendarEvent objects
        """
        logger.info(f"Fetching calendar feed from {self.feed_url}")

        ics_text = self.fetch_feed()
        events = self.parse_events(ics_text)

        logger.info(f"Successfully fetched {len(events)} events")
        return events

    def fetch_feed(self) -> str:
        """
        Download the ICS document with retry logic.

        Returns:
            ICS document as string

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        max_retries = 3
        base_delay = 1  # seconds

        for attempt in range(max_retries):
            try:
                logger.info(f"Fetching calendar feed (attempt {attempt + 1}/{max_retries})")
                response = requests.get(self.feed_url, timeout=self.timeout)
                response.raise_for_status()
                # text/calendar is often served without a charset
                return response.content.decode('utf-8')

            except requests.RequestException as e:
                if attempt < max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{max_retries}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {max_retries} retry attempts failed. Last error: {e}"
                    )
                    raise

    def parse_events(self, ics_text: str) -> List[CalendarEvent]:
        """
        Split an ICS document into calendar events.

        Args:
            ics_text: ICS document

        Returns:
            List of CalendarEvent objects

        Raises:
            CalendarFeedError: If the document is not valid iCalendar
        """
        try:
            calendar = Calendar.from_ical(ics_text)
        except ValueError as e:
            raise CalendarFeedError(f"Failed to parse calendar feed: {e}") from e

        return [self._parse_event(component) for component in calendar.walk('VEVENT')]

    def _parse_event(self, component) -> CalendarEvent:
        """
        Read the properties used for concerts from a VEVENT.

        Absent properties become None.
        """
        return CalendarEvent(
            summary=self._text(component.get('SUMMARY')),
            category=self._categories(component.get('CATEGORIES')),
            description=self._text(component.get('DESCRIPTION')),
            start=self._parse_start(component.get('DTSTART')),
            attachment=self._text(component.get('ATTACH')),
        )

    def _text(self, prop: Any) -> Optional[str]:
        if prop is None:
            return None
        if isinstance(prop, list):
            prop = prop[0] if prop else None
            if prop is None:
                return None
        return str(prop)

    def _categories(self, prop: Any) -> Optional[str]:
        """Return the category tag text, joining multiple values with commas."""
        if prop is None:
            return None
        props = prop if isinstance(prop, list) else [prop]
        values = []
        for item in props:
            cats = getattr(item, 'cats', None)
            if cats is None:
                values.append(str(item))
            else:
                values.extend(str(cat) for cat in cats)
        return ','.join(values)

    def _parse_start(self, prop: Any) -> Optional[StartTime]:
        """
        Classify DTSTART into one of the start time shapes.

        Zoned times keep their wall-clock value and TZID so that DST
        ambiguity is judged when the time is resolved.
        """
        if prop is None:
            return None

        # Values icalendar could not decode come back without .dt
        value = getattr(prop, 'dt', None)
        if isinstance(value, datetime):
            tzid = prop.params.get('TZID')
            if tzid:
                return ZonedTime(
                    value=value.replace(tzinfo=None),
                    tzid=self._zone_name(value, tzid),
                )
            if value.tzinfo is not None:
                return UtcTime(value=value)
            return FloatingTime(value=value)

        if isinstance(value, date):
            return DateOnly(value=value)

        logger.warning(f"Unsupported DTSTART value: {value!r}")
        return None

    def _zone_name(self, value: datetime, tzid: Any) -> str:
        """
        Turn a TZID parameter into an IANA zone name.

        Prefixed TZIDs such as "/Asia/Tokyo" are unprefixed. Names pytz does
        not know, such as Windows zone names, fall back to the zone
        icalendar resolved for the value, when it resolved one.
        """
        name = str(tzid).strip('/')
        if name in pytz.all_timezones_set:
            return name
        resolved = getattr(value.tzinfo, 'key', None) or getattr(value.tzinfo, 'zone', None)
        return resolved or name
