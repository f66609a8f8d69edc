"""Concert processor for turning calendar events into concert records."""
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from processor.description import sanitize_description
from processor.errors import (
    ConcertParseError,
    LinkExtractionError,
    MissingRequiredFieldError,
)
from processor.links import (
    extract_image_url,
    extract_official_site_link,
    extract_ticket_link,
    extract_twitter_url,
    extract_youtube_link,
)
from processor.models import CalendarEvent, LiveConcert
from processor.start_time import (
    DEFAULT_FEED_TIMEZONE,
    is_upcoming,
    resolve_start_time,
)
from processor.summary import classify_platform, split_summary

logger = logging.getLogger(__name__)


class ConcertProcessor:
    """Processor for validating and normalizing concert events."""

    def __init__(
        self,
        upcoming_only: bool = False,
        feed_timezone: str = DEFAULT_FEED_TIMEZONE,
    ):
        """
        Initialize the concert processor.

        Args:
            upcoming_only: Drop events that have already started
            feed_timezone: Timezone used to judge floating start times
        """
        self.upcoming_only = upcoming_only
        self.feed_timezone = feed_timezone

    def process_events(
        self,
        raw_events: List[CalendarEvent],
        now: Optional[datetime] = None,
    ) -> List[LiveConcert]:
        """
        Process a batch of calendar events, skipping the ones that fail.

        Args:
            raw_events: List of CalendarEvent objects from the scraper
            now: Reference moment for the upcoming filter

        Returns:
            List of LiveConcert objects
        """
        concerts = []

        for event in raw_events:
            try:
                if self.upcoming_only and not is_upcoming(
                    event.start, now=now, feed_timezone=self.feed_timezone
                ):
                    continue
                concerts.append(self.process_event(event))
            except ConcertParseError as e:
                logger.warning(
                    f"getting concert from event failed, the error is {e}, "
                    f"the summary is {event.summary!r}"
                )
                continue

        logger.info(
            f"Processed {len(concerts)} valid concerts out of "
            f"{len(raw_events)} total events"
        )
        return concerts

    def process_event(self, event: CalendarEvent) -> LiveConcert:
        """
        Build a concert record from a single calendar event.

        Summary, category, description and start time are required; any
        failure there raises. The five links are best effort and become
        None when they cannot be extracted.

        Args:
            event: Raw CalendarEvent

        Returns:
            LiveConcert object

        Raises:
            ConcertParseError: If a required field is missing or malformed
        """
        summary = self._require(event.summary, 'summary')
        category = self._require(event.category, 'category')

        title, jpy_price, live_format = split_summary(summary)
        platform = classify_platform(category)

        description = sanitize_description(
            self._require(event.description, 'description')
        )

        if event.start is None:
            raise MissingRequiredFieldError('start_time')
        start_time = resolve_start_time(event.start)

        return LiveConcert(
            id=self.generate_concert_id(),
            title=title,
            format=live_format,
            jpy_price=jpy_price,
            platform=platform,
            description=description,
            start_time=start_time,
            image_url=self._optional_link(
                'image',
                lambda: extract_image_url(description, event.attachment),
            ),
            twitter_url=self._optional_link(
                'twitter', lambda: extract_twitter_url(description)
            ),
            youtube_link=self._optional_link(
                'youtube', lambda: extract_youtube_link(description)
            ),
            ticket_link=self._optional_link(
                'ticket', lambda: extract_ticket_link(description)
            ),
            official_site_link=self._optional_link(
                'official site', lambda: extract_official_site_link(description)
            ),
        )

    def _require(self, value: Optional[str], field: str) -> str:
        """
        Return a required text field stripped of outer whitespace.

        Raises:
            MissingRequiredFieldError: If the field is absent
        """
        if value is None:
            raise MissingRequiredFieldError(field)
        return value.strip()

    def _optional_link(
        self, name: str, extract: Callable[[], str]
    ) -> Optional[str]:
        try:
            return extract()
        except LinkExtractionError as e:
            logger.info(f"returning null for {name} url: {e.code.value}")
            return None

    def generate_concert_id(self) -> str:
        """
        Generate a fresh unique identifier for a concert.

        Returns:
            Random UUID4 string
        """
        return str(uuid.uuid4())
