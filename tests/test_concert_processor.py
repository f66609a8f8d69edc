"""Unit tests for ConcertProcessor."""
import uuid
from datetime import date, datetime

import pytest
import pytz

from processor.concert_processor import ConcertProcessor
from processor.description import FORM_LINK_SENTENCE
from processor.errors import (
    AmbiguousOrInvalidLocalTimeError,
    ErrorCode,
    MissingRequiredFieldError,
    PlatformUnrecognizedError,
    StructureMismatchError,
)
from processor.models import (
    CalendarEvent,
    DateOnly,
    FloatingTime,
    LiveFormat,
    MultiTier,
    Platform,
    ZonedTime,
)


DESCRIPTION = (
    "Gaoh Omi's first live!\n"
    "!Image: https://i.imgur.com/poster.png\n"
    "Announcement: https://twitter.com/gaoh_omi/status/111\n"
    "Ticket Link: https://zaiko.io/event/12345\n"
    "Official site: https://gaoh-omi.example.jp/live\n"
    "Archive: https://www.youtube.com/watch?v=abcDEF123\n"
    "Update: https://twitter.com/gaoh_omi/status/222\n"
    f"{FORM_LINK_SENTENCE}\\n"
)


def make_event(**overrides) -> CalendarEvent:
    fields = {
        'summary': "(¥2000+)(🌐🪑)Gaoh Omi 1st Live",
        'category': "Z-aN",
        'description': DESCRIPTION,
        'start': ZonedTime(datetime(2030, 5, 4, 19, 0), "Asia/Tokyo"),
        'attachment': None,
    }
    fields.update(overrides)
    return CalendarEvent(**fields)


class TestProcessEvent:
    """Test cases for building a single concert."""

    def test_full_event(self):
        """Test that every field is extracted from a well-formed event."""
        processor = ConcertProcessor()

        concert = processor.process_event(make_event())

        assert concert.title == "Gaoh Omi 1st Live"
        assert concert.jpy_price == MultiTier(2000)
        assert concert.format == LiveFormat.HYBRID
        assert concert.platform == Platform.ZAN
        assert concert.start_time == datetime(2030, 5, 4, 10, 0, tzinfo=pytz.utc)
        assert concert.image_url == "https://i.imgur.com/poster.png"
        assert concert.twitter_url == "https://twitter.com/gaoh_omi/status/222"
        assert concert.ticket_link == "https://zaiko.io/event/12345"
        assert concert.official_site_link == "https://gaoh-omi.example.jp/live"
        assert concert.youtube_link == "https://www.youtube.com/watch?v=abcDEF123"
        assert FORM_LINK_SENTENCE not in concert.description
        assert concert.description.endswith("status/222")
        assert uuid.UUID(concert.id)

    def test_to_dict_keeps_literal_values(self):
        processor = ConcertProcessor()

        data = processor.process_event(make_event()).to_dict()

        assert data['title'] == "Gaoh Omi 1st Live"
        assert data['format'] == "Hybrid"
        assert data['jpy_price'] == {'type': 'MultiTier', 'minimum_amount': 2000}
        assert data['platform'] == "Zan"
        assert data['start_time'] == "2030-05-04T10:00:00Z"
        assert data['ticket_link'] == "https://zaiko.io/event/12345"
        assert data['image_url'] == "https://i.imgur.com/poster.png"
        assert set(data) == {
            'id', 'title', 'format', 'jpy_price', 'platform', 'description',
            'start_time', 'image_url', 'twitter_url', 'youtube_link',
            'ticket_link', 'official_site_link',
        }

    def test_missing_links_become_none(self):
        """Test that link failures never fail the concert."""
        processor = ConcertProcessor()

        concert = processor.process_event(make_event(description="Details soon"))

        assert concert.description == "Details soon"
        assert concert.image_url is None
        assert concert.twitter_url is None
        assert concert.youtube_link is None
        assert concert.ticket_link is None
        assert concert.official_site_link is None

    def test_malformed_attachment_becomes_none(self):
        processor = ConcertProcessor()

        concert = processor.process_event(make_event(attachment="not a url"))

        assert concert.image_url is None

    def test_attachment_used_for_image(self):
        processor = ConcertProcessor()

        concert = processor.process_event(
            make_event(attachment="https://files.teamup.com/poster.jpg")
        )

        assert concert.image_url == "https://files.teamup.com/poster.jpg"

    @pytest.mark.parametrize("field", ['summary', 'category', 'description'])
    def test_missing_required_text_field(self, field):
        processor = ConcertProcessor()

        with pytest.raises(MissingRequiredFieldError) as exc_info:
            processor.process_event(make_event(**{field: None}))

        assert exc_info.value.field == field
        assert exc_info.value.code == ErrorCode.MISSING_REQUIRED_FIELD

    def test_missing_start_time(self):
        processor = ConcertProcessor()

        with pytest.raises(MissingRequiredFieldError) as exc_info:
            processor.process_event(make_event(start=None))

        assert exc_info.value.field == 'start_time'

    def test_bad_summary_raises(self):
        processor = ConcertProcessor()

        with pytest.raises(StructureMismatchError):
            processor.process_event(make_event(summary="Gaoh Omi 1st Live"))

    def test_bad_category_raises(self):
        processor = ConcertProcessor()

        with pytest.raises(PlatformUnrecognizedError):
            processor.process_event(make_event(category="Twitch"))

    def test_ambiguous_start_raises(self):
        processor = ConcertProcessor()

        with pytest.raises(AmbiguousOrInvalidLocalTimeError):
            processor.process_event(make_event(
                start=ZonedTime(datetime(2023, 11, 5, 1, 30), "America/New_York")
            ))

    def test_fresh_id_per_call(self):
        processor = ConcertProcessor()
        event = make_event()

        assert processor.process_event(event).id != processor.process_event(event).id


class TestProcessEvents:
    """Test cases for batch processing."""

    NOW = datetime(2024, 3, 9, 10, 0, tzinfo=pytz.utc)

    def test_bad_events_are_skipped(self):
        """Test that one malformed event does not stop the others."""
        processor = ConcertProcessor()

        concerts = processor.process_events([
            make_event(summary="(¥5000)(🌐)Quon Tama 2nd Live"),
            make_event(summary="no structure"),
            make_event(category="Unknown"),
            make_event(start=ZonedTime(datetime(2024, 1, 1), "Not/AZone")),
            make_event(summary="(Free)(🪑)Fan Meeting", category="other"),
        ])

        assert [c.title for c in concerts] == ["Quon Tama 2nd Live", "Fan Meeting"]

    def test_upcoming_only(self):
        processor = ConcertProcessor(upcoming_only=True)

        concerts = processor.process_events([
            make_event(summary="(¥1)(🌐)Past", start=DateOnly(date(2024, 3, 1))),
            make_event(summary="(¥1)(🌐)Future", start=DateOnly(date(2024, 3, 20))),
            make_event(summary="(¥1)(🌐)No start", start=None),
            make_event(
                summary="(¥1)(🌐)Tonight",
                start=FloatingTime(datetime(2024, 3, 9, 20, 0)),
            ),
        ], now=self.NOW)

        assert [c.title for c in concerts] == ["Future", "Tonight"]

    def test_all_events_kept_by_default(self):
        processor = ConcertProcessor()

        concerts = processor.process_events([
            make_event(start=DateOnly(date(2001, 1, 1))),
        ], now=self.NOW)

        assert len(concerts) == 1
        assert concerts[0].start_time == datetime(2001, 1, 1, tzinfo=pytz.utc)

    def test_unknown_timezone_skipped_with_upcoming_filter(self):
        processor = ConcertProcessor(upcoming_only=True)

        concerts = processor.process_events([
            make_event(start=ZonedTime(datetime(2030, 1, 1, 19, 0), "Not/AZone")),
        ], now=self.NOW)

        assert concerts == []
