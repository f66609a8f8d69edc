"""Data models for concert processing."""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class LiveFormat(Enum):
    """How a concert is delivered to the audience."""
    ONLINE = "Online"
    IN_PERSON = "InPerson"
    HYBRID = "Hybrid"


class Platform(Enum):
    """Hosting platform, taken from the calendar category tag."""
    NICONICO = "NicoNicoDouga"
    SPWN = "Spwn"
    TBA = "ToBeAnnounced"
    YOUTUBE = "Youtube"
    ZAN = "Zan"
    ZAIKO = "Zaiko"
    OTHER = "Other"


@dataclass(frozen=True)
class Undetermined:
    """Price marked as to be announced or decided."""

    def to_dict(self) -> dict:
        return {'type': 'Undetermined'}


@dataclass(frozen=True)
class Free:
    """No charge to attend."""

    def to_dict(self) -> dict:
        return {'type': 'Free'}


@dataclass(frozen=True)
class Fixed:
    """Single ticket price in yen."""
    amount: int

    def to_dict(self) -> dict:
        return {'type': 'Fixed', 'amount': self.amount}


@dataclass(frozen=True)
class MultiTier:
    """Tiered ticket packages starting at the given price in yen."""
    minimum_amount: int

    def to_dict(self) -> dict:
        return {'type': 'MultiTier', 'minimum_amount': self.minimum_amount}


JpyPrice = Union[Undetermined, Free, Fixed, MultiTier]


@dataclass(frozen=True)
class DateOnly:
    """Whole-day start with no time of day."""
    value: date


@dataclass(frozen=True)
class FloatingTime:
    """Wall-clock start with no timezone attached."""
    value: datetime


@dataclass(frozen=True)
class ZonedTime:
    """Wall-clock start in a named timezone."""
    value: datetime
    tzid: str


@dataclass(frozen=True)
class UtcTime:
    """Start already expressed in UTC."""
    value: datetime


StartTime = Union[DateOnly, FloatingTime, ZonedTime, UtcTime]


@dataclass
class CalendarEvent:
    """Raw event from the calendar feed."""
    summary: Optional[str]
    category: Optional[str]
    description: Optional[str]
    start: Optional[StartTime]
    attachment: Optional[str] = None


@dataclass(frozen=True)
class LiveConcert:
    """Validated and normalized concert."""
    id: str
    title: str
    format: LiveFormat
    jpy_price: JpyPrice
    platform: Platform
    description: str
    start_time: datetime
    image_url: Optional[str] = None
    twitter_url: Optional[str] = None
    youtube_link: Optional[str] = None
    ticket_link: Optional[str] = None
    official_site_link: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to the JSON shape served to clients."""
        return {
            'id': self.id,
            'title': self.title,
            'format': self.format.value,
            'jpy_price': self.jpy_price.to_dict(),
            'platform': self.platform.value,
            'description': self.description,
            'start_time': self.start_time.strftime('%Y-%m-%dT%H:%M:%SZ'),
            'image_url': self.image_url,
            'twitter_url': self.twitter_url,
            'youtube_link': self.youtube_link,
            'ticket_link': self.ticket_link,
            'official_site_link': self.official_site_link,
        }
