"""Classifiers for the summary line and category tag of a calendar event.

Summaries follow the convention ``(<price>)(<format>)<title>``, e.g.
``(¥2000+)(🌐🪑)Gaoh Omi 1st Live``.
"""
import logging
import re
from typing import Tuple

from processor.errors import (
    FormatUnrecognizedError,
    PlatformUnrecognizedError,
    PriceConversionError,
    PriceFormatUnrecognizedError,
    StructureMismatchError,
)
from processor.models import (
    Fixed,
    Free,
    JpyPrice,
    LiveFormat,
    MultiTier,
    Platform,
    Undetermined,
)

logger = logging.getLogger(__name__)

SUMMARY_PATTERN = re.compile(r'^\(([^()]*)\)\(([^()]*)\)(.+)$', re.DOTALL)

FIXED_PRICE_PATTERN = re.compile(r'^[¥￥]([0-9]+)$')
MULTI_TIER_PRICE_PATTERN = re.compile(r'^[¥￥]([0-9]+)\+$')

ONLINE_MARKER = '🌐'
IN_PERSON_MARKER = '🪑'

# (online, in person) -> format
FORMATS_BY_MARKERS = {
    (True, True): LiveFormat.HYBRID,
    (True, False): LiveFormat.ONLINE,
    (False, True): LiveFormat.IN_PERSON,
}

PLATFORMS_BY_TAG = {
    'nico nico douga': Platform.NICONICO,
    'spwn': Platform.SPWN,
    'tba': Platform.TBA,
    'youtube': Platform.YOUTUBE,
    'z-an': Platform.ZAN,
    'zaiko': Platform.ZAIKO,
    'other': Platform.OTHER,
}


def split_summary(summary: str) -> Tuple[str, JpyPrice, LiveFormat]:
    """
    Split a summary line into its title, price and format.

    Args:
        summary: Full summary line, e.g. "(¥5000)(🌐)Quon Tama 2nd Live"

    Returns:
        Tuple of (title, price, format)

    Raises:
        StructureMismatchError: If the summary is not "(price)(format)title"
        ConcertParseError: If the price or format token is not recognized
    """
    matched = SUMMARY_PATTERN.match(summary.strip())
    if not matched:
        raise StructureMismatchError(summary)

    price_text, format_text, title_text = matched.groups()
    title = title_text.strip()
    if not title:
        raise StructureMismatchError(summary)

    price = classify_price(price_text)
    live_format = classify_format(format_text)

    return title, price, live_format


def classify_price(token: str) -> JpyPrice:
    """
    Map a price token to a price tier.

    Checks run in priority order: "tba"/"tbd", then "free", then an
    exact "¥digits", then an exact "¥digits+".

    Raises:
        PriceFormatUnrecognizedError: If no shape matches
        PriceConversionError: If matched digits cannot be converted
    """
    lowered = token.lower()

    if 'tba' in lowered or 'tbd' in lowered:
        return Undetermined()

    if 'free' in lowered:
        return Free()

    stripped = token.strip()

    matched = FIXED_PRICE_PATTERN.match(stripped)
    if matched:
        return Fixed(_parse_amount(matched.group(1)))

    matched = MULTI_TIER_PRICE_PATTERN.match(stripped)
    if matched:
        return MultiTier(_parse_amount(matched.group(1)))

    raise PriceFormatUnrecognizedError(token)


def _parse_amount(digits: str) -> int:
    try:
        return int(digits)
    except ValueError:
        logger.error(f"Price conversion failed, the string is {digits}")
        raise PriceConversionError(digits)


def classify_format(token: str) -> LiveFormat:
    """
    Map a format token to a live format by its markers.

    Raises:
        FormatUnrecognizedError: If neither marker is present
    """
    markers = (ONLINE_MARKER in token, IN_PERSON_MARKER in token)
    try:
        return FORMATS_BY_MARKERS[markers]
    except KeyError:
        raise FormatUnrecognizedError(token)


def classify_platform(tag: str) -> Platform:
    """
    Map a category tag to a platform, ignoring case and outer whitespace.

    Raises:
        PlatformUnrecognizedError: If the tag is not in the vocabulary
    """
    platform = PLATFORMS_BY_TAG.get(tag.strip().lower())
    if platform is None:
        raise PlatformUnrecognizedError(tag)
    return platform
