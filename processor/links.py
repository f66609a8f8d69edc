"""Extractors for the optional links embedded in event descriptions.

Each extractor returns a URL string or raises a ``LinkExtractionError``.
Descriptions may separate lines with real newlines or with a literal
backslash-n sequence, so "start of line" accepts either.
"""
import logging
import re
from typing import FrozenSet, List, Optional, Tuple
from urllib.parse import urlparse

from processor.errors import LinkNotFoundError, MalformedUrlError

logger = logging.getLogger(__name__)

URL = (
    r'https?://(?:www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b'
    r'[-a-zA-Z0-9()@:%_\+.~#?&/=]*'
)
URL_PATH = r'[-a-zA-Z0-9()@:%_\+.~#?&/=]*'
LINE_START = r'(?:^|(?<=\\n))'
# Label text up to a colon, stopping at real or escaped line breaks
LABEL_TEXT = r'(?:(?!\\n)[^:\r\n])+'
TRAILING_PUNCTUATION = '.,;:!?'

TWITTER_HOSTS = frozenset(['twitter.com', 'x.com'])
TICKETING_HOSTS = frozenset(['zaiko.io', 'spwn.jp', 'zan-live.com'])


def _labeled(label: str) -> re.Pattern:
    return re.compile(
        LINE_START + label + r'[ \t]*(' + URL + ')',
        re.MULTILINE | re.IGNORECASE,
    )


# Ordered (name, pattern, allowed hosts) triples; the first pattern with an
# acceptable match wins. None allows any host.
IMAGE_PATTERNS: List[Tuple[str, re.Pattern, Optional[FrozenSet[str]]]] = [
    ('image label', re.compile(
        LINE_START + r'!?Image:[ \t]*(' + URL + ')', re.MULTILINE
    ), None),
    ('bang label', re.compile(
        LINE_START + r'!' + LABEL_TEXT + r':[ \t]*(' + URL + ')', re.MULTILINE
    ), None),
]

TICKET_PATTERNS: List[Tuple[str, re.Pattern, Optional[FrozenSet[str]]]] = [
    ('ticket label', _labeled(r'Ticket (?:Link|site):'), None),
    ('ticketing domain', re.compile(
        r'(https?://(?:www\.|[-a-zA-Z0-9]+\.)?'
        r'(?:zaiko\.io|spwn\.jp|zan-live\.com)\b' + URL_PATH + ')',
        re.IGNORECASE,
    ), TICKETING_HOSTS),
]

TWITTER_PATTERN = re.compile(
    r'(https?://(?:www\.|mobile\.)?(?:twitter|x)\.com\b' + URL_PATH + ')',
    re.IGNORECASE,
)

YOUTUBE_PATTERN = re.compile(
    r'(https?://(?:(?:www\.|m\.)?youtube\.com/watch\?v=|youtu\.be/)'
    r'[-a-zA-Z0-9_]+[-a-zA-Z0-9()@:%_\+.~#?&/=]*)',
    re.IGNORECASE,
)

OFFICIAL_SITE_PATTERN = _labeled(r'Official site:')


def validate_url(link: str, candidate: str) -> str:
    """
    Check that a captured substring is a usable http(s) URL.

    Args:
        link: Name of the link being extracted, for error reporting
        candidate: Captured URL text

    Returns:
        The candidate, unchanged

    Raises:
        MalformedUrlError: If the candidate is not an absolute http(s) URL
    """
    if not candidate or any(ch.isspace() for ch in candidate):
        raise MalformedUrlError(link, candidate)

    try:
        parsed = urlparse(candidate)
    except ValueError:
        raise MalformedUrlError(link, candidate)

    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        raise MalformedUrlError(link, candidate)

    return candidate


def trim_trailing_punctuation(candidate: str) -> str:
    """
    Drop sentence punctuation and unbalanced closing parentheses that the
    URL pattern picked up from the surrounding prose.

    Args:
        candidate: Captured URL text

    Returns:
        The candidate without trailing punctuation
    """
    trimmed = candidate
    while True:
        stripped = trimmed.rstrip(TRAILING_PUNCTUATION)
        while stripped.endswith(')') and stripped.count('(') < stripped.count(')'):
            stripped = stripped[:-1]
        if stripped == trimmed:
            return trimmed
        trimmed = stripped


def _is_on_host(url: str, hosts: FrozenSet[str]) -> bool:
    hostname = urlparse(url).hostname or ''
    return any(hostname == host or hostname.endswith('.' + host) for host in hosts)


def _accept(
    link: str,
    candidate: str,
    hosts: Optional[FrozenSet[str]] = None,
) -> Optional[str]:
    """
    Validate a captured URL, returning None when its host is not allowed.

    Raises:
        MalformedUrlError: If the candidate is not an absolute http(s) URL
    """
    url = validate_url(link, trim_trailing_punctuation(candidate))
    if hosts is not None and not _is_on_host(url, hosts):
        logger.debug(f"{link} url rejected, host not allowed: {url}")
        return None
    return url


def _first_of(
    link: str,
    description: str,
    patterns: List[Tuple[str, re.Pattern, Optional[FrozenSet[str]]]],
) -> str:
    for name, pattern, hosts in patterns:
        for matched in pattern.finditer(description):
            url = _accept(link, matched.group(1), hosts)
            if url:
                logger.debug(f"{link} url matched by {name} pattern")
                return url
    raise LinkNotFoundError(link, description)


def extract_image_url(description: str, attachment: Optional[str] = None) -> str:
    """
    Find the poster image URL.

    The event's attachment is used when present; otherwise the description
    is searched for an "Image:" line, then any "!label:" line.
    """
    if attachment and attachment.strip():
        return validate_url('image', attachment.strip())
    return _first_of('image', description, IMAGE_PATTERNS)


def extract_twitter_url(description: str) -> str:
    """Find the social post URL; the last mention in the text wins."""
    for candidate in reversed(TWITTER_PATTERN.findall(description)):
        url = _accept('twitter', candidate, TWITTER_HOSTS)
        if url:
            return url
    raise LinkNotFoundError('twitter', description)


def extract_youtube_link(description: str) -> str:
    """Find the first YouTube watch or short link."""
    matched = YOUTUBE_PATTERN.search(description)
    if not matched:
        raise LinkNotFoundError('youtube', description)
    return _accept('youtube', matched.group(1))


def extract_ticket_link(description: str) -> str:
    """Find the ticket page, preferring an explicitly labeled line."""
    return _first_of('ticket', description, TICKET_PATTERNS)


def extract_official_site_link(description: str) -> str:
    """Find the URL on an "Official site:" line."""
    matched = OFFICIAL_SITE_PATTERN.search(description)
    if not matched:
        raise LinkNotFoundError('official site', description)
    return _accept('official site', matched.group(1))
