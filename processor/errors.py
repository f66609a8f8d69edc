"""Error types raised while turning calendar events into concerts.

Two separate hierarchies: ``ConcertParseError`` aborts a single event,
``LinkExtractionError`` only ever blanks out one optional link.
"""
from enum import Enum


class ErrorCode(Enum):
    """Error codes for concert parsing."""
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    STRUCTURE_MISMATCH = "STRUCTURE_MISMATCH"
    PRICE_FORMAT_UNRECOGNIZED = "PRICE_FORMAT_UNRECOGNIZED"
    PRICE_CONVERSION_FAILED = "PRICE_CONVERSION_FAILED"
    FORMAT_UNRECOGNIZED = "FORMAT_UNRECOGNIZED"
    PLATFORM_UNRECOGNIZED = "PLATFORM_UNRECOGNIZED"
    AMBIGUOUS_OR_INVALID_LOCAL_TIME = "AMBIGUOUS_OR_INVALID_LOCAL_TIME"
    UNKNOWN_TIMEZONE = "UNKNOWN_TIMEZONE"
    LINK_NOT_FOUND = "LINK_NOT_FOUND"
    MALFORMED_URL = "MALFORMED_URL"


class ConcertParseError(Exception):
    """A required field could not be extracted; the event is unusable."""

    code: ErrorCode

    def __init__(self, field: str, text: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.text = text
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class MissingRequiredFieldError(ConcertParseError):
    """Raised when the event lacks a required property."""

    code = ErrorCode.MISSING_REQUIRED_FIELD

    def __init__(self, field: str) -> None:
        super().__init__(field, '', f"failed to get {field}")


class StructureMismatchError(ConcertParseError):
    """Raised when a summary is not shaped like "(price)(format)title"."""

    code = ErrorCode.STRUCTURE_MISMATCH

    def __init__(self, text: str) -> None:
        super().__init__(
            'summary',
            text,
            f'Calendar event summary parsing failed, the text is "{text}"',
        )


class PriceFormatUnrecognizedError(ConcertParseError):
    """Raised when a price token matches none of the known shapes."""

    code = ErrorCode.PRICE_FORMAT_UNRECOGNIZED

    def __init__(self, text: str) -> None:
        super().__init__(
            'price', text, f"Price conversion failed, the string is {text}"
        )


class PriceConversionError(ConcertParseError):
    """Raised when the digits of a matched price token cannot be read."""

    code = ErrorCode.PRICE_CONVERSION_FAILED

    def __init__(self, text: str) -> None:
        super().__init__(
            'price', text, f"Price digits could not be read, the string is {text}"
        )


class FormatUnrecognizedError(ConcertParseError):
    """Raised when a format token carries neither format marker."""

    code = ErrorCode.FORMAT_UNRECOGNIZED

    def __init__(self, text: str) -> None:
        super().__init__(
            'format', text, f"Live format conversion failed, the text is {text}"
        )


class PlatformUnrecognizedError(ConcertParseError):
    """Raised when a category tag is outside the platform vocabulary."""

    code = ErrorCode.PLATFORM_UNRECOGNIZED

    def __init__(self, text: str) -> None:
        super().__init__(
            'category',
            text,
            f"Calendar category parsing failed, the text is {text}",
        )


class AmbiguousOrInvalidLocalTimeError(ConcertParseError):
    """Raised when a local time falls in a DST gap or overlap."""

    code = ErrorCode.AMBIGUOUS_OR_INVALID_LOCAL_TIME

    def __init__(self, text: str) -> None:
        super().__init__(
            'start_time',
            text,
            f"start time is ambiguous or does not exist, the value is {text}",
        )


class UnknownTimezoneError(ConcertParseError):
    """Raised when a timezone identifier cannot be resolved."""

    code = ErrorCode.UNKNOWN_TIMEZONE

    def __init__(self, text: str) -> None:
        super().__init__(
            'start_time', text, f"unknown timezone identifier {text}"
        )


class LinkExtractionError(Exception):
    """An optional link could not be recovered from the description."""

    code: ErrorCode

    def __init__(self, link: str, text: str, message: str) -> None:
        super().__init__(message)
        self.link = link
        self.text = text
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class LinkNotFoundError(LinkExtractionError):
    """Raised when no candidate URL matches the link's patterns."""

    code = ErrorCode.LINK_NOT_FOUND

    def __init__(self, link: str, text: str) -> None:
        super().__init__(link, text, f"{link} url not found in description")


class MalformedUrlError(LinkExtractionError):
    """Raised when a candidate substring is not a usable URL."""

    code = ErrorCode.MALFORMED_URL

    def __init__(self, link: str, text: str) -> None:
        super().__init__(link, text, f"{link} url is malformed: {text}")
