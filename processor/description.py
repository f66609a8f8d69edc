"""Cleanup of free-text event descriptions."""

FORM_LINK_SENTENCE = (
    "Event Suggestion Submission form: https://forms.gle/tZwY1M19YUgUhn9i6"
)
ESCAPED_NEWLINE = "\\n"


def sanitize_description(description: str) -> str:
    """
    Remove the submission-form boilerplate and trailing escaped newlines.

    Applying this twice gives the same result as applying it once.

    Args:
        description: Raw event description

    Returns:
        Cleaned description
    """
    cleaned = description
    # Removal can splice a new occurrence together from the remaining text
    while FORM_LINK_SENTENCE in cleaned:
        cleaned = cleaned.replace(FORM_LINK_SENTENCE, "")

    cleaned = cleaned.strip()
    while cleaned.endswith(ESCAPED_NEWLINE):
        cleaned = cleaned[:-len(ESCAPED_NEWLINE)].strip()

    return cleaned
