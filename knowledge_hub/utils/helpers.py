"""
Helper utility functions for the knowledge hub.
"""

import re
from datetime import datetime, timezone
from typing import Optional

MAX_FILENAME_LENGTH = 200
MAX_TITLE_SLUG_LENGTH = 50


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a string to be used as part of a filename.

    Only ``[a-z0-9-_.]`` survives; everything else becomes a hyphen. Runs of
    hyphens are collapsed, leading and trailing hyphens removed and the result
    capped at 200 characters. Applying it twice gives the same result.

    Args:
        filename: The filename to sanitize

    Returns:
        Sanitized filename
    """
    sanitized = re.sub(r"[^a-z0-9\-_.]", "-", filename.lower())
    sanitized = re.sub(r"-{2,}", "-", sanitized).strip("-")
    return sanitized[:MAX_FILENAME_LENGTH].rstrip("-")


def slugify_title(title: str, max_length: int = MAX_TITLE_SLUG_LENGTH) -> str:
    """
    Turn a video title into a short slug.

    Args:
        title: Free-text title
        max_length: Maximum slug length

    Returns:
        Lowercase slug with non-alphanumerics collapsed to single hyphens
    """
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return sanitize_filename(slug[:max_length])


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns:
        The parsed datetime, or None when the value is not ISO-8601
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
