"""
Tests for the helper utilities.
"""

import re
from datetime import timezone

import pytest

from knowledge_hub.utils.helpers import parse_timestamp, sanitize_filename, slugify_title, truncate_text
from knowledge_hub.utils.rate_limit import RateLimiter


@pytest.mark.parametrize("raw", [
    "AI Daily Brief",
    "../../etc/passwd",
    "---Hello,   World!!---",
    "Ünïcödé & émojis 🚀",
    "already-clean_name.md",
    "x" * 500,
])
def test_sanitize_filename_is_safe_and_idempotent(raw):
    """Sanitized names use the safe alphabet and do not change when sanitized again."""
    once = sanitize_filename(raw)
    assert re.fullmatch(r"[a-z0-9\-_.]*", once)
    assert "--" not in once
    assert not once.startswith("-") and not once.endswith("-")
    assert len(once) <= 200
    assert sanitize_filename(once) == once


def test_sanitize_filename_examples():
    assert sanitize_filename("AI Daily Brief") == "ai-daily-brief"
    assert sanitize_filename("a/b\\c") == "a-b-c"


def test_slugify_title_limits_length():
    slug = slugify_title("What's Next for OpenAI? " * 10)
    assert len(slug) <= 50
    assert slug.startswith("what-s-next-for-openai")
    assert not slug.endswith("-")


def test_slugify_title_empty_for_symbols():
    assert slugify_title("!!!") == ""


def test_parse_timestamp():
    parsed = parse_timestamp("2025-06-14T09:30:00+00:00")
    assert parsed.tzinfo is not None
    assert parsed.astimezone(timezone.utc).hour == 9

    assert parse_timestamp("2025-06-14T09:30:00Z").tzinfo == timezone.utc
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("a" * 20, 10) == "aaaaaaa..."


def test_rate_limiter_window():
    """Requests past the limit are refused until the window resets."""
    clock = [0.0]
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=lambda: clock[0])

    assert limiter.check("k") is True
    assert limiter.check("k") is True
    assert limiter.check("k") is False
    # Independent key
    assert limiter.check("other") is True

    clock[0] = 61.0
    assert limiter.check("k") is True
