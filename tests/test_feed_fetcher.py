"""
Tests for the channel feed fetcher.
"""

import asyncio

import httpx
import pytest

from knowledge_hub.core.feed_fetcher import FeedFetcher, decode_title, parse_feed
from knowledge_hub.utils.error_handling import FeedError


@pytest.fixture
def feed_body(feed_builder):
    """Three entries, two of them inside a two day window."""
    return feed_builder([
        ("older", "Three Days Ago", "2025-06-12T08:00:00+00:00"),
        ("newest", "This Morning", "2025-06-15T07:00:00+00:00"),
        ("middle", "Yesterday &amp; Today", "2025-06-14T10:00:00+00:00"),
    ])


def test_parse_feed_filters_and_sorts(feed_body, now):
    videos = parse_feed(feed_body, "UCtest", "Test Channel", since_days=2, now=now)

    assert [v.video_id for v in videos] == ["newest", "middle"]
    assert videos[0].url == "https://www.youtube.com/watch?v=newest"
    assert videos[0].channel_id == "UCtest"
    assert videos[0].channel_name == "Test Channel"
    assert videos[1].title == "Yesterday & Today"


def test_parse_feed_wide_window(feed_body, now):
    videos = parse_feed(feed_body, "UCtest", "Test Channel", since_days=90, now=now)
    assert [v.video_id for v in videos] == ["newest", "middle", "older"]


def test_decode_title_entities():
    assert decode_title("Q&amp;A: &quot;What&#39;s next&quot;") == "Q&A: \"What's next\""
    # Decoded once only
    assert decode_title("&amp;quot;") == "&quot;"


def test_empty_feed_returns_no_videos(feed_builder, now):
    assert parse_feed(feed_builder([]), "UCtest", "Test", since_days=2, now=now) == []
    assert parse_feed("", "UCtest", "Test", since_days=2, now=now) == []


def test_unparsable_feed_raises(now):
    with pytest.raises(FeedError):
        parse_feed("<html><body>Consent required</body></html>", "UCtest", "Test", since_days=2, now=now)
    with pytest.raises(FeedError):
        parse_feed("<feed><entry><title>no id</title></entry></feed>", "UCtest", "Test", since_days=2, now=now)


def test_list_recent_videos_uses_feed_url(feed_body, now):
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, text=feed_body)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = FeedFetcher(client=client)
            return await fetcher.list_recent_videos("UCtest", 2, channel_name="Test Channel", now=now)

    videos = asyncio.run(run())

    assert requested == ["https://www.youtube.com/feeds/videos.xml?channel_id=UCtest"]
    assert len(videos) == 2


def test_list_recent_videos_http_error():
    def handler(request):
        return httpx.Response(404, text="not found")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await FeedFetcher(client=client).list_recent_videos("UCmissing", 2)

    with pytest.raises(FeedError):
        asyncio.run(run())
