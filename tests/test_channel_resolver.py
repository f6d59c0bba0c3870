"""
Tests for the channel handle resolver.
"""

import asyncio

import httpx
import pytest

from knowledge_hub.core.channel_resolver import ChannelResolver, extract_channel_identity
from knowledge_hub.utils.error_handling import ResolutionError

CHANNEL_PAGE = '<script>var ytInitialData = {"channelId":"UCabc123","author":"The AI Show"};</script>'


def test_known_id_skips_network():
    def handler(request):
        raise AssertionError(f"unexpected request to {request.url}")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            resolver = ChannelResolver(client=client)
            return await resolver.resolve("@AIDailyBrief", known_id="UCknown", label="AI Daily Brief")

    resolved = asyncio.run(run())

    assert resolved.channel_id == "UCknown"
    assert resolved.channel_name == "AI Daily Brief"


def test_resolve_handle_from_page():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, text=CHANNEL_PAGE)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            resolver = ChannelResolver(client=client)
            first = await resolver.resolve("AIShow")
            second = await resolver.resolve("AIShow")
            return first, second

    first, second = asyncio.run(run())

    assert first.channel_id == "UCabc123"
    assert first.channel_name == "The AI Show"
    assert second == first
    # Second lookup is served from the cache
    assert requested == ["https://www.youtube.com/@AIShow"]


def test_extract_channel_identity_fallback_pattern():
    html = '<link rel="alternate" href="https://www.youtube.com/feeds/videos.xml?channel_id=UCfallback">'
    resolved = extract_channel_identity(html, "@Fallback")
    assert resolved.channel_id == "UCfallback"
    assert resolved.channel_name == "@Fallback"


def test_extract_channel_identity_no_match():
    with pytest.raises(ResolutionError):
        extract_channel_identity("<html>nothing here</html>", "@Nobody")


def test_resolve_http_error():
    def handler(request):
        return httpx.Response(500)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await ChannelResolver(client=client).resolve("@Broken")

    with pytest.raises(ResolutionError):
        asyncio.run(run())
