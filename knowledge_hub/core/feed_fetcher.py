"""
Feed Fetcher
============

Reads a channel's public Atom feed and returns the videos published inside a
trailing time window, newest first.
"""

import re
from datetime import datetime, timedelta
from typing import List, Optional

import httpx

from knowledge_hub.config import config
from knowledge_hub.models.schemas import VideoMetadata
from knowledge_hub.utils.error_handling import FeedError
from knowledge_hub.utils.helpers import parse_timestamp, utc_now
from knowledge_hub.utils.logger import logging

FEED_URL = "https://www.youtube.com/feeds/videos.xml?channel_id={channel_id}"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

RE_ENTRY = re.compile(r"<entry>(.*?)</entry>", re.DOTALL)
RE_VIDEO_ID = re.compile(r"<yt:videoId>(.*?)</yt:videoId>", re.DOTALL)
RE_TITLE = re.compile(r"<title>(.*?)</title>", re.DOTALL)
RE_PUBLISHED = re.compile(r"<published>(.*?)</published>", re.DOTALL)

# &amp; last so an escaped entity is decoded once only
TITLE_ENTITIES = (
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def decode_title(title: str) -> str:
    for entity, char in TITLE_ENTITIES:
        title = title.replace(entity, char)
    return title.strip()


def parse_feed(
    body: str,
    channel_id: str,
    channel_name: str,
    since_days: float,
    now: Optional[datetime] = None,
) -> List[VideoMetadata]:
    """
    Extract the videos of a feed body published within ``since_days``.

    Args:
        body: Raw feed XML
        channel_id: Channel the feed belongs to
        channel_name: Display name recorded on each video
        since_days: Size of the trailing window in days
        now: Reference time (defaults to the current UTC time)

    Returns:
        Videos sorted by publish time, newest first; equal times keep feed order

    Raises:
        FeedError if the body is not empty but no entry can be parsed from it
    """
    if not body.strip():
        return []

    entries = []
    for raw_entry in RE_ENTRY.findall(body):
        video_id = RE_VIDEO_ID.search(raw_entry)
        title = RE_TITLE.search(raw_entry)
        published = RE_PUBLISHED.search(raw_entry)
        if not (video_id and title and published):
            continue
        published_at = parse_timestamp(published.group(1))
        if published_at is None:
            continue
        entries.append((video_id.group(1).strip(), decode_title(title.group(1)), published_at))

    if not entries and ("<entry" in body or "<feed" not in body):
        raise FeedError(f"Could not parse any entries from the feed of channel {channel_id}")

    cutoff = (now or utc_now()) - timedelta(days=since_days)
    videos = [
        VideoMetadata(
            video_id=video_id,
            title=title,
            channel_id=channel_id,
            channel_name=channel_name,
            published_at=published_at,
            url=WATCH_URL.format(video_id=video_id),
        )
        for video_id, title, published_at in entries
        if published_at >= cutoff
    ]
    return sorted(videos, key=lambda v: v.published_at, reverse=True)


class FeedFetcher:
    """Fetch and parse channel feeds."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = None):
        self.client = client
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    async def fetch_feed(self, channel_id: str) -> str:
        """Download the raw feed body for a channel."""
        url = FEED_URL.format(channel_id=channel_id)
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FeedError(f"Could not fetch feed for channel {channel_id}: {e}") from e
        return response.text

    async def list_recent_videos(
        self,
        channel_id: str,
        since_days: float,
        channel_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[VideoMetadata]:
        """
        List a channel's videos published in the last ``since_days`` days.

        Raises:
            FeedError on network failure or an unparsable feed
        """
        body = await self.fetch_feed(channel_id)
        videos = parse_feed(body, channel_id, channel_name or channel_id, since_days, now=now)
        logging.info(f"Feed for {channel_id} has {len(videos)} videos from the last {since_days} days")
        return videos
