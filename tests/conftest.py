"""
Configuration for pytest tests.
"""

import os
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Must be set before the knowledge_hub config is imported
TEST_DATA_DIR = Path("test_data")
os.environ["TRANSCRIPTS_DIR"] = str(TEST_DATA_DIR / "transcripts")
os.environ["LOG_DIR"] = str(TEST_DATA_DIR / "logs")
os.environ["ENVIRONMENT"] = "development"

from knowledge_hub.core.storage import TranscriptStore  # noqa: E402
from knowledge_hub.models.schemas import TranscriptSegment, VideoMetadata, VideoWithTranscript  # noqa: E402

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Remove the test data directory after the session."""
    yield
    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture
def now():
    """Fixed reference time for feed windows."""
    return NOW


@pytest.fixture
def store(tmp_path):
    """A transcript store rooted in a temporary directory."""
    return TranscriptStore(root=tmp_path / "transcripts")


def make_video(video_id="vid001", title="The State of AI Agents", channel_name="AI Daily Brief",
               published_at=None, transcript="Hello and welcome to the show."):
    """Build a VideoWithTranscript for storage tests."""
    published_at = published_at or NOW - timedelta(hours=6)
    video = VideoMetadata(
        video_id=video_id,
        title=title,
        channel_id="UCtest",
        channel_name=channel_name,
        published_at=published_at,
        url=f"https://www.youtube.com/watch?v={video_id}",
    )
    segments = [TranscriptSegment(text=transcript, offset_ms=0, duration_ms=1500)]
    return VideoWithTranscript.from_segments(video, segments)


@pytest.fixture
def video_factory():
    """Return the make_video helper."""
    return make_video


def build_feed(entries):
    """Render an Atom feed body from (video_id, title, published) tuples."""
    rendered = "".join(
        f"""
  <entry>
    <id>yt:video:{video_id}</id>
    <yt:videoId>{video_id}</yt:videoId>
    <yt:channelId>UCtest</yt:channelId>
    <title>{title}</title>
    <link rel="alternate" href="https://www.youtube.com/watch?v={video_id}"/>
    <published>{published}</published>
    <updated>{published}</updated>
  </entry>"""
        for video_id, title, published in entries
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns="http://www.w3.org/2005/Atom">
  <title>Test Channel</title>{rendered}
</feed>
"""


@pytest.fixture
def feed_builder():
    """Return the build_feed helper."""
    return build_feed
