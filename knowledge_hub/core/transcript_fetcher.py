"""
Transcript Fetcher
==================

Download YouTube caption tracks as ordered transcript segments.

The caption library is synchronous, so calls run in a worker thread to keep
the event loop free. A video without a usable caption track (captions
disabled, no track in the preferred languages, restricted video) raises
TranscriptUnavailable, which the pipeline treats as a per-video condition.
"""

import asyncio
from typing import List, Optional, Sequence

from youtube_transcript_api import YouTubeTranscriptApi, CouldNotRetrieveTranscript
from youtube_transcript_api.proxies import GenericProxyConfig

from knowledge_hub.config import config
from knowledge_hub.models.schemas import TranscriptSegment
from knowledge_hub.utils.error_handling import TranscriptUnavailable
from knowledge_hub.utils.logger import logging


def join_segments(segments: Sequence[TranscriptSegment]) -> str:
    """Flat transcript text: segment texts in order, joined by single spaces."""
    return " ".join(segment.text for segment in segments)


class TranscriptFetcher:
    """Fetch caption segments for a video id."""

    def __init__(
        self,
        languages: Optional[Sequence[str]] = None,
        proxy_url: Optional[str] = None,
    ):
        """
        Args:
            languages: Preferred caption languages, in order
            proxy_url: Optional HTTP(S) proxy for caption requests
        """
        self.languages = list(languages or config.TRANSCRIPT_LANGUAGES)
        proxy_url = proxy_url or config.TRANSCRIPT_PROXY_URL
        proxy_config = GenericProxyConfig(http_url=proxy_url, https_url=proxy_url) if proxy_url else None
        self.api = YouTubeTranscriptApi(proxy_config=proxy_config)

    def _fetch(self, video_id: str) -> List[TranscriptSegment]:
        try:
            fetched = self.api.fetch(video_id, languages=self.languages)
        except CouldNotRetrieveTranscript as e:
            raise TranscriptUnavailable(f"No transcript for video {video_id}: {type(e).__name__}") from e

        segments = []
        for snippet in fetched.snippets:
            text = " ".join(snippet.text.split())
            if not text:
                continue
            segments.append(TranscriptSegment(
                text=text,
                offset_ms=int(round(snippet.start * 1000)),
                duration_ms=int(round(snippet.duration * 1000)),
            ))

        if not segments:
            raise TranscriptUnavailable(f"Transcript for video {video_id} is empty")
        return segments

    async def fetch_segments(self, video_id: str) -> List[TranscriptSegment]:
        """
        Fetch the caption segments of a video, ordered by offset.

        Raises:
            TranscriptUnavailable if the video has no retrievable captions
        """
        segments = await asyncio.to_thread(self._fetch, video_id)
        logging.debug(f"Fetched {len(segments)} caption segments for {video_id}")
        return segments

    async def fetch_flat_text(self, video_id: str) -> str:
        """Fetch a video's transcript as one space-joined string."""
        segments = await self.fetch_segments(video_id)
        return join_segments(segments)
