"""
Ingestion pipeline: resolve each channel, list its recent videos, fetch
transcripts and persist them.

Channels and videos are processed strictly one at a time with a fixed pause
after every transcript request; the caption endpoint blocks clients that
fetch in parallel or without pauses. Failures below the run level are
logged and folded into the report.
"""

import asyncio
from typing import Iterable, Optional

from knowledge_hub.config import config
from knowledge_hub.core.channel_resolver import ChannelResolver
from knowledge_hub.core.feed_fetcher import FeedFetcher
from knowledge_hub.core.storage import TranscriptStore
from knowledge_hub.core.transcript_fetcher import TranscriptFetcher
from knowledge_hub.models.schemas import (
    ChannelConfig,
    ChannelResult,
    IngestionReport,
    VideoWithTranscript,
)
from knowledge_hub.utils.error_handling import FeedError, ResolutionError, TranscriptUnavailable
from knowledge_hub.utils.logger import logging


class IngestionPipeline:
    """Orchestrates resolver, feed fetcher, transcript fetcher and storage."""

    def __init__(
        self,
        store: TranscriptStore,
        resolver: Optional[ChannelResolver] = None,
        feed_fetcher: Optional[FeedFetcher] = None,
        transcript_fetcher: Optional[TranscriptFetcher] = None,
        request_delay: Optional[float] = None,
    ):
        self.store = store
        self.resolver = resolver or ChannelResolver()
        self.feed_fetcher = feed_fetcher or FeedFetcher()
        self.transcript_fetcher = transcript_fetcher or TranscriptFetcher()
        self.request_delay = config.REQUEST_DELAY_SECONDS if request_delay is None else request_delay

    async def run(self, channels: Iterable[ChannelConfig], since_days: float) -> IngestionReport:
        """
        Ingest recent videos from every enabled channel.

        Args:
            channels: Channel directory entries; disabled ones are ignored
            since_days: Trailing window passed to the feed fetcher

        Returns:
            IngestionReport with one entry per enabled channel
        """
        report = IngestionReport()
        for channel in channels:
            if not channel.enabled:
                continue
            await self._run_channel(channel, since_days, report)

        logging.info(f"Ingestion run completed: {report.totals.model_dump()}")
        return report

    async def _run_channel(self, channel: ChannelConfig, since_days: float, report: IngestionReport) -> None:
        logging.info(f"Processing channel: {channel.name} ({channel.handle})")
        try:
            resolved = await self.resolver.resolve(
                channel.handle or channel.name,
                known_id=channel.resolved_channel_id,
                label=channel.name,
            )
            videos = await self.feed_fetcher.list_recent_videos(
                resolved.channel_id, since_days, channel_name=channel.name
            )
        except (ResolutionError, FeedError) as e:
            logging.error(f"Error processing channel {channel.name}: {e}")
            report.add_failure(channel.name, str(e))
            return
        except Exception as e:
            logging.exception(f"Unexpected error processing channel {channel.name}")
            report.add_failure(channel.name, str(e))
            return

        logging.info(f"Found {len(videos)} videos from {channel.name}")

        batch = []
        already_stored = 0
        for video in videos:
            # Stored on an earlier run; no need to spend a transcript request
            if self.store.exists(video.video_id):
                already_stored += 1
                continue

            try:
                segments = await self.transcript_fetcher.fetch_segments(video.video_id)
                batch.append(VideoWithTranscript.from_segments(video, segments))
                logging.info(f"Fetched transcript for: {video.title}")
            except TranscriptUnavailable as e:
                logging.warning(f"Transcript unavailable for video: {video.title} ({e})")
            except Exception as e:
                logging.error(f"Failed to fetch transcript for video: {video.title} ({e})")

            await asyncio.sleep(self.request_delay)

        result = self.store.batch_save(batch)
        report.add_result(ChannelResult(
            channel=channel.name,
            videos_found=len(videos),
            successful=result.successful,
            failed=result.failed,
            skipped=result.skipped + already_stored,
        ))
