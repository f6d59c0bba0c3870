"""
API routes for the knowledge hub.
"""

import asyncio
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from knowledge_hub.api.auth import require_api_key, require_cron_secret
from knowledge_hub.api.schems import (
    AnalyzeRequest,
    AnalyzeResponse,
    IndexRebuildResponse,
    IngestRequest,
    IngestResponse,
    TranscriptListResponse,
    TrendReportRequest,
    TrendReportResponse,
)
from knowledge_hub.channels import get_enabled_channels
from knowledge_hub.config import config
from knowledge_hub.core.channel_resolver import ChannelResolver
from knowledge_hub.core.pipeline import IngestionPipeline
from knowledge_hub.core.storage import TranscriptStore
from knowledge_hub.core.summarizer import TranscriptSummarizer
from knowledge_hub.models.schemas import ChannelConfig, TrendItem
from knowledge_hub.utils.error_handling import IngestionTimeout
from knowledge_hub.utils.helpers import utc_now
from knowledge_hub.utils.logger import logging

router = APIRouter(prefix="/api", tags=["knowledge-hub"])


# Dependencies

def get_store() -> TranscriptStore:
    return TranscriptStore()


@lru_cache(maxsize=1)
def get_resolver() -> ChannelResolver:
    """Process-wide resolver so handle lookups are cached across runs."""
    return ChannelResolver()


def get_pipeline(
    store: TranscriptStore = Depends(get_store),
    resolver: ChannelResolver = Depends(get_resolver),
) -> IngestionPipeline:
    return IngestionPipeline(store, resolver=resolver)


def get_channels() -> List[ChannelConfig]:
    return get_enabled_channels()


def get_summarizer() -> TranscriptSummarizer:
    return TranscriptSummarizer()


async def run_ingestion(
    pipeline: IngestionPipeline,
    channels: List[ChannelConfig],
    since_days: int,
) -> IngestResponse:
    """Run the pipeline under the configured deadline, then rebuild the index."""
    logging.info(f"Starting transcript fetch for {len(channels)} channels (last {since_days} days)")
    try:
        report = await asyncio.wait_for(
            pipeline.run(channels, since_days),
            timeout=config.INGEST_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        # Files written before the deadline are valid; the next run skips them
        logging.error(f"Ingestion run exceeded {config.INGEST_TIMEOUT_SECONDS}s deadline")
        pipeline.store.rebuild_index()
        raise IngestionTimeout(
            f"Ingestion did not finish within {config.INGEST_TIMEOUT_SECONDS:g} seconds"
        )

    pipeline.store.rebuild_index()
    logging.info("Index file updated")
    return IngestResponse(timestamp=utc_now(), results=report)


@router.get(
    "/cron/fetch-transcripts",
    response_model=IngestResponse,
    dependencies=[Depends(require_cron_secret)],
)
async def scheduled_fetch(
    pipeline: IngestionPipeline = Depends(get_pipeline),
    channels: List[ChannelConfig] = Depends(get_channels),
):
    """Scheduled trigger: ingest the last few days from every enabled channel."""
    return await run_ingestion(pipeline, channels, config.DEFAULT_SINCE_DAYS)


@router.post(
    "/cron/ingest",
    response_model=IngestResponse,
    dependencies=[Depends(require_api_key)],
)
async def adhoc_ingest(
    request: Optional[IngestRequest] = None,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    channels: List[ChannelConfig] = Depends(get_channels),
):
    """Ad-hoc trigger with a caller-chosen window."""
    request = request or IngestRequest()
    return await run_ingestion(pipeline, channels, request.since_days)


@router.post("/analyze", response_model=AnalyzeResponse, dependencies=[Depends(require_api_key)])
async def analyze_transcript(
    request: AnalyzeRequest,
    summarizer: TranscriptSummarizer = Depends(get_summarizer),
):
    """Analyze a single transcript."""
    analysis = await summarizer.analyze(request.transcript, request.title)
    return AnalyzeResponse(analysis=analysis)


@router.post("/trend-report", response_model=TrendReportResponse, dependencies=[Depends(require_api_key)])
async def trend_report(
    request: TrendReportRequest,
    summarizer: TranscriptSummarizer = Depends(get_summarizer),
):
    """Generate a trend report from recent transcripts."""
    items = [TrendItem(title=t.title, transcript=t.transcript, date=t.date) for t in request.transcripts]
    report = await summarizer.trend_report(items)
    return TrendReportResponse(report=report, generated_at=utc_now())


@router.get("/transcripts", response_model=TranscriptListResponse, dependencies=[Depends(require_api_key)])
async def list_transcripts(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    store: TranscriptStore = Depends(get_store),
):
    """List stored transcripts, newest first (metadata only)."""
    entries = store.list_transcripts()
    if limit is not None:
        entries = entries[:limit]
    return TranscriptListResponse(count=len(entries), transcripts=entries)


@router.post("/index/rebuild", response_model=IndexRebuildResponse, dependencies=[Depends(require_api_key)])
async def rebuild_index(store: TranscriptStore = Depends(get_store)):
    """Regenerate the index file from the storage directory."""
    entries = store.rebuild_index()
    return IndexRebuildResponse(entries=entries, index_file=store.index_path.name)
