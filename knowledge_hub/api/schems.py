from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from knowledge_hub.config import config
from knowledge_hub.models.schemas import IngestionReport, StoredTranscript, TranscriptAnalysis

MAX_TRANSCRIPT_LENGTH = 100_000
MAX_TITLE_LENGTH = 500
MAX_TRANSCRIPTS_FOR_REPORT = 50


class IngestRequest(BaseModel):
    """Model for an ad-hoc ingestion run."""
    since_days: int = Field(default=config.DEFAULT_SINCE_DAYS, ge=1, le=365)


class IngestResponse(BaseModel):
    success: bool = True
    timestamp: datetime
    results: IngestionReport


class AnalyzeRequest(BaseModel):
    """Model for analyzing a single transcript."""
    transcript: str = Field(min_length=1, max_length=MAX_TRANSCRIPT_LENGTH)
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)


class AnalyzeResponse(BaseModel):
    success: bool = True
    analysis: TranscriptAnalysis


class TrendTranscript(BaseModel):
    title: str = Field(max_length=MAX_TITLE_LENGTH)
    transcript: str = Field(max_length=MAX_TRANSCRIPT_LENGTH)
    date: datetime


class TrendReportRequest(BaseModel):
    """Model for a trend report over several transcripts."""
    transcripts: List[TrendTranscript] = Field(min_length=1, max_length=MAX_TRANSCRIPTS_FOR_REPORT)


class TrendReportResponse(BaseModel):
    success: bool = True
    report: str
    generated_at: datetime


class TranscriptListResponse(BaseModel):
    """Model for listing stored transcripts."""
    success: bool = True
    count: int
    transcripts: List[StoredTranscript]


class IndexRebuildResponse(BaseModel):
    success: bool = True
    entries: int
    index_file: Optional[str] = None
