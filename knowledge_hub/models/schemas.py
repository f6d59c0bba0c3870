"""
Data models for the knowledge hub.
"""
from datetime import datetime
from typing import Optional, List, Union
from pydantic import AliasChoices, BaseModel, Field


class ChannelConfig(BaseModel):
    """A channel to poll, as listed in the channel directory."""
    id: str
    name: str
    handle: Optional[str] = None
    resolved_channel_id: Optional[str] = None
    enabled: bool = True

    model_config = {"frozen": True}


class ResolvedChannel(BaseModel):
    """Stable channel identity discovered from a handle."""
    channel_id: str
    channel_name: str

    model_config = {"frozen": True}


class VideoMetadata(BaseModel):
    """A video entry taken from a channel feed."""
    video_id: str
    title: str
    channel_id: str
    channel_name: str
    published_at: datetime
    url: str

    model_config = {"frozen": True}


class TranscriptSegment(BaseModel):
    """One caption cue."""
    text: str
    offset_ms: int
    duration_ms: int

    model_config = {"frozen": True}


class VideoWithTranscript(VideoMetadata):
    """Video metadata together with its fetched transcript."""
    transcript: str
    segments: List[TranscriptSegment] = Field(default_factory=list)

    @classmethod
    def from_segments(cls, video: VideoMetadata, segments: List[TranscriptSegment]) -> "VideoWithTranscript":
        return cls(
            **video.model_dump(),
            transcript=" ".join(segment.text for segment in segments),
            segments=segments,
        )


class StoredTranscript(BaseModel):
    """Front matter (and optionally body) of a transcript file on disk."""
    file: str
    video_id: Optional[str] = None
    title: str = "Unknown"
    channel: str = "Unknown"
    published_at: datetime
    url: str = ""
    transcript: Optional[str] = None


class BatchResult(BaseModel):
    """Outcome counts of a batch save."""
    successful: int = 0
    failed: int = 0
    skipped: int = 0


class ChannelResult(BatchResult):
    """Report entry for a channel that was listed successfully."""
    channel: str
    videos_found: int = 0


class ChannelFailure(BaseModel):
    """Report entry for a channel that could not be resolved or listed."""
    channel: str
    error: str


class IngestionTotals(BaseModel):
    videos: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0


class IngestionReport(BaseModel):
    """Aggregate result of one ingestion run."""
    per_channel: List[Union[ChannelResult, ChannelFailure]] = Field(default_factory=list)
    totals: IngestionTotals = Field(default_factory=IngestionTotals)

    def add_result(self, result: ChannelResult) -> None:
        self.per_channel.append(result)
        self.totals.videos += result.videos_found
        self.totals.successful += result.successful
        self.totals.failed += result.failed
        self.totals.skipped += result.skipped

    def add_failure(self, channel: str, error: str) -> None:
        self.per_channel.append(ChannelFailure(channel=channel, error=error))


class TranscriptAnalysis(BaseModel):
    """Structured analysis of a single transcript."""
    summary: str
    key_topics: List[str] = Field(default_factory=list, validation_alias=AliasChoices("key_topics", "keyTopics"))
    main_insights: List[str] = Field(default_factory=list, validation_alias=AliasChoices("main_insights", "mainInsights"))
    industry_trends: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("industry_trends", "industryTrends")
    )


class TrendItem(BaseModel):
    """A transcript fed into a trend report."""
    title: str
    transcript: str
    date: datetime


class SummaryConfig(BaseModel):
    """Configuration for summarization operations."""
    model: str
    provider: str = "groq"
    temperature: float = 0.0
    max_tokens: int = 2048
    chunk_size: int = 12000
    chunk_overlap: int = 400
