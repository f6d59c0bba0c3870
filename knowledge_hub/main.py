"""
Command line entry point for the knowledge hub.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from knowledge_hub.channels import get_enabled_channels
from knowledge_hub.config import config
from knowledge_hub.core.channel_resolver import ChannelResolver
from knowledge_hub.core.pipeline import IngestionPipeline
from knowledge_hub.core.storage import TranscriptStore
from knowledge_hub.core.transcript_fetcher import TranscriptFetcher, join_segments
from knowledge_hub.models.schemas import ChannelFailure, IngestionReport
from knowledge_hub.utils.error_handling import InputValidationError, KnowledgeHubError
from knowledge_hub.utils.helpers import truncate_text
from knowledge_hub.utils.logger import logging

PREVIEW_CHARS = 500


def print_report(report: IngestionReport) -> None:
    """Print the totals and per-channel lines of an ingestion report."""
    totals = report.totals
    print("\nSummary:")
    print(f"   Total videos found: {totals.videos}")
    print(f"   Successfully added: {totals.successful}")
    print(f"   Skipped (existing): {totals.skipped}")
    print(f"   Failed: {totals.failed}")

    print("\nChannel Details:")
    for entry in report.per_channel:
        print(f"   - {entry.channel}:")
        if isinstance(entry, ChannelFailure):
            print(f"     Error: {entry.error}")
        else:
            print(
                f"     Found: {entry.videos_found}, Added: {entry.successful}, "
                f"Skipped: {entry.skipped}, Failed: {entry.failed}"
            )


def ingest(days: int, request_delay: float) -> IngestionReport:
    """Run the pipeline over all enabled channels and rebuild the index."""
    if not 1 <= days <= 365:
        raise InputValidationError(f"--days must be between 1 and 365, got {days}")

    store = TranscriptStore()
    pipeline = IngestionPipeline(store, request_delay=request_delay)
    channels = get_enabled_channels()

    logging.info(f"Ingesting the last {days} days from {len(channels)} channels")
    report = asyncio.run(pipeline.run(channels, days))
    print_report(report)

    entries = store.rebuild_index()
    print(f"\nIndex updated: {store.index_path} ({entries} transcripts)")
    return report


def show_transcript(video_id: str) -> None:
    """Fetch a transcript and print a short preview."""
    print(f"Testing transcript fetch for video: {video_id}")
    print(f"URL: https://www.youtube.com/watch?v={video_id}\n")
    segments = asyncio.run(TranscriptFetcher().fetch_segments(video_id))
    text = join_segments(segments)
    print("Transcript fetched successfully!")
    print(f"Length: {len(text)} characters")
    print(f"Segments: {len(segments)}")
    print("\nPreview:")
    print(truncate_text(text, PREVIEW_CHARS))


def resolve(handle: str) -> None:
    """Resolve a handle and print the channel id."""
    resolved = asyncio.run(ChannelResolver().resolve(handle))
    print(f"Channel:    {resolved.channel_name}")
    print(f"Channel ID: {resolved.channel_id}")


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="AI Knowledge Hub transcript tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest_parser = subparsers.add_parser("ingest", help="Fetch recent transcripts from enabled channels")
    ingest_parser.add_argument("--days", type=int, default=config.DEFAULT_SINCE_DAYS,
                               help="How many days back to look")

    seed_parser = subparsers.add_parser("seed", help="Backfill transcript history")
    seed_parser.add_argument("--days", type=int, default=config.SEED_SINCE_DAYS,
                             help="How many days back to look")

    subparsers.add_parser("rebuild-index", help="Regenerate the index file")

    transcript_parser = subparsers.add_parser("transcript", help="Fetch and preview one transcript")
    transcript_parser.add_argument("video_id", help="YouTube video ID")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a channel handle to its ID")
    resolve_parser.add_argument("handle", help="Channel handle, e.g. @AIDailyBrief")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    try:
        if args.command == "ingest":
            ingest(args.days, config.REQUEST_DELAY_SECONDS)
        elif args.command == "seed":
            ingest(args.days, config.SEED_REQUEST_DELAY_SECONDS)
        elif args.command == "rebuild-index":
            store = TranscriptStore()
            entries = store.rebuild_index()
            print(f"Index updated: {store.index_path} ({entries} transcripts)")
        elif args.command == "transcript":
            show_transcript(args.video_id)
        elif args.command == "resolve":
            resolve(args.handle)
    except KnowledgeHubError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
