"""
Transcript storage.

The storage directory is the system of record: one markdown file per video,
each starting with a front matter block (title, video_id, channel,
published_at, url). ``INDEX.md`` at the root is a derived listing that can
always be regenerated from the other files.

Dedup is by the ``video_id`` recorded in front matter. The id -> filename
map is built by scanning the directory on first use and kept current on
every save, so a restarted process resumes where the last run stopped.
"""

import os
import re
from datetime import timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from knowledge_hub.config import config
from knowledge_hub.models.schemas import BatchResult, StoredTranscript, VideoWithTranscript
from knowledge_hub.utils.error_handling import PathTraversalError
from knowledge_hub.utils.helpers import parse_timestamp, sanitize_filename, slugify_title, utc_now
from knowledge_hub.utils.logger import logging

MAX_CHANNEL_SLUG_LENGTH = 100

RE_FRONT_MATTER = re.compile(r"\A---\n(.*?)\n---", re.DOTALL)
RE_TRANSCRIPT_BODY = re.compile(r"## Transcript\n\n(.*?)\n\n---\n\n\*Indexed on", re.DOTALL)


def _front_matter_field(front_matter: str, name: str) -> Optional[str]:
    match = re.search(rf"^{name}: (.*)$", front_matter, re.MULTILINE)
    return match.group(1).strip() if match else None


def _single_line(value: str) -> str:
    return " ".join(value.split())


def video_to_markdown(video: VideoWithTranscript) -> str:
    """Render a video and its transcript as a markdown document."""
    title = _single_line(video.title)
    channel = _single_line(video.channel_name)
    published_at = video.published_at.astimezone(timezone.utc)
    return f"""---
title: {title}
video_id: {video.video_id}
channel: {channel}
published_at: {published_at.isoformat()}
url: {video.url}
---

# {title}

**Channel:** {channel}
**Published:** {published_at.date().isoformat()}
**Video:** [Watch on YouTube]({video.url})

## Transcript

{video.transcript}

---

*Indexed on {utc_now().isoformat()}*
"""


def _escape_link_text(text: str) -> str:
    return text.replace("[", "\\[").replace("]", "\\]")


class TranscriptStore:
    """Markdown file store for video transcripts."""

    def __init__(self, root: Optional[Path] = None, index_filename: Optional[str] = None):
        """
        Args:
            root: Storage directory (defaults to config.TRANSCRIPTS_DIR)
            index_filename: Name of the aggregated index file
        """
        self.root = Path(root or config.TRANSCRIPTS_DIR).resolve()
        self.index_filename = index_filename or config.INDEX_FILENAME
        self._ids: Optional[Dict[str, str]] = None

    @property
    def index_path(self) -> Path:
        return self.root / self.index_filename

    def _ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _transcript_files(self) -> List[Path]:
        self._ensure_root()
        return sorted(
            p for p in self.root.glob("*.md")
            if p.is_file() and p.name != self.index_filename
        )

    # ---------- Reading ----------

    def read_entry(self, path: Path, include_body: bool = False) -> Optional[StoredTranscript]:
        """
        Parse the front matter of one transcript file.

        Returns:
            The parsed entry, or None when the file is unreadable or its
            front matter is missing or has no valid published_at
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logging.error(f"Failed to read file {path.name}: {e}")
            return None

        match = RE_FRONT_MATTER.match(content)
        if not match:
            logging.warning(f"Skipping {path.name}: no front matter")
            return None
        front_matter = match.group(1)

        published_at = parse_timestamp(_front_matter_field(front_matter, "published_at") or "")
        if published_at is None:
            logging.warning(f"Skipping {path.name}: missing or invalid published_at")
            return None

        transcript = None
        if include_body:
            body = RE_TRANSCRIPT_BODY.search(content)
            transcript = body.group(1) if body else ""

        return StoredTranscript(
            file=path.name,
            video_id=_front_matter_field(front_matter, "video_id"),
            title=_front_matter_field(front_matter, "title") or "Unknown",
            channel=_front_matter_field(front_matter, "channel") or "Unknown",
            published_at=published_at,
            url=_front_matter_field(front_matter, "url") or "",
            transcript=transcript,
        )

    def list_transcripts(self, include_body: bool = False) -> List[StoredTranscript]:
        """All parsable transcript entries, newest first."""
        entries = []
        for path in self._transcript_files():
            entry = self.read_entry(path, include_body=include_body)
            if entry is not None:
                entries.append(entry)
        # Stable sort keeps directory order for equal timestamps
        return sorted(entries, key=lambda e: e.published_at, reverse=True)

    def get_all_transcripts(self) -> List[StoredTranscript]:
        """All parsable transcript entries including their transcript text."""
        return self.list_transcripts(include_body=True)

    # ---------- Dedup ----------

    def refresh(self) -> Dict[str, str]:
        """Rebuild the video id -> filename map from the directory."""
        ids: Dict[str, str] = {}
        for path in self._transcript_files():
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logging.error(f"Failed to read file {path.name}: {e}")
                continue
            match = RE_FRONT_MATTER.match(content)
            video_id = _front_matter_field(match.group(1), "video_id") if match else None
            if video_id:
                ids[video_id] = path.name
        self._ids = ids
        return ids

    def exists(self, video_id: str) -> bool:
        """True if a transcript for this video id is already stored."""
        if self._ids is None:
            self.refresh()
        return video_id in self._ids

    # ---------- Writing ----------

    def filename_for(self, video: VideoWithTranscript) -> str:
        """``{date}_{channel-slug}_{title-slug}.md`` for a video, well under 255 bytes."""
        date = video.published_at.astimezone(timezone.utc).date().isoformat()
        channel_slug = sanitize_filename(video.channel_name)[:MAX_CHANNEL_SLUG_LENGTH].rstrip("-")
        title_slug = slugify_title(video.title) or sanitize_filename(video.video_id)
        return f"{date}_{channel_slug}_{title_slug}.md"

    def validate_path(self, path: Path) -> Path:
        """
        Resolve a path and make sure it sits directly in the storage root.

        Raises:
            PathTraversalError if the resolved path is outside the root
        """
        resolved = Path(os.path.normpath(path)).resolve()
        if resolved.parent != self.root:
            raise PathTraversalError(f"Invalid file path outside storage root: {path}")
        return resolved

    def path_for(self, video: VideoWithTranscript) -> Path:
        """Validated target path for a new video, avoiding existing files."""
        path = self.validate_path(self.root / self.filename_for(video))
        if path.exists():
            # Same date, channel and title as another video
            path = self.validate_path(
                path.with_name(f"{path.stem}-{sanitize_filename(video.video_id)}.md")
            )
        return path

    def save(self, video: VideoWithTranscript) -> Optional[Path]:
        """
        Write a transcript file unless the video is already stored.

        Returns:
            Path of the new file, or None if the video id was already stored

        Raises:
            PathTraversalError if the filename would escape the storage root
            OSError on write failure
        """
        self._ensure_root()
        if self.exists(video.video_id):
            logging.info(f"Video {video.video_id} already exists, skipping...")
            return None

        path = self.path_for(video)
        # "x" never overwrites an existing file
        with open(path, "x", encoding="utf-8") as f:
            f.write(video_to_markdown(video))

        self._ids[video.video_id] = path.name
        logging.info(f"Saved transcript: {path}")
        return path

    def batch_save(self, videos: Iterable[VideoWithTranscript]) -> BatchResult:
        """Save each video independently and count the outcomes."""
        result = BatchResult()
        for video in videos:
            try:
                if self.exists(video.video_id):
                    result.skipped += 1
                    continue
                self.save(video)
                result.successful += 1
            except (PathTraversalError, OSError) as e:
                logging.error(f"Failed to save transcript for: {video.title} ({e})")
                result.failed += 1
        return result

    # ---------- Index ----------

    def render_index(self, entries: List[StoredTranscript]) -> str:
        """Markdown for the aggregated index; ``entries`` must be newest first."""
        by_channel: Dict[str, List[StoredTranscript]] = {}
        for entry in entries:
            by_channel.setdefault(entry.channel, []).append(entry)

        lines = [
            f"# {config.APP_NAME} - Transcript Index",
            "",
            f"**Total Transcripts:** {len(entries)}",
            f"**Last Updated:** {utc_now().strftime('%Y-%m-%d %H:%M:%S')} UTC",
            "",
            "---",
            "",
            "## All Transcripts",
        ]
        for channel, channel_entries in by_channel.items():
            lines.extend(["", f"### {channel}", ""])
            for entry in channel_entries:
                lines.append(
                    f"- **[{_escape_link_text(entry.title)}](./{entry.file})** - "
                    f"{entry.published_at.date().isoformat()} - [Watch]({entry.url})"
                )
        lines.extend(["", "---", "", "*Auto-generated index file. Do not edit manually.*", ""])
        return "\n".join(lines)

    def rebuild_index(self) -> int:
        """
        Regenerate the index file from the directory contents.

        Returns:
            Number of entries listed in the index
        """
        entries = self.list_transcripts()
        self.refresh()

        temp = self.index_path.with_suffix(".md.tmp")
        temp.write_text(self.render_index(entries), encoding="utf-8")
        os.replace(temp, self.index_path)

        logging.info(f"Updated index file: {self.index_path} ({len(entries)} entries)")
        return len(entries)
