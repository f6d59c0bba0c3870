"""
Channel Resolver
================

Resolves a channel handle (``@name``) to its stable channel id by scraping
the public channel page. The page format is not a stable interface, so a
failed lookup raises ResolutionError and callers treat it as a per-channel
problem.
"""

import re
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from knowledge_hub.config import config
from knowledge_hub.models.schemas import ResolvedChannel
from knowledge_hub.utils.error_handling import ResolutionError
from knowledge_hub.utils.logger import logging

CHANNEL_PAGE_URL = "https://www.youtube.com/{handle}"

# Tried in order, first match wins
CHANNEL_ID_PATTERNS = (
    re.compile(r'"channelId":"([^"]+)"'),
    re.compile(r'channel_id=([^"&]+)'),
)
CHANNEL_NAME_PATTERN = re.compile(r'"author":"([^"]+)"')


def extract_channel_identity(html: str, label: str) -> ResolvedChannel:
    """
    Pull the channel id and display name out of channel page markup.

    Args:
        html: Raw page markup
        label: Name to fall back on when the page carries no display name

    Raises:
        ResolutionError if no channel id pattern matches
    """
    for pattern in CHANNEL_ID_PATTERNS:
        match = pattern.search(html)
        if match:
            channel_id = match.group(1)
            break
    else:
        raise ResolutionError(f"Could not find channel ID for handle: {label}")

    name_match = CHANNEL_NAME_PATTERN.search(html)
    return ResolvedChannel(
        channel_id=channel_id,
        channel_name=name_match.group(1) if name_match else label,
    )


class ChannelResolver:
    """Resolve channel handles, caching results for the life of the process."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = None):
        self.client = client
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS
        self._cache: Dict[str, ResolvedChannel] = {}

    async def _fetch_page(self, handle: str) -> str:
        if not handle.startswith("@"):
            handle = f"@{handle}"
        url = CHANNEL_PAGE_URL.format(handle=quote(handle, safe="@"))
        try:
            if self.client is not None:
                response = await self.client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ResolutionError(f"Could not load channel page for {handle}: {e}") from e
        return response.text

    async def resolve(
        self,
        handle_or_id: str,
        known_id: Optional[str] = None,
        label: Optional[str] = None,
    ) -> ResolvedChannel:
        """
        Resolve a handle to a channel id.

        Args:
            handle_or_id: Channel handle such as ``@AIDailyBrief``
            known_id: Already known channel id; skips the network entirely
            label: Display name to use when none is found (defaults to handle_or_id)

        Returns:
            ResolvedChannel with channel id and display name

        Raises:
            ResolutionError if the page cannot be fetched or has no channel id
        """
        label = label or handle_or_id
        if known_id:
            return ResolvedChannel(channel_id=known_id, channel_name=label)

        cached = self._cache.get(handle_or_id)
        if cached is not None:
            return cached

        logging.info(f"Resolving channel id for {handle_or_id}")
        html = await self._fetch_page(handle_or_id)
        resolved = extract_channel_identity(html, label)
        self._cache[handle_or_id] = resolved
        logging.info(f"Resolved {handle_or_id} -> {resolved.channel_id} ({resolved.channel_name})")
        return resolved
