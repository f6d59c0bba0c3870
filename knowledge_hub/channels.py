"""
Channel directory: the static list of channels the ingestion run polls.
"""

from typing import Iterable, List

from knowledge_hub.models.schemas import ChannelConfig

CHANNELS: List[ChannelConfig] = [
    ChannelConfig(
        id="ai-daily-brief",
        name="AI Daily Brief",
        handle="@AIDailyBrief",
        resolved_channel_id="UCKelCK4ZaO6HeEI1KQjqzWA",
        enabled=True,
    ),
    # Add more channels here, e.g.
    # ChannelConfig(id="another-channel", name="Another AI Channel", handle="@AnotherChannel"),
]


def validate_channels(channels: Iterable[ChannelConfig]) -> List[ChannelConfig]:
    """
    Check that channel ids are unique.

    Raises:
        ValueError if two entries share an id
    """
    seen = set()
    result = []
    for channel in channels:
        if channel.id in seen:
            raise ValueError(f"Duplicate channel id in channel directory: {channel.id}")
        seen.add(channel.id)
        result.append(channel)
    return result


def get_enabled_channels(channels: Iterable[ChannelConfig] = None) -> List[ChannelConfig]:
    """Return the enabled channels, in directory order."""
    return [c for c in validate_channels(CHANNELS if channels is None else channels) if c.enabled]
