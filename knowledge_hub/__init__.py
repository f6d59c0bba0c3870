"""
AI Knowledge Hub.

Polls a configured set of YouTube channels, stores new video transcripts as
markdown documents with front matter, and offers on-demand summarization and
trend analysis over them.
"""

from knowledge_hub.config import config

__version__ = config.APP_VERSION
