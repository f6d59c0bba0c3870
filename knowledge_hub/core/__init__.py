"""
Core functionality for the knowledge hub.

This package contains modules for resolving channels, reading channel feeds,
fetching caption tracks, persisting transcripts and summarizing them.
"""
