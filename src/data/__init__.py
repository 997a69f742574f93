"""
Reelview Data Module
====================

Configuration and outbound clients for review discovery.

This module provides:
    - YouTubeClient: review video search via the YouTube Data API v3
    - TranscriptClient: transcript retrieval from the transcript server
    - Settings: environment-backed configuration

Quick Start:
    from src.data import YouTubeClient, TranscriptClient

    videos = YouTubeClient().search_reviews("Pixel 9")
    text = TranscriptClient().fetch_transcript(videos[0].video_id)

Configuration:
    Set environment variables or create a .env file.
    See src/data/config.py for all available options.
"""

from .config import get_settings, Settings
from .youtube_client import (
    VideoItem,
    YouTubeClient,
    YouTubeError,
    TranscriptClient,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "get_settings",
    "Settings",
    # Clients
    "VideoItem",
    "YouTubeClient",
    "YouTubeError",
    "TranscriptClient",
]
