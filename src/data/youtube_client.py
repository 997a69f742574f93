"""
YouTube Review Video Client
===========================

Finds review videos for a product through the YouTube Data API v3 and
fetches their transcripts from the transcript server.

Configuration:
    YOUTUBE_API_KEY (or YOUTUBE_DATA_API_KEY): Data API key (from .env)
    TRANSCRIPT_SERVER_URL: base URL of the transcript server

Transcript server contract:
    GET /api/transcript?videoId=<id>
        200 -> {"transcript": "...", "segments": [{"text": ...}, ...]}
        4xx/5xx -> {"error": "..."}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .config import TranscriptConfig, YouTubeConfig

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


@dataclass
class VideoItem:
    """One search hit from the YouTube Data API."""
    video_id: str
    title: str
    channel_name: str
    description: str = ""
    published_at: Optional[str] = None
    thumbnail_url: Optional[str] = None
    raw_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return WATCH_URL.format(video_id=self.video_id)

    @classmethod
    def from_search_item(cls, item: Dict[str, Any]) -> Optional["VideoItem"]:
        """Parse a search result; None if it carries no videoId."""
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            return None
        snippet = item.get("snippet") or {}
        thumbnails = snippet.get("thumbnails") or {}
        thumb = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url")
        return cls(
            video_id=video_id,
            title=snippet.get("title") or "",
            channel_name=snippet.get("channelTitle") or "",
            description=snippet.get("description") or "",
            published_at=snippet.get("publishedAt"),
            thumbnail_url=thumb,
            raw_data=item,
        )


class YouTubeError(Exception):
    """YouTube Data API error."""
    pass


class YouTubeClient:
    """Thin wrapper over the YouTube Data API search endpoint."""

    def __init__(self, config: Optional[YouTubeConfig] = None):
        self.config = config or YouTubeConfig()
        if not self.config.api_key:
            raise YouTubeError(
                "YouTube API key not configured. Set YOUTUBE_API_KEY in .env"
            )
        self._requests_made = 0

    def search_reviews(self, product_name: str, max_results: Optional[int] = None) -> List[VideoItem]:
        """
        Search review videos for a product.

        Args:
            product_name: Free-text product name
            max_results: Override for YOUTUBE_MAX_RESULTS

        Returns:
            VideoItems in API order (items without a videoId are skipped)

        Raises:
            YouTubeError: On transport failure, non-200 status, or an API error payload
        """
        params = {
            "part": "snippet",
            "q": f"{product_name} review",
            "type": "video",
            "maxResults": max_results or self.config.max_results,
            "key": self.config.api_key,
        }

        try:
            response = requests.get(
                f"{self.config.base_url}/search",
                params=params,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise YouTubeError(f"Failed to fetch YouTube data: {e}")
        self._requests_made += 1

        try:
            data = response.json()
        except ValueError:
            raise YouTubeError(
                f"YouTube API returned non-JSON response: {response.status_code}"
            )

        if data.get("error"):
            message = data["error"].get("message", "unknown error")
            logger.error(f"YouTube API error for '{product_name}': {message}")
            raise YouTubeError(f"YouTube API error: {message}")

        if response.status_code != 200:
            raise YouTubeError(f"YouTube API error: {response.status_code}")

        videos = []
        for item in data.get("items", []):
            video = VideoItem.from_search_item(item)
            if video is not None:
                videos.append(video)

        logger.info(f"Found {len(videos)} YouTube videos for '{product_name}'")
        return videos


class TranscriptClient:
    """
    Client for the transcript server.

    Transcripts are optional: every failure is logged and returns "".
    """

    def __init__(self, config: Optional[TranscriptConfig] = None):
        self.config = config or TranscriptConfig()

    def fetch_transcript(self, video_id: str) -> str:
        """Full transcript text for a video, or "" if unavailable."""
        if not self.config.enabled:
            return ""

        url = f"{self.config.server_url.rstrip('/')}/api/transcript"
        try:
            response = requests.get(
                url,
                params={"videoId": video_id},
                timeout=self.config.request_timeout,
            )
            if response.status_code != 200:
                logger.warning(
                    f"Transcript unavailable for {video_id}: {response.status_code}",
                    extra={"video_id": video_id},
                )
                return ""
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Transcript fetch failed for {video_id}: {e}", extra={"video_id": video_id})
            return ""

        transcript = data.get("transcript")
        if not transcript:
            transcript = " ".join(
                seg.get("text", "") for seg in data.get("segments") or []
            ).strip()
        return transcript or ""
