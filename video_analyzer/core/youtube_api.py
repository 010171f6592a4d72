"""
Client for the YouTube Data API v3.
"""

from typing import Any, Dict, Optional

import requests

from video_analyzer.config import config
from video_analyzer.utils.error_handling import ConfigurationError, VideoNotFoundError, YouTubeAPIError
from video_analyzer.utils.logger import logging


class YouTubeDataClient:
    """Fetches video and channel metadata."""

    def __init__(self, api_key: Optional[str] = None, base_url: str = config.YOUTUBE_API_BASE,
                 timeout: int = config.YOUTUBE_REQUEST_TIMEOUT):
        """
        Initialize the client.

        Args:
            api_key: YouTube Data API key (if None, will try to get from environment)
            base_url: API base URL
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key or config.YOUTUBE_API_KEY
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get(self, resource: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.get(
            f"{self.base_url}/{resource}",
            params={**params, "key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def get_video_details(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch a video and its channel.

        Args:
            video_id: YouTube video ID

        Returns:
            {"video": <video resource>, "channel": <channel resource or None>}

        Raises:
            ConfigurationError: No API key configured
            VideoNotFoundError: The video does not exist or is private
            YouTubeAPIError: Any other API failure (403 means quota exceeded or invalid key)
        """
        if not self.configured:
            raise ConfigurationError("YouTube API key not configured")

        try:
            data = self._get("videos", {"part": "snippet,statistics,contentDetails", "id": video_id})
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 404:
                raise VideoNotFoundError(video_id) from e
            if status == 403:
                raise YouTubeAPIError("API quota exceeded or invalid key", status_code=403) from e
            raise YouTubeAPIError(f"Failed to fetch video data: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise YouTubeAPIError(f"Failed to fetch video data: {e}") from e

        items = data.get("items") or []
        if not items:
            raise VideoNotFoundError(video_id)

        video = items[0]
        channel_id = (video.get("snippet") or {}).get("channelId")
        return {"video": video, "channel": self.get_channel(channel_id) if channel_id else None}

    def get_channel(self, channel_id: str) -> Optional[Dict[str, Any]]:
        """Fetch channel statistics; failures are logged and yield None."""
        try:
            data = self._get("channels", {"part": "statistics,snippet", "id": channel_id})
        except requests.RequestException as e:
            logging.warning(f"Channel data fetch failed for {channel_id}: {e}")
            return None

        items = data.get("items") or []
        return items[0] if items else None
