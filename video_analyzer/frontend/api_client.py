"""
API client for communicating with the YouTube Video Analyzer backend.
"""

import requests
from typing import Dict, Any, Optional
from urllib.parse import urljoin

from video_analyzer.config import config


class ApiError(Exception):
    """Raised when the backend answers with an error status."""

    def __init__(self, message: str, status_code: int, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class ApiClient:
    """Client for interacting with the YouTube Video Analyzer API."""

    def __init__(self, base_url: str = config.PUBLIC_URL, timeout: float = config.CLIENT_TIMEOUT_SECONDS):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            timeout: Seconds to wait for each request
        """
        self.base_url = base_url
        self.api_base = urljoin(base_url, "/api/")
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return urljoin(self.api_base, endpoint)

    def _handle(self, response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(message or "API request failed", response.status_code, data)
        return data

    def health(self) -> Dict[str, Any]:
        """Get backend health and configured upstream APIs."""
        return self._handle(requests.get(self._url("health"), timeout=self.timeout))

    def get_video_details(self, video_id: str) -> Dict[str, Any]:
        """
        Get video and channel metadata.

        Args:
            video_id: YouTube video ID

        Returns:
            Dictionary with "video" and "channel"
        """
        return self._handle(requests.get(self._url(f"video/{video_id}"), timeout=self.timeout))

    def get_transcript(self, video_id: str) -> Optional[str]:
        """Get the transcript for a video, or None if it cannot be fetched."""
        try:
            data = self._handle(requests.get(self._url(f"transcript/{video_id}"), timeout=self.timeout))
        except (ApiError, requests.RequestException):
            return None
        return data.get("transcript")

    def generate_summary(self, video_id: str, title: str, description: str) -> str:
        """
        Request an AI summary for a video.

        Args:
            video_id: YouTube video ID
            title: Video title
            description: Text block describing the video

        Returns:
            Summary text
        """
        data = self._handle(requests.post(
            self._url("ai"),
            json={
                "description": description,
                "analysisType": "summary",
                "title": title,
                "videoId": video_id,
            },
            timeout=self.timeout,
        ))
        return data["summary"]

    def ask_question(self, video_id: str, title: str, description: str, question: str) -> str:
        """
        Ask the AI a question about a video.

        Args:
            video_id: YouTube video ID
            title: Video title
            description: Context the answer should be based on
            question: The user's question

        Returns:
            Answer text
        """
        data = self._handle(requests.post(
            self._url("ai"),
            json={
                "title": title,
                "description": description,
                "videoId": video_id,
                "analysisType": "chat",
                "customPrompt": question,
            },
            timeout=self.timeout,
        ))
        return data["analysis"]
