"""
Centralized error handling for the application.
"""

import json
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from video_analyzer.config import config
from video_analyzer.utils.logger import logging


class AnalyzerError(Exception):
    """Base class for all application errors."""


class ConfigurationError(AnalyzerError):
    """A required setting (usually an API key) is missing."""


class InputValidationError(AnalyzerError):
    """User input was rejected by the validator."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class RateLimitError(AnalyzerError):
    """The client exceeded its request quota."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: int = config.RETRY_AFTER_SECONDS):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamError(AnalyzerError):
    """The AI provider answered with a non-success status."""

    def __init__(self, status_code: int, details: Any = None):
        super().__init__(f"Upstream request failed with status {status_code}")
        self.status_code = status_code
        self.details = details


class UpstreamTimeoutError(AnalyzerError):
    """The AI provider did not answer before the deadline."""


class YouTubeAPIError(AnalyzerError):
    """The YouTube Data API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VideoNotFoundError(YouTubeAPIError):
    """The requested video does not exist or is private."""

    def __init__(self, video_id: str):
        super().__init__(f"Video not found or is private/unavailable: {video_id}", status_code=404)
        self.video_id = video_id


def log_error(context: str, error: Any, **info: Any) -> Dict[str, Any]:
    """
    Log an error as a single JSON record.

    Args:
        context: Short description of where the error happened
        error: Exception or raw error payload
        **info: Extra diagnostic fields (status codes, client ids, ...)

    Returns:
        The record that was logged
    """
    record = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "context": context,
        "error": str(error) if isinstance(error, Exception) else error,
        **info,
    }
    logging.error(f"API Error: {json.dumps(record, indent=2, default=str)}")
    return record


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    logging.debug(f"Diagnostic info: {json.dumps(context, default=str)}")
