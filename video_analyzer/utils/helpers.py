"""
Helper utility functions for the YouTube video analyzer application.
"""

import math
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List


YOUTUBE_ID_PATTERNS = [
    re.compile(r"(?:youtu\.be/)([\w-]{11})"),
    re.compile(r"(?:youtube\.com/watch\?v=)([\w-]{11})"),
    re.compile(r"(?:youtube\.com/embed/)([\w-]{11})"),
    re.compile(r"(?:youtube\.com/v/)([\w-]{11})"),
    re.compile(r"(?:youtube\.com/shorts/)([\w-]{11})"),
]

CONTENT_CATEGORIES = {
    "Tutorial/Educational": ["tutorial", "how to", "guide", "learn", "education"],
    "Gaming": ["game", "gaming", "gameplay", "walkthrough"],
    "Music": ["music", "song", "album", "artist", "concert"],
    "Technology": ["tech", "review", "unboxing", "gadget"],
    "Entertainment": ["funny", "comedy", "entertainment", "reaction"],
    "News": ["news", "breaking", "update", "report"],
    "Sports": ["sport", "football", "basketball", "soccer"],
    "Beauty/Fashion": ["makeup", "beauty", "fashion", "style"],
    "Cooking/Food": ["recipe", "cooking", "food", "kitchen"],
}

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the 11 character video ID from a YouTube URL.

    Supports watch, youtu.be, embed, /v/ and shorts links.

    Args:
        url: YouTube URL

    Returns:
        Video ID or None if the URL is not recognised
    """
    if not url:
        return None

    for pattern in YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)

    return None


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def format_number(num: Any) -> str:
    """Format a count as 1.2K / 3.4M / 5.6B."""
    if not num:
        return "N/A"

    number = _to_int(num)
    if number >= 1_000_000_000:
        return f"{number / 1_000_000_000:.1f}B"
    if number >= 1_000_000:
        return f"{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{number / 1_000:.1f}K"
    return f"{number:,}"


def format_duration(duration: Optional[str]) -> str:
    """
    Convert an ISO 8601 duration (PT4M13S) to a clock string.

    Args:
        duration: ISO 8601 duration as returned by the YouTube API

    Returns:
        "h:mm:ss" when there are hours, "m:ss" otherwise, "N/A" if unparsable
    """
    if not duration:
        return "N/A"

    match = _DURATION_RE.match(duration)
    if not match:
        return "N/A"

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_relative_date(date_string: str, now: Optional[datetime] = None) -> str:
    """Describe a publish date relative to now ("3 days ago", "2 years ago")."""
    date = datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    diff_days = math.ceil(abs((now - date).total_seconds()) / 86400)

    if diff_days == 1:
        return "1 day ago"
    if diff_days < 30:
        return f"{diff_days} days ago"
    if diff_days < 365:
        return f"{diff_days // 30} months ago"
    return f"{diff_days // 365} years ago"


def detect_content_type(title: str, description: str, tags: Optional[List[str]] = None) -> str:
    """Guess a coarse content category from title, description and tags."""
    text = " ".join([title or "", description or "", " ".join(tags or [])]).lower()

    for category, keywords in CONTENT_CATEGORIES.items():
        if any(keyword in text for keyword in keywords):
            return category
    return "General"


def calculate_engagement_rate(views: Any, likes: Any, comments: Any) -> str:
    """(likes + comments) / views as a percentage string."""
    view_count = _to_int(views)
    if view_count == 0:
        return "N/A"

    rate = (_to_int(likes) + _to_int(comments)) / view_count * 100
    return f"{rate:.2f}%"


def get_popularity_level(views: Any) -> Dict[str, str]:
    """Bucket a view count into a popularity level with its display colour."""
    view_count = _to_int(views)
    if view_count > 10_000_000:
        return {"level": "Viral", "color": "#e74c3c"}
    if view_count > 1_000_000:
        return {"level": "Very Popular", "color": "#f39c12"}
    if view_count > 100_000:
        return {"level": "Popular", "color": "#27ae60"}
    if view_count > 10_000:
        return {"level": "Moderate", "color": "#3498db"}
    return {"level": "Growing", "color": "#9b59b6"}


def build_video_description(video: Dict[str, Any]) -> str:
    """
    Compose the text block sent to the AI gateway for a summary request.

    Args:
        video: Video resource as returned by the YouTube Data API

    Returns:
        Title, channel, the first 500 characters of the description and the duration
    """
    snippet = video.get("snippet") or {}
    description = snippet.get("description")
    duration = (video.get("contentDetails") or {}).get("duration")

    return (
        f"Title: {snippet.get('title', '')}\n"
        f"Channel: {snippet.get('channelTitle', '')}\n"
        f"Description: {description[:500] if description else 'No description available'}\n"
        f"Duration: {format_duration(duration)}"
    )


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
