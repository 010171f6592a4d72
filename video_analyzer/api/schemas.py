from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class VideoLookupRequest(BaseModel):
    """Model for looking up a video by ID."""
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(None, alias="videoId")


class VideoDetailsResponse(BaseModel):
    """Model for video details responses."""
    video: Dict[str, Any]
    channel: Optional[Dict[str, Any]] = None


class TranscriptResponse(BaseModel):
    """Model for transcript responses."""
    transcript: str


class HealthResponse(BaseModel):
    """Model for health check responses."""
    status: str
    youtube_api: bool
    gemini_api: bool
