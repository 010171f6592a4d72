"""
API routes for the YouTube Video Analyzer application.
"""

import os
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Depends, Path, Request, Response
from fastapi.responses import JSONResponse

from video_analyzer.api.schemas import (
    HealthResponse,
    TranscriptResponse,
    VideoDetailsResponse,
    VideoLookupRequest,
)
from video_analyzer.core.gateway import AIGateway
from video_analyzer.core.transcript import get_transcript
from video_analyzer.core.youtube_api import YouTubeDataClient
from video_analyzer.utils.error_handling import ConfigurationError, VideoNotFoundError, YouTubeAPIError
from video_analyzer.utils.logger import logging

router = APIRouter(prefix="/api", tags=["youtube"])


def get_gateway(request: Request) -> AIGateway:
    return request.app.state.gateway


def get_youtube_client(request: Request) -> YouTubeDataClient:
    return request.app.state.youtube_client


@router.get("/health", response_model=HealthResponse)
def health(youtube: YouTubeDataClient = Depends(get_youtube_client)):
    """Report which upstream APIs are configured."""
    return HealthResponse(
        status="ok",
        youtube_api=youtube.configured,
        gemini_api=bool(os.getenv("GEMINI_API_KEY")),
    )


@router.get("/video/{video_id}", response_model=VideoDetailsResponse)
def get_video(
    video_id: str = Path(..., description="YouTube video ID"),
    youtube: YouTubeDataClient = Depends(get_youtube_client),
):
    """Get video and channel metadata by video ID."""
    return fetch_video_details(youtube, video_id)


@router.post("/youtube", response_model=VideoDetailsResponse)
def lookup_video(payload: VideoLookupRequest, youtube: YouTubeDataClient = Depends(get_youtube_client)):
    """Get video and channel metadata for a `{"videoId": ...}` body."""
    if not payload.video_id:
        raise HTTPException(status_code=400, detail="videoId is required")
    return fetch_video_details(youtube, payload.video_id)


@router.get("/transcript/{video_id}", response_model=TranscriptResponse)
def transcript(video_id: str = Path(..., description="YouTube video ID")):
    """Get the (placeholder) transcript for a video."""
    return TranscriptResponse(transcript=get_transcript(video_id))


@router.api_route("/ai", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def ai(request: Request, gateway: AIGateway = Depends(get_gateway)):
    """Summaries and questions answered by the AI gateway."""
    body = None
    if request.method == "POST":
        try:
            body = await request.json()
        except ValueError:
            logging.warning("Ignoring malformed JSON body on /api/ai")

    result = await gateway.handle(
        request.method,
        headers=request.headers,
        body=body,
        remote_addr=request.client.host if request.client else None,
    )

    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers)


# Helper functions
def fetch_video_details(youtube: YouTubeDataClient, video_id: str) -> Dict[str, Any]:
    """Fetch details and translate client errors into HTTP errors."""
    try:
        return youtube.get_video_details(video_id)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except VideoNotFoundError:
        raise HTTPException(status_code=404, detail="Video not found or is private/unavailable")
    except YouTubeAPIError as e:
        logging.error(f"Video fetch error for {video_id}: {e}")
        if e.status_code == 403:
            raise HTTPException(status_code=403, detail="API quota exceeded or invalid key")
        raise HTTPException(status_code=500, detail="Failed to fetch video data")
