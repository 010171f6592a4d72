"""
FastAPI application for the YouTube Video Analyzer.
"""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from video_analyzer.config import config
from video_analyzer.api.routes import router
from video_analyzer.core.gateway import AIGateway
from video_analyzer.core.rate_limiter import RateLimiter
from video_analyzer.core.youtube_api import YouTubeDataClient
from video_analyzer.utils.logger import logging


def create_app(
    gateway: Optional[AIGateway] = None,
    youtube_client: Optional[YouTubeDataClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        gateway: AI gateway to serve /api/ai (a default one is built from config)
        youtube_client: YouTube Data API client

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title=config.APP_NAME,
        version=config.APP_VERSION,
        description="An API for analyzing YouTube videos with AI summaries and chat",
    )

    app.state.gateway = gateway or AIGateway(rate_limiter=RateLimiter.from_config())
    app.state.youtube_client = youtube_client or YouTubeDataClient()

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Middleware to add processing time and CORS origin headers to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        if "access-control-allow-origin" not in response.headers:
            response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors as {"error": ...} for the web client."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled exceptions."""
        logging.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})

    # Include API router
    app.include_router(router)

    # Root
    @app.get("/")
    async def root():
        """Root endpoint returning basic API information."""
        return {
            "name": config.APP_NAME,
            "version": config.APP_VERSION,
            "description": "YouTube Video Analyzer API",
        }

    return app


app = create_app()
