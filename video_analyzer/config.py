"""
Configuration settings for the YouTube video analyzer application.
"""

import os
from typing import Dict, Any
from pathlib import Path
from dotenv import load_dotenv

from video_analyzer.utils.logger import logging


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Video Analyzer"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = BASE_DIR / "data"
    ANALYSES_DIR = DATA_DIR / "analyses"

    # API keys
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY")

    # Gemini
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    TEMPERATURE = 0.7
    TOP_K = 40
    TOP_P = 0.95
    MAX_OUTPUT_TOKENS = 500
    REQUEST_TIMEOUT_MS = 30 * 1000
    # Frontend waits past the gateway deadline so it sees the timeout reply
    CLIENT_TIMEOUT_SECONDS = REQUEST_TIMEOUT_MS / 1000 + 5

    # YouTube Data API
    YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
    YOUTUBE_REQUEST_TIMEOUT = 10

    # Gateway limits
    MAX_DESCRIPTION_LENGTH = 10000
    RATE_LIMIT_REQUESTS = 10
    RATE_LIMIT_WINDOW_MS = 60 * 1000
    RETRY_AFTER_SECONDS = 60

    # Chat client
    MAX_CHAT_HISTORY = 50

    # Shared rate limit store for multi-instance deployments
    REDIS_URL = os.getenv("REDIS_URL")

    PUBLIC_URL = os.getenv("PUBLIC_URL", "http://localhost:8000")

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.ANALYSES_DIR.mkdir(parents=True, exist_ok=True)

        # Validate required environment variables
        if not cls.GEMINI_API_KEY:
            logging.warning("GEMINI_API_KEY environment variable not set. AI endpoints will return 500.")
        if not cls.YOUTUBE_API_KEY:
            logging.warning("YOUTUBE_API_KEY environment variable not set. Video lookups will fail.")

    @classmethod
    def get_paths(cls) -> Dict[str, Path]:
        """Get all application paths."""
        return {
            "base_dir": cls.BASE_DIR,
            "data_dir": cls.DATA_DIR,
            "analyses_dir": cls.ANALYSES_DIR,
        }

    @classmethod
    def generation_config(cls) -> Dict[str, Any]:
        """Sampling parameters sent with every Gemini request."""
        return {
            "temperature": cls.TEMPERATURE,
            "top_k": cls.TOP_K,
            "top_p": cls.TOP_P,
            "max_output_tokens": cls.MAX_OUTPUT_TOKENS,
        }


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
