"""
YouTube Video Analyzer Application.

This application fetches YouTube video metadata and produces AI-generated
summaries and chat answers about the video using the Gemini API.
"""

from video_analyzer.config import config

__version__ = config.APP_VERSION
