"""
Configuration for pytest tests.
"""

import asyncio
import os
import pytest

# Settings are read when video_analyzer.config is first imported
os.environ["ENVIRONMENT"] = "development"
os.environ["GEMINI_API_KEY"] = os.environ.get("GEMINI_API_KEY", "test_gemini_key")
os.environ["YOUTUBE_API_KEY"] = os.environ.get("YOUTUBE_API_KEY", "test_youtube_key")
os.environ.pop("REDIS_URL", None)

from video_analyzer.core.gateway import AIGateway  # noqa: E402
from video_analyzer.core.rate_limiter import InMemoryRateLimitStore, RateLimiter  # noqa: E402


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class FakeProvider:
    """Stands in for GeminiClient."""

    model = "test-model"

    def __init__(self, text="Hello", error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate(self, prompt, api_key):
        self.calls.append({"prompt": prompt, "api_key": api_key})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryRateLimitStore()


@pytest.fixture
def rate_limiter(store, clock):
    return RateLimiter(store=store, clock=clock)


@pytest.fixture
def make_provider():
    """Build a FakeProvider with the given behaviour."""
    return FakeProvider


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def gateway(rate_limiter, provider):
    return AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="test_gemini_key")


@pytest.fixture
def video_resource():
    """A video resource shaped like the YouTube Data API response."""
    return {
        "id": "dQw4w9WgXcQ",
        "snippet": {
            "title": "Learn Python in 10 Minutes",
            "channelTitle": "Test Channel",
            "channelId": "UC123",
            "description": "A quick tutorial covering the basics of Python.",
            "publishedAt": "2024-01-01T00:00:00Z",
            "tags": ["python", "programming"],
        },
        "statistics": {"viewCount": "1500000", "likeCount": "30000", "commentCount": "1500"},
        "contentDetails": {"duration": "PT10M5S"},
    }


@pytest.fixture
def channel_resource():
    return {"id": "UC123", "statistics": {"subscriberCount": "250000"}, "snippet": {"title": "Test Channel"}}


@pytest.fixture
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
