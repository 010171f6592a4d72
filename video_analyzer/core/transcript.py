"""
Transcript lookup.

Real caption extraction is not implemented; the text returned here is a
placeholder so the client and the gateway can be exercised end to end.
"""


def get_transcript(video_id: str) -> str:
    """Return the placeholder transcript for a video."""
    return f"Mock transcript for video {video_id}. This would contain actual captions in production."
