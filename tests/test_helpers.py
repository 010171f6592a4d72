"""
Tests for helper utilities.
"""

from datetime import datetime, timezone

import pytest

from video_analyzer.utils.helpers import (
    build_video_description,
    calculate_engagement_rate,
    detect_content_type,
    extract_video_id,
    format_duration,
    format_number,
    format_relative_date,
    get_popularity_level,
    truncate_text,
)


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
    "https://youtu.be/dQw4w9WgXcQ?si=abc",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/v/dQw4w9WgXcQ",
    "https://youtube.com/shorts/dQw4w9WgXcQ",
])
def test_extract_video_id(url):
    assert extract_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize("url", ["", "https://vimeo.com/12345", "not a url", "https://youtu.be/short"])
def test_extract_video_id_rejects_other_urls(url):
    assert extract_video_id(url) is None


@pytest.mark.parametrize("value, expected", [
    (None, "N/A"),
    ("0", "0"),
    ("999", "999"),
    ("1500", "1.5K"),
    ("2500000", "2.5M"),
    ("3100000000", "3.1B"),
    (12345, "12.3K"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("PT4M13S", "4:13"),
    ("PT1H2M3S", "1:02:03"),
    ("PT45S", "0:45"),
    ("PT2H", "2:00:00"),
    (None, "N/A"),
    ("garbage", "N/A"),
])
def test_format_duration(value, expected):
    assert format_duration(value) == expected


def test_format_relative_date():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert format_relative_date("2024-12-31T00:00:00Z", now) == "1 day ago"
    assert format_relative_date("2024-12-22T00:00:00Z", now) == "10 days ago"
    assert format_relative_date("2024-10-01T00:00:00Z", now) == "3 months ago"
    assert format_relative_date("2022-01-01T00:00:00Z", now) == "3 years ago"


def test_detect_content_type():
    assert detect_content_type("Python tutorial for beginners", "") == "Tutorial/Educational"
    assert detect_content_type("Live", "full concert recording") == "Music"
    assert detect_content_type("Vlog", "", ["recipe"]) == "Cooking/Food"
    assert detect_content_type("Hello", "world") == "General"


def test_calculate_engagement_rate():
    assert calculate_engagement_rate("1000", "40", "10") == "5.00%"
    assert calculate_engagement_rate("0", "40", "10") == "N/A"
    assert calculate_engagement_rate(None, None, None) == "N/A"
    assert calculate_engagement_rate("200", None, "1") == "0.50%"


@pytest.mark.parametrize("views, level", [
    ("20000000", "Viral"),
    ("1500000", "Very Popular"),
    ("150000", "Popular"),
    ("15000", "Moderate"),
    ("10", "Growing"),
    (None, "Growing"),
])
def test_get_popularity_level(views, level):
    assert get_popularity_level(views)["level"] == level


def test_build_video_description(video_resource):
    text = build_video_description(video_resource)
    assert text.splitlines() == [
        "Title: Learn Python in 10 Minutes",
        "Channel: Test Channel",
        "Description: A quick tutorial covering the basics of Python.",
        "Duration: 10:05",
    ]


def test_build_video_description_truncates_and_defaults():
    long_video = {"snippet": {"title": "T", "channelTitle": "C", "description": "x" * 600}}
    assert "x" * 500 + "\n" in build_video_description(long_video)

    bare = build_video_description({"snippet": {"title": "T"}})
    assert "Description: No description available" in bare
    assert "Duration: N/A" in bare


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("a" * 20, 10) == "aaaaaaa..."
