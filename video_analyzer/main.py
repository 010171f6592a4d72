"""
Main entry point for the YouTube Video Analyzer application.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from dotenv import load_dotenv
from typing import Any, Dict, Optional

from video_analyzer.core.gateway import AIGateway
from video_analyzer.core.transcript import get_transcript
from video_analyzer.core.youtube_api import YouTubeDataClient
from video_analyzer.config import config
from video_analyzer.utils.error_handling import AnalyzerError, InputValidationError, RateLimitError
from video_analyzer.utils.helpers import build_video_description, detect_content_type, extract_video_id
from video_analyzer.utils.logger import logging

LOCAL_CLIENT = {"x-forwarded-for": "127.0.0.1"}


def save_analysis(analysis: Dict[str, Any], output_file: Optional[str] = None) -> Path:
    """Save the analysis to a JSON file."""
    if output_file is None:
        output_dir = Path(config.ANALYSES_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / f"{analysis['video_id']}_analysis.json"
    else:
        output_file = Path(output_file)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(analysis, f, indent=2, ensure_ascii=False, default=str)

    logging.info(f"Analysis saved to: {output_file}")
    return output_file


def _ask_gateway(gateway: AIGateway, body: Dict[str, Any], field: str) -> str:
    result = asyncio.run(gateway.handle("POST", headers=LOCAL_CLIENT, body=body))
    if result.status_code == 200:
        return result.body[field]

    message = result.body.get("error", "AI request failed")
    if result.status_code == 400:
        raise InputValidationError(message, result.body.get("reason", "invalid"))
    if result.status_code == 429:
        raise RateLimitError(message, retry_after=result.body.get("retryAfter", config.RETRY_AFTER_SECONDS))
    raise AnalyzerError(message)


def analyze_youtube_video(
    url: str,
    question: Optional[str] = None,
    output_file: Optional[str] = None,
    youtube_client: Optional[YouTubeDataClient] = None,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    """
    Analyze a YouTube video: fetch metadata, summarize, optionally answer a question.

    Args:
        url: YouTube video URL
        question: Optional question to ask about the video
        output_file: Optional file path to save the analysis
        youtube_client: YouTube Data API client
        gateway: AI gateway used for the summary and the question

    Returns:
        Dictionary with the video metadata, summary and optional answer
    """
    video_id = extract_video_id(url)
    if not video_id:
        raise AnalyzerError(f"Not a valid YouTube URL: {url}")

    youtube_client = youtube_client or YouTubeDataClient()
    gateway = gateway or AIGateway()

    logging.info(f"Fetching video details for: {video_id}")
    details = youtube_client.get_video_details(video_id)
    video = details["video"]
    snippet = video.get("snippet") or {}
    description = build_video_description(video)

    logging.info("Generating summary...")
    summary = _ask_gateway(
        gateway,
        {"description": description, "title": snippet.get("title"), "videoId": video_id, "analysisType": "summary"},
        "summary",
    )

    analysis = {
        "video_id": video_id,
        "title": snippet.get("title"),
        "channel": snippet.get("channelTitle"),
        "content_type": detect_content_type(snippet.get("title", ""), snippet.get("description", ""), snippet.get("tags")),
        "summary": summary,
    }

    if question:
        logging.info(f"Asking: {question}")
        context = f"{description}\nTranscript: {get_transcript(video_id)}"
        analysis["question"] = question
        analysis["answer"] = _ask_gateway(
            gateway,
            {"title": snippet.get("title"), "description": context, "videoId": video_id,
             "analysisType": "chat", "customPrompt": question},
            "analysis",
        )

    save_analysis(analysis, output_file)
    return analysis


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="YouTube Video Analyzer")
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument("--question", help="Question to ask about the video")
    parser.add_argument("--output", help="Output file path for the analysis")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    try:
        analysis = analyze_youtube_video(args.url, question=args.question, output_file=args.output)
    except AnalyzerError as e:
        logging.error(f"Analysis failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("\n" + "=" * 80)
    print(f"Summary of '{analysis['title']}' by {analysis['channel']}")
    print("=" * 80)
    print(analysis["summary"])
    if "answer" in analysis:
        print("-" * 80)
        print(f"Q: {analysis['question']}")
        print(analysis["answer"])
    print("=" * 80)


if __name__ == "__main__":
    main()
