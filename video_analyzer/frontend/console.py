"""
Console frontend for the YouTube Video Analyzer.

Talks to a running API server through ApiClient and keeps all UI state in
a ClientState driven by the pure transitions in chat_state.
"""

import argparse
from typing import Callable, Optional

import requests
from dotenv import load_dotenv

from video_analyzer.config import config
from video_analyzer.frontend import chat_state
from video_analyzer.frontend.api_client import ApiClient, ApiError
from video_analyzer.frontend.chat_state import ClientState
from video_analyzer.utils.helpers import (
    build_video_description,
    calculate_engagement_rate,
    extract_video_id,
    format_duration,
    format_number,
    get_popularity_level,
)


class ConsoleSession:
    """One analysis session: a loaded video plus its chat."""

    def __init__(self, client: ApiClient, output: Callable[[str], None] = print):
        self.client = client
        self.output = output
        self.state: ClientState = chat_state.initial_state()

    def analyze(self, url: str) -> bool:
        """
        Load a video, its transcript and an AI summary.

        Args:
            url: YouTube URL

        Returns:
            True if the video metadata was loaded
        """
        video_id = extract_video_id(url)
        if not video_id:
            self.output("Please enter a valid YouTube URL")
            return False

        self.state = chat_state.start_analysis(self.state)

        try:
            video_data = self.client.get_video_details(video_id)
        except (ApiError, requests.RequestException) as e:
            self.output(f"Error: {e}")
            return False

        self.state = chat_state.video_loaded(self.state, video_data)
        self._print_overview()

        self.state = chat_state.transcript_loaded(self.state, self.client.get_transcript(video_id))

        video = video_data["video"]
        try:
            summary = self.client.generate_summary(
                video_id, video["snippet"]["title"], build_video_description(video)
            )
        except (ApiError, requests.RequestException) as e:
            self.output(f"AI summary unavailable. {e}")
        else:
            self.state = chat_state.summary_loaded(self.state, summary)
            self.output(f"\nAI Video Summary\n{summary}\n")

        return True

    def open_chat(self):
        self.state = chat_state.open_chat(self.state)
        if self.state.chat_history:
            self.output(self.state.chat_history[-1].text)

    def ask(self, question: str) -> Optional[str]:
        """Send a chat question and return the AI reply (or error message)."""
        if not chat_state.can_send(self.state, question):
            return None

        self.state = chat_state.submit_message(self.state, question)

        video = self.state.current_video["video"]
        context = build_video_description(video)
        if self.state.video_transcript:
            context += f"\nTranscript: {self.state.video_transcript}"

        try:
            answer = self.client.ask_question(video["id"], video["snippet"]["title"], context, question)
        except (ApiError, requests.RequestException) as e:
            self.state = chat_state.receive_error(self.state, str(e))
        else:
            self.state = chat_state.receive_reply(self.state, answer)

        reply = self.state.chat_history[-1].text
        self.output(reply)
        return reply

    def _print_overview(self):
        video = self.state.current_video["video"]
        snippet = video.get("snippet") or {}
        statistics = video.get("statistics") or {}

        self.output("=" * 80)
        self.output(f"{snippet.get('title')} by {snippet.get('channelTitle')}")
        self.output("=" * 80)
        self.output(
            f"Views: {format_number(statistics.get('viewCount'))} | "
            f"Likes: {format_number(statistics.get('likeCount'))} | "
            f"Comments: {format_number(statistics.get('commentCount'))} | "
            f"Duration: {format_duration((video.get('contentDetails') or {}).get('duration'))}"
        )
        self.output(
            f"Popularity: {get_popularity_level(statistics.get('viewCount'))['level']} | "
            f"Engagement: {calculate_engagement_rate(statistics.get('viewCount'), statistics.get('likeCount'), statistics.get('commentCount'))}"
        )


def main():
    """Run an interactive console session against the API server."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="YouTube Video Analyzer console")
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument("--api-url", default=config.PUBLIC_URL, help="URL of the API server")
    args = parser.parse_args()

    session = ConsoleSession(ApiClient(args.api_url))
    if not session.analyze(args.url):
        return

    session.open_chat()
    print("Ask questions about the video (empty line to quit).")
    while True:
        try:
            question = input("> ")
        except (EOFError, KeyboardInterrupt):
            break
        if not question.strip():
            break
        session.ask(question)

    session.state = chat_state.close_chat(session.state)


if __name__ == "__main__":
    main()
