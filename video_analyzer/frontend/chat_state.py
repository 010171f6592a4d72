"""
Client-side chat state.

Every function here is pure: it takes a ClientState (plus event data) and
returns a new ClientState. Rendering code reads the state and never mutates it.
"""

import time
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from video_analyzer.config import config


class ChatMode(str, Enum):
    """Where the chat panel is shown."""
    HIDDEN = "hidden"
    EMBEDDED = "embedded"
    FULLSCREEN = "fullscreen"


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    sender: Sender
    timestamp: float


class ClientState(BaseModel):
    """Everything the chat UI needs to render."""
    model_config = ConfigDict(frozen=True)

    current_video: Optional[Dict[str, Any]] = None
    chat_mode: ChatMode = ChatMode.HIDDEN
    chat_history: Tuple[ChatMessage, ...] = ()
    is_ai_typing: bool = False
    video_transcript: Optional[str] = None
    ai_summary: Optional[str] = None


def _now() -> float:
    return time.time()


def initial_state() -> ClientState:
    return ClientState()


def start_analysis(state: ClientState) -> ClientState:
    """Forget the previous video before a new URL is analyzed."""
    return state.model_copy(update={
        "current_video": None,
        "chat_mode": ChatMode.HIDDEN,
        "chat_history": (),
        "is_ai_typing": False,
        "video_transcript": None,
        "ai_summary": None,
    })


def video_loaded(state: ClientState, video_data: Dict[str, Any]) -> ClientState:
    return state.model_copy(update={"current_video": video_data})


def transcript_loaded(state: ClientState, transcript: Optional[str]) -> ClientState:
    return state.model_copy(update={"video_transcript": transcript})


def summary_loaded(state: ClientState, summary: Optional[str]) -> ClientState:
    return state.model_copy(update={"ai_summary": summary})


def add_message(state: ClientState, text: str, sender: Sender = Sender.USER,
                timestamp: Optional[float] = None,
                max_history: int = config.MAX_CHAT_HISTORY) -> ClientState:
    """Append a message, keeping only the newest `max_history` entries."""
    message = ChatMessage(text=text, sender=sender, timestamp=timestamp if timestamp is not None else _now())
    history = (state.chat_history + (message,))[-max_history:]
    return state.model_copy(update={"chat_history": history})


def welcome_message(video_data: Dict[str, Any]) -> str:
    title = ((video_data.get("video") or {}).get("snippet") or {}).get("title", "this video")
    return (
        f"Hi! I'm your AI video assistant. I've analyzed **\"{title}\"** "
        "and I'm ready to answer any questions you have about this video!"
    )


def open_chat(state: ClientState, timestamp: Optional[float] = None) -> ClientState:
    """hidden -> embedded; greets the user the first time a video's chat is opened."""
    if state.chat_mode != ChatMode.HIDDEN:
        return state

    state = state.model_copy(update={"chat_mode": ChatMode.EMBEDDED})
    if not state.chat_history and state.current_video:
        state = add_message(state, welcome_message(state.current_video), Sender.AI, timestamp)
    return state


def expand_chat(state: ClientState) -> ClientState:
    """embedded -> fullscreen"""
    if state.chat_mode != ChatMode.EMBEDDED:
        return state
    return state.model_copy(update={"chat_mode": ChatMode.FULLSCREEN})


def minimize_chat(state: ClientState) -> ClientState:
    """fullscreen -> embedded"""
    if state.chat_mode != ChatMode.FULLSCREEN:
        return state
    return state.model_copy(update={"chat_mode": ChatMode.EMBEDDED})


def close_chat(state: ClientState) -> ClientState:
    return state.model_copy(update={"chat_mode": ChatMode.HIDDEN})


def chat_controls(mode: ChatMode) -> Dict[str, bool]:
    """Which chat buttons are visible in a given mode."""
    return {
        "toggle": mode == ChatMode.HIDDEN,
        "expand": mode == ChatMode.EMBEDDED,
        "minimize": mode == ChatMode.FULLSCREEN,
    }


def can_send(state: ClientState, text: str) -> bool:
    return bool(text and text.strip()) and not state.is_ai_typing


def submit_message(state: ClientState, text: str, timestamp: Optional[float] = None) -> ClientState:
    """Record the user's message and mark the AI as typing; no-op if sending is not allowed."""
    if not can_send(state, text):
        return state
    state = add_message(state, text.strip(), Sender.USER, timestamp)
    return state.model_copy(update={"is_ai_typing": True})


def receive_reply(state: ClientState, text: str, timestamp: Optional[float] = None) -> ClientState:
    state = state.model_copy(update={"is_ai_typing": False})
    return add_message(state, text, Sender.AI, timestamp)


def receive_error(state: ClientState, error: str, timestamp: Optional[float] = None) -> ClientState:
    return receive_reply(state, f"Sorry, I encountered an error: {error}", timestamp)
