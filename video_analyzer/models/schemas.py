"""
Data models for the YouTube video analyzer application.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, Union, Literal
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class RequestKind(str, Enum):
    """Kinds of AI requests the gateway understands."""
    SUMMARY = "summary"
    QUESTION = "question"


class Valid(BaseModel):
    """Input accepted by the validator; holds the trimmed text."""
    model_config = ConfigDict(frozen=True)

    is_valid: Literal[True] = True
    text: str


class Invalid(BaseModel):
    """Input rejected by the validator."""
    model_config = ConfigDict(frozen=True)

    is_valid: Literal[False] = False
    reason: str
    message: str


ValidationResult = Union[Valid, Invalid]


class PromptRequest(BaseModel):
    """Normalized request data the prompt builder works from."""
    kind: RequestKind
    description: str = ""
    title: Optional[str] = None
    custom_prompt: Optional[str] = None


class AIResponseEnvelope(BaseModel):
    """Result of a successful upstream generation call."""
    model_config = ConfigDict(frozen=True)

    text: str
    model: str
    timestamp_iso: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    input_length: int
    output_length: int

    def metadata(self, kind: RequestKind) -> Dict[str, Any]:
        """Metadata block returned to callers next to the generated text."""
        return {
            "model": self.model,
            "timestamp": self.timestamp_iso,
            "inputLength": self.input_length,
            "outputLength": self.output_length,
            "requestType": kind.value,
        }


@dataclass
class GatewayResponse:
    """Transport independent result of one gateway call."""
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
