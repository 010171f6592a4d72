"""
AI request gateway.

Validates, rate limits and forwards summary and question requests to the
generative-language provider, then shapes the provider output into the JSON
envelope the web client expects.
"""

import asyncio
import os
import traceback
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from video_analyzer.config import config
from video_analyzer.core.gemini_client import GeminiClient
from video_analyzer.core.prompts import build_prompt
from video_analyzer.core.rate_limiter import RateLimiter
from video_analyzer.core.validator import validate_input
from video_analyzer.models.schemas import (
    AIResponseEnvelope,
    GatewayResponse,
    Invalid,
    PromptRequest,
    RequestKind,
)
from video_analyzer.utils.error_handling import (
    UpstreamError,
    UpstreamTimeoutError,
    log_diagnostic_info,
    log_error,
)
from video_analyzer.utils.logger import logging

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

UPSTREAM_ERROR_MESSAGES = {
    400: "The AI service rejected the request",
    401: "AI service authentication failed",
    403: "AI service access denied. Check the API key permissions",
    429: "AI service quota exceeded. Please try again later",
}

ANALYSIS_TYPES = {
    "summary": RequestKind.SUMMARY,
    "chat": RequestKind.QUESTION,
    "question": RequestKind.QUESTION,
}


def get_client_id(headers: Mapping[str, str], remote_addr: Optional[str] = None) -> str:
    """First X-Forwarded-For address, else the socket address, else "unknown"."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return remote_addr or "unknown"


def detect_request_kind(body: Dict[str, Any]) -> Tuple[RequestKind, str]:
    """
    Decide between a summary and a question request.

    An explicit `analysisType` of summary/chat/question wins. Without one (or
    with an unrecognised value) a non-empty `customPrompt` makes the request
    a question.

    Returns:
        The request kind and the response field name the caller reads
    """
    analysis_type = body.get("analysisType")
    custom_prompt = body.get("customPrompt")

    kind = ANALYSIS_TYPES.get(analysis_type) if isinstance(analysis_type, str) else None
    if kind is None:
        kind = RequestKind.QUESTION if custom_prompt else RequestKind.SUMMARY

    if analysis_type is None:
        field = "response"
    elif kind == RequestKind.SUMMARY and analysis_type == "summary":
        field = "summary"
    else:
        field = "analysis"

    return kind, field


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class AIGateway:
    """Single entry point for AI requests coming from the web client."""

    def __init__(
        self,
        rate_limiter: Optional[RateLimiter] = None,
        provider: Optional[GeminiClient] = None,
        api_key: Optional[str] = None,
        timeout_ms: int = config.REQUEST_TIMEOUT_MS,
        max_length: int = config.MAX_DESCRIPTION_LENGTH,
    ):
        """
        Initialize the gateway.

        Args:
            rate_limiter: Limiter owning the per-client windows
            provider: Upstream client with an async `generate(prompt, api_key)` method
            api_key: Gemini API key; read from GEMINI_API_KEY on every request when omitted
            timeout_ms: Deadline for the upstream call
            max_length: Maximum characters of validated input
        """
        self.rate_limiter = rate_limiter or RateLimiter()
        self.provider = provider or GeminiClient()
        self.api_key = api_key
        self.timeout_ms = timeout_ms
        self.max_length = max_length

    def _respond(self, status_code: int, body: Optional[Dict[str, Any]] = None,
                 headers: Optional[Dict[str, str]] = None) -> GatewayResponse:
        return GatewayResponse(status_code=status_code, body=body, headers={**CORS_HEADERS, **(headers or {})})

    def _resolve_api_key(self) -> Optional[str]:
        return self.api_key or os.getenv("GEMINI_API_KEY")

    async def handle(
        self,
        method: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        remote_addr: Optional[str] = None,
    ) -> GatewayResponse:
        """
        Handle one HTTP request.

        Args:
            method: HTTP method
            headers: Request headers
            body: Parsed JSON body
            remote_addr: Socket address of the caller

        Returns:
            Status code, JSON body and headers to send back
        """
        method = (method or "").upper()
        headers = {key.lower(): value for key, value in (headers or {}).items()}

        if method == "OPTIONS":
            return self._respond(200)

        if method != "POST":
            return self._respond(405, {"error": "Method Not Allowed. Use POST"}, {"Allow": "POST, OPTIONS"})

        client_id = get_client_id(headers, remote_addr)
        if not self.rate_limiter.check_and_record(client_id):
            retry_after = config.RETRY_AFTER_SECONDS
            return self._respond(
                429,
                {"error": "Rate limit exceeded", "retryAfter": retry_after},
                {"Retry-After": str(retry_after)},
            )

        api_key = self._resolve_api_key()
        if not api_key:
            logging.error("GEMINI_API_KEY is not configured; refusing AI request")
            return self._respond(500, {"error": "Server configuration error", "details": "GEMINI_API_KEY is not set"})

        try:
            shaped = self._shape_request(body if isinstance(body, dict) else {})
            if isinstance(shaped, GatewayResponse):
                return shaped
            prompt_request, field, input_length = shaped
            log_diagnostic_info({"clientId": client_id, "kind": prompt_request.kind.value, "inputLength": input_length})

            envelope = await self._generate(prompt_request, input_length, api_key)
            if envelope is None:
                return self._respond(500, {"error": "AI response error"})

            return self._respond(200, {field: envelope.text, "metadata": envelope.metadata(prompt_request.kind)})

        except (asyncio.TimeoutError, UpstreamTimeoutError) as e:
            log_error("Gemini Timeout", e, timeoutMs=self.timeout_ms, clientId=client_id)
            return self._respond(500, {
                "error": "Request timed out",
                "details": f"The AI service did not respond within {self.timeout_ms // 1000} seconds",
            })
        except UpstreamError as e:
            log_error("Gemini Error", e.details, status=e.status_code, clientId=client_id)
            message = UPSTREAM_ERROR_MESSAGES.get(e.status_code, "AI service error")
            return self._respond(500, {"error": message, "details": {"upstreamStatus": e.status_code}})
        except Exception as e:
            log_error("Server Error", e, clientId=client_id, traceback=traceback.format_exc())
            return self._respond(500, {"error": "Internal error"})

    def _shape_request(self, body: Dict[str, Any]) -> Union[GatewayResponse, Tuple[PromptRequest, str, int]]:
        """Pick the request kind and validate its text; returns a 400 response on bad input."""
        kind, field = detect_request_kind(body)

        if kind == RequestKind.QUESTION:
            question = validate_input(body.get("customPrompt"), self.max_length)
            if isinstance(question, Invalid):
                return self._invalid(question)

            title = _as_text(body.get("title"))
            description = _as_text(body.get("description"))
            result = validate_input(
                f"Title: {title}\nTranscript: {description}\nUser Question: {question.text}",
                self.max_length,
            )
            if isinstance(result, Invalid):
                return self._invalid(result)

            request = PromptRequest(kind=kind, title=title, description=description.strip(),
                                    custom_prompt=question.text)
        else:
            result = validate_input(body.get("description"), self.max_length)
            if isinstance(result, Invalid):
                return self._invalid(result)

            request = PromptRequest(kind=kind, title=_as_text(body.get("title")) or None, description=result.text)

        return request, field, len(result.text)

    def _invalid(self, result: Invalid) -> GatewayResponse:
        return self._respond(400, {"error": result.message, "reason": result.reason})

    async def _generate(self, request: PromptRequest, input_length: int, api_key: str) -> Optional[AIResponseEnvelope]:
        prompt = build_prompt(request.kind, request)
        text = await asyncio.wait_for(self.provider.generate(prompt, api_key), timeout=self.timeout_ms / 1000)

        if not text or not text.strip():
            logging.warning("Gemini returned no candidate text")
            return None

        text = text.strip()
        return AIResponseEnvelope(
            text=text,
            model=self.provider.model,
            input_length=input_length,
            output_length=len(text),
        )
