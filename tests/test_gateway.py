"""
Tests for the AI request gateway.
"""

import asyncio
import time
from unittest.mock import MagicMock

import pytest

from video_analyzer.core.gateway import AIGateway, CORS_HEADERS, detect_request_kind, get_client_id
from video_analyzer.models.schemas import RequestKind
from video_analyzer.utils.error_handling import UpstreamError, UpstreamTimeoutError


def call(gateway, method="POST", body=None, headers=None, remote_addr="10.0.0.1"):
    return asyncio.run(gateway.handle(method, headers=headers or {}, body=body, remote_addr=remote_addr))


SUMMARY_BODY = {"description": "A tutorial about Python basics."}
QUESTION_BODY = {
    "title": "Learn Python",
    "description": "A tutorial about Python basics.",
    "analysisType": "chat",
    "customPrompt": "Which language is taught?",
}


# Preflight and method gate

def test_options_returns_cors_headers_without_body(gateway):
    result = call(gateway, method="OPTIONS")
    assert result.status_code == 200
    assert result.body is None
    for header, value in CORS_HEADERS.items():
        assert result.headers[header] == value
    assert result.headers["Access-Control-Max-Age"] == "86400"


def test_options_ignores_rate_limit_and_config(rate_limiter, provider):
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key=None)
    for _ in range(15):
        call(gateway, body=SUMMARY_BODY)

    result = call(gateway, method="OPTIONS")
    assert result.status_code == 200
    assert result.body is None


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_other_methods_are_rejected(gateway, provider, method):
    result = call(gateway, method=method)
    assert result.status_code == 405
    assert "error" in result.body
    assert result.headers["Allow"] == "POST, OPTIONS"
    assert provider.calls == []


# Rate limiting

def test_eleventh_request_is_rate_limited(gateway):
    for _ in range(10):
        assert call(gateway, body=SUMMARY_BODY).status_code == 200

    result = call(gateway, body=SUMMARY_BODY)
    assert result.status_code == 429
    assert result.body == {"error": "Rate limit exceeded", "retryAfter": 60}
    assert result.headers["Retry-After"] == "60"


def test_rate_limit_resets_after_window(gateway, clock):
    for _ in range(10):
        call(gateway, body=SUMMARY_BODY)
    assert call(gateway, body=SUMMARY_BODY).status_code == 429

    clock.advance(60_000)
    assert call(gateway, body=SUMMARY_BODY).status_code == 200


def test_rate_limit_key_comes_from_forwarded_for(provider):
    limiter = MagicMock()
    limiter.check_and_record.return_value = True
    gateway = AIGateway(rate_limiter=limiter, provider=provider, api_key="key")

    call(gateway, body=SUMMARY_BODY, headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.2"})
    limiter.check_and_record.assert_called_once_with("203.0.113.7")


def test_client_id_fallbacks():
    assert get_client_id({}, "192.168.1.5") == "192.168.1.5"
    assert get_client_id({}, None) == "unknown"
    assert get_client_id({"x-forwarded-for": " 1.1.1.1 ,2.2.2.2"}, "9.9.9.9") == "1.1.1.1"


# Configuration

def test_missing_api_key_fails_fast(rate_limiter, provider, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider)

    result = call(gateway, body=SUMMARY_BODY)
    assert result.status_code == 500
    assert result.body["error"] == "Server configuration error"
    assert provider.calls == []


def test_api_key_read_from_environment(rate_limiter, provider, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider)

    assert call(gateway, body=SUMMARY_BODY).status_code == 200
    assert provider.calls[0]["api_key"] == "env-key"


# Validation

@pytest.mark.parametrize("body, reason", [
    ({}, "required"),
    ({"description": ""}, "empty"),
    ({"description": "   "}, "empty"),
    ({"description": 42}, "wrong type"),
    ({"description": "x" * 10001}, "too long"),
    ({"analysisType": "chat", "title": "T"}, "required"),
    ({"analysisType": "chat", "customPrompt": "   "}, "empty"),
    ({"customPrompt": "Why?", "description": "x" * 10000}, "too long"),
])
def test_invalid_input_returns_400(gateway, provider, body, reason):
    result = call(gateway, body=body)
    assert result.status_code == 400
    assert result.body["reason"] == reason
    assert result.body["error"]
    assert provider.calls == []


def test_non_object_body_is_treated_as_empty(gateway):
    result = call(gateway, body=["not", "an", "object"])
    assert result.status_code == 400
    assert result.body["reason"] == "required"


# Request kinds and response shaping

def test_summary_response_is_trimmed(gateway, provider):
    provider.text = "  Hello  \n"
    result = call(gateway, body={"description": "  Some video  "})

    assert result.status_code == 200
    assert result.body["response"] == "Hello"
    metadata = result.body["metadata"]
    assert metadata["model"] == "test-model"
    assert metadata["inputLength"] == len("Some video")
    assert metadata["outputLength"] == len("Hello")
    assert metadata["requestType"] == "summary"
    assert metadata["timestamp"]
    assert "Some video" in provider.calls[0]["prompt"]


def test_summary_analysis_type_uses_summary_field(gateway, provider):
    result = call(gateway, body={**SUMMARY_BODY, "analysisType": "summary", "customPrompt": ""})
    assert result.status_code == 200
    assert result.body["summary"] == "Hello"
    assert "under 200 words" in provider.calls[0]["prompt"]


def test_chat_request_uses_analysis_field(gateway, provider):
    result = call(gateway, body=QUESTION_BODY)
    assert result.status_code == 200
    assert result.body["analysis"] == "Hello"
    assert result.body["metadata"]["requestType"] == "question"
    prompt = provider.calls[0]["prompt"]
    assert "USER QUESTION: Which language is taught?" in prompt
    assert "VIDEO TITLE: Learn Python" in prompt


def test_custom_prompt_without_analysis_type_is_a_question(gateway, provider):
    result = call(gateway, body={"title": "Learn Python", "customPrompt": "Is it long?"})
    assert result.status_code == 200
    assert result.body["response"] == "Hello"
    assert "USER QUESTION: Is it long?" in provider.calls[0]["prompt"]


@pytest.mark.parametrize("body, kind, field", [
    ({"description": "d"}, RequestKind.SUMMARY, "response"),
    ({"customPrompt": "q"}, RequestKind.QUESTION, "response"),
    ({"customPrompt": ""}, RequestKind.SUMMARY, "response"),
    ({"analysisType": "summary", "customPrompt": "q"}, RequestKind.SUMMARY, "summary"),
    ({"analysisType": "chat"}, RequestKind.QUESTION, "analysis"),
    ({"analysisType": "question", "customPrompt": "q"}, RequestKind.QUESTION, "analysis"),
    ({"analysisType": "full", "customPrompt": "q"}, RequestKind.QUESTION, "analysis"),
    ({"analysisType": "full"}, RequestKind.SUMMARY, "analysis"),
])
def test_detect_request_kind(body, kind, field):
    assert detect_request_kind(body) == (kind, field)


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_upstream_text_is_an_error(gateway, provider, text):
    provider.text = text
    result = call(gateway, body=SUMMARY_BODY)
    assert result.status_code == 500
    assert result.body == {"error": "AI response error"}


# Upstream failures

def test_timeout_is_reported_without_hanging(rate_limiter, make_provider):
    provider = make_provider(delay=5)
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="key", timeout_ms=50)

    started = time.monotonic()
    result = call(gateway, body=SUMMARY_BODY)

    assert time.monotonic() - started < 2
    assert result.status_code == 500
    assert result.body["error"] == "Request timed out"


def test_transport_timeout_is_reported_as_timeout(rate_limiter, make_provider):
    provider = make_provider(error=UpstreamTimeoutError("read timed out"))
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="key")

    result = call(gateway, body=SUMMARY_BODY)
    assert result.status_code == 500
    assert result.body["error"] == "Request timed out"


@pytest.mark.parametrize("status, fragment", [
    (400, "rejected"),
    (401, "authentication"),
    (403, "access denied"),
    (429, "quota"),
    (500, "AI service error"),
    (503, "AI service error"),
])
def test_upstream_status_is_mapped(rate_limiter, make_provider, status, fragment):
    upstream_body = {"error": {"code": status, "message": "secret provider detail"}}
    provider = make_provider(error=UpstreamError(status, upstream_body))
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="key")

    result = call(gateway, body=SUMMARY_BODY)

    assert result.status_code == 500
    assert fragment in result.body["error"]
    assert result.body["details"] == {"upstreamStatus": status}
    assert "secret provider detail" not in str(result.body)


def test_unexpected_error_is_internal(rate_limiter, make_provider):
    provider = make_provider(error=RuntimeError("boom"))
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="key")

    result = call(gateway, body=SUMMARY_BODY)
    assert result.status_code == 500
    assert result.body == {"error": "Internal error"}
    assert result.headers["Access-Control-Allow-Origin"] == "*"


def test_each_call_consumes_a_rate_limit_slot_even_on_failure(rate_limiter, make_provider):
    provider = make_provider(error=RuntimeError("boom"))
    gateway = AIGateway(rate_limiter=rate_limiter, provider=provider, api_key="key")

    for _ in range(10):
        assert call(gateway, body=SUMMARY_BODY).status_code == 500
    assert call(gateway, body=SUMMARY_BODY).status_code == 429
