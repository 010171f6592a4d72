"""
Gemini generative-language client used by the AI gateway.
"""

from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import errors, types

from video_analyzer.config import config
from video_analyzer.utils.error_handling import UpstreamError, UpstreamTimeoutError
from video_analyzer.utils.logger import logging


class GeminiClient:
    """Issues a single generateContent call per prompt."""

    def __init__(
        self,
        model: str = config.GEMINI_MODEL,
        timeout_ms: int = config.REQUEST_TIMEOUT_MS,
        generation_config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the client.

        Args:
            model: Gemini model name
            timeout_ms: HTTP timeout handed to the SDK transport
            generation_config: Sampling parameters (temperature, top_k, top_p, max_output_tokens)
        """
        self.model = model
        self.timeout_ms = timeout_ms
        self.generation_config = generation_config or config.generation_config()

    def _client(self, api_key: str) -> genai.Client:
        return genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=self.timeout_ms))

    async def generate(self, prompt: str, api_key: str) -> Optional[str]:
        """
        Generate text for a prompt.

        Args:
            prompt: Fully composed prompt
            api_key: Gemini API key

        Returns:
            Text of the first candidate, or None if the response carries none

        Raises:
            UpstreamError: Gemini answered with a non-success status
            UpstreamTimeoutError: The transport timed out
        """
        client = self._client(api_key).aio
        logging.info(f"Sending prompt of {len(prompt)} characters to {self.model}")

        try:
            response = await client.models.generate_content(
                model=self.model,
                contents=types.Content(role="user", parts=[types.Part(text=prompt)]),
                config=types.GenerateContentConfig(**self.generation_config),
            )
        except errors.APIError as e:
            raise UpstreamError(e.code, e.details) from e
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Gemini did not respond within {self.timeout_ms} ms") from e
        finally:
            # Also runs when the request is cancelled
            await client.aclose()

        return self.extract_text(response)

    @staticmethod
    def extract_text(response: Any) -> Optional[str]:
        """Pull candidates[0].content.parts[0].text out of a response, if present."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        if not parts:
            return None

        return getattr(parts[0], "text", None)
