"""
Input validation for text sent to the AI gateway.
"""

from typing import Any

from video_analyzer.config import config
from video_analyzer.models.schemas import Valid, Invalid, ValidationResult


def validate_input(text: Any, max_length: int = config.MAX_DESCRIPTION_LENGTH) -> ValidationResult:
    """
    Validate user supplied text.

    Args:
        text: Raw value taken from the request body
        max_length: Maximum number of characters allowed

    Returns:
        Valid with the trimmed text, or Invalid with a reason and message
    """
    if text is None:
        return Invalid(reason="required", message="Input is required")
    if not isinstance(text, str):
        return Invalid(reason="wrong type", message="Input must be text")
    # Length is checked first so any oversized input reports "too long"
    if len(text) > max_length:
        return Invalid(reason="too long", message=f"Too long. Max {max_length} characters allowed.")
    if not text.strip():
        return Invalid(reason="empty", message="Input cannot be empty")

    return Valid(text=text.strip())
