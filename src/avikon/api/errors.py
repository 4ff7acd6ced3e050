"""API error taxonomy and vendor-failure mapping.

Every failure leaving ``/api/generate-image`` is an :class:`APIError` carrying
an HTTP status, a stable ``code`` and a user-facing message.  A single
exception handler in :mod:`avikon.api.main` renders them as
``{"error": ..., "code": ...}``.

Vendor failures are classified from their message text with case-sensitive
substring checks, in this order:

==================  ======  ====================
Message contains    Status  Code
==================  ======  ====================
``API key``         401     INVALID_API_KEY
``quota`` /         429     QUOTA_EXCEEDED
``rate limit``
``safety`` /        400     CONTENT_BLOCKED
``blocked``
(anything else)     500     GENERATION_FAILED
==================  ======  ====================
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes returned to clients."""

    API_KEY_NOT_CONFIGURED = "API_KEY_NOT_CONFIGURED"
    INVALID_API_KEY = "INVALID_API_KEY"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    CONTENT_BLOCKED = "CONTENT_BLOCKED"
    GENERATION_FAILED = "GENERATION_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INVALID_PROMPT = "INVALID_PROMPT"
    PROMPT_TOO_LONG = "PROMPT_TOO_LONG"
    INVALID_REQUEST = "INVALID_REQUEST"


class APIError(Exception):
    """Base class for errors rendered as ``{error, code}`` JSON responses."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    default_message: str = "An unexpected error occurred during image generation"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code.value}


class ApiKeyNotConfiguredError(APIError):
    status_code = 500
    code = ErrorCode.API_KEY_NOT_CONFIGURED
    default_message = (
        "Gemini API key not configured. Please set GEMINI_API_KEY in your environment variables."
    )


class InvalidApiKeyError(APIError):
    status_code = 401
    code = ErrorCode.INVALID_API_KEY
    default_message = "Invalid API key. Please check your Gemini API configuration."


class QuotaExceededError(APIError):
    status_code = 429
    code = ErrorCode.QUOTA_EXCEEDED
    default_message = "API quota exceeded. Please try again later."


class ContentBlockedError(APIError):
    status_code = 400
    code = ErrorCode.CONTENT_BLOCKED
    default_message = "Content was blocked by safety filters. Please modify your prompt."


class GenerationFailedError(APIError):
    status_code = 500
    code = ErrorCode.GENERATION_FAILED
    default_message = "Failed to generate image"


class UnknownError(APIError):
    pass


class InvalidPromptError(APIError):
    status_code = 400
    code = ErrorCode.INVALID_PROMPT
    default_message = "Prompt is required and must be a non-empty string"


class PromptTooLongError(APIError):
    status_code = 400
    code = ErrorCode.PROMPT_TOO_LONG
    default_message = "Prompt is too long. Please keep it under 2000 characters."


class InvalidRequestError(APIError):
    status_code = 400
    code = ErrorCode.INVALID_REQUEST
    default_message = "Invalid request body"


def classify_generation_error(message: str) -> APIError:
    """Map a vendor failure message to the matching :class:`APIError`.

    Args:
        message: The failure message, as raised by the generator.

    Returns:
        An error instance ready to be raised.  Only ``GENERATION_FAILED``
        keeps the original message; the other kinds use fixed wording.
    """
    if "API key" in message:
        return InvalidApiKeyError()
    if "quota" in message or "rate limit" in message:
        return QuotaExceededError()
    if "safety" in message or "blocked" in message:
        return ContentBlockedError()
    return GenerationFailedError(message)
