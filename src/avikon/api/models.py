"""Pydantic response models for the AvikonAI API.

The request body for ``POST /api/generate-image`` is
:class:`avikon.core.models.GenerationRequest`, shared with the client
library.  The models here describe what the server sends back and are used
for ``response_model`` declarations and OpenAPI documentation.

Models
------
GenerateImageResponse
    Success body of ``POST /api/generate-image``.
ErrorResponse
    Body of every failure response.
StatusResponse
    Body of ``GET /api/generate-image``.
ConfigResponse
    Body of ``GET /api/config``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GenerateImageResponse(BaseModel):
    """Successful generation.

    Attributes:
        success: Always ``True``.
        image_data: Base64-encoded image bytes.
        mime_type: MIME type of the image.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image_data: str = Field(..., alias="imageData")
    mime_type: str = Field(default="image/png", alias="mimeType")


class ErrorResponse(BaseModel):
    """Failure body shared by all error responses."""

    error: str = Field(..., description="Human-readable message.")
    code: str = Field(..., description="Stable error code.")


class StatusResponse(BaseModel):
    """Liveness and configuration probe."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    gemini_configured: bool = Field(..., alias="geminiConfigured")
    timestamp: datetime


class EditorInfo(BaseModel):
    """Editor bridge availability."""

    model_config = ConfigDict(populate_by_name=True)

    configured: bool
    script_url: str = Field(..., alias="scriptUrl")


class ConfigResponse(BaseModel):
    """Static options the client needs to build a request."""

    model_config = ConfigDict(populate_by_name=True)

    version: str
    style_presets: list[dict] = Field(..., alias="stylePresets")
    sample_prompts: list[str] = Field(..., alias="samplePrompts")
    aspect_ratios: list[str] = Field(..., alias="aspectRatios")
    editor: EditorInfo
