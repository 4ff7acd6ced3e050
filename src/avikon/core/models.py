"""Generation request model shared by the server route and the client library.

The wire format is camelCase (``aspectRatio``, ``negativePrompt``,
``referenceImageBase64``) while Python code uses snake_case attributes.  Both
spellings are accepted on input; :meth:`GenerationRequest.to_payload` produces
the camelCase form.

Prompt emptiness and length are deliberately *not* enforced here.  The route
checks them itself so it can answer with specific messages, and the client
session checks emptiness before ever making a request.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3"]

ASPECT_RATIOS: tuple[str, ...] = ("1:1", "16:9", "9:16", "4:3")

MAX_PROMPT_LENGTH = 2000
DEFAULT_QUALITY = 8


class GenerationRequest(BaseModel):
    """Parameters for a single image generation.

    Attributes:
        prompt: The user's description of the image.
        style: Optional style description appended to the prompt.
        aspect_ratio: One of ``1:1``, ``16:9``, ``9:16``, ``4:3``.
        quality: Integer 1-10 controlling the quality clause.
        negative_prompt: Optional text describing what to avoid.
        reference_image_base64: Optional base64 image used as a style guide.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(
        ...,
        description="Image description (non-empty, at most 2000 characters).",
    )
    style: str | None = Field(
        default=None,
        description="Optional style guidance.",
    )
    aspect_ratio: AspectRatio = Field(
        default="1:1",
        alias="aspectRatio",
        description="Output aspect ratio.",
    )
    quality: int = Field(
        default=DEFAULT_QUALITY,
        ge=1,
        le=10,
        description="Quality level from 1 to 10.",
    )
    negative_prompt: str | None = Field(
        default=None,
        alias="negativePrompt",
        description="Things the image should avoid.",
    )
    reference_image_base64: str | None = Field(
        default=None,
        alias="referenceImageBase64",
        description="Base64-encoded reference image (no data: prefix).",
    )

    def to_payload(self) -> dict:
        """Serialise to the camelCase JSON body, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
