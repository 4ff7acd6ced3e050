"""Gemini image generation adapter.

Wraps the ``google-genai`` SDK behind a small async interface:

- one awaited ``generate_content`` call per request, no streaming
- vendor and transport failures are re-raised as :class:`GenerationError`
  with the vendor message preserved
- the response goes through :func:`parse_image_response`, a strict parser
  that either yields image bytes or raises
  :class:`MalformedVendorResponseError`

The SDK client is created lazily on first use, so constructing the
generator never touches the network and a missing key only matters when a
generation is actually attempted.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from avikon.core.errors import (
    GenerationError,
    InvalidReferenceImageError,
    MalformedVendorResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"
REFERENCE_IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class GeneratedImageData:
    """Image returned by the model.

    Attributes:
        image_data: Base64-encoded image bytes.
        mime_type: MIME type reported by the model (``image/png`` if absent).
    """

    image_data: str
    mime_type: str = DEFAULT_MIME_TYPE


def decode_base64_image(data: str) -> bytes:
    """Decode a base64 image, accepting an optional ``data:...;base64,`` prefix.

    Raises:
        InvalidReferenceImageError: If the payload is not valid base64.
    """
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidReferenceImageError("Reference image must be valid base64 data") from e


def parse_image_response(response: types.GenerateContentResponse) -> GeneratedImageData:
    """Extract the first inline image from the first response candidate.

    Args:
        response: Raw SDK response.

    Returns:
        The first inline-binary part, base64 encoded.

    Raises:
        GenerationError: If the prompt was blocked, or the candidate carries
            no image part.
        MalformedVendorResponseError: If the candidate structure is missing
            pieces we rely on.
    """
    candidates = response.candidates
    if not candidates:
        feedback = response.prompt_feedback
        if feedback is not None and feedback.block_reason:
            raise GenerationError(f"Prompt was blocked by safety filters ({feedback.block_reason})")
        raise MalformedVendorResponseError("No image candidate returned from Gemini")

    candidate = candidates[0]
    if candidate.content is None or candidate.content.parts is None:
        reason = candidate.finish_reason
        if reason is not None and "SAFETY" in str(reason):
            raise GenerationError("Image was blocked by safety filters")
        raise MalformedVendorResponseError("Gemini candidate has no content parts")

    for part in candidate.content.parts:
        inline = part.inline_data
        if inline is None:
            continue
        if not isinstance(inline.data, bytes) or not inline.data:
            raise MalformedVendorResponseError("Gemini returned an inline part without image bytes")
        return GeneratedImageData(
            image_data=base64.b64encode(inline.data).decode("ascii"),
            mime_type=inline.mime_type or DEFAULT_MIME_TYPE,
        )

    raise GenerationError("No image data found in response")


class GeminiImageGenerator:
    """Async image generator backed by a Gemini model.

    Args:
        model: Gemini model identifier.
    """

    def __init__(self, model: str):
        self.model = model
        self._client: genai.Client | None = None
        self._api_key: str | None = None

    def _get_client(self, api_key: str) -> genai.Client:
        # Recreate when the configured key changes between requests.
        if self._client is None or self._api_key != api_key:
            self._client = genai.Client(api_key=api_key)
            self._api_key = api_key
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        api_key: str,
        reference_image: bytes | None = None,
    ) -> GeneratedImageData:
        """Generate one image.

        Args:
            prompt: Fully composed prompt text.
            api_key: Gemini API key to authenticate with.
            reference_image: Optional raw image bytes sent ahead of the text.

        Returns:
            The generated image.

        Raises:
            GenerationError: On vendor, transport, or response failures.
        """
        contents: list = []
        if reference_image is not None:
            contents.append(
                types.Part.from_bytes(data=reference_image, mime_type=REFERENCE_IMAGE_MIME_TYPE)
            )
        contents.append(prompt)

        logger.info(
            f"Calling {self.model} (prompt_length={len(prompt)}, "
            f"reference_image={reference_image is not None})"
        )

        client = self._get_client(api_key)
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise GenerationError(f"Failed to generate image: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini transport error: {e}")
            raise GenerationError(f"Failed to generate image: {e}") from e
        except Exception as e:
            # Anything else raised by the vendor call (aiohttp transport, timeouts)
            # is classified by its message as well.
            logger.error(f"Gemini call failed: {type(e).__name__}: {e}")
            raise GenerationError(f"Failed to generate image: {e}") from e

        result = parse_image_response(response)
        logger.info(f"Gemini returned {result.mime_type} ({len(result.image_data)} base64 chars)")
        return result

    def close(self) -> None:
        """Drop the cached SDK client."""
        self._client = None
        self._api_key = None
