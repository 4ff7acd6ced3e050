"""Data models used by the AvikonAI client library."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from avikon.core.models import DEFAULT_QUALITY, AspectRatio


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation request.

    ``image_data`` is present if and only if ``success`` is true.
    """

    success: bool
    image_data: str | None = None
    mime_type: str = "image/png"
    error: str | None = None
    code: str | None = None

    @classmethod
    def failure(cls, error: str, code: str | None = None) -> GenerationResult:
        return cls(success=False, error=error, code=code)

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> GenerationResult:
        """Build a result from a decoded server response body."""
        image_data = body.get("imageData")
        if body.get("success") and image_data:
            return cls(
                success=True,
                image_data=image_data,
                mime_type=body.get("mimeType") or "image/png",
            )
        return cls.failure(body.get("error") or "Failed to generate image", body.get("code"))


@dataclass(frozen=True)
class ServiceStatus:
    """Result of probing the server configuration."""

    configured: bool
    error: str | None = None


@dataclass
class GenerationSettings:
    """User-adjustable generation settings (everything except the prompt and style)."""

    quality: int = DEFAULT_QUALITY
    aspect_ratio: AspectRatio = "1:1"
    negative_prompt: str = ""


@dataclass(frozen=True)
class GeneratedImage:
    """An image shown in the gallery.

    Attributes:
        id: Time-derived unique identifier.
        url: Displayable reference, either a ``blob:`` object URL (fresh
            results) or a ``data:`` URL (reloaded from storage).
        prompt: Prompt the user typed.
        style: Name of the style preset used.
        timestamp: Creation instant.
        is_processing: Transient flag for placeholders still being generated.
        is_generated: Distinguishes real generations from placeholders.
        blob_url: Object URL backing ``url`` for freshly generated images.
    """

    id: str
    url: str
    prompt: str
    style: str
    timestamp: datetime
    is_processing: bool = False
    is_generated: bool = True
    blob_url: str | None = None

    def to_stored(self, data_url: str) -> dict[str, Any]:
        """Project onto the persisted record format.

        Args:
            data_url: Self-contained data URL for this image's bytes.
        """
        return {
            "id": self.id,
            "url": data_url,
            "prompt": self.prompt,
            "style": self.style,
            "timestamp": self.timestamp.isoformat(),
            "isGenerated": self.is_generated,
        }

    @classmethod
    def from_stored(cls, record: dict[str, Any]) -> GeneratedImage:
        """Rebuild an image from a persisted record.

        Records written before ``isGenerated`` existed, or with a null
        ``isGenerated``, are treated as real generations.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the timestamp is not ISO-8601.
        """
        is_generated = record.get("isGenerated")
        return cls(
            id=str(record["id"]),
            url=record["url"],
            prompt=record["prompt"],
            style=record["style"],
            timestamp=datetime.fromisoformat(record["timestamp"]),
            is_generated=True if is_generated is None else is_generated,
        )
