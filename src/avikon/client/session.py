"""Generation session: the control flow behind the generate page.

A :class:`GenerationSession` owns everything a single user session needs:
the HTTP client, the object URL registry, the gallery store, the editor
bridge and the notification queue.  None of these are globals; they are
created by the caller, handed in, and torn down when the session closes.

Every public operation reports problems as notifications and returns
``None``/``False`` instead of raising, so a front end can call them without
its own error handling.
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from avikon.client.api import AvikonClient
from avikon.client.blobs import ObjectURLRegistry, read_image_bytes, to_data_url
from avikon.client.editor import EditorBridge, EditorTheme
from avikon.client.errors import (
    AvikonClientError,
    DownloadError,
    EditorNotConfiguredError,
    EditorNotLoadedError,
    ImageConversionError,
)
from avikon.client.gallery import LocalGalleryStore
from avikon.client.models import GeneratedImage, GenerationSettings, ServiceStatus
from avikon.client.notifications import NotificationCenter
from avikon.core.models import GenerationRequest
from avikon.core.styles import DEFAULT_STYLE, StylePreset

logger = logging.getLogger(__name__)


class GenerationSession:
    """Coordinates generation, gallery, download and editing for one user.

    Args:
        client: Client for the generation server.
        store: Durable local gallery.
        blobs: Registry for transient image references.
        notifications: Queue receiving user-facing messages.
        editor: Optional Pixo editor bridge.

    Attributes:
        images: In-memory gallery, newest first.
        configured: Server configuration state from the last status check;
            ``None`` until :meth:`initialize` has run.
        progress: Coarse progress of the current generation (0-100).
    """

    def __init__(
        self,
        client: AvikonClient,
        store: LocalGalleryStore,
        *,
        blobs: ObjectURLRegistry,
        notifications: NotificationCenter,
        editor: EditorBridge | None = None,
    ):
        self.client = client
        self.store = store
        self.blobs = blobs
        self.notifications = notifications
        self.editor = editor
        self.images: list[GeneratedImage] = []
        self.configured: bool | None = None
        self.is_generating = False
        self.progress = 0
        self._last_id = 0

    async def __aenter__(self) -> GenerationSession:
        await self.notifications.__aenter__()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.blobs.close()
        await self.notifications.__aexit__(*exc_info)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def initialize(self) -> ServiceStatus:
        """Check whether the server can generate and remember the answer."""
        status = await self.client.check_status()
        self.configured = status.configured
        if not status.configured:
            logger.warning(f"Gemini API not configured: {status.error}")
        return status

    def load_gallery(self) -> list[GeneratedImage]:
        """Replace the in-memory gallery with what is stored on disk."""
        self.images = self.store.load()
        return self.images

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped when two images land in the same millisecond.
        now_ms = time.time_ns() // 1_000_000
        self._last_id = max(now_ms, self._last_id + 1)
        return str(self._last_id)

    def _fail(self, title: str, message: str) -> None:
        self.notifications.add("error", title, message)

    @staticmethod
    def _encode_reference(path: Path) -> str:
        try:
            return base64.b64encode(Path(path).read_bytes()).decode("ascii")
        except OSError as e:
            raise ImageConversionError(f"Could not read reference image {path}: {e}") from e

    async def generate(
        self,
        prompt: str,
        style: StylePreset = DEFAULT_STYLE,
        settings: GenerationSettings | None = None,
        reference_image: Path | None = None,
    ) -> GeneratedImage | None:
        """Generate one image and add it to the gallery.

        Args:
            prompt: Image description.
            style: Style preset; its description is sent to the model and its
                name is recorded in the gallery.
            settings: Quality, aspect ratio and negative prompt.
            reference_image: Optional image file used as a style guide.

        Returns:
            The new image, or ``None`` if generation did not happen or failed
            (the reason is in :attr:`notifications`).
        """
        if not prompt.strip():
            self._fail("Prompt Required", "Please enter a description for your image.")
            return None

        if self.configured is False:
            self._fail(
                "API Not Configured",
                "Gemini API key is not configured. Please check your environment variables.",
            )
            return None

        settings = settings or GenerationSettings()
        self.is_generating = True
        self.progress = 0
        try:
            return await self._generate(prompt, style, settings, reference_image)
        finally:
            self.is_generating = False
            self.progress = 0

    async def _generate(
        self,
        prompt: str,
        style: StylePreset,
        settings: GenerationSettings,
        reference_image: Path | None,
    ) -> GeneratedImage | None:
        try:
            reference_b64 = None
            if reference_image is not None:
                self.progress = 10
                reference_b64 = self._encode_reference(reference_image)
            request = GenerationRequest(
                prompt=prompt.strip(),
                style=style.description,
                aspect_ratio=settings.aspect_ratio,
                quality=settings.quality,
                negative_prompt=settings.negative_prompt or None,
                reference_image_base64=reference_b64,
            )
        except (ImageConversionError, ValidationError) as e:
            self._fail("Generation Failed", str(e))
            return None

        self.progress = 25
        result = await self.client.request_generation(request)
        self.progress = 75

        if not result.success:
            self._fail("Generation Failed", result.error or "Failed to generate image")
            return None

        try:
            data = base64.b64decode(result.image_data, validate=True)
        except (binascii.Error, ValueError):
            self._fail("Generation Failed", "Received invalid image data from the server.")
            return None

        blob_url = self.blobs.create(data, result.mime_type)
        self.progress = 90

        image = GeneratedImage(
            id=self._next_id(),
            url=blob_url,
            blob_url=blob_url,
            prompt=prompt,
            style=style.name,
            timestamp=datetime.now(timezone.utc),
        )

        # Persistence is best-effort and never fails the generation.
        try:
            await self.store.save(image)
        except AvikonClientError as e:
            logger.error(f"Failed to save image {image.id} to gallery: {e}")

        self.images.insert(0, image)
        self.progress = 100
        self.notifications.add(
            "success",
            "Image Generated!",
            "Your AI profile picture has been created and saved to your gallery.",
        )
        return image

    # ------------------------------------------------------------------
    # Gallery actions
    # ------------------------------------------------------------------

    def find(self, image_id: str) -> GeneratedImage | None:
        return next((image for image in self.images if image.id == image_id), None)

    def delete(self, image_id: str) -> bool:
        """Remove an image from the session gallery and from storage."""
        image = self.find(image_id)
        if image is not None:
            self.images = [i for i in self.images if i.id != image_id]
            if image.blob_url:
                self.blobs.revoke(image.blob_url)
        removed = self.store.delete(image_id)
        return image is not None or removed

    async def _write_download(self, image: GeneratedImage, destination: Path) -> Path:
        target = Path(destination)
        if target.is_dir():
            target = target / f"avikonai-{image.id}.png"
        try:
            data, _ = await read_image_bytes(
                image.blob_url or image.url, blobs=self.blobs, http=self.store.http
            )
            target.write_bytes(data)
        except (ImageConversionError, OSError) as e:
            raise DownloadError(f"Download of {image.id} failed: {e}") from e
        return target

    async def download(self, image: GeneratedImage, destination: Path) -> Path | None:
        """Write an image to ``destination`` (a file, or a directory to put
        ``avikonai-<id>.png`` in).

        Returns:
            The written path, or ``None`` on failure.
        """
        try:
            target = await self._write_download(image, destination)
        except DownloadError as e:
            logger.error(str(e))
            self._fail("Download Failed", "Unable to download the image. Please try again.")
            return None
        self.notifications.add(
            "success", "Download Complete", "Your HD image has been downloaded successfully."
        )
        return target

    async def edit(self, image: GeneratedImage, theme: EditorTheme = "Default") -> dict | None:
        """Prepare a Pixo editing session for an image.

        Returns:
            The bridge configuration, or ``None`` if editing is unavailable.
        """
        if self.editor is None or not self.editor.configured:
            self._fail(
                "Editor Not Configured",
                "Image editing is not configured. Set PIXO_API_KEY to enable it.",
            )
            return None

        await self.editor.load()
        try:
            source = await to_data_url(image.blob_url or image.url, blobs=self.blobs, http=self.store.http)
            return self.editor.open_session(source, theme=theme)
        except ImageConversionError as e:
            logger.error(f"Could not convert image {image.id} for editing: {e}")
            self._fail("Image Conversion Failed", "Could not prepare the image for editing.")
        except EditorNotLoadedError as e:
            self._fail("Editor Not Ready", str(e))
        except EditorNotConfiguredError as e:
            self._fail("Editor Not Configured", str(e))
        return None
