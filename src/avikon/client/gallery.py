"""Local gallery persistence for generated images.

The gallery is a single JSON file holding an array of stored image records,
newest first::

    [
      {
        "id": "1760875200123",
        "url": "data:image/png;base64,iVBORw0...",
        "prompt": "Professional headshot ...",
        "style": "Professional",
        "timestamp": "2026-10-19T12:00:00.123000+00:00",
        "isGenerated": true
      }
    ]

Every ``url`` is a self-contained data URL, never a transient ``blob:``
reference, so entries remain loadable after the session that created them
has ended.

Durability is best-effort.  A missing, unreadable or corrupted file loads as
an empty gallery instead of raising.  Saves are read-modify-write of the
whole file and are not atomic: two processes saving at the same moment can
lose one of the writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from avikon.client.blobs import ObjectURLRegistry, to_data_url
from avikon.client.errors import GalleryStorageError
from avikon.client.models import GeneratedImage

logger = logging.getLogger(__name__)


class LocalGalleryStore:
    """File-backed gallery of generated images.

    Args:
        path: Location of the gallery JSON file.  Parent directories are
            created on first save.
        blobs: Registry used to dereference ``blob:`` URLs when saving.
        http: Optional httpx client used for remote image URLs.
    """

    def __init__(
        self,
        path: Path,
        *,
        blobs: ObjectURLRegistry | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.path = Path(path).expanduser()
        self.blobs = blobs
        self.http = http

    def _read_records(self) -> list[dict]:
        """Return the raw persisted records, or ``[]`` if unreadable."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as handle:
                records = json.load(handle)
        except (OSError, ValueError, RecursionError) as e:
            logger.error(f"Failed to read gallery {self.path}: {e}")
            return []
        if not isinstance(records, list):
            logger.error(f"Gallery {self.path} does not contain a list; ignoring it")
            return []
        return records

    def _write_records(self, records: list[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2)
        except OSError as e:
            raise GalleryStorageError(f"Failed to write gallery {self.path}: {e}") from e

    def load(self) -> list[GeneratedImage]:
        """Load all stored images in persisted (newest-first) order.

        Any failure, including a single malformed record, yields an empty
        list.  This never raises.
        """
        records = self._read_records()
        try:
            return [GeneratedImage.from_stored(record) for record in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load stored images: {e}")
            return []

    async def save(self, image: GeneratedImage) -> dict:
        """Persist an image at the front of the gallery.

        The image reference (``blob_url`` if set, otherwise ``url``) is first
        converted into a data URL; only then is the file read, prepended to
        and written back.

        Args:
            image: The image to persist.

        Returns:
            The stored record.

        Raises:
            ImageConversionError: If the image bytes cannot be obtained.
            GalleryStorageError: If the gallery file cannot be written.
        """
        data_url = await to_data_url(image.blob_url or image.url, blobs=self.blobs, http=self.http)
        record = image.to_stored(data_url)

        records = self._read_records()
        self._write_records([record, *records])
        logger.info(f"Saved image {image.id} to gallery ({len(records) + 1} total)")
        return record

    def delete(self, image_id: str) -> bool:
        """Remove one image.  Returns ``False`` if no entry had that id."""
        records = self._read_records()
        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == image_id)]
        if len(remaining) == len(records):
            return False
        self._write_records(remaining)
        logger.info(f"Deleted image {image_id} from gallery")
        return True

    def clear(self) -> None:
        """Remove every stored image."""
        self._write_records([])
