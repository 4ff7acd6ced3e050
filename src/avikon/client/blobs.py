"""Transient object references and data URL helpers.

Generated images are first held in memory and addressed through short-lived
``blob:avikon/<uuid>`` URLs, the same way a browser uses object URLs.  Those
references die with the session, so anything persisted must first be turned
into a self-contained ``data:`` URL.

:func:`read_image_bytes` is the single place that knows how to dereference
every kind of image URL the client handles:

- ``data:`` URLs are decoded in place
- ``blob:`` URLs are looked up in an :class:`ObjectURLRegistry`
- ``http://`` / ``https://`` URLs are fetched with httpx
- anything else is treated as a local file path
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import uuid
from pathlib import Path

import httpx

from avikon.client.errors import ImageConversionError

logger = logging.getLogger(__name__)

BLOB_URL_PREFIX = "blob:avikon/"
DEFAULT_MIME_TYPE = "image/png"


def encode_data_url(data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Encode bytes as a ``data:<mime>;base64,...`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> tuple[bytes, str]:
    """Decode a base64 ``data:`` URL into ``(bytes, mime_type)``.

    Raises:
        ImageConversionError: If the URL is not a base64 data URL.
    """
    header, sep, payload = url.partition(",")
    if not url.startswith("data:") or not sep or not header.endswith(";base64"):
        raise ImageConversionError("Not a base64 data URL")
    mime_type = header[len("data:") : -len(";base64")] or DEFAULT_MIME_TYPE
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except (binascii.Error, ValueError) as e:
        raise ImageConversionError("Data URL payload is not valid base64") from e


class ObjectURLRegistry:
    """Session-scoped store of in-memory images addressed by ``blob:`` URLs.

    Use as a context manager to revoke every reference when the session
    ends::

        with ObjectURLRegistry() as blobs:
            url = blobs.create(png_bytes)
    """

    def __init__(self):
        self._objects: dict[str, tuple[bytes, str]] = {}

    def create(self, data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
        url = f"{BLOB_URL_PREFIX}{uuid.uuid4()}"
        self._objects[url] = (data, mime_type)
        return url

    def resolve(self, url: str) -> tuple[bytes, str]:
        """Return ``(bytes, mime_type)`` for a live reference.

        Raises:
            KeyError: If the URL was never created here or has been revoked.
        """
        return self._objects[url]

    def revoke(self, url: str) -> None:
        self._objects.pop(url, None)

    def close(self) -> None:
        """Revoke every reference."""
        self._objects.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __enter__(self) -> ObjectURLRegistry:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


async def read_image_bytes(
    url: str,
    *,
    blobs: ObjectURLRegistry | None = None,
    http: httpx.AsyncClient | None = None,
) -> tuple[bytes, str]:
    """Dereference any supported image URL into ``(bytes, mime_type)``.

    Args:
        url: ``data:``, ``blob:``, ``http(s)://`` URL or a file path.
        blobs: Registry used for ``blob:`` URLs.
        http: Client used for remote URLs.  A temporary one is created when
            omitted.

    Raises:
        ImageConversionError: If the reference cannot be read.
    """
    if url.startswith("data:"):
        return decode_data_url(url)

    if url.startswith("blob:"):
        if blobs is None:
            raise ImageConversionError(f"No object registry available for {url}")
        try:
            return blobs.resolve(url)
        except KeyError as e:
            raise ImageConversionError(f"Object URL is no longer valid: {url}") from e

    if url.startswith(("http://", "https://")):
        try:
            if http is None:
                async with httpx.AsyncClient() as temp_client:
                    response = await temp_client.get(url)
            else:
                response = await http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch image {url}: {e}")
            raise ImageConversionError(f"Failed to fetch image: {e}") from e
        mime_type = response.headers.get("content-type", DEFAULT_MIME_TYPE).split(";")[0]
        return response.content, mime_type

    path = Path(url)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageConversionError(f"Failed to read image file {path}: {e}") from e
    mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
    return data, mime_type


async def to_data_url(
    url: str,
    *,
    blobs: ObjectURLRegistry | None = None,
    http: httpx.AsyncClient | None = None,
) -> str:
    """Convert any supported image URL into a self-contained data URL.

    Data URLs are validated and returned unchanged.
    """
    data, mime_type = await read_image_bytes(url, blobs=blobs, http=http)
    if url.startswith("data:"):
        return url
    return encode_data_url(data, mime_type)
