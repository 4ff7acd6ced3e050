"""Tests for avikon.client.blobs — object URLs and data URL conversion."""

from __future__ import annotations

import httpx
import pytest

from avikon.client.blobs import (
    BLOB_URL_PREFIX,
    ObjectURLRegistry,
    decode_data_url,
    encode_data_url,
    read_image_bytes,
    to_data_url,
)
from avikon.client.errors import ImageConversionError
from conftest import PNG_B64, PNG_BYTES


class TestDataUrls:
    def test_encode(self):
        assert encode_data_url(PNG_BYTES) == f"data:image/png;base64,{PNG_B64}"

    def test_decode(self):
        data, mime = decode_data_url(f"data:image/jpeg;base64,{PNG_B64}")
        assert data == PNG_BYTES
        assert mime == "image/jpeg"

    @pytest.mark.parametrize(
        "url",
        ["data:image/png,rawtext", "https://example.com/a.png", "data:image/png;base64,@@@"],
    )
    def test_decode_rejects(self, url):
        with pytest.raises(ImageConversionError):
            decode_data_url(url)


class TestObjectURLRegistry:
    def test_create_and_resolve(self, blobs):
        url = blobs.create(PNG_BYTES, "image/webp")
        assert url.startswith(BLOB_URL_PREFIX)
        assert blobs.resolve(url) == (PNG_BYTES, "image/webp")

    def test_urls_are_unique(self, blobs):
        assert blobs.create(b"a") != blobs.create(b"a")

    def test_revoke(self, blobs):
        url = blobs.create(PNG_BYTES)
        blobs.revoke(url)
        assert url not in blobs
        with pytest.raises(KeyError):
            blobs.resolve(url)

    def test_context_exit_revokes_everything(self):
        with ObjectURLRegistry() as registry:
            registry.create(b"a")
            registry.create(b"b")
            assert len(registry) == 2
        assert len(registry) == 0


class TestReadImageBytes:
    async def test_blob_url(self, blobs):
        url = blobs.create(PNG_BYTES)
        assert await read_image_bytes(url, blobs=blobs) == (PNG_BYTES, "image/png")

    async def test_revoked_blob_url(self, blobs):
        url = blobs.create(PNG_BYTES)
        blobs.revoke(url)
        with pytest.raises(ImageConversionError):
            await read_image_bytes(url, blobs=blobs)

    async def test_blob_without_registry(self):
        with pytest.raises(ImageConversionError):
            await read_image_bytes("blob:avikon/x")

    async def test_http_url(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/jpeg"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            data, mime = await read_image_bytes("https://cdn.example.com/a.jpg", http=http)
        assert data == PNG_BYTES
        assert mime == "image/jpeg"

    async def test_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(ImageConversionError):
                await read_image_bytes("https://cdn.example.com/missing.png", http=http)

    async def test_file_path(self, temp_dir):
        path = temp_dir / "ref.png"
        path.write_bytes(PNG_BYTES)
        assert await read_image_bytes(str(path)) == (PNG_BYTES, "image/png")

    async def test_missing_file(self, temp_dir):
        with pytest.raises(ImageConversionError):
            await read_image_bytes(str(temp_dir / "nope.png"))

    async def test_to_data_url_keeps_data_urls(self):
        url = f"data:image/png;base64,{PNG_B64}"
        assert await to_data_url(url) == url

    async def test_to_data_url_from_blob(self, blobs):
        url = blobs.create(PNG_BYTES, "image/png")
        assert await to_data_url(url, blobs=blobs) == f"data:image/png;base64,{PNG_B64}"
