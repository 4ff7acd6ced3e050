"""Shared pytest fixtures for AvikonAI tests."""

from __future__ import annotations

import base64
import shutil
import tempfile
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from avikon.api.main import app, get_config
from avikon.client.blobs import ObjectURLRegistry
from avikon.client.gallery import LocalGalleryStore
from avikon.client.models import GeneratedImage
from avikon.core.config import AvikonConfig
from avikon.core.gemini import GeneratedImageData

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"avikon-test-image"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


class FakeGenerator:
    """Stand-in for GeminiImageGenerator that records calls.

    Set ``error`` to make the next calls raise it.
    """

    def __init__(self):
        self.calls: list[dict] = []
        self.result = GeneratedImageData(image_data=PNG_B64, mime_type="image/png")
        self.error: BaseException | None = None
        self.closed = False

    async def generate(self, prompt, *, api_key, reference_image=None):
        self.calls.append(
            {"prompt": prompt, "api_key": api_key, "reference_image": reference_image}
        )
        if self.error is not None:
            raise self.error
        return self.result

    def close(self):
        self.closed = True


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> AvikonConfig:
    """Configuration with a usable Gemini key and a temporary gallery."""
    return AvikonConfig(
        gemini_api_key="test-gemini-key",
        pixo_api_key="test-pixo-key",
        gallery_path=temp_dir / "images.json",
        _env_file=None,
    )


@pytest.fixture
def unconfigured_config(temp_dir: Path) -> AvikonConfig:
    """Configuration without a Gemini or Pixo key."""
    return AvikonConfig(
        gemini_api_key=None,
        pixo_api_key=None,
        gallery_path=temp_dir / "images.json",
        _env_file=None,
    )


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def test_client(test_config: AvikonConfig, fake_generator: FakeGenerator):
    """TestClient with a configured key and the fake generator installed."""
    app.dependency_overrides[get_config] = lambda: test_config
    try:
        with TestClient(app) as client:
            app.state.generator = fake_generator
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(unconfigured_config: AvikonConfig, fake_generator: FakeGenerator):
    """TestClient whose configuration has no Gemini key."""
    app.dependency_overrides[get_config] = lambda: unconfigured_config
    try:
        with TestClient(app) as client:
            app.state.generator = fake_generator
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def blobs() -> Generator[ObjectURLRegistry, None, None]:
    with ObjectURLRegistry() as registry:
        yield registry


@pytest.fixture
def gallery_path(temp_dir: Path) -> Path:
    return temp_dir / "gallery" / "images.json"


@pytest.fixture
def gallery_store(gallery_path: Path, blobs: ObjectURLRegistry) -> LocalGalleryStore:
    return LocalGalleryStore(gallery_path, blobs=blobs)


@pytest.fixture
def blob_image(blobs: ObjectURLRegistry) -> GeneratedImage:
    """A freshly generated image backed by a transient object URL."""
    url = blobs.create(PNG_BYTES, "image/png")
    return GeneratedImage(
        id="1760875200123",
        url=url,
        blob_url=url,
        prompt="Professional headshot of a confident person",
        style="Professional",
        timestamp=datetime(2026, 10, 19, 12, 30, 45, 250000, tzinfo=timezone.utc),
    )
