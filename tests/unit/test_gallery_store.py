"""Tests for avikon.client.gallery — LocalGalleryStore.

Tests cover:
- save/load round trip with blob URLs converted to data URLs.
- Newest-first ordering.
- Tolerance of missing, corrupted and foreign gallery files.
- Deletion and clearing.
"""

from __future__ import annotations

import json
from dataclasses import replace

import pytest

from avikon.client.errors import ImageConversionError
from avikon.client.gallery import LocalGalleryStore
from conftest import PNG_B64


class TestSaveAndLoad:
    async def test_round_trip(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)

        loaded = gallery_store.load()

        assert len(loaded) == 1
        first = loaded[0]
        assert first.id == blob_image.id
        assert first.prompt == blob_image.prompt
        assert first.style == blob_image.style
        assert first.timestamp.replace(microsecond=0) == blob_image.timestamp.replace(microsecond=0)
        assert first.is_generated is True

    async def test_stored_url_is_data_url(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)
        loaded = gallery_store.load()[0]
        assert loaded.url == f"data:image/png;base64,{PNG_B64}"
        assert not loaded.url.startswith("blob:")

    async def test_survives_revoked_blob(self, gallery_store, blob_image, blobs):
        """The stored copy outlives the transient reference."""
        await gallery_store.save(blob_image)
        blobs.close()
        assert gallery_store.load()[0].url.startswith("data:")

    async def test_newest_first(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)
        await gallery_store.save(replace(blob_image, id="2"))
        await gallery_store.save(replace(blob_image, id="3"))

        assert [image.id for image in gallery_store.load()] == ["3", "2", blob_image.id]

    async def test_creates_parent_directory(self, gallery_store, blob_image, gallery_path):
        assert not gallery_path.parent.exists()
        await gallery_store.save(blob_image)
        assert gallery_path.exists()

    async def test_file_format(self, gallery_store, blob_image, gallery_path):
        await gallery_store.save(blob_image)
        records = json.loads(gallery_path.read_text())
        assert records[0]["timestamp"] == "2026-10-19T12:30:45.250000+00:00"
        assert records[0]["isGenerated"] is True

    async def test_save_with_revoked_blob_fails(self, gallery_store, blob_image, blobs, gallery_path):
        blobs.revoke(blob_image.blob_url)
        with pytest.raises(ImageConversionError):
            await gallery_store.save(blob_image)
        assert not gallery_path.exists()

    async def test_save_over_corrupted_file(self, gallery_store, blob_image, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text("{not json")
        await gallery_store.save(blob_image)
        assert [i.id for i in gallery_store.load()] == [blob_image.id]


class TestLoadTolerance:
    def test_missing_file(self, gallery_store):
        assert gallery_store.load() == []

    def test_corrupted_json(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text("[{broken")
        assert gallery_store.load() == []

    def test_not_a_list(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text('{"id": "1"}')
        assert gallery_store.load() == []

    def test_malformed_record(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text(json.dumps([{"id": "1", "timestamp": "yesterday"}]))
        assert gallery_store.load() == []

    @pytest.mark.parametrize("records", [[1], ["image"], [None]])
    def test_non_dict_record(self, gallery_store, gallery_path, records):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text(json.dumps(records))
        assert gallery_store.load() == []

    def test_deeply_nested_json(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text("[" * 100000)
        assert gallery_store.load() == []

    def test_null_is_generated_means_generated(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text(
            json.dumps(
                [
                    {
                        "id": "1",
                        "url": f"data:image/png;base64,{PNG_B64}",
                        "prompt": "p",
                        "style": "Vintage",
                        "timestamp": "2025-08-01T10:00:00+00:00",
                        "isGenerated": None,
                    }
                ]
            )
        )
        assert gallery_store.load()[0].is_generated is True

    def test_legacy_record_without_is_generated(self, gallery_store, gallery_path):
        gallery_path.parent.mkdir(parents=True)
        gallery_path.write_text(
            json.dumps(
                [
                    {
                        "id": "1",
                        "url": f"data:image/png;base64,{PNG_B64}",
                        "prompt": "p",
                        "style": "Vintage",
                        "timestamp": "2025-08-01T10:00:00.000Z",
                    }
                ]
            )
        )
        assert gallery_store.load()[0].is_generated is True

    def test_unreadable_path(self, temp_dir):
        """A directory where the file should be loads as empty."""
        (temp_dir / "images.json").mkdir()
        assert LocalGalleryStore(temp_dir / "images.json").load() == []


class TestDelete:
    async def test_delete_existing(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)
        await gallery_store.save(replace(blob_image, id="2"))

        assert gallery_store.delete(blob_image.id) is True
        assert [i.id for i in gallery_store.load()] == ["2"]

    async def test_delete_missing(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)
        assert gallery_store.delete("nope") is False
        assert len(gallery_store.load()) == 1

    async def test_clear(self, gallery_store, blob_image):
        await gallery_store.save(blob_image)
        gallery_store.clear()
        assert gallery_store.load() == []
