"""Tests for avikon.cli — argument parsing and the offline gallery commands."""

from __future__ import annotations

import json

import pytest

from avikon.cli import build_parser, main
from conftest import PNG_B64, PNG_BYTES


def _seed_gallery(path, *ids):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(
            [
                {
                    "id": image_id,
                    "url": f"data:image/png;base64,{PNG_B64}",
                    "prompt": f"Prompt {image_id}",
                    "style": "Professional",
                    "timestamp": "2026-10-19T12:30:45+00:00",
                    "isGenerated": True,
                }
                for image_id in ids
            ]
        )
    )


class TestParser:
    def test_generate_defaults(self):
        args = build_parser().parse_args(["generate", "A portrait"])
        assert args.command == "generate"
        assert args.style == "professional"
        assert args.aspect_ratio == "1:1"
        assert args.quality == 8
        assert args.negative == ""
        assert args.reference is None

    def test_generate_options(self):
        args = build_parser().parse_args(
            ["generate", "A portrait", "--style", "cyberpunk", "--aspect-ratio", "9:16", "--quality", "3"]
        )
        assert args.style == "cyberpunk"
        assert args.aspect_ratio == "9:16"
        assert args.quality == 3

    @pytest.mark.parametrize(
        "argv",
        [
            ["generate", "x", "--quality", "11"],
            ["generate", "x", "--aspect-ratio", "2:1"],
            ["generate", "x", "--style", "cubist"],
            [],
        ],
    )
    def test_rejects_invalid(self, argv):
        with pytest.raises(SystemExit):
            build_parser().parse_args(argv)


class TestGalleryCommands:
    def test_empty_gallery(self, gallery_path, capsys):
        assert main(["--gallery", str(gallery_path), "gallery"]) == 0
        assert "Gallery is empty." in capsys.readouterr().out

    def test_list(self, gallery_path, capsys):
        _seed_gallery(gallery_path, "2", "1")
        assert main(["--gallery", str(gallery_path), "gallery"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["2", "1"]
        assert "Prompt 2" in lines[0]

    def test_delete(self, gallery_path):
        _seed_gallery(gallery_path, "2", "1")
        assert main(["--gallery", str(gallery_path), "delete", "2"]) == 0
        assert [r["id"] for r in json.loads(gallery_path.read_text())] == ["1"]

    def test_delete_missing(self, gallery_path, capsys):
        _seed_gallery(gallery_path, "1")
        assert main(["--gallery", str(gallery_path), "delete", "9"]) == 1
        assert "No image with id 9" in capsys.readouterr().err

    def test_download(self, gallery_path, temp_dir, capsys):
        _seed_gallery(gallery_path, "1")
        assert main(["--gallery", str(gallery_path), "download", "1", str(temp_dir)]) == 0
        assert (temp_dir / "avikonai-1.png").read_bytes() == PNG_BYTES
        assert "Download Complete" in capsys.readouterr().out
