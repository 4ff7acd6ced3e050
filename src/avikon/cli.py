"""Command line interface for AvikonAI.

Subcommands
-----------
serve
    Run the generation server (uvicorn).
status
    Report whether the server has a usable Gemini key.
generate
    Generate an image and save it to the local gallery.
gallery
    List the images in the local gallery.
download
    Write a gallery image to a file.
delete
    Remove an image from the local gallery.

Usage
-----
::

    avikon serve
    avikon generate "Portrait of a hiker at sunrise" --style vintage --quality 9
    avikon gallery
    avikon download 1760875200123 ./exports
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from avikon import __version__
from avikon.client import (
    AvikonClient,
    EditorBridge,
    GenerationSession,
    GenerationSettings,
    LocalGalleryStore,
    NotificationCenter,
    ObjectURLRegistry,
)
from avikon.core.config import AvikonConfig, config
from avikon.core.models import ASPECT_RATIOS
from avikon.core.styles import STYLE_PRESETS, get_style

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="avikon", description="AI profile picture generator")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--url", type=str, default=None, help="Base URL of the generation server")
    parser.add_argument("--gallery", type=Path, default=None, help="Path of the gallery JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the generation server")
    sub.add_parser("status", help="Check server configuration")

    gen = sub.add_parser("generate", help="Generate an image")
    gen.add_argument("prompt", type=str, help="Description of the image")
    gen.add_argument(
        "--style",
        choices=[preset.id for preset in STYLE_PRESETS],
        default=STYLE_PRESETS[0].id,
        help="Style preset",
    )
    gen.add_argument("--aspect-ratio", choices=ASPECT_RATIOS, default="1:1", help="Aspect ratio")
    gen.add_argument("--quality", type=int, choices=range(1, 11), default=8, help="Quality 1-10")
    gen.add_argument("--negative", type=str, default="", help="Things to avoid")
    gen.add_argument("--reference", type=Path, default=None, help="Reference image file")
    gen.add_argument("--out", type=Path, default=None, help="Also write the image here")

    sub.add_parser("gallery", help="List gallery images")

    dl = sub.add_parser("download", help="Write a gallery image to disk")
    dl.add_argument("image_id", type=str)
    dl.add_argument("destination", type=Path)

    rm = sub.add_parser("delete", help="Remove a gallery image")
    rm.add_argument("image_id", type=str)

    return parser


def build_session(cfg: AvikonConfig, base_url: str, gallery_path: Path) -> GenerationSession:
    blobs = ObjectURLRegistry()
    return GenerationSession(
        AvikonClient(base_url),
        LocalGalleryStore(gallery_path, blobs=blobs),
        blobs=blobs,
        notifications=NotificationCenter(),
        editor=EditorBridge(cfg.pixo_api_key, cfg.pixo_script_url),
    )


def _print_notifications(session: GenerationSession) -> None:
    for notification in session.notifications.drain():
        stream = sys.stderr if notification.type == "error" else sys.stdout
        line = notification.title
        if notification.message:
            line += f": {notification.message}"
        print(line, file=stream)


async def _run(args: argparse.Namespace, cfg: AvikonConfig) -> int:
    base_url = args.url or cfg.api_base_url
    gallery_path = args.gallery or cfg.gallery_path
    session = build_session(cfg, base_url, gallery_path)

    async with session:
        try:
            if args.command == "status":
                status = await session.initialize()
                print(f"Server:            {base_url}")
                print(f"Gemini configured: {'yes' if status.configured else 'no'}")
                if status.error:
                    print(f"Error:             {status.error}")
                return 0 if status.configured else 1

            if args.command == "generate":
                await session.initialize()
                settings = GenerationSettings(
                    quality=args.quality,
                    aspect_ratio=args.aspect_ratio,
                    negative_prompt=args.negative,
                )
                image = await session.generate(
                    args.prompt,
                    get_style(args.style),
                    settings,
                    reference_image=args.reference,
                )
                if image is not None:
                    print(image.id)
                    if args.out is not None:
                        await session.download(image, args.out)
                _print_notifications(session)
                return 0 if image is not None else 1

            images = session.load_gallery()

            if args.command == "gallery":
                if not images:
                    print("Gallery is empty.")
                for image in images:
                    print(f"{image.id}  {image.timestamp:%Y-%m-%d %H:%M}  {image.style:<18}  {image.prompt}")
                return 0

            if args.command == "download":
                image = session.find(args.image_id)
                if image is None:
                    print(f"No image with id {args.image_id}", file=sys.stderr)
                    return 1
                target = await session.download(image, args.destination)
                _print_notifications(session)
                if target is not None:
                    print(target)
                return 0 if target is not None else 1

            if args.command == "delete":
                if not session.delete(args.image_id):
                    print(f"No image with id {args.image_id}", file=sys.stderr)
                    return 1
                return 0
        finally:
            await session.client.aclose()

    return 2


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``avikon`` console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        from avikon.api.main import main as serve

        serve()
        return 0

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
