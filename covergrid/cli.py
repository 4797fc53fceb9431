"""CoverGrid command line — compose a grid from a JSON item list.

    covergrid items.json -o grid.png
    covergrid items.json --no-captions      # prints the data URI

``items.json`` holds a list of ``{"image": ..., "title": ..., "description": ...}``
objects. Relative image paths are resolved against the JSON file's folder.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from covergrid.config import settings
from covergrid.models.item import Item
from covergrid.render.composer import GridComposer
from covergrid.render.fonts import register_fonts
from covergrid.render.images import ImageDecodeError, ImageLoader

_REMOTE_PREFIXES = ("http://", "https://", "data:")


def load_items(path: Path) -> list[Item]:
    """Read and validate an item list, anchoring relative image paths at ``path``."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of items")

    items: list[Item] = []
    for entry in raw:
        item = Item.model_validate(entry)
        if isinstance(item.image, str) and not item.image.startswith(_REMOTE_PREFIXES):
            image_path = Path(item.image)
            if not image_path.is_absolute():
                item = item.model_copy(update={"image": str(path.parent / image_path)})
        items.append(item)
    return items


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="covergrid", description="Compose a square grid of cover images")
    parser.add_argument("items", type=Path, help="JSON file with the item list")
    parser.add_argument("-o", "--output", type=Path, help="Write a PNG here instead of printing the data URI")
    parser.add_argument("--no-captions", action="store_true", help="Skip gradients and caption text")
    parser.add_argument("--strict", action="store_true", help="Reject item counts that are not a perfect square")
    parser.add_argument("--fonts-dir", type=Path, default=settings.fonts_dir, help="Folder with the RobotoCondensed faces")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    register_fonts(args.fonts_dir)

    try:
        items = load_items(args.items)
        composer = GridComposer(
            items,
            not args.no_captions,
            loader=ImageLoader(timeout=settings.image_timeout_s),
            reject_non_square=args.strict or settings.reject_non_square,
            skip_failed_images=settings.skip_failed_images,
        )
        surface = asyncio.run(composer.render())
    except (OSError, ValueError, ImageDecodeError) as e:
        # Grid, JSON and item validation errors are all ValueErrors
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_bytes(surface.to_png())
        print(f"Saved: {args.output} ({composer.size}x{composer.size})")
    else:
        print(surface.encode())
    return 0


if __name__ == "__main__":
    sys.exit(main())
