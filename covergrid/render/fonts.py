"""Font registry — process-wide font faces keyed by (family, weight).

Usage:
    register_fonts(settings.fonts_dir)      # once, at process start
    font = get_font(FontSpec("RobotoCondensed", "bold", 16))

Faces are registered once before any surface is created and never change
afterwards. Repeating a registration is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

FAMILY = "RobotoCondensed"

# (family, weight) → file name inside the fonts directory
_FACE_FILES: dict[tuple[str, str], str] = {
    (FAMILY, "bold"): "RobotoCondensed-Bold.ttf",
    (FAMILY, "light"): "RobotoCondensed-Light.ttf",
    (FAMILY, "regular"): "RobotoCondensed-Regular.ttf",
}


@dataclass(frozen=True)
class FontSpec:
    """Structured font descriptor passed to measure/fill operations."""

    family: str
    weight: str
    size: int

    def with_size(self, size: int) -> FontSpec:
        return FontSpec(self.family, self.weight, size)


class FontSet:
    """Registry of font faces. ``None`` as path means Pillow's bundled face."""

    def __init__(self) -> None:
        self._faces: dict[tuple[str, str], Path | None] = {}

    def register(self, family: str, weight: str, path: Path | None) -> None:
        """Register a face. A real file upgrades a default-face placeholder;
        a placeholder never replaces a real file."""
        key = (family, weight)
        if key in self._faces:
            current = self._faces[key]
            if current == path or path is None:
                return
            if current is not None:
                raise ValueError(f"Font {family}/{weight} already registered from {current}")
            logger.info("Font %s/%s upgraded from default face to %s", family, weight, path)
        self._faces[key] = path
        logger.debug("Registered font %s/%s (%s)", family, weight, path or "default")

    def resolve(self, family: str, weight: str) -> Path | None:
        """Face path for (family, weight), falling back to the family's regular face."""
        if (family, weight) in self._faces:
            return self._faces[(family, weight)]
        return self._faces.get((family, "regular"))

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._faces

    @property
    def count(self) -> int:
        return len(self._faces)


# Module-level singleton
_font_set = FontSet()


def get_font_set() -> FontSet:
    return _font_set


def register_fonts(fonts_dir: Path) -> FontSet:
    """Register the bold, light and regular condensed faces from ``fonts_dir``.

    A missing file is logged and replaced by Pillow's bundled scalable face,
    so rendering still works on hosts without the font assets.
    """
    fonts_dir = Path(fonts_dir)
    for (family, weight), filename in _FACE_FILES.items():
        path = fonts_dir / filename
        if not path.is_file():
            if (family, weight) not in _font_set:
                logger.warning("Font file %s not found, using default face", path)
            path = None
        _font_set.register(family, weight, path)
    return _font_set


@lru_cache(maxsize=128)
def _load(path: Path | None, size: int) -> ImageFont.FreeTypeFont:
    if path is None:
        return ImageFont.load_default(size=size)
    return ImageFont.truetype(str(path), size)


def get_font(spec: FontSpec) -> ImageFont.FreeTypeFont:
    """Resolve a FontSpec to a sized Pillow font."""
    return _load(_font_set.resolve(spec.family, spec.weight), spec.size)
