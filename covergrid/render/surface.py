"""Canvas surface — fixed-size RGBA raster with 2D drawing primitives.

Every primitive is rendered onto its own transparent layer and then blended
into the buffer according to the surface-wide composite mode:

- SOURCE_OVER: the layer lands on top of existing pixels
- DESTINATION_OVER: the layer slides underneath existing pixels
"""

from __future__ import annotations

import base64
import enum
import io
import logging
from collections.abc import Sequence

import numpy as np
from PIL import Image, ImageDraw

from covergrid.render.fonts import FontSpec, get_font

logger = logging.getLogger(__name__)

PNG_PREFIX = "data:image/png;base64,"

RGBA = tuple[int, int, int, int]
GradientStop = tuple[float, RGBA]


class CompositeMode(enum.Enum):
    SOURCE_OVER = "source-over"
    DESTINATION_OVER = "destination-over"


class CanvasSurface:
    """Owns the pixel buffer and exposes drawing primitives plus encoding."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.composite_mode = CompositeMode.SOURCE_OVER
        self._image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    @property
    def image(self) -> Image.Image:
        """Copy of the current buffer."""
        return self._image.copy()

    # ── Primitives ──

    def fill_linear_gradient(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        stops: Sequence[GradientStop],
    ) -> None:
        """Fill a rectangle with a top-to-bottom gradient."""
        if not stops:
            raise ValueError("Gradient needs at least one stop")
        offsets = [float(o) for o, _ in stops]
        if any(o < 0.0 or o > 1.0 for o in offsets):
            raise ValueError(f"Gradient offsets must lie in [0, 1]: {offsets}")
        if any(b < a for a, b in zip(offsets, offsets[1:])):
            raise ValueError(f"Gradient offsets must be non-decreasing: {offsets}")
        if w <= 0 or h <= 0:
            return

        colors = np.array([c for _, c in stops], dtype=np.float64)
        # Sample each row at its pixel centre
        t = (np.arange(h, dtype=np.float64) + 0.5) / h
        column = np.stack(
            [np.interp(t, offsets, colors[:, ch]) for ch in range(4)], axis=-1
        )
        pixels = np.rint(column).astype(np.uint8)
        layer = Image.fromarray(np.ascontiguousarray(np.broadcast_to(pixels[:, None, :], (h, w, 4))))
        self._blend(layer, x, y)

    def measure_text(self, text: str, font: FontSpec) -> float:
        """Rendered advance width of ``text`` in pixels."""
        return get_font(font).getlength(text)

    def fill_text(self, text: str, x: int, y: int, font: FontSpec, color: RGBA) -> None:
        """Draw ``text`` with its left baseline at (x, y)."""
        if not text:
            return
        face = get_font(font)
        left, top, right, bottom = face.getbbox(text, anchor="ls")
        if right <= left or bottom <= top:
            return
        layer = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text((-left, -top), text, font=face, fill=color, anchor="ls")
        self._blend(layer, x + left, y + top)

    def draw_image(self, image: Image.Image, x: int, y: int, w: int, h: int) -> None:
        """Blit ``image`` scaled to (w, h) at (x, y)."""
        if w <= 0 or h <= 0:
            return
        layer = image.convert("RGBA")
        if layer.size != (w, h):
            layer = layer.resize((w, h), Image.LANCZOS)
        self._blend(layer, x, y)

    # ── Encoding ──

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self._image.save(buf, format="PNG", optimize=True)
        return buf.getvalue()

    def encode(self) -> str:
        """Serialize the buffer as a ``data:image/png;base64,`` URI."""
        png = self.to_png()
        logger.debug("Encoded %dx%d surface to %d PNG bytes", self.width, self.height, len(png))
        return PNG_PREFIX + base64.b64encode(png).decode("ascii")

    # ── Internals ──

    def _blend(self, layer: Image.Image, x: int, y: int) -> None:
        """Composite ``layer`` at (x, y), clipped to the surface."""
        left, top = max(x, 0), max(y, 0)
        right = min(x + layer.width, self.width)
        bottom = min(y + layer.height, self.height)
        if right <= left or bottom <= top:
            return

        src = layer.crop((left - x, top - y, right - x, bottom - y))
        dst = self._image.crop((left, top, right, bottom))
        if self.composite_mode is CompositeMode.SOURCE_OVER:
            out = Image.alpha_composite(dst, src)
        else:
            out = Image.alpha_composite(src, dst)
        self._image.paste(out, (left, top))
