"""Grid composer — lays items out in a square grid and drives the surface.

Drawing is bottom-up: captions (gradient + text) go down first with
source-over, then every cover is slid underneath with destination-over.
Captions therefore always sit above the covers without manual z-ordering,
and cover decodes can complete in any order.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from covergrid.models.item import Item
from covergrid.render.fonts import FAMILY, FontSpec
from covergrid.render.images import ImageDecodeError, ImageLoader, describe_ref
from covergrid.render.surface import RGBA, CanvasSurface, CompositeMode, GradientStop

logger = logging.getLogger(__name__)

# ── Layout constants ──

COVER_SIZE = 250
TEXT_PADDING = 5
MIN_FONT_SIZE = 2

TITLE_FONT = FontSpec(FAMILY, "bold", 16)
TITLE_COLOR: RGBA = (255, 255, 255, 255)

# Regular face; Pillow has no synthetic bold
DESCRIPTION_FONT = FontSpec(FAMILY, "regular", 14)
DESCRIPTION_COLOR: RGBA = (240, 240, 240, 255)
# Description baseline sits this far below the title's line box
DESCRIPTION_GAP = 20

# Top-anchored fade used as a legibility backdrop for captions
GRADIENT_STOPS: tuple[GradientStop, ...] = (
    (0.0, (0, 0, 0, 128)),
    (0.1, (0, 0, 0, 102)),
    (0.28, (0, 0, 0, 0)),
)


class GridValidationError(ValueError):
    """The item list cannot be laid out as a grid."""


@dataclass(frozen=True)
class Cell:
    index: int
    row: int
    col: int

    @property
    def x(self) -> int:
        return self.col * COVER_SIZE

    @property
    def y(self) -> int:
        return self.row * COVER_SIZE

    @property
    def size(self) -> int:
        return COVER_SIZE


def grid_side(item_count: int) -> int:
    """Cells per row/column: floor(sqrt(item_count))."""
    return math.isqrt(item_count)


def add_scalable_text(
    surface: CanvasSurface,
    text: str,
    x: int,
    y: int,
    max_width: float,
    font: FontSpec,
    color: RGBA,
) -> int:
    """Draw ``text`` shrunk one size at a time until it fits ``max_width``.

    Never goes below MIN_FONT_SIZE; text that still does not fit is drawn
    overflowing. Returns the size used.
    """
    size = font.size
    width = surface.measure_text(text, font)
    while width > max_width and size > MIN_FONT_SIZE:
        size -= 1
        width = surface.measure_text(text, font.with_size(size))

    surface.fill_text(text, x, y, font.with_size(size), color)
    return size


class GridComposer:
    """Composes ``side × side`` items into a single PNG."""

    def __init__(
        self,
        items: Sequence[Item],
        display_captions: bool = True,
        *,
        loader: ImageLoader | None = None,
        reject_non_square: bool = False,
        skip_failed_images: bool = False,
    ) -> None:
        if not items:
            raise GridValidationError("At least one item is required")

        self.side = grid_side(len(items))
        self.dropped = len(items) - self.side * self.side
        if self.dropped and reject_non_square:
            raise GridValidationError(
                f"{len(items)} items do not form a square grid "
                f"(nearest is {self.side}x{self.side})"
            )

        self.items = tuple(items)
        self.display_captions = display_captions
        self.loader = loader or ImageLoader()
        self.skip_failed_images = skip_failed_images

    @property
    def size(self) -> int:
        """Surface width and height in pixels."""
        return self.side * COVER_SIZE

    @property
    def cells(self) -> list[Cell]:
        """Row-major cells, one per drawn item."""
        return [
            Cell(index=row * self.side + col, row=row, col=col)
            for row in range(self.side)
            for col in range(self.side)
        ]

    async def get_image(self) -> str:
        """Render and return a ``data:image/png;base64,`` URI."""
        surface = await self.render()
        return await asyncio.to_thread(surface.encode)

    async def render(self) -> CanvasSurface:
        """Compose the grid. Raster work runs in worker threads, off the event loop."""
        start = time.perf_counter()
        if self.dropped:
            logger.warning(
                "%d items do not fit a %dx%d grid; ignoring the last %d",
                len(self.items),
                self.side,
                self.side,
                self.dropped,
            )

        cells = self.cells
        surface = CanvasSurface(self.size, self.size)
        await asyncio.to_thread(self._draw_captions, surface, cells)
        images = await self._load_all(cells)
        await asyncio.to_thread(self._draw_covers, surface, cells, images)

        logger.info(
            "Rendered %dx%d grid (%dpx) in %.0fms",
            self.side,
            self.side,
            self.size,
            (time.perf_counter() - start) * 1000,
        )
        return surface

    # ── Captions pass ──

    def _draw_captions(self, surface: CanvasSurface, cells: list[Cell]) -> None:
        if not self.display_captions:
            return

        for cell in cells:
            item = self.items[cell.index]
            surface.composite_mode = CompositeMode.SOURCE_OVER
            surface.fill_linear_gradient(cell.x, cell.y, cell.size, cell.size, GRADIENT_STOPS)
            if item.title:
                self._add_title(surface, item.title, cell)
            if item.description:
                self._add_description(surface, item.description, cell)

    def _add_title(self, surface: CanvasSurface, text: str, cell: Cell) -> None:
        add_scalable_text(
            surface,
            text,
            cell.x + TEXT_PADDING,
            cell.y + TEXT_PADDING + TITLE_FONT.size,
            cell.size - 2 * TEXT_PADDING,
            TITLE_FONT,
            TITLE_COLOR,
        )

    def _add_description(self, surface: CanvasSurface, text: str, cell: Cell) -> None:
        add_scalable_text(
            surface,
            text,
            cell.x + TEXT_PADDING,
            cell.y + TEXT_PADDING + DESCRIPTION_GAP + DESCRIPTION_FONT.size,
            cell.size - 2 * TEXT_PADDING,
            DESCRIPTION_FONT,
            DESCRIPTION_COLOR,
        )

    # ── Images pass ──

    async def _load_all(self, cells: list[Cell]) -> list[Image.Image | None]:
        """Decode every cell's cover concurrently; the first failure cancels the rest."""
        tasks = [asyncio.ensure_future(self._load(self.items[cell.index])) for cell in cells]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Collect the remaining outcomes so none is left unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _draw_covers(
        self,
        surface: CanvasSurface,
        cells: list[Cell],
        images: list[Image.Image | None],
    ) -> None:
        for cell, image in zip(cells, images):
            if image is None:
                continue
            # Mode is surface-wide: set it right before each blit
            surface.composite_mode = CompositeMode.DESTINATION_OVER
            surface.draw_image(image, cell.x, cell.y, cell.size, cell.size)

    async def _load(self, item: Item) -> Image.Image | None:
        try:
            return await self.loader.load(item.image)
        except ImageDecodeError as e:
            if not self.skip_failed_images:
                raise
            logger.warning("Leaving cell blank for %s: %s", describe_ref(item.image), e.reason)
            return None
