"""Image builders, fakes and spies shared by the test suite."""

from __future__ import annotations

import base64
import io

from PIL import Image

from covergrid.models.item import Item
from covergrid.render.images import ImageDecodeError
from covergrid.render.surface import CanvasSurface


# Solid colours handed out to grid cells, row-major
PALETTE = [
    (230, 25, 75),
    (60, 180, 75),
    (67, 99, 216),
    (245, 130, 49),
    (145, 30, 180),
    (66, 212, 244),
    (240, 50, 230),
    (191, 239, 69),
    (250, 190, 212),
]


def png_bytes(color: tuple[int, int, int], size: tuple[int, int] = (40, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def png_data_uri(color: tuple[int, int, int], size: tuple[int, int] = (40, 40)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(color, size)).decode("ascii")


def decode_data_uri(uri: str) -> Image.Image:
    assert uri.startswith("data:image/png;base64,")
    data = base64.b64decode(uri.split(",", 1)[1])
    img = Image.open(io.BytesIO(data))
    assert img.format == "PNG"
    return img


class FakeLoader:
    """Image loader stand-in: ``ref`` strings look like ``cover-<n>``."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.loaded: list[str] = []
        self.failing = failing or set()

    async def load(self, ref):
        self.loaded.append(ref)
        if ref in self.failing:
            raise ImageDecodeError(ref, "broken")
        n = int(ref.split("-")[1])
        return Image.new("RGBA", (60, 60), PALETTE[n % len(PALETTE)] + (255,))


class RecordingSurface(CanvasSurface):
    """CanvasSurface that logs every drawing call with the active composite mode."""

    calls: list[tuple[str, object]] = []
    # (text, FontSpec) for every fill_text call
    texts: list[tuple[str, object]] = []

    def fill_linear_gradient(self, *args, **kwargs):
        RecordingSurface.calls.append(("gradient", self.composite_mode))
        return super().fill_linear_gradient(*args, **kwargs)

    def fill_text(self, text, x, y, font, color):
        RecordingSurface.calls.append(("text", self.composite_mode))
        RecordingSurface.texts.append((text, font))
        return super().fill_text(text, x, y, font, color)

    def draw_image(self, *args, **kwargs):
        RecordingSurface.calls.append(("image", self.composite_mode))
        return super().draw_image(*args, **kwargs)


def make_items(n: int, with_captions: bool = True) -> list[Item]:
    return [
        Item(
            image=f"cover-{i}",
            title=f"Album {i}" if with_captions else "",
            description=f"Artist {i}" if with_captions else None,
        )
        for i in range(n)
    ]


