"""CoverGrid rendering engine."""

from covergrid.render.composer import COVER_SIZE, Cell, GridComposer, GridValidationError, add_scalable_text
from covergrid.render.fonts import FontSpec, get_font_set, register_fonts
from covergrid.render.images import ImageDecodeError, ImageLoader
from covergrid.render.surface import CanvasSurface, CompositeMode

__all__ = [
    "COVER_SIZE",
    "Cell",
    "GridComposer",
    "GridValidationError",
    "add_scalable_text",
    "FontSpec",
    "get_font_set",
    "register_fonts",
    "ImageDecodeError",
    "ImageLoader",
    "CanvasSurface",
    "CompositeMode",
]
