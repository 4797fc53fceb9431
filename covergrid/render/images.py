"""Image-decode service — resolves an image reference to an RGBA raster.

Accepted references:
- raw ``bytes``
- ``data:`` URIs with a base64 payload
- ``http://`` / ``https://`` URLs
- local file paths
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from pathlib import Path

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

ImageRef = str | bytes


class ImageDecodeError(RuntimeError):
    """An image reference could not be fetched or decoded."""

    def __init__(self, ref: ImageRef, reason: str) -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"Could not load image {describe_ref(ref)}: {reason}")


def describe_ref(ref: ImageRef) -> str:
    """Short printable form of a reference (never dumps payloads)."""
    if isinstance(ref, bytes):
        return f"<{len(ref)} bytes>"
    if ref.startswith("data:"):
        return ref[: ref.find(",") + 1] + "..." if "," in ref else "data:..."
    return ref


def _decode_bytes(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("RGBA")


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep or ";base64" not in header:
        raise ValueError("only base64 data URIs are supported")
    return base64.b64decode(payload, validate=True)


class ImageLoader:
    """Loads images for the grid. Safe to call concurrently."""

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self.timeout = timeout
        self._client = client

    async def load(self, ref: ImageRef) -> Image.Image:
        try:
            if isinstance(ref, bytes):
                data = ref
            elif ref.startswith("data:"):
                data = _decode_data_uri(ref)
            elif ref.startswith(("http://", "https://")):
                data = await self._fetch(ref)
            else:
                data = await asyncio.to_thread(Path(ref).read_bytes)
            image = await asyncio.to_thread(_decode_bytes, data)
        except httpx.HTTPStatusError as e:
            raise ImageDecodeError(ref, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(ref, str(e) or type(e).__name__) from e

        logger.debug("Loaded %s (%dx%d)", describe_ref(ref), image.width, image.height)
        return image

    async def _fetch(self, url: str) -> bytes:
        if self._client is not None:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.content
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as c:
            resp = await c.get(url)
            resp.raise_for_status()
            return resp.content
