"""Tests for the image-decode service."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from covergrid.render.images import ImageDecodeError, ImageLoader, describe_ref
from tests.helpers import png_bytes, png_data_uri

GREEN = (0, 200, 0)


def _load(ref, loader: ImageLoader | None = None):
    return asyncio.run((loader or ImageLoader()).load(ref))


def _mock_loader(handler) -> ImageLoader:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ImageLoader(client=client)


def test_loads_raw_bytes():
    img = _load(png_bytes(GREEN, (12, 8)))
    assert img.size == (12, 8)
    assert img.mode == "RGBA"
    assert img.getpixel((0, 0)) == GREEN + (255,)


def test_loads_data_uri():
    img = _load(png_data_uri(GREEN, (5, 5)))
    assert img.size == (5, 5)


def test_loads_local_path(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(png_bytes(GREEN, (9, 9)))
    assert _load(str(path)).size == (9, 9)


def test_loads_url():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/covers/1.png"
        return httpx.Response(200, content=png_bytes(GREEN, (16, 16)))

    img = _load("https://example.com/covers/1.png", _mock_loader(handler))
    assert img.size == (16, 16)


def test_http_error_status():
    loader = _mock_loader(lambda request: httpx.Response(404))
    with pytest.raises(ImageDecodeError, match="HTTP 404"):
        _load("https://example.com/missing.png", loader)


def test_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ImageDecodeError):
        _load("http://example.com/a.png", _mock_loader(handler))


def test_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError) as exc:
        _load(str(tmp_path / "nope.png"))
    assert exc.value.ref == str(tmp_path / "nope.png")


def test_not_an_image():
    with pytest.raises(ImageDecodeError):
        _load(b"definitely not a png")


def test_bad_data_uri_payload():
    with pytest.raises(ImageDecodeError):
        _load("data:image/png;base64,@@@not-base64@@@")


def test_non_base64_data_uri():
    with pytest.raises(ImageDecodeError, match="base64"):
        _load("data:text/plain,hello")


def test_describe_ref_hides_payloads():
    assert describe_ref(b"12345") == "<5 bytes>"
    assert describe_ref(png_data_uri(GREEN)) == "data:image/png;base64,..."
    assert describe_ref("/covers/a.png") == "/covers/a.png"
