"""Shared test fixtures."""

from __future__ import annotations

import pytest

from covergrid.config import settings
from covergrid.render.fonts import register_fonts
from tests.helpers import FakeLoader, RecordingSurface


@pytest.fixture(scope="session", autouse=True)
def fonts():
    return register_fonts(settings.fonts_dir)


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def recording_surface(monkeypatch) -> type[RecordingSurface]:
    RecordingSurface.calls = []
    RecordingSurface.texts = []
    monkeypatch.setattr("covergrid.render.composer.CanvasSurface", RecordingSurface)
    return RecordingSurface
