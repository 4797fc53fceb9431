"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from covergrid import __version__
from covergrid.models.responses import HealthResponse
from covergrid.render.fonts import get_font_set

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        fonts_registered=get_font_set().count,
    )
