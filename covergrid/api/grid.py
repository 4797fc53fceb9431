"""POST /api/grid — compose a cover grid into a PNG data URI."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from covergrid.config import Settings
from covergrid.dependencies import get_settings
from covergrid.models.item import Item
from covergrid.models.requests import GridRequest
from covergrid.models.responses import GridResponse
from covergrid.render.composer import GridComposer, GridValidationError
from covergrid.render.images import ImageDecodeError, ImageLoader

logger = logging.getLogger(__name__)

router = APIRouter()

_REMOTE_PREFIXES = ("http://", "https://", "data:")


@router.post("/grid", response_model=GridResponse)
async def compose_grid(
    req: GridRequest,
    settings: Settings = Depends(get_settings),
) -> GridResponse:
    start = time.perf_counter()

    if not settings.allow_local_images:
        for i, it in enumerate(req.items):
            if not it.image.startswith(_REMOTE_PREFIXES):
                raise HTTPException(
                    status_code=422,
                    detail=f"items[{i}].image must be an http(s) URL or data URI",
                )

    reject_non_square = (
        settings.reject_non_square if req.reject_non_square is None else req.reject_non_square
    )
    items = [Item(**it.model_dump()) for it in req.items]

    try:
        composer = GridComposer(
            items,
            req.display_captions,
            loader=ImageLoader(timeout=settings.image_timeout_s),
            reject_non_square=reject_non_square,
            skip_failed_images=settings.skip_failed_images,
        )
    except GridValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        image = await composer.get_image()
    except ImageDecodeError as e:
        logger.warning("Grid render failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000

    return GridResponse(
        image=image,
        width=composer.size,
        height=composer.size,
        side=composer.side,
        items_drawn=composer.side * composer.side,
        items_dropped=composer.dropped,
        processing_time_ms=round(elapsed, 1),
    )
