"""API response models."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    fonts_registered: int = 0


class GridResponse(BaseModel):
    image: str
    width: int
    height: int
    side: int
    items_drawn: int
    items_dropped: int = 0
    processing_time_ms: float = 0.0
