"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GridItemRequest(BaseModel):
    image: str = Field(..., description="Local path, http(s) URL or base64 data URI")
    title: str = Field(default="", description="Caption title")
    description: str | None = Field(default=None, description="Caption description")


class GridRequest(BaseModel):
    items: list[GridItemRequest] = Field(..., description="Covers in row-major order")
    display_captions: bool = Field(default=True, description="Draw gradient and caption text")
    reject_non_square: bool | None = Field(
        default=None,
        description="Reject item counts that are not a perfect square (defaults to server setting)",
    )
