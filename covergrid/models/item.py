"""Grid item model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """One cover: an image reference plus optional caption text."""

    model_config = ConfigDict(frozen=True)

    image: str | bytes = Field(..., description="Local path, http(s) URL, data URI or raw bytes")
    title: str = Field(default="", description="Caption title, drawn in bold white")
    description: str | None = Field(default=None, description="Secondary caption line")
