"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

# Bundled assets live next to the package: covergrid/assets/fonts/*.ttf
_DEFAULT_FONTS_DIR = Path(__file__).resolve().parent / "assets" / "fonts"


class Settings(BaseSettings):
    covergrid_env: str = "development"
    covergrid_log_level: str = "info"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Fonts
    fonts_dir: Path = _DEFAULT_FONTS_DIR

    # Image decoding
    image_timeout_s: float = 10.0
    # Let API callers reference files on the server's disk
    allow_local_images: bool = False
    skip_failed_images: bool = False

    # Layout
    reject_non_square: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
