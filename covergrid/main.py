"""FastAPI app factory."""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from covergrid import __version__
from covergrid.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.covergrid_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="CoverGrid",
        description="Square cover-art grids with gradient-backed captions, as PNG data URIs",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Fonts must be in place before the first surface is created
    from covergrid.render.fonts import register_fonts

    register_fonts(settings.fonts_dir)

    from covergrid.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()


def serve() -> None:
    """Run the API under uvicorn (console script ``covergrid-serve``)."""
    uvicorn.run(
        "covergrid.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.covergrid_log_level.lower(),
    )
