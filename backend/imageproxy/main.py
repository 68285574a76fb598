"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imageproxy.config import settings
from imageproxy.routing.registry import set_registry
from imageproxy.sources import load_registry

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.imageproxy_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="imageproxy",
        description="Image proxy request resolution: remote URL routing and transform options",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _load_sources()

    from imageproxy.api.router import api_router

    app.include_router(api_router)

    return app


def _load_sources() -> None:
    """Install the configured source registry, if a sources file is set."""
    if not settings.imageproxy_sources_file:
        logger.info("No sources file configured; remote URLs must be absolute")
        return
    set_registry(load_registry(settings.imageproxy_sources_file))


app = create_app()
