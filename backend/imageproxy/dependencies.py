"""FastAPI dependency injection."""

from __future__ import annotations

from imageproxy.config import settings
from imageproxy.routing.registry import SourceRegistry, get_registry


def get_settings():
    return settings


def get_source_registry() -> SourceRegistry:
    # Looked up per request so a swapped registry takes effect immediately
    return get_registry()
