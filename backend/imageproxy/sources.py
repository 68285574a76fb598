"""Source configuration ingestion.

Configuration is a JSON object keyed by path prefix:

    {
        "/cdn/": {
            "base_url": "https://cdn.example.com/images/",
            "default_options": {"quality": 80, "format": "jpeg"}
        }
    }

Loading happens in two phases.  The document is first decoded into raw
models where ``base_url`` is still a string, then every entry is converted
explicitly, parsing the base URL.  One bad entry fails the whole load so a
registry is never built from part of a document.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter

from imageproxy.errors import SourceConfigError
from imageproxy.models.options import Options
from imageproxy.routing.registry import SourceConfiguration, SourceRegistry
from imageproxy.routing.urls import parse_url

logger = logging.getLogger(__name__)


class RawSourceConfiguration(BaseModel):
    base_url: str = Field(default="", description="Absolute base URL; empty for none")
    default_options: Options = Field(default_factory=Options)


_RAW_SOURCES = TypeAdapter(dict[str, RawSourceConfiguration])


def convert_source(prefix: str, raw: RawSourceConfiguration) -> SourceConfiguration:
    """Turn one decoded entry into a SourceConfiguration, raising SourceConfigError."""
    if not prefix:
        raise SourceConfigError(prefix, "prefix must not be empty")

    base_url = None
    if raw.base_url:
        try:
            base_url = parse_url(raw.base_url)
        except ValueError as e:
            raise SourceConfigError(prefix, f"cannot parse base_url {raw.base_url!r}: {e}") from e
        if not base_url.scheme:
            raise SourceConfigError(prefix, f"base_url {raw.base_url!r} is not absolute")

    return SourceConfiguration(base_url=base_url, default_options=raw.default_options)


def build_registry(raw_sources: Mapping[str, RawSourceConfiguration]) -> SourceRegistry:
    sources = {prefix: convert_source(prefix, raw) for prefix, raw in raw_sources.items()}
    return SourceRegistry(sources)


def registry_from_mapping(data: Mapping[str, Any]) -> SourceRegistry:
    """Build a registry from already-decoded JSON-like data."""
    return build_registry(_RAW_SOURCES.validate_python(data))


def registry_from_json(document: str | bytes) -> SourceRegistry:
    return build_registry(_RAW_SOURCES.validate_json(document))


def load_registry(path: str | Path) -> SourceRegistry:
    """Read a source configuration file and build a registry from it."""
    path = Path(path)
    registry = registry_from_json(path.read_bytes())
    logger.info("Loaded %d source(s) from %s", len(registry), path)
    return registry
