"""API response models."""

from __future__ import annotations

from pydantic import BaseModel

from imageproxy.models.options import Options


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    sources_registered: int = 0


class ResolveResponse(BaseModel):
    url: str
    options: Options
    options_string: str
    transform: bool = False
