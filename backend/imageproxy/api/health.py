"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from imageproxy.dependencies import get_source_registry
from imageproxy.models.responses import HealthResponse
from imageproxy.routing.registry import SourceRegistry

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(registry: SourceRegistry = Depends(get_source_registry)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        sources_registered=len(registry),
    )
