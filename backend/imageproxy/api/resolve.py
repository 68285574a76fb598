"""GET /api/resolve/{path}: show what a proxy request would fetch and how.

Nothing is fetched; this exposes the resolved remote URL and Options that
the image pipeline would be handed for the same path and query string.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi import Request as HTTPRequest

from imageproxy.config import Settings
from imageproxy.dependencies import get_settings, get_source_registry
from imageproxy.errors import MalformedURLError
from imageproxy.models.responses import ResolveResponse
from imageproxy.request import InboundRequest, new_request
from imageproxy.routing.registry import SourceRegistry

router = APIRouter()

_MOUNT = "/api/resolve"


def _inbound_from(request: HTTPRequest) -> InboundRequest:
    """Rebuild the escaped proxy path as if the request had hit the proxy root."""
    raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
    # Some servers leave the query string on raw_path
    path = raw_path.split(b"?", 1)[0].decode("latin-1")
    if path.startswith(_MOUNT):
        path = path[len(_MOUNT):]
    query = request.scope.get("query_string", b"").decode("latin-1")
    return InboundRequest(path=path or "/", raw_query=query)


@router.get("/resolve/{remote:path}", response_model=ResolveResponse)
async def resolve(
    request: HTTPRequest,
    registry: SourceRegistry = Depends(get_source_registry),
    settings: Settings = Depends(get_settings),
) -> ResolveResponse:
    inbound = _inbound_from(request)
    try:
        proxied = new_request(inbound, registry, strip_options=settings.imageproxy_strip_option_params)
    except MalformedURLError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ResolveResponse(
        url=proxied.url,
        options=proxied.options,
        options_string=proxied.options.encode(),
        transform=proxied.options.has_transform,
    )
