"""Image proxy request resolution: remote URL routing and transform options."""

from imageproxy.errors import MalformedURLError, SourceConfigError
from imageproxy.models.options import ImageFormat, Options
from imageproxy.request import InboundRequest, Request, new_request
from imageproxy.routing.registry import SourceConfiguration, SourceRegistry

__all__ = [
    "MalformedURLError",
    "SourceConfigError",
    "ImageFormat",
    "Options",
    "InboundRequest",
    "Request",
    "new_request",
    "SourceConfiguration",
    "SourceRegistry",
]
