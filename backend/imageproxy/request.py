"""Request assembly: inbound path + query -> remote URL + Options.

Inbound paths look like ``/{prefix?}/{options?}/{remote_url}``:

    /100x200/http://example.com/image.jpg
    /100x200,r90/http://example.com/image.jpg?foo=bar
    //http://example.com/image.jpg
    /http://example.com/image.jpg
    /cdn/images/image.jpg            (with "/cdn/" registered with a base URL)

The remote URL must end up absolute with an http or https scheme, must not
be URL-encoded by the caller and keeps whatever query string the inbound
request carried.  Options come from the matched source's defaults, then any
legacy option segment in the path, then the query parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from imageproxy.errors import MalformedURLError
from imageproxy.models.options import Options
from imageproxy.parsing.legacy import parse_legacy_options
from imageproxy.parsing.query import decode_query, parse_form_values, strip_option_params
from imageproxy.routing.registry import SourceRegistry, get_registry
from imageproxy.routing.urls import extract_remote_url

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class InboundRequest:
    """The parts of an incoming HTTP request that resolution looks at."""

    # Escaped path, including the leading slash
    path: str
    raw_query: str = ""

    @classmethod
    def from_url(cls, url: str) -> InboundRequest:
        """Build from a full request URL such as ``http://localhost/1x2/http://...``."""
        parts = urlsplit(url)
        return cls(path=parts.path or "/", raw_query=parts.query)

    @property
    def uri(self) -> str:
        return f"{self.path}?{self.raw_query}" if self.raw_query else self.path


@dataclass(frozen=True)
class Request:
    """A resolved proxy request: what to fetch and how to transform it."""

    url: str
    options: Options
    # Read-only reference for downstream collaborators
    original: Any = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        """The remote URL with the canonical options encoding as its fragment."""
        return urlunsplit(urlsplit(self.url)._replace(fragment=self.options.encode()))


def new_request(
    inbound: InboundRequest,
    registry: SourceRegistry | None = None,
    *,
    strip_options: bool = False,
) -> Request:
    """Resolve ``inbound`` into a Request.

    Raises MalformedURLError when no usable remote URL can be found or the
    query string cannot be decoded.  Individual option values never raise.
    With ``strip_options`` the option keys are removed from the query string
    forwarded to the remote URL.
    """
    if registry is None:
        registry = get_registry()
    origin = inbound.uri

    match = registry.best_match(inbound.path)
    config = match.config if match is not None else None

    try:
        extracted = extract_remote_url(
            inbound.path,
            match.prefix if match is not None else "",
            config.base_url if config is not None else None,
        )
    except ValueError as e:
        raise MalformedURLError(f"unable to parse remote URL: {e}", origin) from e

    url = extracted.url
    if not url.scheme:
        raise MalformedURLError("must provide absolute remote URL", origin)
    if url.scheme not in _ALLOWED_SCHEMES:
        raise MalformedURLError("remote URL must have http or https scheme", origin)

    options = config.default_options if config is not None else Options()
    if extracted.options_token is not None:
        options = parse_legacy_options(extracted.options_token, options)

    form = decode_query(inbound.raw_query, origin)
    options = parse_form_values(form, options)

    query = strip_option_params(inbound.raw_query, origin) if strip_options else inbound.raw_query
    remote = urlunsplit(url._replace(query=query))

    logger.debug("Resolved %s -> %s [%s]", origin, remote, options)
    return Request(url=remote, options=options, original=inbound)
