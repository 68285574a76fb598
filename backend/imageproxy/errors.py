"""Error types raised while resolving proxy requests and loading sources."""

from __future__ import annotations


class MalformedURLError(ValueError):
    """The inbound request does not name a usable remote URL.

    ``url`` is the offending original path (or URL), ``message`` a
    human-readable reason.
    """

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message, url)
        self.message = message
        self.url = url

    def __str__(self) -> str:
        return f'malformed URL "{self.url}": {self.message}'


class SourceConfigError(ValueError):
    """A source configuration entry could not be converted at load time."""

    def __init__(self, prefix: str, reason: str) -> None:
        super().__init__(prefix, reason)
        self.prefix = prefix
        self.reason = reason

    def __str__(self) -> str:
        return f"invalid source configuration for prefix {self.prefix!r}: {self.reason}"
