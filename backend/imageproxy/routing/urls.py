"""Remote URL extraction from an inbound request path.

After the matched source prefix is removed, the rest of the path is either
``{remote_url}`` or ``{options}/{remote_url}``.  Path-cleaning layers between
the client and us tend to collapse the ``//`` after the scheme, so
``http:/example.com`` and ``http:///example.com`` are repaired to
``http://example.com`` before parsing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import SplitResult, urljoin, urlsplit

logger = logging.getLogger(__name__)

_MANGLED_SCHEME_RE = re.compile(r"^(https?):/+([^/])")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class ExtractedURL:
    url: SplitResult
    # Legacy option segment preceding the URL, None when the path had none
    options_token: str | None = None


def repair_scheme_slashes(text: str) -> str:
    """Collapse any run of slashes after a leading http(s) scheme to exactly two."""
    return _MANGLED_SCHEME_RE.sub(r"\1://\2", text, count=1)


def parse_url(text: str) -> SplitResult:
    """Parse ``text`` as a URL reference, raising ValueError if it is not one.

    Beyond what ``urlsplit`` checks, this rejects control characters, broken
    percent escapes, an empty scheme before ``:`` and non-numeric ports.
    """
    if _CONTROL_RE.search(text):
        raise ValueError("invalid control character in URL")
    bad = _BAD_ESCAPE_RE.search(text)
    if bad is not None:
        raise ValueError(f"invalid URL escape {text[bad.start():bad.start() + 3]!r}")
    if text.startswith(":"):
        raise ValueError("missing protocol scheme")
    parts = urlsplit(text)
    # Accessing .port validates it
    parts.port
    return parts


def parse_mangled_url(text: str) -> SplitResult:
    return parse_url(repair_scheme_slashes(text))


def resolve_reference(base: SplitResult, ref: SplitResult) -> SplitResult:
    """Resolve ``ref`` against ``base``; an absolute ``ref`` comes back as is."""
    if ref.scheme:
        return ref
    return urlsplit(urljoin(base.geturl(), ref.geturl()))


def strip_prefix(escaped_path: str, prefix: str) -> str:
    """Remove ``prefix`` (trailing slashes ignored) and one leading slash."""
    stripped = prefix.rstrip("/")
    remainder = escaped_path[len(stripped):] if escaped_path.startswith(stripped) else escaped_path
    if remainder.startswith("/"):
        remainder = remainder[1:]
    return remainder


def extract_remote_url(
    escaped_path: str,
    prefix: str = "",
    base_url: SplitResult | None = None,
) -> ExtractedURL:
    """Pull the remote URL (and any legacy option segment) out of a request path.

    Without a base URL, a remainder that is not itself an absolute URL is
    split at its first slash into an option segment and the URL.  With a base
    URL the split only happens when what follows the slash is absolute;
    otherwise the whole remainder is a reference resolved against the base.

    The result may still be relative; callers decide whether that is an
    error.  Raises ValueError when the URL cannot be parsed at all.
    """
    remainder = strip_prefix(escaped_path, prefix)

    error: ValueError | None = None
    url: SplitResult | None = None
    try:
        url = parse_mangled_url(remainder)
    except ValueError as e:
        error = e

    if url is not None and url.scheme:
        return ExtractedURL(url=url)

    head, sep, tail = remainder.partition("/")
    if sep:
        try:
            candidate = parse_mangled_url(tail)
        except ValueError:
            if base_url is None:
                raise
            candidate = None
        if candidate is not None and (candidate.scheme or base_url is None):
            return ExtractedURL(url=candidate, options_token=head)

    if error is not None:
        raise error

    if base_url is not None:
        resolved = resolve_reference(base_url, url)
        logger.debug("Resolved %r against base %s -> %s", remainder, base_url.geturl(), resolved.geturl())
        return ExtractedURL(url=resolved)
    return ExtractedURL(url=url)
