"""Query-parameter option grammar.

Recognized keys:

    size={n}                 sets width and height
    width={w}  height={h}    pixels if > 1, fraction of the source if in (0, 1]
    mode=fit|smartcrop       any other value is ignored but still counts as a mode
    flip=v|h                 may repeat to flip both ways
    format=jpeg|png|tiff
    rotate={degrees}         counter-clockwise
    quality={1-100}
    signature={token}        carried through verbatim
    crop={x},{y},{w},{h}     exactly four values, otherwise ignored

Keys are applied in the fixed order of ``OPTION_KEYS`` so the result never
depends on the order they arrived in: ``width`` and ``height`` always win over
``size``.  Repeated values of one key are applied in arrival order, the last
one winning.

When no ``mode`` is given and both width and height end up positive, ``fit``
is switched on.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs, urlencode

from imageproxy.errors import MalformedURLError
from imageproxy.models.options import ImageFormat, Options
from imageproxy.parsing.numbers import float_or_zero, int_or_zero, parse_float

logger = logging.getLogger(__name__)

OPTION_KEYS: tuple[str, ...] = (
    "size",
    "width",
    "height",
    "mode",
    "flip",
    "format",
    "rotate",
    "quality",
    "signature",
    "crop",
)

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

QueryForm = Mapping[str, Any]


def decode_query(raw_query: str, url: str | None = None) -> dict[str, list[str]]:
    """Decode a raw query string into a multi-valued mapping.

    Raises MalformedURLError when the encoding itself cannot be decoded:
    a stray ``%``, a ``;`` separator or percent-encoded bytes that are not
    UTF-8.  ``url`` names the request in the error (defaults to the query).
    """
    origin = raw_query if url is None else url
    if not raw_query:
        return {}
    bad = _BAD_ESCAPE_RE.search(raw_query)
    if bad is not None:
        escape = raw_query[bad.start():bad.start() + 3]
        raise MalformedURLError(f"invalid URL escape {escape!r} in query", origin)
    if ";" in raw_query:
        raise MalformedURLError("invalid semicolon separator in query", origin)
    try:
        return parse_qs(raw_query, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedURLError(f"query is not valid UTF-8: {e.reason}", origin) from e


def _values(form: QueryForm, key: str) -> list[str]:
    getlist = getattr(form, "getlist", None)
    if getlist is not None:
        return list(getlist(key))
    values = form.get(key, ())
    if isinstance(values, str):
        return [values]
    return list(values)


def parse_form_values(form: QueryForm, default_options: Options | None = None) -> Options:
    """Overlay the option keys found in ``form`` onto ``default_options``.

    ``form`` maps each key to its list of values (``parse_qs`` output, or any
    multidict exposing ``getlist``).  Unrecognized keys are ignored, as is
    any value that does not parse; a failed number degrades its field to 0.
    """
    if default_options is None:
        default_options = Options()

    fields: dict[str, Any] = {}
    mode_seen = False

    for key in OPTION_KEYS:
        for value in _values(form, key):
            if key == "mode":
                mode_seen = True
            _apply_value(key, value, fields)

    width = fields.get("width", default_options.width)
    height = fields.get("height", default_options.height)
    if not mode_seen and width > 0 and height > 0:
        fields["fit"] = True

    return default_options.merged(**fields)


def _apply_value(key: str, value: str, fields: dict[str, Any]) -> None:
    if key == "size":
        size = parse_float(value)
        if size is None:
            logger.debug("Ignoring unparseable size %r", value)
            return
        fields["width"] = size
        fields["height"] = size
    elif key == "width":
        fields["width"] = float_or_zero(value)
    elif key == "height":
        fields["height"] = float_or_zero(value)
    elif key == "mode":
        if value == "fit":
            fields["fit"] = True
        elif value == "smartcrop":
            fields["smart_crop"] = True
    elif key == "flip":
        if value == "v":
            fields["flip_vertical"] = True
        elif value == "h":
            fields["flip_horizontal"] = True
    elif key == "format":
        image_format = ImageFormat.from_token(value)
        if image_format is not None:
            fields["format"] = image_format
    elif key == "rotate":
        fields["rotate"] = int_or_zero(value)
    elif key == "quality":
        fields["quality"] = int_or_zero(value)
    elif key == "signature":
        fields["signature"] = value
    elif key == "crop":
        parts = value.split(",")
        if len(parts) != 4:
            logger.debug("Ignoring crop %r: expected 4 values, got %d", value, len(parts))
            return
        fields["crop_x"] = float_or_zero(parts[0])
        fields["crop_y"] = float_or_zero(parts[1])
        fields["crop_width"] = float_or_zero(parts[2])
        fields["crop_height"] = float_or_zero(parts[3])


def strip_option_params(raw_query: str, url: str | None = None) -> str:
    """Remove the option keys from ``raw_query``, re-encoding the rest sorted by key."""
    values = decode_query(raw_query, url)
    kept = [(key, value) for key in sorted(values) if key not in OPTION_KEYS for value in values[key]]
    return urlencode(kept)
