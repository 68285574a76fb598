"""Legacy path-segment option grammar.

A comma-separated token list such as ``100x200,fit,r90,q80``:

    {w}x{h}     size; either side may be empty (unset)
    {n}         square size, sets both width and height
    fit fv fh scaleUp sc jpeg png tiff
    r{int} q{int} s{signature} cx{f} cy{f} cw{f} ch{f}

Exact literals are matched before prefix-coded tokens, so ``sc`` is smart
crop while ``sc0ffee`` is the signature ``c0ffee``.  A token that fails to
parse never aborts the rest of the list.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from imageproxy.models.options import (
    OPT_CROP_HEIGHT,
    OPT_CROP_WIDTH,
    OPT_CROP_X,
    OPT_CROP_Y,
    OPT_FIT,
    OPT_FLIP_HORIZONTAL,
    OPT_FLIP_VERTICAL,
    OPT_QUALITY_PREFIX,
    OPT_ROTATE_PREFIX,
    OPT_SCALE_UP,
    OPT_SIGNATURE_PREFIX,
    OPT_SIZE_DELIMITER,
    OPT_SMART_CROP,
    ImageFormat,
    Options,
)
from imageproxy.parsing.numbers import float_or_zero, int_or_zero, parse_float

logger = logging.getLogger(__name__)

_FLAGS: dict[str, str] = {
    OPT_FIT: "fit",
    OPT_FLIP_VERTICAL: "flip_vertical",
    OPT_FLIP_HORIZONTAL: "flip_horizontal",
    OPT_SCALE_UP: "scale_up",
    OPT_SMART_CROP: "smart_crop",
}

# Checked in order; the first matching prefix claims the token.
_PREFIXED: tuple[tuple[str, str, Callable[[str], Any]], ...] = (
    (OPT_ROTATE_PREFIX, "rotate", int_or_zero),
    (OPT_QUALITY_PREFIX, "quality", int_or_zero),
    (OPT_SIGNATURE_PREFIX, "signature", str),
    (OPT_CROP_X, "crop_x", float_or_zero),
    (OPT_CROP_Y, "crop_y", float_or_zero),
    (OPT_CROP_WIDTH, "crop_width", float_or_zero),
    (OPT_CROP_HEIGHT, "crop_height", float_or_zero),
)


def parse_legacy_options(text: str, default_options: Options | None = None) -> Options:
    """Parse a legacy option token list, overlaying it onto ``default_options``."""
    if default_options is None:
        default_options = Options()
    fields: dict[str, Any] = {}
    for token in text.split(","):
        _apply_token(token, fields)
    return default_options.merged(**fields)


def _apply_token(token: str, fields: dict[str, Any]) -> None:
    if not token:
        return

    if token in _FLAGS:
        fields[_FLAGS[token]] = True
        return

    image_format = ImageFormat.from_token(token)
    if image_format is not None:
        fields["format"] = image_format
        return

    for prefix, name, convert in _PREFIXED:
        if token.startswith(prefix):
            fields[name] = convert(token[len(prefix):])
            return

    if OPT_SIZE_DELIMITER in token:
        width, _, height = token.partition(OPT_SIZE_DELIMITER)
        if width:
            fields["width"] = float_or_zero(width)
        if height:
            fields["height"] = float_or_zero(height)
        return

    size = parse_float(token)
    if size is None:
        logger.debug("Dropping unrecognized option token %r", token)
        return
    fields["width"] = size
    fields["height"] = size
