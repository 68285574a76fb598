"""Options: the transformation parameters requested for a proxied image.

Width, height and the crop fields share one unit rule: 0 means unset, values
greater than 1 are pixels and values in (0, 1] are a fraction of the source
dimension.  Negative crop_x / crop_y are measured from the right and bottom
edges respectively.
"""

from __future__ import annotations

import enum
import math
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

# Option tokens shared by the canonical encoder and the legacy path grammar
OPT_FIT = "fit"
OPT_FLIP_VERTICAL = "fv"
OPT_FLIP_HORIZONTAL = "fh"
OPT_SCALE_UP = "scaleUp"
OPT_SMART_CROP = "sc"
OPT_ROTATE_PREFIX = "r"
OPT_QUALITY_PREFIX = "q"
OPT_SIGNATURE_PREFIX = "s"
OPT_CROP_X = "cx"
OPT_CROP_Y = "cy"
OPT_CROP_WIDTH = "cw"
OPT_CROP_HEIGHT = "ch"
OPT_SIZE_DELIMITER = "x"


class ImageFormat(str, enum.Enum):
    NONE = ""
    JPEG = "jpeg"
    PNG = "png"
    TIFF = "tiff"

    @classmethod
    def from_token(cls, token: str) -> ImageFormat | None:
        """Return the output format named by ``token``, or None if it names none."""
        if not token:
            return None
        try:
            return cls(token)
        except ValueError:
            return None


def format_number(value: float) -> str:
    """Shortest round-trip rendering of a float, exponent form outside [1e-4, 1e6).

    Integral values print without a fractional part, so ``100.0`` is ``"100"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(float(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    point = len(digits) + exponent  # decimal point position relative to digits
    exp10 = point - 1
    prefix = "-" if sign else ""

    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp10 < 0 else '+'}{abs(exp10):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


class Options(BaseModel):
    """Immutable snapshot of every transform parameter.

    All members are scalars, so a copy is always independent of its source.
    Merging defaults with overrides goes through ``merged`` which overwrites
    field by field and returns a new snapshot.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="ignore")

    width: float = 0.0
    height: float = 0.0

    # Resize to fit in the requested box without cropping, keeping aspect ratio.
    fit: bool = False

    # Degrees counter-clockwise; 90, 180 and 270 are meaningful downstream.
    rotate: int = 0

    # Applied after rotation.
    flip_vertical: bool = False
    flip_horizontal: bool = False

    # 0 leaves the choice to the encoder.
    quality: int = 0

    # HMAC token, carried through verbatim.
    signature: str = ""

    scale_up: bool = False
    format: ImageFormat = ImageFormat.NONE

    crop_x: float = 0.0
    crop_y: float = 0.0
    crop_width: float = 0.0
    crop_height: float = 0.0

    # Content-aware crop; takes precedence over the crop rectangle.
    smart_crop: bool = False

    def merged(self, **fields) -> Options:
        """Return a new snapshot with ``fields`` overwriting this one's values."""
        if not fields:
            return self
        return type(self).model_validate({**self.model_dump(), **fields})

    @property
    def has_transform(self) -> bool:
        """True when any field asks for the image to actually change.

        ``signature`` never counts, and ``fit``, ``scale_up`` and ``smart_crop``
        only qualify other fields.  A non-empty format is a transformation.
        """
        return (
            self.width != 0
            or self.height != 0
            or self.rotate != 0
            or self.flip_horizontal
            or self.flip_vertical
            or self.quality != 0
            or self.format is not ImageFormat.NONE
            or self.crop_x != 0
            or self.crop_y != 0
            or self.crop_width != 0
            or self.crop_height != 0
        )

    def encode(self) -> str:
        """Canonical comma-joined encoding, independent of how the value was built."""
        opts = [f"{format_number(self.width)}{OPT_SIZE_DELIMITER}{format_number(self.height)}"]
        if self.fit:
            opts.append(OPT_FIT)
        if self.rotate != 0:
            opts.append(f"{OPT_ROTATE_PREFIX}{self.rotate}")
        if self.flip_vertical:
            opts.append(OPT_FLIP_VERTICAL)
        if self.flip_horizontal:
            opts.append(OPT_FLIP_HORIZONTAL)
        if self.quality != 0:
            opts.append(f"{OPT_QUALITY_PREFIX}{self.quality}")
        if self.signature:
            opts.append(f"{OPT_SIGNATURE_PREFIX}{self.signature}")
        if self.scale_up:
            opts.append(OPT_SCALE_UP)
        if self.format is not ImageFormat.NONE:
            opts.append(self.format.value)
        if self.crop_x != 0:
            opts.append(f"{OPT_CROP_X}{format_number(self.crop_x)}")
        if self.crop_y != 0:
            opts.append(f"{OPT_CROP_Y}{format_number(self.crop_y)}")
        if self.crop_width != 0:
            opts.append(f"{OPT_CROP_WIDTH}{format_number(self.crop_width)}")
        if self.crop_height != 0:
            opts.append(f"{OPT_CROP_HEIGHT}{format_number(self.crop_height)}")
        if self.smart_crop:
            opts.append(OPT_SMART_CROP)
        return ",".join(opts)

    def __str__(self) -> str:
        return self.encode()
