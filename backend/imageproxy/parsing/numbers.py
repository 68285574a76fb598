"""Strict numeric token parsing shared by the option grammars.

Python's ``int()``/``float()`` accept whitespace, underscores, ``inf`` and
``nan``; option values accept none of those.  A failed parse is a soft
failure: callers get ``None`` (or the zero value from the ``*_or_zero``
helpers) and keep going.  Both parsers run in time linear in the input.
"""

from __future__ import annotations

import re

_INT_RE = re.compile(r"([+-]?)0*([1-9][0-9]*|0)")
# Each digit run has exactly one way to match, so a failed match stays linear
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Integers are signed 64-bit; anything wider is out of range
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_INT_MAX_DIGITS = len(str(_INT_MAX))


def parse_int(text: str) -> int | None:
    match = _INT_RE.fullmatch(text)
    if not match:
        return None
    sign, digits = match.groups()
    # Checked before int() so huge digit runs never reach the conversion
    if len(digits) > _INT_MAX_DIGITS:
        return None
    value = int(sign + digits)
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


def parse_float(text: str) -> float | None:
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    # Overflowing exponents such as 1e999
    if value in (float("inf"), float("-inf")):
        return None
    return value


def int_or_zero(text: str) -> int:
    value = parse_int(text)
    return 0 if value is None else value


def float_or_zero(text: str) -> float:
    value = parse_float(text)
    return 0.0 if value is None else value
