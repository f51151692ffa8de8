"""
Module: transform.coordinates

Purpose:
    Pure vertical-mirroring primitives for storyboard coordinates: Y
    reflection about the playfield midline, origin/anchor swapping and
    rotation negation. Field-level helpers operate on the raw text of a
    comma-separated field and leave non-numeric text untouched.

Key Functions:
    - mirror_y(): y -> height - y
    - negate_angle(): r -> -r
    - swap_anchor(): "TopLeft" <-> "BottomLeft", "TopCentre" <-> "BottomCentre", ...
    - format_number(): Serialise a float the way the script format expects
    - mirror_y_field(), negate_angle_field(): Text-in/text-out variants

Used By:
    - transform.rewriter: All line rewrite rules
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Optional

# Logical storyboard height in osu!pixels
STORYBOARD_HEIGHT = 480

_ANCHOR_PATTERN = re.compile(r"Top|Bottom")
_ANCHOR_SWAP = {"Top": "Bottom", "Bottom": "Top"}

_NUMBER_PATTERN = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


def mirror_y(y: float, height: float = STORYBOARD_HEIGHT) -> float:
    """Reflect a Y-coordinate about the horizontal midline."""
    return height - y


def negate_angle(angle: float) -> float:
    """A vertical flip reverses the sense of rotation."""
    return -angle


def swap_anchor(token: str) -> str:
    """
    Swap every "Top" and "Bottom" in an origin token.

    Tokens containing neither substring are returned unchanged.

    Example:
        >>> swap_anchor("TopLeft")
        'BottomLeft'
        >>> swap_anchor("Centre")
        'Centre'
    """
    return _ANCHOR_PATTERN.sub(lambda match: _ANCHOR_SWAP[match.group(0)], token)


def parse_number(text: str) -> Optional[float]:
    """Parse a decimal field, returning None for anything non-numeric."""
    if not _NUMBER_PATTERN.match(text):
        return None
    return float(text)


def format_number(value: float) -> str:
    """
    Format a number for writing back into a script line.

    Integral values have no fractional part and negative zero prints as "0".
    Other values use the shortest round-trip digits, always in positional
    notation (never an exponent).

    Example:
        >>> format_number(380.0)
        '380'
        >>> format_number(-0.5)
        '-0.5'
        >>> format_number(-0.00001)
        '-0.00001'
    """
    if value == 0:
        return "0"
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    text = repr(value)
    if math.isfinite(value) and "e" in text:
        return format(Decimal(text), "f")
    return text


def mirror_y_field(text: str, height: float = STORYBOARD_HEIGHT) -> str:
    """Mirror a Y field given as text; non-numeric text is returned as-is."""
    value = parse_number(text)
    if value is None:
        return text
    return format_number(mirror_y(value, height))


def negate_angle_field(text: str) -> str:
    """Negate an angle field given as text; non-numeric text is returned as-is."""
    value = parse_number(text)
    if value is None:
        return text
    return format_number(negate_angle(value))
