"""
Module: transform.rewriter

Purpose:
    Rewrite Events-section lines so the storyboard is mirrored vertically.
    Object definitions get their origin swapped and Y mirrored; move and
    rotate commands get their Y values mirrored or angles negated. Every
    other line passes through unchanged.

Key Functions:
    - rewrite_line(): Mirror one line (pure, never raises)
    - transform_document(): Mirror every line inside the Events section
    - transform_text(): Same, for a whole script file as a string

Key Classes:
    - CommandKind: Recognised commands and the fields they carry

Dependencies:
    - transform.classifier, transform.coordinates, transform.section

Used By:
    - pipeline.controller: Script rewriting phase
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from storyboard_toolkit.core.models import ClassifiedLine, LineKind
from storyboard_toolkit.core.models.lines import ANCHOR_FIELD, Y_FIELD

from .classifier import classify
from .coordinates import (
    STORYBOARD_HEIGHT,
    mirror_y_field,
    negate_angle_field,
    swap_anchor,
)
from .section import extract_section

logger = logging.getLogger(__name__)

FieldRewrite = Callable[[str, float], str]


def _mirror(text: str, height: float) -> str:
    return mirror_y_field(text, height)


def _negate(text: str, height: float) -> str:
    return negate_angle_field(text)


class CommandKind(Enum):
    """
    Commands whose fields change under a vertical flip.

    Each member carries its command code, the field positions it touches and
    the rewrite applied to each of those fields.

    Field layout (position 0 is the code):
        M,<easing>,<start>,<end>,<x1>,<y1>,<x2>,<y2>
        MY,<easing>,<start>,<end>,<y1>,<y2>
        R,<easing>,<start>,<end>,<angle1>,<angle2>
    """

    MOVE = ("M", (5, 7), _mirror)
    MOVE_Y = ("MY", (4, 5), _mirror)
    ROTATE = ("R", (4, 5), _negate)

    def __init__(self, code: str, positions: Tuple[int, ...], rewrite: FieldRewrite):
        self.code = code
        self.positions = positions
        self.rewrite = rewrite

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional[CommandKind]:
        """Look up a command by code; unknown codes return None."""
        for kind in cls:
            if kind.code == code:
                return kind
        return None

    def apply(self, fields: Sequence[str], height: float) -> List[str]:
        """Rewrite this command's fields; absent or empty fields stay as they are."""
        parts = list(fields)
        for position in self.positions:
            if position < len(parts) and parts[position]:
                parts[position] = self.rewrite(parts[position], height)
        return parts


def _split_line_ending(line: str) -> Tuple[str, str]:
    if line.endswith("\r"):
        return line[:-1], "\r"
    return line, ""


def _rewrite_object(line: ClassifiedLine, height: float) -> List[str]:
    parts = list(line.fields)
    if len(parts) > ANCHOR_FIELD:
        parts[ANCHOR_FIELD] = swap_anchor(parts[ANCHOR_FIELD])
    if len(parts) > Y_FIELD and parts[Y_FIELD]:
        parts[Y_FIELD] = mirror_y_field(parts[Y_FIELD], height)
    return parts


def rewrite_line(line: str, height: float = STORYBOARD_HEIGHT) -> str:
    """
    Mirror one storyboard line vertically.

    Unrecognised or malformed lines are returned verbatim. A trailing
    carriage return is preserved.

    Args:
        line: Raw line from the Events section
        height: Storyboard height used for Y mirroring

    Returns:
        Rewritten line

    Example:
        >>> rewrite_line('Sprite,0,TopLeft,"sb/bg.png",0,100')
        'Sprite,0,BottomLeft,"sb/bg.png",0,380'
        >>> rewrite_line('_R,0,0,500,0.5,-0.5')
        '_R,0,0,500,-0.5,0.5'
    """
    body, ending = _split_line_ending(line)
    classified = classify(body)

    if classified.kind is LineKind.OBJECT:
        parts = _rewrite_object(classified, height)
    elif classified.kind is LineKind.COMMAND:
        kind = CommandKind.from_code(classified.code)
        if kind is None:
            return line
        parts = kind.apply(classified.fields, height)
    else:
        return line

    return ",".join(parts) + ending


def transform_document(
    lines: Sequence[str],
    height: float = STORYBOARD_HEIGHT,
) -> List[str]:
    """
    Mirror every line of the Events section.

    Lines outside the section are copied unchanged. The input is not
    modified.

    Args:
        lines: Script document lines
        height: Storyboard height used for Y mirroring

    Returns:
        New list of lines
    """
    section = extract_section(lines)
    result = list(lines)
    for i in section.indices():
        result[i] = rewrite_line(lines[i], height)

    logger.debug(f"Rewrote {len(section)} lines in Events section {section.start}-{section.end}")
    return result


def transform_text(text: str, height: float = STORYBOARD_HEIGHT) -> str:
    """Mirror the Events section of a whole script file."""
    return "\n".join(transform_document(text.split("\n"), height))
