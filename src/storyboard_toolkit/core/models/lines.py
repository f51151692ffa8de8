"""
Module: core.models.lines

Purpose:
    Provides the ClassifiedLine dataclass - one Events-section line split
    into its positional comma-separated fields together with its kind.

Key Classes:
    - LineKind: OBJECT / COMMAND / OTHER
    - ClassifiedLine: Line plus kind and positional field accessors

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - transform.classifier: Produces ClassifiedLine instances
    - transform.rewriter: Rewrites object and command fields
    - transform.collector: Reads image paths and frame counts
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# Positional field indices of an object definition line:
# Sprite,<layer>,<origin>,"<filepath>",<x>,<y>
# Animation,<layer>,<origin>,"<filepath>",<x>,<y>,<frameCount>,<frameDelay>,<looptype>
ANCHOR_FIELD = 2
PATH_FIELD = 3
X_FIELD = 4
Y_FIELD = 5
FRAME_COUNT_FIELD = 6
FRAME_DELAY_FIELD = 7


class LineKind(Enum):
    """Classification of a single Events-section line."""
    OBJECT = "object"
    COMMAND = "command"
    OTHER = "other"


def normalize_image_path(raw: str) -> str:
    """
    Normalize a path field as written in a script file.

    Escaped backslashes are unescaped, every backslash becomes a forward
    slash and quotation marks are removed.

    Example:
        >>> normalize_image_path(r'"sb\\bg.png"')
        'sb/bg.png'
    """
    return raw.replace("\\\\", "\\").replace("\\", "/").replace('"', "")


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """
    One storyboard line with its kind and raw positional fields.

    Fields are the result of splitting the raw line on commas, so positions
    match the script format exactly. Accessors return None for positions
    the line does not have; a short line is never an error.

    Attributes:
        raw: The line exactly as given
        kind: OBJECT, COMMAND or OTHER
        fields: Comma-separated fields (empty for OTHER)
        code: Command code with indentation stripped (COMMAND only)

    Example:
        >>> line = ClassifiedLine('Sprite,0,TopLeft,"sb/bg.png",0,100',
        ...                       LineKind.OBJECT,
        ...                       ('Sprite', '0', 'TopLeft', '"sb/bg.png"', '0', '100'))
        >>> line.path
        'sb/bg.png'
        >>> line.y
        '100'
    """

    raw: str
    kind: LineKind
    fields: Tuple[str, ...] = ()
    code: Optional[str] = None

    def field(self, index: int) -> Optional[str]:
        """Return the field at ``index`` or None when the line is too short."""
        if 0 <= index < len(self.fields):
            return self.fields[index]
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Object definition accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_object(self) -> bool:
        return self.kind is LineKind.OBJECT

    @property
    def is_command(self) -> bool:
        return self.kind is LineKind.COMMAND

    @property
    def object_type(self) -> Optional[str]:
        """"Sprite" or "Animation" for object lines, else None."""
        if not self.is_object:
            return None
        return "Sprite" if self.raw.startswith("Sprite") else "Animation"

    @property
    def is_animation(self) -> bool:
        return self.object_type == "Animation"

    @property
    def anchor(self) -> Optional[str]:
        return self.field(ANCHOR_FIELD) if self.is_object else None

    @property
    def path(self) -> Optional[str]:
        """Image path with escapes, backslashes and quotes normalized."""
        if not self.is_object:
            return None
        raw_path = self.field(PATH_FIELD)
        if raw_path is None:
            return None
        return normalize_image_path(raw_path)

    @property
    def x(self) -> Optional[str]:
        return self.field(X_FIELD) if self.is_object else None

    @property
    def y(self) -> Optional[str]:
        return self.field(Y_FIELD) if self.is_object else None

    @property
    def frame_count(self) -> Optional[str]:
        """Raw frame count field (Animation only)."""
        return self.field(FRAME_COUNT_FIELD) if self.is_animation else None

    @property
    def frame_delay(self) -> Optional[str]:
        """Raw frame delay field (Animation only). Parsed but never rewritten."""
        return self.field(FRAME_DELAY_FIELD) if self.is_animation else None
