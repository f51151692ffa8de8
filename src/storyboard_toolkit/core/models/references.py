"""
Module: core.models.references

Purpose:
    Provides the ImageReference dataclass - one archive image referenced by
    a storyboard object, with an optional animation frame index.

Dependencies:
    - re (std)
    - dataclasses (std)

Used By:
    - transform.collector: Enumerates references per document
    - pipeline.controller: Resolves references to archive entries
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# Trailing ".ext" of an image path; the frame index is placed in front of it
EXTENSION_PATTERN = re.compile(r"(\.[a-zA-Z]+)$")


def frame_path(path: str, frame: int) -> str:
    """
    Build the archive path of one animation frame.

    The frame index is inserted immediately before the trailing extension.
    Paths without an alphabetic extension are returned unchanged.

    Example:
        >>> frame_path("sb/fx.png", 2)
        'sb/fx2.png'
    """
    return EXTENSION_PATTERN.sub(lambda match: f"{frame}{match.group(1)}", path, count=1)


@dataclass(frozen=True, slots=True)
class ImageReference:
    """
    Image referenced by a Sprite or by one frame of an Animation.

    Attributes:
        source_path: Normalized path as written on the object line
        frame: Animation frame index, or None for sprites

    Example:
        >>> ImageReference("sb/fx.png", 3).path
        'sb/fx3.png'
        >>> ImageReference("sb/bg.png").path
        'sb/bg.png'
    """

    source_path: str
    frame: Optional[int] = None

    @property
    def path(self) -> str:
        """Archive entry path this reference resolves to."""
        if self.frame is None:
            return self.source_path
        return frame_path(self.source_path, self.frame)
