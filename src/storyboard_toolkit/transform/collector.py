"""
Module: transform.collector

Purpose:
    Enumerate the archive images a storyboard references, using the same
    Events-section range and line classification as the rewriter so the
    set of flipped images always matches the set of mirrored objects.

Key Functions:
    - iter_image_references(): Yield an ImageReference per sprite / animation frame
    - collect_paths(): Deduplicated set of referenced archive paths

Used By:
    - pipeline.controller: Decides which image entries to flip
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional, Sequence, Set

from storyboard_toolkit.core.models import ImageReference

from .classifier import classify
from .section import extract_section

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_frame_count(text: Optional[str]) -> int:
    """
    Parse an animation frame count.

    Reads the leading integer of the field ("4", " 4", "4.0" and "4fps" all
    give 4). Missing, non-numeric or negative values give 0.
    """
    if text is None:
        return 0
    match = _LEADING_INT.match(text)
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def iter_image_references(lines: Sequence[str]) -> Iterator[ImageReference]:
    """
    Yield every image reference in the Events section.

    Sprites yield one reference. Animations yield one reference per frame,
    frame indices 0..frameCount-1. Commands and other lines yield nothing.

    Args:
        lines: Script document lines

    Example:
        >>> lines = ["[Events]", 'Animation,0,Centre,"sb/fx.png",0,300,2,120']
        >>> [ref.path for ref in iter_image_references(lines)]
        ['sb/fx0.png', 'sb/fx1.png']
    """
    section = extract_section(lines)
    for i in section.indices():
        line = classify(lines[i])
        if not line.is_object:
            continue

        path = line.path
        if path is None:
            logger.debug(f"Object definition on line {i + 1} has no path field")
            continue

        if line.is_animation:
            for frame in range(parse_frame_count(line.frame_count)):
                yield ImageReference(path, frame)
        else:
            yield ImageReference(path)


def collect_paths(lines: Sequence[str]) -> Set[str]:
    """
    Collect the distinct archive paths referenced by the Events section.

    Returns:
        Set of image paths; empty when there is no Events section
    """
    return {ref.path for ref in iter_image_references(lines)}
