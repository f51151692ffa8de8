"""
Module: transform.section

Purpose:
    Locate the Events section of a script document. This is the only place
    the section boundary rule is defined; the rewriter and the image
    collector both call extract_section().

Key Functions:
    - extract_section(): Find the [start, end) range of the Events section

Used By:
    - transform.rewriter: transform_document()
    - transform.collector: iter_image_references()
"""

from __future__ import annotations

from typing import Sequence

from storyboard_toolkit.core.models import EventsSection

EVENTS_MARKER = "[Events]"
SECTION_PREFIX = "["


def extract_section(lines: Sequence[str]) -> EventsSection:
    """
    Find the Events section of a script document.

    The section starts after the first line beginning with ``[Events]`` and
    ends at the next line beginning with ``[`` (or the end of the document).

    Args:
        lines: Document lines (split on "\\n")

    Returns:
        EventsSection range. Empty (0, 0) if the document has no Events header.

    Example:
        >>> extract_section(["[General]", "[Events]", "Sprite,...", "[TimingPoints]"])
        EventsSection(start=2, end=3)
    """
    header = next(
        (i for i, line in enumerate(lines) if line.startswith(EVENTS_MARKER)),
        None,
    )
    if header is None:
        return EventsSection.empty()

    start = header + 1
    end = next(
        (i for i in range(start, len(lines)) if lines[i].startswith(SECTION_PREFIX)),
        len(lines),
    )
    return EventsSection(start, end)
