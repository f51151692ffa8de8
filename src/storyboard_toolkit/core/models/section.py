"""
Module: core.models.section

Purpose:
    Provides the EventsSection dataclass - the half-open line range of a
    script document that holds storyboard definitions.

Dependencies:
    - dataclasses (std)

Used By:
    - transform.section: extract_section() builds it
    - transform.rewriter, transform.collector: iterate over it
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EventsSection:
    """
    Line range [start, end) of the Events section.

    ``start`` is the index just after the section header and ``end`` is the
    index of the next top-level header (or the document length). A document
    without an Events header yields EventsSection(0, 0).

    Invariants:
        - 0 <= start <= end

    Example:
        >>> section = EventsSection(start=3, end=7)
        >>> len(section)
        4
        >>> list(section.indices())
        [3, 4, 5, 6]
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0: {self.start}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start: {self.end} < {self.start}")

    @classmethod
    def empty(cls) -> EventsSection:
        return cls(0, 0)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def indices(self) -> range:
        return range(self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start
