"""
Core Models Package

Immutable data models passed between the transform and pipeline layers.

All models in this package are frozen dataclasses and hashable.
"""

from .lines import ClassifiedLine, LineKind, normalize_image_path
from .references import ImageReference, frame_path
from .section import EventsSection

__all__ = [
    "ClassifiedLine",
    "EventsSection",
    "ImageReference",
    "LineKind",
    "frame_path",
    "normalize_image_path",
]
