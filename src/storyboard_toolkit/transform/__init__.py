"""
Module: transform

Purpose:
    Events-section parsing and vertical mirroring of storyboard scripts.
    Text-only: no archive or image I/O happens in this package.

Key Functions:
    - extract_section(): Locate the Events section
    - classify(): Classify a single line
    - rewrite_line() / transform_document() / transform_text(): Mirror lines
    - collect_paths() / iter_image_references(): Referenced images

Used By:
    - storyboard_toolkit.pipeline.controller
"""

from .classifier import classify
from .collector import collect_paths, iter_image_references
from .coordinates import STORYBOARD_HEIGHT, mirror_y, negate_angle, swap_anchor
from .rewriter import CommandKind, rewrite_line, transform_document, transform_text
from .section import EVENTS_MARKER, extract_section

__all__ = [
    "CommandKind",
    "EVENTS_MARKER",
    "STORYBOARD_HEIGHT",
    "classify",
    "collect_paths",
    "extract_section",
    "iter_image_references",
    "mirror_y",
    "negate_angle",
    "rewrite_line",
    "swap_anchor",
    "transform_document",
    "transform_text",
]
