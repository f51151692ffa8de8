"""
Module: archive

Purpose:
    In-memory beatmap archive handle used by the flip pipeline.

Dependencies:
    - zipfile (std)
"""

from .container import (
    ArchiveOpenError,
    BeatmapArchive,
    EntryNotFoundError,
    SerializationError,
)

__all__ = [
    "ArchiveOpenError",
    "BeatmapArchive",
    "EntryNotFoundError",
    "SerializationError",
]
