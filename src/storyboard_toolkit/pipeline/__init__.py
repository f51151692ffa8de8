"""
Module: pipeline

Purpose:
    Archive-level orchestration: load a beatmap archive, mirror its
    storyboards and images, repack and deliver it.

Key Functions:
    - flip_archive(): Async entry point
    - flip_archive_file(): Synchronous wrapper for files on disk

Key Classes:
    - FlipConfig: Pipeline configuration
    - FlipResult: Job result
    - PipelineError: Fatal job failure
"""

from .config import FlipConfig
from .controller import (
    FlipResult,
    MissingReferencedImageError,
    PipelineError,
    PipelineState,
    flip_archive,
    flip_archive_file,
)
from .progress import (
    FileOutputHandoff,
    LoggingProgressSink,
    OutputHandoff,
    ProgressSink,
    RecordingProgressSink,
)
from .timing import TimingLog, timed_phase

__all__ = [
    "FileOutputHandoff",
    "FlipConfig",
    "FlipResult",
    "LoggingProgressSink",
    "MissingReferencedImageError",
    "OutputHandoff",
    "PipelineError",
    "PipelineState",
    "ProgressSink",
    "RecordingProgressSink",
    "TimingLog",
    "flip_archive",
    "flip_archive_file",
    "timed_phase",
]
