"""
Module: pipeline.progress

Purpose:
    Collaborator interfaces through which the flip pipeline talks to its
    host: a progress sink for human-readable status lines and an output
    handoff that receives the finished archive.

Key Classes:
    - ProgressSink / OutputHandoff: Protocols the pipeline depends on
    - LoggingProgressSink: Forwards progress to a logger
    - RecordingProgressSink: Keeps every message in memory
    - FileOutputHandoff: Writes the archive into a directory

Dependencies:
    - logging (std)

Used By:
    - pipeline.controller: flip_archive()
    - cli: Default sink and handoff
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

WARNING_PREFIX = "Warning: "


class ProgressSink(Protocol):
    """Receives human-readable progress lines."""

    def report(self, message: str) -> None:
        ...


class OutputHandoff(Protocol):
    """Receives the finished archive."""

    def deliver(self, data: bytes, suggested_file_name: str) -> None:
        ...


class LoggingProgressSink:
    """Progress sink that logs each message; warnings are logged at WARNING."""

    def __init__(self, target: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = target or logger
        self._level = level

    def report(self, message: str) -> None:
        level = logging.WARNING if message.startswith(WARNING_PREFIX) else self._level
        self._logger.log(level, message)


class RecordingProgressSink:
    """Progress sink that keeps every message."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)

    @property
    def warnings(self) -> List[str]:
        return [m for m in self.messages if m.startswith(WARNING_PREFIX)]

    @property
    def last(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None


class FileOutputHandoff:
    """
    Output handoff that writes the archive into a directory.

    Attributes:
        output_dir: Destination directory (created if needed)
        written: (path, size) of every delivered file
    """

    def __init__(self, output_dir: Path, *, overwrite: bool = False):
        self.output_dir = Path(output_dir)
        self.overwrite = overwrite
        self.written: List[Tuple[Path, int]] = []

    def deliver(self, data: bytes, suggested_file_name: str) -> None:
        """
        Write data to output_dir / suggested_file_name.

        Raises:
            FileExistsError: If the target exists and overwrite is False
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / Path(suggested_file_name).name
        if target.exists() and not self.overwrite:
            raise FileExistsError(f"Output already exists: {target}")
        target.write_bytes(data)
        self.written.append((target, len(data)))
        logger.info(f"Wrote {target} ({len(data)} bytes)")
