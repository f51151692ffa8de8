"""
Module: pipeline.timing

Purpose:
    Timing instrumentation for the flip pipeline to show where a job spends
    its time (script rewriting, image flipping, repacking).

Key Classes:
    - TimingLog: Collects archive-level phase and per-image timings

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - pipeline.controller: flip_archive()
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Tuple


@dataclass
class TimingLog:
    """
    Timing metrics for one flip job.

    Attributes:
        phase_timings: Dict of phase_name -> duration_seconds
        image_timings: Dict of image_path -> duration_seconds

    Example:
        >>> log = TimingLog()
        >>> log.log_phase("rewriting_scripts", 0.012)
        >>> log.log_image("sb/bg.png", 0.087)
        >>> print(log.summary())
    """
    phase_timings: Dict[str, float] = field(default_factory=dict)
    image_timings: Dict[str, float] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Log an archive-level timing metric."""
        self.phase_timings[phase] = duration

    def log_image(self, path: str, duration: float) -> None:
        """Log the time spent flipping one image."""
        self.image_timings[path] = duration

    def get_slowest_images(self, n: int = 3) -> List[Tuple[str, float]]:
        """Get the N slowest images with their flip time."""
        return sorted(self.image_timings.items(), key=lambda x: x[1], reverse=True)[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Flip Timing Summary ==="]

        if self.phase_timings:
            lines.append("Phases:")
            for phase, duration in self.phase_timings.items():
                lines.append(f"  {phase:25s} {duration:.3f}s")

        if self.image_timings:
            average = sum(self.image_timings.values()) / len(self.image_timings)
            lines.append("")
            lines.append(f"Images: {len(self.image_timings)} (avg {average:.3f}s)")
            for path, duration in self.get_slowest_images(3):
                lines.append(f"  {path}: {duration:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "phase_timings": self.phase_timings,
            "image_timings": self.image_timings,
            "slowest_images": [
                {"path": path, "duration": duration}
                for path, duration in self.get_slowest_images(5)
            ],
        }


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    image_path: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        image_path: If provided, records as a per-image metric;
                    otherwise records as a phase metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "repacking"):
        ...     data = archive.serialize()
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if image_path:
            log.log_image(image_path, elapsed)
        else:
            log.log_phase(phase, elapsed)
