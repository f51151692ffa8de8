"""
Module: pipeline.config

Purpose:
    Configuration dataclass for the archive flip pipeline. Immutable
    settings with validation on construction.

Key Classes:
    - FlipConfig: Storyboard height, script extensions, worker and encoder settings

Dependencies:
    - dataclasses (std)
    - zipfile (std): Compression constants

Used By:
    - pipeline.controller: flip_archive()
    - cli: Maps command-line flags onto FlipConfig
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from typing import Optional, Tuple

from storyboard_toolkit.images.flipper import DEFAULT_JPEG_QUALITY
from storyboard_toolkit.transform.coordinates import STORYBOARD_HEIGHT

# Beatmap difficulty files and the shared storyboard file
SCRIPT_EXTENSIONS: Tuple[str, ...] = (".osu", ".osb")


@dataclass(frozen=True)
class FlipConfig:
    """
    Configuration for flipping a beatmap archive (immutable).

    Attributes:
        storyboard_height: Logical height Y values are mirrored against (default 480)
        script_extensions: Entry suffixes treated as storyboard scripts
        max_workers: Threads used for image codec work and repacking
        jpeg_quality: Encoder quality for re-encoded JPEG images (1-95)
        compression: ZIP compression for entries without original metadata
        compresslevel: Compression level for those entries (None = zlib default)
        output_suffix: Inserted before the extension of the delivered file name

    Example:
        >>> config = FlipConfig(max_workers=8, output_suffix=" (flipped)")
    """
    storyboard_height: float = STORYBOARD_HEIGHT
    script_extensions: Tuple[str, ...] = SCRIPT_EXTENSIONS
    max_workers: int = 4
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    compression: int = zipfile.ZIP_DEFLATED
    compresslevel: Optional[int] = None
    output_suffix: str = ""

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if self.storyboard_height <= 0:
            raise ValueError(f"storyboard_height must be > 0: {self.storyboard_height}")
        if not self.script_extensions:
            raise ValueError("script_extensions must not be empty")
        for extension in self.script_extensions:
            if not extension.startswith("."):
                raise ValueError(f"script extension must start with '.': {extension}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be within 1-95: {self.jpeg_quality}")

    def is_script(self, path: str) -> bool:
        """True if the archive entry at path is a storyboard script."""
        return path.endswith(tuple(self.script_extensions))

    def output_name(self, file_name: str) -> str:
        """File name to deliver the flipped archive under."""
        if not self.output_suffix:
            return file_name
        stem, dot, extension = file_name.rpartition(".")
        if not dot:
            return file_name + self.output_suffix
        return f"{stem}{self.output_suffix}.{extension}"
