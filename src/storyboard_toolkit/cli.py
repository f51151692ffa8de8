"""
Command-line entry point: flip the storyboard of a beatmap archive.

Usage:
    storyboard-flip "song.osz" -o flipped/
    python -m storyboard_toolkit "song.osz" --suffix " (flipped)" -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from storyboard_toolkit import __version__
from storyboard_toolkit.pipeline import (
    FlipConfig,
    LoggingProgressSink,
    PipelineError,
    flip_archive_file,
)
from storyboard_toolkit.transform.coordinates import STORYBOARD_HEIGHT

logger = logging.getLogger("storyboard_toolkit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storyboard-flip",
        description="Vertically mirror every storyboard in a beatmap archive (.osz)",
    )
    parser.add_argument("input", type=Path, help="Path to the .osz archive")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path("flipped"),
        help="Directory for the flipped archive (default: ./flipped)",
    )
    parser.add_argument("--suffix", default="", help="Text inserted before the output extension")
    parser.add_argument(
        "--height", type=float, default=STORYBOARD_HEIGHT,
        help=f"Storyboard height to mirror against (default: {STORYBOARD_HEIGHT})",
    )
    parser.add_argument("--workers", type=int, default=4, help="Worker threads for image work")
    parser.add_argument("--jpeg-quality", type=int, default=95, help="JPEG re-encode quality (1-95)")
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing output file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = FlipConfig(
            storyboard_height=args.height,
            max_workers=args.workers,
            jpeg_quality=args.jpeg_quality,
            output_suffix=args.suffix,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        result = flip_archive_file(
            args.input,
            args.output_dir,
            config=config,
            progress=LoggingProgressSink(logger),
            overwrite=args.overwrite,
        )
    except PipelineError as e:
        logger.debug("Pipeline failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.warnings:
        logger.info(f"Completed with {len(result.warnings)} warning(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
