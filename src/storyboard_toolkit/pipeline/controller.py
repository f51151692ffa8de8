"""
Module: pipeline.controller

Purpose:
    Orchestrate flipping a complete beatmap archive.
    Load → Rewrite scripts (collect image paths) → Flip images → Repack → Deliver

Key Functions:
    - flip_archive(): Async entry point working on archive bytes
    - flip_archive_file(): Synchronous wrapper for a file on disk

Key Classes:
    - PipelineState: Job states, strictly sequential
    - FlipResult: Complete job result
    - PipelineError: Fatal failure (archive unreadable or not writable)
    - MissingReferencedImageError: Script references an image not in the archive

Dependencies:
    - asyncio (std): Fan-out of script and image work
    - concurrent.futures (std): Worker threads for image codec and repacking
    - storyboard_toolkit.transform: Script rewriting and path collection
    - storyboard_toolkit.images: Image flipping
    - storyboard_toolkit.archive: Archive handle

Used By:
    - storyboard_toolkit.cli: Command-line entry point
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from storyboard_toolkit.archive import (
    ArchiveOpenError,
    BeatmapArchive,
    SerializationError,
)
from storyboard_toolkit.images import ImageFlipError, flip_image, resolve_mime_type
from storyboard_toolkit.transform import collect_paths, transform_document

from .config import FlipConfig
from .progress import WARNING_PREFIX, FileOutputHandoff, LoggingProgressSink, OutputHandoff, ProgressSink
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Flip job states in the order they are entered."""
    LOADING = "loading"
    REWRITING_SCRIPTS = "rewriting_scripts"
    FLIPPING_IMAGES = "flipping_images"
    REPACKING = "repacking"
    DELIVERING = "delivering"
    DONE = "done"
    FAILED = "failed"


class PipelineError(Exception):
    """
    Fatal error that aborts a flip job.

    Attributes:
        state: State the job was in when it failed
    """

    def __init__(self, message: str, state: PipelineState):
        super().__init__(message)
        self.state = state


class MissingReferencedImageError(Exception):
    """A storyboard references an image path that is not in the archive."""
    pass


@dataclass(frozen=True)
class FlipResult:
    """
    Complete flip result (immutable).

    Attributes:
        file_name: Name the archive was delivered under
        data: Encoded output archive
        scripts: Script entries that were rewritten
        flipped_images: Image entries that were flipped
        missing_images: Referenced paths with no matching entry
        warnings: Per-item warnings reported during the job
        timings: Phase and per-image timings

    Example:
        >>> result = flip_archive_file(Path("song.osz"), Path("out"))
        >>> print(f"Flipped {result.image_count} images in {len(result.scripts)} scripts")
    """
    file_name: str
    data: bytes
    scripts: Tuple[str, ...]
    flipped_images: Tuple[str, ...]
    missing_images: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    timings: TimingLog = field(default_factory=TimingLog)

    @property
    def image_count(self) -> int:
        return len(self.flipped_images)


@dataclass
class _JobLog:
    """Mutable per-job bookkeeping shared by the fan-out coroutines."""
    progress: ProgressSink
    timings: TimingLog = field(default_factory=TimingLog)
    warnings: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    flipped: List[str] = field(default_factory=list)
    state: PipelineState = PipelineState.LOADING

    def enter(self, state: PipelineState, message: str) -> None:
        self.state = state
        logger.debug(f"Pipeline state -> {state.value}")
        self.progress.report(message)

    def warn(self, message: str, **context) -> None:
        self.warnings.append(message)
        logger.warning(message, extra=context)
        self.progress.report(f"{WARNING_PREFIX}{message}")

    def fail(self, message: str, cause: Exception) -> PipelineError:
        failed_in = self.state
        self.state = PipelineState.FAILED
        logger.error(f"{message}: {cause}")
        self.progress.report(f"Failed: {message}: {cause}")
        return PipelineError(f"{message}: {cause}", failed_in)


async def flip_archive(
    data: bytes,
    file_name: str,
    *,
    progress: ProgressSink,
    handoff: Optional[OutputHandoff] = None,
    config: Optional[FlipConfig] = None,
    executor: Optional[Executor] = None,
) -> FlipResult:
    """
    Vertically flip every storyboard in a beatmap archive.

    Pipeline:
    1. Open the archive
    2. Rewrite every script entry and collect the image paths it references
    3. Once all scripts are done, flip each distinct referenced image once
    4. Serialise the archive
    5. Hand the output to ``handoff`` under the original file name

    Per-image problems (missing entry, unsupported format, decode or encode
    failure) are reported as warnings and skipped. Only an unreadable input
    or a failure to write the output aborts the job.

    Args:
        data: Input archive bytes
        file_name: Original archive file name (used for the output)
        progress: Receives human-readable progress lines
        handoff: Receives the output archive (optional)
        config: Pipeline configuration
        executor: Executor for image codec and repacking work; a thread
                  pool with config.max_workers is created if omitted

    Returns:
        FlipResult with the output bytes and per-item outcomes

    Raises:
        PipelineError: If the archive cannot be opened, written or delivered
    """
    config = config or FlipConfig()
    job = _JobLog(progress)

    if executor is None:
        with ThreadPoolExecutor(max_workers=config.max_workers) as owned_executor:
            return await _run(data, file_name, job, handoff, config, owned_executor)
    return await _run(data, file_name, job, handoff, config, executor)


async def _run(
    data: bytes,
    file_name: str,
    job: _JobLog,
    handoff: Optional[OutputHandoff],
    config: FlipConfig,
    executor: Executor,
) -> FlipResult:
    loop = asyncio.get_running_loop()

    # 1. Load
    job.enter(PipelineState.LOADING, "Loading .osz file...")
    try:
        with timed_phase(job.timings, PipelineState.LOADING.value):
            archive = BeatmapArchive.from_bytes(
                data,
                compression=config.compression,
                compresslevel=config.compresslevel,
            )
    except ArchiveOpenError as e:
        raise job.fail(f"Could not open {file_name}", e) from e

    logger.info(f"Loaded {file_name}: {len(archive.list_entries())} entries")

    # 2. Rewrite scripts; every collection must finish before any image is flipped
    job.enter(PipelineState.REWRITING_SCRIPTS, "Updating storyboards...")
    scripts = [path for path in archive.list_entries() if config.is_script(path)]
    with timed_phase(job.timings, PipelineState.REWRITING_SCRIPTS.value):
        collected = await asyncio.gather(
            *(_rewrite_script(archive, path, config) for path in scripts)
        )
    image_paths: Set[str] = set().union(*collected)
    logger.info(f"Rewrote {len(scripts)} scripts referencing {len(image_paths)} images")

    # 3. Flip each distinct image entry exactly once
    targets = _resolve_targets(archive, image_paths, job)
    total = len(targets)
    completed = 0
    job.enter(PipelineState.FLIPPING_IMAGES, f"Flipping images... (0/{total})")

    async def flip_one(entry_path: str) -> None:
        nonlocal completed
        await _flip_entry(archive, entry_path, config, executor, job)
        completed += 1
        job.progress.report(f"Flipping images... ({completed}/{total})")

    with timed_phase(job.timings, PipelineState.FLIPPING_IMAGES.value):
        await asyncio.gather(*(flip_one(path) for path in targets))

    # 4. Repack
    job.enter(PipelineState.REPACKING, "Generating zip... (0%)")
    logger.debug(f"Repacking {len(archive.modified_paths)} modified entries")

    def on_progress(percent: float) -> None:
        loop.call_soon_threadsafe(job.progress.report, f"Generating zip... ({percent:.0f}%)")

    try:
        with timed_phase(job.timings, PipelineState.REPACKING.value):
            output = await loop.run_in_executor(executor, archive.serialize, on_progress)
    except SerializationError as e:
        raise job.fail(f"Could not write {file_name}", e) from e

    # 5. Deliver
    output_name = config.output_name(file_name)
    if handoff is not None:
        job.state = PipelineState.DELIVERING
        try:
            handoff.deliver(output, output_name)
        except OSError as e:
            raise job.fail(f"Could not deliver {output_name}", e) from e

    job.enter(PipelineState.DONE, "Done!")
    logger.info(
        f"Flipped {file_name}: {len(scripts)} scripts, {len(job.flipped)}/{total} images, "
        f"{len(job.warnings)} warnings",
        extra={"file_name": file_name, "script_count": len(scripts), "image_count": len(job.flipped)},
    )
    logger.debug(job.timings.summary())

    return FlipResult(
        file_name=output_name,
        data=output,
        scripts=tuple(scripts),
        flipped_images=tuple(sorted(job.flipped)),
        missing_images=tuple(sorted(job.missing)),
        warnings=tuple(job.warnings),
        timings=job.timings,
    )


async def _rewrite_script(archive: BeatmapArchive, path: str, config: FlipConfig) -> Set[str]:
    """Rewrite one script entry in place and return the image paths it references."""
    text = archive.read_entry(path, mode="text")
    lines = text.split("\n")

    rewritten = transform_document(lines, config.storyboard_height)
    paths = collect_paths(lines)

    archive.write_entry(path, "\n".join(rewritten))
    logger.debug(f"Rewrote {path}: {len(paths)} image references")
    return paths


def _require_entry(archive: BeatmapArchive, path: str) -> str:
    entry_path = archive.resolve_entry(path)
    if entry_path is None:
        raise MissingReferencedImageError(path)
    return entry_path


def _resolve_targets(archive: BeatmapArchive, image_paths: Set[str], job: _JobLog) -> List[str]:
    """
    Map referenced paths to distinct archive entries.

    Missing paths are reported and dropped. Two references that resolve to
    the same entry (e.g. differing only in case) produce one target.
    """
    resolved: Dict[str, str] = {}
    for path in sorted(image_paths):
        try:
            entry_path = _require_entry(archive, path)
        except MissingReferencedImageError:
            job.missing.append(path)
            job.warn(f"Missing referenced image {path}", image_path=path)
            continue
        resolved.setdefault(entry_path, path)
    return list(resolved)


async def _flip_entry(
    archive: BeatmapArchive,
    path: str,
    config: FlipConfig,
    executor: Executor,
    job: _JobLog,
) -> None:
    """Flip one image entry; per-image failures become warnings."""
    loop = asyncio.get_running_loop()
    try:
        with timed_phase(job.timings, PipelineState.FLIPPING_IMAGES.value, image_path=path):
            mime_type = resolve_mime_type(path)
            source = archive.read_entry(path)
            flipped = await loop.run_in_executor(
                executor,
                partial(flip_image, source, mime_type, jpeg_quality=config.jpeg_quality),
            )
    except ImageFlipError as e:
        job.warn(f"Could not flip {path}: {e}", image_path=path, error=str(e))
        return

    archive.write_entry(path, flipped)
    job.flipped.append(path)


def flip_archive_file(
    input_path: Path,
    output_dir: Path,
    *,
    config: Optional[FlipConfig] = None,
    progress: Optional[ProgressSink] = None,
    overwrite: bool = False,
) -> FlipResult:
    """
    Flip an archive on disk and write the result into output_dir.

    Args:
        input_path: Path to the .osz file
        output_dir: Directory for the flipped archive
        config: Pipeline configuration
        progress: Progress sink (defaults to logging)
        overwrite: Replace an existing output file

    Returns:
        FlipResult

    Raises:
        PipelineError: If the input cannot be read or the job fails
    """
    input_path = Path(input_path)
    progress = progress or LoggingProgressSink()
    try:
        data = input_path.read_bytes()
    except OSError as e:
        progress.report(f"Failed: Could not read {input_path}: {e}")
        raise PipelineError(f"Could not read {input_path}: {e}", PipelineState.LOADING) from e

    handoff = FileOutputHandoff(output_dir, overwrite=overwrite)
    return asyncio.run(
        flip_archive(
            data,
            input_path.name,
            progress=progress,
            handoff=handoff,
            config=config,
        )
    )
