"""
Module: archive.container

Purpose:
    In-memory handle over a beatmap archive (.osz, a ZIP container).
    Entries are held as a path -> bytes mapping; replacing an entry is a
    keyed upsert. Serialising writes every entry back in its original
    order, keeping the name, timestamp and compression of each.

Key Classes:
    - BeatmapArchive: Open/list/read/write/serialize
    - ArchiveOpenError: Input bytes are not a readable archive
    - EntryNotFoundError: Path is not an entry of the archive
    - SerializationError: Archive could not be written

Dependencies:
    - zipfile (std)

Used By:
    - pipeline.controller: All archive access during a flip job
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"
# Keeps undecodable bytes intact across a read_entry/write_entry round trip
TEXT_ERRORS = "surrogateescape"

_SUPPORTED_COMPRESSION = {zipfile.ZIP_STORED, zipfile.ZIP_DEFLATED}

ProgressCallback = Callable[[float], None]


class ArchiveOpenError(Exception):
    """Input is not a valid archive."""
    pass


class EntryNotFoundError(KeyError):
    """Requested path is not an entry of the archive."""
    pass


class SerializationError(Exception):
    """Archive could not be serialised to bytes."""
    pass


class BeatmapArchive:
    """
    Mutable in-memory view of a ZIP archive.

    Usage:
        archive = BeatmapArchive.from_bytes(data)
        for path in archive.list_entries():
            if path.endswith(".osb"):
                text = archive.read_entry(path, mode="text")
                archive.write_entry(path, text.upper())
        output = archive.serialize()

    Attributes:
        comment: Archive comment carried through to the output
    """

    def __init__(
        self,
        entries: Optional[Dict[str, bytes]] = None,
        infos: Optional[Dict[str, zipfile.ZipInfo]] = None,
        *,
        comment: bytes = b"",
        compression: int = zipfile.ZIP_DEFLATED,
        compresslevel: Optional[int] = None,
    ):
        """
        Initialize archive handle.

        Args:
            entries: Path -> content mapping, in archive order
            infos: Path -> original ZipInfo (missing paths get fresh metadata)
            comment: Archive comment
            compression: Compression for entries without original metadata
            compresslevel: Compression level for those entries
        """
        self._entries: Dict[str, bytes] = dict(entries or {})
        self._infos: Dict[str, zipfile.ZipInfo] = dict(infos or {})
        self._modified: set[str] = set()
        self.comment = comment
        self.compression = compression
        self.compresslevel = compresslevel

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs) -> BeatmapArchive:
        """
        Open an archive from its encoded bytes.

        Raises:
            ArchiveOpenError: If data is not a readable ZIP archive
        """
        try:
            with zipfile.ZipFile(BytesIO(data), "r") as zf:
                entries: Dict[str, bytes] = {}
                infos: Dict[str, zipfile.ZipInfo] = {}
                for info in zf.infolist():
                    entries[info.filename] = zf.read(info)
                    infos[info.filename] = info
                comment = zf.comment
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            NotImplementedError,
            RuntimeError,
            OSError,
            EOFError,
        ) as e:
            raise ArchiveOpenError(f"Not a valid archive: {e}") from e

        logger.debug(f"Opened archive with {len(entries)} entries")
        return cls(entries, infos, comment=comment, **kwargs)

    @classmethod
    def from_path(cls, path: Path, **kwargs) -> BeatmapArchive:
        """Open an archive file from disk."""
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise ArchiveOpenError(f"Cannot read archive {path}: {e}") from e
        return cls.from_bytes(data, **kwargs)

    # ─────────────────────────────────────────────────────────────────────────
    # Entry access
    # ─────────────────────────────────────────────────────────────────────────

    def list_entries(self) -> List[str]:
        """Entry paths in archive order (directory entries included)."""
        return list(self._entries)

    def resolve_entry(self, path: str) -> Optional[str]:
        """
        Find the entry a script reference points at.

        Exact matches win. Otherwise a case-insensitive match is accepted
        when it is unique, since the game client resolves storyboard paths
        case-insensitively.

        Returns:
            Actual entry path, or None if nothing (or nothing unique) matches
        """
        if path in self._entries:
            return path
        folded = path.casefold()
        matches = [name for name in self._entries if name.casefold() == folded]
        if len(matches) == 1:
            return matches[0]
        return None

    @property
    def modified_paths(self) -> List[str]:
        """Paths written since the archive was opened, in archive order."""
        return [path for path in self._entries if path in self._modified]

    def read_entry(self, path: str, mode: str = "binary") -> Union[bytes, str]:
        """
        Read one entry.

        Args:
            path: Entry path
            mode: "binary" for bytes, "text" for UTF-8 decoded str

        Raises:
            EntryNotFoundError: If path is not in the archive
            ValueError: For an unknown mode
        """
        if mode not in ("binary", "text"):
            raise ValueError(f"mode must be 'binary' or 'text': {mode}")
        try:
            content = self._entries[path]
        except KeyError:
            raise EntryNotFoundError(path) from None

        if mode == "text":
            return content.decode(TEXT_ENCODING, errors=TEXT_ERRORS)
        return content

    def write_entry(self, path: str, content: Union[bytes, str]) -> None:
        """
        Replace (or add) the entry at path.

        Text content is encoded as UTF-8. Existing entries keep their
        position and metadata.
        """
        if isinstance(content, str):
            content = content.encode(TEXT_ENCODING, errors=TEXT_ERRORS)
        self._entries[path] = content
        self._modified.add(path)

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    def serialize(self, on_progress: Optional[ProgressCallback] = None) -> bytes:
        """
        Write all entries to a new ZIP archive.

        Args:
            on_progress: Called with the completion percentage (0-100)
                         after each entry is written

        Returns:
            Encoded archive bytes

        Raises:
            SerializationError: If any entry cannot be written
        """
        total = len(self._entries)
        buffer = BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", self.compression, compresslevel=self.compresslevel) as zf:
                zf.comment = self.comment
                for written, (path, content) in enumerate(self._entries.items(), start=1):
                    zf.writestr(self._info_for(path), content)
                    if on_progress:
                        on_progress(100.0 * written / total)
        except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as e:
            raise SerializationError(f"Failed to write archive: {e}") from e

        if on_progress and total == 0:
            on_progress(100.0)

        logger.debug(f"Serialized {total} entries ({buffer.tell()} bytes)")
        return buffer.getvalue()

    def _info_for(self, path: str) -> zipfile.ZipInfo:
        """Fresh ZipInfo carrying the original entry's metadata."""
        original = self._infos.get(path)
        if original is None:
            info = zipfile.ZipInfo(path)
            info.compress_type = self.compression
            info.external_attr = 0o644 << 16
            return info

        info = zipfile.ZipInfo(original.filename, original.date_time)
        info.compress_type = (
            original.compress_type
            if original.compress_type in _SUPPORTED_COMPRESSION
            else self.compression
        )
        info.external_attr = original.external_attr
        info.create_system = original.create_system
        info.comment = original.comment
        return info
