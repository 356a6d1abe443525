"""GAMEDAT PAC reader.

Public functions:
- try_open(source) -> Archive | None
- read_entry(archive, entry) -> bytes
- open_entry_stream(archive, entry) -> BinaryIO

``try_open`` returns ``None`` when the header does not belong to this
format so that a caller probing several formats can move on. A header that
matches but describes an impossible directory raises
:class:`CorruptDirectoryError`; no partial directory is ever returned.
"""

from __future__ import annotations

import io
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from ..logging import get_logger
from .cipher import decode_payload, is_textdata
from .constants import (
    COUNT_OFFSET,
    HEADER_SIZE,
    INDEX_RECORD_SIZE,
    MAGIC,
    MAX_ENTRY_COUNT,
    VERSION_OFFSET,
    VERSION_SELECTORS,
)
from .errors import (
    E_COUNT,
    E_DIRECTORY_BOUNDS,
    E_ENTRY_BOUNDS,
    E_ENTRY_NOT_FOUND,
    EntryNotFoundError,
    corrupt_directory,
)
from .layout import Layout, compute_layout, unpack_name

__all__ = [
    "Entry",
    "ArchiveView",
    "Archive",
    "Source",
    "try_open",
    "read_entry",
    "open_entry_stream",
]

_INDEX_RECORD = struct.Struct("<II")


@dataclass(slots=True)
class Entry:
    name: str
    offset: int = 0
    size: int = 0

    def check_placement(self, max_offset: int) -> bool:
        return self.offset + self.size <= max_offset


class ArchiveView:
    """Length-bounded random access view over a binary source."""

    def __init__(self, stream: BinaryIO, *, owns: bool = False, name: str = ""):
        self._stream = stream
        self._owns = owns
        self.name = name
        stream.seek(0, os.SEEK_END)
        self.size = stream.tell()

    @classmethod
    def from_path(cls, path: str | Path) -> "ArchiveView":
        p = Path(path)
        return cls(p.open("rb"), owns=True, name=str(p))

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<memory>") -> "ArchiveView":
        return cls(io.BytesIO(data), owns=True, name=name)

    def reserve(self, offset: int, size: int) -> int:
        """Number of bytes actually available in ``[offset, offset+size)``."""
        if offset >= self.size:
            return 0
        return min(size, self.size - offset)

    def read_at(self, offset: int, size: int) -> bytes:
        if offset < 0 or offset + size > self.size:
            raise ValueError(
                f"Out of range read: {offset}+{size}>{self.size}"
            )
        self._stream.seek(offset)
        data = self._stream.read(size)
        if len(data) != size:
            raise ValueError(
                f"Short read at {offset}: expected {size} got {len(data)}"
            )
        return data

    def ascii_equal(self, offset: int, text: bytes) -> bool:
        if self.reserve(offset, len(text)) < len(text):
            return False
        return self.read_at(offset, len(text)) == text

    def read_u8(self, offset: int) -> int:
        return self.read_at(offset, 1)[0]

    def read_i32(self, offset: int) -> int:
        return struct.unpack("<i", self.read_at(offset, 4))[0]

    def close(self) -> None:
        if self._owns:
            self._stream.close()

    def __enter__(self) -> "ArchiveView":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


Source = Union[str, Path, bytes, BinaryIO, ArchiveView]


def _as_view(source: Source) -> ArchiveView:
    if isinstance(source, ArchiveView):
        return source
    if isinstance(source, (str, Path)):
        return ArchiveView.from_path(source)
    if isinstance(source, (bytes, bytearray)):
        return ArchiveView.from_bytes(bytes(source))
    return ArchiveView(source, name=getattr(source, "name", ""))


@dataclass
class Archive:
    view: ArchiveView
    layout: Layout
    entries: List[Entry] = field(default_factory=list)

    @property
    def version(self) -> int:
        return self.layout.version

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def find(self, name: str) -> Entry:
        for entry in self.entries:
            if entry.name == name:
                return entry
        raise EntryNotFoundError(
            code=E_ENTRY_NOT_FOUND,
            message=f"No entry named {name!r}",
            context={"archive": self.view.name},
        )

    def close(self) -> None:
        self.view.close()

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _read_version(view: ArchiveView) -> Optional[int]:
    if not view.ascii_equal(0, MAGIC):
        return None
    if view.size < HEADER_SIZE:
        return None
    return VERSION_SELECTORS.get(view.read_u8(VERSION_OFFSET))


def _read_directory(view: ArchiveView, version: int) -> Archive:
    count = view.read_i32(COUNT_OFFSET)
    if count <= 0 or count > MAX_ENTRY_COUNT:
        raise corrupt_directory(
            E_COUNT,
            f"Entry count {count} out of range",
            {"count": count, "max": MAX_ENTRY_COUNT},
        )
    layout = compute_layout(version, count)
    if layout.data_offset > view.reserve(0, layout.data_offset):
        raise corrupt_directory(
            E_DIRECTORY_BOUNDS,
            "Directory exceeds file size",
            {"data_offset": layout.data_offset, "file_size": view.size},
        )
    # The directory is known to be in bounds; read both tables in one go.
    names = view.read_at(layout.name_table_offset, layout.name_width * count)
    index = view.read_at(layout.index_table_offset, INDEX_RECORD_SIZE * count)
    entries: List[Entry] = []
    name_cursor = 0
    for i in range(count):
        name = unpack_name(names[name_cursor : name_cursor + layout.name_width])
        rel_offset, size = _INDEX_RECORD.unpack_from(index, i * INDEX_RECORD_SIZE)
        entry = Entry(name=name, offset=layout.data_offset + rel_offset, size=size)
        if not entry.check_placement(view.size):
            raise corrupt_directory(
                E_ENTRY_BOUNDS,
                f"Entry {name!r} exceeds file size",
                {
                    "index": i,
                    "offset": entry.offset,
                    "size": entry.size,
                    "file_size": view.size,
                },
            )
        entries.append(entry)
        name_cursor += layout.name_width
    return Archive(view=view, layout=layout, entries=entries)


def try_open(source: Source) -> Optional[Archive]:
    logger = get_logger()
    view = _as_view(source)
    # Views handed in by the caller stay open for other openers.
    borrowed = view is source
    try:
        version = _read_version(view)
        if version is None:
            logger.debug(f"{view.name}: not a GAMEDAT PAC archive")
            if not borrowed:
                view.close()
            return None
        archive = _read_directory(view, version)
    except Exception:
        if not borrowed:
            view.close()
        raise
    logger.debug(
        f"{view.name}: GAMEDAT v{version} entries={len(archive.entries)} "
        f"data_offset={archive.layout.data_offset}"
    )
    return archive


def read_entry(archive: Archive, entry: Entry) -> bytes:
    data = archive.view.read_at(entry.offset, entry.size)
    if not is_textdata(entry.name):
        return data
    return decode_payload(data)


class _EntryStream(io.RawIOBase):
    """Read-only window ``[offset, offset+size)`` over an archive view."""

    def __init__(self, view: ArchiveView, offset: int, size: int):
        super().__init__()
        self._view = view
        self._offset = offset
        self._size = size
        self._pos = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._pos

    def seek(self, pos: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_CUR:
            pos += self._pos
        elif whence == os.SEEK_END:
            pos += self._size
        if pos < 0:
            raise ValueError("negative seek position")
        self._pos = pos
        return pos

    def readinto(self, buffer) -> int:
        remaining = self._size - self._pos
        if remaining <= 0:
            return 0
        n = min(len(buffer), remaining)
        data = self._view.read_at(self._offset + self._pos, n)
        buffer[:n] = data
        self._pos += n
        return n


def open_entry_stream(archive: Archive, entry: Entry) -> BinaryIO:
    if not is_textdata(entry.name):
        return io.BufferedReader(_EntryStream(archive.view, entry.offset, entry.size))
    return io.BytesIO(read_entry(archive, entry))
