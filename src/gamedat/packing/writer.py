"""Binary writer emitting a GAMEDAT PAC container.

The writer consumes the :class:`Layout` computed for the entry count and
emits the three regions in one pass: names, then payloads from the data
offset onwards, then a seek back to fill the index table with the offsets
and sizes recorded while the payloads were written.
"""

from __future__ import annotations

import io
import os
import shutil
import struct
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Callable, Iterator, Optional, Sequence

from ..config import ArchiveOptions
from ..logging import get_logger
from ..reporting import get_reporter, task
from .cipher import encode_payload, is_textdata
from .constants import (
    MAGIC,
    MAX_ENTRY_COUNT,
    MAX_UINT32,
    SELECTOR_BYTES,
)
from .errors import (
    E_FILE_SIZE,
    E_OPTIONS,
    FileSizeError,
    OptionsError,
)
from .layout import compute_layout, pack_name

__all__ = ["SourceEntry", "EntryCallback", "write_archive"]

# (total_steps, current_item, unused)
EntryCallback = Callable[[int, Optional["SourceEntry"], Any], None]

_INDEX_RECORD = struct.Struct("<II")


@dataclass(slots=True)
class SourceEntry:
    """One resource to pack; ``offset``/``size`` are filled in by the writer."""

    name: str
    path: Path | None = None
    data: bytes | None = None
    offset: int = 0
    size: int = 0

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceEntry":
        return cls(name=str(path), path=Path(path))

    @property
    def archive_name(self) -> str:
        return self.name.replace("\\", "/").rsplit("/", 1)[-1]

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        if self.data is not None:
            yield io.BytesIO(self.data)
            return
        with Path(self.path or self.name).open("rb") as f:
            yield f


def _source_size(f: BinaryIO) -> int:
    size = f.seek(0, os.SEEK_END)
    f.seek(0)
    return size


def _write_header(f: BinaryIO, version: int, count: int) -> None:
    f.write(MAGIC)
    f.write(SELECTOR_BYTES[version])
    f.write(struct.pack("<i", count))


def _write_payload(f: BinaryIO, entry: SourceEntry, cursor: int) -> int:
    """Write one entry's payload at ``cursor``; return its size."""
    with entry.open() as src:
        size = _source_size(src)
        if size > MAX_UINT32 or cursor + size > MAX_UINT32:
            raise FileSizeError(
                code=E_FILE_SIZE,
                message=f"{entry.name}: file is too large for the archive",
                context={"name": entry.name, "size": size, "offset": cursor},
            )
        if is_textdata(entry.name):
            f.write(encode_payload(src.read(size)))
        else:
            shutil.copyfileobj(src, f)
    return size


def write_archive(
    f: BinaryIO,
    entries: Sequence[SourceEntry],
    options: ArchiveOptions,
    callback: EntryCallback | None = None,
) -> int:
    """Serialize ``entries`` into ``f`` and return the container size."""
    logger = get_logger()
    rep = get_reporter()
    count = len(entries)
    if count == 0 or count > MAX_ENTRY_COUNT:
        raise OptionsError(
            code=E_OPTIONS,
            message=f"Entry count {count} out of range",
            context={"count": count, "max": MAX_ENTRY_COUNT},
        )
    total_steps = count + 2
    layout = compute_layout(options.version, count)
    logger.debug(
        f"layout v{layout.version}: names@{layout.name_table_offset} "
        f"index@{layout.index_table_offset} data@{layout.data_offset}"
    )

    with task("write.archive", "Create archive", total=total_steps) as stats:
        if callback is not None:
            callback(total_steps, None, None)
        f.seek(0)
        _write_header(f, layout.version, count)
        rep.advance("write.archive", current_item="header")

        for entry in entries:
            f.write(pack_name(entry.archive_name, layout.name_width))

        f.seek(layout.data_offset)
        cursor = layout.data_offset
        for entry in entries:
            if callback is not None:
                callback(total_steps, entry, None)
            entry.offset = cursor
            entry.size = _write_payload(f, entry, cursor)
            cursor += entry.size
            rep.advance("write.archive", current_item=entry.archive_name)

        f.seek(layout.index_table_offset)
        for entry in entries:
            f.write(_INDEX_RECORD.pack(entry.offset - layout.data_offset, entry.size))
        f.seek(cursor)
        if callback is not None:
            callback(total_steps, None, None)
        rep.advance("write.archive", current_item="index")
        stats.update(entries=count, bytes=cursor)
    return cursor
