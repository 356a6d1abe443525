"""High-level API for gamedat.

Thin orchestration over :mod:`gamedat.packing`: open/list/extract/inspect
existing archives and create new ones, with progress routed through the
active reporter.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import ArchiveOptions, default_options
from .logging import get_logger
from .packing.cipher import is_obfuscated, is_textdata
from .packing.errors import E_FORMAT, E_UNSAFE_NAME, FormatMismatchError, GameDatError
from .packing.reader import Archive, Entry, Source, open_entry_stream, try_open
from .packing.reader import read_entry as _read_entry
from .packing.writer import EntryCallback, SourceEntry, write_archive
from .reporting import get_reporter, task
from .utils.paths import safe_file_path

__all__ = [
    "CreateOptions",
    "CreateResult",
    "open_archive",
    "list_entries",
    "read_entry",
    "extract_archive",
    "create_archive",
    "inspect_archive",
]


@dataclass(slots=True)
class CreateOptions:
    output_path: Path
    files: Sequence[Path | str] = field(default_factory=list)
    # None -> default_options() (GAMEDAT_VERSION or 2)
    version: int | None = None
    callback: EntryCallback | None = None


@dataclass(slots=True)
class CreateResult:
    output_file: Path
    entries: List[SourceEntry]
    bytes_written: int


def open_archive(source: Source) -> Archive:
    archive = try_open(source)
    if archive is None:
        raise FormatMismatchError(
            code=E_FORMAT,
            message="Not a GAMEDAT PAC archive",
            context={"source": str(source) if isinstance(source, (str, Path)) else None},
        )
    return archive


def list_entries(source: Source) -> List[Dict[str, Any]]:
    with open_archive(source) as archive:
        return [
            {"name": e.name, "offset": e.offset, "size": e.size}
            for e in archive.entries
        ]


def read_entry(archive: Archive, entry: Entry | str) -> bytes:
    if isinstance(entry, str):
        entry = archive.find(entry)
    return _read_entry(archive, entry)


def extract_archive(
    source: Source, output_dir: Path, names: Optional[Sequence[str]] = None
) -> List[Path]:
    """Write entries (decoded) below ``output_dir``; all entries by default."""
    logger = get_logger()
    rep = get_reporter()
    written: List[Path] = []
    with open_archive(source) as archive:
        if names:
            selected = [archive.find(n) for n in names]
        else:
            selected = list(archive.entries)
        output_dir.mkdir(parents=True, exist_ok=True)
        with task("extract", "Extract entries", total=len(selected)) as stats:
            for entry in selected:
                try:
                    target = safe_file_path(output_dir, entry.name)
                except ValueError as e:
                    raise GameDatError(
                        code=E_UNSAFE_NAME,
                        message=f"Entry name {entry.name!r} escapes output directory",
                        context={"output_dir": str(output_dir)},
                    ) from e
                target.parent.mkdir(parents=True, exist_ok=True)
                with open_entry_stream(archive, entry) as src, target.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                logger.debug(f"extracted {entry.name} ({entry.size} bytes)")
                written.append(target)
                rep.advance("extract", current_item=entry.name)
            stats.update(entries=len(written))
    rep.status(f"Extract summary: entries={len(written)} dir={output_dir}")
    return written


def create_archive(options: CreateOptions) -> CreateResult:
    rep = get_reporter()
    arc_options = (
        ArchiveOptions(version=options.version)
        if options.version is not None
        else default_options()
    )
    entries = [SourceEntry.from_path(p) for p in options.files]
    options.output_path.parent.mkdir(parents=True, exist_ok=True)
    with options.output_path.open("wb") as f:
        size = write_archive(f, entries, arc_options, options.callback)
    rep.status(
        f"Create summary: entries={len(entries)} bytes={size} "
        f"version={arc_options.version} output={options.output_path}"
    )
    return CreateResult(
        output_file=options.output_path, entries=entries, bytes_written=size
    )


def inspect_archive(source: Source) -> Dict[str, Any]:
    with open_archive(source) as archive:
        layout = archive.layout
        entries = []
        for e in archive.entries:
            info: Dict[str, Any] = {"name": e.name, "offset": e.offset, "size": e.size}
            if is_textdata(e.name):
                head = archive.view.read_at(e.offset, min(e.size, 5))
                info["obfuscated"] = is_obfuscated(head)
            entries.append(info)
        result = {
            "file_size": archive.view.size,
            "version": layout.version,
            "entry_count": layout.entry_count,
            "layout": {
                "name_width": layout.name_width,
                "name_table_offset": layout.name_table_offset,
                "index_table_offset": layout.index_table_offset,
                "data_offset": layout.data_offset,
            },
            "entries": entries,
        }
    get_reporter().status(
        f"Inspect summary: version={result['version']} "
        f"entries={result['entry_count']} file_size={result['file_size']}"
    )
    return result
