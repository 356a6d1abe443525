"""Explicit registry of archive format descriptors.

Callers consult the registry directly: look a format up by tag or file
extension, or let :meth:`FormatRegistry.open_any` probe a source with each
opener whose 4-byte signature matches the first bytes of the file.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import default_options
from .packing.constants import (
    FORMAT_DESCRIPTION,
    FORMAT_EXTENSIONS,
    FORMAT_SIGNATURE,
    FORMAT_TAG,
)
from .packing.reader import Archive, ArchiveView, Source, try_open
from .packing.writer import write_archive

__all__ = [
    "FormatDescriptor",
    "FormatRegistry",
    "GAMEDAT_FORMAT",
    "default_registry",
]


@dataclass(frozen=True)
class FormatDescriptor:
    tag: str
    description: str
    signature: int
    extensions: Tuple[str, ...]
    opener: Callable[[Source], Optional[Archive]]
    writer: Optional[Callable[..., int]] = None
    options_factory: Optional[Callable[[], Any]] = None
    is_hierarchic: bool = False

    @property
    def can_write(self) -> bool:
        return self.writer is not None

    def matches_signature(self, head: bytes) -> bool:
        if len(head) < 4:
            return False
        return struct.unpack_from("<I", head)[0] == self.signature


@dataclass
class FormatRegistry:
    formats: List[FormatDescriptor] = field(default_factory=list)

    def register(self, fmt: FormatDescriptor) -> None:
        if any(f.tag == fmt.tag for f in self.formats):
            raise ValueError(f"Format {fmt.tag!r} already registered")
        self.formats.append(fmt)

    def get(self, tag: str) -> FormatDescriptor:
        for fmt in self.formats:
            if fmt.tag == tag:
                return fmt
        raise KeyError(tag)

    def by_extension(self, path: str | Path) -> List[FormatDescriptor]:
        ext = Path(path).suffix.lower().lstrip(".")
        return [f for f in self.formats if ext in f.extensions]

    def candidates(self, head: bytes) -> Sequence[FormatDescriptor]:
        return [f for f in self.formats if f.matches_signature(head)]

    def open_any(
        self, path: str | Path
    ) -> Optional[Tuple[FormatDescriptor, Archive]]:
        """Open ``path`` with the first format that accepts it."""
        view = ArchiveView.from_path(path)
        head = view.read_at(0, view.reserve(0, 4))
        try:
            for fmt in self.candidates(head):
                archive = fmt.opener(view)
                if archive is not None:
                    return fmt, archive
        except Exception:
            view.close()
            raise
        view.close()
        return None


GAMEDAT_FORMAT = FormatDescriptor(
    tag=FORMAT_TAG,
    description=FORMAT_DESCRIPTION,
    signature=FORMAT_SIGNATURE,
    extensions=FORMAT_EXTENSIONS,
    opener=try_open,
    writer=write_archive,
    options_factory=default_options,
)

_DEFAULT: FormatRegistry | None = None


def default_registry() -> FormatRegistry:
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = FormatRegistry()
        _DEFAULT.register(GAMEDAT_FORMAT)
    return _DEFAULT

