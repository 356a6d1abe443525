"""Region layout and fixed-width name field helpers.

Both the reader and the writer derive every table offset from
:func:`compute_layout`; neither performs its own offset math.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    INDEX_RECORD_SIZE,
    NAME_ENCODING,
    NAME_TABLE_OFFSET,
    NAME_WIDTH_V1,
    NAME_WIDTH_V2,
)
from .errors import E_NAME_ENCODE, InvalidFileNameError

__all__ = [
    "Layout",
    "compute_layout",
    "name_width_for",
    "pack_name",
    "unpack_name",
]


@dataclass(frozen=True, slots=True)
class Layout:
    version: int
    entry_count: int
    name_width: int
    name_table_offset: int
    index_table_offset: int
    data_offset: int


def name_width_for(version: int) -> int:
    return NAME_WIDTH_V1 if version == 1 else NAME_WIDTH_V2


def compute_layout(version: int, entry_count: int) -> Layout:
    """Return region offsets for ``entry_count`` entries of ``version``.

    The count is not range checked here; the reader validates it against
    the header limits before calling.
    """
    width = name_width_for(version)
    index_offset = NAME_TABLE_OFFSET + width * entry_count
    return Layout(
        version=version,
        entry_count=entry_count,
        name_width=width,
        name_table_offset=NAME_TABLE_OFFSET,
        index_table_offset=index_offset,
        data_offset=index_offset + INDEX_RECORD_SIZE * entry_count,
    )


def pack_name(name: str, width: int) -> bytes:
    """Encode ``name`` into a zero padded field of exactly ``width`` bytes.

    Raises :class:`InvalidFileNameError` when the name is empty, contains
    NUL, is not representable in the legacy code page or does not fit.
    """
    if not name or "\x00" in name:
        raise InvalidFileNameError(
            code=E_NAME_ENCODE,
            message=f"Invalid file name {name!r}",
            context={"name": name},
        )
    try:
        raw = name.encode(NAME_ENCODING)
    except UnicodeEncodeError as e:
        raise InvalidFileNameError(
            code=E_NAME_ENCODE,
            message=f"File name {name!r} is not representable in {NAME_ENCODING}",
            context={"name": name, "reason": str(e)},
        ) from e
    if len(raw) > width:
        raise InvalidFileNameError(
            code=E_NAME_ENCODE,
            message=f"File name {name!r} is too long ({len(raw)}>{width} bytes)",
            context={"name": name, "length": len(raw), "width": width},
        )
    return raw + b"\x00" * (width - len(raw))


def unpack_name(field: bytes) -> str:
    """Decode a null-padded name field; never fails.

    Names cut at the field width may end in half of a double-byte
    character; that dangling lead byte is dropped. Other undecodable bytes
    become U+FFFD.
    """
    raw = field.split(b"\x00", 1)[0]
    try:
        return raw.decode(NAME_ENCODING)
    except UnicodeDecodeError as e:
        if e.start == len(raw) - 1:
            raw = raw[:-1]
        return raw.decode(NAME_ENCODING, errors="replace")
