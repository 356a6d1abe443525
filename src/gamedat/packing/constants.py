"""Binary format constants for GAMEDAT PAC containers."""

from __future__ import annotations

MAGIC = b"GAMEDAT PAC"
HEADER_SIZE = 0x10
VERSION_OFFSET = 0x0B
COUNT_OFFSET = 0x0C

# Selector byte at VERSION_OFFSET -> format version
VERSION_SELECTORS = {ord("K"): 1, ord("2"): 2}
SELECTOR_BYTES = {1: b"K", 2: b"2"}
SUPPORTED_VERSIONS = (1, 2)

MAX_ENTRY_COUNT = 0x000FFFFF
NAME_TABLE_OFFSET = HEADER_SIZE
INDEX_RECORD_SIZE = 8  # u32 relative offset + u32 size
NAME_WIDTH_V1 = 16
NAME_WIDTH_V2 = 32
NAME_ENCODING = "cp932"

MAX_UINT32 = 0xFFFFFFFF

# textdata.bin obfuscation
TEXTDATA_SUFFIX = "textdata.bin"
OBFUSCATION_SIGNATURE = bytes((0x95, 0x6B, 0x3C, 0x9D, 0x63))
OBFUSCATION_KEY = 0xC5
OBFUSCATION_KEY_STEP = 0x5C

# Registry metadata
FORMAT_TAG = "GAMEDAT"
FORMAT_DESCRIPTION = "Pajamas Adventure System resource archive"
FORMAT_SIGNATURE = 0x454D4147  # 'GAME'
FORMAT_EXTENSIONS = ("dat", "pak")

__all__ = [
    "MAGIC",
    "HEADER_SIZE",
    "VERSION_OFFSET",
    "COUNT_OFFSET",
    "VERSION_SELECTORS",
    "SELECTOR_BYTES",
    "SUPPORTED_VERSIONS",
    "MAX_ENTRY_COUNT",
    "NAME_TABLE_OFFSET",
    "INDEX_RECORD_SIZE",
    "NAME_WIDTH_V1",
    "NAME_WIDTH_V2",
    "NAME_ENCODING",
    "MAX_UINT32",
    "TEXTDATA_SUFFIX",
    "OBFUSCATION_SIGNATURE",
    "OBFUSCATION_KEY",
    "OBFUSCATION_KEY_STEP",
    "FORMAT_TAG",
    "FORMAT_DESCRIPTION",
    "FORMAT_SIGNATURE",
    "FORMAT_EXTENSIONS",
]
