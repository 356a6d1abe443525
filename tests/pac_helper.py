"""Hand-built GAMEDAT PAC containers for reader tests.

Builds bytes directly with ``struct`` so reader tests do not depend on
the writer.
"""

from __future__ import annotations

import struct
from typing import Sequence, Tuple

PLAIN_TEXT = b"PJADV_TF0001" + b"\x00" * 4 + "テキスト".encode("cp932")


def xor_stream(data: bytes) -> bytes:
    out = bytearray(data)
    key = 0xC5
    for i in range(len(out)):
        out[i] ^= key
        key = (key + 0x5C) & 0xFF
    return bytes(out)


def build_container(
    items: Sequence[Tuple[bytes, bytes]],
    version: int = 1,
    count: int | None = None,
) -> bytes:
    width = 16 if version == 1 else 32
    selector = b"K" if version == 1 else b"2"
    n = len(items) if count is None else count
    out = bytearray(b"GAMEDAT PAC" + selector + struct.pack("<i", n))
    for name, _ in items:
        out += name.ljust(width, b"\x00")
    rel = 0
    for _, payload in items:
        out += struct.pack("<II", rel, len(payload))
        rel += len(payload)
    for _, payload in items:
        out += payload
    return bytes(out)
