"""textdata.bin obfuscation.

A position-keyed XOR stream: the key starts at ``0xC5`` and advances by
``0x5C`` (mod 256) per byte, so applying the transform twice restores the
input. Whether a payload is obfuscated is decided by sniffing its first
five bytes for the signature of the obfuscated form; both directions use
the same check, so already obfuscated sources are packed unchanged.
"""

from __future__ import annotations

from .constants import (
    OBFUSCATION_KEY,
    OBFUSCATION_KEY_STEP,
    OBFUSCATION_SIGNATURE,
    TEXTDATA_SUFFIX,
)

__all__ = [
    "is_textdata",
    "is_obfuscated",
    "transform",
    "decode_payload",
    "encode_payload",
]


def is_textdata(name: str) -> bool:
    return name.lower().endswith(TEXTDATA_SUFFIX)


def is_obfuscated(data: bytes | bytearray) -> bool:
    # Payloads shorter than the signature are treated as plaintext.
    return bytes(data[: len(OBFUSCATION_SIGNATURE)]) == OBFUSCATION_SIGNATURE


def transform(data: bytes | bytearray) -> bytearray:
    out = bytearray(data)
    key = OBFUSCATION_KEY
    for i in range(len(out)):
        out[i] ^= key
        key = (key + OBFUSCATION_KEY_STEP) & 0xFF
    return out


def decode_payload(data: bytes | bytearray) -> bytes:
    if is_obfuscated(data):
        return bytes(transform(data))
    return bytes(data)


def encode_payload(data: bytes | bytearray) -> bytes:
    if is_obfuscated(data):
        return bytes(data)
    return bytes(transform(data))
