from __future__ import annotations

"""textdata.bin obfuscation tests."""
import os

from gamedat.packing.cipher import (
    decode_payload,
    encode_payload,
    is_obfuscated,
    is_textdata,
    transform,
)
from gamedat.packing.constants import OBFUSCATION_SIGNATURE
from pac_helper import PLAIN_TEXT, xor_stream


def test_transform_is_self_inverse():
    for data in (b"", b"\x00", PLAIN_TEXT, os.urandom(1000)):
        assert bytes(transform(transform(data))) == data


def test_transform_key_schedule():
    assert bytes(transform(b"\x00" * 6)) == bytes([0xC5, 0x21, 0x7D, 0xD9, 0x35, 0x91])
    assert bytes(transform(PLAIN_TEXT)) == xor_stream(PLAIN_TEXT)


def test_plain_header_encodes_to_signature():
    assert encode_payload(PLAIN_TEXT)[:5] == OBFUSCATION_SIGNATURE


def test_encode_leaves_obfuscated_input_unchanged():
    obfuscated = xor_stream(PLAIN_TEXT)
    assert encode_payload(obfuscated) == obfuscated


def test_decode_only_when_signature_present():
    obfuscated = xor_stream(PLAIN_TEXT)
    assert decode_payload(obfuscated) == PLAIN_TEXT
    assert decode_payload(PLAIN_TEXT) == PLAIN_TEXT


def test_short_payload_is_plaintext():
    assert not is_obfuscated(OBFUSCATION_SIGNATURE[:4])
    assert decode_payload(b"\x95\x6b") == b"\x95\x6b"
    assert encode_payload(b"") == b""


def test_textdata_suffix_is_case_insensitive():
    assert is_textdata("textdata.bin")
    assert is_textdata("SCRIPT_TEXTDATA.BIN")
    assert not is_textdata("textdata.bin.bak")
    assert not is_textdata("data1.bin")
