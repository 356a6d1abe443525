from __future__ import annotations

"""Reader tests against hand-built containers."""
import io
import struct

import pytest

from gamedat.packing.errors import CorruptDirectoryError, EntryNotFoundError
from gamedat.packing.reader import (
    ArchiveView,
    open_entry_stream,
    read_entry,
    try_open,
)
from pac_helper import PLAIN_TEXT, build_container, xor_stream

DATA1 = bytes(range(32))


def _scenario() -> bytes:
    return build_container(
        [(b"data1.bin", DATA1), (b"textdata.bin", xor_stream(PLAIN_TEXT))],
        version=1,
    )


def test_open_version1_directory():
    archive = try_open(_scenario())
    assert archive is not None
    assert archive.version == 1
    assert [e.name for e in archive] == ["data1.bin", "textdata.bin"]
    base = 0x10 + 2 * 16 + 2 * 8
    assert archive.layout.data_offset == base
    assert archive.entries[0].offset == base
    assert archive.entries[0].size == len(DATA1)
    assert archive.entries[1].offset == base + len(DATA1)


def test_read_textdata_removes_obfuscation():
    with try_open(_scenario()) as archive:
        text = read_entry(archive, archive.find("textdata.bin"))
        plain = read_entry(archive, archive.find("data1.bin"))
    assert text == PLAIN_TEXT
    assert text[0] != 0x95
    assert plain == DATA1


def test_read_plain_textdata_unchanged():
    data = build_container([(b"TextData.bin", PLAIN_TEXT)], version=2)
    with try_open(data) as archive:
        assert read_entry(archive, archive.entries[0]) == PLAIN_TEXT


def test_other_entries_never_transformed():
    obfuscated = xor_stream(PLAIN_TEXT)
    data = build_container([(b"image.bin", obfuscated)])
    with try_open(data) as archive:
        assert read_entry(archive, archive.entries[0]) == obfuscated


def test_open_entry_stream():
    with try_open(_scenario()) as archive:
        with open_entry_stream(archive, archive.entries[0]) as s:
            assert s.read(4) == DATA1[:4]
            s.seek(-2, io.SEEK_END)
            assert s.read() == DATA1[-2:]
            assert s.read() == b""
        with open_entry_stream(archive, archive.entries[1]) as s:
            assert s.read() == PLAIN_TEXT


@pytest.mark.parametrize(
    "head",
    [
        b"GAMEDAT PAK",
        b"gamedat pac",
        b"XXXXXXXXXXX",
    ],
)
def test_rejects_bad_magic(head: bytes):
    data = bytearray(_scenario())
    data[:11] = head
    assert try_open(bytes(data)) is None


def test_rejects_truncated_magic():
    assert try_open(b"GAMEDAT") is None
    assert try_open(b"") is None


def test_rejects_unknown_version_selector():
    data = bytearray(_scenario())
    data[0x0B] = ord("3")
    assert try_open(bytes(data)) is None


@pytest.mark.parametrize("count", [0, -1, 0x100000, -0x80000000])
def test_rejects_count_out_of_range(count: int):
    data = build_container([(b"a.bin", b"abc")], version=2, count=count)
    with pytest.raises(CorruptDirectoryError) as ei:
        try_open(data)
    assert ei.value.code == "E_COUNT"


def test_rejects_hand_crafted_oversized_v2_count():
    data = b"GAMEDAT PAC2" + struct.pack("<i", 0xFFFFF + 1) + b"\x00" * 64
    with pytest.raises(CorruptDirectoryError):
        try_open(data)


def test_rejects_directory_past_eof():
    data = build_container([(b"a.bin", b"abc"), (b"b.bin", b"def")])
    truncated = data[: 0x10 + 2 * 16 + 8]
    with pytest.raises(CorruptDirectoryError) as ei:
        try_open(truncated)
    assert ei.value.code == "E_DIRECTORY_BOUNDS"


def test_rejects_entry_past_eof():
    data = build_container([(b"a.bin", b"abc"), (b"b.bin", b"defg")])
    with pytest.raises(CorruptDirectoryError) as ei:
        try_open(data[:-1])
    assert ei.value.code == "E_ENTRY_BOUNDS"
    assert ei.value.context["index"] == 1


def test_open_from_path_and_file_object(tmp_path):
    p = tmp_path / "game.dat"
    p.write_bytes(_scenario())
    with try_open(p) as archive:
        assert len(archive) == 2
    with p.open("rb") as f:
        archive = try_open(f)
        assert read_entry(archive, archive.entries[0]) == DATA1
        archive.close()
        assert not f.closed


def test_rejected_borrowed_view_stays_open():
    view = ArchiveView.from_bytes(b"NOT A GAMEDAT ARCHIVE")
    assert try_open(view) is None
    assert view.read_at(0, 3) == b"NOT"
    view.close()


def test_find_missing_entry():
    with try_open(_scenario()) as archive:
        with pytest.raises(EntryNotFoundError):
            archive.find("missing.bin")


def test_open_name_cut_mid_character():
    # Names truncated at the field width can end in half of a cp932 pair
    field = ("あ" * 8).encode("cp932")[:15]
    archive = try_open(build_container([(field, b"payload")], version=1))
    assert archive is not None
    assert [e.name for e in archive] == ["あ" * 7]
    assert read_entry(archive, archive.entries[0]) == b"payload"
