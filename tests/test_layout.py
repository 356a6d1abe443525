from __future__ import annotations

"""Layout calculator and fixed-width name field tests."""
import pytest

from gamedat.packing.errors import InvalidFileNameError
from gamedat.packing.layout import compute_layout, pack_name, unpack_name


def test_layout_version1():  # noqa: N802
    layout = compute_layout(1, 2)
    assert layout.name_width == 16
    assert layout.name_table_offset == 0x10
    assert layout.index_table_offset == 0x10 + 32
    assert layout.data_offset == 0x10 + 32 + 16


def test_layout_version2():  # noqa: N802
    layout = compute_layout(2, 3)
    assert layout.name_width == 32
    assert layout.index_table_offset == 0x10 + 96
    assert layout.data_offset == 0x10 + 96 + 24
    assert layout.data_offset == (
        layout.name_table_offset
        + layout.name_width * layout.entry_count
        + 8 * layout.entry_count
    )


def test_pack_name_pads_with_zero():
    assert pack_name("data1.bin", 16) == b"data1.bin" + b"\x00" * 7


def test_pack_name_exact_width_has_no_terminator():
    name = "a" * 12 + ".bin"
    assert pack_name(name, 16) == name.encode("ascii")
    assert unpack_name(pack_name(name, 16)) == name


def test_pack_name_cp932():
    field = pack_name("画像.bin", 16)
    assert field.startswith("画像".encode("cp932"))
    assert unpack_name(field) == "画像.bin"


def test_pack_name_too_long():
    with pytest.raises(InvalidFileNameError) as ei:
        pack_name("a_rather_long_name.bin", 16)
    assert ei.value.context["name"] == "a_rather_long_name.bin"
    assert ei.value.code == "E_NAME_ENCODE"


def test_pack_name_unencodable():
    with pytest.raises(InvalidFileNameError):
        pack_name("naïve€😀.bin", 32)


def test_pack_name_rejects_empty():
    with pytest.raises(InvalidFileNameError):
        pack_name("", 16)


def test_unpack_name_stops_at_first_nul():
    assert unpack_name(b"abc\x00junk\x00\x00\x00") == "abc"


def test_unpack_name_drops_dangling_lead_byte():
    field = ("あ" * 8).encode("cp932")[:15] + b"\x00"
    assert unpack_name(field) == "あ" * 7


def test_unpack_name_replaces_invalid_bytes():
    # 0x81 is a lead byte; 0x20 is not a valid trail byte
    name = unpack_name(b"a\x81\x20b\x00")
    assert name.startswith("a") and name.endswith("b")
    assert "\ufffd" in name
