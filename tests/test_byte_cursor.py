from __future__ import annotations

from olt_graph.domain.imaging.byte_cursor import ByteCursor


def test_reads_within_bounds() -> None:
    cursor = ByteCursor(b"\x01\x02\x03\x04\x05")

    assert cursor.length == 5
    assert cursor.uint8(0) == 0x01
    assert cursor.uint16(0, "big") == 0x0102
    assert cursor.uint16(0, "little") == 0x0201
    assert cursor.uint24(1, "little") == 0x040302
    assert cursor.uint32(1, "big") == 0x02030405
    assert cursor.uint32(1, "little") == 0x05040302


def test_out_of_range_reads_return_none() -> None:
    cursor = ByteCursor(b"\x01\x02\x03")

    assert cursor.uint8(3) is None
    assert cursor.uint16(2) is None
    assert cursor.uint32(0) is None
    assert cursor.uint8(-1) is None
    assert cursor.tag(1, 4) is None


def test_exact_fit_is_allowed() -> None:
    cursor = ByteCursor(b"\xaa\xbb\xcc\xdd")

    assert cursor.has(0, 4)
    assert not cursor.has(1, 4)
    assert cursor.uint32(0) == 0xAABBCCDD


def test_startswith_respects_offset_and_length() -> None:
    cursor = ByteCursor(b"RIFF\x00\x00\x00\x00WEBP")

    assert cursor.startswith(b"RIFF")
    assert cursor.startswith(b"WEBP", 8)
    assert not cursor.startswith(b"WEBPX", 8)


def test_empty_buffer() -> None:
    cursor = ByteCursor(b"")

    assert cursor.length == 0
    assert cursor.uint8(0) is None
    assert not cursor.startswith(b"\x89")
