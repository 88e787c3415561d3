import io

import pytest

from mp3tags.ape_common import (
    APE_ITEM_FLAG_BINARY,
    APE_TAG_FLAG_HAS_HEADER,
    APE_TAG_FLAG_IS_HEADER,
    APE_TAG_FLAG_NO_FOOTER,
    APE_TAG_FOOTER_SIZE,
    APE_TAG_IDENTIFIER,
    APE_TAG_VERSION_2_0,
    ApeItem,
    ApeTagHeader,
    Item,
    ItemFlags,
    has_ape_tag,
)
from mp3tags.errors import FileError, OtherError, TagNotFoundError


def _footer(flags=APE_TAG_FLAG_HAS_HEADER):
    return ApeTagHeader(APE_TAG_VERSION_2_0, APE_TAG_FOOTER_SIZE, 0, flags).to_bytes()


def test_header_round_trip():
    header = ApeTagHeader(APE_TAG_VERSION_2_0, 100, 3, APE_TAG_FLAG_HAS_HEADER)
    data = header.to_bytes()
    assert len(data) == APE_TAG_FOOTER_SIZE
    assert data[:8] == APE_TAG_IDENTIFIER
    assert ApeTagHeader.from_bytes(data) == header


def test_header_fields_are_little_endian():
    data = ApeTagHeader(APE_TAG_VERSION_2_0, 0, 0, 0).to_bytes()
    assert data[8:12] == APE_TAG_VERSION_2_0.to_bytes(4, "little")


def test_header_too_small():
    with pytest.raises(OtherError) as info:
        ApeTagHeader.from_bytes(b"APETAGEX")
    assert "Buffer too small for APE tag header" in str(info.value)


def test_header_wrong_identifier():
    data = b"NOTATAGX" + bytes(24)
    with pytest.raises(TagNotFoundError):
        ApeTagHeader.from_bytes(data)


def test_header_flags():
    header = ApeTagHeader(
        APE_TAG_VERSION_2_0, 0, 0, APE_TAG_FLAG_HAS_HEADER | APE_TAG_FLAG_IS_HEADER
    )
    assert header.is_header() is True
    assert header.has_header() is True
    assert header.has_footer() is True
    no_footer = ApeTagHeader(APE_TAG_VERSION_2_0, 0, 0, APE_TAG_FLAG_NO_FOOTER)
    assert no_footer.has_footer() is False
    assert no_footer.is_header() is False
    assert no_footer.has_header() is False


def test_item_text_round_trip():
    item = ApeItem.new_text("TITLE", "Hello é")
    assert item.text() == "Hello é"
    assert item.size == len("Hello é".encode("utf-8"))


def test_item_total_size_matches_serialised_length():
    item = ApeItem.new_text("ARTIST", "Somebody")
    data = item.to_bytes()
    assert item.total_size() == len(data)
    assert data.endswith(b"ARTIST\x00Somebody")


def test_item_binary_is_not_text():
    item = ApeItem("COVER", b"\x00\x01", APE_ITEM_FLAG_BINARY)
    with pytest.raises(OtherError) as info:
        item.text()
    assert "Item is binary, not text" in str(info.value)


def test_item_invalid_utf8():
    item = ApeItem("TITLE", b"\xff\xfe")
    with pytest.raises(OtherError) as info:
        item.text()
    assert "Invalid UTF-8 data" in str(info.value)


@pytest.mark.parametrize(
    "flags, expected",
    [
        (ItemFlags(), 0),
        (ItemFlags(read_only=True), 1),
        (ItemFlags(binary=True), 2),
        (ItemFlags(external=True), 4),
    ],
)
def test_item_flags_as_int(flags, expected):
    assert flags.as_int() == expected


def test_item_write_to_matches_ape_item():
    stream = io.BytesIO()
    Item("GENRE", b"Rock").write_to(stream)
    assert stream.getvalue() == ApeItem("GENRE", b"Rock").to_bytes()


def test_item_write_to_binary_flag():
    stream = io.BytesIO()
    Item("X", b"", ItemFlags(binary=True)).write_to(stream)
    assert stream.getvalue()[4:8] == APE_ITEM_FLAG_BINARY.to_bytes(4, "little")


def test_has_ape_tag_at_end(tmp_path):
    path = tmp_path / "a.mp3"
    path.write_bytes(b"\x00" * 200 + _footer())
    assert has_ape_tag(path) is True


def test_has_ape_tag_at_start_needs_header_flag(tmp_path):
    header = _footer(APE_TAG_FLAG_HAS_HEADER | APE_TAG_FLAG_IS_HEADER)
    path = tmp_path / "b.mp3"
    path.write_bytes(header + b"\x00" * 200)
    assert has_ape_tag(path) is True
    other = tmp_path / "c.mp3"
    other.write_bytes(_footer() + b"\x00" * 200)
    assert has_ape_tag(other) is False


def test_has_ape_tag_before_id3v1(tmp_path):
    id3v1 = b"TAG" + b"\x00" * 125
    path = tmp_path / "d.mp3"
    path.write_bytes(b"\x00" * 100 + _footer() + id3v1)
    assert has_ape_tag(path) is True


def test_has_ape_tag_absent(tmp_path):
    path = tmp_path / "e.mp3"
    path.write_bytes(b"\x01" * 400)
    assert has_ape_tag(path) is False


def test_has_ape_tag_short_file_raises(tmp_path):
    path = tmp_path / "f.mp3"
    path.write_bytes(b"\x00" * 10)
    with pytest.raises(FileError):
        has_ape_tag(path)


def test_has_ape_tag_missing_file(tmp_path):
    with pytest.raises(FileError):
        has_ape_tag(tmp_path / "missing.mp3")