"""APE tag header, item structures and tag detection."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO

from .errors import FileError, OtherError, TagNotFoundError

APE_TAG_FOOTER_SIZE = 32
APE_TAG_HEADER_SIZE = 32
APE_TAG_IDENTIFIER = b"APETAGEX"
APE_TAG_VERSION_2_0 = 2000
APE_VERSION = APE_TAG_VERSION_2_0

APE_TAG_FLAG_HAS_HEADER = 1 << 31
APE_TAG_FLAG_NO_FOOTER = 1 << 30
APE_TAG_FLAG_IS_HEADER = 1 << 29

APE_ITEM_FLAG_UTF8 = 0
APE_ITEM_FLAG_BINARY = 2

ID3V1_TAG_SIZE = 128

_HEADER_STRUCT = struct.Struct("<8sIIII8s")
_ITEM_PREFIX = struct.Struct("<II")


@dataclass
class ApeTagHeader:
    """An APE tag header or footer (both share the same 32-byte layout)."""

    version: int
    size: int
    item_count: int
    flags: int
    identifier: bytes = APE_TAG_IDENTIFIER
    reserved: bytes = bytes(8)

    @classmethod
    def from_bytes(cls, buffer: bytes) -> "ApeTagHeader":
        """Parse a header from the first 32 bytes of *buffer*."""
        if len(buffer) < APE_TAG_HEADER_SIZE:
            raise OtherError("Buffer too small for APE tag header")
        identifier, version, size, item_count, flags, reserved = _HEADER_STRUCT.unpack_from(
            buffer
        )
        if identifier != APE_TAG_IDENTIFIER:
            raise TagNotFoundError()
        return cls(
            version=version,
            size=size,
            item_count=item_count,
            flags=flags,
            identifier=identifier,
            reserved=reserved,
        )

    def to_bytes(self) -> bytes:
        """Serialise the header to its 32-byte form."""
        return _HEADER_STRUCT.pack(
            self.identifier,
            self.version,
            self.size,
            self.item_count,
            self.flags,
            self.reserved,
        )

    def is_header(self) -> bool:
        """True when this block is the header rather than the footer."""
        return bool(self.flags & APE_TAG_FLAG_IS_HEADER)

    def has_header(self) -> bool:
        """True when the tag carries a header block."""
        return bool(self.flags & APE_TAG_FLAG_HAS_HEADER)

    def has_footer(self) -> bool:
        """True when the tag carries a footer block."""
        return not self.flags & APE_TAG_FLAG_NO_FOOTER


@dataclass
class ApeItem:
    """A single key/value item of an APE tag."""

    key: str
    value: bytes
    flags: int = APE_ITEM_FLAG_UTF8

    @property
    def size(self) -> int:
        """Length of the value in bytes."""
        return len(self.value)

    @classmethod
    def new_text(cls, key: str, value: str) -> "ApeItem":
        """Create a UTF-8 text item."""
        return cls(key, value.encode("utf-8"), APE_ITEM_FLAG_UTF8)

    def total_size(self) -> int:
        """Size of the serialised item: size, flags, key, terminator and value."""
        return _ITEM_PREFIX.size + len(self.key.encode("utf-8")) + 1 + self.size

    def text(self) -> str:
        """Return the value as text; binary or undecodable items raise."""
        if self.flags & APE_ITEM_FLAG_BINARY:
            raise OtherError("Item is binary, not text")
        try:
            return self.value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OtherError("Invalid UTF-8 data") from exc

    def to_bytes(self) -> bytes:
        """Serialise the item as it is stored in a tag."""
        return (
            _ITEM_PREFIX.pack(self.size, self.flags)
            + self.key.encode("utf-8")
            + b"\x00"
            + self.value
        )


@dataclass
class ItemFlags:
    """Boolean view of an APE item's flag word."""

    read_only: bool = False
    binary: bool = False
    external: bool = False

    def as_int(self) -> int:
        """Pack the flags into the on-disk integer form."""
        flags = 0
        if self.read_only:
            flags |= 1
        if self.binary:
            flags |= 2
        if self.external:
            flags |= 4
        return flags


@dataclass
class Item:
    """An APE item whose flags are held as booleans."""

    key: str
    value: bytes = b""
    flags: ItemFlags = field(default_factory=ItemFlags)

    def write_to(self, stream: BinaryIO) -> None:
        """Write the serialised item to a binary stream."""
        stream.write(_ITEM_PREFIX.pack(len(self.value), self.flags.as_int()))
        stream.write(self.key.encode("utf-8"))
        stream.write(b"\x00")
        stream.write(self.value)


class _Location(Enum):
    END_OF_FILE = "end"
    START_OF_FILE = "start"
    BEFORE_ID3V1 = "before_id3v1"

    def seek_args(self, file_size: int) -> tuple[int, int] | None:
        if self is _Location.END_OF_FILE:
            if file_size >= APE_TAG_FOOTER_SIZE:
                return -APE_TAG_FOOTER_SIZE, os.SEEK_END
            return None
        if self is _Location.START_OF_FILE:
            return 0, os.SEEK_SET
        if file_size >= APE_TAG_FOOTER_SIZE + ID3V1_TAG_SIZE:
            return -(APE_TAG_FOOTER_SIZE + ID3V1_TAG_SIZE), os.SEEK_END
        return None

    def accepts(self, header: ApeTagHeader) -> bool:
        return header.is_header() if self is _Location.START_OF_FILE else True


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) != count:
        raise FileError("failed to fill whole buffer")
    return data


def _tag_at(stream: BinaryIO, file_size: int, location: _Location) -> bool:
    args = location.seek_args(file_size)
    if args is None:
        return False
    stream.seek(*args)
    buffer = _read_exact(stream, APE_TAG_FOOTER_SIZE)
    try:
        header = ApeTagHeader.from_bytes(buffer)
    except (TagNotFoundError, OtherError):
        return False
    return location.accepts(header)


def has_ape_tag(path: str | os.PathLike[str]) -> bool:
    """Report whether the file holds an APE tag at the end, start or before ID3v1."""
    try:
        with open(path, "rb") as stream:
            file_size = os.fstat(stream.fileno()).st_size
            return any(_tag_at(stream, file_size, location) for location in _Location)
    except OSError as exc:
        raise FileError(str(exc)) from exc