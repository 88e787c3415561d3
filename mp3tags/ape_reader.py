"""Reading APE tags from files and editing them in memory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Union

from .ape_common import (
    APE_TAG_FLAG_HAS_HEADER,
    APE_TAG_FLAG_IS_HEADER,
    APE_TAG_FOOTER_SIZE,
    APE_TAG_HEADER_SIZE,
    APE_TAG_VERSION_2_0,
    ID3V1_TAG_SIZE,
    ApeItem,
    ApeTagHeader,
)
from .errors import (
    EntryNotFoundError,
    FileError,
    OtherError,
    TagError,
    TagNotFoundError,
)

MAX_KEY_LENGTH = 255
MAX_VALUE_SIZE = 16 * 1024 * 1024


class MetaEntry(Enum):
    """Standard meta entries; the value is the APE item key used for each."""

    TITLE = "TITLE"
    ARTIST = "ARTIST"
    ALBUM = "ALBUM"
    YEAR = "YEAR"
    GENRE = "GENRE"
    COMMENT = "COMMENT"
    COMPOSER = "COMPOSER"
    TRACK = "TRACK"
    DATE = "DATE"
    TEXT_WRITER = "TEXTWRITER"
    AUDIO_ENCRYPTION = "AUDIOENCRYPTION"
    LANGUAGE = "LANGUAGE"
    TIME = "TIME"
    ORIGINAL_FILENAME = "ORIGINALFILENAME"
    FILE_TYPE = "FILETYPE"
    BAND_ORCHESTRA = "BANDORCHESTRA"


# A custom entry is represented by its item key as a plain string.
EntryLike = Union[MetaEntry, str]

_KEY_TO_ENTRY = {entry.value: entry for entry in MetaEntry}


def meta_entry_to_ape_key(entry: EntryLike) -> str:
    """Return the APE item key for a meta entry or custom key."""
    if isinstance(entry, MetaEntry):
        return entry.value
    return entry


def ape_key_to_meta_entry(key: str) -> EntryLike:
    """Map an APE item key to a standard entry, or keep it as a custom key."""
    return _KEY_TO_ENTRY.get(key.upper(), key)


def _same_key(first: str, second: str) -> bool:
    # ASCII-only case folding, as APE keys are compared.
    return first.encode("utf-8").lower() == second.encode("utf-8").lower()


@dataclass
class ApeTag:
    """An APE tag: optional header, footer and its items."""

    footer: ApeTagHeader
    header: ApeTagHeader | None = None
    items: list[ApeItem] = field(default_factory=list)

    @classmethod
    def new(cls, version: int = APE_TAG_VERSION_2_0) -> "ApeTag":
        """Create an empty tag with both header and footer."""
        footer = ApeTagHeader(version, APE_TAG_FOOTER_SIZE, 0, APE_TAG_FLAG_HAS_HEADER)
        header = ApeTagHeader(
            version,
            APE_TAG_FOOTER_SIZE,
            0,
            APE_TAG_FLAG_HAS_HEADER | APE_TAG_FLAG_IS_HEADER,
        )
        return cls(footer=footer, header=header)

    def get_item(self, key: str) -> ApeItem | None:
        """Return the item with the given key (ASCII case-insensitive), if any."""
        return next((item for item in self.items if _same_key(item.key, key)), None)

    def get_item_text(self, key: str) -> str:
        """Return the text of an item; missing, binary or undecodable items raise."""
        item = self.get_item(key)
        if item is None:
            raise EntryNotFoundError()
        return item.text()

    def _replace_or_append(self, item: ApeItem) -> None:
        for index, existing in enumerate(self.items):
            if _same_key(existing.key, item.key):
                self.items[index] = item
                break
        else:
            self.items.append(item)
        self._update_size_and_count()

    def set_item(self, item: ApeItem) -> None:
        """Add an item or replace the one with the same key."""
        self._replace_or_append(item)

    def set_text_item(self, key: str, value: str) -> None:
        """Add or replace a UTF-8 text item."""
        self._replace_or_append(ApeItem.new_text(key, value))

    def remove_item(self, key: str) -> bool:
        """Remove every item with the key; report whether any was removed."""
        kept = [item for item in self.items if not _same_key(item.key, key)]
        removed = len(kept) < len(self.items)
        if removed:
            self.items = kept
            self._update_size_and_count()
        return removed

    def get_meta_entries(self) -> dict[EntryLike, str]:
        """Return the text items keyed by meta entry; non-text items are skipped."""
        entries: dict[EntryLike, str] = {}
        for item in self.items:
            try:
                text = item.text()
            except OtherError:
                continue
            entries[ape_key_to_meta_entry(item.key)] = text
        return entries

    def set_meta_entry(self, entry: EntryLike, value: str) -> None:
        """Set the text of a meta entry."""
        self.set_text_item(meta_entry_to_ape_key(entry), value)

    def write_to_file(self, path: str | os.PathLike[str]) -> None:
        """Write this tag into the file at *path*."""
        from .ape_writer import ApeWriter

        ApeWriter(path=None, tag=None).write_tag(path, self)

    def _update_size_and_count(self) -> None:
        total = APE_TAG_FOOTER_SIZE
        if self.header is not None:
            total += APE_TAG_HEADER_SIZE
        total += sum(item.total_size() for item in self.items)
        count = len(self.items)
        self.footer.item_count = count
        self.footer.size = total
        if self.header is not None:
            self.header.item_count = count
            self.header.size = total


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) != count:
        raise FileError("failed to fill whole buffer")
    return data


class ApeReader:
    """Reads APE tags from files."""

    def read_tag(self, path: str | os.PathLike[str]) -> ApeTag:
        """Read the APE tag at the end of the file or just before an ID3v1 tag."""
        try:
            with open(path, "rb") as stream:
                return self._read(stream)
        except OSError as exc:
            raise FileError(str(exc)) from exc

    def get_meta_entry(self, path: str | os.PathLike[str], entry: EntryLike) -> str:
        """Return the text of one meta entry from the file's APE tag."""
        return self.read_tag(path).get_item_text(meta_entry_to_ape_key(entry))

    def _read(self, stream: BinaryIO) -> ApeTag:
        file_size = os.fstat(stream.fileno()).st_size
        if file_size < APE_TAG_FOOTER_SIZE:
            raise TagNotFoundError()

        offsets = [-APE_TAG_FOOTER_SIZE]
        if file_size >= APE_TAG_FOOTER_SIZE + ID3V1_TAG_SIZE:
            offsets.append(-(APE_TAG_FOOTER_SIZE + ID3V1_TAG_SIZE))

        for offset in offsets:
            footer = self._footer_at(stream, offset)
            if footer is not None:
                return self._read_with_footer(stream, footer)
        raise TagNotFoundError()

    @staticmethod
    def _footer_at(stream: BinaryIO, offset: int) -> ApeTagHeader | None:
        stream.seek(offset, os.SEEK_END)
        buffer = _read_exact(stream, APE_TAG_FOOTER_SIZE)
        try:
            return ApeTagHeader.from_bytes(buffer)
        except TagError:
            return None

    def _read_with_footer(self, stream: BinaryIO, footer: ApeTagHeader) -> ApeTag:
        offset = footer.size + (APE_TAG_HEADER_SIZE if footer.has_header() else 0)
        stream.seek(-offset, os.SEEK_END)

        header = None
        if footer.has_header():
            header = ApeTagHeader.from_bytes(_read_exact(stream, APE_TAG_HEADER_SIZE))
            if not header.is_header():
                raise OtherError("Invalid APE tag header")

        items = [self._read_item(stream) for _ in range(footer.item_count)]
        return ApeTag(footer=footer, header=header, items=items)

    @staticmethod
    def _read_item(stream: BinaryIO) -> ApeItem:
        prefix = _read_exact(stream, 8)
        size = int.from_bytes(prefix[:4], "little")
        flags = int.from_bytes(prefix[4:], "little")
        if size > MAX_VALUE_SIZE:
            raise OtherError(f"APE item value too large: {size} bytes")

        key_bytes = bytearray()
        for _ in range(MAX_KEY_LENGTH):
            byte = _read_exact(stream, 1)
            if byte == b"\x00":
                break
            key_bytes += byte
        if len(key_bytes) >= MAX_KEY_LENGTH:
            raise OtherError("APE item key too long or missing null terminator")

        try:
            key = key_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OtherError("Invalid UTF-8 in APE item key") from exc

        value = _read_exact(stream, size)
        return ApeItem(key, value, flags)