"""Writing, replacing and removing APE tags in files."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import BinaryIO

from .ape_common import (
    APE_TAG_FOOTER_SIZE,
    APE_TAG_HEADER_SIZE,
    APE_TAG_VERSION_2_0,
    ID3V1_TAG_SIZE,
    ApeTagHeader,
    has_ape_tag,
)
from .ape_reader import ApeReader, ApeTag, EntryLike, meta_entry_to_ape_key
from .errors import FileError, FileRenameError, OtherError, TagError, TagNotFoundError

_COPY_CHUNK = 64 * 1024


def _read_id3v1(stream: BinaryIO, file_size: int) -> bytes | None:
    """Return the trailing ID3v1 tag if the file ends with one."""
    if file_size < ID3V1_TAG_SIZE:
        return None
    stream.seek(-ID3V1_TAG_SIZE, os.SEEK_END)
    tail = stream.read(ID3V1_TAG_SIZE)
    return tail if tail[:3] == b"TAG" else None


def _header_at(stream: BinaryIO, start: int) -> bool:
    stream.seek(start)
    try:
        return ApeTagHeader.from_bytes(stream.read(APE_TAG_HEADER_SIZE)).is_header()
    except TagError:
        return False


def _ape_start(stream: BinaryIO, end: int) -> int:
    """Return where a trailing APE tag ending at *end* begins, or *end* if none."""
    if end < APE_TAG_FOOTER_SIZE:
        return end
    stream.seek(end - APE_TAG_FOOTER_SIZE)
    try:
        footer = ApeTagHeader.from_bytes(stream.read(APE_TAG_FOOTER_SIZE))
    except TagError:
        return end
    if footer.is_header():
        return end
    if footer.has_header():
        # The declared size may or may not count the header block.
        for start in (end - footer.size - APE_TAG_HEADER_SIZE, end - footer.size):
            if 0 <= start <= end - APE_TAG_FOOTER_SIZE and _header_at(stream, start):
                return start
        return end
    start = end - footer.size
    return start if 0 <= start <= end - APE_TAG_FOOTER_SIZE else end


def _copy_range(source: BinaryIO, target: BinaryIO, length: int) -> None:
    remaining = length
    while remaining > 0:
        chunk = source.read(min(_COPY_CHUNK, remaining))
        if not chunk:
            raise FileError("unexpected end of file")
        target.write(chunk)
        remaining -= len(chunk)


def _rewrite(path: str | os.PathLike[str], tag_block: bytes) -> None:
    """Rewrite *path* as its audio data, then *tag_block*, then any ID3v1 tag."""
    target = Path(path)
    try:
        handle, temp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise FileError(str(exc)) from exc
    try:
        with os.fdopen(handle, "wb") as temp, open(target, "rb") as source:
            file_size = os.fstat(source.fileno()).st_size
            id3v1 = _read_id3v1(source, file_size)
            audio_end = file_size - (ID3V1_TAG_SIZE if id3v1 is not None else 0)
            audio_end = _ape_start(source, audio_end)
            source.seek(0)
            _copy_range(source, temp, audio_end)
            temp.write(tag_block)
            if id3v1 is not None:
                temp.write(id3v1)
    except OSError as exc:
        os.unlink(temp_name)
        raise FileError(str(exc)) from exc
    except BaseException:
        os.unlink(temp_name)
        raise
    try:
        os.replace(temp_name, target)
    except OSError as exc:
        os.unlink(temp_name)
        raise FileRenameError(str(exc)) from exc


class ApeWriter:
    """Writes APE tags, optionally holding a tag and a path to save it to."""

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        tag: ApeTag | None = None,
    ) -> None:
        self.path = path
        self.tag = tag

    def write_tag(self, path: str | os.PathLike[str], tag: ApeTag) -> None:
        """Write *tag* after the audio data, replacing any trailing APE tag."""
        block = bytearray()
        if tag.header is not None:
            block += tag.header.to_bytes()
        for item in tag.items:
            block += item.to_bytes()
        block += tag.footer.to_bytes()
        _rewrite(path, bytes(block))

    def remove_tag(self, path: str | os.PathLike[str]) -> None:
        """Strip the APE tag from the file, keeping any ID3v1 tag."""
        if not has_ape_tag(path):
            return
        _rewrite(path, b"")

    def set_meta_entries(
        self, path: str | os.PathLike[str], entries: Mapping[EntryLike, str]
    ) -> None:
        """Set several entries, creating a tag if the file has none."""
        try:
            tag = ApeReader().read_tag(path)
        except TagNotFoundError:
            tag = ApeTag.new(APE_TAG_VERSION_2_0)
        for entry, value in entries.items():
            tag.set_text_item(meta_entry_to_ape_key(entry), value)
        self.write_tag(path, tag)

    def remove_meta_entries(
        self, path: str | os.PathLike[str], entries: Iterable[EntryLike]
    ) -> None:
        """Remove entries; the whole tag goes once it holds no items."""
        try:
            tag = ApeReader().read_tag(path)
        except TagNotFoundError:
            return
        for entry in entries:
            tag.remove_item(meta_entry_to_ape_key(entry))
        if tag.items:
            self.write_tag(path, tag)
        else:
            self.remove_tag(path)

    def set_meta_entry(self, entry: EntryLike, value: str) -> None:
        """Set an entry in the held tag."""
        if self.tag is None:
            raise TagNotFoundError()
        self.tag.set_text_item(meta_entry_to_ape_key(entry), value)

    def save(self) -> None:
        """Write the held tag to the held path."""
        if self.tag is None:
            raise TagNotFoundError()
        if self.path is None:
            raise OtherError("No path set for APE writer")
        self.tag.write_to_file(self.path)