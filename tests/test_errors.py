import pytest

from mp3tags.errors import (
    EntryNotFoundError,
    ExtendTagError,
    FileError,
    FileNotFoundTagError,
    FileRenameError,
    FrameIdNotFoundError,
    InvalidHeaderError,
    InvalidTagSizeError,
    InvalidTagTypeError,
    InvalidTagVersionError,
    OtherError,
    ReadOnlyFileError,
    TagError,
    TagNotFoundError,
    UnsupportedMetaEntryError,
)


@pytest.mark.parametrize(
    "cls, text",
    [
        (InvalidHeaderError, "Invalid tag header"),
        (InvalidTagTypeError, "Invalid tag type"),
        (TagNotFoundError, "Tag not found"),
        (InvalidTagSizeError, "Invalid tag size"),
        (ExtendTagError, "Error extending tag area"),
        (EntryNotFoundError, "Meta entry not found"),
    ],
)
def test_messages_without_detail(cls, text):
    assert str(cls()) == text


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (FileError, "File error"),
        (InvalidTagVersionError, "Invalid tag version"),
        (FrameIdNotFoundError, "Frame ID not found"),
        (FileRenameError, "Error renaming file"),
        (ReadOnlyFileError, "File is read-only"),
        (UnsupportedMetaEntryError, "Meta entry not supported by tag type"),
        (OtherError, "Other error"),
        (FileNotFoundTagError, "File not found"),
    ],
)
def test_messages_with_detail(cls, prefix):
    err = cls("song.mp3")
    assert str(err) == f"{prefix}: song.mp3"
    assert err.detail == "song.mp3"


def test_all_errors_are_caught_by_base():
    err = OtherError("boom")
    caught = None
    try:
        raise err
    except TagError as exc:
        caught = exc
    assert caught is err
    assert str(caught) == "Other error: boom"
    assert caught.detail == "boom"


def test_detail_defaults_to_none():
    assert TagNotFoundError().detail is None