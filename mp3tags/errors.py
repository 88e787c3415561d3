"""Exception hierarchy for tag reading and writing."""

from __future__ import annotations


class TagError(Exception):
    """Base class for every error raised by this package."""

    message = "Tag error"

    def __init__(self, detail: object | None = None) -> None:
        self.detail = detail
        text = self.message if detail is None else f"{self.message}: {detail}"
        super().__init__(text)


class InvalidHeaderError(TagError):
    """The tag header is malformed."""

    message = "Invalid tag header"


class InvalidTagTypeError(TagError):
    """The requested tag type is not valid."""

    message = "Invalid tag type"


class FileError(TagError):
    """Opening, reading or writing a file failed."""

    message = "File error"


class TagNotFoundError(TagError):
    """No tag of the requested kind is present."""

    message = "Tag not found"


class InvalidTagVersionError(TagError):
    """The tag carries an unsupported version."""

    message = "Invalid tag version"


class InvalidTagSizeError(TagError):
    """The tag declares an impossible size."""

    message = "Invalid tag size"


class FrameIdNotFoundError(TagError):
    """A frame identifier could not be found."""

    message = "Frame ID not found"


class FileRenameError(TagError):
    """Replacing a file with its rewritten copy failed."""

    message = "Error renaming file"


class ExtendTagError(TagError):
    """The tag area could not be enlarged."""

    message = "Error extending tag area"


class ReadOnlyFileError(TagError):
    """The file cannot be written to."""

    message = "File is read-only"


class UnsupportedMetaEntryError(TagError):
    """The tag type cannot hold the given meta entry."""

    message = "Meta entry not supported by tag type"


class OtherError(TagError):
    """Any other failure, described by its detail text."""

    message = "Other error"


class FileNotFoundTagError(TagError):
    """The file to work on does not exist."""

    message = "File not found"


class EntryNotFoundError(TagError):
    """The tag holds no value for the requested meta entry."""

    message = "Meta entry not found"