# mp3tags

A small library for reading and writing APE tags in MP3 files. It also
includes a command-line helper that finds directories holding only small
files and can remove them.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `mp3tags.errors`: the exceptions. All of them derive from `TagError`.
- `mp3tags.ape_common`: APE constants, `ApeTagHeader`, `ApeItem`,
  `ItemFlags`, `Item` and `has_ape_tag`.
- `mp3tags.ape_reader`: `MetaEntry`, `ApeTag` and `ApeReader`.
- `mp3tags.ape_writer`: `ApeWriter`.
- `mp3tags.handle_directory`: the `handle-directory` command.

## Reading tags

```python
from mp3tags.ape_reader import ApeReader, MetaEntry

reader = ApeReader()
tag = reader.read_tag("song.mp3")
for entry, value in tag.get_meta_entries().items():
    print(entry, value)

title = reader.get_meta_entry("song.mp3", MetaEntry.TITLE)
```

`read_tag` first looks for an APE footer at the end of the file. If it
finds none there, it looks just before a trailing 128-byte ID3v1 tag. It
raises these exceptions from `mp3tags.errors`:

- `TagNotFoundError` when neither place holds a footer.
- `FileError` when the file cannot be read.
- `OtherError` for malformed items: a value larger than 16 MiB, a key of
  255 bytes or more, or a key that is not valid UTF-8.

`get_meta_entry` and `ApeTag.get_item_text` raise `EntryNotFoundError`
when the entry is missing. When the item is binary or not valid UTF-8,
they raise `OtherError`.

Item keys are matched without regard to ASCII case.
`get_meta_entries` skips items that are not text. It maps known keys to
`MetaEntry` members. Any other key stays a plain string, and that string
can also be passed wherever an entry is expected.

## Writing tags

```python
from mp3tags.ape_reader import MetaEntry
from mp3tags.ape_writer import ApeWriter

writer = ApeWriter()
writer.set_meta_entries("song.mp3", {MetaEntry.TITLE: "My Song", MetaEntry.ARTIST: "Someone"})
writer.remove_meta_entries("song.mp3", [MetaEntry.ARTIST])
writer.remove_tag("song.mp3")
```

Each write goes through the same steps:

- The writer builds a temporary file next to the original and then
  replaces the original with it.
- It drops any existing trailing APE tag.
- It writes the new tag after the audio data.
- If the file ended with an ID3v1 tag, that tag stays at the very end.

If the file has no tag, `set_meta_entries` creates a new APEv2 tag with
both header and footer. When the last item is removed,
`remove_meta_entries` removes the whole tag.

You can also give a writer a tag and a path to work with:

```python
from mp3tags.ape_reader import ApeTag, MetaEntry
from mp3tags.ape_writer import ApeWriter

writer = ApeWriter(path="song.mp3", tag=ApeTag.new())
writer.set_meta_entry(MetaEntry.ALBUM, "An Album")
writer.save()
```

`set_meta_entry` and `save` raise `TagNotFoundError` when the writer holds
no tag. `save` raises `OtherError` when the writer has no path.

## Pruning directories

`handle-directory` walks a directory tree and reports every directory
below it that meets both of these conditions:

- It has no subdirectories.
- It contains no file larger than 1 MiB.

```
handle-directory --directory /path/to/music --empty
handle-directory -d /path/to/music --remove
```

Options:

- `-d`, `--directory <DIR>`: the directory to process (required)
- `-t`, `--empty`: report the matching directories without deleting them
- `-r`, `--remove`: delete the files in each matching directory, then the directory
- `-h`, `--help`: print usage

You must give at least one of `--empty` or `--remove`. Without `--remove`,
the command only lists what would be deleted.

The command exits with status 1 in these cases:

- The arguments are wrong.
- The directory does not exist.
- The path given is not a directory.

## What this package does not do

Only APE tags are read and written. ID3v1 and ID3v2 tags are neither
read nor edited. A trailing ID3v1 tag is only kept in place when an APE
tag is rewritten.

The only command is `handle-directory`. Tags are read and written through
the library API alone.