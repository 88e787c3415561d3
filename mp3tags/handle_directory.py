"""Find, and optionally delete, directories that hold only small files."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

MAX_FILE_SIZE = 1024 * 1024

_USAGE = """\
handle_directory - Utility for managing directories with small files

USAGE:
    handle_directory [OPTIONS] --directory <DIR>

OPTIONS:
    -d, --directory <DIR>    Specify directory to process (REQUIRED)
    -t, --empty             Show empty directories
    -r, --remove            Actually remove the directories (default: dry run)
    -h, --help              Print this help message

DESCRIPTION:
    This utility finds directories that contain only small files (< 1MB)
    and no subdirectories. Use --remove to actually delete them."""


@dataclass
class DirectoryOptions:
    """What to do with the directories found."""

    empty: bool = False
    remove: bool = False


def delete_files(dir_path: str | os.PathLike[str]) -> None:
    """Delete the files in a directory, then the directory itself."""
    directory = Path(dir_path)
    for entry in directory.iterdir():
        if entry.is_file():
            entry.unlink()
    directory.rmdir()


def is_directory_to_delete(dir_path: str | os.PathLike[str]) -> bool:
    """True for a directory with no subdirectories and no file over 1 MiB."""
    directory = Path(dir_path)
    if not directory.is_dir():
        return False
    for entry in directory.iterdir():
        if entry.is_dir():
            return False
        if entry.is_file() and entry.stat().st_size > MAX_FILE_SIZE:
            return False
    return True


def find_obsolete_directories(dir_path: str | os.PathLike[str]) -> list[Path]:
    """Collect, depth first, every directory below *dir_path* that may be deleted."""
    found: list[Path] = []
    directory = Path(dir_path)
    if not directory.is_dir():
        return found
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if is_directory_to_delete(entry):
                found.append(entry)
            found.extend(find_obsolete_directories(entry))
    return found


def remove_obsolete_directories(
    dir_path: str | os.PathLike[str], options: DirectoryOptions
) -> list[Path]:
    """Report the deletable directories and delete them if asked; return them."""
    found = find_obsolete_directories(dir_path)
    for path in found:
        print(f"Path to Delete: {path}")
    if not found:
        print("No directories found matching deletion criteria.")
        return found

    if options.remove:
        for path in found:
            try:
                delete_files(path)
            except OSError as exc:
                print(f"Failed to delete {path}: {exc}", file=sys.stderr)
            else:
                print(f"Successfully deleted: {path}")
    else:
        print(
            f"Found {len(found)} directories that would be deleted "
            "(use --remove to actually delete them):"
        )
        for path in found:
            print(f"  {path}")
    return found


def remove_paths(directory: str | os.PathLike[str], options: DirectoryOptions) -> list[Path]:
    """Check that *directory* exists and is a directory, then process it."""
    path = Path(directory)
    if not path.exists():
        raise FileNotFoundError(f"Path: {directory} does not exist")
    resolved = path.resolve(strict=True)
    if not resolved.is_dir():
        raise NotADirectoryError(f"Path: {directory} is not a directory")
    return remove_obsolete_directories(resolved, options)


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point; returns the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(_USAGE)
        return 1

    options = DirectoryOptions()
    directory = ""
    show_help = False
    remaining = iter(args)
    for arg in remaining:
        if arg in ("-d", "--directory"):
            value = next(remaining, None)
            if value is None:
                print("Error: --directory requires a value", file=sys.stderr)
                return 1
            directory = value
        elif arg in ("-t", "--empty"):
            options.empty = True
        elif arg in ("-r", "--remove"):
            options.remove = True
        elif arg in ("-h", "--help"):
            show_help = True
        else:
            print(f"Error: Unknown argument '{arg}'", file=sys.stderr)
            print(_USAGE)
            return 1

    if show_help:
        print(_USAGE)
        return 0

    if not directory or not (options.empty or options.remove):
        print(
            "Error: Directory is required and at least one option must be specified",
            file=sys.stderr,
        )
        print(_USAGE)
        return 1

    try:
        remove_paths(directory, options)
    except OSError as exc:
        print(f"Error processing directory: {exc}", file=sys.stderr)
        return 1

    print("Directory processing completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())