"""Read and write APE tags in MP3 files, and prune directories of small files."""

__version__ = "0.1.0"
__all__ = ["errors", "ape_common", "ape_reader", "ape_writer", "handle_directory"]