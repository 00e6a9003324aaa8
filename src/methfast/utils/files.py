"""Text input helpers with transparent gzip decompression."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import IO, Iterator, Union

GZIP_MAGIC = b"\x1f\x8b\x08"


def is_gzipped(path: Union[str, Path]) -> bool:
    """Return True if the file starts with the gzip/deflate magic bytes."""
    with open(path, "rb") as fh:
        header = fh.read(len(GZIP_MAGIC))
    return header == GZIP_MAGIC


def open_text(path: Union[str, Path]) -> IO[str]:
    """Open a plain or gzip-compressed text file for reading.

    Compression is detected from the file content, not the suffix.
    Concatenated (multi-member) gzip streams are read through to the end.
    """
    path = Path(path)
    if is_gzipped(path):
        return gzip.open(path, "rt", encoding="utf-8", newline="\n")
    return open(path, "r", encoding="utf-8", newline="\n")


def iter_lines(path: Union[str, Path]) -> Iterator[str]:
    """Yield the lines of a (possibly compressed) text file with line endings removed."""
    with open_text(path) as fh:
        for line in fh:
            yield line.rstrip("\r\n")
