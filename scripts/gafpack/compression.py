"""
Transparent opening of plain or compressed text inputs.

The compression format is detected from the file's magic bytes rather than
its extension, so a gzipped file named ``reads.gaf`` still opens correctly.
"""

import bz2
import gzip
import lzma
from typing import Iterator, TextIO, Type

from .errors import GafpackError

GZIP_MAGIC = b"\x1f\x8b"
BZIP2_MAGIC = b"BZh"
XZ_MAGIC = b"\xfd7zXZ\x00"


def sniff_compression(file_path: str) -> str:
    """
    Detect the compression of a file from its first bytes.

    Returns:
        One of 'gzip', 'bzip2', 'xz' or 'none'

    Examples:
        >>> sniff_compression("graph.gfa")  # doctest: +SKIP
        'none'
    """
    with open(file_path, "rb") as f:
        magic = f.read(6)

    if magic.startswith(GZIP_MAGIC):
        return "gzip"
    if magic.startswith(BZIP2_MAGIC):
        return "bzip2"
    if magic.startswith(XZ_MAGIC):
        return "xz"
    return "none"


def open_text(file_path: str) -> TextIO:
    """Open a possibly compressed UTF-8 file for reading as text."""
    compression = sniff_compression(file_path)
    if compression == "gzip":
        return gzip.open(file_path, "rt", encoding="utf-8")
    if compression == "bzip2":
        return bz2.open(file_path, "rt", encoding="utf-8")
    if compression == "xz":
        return lzma.open(file_path, "rt", encoding="utf-8")
    return open(file_path, "r", encoding="utf-8")


def iter_lines(
    file_path: str, error: Type[GafpackError] = GafpackError
) -> Iterator[str]:
    """
    Yield lines of a possibly compressed file without trailing newlines.

    Bytes that are not valid UTF-8 raise ``error``. Text is decoded in
    chunks, so the reported line number is where decoding failed, which can
    be a few lines before the offending byte.
    """
    line_no = 0
    with open_text(file_path) as f:
        try:
            for line in f:
                line_no += 1
                yield line.rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise error(
                f"{file_path}: undecodable input after line {line_no}: {e.reason}"
            ) from e
