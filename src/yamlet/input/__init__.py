"""Input layer for the Yamlet scanner.

Every kind of input (string, bytes, text or binary file, iterable of
chunks) reduces to a Cursor over a CharSource.

Architecture:
input/
├── __init__.py          # open_input factory, re-exports
├── cursor.py            # Cursor: lookahead, line-break normalisation, positions
└── sources.py           # StrSource, BufferedSource, ByteSource, encoding detection

Usage:
    >>> from yamlet.input import open_input
    >>> cursor = open_input("key: value\\n")
    >>> cursor.peek()
    'k'

"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import IO

from yamlet.input.cursor import EOF_CHAR, Cursor, is_printable
from yamlet.input.sources import (
    BufferedSource,
    ByteSource,
    CharSource,
    StrSource,
    detect_encoding,
)

# Everything open_input accepts
InputLike = str | bytes | bytearray | memoryview | IO[str] | IO[bytes] | Iterable[str] | Iterable[bytes] | Cursor


def open_input(source: InputLike) -> Cursor:
    """Wrap any supported input in a Cursor.

    Args:
        source: Text, bytes, a text or binary file object, an iterable of
            str or bytes chunks, or an existing Cursor (returned as is)

    Returns:
        Cursor positioned at the start of the input (a leading BOM is
        skipped on first access)

    Raises:
        TypeError: If source is none of the supported kinds
    """
    if isinstance(source, Cursor):
        return source
    if isinstance(source, str):
        return Cursor(StrSource(source))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return Cursor(ByteSource(source))
    if hasattr(source, "read"):
        # Zero-length read tells text and binary streams apart without consuming
        probe = source.read(0)
        if isinstance(probe, bytes):
            return Cursor(ByteSource(source))
        return Cursor(BufferedSource(source))
    if isinstance(source, Iterable):
        chunks = iter(source)
        first = next(chunks, "")
        rest = itertools.chain((first,), chunks)
        if isinstance(first, (bytes, bytearray)):
            return Cursor(ByteSource(rest))
        if isinstance(first, str):
            return Cursor(BufferedSource(rest))
    raise TypeError(f"cannot read YAML from {type(source).__name__}")


__all__ = [
    "EOF_CHAR",
    "BufferedSource",
    "ByteSource",
    "CharSource",
    "Cursor",
    "InputLike",
    "StrSource",
    "detect_encoding",
    "is_printable",
    "open_input",
]
