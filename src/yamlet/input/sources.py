"""Character sources feeding the input cursor.

A source hands out raw (un-normalised) text in chunks through `read`, and
reports how many bytes a character occupied in the original encoding so
the cursor can keep exact byte offsets.

Sources:
- StrSource: an in-memory string
- BufferedSource: an iterable of text chunks or a text file object
- ByteSource: bytes, an iterable of byte chunks, or a binary file object;
  the encoding is detected from the first bytes

"""

from __future__ import annotations

import codecs
from collections.abc import Iterable, Iterator
from typing import IO, Protocol

# Characters requested from a source per refill
CHUNK_SIZE = 4096

# Byte order marks, longest first so UTF-32 wins over UTF-16
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
)


def utf8_width(char: str) -> int:
    """Number of bytes char occupies in UTF-8."""
    code = ord(char)
    if code < 0x80:
        return 1
    if code < 0x800:
        return 2
    if code < 0x10000:
        return 3
    return 4


def detect_encoding(head: bytes) -> str:
    """Detect the encoding of a YAML byte stream from its first bytes.

    Uses the byte order mark when present, otherwise the position of NUL
    bytes around the first (necessarily ASCII) character, defaulting to
    UTF-8.

    Args:
        head: At least the first four bytes of the stream (fewer at EOF)

    Returns:
        A codec name accepted by codecs.getincrementaldecoder
    """
    for bom, encoding in _BOMS:
        if head.startswith(bom):
            return encoding
    if len(head) >= 4:
        if head[:3] == b"\x00\x00\x00":
            return "utf-32-be"
        if head[1:4] == b"\x00\x00\x00":
            return "utf-32-le"
    if len(head) >= 2:
        if head[0] == 0:
            return "utf-16-be"
        if head[1] == 0:
            return "utf-16-le"
    return "utf-8"


class CharSource(Protocol):
    """Interface the cursor pulls raw characters through."""

    def read(self, size: int) -> str:
        """Return up to size raw characters; "" once exhausted."""
        ...

    def width(self, char: str) -> int:
        """Bytes char occupied in the source encoding."""
        ...


class StrSource:
    """Source over a fully resident string."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def read(self, size: int) -> str:
        chunk = self._text[self._pos : self._pos + size]
        self._pos += len(chunk)
        return chunk

    def width(self, char: str) -> int:
        return utf8_width(char)


class BufferedSource:
    """Source over text arriving in chunks.

    Accepts a text file object (anything with `read`) or any iterable of
    strings. Chunks are pulled lazily, one at a time.
    """

    __slots__ = ("_reader", "_chunks")

    def __init__(self, stream: IO[str] | Iterable[str]) -> None:
        reader = getattr(stream, "read", None)
        self._reader = reader
        self._chunks: Iterator[str] | None = None if reader is not None else iter(stream)

    def read(self, size: int) -> str:
        if self._reader is not None:
            return self._reader(size)
        assert self._chunks is not None
        # Skip empty chunks; "" is reserved for exhaustion
        for chunk in self._chunks:
            if chunk:
                return chunk
        return ""

    def width(self, char: str) -> int:
        return utf8_width(char)


class ByteSource:
    """Source over encoded bytes.

    The encoding is detected from the first bytes (see detect_encoding) and
    the stream is decoded incrementally. Invalid byte sequences surface as
    UnicodeDecodeError; the cursor turns them into EncodingError.
    """

    __slots__ = ("_reader", "_chunks", "_decoder", "_encoding", "_head", "_done")

    def __init__(self, data: bytes | IO[bytes] | Iterable[bytes]) -> None:
        self._reader = None
        self._chunks: Iterator[bytes] | None = None
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._chunks = iter((bytes(data),))
        elif hasattr(data, "read"):
            self._reader = data.read
        else:
            self._chunks = iter(data)
        self._decoder: codecs.IncrementalDecoder | None = None
        self._encoding = "utf-8"
        self._head = b""
        self._done = False

    @property
    def encoding(self) -> str:
        """Detected encoding (valid after the first read)."""
        return self._encoding

    def _next_bytes(self) -> bytes:
        if self._reader is not None:
            return self._reader(CHUNK_SIZE)
        assert self._chunks is not None
        return next(self._chunks, b"")

    def read(self, size: int) -> str:
        while not self._done:
            data = self._next_bytes()
            if self._decoder is None:
                # Buffer until there are enough bytes to detect the encoding
                self._head += data
                if len(self._head) < 4 and data:
                    continue
                self._encoding = detect_encoding(self._head)
                self._decoder = codecs.getincrementaldecoder(self._encoding)("strict")
                data, self._head = self._head, b""
            if not data:
                self._done = True
                return self._decoder.decode(b"", final=True)
            text = self._decoder.decode(data)
            if text:
                return text
        return ""

    def width(self, char: str) -> int:
        if self._encoding.startswith("utf-32"):
            return 4
        if self._encoding.startswith("utf-16"):
            return 4 if ord(char) > 0xFFFF else 2
        return utf8_width(char)
