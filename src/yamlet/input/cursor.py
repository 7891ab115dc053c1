"""Lookahead cursor over a character source.

The cursor is the only component that touches raw characters. It:

- normalises CR, LF, and CRLF to a single logical "\\n"
- skips one leading byte-order mark
- rejects characters outside the YAML printable set
- keeps the current line, column, and byte offset

Lookahead is bounded by what the scanner asks for; characters are pulled
from the source in chunks and kept in a small deque until consumed.

Thread Safety:
Cursor instances are single-use. Create one per source.

"""

from __future__ import annotations

from collections import deque

from yamlet.errors import EncodingError
from yamlet.input.sources import CHUNK_SIZE, CharSource
from yamlet.location import Position, Span

# Returned by peek() past the end of input. NUL is not printable, so it can
# never be a real character once the cursor has validated the input.
EOF_CHAR = "\0"

BOM = "\ufeff"


def is_printable(char: str) -> bool:
    """Check membership in the YAML 1.2 c-printable set."""
    code = ord(char)
    if 0x20 <= code <= 0x7E:
        return True
    if code in (0x09, 0x0A, 0x0D, 0x85):
        return True
    return 0xA0 <= code <= 0xD7FF or 0xE000 <= code <= 0xFFFD or 0x10000 <= code <= 0x10FFFF


class Cursor:
    """Buffered, lookahead-capable view over a character source.

    Usage:
            >>> cursor = Cursor(StrSource("a\\r\\nb"))
            >>> cursor.prefix(3)
            'a\\nb'
            >>> cursor.advance(2)
            >>> cursor.position
            Position(offset=3, line=2, column=1)

    Attributes:
        index: Logical characters consumed so far
        in_indentation: True while only spaces have been consumed on the
            current line
        line: Current line (1-indexed)
        column: Current column (0-indexed, equals the indentation width
            when the cursor sits on the first non-space of a line)

    """

    __slots__ = (
        "_source",
        "_raw",  # Raw chunk being normalised
        "_raw_pos",
        "_buffer",  # deque[(char, byte_width)] of normalised lookahead
        "_offset",
        "_bom_pending",  # Leading BOM not yet looked for
        "index",
        "line",
        "column",
        "in_indentation",  # Only spaces consumed since the last line break
    )

    def __init__(self, source: CharSource) -> None:
        self._source = source
        self._raw = ""
        self._raw_pos = 0
        self._buffer: deque[tuple[str, int]] = deque()
        self._offset = 0
        self.index = 0
        self.line = 1
        self.column = 0
        self.in_indentation = True
        self._bom_pending = True

    # =========================================================================
    # Raw character access
    # =========================================================================

    def _refill_raw(self) -> bool:
        try:
            chunk = self._source.read(CHUNK_SIZE)
        except UnicodeDecodeError as exc:
            raise EncodingError(
                f"invalid {exc.encoding} byte sequence ({exc.reason})",
                Span.at(self._lookahead_position()),
            ) from exc
        self._raw = chunk
        self._raw_pos = 0
        return bool(chunk)

    def _next_raw(self) -> str:
        if self._raw_pos >= len(self._raw) and not self._refill_raw():
            return ""
        char = self._raw[self._raw_pos]
        self._raw_pos += 1
        return char

    def _peek_raw(self) -> str:
        if self._raw_pos >= len(self._raw) and not self._refill_raw():
            return ""
        return self._raw[self._raw_pos]

    def _fill(self, count: int) -> None:
        """Ensure count normalised characters are buffered (fewer at EOF)."""
        if self._bom_pending:
            self._skip_bom()
        buffer = self._buffer
        width = self._source.width
        while len(buffer) < count:
            char = self._next_raw()
            if not char:
                return
            if char == "\r":
                size = width("\r")
                if self._peek_raw() == "\n":
                    self._next_raw()
                    size += width("\n")
                buffer.append(("\n", size))
                continue
            if not is_printable(char):
                raise EncodingError(
                    f"special characters are not allowed (found U+{ord(char):04X})",
                    Span.at(self._lookahead_position()),
                )
            buffer.append((char, width(char)))

    def _skip_bom(self) -> None:
        # A BOM is not content: it counts toward offsets only
        self._bom_pending = False
        if self._peek_raw() == BOM:
            self._next_raw()
            self._offset += self._source.width(BOM)

    def _lookahead_position(self) -> Position:
        """Position just past the buffered lookahead."""
        offset, line, column = self._offset, self.line, self.column
        for char, size in self._buffer:
            offset += size
            if char == "\n":
                line += 1
                column = 0
            else:
                column += 1
        return Position(offset, line, column + 1)

    # =========================================================================
    # Public interface
    # =========================================================================

    def peek(self, n: int = 0) -> str:
        """Return the character n positions ahead without consuming it.

        Returns:
            The character, or EOF_CHAR past the end of input.
        """
        if n >= len(self._buffer):
            self._fill(n + 1)
            if n >= len(self._buffer):
                return EOF_CHAR
        return self._buffer[n][0]

    def prefix(self, n: int = 1) -> str:
        """Return up to the next n characters without consuming them."""
        self._fill(n)
        buffer = self._buffer
        return "".join(buffer[i][0] for i in range(min(n, len(buffer))))

    def advance(self, n: int = 1) -> None:
        """Consume n characters, updating line, column, and offset."""
        for _ in range(n):
            if not self._buffer:
                self._fill(1)
                if not self._buffer:
                    return
            char, size = self._buffer.popleft()
            self._offset += size
            self.index += 1
            if char == "\n":
                self.line += 1
                self.column = 0
                self.in_indentation = True
            else:
                self.column += 1
                if char != " ":
                    self.in_indentation = False

    def at_end(self) -> bool:
        """True once every character has been consumed."""
        return self.peek() == EOF_CHAR

    @property
    def offset(self) -> int:
        if self._bom_pending:
            self._skip_bom()
        return self._offset

    @property
    def position(self) -> Position:
        """Current position (1-indexed line and column)."""
        if self._bom_pending:
            self._skip_bom()
        return Position(self._offset, self.line, self.column + 1)
