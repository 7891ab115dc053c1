"""Single- and double-quoted scalar scanner mixin.

Quoted scalars may span lines. Line folding follows the plain-scalar
rule (one break becomes a space, further empty lines become "\\n"), and
leading whitespace on continuation lines is dropped.

Escapes (double-quoted only):
    \\0 \\a \\b \\t \\n \\v \\f \\r \\e \\<space> \\" \\/ \\\\ \\N \\_ \\L \\P
    \\xXX \\uXXXX \\UXXXXXXXX
    \\<line break> joins the lines without a separator

Single-quoted scalars have exactly one escape: '' for a literal quote.
"""

from __future__ import annotations

from yamlet.errors import (
    BadIndentation,
    InvalidEscapeError,
    UnterminatedScalarError,
)
from yamlet.input.cursor import EOF_CHAR, Cursor
from yamlet.location import Position, Span
from yamlet.scanner.charsets import (
    BLANK_OR_END,
    ESCAPE_CODES,
    ESCAPE_REPLACEMENTS,
    HEX_DIGITS,
    WHITESPACE,
)
from yamlet.tokens import ScalarStyle, Token, TokenType

# Characters that interrupt a run of literal quoted content
_QUOTED_STOPS = BLANK_OR_END | frozenset("'\"\\")


class QuotedScalarMixin:
    """Mixin providing quoted scalar scanning."""

    _cursor: Cursor
    _indent: int

    @property
    def _flow_level(self) -> int:
        raise NotImplementedError

    def _scan_line_break(self) -> str:
        """Consume one line break. Implemented by Scanner."""
        raise NotImplementedError

    def _at_document_marker(self) -> bool:
        """Check for '---' or '...' at column 0. Implemented by Scanner."""
        raise NotImplementedError

    def _scan_quoted(self, double: bool) -> Token:
        """Scan a quoted scalar starting at its opening quote."""
        cursor = self._cursor
        start = cursor.position
        quote = cursor.peek()
        cursor.advance()

        chunks: list[str] = []
        self._scan_quoted_non_spaces(chunks, double, start)
        while cursor.peek() != quote:
            self._scan_quoted_spaces(chunks, start)
            self._scan_quoted_non_spaces(chunks, double, start)
        cursor.advance()

        return Token(
            TokenType.SCALAR,
            Span(start, cursor.position),
            "".join(chunks),
            style=ScalarStyle.DOUBLE_QUOTED if double else ScalarStyle.SINGLE_QUOTED,
        )

    def _scan_quoted_non_spaces(self, chunks: list[str], double: bool, start: Position) -> None:
        cursor = self._cursor
        while True:
            length = 0
            while cursor.peek(length) not in _QUOTED_STOPS:
                length += 1
            if length:
                chunks.append(cursor.prefix(length))
                cursor.advance(length)

            ch = cursor.peek()
            if not double and ch == "'" and cursor.peek(1) == "'":
                chunks.append("'")
                cursor.advance(2)
            elif (double and ch == "'") or (not double and ch in '"\\'):
                chunks.append(ch)
                cursor.advance()
            elif double and ch == "\\":
                self._scan_escape(chunks, start)
            else:
                return

    def _scan_escape(self, chunks: list[str], start: Position) -> None:
        cursor = self._cursor
        mark = cursor.position
        cursor.advance()
        ch = cursor.peek()

        if ch in ESCAPE_REPLACEMENTS:
            chunks.append(ESCAPE_REPLACEMENTS[ch])
            cursor.advance()
        elif ch in ESCAPE_CODES:
            length = ESCAPE_CODES[ch]
            cursor.advance()
            digits = cursor.prefix(length)
            if len(digits) < length or any(d not in HEX_DIGITS for d in digits):
                raise InvalidEscapeError(
                    f"expected escape sequence of {length} hexadecimal numbers, "
                    f"but found {digits!r}",
                    Span(mark, cursor.position),
                    context="while scanning a double-quoted scalar",
                    context_span=Span.at(start),
                )
            code = int(digits, 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise InvalidEscapeError(
                    f"found invalid Unicode code point U+{code:04X}",
                    Span(mark, cursor.position),
                    context="while scanning a double-quoted scalar",
                    context_span=Span.at(start),
                )
            chunks.append(chr(code))
            cursor.advance(length)
        elif ch == "\n":
            self._scan_line_break()
            chunks.extend(self._scan_quoted_breaks(start))
        else:
            raise InvalidEscapeError(
                f"found unknown escape character {ch!r}",
                Span.at(mark),
                context="while scanning a double-quoted scalar",
                context_span=Span.at(start),
            )

    def _scan_quoted_spaces(self, chunks: list[str], start: Position) -> None:
        cursor = self._cursor
        length = 0
        while cursor.peek(length) in WHITESPACE:
            length += 1
        whitespaces = cursor.prefix(length)
        cursor.advance(length)

        ch = cursor.peek()
        if ch == EOF_CHAR:
            raise UnterminatedScalarError(
                "found unexpected end of stream",
                Span.at(cursor.position),
                context="while scanning a quoted scalar",
                context_span=Span.at(start),
            )
        if ch == "\n":
            self._scan_line_break()
            breaks = self._scan_quoted_breaks(start)
            if breaks:
                chunks.extend(breaks)
            else:
                chunks.append(" ")
        else:
            chunks.append(whitespaces)

    def _scan_quoted_breaks(self, start: Position) -> list[str]:
        """Consume continuation-line indentation and empty lines."""
        cursor = self._cursor
        breaks: list[str] = []
        while True:
            if self._at_document_marker():
                raise UnterminatedScalarError(
                    "found unexpected document separator",
                    Span.at(cursor.position),
                    context="while scanning a quoted scalar",
                    context_span=Span.at(start),
                )
            while cursor.peek() == " ":
                cursor.advance()
            if (
                not self._flow_level
                and cursor.peek() not in "\t\n" + EOF_CHAR
                and cursor.column <= self._indent
            ):
                raise BadIndentation(
                    "continuation line of a quoted scalar is not indented enough",
                    Span.at(cursor.position),
                    context="while scanning a quoted scalar",
                    context_span=Span.at(start),
                )
            while cursor.peek() in WHITESPACE:
                cursor.advance()
            if cursor.peek() == "\n":
                breaks.append(self._scan_line_break())
            else:
                return breaks
