"""Plain scalar scanner mixin."""

from __future__ import annotations

from yamlet.input.cursor import Cursor
from yamlet.location import Span
from yamlet.scanner.charsets import BLANK_OR_END, FLOW_INDICATORS, WHITESPACE
from yamlet.tokens import ScalarStyle, Token, TokenType


class PlainScalarMixin:
    """Mixin providing plain (unquoted) scalar scanning.

    A plain scalar ends at ": " (or ':' before a flow indicator inside flow
    context), at " #", at a flow indicator inside flow context, or at a
    line whose indentation drops below the enclosing block.

    Line folding: a single line break between two content lines becomes a
    space; each additional empty line becomes a "\\n".

    """

    _cursor: Cursor
    _indent: int
    _allow_simple_key: bool

    @property
    def _flow_level(self) -> int:
        raise NotImplementedError

    def _scan_line_break(self) -> str:
        """Consume one line break. Implemented by Scanner."""
        raise NotImplementedError

    def _at_document_marker(self) -> bool:
        """Check for '---' or '...' at column 0. Implemented by Scanner."""
        raise NotImplementedError

    def _scan_plain(self) -> Token:
        cursor = self._cursor
        in_flow = bool(self._flow_level)
        chunks: list[str] = []
        start = end = cursor.position
        indent = self._indent + 1
        spaces = ""

        while True:
            if cursor.peek() == "#":
                break
            length = 0
            while True:
                ch = cursor.peek(length)
                if ch in BLANK_OR_END:
                    break
                if ch == ":":
                    following = cursor.peek(length + 1)
                    if following in BLANK_OR_END or (in_flow and following in FLOW_INDICATORS):
                        break
                elif in_flow and ch in FLOW_INDICATORS:
                    break
                length += 1
            if not length:
                break

            self._allow_simple_key = False
            chunks.append(spaces)
            chunks.append(cursor.prefix(length))
            cursor.advance(length)
            end = cursor.position

            spaces = self._scan_plain_spaces(indent)
            if not spaces or cursor.peek() == "#":
                break
            if not in_flow and cursor.column < indent:
                break
            if in_flow and cursor.in_indentation and cursor.column <= self._indent:
                break

        return Token(
            TokenType.SCALAR,
            Span(start, end),
            "".join(chunks),
            style=ScalarStyle.PLAIN,
        )

    def _scan_plain_spaces(self, indent: int) -> str:
        """Consume the whitespace and line breaks between two plain chunks.

        Returns:
            The folded separator, or "" when the scalar cannot continue.
        """
        cursor = self._cursor
        length = 0
        while cursor.peek(length) in WHITESPACE:
            length += 1
        whitespaces = cursor.prefix(length)
        cursor.advance(length)

        if cursor.peek() != "\n":
            return whitespaces

        self._scan_line_break()
        self._allow_simple_key = True
        if self._at_document_marker():
            return ""

        breaks: list[str] = []
        while True:
            ch = cursor.peek()
            if ch == " ":
                cursor.advance()
            elif ch == "\t":
                if not self._flow_level and cursor.column < indent and not self._blank_rest():
                    # Tab used as indentation; the caller reports it
                    return ""
                cursor.advance()
            elif ch == "\n":
                breaks.append(self._scan_line_break())
                if self._at_document_marker():
                    return ""
            else:
                break

        if not breaks:
            return " "
        return "".join(breaks)

    def _blank_rest(self) -> bool:
        """True if only whitespace remains before the next line break."""
        cursor = self._cursor
        n = 0
        while cursor.peek(n) in WHITESPACE:
            n += 1
        return cursor.peek(n) == "\n"
