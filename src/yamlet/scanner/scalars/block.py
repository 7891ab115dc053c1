"""Literal (|) and folded (>) block scalar scanner mixin.

Header: optional chomping indicator (+ keep, - strip, default clip) and
optional indentation indicator 1-9, in either order, then an optional
comment.

Content indentation is either explicit (enclosing indent + indicator) or
detected from the first non-empty line. Leading empty lines may not be
more indented than that first line.
"""

from __future__ import annotations

from yamlet.errors import BadIndentation, ScanError
from yamlet.input.cursor import EOF_CHAR, Cursor
from yamlet.location import Position, Span
from yamlet.scanner.charsets import BLANK_OR_END, BREAK_OR_END, DIGITS, WHITESPACE
from yamlet.tokens import ScalarStyle, Token, TokenType


class BlockScalarMixin:
    """Mixin providing block scalar scanning."""

    _cursor: Cursor
    _indent: int

    def _scan_line_break(self) -> str:
        """Consume one line break. Implemented by Scanner."""
        raise NotImplementedError

    def _at_document_marker(self) -> bool:
        """Check for '---' or '...' at column 0. Implemented by Scanner."""
        raise NotImplementedError

    def _scan_block_scalar(self, folded: bool) -> Token:
        """Scan a block scalar starting at its '|' or '>' indicator."""
        cursor = self._cursor
        start = cursor.position
        cursor.advance()

        chomping, increment = self._scan_block_scalar_indicators(start)
        self._scan_block_scalar_ignored_line(start)

        base = self._indent if self._indent >= 0 else 0
        min_indent = self._indent + 1
        if increment is None:
            breaks, max_indent, end = self._scan_block_scalar_indentation()
            if (
                cursor.peek() not in BREAK_OR_END
                and cursor.column >= min_indent
                and max_indent > cursor.column
            ):
                raise BadIndentation(
                    "leading empty lines of a block scalar are more indented "
                    "than its first content line",
                    Span.at(cursor.position),
                    context="while scanning a block scalar",
                    context_span=Span.at(start),
                )
            indent = max(min_indent, max_indent)
        else:
            indent = base + increment
            breaks, end = self._scan_block_scalar_breaks(indent)

        chunks: list[str] = []
        line_break = ""
        while cursor.column == indent and cursor.peek() != EOF_CHAR:
            if indent == 0 and self._at_document_marker():
                break
            chunks.extend(breaks)
            leading_non_space = cursor.peek() not in WHITESPACE
            length = 0
            while cursor.peek(length) not in BREAK_OR_END:
                length += 1
            chunks.append(cursor.prefix(length))
            cursor.advance(length)
            end = cursor.position
            line_break = self._scan_line_break()
            breaks, break_end = self._scan_block_scalar_breaks(indent)
            if breaks:
                end = break_end
            if cursor.column == indent and cursor.peek() != EOF_CHAR:
                if indent == 0 and self._at_document_marker():
                    break
                if (
                    folded
                    and line_break == "\n"
                    and leading_non_space
                    and cursor.peek() not in WHITESPACE
                ):
                    if not breaks:
                        chunks.append(" ")
                else:
                    chunks.append(line_break)
            else:
                break

        # Chomping: None clips to one final break, False strips, True keeps all
        if chomping is not False:
            chunks.append(line_break)
        if chomping is True:
            chunks.extend(breaks)

        return Token(
            TokenType.SCALAR,
            Span(start, end),
            "".join(chunks),
            style=ScalarStyle.FOLDED if folded else ScalarStyle.LITERAL,
        )

    def _scan_block_scalar_indicators(self, start: Position) -> tuple[bool | None, int | None]:
        cursor = self._cursor
        chomping: bool | None = None
        increment: int | None = None

        ch = cursor.peek()
        if ch in "+-":
            chomping = ch == "+"
            cursor.advance()
            ch = cursor.peek()
            if ch in DIGITS:
                increment = self._scan_indentation_indicator(start)
        elif ch in DIGITS:
            increment = self._scan_indentation_indicator(start)
            ch = cursor.peek()
            if ch in "+-":
                chomping = ch == "+"
                cursor.advance()

        ch = cursor.peek()
        if ch not in BLANK_OR_END:
            raise ScanError(
                f"expected chomping or indentation indicators, but found {ch!r}",
                Span.at(cursor.position),
                context="while scanning a block scalar",
                context_span=Span.at(start),
            )
        return chomping, increment

    def _scan_indentation_indicator(self, start: Position) -> int:
        cursor = self._cursor
        increment = int(cursor.peek())
        if increment == 0:
            raise BadIndentation(
                "expected indentation indicator in the range 1-9, but found 0",
                Span.at(cursor.position),
                context="while scanning a block scalar",
                context_span=Span.at(start),
            )
        cursor.advance()
        return increment

    def _scan_block_scalar_ignored_line(self, start: Position) -> None:
        cursor = self._cursor
        while cursor.peek() in WHITESPACE:
            cursor.advance()
        if cursor.peek() == "#":
            while cursor.peek() not in BREAK_OR_END:
                cursor.advance()
        ch = cursor.peek()
        if ch not in BREAK_OR_END:
            raise ScanError(
                f"expected a comment or a line break, but found {ch!r}",
                Span.at(cursor.position),
                context="while scanning a block scalar",
                context_span=Span.at(start),
            )
        self._scan_line_break()

    def _scan_block_scalar_indentation(self) -> tuple[list[str], int, Position]:
        """Skip leading empty lines, tracking the widest one.

        Returns:
            (line breaks, widest indentation seen, position after the last break)
        """
        cursor = self._cursor
        chunks: list[str] = []
        max_indent = 0
        end = cursor.position
        while cursor.peek() in " \n":
            if cursor.peek() == "\n":
                chunks.append(self._scan_line_break())
                end = cursor.position
            else:
                cursor.advance()
                max_indent = max(max_indent, cursor.column)
        return chunks, max_indent, end

    def _scan_block_scalar_breaks(self, indent: int) -> tuple[list[str], Position]:
        cursor = self._cursor
        chunks: list[str] = []
        end = cursor.position
        while cursor.column < indent and cursor.peek() == " ":
            cursor.advance()
        while cursor.peek() == "\n":
            chunks.append(self._scan_line_break())
            end = cursor.position
            while cursor.column < indent and cursor.peek() == " ":
                cursor.advance()
        return chunks, end
