"""Indentation and implicit-key bookkeeping for the scanner.

Block structure in YAML is carried by indentation alone, so the scanner
synthesizes the tokens that delimit block collections:

- BLOCK_SEQUENCE_START / BLOCK_MAPPING_START when a block collection opens
  at a column deeper than the current indentation (roll)
- BLOCK_END for every level closed by a less-indented line (unroll)

Implicit ("simple") keys are only recognised once the ':' after them is
seen. The scanner remembers where each candidate key began, one per flow
level, and inserts KEY (and possibly BLOCK_MAPPING_START) retroactively.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from yamlet.errors import BadIndentation, ScanError, TabIndentationError
from yamlet.input.cursor import Cursor
from yamlet.location import Position, Span
from yamlet.scanner.charsets import MAX_SIMPLE_KEY_LENGTH, WHITESPACE
from yamlet.tokens import Token, TokenType


@dataclass(slots=True)
class SimpleKey:
    """A position where an implicit key may have started.

    Attributes:
        token_number: Absolute number of the first token of the key
        required: Whether a ':' must follow (block key at the indentation column)
        index: Cursor index of the key start
        line: Line of the key start
        column: Column of the key start (0-indexed)
        mark: Position of the key start

    """

    token_number: int
    required: bool
    index: int
    line: int
    column: int
    mark: Position


class IndentationMixin:
    """Mixin owning the indentation stack and the possible simple keys.

    Required Host Attributes:
        - _cursor: Cursor
        - _tokens: deque[Token]
        - _tokens_taken: int
        - _flow_level: int

    """

    _cursor: Cursor
    _tokens: deque[Token]
    _tokens_taken: int
    _indent: int
    _indents: list[int]
    _allow_simple_key: bool
    _possible_simple_keys: dict[int, SimpleKey]

    @property
    def _flow_level(self) -> int:
        raise NotImplementedError

    # =========================================================================
    # Indentation stack
    # =========================================================================

    def _unroll_indent(self, column: int, *, check: bool = True) -> None:
        """Close every block collection indented deeper than column.

        Args:
            column: Column of the next token (0-indexed), -1 to close all
            check: Whether landing between two indentation levels is an error
        """
        # Indentation is meaningless inside flow collections
        if self._flow_level:
            return
        popped = False
        while self._indent > column:
            mark = self._cursor.position
            self._indent = self._indents.pop()
            self._tokens.append(Token(TokenType.BLOCK_END, Span.at(mark)))
            popped = True
        if check and popped and column > self._indent and self._cursor.in_indentation:
            raise BadIndentation(
                f"found indentation of {column} spaces, which matches no enclosing block "
                f"(expected {self._indent if self._indent >= 0 else 0})",
                Span.at(self._cursor.position),
            )

    def _roll_indent(self, column: int) -> bool:
        """Open a new indentation level if column is deeper than the current one.

        Returns:
            True if a level was pushed and a block collection start is due.
        """
        if self._flow_level:
            return False
        if self._indent < column:
            self._indents.append(self._indent)
            self._indent = column
            return True
        return False

    def _check_tab_indentation(self) -> None:
        """Reject a tab found while still inside block indentation.

        Lines holding nothing but whitespace or a comment may contain tabs.
        """
        cursor = self._cursor
        n = 0
        while cursor.peek(n) in WHITESPACE:
            n += 1
        if cursor.peek(n) in "\n\0#":
            return
        raise TabIndentationError(
            "found a tab character where an indentation space is expected",
            Span.at(cursor.position),
        )

    # =========================================================================
    # Simple keys
    # =========================================================================

    def _next_possible_simple_key(self) -> int | None:
        """Token number of the earliest pending simple key, if any."""
        if not self._possible_simple_keys:
            return None
        return min(key.token_number for key in self._possible_simple_keys.values())

    def _stale_possible_simple_keys(self) -> None:
        """Drop candidate keys that can no longer be followed by ':'.

        Implicit keys are limited to a single line and to
        MAX_SIMPLE_KEY_LENGTH characters.
        """
        cursor = self._cursor
        for level in list(self._possible_simple_keys):
            key = self._possible_simple_keys[level]
            if key.line != cursor.line or cursor.index - key.index > MAX_SIMPLE_KEY_LENGTH:
                if key.required:
                    raise ScanError(
                        "could not find expected ':'",
                        Span.at(cursor.position),
                        context="while scanning a simple key",
                        context_span=Span.at(key.mark),
                    )
                del self._possible_simple_keys[level]

    def _save_possible_simple_key(self) -> None:
        """Remember that the next token may start an implicit key."""
        cursor = self._cursor
        # A block key at the indentation column must be followed by ':'
        required = not self._flow_level and self._indent == cursor.column
        if self._allow_simple_key:
            self._remove_possible_simple_key()
            self._possible_simple_keys[self._flow_level] = SimpleKey(
                token_number=self._tokens_taken + len(self._tokens),
                required=required,
                index=cursor.index,
                line=cursor.line,
                column=cursor.column,
                mark=cursor.position,
            )

    def _remove_possible_simple_key(self) -> None:
        """Forget the candidate key on the current flow level."""
        key = self._possible_simple_keys.pop(self._flow_level, None)
        if key is not None and key.required:
            raise ScanError(
                "could not find expected ':'",
                Span.at(self._cursor.position),
                context="while scanning a simple key",
                context_span=Span.at(key.mark),
            )
