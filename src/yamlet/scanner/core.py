"""Pull-based YAML 1.2 scanner.

Turns characters from a Cursor into Tokens, one demand at a time. The
scanner keeps a small queue of pending tokens because implicit keys are
only recognised once the ':' after them has been seen; KEY (and
BLOCK_MAPPING_START) are then inserted in front of the key's tokens.

Lookahead is bounded: a pending implicit key expires at the end of its
line or after MAX_SIMPLE_KEY_LENGTH characters, so the queue never holds
more than one line's worth of tokens.

Thread Safety:
Scanner instances are single-use. Create one per source.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from yamlet.errors import BadIndentation, ScanError, UnbalancedFlowError, YamletError
from yamlet.input import InputLike, open_input
from yamlet.input.cursor import EOF_CHAR
from yamlet.location import Position, Span
from yamlet.scanner.charsets import (
    BLANK_OR_END,
    FLOW_INDICATORS,
    FLOW_TERMINATORS,
    INDICATORS,
    PLAIN_LEAD_INDICATORS,
    WHITESPACE,
)
from yamlet.scanner.directives import DirectiveMixin
from yamlet.scanner.indentation import IndentationMixin, SimpleKey
from yamlet.scanner.properties import PropertiesMixin
from yamlet.scanner.scalars import BlockScalarMixin, PlainScalarMixin, QuotedScalarMixin
from yamlet.tokens import Token, TokenType

_CLOSERS = {"]": "[", "}": "{"}


class Scanner(
    # Bookkeeping (indentation stack, implicit keys)
    IndentationMixin,
    # Token scanners
    PlainScalarMixin,
    QuotedScalarMixin,
    BlockScalarMixin,
    PropertiesMixin,
    DirectiveMixin,
):
    """Pull-based YAML 1.2 scanner.

    Usage:
            >>> scanner = Scanner("a: 1")
            >>> [t.type.name for t in scanner]
        ['STREAM_START', 'BLOCK_MAPPING_START', 'KEY', 'SCALAR', 'VALUE',
         'SCALAR', 'BLOCK_END', 'STREAM_END']

    Errors are terminal: once next_token() raised, every later call raises
    the same error again.

    Thread Safety:
        Scanner instances are single-use. Create one per source.

    """

    __slots__ = (
        "_cursor",
        "_source_file",
        "_done",  # STREAM_END has been queued
        "_error",  # Terminal error, re-raised on every pull
        "_tokens",  # Queue of scanned but not yet consumed tokens
        "_tokens_taken",  # Tokens handed out so far
        "_indent",  # Current block indentation column (-1 at top level)
        "_indents",  # Stack of enclosing indentation columns
        "_flow_stack",  # Stack of (opener, position) for open flow collections
        "_allow_simple_key",
        "_possible_simple_keys",  # flow level -> SimpleKey
        "_adjacent_value_at",  # Cursor index where a JSON-like key ended
        "_stream_start_produced",
    )

    def __init__(self, source: InputLike, source_file: str | None = None) -> None:
        """Initialize scanner over a source.

        Args:
            source: YAML text, bytes, a file object, an iterable of text
                chunks, or a Cursor
            source_file: Optional source file path for error messages
        """
        self._cursor = open_input(source)
        self._source_file = source_file
        self._done = False
        self._error: YamletError | None = None
        self._tokens: deque[Token] = deque()
        self._tokens_taken = 0
        self._indent = -1
        self._indents: list[int] = []
        self._flow_stack: list[tuple[str, Position]] = []
        self._allow_simple_key = True
        self._possible_simple_keys: dict[int, SimpleKey] = {}
        self._adjacent_value_at = -1
        self._stream_start_produced = False

    @property
    def _flow_level(self) -> int:
        return len(self._flow_stack)

    # =========================================================================
    # Public interface
    # =========================================================================

    def next_token(self) -> Token | None:
        """Return the next token, or None once STREAM_END was returned.

        Raises:
            ScanError: On malformed input (and on every call after that)
        """
        self._fill_queue()
        if not self._tokens:
            return None
        self._tokens_taken += 1
        return self._tokens.popleft()

    def peek_token(self) -> Token | None:
        """Return the next token without consuming it."""
        self._fill_queue()
        return self._tokens[0] if self._tokens else None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    # =========================================================================
    # Queue management
    # =========================================================================

    def _fill_queue(self) -> None:
        if self._error is not None:
            raise self._error
        try:
            while self._need_more_tokens():
                self._fetch_next_token()
        except YamletError as exc:
            if exc.source_file is None:
                exc.source_file = self._source_file
            self._error = exc
            raise

    def _need_more_tokens(self) -> bool:
        if self._done:
            return False
        if not self._tokens:
            return True
        # A pending implicit key may still receive a KEY token in front of it
        self._stale_possible_simple_keys()
        return self._next_possible_simple_key() == self._tokens_taken

    def _fetch_next_token(self) -> None:
        cursor = self._cursor
        if not self._stream_start_produced:
            self._fetch_stream_start()
            return

        self._scan_to_next_token()
        self._stale_possible_simple_keys()

        ch = cursor.peek()
        if ch == EOF_CHAR:
            self._fetch_stream_end()
            return

        if cursor.column == 0:
            if ch == "%":
                self._fetch_directive()
                return
            if ch in "-." and self._at_document_marker():
                self._fetch_document_indicator(
                    TokenType.DOCUMENT_START if ch == "-" else TokenType.DOCUMENT_END
                )
                return

        self._unroll_indent(cursor.column)

        if ch in "[{":
            self._fetch_flow_collection_start(ch)
        elif ch in "]}":
            self._fetch_flow_collection_end(ch)
        elif ch == "," and self._flow_level:
            self._fetch_flow_entry()
        elif ch == "-" and cursor.peek(1) in BLANK_OR_END:
            self._fetch_block_entry()
        elif ch == "?" and self._check_key():
            self._fetch_key()
        elif ch == ":" and self._check_value():
            self._fetch_value()
        elif ch == "*":
            self._fetch_alias()
        elif ch == "&":
            self._fetch_anchor()
        elif ch == "!":
            self._fetch_tag()
        elif ch in "|>" and not self._flow_level:
            self._fetch_block_scalar(folded=ch == ">")
        elif ch == "'":
            self._fetch_quoted(double=False)
        elif ch == '"':
            self._fetch_quoted(double=True)
        elif self._check_plain():
            self._fetch_plain()
        else:
            raise ScanError(
                f"found character {ch!r} that cannot start any token",
                Span.at(cursor.position),
                context="while scanning for the next token",
            )

    # =========================================================================
    # Character helpers shared by the scanner mixins
    # =========================================================================

    def _scan_line_break(self) -> str:
        if self._cursor.peek() == "\n":
            self._cursor.advance()
            return "\n"
        return ""

    def _at_document_marker(self) -> bool:
        cursor = self._cursor
        return (
            cursor.column == 0
            and cursor.prefix(3) in ("---", "...")
            and cursor.peek(3) in BLANK_OR_END
        )

    def _scan_to_next_token(self) -> None:
        """Skip whitespace, comments, and line breaks before the next token."""
        cursor = self._cursor
        while True:
            ch = cursor.peek()
            while ch in WHITESPACE:
                if ch == "\t" and not self._flow_level and cursor.in_indentation:
                    self._check_tab_indentation()
                cursor.advance()
                ch = cursor.peek()
            if ch == "#":
                while cursor.peek() not in "\n" + EOF_CHAR:
                    cursor.advance()
            if self._scan_line_break():
                if not self._flow_level:
                    self._allow_simple_key = True
            else:
                break

        if (
            self._flow_level
            and cursor.in_indentation
            and cursor.peek() != EOF_CHAR
            and cursor.column <= self._indent
        ):
            raise BadIndentation(
                "insufficient indentation in flow collection",
                Span.at(cursor.position),
                context="while scanning a flow collection",
                context_span=Span.at(self._flow_stack[-1][1]),
            )

    # =========================================================================
    # Stream and document
    # =========================================================================

    def _fetch_stream_start(self) -> None:
        mark = self._cursor.position
        self._stream_start_produced = True
        self._tokens.append(Token(TokenType.STREAM_START, Span.at(mark)))

    def _fetch_stream_end(self) -> None:
        self._unroll_indent(-1, check=False)
        self._remove_possible_simple_key()
        self._allow_simple_key = False
        self._possible_simple_keys.clear()
        if self._flow_stack:
            opener, mark = self._flow_stack[-1]
            raise UnbalancedFlowError(
                f"unclosed flow collection {opener!r}",
                Span.at(mark),
                context="while scanning a flow collection",
            )
        mark = self._cursor.position
        self._tokens.append(Token(TokenType.STREAM_END, Span.at(mark)))
        self._done = True

    def _fetch_directive(self) -> None:
        self._unroll_indent(-1, check=False)
        self._remove_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_directive())

    def _fetch_document_indicator(self, token_type: TokenType) -> None:
        if self._flow_stack:
            opener, mark = self._flow_stack[-1]
            raise UnbalancedFlowError(
                f"unclosed flow collection {opener!r} before document marker",
                Span.at(mark),
                context="while scanning a flow collection",
            )
        self._unroll_indent(-1, check=False)
        self._remove_possible_simple_key()
        self._allow_simple_key = False
        start = self._cursor.position
        self._cursor.advance(3)
        self._tokens.append(Token(token_type, Span(start, self._cursor.position)))

    # =========================================================================
    # Flow collections
    # =========================================================================

    def _fetch_flow_collection_start(self, ch: str) -> None:
        # '[' and '{' may start an implicit key
        self._save_possible_simple_key()
        start = self._cursor.position
        self._flow_stack.append((ch, start))
        self._allow_simple_key = True
        self._cursor.advance()
        token_type = TokenType.FLOW_SEQUENCE_START if ch == "[" else TokenType.FLOW_MAPPING_START
        self._tokens.append(Token(token_type, Span(start, self._cursor.position)))

    def _fetch_flow_collection_end(self, ch: str) -> None:
        start = self._cursor.position
        if not self._flow_stack:
            raise UnbalancedFlowError(
                f"found {ch!r} without a matching {_CLOSERS[ch]!r}",
                Span.at(start),
            )
        opener, mark = self._flow_stack[-1]
        if opener != _CLOSERS[ch]:
            raise UnbalancedFlowError(
                f"found {ch!r} that does not close {opener!r}",
                Span.at(start),
                context="while scanning a flow collection",
                context_span=Span.at(mark),
            )
        self._remove_possible_simple_key()
        self._flow_stack.pop()
        self._allow_simple_key = False
        self._cursor.advance()
        if self._flow_level:
            self._adjacent_value_at = self._cursor.index
        token_type = TokenType.FLOW_SEQUENCE_END if ch == "]" else TokenType.FLOW_MAPPING_END
        self._tokens.append(Token(token_type, Span(start, self._cursor.position)))

    def _fetch_flow_entry(self) -> None:
        self._allow_simple_key = True
        self._remove_possible_simple_key()
        start = self._cursor.position
        self._cursor.advance()
        self._tokens.append(Token(TokenType.FLOW_ENTRY, Span(start, self._cursor.position)))

    # =========================================================================
    # Block entries, keys, and values
    # =========================================================================

    def _fetch_block_entry(self) -> None:
        cursor = self._cursor
        if not self._flow_level:
            if not self._allow_simple_key:
                raise ScanError(
                    "sequence entries are not allowed here",
                    Span.at(cursor.position),
                )
            if self._roll_indent(cursor.column):
                mark = cursor.position
                self._tokens.append(Token(TokenType.BLOCK_SEQUENCE_START, Span.at(mark)))
        # '-' inside flow context falls through to the parser as an error
        self._allow_simple_key = True
        self._remove_possible_simple_key()
        start = cursor.position
        cursor.advance()
        self._tokens.append(Token(TokenType.BLOCK_ENTRY, Span(start, cursor.position)))

    def _check_key(self) -> bool:
        following = self._cursor.peek(1)
        if following in BLANK_OR_END:
            return True
        return bool(self._flow_level) and following in FLOW_INDICATORS

    def _fetch_key(self) -> None:
        cursor = self._cursor
        if not self._flow_level:
            if not self._allow_simple_key:
                raise ScanError(
                    "mapping keys are not allowed here",
                    Span.at(cursor.position),
                )
            if self._roll_indent(cursor.column):
                mark = cursor.position
                self._tokens.append(Token(TokenType.BLOCK_MAPPING_START, Span.at(mark)))
        # Simple keys are allowed after '?' in block context
        self._allow_simple_key = not self._flow_level
        self._remove_possible_simple_key()
        start = cursor.position
        cursor.advance()
        self._tokens.append(Token(TokenType.KEY, Span(start, cursor.position)))

    def _check_value(self) -> bool:
        cursor = self._cursor
        following = cursor.peek(1)
        if following in BLANK_OR_END:
            return True
        if not self._flow_level:
            return False
        if following in FLOW_TERMINATORS:
            return True
        # JSON-like keys ("a":x, [a]:x, {a: b}:x) may be followed directly by a value
        return self._adjacent_value_at == cursor.index

    def _fetch_value(self) -> None:
        cursor = self._cursor
        key = self._possible_simple_keys.pop(self._flow_level, None)
        if key is not None:
            mark = key.mark
            position = key.token_number - self._tokens_taken
            self._tokens.insert(position, Token(TokenType.KEY, Span.at(mark)))
            if not self._flow_level and self._roll_indent(key.column):
                self._tokens.insert(position, Token(TokenType.BLOCK_MAPPING_START, Span.at(mark)))
            self._allow_simple_key = False
        else:
            if not self._flow_level:
                if not self._allow_simple_key:
                    raise ScanError(
                        "mapping values are not allowed here",
                        Span.at(cursor.position),
                    )
                if self._roll_indent(cursor.column):
                    mark = cursor.position
                    self._tokens.append(Token(TokenType.BLOCK_MAPPING_START, Span.at(mark)))
            self._allow_simple_key = not self._flow_level
            self._remove_possible_simple_key()

        start = cursor.position
        cursor.advance()
        self._tokens.append(Token(TokenType.VALUE, Span(start, cursor.position)))

    # =========================================================================
    # Node properties and scalars
    # =========================================================================

    def _fetch_alias(self) -> None:
        self._save_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_anchor(TokenType.ALIAS))

    def _fetch_anchor(self) -> None:
        self._save_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_anchor(TokenType.ANCHOR))

    def _fetch_tag(self) -> None:
        self._save_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_tag())

    def _fetch_block_scalar(self, *, folded: bool) -> None:
        # A new simple key may start after a block scalar
        self._allow_simple_key = True
        self._remove_possible_simple_key()
        self._tokens.append(self._scan_block_scalar(folded))

    def _fetch_quoted(self, *, double: bool) -> None:
        self._save_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_quoted(double))
        if self._flow_level:
            self._adjacent_value_at = self._cursor.index

    def _check_plain(self) -> bool:
        cursor = self._cursor
        ch = cursor.peek()
        if ch not in INDICATORS and ch not in BLANK_OR_END:
            return True
        if ch in PLAIN_LEAD_INDICATORS:
            following = cursor.peek(1)
            if following in BLANK_OR_END:
                return False
            return not (self._flow_level and following in FLOW_INDICATORS)
        return False

    def _fetch_plain(self) -> None:
        self._save_possible_simple_key()
        self._allow_simple_key = False
        self._tokens.append(self._scan_plain())
