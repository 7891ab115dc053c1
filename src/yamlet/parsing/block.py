"""Block collection parsing for the Yamlet parser.

Block sequences and mappings are delimited by the scanner's synthetic
BLOCK_SEQUENCE_START / BLOCK_MAPPING_START / BLOCK_END tokens. The one
exception is the indentless sequence, a mapping value whose '-' entries
sit at the key's column; it ends at the first token that is not '-'.
"""

from __future__ import annotations

from yamlet.errors import BadIndentation
from yamlet.events import Event
from yamlet.location import Position, Span
from yamlet.parsing.states import ParserState
from yamlet.tokens import Token, TokenType


class BlockParsingMixin:
    """Mixin providing block sequence and block mapping state handlers."""

    _state: ParserState
    _states: list[ParserState]
    _marks: list[Position]

    def _peek_token(self) -> Token:
        raise NotImplementedError

    def _next_token(self) -> Token:
        raise NotImplementedError

    def _check(self, *types: TokenType) -> bool:
        raise NotImplementedError

    def _unexpected(
        self,
        problem: str,
        expected: tuple[TokenType, ...],
        *,
        context: str | None = None,
        context_mark: Position | None = None,
    ) -> Exception:
        raise NotImplementedError

    def _empty_scalar_at(self, position: Position) -> Event:
        raise NotImplementedError

    def _parse_block_node(self) -> Event:
        raise NotImplementedError

    def _parse_block_node_or_indentless_sequence(self) -> Event:
        raise NotImplementedError

    def _leave_collection(self) -> None:
        raise NotImplementedError

    # =========================================================================
    # Sequences
    # =========================================================================

    def _parse_block_sequence_first_entry(self) -> Event:
        token = self._next_token()
        self._marks.append(token.span.start)
        return self._parse_block_sequence_entry()

    def _parse_block_sequence_entry(self) -> Event:
        if self._check(TokenType.BLOCK_ENTRY):
            token = self._next_token()
            if not self._check(TokenType.BLOCK_ENTRY, TokenType.BLOCK_END):
                self._states.append(ParserState.BLOCK_SEQUENCE_ENTRY)
                return self._parse_block_node()
            self._state = ParserState.BLOCK_SEQUENCE_ENTRY
            return self._empty_scalar_at(token.span.end)

        if not self._check(TokenType.BLOCK_END):
            raise self._unexpected(
                "expected <block end>",
                (TokenType.BLOCK_ENTRY, TokenType.BLOCK_END),
                context="while parsing a block collection",
                context_mark=self._marks[-1],
            )
        token = self._next_token()
        self._state = self._states.pop()
        self._marks.pop()
        self._leave_collection()
        return Event.sequence_end(token.span)

    def _parse_indentless_sequence_entry(self) -> Event:
        if self._check(TokenType.BLOCK_ENTRY):
            token = self._next_token()
            if not self._check(
                TokenType.BLOCK_ENTRY, TokenType.KEY, TokenType.VALUE, TokenType.BLOCK_END
            ):
                self._states.append(ParserState.INDENTLESS_SEQUENCE_ENTRY)
                return self._parse_block_node()
            self._state = ParserState.INDENTLESS_SEQUENCE_ENTRY
            return self._empty_scalar_at(token.span.end)

        token = self._peek_token()
        self._state = self._states.pop()
        self._leave_collection()
        return Event.sequence_end(Span.at(token.span.start))

    # =========================================================================
    # Mappings
    # =========================================================================

    def _parse_block_mapping_first_key(self) -> Event:
        token = self._next_token()
        self._marks.append(token.span.start)
        return self._parse_block_mapping_key()

    def _parse_block_mapping_key(self) -> Event:
        if self._check(TokenType.KEY):
            token = self._next_token()
            if not self._check(TokenType.KEY, TokenType.VALUE, TokenType.BLOCK_END):
                self._states.append(ParserState.BLOCK_MAPPING_VALUE)
                return self._parse_block_node_or_indentless_sequence()
            self._state = ParserState.BLOCK_MAPPING_VALUE
            return self._empty_scalar_at(token.span.end)

        if self._check(TokenType.VALUE):
            # ": value" with an empty key
            self._state = ParserState.BLOCK_MAPPING_VALUE
            return self._empty_scalar_at(self._peek_token().span.start)

        if self._check(TokenType.BLOCK_ENTRY):
            token = self._peek_token()
            raise BadIndentation(
                "found a sequence entry at the indentation of a mapping key",
                token.span,
                context="while parsing a block mapping",
                context_span=Span.at(self._marks[-1]),
            )

        if not self._check(TokenType.BLOCK_END):
            raise self._unexpected(
                "expected <block end>",
                (TokenType.KEY, TokenType.VALUE, TokenType.BLOCK_END),
                context="while parsing a block mapping",
                context_mark=self._marks[-1],
            )
        token = self._next_token()
        self._state = self._states.pop()
        self._marks.pop()
        self._leave_collection()
        return Event.mapping_end(token.span)

    def _parse_block_mapping_value(self) -> Event:
        if self._check(TokenType.VALUE):
            token = self._next_token()
            if not self._check(TokenType.KEY, TokenType.VALUE, TokenType.BLOCK_END):
                self._states.append(ParserState.BLOCK_MAPPING_KEY)
                return self._parse_block_node_or_indentless_sequence()
            self._state = ParserState.BLOCK_MAPPING_KEY
            return self._empty_scalar_at(token.span.end)

        self._state = ParserState.BLOCK_MAPPING_KEY
        return self._empty_scalar_at(self._peek_token().span.start)
