"""Flow collection parsing for the Yamlet parser.

Flow sequences may hold single-pair mappings without braces
("[a: 1, b]"); those are reported as flow mappings of one entry.
Keys or values may be empty on either side of ':' ("[: x]", "{a:}").
"""

from __future__ import annotations

from yamlet.events import CollectionStyle, Event
from yamlet.location import Position, Span
from yamlet.parsing.states import ParserState
from yamlet.tokens import Token, TokenType


class FlowParsingMixin:
    """Mixin providing flow sequence and flow mapping state handlers."""

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

    def _parse_flow_node(self) -> Event:
        raise NotImplementedError

    def _enter_collection(self, span: Span) -> None:
        raise NotImplementedError

    def _leave_collection(self) -> None:
        raise NotImplementedError

    # =========================================================================
    # Sequences
    # =========================================================================

    def _parse_flow_sequence_first_entry(self) -> Event:
        token = self._next_token()
        self._marks.append(token.span.start)
        return self._parse_flow_sequence_entry(first=True)

    def _parse_flow_sequence_entry(self, first: bool = False) -> Event:
        if not self._check(TokenType.FLOW_SEQUENCE_END):
            if not first:
                if self._check(TokenType.FLOW_ENTRY):
                    self._next_token()
                else:
                    raise self._unexpected(
                        "expected ',' or ']'",
                        (TokenType.FLOW_ENTRY, TokenType.FLOW_SEQUENCE_END),
                        context="while parsing a flow sequence",
                        context_mark=self._marks[-1],
                    )

            if self._check(TokenType.KEY, TokenType.VALUE):
                # Single-pair mapping inside the sequence
                token = self._peek_token()
                span = Span.at(token.span.start)
                self._enter_collection(span)
                self._state = ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_KEY
                return Event.mapping_start(span, CollectionStyle.FLOW)

            if not self._check(TokenType.FLOW_SEQUENCE_END):
                self._states.append(ParserState.FLOW_SEQUENCE_ENTRY)
                return self._parse_flow_node()

        token = self._next_token()
        self._state = self._states.pop()
        self._marks.pop()
        self._leave_collection()
        return Event.sequence_end(token.span)

    def _parse_flow_sequence_entry_mapping_key(self) -> Event:
        position = self._peek_token().span.start
        if self._check(TokenType.KEY):
            position = self._next_token().span.end
        if not self._check(TokenType.VALUE, TokenType.FLOW_ENTRY, TokenType.FLOW_SEQUENCE_END):
            self._states.append(ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_VALUE)
            return self._parse_flow_node()
        self._state = ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_VALUE
        return self._empty_scalar_at(position)

    def _parse_flow_sequence_entry_mapping_value(self) -> Event:
        if self._check(TokenType.VALUE):
            token = self._next_token()
            if not self._check(TokenType.FLOW_ENTRY, TokenType.FLOW_SEQUENCE_END):
                self._states.append(ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_END)
                return self._parse_flow_node()
            self._state = ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_END
            return self._empty_scalar_at(token.span.end)
        self._state = ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_END
        return self._empty_scalar_at(self._peek_token().span.start)

    def _parse_flow_sequence_entry_mapping_end(self) -> Event:
        self._state = ParserState.FLOW_SEQUENCE_ENTRY
        self._leave_collection()
        return Event.mapping_end(Span.at(self._peek_token().span.start))

    # =========================================================================
    # Mappings
    # =========================================================================

    def _parse_flow_mapping_first_key(self) -> Event:
        token = self._next_token()
        self._marks.append(token.span.start)
        return self._parse_flow_mapping_key(first=True)

    def _parse_flow_mapping_key(self, first: bool = False) -> Event:
        if not self._check(TokenType.FLOW_MAPPING_END):
            if not first:
                if self._check(TokenType.FLOW_ENTRY):
                    self._next_token()
                else:
                    raise self._unexpected(
                        "did not find expected ',' or '}'",
                        (TokenType.FLOW_ENTRY, TokenType.FLOW_MAPPING_END),
                        context="while parsing a flow mapping",
                        context_mark=self._marks[-1],
                    )

            if self._check(TokenType.KEY):
                token = self._next_token()
                if not self._check(
                    TokenType.VALUE, TokenType.FLOW_ENTRY, TokenType.FLOW_MAPPING_END
                ):
                    self._states.append(ParserState.FLOW_MAPPING_VALUE)
                    return self._parse_flow_node()
                self._state = ParserState.FLOW_MAPPING_VALUE
                return self._empty_scalar_at(token.span.end)

            if self._check(TokenType.VALUE):
                # "{: v}" with an empty key
                self._state = ParserState.FLOW_MAPPING_VALUE
                return self._empty_scalar_at(self._peek_token().span.start)

            if not self._check(TokenType.FLOW_MAPPING_END):
                self._states.append(ParserState.FLOW_MAPPING_EMPTY_VALUE)
                return self._parse_flow_node()

        token = self._next_token()
        self._state = self._states.pop()
        self._marks.pop()
        self._leave_collection()
        return Event.mapping_end(token.span)

    def _parse_flow_mapping_value(self) -> Event:
        if self._check(TokenType.VALUE):
            token = self._next_token()
            if not self._check(TokenType.FLOW_ENTRY, TokenType.FLOW_MAPPING_END):
                self._states.append(ParserState.FLOW_MAPPING_KEY)
                return self._parse_flow_node()
            self._state = ParserState.FLOW_MAPPING_KEY
            return self._empty_scalar_at(token.span.end)
        self._state = ParserState.FLOW_MAPPING_KEY
        return self._empty_scalar_at(self._peek_token().span.start)

    def _parse_flow_mapping_empty_value(self) -> Event:
        self._state = ParserState.FLOW_MAPPING_KEY
        return self._empty_scalar_at(self._peek_token().span.start)
