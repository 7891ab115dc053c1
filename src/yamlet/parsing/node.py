"""Node parsing for the Yamlet parser.

Parses node properties (anchor, tag), aliases, scalars, and the start of
collections. Also owns the per-document anchor table and the collection
depth limit.
"""

from __future__ import annotations

from yamlet.errors import (
    DuplicateAnchorError,
    RecursionLimitExceeded,
    UndefinedAliasError,
    UndefinedTagHandle,
)
from yamlet.events import CollectionStyle, Event, Tag
from yamlet.location import Position, Span
from yamlet.parsing.states import ParserState
from yamlet.tokens import ScalarStyle, Token, TokenType

# Tokens that can begin node content, for error messages
_NODE_CONTENT = (
    TokenType.SCALAR,
    TokenType.ALIAS,
    TokenType.ANCHOR,
    TokenType.TAG,
    TokenType.FLOW_SEQUENCE_START,
    TokenType.FLOW_MAPPING_START,
)


class NodeParsingMixin:
    """Mixin providing node parsing.

    Required Host Attributes:
        - _state: ParserState
        - _states: list[ParserState]
        - _marks: list[Position]
        - _anchors: dict[str, bool] (anchor name -> referenced by an alias yet)
        - _tag_handles: dict[str, str]
        - _depth: int
        - _max_depth: int

    """

    _state: ParserState
    _states: list[ParserState]
    _marks: list[Position]
    _anchors: dict[str, bool]
    _tag_handles: dict[str, str]
    _depth: int
    _max_depth: int

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

    # =========================================================================
    # Entry points
    # =========================================================================

    def _parse_block_node(self) -> Event:
        return self._parse_node(block=True)

    def _parse_block_node_or_indentless_sequence(self) -> Event:
        return self._parse_node(block=True, indentless_sequence=True)

    def _parse_flow_node(self) -> Event:
        return self._parse_node()

    def _parse_node(self, block: bool = False, indentless_sequence: bool = False) -> Event:
        """Parse one node and return its first event.

        Args:
            block: Whether block collections may start here
            indentless_sequence: Whether a '-' at the current column starts a
                sequence (mapping values only)
        """
        if self._check(TokenType.ALIAS):
            token = self._next_token()
            self._state = self._states.pop()
            return Event.alias(token.span, self._resolve_alias(token))

        anchor_token: Token | None = None
        tag_token: Token | None = None
        if self._check(TokenType.ANCHOR):
            anchor_token = self._next_token()
            if self._check(TokenType.TAG):
                tag_token = self._next_token()
        elif self._check(TokenType.TAG):
            tag_token = self._next_token()
            if self._check(TokenType.ANCHOR):
                anchor_token = self._next_token()

        properties = [t for t in (anchor_token, tag_token) if t is not None]
        if properties:
            start = min(t.span.start for t in properties)
            end = max(t.span.end for t in properties)
        else:
            start = end = self._peek_token().span.start

        tag = self._resolve_tag(tag_token, start) if tag_token is not None else None
        anchor = None
        if anchor_token is not None:
            anchor = anchor_token.value
            self._define_anchor(anchor_token)

        token = self._peek_token()
        if indentless_sequence and token.type is TokenType.BLOCK_ENTRY:
            span = Span(start, token.span.end)
            self._enter_collection(span)
            self._state = ParserState.INDENTLESS_SEQUENCE_ENTRY
            return Event.sequence_start(span, CollectionStyle.BLOCK, anchor=anchor, tag=tag)

        if token.type is TokenType.SCALAR:
            self._next_token()
            self._state = self._states.pop()
            assert token.style is not None
            return Event.scalar(
                Span(start, token.span.end),
                token.value,
                token.style,
                anchor=anchor,
                tag=tag,
            )

        if token.type is TokenType.FLOW_SEQUENCE_START:
            span = Span(start, token.span.end)
            self._enter_collection(span)
            self._state = ParserState.FLOW_SEQUENCE_FIRST_ENTRY
            return Event.sequence_start(span, CollectionStyle.FLOW, anchor=anchor, tag=tag)

        if token.type is TokenType.FLOW_MAPPING_START:
            span = Span(start, token.span.end)
            self._enter_collection(span)
            self._state = ParserState.FLOW_MAPPING_FIRST_KEY
            return Event.mapping_start(span, CollectionStyle.FLOW, anchor=anchor, tag=tag)

        if block and token.type is TokenType.BLOCK_SEQUENCE_START:
            span = Span(start, token.span.end)
            self._enter_collection(span)
            self._state = ParserState.BLOCK_SEQUENCE_FIRST_ENTRY
            return Event.sequence_start(span, CollectionStyle.BLOCK, anchor=anchor, tag=tag)

        if block and token.type is TokenType.BLOCK_MAPPING_START:
            span = Span(start, token.span.end)
            self._enter_collection(span)
            self._state = ParserState.BLOCK_MAPPING_FIRST_KEY
            return Event.mapping_start(span, CollectionStyle.BLOCK, anchor=anchor, tag=tag)

        if anchor is not None or tag is not None:
            # Properties on an empty node
            self._state = self._states.pop()
            return Event.scalar(Span(start, end), "", ScalarStyle.PLAIN, anchor=anchor, tag=tag)

        kind = "block" if block else "flow"
        raise self._unexpected(
            "expected the node content",
            _NODE_CONTENT,
            context=f"while parsing a {kind} node",
            context_mark=start,
        )

    # =========================================================================
    # Anchors and tags
    # =========================================================================

    def _define_anchor(self, token: Token) -> None:
        name = token.value
        if self._anchors.get(name) is False:
            raise DuplicateAnchorError(
                f"found duplicate anchor {name!r} that no alias refers to yet",
                token.span,
                context="while parsing a node",
            )
        self._anchors[name] = False

    def _resolve_alias(self, token: Token) -> str:
        name = token.value
        if name not in self._anchors:
            raise UndefinedAliasError(
                f"found undefined alias {name!r}",
                token.span,
                context="while parsing a node",
            )
        self._anchors[name] = True
        return name

    def _resolve_tag(self, token: Token, start: Position) -> Tag:
        handle = token.handle or ""
        suffix = token.value
        if not handle:
            # Verbatim !<...>
            return Tag("", suffix)
        if handle == "!" and not suffix:
            return Tag("!", "")
        if handle not in self._tag_handles:
            raise UndefinedTagHandle(
                f"found undefined tag handle {handle!r}",
                token.span,
                context="while parsing a node",
                context_span=Span.at(start),
            )
        return Tag(self._tag_handles[handle], suffix)

    # =========================================================================
    # Depth limit
    # =========================================================================

    def _enter_collection(self, span: Span) -> None:
        if self._depth >= self._max_depth:
            raise RecursionLimitExceeded(
                f"collections nested deeper than the maximum depth of {self._max_depth}",
                span,
                context="while parsing a node",
            )
        self._depth += 1

    def _leave_collection(self) -> None:
        self._depth -= 1
