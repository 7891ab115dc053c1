"""Stream and document parsing for the Yamlet parser.

Handles stream start/end, document boundaries, and directive scoping:

- A document without '---' (a bare document) is allowed at the start of the
  stream and after a document closed with '...'
- Directives apply to the one document that follows them and require an
  explicit '---'
- Directives after a document that was not closed with '...' are an error
- Anchors and %TAG handles are forgotten at every document boundary
"""

from __future__ import annotations

from yamlet.errors import MalformedDirective
from yamlet.events import Event
from yamlet.location import Position, Span
from yamlet.parsing.states import ParserState
from yamlet.tokens import Token, TokenType
from yamlet.utils.logger import get_logger, source_logger

logger = get_logger(__name__)

# Handles available in every document unless a %TAG directive overrides them
DEFAULT_TAG_HANDLES: dict[str, str] = {
    "!": "!",
    "!!": "tag:yaml.org,2002:",
}

_DIRECTIVE_TOKENS = (
    TokenType.VERSION_DIRECTIVE,
    TokenType.TAG_DIRECTIVE,
    TokenType.RESERVED_DIRECTIVE,
)


class DocumentParsingMixin:
    """Mixin providing stream and document state handlers.

    Required Host Attributes:
        - _state: ParserState
        - _states: list[ParserState]
        - _anchors: dict[str, bool]
        - _tag_handles: dict[str, str]
        - _directives_allowed: bool
        - _source_file: str | None

    """

    _state: ParserState
    _states: list[ParserState]
    _anchors: dict[str, bool]
    _tag_handles: dict[str, str]
    _directives_allowed: bool
    _source_file: str | None

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

    # =========================================================================
    # Stream
    # =========================================================================

    def _parse_stream_start(self) -> Event:
        token = self._next_token()
        self._state = ParserState.IMPLICIT_DOCUMENT_START
        return Event.stream_start(token.span)

    def _parse_implicit_document_start(self) -> Event:
        if self._check(
            *_DIRECTIVE_TOKENS,
            TokenType.DOCUMENT_START,
            TokenType.DOCUMENT_END,
            TokenType.STREAM_END,
        ):
            return self._parse_document_start()
        return self._start_bare_document()

    def _parse_document_start(self) -> Event:
        # Stray '...' lines between documents
        while self._check(TokenType.DOCUMENT_END):
            self._next_token()
            self._directives_allowed = True

        if self._check(TokenType.STREAM_END):
            token = self._next_token()
            self._state = ParserState.END
            self._states.clear()
            return Event.stream_end(token.span)

        bare = not self._check(*_DIRECTIVE_TOKENS, TokenType.DOCUMENT_START)
        if self._directives_allowed and bare:
            return self._start_bare_document()

        if self._check(*_DIRECTIVE_TOKENS) and not self._directives_allowed:
            raise self._unexpected(
                "expected '...' before directives of the next document",
                (TokenType.DOCUMENT_END, TokenType.DOCUMENT_START),
            )

        start = self._peek_token().span.start
        version, tags = self._process_directives()
        if not self._check(TokenType.DOCUMENT_START):
            raise self._unexpected(
                "expected '---'",
                (TokenType.DOCUMENT_START,),
            )
        token = self._next_token()
        self._states.append(ParserState.DOCUMENT_END)
        self._state = ParserState.DOCUMENT_CONTENT
        logger.debug("Explicit document start at %s", token.span.start)
        return Event.document_start(
            Span(start, token.span.end),
            explicit=True,
            version=version,
            tags=tags,
        )

    def _start_bare_document(self) -> Event:
        self._tag_handles = dict(DEFAULT_TAG_HANDLES)
        self._anchors.clear()
        start = self._peek_token().span.start
        self._states.append(ParserState.DOCUMENT_END)
        self._state = ParserState.BLOCK_NODE
        logger.debug("Bare document start at %s", start)
        return Event.document_start(Span.at(start), explicit=False)

    def _parse_document_content(self) -> Event:
        if self._check(
            *_DIRECTIVE_TOKENS,
            TokenType.DOCUMENT_START,
            TokenType.DOCUMENT_END,
            TokenType.STREAM_END,
        ):
            self._state = self._states.pop()
            return self._empty_scalar_at(self._peek_token().span.start)
        return self._parse_block_node()

    def _parse_document_end(self) -> Event:
        token = self._peek_token()
        start = end = token.span.start
        explicit = False
        if self._check(TokenType.DOCUMENT_END):
            token = self._next_token()
            end = token.span.end
            explicit = True
        self._directives_allowed = explicit
        self._state = ParserState.DOCUMENT_START
        logger.debug("Document end at %s (explicit=%s)", start, explicit)
        return Event.document_end(Span(start, end), explicit=explicit)

    # =========================================================================
    # Directives
    # =========================================================================

    def _process_directives(self) -> tuple[tuple[int, int] | None, tuple[tuple[str, str], ...]]:
        """Consume the directives of one document and install its tag handles.

        Returns:
            (declared %YAML version or None, declared (handle, prefix) pairs)
        """
        version: tuple[int, int] | None = None
        declared: dict[str, str] = {}
        while self._check(*_DIRECTIVE_TOKENS):
            token = self._next_token()
            if token.type is TokenType.VERSION_DIRECTIVE:
                if version is not None:
                    raise MalformedDirective("found duplicate %YAML directive", token.span)
                assert token.version is not None
                major, minor = token.version
                if major != 1:
                    raise MalformedDirective(
                        f"found incompatible YAML document (version {major}.{minor})",
                        token.span,
                    )
                if minor > 2:
                    source_logger(logger, self._source_file).warning(
                        "Document declares YAML %d.%d; parsing it as YAML 1.2", major, minor
                    )
                version = token.version
            elif token.type is TokenType.TAG_DIRECTIVE:
                assert token.handle is not None
                if token.handle in declared:
                    raise MalformedDirective(
                        f"found duplicate tag handle {token.handle!r}", token.span
                    )
                declared[token.handle] = token.value

        self._tag_handles = {**DEFAULT_TAG_HANDLES, **declared}
        self._anchors.clear()
        return version, tuple(declared.items())
