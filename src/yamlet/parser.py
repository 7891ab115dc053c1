"""Pull-based YAML 1.2 event parser.

Consumes the token stream from Scanner and produces Events, one per
pull. The grammar is an explicit state machine rather than recursive
descent, so nesting depth costs heap memory only and is bounded by the
configured maximum depth.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Token stream access and error construction
- `NodeParsingMixin`: Node properties, anchors, aliases, depth limit
- `DocumentParsingMixin`: Stream, documents, and directives
- `BlockParsingMixin`: Block sequences and mappings
- `FlowParsingMixin`: Flow sequences and mappings

Thread Safety:
- Parser instances are single-use and not thread-safe
- Configuration is read from ContextVar (thread-local) at construction
- Events are immutable and safe to share across threads

"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from yamlet.config import get_parse_config
from yamlet.errors import YamletError
from yamlet.events import Event, EventType
from yamlet.input import InputLike
from yamlet.location import Position
from yamlet.parsing import (
    DEFAULT_TAG_HANDLES,
    BlockParsingMixin,
    DocumentParsingMixin,
    FlowParsingMixin,
    NodeParsingMixin,
    ParserState,
    TokenNavigationMixin,
)
from yamlet.receiver import EventReceiver
from yamlet.scanner import Scanner


class Parser(
    TokenNavigationMixin,
    NodeParsingMixin,
    DocumentParsingMixin,
    BlockParsingMixin,
    FlowParsingMixin,
):
    """Pull-based YAML 1.2 event parser.

    Usage:
            >>> parser = Parser("- a\\n- b")
            >>> [e.type.name for e in parser]
        ['STREAM_START', 'DOCUMENT_START', 'SEQUENCE_START', 'SCALAR',
         'SCALAR', 'SEQUENCE_END', 'DOCUMENT_END', 'STREAM_END']

    Errors are terminal: once next_event() raised, every later call raises
    the same error again.

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).

    """

    __slots__ = (
        "_scanner",
        "_source_file",
        "_state",
        "_states",  # States to resume after the current node
        "_marks",  # Start positions of open collections, for error context
        "_handlers",  # ParserState -> bound state handler
        "_anchors",  # Anchors of the current document -> referenced yet
        "_tag_handles",  # Handle -> prefix for the current document
        "_directives_allowed",  # Previous document ended with '...' (or none yet)
        "_depth",
        "_max_depth",
        "_peeked",
        "_error",
    )

    def __init__(
        self,
        source: InputLike | Scanner,
        *,
        max_depth: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser over a source.

        The depth limit is read from the active ParseConfig unless given here.

        Args:
            source: YAML text, bytes, a file object, an iterable of text
                chunks, or a Scanner
            max_depth: Maximum collection nesting depth (overrides config)
            source_file: Optional source file path for error messages

        Raises:
            ValueError: If max_depth is not positive
        """
        if max_depth is None:
            max_depth = get_parse_config().max_depth
        elif max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")

        if isinstance(source, Scanner):
            self._scanner = source
        else:
            self._scanner = Scanner(source, source_file=source_file)
        self._source_file = source_file
        self._state = ParserState.STREAM_START
        self._states: list[ParserState] = []
        self._marks: list[Position] = []
        self._anchors: dict[str, bool] = {}
        self._tag_handles: dict[str, str] = dict(DEFAULT_TAG_HANDLES)
        self._directives_allowed = True
        self._depth = 0
        self._max_depth = max_depth
        self._peeked: Event | None = None
        self._error: YamletError | None = None
        self._handlers: dict[ParserState, Callable[[], Event]] = {
            ParserState.STREAM_START: self._parse_stream_start,
            ParserState.IMPLICIT_DOCUMENT_START: self._parse_implicit_document_start,
            ParserState.DOCUMENT_START: self._parse_document_start,
            ParserState.DOCUMENT_CONTENT: self._parse_document_content,
            ParserState.DOCUMENT_END: self._parse_document_end,
            ParserState.BLOCK_NODE: self._parse_block_node,
            ParserState.BLOCK_SEQUENCE_FIRST_ENTRY: self._parse_block_sequence_first_entry,
            ParserState.BLOCK_SEQUENCE_ENTRY: self._parse_block_sequence_entry,
            ParserState.INDENTLESS_SEQUENCE_ENTRY: self._parse_indentless_sequence_entry,
            ParserState.BLOCK_MAPPING_FIRST_KEY: self._parse_block_mapping_first_key,
            ParserState.BLOCK_MAPPING_KEY: self._parse_block_mapping_key,
            ParserState.BLOCK_MAPPING_VALUE: self._parse_block_mapping_value,
            ParserState.FLOW_SEQUENCE_FIRST_ENTRY: self._parse_flow_sequence_first_entry,
            ParserState.FLOW_SEQUENCE_ENTRY: self._parse_flow_sequence_entry,
            ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_KEY: self._parse_flow_sequence_entry_mapping_key,
            ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_VALUE: self._parse_flow_sequence_entry_mapping_value,
            ParserState.FLOW_SEQUENCE_ENTRY_MAPPING_END: self._parse_flow_sequence_entry_mapping_end,
            ParserState.FLOW_MAPPING_FIRST_KEY: self._parse_flow_mapping_first_key,
            ParserState.FLOW_MAPPING_KEY: self._parse_flow_mapping_key,
            ParserState.FLOW_MAPPING_VALUE: self._parse_flow_mapping_value,
            ParserState.FLOW_MAPPING_EMPTY_VALUE: self._parse_flow_mapping_empty_value,
        }

    @property
    def max_depth(self) -> int:
        return self._max_depth

    # =========================================================================
    # Public interface
    # =========================================================================

    def next_event(self) -> Event | None:
        """Return the next event, or None once STREAM_END was returned.

        Raises:
            ScanError: On lexically malformed input
            ParseError: On grammatically malformed input
        """
        if self._peeked is not None:
            event, self._peeked = self._peeked, None
            return event
        return self._produce()

    def peek_event(self) -> Event | None:
        """Return the next event without consuming it."""
        if self._peeked is None:
            self._peeked = self._produce()
        return self._peeked

    def __iter__(self) -> Iterator[Event]:
        return self

    def __next__(self) -> Event:
        event = self.next_event()
        if event is None:
            raise StopIteration
        return event

    def load(self, receiver: EventReceiver, multi: bool = True) -> None:
        """Feed events to a receiver until the stream (or first document) ends.

        Args:
            receiver: Object whose on_event() gets every event
            multi: If False, stop after the first DOCUMENT_END event
        """
        for event in self:
            receiver.on_event(event)
            if not multi and event.type is EventType.DOCUMENT_END:
                break

    # =========================================================================
    # State machine driver
    # =========================================================================

    def _produce(self) -> Event | None:
        if self._error is not None:
            raise self._error
        if self._state is ParserState.END:
            return None
        try:
            return self._handlers[self._state]()
        except YamletError as exc:
            if exc.source_file is None:
                exc.source_file = self._source_file
            self._error = exc
            raise
