"""
Yamlet: Streaming YAML 1.2 Parser for Python

A pull-based YAML 1.2 scanner and event parser. Turns YAML text into a
stream of tokens or structural events with exact source spans, one pull at
a time, with bounded lookahead and a configurable nesting limit. Zero
runtime dependencies.

Quick Start:
    >>> from yamlet import parse
    >>> from yamlet.serialization import format_event
    >>> for event in parse("a: [1, 2]"):
    ...     print(format_event(event))
    +STR
    +DOC
    +MAP
    =VAL :a
    +SEQ []
    =VAL :1
    =VAL :2
    -SEQ
    -MAP
    -DOC
    -STR

    >>> # Push-style consumption
    >>> from yamlet import Parser, EventCollector
    >>> collector = EventCollector()
    >>> Parser("--- a\\n--- b\\n").load(collector, multi=False)

Configuration:
    >>> from yamlet import ParseConfig, parse_config_context
    >>> with parse_config_context(ParseConfig(max_depth=64)):
    ...     events = list(parse(untrusted_text))

Installation:
    pip install yamlet
"""

from collections.abc import Iterator

from yamlet.config import (
    DEFAULT_MAX_DEPTH,
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from yamlet.errors import (
    BadIndentation,
    DuplicateAnchorError,
    EncodingError,
    InvalidEscapeError,
    InvalidNameError,
    MalformedDirective,
    ParseError,
    RecursionLimitExceeded,
    ScanError,
    TabIndentationError,
    UnbalancedFlowError,
    UndefinedAliasError,
    UndefinedTagHandle,
    UnexpectedToken,
    UnterminatedScalarError,
    YamletError,
)
from yamlet.events import NULL_SCALAR, CollectionStyle, Event, EventType, Tag
from yamlet.input import InputLike, open_input
from yamlet.location import Position, Span
from yamlet.parser import Parser
from yamlet.receiver import EventCollector, EventReceiver
from yamlet.scanner import Scanner
from yamlet.tokens import ScalarStyle, Token, TokenType

__version__ = "0.1.0"


def parse(
    source: InputLike,
    *,
    source_file: str | None = None,
    max_depth: int | None = None,
) -> Parser:
    """Parse YAML into a pull-based stream of events.

    Args:
        source: YAML text, bytes, a file object, or an iterable of chunks
        source_file: Optional source file path for error messages
        max_depth: Maximum collection nesting depth (defaults to the active
            ParseConfig)

    Returns:
        Parser, an iterator of Event objects

    Example:
        >>> [e.type.name for e in parse("x")][2]
        'SCALAR'
    """
    return Parser(source, max_depth=max_depth, source_file=source_file)


def scan(source: InputLike, *, source_file: str | None = None) -> Iterator[Token]:
    """Scan YAML into a pull-based stream of tokens.

    Args:
        source: YAML text, bytes, a file object, or an iterable of chunks
        source_file: Optional source file path for error messages

    Returns:
        Scanner, an iterator of Token objects
    """
    return Scanner(source, source_file=source_file)


__all__ = [
    # Main API
    "parse",
    "scan",
    "Parser",
    "Scanner",
    "open_input",
    "InputLike",
    # Events and tokens
    "Event",
    "EventType",
    "CollectionStyle",
    "Tag",
    "NULL_SCALAR",
    "Token",
    "TokenType",
    "ScalarStyle",
    "Position",
    "Span",
    # Receivers
    "EventReceiver",
    "EventCollector",
    # Configuration
    "DEFAULT_MAX_DEPTH",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Errors
    "YamletError",
    "ScanError",
    "BadIndentation",
    "TabIndentationError",
    "UnbalancedFlowError",
    "InvalidEscapeError",
    "InvalidNameError",
    "EncodingError",
    "UnterminatedScalarError",
    "ParseError",
    "UnexpectedToken",
    "UndefinedAliasError",
    "DuplicateAnchorError",
    "RecursionLimitExceeded",
    "MalformedDirective",
    "UndefinedTagHandle",
    "__version__",
]
