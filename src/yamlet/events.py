"""Event and EventType definitions for the Yamlet parser.

The parser produces a stream of Event objects. Start and End events of
the same kind nest as a well-formed tree when laid out linearly.

Events are a closed sum: one Event dataclass whose `type` discriminates
which payload fields are meaningful. Build them through the classmethod
constructors rather than positionally.

Thread Safety:
Event and Tag are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from yamlet.location import Span
from yamlet.tokens import ScalarStyle

# Value of the scalar emitted for an empty node (value-less key, empty entry)
NULL_SCALAR = "~"


class EventType(Enum):
    """Event types produced by the parser."""

    STREAM_START = auto()
    STREAM_END = auto()
    DOCUMENT_START = auto()
    DOCUMENT_END = auto()
    SEQUENCE_START = auto()
    SEQUENCE_END = auto()
    MAPPING_START = auto()
    MAPPING_END = auto()
    SCALAR = auto()
    ALIAS = auto()


class CollectionStyle(Enum):
    """Presentation style of a sequence or mapping."""

    BLOCK = auto()
    FLOW = auto()


START_EVENTS = frozenset(
    {EventType.STREAM_START, EventType.DOCUMENT_START, EventType.SEQUENCE_START, EventType.MAPPING_START}
)
END_EVENTS = frozenset(
    {EventType.STREAM_END, EventType.DOCUMENT_END, EventType.SEQUENCE_END, EventType.MAPPING_END}
)

# Start type -> matching End type
MATCHING_END: dict[EventType, EventType] = {
    EventType.STREAM_START: EventType.STREAM_END,
    EventType.DOCUMENT_START: EventType.DOCUMENT_END,
    EventType.SEQUENCE_START: EventType.SEQUENCE_END,
    EventType.MAPPING_START: EventType.MAPPING_END,
}


@dataclass(frozen=True, slots=True)
class Tag:
    """A node tag with its handle already resolved to a prefix.

    Attributes:
        handle: Resolved prefix (e.g. "tag:yaml.org,2002:" for "!!"),
            "!" for local tags, "" for verbatim tags
        suffix: Remainder of the tag

    Examples:
            >>> str(Tag("tag:yaml.org,2002:", "str"))
            'tag:yaml.org,2002:str'

    """

    handle: str
    suffix: str

    def __str__(self) -> str:
        return self.handle + self.suffix

    @property
    def is_non_specific(self) -> bool:
        """True for the lone "!" tag."""
        return self.handle == "!" and not self.suffix


@dataclass(frozen=True, slots=True)
class Event:
    """A structural event produced by the parser.

    Attributes:
        type: The event type (from EventType enum)
        span: Source region the event covers
        value: Decoded scalar text (SCALAR) or anchor name (ALIAS)
        style: ScalarStyle for SCALAR, CollectionStyle for collection starts
        anchor: Anchor name attached to the node, if any
        tag: Resolved tag attached to the node, if any
        explicit: For DOCUMENT_START, whether "---" was present; for
            DOCUMENT_END, whether "..." was present
        version: Declared %YAML version (DOCUMENT_START only)
        tags: Declared %TAG (handle, prefix) pairs (DOCUMENT_START only)

    """

    type: EventType
    span: Span
    value: str | None = None
    style: ScalarStyle | CollectionStyle | None = None
    anchor: str | None = None
    tag: Tag | None = None
    explicit: bool = False
    version: tuple[int, int] | None = None
    tags: tuple[tuple[str, str], ...] = ()

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        parts = [self.type.name]
        if self.anchor is not None:
            parts.append(f"&{self.anchor}")
        if self.tag is not None:
            parts.append(f"<{self.tag}>")
        if self.value is not None:
            val = self.value
            if len(val) > 20:
                val = val[:17] + "..."
            parts.append(repr(val))
        return f"Event({', '.join(parts)}, {self.span.start})"

    @property
    def is_start(self) -> bool:
        return self.type in START_EVENTS

    @property
    def is_end(self) -> bool:
        return self.type in END_EVENTS

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def stream_start(cls, span: Span) -> Event:
        return cls(EventType.STREAM_START, span)

    @classmethod
    def stream_end(cls, span: Span) -> Event:
        return cls(EventType.STREAM_END, span)

    @classmethod
    def document_start(
        cls,
        span: Span,
        *,
        explicit: bool,
        version: tuple[int, int] | None = None,
        tags: tuple[tuple[str, str], ...] = (),
    ) -> Event:
        return cls(EventType.DOCUMENT_START, span, explicit=explicit, version=version, tags=tags)

    @classmethod
    def document_end(cls, span: Span, *, explicit: bool) -> Event:
        return cls(EventType.DOCUMENT_END, span, explicit=explicit)

    @classmethod
    def sequence_start(
        cls,
        span: Span,
        style: CollectionStyle,
        *,
        anchor: str | None = None,
        tag: Tag | None = None,
    ) -> Event:
        return cls(EventType.SEQUENCE_START, span, style=style, anchor=anchor, tag=tag)

    @classmethod
    def sequence_end(cls, span: Span) -> Event:
        return cls(EventType.SEQUENCE_END, span)

    @classmethod
    def mapping_start(
        cls,
        span: Span,
        style: CollectionStyle,
        *,
        anchor: str | None = None,
        tag: Tag | None = None,
    ) -> Event:
        return cls(EventType.MAPPING_START, span, style=style, anchor=anchor, tag=tag)

    @classmethod
    def mapping_end(cls, span: Span) -> Event:
        return cls(EventType.MAPPING_END, span)

    @classmethod
    def scalar(
        cls,
        span: Span,
        value: str,
        style: ScalarStyle,
        *,
        anchor: str | None = None,
        tag: Tag | None = None,
    ) -> Event:
        return cls(EventType.SCALAR, span, value=value, style=style, anchor=anchor, tag=tag)

    @classmethod
    def empty_scalar(cls, span: Span) -> Event:
        """Null scalar standing in for an empty node."""
        return cls(EventType.SCALAR, span, value=NULL_SCALAR, style=ScalarStyle.PLAIN)

    @classmethod
    def alias(cls, span: Span, name: str) -> Event:
        return cls(EventType.ALIAS, span, value=name)
