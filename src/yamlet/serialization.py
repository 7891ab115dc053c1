"""Event serialization: test-suite notation and JSON.

Renders parser events as:

- the one-line notation of the YAML test suite (``+STR``, ``+DOC ---``,
  ``+MAP {} &a``, ``=VAL :text``, ``=ALI *a``, ...), for comparing event
  streams in tests and when debugging
- JSON-compatible dicts, with spans, for tooling

All output is deterministic (sorted keys) so it can be diffed and cached.

Example:
    from yamlet import parse
    from yamlet.serialization import format_events

    print(format_events(parse("a: [1, 2]")))

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from collections.abc import Iterable
from typing import Any

from yamlet.events import CollectionStyle, Event, EventType, Tag
from yamlet.location import Position, Span
from yamlet.tokens import ScalarStyle

# Scalar style -> value indicator in test-suite notation
_STYLE_INDICATORS: dict[ScalarStyle, str] = {
    ScalarStyle.PLAIN: ":",
    ScalarStyle.SINGLE_QUOTED: "'",
    ScalarStyle.DOUBLE_QUOTED: '"',
    ScalarStyle.LITERAL: "|",
    ScalarStyle.FOLDED: ">",
}

_NOTATION_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "\0": "\\0",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


# =========================================================================
# Test-suite notation
# =========================================================================


def format_event(event: Event) -> str:
    """Render one event in YAML test-suite notation.

    Args:
        event: Any parser event.

    Returns:
        One line without trailing newline.

    Example:
        >>> format_event(Event.scalar(span, "a b", ScalarStyle.PLAIN, anchor="x"))
        '=VAL &x :a b'

    """
    kind = event.type
    if kind is EventType.STREAM_START:
        return "+STR"
    if kind is EventType.STREAM_END:
        return "-STR"
    if kind is EventType.DOCUMENT_START:
        return "+DOC ---" if event.explicit else "+DOC"
    if kind is EventType.DOCUMENT_END:
        return "-DOC ..." if event.explicit else "-DOC"
    if kind is EventType.SEQUENCE_END:
        return "-SEQ"
    if kind is EventType.MAPPING_END:
        return "-MAP"
    if kind is EventType.ALIAS:
        return f"=ALI *{event.value}"

    parts: list[str] = []
    if kind is EventType.SEQUENCE_START:
        parts.append("+SEQ")
        if event.style is CollectionStyle.FLOW:
            parts.append("[]")
    elif kind is EventType.MAPPING_START:
        parts.append("+MAP")
        if event.style is CollectionStyle.FLOW:
            parts.append("{}")
    else:
        parts.append("=VAL")

    if event.anchor is not None:
        parts.append(f"&{event.anchor}")
    if event.tag is not None:
        parts.append(f"<{event.tag}>")
    if kind is EventType.SCALAR:
        assert isinstance(event.style, ScalarStyle)
        value = (event.value or "").translate(_NOTATION_ESCAPES)
        parts.append(_STYLE_INDICATORS[event.style] + value)
    return " ".join(parts)


def format_events(events: Iterable[Event]) -> str:
    """Render an event stream, one event per line, with a trailing newline."""
    return "".join(format_event(event) + "\n" for event in events)


# =========================================================================
# JSON
# =========================================================================


def to_dict(event: Event) -> dict[str, Any]:
    """Convert an event to a JSON-compatible dict.

    Only fields that carry information for the event's type are included.

    Args:
        event: Any parser event.

    Returns:
        Dict with ``type``, ``span`` and the event's payload fields.

    """
    result: dict[str, Any] = {
        "type": event.type.name,
        "span": _span_to_dict(event.span),
    }
    if event.value is not None:
        result["value"] = event.value
    if event.style is not None:
        result["style"] = event.style.name
    if event.anchor is not None:
        result["anchor"] = event.anchor
    if event.tag is not None:
        result["tag"] = {"handle": event.tag.handle, "suffix": event.tag.suffix}
    if event.type in (EventType.DOCUMENT_START, EventType.DOCUMENT_END):
        result["explicit"] = event.explicit
    if event.version is not None:
        result["version"] = list(event.version)
    if event.tags:
        result["tags"] = [list(pair) for pair in event.tags]
    return result


def from_dict(data: dict[str, Any]) -> Event:
    """Reconstruct an event from a dict produced by to_dict.

    Raises:
        ValueError: If ``type`` or ``style`` is missing or unknown.

    """
    type_name = data.get("type")
    if type_name not in EventType.__members__:
        msg = f"Unknown event type: {type_name!r}"
        raise ValueError(msg)
    event_type = EventType[type_name]

    style: ScalarStyle | CollectionStyle | None = None
    style_name = data.get("style")
    if style_name is not None:
        style_enum = ScalarStyle if event_type is EventType.SCALAR else CollectionStyle
        if style_name not in style_enum.__members__:
            msg = f"Unknown {style_enum.__name__}: {style_name!r}"
            raise ValueError(msg)
        style = style_enum[style_name]

    tag = data.get("tag")
    version = data.get("version")
    return Event(
        event_type,
        _span_from_dict(data["span"]),
        value=data.get("value"),
        style=style,
        anchor=data.get("anchor"),
        tag=Tag(tag["handle"], tag["suffix"]) if tag is not None else None,
        explicit=data.get("explicit", False),
        version=(version[0], version[1]) if version is not None else None,
        tags=tuple((handle, prefix) for handle, prefix in data.get("tags", ())),
    )


def to_json(events: Iterable[Event], *, indent: int | None = None) -> str:
    """Serialize an event stream to a JSON array.

    Args:
        events: Events, typically a Parser.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps([to_dict(event) for event in events], sort_keys=True, indent=indent)


def from_json(data: str) -> list[Event]:
    """Deserialize events from a JSON string produced by to_json.

    Raises:
        ValueError: If the JSON is not an array of events.

    """
    parsed = json.loads(data)
    if not isinstance(parsed, list):
        msg = f"Expected a JSON array of events, got {type(parsed).__name__}"
        raise ValueError(msg)
    return [from_dict(item) for item in parsed]


def _span_to_dict(span: Span) -> dict[str, Any]:
    return {
        "start": [span.start.offset, span.start.line, span.start.column],
        "end": [span.end.offset, span.end.line, span.end.column],
    }


def _span_from_dict(data: dict[str, Any]) -> Span:
    return Span(Position(*data["start"]), Position(*data["end"]))
