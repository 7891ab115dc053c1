"""Tests for event serialization: test-suite notation and JSON."""

import json

import pytest

from yamlet import parse
from yamlet.events import CollectionStyle, Event, EventType, Tag
from yamlet.location import Position, Span
from yamlet.serialization import (
    format_event,
    format_events,
    from_dict,
    from_json,
    to_dict,
    to_json,
)
from yamlet.tokens import ScalarStyle

SPAN = Span(Position(0, 1, 1), Position(3, 1, 4))


class TestNotation:
    """One-line test-suite notation."""

    def test_scalar_with_properties(self) -> None:
        event = Event.scalar(
            SPAN, "a b", ScalarStyle.PLAIN, anchor="x", tag=Tag("tag:yaml.org,2002:", "str")
        )
        assert format_event(event) == "=VAL &x <tag:yaml.org,2002:str> :a b"

    @pytest.mark.parametrize(
        ("style", "indicator"),
        [
            (ScalarStyle.PLAIN, ":"),
            (ScalarStyle.SINGLE_QUOTED, "'"),
            (ScalarStyle.DOUBLE_QUOTED, '"'),
            (ScalarStyle.LITERAL, "|"),
            (ScalarStyle.FOLDED, ">"),
        ],
    )
    def test_style_indicators(self, style: ScalarStyle, indicator: str) -> None:
        assert format_event(Event.scalar(SPAN, "v", style)) == f"=VAL {indicator}v"

    def test_escapes(self) -> None:
        event = Event.scalar(SPAN, "a\\b\n\t\r\0\b", ScalarStyle.DOUBLE_QUOTED)
        assert format_event(event) == '=VAL "a\\\\b\\n\\t\\r\\0\\b'

    def test_collections(self) -> None:
        assert format_event(Event.sequence_start(SPAN, CollectionStyle.BLOCK)) == "+SEQ"
        assert format_event(Event.sequence_start(SPAN, CollectionStyle.FLOW)) == "+SEQ []"
        assert format_event(Event.mapping_start(SPAN, CollectionStyle.FLOW, anchor="m")) == "+MAP {} &m"
        assert format_event(Event.sequence_end(SPAN)) == "-SEQ"
        assert format_event(Event.mapping_end(SPAN)) == "-MAP"

    def test_documents(self) -> None:
        assert format_event(Event.document_start(SPAN, explicit=True)) == "+DOC ---"
        assert format_event(Event.document_start(SPAN, explicit=False)) == "+DOC"
        assert format_event(Event.document_end(SPAN, explicit=True)) == "-DOC ..."
        assert format_event(Event.document_end(SPAN, explicit=False)) == "-DOC"

    def test_alias(self) -> None:
        assert format_event(Event.alias(SPAN, "anchor")) == "=ALI *anchor"

    def test_format_events_has_trailing_newline(self) -> None:
        assert format_events(parse("a")) == "+STR\n+DOC\n=VAL :a\n-DOC\n-STR\n"


class TestDict:
    """Event dicts."""

    def test_scalar_fields(self) -> None:
        event = Event.scalar(SPAN, "x", ScalarStyle.SINGLE_QUOTED, anchor="a")
        assert to_dict(event) == {
            "type": "SCALAR",
            "span": {"start": [0, 1, 1], "end": [3, 1, 4]},
            "value": "x",
            "style": "SINGLE_QUOTED",
            "anchor": "a",
        }

    def test_document_start_fields(self) -> None:
        event = Event.document_start(SPAN, explicit=True, version=(1, 2), tags=(("!e!", "tag:e:"),))
        data = to_dict(event)
        assert data["explicit"] is True
        assert data["version"] == [1, 2]
        assert data["tags"] == [["!e!", "tag:e:"]]

    def test_from_dict_restores_event(self) -> None:
        event = Event.mapping_start(SPAN, CollectionStyle.FLOW, tag=Tag("!", "thing"))
        assert from_dict(to_dict(event)) == event

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown event type"):
            from_dict({"type": "NOPE", "span": {"start": [0, 1, 1], "end": [0, 1, 1]}})

    def test_unknown_style(self) -> None:
        with pytest.raises(ValueError, match="ScalarStyle"):
            from_dict(
                {
                    "type": "SCALAR",
                    "span": {"start": [0, 1, 1], "end": [0, 1, 1]},
                    "style": "SHOUTING",
                }
            )


class TestJson:
    """JSON arrays of events."""

    def test_parsed_stream(self) -> None:
        source = "%YAML 1.2\n--- &a !!map\nk: [*a, 'v']\n...\n"
        events = list(parse(source))
        assert from_json(to_json(events)) == events

    def test_deterministic(self) -> None:
        events = list(parse("a: {b: c}"))
        assert to_json(events) == to_json(events)
        assert json.loads(to_json(events, indent=2))[0]["type"] == "STREAM_START"

    def test_rejects_non_array(self) -> None:
        with pytest.raises(ValueError, match="JSON array"):
            from_json('{"type": "SCALAR"}')

    def test_event_types_survive(self) -> None:
        events = from_json(to_json(parse("- a")))
        assert [e.type for e in events][:3] == [
            EventType.STREAM_START,
            EventType.DOCUMENT_START,
            EventType.SEQUENCE_START,
        ]
