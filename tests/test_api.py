"""Tests for the top-level API: parse, scan, load, and receivers."""

import io

import yamlet
from yamlet import (
    EventCollector,
    EventReceiver,
    EventType,
    Parser,
    Scanner,
    TokenType,
    parse,
    scan,
)
from yamlet.events import Event
from yamlet.serialization import format_events


class TestParse:
    """The parse() entry point."""

    def test_returns_parser(self) -> None:
        assert isinstance(parse("a"), Parser)

    def test_max_depth_forwarded(self) -> None:
        assert parse("a", max_depth=7).max_depth == 7

    def test_file_like_input(self) -> None:
        assert format_events(parse(io.StringIO("a: 1\n"))) == format_events(parse("a: 1\n"))

    def test_binary_file_input(self) -> None:
        assert format_events(parse(io.BytesIO(b"a: 1\n"))) == format_events(parse("a: 1\n"))

    def test_crlf_input(self) -> None:
        assert format_events(parse("a: 1\r\nb: 2\r\n")) == format_events(parse("a: 1\nb: 2\n"))


class TestScan:
    """The scan() entry point."""

    def test_returns_scanner(self) -> None:
        tokens = scan("a")
        assert isinstance(tokens, Scanner)
        assert [t.type for t in tokens] == [
            TokenType.STREAM_START,
            TokenType.SCALAR,
            TokenType.STREAM_END,
        ]


class TestLoad:
    """Push-style consumption through Parser.load."""

    def test_collects_everything(self) -> None:
        collector = EventCollector()
        Parser("--- a\n--- b\n").load(collector)
        assert collector.events[0].type is EventType.STREAM_START
        assert collector.events[-1].type is EventType.STREAM_END

    def test_single_document(self) -> None:
        collector = EventCollector()
        parser = Parser("--- a\n--- b\n")
        parser.load(collector, multi=False)
        assert collector.events[-1].type is EventType.DOCUMENT_END
        assert [e.value for e in collector.events if e.type is EventType.SCALAR] == ["a"]
        # The rest of the stream is still available
        remaining = [e.type for e in parser]
        assert remaining[0] is EventType.DOCUMENT_START

    def test_documents_grouping(self) -> None:
        collector = EventCollector()
        Parser("--- a\n--- [b]\n").load(collector)
        documents = collector.documents()
        assert len(documents) == 2
        assert [e.type for e in documents[1]] == [
            EventType.SEQUENCE_START,
            EventType.SCALAR,
            EventType.SEQUENCE_END,
        ]

    def test_custom_receiver(self) -> None:
        class Counter:
            def __init__(self) -> None:
                self.count = 0

            def on_event(self, event: Event) -> None:
                self.count += 1

        counter = Counter()
        assert isinstance(counter, EventReceiver)
        Parser("a: 1").load(counter)
        assert counter.count == 8


class TestPackage:
    """Package metadata and exports."""

    def test_version(self) -> None:
        assert isinstance(yamlet.__version__, str)

    def test_all_exports_exist(self) -> None:
        for name in yamlet.__all__:
            assert hasattr(yamlet, name), name
