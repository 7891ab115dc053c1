"""Tests for the scanner's token stream.

Checks token types, payloads, and spans for the structural constructs:
block and flow collections, implicit and explicit keys, document
markers, directives, and node properties.
"""

import logging

import pytest

from yamlet import Scanner, scan
from yamlet.errors import ScanError
from yamlet.location import Position, Span
from yamlet.tokens import ScalarStyle, TokenType

T = TokenType


def token_types(source: str) -> list[TokenType]:
    return [token.type for token in Scanner(source)]


class TestBlockStructure:
    """Synthetic block tokens around indentation changes."""

    def test_simple_mapping(self) -> None:
        assert token_types("a: 1") == [
            T.STREAM_START,
            T.BLOCK_MAPPING_START,
            T.KEY,
            T.SCALAR,
            T.VALUE,
            T.SCALAR,
            T.BLOCK_END,
            T.STREAM_END,
        ]

    def test_block_sequence(self) -> None:
        assert token_types("- a\n- b") == [
            T.STREAM_START,
            T.BLOCK_SEQUENCE_START,
            T.BLOCK_ENTRY,
            T.SCALAR,
            T.BLOCK_ENTRY,
            T.SCALAR,
            T.BLOCK_END,
            T.STREAM_END,
        ]

    def test_nested_mapping_closes_both_levels(self) -> None:
        types = token_types("a:\n  b: 1\nc: 2\n")
        assert types.count(T.BLOCK_MAPPING_START) == 2
        assert types.count(T.BLOCK_END) == 2
        # The inner mapping closes before key c
        inner_end = types.index(T.BLOCK_END)
        assert types[inner_end + 1] == T.KEY

    def test_indentless_sequence_has_no_start(self) -> None:
        types = token_types("a:\n- b\n- c\n")
        assert T.BLOCK_SEQUENCE_START not in types
        assert types.count(T.BLOCK_ENTRY) == 2

    def test_explicit_key(self) -> None:
        assert token_types("? a\n: b") == [
            T.STREAM_START,
            T.BLOCK_MAPPING_START,
            T.KEY,
            T.SCALAR,
            T.VALUE,
            T.SCALAR,
            T.BLOCK_END,
            T.STREAM_END,
        ]

    def test_key_inserted_before_properties(self) -> None:
        assert token_types("&x a: *x") == [
            T.STREAM_START,
            T.BLOCK_MAPPING_START,
            T.KEY,
            T.ANCHOR,
            T.SCALAR,
            T.VALUE,
            T.ALIAS,
            T.BLOCK_END,
            T.STREAM_END,
        ]

    def test_comments_are_skipped(self) -> None:
        assert token_types("# head\na: 1 # trailing\n# tail\n") == token_types("a: 1")


class TestFlowStructure:
    """Flow collection tokens."""

    def test_flow_sequence(self) -> None:
        assert token_types("[a, b]") == [
            T.STREAM_START,
            T.FLOW_SEQUENCE_START,
            T.SCALAR,
            T.FLOW_ENTRY,
            T.SCALAR,
            T.FLOW_SEQUENCE_END,
            T.STREAM_END,
        ]

    def test_flow_mapping(self) -> None:
        assert token_types("{a: 1}") == [
            T.STREAM_START,
            T.FLOW_MAPPING_START,
            T.KEY,
            T.SCALAR,
            T.VALUE,
            T.SCALAR,
            T.FLOW_MAPPING_END,
            T.STREAM_END,
        ]

    def test_json_key_adjacent_value(self) -> None:
        types = token_types('["a":[]]')
        assert types == [
            T.STREAM_START,
            T.FLOW_SEQUENCE_START,
            T.KEY,
            T.SCALAR,
            T.VALUE,
            T.FLOW_SEQUENCE_START,
            T.FLOW_SEQUENCE_END,
            T.FLOW_SEQUENCE_END,
            T.STREAM_END,
        ]

    def test_empty_key_and_value(self) -> None:
        assert token_types("[:]") == [
            T.STREAM_START,
            T.FLOW_SEQUENCE_START,
            T.VALUE,
            T.FLOW_SEQUENCE_END,
            T.STREAM_END,
        ]

    def test_colon_inside_plain_scalar(self) -> None:
        tokens = list(Scanner("[a:b, http://x]"))
        values = [t.value for t in tokens if t.type is T.SCALAR]
        assert values == ["a:b", "http://x"]

    def test_flow_collection_as_block_key(self) -> None:
        types = token_types("[a]: b")
        assert types[:3] == [T.STREAM_START, T.BLOCK_MAPPING_START, T.KEY]


class TestDocumentsAndDirectives:
    """Document markers and directive tokens."""

    def test_document_markers(self) -> None:
        assert token_types("--- a\n...\n") == [
            T.STREAM_START,
            T.DOCUMENT_START,
            T.SCALAR,
            T.DOCUMENT_END,
            T.STREAM_END,
        ]

    def test_marker_needs_blank_after(self) -> None:
        tokens = [t for t in Scanner("---a") if t.type is T.SCALAR]
        assert tokens[0].value == "---a"

    def test_version_directive(self) -> None:
        token = list(Scanner("%YAML 1.2\n---\n"))[1]
        assert token.type is T.VERSION_DIRECTIVE
        assert token.version == (1, 2)
        assert token.value == "1.2"

    def test_tag_directive(self) -> None:
        token = list(Scanner("%TAG !e! tag:example.com,2000:\n---\n"))[1]
        assert token.type is T.TAG_DIRECTIVE
        assert token.handle == "!e!"
        assert token.value == "tag:example.com,2000:"

    def test_reserved_directive_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="yamlet"):
            tokens = list(Scanner("%FOO bar baz\n--- a\n"))
        assert tokens[1].type is T.RESERVED_DIRECTIVE
        assert tokens[1].value == "FOO"
        assert "FOO" in caplog.text

    def test_block_closes_before_document_marker(self) -> None:
        types = token_types("a: 1\n---\nb: 2\n")
        first_end = types.index(T.BLOCK_END)
        assert types[first_end + 1] == T.DOCUMENT_START


class TestProperties:
    """Anchors, aliases, and tags."""

    def test_anchor_and_alias_names(self) -> None:
        tokens = list(Scanner("- &anchor value\n- *anchor\n"))
        anchor = next(t for t in tokens if t.type is T.ANCHOR)
        alias = next(t for t in tokens if t.type is T.ALIAS)
        assert anchor.value == "anchor"
        assert alias.value == "anchor"

    def test_anchor_name_stops_at_flow_indicator(self) -> None:
        tokens = list(Scanner("[&a x, *a]"))
        assert [t.value for t in tokens if t.type is T.ALIAS] == ["a"]

    @pytest.mark.parametrize(
        ("source", "handle", "suffix"),
        [
            ("!local x", "!", "local"),
            ("!!str x", "!!", "str"),
            ("!e!tag x", "!e!", "tag"),
            ("!<tag:yaml.org,2002:str> x", "", "tag:yaml.org,2002:str"),
            ("! x", "!", ""),
            ("!a%21b x", "!", "a!b"),
        ],
    )
    def test_tag_forms(self, source: str, handle: str, suffix: str) -> None:
        tag = next(t for t in Scanner(source) if t.type is T.TAG)
        assert tag.handle == handle
        assert tag.value == suffix


class TestSpans:
    """Token spans use byte offsets and 1-indexed lines and columns."""

    def test_scalar_and_indicator_spans(self) -> None:
        tokens = list(Scanner("a: 1"))
        key = tokens[2]
        assert key.type is T.KEY
        assert key.span == Span.at(Position(0, 1, 1))
        assert tokens[3].span == Span(Position(0, 1, 1), Position(1, 1, 2))
        assert tokens[4].span == Span(Position(1, 1, 2), Position(2, 1, 3))
        assert tokens[5].span == Span(Position(3, 1, 4), Position(4, 1, 5))

    def test_second_line(self) -> None:
        tokens = [t for t in Scanner("a: 1\nb: 2\n") if t.type is T.SCALAR]
        assert tokens[2].span.start == Position(5, 2, 1)

    def test_multibyte_offsets(self) -> None:
        scalar = [t for t in Scanner("é: ü") if t.type is T.SCALAR][1]
        assert scalar.span.start == Position(4, 1, 4)
        assert scalar.span.end == Position(6, 1, 5)


class TestPullInterface:
    """next_token, peek_token, and terminal errors."""

    def test_peek_does_not_consume(self) -> None:
        scanner = Scanner("a")
        assert scanner.peek_token() is scanner.peek_token()
        first = scanner.next_token()
        assert first is not None
        assert first.type is T.STREAM_START

    def test_none_after_stream_end(self) -> None:
        scanner = Scanner("")
        assert [t.type for t in scanner] == [T.STREAM_START, T.STREAM_END]
        assert scanner.next_token() is None
        assert scanner.peek_token() is None

    def test_error_is_terminal(self) -> None:
        scanner = Scanner("a: b: c")
        with pytest.raises(ScanError) as first:
            list(scanner)
        with pytest.raises(ScanError) as second:
            scanner.next_token()
        assert second.value is first.value

    def test_scan_function(self) -> None:
        assert [t.type for t in scan("a")] == [T.STREAM_START, T.SCALAR, T.STREAM_END]

    def test_scalar_style(self) -> None:
        scalar = [t for t in Scanner("'a'") if t.type is T.SCALAR][0]
        assert scalar.style is ScalarStyle.SINGLE_QUOTED
