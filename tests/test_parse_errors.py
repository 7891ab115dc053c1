"""Grammatical errors and the nesting depth limit.

Tests that malformed token sequences raise the specific ParseError
subclass, that UnexpectedToken reports what it expected and what it found,
and that deep nesting fails cleanly instead of exhausting the stack.
"""

import pytest

from yamlet import Parser, ParseConfig, parse, parse_config_context
from yamlet.errors import (
    BadIndentation,
    ParseError,
    RecursionLimitExceeded,
    ScanError,
    UnexpectedToken,
    YamletError,
)
from yamlet.tokens import TokenType


def drain(source: str, max_depth: int | None = None) -> None:
    list(Parser(source, max_depth=max_depth))


class TestUnexpectedToken:
    """Tokens the grammar cannot place."""

    def test_missing_flow_mapping_separator(self) -> None:
        with pytest.raises(UnexpectedToken) as exc_info:
            drain("{a: 1 [b]}")
        err = exc_info.value
        assert err.expected == ("','", "'}'")
        assert err.found is not None
        assert err.found.type is TokenType.FLOW_SEQUENCE_START
        assert err.context == "while parsing a flow mapping"
        assert err.context_span is not None
        assert err.context_span.start.offset == 0

    def test_missing_flow_sequence_separator(self) -> None:
        with pytest.raises(UnexpectedToken, match="expected ',' or ']'") as exc_info:
            drain("[a [b]]")
        assert exc_info.value.expected == ("','", "']'")

    def test_key_inside_block_sequence(self) -> None:
        with pytest.raises(UnexpectedToken) as exc_info:
            drain("- a\nb: c")
        err = exc_info.value
        assert err.found is not None
        assert err.found.type is TokenType.KEY
        assert err.line == 2

    def test_block_entry_inside_flow(self) -> None:
        with pytest.raises(UnexpectedToken, match="node content"):
            drain("[- a]")

    def test_message_names_found_token(self) -> None:
        with pytest.raises(UnexpectedToken) as exc_info:
            drain("[a [b]]")
        assert "but found '['" in str(exc_info.value)

    def test_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            drain("[a [b]]")


class TestBadIndentationInGrammar:
    """Sequence entries at the indentation of a mapping key."""

    def test_sequence_entry_at_key_column(self) -> None:
        with pytest.raises(BadIndentation, match="sequence entry"):
            drain("a: 1\n- b\n")

    def test_is_scan_error(self) -> None:
        with pytest.raises(ScanError):
            drain("a: 1\n- b\n")


class TestDepthLimit:
    """Configurable maximum nesting depth."""

    def test_deep_flow_nesting(self) -> None:
        with pytest.raises(RecursionLimitExceeded) as exc_info:
            drain("[" * 10_000, max_depth=100)
        assert exc_info.value.column == 101

    def test_deep_block_nesting(self) -> None:
        source = "".join(" " * (2 * level) + "k:\n" for level in range(50))
        with pytest.raises(RecursionLimitExceeded):
            drain(source, max_depth=20)

    def test_at_limit_is_allowed(self) -> None:
        depth = 5
        drain("[" * depth + "]" * depth, max_depth=depth)

    def test_one_past_limit(self) -> None:
        depth = 5
        with pytest.raises(RecursionLimitExceeded):
            drain("[" * (depth + 1) + "]" * (depth + 1), max_depth=depth)

    def test_default_from_config(self) -> None:
        with parse_config_context(ParseConfig(max_depth=3)):
            parser = Parser("[[[[a]]]]")
        assert parser.max_depth == 3
        with pytest.raises(RecursionLimitExceeded):
            list(parser)

    def test_default_limit_handles_hostile_input(self) -> None:
        with pytest.raises(YamletError):
            list(parse("[" * 100_000))

    def test_depth_released_when_collections_close(self) -> None:
        # Many shallow collections never accumulate depth
        drain("- [a]\n" * 500, max_depth=2)


class TestErrorPositions:
    """Errors carry the source file and the offending position."""

    def test_source_file_in_message(self) -> None:
        with pytest.raises(YamletError) as exc_info:
            list(parse("*x", source_file="doc.yaml"))
        assert exc_info.value.source_file == "doc.yaml"
        assert str(exc_info.value).startswith("doc.yaml: while parsing a node, found undefined alias")

    def test_position_in_message(self) -> None:
        with pytest.raises(YamletError) as exc_info:
            list(parse("a: 1\nb: *x\n"))
        assert str(exc_info.value).endswith("at byte 8 line 2 column 4")
