"""Tests for error construction and formatting."""

import pytest

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
from yamlet.location import Position, Span
from yamlet.tokens import Token, TokenType

SPAN = Span(Position(12, 3, 5), Position(14, 3, 7))


class TestFormatting:
    """Messages read "context, problem at byte N line L column C"."""

    def test_problem_only(self) -> None:
        err = YamletError("something broke")
        assert str(err) == "something broke"
        assert err.line is None
        assert err.column is None
        assert err.offset is None

    def test_with_span(self) -> None:
        err = ScanError("bad thing", SPAN)
        assert str(err) == "bad thing at byte 12 line 3 column 5"
        assert (err.offset, err.line, err.column) == (12, 3, 5)

    def test_with_context(self) -> None:
        err = ScanError("bad thing", SPAN, context="while scanning a scalar")
        assert str(err) == "while scanning a scalar, bad thing at byte 12 line 3 column 5"
        assert err.info == "while scanning a scalar, bad thing"

    def test_with_source_file(self) -> None:
        err = ParseError("oops", SPAN, source_file="a.yaml")
        assert str(err) == "a.yaml: oops at byte 12 line 3 column 5"

    def test_source_file_can_be_attached_later(self) -> None:
        err = ParseError("oops")
        err.source_file = "late.yaml"
        assert str(err) == "late.yaml: oops"


class TestHierarchy:
    """Every error is a YamletError in one of two families."""

    @pytest.mark.parametrize(
        "cls",
        [
            BadIndentation,
            TabIndentationError,
            UnbalancedFlowError,
            InvalidEscapeError,
            InvalidNameError,
            EncodingError,
            UnterminatedScalarError,
        ],
    )
    def test_scan_errors(self, cls: type[YamletError]) -> None:
        assert issubclass(cls, ScanError)
        assert issubclass(cls, YamletError)
        assert not issubclass(cls, ParseError)

    @pytest.mark.parametrize(
        "cls",
        [
            UnexpectedToken,
            UndefinedAliasError,
            DuplicateAnchorError,
            RecursionLimitExceeded,
            MalformedDirective,
            UndefinedTagHandle,
        ],
    )
    def test_parse_errors(self, cls: type[YamletError]) -> None:
        assert issubclass(cls, ParseError)
        assert not issubclass(cls, ScanError)


class TestUnexpectedToken:
    """UnexpectedToken carries what was expected and what was found."""

    def test_fields(self) -> None:
        found = Token(TokenType.FLOW_ENTRY, SPAN)
        err = UnexpectedToken(
            "expected <block end>, but found ','",
            SPAN,
            expected=("<block end>",),
            found=found,
            context="while parsing a block mapping",
        )
        assert err.expected == ("<block end>",)
        assert err.found is found
        assert str(err).startswith("while parsing a block mapping, expected <block end>")
