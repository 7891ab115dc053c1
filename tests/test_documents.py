"""Tests for streams, documents, directives, anchors, and tags.

Anchors and %TAG handles are scoped to one document; directives apply to
the document that follows them.
"""

import logging

import pytest

from yamlet import EventType, parse
from yamlet.errors import (
    DuplicateAnchorError,
    MalformedDirective,
    UndefinedAliasError,
    UndefinedTagHandle,
    UnexpectedToken,
)
from yamlet.events import Tag
from yamlet.serialization import format_events


def events(source: str | bytes) -> list[str]:
    return format_events(parse(source)).splitlines()


def tags(source: str) -> list[Tag | None]:
    return [e.tag for e in parse(source) if e.type is EventType.SCALAR]


# =========================================================================
# Streams and documents
# =========================================================================


class TestStreams:
    """Streams with no documents."""

    @pytest.mark.parametrize("source", ["", "\ufeff", "# only a comment\n", "\n\n", "...\n"])
    def test_no_documents(self, source: str) -> None:
        assert events(source) == ["+STR", "-STR"]

    def test_bytes_input(self) -> None:
        assert events("a: 1".encode("utf-16")) == events("a: 1")


class TestDocuments:
    """Document boundaries."""

    def test_multiple_explicit(self) -> None:
        assert events("---\na: 1\n---\nb: 2\n") == [
            "+STR",
            "+DOC ---",
            "+MAP",
            "=VAL :a",
            "=VAL :1",
            "-MAP",
            "-DOC",
            "+DOC ---",
            "+MAP",
            "=VAL :b",
            "=VAL :2",
            "-MAP",
            "-DOC",
            "-STR",
        ]

    def test_explicit_end(self) -> None:
        assert events("a\n...\n") == ["+STR", "+DOC", "=VAL :a", "-DOC ...", "-STR"]

    def test_bare_document_after_end_marker(self) -> None:
        assert events("a\n...\nb\n") == [
            "+STR",
            "+DOC",
            "=VAL :a",
            "-DOC ...",
            "+DOC",
            "=VAL :b",
            "-DOC",
            "-STR",
        ]

    def test_empty_explicit_document(self) -> None:
        assert events("---\n") == ["+STR", "+DOC ---", "=VAL :~", "-DOC", "-STR"]

    def test_empty_documents_between_markers(self) -> None:
        assert events("---\n---\n") == [
            "+STR",
            "+DOC ---",
            "=VAL :~",
            "-DOC",
            "+DOC ---",
            "=VAL :~",
            "-DOC",
            "-STR",
        ]

    def test_content_on_marker_line(self) -> None:
        assert events("--- a\n--- b\n") == [
            "+STR",
            "+DOC ---",
            "=VAL :a",
            "-DOC",
            "+DOC ---",
            "=VAL :b",
            "-DOC",
            "-STR",
        ]

    def test_content_after_implicit_end_needs_marker(self) -> None:
        with pytest.raises(UnexpectedToken, match="expected '---'"):
            events("'a' b")

    def test_document_spans(self) -> None:
        stream = list(parse("--- a\n...\n"))
        start, end = stream[1], stream[3]
        assert start.explicit and end.explicit
        assert start.span.start.offset == 0
        assert start.span.end.offset == 3
        assert end.span.start.offset == 6
        assert end.span.end.offset == 9


# =========================================================================
# Directives
# =========================================================================


class TestDirectives:
    """%YAML and %TAG directives."""

    def test_version_reported(self) -> None:
        start = list(parse("%YAML 1.2\n---\na\n"))[1]
        assert start.type is EventType.DOCUMENT_START
        assert start.version == (1, 2)
        assert start.explicit

    def test_version_does_not_carry_over(self) -> None:
        source = "%YAML 1.2\n---\na\n...\n---\nb\n"
        starts = [e for e in parse(source) if e.type is EventType.DOCUMENT_START]
        assert [s.version for s in starts] == [(1, 2), None]

    def test_tag_pairs_reported(self) -> None:
        start = list(parse("%TAG !e! tag:example.com,2000:\n---\na\n"))[1]
        assert start.tags == (("!e!", "tag:example.com,2000:"),)

    def test_directive_requires_marker(self) -> None:
        with pytest.raises(UnexpectedToken, match="expected '---'"):
            events("%YAML 1.2\na\n")

    def test_directive_after_open_document(self) -> None:
        with pytest.raises(UnexpectedToken, match="expected '...'"):
            events("a: 1\n%YAML 1.2\n---\nb\n")

    def test_directive_after_end_marker(self) -> None:
        assert events("a\n...\n%YAML 1.2\n---\nb\n")[-4:] == ["+DOC ---", "=VAL :b", "-DOC", "-STR"]

    def test_duplicate_version(self) -> None:
        with pytest.raises(MalformedDirective, match="duplicate %YAML"):
            events("%YAML 1.2\n%YAML 1.2\n---\n")

    def test_incompatible_major_version(self) -> None:
        with pytest.raises(MalformedDirective, match="incompatible"):
            events("%YAML 2.0\n---\n")

    def test_newer_minor_version_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="yamlet"):
            assert events("%YAML 1.3\n---\na\n")[-3] == "=VAL :a"
        assert "1.3" in caplog.text

    def test_older_minor_version_accepted(self) -> None:
        assert list(parse("%YAML 1.1\n---\na\n"))[1].version == (1, 1)

    def test_duplicate_tag_handle(self) -> None:
        with pytest.raises(MalformedDirective, match="duplicate tag handle"):
            events("%TAG !e! tag:a:\n%TAG !e! tag:b:\n---\n")

    def test_reserved_directive_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="yamlet"):
            assert events("%FOO bar\n---\na\n") == ["+STR", "+DOC ---", "=VAL :a", "-DOC", "-STR"]
        assert "FOO" in caplog.text


# =========================================================================
# Tags
# =========================================================================


class TestTags:
    """Tag handle resolution."""

    def test_secondary_handle(self) -> None:
        assert tags("!!str a") == [Tag("tag:yaml.org,2002:", "str")]

    def test_primary_handle(self) -> None:
        assert tags("!local a") == [Tag("!", "local")]

    def test_non_specific(self) -> None:
        tag = tags("! a")[0]
        assert tag is not None
        assert tag.is_non_specific

    def test_verbatim(self) -> None:
        assert tags("!<tag:example.com,2000:x> a") == [Tag("", "tag:example.com,2000:x")]

    def test_named_handle(self) -> None:
        source = "%TAG !e! tag:example.com,2000:app/\n---\n!e!foo bar\n"
        tag = tags(source)[0]
        assert tag is not None
        assert str(tag) == "tag:example.com,2000:app/foo"

    def test_primary_handle_override(self) -> None:
        assert tags("%TAG ! tag:example.com,2000:\n---\n!foo a\n") == [
            Tag("tag:example.com,2000:", "foo")
        ]

    def test_undefined_handle(self) -> None:
        with pytest.raises(UndefinedTagHandle, match="!e!"):
            events("!e!foo bar")

    def test_handles_scoped_to_document(self) -> None:
        source = "%TAG !e! tag:example.com,2000:\n--- !e!a x\n...\n--- !e!b y\n"
        with pytest.raises(UndefinedTagHandle):
            events(source)

    def test_no_tag(self) -> None:
        assert tags("a") == [None]


# =========================================================================
# Anchors and aliases
# =========================================================================


class TestAnchors:
    """Anchor definition and alias resolution."""

    def test_alias_event(self) -> None:
        assert events("a: &x 1\nb: *x\n")[2:-2] == [
            "+MAP",
            "=VAL :a",
            "=VAL &x :1",
            "=VAL :b",
            "=ALI *x",
            "-MAP",
        ]

    def test_undefined_alias(self) -> None:
        with pytest.raises(UndefinedAliasError, match="'x'"):
            events("*x")

    def test_alias_before_anchor(self) -> None:
        with pytest.raises(UndefinedAliasError):
            events("[*a, &a b]")

    def test_anchor_on_collection(self) -> None:
        assert events("- &list [1]\n- *list\n")[-4] == "=ALI *list"

    def test_anchors_scoped_to_document(self) -> None:
        with pytest.raises(UndefinedAliasError):
            events("&a x\n--- *a\n")

    def test_duplicate_anchor_unused(self) -> None:
        with pytest.raises(DuplicateAnchorError, match="'a'"):
            events("[&a 1, &a 2]")

    def test_rebinding_after_use(self) -> None:
        lines = events("[&a 1, *a, &a 2, *a]")
        assert lines.count("=ALI *a") == 2

    def test_same_anchor_in_separate_documents(self) -> None:
        assert events("&a x\n--- &a y\n").count("-DOC") == 2
