"""Directive scanner mixin.

Directives start with '%' in column 0 and occupy the rest of the line:

    %YAML 1.2
    %TAG !e! tag:example.com,2000:
    %FOO reserved directives are skipped with a warning
"""

from __future__ import annotations

from yamlet.errors import InvalidNameError, MalformedDirective
from yamlet.input.cursor import Cursor
from yamlet.location import Position, Span
from yamlet.scanner.charsets import BLANK_OR_END, BREAK_OR_END, DIGITS, URI_CHARS, WHITESPACE
from yamlet.tokens import Token, TokenType
from yamlet.utils.logger import get_logger, source_logger

logger = get_logger(__name__)


class DirectiveMixin:
    """Mixin providing %YAML, %TAG, and reserved directive scanning."""

    _cursor: Cursor
    _source_file: str | None

    def _scan_tag_handle(self, start: Position, *, context: str) -> str:
        """Scan a tag handle. Implemented by PropertiesMixin."""
        raise NotImplementedError

    def _scan_tag_uri(self, allowed: frozenset[str], start: Position, *, context: str) -> str:
        """Scan a URI. Implemented by PropertiesMixin."""
        raise NotImplementedError

    def _scan_directive(self) -> Token:
        cursor = self._cursor
        start = cursor.position
        cursor.advance()
        name = self._scan_directive_name(start)

        if name == "YAML":
            version = self._scan_yaml_directive_value(start)
            token = Token(
                TokenType.VERSION_DIRECTIVE,
                Span(start, cursor.position),
                f"{version[0]}.{version[1]}",
                version=version,
            )
        elif name == "TAG":
            handle, prefix = self._scan_tag_directive_value(start)
            token = Token(
                TokenType.TAG_DIRECTIVE,
                Span(start, cursor.position),
                prefix,
                handle=handle,
            )
        else:
            while cursor.peek() not in BREAK_OR_END:
                cursor.advance()
            source_logger(logger, self._source_file).warning(
                "Ignoring reserved directive %%%s at %s", name, start
            )
            token = Token(TokenType.RESERVED_DIRECTIVE, Span(start, cursor.position), name)

        self._scan_directive_ignored_line(start)
        return token

    def _scan_directive_name(self, start: Position) -> str:
        cursor = self._cursor
        length = 0
        while cursor.peek(length) not in BLANK_OR_END:
            length += 1
        if not length:
            raise InvalidNameError(
                f"expected directive name, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        name = cursor.prefix(length)
        cursor.advance(length)
        return name

    def _scan_yaml_directive_value(self, start: Position) -> tuple[int, int]:
        cursor = self._cursor
        self._skip_directive_separator(start)
        major = self._scan_version_number(start)
        if cursor.peek() != ".":
            raise MalformedDirective(
                f"expected '.' in %YAML version, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        cursor.advance()
        minor = self._scan_version_number(start)
        if cursor.peek() not in BLANK_OR_END:
            raise MalformedDirective(
                f"expected a digit or ' ', but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        return major, minor

    def _scan_version_number(self, start: Position) -> int:
        cursor = self._cursor
        length = 0
        while cursor.peek(length) in DIGITS:
            length += 1
        if not length:
            raise MalformedDirective(
                f"expected a digit, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        value = int(cursor.prefix(length))
        cursor.advance(length)
        return value

    def _scan_tag_directive_value(self, start: Position) -> tuple[str, str]:
        cursor = self._cursor
        self._skip_directive_separator(start)
        handle = self._scan_tag_handle(start, context="while scanning a directive")
        self._skip_directive_separator(start)
        prefix = self._scan_tag_uri(URI_CHARS, start, context="while scanning a directive")
        if not prefix:
            raise MalformedDirective(
                f"expected a tag prefix, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        if cursor.peek() not in BLANK_OR_END:
            raise MalformedDirective(
                f"expected ' ', but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        return handle, prefix

    def _skip_directive_separator(self, start: Position) -> None:
        cursor = self._cursor
        if cursor.peek() not in WHITESPACE:
            raise MalformedDirective(
                f"expected ' ', but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
        while cursor.peek() in WHITESPACE:
            cursor.advance()

    def _scan_directive_ignored_line(self, start: Position) -> None:
        cursor = self._cursor
        while cursor.peek() in WHITESPACE:
            cursor.advance()
        if cursor.peek() == "#":
            while cursor.peek() not in BREAK_OR_END:
                cursor.advance()
        if cursor.peek() not in BREAK_OR_END:
            raise MalformedDirective(
                f"expected a comment or a line break, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context="while scanning a directive",
                context_span=Span.at(start),
            )
