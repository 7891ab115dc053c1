"""Node property scanner mixin: anchors, aliases, and tags.

Tag forms:
    !<tag:yaml.org,2002:str>   verbatim (handle "")
    !                          non-specific (handle "!", empty suffix)
    !local                     primary handle "!"
    !!str                      secondary handle "!!"
    !e!suffix                  named handle "!e!"

Suffixes may contain %XX escapes, decoded as UTF-8.
"""

from __future__ import annotations

from yamlet.errors import InvalidNameError
from yamlet.input.cursor import Cursor
from yamlet.location import Position, Span
from yamlet.scanner.charsets import (
    BLANK_OR_END,
    FLOW_INDICATORS,
    FLOW_TERMINATORS,
    HEX_DIGITS,
    TAG_CHARS,
    URI_CHARS,
    WORD_CHARS,
)
from yamlet.tokens import Token, TokenType


class PropertiesMixin:
    """Mixin providing anchor, alias, and tag scanning."""

    _cursor: Cursor

    @property
    def _flow_level(self) -> int:
        raise NotImplementedError

    # =========================================================================
    # Anchors and aliases
    # =========================================================================

    def _scan_anchor(self, token_type: TokenType) -> Token:
        """Scan "&name" (ANCHOR) or "*name" (ALIAS)."""
        cursor = self._cursor
        start = cursor.position
        kind = "alias" if token_type is TokenType.ALIAS else "anchor"
        cursor.advance()

        length = 0
        while True:
            ch = cursor.peek(length)
            if ch in BLANK_OR_END or ch in FLOW_INDICATORS:
                break
            length += 1
        if not length:
            raise InvalidNameError(
                f"expected {kind} name, but found {cursor.peek()!r}",
                Span.at(cursor.position),
                context=f"while scanning an {kind}",
                context_span=Span.at(start),
            )
        name = cursor.prefix(length)
        cursor.advance(length)

        ch = cursor.peek()
        if ch in "[{":
            raise InvalidNameError(
                f"expected blank after {kind} name, but found {ch!r}",
                Span.at(cursor.position),
                context=f"while scanning an {kind}",
                context_span=Span.at(start),
            )
        return Token(token_type, Span(start, cursor.position), name)

    # =========================================================================
    # Tags
    # =========================================================================

    def _scan_tag(self) -> Token:
        cursor = self._cursor
        start = cursor.position
        following = cursor.peek(1)

        if following == "<":
            handle = ""
            cursor.advance(2)
            suffix = self._scan_tag_uri(URI_CHARS, start, context="while parsing a tag")
            if cursor.peek() != ">":
                raise InvalidNameError(
                    f"expected '>', but found {cursor.peek()!r}",
                    Span.at(cursor.position),
                    context="while parsing a tag",
                    context_span=Span.at(start),
                )
            if not suffix:
                raise InvalidNameError(
                    "verbatim tag is empty",
                    Span.at(cursor.position),
                    context="while parsing a tag",
                    context_span=Span.at(start),
                )
            cursor.advance()
        elif following in BLANK_OR_END or (self._flow_level and following in FLOW_TERMINATORS):
            handle = "!"
            suffix = ""
            cursor.advance()
        else:
            length = 1
            use_handle = False
            while True:
                ch = cursor.peek(length)
                if ch in BLANK_OR_END or ch in FLOW_INDICATORS:
                    break
                if ch == "!":
                    use_handle = True
                    break
                length += 1
            if use_handle:
                handle = self._scan_tag_handle(start, context="while scanning a tag")
            else:
                handle = "!"
                cursor.advance()
            suffix = self._scan_tag_uri(TAG_CHARS, start, context="while scanning a tag")
            if not suffix:
                raise InvalidNameError(
                    f"expected tag suffix, but found {cursor.peek()!r}",
                    Span.at(cursor.position),
                    context="while scanning a tag",
                    context_span=Span.at(start),
                )

        ch = cursor.peek()
        if ch not in BLANK_OR_END and not (self._flow_level and ch in FLOW_TERMINATORS):
            raise InvalidNameError(
                f"expected ' ', but found {ch!r}",
                Span.at(cursor.position),
                context="while scanning a tag",
                context_span=Span.at(start),
            )
        return Token(TokenType.TAG, Span(start, cursor.position), suffix, handle=handle)

    def _scan_tag_handle(self, start: Position, *, context: str) -> str:
        """Scan "!", "!!", or "!word!"."""
        cursor = self._cursor
        ch = cursor.peek()
        if ch != "!":
            raise InvalidNameError(
                f"expected '!', but found {ch!r}",
                Span.at(cursor.position),
                context=context,
                context_span=Span.at(start),
            )
        length = 1
        if cursor.peek(length) not in BLANK_OR_END:
            while cursor.peek(length) in WORD_CHARS:
                length += 1
            if cursor.peek(length) != "!":
                cursor.advance(length)
                raise InvalidNameError(
                    f"expected '!', but found {cursor.peek()!r}",
                    Span.at(cursor.position),
                    context=context,
                    context_span=Span.at(start),
                )
            length += 1
        handle = cursor.prefix(length)
        cursor.advance(length)
        return handle

    def _scan_tag_uri(self, allowed: frozenset[str], start: Position, *, context: str) -> str:
        cursor = self._cursor
        chunks: list[str] = []
        length = 0
        while True:
            ch = cursor.peek(length)
            if ch == "%":
                chunks.append(cursor.prefix(length))
                cursor.advance(length)
                length = 0
                chunks.append(self._scan_uri_escapes(start, context=context))
            elif ch in allowed:
                length += 1
            else:
                break
        if length:
            chunks.append(cursor.prefix(length))
            cursor.advance(length)
        return "".join(chunks)

    def _scan_uri_escapes(self, start: Position, *, context: str) -> str:
        """Decode a run of %XX escapes as UTF-8."""
        cursor = self._cursor
        mark = cursor.position
        codes = bytearray()
        while cursor.peek() == "%":
            cursor.advance()
            digits = cursor.prefix(2)
            if len(digits) < 2 or any(d not in HEX_DIGITS for d in digits):
                raise InvalidNameError(
                    f"expected URI escape sequence of 2 hexadecimal numbers, but found {digits!r}",
                    Span.at(cursor.position),
                    context=context,
                    context_span=Span.at(start),
                )
            codes.append(int(digits, 16))
            cursor.advance(2)
        try:
            return codes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidNameError(
                f"URI escape does not decode as UTF-8 ({exc.reason})",
                Span(mark, cursor.position),
                context=context,
                context_span=Span.at(start),
            ) from exc
