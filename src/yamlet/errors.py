"""Exception classes for Yamlet.

Two families, both carrying the Span where the malformed construct began:

- ScanError: lexical failures raised by the scanner and the input cursor
- ParseError: grammatical failures raised by the parser

Errors are terminal. Once raised, the scanner or parser that produced the
error re-raises the same instance on every later pull.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yamlet.location import Span
    from yamlet.tokens import Token


class YamletError(Exception):
    """Base exception for all Yamlet errors.

    Subclass this for specific error categories.
    """

    def __init__(
        self,
        problem: str,
        span: Span | None = None,
        *,
        context: str | None = None,
        context_span: Span | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize error with optional location.

        Args:
            problem: Description of what went wrong
            span: Where the problem was found
            context: What was being scanned or parsed (e.g.
                "while parsing a flow mapping")
            context_span: Where the enclosing construct started
            source_file: Path to source file (optional)
        """
        self.problem = problem
        self.span = span
        self.context = context
        self.context_span = context_span
        self.source_file = source_file
        super().__init__(problem)

    def __str__(self) -> str:
        return self._format()

    @property
    def info(self) -> str:
        """Message without location."""
        if self.context:
            return f"{self.context}, {self.problem}"
        return self.problem

    @property
    def line(self) -> int | None:
        return self.span.start.line if self.span else None

    @property
    def column(self) -> int | None:
        return self.span.start.column if self.span else None

    @property
    def offset(self) -> int | None:
        return self.span.start.offset if self.span else None

    def _format(self) -> str:
        message = self.info
        if self.span is not None:
            start = self.span.start
            message += f" at byte {start.offset} line {start.line} column {start.column}"
        if self.source_file:
            message = f"{self.source_file}: {message}"
        return message


# =========================================================================
# Lexical errors
# =========================================================================


class ScanError(YamletError):
    """Error while turning characters into tokens."""


class BadIndentation(ScanError):
    """A line's indentation matches no enclosing block level."""


class TabIndentationError(ScanError):
    """A tab character was used as block indentation."""


class UnbalancedFlowError(ScanError):
    """A flow collection closer does not match the innermost opener."""


class InvalidEscapeError(ScanError):
    """A double-quoted escape is unknown or names an invalid code point."""


class InvalidNameError(ScanError):
    """An anchor, alias, tag, or directive name is empty or malformed."""


class EncodingError(ScanError):
    """The input cannot be decoded, or holds non-printable characters."""


class UnterminatedScalarError(ScanError):
    """A quoted scalar reached the end of its document without closing."""


# =========================================================================
# Grammatical errors
# =========================================================================


class ParseError(YamletError):
    """Error while turning tokens into events."""


class UnexpectedToken(ParseError):
    """The grammar cannot place the next token in the current state."""

    def __init__(
        self,
        problem: str,
        span: Span | None = None,
        *,
        expected: tuple[str, ...] = (),
        found: Token | None = None,
        context: str | None = None,
        context_span: Span | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize with the expected token descriptions and the token found.

        Args:
            problem: Description of what went wrong
            span: Where the unexpected token starts
            expected: Human readable descriptions of acceptable tokens
            found: The token that could not be placed
            context: What was being parsed
            context_span: Where the enclosing construct started
            source_file: Path to source file (optional)
        """
        self.expected = expected
        self.found = found
        super().__init__(
            problem,
            span,
            context=context,
            context_span=context_span,
            source_file=source_file,
        )


class UndefinedAliasError(ParseError):
    """An alias names an anchor not defined earlier in the same document."""


class DuplicateAnchorError(ParseError):
    """An anchor was redefined before any alias referred to it."""


class RecursionLimitExceeded(ParseError):
    """Collection nesting exceeds the configured maximum depth."""


class MalformedDirective(ParseError):
    """A %YAML or %TAG directive is malformed, repeated, or incompatible."""


class UndefinedTagHandle(ParseError):
    """A tag uses a handle that no %TAG directive declared."""
