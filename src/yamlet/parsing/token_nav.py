"""Token navigation utilities for the Yamlet parser.

Provides mixin for token stream access and basic grammar checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from yamlet.errors import ParseError, UnexpectedToken
from yamlet.events import Event
from yamlet.location import Position, Span
from yamlet.tokens import TOKEN_DESCRIPTIONS, Token, TokenType

if TYPE_CHECKING:
    from yamlet.scanner import Scanner


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    Required Host Attributes:
        - _scanner: Scanner

    """

    _scanner: Scanner

    def _peek_token(self) -> Token:
        """Return the next token without consuming it."""
        token = self._scanner.peek_token()
        if token is None:
            raise ParseError("unexpected end of the token stream")
        return token

    def _next_token(self) -> Token:
        """Consume and return the next token."""
        token = self._scanner.next_token()
        if token is None:
            raise ParseError("unexpected end of the token stream")
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check whether the next token has one of the given types."""
        return self._peek_token().type in types

    def _unexpected(
        self,
        problem: str,
        expected: tuple[TokenType, ...],
        *,
        context: str | None = None,
        context_mark: Position | None = None,
    ) -> UnexpectedToken:
        """Build an UnexpectedToken error for the next token."""
        token = self._peek_token()
        return UnexpectedToken(
            f"{problem}, but found {token.description}",
            token.span,
            expected=tuple(TOKEN_DESCRIPTIONS[t] for t in expected),
            found=token,
            context=context,
            context_span=Span.at(context_mark) if context_mark is not None else None,
        )

    def _empty_scalar_at(self, position: Position) -> Event:
        return Event.empty_scalar(Span.at(position))
