"""Source positions and spans for tokens, events, and error messages.

Provides Position and Span dataclasses for tracking where in the source
text a token or event came from.

All line and column numbers are 1-indexed. Offsets count bytes of the
source encoding (UTF-8 for text input).

Thread Safety:
Position and Span are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A single point in the source.

    Ordering compares offsets first, so positions taken from the same
    source sort in document order.

    Attributes:
        offset: Byte offset from the start of the source (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Examples:
            >>> pos = Position(offset=4, line=2, column=1)
            >>> str(pos)
            '2:1'

    """

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    @classmethod
    def start(cls) -> Position:
        """Position of the first character of any source."""
        return cls(offset=0, line=1, column=1)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open region of the source between two positions.

    Attributes:
        start: Position of the first character
        end: Position just past the last character

    """

    start: Position
    end: Position

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def is_empty(self) -> bool:
        """True for zero-width spans (synthetic tokens, empty nodes)."""
        return self.start.offset == self.end.offset

    def span_to(self, other: Span) -> Span:
        """Create a new span from this span's start to other's end.

        Args:
            other: Ending span

        Returns:
            New Span covering both
        """
        return Span(self.start, other.end)

    @classmethod
    def at(cls, position: Position) -> Span:
        """Create a zero-width span at position."""
        return cls(position, position)
