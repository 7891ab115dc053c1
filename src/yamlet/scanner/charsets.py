"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

The cursor hands out "\\0" past the end of input and "\\n" for every
kind of line break, so these sets only need to know those two.

Reference: YAML 1.2.2 specification, chapter 5 (character productions)

Usage:
    from yamlet.scanner.charsets import BLANK_OR_END

    if cursor.peek(1) in BLANK_OR_END:  # O(1) lookup
        ...
"""

from yamlet.input.cursor import EOF_CHAR

# s-white
WHITESPACE: frozenset[str] = frozenset(" \t")

# s-white, b-break, or end of input
BLANK_OR_END: frozenset[str] = frozenset(" \t\n" + EOF_CHAR)

# b-break or end of input
BREAK_OR_END: frozenset[str] = frozenset("\n" + EOF_CHAR)

# c-flow-indicator
FLOW_INDICATORS: frozenset[str] = frozenset(",[]{}")

# Closers that may directly follow ':' or a node property inside flow context
FLOW_TERMINATORS: frozenset[str] = frozenset(",]}")

# c-indicator: characters that cannot start a plain scalar on their own
INDICATORS: frozenset[str] = frozenset("-?:,[]{}#&*!|>'\"%@`")

# Characters '-', '?' and ':' may start a plain scalar when followed by a safe char
PLAIN_LEAD_INDICATORS: frozenset[str] = frozenset("-?:")

# ns-word-char
WORD_CHARS: frozenset[str] = frozenset(
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-"
)

# ns-uri-char without the '%' escape introducer
URI_CHARS: frozenset[str] = WORD_CHARS | frozenset("#;/?:@&=+$,_.!~*'()[]")

# ns-tag-char: a URI char that is neither '!' nor a flow indicator
TAG_CHARS: frozenset[str] = URI_CHARS - frozenset("!") - FLOW_INDICATORS

DIGITS: frozenset[str] = frozenset("0123456789")

HEX_DIGITS: frozenset[str] = frozenset("0123456789ABCDEFabcdef")

# Double-quoted escapes that stand for a fixed character
ESCAPE_REPLACEMENTS: dict[str, str] = {
    "0": "\0",
    "a": "\x07",
    "b": "\x08",
    "t": "\t",
    "\t": "\t",
    "n": "\n",
    "v": "\x0b",
    "f": "\x0c",
    "r": "\r",
    "e": "\x1b",
    " ": " ",
    '"': '"',
    "/": "/",
    "\\": "\\",
    "N": "\x85",
    "_": "\xa0",
    "L": "\u2028",
    "P": "\u2029",
}

# Double-quoted escapes followed by a fixed number of hex digits
ESCAPE_CODES: dict[str, int] = {
    "x": 2,
    "u": 4,
    "U": 8,
}

# Characters an implicit key may span
MAX_SIMPLE_KEY_LENGTH = 1024
