"""Token and TokenType definitions for the Yamlet scanner.

The scanner produces a stream of Token objects that the parser consumes.
Each Token has a type, an optional payload, and a source span.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto

from yamlet.location import Span


class ScalarStyle(Enum):
    """Presentation style of a scalar in the source."""

    PLAIN = auto()
    SINGLE_QUOTED = auto()  # 'text'
    DOUBLE_QUOTED = auto()  # "text"
    LITERAL = auto()  # |
    FOLDED = auto()  # >


class TokenType(Enum):
    """Token types produced by the scanner.

    Organized by category for clarity:
    - Stream and document structure
    - Block collection structure (synthetic starts/ends, indicators)
    - Flow collection structure
    - Node properties and content

    """

    # Stream structure
    STREAM_START = auto()
    STREAM_END = auto()

    # Directives
    VERSION_DIRECTIVE = auto()  # %YAML 1.2
    TAG_DIRECTIVE = auto()  # %TAG !e! tag:example.com,2000:
    RESERVED_DIRECTIVE = auto()  # %FOO anything

    # Document markers
    DOCUMENT_START = auto()  # ---
    DOCUMENT_END = auto()  # ...

    # Block structure
    BLOCK_SEQUENCE_START = auto()  # synthetic, on indentation increase
    BLOCK_MAPPING_START = auto()  # synthetic, on indentation increase
    BLOCK_END = auto()  # synthetic, on indentation decrease
    BLOCK_ENTRY = auto()  # -

    # Flow structure
    FLOW_SEQUENCE_START = auto()  # [
    FLOW_SEQUENCE_END = auto()  # ]
    FLOW_MAPPING_START = auto()  # {
    FLOW_MAPPING_END = auto()  # }
    FLOW_ENTRY = auto()  # ,

    # Mapping indicators
    KEY = auto()  # ? or synthetic before an implicit key
    VALUE = auto()  # :

    # Node properties and content
    ANCHOR = auto()  # &name
    ALIAS = auto()  # *name
    TAG = auto()  # !suffix, !!suffix, !handle!suffix, !<verbatim>
    SCALAR = auto()


# Human readable names used in error messages
TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.STREAM_START: "<stream start>",
    TokenType.STREAM_END: "<stream end>",
    TokenType.VERSION_DIRECTIVE: "<%YAML directive>",
    TokenType.TAG_DIRECTIVE: "<%TAG directive>",
    TokenType.RESERVED_DIRECTIVE: "<directive>",
    TokenType.DOCUMENT_START: "'---'",
    TokenType.DOCUMENT_END: "'...'",
    TokenType.BLOCK_SEQUENCE_START: "<block sequence start>",
    TokenType.BLOCK_MAPPING_START: "<block mapping start>",
    TokenType.BLOCK_END: "<block end>",
    TokenType.BLOCK_ENTRY: "'-'",
    TokenType.FLOW_SEQUENCE_START: "'['",
    TokenType.FLOW_SEQUENCE_END: "']'",
    TokenType.FLOW_MAPPING_START: "'{'",
    TokenType.FLOW_MAPPING_END: "'}'",
    TokenType.FLOW_ENTRY: "','",
    TokenType.KEY: "<key>",
    TokenType.VALUE: "':'",
    TokenType.ANCHOR: "<anchor>",
    TokenType.ALIAS: "<alias>",
    TokenType.TAG: "<tag>",
    TokenType.SCALAR: "<scalar>",
}


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the scanner.

    Tokens are the atomic units passed from scanner to parser.

    Attributes:
        type: The token type (from TokenType enum)
        span: Source region the token covers (zero-width for synthetic tokens)
        value: Payload text. Decoded text for SCALAR, the name for ANCHOR and
            ALIAS, the suffix for TAG, the prefix for TAG_DIRECTIVE, the
            directive name for RESERVED_DIRECTIVE
        style: Scalar style (SCALAR only)
        handle: Tag handle (TAG and TAG_DIRECTIVE only)
        version: (major, minor) (VERSION_DIRECTIVE only)

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    type: TokenType
    span: Span
    value: str = ""
    style: ScalarStyle | None = None
    handle: str | None = None
    version: tuple[int, int] | None = None

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.span.start})"

    @property
    def description(self) -> str:
        """Human readable token name for error messages."""
        return TOKEN_DESCRIPTIONS[self.type]
