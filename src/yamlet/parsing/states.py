"""Parser states.

The parser is an explicit state machine: each state is handled by one
method that consumes tokens and returns exactly one event. States that
must resume after a nested node are pushed onto a stack.
"""

from enum import Enum, auto


class ParserState(Enum):
    """States of the event parser."""

    # Stream and documents
    STREAM_START = auto()
    IMPLICIT_DOCUMENT_START = auto()
    DOCUMENT_START = auto()
    DOCUMENT_CONTENT = auto()
    DOCUMENT_END = auto()

    # Nodes
    BLOCK_NODE = auto()

    # Block collections
    BLOCK_SEQUENCE_FIRST_ENTRY = auto()
    BLOCK_SEQUENCE_ENTRY = auto()
    INDENTLESS_SEQUENCE_ENTRY = auto()  # "key:\n- item" at the key's column
    BLOCK_MAPPING_FIRST_KEY = auto()
    BLOCK_MAPPING_KEY = auto()
    BLOCK_MAPPING_VALUE = auto()

    # Flow collections
    FLOW_SEQUENCE_FIRST_ENTRY = auto()
    FLOW_SEQUENCE_ENTRY = auto()
    FLOW_SEQUENCE_ENTRY_MAPPING_KEY = auto()  # [a: b] single-pair mapping
    FLOW_SEQUENCE_ENTRY_MAPPING_VALUE = auto()
    FLOW_SEQUENCE_ENTRY_MAPPING_END = auto()
    FLOW_MAPPING_FIRST_KEY = auto()
    FLOW_MAPPING_KEY = auto()
    FLOW_MAPPING_VALUE = auto()
    FLOW_MAPPING_EMPTY_VALUE = auto()  # {a, b} keys without ':'

    # Stream end was emitted
    END = auto()
