"""Parsing mixins for the Yamlet parser.

Each mixin handles the states of one part of the YAML grammar:

- TokenNavigationMixin: Token stream access and error construction
- DocumentParsingMixin: Stream, documents, and directives
- NodeParsingMixin: Node properties, aliases, scalars, collection starts
- BlockParsingMixin: Block sequences and mappings
- FlowParsingMixin: Flow sequences and mappings
"""

from yamlet.parsing.block import BlockParsingMixin
from yamlet.parsing.document import DEFAULT_TAG_HANDLES, DocumentParsingMixin
from yamlet.parsing.flow import FlowParsingMixin
from yamlet.parsing.node import NodeParsingMixin
from yamlet.parsing.states import ParserState
from yamlet.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "BlockParsingMixin",
    "DEFAULT_TAG_HANDLES",
    "DocumentParsingMixin",
    "FlowParsingMixin",
    "NodeParsingMixin",
    "ParserState",
    "TokenNavigationMixin",
]
