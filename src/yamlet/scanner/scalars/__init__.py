"""Scalar scanners for the Yamlet scanner.

Each scanner is a mixin that handles one family of scalar styles.
"""

from __future__ import annotations

from yamlet.scanner.scalars.block import BlockScalarMixin
from yamlet.scanner.scalars.plain import PlainScalarMixin
from yamlet.scanner.scalars.quoted import QuotedScalarMixin

__all__ = [
    "BlockScalarMixin",
    "PlainScalarMixin",
    "QuotedScalarMixin",
]
