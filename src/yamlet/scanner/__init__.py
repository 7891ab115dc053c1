"""YAML 1.2 scanner.

Converts characters into a pull-based stream of tokens.

Modules:
- core: Main Scanner class (queue management, token dispatch)
- indentation: Indentation stack and implicit key bookkeeping
- scalars: Plain, quoted, and block scalar scanners
- properties: Anchors, aliases, and tags
- directives: %YAML, %TAG, and reserved directives
- charsets: Character classes and escape tables
"""

from yamlet.scanner.core import Scanner

__all__ = ["Scanner"]
