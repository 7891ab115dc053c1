"""Utility modules for Yamlet.

Provides:
- logger: get_logger and source_logger for logging
"""

from yamlet.utils.logger import get_logger, source_logger

__all__ = [
    "get_logger",
    "source_logger",
]
