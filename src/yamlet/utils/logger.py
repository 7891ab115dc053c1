"""Logging helpers for Yamlet.

All loggers live under the "yamlet" namespace. The library installs no
handlers; applications opt in with the usual logging configuration:

    >>> import logging
    >>> logging.getLogger("yamlet").setLevel(logging.DEBUG)

Warnings about the input (reserved directives, newer %YAML versions) go
through source_logger so that they name the file being parsed.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

ROOT_LOGGER_NAME = "yamlet"


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under "yamlet.".

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("mymodule").name
        'yamlet.mymodule'
    """
    if not (name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + ".")):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class SourceLoggerAdapter(logging.LoggerAdapter):
    """Prefix messages with the source file they are about."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        assert self.extra is not None
        return f"{self.extra['source_file']}: {msg}", kwargs


def source_logger(
    logger: logging.Logger, source_file: str | None
) -> logging.Logger | SourceLoggerAdapter:
    """Return logger, wrapped to name source_file when one is known."""
    if source_file is None:
        return logger
    return SourceLoggerAdapter(logger, {"source_file": source_file})
