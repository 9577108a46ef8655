"""Logger sinks accepted by the interceptor."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

DEFAULT_LOGGER_NAME = "httpx_logger"


class Logger(Protocol):
    """Anything with variadic ``info`` and ``error`` methods."""

    def info(self, *values: Any) -> None:  # pragma: no cover - interface
        ...

    def error(self, *values: Any) -> None:  # pragma: no cover - interface
        ...


class LoggingSink:
    """Adapt a stdlib :class:`logging.Logger` to the :class:`Logger` protocol.

    ``logging.Logger.info`` treats its first argument as a format string, so
    the values are joined through ``%s`` placeholders and formatting stays
    lazy.
    """

    def __init__(
        self, logger: Optional[logging.Logger] = None, *, separator: str = " "
    ) -> None:
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.separator = separator

    def _pattern(self, count: int) -> str:
        return self.separator.join(["%s"] * count)

    def info(self, *values: Any) -> None:
        self.logger.info(self._pattern(len(values)), *values)

    def error(self, *values: Any) -> None:
        self.logger.error(self._pattern(len(values)), *values)
