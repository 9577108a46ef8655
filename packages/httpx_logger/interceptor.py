"""Timing and outcome capture shared by every integration.

Both the transport wrappers and the facade clients funnel each call through
:class:`RequestInterceptor`. The interceptor only observes: the response or
exception produced by the real call always reaches the caller untouched.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterator, Optional, TypeVar

from .formatting import Formatter, format_default
from .record import RequestData
from .sinks import Logger, LoggingSink

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggerOptions:
    """Sink and formatter used for every call of one integration."""

    logger: Logger = field(default_factory=LoggingSink)
    format: Formatter = format_default

    @classmethod
    def build(
        cls, *, logger: Optional[Logger] = None, format: Optional[Formatter] = None
    ) -> "LoggerOptions":
        kwargs: dict[str, Any] = {}
        if logger is not None:
            kwargs["logger"] = logger
        if format is not None:
            kwargs["format"] = format
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Interceptor core
# ---------------------------------------------------------------------------


class RequestInterceptor:
    """Wrap real calls, time them and report each one exactly once."""

    def __init__(
        self,
        options: Optional[LoggerOptions] = None,
        *,
        logger: Optional[Logger] = None,
        format: Optional[Formatter] = None,
    ) -> None:
        if options is None:
            options = LoggerOptions.build(logger=logger, format=format)
        elif logger is not None or format is not None:
            raise TypeError("pass either options or logger/format, not both")
        self.options = options

    @property
    def logger(self) -> Logger:
        return self.options.logger

    @property
    def format(self) -> Formatter:
        return self.options.format

    @contextmanager
    def capture(
        self,
        method: str,
        url: str,
        data: Any = None,
        config: Any = None,
        *,
        defer: bool = False,
    ) -> Iterator[RequestData]:
        """Yield a record for the real call performed inside the block.

        The block stores its result on ``record.response``. Anything raised in
        the block, cancellation included, is stored on ``record.error`` and
        re-raised as the same object.

        With ``defer=True`` a block that exits normally leaves the record open;
        the caller must later call :meth:`finish` (e.g. once the response body
        has been read). Failures inside the block are still finished here.
        """

        record = RequestData(method=method, url=url, data=data, config=config)
        error: Optional[BaseException] = None
        try:
            yield record
        except BaseException as exc:
            error = exc
            raise
        finally:
            if error is not None or not defer:
                self.finish(record, error)

    def finish(
        self, record: RequestData, error: Optional[BaseException] = None
    ) -> None:
        """Close ``record`` and emit it; later calls for the same record are no-ops."""

        if record.finished:
            return
        record.end_time = time.perf_counter()
        if error is not None:
            record.response = None
            record.error = error
        self.emit(record)

    async def run(
        self,
        method: str,
        url: str,
        data: Any,
        config: Any,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        with self.capture(method, url, data, config) as record:
            record.response = await operation()
        return record.response

    def run_sync(
        self,
        method: str,
        url: str,
        data: Any,
        config: Any,
        operation: Callable[[], T],
    ) -> T:
        with self.capture(method, url, data, config) as record:
            record.response = operation()
        return record.response

    def emit(self, record: RequestData) -> None:
        """Format ``record`` and send it to the sink at the matching level."""

        try:
            values = self.format(record)
            if record.error is None:
                self.logger.info(*values)
            else:
                self.logger.error(*values)
        except Exception:
            logger.warning(
                f"Failed to log {record.method} {record.url}; log entry dropped",
                exc_info=True,
            )
