"""Client-facing exports for httpx_logger."""

from .errors import ConfigurationError
from .facade import AsyncLoggingClient, ClientDefaults, LoggingClient
from .formatting import MISSING, Formatter, format_default
from .interceptor import LoggerOptions, RequestInterceptor
from .record import RequestData
from .sinks import Logger, LoggingSink
from .transport import (
    AsyncLoggingTransport,
    LoggingAdapter,
    LoggingTransport,
    decorate_client,
    logged_client,
    undecorate_client,
)

__all__ = [
    "AsyncLoggingClient",
    "AsyncLoggingTransport",
    "ClientDefaults",
    "ConfigurationError",
    "Formatter",
    "Logger",
    "LoggerOptions",
    "LoggingAdapter",
    "LoggingClient",
    "LoggingSink",
    "LoggingTransport",
    "MISSING",
    "RequestData",
    "RequestInterceptor",
    "decorate_client",
    "format_default",
    "logged_client",
    "undecorate_client",
]
