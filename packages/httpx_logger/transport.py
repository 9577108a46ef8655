"""Adapter-level integration: log every call made through an existing client.

The client's default transport (httpx) or mounted adapters (requests) are
replaced in place with wrappers that route each call through a
:class:`~httpx_logger.interceptor.RequestInterceptor`. Call sites, event hooks
and other client configuration are untouched.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

import httpx
import requests
from requests.adapters import BaseAdapter

from .errors import ConfigurationError
from .formatting import Formatter
from .interceptor import LoggerOptions, RequestInterceptor
from .record import RequestData
from .sinks import Logger

log = logging.getLogger(__name__)

ClientT = TypeVar("ClientT", httpx.AsyncClient, httpx.Client, requests.Session)


def request_body(request: httpx.Request) -> Any:
    try:
        content = request.content
    except httpx.RequestNotRead:
        # Streaming body; reading it here would consume it.
        return None
    return content or None


# ---------------------------------------------------------------------------
# httpx transports
# ---------------------------------------------------------------------------


class _AsyncLoggedStream(httpx.AsyncByteStream):
    """Response body that finishes its request record once the body is done."""

    def __init__(
        self,
        stream: httpx.AsyncByteStream,
        interceptor: RequestInterceptor,
        record: RequestData,
    ):
        self._stream = stream
        self._interceptor = interceptor
        self._record = record

    async def __aiter__(self):
        try:
            async for chunk in self._stream:
                yield chunk
        except GeneratorExit:
            # Consumer stopped early; aclose() finishes the record.
            raise
        except BaseException as exc:
            self._interceptor.finish(self._record, exc)
            raise
        self._interceptor.finish(self._record)

    async def aclose(self) -> None:
        try:
            await self._stream.aclose()
        finally:
            self._interceptor.finish(self._record)


class _LoggedStream(httpx.SyncByteStream):
    def __init__(
        self,
        stream: httpx.SyncByteStream,
        interceptor: RequestInterceptor,
        record: RequestData,
    ):
        self._stream = stream
        self._interceptor = interceptor
        self._record = record

    def __iter__(self):
        try:
            yield from self._stream
        except GeneratorExit:
            raise
        except BaseException as exc:
            self._interceptor.finish(self._record, exc)
            raise
        self._interceptor.finish(self._record)

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            self._interceptor.finish(self._record)


def _track_body(
    response: httpx.Response,
    interceptor: RequestInterceptor,
    record: RequestData,
    stream_cls,
) -> httpx.Response:
    if isinstance(response.stream, httpx.ByteStream):
        # Body already in memory.
        interceptor.finish(record)
    else:
        response.stream = stream_cls(response.stream, interceptor, record)
    return response


class AsyncLoggingTransport(httpx.AsyncBaseTransport):
    """Logs each call once its response body is consumed, closed or fails."""

    def __init__(
        self, wrapped: httpx.AsyncBaseTransport, interceptor: RequestInterceptor
    ):
        self.wrapped = wrapped
        self.interceptor = interceptor

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        with self.interceptor.capture(
            request.method,
            str(request.url),
            request_body(request),
            request,
            defer=True,
        ) as record:
            record.response = await self.wrapped.handle_async_request(request)
        return _track_body(
            record.response, self.interceptor, record, _AsyncLoggedStream
        )

    async def __aenter__(self) -> "AsyncLoggingTransport":
        await self.wrapped.__aenter__()
        return self

    async def __aexit__(self, exc_type=None, exc_value=None, traceback=None) -> None:
        await self.wrapped.__aexit__(exc_type, exc_value, traceback)

    async def aclose(self) -> None:
        await self.wrapped.aclose()


class LoggingTransport(httpx.BaseTransport):
    def __init__(self, wrapped: httpx.BaseTransport, interceptor: RequestInterceptor):
        self.wrapped = wrapped
        self.interceptor = interceptor

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        with self.interceptor.capture(
            request.method,
            str(request.url),
            request_body(request),
            request,
            defer=True,
        ) as record:
            record.response = self.wrapped.handle_request(request)
        return _track_body(record.response, self.interceptor, record, _LoggedStream)

    def __enter__(self) -> "LoggingTransport":
        self.wrapped.__enter__()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None) -> None:
        self.wrapped.__exit__(exc_type, exc_value, traceback)

    def close(self) -> None:
        self.wrapped.close()


# ---------------------------------------------------------------------------
# requests adapters
# ---------------------------------------------------------------------------


class LoggingAdapter(BaseAdapter):
    """Logs each call; unless ``stream=True`` the body is read before logging."""

    def __init__(self, wrapped: BaseAdapter, interceptor: RequestInterceptor):
        super().__init__()
        self.wrapped = wrapped
        self.interceptor = interceptor

    def send(self, request: requests.PreparedRequest, **kwargs) -> requests.Response:
        def operation():
            response = self.wrapped.send(request, **kwargs)
            if not kwargs.get("stream"):
                # Read the body here so body read errors are observed.
                response.content
            return response

        return self.interceptor.run_sync(
            request.method, request.url, request.body, request, operation
        )

    def close(self) -> None:
        self.wrapped.close()


_HTTPX_WRAPPERS = (AsyncLoggingTransport, LoggingTransport)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decorate_client(
    client: ClientT,
    options: Optional[LoggerOptions] = None,
    *,
    format: Optional[Formatter] = None,
    logger: Optional[Logger] = None,
) -> ClientT:
    """Log every call made through ``client`` and return the same instance.

    Decorating an already decorated client adds another layer, so each call
    is then logged once per layer.

    Example::

        client = decorate_client(httpx.AsyncClient(), logger=LoggingSink())
    """

    interceptor = RequestInterceptor(options, logger=logger, format=format)

    if isinstance(client, requests.Session):
        if not client.adapters:
            raise ConfigurationError("requests.Session has no mounted adapters")
        for prefix, adapter in list(client.adapters.items()):
            client.adapters[prefix] = LoggingAdapter(adapter, interceptor)
    elif isinstance(client, (httpx.AsyncClient, httpx.Client)):
        transport = getattr(client, "_transport", None)
        if transport is None:
            raise ConfigurationError(
                f"{type(client).__name__} has no default transport"
            )
        if isinstance(client, httpx.AsyncClient):
            client._transport = AsyncLoggingTransport(transport, interceptor)
        else:
            client._transport = LoggingTransport(transport, interceptor)
    else:
        raise ConfigurationError(
            f"Cannot decorate {type(client).__name__}; expected httpx.AsyncClient, "
            "httpx.Client or requests.Session"
        )

    log.debug(f"Request logging enabled on {type(client).__name__}")
    return client


def undecorate_client(client: ClientT) -> ClientT:
    """Remove the outermost logging layer added by :func:`decorate_client`."""

    if isinstance(client, requests.Session):
        wrapped = {
            prefix: adapter
            for prefix, adapter in client.adapters.items()
            if isinstance(adapter, LoggingAdapter)
        }
        if not wrapped:
            raise ConfigurationError("requests.Session is not decorated")
        for prefix, adapter in wrapped.items():
            client.adapters[prefix] = adapter.wrapped
    elif isinstance(client, (httpx.AsyncClient, httpx.Client)):
        transport = getattr(client, "_transport", None)
        if not isinstance(transport, _HTTPX_WRAPPERS):
            raise ConfigurationError(f"{type(client).__name__} is not decorated")
        client._transport = transport.wrapped
    else:
        raise ConfigurationError(f"Cannot undecorate {type(client).__name__}")

    log.debug(f"Request logging removed from {type(client).__name__}")
    return client


@contextmanager
def logged_client(
    client: ClientT,
    options: Optional[LoggerOptions] = None,
    *,
    format: Optional[Formatter] = None,
    logger: Optional[Logger] = None,
):
    """Enable request logging on ``client`` within the managed block."""

    decorate_client(client, options, format=format, logger=logger)
    try:
        yield client
    finally:
        undecorate_client(client)
