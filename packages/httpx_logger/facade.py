"""Facade clients exposing one logged method per HTTP verb.

Unlike :func:`~httpx_logger.transport.decorate_client`, the facades never
modify the wrapped client: only calls made through the facade are logged.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from .formatting import Formatter
from .interceptor import LoggerOptions, RequestInterceptor
from .sinks import Logger
from .transport import request_body

_PAYLOAD_KWARGS = ("json", "data", "content", "files")


def _payload(kwargs: dict[str, Any]) -> Any:
    for key in _PAYLOAD_KWARGS:
        value = kwargs.get(key)
        if value is not None:
            return value
    return None


class ClientDefaults:
    """Live view over the default settings of an httpx client.

    Reads return the client's own objects and writes go straight to the
    client, so ``defaults.headers is client.headers``.
    """

    def __init__(self, client: httpx.Client | httpx.AsyncClient) -> None:
        self._client = client

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    @headers.setter
    def headers(self, headers) -> None:
        self._client.headers = headers

    @property
    def params(self) -> httpx.QueryParams:
        return self._client.params

    @params.setter
    def params(self, params) -> None:
        self._client.params = params

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    @cookies.setter
    def cookies(self, cookies) -> None:
        self._client.cookies = cookies

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    @timeout.setter
    def timeout(self, timeout) -> None:
        self._client.timeout = timeout

    @property
    def base_url(self) -> httpx.URL:
        return self._client.base_url

    @base_url.setter
    def base_url(self, url) -> None:
        self._client.base_url = url

    @property
    def auth(self) -> Optional[httpx.Auth]:
        return self._client.auth

    @auth.setter
    def auth(self, auth) -> None:
        self._client.auth = auth


class _LoggingClientBase:
    def __init__(
        self,
        *,
        client: Any,
        logger: Logger,
        format: Optional[Formatter] = None,
    ) -> None:
        if client is None:
            raise TypeError("client is required")
        if logger is None:
            raise TypeError("logger is required")
        self._client = client
        self._defaults = ClientDefaults(client)
        self._interceptor = RequestInterceptor(
            LoggerOptions.build(logger=logger, format=format)
        )

    @property
    def client(self) -> Any:
        return self._client

    @property
    def interceptor(self) -> RequestInterceptor:
        return self._interceptor

    @property
    def defaults(self) -> ClientDefaults:
        return self._defaults

    @property
    def interceptors(self) -> dict[str, list]:
        """The client's live ``event_hooks`` mapping."""
        return self._client.event_hooks

    @property
    def event_hooks(self) -> dict[str, list]:
        return self._client.event_hooks

    @event_hooks.setter
    def event_hooks(self, hooks) -> None:
        self._client.event_hooks = hooks


class AsyncLoggingClient(_LoggingClientBase):
    """Logged verbs over an :class:`httpx.AsyncClient`.

    Example::

        client = AsyncLoggingClient(client=httpx.AsyncClient(), logger=LoggingSink())
        response = await client.get("https://example.org")
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        logger: Logger,
        format: Optional[Formatter] = None,
    ) -> None:
        super().__init__(client=client, logger=logger, format=format)

    async def _call(
        self, method: str, url, data: Any, kwargs: dict[str, Any], operation
    ):
        return await self._interceptor.run(method, str(url), data, kwargs, operation)

    async def get(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "get", url, None, kwargs, lambda: self._client.get(url, **kwargs)
        )

    async def delete(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "delete", url, None, kwargs, lambda: self._client.delete(url, **kwargs)
        )

    async def head(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "head", url, None, kwargs, lambda: self._client.head(url, **kwargs)
        )

    async def options(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "options", url, None, kwargs, lambda: self._client.options(url, **kwargs)
        )

    async def post(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "post",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.post(url, **kwargs),
        )

    async def put(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "put",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.put(url, **kwargs),
        )

    async def patch(self, url, **kwargs) -> httpx.Response:
        return await self._call(
            "patch",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.patch(url, **kwargs),
        )

    async def request(self, method: str, url, **kwargs) -> httpx.Response:
        return await self._call(
            method,
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.request(method, url, **kwargs),
        )

    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        return await self._interceptor.run(
            request.method,
            str(request.url),
            request_body(request),
            request,
            lambda: self._client.send(request, **kwargs),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncLoggingClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type=None, exc_value=None, traceback=None) -> None:
        await self._client.__aexit__(exc_type, exc_value, traceback)


class LoggingClient(_LoggingClientBase):
    """Logged verbs over a synchronous :class:`httpx.Client`."""

    def __init__(
        self,
        *,
        client: httpx.Client,
        logger: Logger,
        format: Optional[Formatter] = None,
    ) -> None:
        super().__init__(client=client, logger=logger, format=format)

    def _call(self, method: str, url, data: Any, kwargs: dict[str, Any], operation):
        return self._interceptor.run_sync(method, str(url), data, kwargs, operation)

    def get(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "get", url, None, kwargs, lambda: self._client.get(url, **kwargs)
        )

    def delete(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "delete", url, None, kwargs, lambda: self._client.delete(url, **kwargs)
        )

    def head(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "head", url, None, kwargs, lambda: self._client.head(url, **kwargs)
        )

    def options(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "options", url, None, kwargs, lambda: self._client.options(url, **kwargs)
        )

    def post(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "post",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.post(url, **kwargs),
        )

    def put(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "put",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.put(url, **kwargs),
        )

    def patch(self, url, **kwargs) -> httpx.Response:
        return self._call(
            "patch",
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.patch(url, **kwargs),
        )

    def request(self, method: str, url, **kwargs) -> httpx.Response:
        return self._call(
            method,
            url,
            _payload(kwargs),
            kwargs,
            lambda: self._client.request(method, url, **kwargs),
        )

    def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        return self._interceptor.run_sync(
            request.method,
            str(request.url),
            request_body(request),
            request,
            lambda: self._client.send(request, **kwargs),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LoggingClient":
        self._client.__enter__()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None) -> None:
        self._client.__exit__(exc_type, exc_value, traceback)
