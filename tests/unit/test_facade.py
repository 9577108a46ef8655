import httpx
import pytest

from httpx_logger import AsyncLoggingClient, ClientDefaults, LoggingClient


class RecordingAsyncClient:
    """Fake async client recording the exact arguments of every verb."""

    def __init__(self):
        self.calls = []
        self.response = httpx.Response(200)

    def _record(name):
        async def verb(self, *args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self.response

        return verb

    get = _record("get")
    delete = _record("delete")
    head = _record("head")
    options = _record("options")
    post = _record("post")
    put = _record("put")
    patch = _record("patch")
    request = _record("request")
    send = _record("send")

    del _record


@pytest.mark.asyncio
class TestAsyncVerbs:
    @pytest.mark.parametrize("verb", ["get", "delete", "head", "options"])
    async def test_bodyless_verbs(self, verb, sink):
        fake = RecordingAsyncClient()
        facade = AsyncLoggingClient(client=fake, logger=sink)

        response = await getattr(facade, verb)("/things", params={"q": "a"}, timeout=2)

        assert response is fake.response
        assert fake.calls == [(verb, ("/things",), {"params": {"q": "a"}, "timeout": 2})]
        values = sink.infos[0]
        assert values[0] == verb.upper()
        assert values[3] == "/things"
        assert values[4]["data"] is None
        assert values[4]["config"] == {"params": {"q": "a"}, "timeout": 2}

    @pytest.mark.parametrize("verb", ["post", "put", "patch"])
    async def test_body_verbs(self, verb, sink):
        fake = RecordingAsyncClient()
        facade = AsyncLoggingClient(client=fake, logger=sink)

        await getattr(facade, verb)("/things", json={"name": "ada"}, headers={"X-A": "1"})

        assert fake.calls == [
            (verb, ("/things",), {"json": {"name": "ada"}, "headers": {"X-A": "1"}})
        ]
        assert sink.infos[0][0] == verb.upper()
        assert sink.infos[0][4]["data"] == {"name": "ada"}

    async def test_request_verb(self, sink):
        fake = RecordingAsyncClient()
        facade = AsyncLoggingClient(client=fake, logger=sink)

        await facade.request("put", "/things/1", data={"a": "b"})

        assert fake.calls == [("request", ("put", "/things/1"), {"data": {"a": "b"}})]
        assert sink.infos[0][0] == "PUT"
        assert sink.infos[0][4]["data"] == {"a": "b"}

    async def test_send_derives_fields_from_request(self, async_client, sink):
        facade = AsyncLoggingClient(client=async_client, logger=sink)
        request = async_client.build_request("POST", "/things", content=b"raw")

        response = await facade.send(request)

        assert response.json() == {"method": "POST", "path": "/things"}
        method, status, _, url, details = sink.infos[0]
        assert (method, status) == ("POST", "200/(OK)")
        assert url == "https://api.example.test/things"
        assert details["data"] == b"raw"
        assert details["config"] is request

    async def test_errors_propagate_unchanged(self, sink):
        raised = []

        def refuse(request):
            raised.append(httpx.ConnectError("connection refused", request=request))
            raise raised[-1]

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        facade = AsyncLoggingClient(client=client, logger=sink)

        with pytest.raises(httpx.ConnectError) as exc_info:
            await facade.get("https://api.example.test/down")

        assert exc_info.value is raised[0]
        assert len(sink.errors) == 1
        assert sink.infos == []

    async def test_underlying_client_is_not_decorated(self, async_client, sink):
        transport = async_client._transport
        facade = AsyncLoggingClient(client=async_client, logger=sink)

        await facade.get("/via-facade")
        await async_client.get("/direct")

        assert async_client._transport is transport
        assert [values[3] for values in sink.infos] == ["/via-facade"]

    async def test_async_context_manager(self, async_client, sink):
        async with AsyncLoggingClient(client=async_client, logger=sink) as facade:
            await facade.get("/ctx")
        assert async_client.is_closed


class TestPassthrough:
    def test_interceptors_are_the_clients_event_hooks(self, async_client, sink):
        facade = AsyncLoggingClient(client=async_client, logger=sink)

        async def hook(request):
            pass

        assert facade.interceptors is async_client.event_hooks
        facade.interceptors["request"].append(hook)
        assert async_client.event_hooks["request"] == [hook]

    def test_defaults_share_client_objects(self, async_client, sink):
        facade = AsyncLoggingClient(client=async_client, logger=sink)

        assert isinstance(facade.defaults, ClientDefaults)
        assert facade.defaults is facade.defaults
        assert facade.defaults.headers is async_client.headers
        assert facade.defaults.cookies is async_client.cookies

        facade.defaults.headers["X-Tenant"] = "acme"
        assert async_client.headers["X-Tenant"] == "acme"

    def test_defaults_write_through(self, sync_client, sink):
        facade = LoggingClient(client=sync_client, logger=sink)

        facade.defaults.timeout = 3.0
        facade.defaults.base_url = "https://other.example.test"

        assert sync_client.timeout == httpx.Timeout(3.0)
        assert facade.defaults.base_url == sync_client.base_url
        assert sync_client.base_url.host == "other.example.test"

    def test_client_and_logger_required(self, async_client, sink):
        with pytest.raises(TypeError):
            AsyncLoggingClient(client=None, logger=sink)
        with pytest.raises(TypeError):
            AsyncLoggingClient(client=async_client, logger=None)
        with pytest.raises(TypeError):
            AsyncLoggingClient(client=async_client)


class TestSyncFacade:
    def test_verbs_and_errors(self, sync_client, sink):
        facade = LoggingClient(client=sync_client, logger=sink)

        assert facade.get("/a").status_code == 200
        assert facade.post("/b", json=[1, 2]).status_code == 200
        assert facade.get("/missing").status_code == 404

        assert [values[:2] for values in sink.infos] == [
            ("GET", "200/(OK)"),
            ("POST", "200/(OK)"),
            ("GET", "404/(Not Found)"),
        ]
        assert sink.infos[1][4]["data"] == [1, 2]

    def test_custom_format(self, sync_client, sink):
        facade = LoggingClient(
            client=sync_client,
            logger=sink,
            format=lambda record: [record.method, record.elapsed_ms >= 0],
        )

        facade.delete("/x")

        assert sink.infos == [("delete", True)]

    def test_context_manager_closes_client(self, sync_client, sink):
        with LoggingClient(client=sync_client, logger=sink) as facade:
            facade.head("/x")
        assert sync_client.is_closed
