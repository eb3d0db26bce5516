"""Unit tests for the receptor HTTP client."""

import json

import httpx
import pytest

from lattice.core.exceptions import ReceptorError
from lattice.receptor.client import HTTPReceptorClient
from lattice.receptor.models import (
    ActualLRPState,
    DesiredLRPCreateRequest,
    DesiredLRPUpdateRequest,
    DownloadAction,
    EnvironmentVariable,
    RunAction,
)


class RecordingTransport:
    """httpx.MockTransport that records requests and answers from a route table."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes.get(
            (request.method, request.url.path),
            httpx.Response(404, json={"name": "NotFound", "message": "no route"}),
        )


def _client(recorder: RecordingTransport, **kwargs) -> HTTPReceptorClient:
    return HTTPReceptorClient("http://receptor.test/", transport=recorder.transport, **kwargs)


class TestClientConfiguration:
    """Tests for HTTPReceptorClient construction."""

    def test_strips_trailing_slash(self) -> None:
        client = HTTPReceptorClient("http://receptor.test/")
        assert client.base_url == "http://receptor.test"
        assert client.timeout == 30.0

    @pytest.mark.asyncio
    async def test_sends_basic_auth_when_configured(self) -> None:
        recorder = RecordingTransport({("GET", "/v1/desired_lrps"): httpx.Response(200, json=[])})
        client = _client(recorder, auth=("user", "pass"))

        await client.desired_lrps()

        assert recorder.requests[0].headers["Authorization"].startswith("Basic ")
        await client.close()

    @pytest.mark.asyncio
    async def test_close_client(self) -> None:
        client = HTTPReceptorClient("http://receptor.test")
        await client._get_client()
        assert client._client is not None

        await client.close()
        assert client._client is None


class TestDesiredLRPs:
    """Tests for desired LRP calls."""

    @pytest.mark.asyncio
    async def test_lists_desired_lrps(self) -> None:
        recorder = RecordingTransport({
            ("GET", "/v1/desired_lrps"): httpx.Response(200, json=[
                {"process_guid": "americano-app", "instances": 2, "rootfs": "docker:///a/b", "unknown": 1},
                {"process_guid": "mocha-app", "instances": 0},
            ]),
        })
        client = _client(recorder)

        lrps = await client.desired_lrps()

        assert [lrp.process_guid for lrp in lrps] == ["americano-app", "mocha-app"]
        assert lrps[0].instances == 2
        assert lrps[0].root_fs == "docker:///a/b"
        await client.close()

    @pytest.mark.asyncio
    async def test_null_listing_is_empty(self) -> None:
        recorder = RecordingTransport({("GET", "/v1/desired_lrps"): httpx.Response(200, content=b"null")})
        client = _client(recorder)

        assert await client.desired_lrps() == []
        await client.close()

    @pytest.mark.asyncio
    async def test_creates_desired_lrp_with_wrapped_actions(self) -> None:
        recorder = RecordingTransport({("POST", "/v1/desired_lrps"): httpx.Response(201)})
        client = _client(recorder)
        request = DesiredLRPCreateRequest(
            process_guid="americano-app",
            domain="diego-edge",
            root_fs="docker:///runtest/runner",
            instances=1,
            stack="lucid64",
            env=[EnvironmentVariable(name="PORT", value="2000")],
            setup=DownloadAction(from_="http://file-server/circus.tgz", to="/tmp"),
            action=RunAction(path="/run", args=["a"], privileged=True),
            monitor=RunAction(path="/tmp/spy", args=["-addr", ":2000"], log_source="HEALTH"),
            ports=[2000],
            routes=["americano-app.example.com"],
        )

        await client.create_desired_lrp(request)

        body = json.loads(recorder.requests[0].content)
        assert body["process_guid"] == "americano-app"
        assert body["rootfs"] == "docker:///runtest/runner"
        assert body["env"] == [{"name": "PORT", "value": "2000"}]
        assert body["setup"] == {"download": {"from": "http://file-server/circus.tgz", "to": "/tmp", "cache_key": ""}}
        assert body["action"]["run"]["path"] == "/run"
        assert body["action"]["run"]["privileged"] is True
        assert body["monitor"]["run"]["args"] == ["-addr", ":2000"]
        assert body["routes"] == ["americano-app.example.com"]
        await client.close()

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self) -> None:
        recorder = RecordingTransport({("PUT", "/v1/desired_lrps/americano-app"): httpx.Response(204)})
        client = _client(recorder)

        await client.update_desired_lrp("americano-app", DesiredLRPUpdateRequest(instances=25))

        assert json.loads(recorder.requests[0].content) == {"instances": 25}
        await client.close()

    @pytest.mark.asyncio
    async def test_deletes_desired_lrp(self) -> None:
        recorder = RecordingTransport({("DELETE", "/v1/desired_lrps/americano-app"): httpx.Response(204)})
        client = _client(recorder)

        await client.delete_desired_lrp("americano-app")

        assert recorder.requests[0].method == "DELETE"
        await client.close()


class TestActualLRPs:
    """Tests for actual LRP calls."""

    @pytest.mark.asyncio
    async def test_lists_actual_lrps_for_a_process(self) -> None:
        recorder = RecordingTransport({
            ("GET", "/v1/actual_lrps/americano-app"): httpx.Response(200, json=[
                {"process_guid": "americano-app", "index": 0, "state": "RUNNING"},
                {"process_guid": "americano-app", "index": 1, "state": "CLAIMED"},
            ]),
        })
        client = _client(recorder)

        lrps = await client.actual_lrps_by_process_guid("americano-app")

        assert [lrp.state for lrp in lrps] == [ActualLRPState.RUNNING, ActualLRPState.CLAIMED]
        await client.close()

    @pytest.mark.asyncio
    async def test_unknown_state_is_an_invalid_response(self) -> None:
        recorder = RecordingTransport({
            ("GET", "/v1/actual_lrps/americano-app"): httpx.Response(200, json=[
                {"process_guid": "americano-app", "state": "SLEEPING"},
            ]),
        })
        client = _client(recorder)

        with pytest.raises(ReceptorError, match="Invalid response"):
            await client.actual_lrps_by_process_guid("americano-app")
        await client.close()


class TestErrors:
    """Tests for receptor error handling."""

    @pytest.mark.asyncio
    async def test_error_body_becomes_receptor_error(self) -> None:
        recorder = RecordingTransport({
            ("POST", "/v1/desired_lrps"): httpx.Response(
                409, json={"name": "DesiredLRPAlreadyExists", "message": "desired lrp already exists"},
            ),
        })
        client = _client(recorder)
        request = DesiredLRPCreateRequest(
            process_guid="a", domain="d", root_fs="r", instances=1, stack="s", action=RunAction(path="/run"),
        )

        with pytest.raises(ReceptorError) as exc_info:
            await client.create_desired_lrp(request)

        assert str(exc_info.value) == "desired lrp already exists"
        assert exc_info.value.error_type == "DesiredLRPAlreadyExists"
        assert exc_info.value.status_code == 409
        await client.close()

    @pytest.mark.asyncio
    async def test_plain_text_error_keeps_status(self) -> None:
        recorder = RecordingTransport({
            ("GET", "/v1/desired_lrps"): httpx.Response(502, text="bad gateway"),
        })
        client = _client(recorder)

        with pytest.raises(ReceptorError, match="502: bad gateway"):
            await client.desired_lrps()
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_errors_propagate_unchanged(self) -> None:
        connect_error = httpx.ConnectError("Connection refused")

        def refuse(request: httpx.Request) -> httpx.Response:
            raise connect_error

        client = HTTPReceptorClient("http://receptor.test", transport=httpx.MockTransport(refuse))

        with pytest.raises(httpx.ConnectError) as exc_info:
            await client.desired_lrps()

        assert exc_info.value is connect_error
        await client.close()
