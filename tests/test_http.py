"""Node HTTP client against a mocked transport."""

import json

import httpx
import pytest

from pdum import ConnectionError, Envelope, EnvelopeError, HttpError
from pdum.transport.http import HttpClient

ADDRESS = "0xAF040ed5498F9808550402ebB6C193E2a73b860a"


def make_client(handler) -> HttpClient:
    return HttpClient("http://node.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_latest_envelope(hello_content):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"content": hello_content, "refs": ["r1"], "signature": "sig"})

    async with make_client(handler) as client:
        env = await client.fetch_latest_envelope(ADDRESS)

    assert env == Envelope(content=hello_content, signature="sig")
    assert env.references == ("r1",)
    assert seen[0].method == "GET"
    assert seen[0].url.path == f"/info/latest/{ADDRESS}"


@pytest.mark.asyncio
async def test_publish_envelope(hello_content):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=bodies[-1])

    env = Envelope(content=hello_content, refs=["r1"], signature="sig")
    async with make_client(handler) as client:
        stored = await client.publish_envelope(env)

    assert bodies == [{"content": hello_content, "refs": ["r1"], "signature": "sig"}]
    assert stored == env


@pytest.mark.asyncio
async def test_http_error_status():
    async with make_client(lambda request: httpx.Response(404, text="not found")) as client:
        with pytest.raises(HttpError) as exc:
            await client.fetch_latest_envelope(ADDRESS)
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_response_not_an_envelope():
    async with make_client(lambda request: httpx.Response(200, json={"status": "ok"})) as client:
        with pytest.raises(EnvelopeError):
            await client.fetch_latest_envelope(ADDRESS)


@pytest.mark.asyncio
async def test_response_not_json():
    async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(EnvelopeError):
            await client.fetch_latest_envelope(ADDRESS)


@pytest.mark.asyncio
async def test_connection_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ConnectionError):
            await client.fetch_latest_envelope(ADDRESS)
