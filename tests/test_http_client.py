import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
import requests

from hls_probe.utils.http_client import DEFAULT_USER_AGENT, FetchError, HttpClient, byte_range

URL = "https://cdn.example.com/vod/seg0.ts"


def make_response(status=200, text="", headers=None):
    response = MagicMock()
    response.status_code = status
    response.text = text
    response.headers = headers or {}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    response.__enter__.return_value = response
    return response


class FakeAsyncResponse:
    def __init__(self, status=200, text="", headers=None, error=None):
        self.status = status
        self._text = text
        self.headers = headers or {}
        self._error = error

    async def __aenter__(self):
        if self._error:
            raise self._error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(MagicMock(), (), status=self.status)

    async def text(self):
        return self._text


def test_byte_range():
    assert byte_range(0, 0) == "bytes=0-0"


def test_default_headers():
    client = HttpClient()
    assert client.headers["user-agent"] == DEFAULT_USER_AGENT
    assert HttpClient(user_agent="probe/1.0").headers["user-agent"] == "probe/1.0"
    client.close()


def test_fetch_text():
    client = HttpClient(timeout=3)
    with patch.object(client._session, "get", return_value=make_response(text="#EXTM3U")) as get:
        assert client.fetch_text(URL) == "#EXTM3U"
    get.assert_called_once_with(URL, timeout=3)


def test_fetch_text_wraps_http_errors():
    client = HttpClient()
    with patch.object(client._session, "get", return_value=make_response(status=404)):
        with pytest.raises(FetchError):
            client.fetch_text(URL)


def test_fetch_text_wraps_connection_errors():
    client = HttpClient()
    with patch.object(client._session, "get", side_effect=requests.ConnectionError("reset")):
        with pytest.raises(FetchError):
            client.fetch_text(URL)


def test_head_returns_case_insensitive_headers():
    client = HttpClient()
    response = make_response(headers={"content-length": "123"})
    with patch.object(client._session, "head", return_value=response) as head:
        headers = client.head(URL)
    assert headers["Content-Length"] == "123"
    assert head.call_args.kwargs["allow_redirects"] is True


def test_get_range_sends_range_header():
    client = HttpClient()
    response = make_response(status=206, headers={"Content-Range": "bytes 0-0/999"})
    with patch.object(client._session, "get", return_value=response) as get:
        headers = client.get_range(URL, 0, 0)
    assert headers.get("content-range") == "bytes 0-0/999"
    assert get.call_args.kwargs["headers"] == {"Range": "bytes=0-0"}
    assert get.call_args.kwargs["stream"] is True


def test_fetch_text_async():
    client = HttpClient()
    session = MagicMock()
    session.get.return_value = FakeAsyncResponse(text="#EXTM3U")
    with patch.object(client, "_get_async_session", AsyncMock(return_value=session)):
        assert asyncio.run(client.fetch_text_async(URL)) == "#EXTM3U"


def test_head_async_wraps_client_errors():
    client = HttpClient()
    session = MagicMock()
    session.head.return_value = FakeAsyncResponse(error=aiohttp.ClientConnectionError("refused"))
    with patch.object(client, "_get_async_session", AsyncMock(return_value=session)):
        with pytest.raises(FetchError):
            asyncio.run(client.head_async(URL))


def test_get_range_async_status_error():
    client = HttpClient()
    session = MagicMock()
    session.get.return_value = FakeAsyncResponse(status=416)
    with patch.object(client, "_get_async_session", AsyncMock(return_value=session)):
        with pytest.raises(FetchError):
            asyncio.run(client.get_range_async(URL))
    assert session.get.call_args.kwargs["headers"] == {"Range": "bytes=0-0"}


def test_get_range_async_headers():
    client = HttpClient()
    session = MagicMock()
    session.get.return_value = FakeAsyncResponse(status=206, headers={"Content-Range": "bytes 0-0/64"})
    with patch.object(client, "_get_async_session", AsyncMock(return_value=session)):
        headers = asyncio.run(client.get_range_async(URL))
    assert headers["content-range"] == "bytes 0-0/64"


def test_async_session_is_created_lazily_and_closed():
    async def scenario():
        client = HttpClient(timeout=2)
        first = await client._get_async_session()
        second = await client._get_async_session()
        assert first is second
        assert first.timeout.total == 2
        await client.aclose()
        assert first.closed

    asyncio.run(scenario())
