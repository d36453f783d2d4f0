from __future__ import annotations

import httpx
import pytest

from waybackurls.engine.fetcher import FetchError, HttpFetcher


def test_http_fetcher_returns_body_and_passes_params(mock_http) -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["params"] = dict(request.url.params)
        return httpx.Response(200, text="payload", headers={"Server": "mock"})

    fetcher = mock_http(handler)
    response = fetcher.get("https://index.example/search", params={"url": "example.com/*"})

    assert response.status_code == 200
    assert response.text == "payload"
    assert response.headers["server"] == "mock"
    assert captured["params"] == {"url": "example.com/*"}


def test_http_fetcher_raises_on_error_status_without_query(mock_http) -> None:
    fetcher = mock_http(lambda request: httpx.Response(503, text="busy"))
    with pytest.raises(FetchError) as info:
        fetcher.get("https://api.example/report", params={"apikey": "secret"})
    assert "503" in str(info.value)
    assert "secret" not in str(info.value)
    assert info.value.url == "https://api.example/report"


def test_http_fetcher_wraps_transport_errors(mock_http) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    fetcher = mock_http(handler)
    with pytest.raises(FetchError) as info:
        fetcher.get("https://down.example/")
    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_http_fetcher_leaves_injected_client_open(sample_settings) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    fetcher = HttpFetcher(sample_settings, client=client)
    fetcher.close()
    assert not client.is_closed
    client.close()


def test_http_fetcher_builds_client_from_settings(sample_settings) -> None:
    fetcher = HttpFetcher(sample_settings)
    try:
        assert fetcher._client.headers["User-Agent"] == sample_settings.user_agent
        assert fetcher._client.timeout.read is None
    finally:
        fetcher.close()
    assert fetcher._client.is_closed
