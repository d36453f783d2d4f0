from __future__ import annotations

import httpx
import pytest

from waybackurls.config import HarvestSettings
from waybackurls.engine import FetchError
from waybackurls.sources import VirusTotalSource, WaybackRecord, build_sources


def test_virustotal_without_key_makes_no_request(mock_http) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text="{}")

    source = VirusTotalSource(mock_http(handler), HarvestSettings())
    result = source.fetch("example.com", False)

    assert result.records == []
    assert result.warnings == []
    assert calls == []


def test_virustotal_reads_detected_urls(mock_http, json_response, sample_settings) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return json_response(
            {
                "detected_urls": [
                    {"url": "http://example.com/malware", "scan_date": "2018-03-26 09:22:43"},
                    {"positives": 3},
                    {"url": "https://example.com/phish"},
                ],
                "undetected_urls": [],
            }
        )

    result = VirusTotalSource(mock_http(handler), sample_settings).fetch("example.com", False)

    assert result.records == [
        WaybackRecord(timestamp="", url="http://example.com/malware"),
        WaybackRecord(timestamp="", url="https://example.com/phish"),
    ]
    assert len(result.warnings) == 1
    assert seen[0].url.params["apikey"] == "vt-secret"
    assert seen[0].url.params["domain"] == "example.com"


def test_virustotal_constructor_key_wins(mock_http, json_response) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return json_response({})

    source = VirusTotalSource(mock_http(handler), HarvestSettings(), api_key="explicit")
    assert source.fetch("example.com", False).records == []
    assert seen[0].url.params["apikey"] == "explicit"


@pytest.mark.parametrize("body", ["[1, 2]", "not json"])
def test_virustotal_malformed_report_fails_fetch(mock_http, sample_settings, body) -> None:
    source = VirusTotalSource(mock_http(lambda request: httpx.Response(200, text=body)), sample_settings)
    with pytest.raises(FetchError):
        source.fetch("example.com", False)


def test_build_sources_follows_settings_order(mock_http) -> None:
    http = mock_http(lambda request: httpx.Response(200))
    settings = HarvestSettings(sources=["virustotal", "wayback"])
    assert [source.name for source in build_sources(http, settings)] == ["virustotal", "wayback"]
