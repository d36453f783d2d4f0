"""Pytest configuration providing shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest

from waybackurls.config import ConfigLocator, ConfigRepository, HarvestSettings
from waybackurls.engine import HttpFetcher
from waybackurls.sources import FetchResult


class RecordingLogger:
    """Stand-in for a structlog logger that keeps every event."""

    def __init__(self, events: list[tuple[str, str, dict[str, Any]]] | None = None, **context: Any) -> None:
        self.events = events if events is not None else []
        self.context = context

    def bind(self, **kwargs: Any) -> "RecordingLogger":
        return RecordingLogger(self.events, **{**self.context, **kwargs})

    def _log(self, level: str, event: str, **kwargs: Any) -> None:
        self.events.append((level, event, {**self.context, **kwargs}))

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log("debug", event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._log("error", event, **kwargs)

    def at(self, level: str) -> list[str]:
        return [event for lvl, event, _ in self.events if lvl == level]


class StubSource:
    """Source returning canned records or raising a canned error."""

    def __init__(
        self,
        name: str,
        urls: Iterable[str] = (),
        error: Exception | None = None,
        warnings: Iterable[str] = (),
        timestamp: str = "",
    ) -> None:
        self.name = name
        self.urls = list(urls)
        self.error = error
        self.warnings = list(warnings)
        self.timestamp = timestamp
        self.calls: list[tuple[str, bool]] = []

    def fetch(self, domain: str, exclude_subdomains: bool) -> FetchResult:
        self.calls.append((domain, exclude_subdomains))
        if self.error is not None:
            raise self.error
        result = FetchResult(warnings=list(self.warnings))
        for url in self.urls:
            result.add(url, timestamp=self.timestamp)
        return result


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def sample_settings() -> HarvestSettings:
    return HarvestSettings(virustotal_api_key="vt-secret")


@pytest.fixture
def mock_http(sample_settings: HarvestSettings) -> Callable[..., HttpFetcher]:
    """Build an HttpFetcher whose requests are answered by ``handler``."""

    clients: list[httpx.Client] = []

    def _builder(handler: Callable[[httpx.Request], httpx.Response]) -> HttpFetcher:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return HttpFetcher(sample_settings, client=client)

    yield _builder
    for client in clients:
        client.close()


@pytest.fixture
def json_response() -> Callable[..., httpx.Response]:
    def _builder(payload: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, text=json.dumps(payload))

    return _builder


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("WAYBACKURLS_HOME", str(tmp_path))
    monkeypatch.delenv("VT_API_KEY", raising=False)
    repository = ConfigRepository(ConfigLocator(project_root=tmp_path))
    yield repository


@pytest.fixture
def stub_source() -> type[StubSource]:
    return StubSource
