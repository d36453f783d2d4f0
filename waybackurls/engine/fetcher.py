"""Single-attempt HTTP GET shared by all URL sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import httpx
import structlog

from ..config import HarvestSettings


class FetchError(RuntimeError):
    """A whole fetch failed: transport error, bad status or unusable body."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str]
    raw: httpx.Response | None = field(repr=False, default=None)


class HttpFetcher:
    """Issue GET requests without retries and fail loudly on non-2xx."""

    def __init__(
        self,
        settings: HarvestSettings,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or structlog.get_logger("waybackurls.fetcher")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get(self, url: str, params: dict[str, Any] | None = None) -> FetchResponse:
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self.logger.debug("http_error", url=url, error=str(exc))
            raise FetchError(url, f"request failed ({exc.__class__.__name__})") from exc
        if not response.is_success:
            # Report the bare endpoint; query strings may carry credentials.
            raise FetchError(url, f"unexpected status {response.status_code}")
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
            raw=response,
        )


__all__ = ["FetchError", "FetchResponse", "HttpFetcher"]
