"""Common Crawl index source (newline-delimited JSON)."""

from __future__ import annotations

import json

from ..config import HarvestSettings
from ..engine.fetcher import HttpFetcher
from .base import FetchResult, url_pattern


class CommonCrawlSource:
    name = "commoncrawl"

    def __init__(self, http: HttpFetcher, settings: HarvestSettings) -> None:
        self.http = http
        self.endpoint = settings.commoncrawl_url()

    def fetch(self, domain: str, exclude_subdomains: bool) -> FetchResult:
        response = self.http.get(
            self.endpoint,
            params={"url": url_pattern(domain, exclude_subdomains), "output": "json"},
        )
        result = FetchResult()
        for number, line in enumerate(response.text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as exc:
                result.warn(f"line {number}: {exc.msg}")
                continue
            if not isinstance(entry, dict) or not isinstance(entry.get("url"), str):
                result.warn(f"line {number}: missing url")
                continue
            timestamp = entry.get("timestamp")
            result.add(entry["url"], timestamp=timestamp if isinstance(timestamp, str) else "")
        return result


__all__ = ["CommonCrawlSource"]
