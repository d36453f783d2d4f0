"""Wayback Machine CDX index source."""

from __future__ import annotations

import json
from typing import Any

from ..config import HarvestSettings
from ..engine.dedup import dedupe_by
from ..engine.fetcher import FetchError, HttpFetcher
from .base import FetchResult, url_pattern

SNAPSHOT_URL = "https://web.archive.org/web/{timestamp}if_/{url}"
# CDX json columns: urlkey, timestamp, original, mimetype, statuscode, digest, length
_TIMESTAMP, _ORIGINAL, _DIGEST = 1, 2, 5


def _decode_rows(text: str, url: str) -> list[Any]:
    if not text.strip():
        return []
    try:
        rows = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FetchError(url, f"malformed CDX response ({exc.msg})") from exc
    if not isinstance(rows, list):
        raise FetchError(url, "CDX response is not a JSON array")
    # The first row holds the field names.
    return rows[1:]


def _valid_row(row: Any, width: int) -> bool:
    return (
        isinstance(row, list)
        and len(row) >= width
        and all(isinstance(cell, str) for cell in row[:width])
    )


class WaybackArchiveSource:
    name = "wayback"

    def __init__(self, http: HttpFetcher, settings: HarvestSettings) -> None:
        self.http = http
        self.endpoint = settings.wayback_endpoint

    def fetch(self, domain: str, exclude_subdomains: bool) -> FetchResult:
        response = self.http.get(
            self.endpoint,
            params={
                "url": url_pattern(domain, exclude_subdomains),
                "output": "json",
                "collapse": "urlkey",
            },
        )
        result = FetchResult()
        for index, row in enumerate(_decode_rows(response.text, response.url), start=1):
            if not _valid_row(row, _ORIGINAL + 1):
                result.warn(f"row {index}: expected at least 3 string fields, got {row!r}")
                continue
            result.add(row[_ORIGINAL], timestamp=row[_TIMESTAMP])
        return result

    def versions(self, url: str) -> FetchResult:
        """List snapshot URLs for every distinct capture (by digest) of ``url``."""

        response = self.http.get(self.endpoint, params={"url": url, "output": "json"})
        result = FetchResult()
        rows = []
        for index, row in enumerate(_decode_rows(response.text, response.url), start=1):
            if not _valid_row(row, _DIGEST + 1):
                result.warn(f"row {index}: expected at least 6 string fields, got {row!r}")
                continue
            rows.append(row)
        for row in dedupe_by(rows, lambda item: item[_DIGEST]):
            result.add(
                SNAPSHOT_URL.format(timestamp=row[_TIMESTAMP], url=row[_ORIGINAL]),
                timestamp=row[_TIMESTAMP],
            )
        return result


__all__ = ["SNAPSHOT_URL", "WaybackArchiveSource"]
