"""VirusTotal domain report source."""

from __future__ import annotations

import json

from ..config import HarvestSettings
from ..engine.fetcher import FetchError, HttpFetcher
from .base import FetchResult


class VirusTotalSource:
    """Read ``detected_urls`` from the v2 domain report.

    Without an API key the source is inert and returns an empty result.
    """

    name = "virustotal"

    def __init__(self, http: HttpFetcher, settings: HarvestSettings, api_key: str | None = None) -> None:
        self.http = http
        self.endpoint = settings.virustotal_endpoint
        self.api_key = api_key if api_key is not None else settings.virustotal_api_key

    def fetch(self, domain: str, exclude_subdomains: bool) -> FetchResult:
        result = FetchResult()
        if not self.api_key:
            return result
        response = self.http.get(
            self.endpoint, params={"apikey": self.api_key, "domain": domain}
        )
        try:
            report = json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise FetchError(self.endpoint, f"malformed report ({exc.msg})") from exc
        if not isinstance(report, dict):
            raise FetchError(self.endpoint, "report is not a JSON object")
        detected = report.get("detected_urls") or []
        if not isinstance(detected, list):
            result.warn("detected_urls is not a list")
            return result
        for index, entry in enumerate(detected):
            # TODO: parse scan_date ("2018-03-26 09:22:43") into the CDX timestamp format
            if isinstance(entry, dict) and isinstance(entry.get("url"), str):
                result.add(entry["url"])
            else:
                result.warn(f"entry {index}: missing url")
        return result


__all__ = ["VirusTotalSource"]
