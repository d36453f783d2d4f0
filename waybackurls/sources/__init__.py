"""URL sources queried for every domain."""

from __future__ import annotations

from ..config import HarvestSettings
from ..engine.fetcher import HttpFetcher
from .archive import SNAPSHOT_URL, WaybackArchiveSource
from .base import FetchResult, UrlSource, WaybackRecord, url_pattern
from .commoncrawl import CommonCrawlSource
from .virustotal import VirusTotalSource

SOURCE_TYPES = {
    WaybackArchiveSource.name: WaybackArchiveSource,
    CommonCrawlSource.name: CommonCrawlSource,
    VirusTotalSource.name: VirusTotalSource,
}


def build_sources(http: HttpFetcher, settings: HarvestSettings) -> list[UrlSource]:
    """Instantiate the sources enabled in ``settings``, in configured order."""

    return [SOURCE_TYPES[name](http, settings) for name in settings.sources]


__all__ = [
    "CommonCrawlSource",
    "FetchResult",
    "SNAPSHOT_URL",
    "SOURCE_TYPES",
    "UrlSource",
    "VirusTotalSource",
    "WaybackArchiveSource",
    "WaybackRecord",
    "build_sources",
    "url_pattern",
]
