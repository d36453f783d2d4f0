"""Orchestrator fanning each domain out to every source and merging the results."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Iterable, Sequence

import structlog

from .config import FetchOptions, HarvestSettings
from .engine import (
    FanOutPool,
    FetchError,
    HttpFetcher,
    UrlParseError,
    dedupe,
    dedupe_by,
    is_subdomain,
    normalize_url,
)
from .sources import UrlSource, WaybackArchiveSource, WaybackRecord, build_sources

CDX_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
_CLOSED = object()


@dataclass(frozen=True, slots=True)
class HarvestedUrl:
    """A normalised URL and the timestamp of the record it came from."""

    url: str
    timestamp: str = ""

    def captured_at(self) -> datetime | None:
        if len(self.timestamp) != 14:
            return None
        try:
            value = datetime.strptime(self.timestamp, CDX_TIMESTAMP_FORMAT)
        except ValueError:
            return None
        return value.replace(tzinfo=timezone.utc)

    def render(self, include_date: bool = False) -> str:
        if include_date:
            captured = self.captured_at()
            if captured is not None:
                return f"{captured.strftime('%Y-%m-%dT%H:%M:%SZ')} {self.url}"
        return self.url


@dataclass(slots=True)
class HarvestResult:
    """Deduplicated output of one run."""

    entries: list[HarvestedUrl] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)

    @property
    def urls(self) -> list[str]:
        return [entry.url for entry in self.entries]

    def lines(self, include_dates: bool = False) -> list[str]:
        if self.versions:
            return list(self.versions)
        return [entry.render(include_dates) for entry in self.entries]


class Orchestrator:
    """Run every source concurrently per domain and fan the records back in.

    Domains are handled one after another. For each domain every source runs
    on its own executor and pushes records onto a merge queue; a supervisor
    task closes the queue once all sources have returned, and the calling
    thread drains it, filtering and normalising each record.
    """

    def __init__(
        self,
        settings: HarvestSettings | None = None,
        sources: Sequence[UrlSource] | None = None,
        pool: FanOutPool | None = None,
        http: HttpFetcher | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings or HarvestSettings()
        self.logger = logger or structlog.get_logger("waybackurls").bind(component="orchestrator")
        self.pool = pool or FanOutPool(self.settings.thread_pool_workers)
        self._owns_http = http is None and sources is None
        self.http = http or (HttpFetcher(self.settings, logger=self.logger) if sources is None else None)
        self.sources: list[UrlSource] = (
            list(sources) if sources is not None else build_sources(self.http, self.settings)
        )

    def close(self) -> None:
        self.pool.shutdown()
        if self._owns_http and self.http is not None:
            self.http.close()

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    def run(self, options: FetchOptions) -> HarvestResult:
        if options.versions_only:
            return HarvestResult(versions=self.collect_versions(options.domains))

        results: list[HarvestedUrl] = []
        for domain in options.domains:
            if not domain:
                self.logger.info("empty_domain_skipped")
                continue
            results.extend(self.harvest_domain(domain, options.exclude_subdomains))
        entries = dedupe_by(results, lambda entry: entry.url)
        self.logger.debug(
            "harvest_complete",
            domains=len(options.domains),
            collected=len(results),
            unique=len(entries),
        )
        return HarvestResult(entries=entries)

    def harvest_domain(self, domain: str, exclude_subdomains: bool = False) -> list[HarvestedUrl]:
        """Fan out to every source for ``domain`` and drain the merged records."""

        log = self.logger.bind(domain=domain)
        channel: queue.Queue = queue.Queue()
        self.pool.fan_out(
            [
                (source.name, partial(self._produce, source, domain, exclude_subdomains, channel))
                for source in self.sources
            ],
            lambda: channel.put(_CLOSED),
        )

        entries: list[HarvestedUrl] = []
        for record in self._drain(channel):
            if exclude_subdomains and is_subdomain(record.url, domain):
                continue
            try:
                url = normalize_url(record.url)
            except UrlParseError as exc:
                log.info("url_parse_error", url=record.url, error=str(exc))
                continue
            except Exception as exc:  # noqa: BLE001
                log.error(
                    "unexpected_normalize_error",
                    url=record.url,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue
            entries.append(HarvestedUrl(url=url, timestamp=record.timestamp))
        log.debug("domain_harvested", entries=len(entries))
        return entries

    def collect_versions(self, urls: Iterable[str]) -> list[str]:
        archive = next(
            (source for source in self.sources if isinstance(source, WaybackArchiveSource)),
            None,
        )
        if archive is None:
            if self.http is None:
                self.logger.warning("versions_unavailable", reason="no archive source")
                return []
            archive = WaybackArchiveSource(self.http, self.settings)
        versions: list[str] = []
        for url in urls:
            if not url:
                self.logger.info("empty_domain_skipped")
                continue
            try:
                result = archive.versions(url)
            except FetchError as exc:
                self.logger.warning("versions_failed", url=url, error=str(exc))
                continue
            if result.warnings:
                self.logger.debug("versions_warnings", url=url, warnings=result.warnings)
            versions.extend(record.url for record in result.records)
        return dedupe(versions)

    # ------------------------------------------------------------------
    def _produce(
        self,
        source: UrlSource,
        domain: str,
        exclude_subdomains: bool,
        channel: queue.Queue,
    ) -> None:
        log = self.logger.bind(domain=domain, source=source.name)
        try:
            result = source.fetch(domain, exclude_subdomains)
        except FetchError as exc:
            log.warning("source_failed", error=str(exc))
            return
        except Exception as exc:  # noqa: BLE001
            log.error("source_crashed", error=str(exc), error_type=type(exc).__name__)
            return
        if result.warnings:
            log.debug("source_warnings", count=len(result.warnings), warnings=result.warnings[:20])
        for record in result.records:
            channel.put(record)
        log.debug("source_done", records=len(result.records))

    @staticmethod
    def _drain(channel: queue.Queue) -> Iterable[WaybackRecord]:
        while True:
            item = channel.get()
            if item is _CLOSED:
                return
            yield item


__all__ = ["CDX_TIMESTAMP_FORMAT", "HarvestResult", "HarvestedUrl", "Orchestrator"]
