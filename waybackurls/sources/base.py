"""Shared record types and the contract every URL source implements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class WaybackRecord:
    """One URL reported by a source, with its source-specific timestamp."""

    timestamp: str
    url: str


@dataclass(slots=True)
class FetchResult:
    """Records from one fetch plus the per-record problems that were skipped."""

    records: list[WaybackRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add(self, url: str, timestamp: str = "") -> None:
        self.records.append(WaybackRecord(timestamp=timestamp, url=url))

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@runtime_checkable
class UrlSource(Protocol):
    """Query one archive or index service for the URLs known under a domain.

    ``fetch`` raises :class:`~waybackurls.engine.fetcher.FetchError` when the
    whole request fails and reports malformed entries through
    ``FetchResult.warnings`` instead.
    """

    name: str

    def fetch(self, domain: str, exclude_subdomains: bool) -> FetchResult:
        ...


def url_pattern(domain: str, exclude_subdomains: bool) -> str:
    """Index query matching every path under ``domain`` (and its subdomains)."""

    wildcard = "" if exclude_subdomains else "*."
    return f"{wildcard}{domain}/*"


__all__ = ["FetchResult", "UrlSource", "WaybackRecord", "url_pattern"]
