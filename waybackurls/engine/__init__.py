"""Engine components behind the fetch → normalise → dedup pipeline."""

from .dedup import dedupe, dedupe_by
from .fan_out import FanOutPool, SourceTask
from .fetcher import FetchError, FetchResponse, HttpFetcher
from .normalize import UrlParseError, is_subdomain, normalize_url

__all__ = [
    "FanOutPool",
    "FetchError",
    "FetchResponse",
    "HttpFetcher",
    "SourceTask",
    "UrlParseError",
    "dedupe",
    "dedupe_by",
    "is_subdomain",
    "normalize_url",
]
