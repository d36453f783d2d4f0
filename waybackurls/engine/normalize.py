"""URL normalisation and host filtering applied to harvested records."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit, urlunsplit

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_HOST_CHARS = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:\[\]%]*")


class UrlParseError(ValueError):
    """Raised when a raw URL is not syntactically valid."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"parse {url!r}: {reason}")
        self.url = url
        self.reason = reason


def _split(raw_url: str) -> SplitResult:
    if _CONTROL_CHARS.search(raw_url):
        raise UrlParseError(raw_url, "invalid control character in URL")
    if _BAD_ESCAPE.search(raw_url):
        raise UrlParseError(raw_url, "invalid URL escape")
    try:
        parts = urlsplit(raw_url)
        # Accessing port validates it; urlsplit defers that check.
        parts.port
    except ValueError as exc:
        raise UrlParseError(raw_url, str(exc)) from exc
    host = parts.netloc.rpartition("@")[2]
    if not _HOST_CHARS.fullmatch(host):
        raise UrlParseError(raw_url, "invalid character in host name")
    return parts


def normalize_url(raw_url: str) -> str:
    """Drop the scheme from ``raw_url`` and any leading ``//`` left behind.

    >>> normalize_url("https://example.com/a")
    'example.com/a'
    """

    parts = _split(raw_url)
    path = urlunsplit(("", parts.netloc, parts.path, "", ""))
    # An empty "?" is kept as written.
    if parts.query or "?" in raw_url.partition("#")[0]:
        path = f"{path}?{parts.query}"
    if parts.fragment:
        path = f"{path}#{parts.fragment}"
    if path.startswith("//"):
        path = path[2:]
    return path


def is_subdomain(raw_url: str, domain: str) -> bool:
    """Return True when the URL's host is not exactly ``domain``.

    URLs whose host cannot be determined are kept (False).
    """

    try:
        hostname = _split(raw_url).hostname
    except UrlParseError:
        return False
    if not hostname:
        return False
    return hostname.lower() != domain.lower()


__all__ = ["UrlParseError", "is_subdomain", "normalize_url"]
