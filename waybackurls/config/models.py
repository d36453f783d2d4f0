"""Pydantic models used across the waybackurls configuration flow."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SourceName = Literal["wayback", "commoncrawl", "virustotal"]
DEFAULT_LOG_PATH = Path("logs/waybackurls.log")


class FetchOptions(BaseModel):
    """Immutable per-invocation options for a harvest run."""

    model_config = ConfigDict(frozen=True)

    domains: tuple[str, ...] = ()
    include_dates: bool = False
    exclude_subdomains: bool = False
    versions_only: bool = False

    @field_validator("domains", mode="before")
    @classmethod
    def _coerce_domains(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("domains expects a sequence of strings, not a single string")
        return tuple(str(item) for item in value)

    @classmethod
    def default(cls, domains: Sequence[str]) -> "FetchOptions":
        return cls(domains=tuple(domains))


class HarvestSettings(BaseModel):
    """Endpoints, credentials and runtime knobs shared by every run."""

    wayback_endpoint: str = "http://web.archive.org/cdx/search/cdx"
    commoncrawl_endpoint: str = "http://index.commoncrawl.org"
    commoncrawl_index: str = "CC-MAIN-2018-22"
    virustotal_endpoint: str = "https://www.virustotal.com/vtapi/v2/domain/report"
    virustotal_api_key: str | None = None
    # None disables the request timeout entirely.
    request_timeout: float | None = None
    user_agent: str = "waybackurls (+https://web.archive.org)"
    thread_pool_workers: int = 4
    log_path: Path = Field(default=DEFAULT_LOG_PATH)
    sources: list[SourceName] = Field(
        default_factory=lambda: ["wayback", "commoncrawl", "virustotal"]
    )

    @field_validator("virustotal_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("log_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        if value in (None, ""):
            return DEFAULT_LOG_PATH
        return Path(value)

    @model_validator(mode="after")
    def _validate_ranges(self) -> "HarvestSettings":
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0 or null")
        if self.thread_pool_workers < 1:
            raise ValueError("thread_pool_workers must be >= 1")
        if not self.sources:
            raise ValueError("at least one source must be enabled")
        if len(set(self.sources)) != len(self.sources):
            raise ValueError("sources must not contain duplicates")
        return self

    def commoncrawl_url(self) -> str:
        return f"{self.commoncrawl_endpoint.rstrip('/')}/{self.commoncrawl_index}-index"

    def masked_api_key(self) -> str:
        key = self.virustotal_api_key
        if not key:
            return "-"
        return key[:4] + "*" * max(len(key) - 4, 0)


__all__ = ["DEFAULT_LOG_PATH", "FetchOptions", "HarvestSettings", "SourceName"]
