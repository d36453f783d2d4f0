"""Harvest historical URLs for domains from web archives and crawl indexes."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .config import FetchOptions, HarvestSettings
from .logging_conf import configure_logging
from .orchestrator import HarvestedUrl, HarvestResult, Orchestrator

__version__ = "0.1.0"


def harvest(
    domains: Sequence[str],
    log_path: Path | str | None = None,
    *,
    exclude_subdomains: bool = False,
    versions_only: bool = False,
    settings: HarvestSettings | None = None,
) -> list[str]:
    """Return the deduplicated, scheme-less URLs known for ``domains``.

    With ``versions_only`` the snapshot URLs of each input URL are returned
    instead. Only a failure to set up logging raises; source failures just
    shrink the result.
    """

    settings = settings or HarvestSettings()
    logger = configure_logging(log_path or settings.log_path)
    options = FetchOptions(
        domains=tuple(domains),
        exclude_subdomains=exclude_subdomains,
        versions_only=versions_only,
    )
    with Orchestrator(settings, logger=logger.bind(component="orchestrator")) as orchestrator:
        result = orchestrator.run(options)
    return result.versions if versions_only else result.urls


__all__ = [
    "FetchOptions",
    "HarvestResult",
    "HarvestSettings",
    "HarvestedUrl",
    "Orchestrator",
    "__version__",
    "harvest",
]
