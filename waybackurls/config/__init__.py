"""Configuration package exports."""

from .loader import API_KEY_ENV, ConfigLocator, ConfigRepository
from .models import DEFAULT_LOG_PATH, FetchOptions, HarvestSettings, SourceName

__all__ = [
    "API_KEY_ENV",
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_LOG_PATH",
    "FetchOptions",
    "HarvestSettings",
    "SourceName",
]
