"""Configuration loading helpers for waybackurls."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import HarvestSettings

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
SETTINGS_FILENAME = "waybackurls.yaml"
HOME_ENV = "WAYBACKURLS_HOME"
API_KEY_ENV = "VT_API_KEY"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the project root and the default settings file."""

    project_root: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser()
        else:
            root = self.project_root or Path.cwd()
        self.project_root = root.resolve()

    def settings_path(self) -> Path:
        return self.project_root / SETTINGS_FILENAME

    def resolve(self, path: Path) -> Path:
        """Anchor relative paths (such as the log file) at the project root."""

        if path.is_absolute():
            return path
        return (self.project_root / path).resolve()


class ConfigRepository:
    """Repository encapsulating settings IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: HarvestSettings | None = None

    def load_settings(self, path: Path | None = None) -> HarvestSettings:
        """Load settings from ``path`` (or the default file) and overlay the environment.

        An explicit ``path`` must exist; the default file is optional.
        """

        if path is None and self._cache is not None:
            return self._cache
        target = path or self.locator.settings_path()
        if target.suffix not in CONFIG_EXTENSIONS:
            raise ValueError(f"Unsupported configuration format: {target}")
        if target.exists():
            payload = _read_file(target)
        elif path is not None:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        else:
            payload = {}
        env_key = os.environ.get(API_KEY_ENV)
        if env_key:
            payload["virustotal_api_key"] = env_key
        settings = HarvestSettings.model_validate(payload)
        if path is None:
            self._cache = settings
        return settings

    def save_settings(self, settings: HarvestSettings, path: Path | None = None) -> Path:
        target = path or self.locator.settings_path()
        payload = settings.model_dump(mode="json", exclude={"virustotal_api_key"})
        _write_file(target, payload)
        if path is None:
            self._cache = None
        return target

    def log_path(self, settings: HarvestSettings, override: Path | None = None) -> Path:
        return self.locator.resolve(override or settings.log_path)


__all__ = [
    "API_KEY_ENV",
    "CONFIG_EXTENSIONS",
    "ConfigLocator",
    "ConfigRepository",
    "HOME_ENV",
    "SETTINGS_FILENAME",
]
