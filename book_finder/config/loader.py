"""Configuration loading helpers for book_finder."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import FinderConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "config.yaml"


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
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve config and log paths from the project root."""

    project_root: Path | None = None
    logs_dir: Path | None = None
    config_path: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get("BOOK_FINDER_HOME")
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()
        if self.config_path is None:
            self.config_path = root / CONFIG_FILENAME

    def ensure_directories(self) -> None:
        for directory in (self.project_root, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)


class ConfigRepository:
    """Load and persist ``FinderConfig`` with schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: FinderConfig | None = None

    def load(self) -> FinderConfig:
        if self._cache is not None:
            return self._cache
        path = self.locator.config_path
        if path.exists():
            config = FinderConfig.model_validate(_read_file(path))
        else:
            config = FinderConfig()
            self.save(config)
        self._cache = config
        return config

    def save(self, config: FinderConfig) -> Path:
        path = self.locator.config_path
        if path.suffix not in CONFIG_EXTENSIONS:
            raise ValueError(f"Unsupported config extension: {path.suffix}")
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_file(path, config.model_dump(mode="json"))
        self._cache = config
        return path


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository"]
