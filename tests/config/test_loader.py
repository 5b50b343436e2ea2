from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from book_finder.config.loader import ConfigLocator, ConfigRepository
from book_finder.config.models import FinderConfig
from book_finder.models import BookOptions


def test_config_locator_uses_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOOK_FINDER_HOME", str(tmp_path))
    locator = ConfigLocator()
    assert locator.project_root == tmp_path.resolve()
    assert locator.config_path == tmp_path.resolve() / "config.yaml"
    assert locator.logs_dir == tmp_path.resolve() / "logs"
    locator.ensure_directories()
    assert locator.logs_dir.exists()


def test_repository_writes_defaults_on_first_load(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOOK_FINDER_HOME", raising=False)
    repo = ConfigRepository(ConfigLocator(project_root=tmp_path))
    config = repo.load()
    assert config == FinderConfig()
    payload = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
    assert payload["pool_size"] == 10
    assert payload["default_options"]["remove_dups"] is True


def test_repository_roundtrip(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOOK_FINDER_HOME", raising=False)
    repo = ConfigRepository(ConfigLocator(project_root=tmp_path))
    config = FinderConfig(
        pool_size=4,
        request_timeout=5.5,
        default_options=BookOptions(min_ratings=50, require_author=True),
    )
    repo.save(config)
    fresh = ConfigRepository(ConfigLocator(project_root=tmp_path))
    assert fresh.load() == config


def test_repository_reads_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOOK_FINDER_HOME", raising=False)
    path = tmp_path / "finder.json"
    path.write_text(json.dumps({"base_url": "https://books.example.com/", "pool_size": 3}), encoding="utf-8")
    repo = ConfigRepository(ConfigLocator(project_root=tmp_path, config_path=path))
    config = repo.load()
    assert config.base_url == "https://books.example.com"
    assert config.pool_size == 3


def test_repository_rejects_non_mapping(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOOK_FINDER_HOME", raising=False)
    (tmp_path / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigRepository(ConfigLocator(project_root=tmp_path)).load()
