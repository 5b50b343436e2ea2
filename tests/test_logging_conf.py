from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog

from book_finder import logging_conf


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging_conf, "_LOGGING_INITIALISED", False)
    yield
    structlog.reset_defaults()
    for handler in list(logging.getLogger("book_finder").handlers):
        handler.close()
        logging.getLogger("book_finder").removeHandler(handler)


def test_configure_logging_writes_json_files(tmp_path: Path, fresh_logging) -> None:
    logger = logging_conf.configure_logging(log_dir=tmp_path)
    logger.info("search_completed", returned=3)
    logger.error("search_fetch_failed", url="/search?q=x")
    for handler in logging.getLogger("book_finder").handlers:
        handler.flush()

    info_lines = logging_conf.tail_log(tmp_path / "finder.log")
    error_lines = logging_conf.tail_log(tmp_path / "error.log")
    assert len(info_lines) == 2
    assert len(error_lines) == 1
    record = json.loads(info_lines[0])
    assert record["event"] == "search_completed"
    assert record["returned"] == 3


def test_configure_logging_console_only(fresh_logging) -> None:
    logging_conf.configure_logging(verbose=True)
    handlers = logging.getLogger("book_finder").handlers
    assert [type(h).__name__ for h in handlers] == ["StreamHandler"]
    assert logging.getLogger("book_finder").level == logging.DEBUG


def test_tail_log_missing_file(tmp_path: Path) -> None:
    assert logging_conf.tail_log(tmp_path / "absent.log") == []
