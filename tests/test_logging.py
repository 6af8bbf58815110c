"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from repoforge.logging import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def _records(log_dir: Path) -> list[dict[str, object]]:
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.flush()
    lines = (log_dir / "repoforge.log").read_text().strip().splitlines()
    return [json.loads(line) for line in lines]


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("tool_call", extra={"tool": "compile_repo_spec", "args_data": {"bundles": []}})
        (record,) = _records(tmp_path)
        assert record["msg"] == "tool_call"
        assert record["tool"] == "compile_repo_spec"
        assert record["args"] == {"bundles": []}
        assert record["level"] == "INFO"

    def test_duration_and_exception(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("timed", extra={"duration_ms": 12.5})
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.error("tool_error", exc_info=True)
        timed, failed = _records(tmp_path)
        assert timed["duration_ms"] == 12.5
        assert "tool" not in timed
        assert failed["exception"] == "boom"

    def test_child_loggers_propagate(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)
        logging.getLogger("repoforge.config").warning("from child")
        assert _records(tmp_path)[0]["logger"] == "repoforge.config"

    def test_debug_records_filtered(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        assert logger.level == logging.INFO
        logging.getLogger("repoforge.resolver").debug("not written")
        logger.info("written")
        assert [r["msg"] for r in _records(tmp_path)] == ["written"]

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        setup_logging(tmp_path / "nested" / "logs")
        assert (tmp_path / "nested" / "logs" / "repoforge.log").exists()

    def test_idempotent_setup(self, tmp_path: Path) -> None:
        first = setup_logging(tmp_path)
        second = setup_logging(tmp_path)
        assert first is second
        assert len(first.handlers) == 1

    def test_new_directory_replaces_handler(self, tmp_path: Path) -> None:
        setup_logging(tmp_path / "one")
        logger = setup_logging(tmp_path / "two")
        handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].baseFilename.endswith(str(Path("two") / "repoforge.log"))

    def test_concurrent_setup(self, tmp_path: Path) -> None:
        barrier = threading.Barrier(4)
        results: list[logging.Logger] = []

        def call_setup() -> None:
            barrier.wait()
            results.append(setup_logging(tmp_path))

        threads = [threading.Thread(target=call_setup) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1
