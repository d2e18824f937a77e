from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from vaulttrack import logging as runtime_logging
from vaulttrack.logging import configure_cli_logging, setup_logger


@pytest.fixture(autouse=True)
def isolate_logging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Reset handlers and run inside a temporary working directory."""

    monkeypatch.chdir(tmp_path)
    yield
    for logger in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger, logging.Logger):
            for handler in logger.handlers:
                handler.close()
            logger.handlers = []
            logger.setLevel(logging.NOTSET)


def test_setup_logger_resolves_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(runtime_logging.LEVEL_ENV_FLAG, "DEBUG")
    logger = setup_logger("vaulttrack.tests.level")

    assert logger.isEnabledFor(logging.DEBUG)
    console = [h for h in logger.handlers if getattr(h, runtime_logging.HANDLER_TAG, None) == "console"]
    assert len(console) == 1
    assert console[0].formatter._fmt == runtime_logging.CONSOLE_FORMAT


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("vaulttrack.tests.idempotent")
    second = setup_logger("vaulttrack.tests.idempotent", level="WARNING")
    assert first is second
    assert len(second.handlers) == 1


def test_setup_logger_emits_json_payload() -> None:
    logger = setup_logger("vaulttrack.tests.json", json_format=True)
    logger.info(
        "request handled",
        extra={"method": "POST", "path": "/api/expenses", "status_code": 201, "duration_ms": 4.25},
    )
    for handler in logger.handlers:
        handler.flush()

    lines = runtime_logging.LOG_PATH.read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[0])
    assert record["message"] == "request handled"
    assert record["source"] == "vaulttrack.tests.json"
    assert record["method"] == "POST"
    assert record["status_code"] == 201
    assert record["duration_ms"] == pytest.approx(4.25)
    assert record["expense_id"] is None


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("db down")
    except RuntimeError:
        record = logging.getLogger("x").makeRecord(
            "x", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
        )
    payload = json.loads(runtime_logging.JsonAuditFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert "db down" in payload["exception"]


def test_configure_cli_logging_toggles_json_env() -> None:
    configure_cli_logging(json_logs=True)
    assert os.environ.get(runtime_logging.JSON_ENV_FLAG) == "1"
    package_logger = logging.getLogger("vaulttrack")
    assert any(getattr(h, runtime_logging.HANDLER_TAG, None) == "json" for h in package_logger.handlers)

    configure_cli_logging(json_logs=False)
    assert runtime_logging.JSON_ENV_FLAG not in os.environ
