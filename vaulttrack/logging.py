"""Structured logging helpers shared by the VaultTrack backend and client.

Every package logger gets one console handler and, on request, one JSON-lines
file handler. Handlers are tagged with ``HANDLER_TAG`` so repeated setup calls
adjust the existing handler instead of stacking a new one.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Final

from vaulttrack.infra.paths import DEFAULT_LOG_ROOT

CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL: Final[str] = "INFO"
LOG_DIR: Final[Path] = DEFAULT_LOG_ROOT
LOG_PATH: Final[Path] = LOG_DIR / "vaulttrack.log"
JSON_ENV_FLAG: Final[str] = "VAULTTRACK_JSON_LOGS"
LEVEL_ENV_FLAG: Final[str] = "VAULTTRACK_LOG_LEVEL"
LOGGER_PREFIXES: Final[tuple[str, ...]] = ("vaulttrack", "backend")
HANDLER_TAG: Final[str] = "_vaulttrack_handler"

# Optional ``extra=`` fields copied into the JSON payload, with their coercion.
_REQUEST_FIELDS: Final[tuple[tuple[str, Callable[[object], object]], ...]] = (
    ("method", lambda value: value),
    ("path", lambda value: value),
    ("status_code", lambda value: _coerce_int(value)),
    ("duration_ms", lambda value: _coerce_number(value)),
    ("expense_id", lambda value: value),
)


class JsonAuditFormatter(logging.Formatter):
    """Render log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        for field, coerce in _REQUEST_FIELDS:
            value = getattr(record, field, None)
            payload[field] = None if value is None else coerce(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _coerce_number(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _coerce_int(value: object) -> int | None:
    number = _coerce_number(value)
    return None if number is None else int(number)


def _resolve_level(level: str | int | None) -> int:
    """Pick the level from the environment first, then the caller, then INFO."""

    requested = os.environ.get(LEVEL_ENV_FLAG) or level or DEFAULT_LEVEL
    if isinstance(requested, int):
        return requested
    resolved = logging.getLevelName(str(requested).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _json_logging_enabled(explicit: bool) -> bool:
    if explicit:
        return True
    return os.environ.get(JSON_ENV_FLAG, "").strip().lower() in {"1", "true", "yes", "on"}


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _json_file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    handler.setFormatter(JsonAuditFormatter())
    return handler


def _attach_once(
    logger: logging.Logger,
    kind: str,
    level: int,
    build: Callable[[], logging.Handler],
) -> logging.Handler:
    for handler in logger.handlers:
        if getattr(handler, HANDLER_TAG, None) == kind:
            handler.setLevel(level)
            return handler
    handler = build()
    handler.setLevel(level)
    setattr(handler, HANDLER_TAG, kind)
    logger.addHandler(handler)
    return handler


def setup_logger(
    name: str,
    json_format: bool = False,
    level: str | int | None = None,
) -> logging.Logger:
    """Configure and return a logger with a console handler and optional JSON file."""

    resolved_level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved_level)
    # Keep propagating so capture handlers such as pytest's caplog still see records.
    logger.propagate = True
    _attach_once(logger, "console", resolved_level, _console_handler)
    if _json_logging_enabled(json_format):
        _attach_once(logger, "json", resolved_level, _json_file_handler)
    return logger


def configure_cli_logging(json_logs: bool, level: str | int | None = None) -> None:
    """Reconfigure the package loggers for a CLI run.

    Module loggers created with ``logging.getLogger(__name__)`` carry no
    handlers of their own and propagate to these package loggers.
    """

    if json_logs:
        os.environ[JSON_ENV_FLAG] = "1"
    else:
        os.environ.pop(JSON_ENV_FLAG, None)
    for root_name in LOGGER_PREFIXES:
        setup_logger(root_name, json_format=json_logs, level=level)


__all__ = [
    "CONSOLE_FORMAT",
    "HANDLER_TAG",
    "JsonAuditFormatter",
    "LOG_PATH",
    "configure_cli_logging",
    "setup_logger",
]
