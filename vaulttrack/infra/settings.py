"""Local key-value persistence for client preferences such as the budget."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from .paths import settings_path

LOG = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Minimal get/set surface the client needs from a settings backend."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemorySettingsStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so values behave like the file store.
        self._values[key] = json.loads(json.dumps(value))


class JsonFileSettingsStore:
    """Persist settings as one JSON object, rewritten on every ``set``."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOG.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOG.warning("Settings file %s does not hold an object; resetting", self._path)
            return {}
        return payload

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        values = self._load()
        values[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)
        LOG.debug("Stored setting %s in %s", key, self._path)


__all__ = ["JsonFileSettingsStore", "MemorySettingsStore", "SettingsStore"]
