"""Shared pytest configuration for the VaultTrack client, CLI and GUI tests."""

from __future__ import annotations

import os
import sys
import tempfile
from collections.abc import Iterable
from pathlib import Path

import pytest


def _insert_repo_root() -> None:
    """Put the repository root on ``sys.path`` so the packages import without install."""

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_insert_repo_root()

# backend.config reads this on import; keep test databases out of the source tree.
os.environ.setdefault("VAULTTRACK_DB_PATH", os.path.join(tempfile.gettempdir(), "vaulttrack-tests.db"))


def pytest_report_header(config: pytest.Config) -> Iterable[str]:  # pragma: no cover - pytest hook
    root = Path.cwd()
    log_level = os.environ.get("VAULTTRACK_LOG_LEVEL", "INFO")
    return [f"VaultTrack repo: {root}", f"VAULTTRACK_LOG_LEVEL={log_level}"]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Default to INFO logging and keep settings files inside ``tmp_path``."""

    monkeypatch.setenv("VAULTTRACK_LOG_LEVEL", "INFO")
    monkeypatch.setenv("VAULTTRACK_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.delenv("VAULTTRACK_API_URL", raising=False)
    monkeypatch.delenv("VAULTTRACK_TIMEOUT", raising=False)
    monkeypatch.delenv("VAULTTRACK_JSON_LOGS", raising=False)
