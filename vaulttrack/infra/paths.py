"""Filesystem locations used by the VaultTrack client and logging layers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

DEFAULT_ARTIFACT_ROOT: Final[Path] = Path("artifacts")
DEFAULT_REPORT_ROOT: Final[Path] = DEFAULT_ARTIFACT_ROOT / "reports"
DEFAULT_LOG_ROOT: Final[Path] = DEFAULT_ARTIFACT_ROOT / "logs"
DEFAULT_SETTINGS_PATH: Final[Path] = DEFAULT_ARTIFACT_ROOT / "settings.json"
SETTINGS_ENV_FLAG: Final[str] = "VAULTTRACK_SETTINGS_PATH"


def settings_path() -> Path:
    """Return the settings file, honouring ``VAULTTRACK_SETTINGS_PATH``."""

    override = os.environ.get(SETTINGS_ENV_FLAG, "").strip()
    return Path(override) if override else DEFAULT_SETTINGS_PATH


def report_path(filename: str, base: str | Path = DEFAULT_REPORT_ROOT) -> Path:
    """Return ``base / filename`` after creating ``base``."""

    root = Path(base)
    root.mkdir(parents=True, exist_ok=True)
    return root / filename


__all__ = [
    "DEFAULT_ARTIFACT_ROOT",
    "DEFAULT_LOG_ROOT",
    "DEFAULT_REPORT_ROOT",
    "DEFAULT_SETTINGS_PATH",
    "SETTINGS_ENV_FLAG",
    "report_path",
    "settings_path",
]
