"""Infrastructure helpers for VaultTrack (paths, local settings)."""

from .paths import (
    DEFAULT_ARTIFACT_ROOT,
    DEFAULT_LOG_ROOT,
    DEFAULT_REPORT_ROOT,
    DEFAULT_SETTINGS_PATH,
    report_path,
    settings_path,
)
from .settings import JsonFileSettingsStore, MemorySettingsStore, SettingsStore

__all__ = [
    "DEFAULT_ARTIFACT_ROOT",
    "DEFAULT_LOG_ROOT",
    "DEFAULT_REPORT_ROOT",
    "DEFAULT_SETTINGS_PATH",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "SettingsStore",
    "report_path",
    "settings_path",
]
