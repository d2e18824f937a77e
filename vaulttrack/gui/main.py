"""Desktop entry point: ``vaulttrack-gui`` opens the expense dashboard."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from vaulttrack.client.api import ExpenseApiClient
from vaulttrack.client.controller import ExpenseController
from vaulttrack.infra.settings import JsonFileSettingsStore
from vaulttrack.logging import setup_logger

LOG = logging.getLogger(__name__)

_INSTALL_HINT = "pip install .[gui]"


def _ensure_qt() -> tuple[object, object, object] | None:
    """Import PySide6 lazily; ``None`` when the GUI extra is not installed."""

    try:  # pragma: no cover - optional dependency resolution
        from PySide6 import QtCore, QtGui, QtWidgets
    except ImportError as exc:  # pragma: no cover - optional dependency resolution
        LOG.error("PySide6 is missing; install the GUI extra with `%s` (%s)", _INSTALL_HINT, exc)
        return None
    return QtCore, QtGui, QtWidgets


def build_controller(cfg: dict[str, Any] | None = None) -> ExpenseController:
    """Wire the HTTP client and the settings file into a controller."""

    options = cfg or {}
    api = ExpenseApiClient(options.get("api_url"), timeout=options.get("timeout"))
    return ExpenseController(api, JsonFileSettingsStore(options.get("settings_path")))


def launch_gui(
    cfg: dict[str, Any] | None = None,
    *,
    controller: ExpenseController | None = None,
    auto_exec: bool = True,
) -> bool:
    """Open the dashboard window; returns ``False`` when Qt is unavailable."""

    qt_modules = _ensure_qt()
    if qt_modules is None:
        return False
    _qt_core, _qt_gui, QtWidgets = qt_modules
    from .mainwindow import ExpenseMainWindow

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv or ["vaulttrack-gui"])
    window = ExpenseMainWindow(
        controller=controller or build_controller(cfg),
        app=app,
    )
    window.show()
    if auto_exec:
        app.exec()
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="VaultTrack desktop dashboard")
    parser.add_argument("--api-url", help="Base URL of the expense API")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument(
        "--no-exec",
        action="store_true",
        help="Build the window without entering the Qt event loop",
    )
    args = parser.parse_args(argv)
    setup_logger("vaulttrack")
    launched = launch_gui(
        {"api_url": args.api_url, "timeout": args.timeout},
        auto_exec=not args.no_exec,
    )
    return 0 if launched else 1


__all__ = ["build_controller", "launch_gui", "main"]
