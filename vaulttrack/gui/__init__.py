"""Optional PySide6 desktop dashboard."""

from .main import launch_gui

__all__ = ["launch_gui"]
