"""Token-driven stylesheet generator for the VaultTrack GUI."""

from __future__ import annotations

from typing import Any

DARK_TOKENS: dict[str, str] = {
    "color.background": "#111827",
    "color.surface": "#1f2937",
    "color.border": "#374151",
    "color.text": "#f9fafb",
    "color.muted": "#9ca3af",
    "color.primary": "#9333ea",
    "color.danger": "#ef4444",
    "color.success": "#10b981",
    "color.warning": "#f97316",
    "font.family": "Inter",
    "radius.small": "8",
    "radius.large": "16",
}

LIGHT_TOKENS: dict[str, str] = {
    **DARK_TOKENS,
    "color.background": "#f9fafb",
    "color.surface": "#ffffff",
    "color.border": "#e5e7eb",
    "color.text": "#111827",
    "color.muted": "#6b7280",
}

LEVEL_COLORS: dict[str, str] = {
    "ok": "color.success",
    "warning": "color.warning",
    "danger": "color.danger",
}


def load_tokens(dark_mode: bool = True) -> dict[str, str]:
    return dict(DARK_TOKENS if dark_mode else LIGHT_TOKENS)


def _resolve(token_map: dict[str, Any], key: str, fallback: str) -> str:
    value = token_map.get(key, fallback)
    return str(value)


def level_color(level: str, tokens: dict[str, Any] | None = None) -> str:
    """Colour used for the usage bar and percentage at ``level``."""

    tokens = tokens or load_tokens()
    return _resolve(tokens, LEVEL_COLORS.get(level, "color.success"), "#10b981")


def build_stylesheet(tokens: dict[str, Any] | None = None) -> str:
    """Return a QSS stylesheet composed from design tokens."""

    tokens = tokens or load_tokens()
    background = _resolve(tokens, "color.background", "#111827")
    surface = _resolve(tokens, "color.surface", "#1f2937")
    border = _resolve(tokens, "color.border", "#374151")
    text = _resolve(tokens, "color.text", "#f9fafb")
    muted = _resolve(tokens, "color.muted", "#9ca3af")
    primary = _resolve(tokens, "color.primary", "#9333ea")
    danger = _resolve(tokens, "color.danger", "#ef4444")
    font_family = _resolve(tokens, "font.family", "Inter")
    radius_small = _resolve(tokens, "radius.small", "8")
    radius_large = _resolve(tokens, "radius.large", "16")

    return f"""
    QWidget {{
        font-family: {font_family};
        color: {text};
        background-color: {background};
    }}
    QGroupBox {{
        background-color: {surface};
        border: 1px solid {border};
        border-radius: {radius_large}px;
        margin-top: 16px;
        padding: 16px;
        font-weight: 600;
    }}
    QGroupBox:title {{
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 8px;
        color: {primary};
    }}
    QLabel#StatValue {{
        font-size: 22pt;
        font-weight: 700;
    }}
    QLabel#Muted {{
        color: {muted};
    }}
    QLabel#ErrorBanner {{
        background-color: {danger};
        color: white;
        border-radius: {radius_small}px;
        padding: 8px;
    }}
    QPushButton {{
        background-color: {primary};
        color: white;
        border-radius: {radius_small}px;
        padding: 8px 16px;
        font-weight: 600;
    }}
    QPushButton#DangerButton {{
        background-color: {danger};
    }}
    QPushButton:disabled {{
        background-color: {border};
        color: {muted};
    }}
    QLineEdit, QDoubleSpinBox, QDateEdit, QComboBox {{
        background-color: {surface};
        border: 1px solid {border};
        border-radius: {radius_small}px;
        padding: 6px;
    }}
    QTableWidget {{
        background-color: {surface};
        border: 1px solid {border};
        border-radius: {radius_small}px;
        gridline-color: {border};
        selection-background-color: {primary};
        selection-color: white;
    }}
    QHeaderView::section {{
        background-color: {surface};
        font-weight: 600;
        padding: 8px;
        border: none;
    }}
    QProgressBar {{
        background-color: {border};
        border-radius: {radius_small}px;
        text-align: center;
    }}
    """


def apply_tokens(dark_mode: bool = True) -> str:
    """Load the tokens for the requested theme and return a stylesheet."""

    return build_stylesheet(load_tokens(dark_mode))


__all__ = ["apply_tokens", "build_stylesheet", "level_color", "load_tokens"]
