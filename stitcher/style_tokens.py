"""Design tokens and QSS generator for the stitcher window.

Each theme is a :class:`Colors` palette; :func:`apply_theme` swaps the
application style sheet so switching themes at runtime does not stack QSS.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from . import config


@dataclass(frozen=True)
class Colors:
    text: str = "#111827"
    text_muted: str = "#6b7280"
    background: str = "#f9fafb"
    surface: str = "#ffffff"
    border: str = "#e5e7eb"
    focus: str = "#1d4ed8"
    primary: str = "#0a58ca"
    primary_hover: str = "#094db3"
    danger: str = "#b91c1c"
    drag_over: str = "#dbeafe"


@dataclass(frozen=True)
class Radius:
    sm: int = 4
    md: int = 6


SPACING_UNIT = 4  # px


def space(n: int) -> int:
    """Return spacing in pixels based on a 4px scale."""
    return max(0, int(n) * SPACING_UNIT)


THEMES: Dict[str, Colors] = {
    "light": Colors(),
    "dark": Colors(
        text="#e5e7eb",
        text_muted="#9ca3af",
        background="#0f172a",
        surface="#111827",
        border="#334155",
        focus="#60a5fa",
        primary="#60a5fa",
        primary_hover="#3b82f6",
        danger="#f87171",
        drag_over="#1e3a8a",
    ),
}


def normalize_theme(name: str | None) -> str:
    """Return *name* if it is a known theme, else the default theme."""
    value = str(name or "").lower()
    return value if value in config.THEMES else config.DEFAULT_THEME


def build_qss(colors: Colors, radius: Radius = Radius()) -> str:
    """Return QSS string using design tokens."""
    return f"""
QWidget {{ color: {colors.text}; }}
QMainWindow, QDialog {{ background-color: {colors.background}; }}

QPushButton {{
    background-color: {colors.primary};
    color: #ffffff;
    border: 1px solid {colors.primary};
    border-radius: {radius.md}px;
    padding: {space(1)}px {space(3)}px;
    min-height: 28px;
}}
QPushButton:hover {{ background-color: {colors.primary_hover}; }}
QPushButton:disabled {{ background-color: {colors.border}; border-color: {colors.border}; color: {colors.text_muted}; }}
QPushButton#discardButton {{ background-color: {colors.danger}; border-color: {colors.danger}; }}
QPushButton#discardButton[dragOver="true"] {{ border: 2px dashed {colors.text}; }}

QLabel#dropZone {{
    background-color: {colors.surface};
    border: 2px dashed {colors.border};
    border-radius: {radius.md}px;
    color: {colors.text_muted};
    padding: {space(4)}px;
}}
QLabel#dropZone[dragOver="true"] {{ background-color: {colors.drag_over}; border-color: {colors.focus}; }}

ImageListWidget {{
    background-color: {colors.surface};
    border: 1px solid {colors.border};
    border-radius: {radius.sm}px;
}}
ImageListWidget::item {{ padding: {space(1)}px; }}
ImageListWidget::item:selected {{ background-color: {colors.drag_over}; color: {colors.text}; }}

QScrollArea#resultArea {{ background-color: {colors.surface}; border: 1px solid {colors.border}; }}
QComboBox {{ background-color: {colors.surface}; border: 1px solid {colors.border}; border-radius: {radius.sm}px; padding: {space(1)}px; }}
"""


def get_colors(theme: str) -> Colors:
    return THEMES[normalize_theme(theme)]


def apply_theme(app, theme: str) -> str:
    """Replace *app*'s style sheet with *theme*'s QSS; returns the theme used."""
    chosen = normalize_theme(theme)
    app.setStyleSheet(build_qss(THEMES[chosen]))
    return chosen
