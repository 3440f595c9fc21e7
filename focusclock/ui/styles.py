"""QSS stylesheet, background colours and mode colours for FocusClock."""

from __future__ import annotations

from ..timer.engine import TimerMode

# ── backgrounds ─────────────────────────────────────────────────────────
#    Ids are what ``Settings.background`` stores.  Unknown ids fall back
#    to "default" so an old or hand-edited value never breaks the window.

BACKGROUNDS: dict[str, str] = {
    "default":      "#F8F9FA",
    # yellows
    "yellow-light": "#FFF8E6",
    "yellow":       "#FFF3CD",
    "yellow-dark":  "#FFE5B4",
    # reds
    "red-light":    "#FFE5E5",
    "red":          "#FFCDD2",
    # blues
    "blue-light":   "#E6F7FF",
    "blue":         "#BBDEFB",
    "blue-dark":    "#90CAF9",
    # greens
    "green-light":  "#E6FFEE",
    "green":        "#C8E6C9",
    # purples
    "purple-light": "#F0F0FF",
    "purple":       "#E1BEE7",
    # pinks
    "pink-light":   "#FFEBEE",
    "pink":         "#FCE4EC",
    # grays
    "gray-light":   "#F5F5F5",
}

DEFAULT_BACKGROUND = "default"

# ── ring colours (primary arc, track) ───────────────────────────────────

MODE_COLORS: dict[TimerMode, tuple[str, str]] = {
    TimerMode.POMODORO:  ("#FF6B6B", "#E9ECEF"),   # warm coral
    TimerMode.STOPWATCH: ("#4ECDC4", "#E9ECEF"),   # cool teal
    TimerMode.COUNTDOWN: ("#A18CD1", "#E9ECEF"),   # calm purple
}

BREAK_COLOR = "#4ECDC4"

_PALETTE: dict[str, str] = {
    "surface":    "rgba(255, 255, 255, 0.75)",
    "accent":     "#FF6B6B",
    "text":       "#1F2937",
    "text_muted": "#6B7280",
    "border":     "#D1D5DB",
}


def background_color(background_id: str) -> str:
    return BACKGROUNDS.get(background_id, BACKGROUNDS[DEFAULT_BACKGROUND])


def build_stylesheet(background_id: str) -> str:
    """Full-window QSS for the given background id."""
    p = _PALETTE
    bg = background_color(background_id)
    return f"""
QWidget#root {{
    background-color: {bg};
}}
QFrame#card {{
    background-color: {p['surface']};
    border: 1px solid {p['border']};
    border-radius: 16px;
}}
QLabel {{
    color: {p['text']};
}}
QLabel#mutedLabel {{
    color: {p['text_muted']};
    font-size: 12px;
}}
QLabel#statValue {{
    font-size: 22px;
    font-weight: 600;
}}
QPushButton {{
    border: 1px solid {p['border']};
    border-radius: 8px;
    padding: 6px 16px;
    background-color: white;
    color: {p['text']};
}}
QPushButton#modeButton:checked,
QPushButton#primaryButton {{
    background-color: {p['accent']};
    border-color: {p['accent']};
    color: white;
}}
QComboBox, QSpinBox {{
    padding: 4px 8px;
    border: 1px solid {p['border']};
    border-radius: 6px;
    background-color: white;
}}
"""
