"""User settings with JSON persistence in the local key-value store.

Settings live under the ``timerSettings`` key as a JSON object with the
same camelCase field names the browser version of the timer used::

    {"workDuration": 1500, "breakDuration": 300, "autoStartBreak": true,
     "autoStartPomodoro": true, "background": "default"}

Usage::

    settings = load_settings()
    settings.work_duration = 30 * 60
    save_settings(settings)

The store does no range checking; ``TimerEngine`` validates values
before they get here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields

from .database.db import get_item, set_item

logger = logging.getLogger(__name__)

SETTINGS_KEY = "timerSettings"

DEFAULT_WORK_DURATION = 25 * 60     # seconds
DEFAULT_BREAK_DURATION = 5 * 60
MAX_PHASE_DURATION = 60 * 60


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = DEFAULT_WORK_DURATION     # seconds
    break_duration: int = DEFAULT_BREAK_DURATION
    auto_start_break: bool = True
    auto_start_next_work: bool = True

    # ── appearance ────────────────────────────────────────────────────
    background: str = "default"


# dataclass field → stored JSON key
_JSON_KEYS: dict[str, str] = {
    "work_duration": "workDuration",
    "break_duration": "breakDuration",
    "auto_start_break": "autoStartBreak",
    "auto_start_next_work": "autoStartPomodoro",
    "background": "background",
}

_FIELD_TYPES: dict[str, type] = {
    "work_duration": int,
    "break_duration": int,
    "auto_start_break": bool,
    "auto_start_next_work": bool,
    "background": str,
}


def _matches(value: object, expected: type) -> bool:
    # bool is an int subclass; keep true/false out of the duration fields
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def settings_to_dict(settings: Settings) -> dict:
    return {_JSON_KEYS[f.name]: getattr(settings, f.name) for f in fields(Settings)}


def settings_from_dict(data: dict) -> Settings:
    """Build ``Settings`` from a stored object, field by field.

    Missing keys and values of the wrong type fall back to the default
    for that field; unknown keys are ignored.
    """
    values = {}
    for name, json_key in _JSON_KEYS.items():
        if json_key not in data:
            continue
        value = data[json_key]
        if _matches(value, _FIELD_TYPES[name]):
            values[name] = value
        else:
            logger.warning("Ignoring stored %s=%r", json_key, value)
    return Settings(**values)


def load_settings() -> Settings:
    """Load settings from the store, falling back to defaults."""
    raw = get_item(SETTINGS_KEY)
    if raw is None:
        return Settings()
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored settings are not valid JSON, using defaults")
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Stored settings are not an object, using defaults")
        return Settings()
    return settings_from_dict(data)


def save_settings(settings: Settings) -> None:
    """Write settings to the store, replacing the previous value."""
    set_item(SETTINGS_KEY, json.dumps(settings_to_dict(settings)))
