"""Tests for the key-value store, settings persistence and daily stats.

Covers:
- get_item / set_item against the in-memory database
- Settings defaults, JSON round-trip, stored key names, bad data
- Stats day rollover, bad data, HH:MM formatting
"""

from __future__ import annotations

import json

import pytest

from focusclock.database.db import get_item, set_item, get_session
from focusclock.database.models import KeyValueItem
from focusclock.settings import (
    Settings, load_settings, save_settings, settings_from_dict, SETTINGS_KEY,
)
from focusclock.stats import (
    Stats, load_stats, save_stats, format_focus_time, today_key, STATS_KEY,
)


# ═══════════════════════════════════════════════════════════════════════
#  KEY-VALUE STORE
# ═══════════════════════════════════════════════════════════════════════


class TestKeyValueStore:
    def test_missing_key(self):
        assert get_item("nope") is None

    def test_set_then_get(self):
        set_item("a", "1")
        assert get_item("a") == "1"

    def test_overwrite(self):
        set_item("a", "1")
        set_item("a", "2")
        assert get_item("a") == "2"
        with get_session() as db:
            assert db.query(KeyValueItem).count() == 1


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_durations(self):
        s = Settings()
        assert s.work_duration == 25 * 60
        assert s.break_duration == 5 * 60

    def test_auto_start_defaults(self):
        s = Settings()
        assert s.auto_start_break is True
        assert s.auto_start_next_work is True

    def test_background(self):
        assert Settings().background == "default"


class TestSettingsPersistence:
    def test_nothing_stored_returns_defaults(self):
        assert load_settings() == Settings()

    @pytest.mark.parametrize("settings", [
        Settings(),
        Settings(work_duration=30 * 60, break_duration=10 * 60),
        Settings(auto_start_break=False, auto_start_next_work=False),
        Settings(work_duration=60, background="pink-light"),
        Settings(work_duration=3600, break_duration=3600, background=""),
    ])
    def test_round_trip(self, settings):
        save_settings(settings)
        assert load_settings() == settings

    def test_stored_json_keys(self):
        save_settings(Settings(work_duration=1800, auto_start_next_work=False,
                               background="green"))
        assert json.loads(get_item(SETTINGS_KEY)) == {
            "workDuration": 1800,
            "breakDuration": 300,
            "autoStartBreak": True,
            "autoStartPomodoro": False,
            "background": "green",
        }

    def test_save_overwrites(self):
        save_settings(Settings(work_duration=600))
        save_settings(Settings(break_duration=600))
        loaded = load_settings()
        assert loaded.work_duration == 25 * 60
        assert loaded.break_duration == 600

    def test_invalid_json_returns_defaults(self):
        set_item(SETTINGS_KEY, "NOT VALID JSON")
        assert load_settings() == Settings()

    def test_non_object_returns_defaults(self):
        set_item(SETTINGS_KEY, "[1, 2, 3]")
        assert load_settings() == Settings()

    def test_missing_keys_use_defaults(self):
        set_item(SETTINGS_KEY, json.dumps({"breakDuration": 420}))
        s = load_settings()
        assert s.break_duration == 420
        assert s.work_duration == 25 * 60
        assert s.auto_start_break is True

    def test_wrong_types_use_defaults(self):
        set_item(SETTINGS_KEY, json.dumps({
            "workDuration": "1800",
            "breakDuration": True,
            "autoStartBreak": "no",
            "background": 7,
        }))
        assert load_settings() == Settings()

    def test_extra_keys_ignored(self):
        s = settings_from_dict({"workDuration": 1800, "unknownFutureKey": True})
        assert s.work_duration == 1800
        assert not hasattr(s, "unknownFutureKey")

    def test_store_does_not_clamp(self):
        """Range checks belong to the engine, not the store."""
        save_settings(Settings(work_duration=99999))
        assert load_settings().work_duration == 99999


# ═══════════════════════════════════════════════════════════════════════
#  STATS
# ═══════════════════════════════════════════════════════════════════════


class TestStats:
    def test_nothing_stored_is_zero(self):
        s = load_stats("2024-01-01")
        assert s == Stats(date="2024-01-01")

    def test_same_day_round_trip(self):
        save_stats(Stats(date="2024-01-01", completed_work_cycles=3,
                         total_focus_seconds=4500))
        s = load_stats("2024-01-01")
        assert s.completed_work_cycles == 3
        assert s.total_focus_seconds == 4500

    def test_day_rollover_returns_zero(self):
        set_item(STATS_KEY, json.dumps({
            "date": "2024-01-01", "pomodoroCount": 6, "totalFocusTime": 9000,
        }))
        s = load_stats("2024-01-02")
        assert s.date == "2024-01-02"
        assert s.completed_work_cycles == 0
        assert s.total_focus_seconds == 0

    def test_stored_json_format(self):
        save_stats(Stats(date="2024-03-05", completed_work_cycles=1,
                         total_focus_seconds=1500))
        assert json.loads(get_item(STATS_KEY)) == {
            "date": "2024-03-05", "pomodoroCount": 1, "totalFocusTime": 1500,
        }

    def test_invalid_json_is_zero(self):
        set_item(STATS_KEY, "{broken")
        assert load_stats("2024-01-01").completed_work_cycles == 0

    def test_bad_counts_are_zero(self):
        set_item(STATS_KEY, json.dumps({
            "date": "2024-01-01", "pomodoroCount": -3, "totalFocusTime": "lots",
        }))
        s = load_stats("2024-01-01")
        assert s.completed_work_cycles == 0
        assert s.total_focus_seconds == 0

    def test_today_key_is_iso(self):
        from datetime import date
        assert today_key(date(2024, 2, 29)) == "2024-02-29"

    @pytest.mark.parametrize("seconds, text", [
        (0, "00:00"),
        (59, "00:00"),
        (1500, "00:25"),
        (3600, "01:00"),
        (3 * 3600 + 5 * 60 + 30, "03:05"),
        (100 * 3600, "100:00"),
    ])
    def test_format_focus_time(self, seconds, text):
        assert format_focus_time(seconds) == text
