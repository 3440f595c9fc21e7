"""Daily focus statistics.

Only today's numbers are kept.  The stored record carries its date and
is treated as empty once the calendar moves on::

    {"date": "2024-01-01", "pomodoroCount": 3, "totalFocusTime": 4500}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date

from .database.db import get_item, set_item

logger = logging.getLogger(__name__)

STATS_KEY = "timerStats"


@dataclass
class Stats:
    date: str
    completed_work_cycles: int = 0
    total_focus_seconds: int = 0


def today_key(day: date | None = None) -> str:
    """ISO date string used to key the stats record."""
    return (day or date.today()).isoformat()


def format_focus_time(seconds: int) -> str:
    """Format a number of seconds as ``HH:MM``."""
    hours, rest = divmod(max(0, int(seconds)), 3600)
    return f"{hours:02d}:{rest // 60:02d}"


def _count(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0


def load_stats(today: str) -> Stats:
    """Return the stats recorded for *today*.

    Zeroed stats are returned when nothing is stored, the record cannot
    be read, or it belongs to another day.
    """
    raw = get_item(STATS_KEY)
    if raw is None:
        return Stats(date=today)
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored stats are not valid JSON, starting from zero")
        return Stats(date=today)
    if not isinstance(data, dict) or data.get("date") != today:
        return Stats(date=today)
    return Stats(
        date=today,
        completed_work_cycles=_count(data.get("pomodoroCount")),
        total_focus_seconds=_count(data.get("totalFocusTime")),
    )


def save_stats(stats: Stats) -> None:
    set_item(STATS_KEY, json.dumps({
        "date": stats.date,
        "pomodoroCount": stats.completed_work_cycles,
        "totalFocusTime": stats.total_focus_seconds,
    }))
