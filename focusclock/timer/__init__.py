"""Timer package."""

from .engine import (
    TimerEngine,
    TimerMode,
    TimerState,
    NotificationSink,
    TICK_INTERVAL_MS,
    AUTO_START_DELAY_MS,
    STOPWATCH_CYCLE_SECONDS,
    format_clock,
)

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerState",
    "NotificationSink",
    "TICK_INTERVAL_MS",
    "AUTO_START_DELAY_MS",
    "STOPWATCH_CYCLE_SECONDS",
    "format_clock",
]
