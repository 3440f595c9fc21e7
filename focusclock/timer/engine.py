"""Timer state machine for FocusClock.

Modes
-----
POMODORO      Work phase and break phase counting down, alternating.
STOPWATCH     Free-running elapsed time, no end.
COUNTDOWN     Counts down from a user-set duration once.

States
------
idle          Not running, not paused.
running       Tick loop active.
paused        Tick loop stopped, values frozen at the last tick.

Transitions
-----------
idle | paused → running          (start)
running → paused                 (pause)
any → idle                       (reset / set_mode)
running → idle                   (countdown reaches 0)
idle → running after 1 s         (auto-start of the next pomodoro phase)

The engine never touches widgets.  Everything a display needs comes out
of the ``updated`` and ``stats_changed`` signals; the completion sound
goes through the notification sink passed to the constructor.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..settings import (
    Settings, load_settings, save_settings,
    DEFAULT_WORK_DURATION, DEFAULT_BREAK_DURATION, MAX_PHASE_DURATION,
)
from ..stats import Stats, load_stats, save_stats, today_key, format_focus_time

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    POMODORO = "pomodoro"
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
AUTO_START_DELAY_MS = 1000
STOPWATCH_CYCLE_SECONDS = 60  # ring wraps once a minute
MAX_DURATION_MINUTES = MAX_PHASE_DURATION // 60

STATUS_LABELS: dict[str, str] = {
    "work_running": "Focusing",
    "break_running": "On break",
    "countdown_running": "Counting down",
    "stopwatch_running": "Timing",
    "paused": "Paused",
    "work_idle": "Ready to focus",
    "break_idle": "Ready for a break",
    "countdown_idle": "Set a countdown",
    "countdown_done": "Time's up",
    "stopwatch_idle": "Ready",
}


class NotificationSink(Protocol):
    def notify_completion(self) -> None: ...


@dataclass(frozen=True)
class TimerState:
    """Read-only copy of the engine's state at one instant."""

    mode: TimerMode
    running: bool
    paused: bool
    remaining_seconds: int
    elapsed_seconds: int
    is_break_phase: bool
    work_duration_seconds: int
    break_duration_seconds: int
    auto_start_break: bool
    auto_start_next_work: bool
    start_epoch_millis: int | None
    countdown_seconds: int

    @property
    def idle(self) -> bool:
        return not self.running and not self.paused


# ── helpers ───────────────────────────────────────────────────────────────


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def format_clock(seconds: int) -> str:
    """``HH:MM:SS`` once an hour is reached, ``MM:SS`` below that."""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def minutes_to_seconds(minutes: object) -> int | None:
    """Convert a whole number of minutes in (0, 60] to seconds.

    Returns ``None`` for anything else, including bools and floats with
    a fractional part.
    """
    if isinstance(minutes, bool):
        return None
    if isinstance(minutes, float):
        if not minutes.is_integer():
            return None
        minutes = int(minutes)
    if not isinstance(minutes, int):
        return None
    if 0 < minutes <= MAX_DURATION_MINUTES:
        return minutes * 60
    return None


def _phase_seconds(value: int, default: int) -> int:
    if isinstance(value, int) and 0 < value <= MAX_PHASE_DURATION:
        return value
    logger.warning("Stored duration %r out of range, using %d s", value, default)
    return default


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based three-mode timer: pomodoro, stopwatch and countdown.

    Signals
    -------
    updated(display: str, progress: float, status: str)
        Emitted after every tick and every command that changes what
        should be on screen.  ``progress`` is in 0..1.
    stats_changed(completed: int, focus_time: str)
        Emitted after a work phase completes; ``focus_time`` is HH:MM.
    state_changed(running: bool, paused: bool)
        Emitted on every running/paused/idle transition.
    mode_changed(mode: TimerMode)
    background_changed(background_id: str)
    completed(mode: TimerMode)
        Emitted once a countdown reaches zero, after the state for the
        next phase is already in place.
    """

    updated = pyqtSignal(str, float, str)
    stats_changed = pyqtSignal(int, str)
    state_changed = pyqtSignal(bool, bool)
    mode_changed = pyqtSignal(object)
    background_changed = pyqtSignal(str)
    completed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        persist: bool = True,
        notifier: NotificationSink | None = None,
        clock: Callable[[], int] | None = None,
        today: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(parent)

        self._persist: bool = persist
        self._notifier = notifier
        self._clock = clock or _wall_clock_ms
        self._today = today or today_key

        # ── configuration ─────────────────────────────────────────────
        if settings is None:
            settings = load_settings() if persist else Settings()
        self._settings: Settings = replace(settings)
        self._work_duration = _phase_seconds(
            settings.work_duration, DEFAULT_WORK_DURATION)
        self._break_duration = _phase_seconds(
            settings.break_duration, DEFAULT_BREAK_DURATION)
        self._settings.work_duration = self._work_duration
        self._settings.break_duration = self._break_duration
        self._auto_start_break: bool = settings.auto_start_break
        self._auto_start_next_work: bool = settings.auto_start_next_work

        # ── timer state ───────────────────────────────────────────────
        self._mode: TimerMode = TimerMode.POMODORO
        self._running: bool = False
        self._paused: bool = False
        self._is_break: bool = False
        self._remaining: int = self._work_duration
        self._elapsed: int = 0
        self._start_epoch_ms: int | None = None
        self._countdown_seconds: int = 0
        self._countdown_finished: bool = False

        # ── stats ─────────────────────────────────────────────────────
        today_str = self._today()
        self._stats: Stats = load_stats(today_str) if persist else Stats(date=today_str)

        # ── Qt timers ─────────────────────────────────────────────────
        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(self._on_tick)

        self._auto_start_timer = QTimer(self)
        self._auto_start_timer.setSingleShot(True)
        self._auto_start_timer.setInterval(AUTO_START_DELAY_MS)
        self._auto_start_timer.timeout.connect(self._on_auto_start)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_idle(self) -> bool:
        return not self._running and not self._paused

    @property
    def remaining(self) -> int:
        """Seconds left on the clock (pomodoro and countdown)."""
        return self._remaining

    @property
    def elapsed(self) -> int:
        """Whole seconds on the stopwatch."""
        return self._elapsed

    @property
    def is_break_phase(self) -> bool:
        return self._is_break

    @property
    def work_duration(self) -> int:
        return self._work_duration

    @property
    def break_duration(self) -> int:
        return self._break_duration

    @property
    def countdown_duration(self) -> int:
        """The last countdown length the user set, in seconds."""
        return self._countdown_seconds

    @property
    def auto_start_break(self) -> bool:
        return self._auto_start_break

    @property
    def auto_start_next_work(self) -> bool:
        return self._auto_start_next_work

    @property
    def start_epoch_millis(self) -> int | None:
        return self._start_epoch_ms

    @property
    def auto_start_pending(self) -> bool:
        """True while a deferred phase start is waiting to fire."""
        return self._auto_start_timer.isActive()

    @property
    def background(self) -> str:
        return self._settings.background

    @property
    def settings(self) -> Settings:
        return replace(self._settings)

    @property
    def stats(self) -> Stats:
        return replace(self._stats)

    @property
    def phase_duration(self) -> int:
        """Total seconds of what is on the clock.

        The current pomodoro phase, the user-set countdown, or the
        length of the stopwatch's ring cycle.
        """
        if self._mode is TimerMode.POMODORO:
            return self._break_duration if self._is_break else self._work_duration
        if self._mode is TimerMode.COUNTDOWN:
            return self._countdown_seconds
        return STOPWATCH_CYCLE_SECONDS

    @property
    def progress(self) -> float:
        """Ring fill, 0.0 → 1.0.

        Fraction of the phase still remaining for pomodoro and
        countdown; position within the current minute for the stopwatch.
        """
        if self._mode is TimerMode.STOPWATCH:
            return (self._elapsed % STOPWATCH_CYCLE_SECONDS) / STOPWATCH_CYCLE_SECONDS
        total = self.phase_duration
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, self._remaining / total))

    @property
    def display_text(self) -> str:
        if self._mode is TimerMode.STOPWATCH:
            return format_clock(self._elapsed)
        return format_clock(self._remaining)

    @property
    def status_label(self) -> str:
        if self._paused:
            return STATUS_LABELS["paused"]
        state = "running" if self._running else "idle"
        if self._mode is TimerMode.POMODORO:
            phase = "break" if self._is_break else "work"
            return STATUS_LABELS[f"{phase}_{state}"]
        if self._mode is TimerMode.COUNTDOWN:
            if self._countdown_finished:
                return STATUS_LABELS["countdown_done"]
            return STATUS_LABELS[f"countdown_{state}"]
        return STATUS_LABELS[f"stopwatch_{state}"]

    def snapshot(self) -> TimerState:
        return TimerState(
            mode=self._mode,
            running=self._running,
            paused=self._paused,
            remaining_seconds=self._remaining,
            elapsed_seconds=self._elapsed,
            is_break_phase=self._is_break,
            work_duration_seconds=self._work_duration,
            break_duration_seconds=self._break_duration,
            auto_start_break=self._auto_start_break,
            auto_start_next_work=self._auto_start_next_work,
            start_epoch_millis=self._start_epoch_ms,
            countdown_seconds=self._countdown_seconds,
        )

    def refresh(self) -> None:
        """Re-emit everything a freshly connected display needs."""
        self.mode_changed.emit(self._mode)
        self.state_changed.emit(self._running, self._paused)
        self._emit_stats()
        self._emit_update()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def set_mode(self, mode: TimerMode | str) -> None:
        """Switch modes.  Always stops the clock first."""
        mode = TimerMode(mode)
        self._halt()
        self._mode = mode

        if mode is TimerMode.POMODORO:
            self._is_break = False
            self._remaining = self._work_duration
        elif mode is TimerMode.STOPWATCH:
            self._elapsed = 0
            self._start_epoch_ms = None
        else:
            self._remaining = self._countdown_seconds

        self.mode_changed.emit(mode)
        self.state_changed.emit(False, False)
        self._emit_update()

    def start(self) -> None:
        """Start or resume.  No-op while running."""
        if self._running:
            return
        self._cancel_auto_start()
        if self._mode is TimerMode.COUNTDOWN and self._remaining <= 0:
            return

        self._running = True
        self._paused = False
        self._countdown_finished = False
        self._start_epoch_ms = self._clock() - self._elapsed * 1000
        self._tick_timer.start()

        self.state_changed.emit(True, False)
        self._emit_update()

    def pause(self) -> None:
        """Freeze the clock at its last tick.  Also drops a pending auto-start."""
        self._cancel_auto_start()
        if not self._running:
            return
        self._tick_timer.stop()
        self._running = False
        self._paused = True

        self.state_changed.emit(False, True)
        self._emit_update()

    def reset(self) -> None:
        """Stop and put the clock back to the start of what is shown.

        Pomodoro returns to the full length of the current phase,
        the stopwatch to zero.  A countdown keeps its remaining time.
        """
        self._halt()
        if self._mode is TimerMode.POMODORO:
            self._remaining = self._break_duration if self._is_break else self._work_duration
        elif self._mode is TimerMode.STOPWATCH:
            self._elapsed = 0
            self._start_epoch_ms = None

        self.state_changed.emit(False, False)
        self._emit_update()

    def toggle(self) -> None:
        """Pause when running, otherwise start if there is anything to run."""
        if self._running:
            self.pause()
        elif self._mode is TimerMode.STOPWATCH or self._remaining > 0:
            self.start()

    def set_countdown_duration(self, hours: int, minutes: int, seconds: int) -> None:
        total = hours * 3600 + minutes * 60 + seconds
        if total <= 0:
            logger.debug("Ignoring countdown of %d s", total)
            return
        self._countdown_seconds = total
        if self._mode is TimerMode.COUNTDOWN:
            self._remaining = total
            self._countdown_finished = False
            self._emit_update()

    def set_work_duration(self, minutes: int) -> None:
        seconds = minutes_to_seconds(minutes)
        if seconds is None:
            logger.debug("Ignoring work duration %r", minutes)
            return
        self._work_duration = seconds
        self._settings.work_duration = seconds
        self._save_settings()
        if self._showing_idle_phase(is_break=False):
            self._remaining = seconds
            self._emit_update()

    def set_break_duration(self, minutes: int) -> None:
        seconds = minutes_to_seconds(minutes)
        if seconds is None:
            logger.debug("Ignoring break duration %r", minutes)
            return
        self._break_duration = seconds
        self._settings.break_duration = seconds
        self._save_settings()
        if self._showing_idle_phase(is_break=True):
            self._remaining = seconds
            self._emit_update()

    def set_auto_start_break(self, enabled: bool) -> None:
        self._auto_start_break = bool(enabled)
        self._settings.auto_start_break = self._auto_start_break
        self._save_settings()

    def set_auto_start_next_work(self, enabled: bool) -> None:
        self._auto_start_next_work = bool(enabled)
        self._settings.auto_start_next_work = self._auto_start_next_work
        self._save_settings()

    def set_background(self, background_id: str) -> None:
        """Remember the background choice.  The id is not interpreted here."""
        self._settings.background = str(background_id)
        self._save_settings()
        self.background_changed.emit(self._settings.background)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _halt(self) -> None:
        self._tick_timer.stop()
        self._cancel_auto_start()
        self._running = False
        self._paused = False
        self._countdown_finished = False

    def _cancel_auto_start(self) -> None:
        self._auto_start_timer.stop()

    def _showing_idle_phase(self, *, is_break: bool) -> bool:
        return (
            self.is_idle
            and self._mode is TimerMode.POMODORO
            and self._is_break == is_break
        )

    def _on_tick(self) -> None:
        # A tick queued before stop() must not touch post-reset state.
        if not self._running:
            return

        if self._mode is TimerMode.STOPWATCH:
            delta_ms = self._clock() - self._start_epoch_ms
            self._elapsed = max(0, math.floor(delta_ms / 1000))
            self._emit_update()
            return

        self._remaining = max(0, self._remaining - 1)
        self._emit_update()
        if self._remaining == 0:
            self._complete()

    def _complete(self) -> None:
        self._tick_timer.stop()
        self._running = False
        self._paused = False
        finished_mode = self._mode

        if finished_mode is TimerMode.POMODORO:
            if not self._is_break:
                self._record_work_cycle()
                self._is_break = True
                self._remaining = self._break_duration
                chain = self._auto_start_break
            else:
                self._is_break = False
                self._remaining = self._work_duration
                chain = self._auto_start_next_work
            if chain:
                self._auto_start_timer.start()
        elif finished_mode is TimerMode.COUNTDOWN:
            self._countdown_finished = True

        self.state_changed.emit(False, False)
        self._emit_update()

        # State is committed; the sink can no longer affect it.
        if self._notifier is not None:
            try:
                self._notifier.notify_completion()
            except Exception:
                logger.exception("Completion notification failed")
        self.completed.emit(finished_mode)

    def _on_auto_start(self) -> None:
        if self._running or self._paused:
            return
        logger.debug("Auto-starting %s phase", "break" if self._is_break else "work")
        self.start()

    def _record_work_cycle(self) -> None:
        today = self._today()
        if self._stats.date != today:
            self._stats = Stats(date=today)
        self._stats.completed_work_cycles += 1
        self._stats.total_focus_seconds += self._work_duration
        if self._persist:
            save_stats(self._stats)
        self._emit_stats()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — signals & persistence
    # ══════════════════════════════════════════════════════════════════

    def _emit_update(self) -> None:
        self.updated.emit(self.display_text, self.progress, self.status_label)

    def _emit_stats(self) -> None:
        self.stats_changed.emit(
            self._stats.completed_work_cycles,
            format_focus_time(self._stats.total_focus_seconds),
        )

    def _save_settings(self) -> None:
        if self._persist:
            save_settings(self._settings)
