"""Main timer card — everything the user sees and clicks.

Layout (top → bottom):
    - Mode buttons (Pomodoro / Stopwatch / Timer)
    - ProgressRing with time and status
    - Start / Pause / Reset
    - Settings for the current mode
    - Today's stats
    - Background picker

The widget holds no timer state.  It renders whatever the engine emits
and forwards clicks and edits to the engine's commands.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QFrame, QSpinBox, QCheckBox,
    QComboBox, QStackedWidget, QButtonGroup, QSizePolicy,
)

from ..timer.engine import TimerEngine, TimerMode, MAX_DURATION_MINUTES
from .progress_ring import ProgressRing
from .styles import BACKGROUNDS, MODE_COLORS, BREAK_COLOR, build_stylesheet


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.POMODORO:  "Pomodoro",
    TimerMode.STOPWATCH: "Stopwatch",
    TimerMode.COUNTDOWN: "Timer",
}

_MODE_ORDER = (TimerMode.POMODORO, TimerMode.STOPWATCH, TimerMode.COUNTDOWN)


class TimerWidget(QWidget):
    """The timer card shown in the main window."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("root")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._apply_background(engine.background)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 24, 24, 24)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)

        # ── mode buttons ─────────────────────────────────────────────
        mode_row = QHBoxLayout()
        mode_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode in _MODE_ORDER:
            btn = QPushButton(MODE_LABELS[mode], card)
            btn.setObjectName("modeButton")
            btn.setCheckable(True)
            self._mode_group.addButton(btn)
            self._mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        self._mode_buttons[self._engine.mode].setChecked(True)
        layout.addLayout(mode_row)

        # ── progress ring ────────────────────────────────────────────
        ring_row = QHBoxLayout()
        ring_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._ring = ProgressRing(card)
        self._ring.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self._ring.setFixedSize(280, 280)
        ring_row.addWidget(self._ring)
        layout.addLayout(ring_row)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        btn_row.setSpacing(12)
        self._start_btn = QPushButton("Start", card)
        self._start_btn.setObjectName("primaryButton")
        self._pause_btn = QPushButton("Pause", card)
        self._pause_btn.setObjectName("primaryButton")
        self._pause_btn.setVisible(False)
        self._reset_btn = QPushButton("Reset", card)
        btn_row.addWidget(self._start_btn)
        btn_row.addWidget(self._pause_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

        # ── per-mode settings ────────────────────────────────────────
        self._settings_stack = QStackedWidget(card)
        self._settings_stack.addWidget(self._build_pomodoro_panel())
        self._settings_stack.addWidget(self._build_stopwatch_panel())
        self._settings_stack.addWidget(self._build_countdown_panel())
        self._settings_stack.setCurrentIndex(_MODE_ORDER.index(self._engine.mode))
        layout.addWidget(self._settings_stack)

        # ── today's stats ────────────────────────────────────────────
        stats_row = QHBoxLayout()
        self._completed_label = QLabel("0", card)
        self._completed_label.setObjectName("statValue")
        self._focus_label = QLabel("00:00", card)
        self._focus_label.setObjectName("statValue")
        for value_label, caption in (
            (self._completed_label, "Pomodoros today"),
            (self._focus_label, "Focus time"),
        ):
            col = QVBoxLayout()
            value_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            col.addWidget(value_label)
            cap = QLabel(caption, card)
            cap.setObjectName("mutedLabel")
            cap.setAlignment(Qt.AlignmentFlag.AlignCenter)
            col.addWidget(cap)
            stats_row.addLayout(col)
        layout.addLayout(stats_row)

        # ── background picker ────────────────────────────────────────
        bg_row = QHBoxLayout()
        bg_label = QLabel("Background", card)
        bg_label.setObjectName("mutedLabel")
        self._bg_combo = QComboBox(card)
        for bg_id in BACKGROUNDS:
            self._bg_combo.addItem(bg_id.replace("-", " ").title(), bg_id)
        idx = self._bg_combo.findData(self._engine.background)
        self._bg_combo.setCurrentIndex(max(0, idx))
        bg_row.addWidget(bg_label)
        bg_row.addWidget(self._bg_combo, 1)
        layout.addLayout(bg_row)

    def _build_pomodoro_panel(self) -> QWidget:
        panel = QWidget(self)
        grid = QGridLayout(panel)
        grid.setContentsMargins(0, 0, 0, 0)

        self._work_spin = QSpinBox(panel)
        self._work_spin.setRange(1, MAX_DURATION_MINUTES)
        self._work_spin.setSuffix(" min")
        self._work_spin.setValue(self._engine.work_duration // 60)

        self._break_spin = QSpinBox(panel)
        self._break_spin.setRange(1, MAX_DURATION_MINUTES)
        self._break_spin.setSuffix(" min")
        self._break_spin.setValue(self._engine.break_duration // 60)

        self._auto_break_cb = QCheckBox("Auto-start breaks", panel)
        self._auto_break_cb.setChecked(self._engine.auto_start_break)
        self._auto_work_cb = QCheckBox("Auto-start next pomodoro", panel)
        self._auto_work_cb.setChecked(self._engine.auto_start_next_work)

        grid.addWidget(QLabel("Work", panel), 0, 0)
        grid.addWidget(self._work_spin, 0, 1)
        grid.addWidget(QLabel("Break", panel), 1, 0)
        grid.addWidget(self._break_spin, 1, 1)
        grid.addWidget(self._auto_break_cb, 2, 0, 1, 2)
        grid.addWidget(self._auto_work_cb, 3, 0, 1, 2)
        return panel

    def _build_stopwatch_panel(self) -> QWidget:
        panel = QWidget(self)
        box = QVBoxLayout(panel)
        box.setContentsMargins(0, 0, 0, 0)
        hint = QLabel("Counts up until you pause or reset.", panel)
        hint.setObjectName("mutedLabel")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        box.addWidget(hint)
        return panel

    def _build_countdown_panel(self) -> QWidget:
        panel = QWidget(self)
        row = QHBoxLayout(panel)
        row.setContentsMargins(0, 0, 0, 0)

        self._hours_spin = QSpinBox(panel)
        self._hours_spin.setRange(0, 99)
        self._hours_spin.setSuffix(" h")
        self._minutes_spin = QSpinBox(panel)
        self._minutes_spin.setRange(0, 59)
        self._minutes_spin.setSuffix(" m")
        self._seconds_spin = QSpinBox(panel)
        self._seconds_spin.setRange(0, 59)
        self._seconds_spin.setSuffix(" s")

        current = self._engine.countdown_duration
        self._hours_spin.setValue(current // 3600)
        self._minutes_spin.setValue(current % 3600 // 60)
        self._seconds_spin.setValue(current % 60)

        self._set_countdown_btn = QPushButton("Set", panel)

        row.addWidget(self._hours_spin)
        row.addWidget(self._minutes_spin)
        row.addWidget(self._seconds_spin)
        row.addWidget(self._set_countdown_btn)
        return panel

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(lambda _checked, m=mode: self._engine.set_mode(m))
        self._start_btn.clicked.connect(self._engine.start)
        self._pause_btn.clicked.connect(self._engine.pause)
        self._reset_btn.clicked.connect(self._engine.reset)

        self._work_spin.valueChanged.connect(self._engine.set_work_duration)
        self._break_spin.valueChanged.connect(self._engine.set_break_duration)
        self._auto_break_cb.toggled.connect(self._engine.set_auto_start_break)
        self._auto_work_cb.toggled.connect(self._engine.set_auto_start_next_work)
        self._set_countdown_btn.clicked.connect(self._on_set_countdown)
        self._bg_combo.activated.connect(self._on_background_picked)

        self._engine.updated.connect(self._on_updated)
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.mode_changed.connect(self._on_mode_changed)
        self._engine.stats_changed.connect(self._on_stats_changed)
        self._engine.background_changed.connect(self._apply_background)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_set_countdown(self) -> None:
        self._engine.set_countdown_duration(
            self._hours_spin.value(),
            self._minutes_spin.value(),
            self._seconds_spin.value(),
        )

    def _on_background_picked(self, index: int) -> None:
        self._engine.set_background(self._bg_combo.itemData(index))

    def _on_updated(self, display: str, progress: float, status: str) -> None:
        self._ring.set_time_text(display)
        self._ring.set_fraction(progress)
        self._ring.set_status_text(status)

        arc, track = MODE_COLORS[self._engine.mode]
        if self._engine.mode is TimerMode.POMODORO and self._engine.is_break_phase:
            arc = BREAK_COLOR
        self._ring.set_colors(arc, track)

    def _on_state_changed(self, running: bool, paused: bool) -> None:
        self._start_btn.setVisible(not running)
        self._pause_btn.setVisible(running)

    def _on_mode_changed(self, mode: TimerMode) -> None:
        self._mode_buttons[mode].setChecked(True)
        self._settings_stack.setCurrentIndex(_MODE_ORDER.index(mode))

    def _on_stats_changed(self, completed: int, focus_time: str) -> None:
        self._completed_label.setText(str(completed))
        self._focus_label.setText(focus_time)

    def _apply_background(self, background_id: str) -> None:
        self.setStyleSheet(build_stylesheet(background_id))
        idx = self._bg_combo.findData(background_id)
        if idx >= 0 and idx != self._bg_combo.currentIndex():
            self._bg_combo.setCurrentIndex(idx)
