"""Main application window for FocusClock."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QWidget

from .timer.engine import TimerEngine
from .ui.timer_widget import TimerWidget


class FocusClockApp(QMainWindow):
    """Top-level window: the timer card plus keyboard shortcuts.

    Space starts or pauses, Ctrl+R resets.
    """

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._timer_engine = engine
        self.setWindowTitle("FocusClock")
        self.resize(440, 720)

        self._timer_widget = TimerWidget(engine, self)
        self.setCentralWidget(self._timer_widget)
        self._setup_shortcuts()

        # Push the current state through the freshly connected widget
        engine.refresh()

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _setup_shortcuts(self) -> None:
        """Register Ctrl+R for reset (Space handled via keyPressEvent)."""
        reset_action = QAction("Reset", self)
        reset_action.setShortcut(QKeySequence("Ctrl+R"))
        reset_action.triggered.connect(self._timer_engine.reset)
        self.addAction(reset_action)

    def _on_space(self) -> None:
        """Start or pause the timer."""
        self._timer_engine.toggle()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause) globally."""
        if event.key() == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Stop the clock so no tick fires into a closing window."""
        self._timer_engine.reset()
        event.accept()
