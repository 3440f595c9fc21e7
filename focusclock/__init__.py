"""FocusClock — pomodoro, stopwatch and countdown timer."""

__version__ = "0.1.0"
