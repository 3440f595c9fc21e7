"""Shared test helpers for FocusClock."""

from focusclock.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Wall clock in milliseconds that only moves when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class FakeDay:
    """Stands in for ``today_key``; change ``value`` to cross midnight."""

    def __init__(self, value: str):
        self.value = value

    def __call__(self) -> str:
        return self.value


class RecordingSink:
    def __init__(self):
        self.calls = 0

    def notify_completion(self) -> None:
        self.calls += 1


class FailingSink:
    def notify_completion(self) -> None:
        raise RuntimeError("no audio device")


def finish_phase(engine: TimerEngine) -> None:
    """Fast-complete the running countdown by jumping to the last tick."""
    engine._remaining = 1
    engine._on_tick()


def fire_auto_start(engine: TimerEngine) -> None:
    """Run the deferred auto-start now instead of after the delay."""
    assert engine.auto_start_pending
    engine._auto_start_timer.stop()
    engine._on_auto_start()
