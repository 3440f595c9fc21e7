"""Shared pytest fixtures for FocusClock tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from focusclock.database.db import configure_engine, init_db
from focusclock.timer.engine import TimerEngine

from helpers import FakeClock, FakeDay, RecordingSink


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def day():
    return FakeDay("2024-01-01")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def engine(qapp, clock, day, sink):
    """Fresh TimerEngine backed by the test database, default settings."""
    return TimerEngine(parent=None, notifier=sink, clock=clock, today=day)


@pytest.fixture
def engine_no_persist(qapp, clock, day):
    """Fresh TimerEngine that never reads or writes the store."""
    return TimerEngine(parent=None, persist=False, clock=clock, today=day)
