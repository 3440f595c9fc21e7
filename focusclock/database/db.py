"""Database connection, session management and the key-value helpers."""

from __future__ import annotations

import os
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, KeyValueItem

# ── paths ────────────────────────────────────────────────────────────────────

APP_DATA_DIR = Path(
    os.environ.get("FOCUSCLOCK_DATA_DIR")
    or Path.home() / ".local" / "share" / "FocusClock"
)
DB_FILENAME = "focusclock.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{APP_DATA_DIR / DB_FILENAME}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def configure_data_dir(path: Path) -> None:
    """Store the database file under *path* instead of ``APP_DATA_DIR``."""
    path = Path(path).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    configure_engine(f"sqlite:///{path / DB_FILENAME}")


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_item(key: str) -> str | None:
    """Return the raw text stored under *key*, or ``None``."""
    with get_session() as db:
        item = db.get(KeyValueItem, key)
        return item.value if item is not None else None


def set_item(key: str, value: str) -> None:
    """Store *value* under *key*, replacing whatever was there."""
    with get_session() as db:
        item = db.get(KeyValueItem, key)
        if item is None:
            db.add(KeyValueItem(key=key, value=value))
        else:
            item.value = value
