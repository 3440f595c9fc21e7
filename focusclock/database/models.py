"""SQLAlchemy ORM models for FocusClock."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class KeyValueItem(Base):
    """One entry of the local key-value store.

    ``value`` holds JSON text; decoding is left to the caller so a
    corrupt entry can be recovered from without touching the table.
    """

    __tablename__ = "kv_items"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow,
    )

    def __repr__(self) -> str:
        return f"<KeyValueItem key={self.key} len={len(self.value or '')}>"
