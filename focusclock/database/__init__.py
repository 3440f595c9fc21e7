"""Database package."""

from .db import get_session, init_db, get_item, set_item
from .models import KeyValueItem

__all__ = ["get_session", "init_db", "get_item", "set_item", "KeyValueItem"]
