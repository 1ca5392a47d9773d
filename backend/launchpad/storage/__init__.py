from .base import DuplicateUsername, RecordStore
from .memory import MemStore
from .postgres import PgStore

__all__ = ["DuplicateUsername", "MemStore", "PgStore", "RecordStore"]
