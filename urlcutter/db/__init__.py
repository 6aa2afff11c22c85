"""
Database module with abstraction layer.

This module provides:
- SequenceKeyedStore: The durable store issuing one short key per insert
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Session management: Session factory and transaction scope
"""

from urlcutter.db.interface import DatabaseAdapter
from urlcutter.db.models import EntryRecord
from urlcutter.db.session import create_session_maker, session_scope
from urlcutter.db.store import SequenceKeyedStore

__all__ = [
    "DatabaseAdapter",
    "EntryRecord",
    "SequenceKeyedStore",
    "create_session_maker",
    "session_scope",
]
