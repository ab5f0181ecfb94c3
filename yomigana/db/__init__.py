"""
Persistent dictionary store for Yomigana (SQLite via SQLAlchemy).
"""

from yomigana.db.connection import get_engine, get_session, init_db, session_scope
from yomigana.db.store import SqlDictionary, escape_like, get_default_dictionary, open_store

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "session_scope",
    "SqlDictionary",
    "escape_like",
    "get_default_dictionary",
    "open_store",
]
