"""
Relational dictionary index backed by the SQLite store.

Lookups are answered with indexed queries on ``text_entry.text``; prefix
lookups use ``LIKE prefix || '%' ESCAPE '\\'`` with the LIKE wildcards
escaped in the prefix value. Connections run with ``case_sensitive_like``
on, so LIKE agrees with the binary index on ``text`` and a prefix lookup is
a range search on that index.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload, sessionmaker

from yomigana.db.connection import PathLike, get_db_path, get_engine
from yomigana.db.models import StoreMeta, TextEntry
from yomigana.dictionary import Dictionary, DictionaryEntry
from yomigana.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = '\\'

REQUIRED_TABLES = ('text_entry', 'ruby_span', 'store_meta')

# store_meta key written once a build has finished
COMPLETE_KEY = 'complete'


def escape_like(value: str, escape: str = LIKE_ESCAPE) -> str:
    """
    Escape LIKE wildcards so the value only matches itself.

    The escape character is escaped first so that the escapes added for
    ``%`` and ``_`` are not doubled.
    """
    return (
        value.replace(escape, escape + escape)
        .replace('%', escape + '%')
        .replace('_', escape + '_')
    )


class SqlDictionary(Dictionary):
    """Dictionary index answering lookups from a SQLite store."""

    def __init__(self, db_path: Optional[PathLike] = None):
        self.db_path = get_db_path(db_path)
        self._sessionmaker = sessionmaker(bind=get_engine(self.db_path))

    def __repr__(self) -> str:
        return f"SqlDictionary({str(self.db_path)!r})"

    def _query(self, condition) -> List[DictionaryEntry]:
        stmt = (
            select(TextEntry)
            .where(condition)
            .options(selectinload(TextEntry.spans))
            .order_by(TextEntry.text, TextEntry.reading)
        )
        with self._sessionmaker() as session:
            return [row.to_entry() for row in session.execute(stmt).scalars()]

    def lookup_word(self, word: str) -> List[DictionaryEntry]:
        """Return all entries whose text equals ``word``, in reading order."""
        return self._query(TextEntry.text == word)

    def lookup_prefixed(self, prefix: str) -> List[DictionaryEntry]:
        """Return all entries whose text starts with ``prefix``, in key order."""
        if not prefix:
            return []
        pattern = escape_like(prefix) + '%'
        return self._query(TextEntry.text.like(pattern, escape=LIKE_ESCAPE))

    def count(self) -> int:
        """Number of entries in the store."""
        with self._sessionmaker() as session:
            return session.scalar(select(func.count()).select_from(TextEntry))


def open_store(db_path: Optional[PathLike] = None) -> SqlDictionary:
    """
    Open a completed dictionary store.

    Args:
        db_path: Path to the store. Defaults to settings.DB_PATH.

    Returns:
        SqlDictionary reading from the store.

    Raises:
        StoreUnavailableError: If the file is missing, is not a SQLite
            database, lacks the dictionary tables, or its build never
            finished.
    """
    path = get_db_path(db_path)
    if not Path(path).is_file():
        raise StoreUnavailableError(f"Dictionary store not found: {path}")

    engine = get_engine(path)
    try:
        tables = set(inspect(engine).get_table_names())
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        if missing:
            raise StoreUnavailableError(
                f"Dictionary store {path} is missing tables: {', '.join(missing)}"
            )
        with sessionmaker(bind=engine)() as session:
            marker = session.get(StoreMeta, COMPLETE_KEY)
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"Dictionary store {path} is unreadable: {e}") from e

    if marker is None or marker.value != '1':
        raise StoreUnavailableError(
            f"Dictionary store {path} is incomplete; rerun the build to resume it"
        )

    logger.info(f"Opened dictionary store {path}")
    return SqlDictionary(path)


# ============================================================================
# Default Dictionary
# ============================================================================

_default_dictionary: Optional[SqlDictionary] = None
_default_lock = threading.Lock()


def get_default_dictionary() -> SqlDictionary:
    """
    Get the process-wide dictionary opened from settings.DB_PATH.

    Opened once, on first use. Passing a dictionary explicitly to the
    Annotator is preferred; this exists for the convenience API.

    Raises:
        StoreUnavailableError: If the default store cannot be opened.
    """
    global _default_dictionary

    with _default_lock:
        if _default_dictionary is None:
            _default_dictionary = open_store()
        return _default_dictionary


def reset_default_dictionary():
    """Forget the process-wide dictionary so the next call reopens it."""
    global _default_dictionary

    with _default_lock:
        _default_dictionary = None
