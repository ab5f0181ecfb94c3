"""
Database connection management for Yomigana.

Engines are cached per database path; sessions are cheap and should be
opened per unit of work, preferably through ``session_scope``.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from yomigana import settings
from yomigana.db.models import Base

PathLike = Union[str, Path]

_engines: Dict[Path, Engine] = {}
_engines_lock = threading.Lock()


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA cache_size = -64000")  # 64MB cache
    # lets prefix LIKE queries use the binary index on text_entry.text
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


def get_db_path(db_path: Optional[PathLike] = None) -> Path:
    """Resolve a database path, defaulting to settings.DB_PATH."""
    return Path(db_path) if db_path is not None else settings.DB_PATH


def get_engine(db_path: Optional[PathLike] = None) -> Engine:
    """
    Get the engine for a SQLite database file, creating it on first use.

    Args:
        db_path: Path to the database file. Defaults to settings.DB_PATH.

    Returns:
        SQLAlchemy Engine shared by every caller using the same path.
    """
    path = get_db_path(db_path).resolve()

    with _engines_lock:
        engine = _engines.get(path)
        if engine is None:
            engine = create_engine(
                f"sqlite:///{path}",
                echo=settings.DEBUG,
                connect_args={"check_same_thread": False},
            )
            event.listen(engine, "connect", _set_sqlite_pragmas)
            _engines[path] = engine
        return engine


def init_db(db_path: Optional[PathLike] = None) -> Engine:
    """Create the schema if needed and return the engine."""
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(path)
    Base.metadata.create_all(engine)
    return engine


def get_session(db_path: Optional[PathLike] = None) -> Session:
    """Open a new session on the given database."""
    return sessionmaker(bind=get_engine(db_path))()


@contextmanager
def session_scope(db_path: Optional[PathLike] = None) -> Iterator[Session]:
    """
    Provide a transactional scope around a series of operations.

    Commits on success, rolls back on error, always closes the session.
    """
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def set_bulk_loading_mode(session: Session, enabled: bool = True):
    """
    Trade durability for speed while bulk loading.

    Committed batches stay intact on interruption; only an OS crash during
    the load can lose them.
    """
    if enabled:
        session.execute(text("PRAGMA synchronous = OFF"))
        session.execute(text("PRAGMA temp_store = MEMORY"))
    else:
        session.execute(text("PRAGMA synchronous = NORMAL"))
        session.execute(text("PRAGMA temp_store = DEFAULT"))


def dispose_engines():
    """Close every cached engine (and its pooled connections)."""
    with _engines_lock:
        for engine in _engines.values():
            engine.dispose()
        _engines.clear()
