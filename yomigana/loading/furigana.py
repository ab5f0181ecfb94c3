"""
Build the dictionary store from a JmdictFurigana-style text file.

The raw corpus is streamed and committed in fixed-size batches. Rows that
already exist are skipped, so a build interrupted part way can simply be
run again: committed batches are kept and loading resumes after them. The
store is only marked complete (and only then accepted by ``open_store``)
once every line and every frequency row has been applied.
"""

import io
import logging
import os
import time
from itertools import islice
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from sqlalchemy import and_, bindparam, func, select, update
from sqlalchemy.orm import Session

from yomigana import settings
from yomigana.db.connection import PathLike, init_db, session_scope, set_bulk_loading_mode
from yomigana.db.models import RubySpan, StoreMeta, TextEntry
from yomigana.db.store import COMPLETE_KEY
from yomigana.dictionary import EntryKey, FrequencyEntry
from yomigana.jmdict import open_source
from yomigana.parse import ParsedLine, parse_dictionary_line

logger = logging.getLogger(__name__)

LineSource = Union[str, os.PathLike, Iterable[str]]


def _iter_lines(source: LineSource) -> Iterator[str]:
    if isinstance(source, (str, os.PathLike)):
        if not os.path.exists(source):
            raise FileNotFoundError(f"Furigana dictionary not found at: {source}")
        with io.TextIOWrapper(open_source(source), encoding='utf-8-sig') as f:
            yield from f
    else:
        yield from source


def _iter_parsed(lines: Iterable[str]) -> Iterator[ParsedLine]:
    for line in lines:
        if not line.strip():
            continue
        yield parse_dictionary_line(line)


def _insert_batch(session: Session, batch: List[ParsedLine]) -> int:
    """Insert the entries of one batch that are not stored yet. Returns rows added."""
    texts = {parsed.text for parsed in batch}
    rows = session.execute(
        select(TextEntry.text, TextEntry.reading).where(TextEntry.text.in_(texts))
    )
    existing = {(text, reading) for text, reading in rows}

    added = 0
    for parsed in batch:
        key = (parsed.text, parsed.reading)
        if key in existing:
            continue
        existing.add(key)
        session.add(TextEntry(
            text=parsed.text,
            reading=parsed.reading,
            text_is_common=False,
            reading_is_common=False,
            spans=[
                RubySpan(start_index=start, end_index=end, rt=rt)
                for start, end, rt in parsed.spans
            ],
        ))
        added += 1
    return added


def _apply_frequencies(
    session: Session,
    frequencies: Iterable[FrequencyEntry],
    batch_size: int,
) -> int:
    table = TextEntry.__table__
    stmt = (
        update(table)
        .where(and_(
            table.c.text == bindparam('f_text'),
            table.c.reading == bindparam('f_reading'),
        ))
        .values(
            text_is_common=bindparam('f_text_common'),
            reading_is_common=bindparam('f_reading_common'),
        )
    )

    # Later rows for the same pair win, as in the in-memory build
    merged: Dict[EntryKey, FrequencyEntry] = {}
    for freq in frequencies:
        merged[freq.key] = freq

    rows = iter(merged.values())
    applied = 0
    while True:
        chunk = list(islice(rows, batch_size))
        if not chunk:
            break
        session.execute(stmt, [
            {
                'f_text': freq.text,
                'f_reading': freq.reading,
                'f_text_common': freq.text_is_common,
                'f_reading_common': freq.reading_is_common,
            }
            for freq in chunk
        ])
        session.commit()
        applied += len(chunk)
    return applied


def _set_complete(session: Session, complete: bool):
    session.merge(StoreMeta(key=COMPLETE_KEY, value='1' if complete else '0'))
    session.commit()


def load_furigana(
    source: LineSource,
    db_path: Optional[PathLike] = None,
    frequencies: Optional[Iterable[FrequencyEntry]] = None,
    batch_size: Optional[int] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Load furigana dictionary lines into the SQLite store.

    Args:
        source: Path to the dictionary file (gzipped or plain) or an
            iterable of ``text|reading|span-list`` lines.
        db_path: Store to create or resume. Defaults to settings.DB_PATH.
        frequencies: Optional frequency rows joined on (text, reading).
        batch_size: Lines per commit. Defaults to settings.BATCH_SIZE.
        progress_callback: Optional callback(lines_processed) after each batch.

    Returns:
        Number of entries in the store once the build has finished.

    Raises:
        DictionaryParseError: On a malformed line. Batches committed before
            it are kept but the store stays marked incomplete.
    """
    batch_size = batch_size or settings.BATCH_SIZE
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    init_db(db_path)

    with session_scope(db_path) as session:
        set_bulk_loading_mode(session, enabled=True)
        _set_complete(session, False)

        t0 = time.perf_counter()
        processed = 0
        added = 0
        parsed_lines = _iter_parsed(_iter_lines(source))
        while True:
            batch = list(islice(parsed_lines, batch_size))
            if not batch:
                break
            added += _insert_batch(session, batch)
            session.commit()
            processed += len(batch)

            if progress_callback:
                progress_callback(processed)
            else:
                rate = processed / max(time.perf_counter() - t0, 1e-9)
                logger.info(f"Loaded {processed} lines ({rate:.0f} lines/s)...")

        logger.info(f"Inserted {added} new entries from {processed} lines")

        if frequencies is not None:
            applied = _apply_frequencies(session, frequencies, batch_size)
            logger.info(f"Applied {applied} frequency rows")

        _set_complete(session, True)
        total = session.scalar(select(func.count()).select_from(TextEntry))
        set_bulk_loading_mode(session, enabled=False)

    logger.info(f"Dictionary store complete: {total} entries")
    return total
