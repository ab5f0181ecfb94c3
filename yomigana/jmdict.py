"""
Frequency data from JMdict.

JMdict marks well-known written forms and readings with priority tags
(``ke_pri`` / ``re_pri``). A form carrying one of ``news1``, ``ichi1``,
``spec1``, ``spec2`` or ``gai1`` is what JMdict itself calls "common"; that
is the classification the ranker and the uncommon-only selector rely on.
"""

import gzip
import logging
import os
import xml.etree.ElementTree as ET
from typing import IO, Iterator, List, Union

from yomigana.dictionary import FrequencyEntry
from yomigana.settings import COMMON_PRIORITY_TAGS

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def is_gzip_file(path: PathLike) -> bool:
    """Check if a file is gzip compressed by reading magic bytes."""
    try:
        with open(path, 'rb') as f:
            return f.read(2) == b'\x1f\x8b'
    except OSError:
        return False


def open_source(path: PathLike) -> IO[bytes]:
    """Open a plain or gzip compressed file for binary reading."""
    if str(path).endswith('.gz') or is_gzip_file(path):
        return gzip.open(path, 'rb')
    return open(path, 'rb')


def is_common(priorities: List[str]) -> bool:
    """True if any of the priority tags marks the form as common."""
    return any(p in COMMON_PRIORITY_TAGS for p in priorities)


def _entry_frequencies(entry_elem) -> Iterator[FrequencyEntry]:
    kanji = []
    for k_ele in entry_elem.findall('k_ele'):
        keb = k_ele.findtext('keb', '')
        if keb:
            kanji.append((keb, is_common([p.text or '' for p in k_ele.findall('ke_pri')])))

    for r_ele in entry_elem.findall('r_ele'):
        reb = r_ele.findtext('reb', '')
        if not reb or r_ele.find('re_nokanji') is not None:
            continue
        reading_common = is_common([p.text or '' for p in r_ele.findall('re_pri')])
        restrictions = {r.text for r in r_ele.findall('re_restr')}
        for keb, kanji_common in kanji:
            if restrictions and keb not in restrictions:
                continue
            yield FrequencyEntry(
                text=keb,
                text_is_common=kanji_common,
                reading=reb,
                reading_is_common=reading_common,
            )


def iter_jmdict_frequencies(source: Union[PathLike, IO[bytes]]) -> Iterator[FrequencyEntry]:
    """
    Stream frequency rows out of a JMdict XML file.

    One row is produced for every (kanji form, reading) pair an entry
    allows, honouring ``re_restr`` and skipping ``re_nokanji`` readings.

    Args:
        source: Path to JMdict XML (gzipped or plain) or an open binary file.

    Yields:
        FrequencyEntry rows in file order.
    """
    if isinstance(source, (str, os.PathLike)):
        if not os.path.exists(source):
            raise FileNotFoundError(f"JMdict not found at: {source}")
        f = open_source(source)
        close = True
    else:
        f = source
        close = False

    try:
        entries = 0
        context = ET.iterparse(f, events=('start', 'end'))
        _, root = next(context)
        for event, elem in context:
            if event == 'end' and elem.tag == 'entry':
                yield from _entry_frequencies(elem)
                entries += 1
                # Drop finished entries, which the root still holds
                elem.clear()
                root.clear()
        logger.info(f"Read frequency data from {entries} JMdict entries")
    finally:
        if close:
            f.close()
