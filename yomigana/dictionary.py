"""
Dictionary data structures and the in-memory dictionary index.

Entries are keyed by ``(text, reading)`` and kept in that order, text
first. Because every entry whose text starts with a given prefix sorts
directly after the prefix itself, both exact lookups and prefix lookups are
a binary search followed by a short contiguous scan.

Usage:
    from yomigana.dictionary import build

    dictionary = build(open("JmdictFurigana.txt", encoding="utf-8-sig"))
    dictionary.lookup_word("漢字")       # entries whose text is 漢字
    dictionary.lookup_prefixed("漢")     # entries whose text starts with 漢
"""

import logging
from abc import ABC, abstractmethod
from bisect import bisect_left
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from yomigana.parse import ParsedLine, parse_dictionary_line

logger = logging.getLogger(__name__)

EntryKey = Tuple[str, str]


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True, slots=True)
class ReadingSpan:
    """
    The reading of one substring of an entry's text.

    Attributes:
        start_index: Index of the first character covered (inclusive).
        end_index: Index of the last character covered (inclusive).
        text: The reading of the covered characters.
    """
    start_index: int
    end_index: int
    text: str


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """
    A dictionary entry, including reading and frequency data.

    Attributes:
        text: The word the entry represents.
        reading: The full reading of the word.
        text_is_common: Whether the written form is common.
        reading_is_common: Whether the reading is common.
        reading_spans: Readings of the substrings of the word, sorted and
            non-overlapping.
    """
    text: str
    reading: str
    text_is_common: bool = False
    reading_is_common: bool = False
    reading_spans: Tuple[ReadingSpan, ...] = ()

    @property
    def key(self) -> EntryKey:
        return (self.text, self.reading)

    @property
    def is_common(self) -> bool:
        """True if either the text or the reading is flagged common."""
        return self.text_is_common or self.reading_is_common


@dataclass(frozen=True, slots=True)
class FrequencyEntry:
    """Frequency metadata for one (text, reading) pair."""
    text: str
    text_is_common: bool
    reading: str
    reading_is_common: bool

    @property
    def key(self) -> EntryKey:
        return (self.text, self.reading)


def entry_from_parsed(
    parsed: ParsedLine,
    text_is_common: bool = False,
    reading_is_common: bool = False,
) -> DictionaryEntry:
    """Create a DictionaryEntry from a parsed dictionary line."""
    return DictionaryEntry(
        text=parsed.text,
        reading=parsed.reading,
        text_is_common=text_is_common,
        reading_is_common=reading_is_common,
        reading_spans=tuple(ReadingSpan(start, end, rt) for start, end, rt in parsed.spans),
    )


# =============================================================================
# Dictionary Interface
# =============================================================================

class Dictionary(ABC):
    """
    Read-only index of dictionary entries ordered by (text, reading).

    Implementations must return entries in key order so that callers
    relying on a stable order (the ranker) behave the same on every backend.
    """

    @abstractmethod
    def lookup_word(self, word: str) -> List[DictionaryEntry]:
        """Return all entries whose text equals ``word``."""

    @abstractmethod
    def lookup_prefixed(self, prefix: str) -> List[DictionaryEntry]:
        """Return all entries whose text starts with ``prefix``, exact matches included."""


class MemoryDictionary(Dictionary):
    """Dictionary index held in memory as a sorted key list."""

    def __init__(self, entries: Iterable[DictionaryEntry] = ()):
        by_key: Dict[EntryKey, DictionaryEntry] = {}
        for entry in entries:
            by_key.setdefault(entry.key, entry)
        self._keys: List[EntryKey] = sorted(by_key)
        self._entries: List[DictionaryEntry] = [by_key[key] for key in self._keys]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"MemoryDictionary({len(self._entries)} entries)"

    def _scan(self, prefix: str, exact: bool) -> List[DictionaryEntry]:
        # ("X", "") sorts before every entry whose text is X or starts with X
        index = bisect_left(self._keys, (prefix, ""))
        results = []
        while index < len(self._keys):
            text = self._keys[index][0]
            if exact:
                if text != prefix:
                    break
            elif not text.startswith(prefix):
                break
            results.append(self._entries[index])
            index += 1
        return results

    def lookup_word(self, word: str) -> List[DictionaryEntry]:
        """
        Return all entries whose text equals ``word``.

        Args:
            word: Text to look up.

        Returns:
            Matching entries in reading order; empty if the word is unknown.
        """
        return self._scan(word, exact=True)

    def lookup_prefixed(self, prefix: str) -> List[DictionaryEntry]:
        """
        Return all entries whose text starts with ``prefix``.

        Args:
            prefix: Non-empty text prefix. An empty prefix matches nothing.

        Returns:
            Matching entries in key order, exact matches first.
        """
        if not prefix:
            return []
        return self._scan(prefix, exact=False)


# =============================================================================
# Building
# =============================================================================

def frequency_map(
    frequencies: Optional[Iterable[FrequencyEntry]],
) -> Dict[EntryKey, Tuple[bool, bool]]:
    """Collapse frequency rows into a (text, reading) -> (text_common, reading_common) map.

    Later rows for the same pair win.
    """
    result: Dict[EntryKey, Tuple[bool, bool]] = {}
    for freq in frequencies or ():
        result[freq.key] = (freq.text_is_common, freq.reading_is_common)
    return result


def build(
    lines: Iterable[str],
    frequencies: Optional[Iterable[FrequencyEntry]] = None,
) -> MemoryDictionary:
    """
    Build an in-memory dictionary from raw dictionary lines.

    Every line is parsed before the index is created, so a malformed line
    aborts the build and no partially populated dictionary is returned.
    Blank lines are skipped; for repeated (text, reading) pairs the first
    line wins.

    Args:
        lines: Lines in ``text|reading|span-list`` format.
        frequencies: Optional frequency rows joined on (text, reading).

    Returns:
        The populated MemoryDictionary.

    Raises:
        DictionaryParseError: On the first malformed line.
    """
    parsed: Dict[EntryKey, ParsedLine] = {}
    for line in lines:
        if not line.strip():
            continue
        entry = parse_dictionary_line(line)
        parsed.setdefault((entry.text, entry.reading), entry)

    common = frequency_map(frequencies)
    entries = []
    for key, line in parsed.items():
        text_common, reading_common = common.get(key, (False, False))
        entries.append(entry_from_parsed(line, text_common, reading_common))

    dictionary = MemoryDictionary(entries)
    logger.info(f"Built dictionary with {len(dictionary)} entries")
    return dictionary
