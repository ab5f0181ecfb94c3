"""
Ranking of candidate dictionary entries for a fragment.
"""

from typing import List, Optional

from yomigana.dictionary import Dictionary, DictionaryEntry


def rank_key(entry: DictionaryEntry, reading_hint: Optional[str]):
    """Sort key, higher is better: (reading matches the hint, reading is common)."""
    return (reading_hint is not None and entry.reading == reading_hint, entry.reading_is_common)


def rank_candidates(
    dictionary: Dictionary,
    lookup_text: str,
    reading_hint: Optional[str] = None,
    skip_common: bool = False,
) -> List[DictionaryEntry]:
    """
    Look up and order the candidate entries of a fragment.

    Entries whose reading equals the tokenizer's hint come first, then
    entries with a common reading. The sort is stable, so ties keep the
    dictionary's (text, reading) order.

    Common words are filtered out *before* ranking, so a common entry can
    never win just because its reading matches the hint.

    Args:
        dictionary: Index to query.
        lookup_text: Lemma or surface text of the fragment.
        reading_hint: Reading suggested by the tokenizer, if any.
        skip_common: Drop entries whose text is flagged common.

    Returns:
        Candidates, best first. Empty if the text is unknown.
    """
    entries = dictionary.lookup_word(lookup_text)
    if skip_common:
        entries = [e for e in entries if not e.text_is_common]
    return sorted(entries, key=lambda e: rank_key(e, reading_hint), reverse=True)
