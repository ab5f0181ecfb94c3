"""
Segmentation of a token stream into dictionary-backed fragments.

Morphological analysers often split words the furigana dictionary knows as
a whole (全単射 -> 全 / 単 / 射, or a compound split into its parts). The
segmenter greedily merges runs of tokens whose concatenated surface is an
entry of the dictionary, and falls back to single tokens otherwise.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from yomigana.dictionary import Dictionary, DictionaryEntry
from yomigana.tokenizer import Token


@dataclass(frozen=True, slots=True)
class Fragment:
    """
    A piece of the input to be annotated as a unit.

    Attributes:
        text: The original text of the fragment.
        lookup_text: Text used for the dictionary lookup (lemma of a single
            detailed token, surface text otherwise).
        reading_hint: The tokenizer's reading, for single detailed tokens only.
    """
    text: str
    lookup_text: str
    reading_hint: Optional[str] = None

    @classmethod
    def from_token(cls, token: Token) -> "Fragment":
        if token.is_opaque:
            return cls(text=token.surface, lookup_text=token.surface)
        return cls(text=token.surface, lookup_text=token.lemma, reading_hint=token.reading_hint)


def _join(tokens: Sequence[Token], start: int, end: int) -> str:
    return ''.join(t.surface for t in tokens[start:end])


def segment(tokens: Sequence[Token], dictionary: Dictionary) -> List[Fragment]:
    """
    Merge tokens into the longest dictionary-backed fragments.

    The window ``[start, end)`` grows while its concatenated surface is still
    a prefix of some candidate that starts at ``tokens[start]``. When it
    cannot grow, it shrinks back to the longest run that is exactly a
    candidate's text. Runs of two or more tokens become one fragment looked
    up by surface; otherwise the single token is emitted on its own.

    Args:
        tokens: Gapless token stream.
        dictionary: Index used for the prefix lookups.

    Returns:
        Fragments covering the tokens in order, without gaps or overlaps.
    """
    fragments: List[Fragment] = []
    if not tokens:
        return fragments

    start = 0
    end = 1  # exclusive
    candidates: List[DictionaryEntry] = dictionary.lookup_prefixed(tokens[0].surface)

    while start < len(tokens):
        next_token_exists = end < len(tokens)
        if next_token_exists:
            current = _join(tokens, start, end)
            if any(c.text.startswith(current) for c in candidates):
                end += 1
                continue

        longest = end
        while longest > start:
            substring = _join(tokens, start, longest)
            if any(c.text == substring for c in candidates):
                break
            longest -= 1

        if longest <= start + 1:
            # zero or one token matches: nothing longer to annotate
            fragments.append(Fragment.from_token(tokens[start]))
            start += 1
        else:
            merged = _join(tokens, start, longest)
            fragments.append(Fragment(text=merged, lookup_text=merged))
            start = longest

        end = start + 1
        if start < len(tokens):
            candidates = dictionary.lookup_prefixed(tokens[start].surface)

    return fragments
