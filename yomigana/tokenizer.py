"""
Tokenizer contract and the MeCab (fugashi + UniDic) adapter.

The annotator needs an ordered, gapless token stream: concatenating the
surfaces of all tokens must give back the input. A token may carry
morphological detail, a lemma (dictionary form) and a reading hint in
hiragana; a token without it is "opaque" and is looked up by its surface.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from yomigana.characters import as_hiragana, is_kana
from yomigana.errors import TokenDetailMismatch, TokenizerUnavailableError

logger = logging.getLogger(__name__)

__all__ = [
    "Token",
    "Tokenizer",
    "FugashiTokenizer",
    "as_tokenizer",
]

# UniDic feature fields holding the reading of the dictionary form, best first
_READING_FIELDS = ("kanaBase", "lForm", "kana")


@dataclass(frozen=True, slots=True)
class Token:
    """
    One token of the input.

    Attributes:
        surface: The token as it appears in the text.
        lemma: Dictionary form, when morphological detail is available.
        reading_hint: The tokenizer's reading for the lemma, in hiragana.
    """
    surface: str
    lemma: Optional[str] = None
    reading_hint: Optional[str] = None

    @property
    def is_opaque(self) -> bool:
        """True if the token carries no morphological detail."""
        return self.lemma is None

    def __repr__(self) -> str:
        if self.is_opaque:
            return f"Token({self.surface!r})"
        return f"Token({self.surface!r}, lemma={self.lemma!r}, hint={self.reading_hint!r})"


class Tokenizer(ABC):
    """Splits a document into an ordered, gapless list of tokens."""

    @abstractmethod
    def tokenize(self, text: str) -> List[Token]:
        """Tokenize ``text``."""

    def __call__(self, text: str) -> List[Token]:
        return self.tokenize(text)


class _CallableTokenizer(Tokenizer):
    def __init__(self, func: Callable[[str], List[Token]]):
        self._func = func

    def tokenize(self, text: str) -> List[Token]:
        return list(self._func(text))


def as_tokenizer(obj: Union[Tokenizer, Callable[[str], List[Token]]]) -> Tokenizer:
    """Accept a Tokenizer or a plain ``text -> tokens`` callable."""
    if isinstance(obj, Tokenizer):
        return obj
    if callable(obj):
        return _CallableTokenizer(obj)
    raise TypeError(f"Not a tokenizer: {obj!r}")


# =============================================================================
# fugashi adapter
# =============================================================================

def _feature_value(feature: Any, name: str) -> Optional[str]:
    value = getattr(feature, name, None)
    if value is None or value == "*" or value == "":
        return None
    return str(value)


def _clean_lemma(lemma: str) -> str:
    # UniDic appends the source word to loanword lemmas: "プログラム-program"
    head, sep, tail = lemma.partition("-")
    if sep and head and tail.isascii():
        return head
    return lemma


def token_from_features(surface: str, feature: Any) -> Token:
    """
    Build a detailed token from a UniDic feature record.

    The dictionary form is the written base form (``orthBase``). UniDic's
    ``lemma`` spells kana words in kanji (する -> 為る), which would look
    them up under the wrong entry, so it is only used when ``orthBase`` is
    missing.

    Args:
        surface: Token surface.
        feature: Feature record exposing UniDic field names as attributes.

    Returns:
        Token with lemma and hiragana reading hint.

    Raises:
        TokenDetailMismatch: If the record lacks a base form or a kana reading.
    """
    lemma = _feature_value(feature, "orthBase")
    if lemma is None:
        lemma = _feature_value(feature, "lemma")
        if lemma is None:
            raise TokenDetailMismatch(f"no base form for {surface!r}")
        lemma = _clean_lemma(lemma)

    reading = None
    for name in _READING_FIELDS:
        reading = _feature_value(feature, name)
        if reading is not None:
            break
    if reading is None:
        raise TokenDetailMismatch(f"no reading for {surface!r}")

    reading = as_hiragana(reading)
    if not is_kana(reading):
        raise TokenDetailMismatch(f"reading {reading!r} of {surface!r} is not kana")

    return Token(surface=surface, lemma=lemma, reading_hint=reading)


class FugashiTokenizer(Tokenizer):
    """Tokenizer backed by fugashi (MeCab) with a UniDic dictionary."""

    def __init__(self, tagger_args: str = ""):
        try:
            from fugashi import Tagger  # type: ignore
        except ImportError as exc:
            raise TokenizerUnavailableError(
                "Tokenizing requires 'fugashi' and a UniDic dictionary "
                "(pip install 'yomigana[mecab]')."
            ) from exc

        try:
            self._tagger = Tagger(tagger_args)
        except RuntimeError as exc:
            raise TokenizerUnavailableError(f"Failed to initialize MeCab: {exc}") from exc

    def _token(self, node) -> Token:
        try:
            return token_from_features(node.surface, getattr(node, "feature", None))
        except TokenDetailMismatch as e:
            logger.debug(f"Treating token as opaque: {e}")
            return Token(node.surface)

    def tokenize(self, text: str) -> List[Token]:
        """
        Tokenize ``text`` with MeCab.

        MeCab drops whitespace, so the gaps between nodes are put back as
        opaque tokens to keep the stream gapless.
        """
        tokens: List[Token] = []
        pos = 0
        for node in self._tagger(text):
            surface = node.surface
            if not surface:
                continue
            start = text.find(surface, pos)
            if start == -1:
                # MeCab normalised the surface; keep the stream aligned with the input
                logger.warning(f"Token {surface!r} not found in input at offset {pos}")
                continue
            if start > pos:
                tokens.append(Token(text[pos:start]))
            tokens.append(self._token(node))
            pos = start + len(surface)
        if pos < len(text):
            tokens.append(Token(text[pos:]))
        return tokens
