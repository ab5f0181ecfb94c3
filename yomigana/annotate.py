"""
Annotate text with readings and render the annotations.

Pipeline:
    text -> tokenizer -> segment() -> rank_candidates() per fragment
         -> AnnotatedText.render(selector, format)

Usage:
    from yomigana.annotate import Annotator
    from yomigana.format import Markdown
    from yomigana.select import AllCandidates

    annotator = Annotator(dictionary)
    annotated = annotator.annotate("神は「光あれ」と言われた。")
    annotated.render(AllCandidates(), Markdown())
    # '[神]{かみ}は「[光]{ひかり}あれ」と[言]{い}われた。'
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from yomigana.characters import has_kanji
from yomigana.dictionary import Dictionary, DictionaryEntry, ReadingSpan
from yomigana.format import Format, FormatFunction, as_format
from yomigana.rank import rank_candidates
from yomigana.segment import segment
from yomigana.select import SelectFunction, Selector, as_selector
from yomigana.tokenizer import FugashiTokenizer, Token, Tokenizer, as_tokenizer

logger = logging.getLogger(__name__)


# =============================================================================
# Span Renderer
# =============================================================================

def apply_spans(
    text: str,
    spans: Sequence[ReadingSpan],
    fmt: Union[Format, FormatFunction],
) -> str:
    """
    Render reading spans onto a text.

    Spans are applied in order. Text between spans is copied unchanged;
    each span's characters are replaced by ``fmt(base, reading)``. A span
    starting inside one already rendered, or reaching past the end of the
    text, is skipped and its characters stay plain.

    Args:
        text: Reference text; span indices count its characters.
        spans: Sorted, non-overlapping reading spans.
        fmt: Format applied to each (base, reading) pair.

    Returns:
        The rendered text.
    """
    fmt = as_format(fmt)
    parts = []
    next_valid = 0
    for span in spans:
        if span.start_index < next_valid:
            continue
        if span.end_index >= len(text):
            logger.warning(f"Skipping span {span.start_index}-{span.end_index} outside {text!r}")
            continue
        parts.append(text[next_valid:span.start_index])
        parts.append(fmt.format(text[span.start_index:span.end_index + 1], span.text))
        next_valid = span.end_index + 1

    parts.append(text[next_valid:])
    return ''.join(parts)


# =============================================================================
# Annotated Text
# =============================================================================

@dataclass(frozen=True, slots=True)
class AnnotatedFragment:
    """
    A text fragment with its candidate annotations. Usually a word or a
    well-known phrase.

    Attributes:
        text: The original text of the fragment.
        candidates: Ranked dictionary entries, best first.
    """
    text: str
    candidates: Tuple[DictionaryEntry, ...] = ()

    @classmethod
    def plain(cls, text: str) -> "AnnotatedFragment":
        """A fragment with no annotations."""
        return cls(text=text)

    def render(self, selector: Selector, fmt: Format) -> str:
        entry = selector.select(self.candidates, self.text)
        if entry is None:
            return self.text
        return apply_spans(self.text, entry.reading_spans, fmt)


@dataclass(frozen=True)
class AnnotatedText:
    """A complete text with annotations, as an ordered list of fragments."""
    fragments: Tuple[AnnotatedFragment, ...] = ()

    def __iter__(self) -> Iterator[AnnotatedFragment]:
        return iter(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def text(self) -> str:
        """The original text, rebuilt from the fragments."""
        return ''.join(fragment.text for fragment in self.fragments)

    def render(
        self,
        selector: Union[Selector, SelectFunction],
        fmt: Union[Format, FormatFunction],
    ) -> str:
        """
        Render the text with the annotations chosen by ``selector``.

        Args:
            selector: Selection policy applied to every fragment, in order.
            fmt: Format for the chosen readings.

        Returns:
            The rendered document. Fragments without a selected annotation
            are copied unchanged.
        """
        selector = as_selector(selector)
        fmt = as_format(fmt)
        return ''.join(fragment.render(selector, fmt) for fragment in self.fragments)


# =============================================================================
# Annotator
# =============================================================================

class Annotator:
    """
    Annotates text with readings, given a dictionary.

    Args:
        dictionary: Index of known readings.
        tokenizer: Tokenizer or ``text -> tokens`` callable. Defaults to the
            fugashi tokenizer, created on first use.
        skip_common: Drop candidates whose text is flagged common before
            ranking.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        tokenizer: Optional[Union[Tokenizer, Callable[[str], List[Token]]]] = None,
        skip_common: bool = False,
    ):
        self.dictionary = dictionary
        self.skip_common = skip_common
        self._tokenizer = as_tokenizer(tokenizer) if tokenizer is not None else None
        self._tokenizer_lock = threading.Lock()

    @property
    def tokenizer(self) -> Tokenizer:
        with self._tokenizer_lock:
            if self._tokenizer is None:
                self._tokenizer = FugashiTokenizer()
            return self._tokenizer

    def annotate(self, text: str) -> AnnotatedText:
        """
        Annotate a text with readings.

        Args:
            text: Document to annotate.

        Returns:
            AnnotatedText whose fragments cover ``text`` exactly. Empty or
            whitespace-only input gives no fragments. Fragments without
            kanji get no candidates.
        """
        if not text.strip():
            return AnnotatedText()

        tokens = self.tokenizer.tokenize(text)
        fragments = []
        for fragment in segment(tokens, self.dictionary):
            if not has_kanji(fragment.text):
                # nothing to put a reading on
                fragments.append(AnnotatedFragment.plain(fragment.text))
                continue
            candidates = rank_candidates(
                self.dictionary,
                fragment.lookup_text,
                fragment.reading_hint,
                skip_common=self.skip_common,
            )
            fragments.append(AnnotatedFragment(fragment.text, tuple(candidates)))

        return AnnotatedText(tuple(fragments))
