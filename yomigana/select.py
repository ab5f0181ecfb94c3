"""
Selection policies: which ranked candidate, if any, annotates a fragment.

A selector receives the ranked candidates of a fragment together with the
fragment's surface text and returns one entry, or None to leave the
fragment unannotated. Plain functions with the same signature are accepted
wherever a Selector is.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Optional, Sequence, Set, Union

from yomigana.dictionary import DictionaryEntry

Candidates = Sequence[DictionaryEntry]
SelectFunction = Callable[[Candidates, str], Optional[DictionaryEntry]]


class Selector(ABC):
    """Chooses the annotation of a fragment."""

    @abstractmethod
    def select(self, candidates: Candidates, fragment_text: str) -> Optional[DictionaryEntry]:
        """
        Choose one of the candidates.

        Args:
            candidates: Ranked candidates, best first.
            fragment_text: Surface text of the fragment.

        Returns:
            The entry to annotate with, or None.
        """

    def __call__(self, candidates: Candidates, fragment_text: str) -> Optional[DictionaryEntry]:
        return self.select(candidates, fragment_text)


class AllCandidates(Selector):
    """Selects the top candidate every time."""

    def select(self, candidates, fragment_text):
        return candidates[0] if candidates else None

    def __repr__(self) -> str:
        return "AllCandidates()"


class UncommonOnly(Selector):
    """Selects the top candidate only if neither its text nor its reading is common."""

    def select(self, candidates, fragment_text):
        if not candidates:
            return None
        entry = candidates[0]
        if entry.text_is_common or entry.reading_is_common:
            return None
        return entry

    def __repr__(self) -> str:
        return "UncommonOnly()"


class _FunctionSelector(Selector):
    def __init__(self, func: SelectFunction):
        self._func = func

    def select(self, candidates, fragment_text):
        return self._func(candidates, fragment_text)


def as_selector(obj: Union[Selector, SelectFunction]) -> Selector:
    """Accept a Selector or a ``(candidates, fragment_text) -> entry`` callable."""
    if isinstance(obj, Selector):
        return obj
    if callable(obj):
        return _FunctionSelector(obj)
    raise TypeError(f"Not a selector: {obj!r}")


class FirstOccurrence(Selector):
    """
    Only annotate the first occurrence of each fragment text.

    The first time a surface text is seen the decision is delegated to the
    inner selector; every later fragment with the identical text (exact,
    case-sensitive match) is left unannotated. The seen set is shared by
    all documents rendered with this instance and is safe to use from
    several threads: recording a text and the delegated selection happen
    under one lock, so two concurrent renders cannot both treat the same
    occurrence as the first.

    Args:
        inner: Selector consulted on first occurrences.
    """

    def __init__(self, inner: Union[Selector, SelectFunction]):
        self.inner = as_selector(inner)
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"FirstOccurrence({self.inner!r})"

    def select(self, candidates, fragment_text):
        with self._lock:
            if fragment_text in self._seen:
                return None
            self._seen.add(fragment_text)
            return self.inner.select(candidates, fragment_text)

    @property
    def seen(self) -> FrozenSet[str]:
        """Snapshot of the fragment texts seen so far."""
        with self._lock:
            return frozenset(self._seen)

    def reset(self):
        """Forget every fragment seen so far."""
        with self._lock:
            self._seen.clear()


def get_selector(name: str = "uncommon", first_only: bool = False) -> Selector:
    """
    Build a selection policy by name.

    Args:
        name: "all" to annotate every known word, "uncommon" to skip common ones.
        first_only: Wrap the policy so only first occurrences are annotated.

    Returns:
        The selector.

    Raises:
        ValueError: For an unknown name.
    """
    selectors = {
        'all': AllCandidates,
        'uncommon': UncommonOnly,
        'uncommon-only': UncommonOnly,
    }
    try:
        selector = selectors[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown selector: {name}") from None
    return FirstOccurrence(selector) if first_only else selector
