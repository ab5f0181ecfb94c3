"""
Pydantic models for Yomigana results.

These models give annotated text a JSON-ready shape, e.g. for an API
response or for storing annotations next to a document.

Usage:
    from yomigana.models import AnnotationResult

    result = AnnotationResult.from_annotated_text(annotated, UncommonOnly())
    result.model_dump_json()
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from yomigana.annotate import AnnotatedFragment, AnnotatedText
from yomigana.dictionary import DictionaryEntry
from yomigana.select import SelectFunction, Selector, as_selector


class SpanResult(BaseModel):
    """Reading of a run of characters of a word."""
    model_config = ConfigDict(from_attributes=True)

    start_index: int = Field(..., description="First character covered (inclusive)")
    end_index: int = Field(..., description="Last character covered (inclusive)")
    text: str = Field(..., description="Reading of the covered characters")


class CandidateResult(BaseModel):
    """A dictionary entry proposed for a fragment."""
    model_config = ConfigDict(from_attributes=True)

    text: str = Field(..., description="Written form of the entry")
    reading: str = Field(..., description="Full reading in kana")
    text_is_common: bool = Field(False, description="True if the written form is common")
    reading_is_common: bool = Field(False, description="True if the reading is common")
    spans: List[SpanResult] = Field(default_factory=list, description="Per-character readings")

    @classmethod
    def from_entry(cls, entry: DictionaryEntry) -> "CandidateResult":
        """Create CandidateResult from a DictionaryEntry."""
        return cls(
            text=entry.text,
            reading=entry.reading,
            text_is_common=entry.text_is_common,
            reading_is_common=entry.reading_is_common,
            spans=[SpanResult.model_validate(span) for span in entry.reading_spans],
        )


class FragmentResult(BaseModel):
    """One fragment of the input with its candidates and the chosen one."""
    text: str = Field(..., description="Fragment text as it appears in the input")
    selected: Optional[CandidateResult] = Field(None, description="Annotation chosen by the selector")
    candidates: List[CandidateResult] = Field(default_factory=list, description="Ranked candidates")

    @property
    def reading(self) -> Optional[str]:
        return self.selected.reading if self.selected else None

    @classmethod
    def from_fragment(cls, fragment: AnnotatedFragment, selector: Selector) -> "FragmentResult":
        entry = selector.select(fragment.candidates, fragment.text)
        return cls(
            text=fragment.text,
            selected=CandidateResult.from_entry(entry) if entry is not None else None,
            candidates=[CandidateResult.from_entry(c) for c in fragment.candidates],
        )


class AnnotationResult(BaseModel):
    """
    Annotated document.

    Example response:
        {
            "text": "光あれ",
            "fragments": [
                {"text": "光", "selected": {"text": "光", "reading": "ひかり", ...}, "candidates": [...]},
                {"text": "あれ", "selected": null, "candidates": []}
            ],
            "count": 2
        }
    """
    text: str = Field(..., description="The original text")
    fragments: List[FragmentResult] = Field(..., description="Fragments in document order")
    count: int = Field(..., description="Number of fragments")

    @classmethod
    def from_annotated_text(
        cls,
        annotated: AnnotatedText,
        selector: Union[Selector, SelectFunction],
    ) -> "AnnotationResult":
        """
        Create AnnotationResult from Annotator.annotate() output.

        Args:
            annotated: The annotated text.
            selector: Policy deciding the ``selected`` field of each fragment.
                Stateful selectors (FirstOccurrence) see the fragments in
                document order, as during rendering.
        """
        selector = as_selector(selector)
        fragments = [FragmentResult.from_fragment(f, selector) for f in annotated]
        return cls(text=annotated.text, fragments=fragments, count=len(fragments))

    @property
    def annotated_count(self) -> int:
        """Number of fragments with a selected annotation."""
        return sum(1 for f in self.fragments if f.selected is not None)
