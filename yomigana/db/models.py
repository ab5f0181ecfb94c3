"""
SQLAlchemy ORM models for the Yomigana dictionary store.

Tables:
    text_entry: one row per (text, reading) pair with its frequency flags
    ruby_span:  the reading spans of a text_entry, in character order
    store_meta: key/value bookkeeping (build completion marker)
"""

from sqlalchemy import (
    Boolean, Column, ForeignKey, Index, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

from yomigana.dictionary import DictionaryEntry, ReadingSpan

Base = declarative_base()


class TextEntry(Base):
    """A word with one of its readings."""
    __tablename__ = 'text_entry'

    id = Column(Integer, primary_key=True)
    text = Column(String, nullable=False)
    reading = Column(String, nullable=False)
    text_is_common = Column(Boolean, nullable=False, default=False)
    reading_is_common = Column(Boolean, nullable=False, default=False)

    spans = relationship(
        'RubySpan',
        back_populates='entry',
        order_by='RubySpan.start_index',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        UniqueConstraint('text', 'reading', name='uq_text_entry_text_reading'),
        Index('idx_text_entry_text', 'text'),
    )

    def __repr__(self) -> str:
        return f"TextEntry({self.text!r}, {self.reading!r})"

    def to_entry(self) -> DictionaryEntry:
        """Convert the row (and its loaded spans) into an immutable DictionaryEntry."""
        return DictionaryEntry(
            text=self.text,
            reading=self.reading,
            text_is_common=bool(self.text_is_common),
            reading_is_common=bool(self.reading_is_common),
            reading_spans=tuple(
                ReadingSpan(span.start_index, span.end_index, span.rt)
                for span in self.spans
            ),
        )


class RubySpan(Base):
    """Reading of the characters start_index..end_index (inclusive) of an entry."""
    __tablename__ = 'ruby_span'

    id = Column(Integer, primary_key=True)
    text_entry_id = Column(Integer, ForeignKey('text_entry.id'), nullable=False, index=True)
    start_index = Column(Integer, nullable=False)
    end_index = Column(Integer, nullable=False)
    rt = Column(String, nullable=False)

    entry = relationship('TextEntry', back_populates='spans')


class StoreMeta(Base):
    """Key/value metadata about the store itself."""
    __tablename__ = 'store_meta'

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
