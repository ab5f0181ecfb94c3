"""
Parser for raw furigana dictionary lines.

Each line has the form ``text|reading|span-list`` where the span list is a
``;``-separated list of ``start[-end]:reading`` items. Indices are 0-based,
inclusive, and count characters (code points) of ``text``; an index without
``-end`` covers a single character.

Example:
    >>> parse_dictionary_line("大人買い|おとながい|0-1:おとな;2:が")
    ParsedLine(text='大人買い', reading='おとながい', spans=((0, 1, 'おとな'), (2, 2, 'が')))
"""

import re
from dataclasses import dataclass
from typing import Tuple

from yomigana.errors import DictionaryParseError

# start[-end]:reading, reading runs up to the next ';'
_SPAN_PATTERN = re.compile(r"(\d+)(?:-(\d+))?:([^;]+)")

RawSpan = Tuple[int, int, str]


@dataclass(frozen=True)
class ParsedLine:
    """A dictionary line split into its three fields."""
    text: str
    reading: str
    spans: Tuple[RawSpan, ...]


def parse_spans(span_list: str, line: str = "") -> Tuple[RawSpan, ...]:
    """
    Parse the span-list field of a dictionary line.

    Args:
        span_list: The third field, e.g. ``"0-1:おとな;2:が"``.
        line: The full line, reported in errors.

    Returns:
        Tuple of (start, end, reading) triples in input order.

    Raises:
        DictionaryParseError: If any item is malformed.
    """
    if not span_list:
        return ()

    spans = []
    for item in span_list.split(';'):
        match = _SPAN_PATTERN.fullmatch(item)
        if not match:
            raise DictionaryParseError(line or span_list, f"bad span {item!r}")
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if end < start:
            raise DictionaryParseError(line or span_list, f"span {item!r} ends before it starts")
        spans.append((start, end, match.group(3)))
    return tuple(spans)


def parse_dictionary_line(line: str) -> ParsedLine:
    """
    Parse one ``text|reading|span-list`` line.

    Besides the syntax, the spans are checked against the text: they must
    fall inside it, be sorted and not overlap.

    Args:
        line: Raw line, with or without its line terminator.

    Returns:
        ParsedLine with the text, the full reading and the spans.

    Raises:
        DictionaryParseError: If the line is malformed. The error carries
            the line verbatim.
    """
    stripped = line.rstrip('\r\n')
    fields = stripped.split('|')
    if len(fields) != 3:
        raise DictionaryParseError(line, f"expected 3 fields, got {len(fields)}")

    text, reading, span_list = fields
    if not text:
        raise DictionaryParseError(line, "empty text")

    spans = parse_spans(span_list, line)

    next_valid = 0
    for start, end, _ in spans:
        if start < next_valid:
            raise DictionaryParseError(line, "spans overlap or are out of order")
        if end >= len(text):
            raise DictionaryParseError(line, f"span {start}-{end} is outside the text")
        next_valid = end + 1

    return ParsedLine(text=text, reading=reading, spans=spans)
