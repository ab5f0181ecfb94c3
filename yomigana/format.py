"""
Annotation formats.

A format turns a base text and its reading into markup. Formats are pure:
the output depends only on (base, reading). Transliterating decorators
rewrite the reading before handing it to the format they wrap, leaving the
base text and the span boundaries untouched.

Usage:
    from yomigana.format import Html, WithKatakana, get_format

    Html().format("漢字", "かんじ")
    # '<ruby>漢字<rp>(</rp><rt>かんじ</rt><rp>)</rp></ruby>'
    WithKatakana(get_format("md")).format("漢字", "かんじ")
    # '[漢字]{カンジ}'
"""

from abc import ABC, abstractmethod
from typing import Callable, Union

from yomigana.characters import as_hiragana, as_katakana

FormatFunction = Callable[[str, str], str]


class Format(ABC):
    """Formats a base text with its reading."""

    @abstractmethod
    def format(self, base: str, reading: str) -> str:
        """Return the markup for ``base`` annotated with ``reading``."""

    def __call__(self, base: str, reading: str) -> str:
        return self.format(base, reading)


class Markdown(Format):
    """``[base]{reading}``, as read by furigana-markdown-it."""

    def format(self, base: str, reading: str) -> str:
        return f"[{base}]{{{reading}}}"


class Html(Format):
    """``<ruby>`` markup with ``<rp>`` fallbacks for browsers without ruby support."""

    def format(self, base: str, reading: str) -> str:
        return f"<ruby>{base}<rp>(</rp><rt>{reading}</rt><rp>)</rp></ruby>"


class Latex(Format):
    r"""``\ruby{base}{reading}`` as defined by the pxrubrica / luatexja-ruby packages."""

    def format(self, base: str, reading: str) -> str:
        return f"\\ruby{{{base}}}{{{reading}}}"


class _FunctionFormat(Format):
    def __init__(self, func: FormatFunction):
        self._func = func

    def format(self, base: str, reading: str) -> str:
        return self._func(base, reading)


def as_format(obj: Union[Format, FormatFunction]) -> Format:
    """Accept a Format or a ``(base, reading) -> str`` callable."""
    if isinstance(obj, Format):
        return obj
    if callable(obj):
        return _FunctionFormat(obj)
    raise TypeError(f"Not a format: {obj!r}")


# =============================================================================
# Transliteration
# =============================================================================

class Transliterate(Format):
    """
    Rewrites the reading with ``convert`` before delegating to ``inner``.

    Args:
        inner: The format producing the markup.
        convert: Function applied to the reading only.
    """

    def __init__(self, inner: Union[Format, FormatFunction], convert: Callable[[str], str]):
        self.inner = as_format(inner)
        self.convert = convert

    def format(self, base: str, reading: str) -> str:
        return self.inner.format(base, self.convert(reading))


class WithKatakana(Transliterate):
    """Renders readings in katakana."""

    def __init__(self, inner: Union[Format, FormatFunction]):
        super().__init__(inner, as_katakana)


class WithHiragana(Transliterate):
    """Renders readings in hiragana."""

    def __init__(self, inner: Union[Format, FormatFunction]):
        super().__init__(inner, as_hiragana)


FORMATS = {
    'markdown': Markdown,
    'md': Markdown,
    'html': Html,
    'latex': Latex,
    'tex': Latex,
}


def get_format(name: str, katakana: bool = False) -> Format:
    """
    Get a format by name.

    Args:
        name: One of markdown (md), html, latex (tex).
        katakana: Render readings in katakana.

    Raises:
        ValueError: For an unknown name.
    """
    try:
        fmt = FORMATS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown format: {name}") from None
    return WithKatakana(fmt) if katakana else fmt
