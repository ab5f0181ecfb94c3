"""
Yomigana: furigana annotation for Japanese text.
Looks up per-character readings in a furigana dictionary (JmdictFurigana)
and renders them as Markdown, HTML or LaTeX ruby.
"""

import time
from typing import Optional, Tuple

__version__ = "0.1.0"


def warm_up(verbose: bool = False) -> Tuple[float, dict]:
    """
    Open the default dictionary and the tokenizer ahead of the first call.

    Both are created lazily; call this at application startup to avoid
    cold-start latency on the first annotate().

    Args:
        verbose: If True, print timing information.

    Returns:
        Tuple of (total_time_seconds, timing_details_dict)

    Example:
        >>> import yomigana
        >>> elapsed, details = yomigana.warm_up(verbose=True)
        Warming up yomigana...
          Dictionary:       3.1ms
          Tokenizer:       41.7ms
        Total warm-up:     44.8ms
    """
    from yomigana.db.store import get_default_dictionary

    timings = {}
    total_start = time.perf_counter()

    if verbose:
        print("Warming up yomigana...")

    t0 = time.perf_counter()
    get_default_dictionary()
    timings['dictionary'] = (time.perf_counter() - t0) * 1000
    if verbose:
        print(f"  Dictionary:     {timings['dictionary']:>7.1f}ms")

    t0 = time.perf_counter()
    _get_default_annotator().tokenizer
    timings['tokenizer'] = (time.perf_counter() - t0) * 1000
    if verbose:
        print(f"  Tokenizer:      {timings['tokenizer']:>7.1f}ms")

    total_time = time.perf_counter() - total_start
    timings['total'] = total_time * 1000

    if verbose:
        print(f"Total warm-up:    {timings['total']:>7.1f}ms")

    return total_time, timings


_default_annotator = None


def _get_default_annotator():
    global _default_annotator
    if _default_annotator is None:
        from yomigana.annotate import Annotator
        from yomigana.db.store import get_default_dictionary
        _default_annotator = Annotator(get_default_dictionary())
    return _default_annotator


def annotate(
    text: str,
    selector=None,
    fmt=None,
    annotator=None,
) -> str:
    """
    Annotate Japanese text with furigana.

    This is the main high-level API.

    Args:
        text: Japanese text to annotate.
        selector: Selection policy. Defaults to UncommonOnly.
        fmt: Output format. Defaults to Markdown.
        annotator: Optional Annotator. If None, uses one backed by the
            default dictionary store and the fugashi tokenizer.

    Returns:
        The rendered text.

    Example:
        >>> import yomigana
        >>> yomigana.annotate("神は「光あれ」と言われた。", selector="all")
        '[神]{かみ}は「[光]{ひかり}あれ」と[言]{い}われた。'
    """
    from yomigana.format import Markdown, get_format
    from yomigana.select import UncommonOnly, get_selector

    if annotator is None:
        annotator = _get_default_annotator()
    if selector is None:
        selector = UncommonOnly()
    elif isinstance(selector, str):
        selector = get_selector(selector)
    if fmt is None:
        fmt = Markdown()
    elif isinstance(fmt, str):
        fmt = get_format(fmt)

    return annotator.annotate(text).render(selector, fmt)
