"""
Tests for annotate.py - the full pipeline from text to rendered markup.
"""

import re

import pytest

import yomigana
from yomigana.annotate import AnnotatedFragment, AnnotatedText, Annotator
from yomigana.dictionary import build
from yomigana.format import Html, Markdown
from yomigana.select import AllCandidates, FirstOccurrence, UncommonOnly
from yomigana.tokenizer import Token

GENESIS = "神は「光あれ」と言われた。すると光があった。"


@pytest.fixture
def annotator(dictionary, tokenizer):
    return Annotator(dictionary, tokenizer)


class TestExamples:
    """End-to-end renderings."""

    def test_all_candidates_markdown(self, annotator):
        rendered = annotator.annotate(GENESIS).render(AllCandidates(), Markdown())
        assert rendered == "[神]{かみ}は「[光]{ひかり}あれ」と[言]{い}われた。すると[光]{ひかり}があった。"

    def test_uncommon_only_leaves_common_words(self, annotator):
        assert annotator.annotate(GENESIS).render(UncommonOnly(), Markdown()) == GENESIS

    def test_single_kanji_fallback(self, annotator):
        rendered = annotator.annotate("全単射。").render(UncommonOnly(), Markdown())
        assert rendered == "[全]{ぜん}[単]{たん}[射]{しゃ}。"

    def test_html_parity(self, annotator):
        annotated = annotator.annotate(GENESIS)
        markdown = annotated.render(AllCandidates(), Markdown())
        html = annotated.render(AllCandidates(), Html())
        md_pairs = re.findall(r"\[(.+?)\]\{(.+?)\}", markdown)
        html_pairs = re.findall(r"<ruby>(.+?)<rp>\(</rp><rt>(.+?)</rt><rp>\)</rp></ruby>", html)
        assert md_pairs == html_pairs == [("神", "かみ"), ("光", "ひかり"), ("言", "い"), ("光", "ひかり")]

    def test_merged_compound(self, annotator):
        rendered = annotator.annotate("大人買いした。").render(UncommonOnly(), Markdown())
        assert rendered == "[大人]{おとな}[買]{が}いした。"

    def test_first_occurrence(self, annotator):
        selector = FirstOccurrence(AllCandidates())
        rendered = annotator.annotate(GENESIS).render(selector, Markdown())
        assert rendered == "[神]{かみ}は「[光]{ひかり}あれ」と[言]{い}われた。すると光があった。"


class TestReconstruction:
    """Fragment texts always rebuild the input."""

    @pytest.mark.parametrize("text", [
        GENESIS,
        "全単射。",
        "大人買いした。",
        "日本語が好き",
        "unknown text, 未知の文字列 ",
        "a",
    ])
    def test_fragments_cover_input(self, annotator, text):
        annotated = annotator.annotate(text)
        assert annotated.text == text
        assert "".join(f.text for f in annotated) == text

    @pytest.mark.parametrize("text", ["", " ", "\n\t　"])
    def test_blank_input(self, annotator, tokenizer, text):
        annotated = annotator.annotate(text)
        assert len(annotated) == 0
        assert annotated.render(AllCandidates(), Markdown()) == ""
        assert tokenizer.calls == 0

    def test_unknown_words_render_plain(self, annotator):
        text = "未知の文字列"
        assert annotator.annotate(text).render(AllCandidates(), Markdown()) == text


class TestAnnotator:
    """Tests for Annotator options."""

    def test_candidates_ranked(self, annotator):
        annotated = annotator.annotate(GENESIS)
        light = [f for f in annotated if f.text == "光"][0]
        assert [c.reading for c in light.candidates] == ["ひかり", "こう"]

    def test_skip_common(self, dictionary, tokenizer):
        annotator = Annotator(dictionary, tokenizer, skip_common=True)
        rendered = annotator.annotate(GENESIS).render(AllCandidates(), Markdown())
        # 光/こう and 神/しん are not common, so they become the top candidates
        assert rendered == "[神]{しん}は「[光]{こう}あれ」と言われた。すると[光]{こう}があった。"

    def test_kana_fragments_not_looked_up(self):
        """Fragments without kanji never get candidates, even for kana entries."""
        dictionary = build(["あれ|あれ|0:あ", "光|ひかり|0:ひかり"])
        tokens = [Token("光", "光", "ひかり"), Token("あれ", "あれ", "あれ")]
        annotator = Annotator(dictionary, lambda text: tokens)
        annotated = annotator.annotate("光あれ")
        assert [f.candidates for f in annotated][1] == ()
        assert annotated.render(AllCandidates(), Markdown()) == "[光]{ひかり}あれ"

    def test_function_tokenizer(self, dictionary):
        annotator = Annotator(dictionary, lambda text: [Token(text[:2]), Token(text[2:])])
        rendered = annotator.annotate("漢字です").render(AllCandidates(), Markdown())
        assert rendered == "[漢]{かん}[字]{じ}です"

    def test_function_selector_and_format(self, annotator):
        rendered = annotator.annotate("全単射。").render(
            lambda candidates, text: candidates[0] if text == "単" else None,
            lambda base, reading: f"{base}({reading})",
        )
        assert rendered == "全単(たん)射。"


class TestAnnotatedText:
    def test_plain_fragment(self):
        fragment = AnnotatedFragment.plain("です")
        assert fragment.candidates == ()
        assert fragment.render(AllCandidates(), Markdown()) == "です"

    def test_empty(self):
        assert AnnotatedText().text == ""


class TestConvenienceApi:
    """Tests for yomigana.annotate()."""

    def test_named_selector_and_format(self, annotator):
        rendered = yomigana.annotate("全単射。", selector="all", fmt="html", annotator=annotator)
        assert rendered.startswith("<ruby>全<rp>")

    def test_defaults(self, annotator):
        assert yomigana.annotate(GENESIS, annotator=annotator) == GENESIS

    def test_warm_up(self, sql_dictionary, db_path, tokenizer, monkeypatch):
        from yomigana.db.store import reset_default_dictionary

        monkeypatch.setattr("yomigana.settings.DB_PATH", db_path)
        monkeypatch.setattr(yomigana, "_default_annotator", Annotator(sql_dictionary, tokenizer))
        reset_default_dictionary()
        try:
            elapsed, timings = yomigana.warm_up()
        finally:
            reset_default_dictionary()
        assert elapsed >= 0
        assert set(timings) == {"dictionary", "tokenizer", "total"}
