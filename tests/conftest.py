"""
Shared fixtures: a small furigana dictionary, frequency rows, a scripted
tokenizer, and the dictionary in both backends.
"""

from typing import Dict, List

import pytest

from yomigana.db.connection import dispose_engines
from yomigana.db.store import SqlDictionary, open_store
from yomigana.dictionary import FrequencyEntry, build
from yomigana.loading.furigana import load_furigana
from yomigana.tokenizer import Token, Tokenizer


SAMPLE_LINES = [
    "神|かみ|0:かみ",
    "神|しん|0:しん",
    "光|ひかり|0:ひかり",
    "光|こう|0:こう",
    "言う|いう|0:い",
    "全|ぜん|0:ぜん",
    "全体|ぜんたい|0-1:ぜんたい",
    "単|たん|0:たん",
    "射|しゃ|0:しゃ",
    "大人|おとな|0-1:おとな",
    "大人買い|おとながい|0-1:おとな;2:が",
    "日本|にほん|0:に;1:ほん",
    "日本語学校|にほんごがっこう|0:に;1:ほん;2:ご;3:がっ;4:こう",
    "漢字|かんじ|0:かん;1:じ",
]

SAMPLE_FREQUENCIES = [
    FrequencyEntry("神", True, "かみ", True),
    FrequencyEntry("光", True, "ひかり", True),
    FrequencyEntry("言う", True, "いう", True),
    FrequencyEntry("大人", True, "おとな", True),
    # no matching entry
    FrequencyEntry("猫", True, "ねこ", True),
]


def T(surface: str, lemma: str = None, hint: str = None) -> Token:
    return Token(surface, lemma, hint)


SCRIPTS: Dict[str, List[Token]] = {
    "神は「光あれ」と言われた。すると光があった。": [
        T("神", "神", "かみ"), T("は"), T("「"), T("光", "光", "ひかり"), T("あれ", "ある", "ある"),
        T("」"), T("と"), T("言わ", "言う", "いう"), T("れ"), T("た"), T("。"),
        T("すると"), T("光", "光", "ひかり"), T("が"), T("あっ", "ある", "ある"), T("た"), T("。"),
    ],
    "全単射。": [
        T("全", "全", "ぜん"), T("単", "単", "たん"), T("射", "射", "しゃ"), T("。"),
    ],
    "大人買いした。": [
        T("大人", "大人", "おとな"), T("買い", "買う", "かう"), T("し", "する", "する"), T("た"), T("。"),
    ],
    "日本語が好き": [
        T("日"), T("本"), T("語"), T("が"), T("好き", "好き", "すき"),
    ],
}


class ScriptedTokenizer(Tokenizer):
    """Returns canned tokens for known inputs, one opaque token per character otherwise."""

    def __init__(self, scripts: Dict[str, List[Token]]):
        self.scripts = scripts
        self.calls = 0

    def tokenize(self, text):
        self.calls += 1
        if text in self.scripts:
            return list(self.scripts[text])
        return [Token(char) for char in text]


@pytest.fixture
def sample_lines():
    return list(SAMPLE_LINES)


@pytest.fixture
def sample_frequencies():
    return list(SAMPLE_FREQUENCIES)


@pytest.fixture
def tokenizer():
    return ScriptedTokenizer(SCRIPTS)


@pytest.fixture
def memory_dictionary(sample_lines, sample_frequencies):
    return build(sample_lines, sample_frequencies)


@pytest.fixture
def db_path(tmp_path):
    """Path for a throwaway store; engines are disposed after the test."""
    yield tmp_path / "yomigana.db"
    dispose_engines()


@pytest.fixture
def sql_dictionary(db_path, sample_lines, sample_frequencies) -> SqlDictionary:
    load_furigana(sample_lines, db_path=db_path, frequencies=sample_frequencies, batch_size=4)
    return open_store(db_path)


@pytest.fixture(params=["memory", "sql"])
def dictionary(request):
    """The sample dictionary in each backend."""
    if request.param == "memory":
        return request.getfixturevalue("memory_dictionary")
    return request.getfixturevalue("sql_dictionary")
