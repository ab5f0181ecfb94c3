"""
Tests for rank.py - candidate ordering.
"""

from yomigana.dictionary import FrequencyEntry, build
from yomigana.rank import rank_candidates, rank_key


def _readings(entries):
    return [e.reading for e in entries]


class TestRankCandidates:
    """Ordering by (reading matches hint, reading is common)."""

    def test_hint_wins(self, dictionary):
        assert _readings(rank_candidates(dictionary, "光", "こう")) == ["こう", "ひかり"]

    def test_common_reading_without_hint(self, dictionary):
        assert _readings(rank_candidates(dictionary, "光")) == ["ひかり", "こう"]

    def test_unknown_hint_falls_back_to_frequency(self, dictionary):
        assert _readings(rank_candidates(dictionary, "神", "じん")) == ["かみ", "しん"]

    def test_unknown_word(self, dictionary):
        assert rank_candidates(dictionary, "猫", "ねこ") == []

    def test_ties_keep_dictionary_order(self):
        dictionary = build(["生|せい|0:せい", "生|しょう|0:しょう", "生|なま|0:なま"])
        # reading order: しょう < せい < なま
        assert _readings(rank_candidates(dictionary, "生")) == ["しょう", "せい", "なま"]

    def test_hint_beats_common(self):
        dictionary = build(
            ["生|せい|0:せい", "生|なま|0:なま"],
            [FrequencyEntry("生", False, "せい", True)],
        )
        assert _readings(rank_candidates(dictionary, "生", "なま")) == ["なま", "せい"]


class TestSkipCommon:
    """Common text is filtered out before ranking."""

    def test_common_text_dropped(self, dictionary):
        assert _readings(rank_candidates(dictionary, "神", "かみ", skip_common=True)) == ["しん"]

    def test_hint_cannot_rescue_common_entry(self):
        dictionary = build(
            ["生|せい|0:せい", "生|なま|0:なま"],
            [FrequencyEntry("生", True, "なま", True)],
        )
        assert _readings(rank_candidates(dictionary, "生", "なま", skip_common=True)) == ["せい"]

    def test_uncommon_kept(self, dictionary):
        assert _readings(rank_candidates(dictionary, "全", skip_common=True)) == ["ぜん"]


class TestRankKey:
    def test_no_hint(self, memory_dictionary):
        [entry] = memory_dictionary.lookup_word("言う")
        assert rank_key(entry, None) == (False, True)
        assert rank_key(entry, "いう") == (True, True)
