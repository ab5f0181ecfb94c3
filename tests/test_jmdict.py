"""
Tests for jmdict.py - frequency rows from JMdict XML.
"""

import gzip
import io

import pytest

import yomigana.jmdict
from yomigana.dictionary import FrequencyEntry
from yomigana.jmdict import is_common, is_gzip_file, iter_jmdict_frequencies

JMDICT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<JMdict>
<entry>
<ent_seq>1</ent_seq>
<k_ele><keb>神</keb><ke_pri>ichi1</ke_pri><ke_pri>news1</ke_pri></k_ele>
<r_ele><reb>かみ</reb><re_pri>ichi1</re_pri></r_ele>
<r_ele><reb>かん</reb></r_ele>
</entry>
<entry>
<ent_seq>2</ent_seq>
<k_ele><keb>日本</keb><ke_pri>news2</ke_pri></k_ele>
<k_ele><keb>日夲</keb></k_ele>
<r_ele><reb>にほん</reb><re_pri>spec1</re_pri></r_ele>
<r_ele><reb>にっぽん</reb><re_restr>日本</re_restr></r_ele>
<r_ele><reb>ジャパン</reb><re_nokanji/></r_ele>
</entry>
<entry>
<ent_seq>3</ent_seq>
<r_ele><reb>すごい</reb><re_pri>ichi1</re_pri></r_ele>
</entry>
</JMdict>
"""


class TestIsCommon:
    def test_common_tags(self):
        assert is_common(["ichi1"])
        assert is_common(["nf12", "gai1"])

    def test_uncommon_tags(self):
        assert not is_common([])
        assert not is_common(["news2", "ichi2", "nf01"])


class TestIterJmdictFrequencies:
    """Kanji form x reading pairs with their common flags."""

    EXPECTED = [
        FrequencyEntry("神", True, "かみ", True),
        FrequencyEntry("神", True, "かん", False),
        FrequencyEntry("日本", False, "にほん", True),
        FrequencyEntry("日夲", False, "にほん", True),
        FrequencyEntry("日本", False, "にっぽん", False),
    ]

    def test_from_file_object(self):
        rows = list(iter_jmdict_frequencies(io.BytesIO(JMDICT_XML.encode("utf-8"))))
        assert rows == self.EXPECTED

    def test_from_path(self, tmp_path):
        path = tmp_path / "JMdict_e"
        path.write_text(JMDICT_XML, encoding="utf-8")
        assert list(iter_jmdict_frequencies(path)) == self.EXPECTED
        assert not is_gzip_file(path)

    def test_from_gzip(self, tmp_path):
        path = tmp_path / "JMdict_e.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(JMDICT_XML)
        assert is_gzip_file(path)
        assert list(iter_jmdict_frequencies(str(path))) == self.EXPECTED

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(iter_jmdict_frequencies(tmp_path / "missing.xml"))

    def test_finished_entries_released(self, monkeypatch):
        """Parsed entries are detached from the root as the stream advances."""
        real_iterparse = yomigana.jmdict.ET.iterparse
        roots = []

        def recording_iterparse(source, events=None):
            for event, elem in real_iterparse(source, events=events):
                if not roots:
                    roots.append(elem)
                yield event, elem

        monkeypatch.setattr(yomigana.jmdict.ET, "iterparse", recording_iterparse)
        rows = list(iter_jmdict_frequencies(io.BytesIO(JMDICT_XML.encode("utf-8"))))
        assert rows == self.EXPECTED
        assert roots[0].tag == "JMdict"
        assert len(roots[0]) == 0
