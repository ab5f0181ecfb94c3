"""
Character handling and kana conversion for Yomigana.

Provides the kana tables used to move readings between hiragana and
katakana, plus the kanji/kana tests used when deciding whether a piece of
text can carry a reading at all.
"""

import re
from typing import Dict, Optional

# ============================================================================
# Kana Character Tables
# ============================================================================

# Sokuon (gemination marker)
SOKUON_CHARACTERS = {"sokuon": "っッ"}

# Iteration marks
ITERATION_CHARACTERS = {
    "iter": "ゝヽ",
    "iter_v": "ゞヾ"
}

# Small kana modifiers
MODIFIER_CHARACTERS = {
    "+a": "ぁァ", "+i": "ぃィ", "+u": "ぅゥ", "+e": "ぇェ", "+o": "ぉォ",
    "+ya": "ゃャ", "+yu": "ゅュ", "+yo": "ょョ", "+wa": "ゎヮ",
    "+ka": "ゕヵ", "+ke": "ゖヶ",
}

# Main kana table, hiragana first and katakana second
KANA_CHARACTERS = {
    "a": "あア",     "i": "いイ",     "u": "うウ",     "e": "えエ",     "o": "おオ",
    "ka": "かカ",    "ki": "きキ",    "ku": "くク",    "ke": "けケ",    "ko": "こコ",
    "sa": "さサ",    "shi": "しシ",   "su": "すス",    "se": "せセ",    "so": "そソ",
    "ta": "たタ",    "chi": "ちチ",   "tsu": "つツ",   "te": "てテ",    "to": "とト",
    "na": "なナ",    "ni": "にニ",    "nu": "ぬヌ",    "ne": "ねネ",    "no": "のノ",
    "ha": "はハ",    "hi": "ひヒ",    "fu": "ふフ",    "he": "へヘ",    "ho": "ほホ",
    "ma": "まマ",    "mi": "みミ",    "mu": "むム",    "me": "めメ",    "mo": "もモ",
    "ya": "やヤ",                     "yu": "ゆユ",                     "yo": "よヨ",
    "ra": "らラ",    "ri": "りリ",    "ru": "るル",    "re": "れレ",    "ro": "ろロ",
    "wa": "わワ",    "wi": "ゐヰ",                     "we": "ゑヱ",    "wo": "をヲ",
    "n": "んン",
    "ga": "がガ",    "gi": "ぎギ",    "gu": "ぐグ",    "ge": "げゲ",    "go": "ごゴ",
    "za": "ざザ",    "ji": "じジ",    "zu": "ずズ",    "ze": "ぜゼ",    "zo": "ぞゾ",
    "da": "だダ",    "dji": "ぢヂ",   "dzu": "づヅ",   "de": "でデ",    "do": "どド",
    "ba": "ばバ",    "bi": "びビ",    "bu": "ぶブ",    "be": "べベ",    "bo": "ぼボ",
    "pa": "ぱパ",    "pi": "ぴピ",    "pu": "ぷプ",    "pe": "ぺペ",    "po": "ぽポ",
    "vu": "ゔヴ",
}

ALL_CHARACTERS = {
    **SOKUON_CHARACTERS,
    **ITERATION_CHARACTERS,
    **MODIFIER_CHARACTERS,
    **KANA_CHARACTERS
}

# character -> class, e.g. "カ" -> "ka"
CHAR_CLASS_HASH: Dict[str, str] = {}
for char_class, chars in ALL_CHARACTERS.items():
    for char in chars:
        CHAR_CLASS_HASH[char] = char_class

# Half-width katakana as produced by some tokenizers
HALF_WIDTH_KANA = "･ｦｧｨｩｪｫｬｭｮｯｰｱｲｳｴｵｶｷｸｹｺｻｼｽｾｿﾀﾁﾂﾃﾄﾅﾆﾇﾈﾉﾊﾋﾌﾍﾎﾏﾐﾑﾒﾓﾔﾕﾖﾗﾘﾙﾚﾛﾜﾝﾞﾟ"
FULL_WIDTH_KANA = "・ヲァィゥェォャュョッーアイウエオカキクケコサシスセソタチツテトナニヌネノハヒフヘホマミムメモヤユヨラリルレロワン゛゜"

# ============================================================================
# Regular Expressions
# ============================================================================

KATAKANA_REGEX = r"[ァ-ヺヽヾー]"
HIRAGANA_REGEX = r"[ぁ-ゖゝゞー]"
KANJI_REGEX = r"[々ヶ〆一-龯㐀-䶿豈-﫿\U00020000-\U0003134F]"
KANA_REGEX = f"({KATAKANA_REGEX}|{HIRAGANA_REGEX})"

_KANJI_PATTERN = re.compile(KANJI_REGEX)
_KANA_WORD_PATTERN = re.compile(rf"^{KANA_REGEX}+$")


# ============================================================================
# Character Testing Functions
# ============================================================================

def is_kanji(char: str) -> bool:
    """Check if a character is kanji."""
    return bool(char) and bool(_KANJI_PATTERN.fullmatch(char))


def has_kanji(text: str) -> bool:
    """Check if any character of the text is kanji."""
    return any(is_kanji(char) for char in text)


def is_kana(word: str) -> bool:
    """Check if word consists entirely of kana (hiragana or katakana)."""
    return bool(word) and bool(_KANA_WORD_PATTERN.match(word))


# ============================================================================
# Kana Conversion
# ============================================================================

def to_full_width_kana(char: str) -> Optional[str]:
    """Return the full-width form of a half-width katakana character, if any."""
    pos = HALF_WIDTH_KANA.find(char)
    if pos >= 0:
        return FULL_WIDTH_KANA[pos]
    return None


def _convert_kana(text: str, position: int) -> str:
    result = []
    for char in text:
        normal = to_full_width_kana(char)
        if normal:
            char = normal

        char_class = CHAR_CLASS_HASH.get(char)
        if char_class:
            result.append(ALL_CHARACTERS[char_class][position])
        else:
            result.append(char)

    return ''.join(result)


def as_hiragana(text: str) -> str:
    """
    Convert katakana to hiragana.

    Characters without a hiragana counterpart (long vowel mark, kanji,
    punctuation) are left alone.

    Args:
        text: Text to convert.

    Returns:
        Text with katakana converted to hiragana.
    """
    return _convert_kana(text, 0)


def as_katakana(text: str) -> str:
    """
    Convert hiragana to katakana.

    Args:
        text: Text to convert.

    Returns:
        Text with hiragana converted to katakana.
    """
    return _convert_kana(text, -1)
