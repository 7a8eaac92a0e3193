"""Pluggable script-detection predicates for instance descriptions.

A predicate answers "does this text contain any character of script X?".
The instance scorer uses it as a proxy for "server belongs to the local
community"; which script counts as local is a configuration choice.

Usage:
    from spam_defense.utils.script_detection import get_script_predicate

    contains_japanese = get_script_predicate("japanese")
    contains_japanese("日本語のサーバーです")  # True
"""

import re
from typing import Callable, Dict

ScriptPredicate = Callable[[str], bool]


def make_script_predicate(pattern: str) -> ScriptPredicate:
    """Build a predicate matching any character of a regex character class.

    Args:
        pattern: Regex fragment, usually a character class such as "[а-яА-Я]".

    Returns:
        Predicate returning True when the text contains a match.
    """
    compiled = re.compile(pattern)

    def predicate(text: str) -> bool:
        if not text:
            return False
        return compiled.search(text) is not None

    return predicate


# Hiragana, katakana (incl. prolonged sound mark) and CJK ideographs
JAPANESE_PATTERN = r"[ぁ-ゖァ-ヶー一-鿯]"
KOREAN_PATTERN = r"[ᄀ-ᇿ㄰-㆏가-힯]"
CHINESE_PATTERN = r"[㐀-䶿一-鿿]"
CYRILLIC_PATTERN = r"[Ѐ-ӿ]"
ARABIC_PATTERN = r"[؀-ۿݐ-ݿ]"
GREEK_PATTERN = r"[Ͱ-Ͽ]"
HEBREW_PATTERN = r"[֐-׿]"
THAI_PATTERN = r"[฀-๿]"

SCRIPT_PREDICATES: Dict[str, ScriptPredicate] = {
    "japanese": make_script_predicate(JAPANESE_PATTERN),
    "korean": make_script_predicate(KOREAN_PATTERN),
    "chinese": make_script_predicate(CHINESE_PATTERN),
    "cyrillic": make_script_predicate(CYRILLIC_PATTERN),
    "arabic": make_script_predicate(ARABIC_PATTERN),
    "greek": make_script_predicate(GREEK_PATTERN),
    "hebrew": make_script_predicate(HEBREW_PATTERN),
    "thai": make_script_predicate(THAI_PATTERN),
}


def get_script_predicate(name: str) -> ScriptPredicate:
    """Look up a registered predicate by script name (case-insensitive).

    Raises:
        KeyError: If no predicate is registered under that name.
    """
    return SCRIPT_PREDICATES[name.lower()]


__all__ = [
    "ScriptPredicate",
    "make_script_predicate",
    "get_script_predicate",
    "SCRIPT_PREDICATES",
]
