"""
Phonetic Keys - Pinyin transliteration for CJK display names.

Uses pypinyin to derive two auxiliary search fields:
  - phonetic key:      full pinyin without tones ("苹果商店" -> "pingguoshangdian")
  - phonetic initials: first letter of each syllable ("苹果商店" -> "pgsd")

Names without CJK characters get neither. For multi-word latin names a
word-initials field is derived instead ("Visual Studio Code" -> "vsc").
"""

import re

from pypinyin import Style, lazy_pinyin

# CJK unified ideographs, extension A, compatibility ideographs, extension B
_CJK_RE = re.compile("[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002a6df]")
_WS_RE = re.compile(r"\s+")


def contains_cjk(text: str) -> bool:
    return bool(text) and _CJK_RE.search(text) is not None


def _normalize(parts: list[str]) -> str:
    return _WS_RE.sub("", "".join(parts)).lower()


def phonetic_key(text: str) -> str:
    """Full toneless pinyin, whitespace removed, lower-cased. Empty for non-CJK."""
    if not contains_cjk(text):
        return ""
    return _normalize(lazy_pinyin(text, style=Style.NORMAL))


def phonetic_initials(text: str) -> str:
    """First letter of every pinyin syllable. Empty for non-CJK."""
    if not contains_cjk(text):
        return ""
    return _normalize(lazy_pinyin(text, style=Style.FIRST_LETTER))


def word_initials(text: str) -> str:
    """First letter of each whitespace-separated token, for multi-word latin names."""
    if not text or contains_cjk(text):
        return ""
    tokens = text.split()
    if len(tokens) < 2:
        return ""
    return "".join(token[0] for token in tokens).lower()


def phonetic_fields(text: str) -> tuple[str, str, str]:
    """
    Compute all auxiliary search fields for a display name.

    Returns:
        Tuple of (phonetic_key, phonetic_initials, word_initials)
    """
    return phonetic_key(text), phonetic_initials(text), word_initials(text)
