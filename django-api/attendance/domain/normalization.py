"""Multilingual text normalization for names and search terms.

Names are folded to a search-ready key: lower-cased, stripped of Latin
diacritics through a fixed table, cleared of punctuation and collapsed to
single spaces. Letters and digits from any other script (CJK, Arabic,
Devanagari, Cyrillic, ...) are kept as they are.

All functions are total: any string, including an empty one, is accepted.
"""

import re

ACCENT_MAP: dict[str, str] = {
    # a
    "á": "a", "à": "a", "ã": "a", "â": "a", "ä": "a",
    "ā": "a", "ă": "a", "ą": "a", "å": "a",
    # e
    "é": "e", "è": "e", "ê": "e", "ë": "e",
    "ē": "e", "ĕ": "e", "ę": "e", "ě": "e",
    # i
    "í": "i", "ì": "i", "î": "i", "ï": "i",
    "ī": "i", "ĭ": "i", "į": "i", "ı": "i",
    # o
    "ó": "o", "ò": "o", "õ": "o", "ô": "o",
    "ö": "o", "ō": "o", "ŏ": "o", "ø": "o",
    # u
    "ú": "u", "ù": "u", "û": "u", "ü": "u",
    "ū": "u", "ŭ": "u", "ų": "u", "ů": "u",
    # consonants
    "ç": "c", "ć": "c", "č": "c",
    "ñ": "n", "ń": "n", "ň": "n",
    "ł": "l", "ľ": "l",
    "ś": "s", "š": "s", "ş": "s",
    "ź": "z", "ż": "z", "ž": "z",
    "ř": "r", "ŕ": "r",
    "ť": "t", "ď": "d", "đ": "d",
    "ğ": "g", "ý": "y",
    # ligatures and letters without a single-letter base
    "ß": "ss",
    "œ": "oe",
    "æ": "ae",
    "þ": "th",
    "ð": "d",
}

SANITIZE_EXTRA_CHARS = frozenset(".@-_/")

_ARABIC = re.compile("[\u0600-\u06FF]")
_ASIAN = re.compile("[\u4E00-\u9FFF\u3040-\u309F\u30A0-\u30FF\uAC00-\uD7AF]")


def _is_word_char(char: str) -> bool:
    return char.isalpha() or char.isdigit() or char.isspace()


def normalize_name(value: str) -> str:
    """Return the identity key for ``value``.

    >>> normalize_name("  François   MÜLLER ")
    'francois muller'
    """
    if not value or value.isspace():
        return ""

    folded = []
    for char in value.lower():
        replacement = ACCENT_MAP.get(char)
        if replacement is not None:
            folded.append(replacement)
        elif _is_word_char(char):
            folded.append(char)

    return " ".join("".join(folded).split())


def sanitize_input(value: str) -> str:
    """Drop everything except letters, digits, whitespace and ``. @ - _ /``."""
    if not value or value.isspace():
        return ""

    kept = (c for c in value if _is_word_char(c) or c in SANITIZE_EXTRA_CHARS)
    return "".join(kept).strip()


def normalize_search_term(value: str) -> str:
    # Sanitize before folding so stray symbols never reach the folding table.
    return normalize_name(sanitize_input(value))


def contains_arabic_text(value: str) -> bool:
    return bool(value) and _ARABIC.search(value) is not None


def contains_asian_text(value: str) -> bool:
    """True when ``value`` has CJK ideographs, kana or Hangul syllables."""
    return bool(value) and _ASIAN.search(value) is not None


class TextNormalizer:
    """Injectable facade over the module-level normalization functions."""

    def normalize_name(self, value: str) -> str:
        return normalize_name(value)

    def sanitize_input(self, value: str) -> str:
        return sanitize_input(value)

    def normalize_search_term(self, value: str) -> str:
        return normalize_search_term(value)

    def contains_arabic_text(self, value: str) -> bool:
        return contains_arabic_text(value)

    def contains_asian_text(self, value: str) -> bool:
        return contains_asian_text(value)
