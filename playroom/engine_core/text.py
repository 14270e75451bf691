"""Word and letter normalization shared by the word variants."""

from __future__ import annotations
import re
import unicodedata


PLAIN_WORD_RE = re.compile(r"[A-Za-z]+")
MIN_WORD_LENGTH = 2
MAX_WORD_LENGTH = 20


def normalize_word(raw: str) -> str:
    """
    Canonical form for feedback comparison.

    Diacritics are stripped (NFD, combining marks dropped), letters are
    uppercased and anything outside A-Z is removed.
    """
    if not raw:
        return ""
    decomposed = unicodedata.normalize("NFD", raw)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^A-Z]", "", stripped.upper())


def is_plain_word(word: object) -> bool:
    """ASCII letters only, 2-20 characters."""
    return (
        isinstance(word, str)
        and MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH
        and PLAIN_WORD_RE.fullmatch(word) is not None
    )


def normalize_letter(raw: object) -> str:
    """Reduce a letter guess to one lowercase character ("" if none)."""
    if not isinstance(raw, str):
        return ""
    return raw.strip().lower()[:1]
