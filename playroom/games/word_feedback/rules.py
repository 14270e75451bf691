"""Two-pass letter coloring."""

from __future__ import annotations
from collections import Counter

from ...engine_core.text import normalize_word
from .state import LetterColor, LetterResult


def color_guess(target: str, guess: str) -> list[LetterResult]:
    """
    Color each letter of `guess` against `target`.

    Both words are normalized first (case and diacritics do not matter).
    Pass 1 marks exact positions and counts the target letters left over.
    Pass 2 walks the remaining positions left to right, spending that
    inventory: a letter is PARTIAL only while copies remain, so a doubled
    guess letter never claims more matches than the target holds.
    """
    target = normalize_word(target)
    guess = normalize_word(guess)
    if len(target) != len(guess):
        raise ValueError("target and guess must have the same length")

    colors: list[LetterColor | None] = [None] * len(guess)
    remaining: Counter[str] = Counter()

    for i, (t, g) in enumerate(zip(target, guess)):
        if g == t:
            colors[i] = LetterColor.EXACT
        else:
            remaining[t] += 1

    for i, g in enumerate(guess):
        if colors[i] is not None:
            continue
        if remaining[g] > 0:
            colors[i] = LetterColor.PARTIAL
            remaining[g] -= 1
        else:
            colors[i] = LetterColor.ABSENT

    return [LetterResult(letter=g, color=c) for g, c in zip(guess, colors)]
