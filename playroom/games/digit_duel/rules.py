"""Scoring for digit codes."""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass


@dataclass(frozen=True)
class DigitScore:
    correct_digits: int
    correct_place: int


def is_valid_code(value: object, length: int) -> bool:
    """Exactly `length` ASCII digits."""
    return (
        isinstance(value, str)
        and len(value) == length
        and all("0" <= c <= "9" for c in value)
    )


def score_guess(secret: str, guess: str) -> DigitScore:
    """
    Compare a guess with a secret of the same length.

    correct_place counts positions that match exactly. correct_digits
    counts shared digits as a multiset intersection, so a digit repeated
    in the guess is credited at most as many times as the secret holds it.
    """
    if len(secret) != len(guess):
        raise ValueError("secret and guess must have the same length")

    correct_place = sum(1 for s, g in zip(secret, guess) if s == g)
    shared = Counter(secret) & Counter(guess)
    return DigitScore(correct_digits=sum(shared.values()), correct_place=correct_place)
