"""
Digit Duel - guess the other player's secret code.

Both players set a code of N digits (4 by default). On each turn the
current player guesses the opponent's code and is told how many digits
are shared and how many sit in the right place.
"""

from .state import DigitDuelState, DigitDuelSecrets, DigitGuess
from .rules import DigitScore, score_guess, is_valid_code
from .game import DigitDuelGame

__all__ = [
    "DigitDuelState",
    "DigitDuelSecrets",
    "DigitGuess",
    "DigitScore",
    "score_guess",
    "is_valid_code",
    "DigitDuelGame",
]
