"""
Word Feedback - a shared hidden word, guessed in turns.

Every guess is colored letter by letter (exact, elsewhere in the word,
absent). Players share one attempt budget; the first exact guess wins,
running out of attempts is a tie.
"""

from .state import FeedbackRow, LetterColor, LetterResult, WordFeedbackSecrets, WordFeedbackState
from .rules import color_guess
from .game import WordFeedbackGame

__all__ = [
    "FeedbackRow",
    "LetterColor",
    "LetterResult",
    "WordFeedbackSecrets",
    "WordFeedbackState",
    "color_guess",
    "WordFeedbackGame",
]
