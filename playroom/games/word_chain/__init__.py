"""
Word Chain - uncover the opponent's chain of words.

Each player sets a public theme word and N secret words that are shown
only by first letter and length. A right guess uncovers a word and keeps
the turn; a wrong one gives away one more letter and passes the turn.
"""

from .state import ChainGuess, ChainWord, WordChainSecrets, WordChainState
from .game import WordChainGame

__all__ = [
    "ChainGuess",
    "ChainWord",
    "WordChainSecrets",
    "WordChainState",
    "WordChainGame",
]
