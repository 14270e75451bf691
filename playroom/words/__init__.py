"""
Words module - Where target words come from and how guesses are checked.

Sources hand the engine a normalized word at creation time; the
dictionary checker is consulted by callers before a word guess is
forwarded. Both talk to the network asynchronously, the engine never does.
"""

from .source import (
    DEFAULT_WORD_API_URL,
    ChainedWordSource,
    ListWordSource,
    RandomWordApiSource,
    WordPick,
    WordSource,
)
from .checker import WiktionaryChecker

__all__ = [
    "DEFAULT_WORD_API_URL",
    "ChainedWordSource",
    "ListWordSource",
    "RandomWordApiSource",
    "WiktionaryChecker",
    "WordPick",
    "WordSource",
]
