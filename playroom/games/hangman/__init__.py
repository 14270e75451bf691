from .state import HangmanSecrets, HangmanState
from .game import HangmanGame

__all__ = ["HangmanGame", "HangmanSecrets", "HangmanState"]
