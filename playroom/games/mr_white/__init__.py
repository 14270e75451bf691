from .state import Clue, MrWhiteSecrets, MrWhiteState, Side, VoteTally
from .game import MrWhiteGame

__all__ = ["Clue", "MrWhiteGame", "MrWhiteSecrets", "MrWhiteState", "Side", "VoteTally"]
