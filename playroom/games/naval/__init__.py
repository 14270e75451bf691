from .state import Cell, NavalSecrets, NavalState, Ship, ShotRecord, SunkShip
from .game import NavalGame

__all__ = ["Cell", "NavalGame", "NavalSecrets", "NavalState", "Ship", "ShotRecord", "SunkShip"]
