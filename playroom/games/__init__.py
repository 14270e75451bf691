"""
Games module - Variant implementations.

Each variant has its own subpackage with:
- Public state and secret store value types
- Pure rules where the variant has an algorithm worth isolating
- The GameInstance subclass (validator, resolver, projector)
"""

from __future__ import annotations
import random
import time
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ..engine_core.errors import GameConfigError
from ..engine_core.instance import GameInstance
from ..engine_core.settings import GameSettings
from ..engine_core.state import Variant
from .digit_duel import DigitDuelGame
from .hangman import HangmanGame
from .mr_white import MrWhiteGame
from .naval import NavalGame
from .word_chain import WordChainGame
from .word_feedback import WordFeedbackGame

if TYPE_CHECKING:
    from ..words import WordSource


GAME_TYPES: dict[Variant, type[GameInstance]] = {
    Variant.DIGIT_DUEL: DigitDuelGame,
    Variant.WORD_FEEDBACK: WordFeedbackGame,
    Variant.WORD_CHAIN: WordChainGame,
    Variant.HANGMAN: HangmanGame,
    Variant.NAVAL: NavalGame,
    Variant.MR_WHITE: MrWhiteGame,
}

# Variants whose creation fetches a word first
SOURCED_VARIANTS = frozenset({Variant.WORD_FEEDBACK, Variant.MR_WHITE})


def game_class(variant: Variant | str) -> type[GameInstance]:
    try:
        return GAME_TYPES[Variant(variant)]
    except ValueError:
        raise GameConfigError(f"Unknown variant: {variant}") from None


async def create_game(
    variant: Variant | str,
    player_ids: Iterable[str],
    settings: GameSettings | None = None,
    source: WordSource | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] = time.time,
) -> GameInstance:
    """
    Build a fresh instance of any variant.

    Word-sourced variants await their source before anything is built;
    SourceUnavailable propagates and no instance exists afterwards.
    """
    cls = game_class(variant)
    if cls is WordFeedbackGame:
        return await WordFeedbackGame.create(player_ids, settings, source=source, clock=clock)
    if cls is MrWhiteGame:
        return await MrWhiteGame.create(player_ids, settings, source=source, rng=rng, clock=clock)
    return cls.create(player_ids, settings, clock=clock)


def restore_game(
    variant: Variant | str,
    public: dict[str, Any],
    settings: GameSettings | None = None,
    secrets: Any | None = None,
    clock: Callable[[], float] = time.time,
) -> GameInstance:
    """Rebuild from persisted public state; secrets may follow via inject_secrets()."""
    return game_class(variant).restore(public, settings, secrets, clock=clock)


__all__ = [
    "GAME_TYPES",
    "SOURCED_VARIANTS",
    "DigitDuelGame",
    "HangmanGame",
    "MrWhiteGame",
    "NavalGame",
    "WordChainGame",
    "WordFeedbackGame",
    "create_game",
    "game_class",
    "restore_game",
]
