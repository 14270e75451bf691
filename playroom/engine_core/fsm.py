"""
Phase machine - Enumerated transition tables per variant.

Every variant declares which phase changes it allows. Tables are
checked when a variant class is defined, so a table that lets a game
leave ENDED cannot be constructed at all, and any transition outside
the table raises IllegalTransition at the point it is attempted.
"""

from __future__ import annotations
from typing import Mapping

from .errors import EngineError, IllegalTransition
from .state import Phase, PublicState


TransitionTable = Mapping[Phase, frozenset[Phase]]


# SETUP collects secrets, PLAY alternates turns, ENDED is terminal.
SECRET_DUEL_TRANSITIONS: TransitionTable = {
    Phase.SETUP: frozenset({Phase.PLAY}),
    Phase.PLAY: frozenset({Phase.ENDED}),
    Phase.ENDED: frozenset(),
}

# No secret submission: the instance starts in PLAY.
OPEN_PLAY_TRANSITIONS: TransitionTable = {
    Phase.PLAY: frozenset({Phase.ENDED}),
    Phase.ENDED: frozenset(),
}

# Clue rounds repeat until a vote catches Mr White or too few remain.
SOCIAL_DEDUCTION_TRANSITIONS: TransitionTable = {
    Phase.CLUES: frozenset({Phase.DISCUSSION}),
    Phase.DISCUSSION: frozenset({Phase.VOTING}),
    Phase.VOTING: frozenset({Phase.CLUES, Phase.LAST_GUESS, Phase.ENDED}),
    Phase.LAST_GUESS: frozenset({Phase.ENDED}),
    Phase.ENDED: frozenset(),
}


def check_table(table: TransitionTable, initial: Phase) -> None:
    """
    Reject malformed tables.

    - ENDED must be present and terminal
    - every target must itself be a key
    - ENDED must be reachable from the initial phase
    """
    if Phase.ENDED not in table:
        raise EngineError("transition table has no ENDED phase")
    if table[Phase.ENDED]:
        raise EngineError("ENDED must not have outgoing transitions")
    if initial not in table:
        raise EngineError(f"initial phase {initial.value} missing from table")

    for source, targets in table.items():
        for target in targets:
            if target not in table:
                raise EngineError(f"{source.value} -> {target.value}: target not declared")

    seen = {initial}
    frontier = [initial]
    while frontier:
        for nxt in table[frontier.pop()]:
            if nxt not in seen:
                seen.add(nxt)
                frontier.append(nxt)
    if Phase.ENDED not in seen:
        raise EngineError("ENDED is unreachable from the initial phase")


def transition(table: TransitionTable, state: PublicState, target: Phase) -> None:
    """Move state to target, or raise if the table forbids it."""
    allowed = table.get(state.phase, frozenset())
    if target not in allowed:
        raise IllegalTransition(state.variant.value, state.phase.value, target.value)
    state.phase = target
