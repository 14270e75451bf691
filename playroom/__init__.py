"""
Playroom - Authoritative engine for turn-based word and number games.

One engine hosts several variants (code guessing, word feedback, word
chains, hangman, naval combat, Mr White) and provides:
- Per-variant phase machines and turn discipline
- Validate-then-resolve moves with atomic commits
- Public state kept apart from each player's secrets
- Per-player projections that never leak another player's secret
"""

__version__ = "0.1.0"
