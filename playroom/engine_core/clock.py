"""
Turn clock - wall-clock deadlines as pure arithmetic.

The engine runs no timers. It records when a turn began; the caller's
scheduler asks how much time is left and forces a pass when it hits
zero.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class TurnClock:
    started_at: float
    duration_seconds: float

    @property
    def deadline(self) -> float:
        return self.started_at + self.duration_seconds

    def time_remaining(self, now: float) -> float:
        """Seconds left at `now`, never negative."""
        return max(0.0, self.deadline - now)

    def is_expired(self, now: float) -> bool:
        return now >= self.deadline
