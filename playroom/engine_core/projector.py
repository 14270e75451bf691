"""
View Projector - per-player views and plain-dict serialization.

A projection is the public state verbatim plus one player's private
knowledge. Variants supply the private part; nothing from another
player's un-revealed secrets may appear in it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

from .state import Variant


T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def to_plain(value: Any) -> Any:
    """Serialize a state/secret dataclass into JSON-safe primitives."""
    return _adapter(type(value)).dump_python(value, mode="json")


def from_plain(cls: type[T], data: Any) -> T:
    """Rebuild a state/secret dataclass from primitives produced by to_plain."""
    return _adapter(cls).validate_python(data)


@dataclass
class ProjectedView:
    """What one player is allowed to see."""
    player_id: str
    variant: Variant
    public: dict[str, Any]
    private: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "variant": self.variant.value,
            "public": self.public,
            "private": self.private,
        }
