"""NPC definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class NPCPersonality:
    trust: float
    greed: float
    loyalty: float
    morality: float


@dataclass(slots=True, frozen=True)
class NPCDef:
    """A named character the player can build a relationship with."""

    id: str
    name: str
    role: str
    system: int
    station: str
    personality: NPCPersonality
    initial_rep: int = 0
