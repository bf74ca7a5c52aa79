"""Economic event type definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from tramp.core.types import EventTarget


@dataclass(slots=True, frozen=True)
class EconomicEventTypeDef:
    id: str
    name: str
    description: str
    min_duration: int
    max_duration: int
    chance: float
    target: EventTarget
    modifiers: Dict[str, float] = field(default_factory=dict)
    random_commodity_modifier: float | None = None
