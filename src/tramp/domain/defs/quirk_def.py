"""Ship quirk definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True, frozen=True)
class QuirkDef:
    """Permanent ship trait; each effect is a multiplier on an attribute."""

    id: str
    name: str
    description: str
    effects: Dict[str, float] = field(default_factory=dict)
    flavor: str = ""
