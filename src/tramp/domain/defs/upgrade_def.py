"""Ship upgrade definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True, frozen=True)
class UpgradeDef:
    """Purchasable ship modification.

    Effects whose key ends in ``capacity`` are absolute values, every other
    effect multiplies the matching capability.
    """

    id: str
    name: str
    cost: int
    description: str
    effects: Dict[str, float] = field(default_factory=dict)
    tradeoff: str = ""
