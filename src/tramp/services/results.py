"""Outcome objects returned by store operations.

Validation failures are reported through these rather than raised; a
failed result always means the game state was left untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class ActionResult:
    success: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def fail(cls, reason: str) -> "ActionResult":
        return cls(success=False, reason=reason)


@dataclass(slots=True)
class SaleResult(ActionResult):
    profit_margin: int | None = None


@dataclass(slots=True)
class JumpResult(ActionResult):
    distance: float = 0.0
    fuel_cost: float = 0.0
    jump_days: int = 0
    saved: bool = False


@dataclass(slots=True)
class IntelligenceResult(ActionResult):
    system_id: int | None = None
    cost: int = 0
    prices: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class ReputationChange(ActionResult):
    npc_id: str = ""
    old_rep: int = 0
    new_rep: int = 0
    effective_delta: int = 0


@dataclass(slots=True)
class IntelligenceOffer:
    system_id: int
    system_name: str
    cost: int
    last_visit: int | None
    event_type: str | None = None
