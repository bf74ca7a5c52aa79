"""Domain-level state tracking for a single game."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from tramp.core.types import MarketConditions, PriceMap

MIN_REPUTATION = -100
MAX_REPUTATION = 100
MAX_CONDITION = 100.0


@dataclass(slots=True, frozen=True)
class CargoStack:
    """A quantity of one good bought at one price.

    Stacks are never mutated in place; cargo helpers return new stacks.
    """

    good: str
    qty: int
    buy_price: int
    buy_system: int = 0
    buy_system_name: str = "Unknown"
    buy_date: int = 0


@dataclass(slots=True, frozen=True)
class EconomicEvent:
    """A temporary multiplier on some goods at one system.

    Active while ``start_day <= current_day <= end_day``.
    """

    id: str
    type: str
    system_id: int
    start_day: int
    end_day: int
    modifiers: Dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class PriceKnowledgeEntry:
    last_visit: int
    prices: PriceMap = field(default_factory=dict)


@dataclass(slots=True)
class PlayerState:
    credits: int
    debt: int
    current_system: int
    days_elapsed: int = 0


@dataclass(slots=True)
class ShipState:
    name: str
    fuel: float
    cargo_capacity: int
    cargo: List[CargoStack] = field(default_factory=list)
    hull: float = MAX_CONDITION
    engine: float = MAX_CONDITION
    life_support: float = MAX_CONDITION
    quirks: List[str] = field(default_factory=list)
    upgrades: List[str] = field(default_factory=list)
    hidden_cargo: List[CargoStack] = field(default_factory=list)
    hidden_cargo_capacity: int = 0


@dataclass(slots=True)
class WorldState:
    visited_systems: List[int] = field(default_factory=list)
    price_knowledge: Dict[int, PriceKnowledgeEntry] = field(default_factory=dict)
    active_events: List[EconomicEvent] = field(default_factory=list)
    market_conditions: MarketConditions = field(default_factory=dict)
    # Prices locked in when the player arrived; trading here uses these.
    current_system_prices: PriceMap = field(default_factory=dict)


@dataclass(slots=True)
class NPCState:
    rep: int
    last_interaction: int
    flags: List[str] = field(default_factory=list)
    interactions: int = 0


@dataclass(slots=True)
class SaveMeta:
    version: str
    timestamp: int = 0


@dataclass(slots=True)
class GameState:
    """The whole persistent document for one game."""

    player: PlayerState
    ship: ShipState
    world: WorldState
    meta: SaveMeta
    npcs: Dict[str, NPCState] = field(default_factory=dict)
