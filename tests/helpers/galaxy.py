"""Small hand-built catalogs for store and service tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from tramp.config import GameConfig
from tramp.services.game_store import GameStore, build_game_store
from tramp.services.save_store import InMemorySaveStore

SYSTEMS = [
    {"id": 0, "name": "Sol", "x": 0.0, "y": 0.0, "z": 0.0, "spectral_class": "G2V", "station_count": 3},
    {"id": 1, "name": "Core Two", "x": 3.0, "y": 0.0, "z": 0.0, "spectral_class": "G2V", "station_count": 1},
    {"id": 2, "name": "Frontier", "x": 0.0, "y": 8.0, "z": 0.0, "spectral_class": "M3V", "station_count": 1},
    {"id": 3, "name": "Outpost", "x": 0.0, "y": 0.0, "z": 21.0, "spectral_class": "K1V", "station_count": 1},
]

COMMODITIES = {
    "grain": {"name": "Grain", "base_price": 10, "tech_bias": -0.6},
    "ore": {"name": "Ore", "base_price": 15, "tech_bias": -0.8},
    "electronics": {"name": "Electronics", "base_price": 35, "tech_bias": 1.0},
}

QUIRKS = {
    "hot_thruster": {"name": "Hot Thruster", "description": "Runs hot.", "effects": {"fuel_consumption": 1.05}},
    "fuel_sipper": {"name": "Fuel Sipper", "description": "Sips fuel.", "effects": {"fuel_consumption": 0.85}},
    "leaky_seals": {"name": "Leaky Seals", "description": "Whistles.", "effects": {"hull_degradation": 1.5}},
    "smooth_talker": {"name": "Smooth Talker", "description": "Charming.", "effects": {"npc_rep_gain": 1.05}},
}

UPGRADES = {
    "extended_tank": {"name": "Extended Tank", "cost": 3000, "description": "Bigger tank.", "effects": {"fuel_capacity": 150}},
    "reinforced_hull": {
        "name": "Reinforced Hull",
        "cost": 5000,
        "description": "Tougher hull.",
        "effects": {"hull_degradation": 0.5, "cargo_capacity": 45},
    },
    "expanded_hold": {"name": "Expanded Hold", "cost": 6000, "description": "Bigger hold.", "effects": {"cargo_capacity": 75}},
    "smuggler_panels": {
        "name": "Smuggler Panels",
        "cost": 4500,
        "description": "Hidden hold.",
        "effects": {"hidden_cargo_capacity": 10},
    },
    "advanced_sensors": {"name": "Sensors", "cost": 3500, "description": "See events.", "effects": {"event_visibility": 1}},
}

NPCS = {
    "chen": {
        "name": "Wei Chen",
        "role": "Dock Worker",
        "system": 2,
        "station": "Bore Station 7",
        "personality": {"trust": 0.3, "greed": 0.2, "loyalty": 0.8, "morality": 0.6},
        "initial_rep": 0,
    },
    "cole": {
        "name": "Marcus Cole",
        "role": "Loan Shark",
        "system": 0,
        "station": "Sol Central",
        "personality": {"trust": 0.1, "greed": 0.9, "loyalty": 0.3, "morality": 0.2},
        "initial_rep": -20,
    },
}


def event_types(chance: float = 0.0) -> Dict[str, Any]:
    return {
        "festival": {
            "name": "Festival",
            "description": "Party.",
            "duration": [2, 4],
            "modifiers": {"electronics": 1.75, "grain": 1.2},
            "chance": chance,
            "target": "core",
        },
        "mining_strike": {
            "name": "Mining Strike",
            "description": "Strike.",
            "duration": [5, 10],
            "modifiers": {"ore": 1.5},
            "chance": chance,
            "target": "mining",
        },
    }


def write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def write_definitions(tmp_path: Path, *, event_chance: float = 0.0) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir(parents=True, exist_ok=True)
    write_json(
        definitions_dir / "stars.json",
        {"core_system_ids": [0, 1], "systems": SYSTEMS, "wormholes": [[0, 1], [0, 2], [2, 3]]},
    )
    write_json(definitions_dir / "commodities.json", COMMODITIES)
    write_json(definitions_dir / "quirks.json", QUIRKS)
    write_json(definitions_dir / "upgrades.json", UPGRADES)
    write_json(definitions_dir / "npcs.json", NPCS)
    write_json(definitions_dir / "economic_events.json", event_types(event_chance))
    return definitions_dir


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start_ms: int = 1_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms / 1000

    def advance_ms(self, milliseconds: int) -> None:
        self.now_ms += milliseconds


def build_store(
    tmp_path: Path,
    *,
    event_chance: float = 0.0,
    seed: int | None = 7,
    start: bool = True,
) -> tuple[GameStore, FakeClock, InMemorySaveStore]:
    definitions_dir = write_definitions(tmp_path, event_chance=event_chance)
    clock = FakeClock()
    save_store = InMemorySaveStore()
    store = build_game_store(
        GameConfig(),
        definitions_path=definitions_dir,
        save_store=save_store,
        clock=clock,
    )
    if start:
        store.init_new_game(seed=seed)
        # Predictable ship for arithmetic in tests.
        store.state.ship.quirks = []
    return store, clock, save_store
