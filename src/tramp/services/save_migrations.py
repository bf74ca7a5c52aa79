"""Forward migrations for persisted documents.

Each step takes a document at one version and returns a new document at the
next version; inputs are deep-copied and never modified. Steps only fill in
or rename fields; type checking happens afterwards in SaveService.
"""
from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Mapping

from loguru import logger

from tramp.services.errors import SaveLoadError

SavePayload = Dict[str, Any]

VERSION_1_0 = "1.0.0"
VERSION_2_0 = "2.0.0"
VERSION_2_1 = "2.1.0"
CURRENT_VERSION = VERSION_2_1
COMPATIBLE_VERSIONS = (VERSION_1_0, VERSION_2_0, VERSION_2_1)

_DEFAULT_CONDITION = 100.0


def payload_version(payload: Mapping[str, Any]) -> str:
    meta = payload.get("meta")
    if not isinstance(meta, Mapping):
        raise SaveLoadError("Save data is missing its meta section.")
    version = meta.get("version")
    if not isinstance(version, str):
        raise SaveLoadError("meta.version must be a string.")
    return version


def migrate_v1_to_v2(
    payload: Mapping[str, Any],
    *,
    current_prices: Mapping[str, int],
    system_names: Mapping[int, str],
) -> SavePayload:
    """Add ship condition, personality slots, knowledge and events.

    ``current_prices`` are today's prices at the saved current system; they
    seed the price knowledge and stand in for missing purchase prices.
    """
    document: SavePayload = copy.deepcopy(dict(payload))
    player = document.get("player")
    ship = document.get("ship")
    world = document.setdefault("world", {})
    current_system = player.get("current_system", 0) if isinstance(player, dict) else 0

    if isinstance(ship, dict):
        for key in ("hull", "engine", "life_support"):
            ship.setdefault(key, _DEFAULT_CONDITION)
        ship.setdefault("quirks", [])
        ship.setdefault("upgrades", [])
        ship.setdefault("hidden_cargo", [])
        ship.setdefault("hidden_cargo_capacity", 0)
        cargo = ship.get("cargo")
        if isinstance(cargo, list):
            ship["cargo"] = [_migrate_v1_stack(stack, current_prices, system_names) for stack in cargo]

    if isinstance(world, dict):
        world.setdefault("visited_systems", [current_system])
        world.setdefault(
            "price_knowledge",
            {str(current_system): {"last_visit": 0, "prices": dict(current_prices)}},
        )
        world.setdefault("active_events", [])
        world.setdefault("current_system_prices", dict(current_prices))

    document.setdefault("meta", {})["version"] = VERSION_2_0
    return document


def migrate_v2_to_v2_1(payload: Mapping[str, Any]) -> SavePayload:
    """Add market pressure tracking and the NPC ledger."""
    document: SavePayload = copy.deepcopy(dict(payload))
    world = document.get("world")
    if isinstance(world, dict):
        world.setdefault("market_conditions", {})
    document.setdefault("npcs", {})
    document.setdefault("meta", {})["version"] = VERSION_2_1
    return document


def upgrade_payload(
    payload: Mapping[str, Any],
    *,
    current_prices_for: Callable[[SavePayload], Mapping[str, int]],
    system_names: Mapping[int, str],
) -> SavePayload:
    """Run every migration between the document's version and the current one."""
    version = payload_version(payload)
    if version not in COMPATIBLE_VERSIONS:
        raise SaveLoadError(f"Incompatible save version: {version}")

    document: SavePayload = copy.deepcopy(dict(payload))
    if version == VERSION_1_0:
        logger.info("Migrating save from {} to {}", VERSION_1_0, VERSION_2_0)
        document = migrate_v1_to_v2(
            document,
            current_prices=current_prices_for(document),
            system_names=system_names,
        )
        version = VERSION_2_0
    if version == VERSION_2_0:
        logger.info("Migrating save from {} to {}", VERSION_2_0, VERSION_2_1)
        document = migrate_v2_to_v2_1(document)
    return document


def _migrate_v1_stack(
    stack: Any, current_prices: Mapping[str, int], system_names: Mapping[int, str]
) -> Any:
    if not isinstance(stack, dict):
        return stack
    migrated = dict(stack)
    if "purchase_price" in migrated:
        migrated["buy_price"] = migrated.pop("purchase_price")
    if "purchase_system" in migrated:
        migrated["buy_system"] = migrated.pop("purchase_system")
    if "purchase_day" in migrated:
        migrated["buy_date"] = migrated.pop("purchase_day")
    good = migrated.get("good")
    migrated.setdefault("buy_price", current_prices.get(good, 0) if isinstance(good, str) else 0)
    migrated.setdefault("buy_system", 0)
    migrated.setdefault("buy_date", 0)
    if "buy_system_name" not in migrated:
        buy_system = migrated["buy_system"]
        migrated["buy_system_name"] = (
            system_names.get(buy_system, "Unknown") if isinstance(buy_system, int) else "Unknown"
        )
    return migrated
