"""Serialization helpers for the persisted game document."""
from __future__ import annotations

import time
from typing import Any, Dict, List, Mapping

from loguru import logger

from tramp.data.repositories import (
    CommoditiesRepository,
    NPCsRepository,
    QuirksRepository,
    StarsRepository,
    UpgradesRepository,
)
from tramp.domain.pricing import price_table
from tramp.domain.state import (
    CargoStack,
    EconomicEvent,
    GameState,
    NPCState,
    PlayerState,
    PriceKnowledgeEntry,
    SaveMeta,
    ShipState,
    WorldState,
)
from tramp.services.errors import SaveLoadError
from tramp.services.save_migrations import CURRENT_VERSION, SavePayload, upgrade_payload


class SaveService:
    """Converts GameState to/from a validated, versioned document."""

    SAVE_VERSION = CURRENT_VERSION

    def __init__(
        self,
        *,
        stars_repo: StarsRepository,
        commodities_repo: CommoditiesRepository,
        quirks_repo: QuirksRepository,
        upgrades_repo: UpgradesRepository,
        npcs_repo: NPCsRepository,
    ) -> None:
        self._stars_repo = stars_repo
        self._commodities_repo = commodities_repo
        self._quirks_repo = quirks_repo
        self._upgrades_repo = upgrades_repo
        self._npcs_repo = npcs_repo

    def serialize(self, state: GameState, timestamp_ms: int | None = None) -> SavePayload:
        """Return a JSON-serializable document; ``state`` is not modified."""
        stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        player, ship, world = state.player, state.ship, state.world
        return {
            "player": {
                "credits": player.credits,
                "debt": player.debt,
                "current_system": player.current_system,
                "days_elapsed": player.days_elapsed,
            },
            "ship": {
                "name": ship.name,
                "fuel": ship.fuel,
                "cargo_capacity": ship.cargo_capacity,
                "cargo": [self._serialize_stack(stack) for stack in ship.cargo],
                "hull": ship.hull,
                "engine": ship.engine,
                "life_support": ship.life_support,
                "quirks": list(ship.quirks),
                "upgrades": list(ship.upgrades),
                "hidden_cargo": [self._serialize_stack(stack) for stack in ship.hidden_cargo],
                "hidden_cargo_capacity": ship.hidden_cargo_capacity,
            },
            "world": {
                "visited_systems": list(world.visited_systems),
                "price_knowledge": {
                    str(system_id): {"last_visit": entry.last_visit, "prices": dict(entry.prices)}
                    for system_id, entry in world.price_knowledge.items()
                },
                "active_events": [
                    {
                        "id": event.id,
                        "type": event.type,
                        "system_id": event.system_id,
                        "start_day": event.start_day,
                        "end_day": event.end_day,
                        "modifiers": dict(event.modifiers),
                    }
                    for event in world.active_events
                ],
                "market_conditions": {
                    str(system_id): dict(goods) for system_id, goods in world.market_conditions.items()
                },
                "current_system_prices": dict(world.current_system_prices),
            },
            "npcs": {
                npc_id: {
                    "rep": npc.rep,
                    "last_interaction": npc.last_interaction,
                    "flags": list(npc.flags),
                    "interactions": npc.interactions,
                }
                for npc_id, npc in state.npcs.items()
            },
            "meta": {"version": self.SAVE_VERSION, "timestamp": stamp},
        }

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Migrate and validate a document, raising SaveLoadError when unusable."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        document = upgrade_payload(
            payload,
            current_prices_for=self._current_prices_for,
            system_names={system.id: system.name for system in self._stars_repo.all()},
        )

        player_payload = self._require_dict(document.get("player"), "player")
        ship_payload = self._require_dict(document.get("ship"), "ship")
        world_payload = self._require_dict(document.get("world"), "world")
        meta_payload = self._require_dict(document.get("meta"), "meta")

        player = self._coerce_player(player_payload)
        return GameState(
            player=player,
            ship=self._coerce_ship(ship_payload),
            world=self._coerce_world(world_payload),
            meta=SaveMeta(
                version=self.SAVE_VERSION,
                timestamp=self._coerce_non_negative_int(meta_payload.get("timestamp"), "meta.timestamp", default=0),
            ),
            npcs=self._coerce_npcs(document.get("npcs"), player.days_elapsed),
        )

    def _current_prices_for(self, document: SavePayload) -> Dict[str, int]:
        player = document.get("player")
        system_id = player.get("current_system") if isinstance(player, dict) else None
        if not isinstance(system_id, int) or not self._stars_repo.has(system_id):
            return {}
        day = player.get("days_elapsed", 0)
        if not isinstance(day, int) or day < 0:
            day = 0
        return price_table(self._commodities_repo.all(), self._stars_repo.get(system_id), day)

    def _coerce_player(self, payload: Dict[str, Any]) -> PlayerState:
        current_system = self._require_int(payload.get("current_system"), "player.current_system")
        if not self._stars_repo.has(current_system):
            raise SaveLoadError(f"player.current_system references unknown system {current_system}.")
        return PlayerState(
            credits=self._require_int(payload.get("credits"), "player.credits"),
            debt=self._require_int(payload.get("debt"), "player.debt"),
            current_system=current_system,
            days_elapsed=self._coerce_non_negative_int(payload.get("days_elapsed"), "player.days_elapsed"),
        )

    def _coerce_ship(self, payload: Dict[str, Any]) -> ShipState:
        hidden_capacity = self._coerce_non_negative_int(
            payload.get("hidden_cargo_capacity"), "ship.hidden_cargo_capacity", default=0
        )
        return ShipState(
            name=self._require_str(payload.get("name"), "ship.name"),
            fuel=self._require_number(payload.get("fuel"), "ship.fuel"),
            cargo_capacity=self._coerce_non_negative_int(payload.get("cargo_capacity"), "ship.cargo_capacity"),
            cargo=self._coerce_cargo(payload.get("cargo"), "ship.cargo"),
            hull=self._require_number(payload.get("hull"), "ship.hull"),
            engine=self._require_number(payload.get("engine"), "ship.engine"),
            life_support=self._require_number(payload.get("life_support"), "ship.life_support"),
            quirks=self._known_ids(payload.get("quirks"), "ship.quirks", self._quirks_repo.has),
            upgrades=self._known_ids(payload.get("upgrades"), "ship.upgrades", self._upgrades_repo.has),
            hidden_cargo=self._coerce_cargo(payload.get("hidden_cargo", []), "ship.hidden_cargo"),
            hidden_cargo_capacity=hidden_capacity,
        )

    def _coerce_world(self, payload: Dict[str, Any]) -> WorldState:
        visited = self._require_list(payload.get("visited_systems"), "world.visited_systems")
        knowledge_payload = self._require_dict(payload.get("price_knowledge"), "world.price_knowledge")
        price_knowledge: Dict[int, PriceKnowledgeEntry] = {}
        for raw_id, entry in knowledge_payload.items():
            context = f"world.price_knowledge[{raw_id}]"
            entry_data = self._require_dict(entry, context)
            system_id = self._require_known_system(self._coerce_system_key(raw_id, context), context)
            price_knowledge[system_id] = PriceKnowledgeEntry(
                last_visit=self._coerce_non_negative_int(entry_data.get("last_visit"), f"{context}.last_visit"),
                prices=self._coerce_price_map(entry_data.get("prices"), f"{context}.prices"),
            )

        conditions_payload = self._require_dict(payload.get("market_conditions"), "world.market_conditions")
        market_conditions: Dict[int, Dict[str, float]] = {}
        for raw_id, goods in conditions_payload.items():
            context = f"world.market_conditions[{raw_id}]"
            goods_data = self._require_dict(goods, context)
            system_id = self._require_known_system(self._coerce_system_key(raw_id, context), context)
            market_conditions[system_id] = {
                str(good_id): self._require_number(value, f"{context}.{good_id}")
                for good_id, value in goods_data.items()
            }

        return WorldState(
            visited_systems=[
                self._require_known_system(
                    self._require_int(value, f"world.visited_systems[{index}]"), f"world.visited_systems[{index}]"
                )
                for index, value in enumerate(visited)
            ],
            price_knowledge=price_knowledge,
            active_events=self._coerce_events(payload.get("active_events")),
            market_conditions=market_conditions,
            current_system_prices=self._coerce_price_map(
                payload.get("current_system_prices", {}), "world.current_system_prices"
            ),
        )

    def _coerce_events(self, value: object) -> List[EconomicEvent]:
        events: List[EconomicEvent] = []
        occupied: set[int] = set()
        for index, entry in enumerate(self._require_list(value, "world.active_events")):
            context = f"world.active_events[{index}]"
            data = self._require_dict(entry, context)
            start_day = self._coerce_non_negative_int(data.get("start_day"), f"{context}.start_day")
            end_day = self._require_int(data.get("end_day"), f"{context}.end_day")
            if end_day <= start_day:
                raise SaveLoadError(f"{context} must end after it starts.")
            system_id = self._require_known_system(
                self._require_int(data.get("system_id"), f"{context}.system_id"), f"{context}.system_id"
            )
            if system_id in occupied:
                raise SaveLoadError(f"{context} is a second event at system {system_id}.")
            occupied.add(system_id)
            modifiers = self._require_dict(data.get("modifiers"), f"{context}.modifiers")
            events.append(
                EconomicEvent(
                    id=self._require_str(data.get("id"), f"{context}.id"),
                    type=self._require_str(data.get("type"), f"{context}.type"),
                    system_id=system_id,
                    start_day=start_day,
                    end_day=end_day,
                    modifiers={
                        str(good): self._require_number(factor, f"{context}.modifiers.{good}")
                        for good, factor in modifiers.items()
                    },
                )
            )
        return events

    def _coerce_npcs(self, value: object, current_day: int) -> Dict[str, NPCState]:
        if value is None:
            return {}
        payload = self._require_dict(value, "npcs")
        npcs: Dict[str, NPCState] = {}
        for npc_id, entry in payload.items():
            if not self._npcs_repo.has(npc_id):
                logger.warning("Dropping state for unknown NPC '{}' from save", npc_id)
                continue
            context = f"npcs.{npc_id}"
            data = self._require_dict(entry, context)
            rep = self._require_int(data.get("rep"), f"{context}.rep")
            if not -100 <= rep <= 100:
                raise SaveLoadError(f"{context}.rep must be within [-100, 100].")
            npcs[npc_id] = NPCState(
                rep=rep,
                last_interaction=self._coerce_non_negative_int(
                    data.get("last_interaction"), f"{context}.last_interaction", default=current_day
                ),
                flags=self._coerce_str_list(data.get("flags", []), f"{context}.flags"),
                interactions=self._coerce_non_negative_int(
                    data.get("interactions"), f"{context}.interactions", default=0
                ),
            )
        return npcs

    def _coerce_cargo(self, value: object, context: str) -> List[CargoStack]:
        stacks: List[CargoStack] = []
        for index, entry in enumerate(self._require_list(value, context)):
            stack_context = f"{context}[{index}]"
            data = self._require_dict(entry, stack_context)
            good = self._require_str(data.get("good"), f"{stack_context}.good")
            if not self._commodities_repo.has(good):
                raise SaveLoadError(f"{stack_context}.good references unknown commodity '{good}'.")
            qty = self._require_int(data.get("qty"), f"{stack_context}.qty")
            if qty <= 0:
                raise SaveLoadError(f"{stack_context}.qty must be positive.")
            stacks.append(
                CargoStack(
                    good=good,
                    qty=qty,
                    buy_price=self._coerce_non_negative_int(data.get("buy_price"), f"{stack_context}.buy_price"),
                    buy_system=self._coerce_non_negative_int(
                        data.get("buy_system"), f"{stack_context}.buy_system", default=0
                    ),
                    buy_system_name=self._coerce_optional_str(data.get("buy_system_name")) or "Unknown",
                    buy_date=self._coerce_non_negative_int(data.get("buy_date"), f"{stack_context}.buy_date", default=0),
                )
            )
        return stacks

    def _known_ids(self, value: object, context: str, is_known) -> List[str]:
        ids: List[str] = []
        for entry in self._coerce_str_list(value if value is not None else [], context):
            if not is_known(entry):
                logger.warning("Dropping unknown id '{}' from {}", entry, context)
                continue
            if entry not in ids:
                ids.append(entry)
        return ids

    @staticmethod
    def _serialize_stack(stack: CargoStack) -> Dict[str, Any]:
        return {
            "good": stack.good,
            "qty": stack.qty,
            "buy_price": stack.buy_price,
            "buy_system": stack.buy_system,
            "buy_system_name": stack.buy_system_name,
            "buy_date": stack.buy_date,
        }

    def _require_known_system(self, system_id: int, context: str) -> int:
        if not self._stars_repo.has(system_id):
            raise SaveLoadError(f"{context} references unknown system {system_id}.")
        return system_id

    @staticmethod
    def _coerce_system_key(value: object, context: str) -> int:
        try:
            return int(str(value))
        except ValueError as exc:
            raise SaveLoadError(f"{context} key must be a system id.") from exc

    def _coerce_price_map(self, value: object, context: str) -> Dict[str, int]:
        payload = self._require_dict(value, context)
        return {str(good): self._require_int(price, f"{context}.{good}") for good, price in payload.items()}

    @staticmethod
    def _require_dict(value: object, context: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> List[Any]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_number(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SaveLoadError(f"{context} must be a number.")
        return float(value)

    @classmethod
    def _coerce_non_negative_int(cls, value: object, context: str, default: int | None = None) -> int:
        if value is None and default is not None:
            return default
        number = cls._require_int(value, context)
        if number < 0:
            raise SaveLoadError(f"{context} cannot be negative.")
        return number

    @staticmethod
    def _coerce_optional_str(value: object) -> str | None:
        return value if isinstance(value, str) and value else None

    @staticmethod
    def _coerce_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)
