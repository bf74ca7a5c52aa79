"""Authoritative owner of the game state.

Every mutating operation follows the same order: validate, compute the new
values through the domain helpers and services, replace the affected state
slices, notify subscribers, persist. A failed validation returns a result
object and leaves the state exactly as it was.
"""
from __future__ import annotations

import copy
import secrets
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence

from loguru import logger

from tramp import GAME_VERSION
from tramp import config as game_config
from tramp.core.numbers import round_half_up
from tramp.core.rng import RNG
from tramp.data.repositories import (
    CommoditiesRepository,
    EconomicEventTypesRepository,
    NPCsRepository,
    QuirksRepository,
    StarsRepository,
    UpgradesRepository,
)
from tramp.domain.cargo import add_stack, cargo_used, quantity_of, remove_from_stack, take_good
from tramp.domain.defs import StarSystemDef
from tramp.domain.fuel import FUEL_CAPACITY_EPSILON, fuel_price_per_percent
from tramp.domain.market_conditions import apply_trade, decay
from tramp.domain.pricing import price_table
from tramp.domain.reputation import RepTier
from tramp.domain.ship import (
    DEFAULT_SHIP_NAME,
    SHIP_SYSTEMS,
    ConditionWarning,
    ShipCapabilities,
    calculate_capabilities,
    clamp_condition,
    condition_warnings,
    jump_wear,
    repair_cost,
    sanitize_ship_name,
)
from tramp.domain.state import (
    MAX_CONDITION,
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
from tramp.services import notifications as events
from tramp.services.errors import GameNotInitializedError, SaveLoadError
from tramp.services.event_service import EconomicEventService
from tramp.services.intelligence_service import IntelligenceService
from tramp.services.navigation_service import NavigationService, Navigator
from tramp.services.notifications import ChangeNotifier, Subscriber
from tramp.services.reputation_service import ReputationService
from tramp.services.results import (
    ActionResult,
    IntelligenceOffer,
    IntelligenceResult,
    JumpResult,
    ReputationChange,
    SaleResult,
)
from tramp.services.save_service import SaveService
from tramp.services.save_store import InMemorySaveStore, JsonFileSaveStore, SaveStore

STARTING_CREDITS = 500
STARTING_DEBT = 10000
STARTING_SYSTEM = 0
STARTING_CARGO_CAPACITY = 50
STARTING_GOOD = "grain"
STARTING_GOOD_QTY = 20
MIN_STARTING_QUIRKS = 2
MAX_STARTING_QUIRKS = 3

SAVE_DEBOUNCE_MS = 1000
_MAX_RANDOM_SEED = 2**31 - 1

SAVE_DEBOUNCED = "debounced"


class GameStore:
    """Single owner of the GameState plus its notification registry."""

    def __init__(
        self,
        *,
        stars_repo: StarsRepository,
        commodities_repo: CommoditiesRepository,
        npcs_repo: NPCsRepository,
        quirks_repo: QuirksRepository,
        upgrades_repo: UpgradesRepository,
        event_service: EconomicEventService,
        save_store: SaveStore,
        navigator: Navigator | None = None,
        save_debounce_ms: int = SAVE_DEBOUNCE_MS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._stars_repo = stars_repo
        self._commodities_repo = commodities_repo
        self._quirks_repo = quirks_repo
        self._upgrades_repo = upgrades_repo
        self._event_service = event_service
        self._save_store = save_store
        self._navigator: Navigator = navigator or NavigationService(
            stars_repo=stars_repo, quirk_defs=self._quirk_defs()
        )
        self._reputation = ReputationService(npcs_repo=npcs_repo, quirks_repo=quirks_repo)
        self._intelligence = IntelligenceService(
            stars_repo=stars_repo,
            commodities_repo=commodities_repo,
            navigator=self._navigator,
            event_service=event_service,
        )
        self._save_service = SaveService(
            stars_repo=stars_repo,
            commodities_repo=commodities_repo,
            quirks_repo=quirks_repo,
            upgrades_repo=upgrades_repo,
            npcs_repo=npcs_repo,
        )
        self._notifier = ChangeNotifier()
        self._save_debounce_ms = save_debounce_ms
        self._clock = clock
        self._last_save_ms: int | None = None
        self._state: GameState | None = None

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> GameState:
        """The live state. Read it, never mutate it; use the store operations."""
        if self._state is None:
            raise GameNotInitializedError("No game has been started or loaded.")
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    def get_state(self) -> GameState:
        """Return a deep copy of the whole state."""
        return copy.deepcopy(self.state)

    def subscribe(self, event_name: str, callback: Subscriber) -> None:
        self._notifier.subscribe(event_name, callback)

    def unsubscribe(self, event_name: str, callback: Subscriber) -> None:
        self._notifier.unsubscribe(event_name, callback)

    # -------------------------------------------------------------- lifecycle

    def init_new_game(self, seed: int | None = None) -> GameState:
        rng = RNG(seed if seed is not None else secrets.randbelow(_MAX_RANDOM_SEED))
        home = self._stars_repo.get(STARTING_SYSTEM)
        prices = price_table(self._commodities_repo.all(), home, 0)
        quirk_count = MIN_STARTING_QUIRKS if rng.random() < 0.5 else MAX_STARTING_QUIRKS
        quirk_ids = sorted(quirk.id for quirk in self._quirks_repo.all())
        quirks = rng.sample(quirk_ids, min(quirk_count, len(quirk_ids)))
        capabilities = calculate_capabilities((), self._upgrade_defs())

        self._state = GameState(
            player=PlayerState(
                credits=STARTING_CREDITS,
                debt=STARTING_DEBT,
                current_system=STARTING_SYSTEM,
                days_elapsed=0,
            ),
            ship=ShipState(
                name=DEFAULT_SHIP_NAME,
                fuel=capabilities.fuel_capacity,
                cargo_capacity=STARTING_CARGO_CAPACITY,
                cargo=[
                    CargoStack(
                        good=STARTING_GOOD,
                        qty=STARTING_GOOD_QTY,
                        buy_price=prices[STARTING_GOOD],
                        buy_system=home.id,
                        buy_system_name=home.name,
                        buy_date=0,
                    )
                ],
                quirks=quirks,
            ),
            world=WorldState(
                visited_systems=[home.id],
                price_knowledge={home.id: PriceKnowledgeEntry(last_visit=0, prices=dict(prices))},
                current_system_prices=dict(prices),
            ),
            meta=SaveMeta(version=GAME_VERSION, timestamp=self._now_ms()),
        )
        self._last_save_ms = None
        logger.info("New game started at {} with quirks {}", home.name, quirks)
        self._emit_all()
        return self._state

    def save_game(self, force: bool = False) -> ActionResult:
        """Write the state unless the last write was under the debounce window ago.

        Returns ``reason="debounced"`` when skipped; nothing is queued, so a
        caller that must persist has to retry after the window or pass
        ``force=True``.
        """
        state = self.state
        now = self._now_ms()
        if (
            not force
            and self._last_save_ms is not None
            and now - self._last_save_ms < self._save_debounce_ms
        ):
            logger.debug("Save skipped: last write {} ms ago", now - self._last_save_ms)
            return ActionResult.fail(SAVE_DEBOUNCED)
        payload = self._save_service.serialize(state, now)
        try:
            self._save_store.write(payload)
        except OSError as exc:
            logger.error("Save failed: {}", exc)
            return ActionResult.fail(f"Save failed: {exc}")
        self._last_save_ms = now
        return ActionResult.ok()

    def load_game(self) -> GameState | None:
        """Replace the state with the persisted one, or return None if unusable."""
        try:
            payload = self._save_store.read()
        except (OSError, ValueError) as exc:
            logger.warning("Save could not be read: {}", exc)
            return None
        if payload is None:
            return None
        try:
            state = self._save_service.deserialize(payload)
        except SaveLoadError as exc:
            logger.warning("Save rejected: {}", exc)
            return None
        self._state = state
        logger.info(
            "Loaded save: day {} at system {}", state.player.days_elapsed, state.player.current_system
        )
        self._emit_all()
        return state

    def has_saved_game(self) -> bool:
        return self._save_store.exists()

    def clear_save(self) -> None:
        self._save_store.delete()
        self._last_save_ms = None
        logger.info("Save cleared")

    # ---------------------------------------------------------------- queries

    def get_player(self) -> PlayerState:
        return copy.deepcopy(self.state.player)

    def get_ship(self) -> ShipState:
        return copy.deepcopy(self.state.ship)

    def get_current_system(self) -> StarSystemDef:
        return self._stars_repo.get(self.state.player.current_system)

    def cargo_used(self) -> int:
        return cargo_used(self.state.ship.cargo)

    def cargo_remaining(self) -> int:
        return self.state.ship.cargo_capacity - self.cargo_used()

    def hidden_cargo_used(self) -> int:
        return cargo_used(self.state.ship.hidden_cargo)

    def ship_capabilities(self) -> ShipCapabilities:
        return calculate_capabilities(self.state.ship.upgrades, self._upgrade_defs())

    def fuel_capacity(self) -> float:
        return self.ship_capabilities().fuel_capacity

    def get_fuel_price(self, system_id: int | None = None) -> int:
        target = self.state.player.current_system if system_id is None else system_id
        system = self._stars_repo.get(target) if self._stars_repo.has(target) else None
        return fuel_price_per_percent(system, self._stars_repo.core_system_ids())

    @staticmethod
    def get_repair_cost(amount: float) -> int:
        return repair_cost(amount)

    def known_prices(self, system_id: int) -> Dict[str, int] | None:
        entry = self.state.world.price_knowledge.get(system_id)
        return dict(entry.prices) if entry else None

    def current_system_prices(self) -> Dict[str, int]:
        return dict(self.state.world.current_system_prices)

    def active_events(self) -> tuple[EconomicEvent, ...]:
        return tuple(self.state.world.active_events)

    def event_for_system(self, system_id: int) -> EconomicEvent | None:
        return self._event_service.event_for_system(self.state.world.active_events, system_id)

    def condition_warnings(self) -> List[ConditionWarning]:
        return condition_warnings(self.state.ship)

    def is_system_visited(self, system_id: int) -> bool:
        return system_id in self.state.world.visited_systems

    # ---------------------------------------------------------------- trading

    def buy(self, good_id: str, quantity: int, price: int) -> ActionResult:
        state = self.state
        if not self._commodities_repo.has(good_id):
            return ActionResult.fail("Unknown commodity")
        if quantity <= 0:
            return ActionResult.fail("Quantity must be positive")
        if quantity * price > state.player.credits:
            return ActionResult.fail("Insufficient credits")
        if quantity > self.cargo_remaining():
            return ActionResult.fail("Not enough cargo space")

        system = self.get_current_system()
        state.player.credits -= quantity * price
        state.ship.cargo = add_stack(
            state.ship.cargo,
            CargoStack(
                good=good_id,
                qty=quantity,
                buy_price=price,
                buy_system=system.id,
                buy_system_name=system.name,
                buy_date=state.player.days_elapsed,
            ),
        )
        state.world.market_conditions = apply_trade(
            state.world.market_conditions, system.id, good_id, -quantity
        )
        self._emit_credits()
        self._emit_cargo()
        self.save_game()
        return ActionResult.ok()

    def sell(self, stack_index: int, quantity: int, price: int) -> SaleResult:
        state = self.state
        cargo = state.ship.cargo
        if not 0 <= stack_index < len(cargo):
            return SaleResult(success=False, reason="Invalid cargo stack")
        if quantity <= 0:
            return SaleResult(success=False, reason="Quantity must be positive")
        stack = cargo[stack_index]
        if quantity > stack.qty:
            return SaleResult(success=False, reason="Not enough quantity in stack")

        state.player.credits += quantity * price
        state.ship.cargo = remove_from_stack(cargo, stack_index, quantity)
        state.world.market_conditions = apply_trade(
            state.world.market_conditions, state.player.current_system, stack.good, quantity
        )
        self._emit_credits()
        self._emit_cargo()
        self.save_game()
        return SaleResult(success=True, profit_margin=price - stack.buy_price)

    # ------------------------------------------------------------ ship upkeep

    def refuel(self, amount: float) -> ActionResult:
        state = self.state
        if amount <= 0:
            return ActionResult.fail("Refuel amount must be positive")
        capacity = self.fuel_capacity()
        if state.ship.fuel + amount > capacity + FUEL_CAPACITY_EPSILON:
            return ActionResult.fail(f"Cannot exceed capacity of {capacity:g}%")
        cost = round_half_up(amount * self.get_fuel_price())
        if cost > state.player.credits:
            return ActionResult.fail("Insufficient credits for refuel")

        state.player.credits -= cost
        state.ship.fuel = min(capacity, state.ship.fuel + amount)
        self._emit_credits()
        self._notifier.emit(events.FUEL_CHANGED, state.ship.fuel)
        self.save_game()
        return ActionResult.ok()

    def repair(self, ship_system: str, amount: float) -> ActionResult:
        state = self.state
        if ship_system not in SHIP_SYSTEMS:
            return ActionResult.fail("Invalid system type")
        if amount <= 0:
            return ActionResult.fail("Repair amount must be positive")
        current = getattr(state.ship, ship_system)
        if current >= MAX_CONDITION:
            return ActionResult.fail("System already at maximum condition")
        cost = repair_cost(amount)
        if cost > state.player.credits:
            return ActionResult.fail("Insufficient credits for repair")
        if current + amount > MAX_CONDITION:
            return ActionResult.fail("Repair would exceed maximum condition")

        state.player.credits -= cost
        setattr(state.ship, ship_system, clamp_condition(current + amount))
        self._emit_credits()
        self._emit_condition()
        self.save_game()
        return ActionResult.ok()

    def purchase_upgrade(self, upgrade_id: str) -> ActionResult:
        state = self.state
        if not self._upgrades_repo.has(upgrade_id):
            return ActionResult.fail("Unknown upgrade")
        if upgrade_id in state.ship.upgrades:
            return ActionResult.fail("Upgrade already installed")
        upgrade = self._upgrades_repo.get(upgrade_id)
        if upgrade.cost > state.player.credits:
            return ActionResult.fail(f"Insufficient credits (need {upgrade.cost})")
        upgrades = [*state.ship.upgrades, upgrade_id]
        capabilities = calculate_capabilities(upgrades, self._upgrade_defs())
        if self.cargo_used() > capabilities.cargo_capacity:
            return ActionResult.fail("Cargo exceeds reduced hold capacity")

        state.player.credits -= upgrade.cost
        state.ship.upgrades = upgrades
        state.ship.cargo_capacity = capabilities.cargo_capacity
        state.ship.hidden_cargo_capacity = capabilities.hidden_cargo_capacity
        logger.info("Installed upgrade {}", upgrade_id)
        self._emit_credits()
        self._notifier.emit(events.UPGRADES_CHANGED, tuple(upgrades))
        self._emit_cargo()
        self.save_game()
        return ActionResult.ok()

    def move_to_hidden_cargo(self, good_id: str, quantity: int) -> ActionResult:
        state = self.state
        ship = state.ship
        if ship.hidden_cargo_capacity <= 0:
            return ActionResult.fail("No hidden cargo compartment")
        if quantity <= 0:
            return ActionResult.fail("Quantity must be positive")
        available = quantity_of(ship.cargo, good_id)
        if available == 0:
            return ActionResult.fail("Cargo not found")
        if quantity > available:
            return ActionResult.fail("Insufficient quantity")
        space = ship.hidden_cargo_capacity - cargo_used(ship.hidden_cargo)
        if quantity > space:
            return ActionResult.fail(f"Hidden cargo full ({space} units available)")

        ship.cargo, moved = take_good(ship.cargo, good_id, quantity)
        ship.hidden_cargo = self._merge_stacks(ship.hidden_cargo, moved)
        self._emit_cargo()
        self.save_game()
        return ActionResult.ok()

    def move_to_regular_cargo(self, good_id: str, quantity: int) -> ActionResult:
        state = self.state
        ship = state.ship
        if quantity <= 0:
            return ActionResult.fail("Quantity must be positive")
        available = quantity_of(ship.hidden_cargo, good_id)
        if available == 0:
            return ActionResult.fail("Cargo not found")
        if quantity > available:
            return ActionResult.fail("Insufficient quantity")
        space = self.cargo_remaining()
        if quantity > space:
            return ActionResult.fail(f"Cargo hold full ({space} units available)")

        ship.hidden_cargo, moved = take_good(ship.hidden_cargo, good_id, quantity)
        ship.cargo = self._merge_stacks(ship.cargo, moved)
        self._emit_cargo()
        self.save_game()
        return ActionResult.ok()

    def update_ship_name(self, name: str | None) -> str:
        cleaned = sanitize_ship_name(name)
        self.state.ship.name = cleaned
        self._notifier.emit(events.SHIP_NAME_CHANGED, cleaned)
        return cleaned

    # ---------------------------------------------------- location and time

    def dock(self) -> ActionResult:
        state = self.state
        system = self.get_current_system()
        prices = self._prices_for(system)
        knowledge = dict(state.world.price_knowledge)
        knowledge[system.id] = PriceKnowledgeEntry(last_visit=0, prices=prices)
        state.world.price_knowledge = knowledge
        self._emit_price_knowledge()
        self.save_game()
        return ActionResult.ok()

    def undock(self) -> ActionResult:
        self.save_game()
        return ActionResult.ok()

    def update_location(self, system_id: int) -> ActionResult:
        state = self.state
        if not self._stars_repo.has(system_id):
            return ActionResult.fail("Unknown system")
        system = self._stars_repo.get(system_id)
        state.player.current_system = system_id
        if system_id not in state.world.visited_systems:
            state.world.visited_systems = [*state.world.visited_systems, system_id]
        state.world.current_system_prices = self._prices_for(system)
        self._notifier.emit(events.LOCATION_CHANGED, system_id)
        return ActionResult.ok()

    def advance_time(self, new_day: int) -> ActionResult:
        state = self.state
        old_day = state.player.days_elapsed
        if new_day < old_day:
            return ActionResult.fail("Time cannot move backwards")
        if new_day == old_day:
            return ActionResult.ok()

        elapsed = new_day - old_day
        aged = {
            system_id: PriceKnowledgeEntry(last_visit=entry.last_visit + elapsed, prices=dict(entry.prices))
            for system_id, entry in state.world.price_knowledge.items()
        }
        knowledge = self._intelligence.cleanup_old_intelligence(aged, state.player.current_system)
        active = self._event_service.update_events(
            state.world.active_events, self._stars_repo.all(), new_day
        )
        conditions = decay(state.world.market_conditions, elapsed)
        commodities = self._commodities_repo.all()
        for system_id, entry in knowledge.items():
            entry.prices = price_table(
                commodities, self._stars_repo.get(system_id), new_day, active, conditions
            )

        state.world.price_knowledge = knowledge
        state.world.active_events = active
        state.world.market_conditions = conditions
        state.player.days_elapsed = new_day
        self._emit_price_knowledge()
        self._notifier.emit(events.ACTIVE_EVENTS_CHANGED, tuple(active))
        self._notifier.emit(events.TIME_CHANGED, new_day)
        return ActionResult.ok()

    def complete_jump(self, target_system_id: int) -> JumpResult:
        """Settle a jump: fuel, time, location, wear, then a forced save.

        Everything is applied before returning so any animation the caller
        plays afterwards cannot lose progress.
        """
        state = self.state
        origin = state.player.current_system
        if not self._stars_repo.has(target_system_id):
            return JumpResult(success=False, reason="Unknown destination")
        if target_system_id == origin:
            return JumpResult(success=False, reason="Already at destination")
        if not self._navigator.are_connected(origin, target_system_id):
            return JumpResult(success=False, reason="No wormhole connection")
        ship = state.ship
        capabilities = self.ship_capabilities()
        distance = self._navigator.distance(origin, target_system_id)
        fuel_cost = self._navigator.jump_fuel_cost(
            distance, ship.engine, ship.quirks, capabilities.fuel_consumption
        )
        if ship.fuel < fuel_cost:
            return JumpResult(
                success=False,
                reason=f"Insufficient fuel (need {fuel_cost:.1f}%)",
                distance=distance,
                fuel_cost=fuel_cost,
            )
        jump_days = self._navigator.jump_time_days(distance, ship.engine)
        wear = jump_wear(ship, jump_days, self._quirk_defs(), capabilities)

        ship.fuel = max(0.0, ship.fuel - fuel_cost)
        self._notifier.emit(events.FUEL_CHANGED, ship.fuel)
        self.advance_time(state.player.days_elapsed + jump_days)
        self.update_location(target_system_id)
        ship.hull = wear["hull"]
        ship.engine = wear["engine"]
        ship.life_support = wear["life_support"]
        self._emit_condition()
        saved = self.save_game(force=True)
        logger.info(
            "Jumped {} -> {} ({:.2f} LY, {:.1f}% fuel, {} day(s))",
            origin,
            target_system_id,
            distance,
            fuel_cost,
            jump_days,
        )
        return JumpResult(
            success=True,
            distance=distance,
            fuel_cost=fuel_cost,
            jump_days=jump_days,
            saved=saved.success,
        )

    # ------------------------------------------------------------- reputation

    def get_npc_state(self, npc_id: str) -> NPCState:
        """Return a copy of the NPC record, creating it on first contact."""
        state = self.state
        record = self._reputation.get_npc_state(state.npcs, npc_id, state.player.days_elapsed)
        if npc_id not in state.npcs:
            state.npcs[npc_id] = record
        return copy.deepcopy(record)

    def modify_rep(self, npc_id: str, raw_delta: int, reason: str) -> ReputationChange:
        state = self.state
        updated, change = self._reputation.modify_rep(
            state.npcs,
            npc_id,
            raw_delta,
            reason,
            state.player.days_elapsed,
            state.ship.quirks,
        )
        if updated is not None:
            state.npcs[npc_id] = updated
            self._emit_npc(npc_id)
        return change

    def add_npc_flags(self, npc_id: str, flags: Iterable[str]) -> List[str]:
        state = self.state
        updated = self._reputation.add_flags(state.npcs, npc_id, flags, state.player.days_elapsed)
        state.npcs[npc_id] = updated
        self._emit_npc(npc_id)
        return list(updated.flags)

    def has_npc_flag(self, npc_id: str, flag: str) -> bool:
        record = self.state.npcs.get(npc_id)
        return record is not None and flag in record.flags

    @staticmethod
    def get_rep_tier(rep: int) -> RepTier:
        return ReputationService.tier(rep)

    # ----------------------------------------------------------- intelligence

    def intelligence_cost(self, system_id: int) -> int:
        return self._intelligence.get_cost(system_id, self.state.world.price_knowledge)

    def purchase_intelligence(self, system_id: int) -> IntelligenceResult:
        state = self.state
        result = self._intelligence.purchase(
            system_id,
            credits=state.player.credits,
            price_knowledge=state.world.price_knowledge,
            current_day=state.player.days_elapsed,
            active_events=state.world.active_events,
            market_conditions=state.world.market_conditions,
        )
        if not result.success:
            return result
        state.player.credits -= result.cost
        knowledge = dict(state.world.price_knowledge)
        knowledge[system_id] = PriceKnowledgeEntry(last_visit=0, prices=dict(result.prices))
        state.world.price_knowledge = knowledge
        self._emit_credits()
        self._emit_price_knowledge()
        self.save_game()
        return result

    def list_available_intelligence(self) -> List[IntelligenceOffer]:
        state = self.state
        return self._intelligence.list_available(
            state.player.current_system,
            state.world.price_knowledge,
            state.world.active_events,
            self.ship_capabilities().event_visibility,
        )

    def generate_rumor(self) -> str:
        state = self.state
        return self._intelligence.generate_rumor(
            state.player.days_elapsed, state.world.active_events, state.world.market_conditions
        )

    # ------------------------------------------------------------------ debug

    def set_credits(self, amount: int) -> None:
        self.state.player.credits = amount
        self._emit_credits()

    def set_debt(self, amount: int) -> None:
        self.state.player.debt = amount
        self._notifier.emit(events.DEBT_CHANGED, amount)

    def set_fuel(self, amount: float) -> None:
        self.state.ship.fuel = max(0.0, min(self.fuel_capacity(), float(amount)))
        self._notifier.emit(events.FUEL_CHANGED, self.state.ship.fuel)

    # -------------------------------------------------------------- internals

    def _now_ms(self) -> int:
        return int(round(self._clock() * 1000))

    def _prices_for(self, system: StarSystemDef) -> Dict[str, int]:
        world = self.state.world
        return price_table(
            self._commodities_repo.all(),
            system,
            self.state.player.days_elapsed,
            world.active_events,
            world.market_conditions,
        )

    def _quirk_defs(self):
        return {quirk.id: quirk for quirk in self._quirks_repo.all()}

    def _upgrade_defs(self):
        return {upgrade.id: upgrade for upgrade in self._upgrades_repo.all()}

    @staticmethod
    def _merge_stacks(cargo: Sequence[CargoStack], incoming: Iterable[CargoStack]) -> List[CargoStack]:
        merged = list(cargo)
        for stack in incoming:
            merged = add_stack(merged, stack)
        return merged

    def _emit_credits(self) -> None:
        self._notifier.emit(events.CREDITS_CHANGED, self.state.player.credits)

    def _emit_cargo(self) -> None:
        self._notifier.emit(events.CARGO_CHANGED, tuple(self.state.ship.cargo))

    def _emit_price_knowledge(self) -> None:
        self._notifier.emit(events.PRICE_KNOWLEDGE_CHANGED, copy.deepcopy(self.state.world.price_knowledge))

    def _emit_condition(self) -> None:
        ship = self.state.ship
        self._notifier.emit(
            events.SHIP_CONDITION_CHANGED,
            {"hull": ship.hull, "engine": ship.engine, "life_support": ship.life_support},
        )
        warnings = condition_warnings(ship)
        if warnings:
            self._notifier.emit(events.CONDITION_WARNING, warnings)

    def _emit_npc(self, npc_id: str) -> None:
        self._notifier.emit(events.NPC_CHANGED, (npc_id, copy.deepcopy(self.state.npcs[npc_id])))

    def _emit_all(self) -> None:
        state = self.state
        self._emit_credits()
        self._notifier.emit(events.DEBT_CHANGED, state.player.debt)
        self._notifier.emit(events.FUEL_CHANGED, state.ship.fuel)
        self._emit_cargo()
        self._notifier.emit(events.LOCATION_CHANGED, state.player.current_system)
        self._notifier.emit(events.TIME_CHANGED, state.player.days_elapsed)
        self._emit_price_knowledge()
        self._notifier.emit(events.ACTIVE_EVENTS_CHANGED, tuple(state.world.active_events))
        self._emit_condition()
        self._notifier.emit(events.QUIRKS_CHANGED, tuple(state.ship.quirks))
        self._notifier.emit(events.UPGRADES_CHANGED, tuple(state.ship.upgrades))
        self._notifier.emit(events.SHIP_NAME_CHANGED, state.ship.name)


def build_game_store(
    config: game_config.GameConfig | None = None,
    *,
    definitions_path: Path | str | None = None,
    save_store: SaveStore | None = None,
    navigator: Navigator | None = None,
    clock: Callable[[], float] | None = None,
    in_memory: bool = False,
) -> GameStore:
    """Wire repositories, services and a save backend into a GameStore."""
    settings = config or game_config.GameConfig()
    stars_repo = StarsRepository(base_path=definitions_path)
    commodities_repo = CommoditiesRepository(base_path=definitions_path)
    event_service = EconomicEventService(
        event_types_repo=EconomicEventTypesRepository(
            base_path=definitions_path, commodities_repo=commodities_repo
        ),
        commodities_repo=commodities_repo,
        core_system_ids=stars_repo.core_system_ids(),
        chance_multiplier=settings.event_chance_multiplier,
    )
    if save_store is None:
        save_store = InMemorySaveStore() if in_memory else JsonFileSaveStore()
    return GameStore(
        stars_repo=stars_repo,
        commodities_repo=commodities_repo,
        npcs_repo=NPCsRepository(base_path=definitions_path, stars_repo=stars_repo),
        quirks_repo=QuirksRepository(base_path=definitions_path),
        upgrades_repo=UpgradesRepository(base_path=definitions_path),
        event_service=event_service,
        save_store=save_store,
        navigator=navigator,
        save_debounce_ms=settings.save_debounce_ms,
        clock=clock or time.time,
    )
