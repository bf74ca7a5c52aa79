"""Economic event lifecycle: expiry, deterministic spawning, lookup."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from loguru import logger

from tramp.core.rng import RNG
from tramp.data.repositories import CommoditiesRepository, EconomicEventTypesRepository
from tramp.domain.defs import EconomicEventTypeDef, StarSystemDef
from tramp.domain.state import EconomicEvent

MINING_SPECTRAL_CLASSES = ("M", "L", "T")


class EconomicEventService:
    """Spawns and expires economic events.

    Every random draw is keyed on the event type, system and day, so the same
    world advanced to the same day always produces the same events.
    """

    def __init__(
        self,
        *,
        event_types_repo: EconomicEventTypesRepository,
        commodities_repo: CommoditiesRepository,
        core_system_ids: Sequence[int] = (0, 1),
        chance_multiplier: float = 1.0,
    ) -> None:
        self._event_types_repo = event_types_repo
        self._commodities_repo = commodities_repo
        self._core_system_ids = tuple(core_system_ids)
        self._chance_multiplier = chance_multiplier

    @staticmethod
    def remove_expired(events: Iterable[EconomicEvent], current_day: int) -> List[EconomicEvent]:
        """Keep events whose end day has not passed (``end_day >= current_day``)."""
        return [event for event in events if event.end_day >= current_day]

    @staticmethod
    def event_for_system(events: Iterable[EconomicEvent], system_id: int) -> EconomicEvent | None:
        for event in events:
            if event.system_id == system_id:
                return event
        return None

    def is_eligible(self, event_type: EconomicEventTypeDef, system: StarSystemDef) -> bool:
        if event_type.target == "core":
            return system.id in self._core_system_ids
        if event_type.target == "mining":
            return system.spectral_class[:1].upper() in MINING_SPECTRAL_CLASSES
        return True

    def maybe_spawn(
        self,
        systems: Iterable[StarSystemDef],
        current_day: int,
        existing: Sequence[EconomicEvent] = (),
    ) -> List[EconomicEvent]:
        """Return ``existing`` plus any events that spawn today."""
        events = list(existing)
        occupied = {event.system_id for event in events}
        system_list = list(systems)
        for event_type in self._event_types_repo.all():
            chance = event_type.chance * self._chance_multiplier
            for system in system_list:
                if system.id in occupied or not self.is_eligible(event_type, system):
                    continue
                roll = RNG(f"event:{event_type.id}:{system.id}:{current_day}").random()
                if roll < chance:
                    event = self.create_event(event_type.id, system.id, current_day)
                    events.append(event)
                    occupied.add(system.id)
                    logger.debug("Spawned {} at system {} until day {}", event.type, system.id, event.end_day)
        return events

    def create_event(self, type_id: str, system_id: int, current_day: int) -> EconomicEvent:
        event_type = self._event_types_repo.get(type_id)
        event_id = f"{type_id}_{system_id}_{current_day}"
        duration = RNG(f"duration:{event_id}").randint(event_type.min_duration, event_type.max_duration)
        modifiers = dict(event_type.modifiers)
        if event_type.random_commodity_modifier is not None:
            good_ids = [commodity.id for commodity in self._commodities_repo.all()]
            good_id = RNG(f"commodity:{event_id}").choice(good_ids)
            modifiers[good_id] = event_type.random_commodity_modifier
        return EconomicEvent(
            id=event_id,
            type=type_id,
            system_id=system_id,
            start_day=current_day,
            end_day=current_day + duration,
            modifiers=modifiers,
        )

    def update_events(
        self,
        events: Sequence[EconomicEvent],
        systems: Iterable[StarSystemDef],
        current_day: int,
    ) -> List[EconomicEvent]:
        """Expire finished events, then roll for new ones."""
        remaining = self.remove_expired(events, current_day)
        expired = len(events) - len(remaining)
        if expired:
            logger.debug("{} economic event(s) expired on day {}", expired, current_day)
        return self.maybe_spawn(systems, current_day, remaining)

    def describe(self, event: EconomicEvent) -> str:
        if self._event_types_repo.has(event.type):
            return self._event_types_repo.get(event.type).name
        return event.type
