"""Distances, jump costs and wormhole connectivity."""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Protocol, Set

from tramp.data.repositories import StarsRepository
from tramp.domain.defs import QuirkDef
from tramp.domain.pricing import distance_from_origin
from tramp.domain.ship import apply_quirk_modifiers

BASE_JUMP_FUEL = 10.0
JUMP_FUEL_PER_LY = 2.0
JUMP_DAYS_PER_LY = 0.5
MIN_JUMP_DAYS = 1

# Worn engines burn more fuel and take an extra day.
ENGINE_PENALTY_THRESHOLD = 60.0
ENGINE_FUEL_PENALTY = 1.2
ENGINE_TIME_PENALTY_DAYS = 1


class Navigator(Protocol):
    def distance(self, from_id: int, to_id: int) -> float: ...

    def are_connected(self, from_id: int, to_id: int) -> bool: ...

    def connected_systems(self, system_id: int) -> List[int]: ...

    def jump_fuel_cost(
        self,
        distance: float,
        engine_condition: float = 100.0,
        quirk_ids: Iterable[str] = (),
        fuel_consumption: float = 1.0,
    ) -> float: ...

    def jump_time_days(self, distance: float, engine_condition: float = 100.0) -> int: ...


class NavigationService:
    """Default navigator backed by the star and wormhole catalogs."""

    def __init__(
        self,
        *,
        stars_repo: StarsRepository,
        quirk_defs: Mapping[str, QuirkDef] | None = None,
    ) -> None:
        self._stars_repo = stars_repo
        self._quirk_defs = dict(quirk_defs or {})
        self._adjacency: Dict[int, Set[int]] | None = None

    def distance(self, from_id: int, to_id: int) -> float:
        a = self._stars_repo.get(from_id)
        b = self._stars_repo.get(to_id)
        return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)

    def distance_from_origin(self, system_id: int) -> float:
        return distance_from_origin(self._stars_repo.get(system_id))

    def connected_systems(self, system_id: int) -> List[int]:
        return sorted(self._graph().get(system_id, set()))

    def are_connected(self, from_id: int, to_id: int) -> bool:
        return to_id in self._graph().get(from_id, set())

    def jump_fuel_cost(
        self,
        distance: float,
        engine_condition: float = 100.0,
        quirk_ids: Iterable[str] = (),
        fuel_consumption: float = 1.0,
    ) -> float:
        cost = BASE_JUMP_FUEL + JUMP_FUEL_PER_LY * distance
        if engine_condition < ENGINE_PENALTY_THRESHOLD:
            cost *= ENGINE_FUEL_PENALTY
        cost = apply_quirk_modifiers(cost, "fuel_consumption", quirk_ids, self._quirk_defs)
        return cost * fuel_consumption

    def jump_time_days(self, distance: float, engine_condition: float = 100.0) -> int:
        days = max(MIN_JUMP_DAYS, math.ceil(distance * JUMP_DAYS_PER_LY))
        if engine_condition < ENGINE_PENALTY_THRESHOLD:
            days += ENGINE_TIME_PENALTY_DAYS
        return days

    def _graph(self) -> Dict[int, Set[int]]:
        if self._adjacency is None:
            adjacency: Dict[int, Set[int]] = {}
            for a, b in self._stars_repo.wormholes():
                adjacency.setdefault(a, set()).add(b)
                adjacency.setdefault(b, set()).add(a)
            self._adjacency = adjacency
        return self._adjacency
