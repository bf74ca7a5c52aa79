"""Fuel pricing tiers.

Price per percent of tank steps up with distance from Sol. Core systems
get the cheapest rate regardless of distance.
"""
from __future__ import annotations

from typing import Collection

from tramp.domain.defs import StarSystemDef
from tramp.domain.pricing import distance_from_origin

CORE_FUEL_PRICE = 2
INNER_FUEL_PRICE = 3
MID_FUEL_PRICE = 3
OUTER_FUEL_PRICE = 5
DEFAULT_FUEL_PRICE = 3

INNER_DISTANCE_THRESHOLD = 4.5
MID_DISTANCE_THRESHOLD = 10.0

DEFAULT_FUEL_CAPACITY = 100.0
# Refuel requests may overshoot capacity by this much (float drift).
FUEL_CAPACITY_EPSILON = 0.01


def fuel_price_per_percent(
    system: StarSystemDef | None,
    core_system_ids: Collection[int] = (0, 1),
) -> int:
    if system is None:
        return DEFAULT_FUEL_PRICE
    if system.id in core_system_ids:
        return CORE_FUEL_PRICE
    distance = distance_from_origin(system)
    if distance < INNER_DISTANCE_THRESHOLD:
        return INNER_FUEL_PRICE
    if distance < MID_DISTANCE_THRESHOLD:
        return MID_FUEL_PRICE
    return OUTER_FUEL_PRICE
