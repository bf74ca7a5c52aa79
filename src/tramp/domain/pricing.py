"""Deterministic commodity pricing.

A price is the product of a base price and four multipliers:

* technology: distance from Sol sets a tech level, each commodity leans
  cheaper either at high-tech (positive bias) or low-tech (negative bias)
  systems;
* temporal: a slow sine wave, phase-shifted per system;
* local: accumulated trading pressure at the system;
* event: every active economic event at the system touching the good.

Nothing here reads a system's spectral class or station count.
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence

from tramp.core.numbers import round_half_up
from tramp.core.types import MarketConditions, PriceMap
from tramp.domain.defs import CommodityDef, StarSystemDef
from tramp.domain.market_conditions import MARKET_CAPACITY, pressure
from tramp.domain.state import EconomicEvent

# Tech level
MAX_COORD_DISTANCE = 21.0
MAX_TECH_LEVEL = 10.0
MIN_TECH_LEVEL = 1.0
TECH_LEVEL_MIDPOINT = 5.0
TECH_MODIFIER_INTENSITY = 0.08

# Temporal drift
TEMPORAL_PERIOD_DAYS = 30
TEMPORAL_AMPLITUDE = 0.15
TEMPORAL_PHASE_OFFSET = 0.15

# Local pressure clamp
LOCAL_MODIFIER_MIN = 0.25
LOCAL_MODIFIER_MAX = 2.0

MIN_PRICE = 1


def distance_from_origin(system: StarSystemDef) -> float:
    return math.sqrt(system.x * system.x + system.y * system.y + system.z * system.z)


def tech_level(system: StarSystemDef) -> float:
    """Return the tech level in [MIN_TECH_LEVEL, MAX_TECH_LEVEL]; Sol is 10."""
    distance = min(distance_from_origin(system), MAX_COORD_DISTANCE)
    level = MAX_TECH_LEVEL - (MAX_TECH_LEVEL - MIN_TECH_LEVEL) * distance / MAX_COORD_DISTANCE
    return max(MIN_TECH_LEVEL, min(MAX_TECH_LEVEL, level))


def tech_modifier(commodity: CommodityDef, level: float) -> float:
    """Return 1 + bias * (midpoint - level) * intensity.

    Exactly 1.0 at the midpoint. With a negative bias the modifier falls as
    the tech level falls, so raw goods are cheap on the frontier.
    """
    return 1.0 + commodity.tech_bias * (TECH_LEVEL_MIDPOINT - level) * TECH_MODIFIER_INTENSITY


def temporal_modifier(system_id: int, day: int) -> float:
    if day < 0:
        raise ValueError("day must be non-negative.")
    phase = day / TEMPORAL_PERIOD_DAYS + system_id * TEMPORAL_PHASE_OFFSET
    return 1.0 + TEMPORAL_AMPLITUDE * math.sin(2.0 * math.pi * phase)


def local_modifier(system_id: int, good_id: str, market_conditions: MarketConditions) -> float:
    raw = 1.0 - pressure(market_conditions, system_id, good_id) / MARKET_CAPACITY
    return max(LOCAL_MODIFIER_MIN, min(LOCAL_MODIFIER_MAX, raw))


def event_modifier(system_id: int, good_id: str, active_events: Iterable[EconomicEvent]) -> float:
    modifier = 1.0
    for event in active_events:
        if event.system_id != system_id:
            continue
        factor = event.modifiers.get(good_id)
        if factor is not None:
            modifier *= factor
    return modifier


def calculate_price(
    commodity: CommodityDef,
    system: StarSystemDef,
    current_day: int,
    active_events: Sequence[EconomicEvent] = (),
    market_conditions: MarketConditions | None = None,
) -> int:
    """Return the integer price of a commodity at a system on a day."""
    conditions = market_conditions or {}
    price = (
        commodity.base_price
        * tech_modifier(commodity, tech_level(system))
        * temporal_modifier(system.id, current_day)
        * local_modifier(system.id, commodity.id, conditions)
        * event_modifier(system.id, commodity.id, active_events)
    )
    return max(MIN_PRICE, round_half_up(price))


def price_table(
    commodities: Iterable[CommodityDef],
    system: StarSystemDef,
    current_day: int,
    active_events: Sequence[EconomicEvent] = (),
    market_conditions: MarketConditions | None = None,
) -> PriceMap:
    return {
        commodity.id: calculate_price(commodity, system, current_day, active_events, market_conditions)
        for commodity in commodities
    }


def cheapest_system_for(
    commodity: CommodityDef,
    systems: Iterable[StarSystemDef],
    current_day: int,
    active_events: Sequence[EconomicEvent] = (),
    market_conditions: MarketConditions | None = None,
) -> StarSystemDef | None:
    best: StarSystemDef | None = None
    best_price = 0
    for system in systems:
        price = calculate_price(commodity, system, current_day, active_events, market_conditions)
        if best is None or price < best_price:
            best, best_price = system, price
    return best
