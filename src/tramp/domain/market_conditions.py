"""Trading pressure bookkeeping.

Conditions map ``system_id -> good_id -> pressure``. Buying pushes pressure
negative, selling positive, and the market recovers geometrically each day.
All functions return a new mapping and leave their input untouched.
"""
from __future__ import annotations

from typing import Dict

from tramp.core.types import MarketConditions

MARKET_CAPACITY = 1000.0
DAILY_RECOVERY_FACTOR = 0.9
PRUNE_THRESHOLD = 1.0


def copy_conditions(conditions: MarketConditions) -> MarketConditions:
    return {system_id: dict(goods) for system_id, goods in conditions.items()}


def pressure(conditions: MarketConditions, system_id: int, good_id: str) -> float:
    return conditions.get(system_id, {}).get(good_id, 0.0)


def apply_trade(
    conditions: MarketConditions,
    system_id: int,
    good_id: str,
    signed_quantity: float,
) -> MarketConditions:
    """Add signed pressure for a trade (negative for buys, positive for sells)."""
    updated = copy_conditions(conditions)
    goods = updated.setdefault(system_id, {})
    goods[good_id] = goods.get(good_id, 0.0) + float(signed_quantity)
    return updated


def decay(conditions: MarketConditions, days_passed: int) -> MarketConditions:
    """Recover every entry by ``DAILY_RECOVERY_FACTOR ** days_passed`` and prune."""
    if days_passed <= 0:
        return copy_conditions(conditions)
    factor = DAILY_RECOVERY_FACTOR ** days_passed
    updated: MarketConditions = {}
    for system_id, goods in conditions.items():
        kept: Dict[str, float] = {}
        for good_id, value in goods.items():
            recovered = value * factor
            if abs(recovered) >= PRUNE_THRESHOLD:
                kept[good_id] = recovered
        if kept:
            updated[system_id] = kept
    return updated
