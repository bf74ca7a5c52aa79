"""Ship condition, quirks and upgrade capabilities."""
from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Iterable, List, Mapping

from tramp.core.numbers import round_half_up
from tramp.domain.defs import QuirkDef, UpgradeDef
from tramp.domain.state import MAX_CONDITION, ShipState

DEFAULT_SHIP_NAME = "Serendipity"
MAX_SHIP_NAME_LENGTH = 50

# Wear per jump / per day in transit, in condition percent.
HULL_DEGRADATION_PER_JUMP = 2.0
ENGINE_DEGRADATION_PER_JUMP = 1.0
LIFE_SUPPORT_DRAIN_PER_DAY = 0.5

REPAIR_COST_PER_PERCENT = 5

HULL_WARNING_THRESHOLD = 50.0
ENGINE_WARNING_THRESHOLD = 30.0
LIFE_SUPPORT_CRITICAL_THRESHOLD = 20.0

SHIP_SYSTEMS = ("hull", "engine", "life_support")

_TAG_PATTERN = re.compile(r"<[^>]*>")


@dataclass(slots=True, frozen=True)
class ShipCapabilities:
    fuel_capacity: float = 100.0
    cargo_capacity: int = 50
    fuel_consumption: float = 1.0
    hull_degradation: float = 1.0
    life_support_drain: float = 1.0
    hidden_cargo_capacity: int = 0
    event_visibility: int = 0


# Upgrades that set a level rather than scale a rate.
_ADDITIVE_CAPABILITIES = frozenset(
    {"fuel_capacity", "cargo_capacity", "hidden_cargo_capacity", "event_visibility"}
)
_INTEGER_CAPABILITIES = frozenset({"cargo_capacity", "hidden_cargo_capacity", "event_visibility"})


@dataclass(slots=True, frozen=True)
class ConditionWarning:
    system: str
    severity: str
    message: str


def clamp_condition(value: float) -> float:
    return max(0.0, min(MAX_CONDITION, float(value)))


def apply_quirk_modifiers(
    base_value: float,
    attribute: str,
    quirk_ids: Iterable[str],
    quirk_defs: Mapping[str, QuirkDef],
) -> float:
    """Multiply ``base_value`` by every installed quirk's effect on ``attribute``."""
    value = float(base_value)
    for quirk_id in quirk_ids:
        quirk = quirk_defs.get(quirk_id)
        if quirk is None:
            raise ValueError(f"Unknown quirk: {quirk_id}")
        factor = quirk.effects.get(attribute)
        if factor is not None:
            value *= factor
    return value


def quirk_multipliers(
    attribute: str, quirk_ids: Iterable[str], quirk_defs: Mapping[str, QuirkDef]
) -> List[float]:
    multipliers = []
    for quirk_id in quirk_ids:
        quirk = quirk_defs.get(quirk_id)
        if quirk is None:
            raise ValueError(f"Unknown quirk: {quirk_id}")
        if attribute in quirk.effects:
            multipliers.append(quirk.effects[attribute])
    return multipliers


def calculate_capabilities(
    upgrade_ids: Iterable[str], upgrade_defs: Mapping[str, UpgradeDef]
) -> ShipCapabilities:
    """Fold installed upgrades into a capability sheet.

    Level effects (capacities, visibility) add their difference from the
    stock value; rate effects multiply. The result does not depend on
    installation order.
    """
    base = ShipCapabilities()
    values = {item.name: getattr(base, item.name) for item in fields(ShipCapabilities)}
    for upgrade_id in upgrade_ids:
        upgrade = upgrade_defs.get(upgrade_id)
        if upgrade is None:
            raise ValueError(f"Unknown upgrade: {upgrade_id}")
        for key, amount in upgrade.effects.items():
            if key not in values:
                continue
            if key in _ADDITIVE_CAPABILITIES:
                values[key] += amount - getattr(base, key)
            else:
                values[key] *= amount
    for key in _INTEGER_CAPABILITIES:
        values[key] = round_half_up(values[key])
    return ShipCapabilities(**values)


def jump_wear(
    ship: ShipState,
    jump_days: int,
    quirk_defs: Mapping[str, QuirkDef],
    capabilities: ShipCapabilities,
) -> dict[str, float]:
    """Return the hull/engine/life-support values after one jump."""
    hull_loss = apply_quirk_modifiers(
        HULL_DEGRADATION_PER_JUMP, "hull_degradation", ship.quirks, quirk_defs
    ) * capabilities.hull_degradation
    life_support_loss = apply_quirk_modifiers(
        LIFE_SUPPORT_DRAIN_PER_DAY * jump_days, "life_support_drain", ship.quirks, quirk_defs
    ) * capabilities.life_support_drain
    return {
        "hull": clamp_condition(ship.hull - hull_loss),
        "engine": clamp_condition(ship.engine - ENGINE_DEGRADATION_PER_JUMP),
        "life_support": clamp_condition(ship.life_support - life_support_loss),
    }


def condition_warnings(ship: ShipState) -> List[ConditionWarning]:
    warnings: List[ConditionWarning] = []
    if ship.hull < HULL_WARNING_THRESHOLD:
        warnings.append(
            ConditionWarning("hull", "warning", "Hull integrity below 50% - risky to travel")
        )
    if ship.engine < ENGINE_WARNING_THRESHOLD:
        warnings.append(
            ConditionWarning("engine", "warning", "Engine condition below 30% - reduced performance")
        )
    if ship.life_support < LIFE_SUPPORT_CRITICAL_THRESHOLD:
        warnings.append(
            ConditionWarning("life_support", "critical", "Life support critical - immediate repair needed")
        )
    return warnings


def repair_cost(amount: float) -> int:
    return round_half_up(amount * REPAIR_COST_PER_PERCENT)


def sanitize_ship_name(name: str | None) -> str:
    """Strip markup, trim and cap the length; fall back to the stock name."""
    if not name:
        return DEFAULT_SHIP_NAME
    cleaned = _TAG_PATTERN.sub("", name).strip()[:MAX_SHIP_NAME_LENGTH].strip()
    return cleaned or DEFAULT_SHIP_NAME
