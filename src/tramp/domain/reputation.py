"""Reputation arithmetic and tiers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from tramp.core.numbers import round_half_up
from tramp.domain.state import MAX_REPUTATION, MIN_REPUTATION, NPCState


@dataclass(slots=True, frozen=True)
class RepTier:
    name: str
    min: int
    max: int


REPUTATION_TIERS: tuple[RepTier, ...] = (
    RepTier("Hostile", -100, -50),
    RepTier("Cold", -49, -10),
    RepTier("Neutral", -9, 9),
    RepTier("Warm", 10, 29),
    RepTier("Friendly", 30, 59),
    RepTier("Trusted", 60, 89),
    RepTier("Family", 90, 100),
)


def clamp_rep(value: float) -> int:
    return int(max(MIN_REPUTATION, min(MAX_REPUTATION, round_half_up(value))))


def get_rep_tier(rep: int) -> RepTier:
    """Return the display tier for a reputation value (clamped first)."""
    value = clamp_rep(rep)
    for tier in REPUTATION_TIERS:
        if tier.min <= value <= tier.max:
            return tier
    raise ValueError(f"No reputation tier covers {rep}.")


def effective_rep_delta(raw_delta: int, trust: float, quirk_multipliers: Iterable[float] = ()) -> int:
    """Scale a positive change by trust, then by every rep-gain quirk.

    Losses pass through unchanged. The result is an integer so stored
    reputation stays integral.
    """
    if raw_delta <= 0:
        return raw_delta
    delta = float(round_half_up(raw_delta * trust))
    for multiplier in quirk_multipliers:
        delta *= multiplier
    return round_half_up(delta)


def apply_rep_change(
    npc_state: NPCState,
    raw_delta: int,
    trust: float,
    current_day: int,
    quirk_multipliers: Sequence[float] = (),
) -> NPCState:
    delta = effective_rep_delta(raw_delta, trust, quirk_multipliers)
    return replace(
        npc_state,
        rep=clamp_rep(npc_state.rep + delta),
        last_interaction=current_day,
        flags=list(npc_state.flags),
        interactions=npc_state.interactions + 1,
    )


def add_flags(npc_state: NPCState, flags: Iterable[str]) -> NPCState:
    merged = list(npc_state.flags)
    for flag in flags:
        if flag not in merged:
            merged.append(flag)
    return replace(npc_state, flags=merged)
