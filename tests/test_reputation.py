from pathlib import Path

import pytest

from tests.helpers.galaxy import write_definitions
from tramp.data.repositories import NPCsRepository, QuirksRepository
from tramp.domain.reputation import (
    add_flags,
    apply_rep_change,
    effective_rep_delta,
    get_rep_tier,
)
from tramp.domain.state import NPCState
from tramp.services.reputation_service import ReputationService


def _service(tmp_path: Path) -> ReputationService:
    definitions_dir = write_definitions(tmp_path)
    return ReputationService(
        npcs_repo=NPCsRepository(base_path=definitions_dir),
        quirks_repo=QuirksRepository(base_path=definitions_dir),
    )


def test_positive_gain_is_scaled_by_trust() -> None:
    assert effective_rep_delta(10, 0.3) == 3
    assert effective_rep_delta(10, 0.7) == 7


def test_trust_scaling_rounds_halves_up() -> None:
    assert effective_rep_delta(15, 0.7) == 11
    assert effective_rep_delta(15, 0.3) == 5
    assert effective_rep_delta(5, 0.5) == 3


def test_losses_ignore_trust_and_quirks() -> None:
    assert effective_rep_delta(-10, 0.3, [1.05]) == -10
    assert effective_rep_delta(0, 0.3, [1.05]) == 0


def test_quirk_multipliers_apply_after_trust_in_any_order() -> None:
    assert effective_rep_delta(100, 0.4, [1.05]) == 42
    assert effective_rep_delta(100, 0.5, [1.05, 1.2]) == effective_rep_delta(100, 0.5, [1.2, 1.05])


def test_rep_is_clamped_and_interactions_counted() -> None:
    state = NPCState(rep=95, last_interaction=0)
    updated = apply_rep_change(state, 50, 1.0, current_day=7)
    assert updated.rep == 100
    assert updated.last_interaction == 7
    assert updated.interactions == 1
    assert state.rep == 95

    floor = apply_rep_change(NPCState(rep=-90, last_interaction=0), -50, 1.0, current_day=8)
    assert floor.rep == -100


def test_zero_delta_still_counts_as_interaction() -> None:
    updated = apply_rep_change(NPCState(rep=5, last_interaction=1, interactions=3), 0, 0.5, current_day=4)
    assert updated.rep == 5
    assert updated.interactions == 4
    assert updated.last_interaction == 4


@pytest.mark.parametrize(
    "rep,tier",
    [
        (-100, "Hostile"),
        (-50, "Hostile"),
        (-49, "Cold"),
        (-10, "Cold"),
        (-9, "Neutral"),
        (9, "Neutral"),
        (10, "Warm"),
        (29, "Warm"),
        (30, "Friendly"),
        (60, "Trusted"),
        (89, "Trusted"),
        (90, "Family"),
        (100, "Family"),
    ],
)
def test_rep_tiers_are_contiguous(rep: int, tier: str) -> None:
    assert get_rep_tier(rep).name == tier


def test_flags_have_set_semantics() -> None:
    state = NPCState(rep=0, last_interaction=0, flags=["met"])
    updated = add_flags(state, ["met", "helped", "helped"])
    assert updated.flags == ["met", "helped"]
    assert state.flags == ["met"]


def test_service_lazily_seeds_initial_rep(tmp_path: Path) -> None:
    service = _service(tmp_path)
    record = service.get_npc_state({}, "cole", current_day=3)
    assert record == NPCState(rep=-20, last_interaction=3, flags=[], interactions=0)
    with pytest.raises(KeyError):
        service.get_npc_state({}, "nobody", current_day=0)


def test_service_modify_rep_applies_trust_and_smooth_talker(tmp_path: Path) -> None:
    service = _service(tmp_path)
    updated, change = service.modify_rep({}, "chen", 20, "helped unload", 5, ["smooth_talker"])
    assert change.success
    assert change.old_rep == 0
    assert updated is not None
    assert updated.rep == 6
    assert change.new_rep == updated.rep


def test_service_modify_rep_reports_unknown_npc(tmp_path: Path) -> None:
    updated, change = _service(tmp_path).modify_rep({}, "ghost", 5, "boo", 0)
    assert updated is None
    assert not change.success
