from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers.galaxy import build_store
from tramp.config import GameConfig
from tramp.data.repositories import CommoditiesRepository, StarsRepository
from tramp.domain.pricing import price_table
from tramp.services import notifications as events
from tramp.services.game_store import SAVE_DEBOUNCED, build_game_store


def _catalogs(tmp_path: Path) -> tuple[StarsRepository, CommoditiesRepository]:
    definitions_dir = tmp_path / "definitions"
    return StarsRepository(base_path=definitions_dir), CommoditiesRepository(base_path=definitions_dir)


def test_time_cannot_move_backwards(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.advance_time(5)
    before = store.get_state()

    result = store.advance_time(3)

    assert result.reason == "Time cannot move backwards"
    assert store.get_state() == before


def test_advancing_to_same_day_is_silent(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    seen: list = []
    store.subscribe(events.TIME_CHANGED, seen.append)
    assert store.advance_time(0).success
    assert seen == []


def test_advance_time_ages_knowledge_and_decays_markets(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.buy("grain", 20, 10)
    store.purchase_intelligence(2)

    assert store.advance_time(2).success

    world = store.state.world
    assert store.state.player.days_elapsed == 2
    assert world.price_knowledge[0].last_visit == 2
    assert world.price_knowledge[2].last_visit == 2
    assert world.market_conditions[0]["grain"] == pytest.approx(-16.2)

    stars, commodities = _catalogs(tmp_path)
    for system_id in (0, 2):
        expected = price_table(
            commodities.all(), stars.get(system_id), 2, world.active_events, world.market_conditions
        )
        assert world.price_knowledge[system_id].prices == expected


def test_small_market_pressure_is_forgotten(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.buy("ore", 1, 5)
    store.advance_time(1)
    assert store.state.world.market_conditions == {}


def test_stale_intelligence_is_dropped_but_current_system_kept(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.purchase_intelligence(2)

    store.advance_time(101)

    assert set(store.state.world.price_knowledge) == {0}
    assert store.state.world.price_knowledge[0].last_visit == 101


def test_notifications_follow_state_update(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    seen: list = []
    for name in (events.PRICE_KNOWLEDGE_CHANGED, events.ACTIVE_EVENTS_CHANGED, events.TIME_CHANGED):
        store.subscribe(name, lambda payload, name=name: seen.append((name, store.state.player.days_elapsed)))

    store.advance_time(4)

    assert seen == [
        (events.PRICE_KNOWLEDGE_CHANGED, 4),
        (events.ACTIVE_EVENTS_CHANGED, 4),
        (events.TIME_CHANGED, 4),
    ]


def test_events_spawn_and_reprice_the_same_day(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path, event_chance=1.0)

    store.advance_time(1)

    active = store.state.world.active_events
    assert {(event.type, event.system_id) for event in active} == {
        ("festival", 0),
        ("festival", 1),
        ("mining_strike", 2),
    }
    sol_event = store.event_for_system(0)
    assert sol_event.id == "festival_0_1"
    assert 3 <= sol_event.end_day <= 5

    stars, commodities = _catalogs(tmp_path)
    with_event = price_table(commodities.all(), stars.get(0), 1, active, {})
    without_event = price_table(commodities.all(), stars.get(0), 1)
    assert store.known_prices(0) == with_event
    assert with_event["electronics"] > without_event["electronics"]


def test_event_spawning_is_deterministic(tmp_path: Path) -> None:
    first, _, _ = build_store(tmp_path / "a", event_chance=0.5, seed=1)
    second, _, _ = build_store(tmp_path / "b", event_chance=0.5, seed=2)
    for day in (3, 9, 20):
        first.advance_time(day)
        second.advance_time(day)
    assert first.state.world.active_events == second.state.world.active_events


def test_chance_multiplier_from_config_disables_events(tmp_path: Path) -> None:
    build_store(tmp_path, event_chance=1.0, start=False)
    store = build_game_store(
        GameConfig(event_chance_multiplier=0.0),
        definitions_path=tmp_path / "definitions",
        in_memory=True,
    )
    store.init_new_game(seed=3)
    store.advance_time(10)
    assert store.active_events() == ()


def test_update_location_records_visit_and_prices(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)

    assert store.update_location(2).success
    assert store.update_location(0).success
    assert store.update_location(2).success

    assert store.state.world.visited_systems == [0, 2]
    stars, commodities = _catalogs(tmp_path)
    assert store.current_system_prices() == price_table(commodities.all(), stars.get(2), 0)
    assert store.update_location(99).reason == "Unknown system"


def test_dock_refreshes_current_system_knowledge(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.advance_time(5)
    assert store.state.world.price_knowledge[0].last_visit == 5

    assert store.dock().success
    assert store.state.world.price_knowledge[0].last_visit == 0


def test_complete_jump_applies_everything_and_saves(tmp_path: Path) -> None:
    store, _, save_store = build_store(tmp_path)
    store.buy("ore", 1, 20)
    writes = save_store.write_count

    result = store.complete_jump(2)

    assert result.success
    assert result.distance == pytest.approx(8.0)
    assert result.fuel_cost == pytest.approx(26.0)
    assert result.jump_days == 4
    assert result.saved
    assert save_store.write_count == writes + 1

    state = store.state
    assert state.ship.fuel == pytest.approx(74.0)
    assert state.player.days_elapsed == 4
    assert state.player.current_system == 2
    assert state.world.visited_systems == [0, 2]
    assert (state.ship.hull, state.ship.engine, state.ship.life_support) == (98.0, 99.0, 98.0)
    assert save_store.read()["player"]["current_system"] == 2


def test_worn_engine_costs_more_fuel_and_time(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.state.ship.engine = 50.0

    result = store.complete_jump(2)

    assert result.fuel_cost == pytest.approx(31.2)
    assert result.jump_days == 5
    assert store.state.ship.engine == 49.0


@pytest.mark.parametrize(
    ("target", "reason"),
    [(42, "Unknown destination"), (0, "Already at destination"), (3, "No wormhole connection")],
)
def test_invalid_jumps_leave_state_unchanged(tmp_path: Path, target, reason) -> None:
    store, _, _ = build_store(tmp_path)
    before = store.get_state()
    result = store.complete_jump(target)
    assert result.reason == reason
    assert store.get_state() == before


def test_jump_without_fuel_fails(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    store.set_fuel(20)
    before = store.get_state()

    result = store.complete_jump(2)

    assert result.reason == "Insufficient fuel (need 26.0%)"
    assert store.get_state() == before


def test_save_is_debounced(tmp_path: Path) -> None:
    store, clock, save_store = build_store(tmp_path)

    assert store.save_game().success
    assert store.save_game().reason == SAVE_DEBOUNCED
    clock.advance_ms(999)
    assert store.save_game().reason == SAVE_DEBOUNCED
    clock.advance_ms(1)
    assert store.save_game().success
    assert store.save_game(force=True).success
    assert save_store.write_count == 3


def test_save_does_not_touch_state(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path)
    before = store.get_state()
    store.save_game()
    assert store.get_state() == before


def test_load_restores_saved_game(tmp_path: Path) -> None:
    store, _, save_store = build_store(tmp_path)
    store.buy("electronics", 2, 21)
    store.modify_rep("cole", 10, "paid on time")
    store.complete_jump(2)
    saved = store.get_state()

    other = build_game_store(
        GameConfig(), definitions_path=tmp_path / "definitions", save_store=save_store
    )
    assert other.has_saved_game()
    loaded = other.load_game()

    assert loaded is not None
    assert loaded.player == saved.player
    assert loaded.ship == saved.ship
    assert loaded.world == saved.world
    assert loaded.npcs == saved.npcs


def test_load_rejects_corrupt_and_unknown_version(tmp_path: Path) -> None:
    store, _, save_store = build_store(tmp_path)
    before = store.get_state()

    save_store.write_raw("{not json")
    assert store.load_game() is None

    save_store.write({"meta": {"version": "9.9.9"}, "player": {}})
    assert store.load_game() is None
    assert store.get_state() == before


def test_load_without_save_returns_none(tmp_path: Path) -> None:
    store, _, _ = build_store(tmp_path, start=False)
    assert store.load_game() is None
    assert not store.is_initialized


def test_clear_save(tmp_path: Path) -> None:
    store, _, save_store = build_store(tmp_path)
    store.save_game()
    assert store.has_saved_game()

    store.clear_save()

    assert not store.has_saved_game()
    assert store.save_game().success
