from pathlib import Path

from tests.helpers.galaxy import write_definitions, write_json
from tramp.data.repositories import CommoditiesRepository, EconomicEventTypesRepository, StarsRepository
from tramp.domain.state import EconomicEvent
from tramp.services.event_service import EconomicEventService


def _service(definitions_dir: Path, chance_multiplier: float = 1.0) -> EconomicEventService:
    commodities_repo = CommoditiesRepository(base_path=definitions_dir)
    return EconomicEventService(
        event_types_repo=EconomicEventTypesRepository(base_path=definitions_dir, commodities_repo=commodities_repo),
        commodities_repo=commodities_repo,
        core_system_ids=(0, 1),
        chance_multiplier=chance_multiplier,
    )


def _event(event_id: str, system_id: int, start: int, end: int) -> EconomicEvent:
    return EconomicEvent(id=event_id, type="festival", system_id=system_id, start_day=start, end_day=end)


def test_remove_expired_keeps_event_on_its_last_day() -> None:
    events = [_event("a", 0, 1, 5), _event("b", 1, 1, 4)]
    assert [e.id for e in EconomicEventService.remove_expired(events, 5)] == ["a"]
    assert EconomicEventService.remove_expired(events, 6) == []


def test_certain_events_spawn_only_on_eligible_systems(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path, event_chance=1.0)
    service = _service(definitions_dir)
    systems = StarsRepository(base_path=definitions_dir).all()

    spawned = service.maybe_spawn(systems, 5)
    by_system = {event.system_id: event for event in spawned}

    assert set(by_system) == {0, 1, 2}
    assert by_system[0].type == "festival"
    assert by_system[0].id == "festival_0_5"
    assert by_system[2].type == "mining_strike"
    assert 2 <= by_system[0].end_day - by_system[0].start_day <= 4
    assert by_system[2].modifiers == {"ore": 1.5}


def test_at_most_one_event_per_system(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path, event_chance=1.0)
    service = _service(definitions_dir)
    systems = StarsRepository(base_path=definitions_dir).all()
    existing = [_event("held", 0, 0, 10)]

    spawned = service.maybe_spawn(systems, 3, existing)

    assert [e.id for e in spawned if e.system_id == 0] == ["held"]
    assert len({e.system_id for e in spawned}) == len(spawned)


def test_zero_chance_never_spawns(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path, event_chance=1.0)
    service = _service(definitions_dir, chance_multiplier=0.0)
    systems = StarsRepository(base_path=definitions_dir).all()
    assert all(service.maybe_spawn(systems, day) == [] for day in range(30))


def test_spawning_is_deterministic(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path, event_chance=0.5)
    systems = StarsRepository(base_path=definitions_dir).all()
    first = [_service(definitions_dir).maybe_spawn(systems, day) for day in range(20)]
    second = [_service(definitions_dir).maybe_spawn(systems, day) for day in range(20)]
    assert first == second


def test_update_events_expires_before_spawning(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path, event_chance=1.0)
    service = _service(definitions_dir)
    systems = StarsRepository(base_path=definitions_dir).all()
    stale = [_event("old", 0, 0, 4)]

    updated = service.update_events(stale, systems, 5)

    assert "old" not in {e.id for e in updated}
    assert service.event_for_system(updated, 0).id == "festival_0_5"


def test_random_commodity_modifier_targets_one_good(tmp_path: Path) -> None:
    definitions_dir = write_definitions(tmp_path)
    write_json(
        definitions_dir / "economic_events.json",
        {
            "supply_glut": {
                "name": "Supply Glut",
                "description": "Cheap.",
                "duration": [3, 7],
                "modifiers": {},
                "chance": 0.06,
                "target": "any",
                "random_commodity_modifier": 0.6,
            }
        },
    )
    service = _service(definitions_dir)
    event = service.create_event("supply_glut", 2, 9)
    assert len(event.modifiers) == 1
    good, factor = next(iter(event.modifiers.items()))
    assert good in {"grain", "ore", "electronics"}
    assert factor == 0.6
    assert service.create_event("supply_glut", 2, 9) == event
    assert service.describe(event) == "Supply Glut"
