"""Star system and wormhole catalog repository."""
from __future__ import annotations

from typing import Dict, List, Tuple

from tramp.data.errors import DataReferenceError, DataValidationError
from tramp.data.repositories.base import RepositoryBase
from tramp.domain.defs import StarSystemDef


class StarsRepository(RepositoryBase[StarSystemDef]):
    """Loads star systems, the wormhole graph and the core system list."""

    def __init__(self, base_path=None) -> None:
        super().__init__("stars.json", base_path)
        self._wormholes: List[Tuple[int, int]] = []
        self._core_system_ids: Tuple[int, ...] = ()

    def _build(self, raw: dict[str, object]) -> Dict[int, StarSystemDef]:
        self._assert_exact_fields(raw, {"core_system_ids", "systems", "wormholes"}, "stars.json")

        systems: Dict[int, StarSystemDef] = {}
        for index, entry in enumerate(self._require_list(raw["systems"], "stars.json systems")):
            context = f"systems[{index}]"
            data = self._require_mapping(entry, context)
            self._assert_exact_fields(
                data,
                {"id", "name", "x", "y", "z", "spectral_class"},
                context,
                optional_keys={"station_count"},
            )
            system_id = self._require_int(data["id"], f"{context} id")
            if system_id in systems:
                raise DataValidationError(f"Duplicate star system id {system_id}.")
            station_count = self._require_int(data.get("station_count", 1), f"{context} station_count")
            systems[system_id] = StarSystemDef(
                id=system_id,
                name=self._require_str(data["name"], f"{context} name"),
                x=self._require_number(data["x"], f"{context} x"),
                y=self._require_number(data["y"], f"{context} y"),
                z=self._require_number(data["z"], f"{context} z"),
                spectral_class=self._require_str(data["spectral_class"], f"{context} spectral_class"),
                station_count=station_count,
            )

        wormholes: List[Tuple[int, int]] = []
        for index, entry in enumerate(self._require_list(raw["wormholes"], "stars.json wormholes")):
            pair = self._require_list(entry, f"wormholes[{index}]")
            if len(pair) != 2:
                raise DataValidationError(f"wormholes[{index}] must list exactly two system ids.")
            a = self._require_int(pair[0], f"wormholes[{index}][0]")
            b = self._require_int(pair[1], f"wormholes[{index}][1]")
            for endpoint in (a, b):
                if endpoint not in systems:
                    raise DataReferenceError(f"wormholes[{index}] references unknown system {endpoint}.")
            wormholes.append((a, b))

        core_ids = []
        for index, entry in enumerate(self._require_list(raw["core_system_ids"], "stars.json core_system_ids")):
            system_id = self._require_int(entry, f"core_system_ids[{index}]")
            if system_id not in systems:
                raise DataReferenceError(f"core_system_ids references unknown system {system_id}.")
            core_ids.append(system_id)

        self._wormholes = wormholes
        self._core_system_ids = tuple(core_ids)
        return systems

    def wormholes(self) -> List[Tuple[int, int]]:
        """Return the undirected wormhole connections."""
        self._ensure_loaded()
        return list(self._wormholes)

    def core_system_ids(self) -> Tuple[int, ...]:
        """Return ids of the core (inner) systems."""
        self._ensure_loaded()
        return self._core_system_ids

    def find_by_name(self, name: str) -> StarSystemDef | None:
        for system in self.all():
            if system.name == name:
                return system
        return None
