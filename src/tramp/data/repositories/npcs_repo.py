"""NPC repository."""
from __future__ import annotations

from typing import Dict

from tramp.data.errors import DataReferenceError, DataValidationError
from tramp.data.repositories.base import RepositoryBase
from tramp.data.repositories.stars_repo import StarsRepository
from tramp.domain.defs import NPCDef, NPCPersonality

_PERSONALITY_TRAITS = ("trust", "greed", "loyalty", "morality")


class NPCsRepository(RepositoryBase[NPCDef]):
    """Loads NPC definitions and checks their home systems exist."""

    def __init__(self, base_path=None, *, stars_repo: StarsRepository | None = None) -> None:
        super().__init__("npcs.json", base_path)
        self._stars_repo = stars_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, NPCDef]:
        npcs: Dict[str, NPCDef] = {}
        for raw_id, payload in raw.items():
            context = f"npc '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "role", "system", "station", "personality", "initial_rep"},
                context,
            )
            system_id = self._require_int(data["system"], f"{context} system")
            if self._stars_repo is not None and not self._stars_repo.has(system_id):
                raise DataReferenceError(f"{context} lives in unknown system {system_id}.")
            initial_rep = self._require_int(data["initial_rep"], f"{context} initial_rep")
            if not -100 <= initial_rep <= 100:
                raise DataValidationError(f"{context} initial_rep must be within [-100, 100].")
            npcs[raw_id] = NPCDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                role=self._require_str(data["role"], f"{context} role"),
                system=system_id,
                station=self._require_str(data["station"], f"{context} station"),
                personality=self._parse_personality(data["personality"], context),
                initial_rep=initial_rep,
            )
        return npcs

    def _parse_personality(self, value: object, context: str) -> NPCPersonality:
        data = self._require_mapping(value, f"{context} personality")
        self._assert_exact_fields(data, set(_PERSONALITY_TRAITS), f"{context} personality")
        traits: Dict[str, float] = {}
        for trait in _PERSONALITY_TRAITS:
            number = self._require_number(data[trait], f"{context} personality.{trait}")
            if not 0.0 <= number <= 1.0:
                raise DataValidationError(f"{context} personality.{trait} must be within [0, 1].")
            traits[trait] = number
        return NPCPersonality(**traits)
