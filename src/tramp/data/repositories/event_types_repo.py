"""Economic event type repository."""
from __future__ import annotations

from typing import Dict

from tramp.data.errors import DataReferenceError, DataValidationError
from tramp.data.repositories.base import RepositoryBase
from tramp.data.repositories.commodities_repo import CommoditiesRepository
from tramp.domain.defs import EconomicEventTypeDef

_VALID_TARGETS = ("any", "core", "mining")


class EconomicEventTypesRepository(RepositoryBase[EconomicEventTypeDef]):
    """Loads event types; spawn chance, durations and magnitudes live here."""

    def __init__(
        self,
        base_path=None,
        *,
        commodities_repo: CommoditiesRepository | None = None,
    ) -> None:
        super().__init__("economic_events.json", base_path)
        self._commodities_repo = commodities_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, EconomicEventTypeDef]:
        event_types: Dict[str, EconomicEventTypeDef] = {}
        for raw_id, payload in raw.items():
            context = f"event type '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "description", "duration", "modifiers", "chance", "target"},
                context,
                optional_keys={"random_commodity_modifier"},
            )
            duration = self._require_list(data["duration"], f"{context} duration")
            if len(duration) != 2:
                raise DataValidationError(f"{context} duration must be [min, max].")
            min_duration = self._require_int(duration[0], f"{context} duration[0]")
            max_duration = self._require_int(duration[1], f"{context} duration[1]")
            if min_duration < 1 or max_duration < min_duration:
                raise DataValidationError(f"{context} duration must satisfy 1 <= min <= max.")

            chance = self._require_number(data["chance"], f"{context} chance")
            if not 0.0 <= chance <= 1.0:
                raise DataValidationError(f"{context} chance must be within [0, 1].")

            target = self._require_str(data["target"], f"{context} target")
            if target not in _VALID_TARGETS:
                raise DataValidationError(f"{context} target must be one of {_VALID_TARGETS}.")

            modifiers = self._require_float_map(data["modifiers"], f"{context} modifiers")
            self._check_goods(modifiers, context)

            random_modifier = data.get("random_commodity_modifier")
            event_types[raw_id] = EconomicEventTypeDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                min_duration=min_duration,
                max_duration=max_duration,
                chance=chance,
                target=target,
                modifiers=modifiers,
                random_commodity_modifier=(
                    None
                    if random_modifier is None
                    else self._require_number(random_modifier, f"{context} random_commodity_modifier")
                ),
            )
        return event_types

    def _check_goods(self, modifiers: Dict[str, float], context: str) -> None:
        if self._commodities_repo is None:
            return
        for good_id in modifiers:
            if not self._commodities_repo.has(good_id):
                raise DataReferenceError(f"{context} modifies unknown commodity '{good_id}'.")
