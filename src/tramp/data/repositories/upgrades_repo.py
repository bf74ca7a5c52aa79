"""Ship upgrade repository."""
from __future__ import annotations

from typing import Dict

from tramp.data.errors import DataValidationError
from tramp.data.repositories.base import RepositoryBase
from tramp.domain.defs import UpgradeDef


class UpgradesRepository(RepositoryBase[UpgradeDef]):
    def __init__(self, base_path=None) -> None:
        super().__init__("upgrades.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, UpgradeDef]:
        upgrades: Dict[str, UpgradeDef] = {}
        for raw_id, payload in raw.items():
            context = f"upgrade '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data, {"name", "cost", "description", "effects"}, context, optional_keys={"tradeoff"}
            )
            cost = self._require_int(data["cost"], f"{context} cost")
            if cost < 0:
                raise DataValidationError(f"{context} cost cannot be negative.")
            upgrades[raw_id] = UpgradeDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                cost=cost,
                description=self._require_str(data["description"], f"{context} description"),
                effects=self._require_float_map(data["effects"], f"{context} effects"),
                tradeoff=str(data.get("tradeoff", "")),
            )
        return upgrades
