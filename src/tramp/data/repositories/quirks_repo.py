"""Ship quirk repository."""
from __future__ import annotations

from typing import Dict

from tramp.data.repositories.base import RepositoryBase
from tramp.domain.defs import QuirkDef


class QuirksRepository(RepositoryBase[QuirkDef]):
    def __init__(self, base_path=None) -> None:
        super().__init__("quirks.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, QuirkDef]:
        quirks: Dict[str, QuirkDef] = {}
        for raw_id, payload in raw.items():
            context = f"quirk '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data, {"name", "description", "effects"}, context, optional_keys={"flavor"}
            )
            quirks[raw_id] = QuirkDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                effects=self._require_float_map(data["effects"], f"{context} effects"),
                flavor=str(data.get("flavor", "")),
            )
        return quirks
