"""Commodities repository."""
from __future__ import annotations

from typing import Dict

from tramp.data.errors import DataValidationError
from tramp.data.repositories.base import RepositoryBase
from tramp.domain.defs import CommodityDef


class CommoditiesRepository(RepositoryBase[CommodityDef]):
    """Loads and validates commodity definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("commodities.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CommodityDef]:
        commodities: Dict[str, CommodityDef] = {}
        for raw_id, payload in raw.items():
            context = f"commodity '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"name", "base_price", "tech_bias"}, context)
            base_price = self._require_int(data["base_price"], f"{context} base_price")
            if base_price <= 0:
                raise DataValidationError(f"{context} base_price must be positive.")
            commodities[raw_id] = CommodityDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                base_price=base_price,
                tech_bias=self._require_number(data["tech_bias"], f"{context} tech_bias"),
            )
        return commodities
