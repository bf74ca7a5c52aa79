"""Commodity definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class CommodityDef:
    """Tradeable good with its base price and technology bias."""

    id: str
    name: str
    base_price: int
    tech_bias: float
