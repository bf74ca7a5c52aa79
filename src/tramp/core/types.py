"""Shared type aliases for the core and domain layers."""
from typing import Dict, Literal

SystemId = int
GoodId = str

ShipSystem = Literal["hull", "engine", "life_support"]
EventTarget = Literal["any", "core", "mining"]

MarketConditions = Dict[SystemId, Dict[GoodId, float]]
PriceMap = Dict[GoodId, int]

__all__ = [
    "EventTarget",
    "GoodId",
    "MarketConditions",
    "PriceMap",
    "ShipSystem",
    "SystemId",
]
