"""Repository exports."""

from .commodities_repo import CommoditiesRepository
from .event_types_repo import EconomicEventTypesRepository
from .npcs_repo import NPCsRepository
from .quirks_repo import QuirksRepository
from .stars_repo import StarsRepository
from .upgrades_repo import UpgradesRepository

__all__ = [
    "CommoditiesRepository",
    "EconomicEventTypesRepository",
    "NPCsRepository",
    "QuirksRepository",
    "StarsRepository",
    "UpgradesRepository",
]
