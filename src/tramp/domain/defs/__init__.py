"""Definition dataclasses for the static game catalogs."""

from .commodity_def import CommodityDef
from .event_type_def import EconomicEventTypeDef
from .npc_def import NPCDef, NPCPersonality
from .quirk_def import QuirkDef
from .star_def import StarSystemDef
from .upgrade_def import UpgradeDef

__all__ = [
    "CommodityDef",
    "EconomicEventTypeDef",
    "NPCDef",
    "NPCPersonality",
    "QuirkDef",
    "StarSystemDef",
    "UpgradeDef",
]
