"""Service layer exports."""

from .errors import GameNotInitializedError, SaveLoadError
from .event_service import EconomicEventService
from .game_store import GameStore, build_game_store
from .notifications import ChangeNotifier
from .results import ActionResult, IntelligenceResult, JumpResult, ReputationChange, SaleResult
from .save_store import InMemorySaveStore, JsonFileSaveStore

__all__ = [
    "ActionResult",
    "ChangeNotifier",
    "EconomicEventService",
    "GameNotInitializedError",
    "GameStore",
    "InMemorySaveStore",
    "IntelligenceResult",
    "JsonFileSaveStore",
    "JumpResult",
    "ReputationChange",
    "SaleResult",
    "SaveLoadError",
    "build_game_store",
]
