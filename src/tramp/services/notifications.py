"""Synchronous change notifications for presentation layers."""
from __future__ import annotations

from typing import Any, Callable, Dict, List

from loguru import logger

Subscriber = Callable[[Any], None]

CREDITS_CHANGED = "credits_changed"
DEBT_CHANGED = "debt_changed"
FUEL_CHANGED = "fuel_changed"
CARGO_CHANGED = "cargo_changed"
LOCATION_CHANGED = "location_changed"
TIME_CHANGED = "time_changed"
PRICE_KNOWLEDGE_CHANGED = "price_knowledge_changed"
ACTIVE_EVENTS_CHANGED = "active_events_changed"
SHIP_CONDITION_CHANGED = "ship_condition_changed"
CONDITION_WARNING = "condition_warning"
SHIP_NAME_CHANGED = "ship_name_changed"
UPGRADES_CHANGED = "upgrades_changed"
QUIRKS_CHANGED = "quirks_changed"
NPC_CHANGED = "npc_changed"

EVENT_NAMES: tuple[str, ...] = (
    CREDITS_CHANGED,
    DEBT_CHANGED,
    FUEL_CHANGED,
    CARGO_CHANGED,
    LOCATION_CHANGED,
    TIME_CHANGED,
    PRICE_KNOWLEDGE_CHANGED,
    ACTIVE_EVENTS_CHANGED,
    SHIP_CONDITION_CHANGED,
    CONDITION_WARNING,
    SHIP_NAME_CHANGED,
    UPGRADES_CHANGED,
    QUIRKS_CHANGED,
    NPC_CHANGED,
)


class ChangeNotifier:
    """Registry of callbacks keyed by event name.

    Callbacks run in registration order on the emitting call stack. A
    callback that raises is logged and skipped; the remaining callbacks still
    receive the payload and the mutation that triggered the emit stands.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscriber]] = {name: [] for name in EVENT_NAMES}

    def subscribe(self, event_name: str, callback: Subscriber) -> None:
        if event_name not in self._subscribers:
            raise ValueError(f"Unknown event type: {event_name}")
        self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(event_name)
        if not callbacks:
            return
        try:
            callbacks.remove(callback)
        except ValueError:
            return

    def subscriber_count(self, event_name: str) -> int:
        return len(self._subscribers.get(event_name, ()))

    def emit(self, event_name: str, payload: Any) -> None:
        # Snapshot so callbacks may unsubscribe themselves mid-dispatch.
        for callback in tuple(self._subscribers.get(event_name, ())):
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber for {} failed", event_name)
