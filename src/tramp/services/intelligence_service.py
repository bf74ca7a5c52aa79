"""Information broker: paid market intelligence and rumors."""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from loguru import logger

from tramp.core.numbers import round_half_up
from tramp.core.rng import RNG
from tramp.core.types import MarketConditions, PriceMap
from tramp.data.repositories import CommoditiesRepository, StarsRepository
from tramp.domain.pricing import cheapest_system_for, price_table
from tramp.domain.state import EconomicEvent, PriceKnowledgeEntry
from tramp.services.event_service import EconomicEventService
from tramp.services.navigation_service import Navigator
from tramp.services.results import IntelligenceOffer, IntelligenceResult

COST_RECENT_VISIT = 50
COST_STALE_VISIT = 75
COST_NEVER_VISITED = 100
RECENT_VISIT_THRESHOLD = 30
MAX_INTELLIGENCE_AGE = 100

# Brokers occasionally pass on doctored numbers.
MANIPULATION_CHANCE = 0.1
MANIPULATION_MIN_MULTIPLIER = 0.7
MANIPULATION_MAX_MULTIPLIER = 0.85


class IntelligenceService:
    def __init__(
        self,
        *,
        stars_repo: StarsRepository,
        commodities_repo: CommoditiesRepository,
        navigator: Navigator,
        event_service: EconomicEventService,
    ) -> None:
        self._stars_repo = stars_repo
        self._commodities_repo = commodities_repo
        self._navigator = navigator
        self._event_service = event_service

    @staticmethod
    def get_cost(system_id: int, price_knowledge: Mapping[int, PriceKnowledgeEntry]) -> int:
        entry = price_knowledge.get(system_id)
        if entry is None:
            return COST_NEVER_VISITED
        if entry.last_visit <= RECENT_VISIT_THRESHOLD:
            return COST_RECENT_VISIT
        return COST_STALE_VISIT

    def purchase(
        self,
        system_id: int,
        *,
        credits: int,
        price_knowledge: Mapping[int, PriceKnowledgeEntry],
        current_day: int,
        active_events: Sequence[EconomicEvent],
        market_conditions: MarketConditions,
    ) -> IntelligenceResult:
        """Quote and price a purchase; the caller applies it on success."""
        if not self._stars_repo.has(system_id):
            return IntelligenceResult(success=False, reason="Unknown system", system_id=system_id)
        cost = self.get_cost(system_id, price_knowledge)
        if credits < cost:
            return IntelligenceResult(
                success=False,
                reason="Insufficient credits for intelligence",
                system_id=system_id,
                cost=cost,
            )
        prices = price_table(
            self._commodities_repo.all(),
            self._stars_repo.get(system_id),
            current_day,
            active_events,
            market_conditions,
        )
        return IntelligenceResult(
            success=True,
            system_id=system_id,
            cost=cost,
            prices=self._unreliable(prices, system_id, current_day),
        )

    @staticmethod
    def cleanup_old_intelligence(
        price_knowledge: Mapping[int, PriceKnowledgeEntry], current_system: int
    ) -> Dict[int, PriceKnowledgeEntry]:
        """Drop entries older than MAX_INTELLIGENCE_AGE days, except the current system."""
        kept: Dict[int, PriceKnowledgeEntry] = {}
        for system_id, entry in price_knowledge.items():
            if system_id != current_system and entry.last_visit > MAX_INTELLIGENCE_AGE:
                logger.debug("Discarding stale intelligence for system {}", system_id)
                continue
            kept[system_id] = entry
        return kept

    def list_available(
        self,
        current_system: int,
        price_knowledge: Mapping[int, PriceKnowledgeEntry],
        active_events: Sequence[EconomicEvent],
        event_visibility: int = 0,
    ) -> List[IntelligenceOffer]:
        offers: List[IntelligenceOffer] = []
        for system_id in self._navigator.connected_systems(current_system):
            system = self._stars_repo.get(system_id)
            entry = price_knowledge.get(system_id)
            event_type = None
            if event_visibility > 0:
                event = self._event_service.event_for_system(active_events, system_id)
                event_type = event.type if event else None
            offers.append(
                IntelligenceOffer(
                    system_id=system_id,
                    system_name=system.name,
                    cost=self.get_cost(system_id, price_knowledge),
                    last_visit=entry.last_visit if entry else None,
                    event_type=event_type,
                )
            )
        return offers

    def generate_rumor(
        self,
        current_day: int,
        active_events: Sequence[EconomicEvent],
        market_conditions: MarketConditions,
    ) -> str:
        rng = RNG(f"rumor:{current_day}")
        if active_events and rng.random() < 0.5:
            event = rng.choice(list(active_events))
            system = self._stars_repo.get(event.system_id)
            name = self._event_service.describe(event)
            return f"Word is there's a {name.lower()} at {system.name}. Prices there are all over the place."
        commodity = rng.choice(self._commodities_repo.all())
        cheapest = cheapest_system_for(
            commodity, self._stars_repo.all(), current_day, active_events, market_conditions
        )
        if cheapest is None:
            return "Quiet day. Nobody's talking."
        return f"I hear {commodity.name.lower()} is going cheap at {cheapest.name}."

    def _unreliable(self, prices: PriceMap, system_id: int, current_day: int) -> PriceMap:
        rng = RNG(f"intel:{system_id}:{current_day}")
        reported: PriceMap = {}
        for good_id, price in prices.items():
            if rng.random() < MANIPULATION_CHANCE:
                factor = rng.uniform(MANIPULATION_MIN_MULTIPLIER, MANIPULATION_MAX_MULTIPLIER)
                reported[good_id] = max(1, round_half_up(price * factor))
            else:
                reported[good_id] = price
        return reported
