"""Per-NPC relationship ledger."""
from __future__ import annotations

from typing import Iterable, Mapping

from loguru import logger

from tramp.data.repositories import NPCsRepository, QuirksRepository
from tramp.domain.defs import NPCDef
from tramp.domain.reputation import RepTier, add_flags, apply_rep_change, get_rep_tier
from tramp.domain.ship import quirk_multipliers
from tramp.domain.state import NPCState
from tramp.services.results import ReputationChange


class ReputationService:
    """Reads and updates NPC relationship records.

    Methods take the current ``npc_id -> NPCState`` mapping and return new
    records; the caller decides where to store them.
    """

    def __init__(self, *, npcs_repo: NPCsRepository, quirks_repo: QuirksRepository) -> None:
        self._npcs_repo = npcs_repo
        self._quirks_repo = quirks_repo

    def get_npc(self, npc_id: str) -> NPCDef:
        return self._npcs_repo.get(npc_id)

    def get_npc_state(self, npcs: Mapping[str, NPCState], npc_id: str, current_day: int) -> NPCState:
        """Return the stored record, or a fresh one seeded from the NPC definition."""
        existing = npcs.get(npc_id)
        if existing is not None:
            return existing
        npc = self._npcs_repo.get(npc_id)
        return NPCState(rep=npc.initial_rep, last_interaction=current_day, flags=[], interactions=0)

    def modify_rep(
        self,
        npcs: Mapping[str, NPCState],
        npc_id: str,
        raw_delta: int,
        reason: str,
        current_day: int,
        quirk_ids: Iterable[str] = (),
    ) -> tuple[NPCState | None, ReputationChange]:
        if not self._npcs_repo.has(npc_id):
            return None, ReputationChange(success=False, reason=f"Unknown NPC: {npc_id}", npc_id=npc_id)

        npc = self._npcs_repo.get(npc_id)
        current = self.get_npc_state(npcs, npc_id, current_day)
        multipliers = quirk_multipliers("npc_rep_gain", quirk_ids, self._quirk_lookup())
        updated = apply_rep_change(
            current, raw_delta, npc.personality.trust, current_day, multipliers
        )
        logger.info(
            "Reputation with {} {} -> {} (raw {:+d}): {}",
            npc_id,
            current.rep,
            updated.rep,
            raw_delta,
            reason,
        )
        return updated, ReputationChange(
            success=True,
            npc_id=npc_id,
            old_rep=current.rep,
            new_rep=updated.rep,
            effective_delta=updated.rep - current.rep,
        )

    def add_flags(
        self, npcs: Mapping[str, NPCState], npc_id: str, flags: Iterable[str], current_day: int
    ) -> NPCState:
        return add_flags(self.get_npc_state(npcs, npc_id, current_day), flags)

    @staticmethod
    def tier(rep: int) -> RepTier:
        return get_rep_tier(rep)

    def _quirk_lookup(self):
        return {quirk.id: quirk for quirk in self._quirks_repo.all()}
