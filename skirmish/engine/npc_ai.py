# skirmish/engine/npc_ai.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol

from ..content.actions import SPELLS
from .dice import rng_for
from .errors import CombatError
from .models import CombatSession
from .participant import Participant
from .ports import Scheduler, TaskHandle
from .targeting import possible_targets

if TYPE_CHECKING:
    from .manager import CombatManager

logger = logging.getLogger(__name__)


@dataclass
class PlannedAction:
    kind: str
    target_id: str
    params: Dict[str, Any] = field(default_factory=dict)


class NpcPolicy(Protocol):
    def choose_next_action(
        self, session: CombatSession, npc: Participant, rng: random.Random
    ) -> Optional[PlannedAction]: ...


def weakest_target(session: CombatSession, npc: Participant) -> Optional[Participant]:
    candidates = possible_targets("enemy", session.participants, npc)
    if not candidates:
        return None
    # min() keeps the first of equal values, i.e. participant order
    return min(candidates, key=lambda p: p.stats.health)


class WeakestTargetPolicy:
    """Always attack the living opponent with the least health."""

    def choose_next_action(self, session, npc, rng):
        target = weakest_target(session, npc)
        if target is None:
            return None
        return PlannedAction(kind="attack", target_id=target.id)


class OpportunistPolicy(WeakestTargetPolicy):
    """Weakest target, but sometimes throws a spell when energy allows."""

    def __init__(self, cast_chance: float = 0.2, spell_id: str = "fireball"):
        self.cast_chance = cast_chance
        self.spell_id = spell_id

    def choose_next_action(self, session, npc, rng):
        plan = super().choose_next_action(session, npc, rng)
        if plan is None:
            return None
        cost = int(SPELLS[self.spell_id].get("energy_cost", 0))
        if npc.stats.energy >= cost and rng.random() < self.cast_chance:
            return PlannedAction(kind="cast", target_id=plan.target_id, params={"spellId": self.spell_id})
        return plan


class NpcDriver:
    """
    One repeating timer per NPC. Ticks go through the manager's public
    ``submit_action`` under the room lock, exactly like a client request.
    """

    def __init__(self, manager: "CombatManager", scheduler: Scheduler, policy: NpcPolicy, interval: float):
        self.manager = manager
        self.scheduler = scheduler
        self.policy = policy
        self.interval = interval

    def start(self, room_id: str, session: CombatSession) -> List[TaskHandle]:
        handles = []
        for npc in session.npcs():
            callback = partial(self.tick, room_id, session.id, npc.id)
            handles.append(self.scheduler.every(self.interval, callback, name=f"{session.id}:{npc.id}"))
        logger.debug("Started %d NPC timers for %s", len(handles), session.id)
        return handles

    def tick(self, room_id: str, session_id: str, npc_id: str) -> bool:
        """Returns True when an action was submitted."""
        with self.manager.room_lock(room_id):
            session = self.manager.repository.active_session(room_id)
            if session is None or session.id != session_id:
                logger.warning("Dropping NPC tick for %s: session %s is not active in room %s",
                               npc_id, session_id, room_id)
                return False
            npc = session.participant(npc_id)
            if npc is None:
                logger.error("NPC %s missing from session %s", npc_id, session_id)
                return False
            if not npc.is_alive:
                return False

            now = self.manager.clock()
            if not npc.action_points.has_available(now):
                return False

            plan = self.policy.choose_next_action(session, npc, rng_for(session.seed, len(session.log)))
            if plan is None:
                return False
            try:
                self.manager.submit_action(room_id, npc.id, plan.kind, plan.target_id, plan.params)
            except CombatError as exc:
                logger.debug("NPC %s action rejected: %s", npc.id, exc)
                return False
            return True
