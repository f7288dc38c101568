# skirmish/engine/manager.py
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import resolver
from .config import CombatConfig
from .errors import (
    ActorNotFound,
    CombatAlreadyActive,
    CombatError,
    InvalidCombatTarget,
    RoomNotFound,
    SessionNotActive,
)
from .models import CombatSession, Faction
from .npc_ai import NpcDriver, NpcPolicy, WeakestTargetPolicy
from .ports import RoomRepository, Scheduler, TaskHandle, Transport
from .roster import npc_entry
from .snapshot import session_snapshot

logger = logging.getLogger(__name__)


class CombatManager:
    """
    Owns the lifecycle of every room's combat session. Each reaction (client
    request, NPC tick, teardown) runs to completion under that room's lock;
    rooms never share a lock.
    """

    def __init__(
        self,
        repository: RoomRepository,
        transport: Transport,
        scheduler: Scheduler,
        config: Optional[CombatConfig] = None,
        clock: Callable[[], float] = time.time,
        policy: Optional[NpcPolicy] = None,
    ):
        self.repository = repository
        self.transport = transport
        self.config = config or CombatConfig()
        self.clock = clock
        self.driver = NpcDriver(self, scheduler, policy or WeakestTargetPolicy(), self.config.npc_tick_interval)
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._timers: Dict[str, List[TaskHandle]] = {}

    def room_lock(self, room_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.RLock()
            return lock

    def snapshot(self, session: CombatSession) -> Dict[str, Any]:
        return session_snapshot(session, self.clock(), self.config.log_tail)

    def timers_for(self, room_id: str) -> List[TaskHandle]:
        return list(self._timers.get(room_id, []))

    # --- session creation -------------------------------------------------

    def initiate_combat(
        self,
        room_id: str,
        initiator_id: str,
        targets: Optional[List[Mapping[str, Any]]] = None,
    ) -> CombatSession:
        with self.room_lock(room_id):
            if self.repository.get_room(room_id) is None:
                raise RoomNotFound()
            if self.repository.active_session(room_id) is not None:
                raise CombatAlreadyActive()

            members = self.transport.resolve_actors_in_room(room_id)
            by_id = {m["id"]: m for m in members}
            initiator = by_id.get(initiator_id) if isinstance(initiator_id, str) else None
            if initiator is None:
                raise ActorNotFound("Initiator not found")

            humans, npcs = self._roster(initiator, members, by_id, targets)
            now = self.clock()
            session = resolver.start_session(
                room_id,
                humans,
                npcs,
                self.config,
                now,
                seed=int(now * 1000) & 0xFFFFFFFF,
            )
            if not session.alive(Faction.PLAYERS) or not session.alive(Faction.NPCS):
                raise InvalidCombatTarget("Each side needs a living participant")
            self.repository.attach_session(room_id, session)
            self.transport.broadcast(room_id, "combatStarted", {"session": self.snapshot(session)})
            self._timers[room_id] = self.driver.start(room_id, session)
            logger.info("Combat %s initiated in room %s with %d participants",
                        session.id, room_id, len(session.participants))
            return session

    def _roster(self, initiator, members, by_id, targets):
        if targets is None:
            return list(members), [npc_entry()]

        humans = [initiator]
        npcs = []
        for target in targets:
            if not isinstance(target, Mapping):
                continue
            kind = target.get("type")
            if kind == "player":
                member_id = target.get("id")
                member = by_id.get(member_id) if isinstance(member_id, str) else None
                if member is not None and member not in humans:
                    humans.append(member)
            elif kind == "npc":
                npcs.append(npc_entry(target))
        if not npcs:
            npcs.append(npc_entry())

        # client ids may not shadow a player or another NPC; those get generated ones
        taken = {m["id"] for m in humans}
        for npc in npcs:
            if npc.get("id") in taken:
                npc.pop("id")
            elif "id" in npc:
                taken.add(npc["id"])
        return humans, npcs

    def handle_initiate(self, room_id: Optional[str], actor_id: str, payload: Any) -> Optional[CombatSession]:
        """Client entry: failures are reported to the requester only."""
        payload = payload if isinstance(payload, Mapping) else {}
        targets = payload.get("targets")
        try:
            if room_id is None:
                raise RoomNotFound()
            return self.initiate_combat(room_id, payload.get("initiatorId") or actor_id,
                                        targets if isinstance(targets, list) else None)
        except CombatError as exc:
            logger.debug("initiateCombat rejected for %s: %s", actor_id, exc)
            self.transport.notify_error(actor_id, exc.message)
            return None

    # --- actions ----------------------------------------------------------

    def submit_action(
        self,
        room_id: str,
        actor_id: str,
        action_kind: Any,
        target_id: Optional[str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> resolver.ActionOutcome:
        """
        The one path into a session for humans and NPCs alike. Admission
        errors propagate to the caller and leave the session untouched.
        """
        with self.room_lock(room_id):
            session = self.repository.active_session(room_id)
            if session is None:
                raise SessionNotActive()
            outcome = resolver.submit_action(session, actor_id, action_kind, target_id, params, self.clock())
            if outcome.ended:
                self._finish(room_id, session)
            else:
                self.transport.broadcast(room_id, "combatUpdate", {"session": self.snapshot(session)})
            return outcome

    def handle_action(self, room_id: Optional[str], actor_id: str, payload: Any) -> Optional[resolver.ActionOutcome]:
        """Client entry for ``combatAction``."""
        payload = payload if isinstance(payload, Mapping) else {}
        try:
            if room_id is None:
                raise SessionNotActive()
            return self.submit_action(
                room_id,
                actor_id,
                payload.get("actionKind", payload.get("actionType")),
                payload.get("targetId"),
                payload.get("actionParams", payload.get("actionData")),
            )
        except CombatError as exc:
            logger.debug("combatAction rejected for %s: %s", actor_id, exc)
            self.transport.notify_error(actor_id, exc.message)
            return None

    # --- lifecycle --------------------------------------------------------

    def _cancel_timers(self, room_id: str) -> int:
        handles = self._timers.pop(room_id, [])
        return sum(1 for handle in handles if handle.cancel())

    def _finish(self, room_id: str, session: CombatSession) -> None:
        detached = self.repository.detach_session(room_id)
        if detached is not session:
            logger.error("Room %s held %s while finishing %s", room_id,
                         detached.id if detached else None, session.id)
        cancelled = self._cancel_timers(room_id)
        logger.debug("Cancelled %d NPC timers for %s", cancelled, session.id)
        self.transport.broadcast(room_id, "combatEnded", {
            "session": self.snapshot(session),
            "winner": session.winner.value if session.winner else None,
        })

    def teardown_room(self, room_id: str) -> None:
        """Room is going away: stop its NPCs and drop any session."""
        with self.room_lock(room_id):
            cancelled = self._cancel_timers(room_id)
            session = self.repository.detach_session(room_id)
            if session is not None:
                logger.info("Room %s torn down during combat %s (%d timers cancelled)",
                            room_id, session.id, cancelled)
        with self._locks_guard:
            self._locks.pop(room_id, None)
