"""Deterministic stand-ins for the clock, timers and transport used by the tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from skirmish.engine.config import CombatConfig
from skirmish.engine.manager import CombatManager
from skirmish.engine.ports import TaskHandle
from skirmish.engine.resolver import start_session
from skirmish.state import RoomRegistry


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualScheduler:
    """Timers that only fire when the test says so."""

    def __init__(self) -> None:
        self.timers: List[Tuple[TaskHandle, float, Callable[[], Any]]] = []

    def every(self, interval: float, callback: Callable[[], Any], name: str = "") -> TaskHandle:
        handle = TaskHandle(name)
        self.timers.append((handle, interval, callback))
        return handle

    def live(self) -> List[TaskHandle]:
        return [handle for handle, _, _ in self.timers if not handle.cancelled]

    def fire_all(self) -> List[Any]:
        return [callback() for handle, _, callback in list(self.timers) if not handle.cancelled]


class RecordingTransport:
    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []
        self.errors: List[Tuple[str, str]] = []

    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((room_id, event, payload))

    def notify_error(self, actor_id: str, message: str) -> None:
        self.errors.append((actor_id, message))

    def resolve_actors_in_room(self, room_id: str) -> List[Dict[str, Any]]:
        return [
            {"id": m.sid, "displayName": m.username, "stats": m.stats.to_dict()}
            for m in self.registry.members(room_id)
        ]

    def names(self) -> List[str]:
        return [event for _, event, _ in self.events]


def make_session(
    humans: Optional[List[Dict[str, Any]]] = None,
    npcs: Optional[List[Dict[str, Any]]] = None,
    config: Optional[CombatConfig] = None,
    now: float = 1000.0,
):
    humans = humans if humans is not None else [{"id": "p1", "displayName": "Alice"}]
    npcs = npcs if npcs is not None else [{"id": "npc1", "name": "Goblin"}]
    return start_session("room-1", humans, npcs, config or CombatConfig(), now, seed=123, session_id="combat-test")


def make_arena(config: Optional[CombatConfig] = None, policy=None):
    registry = RoomRegistry()
    transport = RecordingTransport(registry)
    scheduler = ManualScheduler()
    clock = FakeClock()
    manager = CombatManager(registry, transport, scheduler, config=config, clock=clock, policy=policy)
    return manager, registry, transport, scheduler, clock
