# skirmish/engine/ports.py
"""Boundaries the combat engine talks through. The socket layer implements them."""
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional, Protocol

from .models import CombatSession


class TaskHandle:
    """Cancellable handle for one repeating timer."""

    def __init__(self, name: str = ""):
        self.name = name
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> bool:
        """Returns True only for the call that actually cancelled the timer."""
        if self._cancelled.is_set():
            return False
        self._cancelled.set()
        return True


class Transport(Protocol):
    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any]) -> None: ...

    def notify_error(self, actor_id: str, message: str) -> None: ...

    def resolve_actors_in_room(self, room_id: str) -> List[Dict[str, Any]]: ...


class Scheduler(Protocol):
    def every(self, interval: float, callback: Callable[[], Any], name: str = "") -> TaskHandle: ...


class RoomRepository(Protocol):
    def get_room(self, room_id: str) -> Any: ...

    def active_session(self, room_id: str) -> Optional[CombatSession]: ...

    def attach_session(self, room_id: str, session: CombatSession) -> None: ...

    def detach_session(self, room_id: str) -> Optional[CombatSession]: ...
