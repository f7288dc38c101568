# skirmish/sockets.py
import logging
from typing import Any, Callable, Dict, List

from flask import request
from flask_socketio import emit, join_room, leave_room

from .content.classes import CLASSES
from .engine.ports import TaskHandle

logger = logging.getLogger(__name__)


class SocketIOTransport:
    """Room fan-out and unicast errors over Socket.IO rooms (each sid is its own room)."""

    def __init__(self, socketio, registry):
        self.socketio = socketio
        self.registry = registry

    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.socketio.emit(event, payload, to=room_id)

    def notify_error(self, actor_id: str, message: str) -> None:
        self.socketio.emit("combatError", {"message": message}, to=actor_id)

    def resolve_actors_in_room(self, room_id: str) -> List[Dict[str, Any]]:
        return [
            {"id": m.sid, "displayName": m.username, "stats": m.stats.to_dict()}
            for m in self.registry.members(room_id)
        ]


class SocketIOScheduler:
    """Repeating timers as Socket.IO background tasks."""

    def __init__(self, socketio):
        self.socketio = socketio

    def every(self, interval: float, callback: Callable[[], Any], name: str = "") -> TaskHandle:
        handle = TaskHandle(name)
        self.socketio.start_background_task(self._run, handle, interval, callback)
        return handle

    def _run(self, handle: TaskHandle, interval: float, callback: Callable[[], Any]) -> None:
        while not handle.cancelled:
            self.socketio.sleep(interval)
            if handle.cancelled:
                break
            try:
                callback()
            except Exception:
                # one bad tick must not kill the timer or the room
                logger.exception("Timer %s failed; tick dropped", handle.name)
        logger.debug("Timer %s stopped", handle.name)


def register_socket_handlers(socketio, registry, manager):
    def leave_current_room(sid: str) -> None:
        left = registry.leave(sid)
        if not left:
            return
        room, member = left
        leave_room(room.id, sid=sid)
        socketio.emit("playerLeft", {
            "playerId": sid,
            "username": member.username,
            "players": registry.players_payload(room.id),
        }, to=room.id)
        logger.info("Player %s (%s) left room %s", member.username, sid, room.id)
        if not room.members:
            manager.teardown_room(room.id)
            registry.cleanup_room(room.id)
            logger.info("Room deleted: %s", room.id)

    @socketio.on("join")
    def on_join(payload=None):
        sid = request.sid
        payload = payload if isinstance(payload, dict) else {}
        room_id = str(payload.get("roomId") or "").strip()
        if not room_id:
            emit("combatError", {"message": "roomId is required"})
            return
        username = str(payload.get("username") or "Player").strip() or "Player"
        class_id = payload.get("classId")
        if class_id not in CLASSES:
            class_id = None

        current = registry.get_room_by_sid(sid)
        if current is not None and current.id != room_id:
            leave_current_room(sid)

        registry.join(sid, username, room_id, class_id)
        join_room(room_id)
        socketio.emit("playerJoined", {
            "playerId": sid,
            "username": username,
            "players": registry.players_payload(room_id),
        }, to=room_id)
        logger.info("Player %s (%s) joined room %s", username, sid, room_id)

    @socketio.on("leave")
    def on_leave(payload=None):
        leave_current_room(request.sid)

    @socketio.on("initiateCombat")
    def on_initiate_combat(payload=None):
        sid = request.sid
        room = registry.get_room_by_sid(sid)
        manager.handle_initiate(room.id if room else None, sid, payload)

    @socketio.on("combatAction")
    def on_combat_action(payload=None):
        sid = request.sid
        room = registry.get_room_by_sid(sid)
        manager.handle_action(room.id if room else None, sid, payload)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        sid = request.sid
        logger.info("User disconnected: %s", sid)
        leave_current_room(sid)
