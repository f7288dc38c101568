# skirmish/state.py
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .engine.models import CombatSession, Stats
from .engine.roster import player_stats


@dataclass
class Member:
    sid: str
    username: str
    class_id: Optional[str] = None
    stats: Stats = field(default_factory=Stats)


@dataclass
class Room:
    id: str
    members: Dict[str, Member] = field(default_factory=dict)  # sid -> Member, join order
    session: Optional[CombatSession] = None

    @property
    def in_combat(self) -> bool:
        return self.session is not None


class RoomRegistry:
    """Room membership plus the active combat session of each room."""

    def __init__(self) -> None:
        self.rooms: Dict[str, Room] = {}
        self.sid_to_room: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create_room(self, room_id: str) -> Room:
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                room = self.rooms[room_id] = Room(id=room_id)
            return room

    def join(self, sid: str, username: str, room_id: str, class_id: Optional[str] = None) -> Member:
        room = self.create_room(room_id)
        member = Member(sid=sid, username=username, class_id=class_id, stats=player_stats(class_id))
        with self._lock:
            room.members[sid] = member
            self.sid_to_room[sid] = room_id
        return member

    def leave(self, sid: str) -> Optional[Tuple[Room, Member]]:
        with self._lock:
            room_id = self.sid_to_room.pop(sid, None)
            room = self.rooms.get(room_id) if room_id else None
            if room is None:
                return None
            member = room.members.pop(sid, None)
            if member is None:
                return None
            return room, member

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def get_room_by_sid(self, sid: str) -> Optional[Room]:
        room_id = self.sid_to_room.get(sid)
        if not room_id:
            return None
        return self.rooms.get(room_id)

    def members(self, room_id: str) -> List[Member]:
        room = self.rooms.get(room_id)
        if not room:
            return []
        return list(room.members.values())

    def players_payload(self, room_id: str) -> List[Dict[str, Any]]:
        return [
            {"id": m.sid, "username": m.username, "classId": m.class_id, "stats": m.stats.to_dict()}
            for m in self.members(room_id)
        ]

    def active_session(self, room_id: str) -> Optional[CombatSession]:
        room = self.rooms.get(room_id)
        return room.session if room else None

    def attach_session(self, room_id: str, session: CombatSession) -> None:
        room = self.rooms.get(room_id)
        if room is None:
            raise KeyError(room_id)
        room.session = session

    def detach_session(self, room_id: str) -> Optional[CombatSession]:
        room = self.rooms.get(room_id)
        if room is None:
            return None
        session, room.session = room.session, None
        return session

    def cleanup_room(self, room_id: str) -> None:
        with self._lock:
            room = self.rooms.pop(room_id, None)
            if not room:
                return
            for sid in room.members:
                self.sid_to_room.pop(sid, None)
