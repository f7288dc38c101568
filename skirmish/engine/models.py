# skirmish/engine/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..content.balance import DEFAULTS
from .rules import clamp

if TYPE_CHECKING:
    from .participant import Participant


class ParticipantKind(str, Enum):
    HUMAN = "human"
    AI = "ai"


class Faction(str, Enum):
    PLAYERS = "players"
    NPCS = "npcs"

    @classmethod
    def of(cls, kind: ParticipantKind) -> "Faction":
        return cls.PLAYERS if kind == ParticipantKind.HUMAN else cls.NPCS


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


# wire name -> attribute name
_STAT_KEYS = {
    "health": "health",
    "maxHealth": "max_health",
    "energy": "energy",
    "maxEnergy": "max_energy",
    "strength": "strength",
    "defense": "defense",
    "speed": "speed",
}


@dataclass
class Stats:
    health: int = DEFAULTS["health"]
    max_health: int = DEFAULTS["health"]
    energy: int = DEFAULTS["energy"]
    max_energy: int = DEFAULTS["energy"]
    strength: int = DEFAULTS["strength"]
    defense: int = DEFAULTS["defense"]
    speed: int = DEFAULTS["speed"]

    def __post_init__(self) -> None:
        self.max_health = max(0, int(self.max_health))
        self.max_energy = max(0, int(self.max_energy))
        self.health = clamp(int(self.health), 0, self.max_health)
        self.energy = clamp(int(self.energy), 0, self.max_energy)
        self.strength = max(0, int(self.strength))
        self.defense = max(0, int(self.defense))
        self.speed = max(0, int(self.speed))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Stats":
        """Accepts camelCase (wire) or snake_case keys; missing max values follow current ones."""
        data = dict(data or {})
        kwargs: Dict[str, Any] = {}
        for wire, attr in _STAT_KEYS.items():
            if wire in data:
                kwargs[attr] = data[wire]
            elif attr in data:
                kwargs[attr] = data[attr]
        if "max_health" not in kwargs and "health" in kwargs:
            kwargs["max_health"] = kwargs["health"]
        if "health" not in kwargs and "max_health" in kwargs:
            kwargs["health"] = kwargs["max_health"]
        if "max_energy" not in kwargs and "energy" in kwargs:
            kwargs["max_energy"] = kwargs["energy"]
        if "energy" not in kwargs and "max_energy" in kwargs:
            kwargs["energy"] = kwargs["max_energy"]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, int]:
        return {wire: getattr(self, attr) for wire, attr in _STAT_KEYS.items()}


@dataclass
class StatusEffect:
    kind: str
    magnitude: int
    duration: int  # remaining ticks, always >= 1 while attached

    def __post_init__(self) -> None:
        if self.duration < 1:
            raise ValueError(f"status effect duration must be >= 1, got {self.duration}")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "magnitude": self.magnitude, "duration": self.duration}


@dataclass(frozen=True)
class ActionRecord:
    actor_id: str
    action_kind: str
    target_id: str
    result: Dict[str, Any]
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actorId": self.actor_id,
            "actionKind": self.action_kind,
            "targetId": self.target_id,
            "result": dict(self.result),
            "timestamp": self.timestamp,
        }


@dataclass
class CombatSession:
    id: str
    room_id: str
    participants: List["Participant"] = field(default_factory=list)  # fixed order, display only
    log: List[ActionRecord] = field(default_factory=list)
    status: SessionStatus = SessionStatus.ACTIVE
    started_at: float = 0.0
    ended_at: Optional[float] = None
    winner: Optional[Faction] = None
    seed: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def participant(self, participant_id: Optional[str]) -> Optional["Participant"]:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def alive(self, faction: Faction) -> List["Participant"]:
        return [p for p in self.participants if p.faction == faction and p.is_alive]

    def npcs(self) -> List["Participant"]:
        return [p for p in self.participants if p.kind == ParticipantKind.AI]
