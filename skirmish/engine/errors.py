# skirmish/engine/errors.py
"""Combat error taxonomy.

Admission errors reject a request before anything is mutated; they are sent
back to the requesting actor only. ``InsufficientResource`` never leaves the
engine: a failed energy spend during a cast is recorded as a wasted action.
"""


class CombatError(Exception):
    """Base class for every error reported to a combat client."""

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    default_message = "Combat error"

    @property
    def message(self) -> str:
        return str(self)


class AdmissionError(CombatError):
    default_message = "Action rejected"


class SessionNotActive(AdmissionError):
    default_message = "No active combat"


class ActorNotFound(AdmissionError):
    default_message = "Actor not found"


class ActorDefeated(AdmissionError):
    default_message = "Defeated participants cannot act"


class TargetNotFound(AdmissionError):
    default_message = "Target not found"


class TargetDefeated(AdmissionError):
    default_message = "Target is defeated"


class NoActionPointAvailable(AdmissionError):
    default_message = "No action points available"


class IllegalTarget(AdmissionError):
    default_message = "Illegal target for this action"


class UnknownActionKind(AdmissionError):
    default_message = "Invalid action type"


class InvalidActionParams(AdmissionError):
    default_message = "Invalid action parameters"


class RoomNotFound(CombatError):
    default_message = "Room not found"


class CombatAlreadyActive(CombatError):
    default_message = "Combat already in progress"


class InsufficientResource(CombatError):
    default_message = "Not enough energy"


class InvalidCombatTarget(CombatError):
    default_message = "Invalid combat target"
