# skirmish/engine/snapshot.py
from typing import Any, Dict, Optional

from .models import CombatSession


def session_snapshot(session: CombatSession, now: float, log_tail: Optional[int] = None) -> Dict[str, Any]:
    """
    Client-facing view of a session. ``log_tail`` keeps only the newest
    records; ``logLength`` always carries the full count.
    """
    log = session.log if not log_tail else session.log[-log_tail:]
    return {
        "id": session.id,
        "roomId": session.room_id,
        "status": session.status.value,
        "startedAt": session.started_at,
        "endedAt": session.ended_at,
        "winner": session.winner.value if session.winner else None,
        "participants": [p.to_dict(now) for p in session.participants],
        "log": [record.to_dict() for record in log],
        "logLength": len(session.log),
    }
