# skirmish/engine/targeting.py
from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .participant import Participant


def is_legal_target(rule: str, actor: "Participant", target: "Participant") -> bool:
    if rule == "self":
        return target.id == actor.id
    if not target.is_alive:
        return False
    if rule == "ally":
        return target.kind == actor.kind and target.id != actor.id
    if rule == "enemy":
        return target.kind != actor.kind
    if rule == "any":
        return True
    return False


def possible_targets(rule: str, participants: List["Participant"], actor: "Participant") -> List["Participant"]:
    return [p for p in participants if is_legal_target(rule, actor, p)]
