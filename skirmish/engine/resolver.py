# skirmish/engine/resolver.py
from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..content.actions import ACTIONS
from .action_points import ActionPointClock
from .actions import Action, Attack, Cast, Defend, catalog_entry, parse_action, target_rule
from .config import CombatConfig
from .dice import rng_for, roll_range
from .effects import build_effect
from .errors import (
    ActorDefeated,
    ActorNotFound,
    IllegalTarget,
    InsufficientResource,
    SessionNotActive,
    TargetDefeated,
    TargetNotFound,
    UnknownActionKind,
)
from .models import ActionRecord, CombatSession, Faction, ParticipantKind, SessionStatus, Stats
from .participant import Participant
from .rules import strength_bonus
from .targeting import is_legal_target

logger = logging.getLogger(__name__)


@dataclass
class ActionOutcome:
    record: ActionRecord
    ended: bool = False
    winner: Optional[Faction] = None


def build_participant(
    participant_id: str,
    name: str,
    kind: ParticipantKind,
    stats: Any,
    config: CombatConfig,
) -> Participant:
    if not isinstance(stats, Stats):
        stats = Stats.from_dict(stats)
    return Participant(
        id=participant_id,
        name=name,
        kind=kind,
        stats=stats,
        action_points=ActionPointClock(
            capacity=config.action_points,
            recharge_interval=config.recharge_interval,
        ),
    )


def start_session(
    room_id: str,
    humans: List[Mapping[str, Any]],
    npcs: List[Mapping[str, Any]],
    config: CombatConfig,
    now: float,
    seed: int = 0,
    session_id: Optional[str] = None,
) -> CombatSession:
    """
    Creates the session state. Humans keep their network id; NPCs without an
    id get a generated one. Participant order is humans then NPCs.
    """
    participants: List[Participant] = []
    for actor in humans:
        participants.append(build_participant(
            str(actor["id"]),
            str(actor.get("displayName") or actor.get("name") or "Player"),
            ParticipantKind.HUMAN,
            actor.get("stats"),
            config,
        ))
    for npc in npcs:
        participants.append(build_participant(
            str(npc.get("id") or f"npc-{uuid.uuid4().hex[:8]}"),
            str(npc.get("name") or "Enemy"),
            ParticipantKind.AI,
            npc.get("stats"),
            config,
        ))

    ids = [p.id for p in participants]
    if len(set(ids)) != len(ids):
        raise ValueError(f"duplicate participant ids in {ids}")

    return CombatSession(
        id=session_id or f"combat-{uuid.uuid4().hex[:12]}",
        room_id=room_id,
        participants=participants,
        started_at=now,
        seed=seed,
    )


def _resolve_target(session: CombatSession, actor: Participant, action_kind: Any, target_id: Optional[str]) -> Participant:
    if not isinstance(action_kind, str):
        raise UnknownActionKind()
    if target_id is None and ACTIONS.get(action_kind, {}).get("target") == "self":
        return actor
    target = session.participant(target_id)
    if target is None:
        raise TargetNotFound()
    if not target.is_alive:
        raise TargetDefeated()
    return target


def _resolve_attack(actor: Participant, target: Participant, action: Attack, r: random.Random) -> Dict[str, Any]:
    if action.damage is not None:
        hit = target.apply_damage(action.damage, mitigated=False)
    else:
        raw = roll_range(ACTIONS["attack"]["base_damage"], r) + strength_bonus(actor.stats.strength)
        hit = target.apply_damage(raw)
    return {
        "success": True,
        "damage": hit.dealt,
        "targetHealth": hit.current_health,
        "defeated": hit.is_defeated,
    }


def _resolve_defend(actor: Participant, action: Defend) -> Dict[str, Any]:
    buff = build_effect(
        ACTIONS["defend"]["effect"],
        {"magnitude": action.magnitude, "duration": action.duration},
    )
    actor.add_buff(buff)
    return {"success": True, "buffApplied": buff.to_dict()}


def _resolve_cast(actor: Participant, target: Participant, action: Cast, r: random.Random) -> Dict[str, Any]:
    spell = catalog_entry(action)
    cost = action.mana_cost if action.mana_cost is not None else int(spell.get("energy_cost", 0))
    try:
        actor.spend_energy(cost)
    except InsufficientResource as exc:
        # the attempt still counts: slot consumed, nothing else changes
        return {"success": False, "spellId": action.spell_id, "message": exc.message}

    result: Dict[str, Any] = {"success": True, "spellId": action.spell_id, "energyUsed": cost}
    if "base_damage" in spell:
        if action.damage is not None:
            hit = target.apply_damage(action.damage, mitigated=False)
        else:
            hit = target.apply_damage(roll_range(spell["base_damage"], r))
        result.update({"damage": hit.dealt, "targetHealth": hit.current_health, "defeated": hit.is_defeated})
    elif "base_healing" in spell:
        amount = action.healing if action.healing is not None else roll_range(spell["base_healing"], r)
        healed = target.apply_healing(amount)
        result.update({"healing": healed.healed, "targetHealth": healed.current_health})
    elif "debuff" in spell:
        debuff = build_effect(spell["debuff"])
        target.add_debuff(debuff)
        result["debuffApplied"] = debuff.to_dict()
    return result


def dispatch(actor: Participant, target: Participant, action: Action, r: random.Random) -> Dict[str, Any]:
    if isinstance(action, Attack):
        return _resolve_attack(actor, target, action, r)
    if isinstance(action, Defend):
        return _resolve_defend(actor, action)
    if isinstance(action, Cast):
        return _resolve_cast(actor, target, action, r)
    raise TypeError(f"unhandled action variant {type(action).__name__}")


def submit_action(
    session: CombatSession,
    actor_id: str,
    action_kind: Any,
    target_id: Optional[str],
    params: Optional[Mapping[str, Any]],
    now: float,
) -> ActionOutcome:
    """
    Single entry point for human and NPC actions. Every check that can
    reject the request runs before the action point is consumed, so a
    rejected request leaves the session untouched.
    """
    if session.status != SessionStatus.ACTIVE:
        raise SessionNotActive()

    actor = session.participant(actor_id)
    if actor is None:
        raise ActorNotFound()
    if not actor.is_alive:
        raise ActorDefeated()

    target = _resolve_target(session, actor, action_kind, target_id)
    action = parse_action(action_kind, params)
    if not is_legal_target(target_rule(action), actor, target):
        raise IllegalTarget()

    actor.consume_action_point_slot(now)

    r = rng_for(session.seed, len(session.log))
    result = dispatch(actor, target, action, r)

    tick = actor.tick_status_effects()
    if tick.effect_damage > 0:
        result["statusTick"] = {"effectDamage": tick.effect_damage, "health": tick.health}

    record = ActionRecord(
        actor_id=actor.id,
        action_kind=action.kind,
        target_id=target.id,
        result=result,
        timestamp=now,
    )
    session.log.append(record)
    logger.debug("session %s: %s %s -> %s %s", session.id, actor.id, action.kind, target.id, result)

    winner = check_combat_end(session, now)
    return ActionOutcome(record=record, ended=winner is not None, winner=winner)


def check_combat_end(session: CombatSession, now: float) -> Optional[Faction]:
    """
    Returns the winner the first time a faction is wiped out and finalizes the
    session. Returns None while both factions stand or once already completed.
    """
    if session.status != SessionStatus.ACTIVE:
        return None
    players_alive = session.alive(Faction.PLAYERS)
    npcs_alive = session.alive(Faction.NPCS)
    if players_alive and npcs_alive:
        return None

    # a simultaneous wipe goes to the players
    winner = Faction.NPCS if npcs_alive and not players_alive else Faction.PLAYERS
    end_combat(session, winner, now)
    return winner


def end_combat(session: CombatSession, winner: Faction, now: float) -> None:
    session.status = SessionStatus.COMPLETED
    session.ended_at = now
    session.winner = winner
    logger.info("Combat %s ended in room %s. Winner: %s", session.id, session.room_id, winner.value)
