# skirmish/engine/actions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from ..content.actions import ACTIONS, SPELLS
from .errors import InvalidActionParams, UnknownActionKind


@dataclass(frozen=True)
class Attack:
    kind: ClassVar[str] = "attack"
    damage: Optional[int] = None  # exact damage override


@dataclass(frozen=True)
class Defend:
    kind: ClassVar[str] = "defend"
    magnitude: Optional[int] = None
    duration: Optional[int] = None


@dataclass(frozen=True)
class Cast:
    kind: ClassVar[str] = "cast"
    spell_id: str = ""
    mana_cost: Optional[int] = None
    damage: Optional[int] = None
    healing: Optional[int] = None


Action = Union[Attack, Defend, Cast]


def _optional_int(params: Mapping[str, Any], key: str, minimum: int = 0) -> Optional[int]:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidActionParams(f"'{key}' must be a number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidActionParams(f"'{key}' must be a number") from None
    if number < minimum:
        raise InvalidActionParams(f"'{key}' must be at least {minimum}")
    return number


def parse_action(kind: Any, params: Optional[Mapping[str, Any]] = None) -> Action:
    """Turn a wire ``actionKind`` + ``actionParams`` pair into an action variant."""
    params = params if isinstance(params, Mapping) else {}
    if kind == "attack":
        return Attack(damage=_optional_int(params, "damage"))
    if kind == "defend":
        return Defend(
            magnitude=_optional_int(params, "magnitude"),
            duration=_optional_int(params, "duration", minimum=1),
        )
    if kind == "cast":
        spell_id = params.get("spellId")
        if not spell_id:
            raise InvalidActionParams("cast requires a spellId")
        if spell_id not in SPELLS:
            raise InvalidActionParams(f"Unknown spell '{spell_id}'")
        return Cast(
            spell_id=str(spell_id),
            mana_cost=_optional_int(params, "manaCost"),
            damage=_optional_int(params, "damage"),
            healing=_optional_int(params, "healing"),
        )
    raise UnknownActionKind(f"Invalid action type '{kind}'")


def catalog_entry(action: Action) -> Dict[str, Any]:
    if isinstance(action, Cast):
        return SPELLS[action.spell_id]
    return ACTIONS[action.kind]


def target_rule(action: Action) -> str:
    return catalog_entry(action)["target"]
