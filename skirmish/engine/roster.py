# skirmish/engine/roster.py
from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

from ..content.bestiary import BESTIARY, CATEGORIES, DEFAULT_NPC
from ..content.classes import CLASSES
from .errors import InvalidCombatTarget
from .models import Stats


def player_stats(class_id: Optional[str] = None) -> Stats:
    """Base player stats with the class adjustments applied; health and energy start full."""
    stats = Stats()
    for stat, delta in CLASSES.get(class_id or "", {}).get("stat_mods", {}).items():
        setattr(stats, stat, getattr(stats, stat) + delta)
    stats.health = stats.max_health
    stats.energy = stats.max_energy
    return stats


def _lookup(table: Mapping[str, Any], key: Any, default: str, label: str) -> Mapping[str, Any]:
    if key is None or key == "":
        return table[default]
    if not isinstance(key, str) or key not in table:
        raise InvalidCombatTarget(f"Unknown {label} '{key}'")
    return table[key]


def _difficulty(value: Any) -> float:
    if value is None:
        return 1.0
    if isinstance(value, bool):
        raise InvalidCombatTarget("difficulty must be a positive number")
    try:
        difficulty = float(value)
    except (TypeError, ValueError):
        raise InvalidCombatTarget("difficulty must be a positive number") from None
    if not math.isfinite(difficulty) or difficulty <= 0:
        raise InvalidCombatTarget("difficulty must be a positive number")
    return difficulty


def npc_entry(target: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Builds ``{name, stats}`` for an NPC target. Explicit ``stats`` win over the
    template; ``difficulty`` and ``category`` scale the result either way.
    Bad client values raise ``InvalidCombatTarget``; an NPC always starts
    with at least 1 health.
    """
    target = target or {}
    template = _lookup(BESTIARY, target.get("template"), DEFAULT_NPC, "NPC template")
    category = _lookup(CATEGORIES, target.get("category"), "normal", "NPC category")
    difficulty = _difficulty(target.get("difficulty"))

    raw_stats = target.get("stats") or template["stats"]
    if not isinstance(raw_stats, Mapping):
        raise InvalidCombatTarget("NPC stats must be an object")
    try:
        base = Stats.from_dict(raw_stats)
        max_health = max(1, math.floor(base.max_health * difficulty * category["max_health"]))
        stats = Stats(
            health=max_health,
            max_health=max_health,
            energy=base.energy,
            max_energy=base.max_energy,
            strength=math.floor(base.strength * difficulty * category["strength"]),
            defense=math.floor(base.defense * difficulty * category["defense"]),
            speed=base.speed,
        )
    except (TypeError, ValueError, OverflowError):
        raise InvalidCombatTarget("NPC stats must be numbers") from None

    entry: Dict[str, Any] = {"name": str(target.get("name") or template["name"]), "stats": stats}
    if target.get("id"):
        entry["id"] = str(target["id"])
    return entry
