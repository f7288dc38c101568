# skirmish/engine/effects.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .models import StatusEffect

DOT_KINDS = frozenset({"dot"})
DEFENSE_KIND = "defense"


def build_effect(template: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> StatusEffect:
    data = dict(template)
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return StatusEffect(
        kind=str(data["kind"]),
        magnitude=int(data.get("magnitude", 0) or 0),
        duration=int(data.get("duration", 1) or 1),
    )


def find_effect(effects: Iterable[StatusEffect], kind: str) -> Optional[StatusEffect]:
    for effect in effects:
        if effect.kind == kind:
            return effect
    return None


def dot_total(debuffs: Iterable[StatusEffect]) -> int:
    return sum(max(0, d.magnitude) for d in debuffs if d.kind in DOT_KINDS)


def tick_durations(effects: List[StatusEffect]) -> List[StatusEffect]:
    """Decrement every duration by one; drop the ones that reach zero."""
    kept: List[StatusEffect] = []
    for effect in effects:
        remaining = effect.duration - 1
        if remaining > 0:
            effect.duration = remaining
            kept.append(effect)
    return kept
