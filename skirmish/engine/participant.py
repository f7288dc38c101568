# skirmish/engine/participant.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .action_points import ActionPointClock
from .effects import DEFENSE_KIND, dot_total, find_effect, tick_durations
from .errors import InsufficientResource
from .models import Faction, ParticipantKind, Stats, StatusEffect
from .rules import mitigate


@dataclass
class DamageResult:
    dealt: int
    current_health: int
    is_defeated: bool


@dataclass
class HealResult:
    healed: int
    current_health: int


@dataclass
class TickResult:
    effect_damage: int
    health: int
    buffs: List[StatusEffect]
    debuffs: List[StatusEffect]


@dataclass
class Participant:
    id: str
    name: str
    kind: ParticipantKind
    stats: Stats = field(default_factory=Stats)
    buffs: List[StatusEffect] = field(default_factory=list)
    debuffs: List[StatusEffect] = field(default_factory=list)
    action_points: ActionPointClock = field(default_factory=ActionPointClock)

    @property
    def faction(self) -> Faction:
        return Faction.of(self.kind)

    @property
    def is_alive(self) -> bool:
        return self.stats.health > 0

    def defense_buff(self):
        return find_effect(self.buffs, DEFENSE_KIND)

    def apply_damage(self, raw: int, mitigated: bool = True) -> DamageResult:
        """
        Mitigated damage goes through defense and the first defense buff and
        never deals less than 1. Unmitigated damage (exact overrides) is
        applied as given.
        """
        raw = max(0, int(raw))
        if mitigated:
            buff = self.defense_buff()
            dealt = mitigate(raw, self.stats.defense, buff.magnitude if buff else 0)
        else:
            dealt = raw
        self.stats.health = max(0, self.stats.health - dealt)
        return DamageResult(dealt=dealt, current_health=self.stats.health, is_defeated=self.stats.health == 0)

    def apply_healing(self, raw: int) -> HealResult:
        healed = min(max(0, int(raw)), self.stats.max_health - self.stats.health)
        self.stats.health += healed
        return HealResult(healed=healed, current_health=self.stats.health)

    def spend_energy(self, amount: int) -> int:
        amount = max(0, int(amount))
        if self.stats.energy < amount:
            raise InsufficientResource()
        self.stats.energy -= amount
        return self.stats.energy

    def add_buff(self, effect: StatusEffect) -> None:
        self.buffs.append(effect)

    def add_debuff(self, effect: StatusEffect) -> None:
        self.debuffs.append(effect)

    def tick_status_effects(self) -> TickResult:
        # DOT is summed before durations drop, so a last-tick debuff still hurts.
        effect_damage = dot_total(self.debuffs)
        self.buffs = tick_durations(self.buffs)
        self.debuffs = tick_durations(self.debuffs)
        if effect_damage > 0:
            self.apply_damage(effect_damage)
        return TickResult(
            effect_damage=effect_damage,
            health=self.stats.health,
            buffs=list(self.buffs),
            debuffs=list(self.debuffs),
        )

    def available_action_point_slots(self, now: float) -> List[int]:
        return self.action_points.available_slots(now)

    def consume_action_point_slot(self, now: float) -> int:
        return self.action_points.consume(now)

    def to_dict(self, now: float) -> Dict[str, Any]:
        clock = self.action_points
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "stats": self.stats.to_dict(),
            "buffs": [b.to_dict() for b in self.buffs],
            "debuffs": [d.to_dict() for d in self.debuffs],
            "actionPoints": {
                "max": clock.capacity,
                "rechargeInterval": clock.recharge_interval,
                "available": len(clock.available_slots(now)),
                "progress": clock.recharge_progress(now),
            },
        }
