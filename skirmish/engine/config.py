# skirmish/engine/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..content.balance import DEFAULTS


@dataclass(frozen=True)
class CombatConfig:
    """
    Tunables for one combat authority. Flask config keys override the balance
    defaults, e.g. ``SKIRMISH_RECHARGE_INTERVAL = 1.0``.
    """
    action_points: int = DEFAULTS["action_points"]
    recharge_interval: float = DEFAULTS["recharge_interval"]
    npc_tick_interval: float = DEFAULTS["npc_tick_interval"]
    log_tail: int = DEFAULTS["log_tail"]

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "CombatConfig":
        return cls(
            action_points=int(config.get("SKIRMISH_ACTION_POINTS", DEFAULTS["action_points"])),
            recharge_interval=float(config.get("SKIRMISH_RECHARGE_INTERVAL", DEFAULTS["recharge_interval"])),
            npc_tick_interval=float(config.get("SKIRMISH_NPC_TICK_INTERVAL", DEFAULTS["npc_tick_interval"])),
            log_tail=int(config.get("SKIRMISH_LOG_TAIL", DEFAULTS["log_tail"])),
        )
