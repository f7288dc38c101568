# skirmish/engine/action_points.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..content.balance import DEFAULTS
from .errors import NoActionPointAvailable


@dataclass
class ActionPointClock:
    """
    Fixed set of independently recharging slots. A slot is available when it
    was never used or when ``recharge_interval`` seconds passed since its last
    use; consuming one stamps it with ``now``.
    """
    capacity: int = DEFAULTS["action_points"]
    recharge_interval: float = DEFAULTS["recharge_interval"]
    last_used: List[Optional[float]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("action point capacity must be at least 1")
        if not self.last_used:
            self.last_used = [None] * self.capacity
        if len(self.last_used) != self.capacity:
            raise ValueError("last_used must hold exactly one entry per slot")

    def _ready(self, stamp: Optional[float], now: float) -> bool:
        return stamp is None or (now - stamp) >= self.recharge_interval

    def available_slots(self, now: float) -> List[int]:
        return [i for i, stamp in enumerate(self.last_used) if self._ready(stamp, now)]

    def has_available(self, now: float) -> bool:
        return any(self._ready(stamp, now) for stamp in self.last_used)

    def consume(self, now: float) -> int:
        slots = self.available_slots(now)
        if not slots:
            raise NoActionPointAvailable()
        index = slots[0]
        self.last_used[index] = now
        return index

    def recharge_progress(self, now: float) -> List[float]:
        progress = []
        for stamp in self.last_used:
            if stamp is None or self.recharge_interval <= 0:
                progress.append(1.0)
                continue
            progress.append(min(1.0, max(0.0, (now - stamp) / self.recharge_interval)))
        return progress
