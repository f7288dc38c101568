# skirmish/engine/rules.py
import math

from ..content.balance import FORMULAS


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def defense_reduction(defense: int) -> int:
    return math.floor(max(defense, 0) * FORMULAS["defense_factor"])


def mitigate(raw: int, defense: int, buff_magnitude: int = 0) -> int:
    # defense first, then a defense buff; each step keeps at least 1
    dealt = max(1, raw - defense_reduction(defense))
    if buff_magnitude:
        dealt = max(1, dealt - buff_magnitude)
    return dealt


def strength_bonus(strength: int) -> int:
    return math.floor(max(strength, 0) * FORMULAS["strength_factor"])
