# skirmish/engine/dice.py
import random
from typing import Tuple


def rng_for(seed: int, step: int) -> random.Random:
    # deterministic per session seed + log position
    return random.Random(f"{seed}:{step}")


def roll_range(bounds: Tuple[int, int], r: random.Random) -> int:
    lo, hi = bounds
    if lo > hi:
        raise ValueError(f"invalid range {bounds!r}")
    return r.randint(lo, hi)
