# skirmish/content/balance.py
DEFAULTS = {
    "health": 100,
    "energy": 50,
    "strength": 10,
    "defense": 5,
    "speed": 10,
    "action_points": 3,
    "recharge_interval": 3.0,   # seconds per action point
    "npc_tick_interval": 1.5,   # seconds between NPC decisions
    "log_tail": 50,
}

FORMULAS = {
    "defense_factor": 0.3,
    "strength_factor": 0.5,
}
